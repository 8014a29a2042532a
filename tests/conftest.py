"""Shared test fixtures for formpatch."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

import pytest
from pydantic import BaseModel, field_validator, model_validator

from formpatch.models.config import BroadcastConfig
from formpatch.models.errors import ErrorCollection
from formpatch.models.record import FormRecord
from formpatch.patching.broadcaster import Broadcaster
from formpatch.service.transport import InMemoryTransport


class StubModel:
    """Model with a preset error collection and a validation call counter."""

    def __init__(
        self,
        id: int | None = None,
        errors: dict[str, list[str]] | None = None,
        **associations: Any,
    ) -> None:
        self.id = id
        self.errors = ErrorCollection(errors or {})
        self.validations = 0
        for name, value in associations.items():
            setattr(self, name, value)

    def is_valid(self) -> bool:
        self.validations += 1
        return not self.errors.any()


class Post(StubModel):
    pass


class Comment(StubModel):
    pass


class Author(StubModel):
    pass


# -- pydantic-backed records ---------------------------------------------------


class LineItemSchema(BaseModel):
    description: str
    quantity: int

    @field_validator("description")
    @classmethod
    def description_present(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("can't be blank")
        return value

    @field_validator("quantity")
    @classmethod
    def quantity_positive(cls, value: int) -> int:
        if value <= 0:
            raise ValueError("must be greater than 0")
        return value


class OrderSchema(BaseModel):
    reference: str

    @field_validator("reference")
    @classmethod
    def reference_present(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("can't be blank")
        return value

    @model_validator(mode="after")
    def not_locked(self) -> OrderSchema:
        if self.reference == "LOCKED":
            raise ValueError("Order is locked")
        return self


@dataclass
class LineItem(FormRecord):
    schema = LineItemSchema

    id: int | None = None
    description: str = ""
    quantity: Any = 1


@dataclass
class Order(FormRecord):
    schema = OrderSchema
    associations = ("lines",)

    id: int | None = None
    reference: str = ""
    lines: list[LineItem] = field(default_factory=list)


# -- fixtures ------------------------------------------------------------------


@pytest.fixture
def config() -> BroadcastConfig:
    return BroadcastConfig()


@pytest.fixture
def transport() -> InMemoryTransport:
    return InMemoryTransport()


@pytest.fixture
def broadcaster(config: BroadcastConfig, transport: InMemoryTransport) -> Broadcaster:
    return Broadcaster(config, transport)
