"""Form-backing records: the models whose errors get broadcast."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field, fields
from typing import Any, ClassVar, Protocol, runtime_checkable

from pydantic import BaseModel, ValidationError

from formpatch.models.errors import ErrorCollection


@runtime_checkable
class Validatable(Protocol):
    """Anything with an error collection and a way to (re)populate it."""

    errors: Mapping[str, Any]

    def is_valid(self) -> bool: ...


@dataclass
class FormRecord:
    """Dataclass base for records validated against a pydantic schema.

    Subclasses declare their fields as dataclass fields, point ``schema`` at
    a pydantic model describing the valid shape, and list nested record
    attributes in ``associations``.  Raw (possibly invalid) input is held
    as-is; nothing is validated until :meth:`is_valid` runs.
    """

    schema: ClassVar[type[BaseModel] | None] = None
    associations: ClassVar[tuple[str, ...]] = ()
    model_name: ClassVar[str | None] = None

    errors: ErrorCollection = field(
        default_factory=ErrorCollection, init=False, repr=False, compare=False
    )

    def is_valid(self) -> bool:
        self.errors.clear()
        for name in self.associations:
            for nested in _members(getattr(self, name, None)):
                if not nested.is_valid():
                    for attribute, messages in nested.errors.items():
                        for message in messages:
                            self.errors.add(f"{name}.{attribute}", message)
        if self.schema is not None:
            try:
                self.schema.model_validate(self.schema_input())
            except ValidationError as exc:
                self.errors.merge(ErrorCollection.from_validation_error(exc))
        return not self.errors.any()

    def schema_input(self) -> dict[str, Any]:
        """Field values handed to ``schema`` (associations and errors excluded)."""
        skip = set(self.associations) | {"errors"}
        return {f.name: getattr(self, f.name) for f in fields(self) if f.name not in skip}


def _members(value: Any) -> Iterable[FormRecord]:
    if value is None:
        return ()
    if isinstance(value, FormRecord):
        return (value,)
    return [v for v in value if isinstance(v, FormRecord)]
