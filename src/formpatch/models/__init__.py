"""Pydantic and dataclass domain models for formpatch."""

from formpatch.models.config import BroadcastConfig
from formpatch.models.errors import ErrorCollection
from formpatch.models.operations import OperationKind, PatchOperation
from formpatch.models.record import FormRecord, Validatable

__all__ = [
    "BroadcastConfig",
    "ErrorCollection",
    "FormRecord",
    "OperationKind",
    "PatchOperation",
    "Validatable",
]
