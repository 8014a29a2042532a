"""Resolve an association on a model into an explicit singular/collection variant."""

from __future__ import annotations

from collections.abc import Mapping, Sequence, Set
from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class Singular:
    """A to-one association; ``member`` is ``None`` when nothing is associated."""

    member: Any = None


@dataclass(frozen=True)
class Collection:
    """A to-many association in its current order."""

    members: tuple[Any, ...] = ()


AssociationValue = Singular | Collection


def resolve_association(model: Any, name: str) -> AssociationValue:
    """Read ``name`` from ``model``.

    Missing attributes resolve to an empty :class:`Singular`.  A value carrying
    its own ``errors`` mapping is a record and always singular, even when it
    is iterable (pydantic models iterate over their fields).  Sequences and
    sets other than strings are collections; everything else is singular.
    """
    value = getattr(model, name, None)
    if value is None:
        return Singular()
    if isinstance(getattr(value, "errors", None), Mapping):
        return Singular(member=value)
    if isinstance(value, Sequence | Set) and not isinstance(value, str | bytes | bytearray):
        return Collection(members=tuple(value))
    return Singular(member=value)
