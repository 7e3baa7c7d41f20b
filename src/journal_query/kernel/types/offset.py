"""Offset value types – positions in a journal stream.

``Sequence`` wraps an integer (an ordering value for tag streams, a sequence
number for persistence-id streams). ``NoOffset`` means "from the beginning"
and behaves like ``Sequence(0)`` wherever an integer is needed.
"""

from __future__ import annotations

import abc
import dataclasses
from typing import Final


class Offset(abc.ABC):
    """Base class of all offsets."""

    @property
    @abc.abstractmethod
    def value(self) -> int:
        """Integer position used as a query cursor."""


@dataclasses.dataclass(frozen=True, order=True)
class Sequence(Offset):
    """Totally ordered integer offset."""

    offset: int

    @property
    def value(self) -> int:
        return self.offset

    def __repr__(self) -> str:
        return f"Sequence({self.offset})"


@dataclasses.dataclass(frozen=True)
class _NoOffset(Offset):
    @property
    def value(self) -> int:
        return 0

    def __repr__(self) -> str:
        return "NoOffset"


NoOffset: Final[Offset] = _NoOffset()


def to_offset(value: int | Offset | None) -> Offset:
    """Normalise a caller-supplied offset argument."""
    if value is None:
        return NoOffset
    if isinstance(value, Offset):
        return value
    if isinstance(value, bool) or not isinstance(value, int):
        raise TypeError(f"Offset must be an int or Offset, got {type(value).__name__}")
    return Sequence(value)


__all__ = ["NoOffset", "Offset", "Sequence", "to_offset"]
