"""Small math helpers: clamping, vectors and column-major matrices."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterator, TypeVar

T = TypeVar("T")


def clamp(value: T, min_value: T, max_value: T) -> T:
    """Clamp ``value`` into ``[min_value, max_value]``; the lower bound wins."""
    if value > max_value:  # type: ignore[operator]
        value = max_value
    if value < min_value:  # type: ignore[operator]
        value = min_value
    return value


@dataclass
class Vector:
    """A four-component vector."""

    x: float = 0.0
    y: float = 0.0
    z: float = 0.0
    w: float = 0.0

    def __iter__(self) -> Iterator[float]:
        yield from (self.x, self.y, self.z, self.w)


@dataclass
class Matrix:
    """A 4x4 matrix stored as four column vectors."""

    col0: Vector = field(default_factory=Vector)
    col1: Vector = field(default_factory=Vector)
    col2: Vector = field(default_factory=Vector)
    col3: Vector = field(default_factory=Vector)

    @property
    def columns(self) -> tuple[Vector, Vector, Vector, Vector]:
        return (self.col0, self.col1, self.col2, self.col3)

    def transpose_to_rows(self) -> tuple[float, ...]:
        """Return the 16 values row by row, as uploaded to shader constants."""
        return tuple(getattr(col, axis) for axis in "xyzw" for col in self.columns)