# uiauto_ax/values.py
"""
@file values.py
@brief Plain geometry and range structs unboxed from attribute values.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple, Union


@dataclass(frozen=True)
class Point:
    """Screen coordinate, origin in the top left corner."""
    x: float
    y: float

    def center(self, size: Size) -> Point:
        """Centre of the box whose top left corner is this point."""
        return Point(self.x + size.width / 2.0, self.y + size.height / 2.0)

    def to_tuple(self) -> Tuple[float, float]:
        return (self.x, self.y)


@dataclass(frozen=True)
class Size:
    width: float
    height: float

    def to_tuple(self) -> Tuple[float, float]:
        return (self.width, self.height)


@dataclass(frozen=True)
class Rect:
    origin: Point
    size: Size

    def center(self) -> Point:
        return self.origin.center(self.size)

    def contains(self, point: Point) -> bool:
        return (
            self.origin.x <= point.x <= self.origin.x + self.size.width
            and self.origin.y <= point.y <= self.origin.y + self.size.height
        )

    def to_tuple(self) -> Tuple[float, float, float, float]:
        return (self.origin.x, self.origin.y, self.size.width, self.size.height)


@dataclass(frozen=True)
class Range:
    """Character or index range: ``location`` plus ``length`` items."""
    location: int
    length: int

    @property
    def end(self) -> int:
        return self.location + self.length

    def to_tuple(self) -> Tuple[int, int]:
        return (self.location, self.length)


Boxed = Union[Point, Size, Rect, Range]

# order matches the kind tags used on the wire
BOXED_TYPES: Tuple[type, ...] = (Point, Size, Rect, Range)


def is_boxed_struct(value: object) -> bool:
    """True for values that must be boxed before being sent to a service."""
    return isinstance(value, BOXED_TYPES)
