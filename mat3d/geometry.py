"""
Geometry value types used at the boundary of the Mat3D helper.

Layout code hands us a bounding rectangle, callers hand us pivots and
offsets. These small types carry those values:

    - Offset: a 2D displacement / point (dx, dy)
    - Rect: a mutable axis-aligned rectangle (left, top, right, bottom)
    - TextDirection: reading direction used by forward/backward moves

Coordinate Conventions:
    - Screen-style axes: +X to the right, +Y downward
    - A Rect is "empty" when its width or height is not positive
"""

from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Tuple


class TextDirection(Enum):
    """Reading direction, decides which way is 'forward' along X."""
    LTR = 'ltr'
    RTL = 'rtl'

    @classmethod
    def from_value(cls, value) -> "TextDirection":
        """Accept an enum member or its (case-insensitive) string value."""
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            raise ValueError(f"Unknown text direction: {value!r} (expected 'ltr' or 'rtl')")


@dataclass(frozen=True)
class Offset:
    """
    An immutable 2D offset.

    Attributes:
        dx: Horizontal component
        dy: Vertical component (positive downward)
    """
    dx: float = 0.0
    dy: float = 0.0

    @classmethod
    def zero(cls) -> "Offset":
        return cls(0.0, 0.0)

    @classmethod
    def from_sequence(cls, values: Iterable[float]) -> "Offset":
        """Build an offset from a 2-item sequence such as ``[x, y]``."""
        items = [float(v) for v in values]
        if len(items) != 2:
            raise ValueError(f"Offset needs exactly 2 values, got {len(items)}")
        return cls(items[0], items[1])

    def __add__(self, other: "Offset") -> "Offset":
        return Offset(self.dx + other.dx, self.dy + other.dy)

    def __sub__(self, other: "Offset") -> "Offset":
        return Offset(self.dx - other.dx, self.dy - other.dy)

    def __neg__(self) -> "Offset":
        return Offset(-self.dx, -self.dy)

    def __mul__(self, factor: float) -> "Offset":
        return Offset(self.dx * factor, self.dy * factor)

    def to_tuple(self) -> Tuple[float, float]:
        return (self.dx, self.dy)


@dataclass
class Rect:
    """
    Axis-aligned bounding rectangle.

    Rect is mutable on purpose: states built by aliasing share the same
    Rect object, and operations that grow the bounds write into it in place
    (see ``assign``) so every holder sees the new bounds.

    Attributes:
        left: Minimum X
        top: Minimum Y
        right: Maximum X
        bottom: Maximum Y
    """
    left: float = 0.0
    top: float = 0.0
    right: float = 0.0
    bottom: float = 0.0

    @classmethod
    def zero(cls) -> "Rect":
        """The empty rectangle at the origin."""
        return cls(0.0, 0.0, 0.0, 0.0)

    @classmethod
    def from_ltwh(cls, left: float, top: float, width: float, height: float) -> "Rect":
        return cls(left, top, left + width, top + height)

    @classmethod
    def from_points(cls, a: Offset, b: Offset) -> "Rect":
        """Smallest rectangle containing both points."""
        return cls(
            min(a.dx, b.dx),
            min(a.dy, b.dy),
            max(a.dx, b.dx),
            max(a.dy, b.dy),
        )

    @classmethod
    def from_sequence(cls, values: Iterable[float]) -> "Rect":
        """Build a rect from ``[left, top, right, bottom]``."""
        items = [float(v) for v in values]
        if len(items) != 4:
            raise ValueError(f"Rect needs exactly 4 values (left, top, right, bottom), got {len(items)}")
        return cls(*items)

    @property
    def width(self) -> float:
        return self.right - self.left

    @property
    def height(self) -> float:
        return self.bottom - self.top

    @property
    def is_empty(self) -> bool:
        return self.left >= self.right or self.top >= self.bottom

    @property
    def top_left(self) -> Offset:
        return Offset(self.left, self.top)

    @property
    def bottom_right(self) -> Offset:
        return Offset(self.right, self.bottom)

    @property
    def center(self) -> Offset:
        """Midpoint of the rectangle, recomputed on every access."""
        return Offset(
            self.left + self.width / 2.0,
            self.top + self.height / 2.0,
        )

    def shift(self, offset: Offset) -> "Rect":
        """Return a new rect translated by ``offset``."""
        return Rect(
            self.left + offset.dx,
            self.top + offset.dy,
            self.right + offset.dx,
            self.bottom + offset.dy,
        )

    def expand_to_include(self, other: "Rect") -> "Rect":
        """Return the smallest rect containing both this rect and ``other``."""
        return Rect(
            min(self.left, other.left),
            min(self.top, other.top),
            max(self.right, other.right),
            max(self.bottom, other.bottom),
        )

    def contains_rect(self, other: "Rect") -> bool:
        return (
            self.left <= other.left
            and self.top <= other.top
            and self.right >= other.right
            and self.bottom >= other.bottom
        )

    def assign(self, other: "Rect") -> "Rect":
        """Overwrite this rect's bounds with ``other``'s, in place."""
        self.left = other.left
        self.top = other.top
        self.right = other.right
        self.bottom = other.bottom
        return self

    def copy(self) -> "Rect":
        return Rect(self.left, self.top, self.right, self.bottom)

    def to_tuple(self) -> Tuple[float, float, float, float]:
        return (self.left, self.top, self.right, self.bottom)
