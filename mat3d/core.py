"""
Mat3D: a 4x4 homogeneous transform paired with a bounding rectangle.

The rectangle gives every operation a meaningful default pivot: its center,
expressed in the rectangle's own frame (center - top_left). Each pivoted
operation is the composition

    translate to pivot -> apply elementary transform -> translate back

and every operation mutates the matrix in place and returns the same object,
so calls chain:

    >>> state = Mat3D(rect=Rect(0, 0, 200, 100))
    >>> state.scale_x(2.0).rotate(45).forward(10)

Ownership:
    - Mat3D(matrix)              owns a copy of ``matrix``
    - Mat3D.raw(matrix)          shares ``matrix`` with the caller
    - Mat3D.from_mat3d(other)    shares ``other``'s matrix and rect

Capability interface:
    Any class can gain the operation set by subclassing Mat3DMixin and
    providing ``rect`` (get/set) and ``matrix``. Mat3DBase is a ready-made
    base that stores both and aliases the matrix it is given.
"""

from abc import ABC, abstractmethod
from typing import Iterable, Optional, Tuple, TypeVar
import logging

import numpy as np

from . import matrix4
from .codec import format_mat3d, parse_mat3d
from .geometry import Offset, Rect, TextDirection

logger = logging.getLogger(__name__)

T = TypeVar('T', bound='Mat3DMixin')


class Mat3DMixin(ABC):
    """
    Mat3D operations on top of two accessors.

    Implementors provide:
        rect: the current bounding rectangle (readable and assignable)
        matrix: the 4x4 float64 array the operations write into
    """

    @property
    @abstractmethod
    def rect(self) -> Rect:
        """Current bounds. Their center is the default pivot."""

    @rect.setter
    @abstractmethod
    def rect(self, value: Rect) -> None:
        ...

    @property
    @abstractmethod
    def matrix(self) -> np.ndarray:
        """The 4x4 matrix that operations are applied to."""

    # ...Getters

    @property
    def center(self) -> Offset:
        """Center of ``rect``, recomputed on every access."""
        return self.rect.center

    @property
    def storage(self) -> np.ndarray:
        """Flat column-major 16-value view of ``matrix`` (shares memory)."""
        return matrix4.storage_view(self.matrix)

    # ...Internals

    def _pivot(self, origin: Optional[Offset]) -> Offset:
        if origin is not None:
            return origin
        return self.center - self.rect.top_left

    def _apply(
        self: T,
        origin: Optional[Offset] = None,
        elementary: Optional[np.ndarray] = None,
        leading: Optional[np.ndarray] = None,
    ) -> T:
        """
        Run one pivoted operation and write the result back in one step.

        ``elementary`` is multiplied on the right between the two pivot
        translations; ``leading`` is multiplied on the left (used by the
        translating operations).
        """
        pivot = self._pivot(origin)
        result = self.matrix @ matrix4.translation(pivot.dx, pivot.dy)
        if leading is not None:
            result = leading @ result
        if elementary is not None:
            result = result @ elementary
        result = result @ matrix4.translation(-pivot.dx, -pivot.dy)
        matrix4.write(self.matrix, result)
        return self

    def _grow_rect(self, other: "Mat3DMixin") -> None:
        d = other.center - self.center
        grown = self.rect.shift(d).expand_to_include(other.rect)
        self.rect.assign(grown)

    # ...Combining

    def negate(self: T) -> T:
        """
        Transpose the matrix in place.

        Note: despite the name this is a transpose, not an arithmetic
        negation. Serialized data and callers depend on it.
        """
        matrix4.write(self.matrix, self.matrix.T.copy())
        return self

    def add(self: T, other: "Mat3DMixin") -> T:
        """Element-wise add ``other.matrix`` and grow ``rect`` to cover ``other``."""
        result = self.matrix + other.matrix
        matrix4.write(self.matrix, result)
        self._grow_rect(other)
        return self

    def subtract(self: T, other: "Mat3DMixin") -> T:
        """Element-wise subtract ``other.matrix`` and grow ``rect`` to cover ``other``."""
        result = self.matrix - other.matrix
        matrix4.write(self.matrix, result)
        self._grow_rect(other)
        return self

    def multiply(self: T, other: "Mat3DMixin") -> T:
        """
        Right-multiply by ``other.matrix``.

        The rectangle is shifted by the vector from this center to
        ``other``'s center and then expanded to include ``other.rect``, so
        the bounds stay meaningful for the composed transform.
        """
        result = self.matrix @ other.matrix
        matrix4.write(self.matrix, result)
        self._grow_rect(other)
        return self

    def __iadd__(self: T, other: "Mat3DMixin") -> T:
        return self.add(other)

    def __isub__(self: T, other: "Mat3DMixin") -> T:
        return self.subtract(other)

    def __imatmul__(self: T, other: "Mat3DMixin") -> T:
        return self.multiply(other)

    # ...Translation

    def translate(self: T, x: float, y: Optional[float] = None, z: Optional[float] = None) -> T:
        """
        Translate in three dimensions. ``y`` defaults to ``x``, ``z`` to 0.
        """
        y = x if y is None else y
        z = 0.0 if z is None else z
        return self._apply(leading=matrix4.translation(x, y, z))

    def shift(self: T, offset: Offset, origin: Optional[Offset] = None) -> T:
        """Translate in two dimensions by ``offset``."""
        return self._apply(origin, leading=matrix4.translation(offset.dx, offset.dy, 0.0))

    def translate_x(self: T, offset: float, origin: Optional[Offset] = None) -> T:
        return self._apply(origin, leading=matrix4.translation(offset, 0.0, 0.0))

    def translate_y(self: T, offset: float, origin: Optional[Offset] = None) -> T:
        return self._apply(origin, leading=matrix4.translation(0.0, offset, 0.0))

    def translate_z(self: T, offset: float, origin: Optional[Offset] = None) -> T:
        return self._apply(origin, leading=matrix4.translation(0.0, 0.0, offset))

    def upward(self: T, offset: float, origin: Optional[Offset] = None) -> T:
        # screen Y grows downward
        return self.translate_y(-offset, origin=origin)

    def downward(self: T, offset: float, origin: Optional[Offset] = None) -> T:
        return self.translate_y(offset, origin=origin)

    def forward(
        self: T,
        offset: float,
        origin: Optional[Offset] = None,
        direction: TextDirection = TextDirection.LTR,
    ) -> T:
        """Move along the reading direction: +X for LTR, -X for RTL."""
        if direction == TextDirection.LTR:
            return self.translate_x(offset, origin=origin)
        return self.translate_x(-offset, origin=origin)

    def backward(
        self: T,
        offset: float,
        origin: Optional[Offset] = None,
        direction: TextDirection = TextDirection.LTR,
    ) -> T:
        """Move against the reading direction: -X for LTR, +X for RTL."""
        if direction == TextDirection.LTR:
            return self.translate_x(-offset, origin=origin)
        return self.translate_x(offset, origin=origin)

    def inward(self: T, offset: float, origin: Optional[Offset] = None) -> T:
        return self.translate_z(-offset, origin=origin)

    def outward(self: T, offset: float, origin: Optional[Offset] = None) -> T:
        return self.translate_z(offset, origin=origin)

    # ...Scaling

    def scale(self: T, x: float, y: Optional[float] = None, z: Optional[float] = None) -> T:
        """
        Scale around the rect center. ``y`` defaults to ``x``, ``z`` to 1.
        """
        y = x if y is None else y
        z = 1.0 if z is None else z
        return self._apply(elementary=matrix4.scaling(x, y, z))

    def scale_x(self: T, ratio: float, origin: Optional[Offset] = None) -> T:
        return self._apply(origin, elementary=matrix4.scaling(ratio, 1.0, 1.0))

    def scale_y(self: T, ratio: float, origin: Optional[Offset] = None) -> T:
        return self._apply(origin, elementary=matrix4.scaling(1.0, ratio, 1.0))

    def scale_z(self: T, ratio: float, origin: Optional[Offset] = None) -> T:
        return self._apply(origin, elementary=matrix4.scaling(1.0, 1.0, ratio))

    # ...Rotation

    def tilt(self: T, x: float, y: float, z: Optional[float] = None) -> T:
        """Tilt about X, then Y, then Z (degrees). ``z`` defaults to 0."""
        self.tilt_x(x).tilt_y(y).tilt_z(0.0 if z is None else z)
        return self

    def tilt_x(self: T, degrees: float, origin: Optional[Offset] = None) -> T:
        radians = matrix4.degrees_to_radians(degrees)
        return self._apply(origin, elementary=matrix4.rotation_x(radians))

    def tilt_y(self: T, degrees: float, origin: Optional[Offset] = None) -> T:
        radians = matrix4.degrees_to_radians(degrees)
        return self._apply(origin, elementary=matrix4.rotation_y(radians))

    def tilt_z(self: T, degrees: float, origin: Optional[Offset] = None) -> T:
        return self.rotate(degrees, origin=origin)

    def rotate(self: T, degrees: float, origin: Optional[Offset] = None) -> T:
        """2D rotation about Z by ``degrees`` around ``origin`` (default: center)."""
        radians = matrix4.degrees_to_radians(degrees)
        return self._apply(origin, elementary=matrix4.rotation_z(radians))

    def flip_x(self: T, origin: Optional[Offset] = None) -> T:
        return self.tilt_x(180, origin=origin)

    def flip_y(self: T, origin: Optional[Offset] = None) -> T:
        return self.tilt_y(180, origin=origin)

    def flip_z(self: T, origin: Optional[Offset] = None) -> T:
        return self.tilt_z(180, origin=origin)

    # ...Helpers

    def map_point(self, x: float, y: float, z: float = 0.0) -> Tuple[float, float, float]:
        """Image of the point (x, y, z) under the current matrix."""
        px, py, pz = matrix4.transform_point(self.matrix, x, y, z)
        return (float(px), float(py), float(pz))

    def copy(self) -> "Mat3D":
        """Independent copy: new matrix, new rect."""
        return Mat3D(matrix=self.matrix, rect=self.rect)

    def __str__(self) -> str:
        return format_mat3d(self.matrix, self.rect)

    __repr__ = __str__


class Mat3D(Mat3DMixin):
    """
    The Mat3D state: a matrix plus the rectangle that defines its pivot.

    ``Mat3D(matrix, rect)`` keeps its own copies, so the caller's matrix is
    immune to operations on the state. Use ``Mat3D.raw`` to operate on a
    caller-owned array directly.
    """

    def __init__(self, matrix: Optional[matrix4.MatrixLike] = None, rect: Optional[Rect] = None):
        """
        Initialize an owning state.

        Args:
            matrix: Initial 4x4 matrix (or 16 column-major values); copied.
                Identity when omitted.
            rect: Bounding rectangle; copied. Empty rect at the origin when
                omitted.
        """
        self._matrix = matrix4.identity() if matrix is None else matrix4.as_matrix(matrix)
        self._rect = Rect.zero() if rect is None else rect.copy()

    @classmethod
    def raw(cls, matrix: np.ndarray, rect: Optional[Rect] = None) -> "Mat3D":
        """
        Build a state that shares ``matrix`` (and ``rect``) with the caller.

        Changes made through the state are visible through ``matrix`` and
        the other way round.

        Raises:
            TypeError: If ``matrix`` is not a float64 numpy array
            ValueError: If ``matrix`` is not a column-major 4x4 array
        """
        state = cls.__new__(cls)
        state._matrix = matrix4.check_alias(matrix)
        state._rect = Rect.zero() if rect is None else rect
        return state

    @classmethod
    def from_mat3d(cls, other: Mat3DMixin) -> "Mat3D":
        """Live link to ``other``: same matrix array, same Rect object."""
        return cls.raw(other.matrix, other.rect)

    @classmethod
    def parse(cls, source: str) -> "Mat3D":
        """
        Build an owning state from its string form.

        Malformed input does not raise: see ``mat3d.codec`` for the
        fallback rules.
        """
        parsed = parse_mat3d(source)
        state = cls.__new__(cls)
        state._matrix = parsed.matrix
        state._rect = parsed.rect
        return state

    @classmethod
    def combine(cls, states: Iterable[Mat3DMixin]) -> "Mat3D":
        """Fold ``multiply`` over ``states`` starting from the identity state."""
        result = cls()
        count = 0
        for state in states:
            result.multiply(state)
            count += 1
        logger.debug(f"Combined {count} Mat3D states")
        return result

    @property
    def rect(self) -> Rect:
        return self._rect

    @rect.setter
    def rect(self, value: Rect) -> None:
        # assignment takes a copy; only raw/from_mat3d link rects
        self._rect = value.copy()

    @property
    def matrix(self) -> np.ndarray:
        return self._matrix


class Mat3DBase(Mat3DMixin):
    """
    Base class for user types that want the Mat3D operation set.

    The matrix given to the constructor is shared, not copied, so a type
    can drive a matrix owned by something else. It must be a column-major
    float64 array such as ``matrix4.identity()``:

        class Sprite(Mat3DBase):
            def __init__(self, matrix, offset, width, height):
                super().__init__(matrix, Rect.from_ltwh(offset.dx, offset.dy, width, height))
    """

    def __init__(self, matrix: np.ndarray, rect: Optional[Rect] = None):
        self._matrix = matrix4.check_alias(matrix)
        self._rect = Rect.zero() if rect is None else rect

    @property
    def rect(self) -> Rect:
        return self._rect

    @rect.setter
    def rect(self, value: Rect) -> None:
        self._rect = value.copy()

    @property
    def matrix(self) -> np.ndarray:
        return self._matrix
