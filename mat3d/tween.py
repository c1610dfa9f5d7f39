"""
Mat3D interpolation module.

Provides linear interpolation between two Mat3D states.

Each of the 16 matrix entries is interpolated independently:

    value(t) = begin * (1 - t) + end * t

    - t = 0 gives the begin matrix exactly
    - t = 1 gives the end matrix exactly
    - t outside [0, 1] extrapolates along the same line

Only the matrix is interpolated. The result is a new owning state with an
empty rectangle.
"""

from typing import Optional
import logging

from .core import Mat3D, Mat3DMixin

logger = logging.getLogger(__name__)


class Mat3DTween:
    """
    A linear interpolation between a beginning and an ending Mat3D.

    ``begin`` and ``end`` may be left unset at construction and filled in
    later, but both must be set before the tween is evaluated.

        tween = Mat3DTween(begin=Mat3D().scale(0.3), end=Mat3D().translate(50.0))
        halfway = tween.lerp(0.5)
    """

    def __init__(
        self,
        begin: Optional[Mat3DMixin] = None,
        end: Optional[Mat3DMixin] = None,
    ):
        """
        Initialize the tween.

        Args:
            begin: State at t = 0
            end: State at t = 1
        """
        self.begin = begin
        self.end = end

    def _require_endpoints(self) -> None:
        missing = [name for name, value in (('begin', self.begin), ('end', self.end)) if value is None]
        if missing:
            raise ValueError(
                f"Mat3DTween cannot be evaluated: {' and '.join(missing)} not set"
            )

    def lerp(self, t: float) -> Mat3D:
        """
        Interpolate the two matrices at ``t``.

        Args:
            t: Interpolation factor (0 = begin, 1 = end)

        Returns:
            New Mat3D with the interpolated matrix and an empty rect

        Raises:
            ValueError: If ``begin`` or ``end`` is not set
        """
        self._require_endpoints()
        t = float(t)
        if t < 0.0 or t > 1.0:
            logger.debug(f"Extrapolating Mat3D tween at t={t:.3f}")
        matrix = self.begin.matrix * (1.0 - t) + self.end.matrix * t
        return Mat3D(matrix=matrix)

    def transform(self, t: float) -> Mat3D:
        """
        Value of the tween at ``t``.

        At exactly 0 and 1 this returns copies of the endpoints themselves
        (rect included); anything else goes through ``lerp``.
        """
        self._require_endpoints()
        if t == 0.0:
            return self.begin.copy()
        if t == 1.0:
            return self.end.copy()
        return self.lerp(t)

    def __repr__(self) -> str:
        return f"Mat3DTween({self.begin!r} -> {self.end!r})"


def interpolate(begin: Mat3DMixin, end: Mat3DMixin, t: float) -> Mat3D:
    """
    Convenience function to interpolate two states.

    Args:
        begin: State at t = 0
        end: State at t = 1
        t: Interpolation factor

    Returns:
        New Mat3D with the interpolated matrix
    """
    return Mat3DTween(begin=begin, end=end).lerp(t)
