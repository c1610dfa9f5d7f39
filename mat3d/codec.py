"""
Mat3D string codec.

Formats a (matrix, rect) pair to its canonical string and parses it back.

String Format:
    Mat3D<values>(<left>, <top>, <right>, <bottom>)

    - values: the 16 matrix entries in column-major order (column by
      column, translation last) as a compact JSON array
      e.g. [1.0,0.0,0.0,0.0,...]
    - left/top/right/bottom: the rectangle bounds as plain decimals

    Example:
        Mat3D[1.0,0.0,0.0,0.0,0.0,1.0,0.0,0.0,0.0,0.0,1.0,0.0,10.0,0.0,0.0,1.0](0.0, 0.0, 100.0, 50.0)

Parsing never fails. Recovery rules:
    - A bound that is not a number becomes 0
    - A missing or undecodable value array becomes the identity matrix
    - A string that does not have the shape above becomes the identity
      matrix with an empty rectangle
"""

import json
import re
from dataclasses import dataclass
from typing import List, Optional
import logging

import numpy as np

from . import matrix4
from .geometry import Rect

logger = logging.getLogger(__name__)

PREFIX = 'Mat3D'

# Signs and exponents are accepted so that every formatted value parses back.
MAT3D_PATTERN = re.compile(
    r'Mat3D(\[[-+0-9.eE, ]*\])?'
    r'\(([-+0-9.eE]*), ?([-+0-9.eE]*), ?([-+0-9.eE]*), ?([-+0-9.eE]*),? ?\)'
)


@dataclass
class ParsedMat3D:
    """Result of parsing a Mat3D string."""
    matrix: np.ndarray
    rect: Rect
    matched: bool = True  # False when the whole string was unrecognised
    matrix_recovered: bool = False  # True when the value array was replaced by identity


class Mat3DCodec:
    """
    Formatter and parser for the Mat3D string representation.

    The parser follows the prefix-match rule: the string must start with the
    Mat3D shape, anything after the closing parenthesis is ignored.
    """

    def format(self, matrix: np.ndarray, rect: Rect) -> str:
        """
        Render a matrix and rectangle to the canonical string.

        Args:
            matrix: 4x4 matrix
            rect: Bounding rectangle

        Returns:
            Mat3D string
        """
        values = json.dumps(
            [float(v) for v in matrix4.flatten(matrix)],
            separators=(',', ':'),
        )
        return (
            f"{PREFIX}{values}"
            f"({float(rect.left)!r}, {float(rect.top)!r}, "
            f"{float(rect.right)!r}, {float(rect.bottom)!r})"
        )

    def parse(self, source: str) -> ParsedMat3D:
        """
        Parse a Mat3D string, falling back to defaults where needed.

        Args:
            source: String produced by ``format`` (or written by hand)

        Returns:
            ParsedMat3D with an independent matrix and rect
        """
        match = MAT3D_PATTERN.match(source) if isinstance(source, str) else None
        if match is None:
            logger.debug(f"Not a Mat3D string, using identity: {source!r}")
            return ParsedMat3D(matrix4.identity(), Rect.zero(), matched=False)

        left, top, right, bottom = (self._parse_bound(match.group(i)) for i in range(2, 6))
        rect = Rect(left, top, right, bottom)

        storage = self._parse_storage(match.group(1))
        if storage is None:
            logger.debug(f"Mat3D value array missing or invalid, using identity: {match.group(1)!r}")
            return ParsedMat3D(matrix4.identity(), rect, matrix_recovered=True)

        return ParsedMat3D(matrix4.as_matrix(storage), rect)

    def _parse_bound(self, text: Optional[str]) -> float:
        """
        Parse one rectangle bound.

        Returns:
            The value, or 0.0 if it is missing or not a number
        """
        if not text:
            return 0.0
        try:
            value = float(text)
        except ValueError:
            return 0.0
        return value if np.isfinite(value) else 0.0

    def _parse_storage(self, text: Optional[str]) -> Optional[List[float]]:
        """
        Decode the bracketed value array.

        Returns:
            16 finite floats, or None if absent or not decodable
        """
        if not text:
            return None
        try:
            values = json.loads(text)
        except ValueError:
            return None

        if not isinstance(values, list) or len(values) != matrix4.STORAGE_SIZE:
            return None
        if not all(isinstance(v, (int, float)) and not isinstance(v, bool) for v in values):
            return None

        storage = [float(v) for v in values]
        if not all(np.isfinite(v) for v in storage):
            return None
        return storage


_default_codec = Mat3DCodec()


def format_mat3d(matrix: np.ndarray, rect: Rect) -> str:
    """
    Convenience function to format a matrix and rect.

    Args:
        matrix: 4x4 matrix
        rect: Bounding rectangle

    Returns:
        Mat3D string
    """
    return _default_codec.format(matrix, rect)


def parse_mat3d(source: str) -> ParsedMat3D:
    """
    Convenience function to parse a Mat3D string.

    Args:
        source: Mat3D string

    Returns:
        ParsedMat3D (never raises for malformed input)
    """
    return _default_codec.parse(source)
