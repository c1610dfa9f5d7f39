"""
Mat3D Package

A small affine-transform helper: a 4x4 homogeneous transformation matrix
paired with a bounding rectangle, with pivot-aware operations that act
around the rectangle's center or a caller-supplied origin.

Operation Pattern:
    translate to pivot → apply elementary transform → translate back

Conventions:
    - Matrices act on column vectors, translation in the last column
    - Flat storage and the string form are column-major (translation last)
    - Screen axes: +X right, +Y down; angles in degrees
    - Every operation mutates in place and returns the same object

Supported Formats:
    - Mat3D strings: Mat3D[16 values](left, top, right, bottom)
    - YAML transform recipes
"""

from .geometry import Offset, Rect, TextDirection
from .core import Mat3D, Mat3DBase, Mat3DMixin
from .codec import Mat3DCodec, ParsedMat3D, format_mat3d, parse_mat3d
from .tween import Mat3DTween, interpolate
from .config import OperationStep, TransformRecipe

__version__ = "1.0.0"
__all__ = [
    "Offset",
    "Rect",
    "TextDirection",
    "Mat3D",
    "Mat3DBase",
    "Mat3DMixin",
    "Mat3DCodec",
    "ParsedMat3D",
    "format_mat3d",
    "parse_mat3d",
    "Mat3DTween",
    "interpolate",
    "OperationStep",
    "TransformRecipe",
]
