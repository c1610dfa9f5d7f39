"""
Elementary 4x4 homogeneous matrices and matrix storage helpers.

This module handles the raw matrix side of Mat3D:
    1. Building elementary transforms (translation, scale, axis rotations)
    2. Converting caller input into a 4x4 float64 array
    3. Writing a fully computed result back into an existing array

Matrix Conventions:
    - Matrices act on column vectors: p' = M @ [x, y, z, 1]
    - Translation therefore lives in the last column
    - Arrays are kept in column-major (Fortran) order, so the flat 16-value
      storage lists the matrix column by column and is a view of the array
    - All rotations use the right-hand rule
    - Angles are given in degrees at the API surface and converted with
      radians = pi * degrees / 180
"""

import numpy as np
from typing import Iterable, Union

MATRIX_SHAPE = (4, 4)
STORAGE_SIZE = 16

MatrixLike = Union[np.ndarray, Iterable[float], Iterable[Iterable[float]]]


def identity() -> np.ndarray:
    """Return a fresh column-major 4x4 identity matrix."""
    return np.eye(4, dtype=np.float64, order='F')


def degrees_to_radians(degrees: float) -> float:
    return np.pi * degrees / 180.0


def translation(x: float, y: float, z: float = 0.0) -> np.ndarray:
    """4x4 translation matrix by (x, y, z)."""
    return np.array([
        [1, 0, 0, x],
        [0, 1, 0, y],
        [0, 0, 1, z],
        [0, 0, 0, 1]
    ], dtype=np.float64)


def scaling(x: float, y: float, z: float = 1.0) -> np.ndarray:
    """4x4 scale matrix by (x, y, z)."""
    return np.array([
        [x, 0, 0, 0],
        [0, y, 0, 0],
        [0, 0, z, 0],
        [0, 0, 0, 1]
    ], dtype=np.float64)


def rotation_x(radians: float) -> np.ndarray:
    """
    Rotation about the X axis.

    Y rotates toward Z for positive angles.
    """
    c, s = np.cos(radians), np.sin(radians)
    return np.array([
        [1, 0, 0, 0],
        [0, c, -s, 0],
        [0, s, c, 0],
        [0, 0, 0, 1]
    ], dtype=np.float64)


def rotation_y(radians: float) -> np.ndarray:
    """
    Rotation about the Y axis.

    Z rotates toward X for positive angles.
    """
    c, s = np.cos(radians), np.sin(radians)
    return np.array([
        [c, 0, s, 0],
        [0, 1, 0, 0],
        [-s, 0, c, 0],
        [0, 0, 0, 1]
    ], dtype=np.float64)


def rotation_z(radians: float) -> np.ndarray:
    """
    Rotation about the Z axis (the 2D rotation).

    X rotates toward Y for positive angles.
    """
    c, s = np.cos(radians), np.sin(radians)
    return np.array([
        [c, -s, 0, 0],
        [s, c, 0, 0],
        [0, 0, 1, 0],
        [0, 0, 0, 1]
    ], dtype=np.float64)


def as_matrix(values: MatrixLike) -> np.ndarray:
    """
    Convert caller input into a new, independent 4x4 float64 array.

    Accepts a 4x4 nested sequence/array (indexed ``[row][column]``) or a
    flat sequence of 16 values in column-major order, the same order as
    ``storage_view``.

    Args:
        values: Matrix data

    Returns:
        A column-major 4x4 float64 copy

    Raises:
        ValueError: If the data cannot form a finite 4x4 matrix
    """
    arr = np.array(values, dtype=np.float64)
    if arr.shape == (STORAGE_SIZE,):
        arr = arr.reshape(MATRIX_SHAPE, order='F')
    if arr.shape != MATRIX_SHAPE:
        raise ValueError(f"Expected a 4x4 matrix or 16 values, got shape {arr.shape}")
    if not np.all(np.isfinite(arr)):
        raise ValueError("Matrix contains non-finite values")
    return np.array(arr, order='F')


def check_alias(matrix: np.ndarray) -> np.ndarray:
    """
    Validate an array that a state is about to share rather than copy.

    The array must be column-major so that ``storage_view`` can expose it
    without copying. ``identity()`` and ``np.asfortranarray`` give such
    arrays.

    Args:
        matrix: Array supplied by the caller

    Returns:
        The same array object

    Raises:
        TypeError: If it is not a float64 numpy array
        ValueError: If it is not 4x4 or not Fortran-contiguous
    """
    if not isinstance(matrix, np.ndarray) or matrix.dtype != np.float64:
        raise TypeError("Aliased matrices must be float64 numpy arrays")
    if matrix.shape != MATRIX_SHAPE:
        raise ValueError(f"Expected a 4x4 matrix, got shape {matrix.shape}")
    if not matrix.flags.f_contiguous:
        raise ValueError(
            "Aliased matrices must be column-major (Fortran-contiguous); "
            "use np.asfortranarray or matrix4.identity()"
        )
    return matrix


def write(target: np.ndarray, result: np.ndarray) -> np.ndarray:
    """
    Copy a fully computed result into ``target`` in one assignment.

    The target keeps its identity (and therefore every alias of it).
    Nothing is written if the result is not a finite 4x4 matrix.

    Raises:
        ValueError: If ``result`` holds non-finite values
    """
    if result.shape != MATRIX_SHAPE:
        raise ValueError(f"Expected a 4x4 result, got shape {result.shape}")
    if not np.all(np.isfinite(result)):
        raise ValueError("Operation would produce non-finite matrix values")
    target[...] = result
    return target


def flatten(matrix: MatrixLike) -> np.ndarray:
    """The 16 values of ``matrix`` in column-major order (a copy if needed)."""
    return np.asarray(matrix, dtype=np.float64).reshape(STORAGE_SIZE, order='F')


def storage_view(matrix: np.ndarray) -> np.ndarray:
    """
    Flat, column-major 16-value view of ``matrix``.

    Writes to the result land in ``matrix``.

    Raises:
        ValueError: If ``matrix`` is not Fortran-contiguous, since no view
            could be made
    """
    if not matrix.flags.f_contiguous:
        raise ValueError("Storage view needs a column-major (Fortran-contiguous) matrix")
    return matrix.reshape(STORAGE_SIZE, order='F')


def transform_point(matrix: np.ndarray, x: float, y: float, z: float = 0.0) -> np.ndarray:
    """Apply ``matrix`` to the point (x, y, z) and return its (x, y, z) image."""
    out = matrix @ np.array([x, y, z, 1.0])
    if out[3] != 0 and out[3] != 1:
        out = out / out[3]
    return out[:3]
