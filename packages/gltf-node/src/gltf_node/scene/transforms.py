# SPDX-License-Identifier: MIT
"""Transform utilities for glTF node data.

glTF stores a node transform either as a column-major 4x4 matrix or as a
translation/rotation/scale triple composed as ``T @ R @ S``. Matrices here are
numpy arrays indexed ``m[row, col]``, so column 3 holds the translation.
"""

from __future__ import annotations

import math
from dataclasses import dataclass

import numpy as np

from gltf_node.errors import FormatError

IDENTITY_MATRIX = np.eye(4, dtype=np.float64)
IDENTITY_MATRIX.flags.writeable = False

# Negates the third axis: converts between right- and left-handed conventions.
FLIP_Z_MATRIX = np.diag([1.0, 1.0, -1.0, 1.0])
FLIP_Z_MATRIX.flags.writeable = False

DEFAULT_TRANSLATION = (0.0, 0.0, 0.0)
DEFAULT_ROTATION = (0.0, 0.0, 0.0, 1.0)
DEFAULT_SCALE = (1.0, 1.0, 1.0)


@dataclass
class Transform:
    """Decomposed transform with translation, rotation, and scale."""

    translation: tuple[float, float, float]
    rotation: tuple[float, float, float, float]  # Quaternion (x, y, z, w)
    scale: tuple[float, float, float]

    @classmethod
    def identity(cls) -> Transform:
        """Create an identity transform."""
        return cls(
            translation=DEFAULT_TRANSLATION,
            rotation=DEFAULT_ROTATION,
            scale=DEFAULT_SCALE,
        )

    def to_matrix(self) -> np.ndarray:
        """Convert to a 4x4 transformation matrix."""
        rot = np.eye(4, dtype=np.float64)
        rot[:3, :3] = quaternion_to_matrix(self.rotation)

        # Apply scale
        scale_mat = np.diag([self.scale[0], self.scale[1], self.scale[2], 1.0])

        # Apply translation
        trans_mat = np.eye(4, dtype=np.float64)
        trans_mat[0, 3] = self.translation[0]
        trans_mat[1, 3] = self.translation[1]
        trans_mat[2, 3] = self.translation[2]

        return trans_mat @ rot @ scale_mat


def quaternion_to_matrix(rotation: tuple[float, float, float, float]) -> np.ndarray:
    """Build a 3x3 rotation matrix from a unit quaternion (x, y, z, w)."""
    x, y, z, w = rotation
    return np.array(
        [
            [1 - 2 * y * y - 2 * z * z, 2 * x * y - 2 * z * w, 2 * x * z + 2 * y * w],
            [2 * x * y + 2 * z * w, 1 - 2 * x * x - 2 * z * z, 2 * y * z - 2 * x * w],
            [2 * x * z - 2 * y * w, 2 * y * z + 2 * x * w, 1 - 2 * x * x - 2 * y * y],
        ],
        dtype=np.float64,
    )


def trs_to_matrix(
    translation: tuple[float, float, float],
    rotation: tuple[float, float, float, float],
    scale: tuple[float, float, float],
) -> np.ndarray:
    """Compose ``T @ R @ S`` from its components."""
    return Transform(
        translation=tuple(translation),
        rotation=tuple(rotation),
        scale=tuple(scale),
    ).to_matrix()


def parse_transform_matrix(matrix_data: list[float] | np.ndarray) -> np.ndarray:
    """Parse a column-major 4x4 matrix from glTF format.

    Args:
        matrix_data: 16 floats in column-major order

    Returns:
        4x4 numpy array
    """
    if isinstance(matrix_data, np.ndarray):
        data = matrix_data.flatten()
    else:
        data = matrix_data

    if len(data) != 16:
        raise FormatError(f"Expected 16 matrix elements, got {len(data)}")

    # Column-major to row-major conversion
    matrix = np.array(data, dtype=np.float64).reshape(4, 4).T
    return matrix


def matrix_to_column_major(matrix: np.ndarray) -> list[float]:
    """Flatten a 4x4 matrix into 16 column-major floats."""
    return [float(v) for v in np.asarray(matrix, dtype=np.float64).T.flatten()]


def flip_handedness(matrix: np.ndarray) -> np.ndarray:
    """Conjugate a transform with the Z-flip matrix.

    The flip matrix is its own inverse, so applying this twice gives back the
    input exactly.
    """
    return FLIP_Z_MATRIX @ matrix @ FLIP_Z_MATRIX


def matrix_to_trs(matrix: np.ndarray) -> Transform:
    """Decompose a 4x4 matrix into translation, rotation, scale.

    Shear is not representable and is silently lost.

    Args:
        matrix: 4x4 transformation matrix

    Returns:
        Transform with decomposed TRS
    """
    # Extract translation
    translation = (float(matrix[0, 3]), float(matrix[1, 3]), float(matrix[2, 3]))

    # Extract scale from column magnitudes
    sx = np.linalg.norm(matrix[:3, 0])
    sy = np.linalg.norm(matrix[:3, 1])
    sz = np.linalg.norm(matrix[:3, 2])
    scale = (float(sx), float(sy), float(sz))

    # Normalize to get rotation matrix
    rot_matrix = np.zeros((3, 3), dtype=np.float64)
    rot_matrix[:, 0] = matrix[:3, 0] / sx if sx > 1e-10 else matrix[:3, 0]
    rot_matrix[:, 1] = matrix[:3, 1] / sy if sy > 1e-10 else matrix[:3, 1]
    rot_matrix[:, 2] = matrix[:3, 2] / sz if sz > 1e-10 else matrix[:3, 2]

    # Convert rotation matrix to quaternion
    rotation = rotation_matrix_to_quaternion(rot_matrix)

    return Transform(
        translation=translation,
        rotation=rotation,
        scale=scale,
    )


def rotation_matrix_to_quaternion(
    rot: np.ndarray,
) -> tuple[float, float, float, float]:
    """Convert a 3x3 rotation matrix to quaternion (x, y, z, w).

    Uses the trace formula only. Near a 180 degree rotation w goes to zero and
    the vector part is undefined; those components come back as 0.0, which is
    wrong for such rotations. Callers that need them should use a
    branch-on-largest-diagonal method instead.

    Args:
        rot: 3x3 rotation matrix

    Returns:
        Quaternion as (x, y, z, w)
    """
    trace = float(rot[0, 0] + rot[1, 1] + rot[2, 2])

    with np.errstate(divide="ignore", invalid="ignore"):
        w = np.float64(math.sqrt(max(1.0 + trace, 0.0)) / 2.0)
        w4 = 4.0 * w
        x = np.float64(rot[2, 1] - rot[1, 2]) / w4
        y = np.float64(rot[0, 2] - rot[2, 0]) / w4
        z = np.float64(rot[1, 0] - rot[0, 1]) / w4

    x = x if np.isfinite(x) else 0.0
    y = y if np.isfinite(y) else 0.0
    z = z if np.isfinite(z) else 0.0

    return (float(x), float(y), float(z), float(w))


def combine_transforms(parent: Transform, child: Transform) -> Transform:
    """Combine parent and child transforms into a single world transform.

    Args:
        parent: Parent transform (already in world space)
        child: Child transform (local to parent)

    Returns:
        Combined transform in world space
    """
    combined_mat = parent.to_matrix() @ child.to_matrix()

    # Decompose back to TRS
    return matrix_to_trs(combined_mat)
