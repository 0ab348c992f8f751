# SPDX-License-Identifier: MIT
"""glTF node: hierarchy, references, morph weights and local transform.

A node holds either a matrix or a TRS triple, never both. The two forms are
modeled as a tagged variant (``MatrixTransform`` or ``Transform``), and the
flat ``matrix``/``translation``/``rotation``/``scale`` attributes are read-only
views that report the default for the form the node does not use.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Union

import numpy as np

from gltf_node.schema.property import ChildOfRootProperty
from gltf_node.scene.transforms import (
    DEFAULT_ROTATION,
    DEFAULT_SCALE,
    DEFAULT_TRANSLATION,
    IDENTITY_MATRIX,
    Transform,
    flip_handedness,
    matrix_to_trs,
    trs_to_matrix,
)


@dataclass(eq=False)
class MatrixTransform:
    """Local transform given as an explicit 4x4 matrix."""

    matrix: np.ndarray = field(default_factory=lambda: np.eye(4, dtype=np.float64))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, MatrixTransform):
            return NotImplemented
        return bool(np.array_equal(self.matrix, other.matrix))

    def to_matrix(self) -> np.ndarray:
        return np.array(self.matrix, dtype=np.float64)

    def is_identity(self) -> bool:
        """Exact comparison against the identity matrix."""
        return bool(np.array_equal(self.matrix, IDENTITY_MATRIX))


NodeTransform = Union[MatrixTransform, Transform]


@dataclass
class Node(ChildOfRootProperty):
    """A node in the glTF node hierarchy.

    When the node has a ``skin``, every primitive of its mesh must carry joint
    and weight attributes. TRS properties compose as ``T @ R @ S``: scale is
    applied to vertices first, then rotation, then translation. A node with
    neither form has the identity transform.
    """

    camera: int | None = None
    children: list[int] | None = None
    skin: int | None = None
    mesh: int | None = None
    weights: list[float] | None = None  # Length must match the mesh's morph targets
    transform: NodeTransform = field(default_factory=MatrixTransform)

    @property
    def uses_trs(self) -> bool:
        """True if the transform is held as translation/rotation/scale."""
        return isinstance(self.transform, Transform)

    @property
    def matrix(self) -> np.ndarray:
        if isinstance(self.transform, MatrixTransform):
            return self.transform.matrix
        return IDENTITY_MATRIX

    @property
    def translation(self) -> tuple[float, float, float]:
        if isinstance(self.transform, Transform):
            return self.transform.translation
        return DEFAULT_TRANSLATION

    @property
    def rotation(self) -> tuple[float, float, float, float]:
        if isinstance(self.transform, Transform):
            return self.transform.rotation
        return DEFAULT_ROTATION

    @property
    def scale(self) -> tuple[float, float, float]:
        if isinstance(self.transform, Transform):
            return self.transform.scale
        return DEFAULT_SCALE

    def local_matrix(self) -> np.ndarray:
        """The node's local transform as a matrix, whichever form it holds."""
        return self.transform.to_matrix()

    def import_to_host_transform(self) -> Transform:
        """Local transform converted to the host's left-handed convention.

        Rotations at or near 180 degrees lose their axis, see
        rotation_matrix_to_quaternion.
        """
        return matrix_to_trs(flip_handedness(self.local_matrix()))

    def export_host_transform(
        self,
        position: tuple[float, float, float],
        rotation: tuple[float, float, float, float],
        scale: tuple[float, float, float],
    ) -> Transform:
        """Store a host-convention local transform on this node as TRS.

        Args:
            position: Host local position
            rotation: Host local rotation quaternion (x, y, z, w)
            scale: Host local scale

        Returns:
            The document-convention transform now held by the node
        """
        host_matrix = trs_to_matrix(position, rotation, scale)
        self.transform = matrix_to_trs(flip_handedness(host_matrix))
        return self.transform
