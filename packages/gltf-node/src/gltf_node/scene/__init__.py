# SPDX-License-Identifier: MIT
"""Node data model and transform math."""

from .node import MatrixTransform, Node
from .transforms import (
    Transform,
    flip_handedness,
    matrix_to_trs,
    parse_transform_matrix,
)

__all__ = [
    "Node",
    "MatrixTransform",
    "Transform",
    "flip_handedness",
    "matrix_to_trs",
    "parse_transform_matrix",
]
