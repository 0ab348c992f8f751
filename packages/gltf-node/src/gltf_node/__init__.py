# SPDX-License-Identifier: MIT
"""gltf-node - glTF scene node model, transform codec and document codec."""

from gltf_node.errors import FormatError, UnresolvedReferenceError
from gltf_node.scene import MatrixTransform, Node, Transform
from gltf_node.schema import DocumentContext, ReferenceKind
from gltf_node.schema.node_codec import deserialize_node, serialize_node

__version__ = "0.1.0"
__all__ = [
    "Node",
    "MatrixTransform",
    "Transform",
    "DocumentContext",
    "ReferenceKind",
    "FormatError",
    "UnresolvedReferenceError",
    "deserialize_node",
    "serialize_node",
]
