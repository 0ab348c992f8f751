# SPDX-License-Identifier: MIT
"""Read and write a glTF node object through a property stream."""

from __future__ import annotations

import logging

from gltf_node.io.stream import PropertyReader, PropertyWriter
from gltf_node.schema.context import DocumentContext, ReferenceKind
from gltf_node.scene.node import MatrixTransform, Node
from gltf_node.scene.transforms import (
    DEFAULT_ROTATION,
    DEFAULT_SCALE,
    DEFAULT_TRANSLATION,
    Transform,
    matrix_to_column_major,
    parse_transform_matrix,
)

logger = logging.getLogger(__name__)


def deserialize_node(context: DocumentContext, reader: PropertyReader) -> Node:
    """Read one node object.

    The reader must be positioned just inside the object (its start token
    already consumed). Reading stops after the object's end token.

    Args:
        context: Resolves camera/mesh/skin/child indices
        reader: Property stream

    Returns:
        The parsed node

    Raises:
        FormatError: on wrong array lengths, bad value shapes, unresolved
            indices, or a stream that ends before the object does
    """
    node = Node()
    matrix = None
    translation = rotation = scale = None

    while (prop := reader.read_property_name()) is not None:
        if prop == "camera":
            node.camera = context.resolve(ReferenceKind.CAMERA, reader.read_int())
        elif prop == "children":
            node.children = [
                context.resolve(ReferenceKind.NODE, index)
                for index in reader.read_int_list()
            ]
        elif prop == "skin":
            node.skin = context.resolve(ReferenceKind.SKIN, reader.read_int())
        elif prop == "matrix":
            matrix = parse_transform_matrix(reader.read_float_array(16, prop))
        elif prop == "mesh":
            node.mesh = context.resolve(ReferenceKind.MESH, reader.read_int())
        elif prop == "rotation":
            rotation = tuple(reader.read_float_array(4, prop))
        elif prop == "scale":
            scale = tuple(reader.read_float_array(3, prop))
        elif prop == "translation":
            translation = tuple(reader.read_float_array(3, prop))
        elif prop == "weights":
            node.weights = reader.read_float_list()
        else:
            node.read_common_property(context, reader, prop)

    if translation is not None or rotation is not None or scale is not None:
        if matrix is not None:
            logger.warning(
                "Node %s has both 'matrix' and TRS properties; using TRS",
                node.name or "<unnamed>",
            )
        node.transform = Transform(
            translation=translation or DEFAULT_TRANSLATION,
            rotation=rotation or DEFAULT_ROTATION,
            scale=scale or DEFAULT_SCALE,
        )
    elif matrix is not None:
        node.transform = MatrixTransform(matrix)

    return node


def serialize_node(node: Node, writer: PropertyWriter) -> None:
    """Write one node object with default values omitted.

    Properties are written in the order camera, children, skin, matrix, mesh,
    rotation, scale, translation, weights, then name, extensions, extras.
    """
    writer.write_start_object()

    if node.camera is not None:
        writer.write_property_name("camera")
        writer.write_value(node.camera)

    if node.children:
        writer.write_property_name("children")
        _write_array(writer, node.children)

    if node.skin is not None:
        writer.write_property_name("skin")
        writer.write_value(node.skin)

    transform = node.transform
    if isinstance(transform, MatrixTransform) and not transform.is_identity():
        writer.write_property_name("matrix")
        _write_array(writer, matrix_to_column_major(transform.matrix))

    if node.mesh is not None:
        writer.write_property_name("mesh")
        writer.write_value(node.mesh)

    if isinstance(transform, Transform):
        if tuple(transform.rotation) != DEFAULT_ROTATION:
            writer.write_property_name("rotation")
            _write_array(writer, transform.rotation)
        if tuple(transform.scale) != DEFAULT_SCALE:
            writer.write_property_name("scale")
            _write_array(writer, transform.scale)
        if tuple(transform.translation) != DEFAULT_TRANSLATION:
            writer.write_property_name("translation")
            _write_array(writer, transform.translation)

    if node.weights:
        writer.write_property_name("weights")
        _write_array(writer, node.weights)

    node.write_common_properties(writer)

    writer.write_end_object()


def _write_array(writer: PropertyWriter, values) -> None:
    writer.write_start_array()
    for value in values:
        writer.write_value(value)
    writer.write_end_array()
