# SPDX-License-Identifier: MIT
"""Tests for the document helpers."""

import json

import msgpack
import numpy as np
import pytest


def sample_document():
    """A small glTF document with a two-level hierarchy."""
    return {
        "asset": {"version": "2.0"},
        "meshes": [{"primitives": []}],
        "nodes": [
            {"name": "root", "children": [1], "translation": [1, 0, 0]},
            {"mesh": 0, "translation": [0, 2, 0], "extras": {"id": 7}},
        ],
    }


class TestJson:
    """Tests for JSON text conversion."""

    def test_node_to_json(self):
        """Test compact canonical output."""
        from gltf_node.document import node_to_json
        from gltf_node.scene.node import Node

        assert node_to_json(Node(mesh=1, camera=0)) == '{"camera": 0, "mesh": 1}'

    def test_node_from_json(self):
        """Test parsing JSON text."""
        from gltf_node.document import node_from_json

        node = node_from_json('{"skin": 3, "scale": [1, 2, 1]}')

        assert node.skin == 3
        assert node.scale == (1.0, 2.0, 1.0)

    def test_invalid_json(self):
        """Test broken JSON is a format error."""
        from gltf_node.document import node_from_json
        from gltf_node.errors import FormatError

        with pytest.raises(FormatError):
            node_from_json('{"mesh": ')

    def test_not_an_object(self):
        """Test a node must be an object."""
        from gltf_node.document import node_from_json
        from gltf_node.errors import FormatError

        with pytest.raises(FormatError):
            node_from_json("[1, 2]")

    def test_invalid_utf8(self):
        """Test bytes that are not UTF-8 are a format error."""
        from gltf_node.document import node_from_json
        from gltf_node.errors import FormatError

        with pytest.raises(FormatError, match="Invalid JSON"):
            node_from_json(b'{"name": "\xff"}')

    def test_huge_integer_translation(self):
        """Test a translation component too large for a float."""
        from gltf_node.document import node_from_json
        from gltf_node.errors import FormatError

        text = '{"translation": [1' + "0" * 400 + ", 0, 0]}"

        with pytest.raises(FormatError, match="Number out of range"):
            node_from_json(text)


class TestMsgpack:
    """Tests for msgpack conversion."""

    def test_round_trip(self):
        """Test a node survives msgpack encoding."""
        from gltf_node.document import node_from_msgpack, node_to_msgpack
        from gltf_node.scene.node import Node
        from gltf_node.scene.transforms import Transform

        node = Node(
            children=[2, 1],
            mesh=0,
            weights=[0.25, 0.75],
            name="blend",
            transform=Transform((0.0, 1.0, 0.0), (0.0, 0.0, 0.0, 1.0), (1.0, 1.0, 3.0)),
        )

        assert node_from_msgpack(node_to_msgpack(node)) == node

    def test_extension_type_rejected(self):
        """Test a msgpack extension value in place of a matrix."""
        from gltf_node.document import node_from_msgpack
        from gltf_node.errors import FormatError

        values = np.eye(4, dtype="<f4")
        data = msgpack.packb({"matrix": msgpack.ExtType(0x17, values.tobytes())})

        with pytest.raises(FormatError):
            node_from_msgpack(data)


class TestDocument:
    """Tests for whole-document helpers."""

    def test_read_nodes(self):
        """Test parsing every node with references checked."""
        from gltf_node.document import read_nodes

        nodes = read_nodes(sample_document())

        assert len(nodes) == 2
        assert nodes[0].name == "root"
        assert nodes[0].children == [1]
        assert nodes[1].mesh == 0
        assert nodes[1].extras == {"id": 7}

    def test_read_nodes_unresolved(self):
        """Test a mesh index past the document's meshes."""
        from gltf_node.document import read_nodes
        from gltf_node.errors import UnresolvedReferenceError

        document = sample_document()
        document["nodes"][1]["mesh"] = 1

        with pytest.raises(UnresolvedReferenceError):
            read_nodes(document)

    def test_lookup(self):
        """Test resolving an index to its document entry."""
        from gltf_node.schema.context import DocumentContext, ReferenceKind

        document = sample_document()
        context = DocumentContext.from_document(document)

        assert context.lookup(ReferenceKind.MESH, 0) is document["meshes"][0]

    def test_write_nodes(self):
        """Test replacing the nodes array with canonical output."""
        from gltf_node.document import read_nodes, write_nodes

        document = sample_document()
        document["nodes"][0]["rotation"] = [0, 0, 0, 1]

        write_nodes(document, read_nodes(document))

        assert document["nodes"] == [
            {"children": [1], "translation": [1.0, 0.0, 0.0], "name": "root"},
            {"mesh": 0, "translation": [0.0, 2.0, 0.0], "extras": {"id": 7}},
        ]

    def test_save_and_load_json(self, tmp_path):
        """Test a JSON document on disk."""
        from gltf_node.document import load_document, save_document

        path = tmp_path / "scene.gltf"
        save_document(sample_document(), path, indent=2)

        assert load_document(path) == sample_document()
        assert json.loads(path.read_text()) == sample_document()

    def test_save_and_load_msgpack(self, tmp_path):
        """Test a msgpack document on disk."""
        from gltf_node.document import load_document, save_document

        path = tmp_path / "scene.msgpack"
        save_document(sample_document(), path)

        assert load_document(path) == sample_document()

    def test_unsupported_suffix(self, tmp_path):
        """Test only known suffixes are accepted."""
        from gltf_node.document import load_document

        path = tmp_path / "scene.glb"
        path.write_bytes(b"glTF")

        with pytest.raises(ValueError):
            load_document(path)

    def test_world_transform(self):
        """Test a child's document-space translation includes its parent."""
        from gltf_node.document import read_nodes, world_transform

        nodes = read_nodes(sample_document())

        result = world_transform(nodes, 1)

        np.testing.assert_array_almost_equal(result.translation, (1.0, 2.0, 0.0))

    def test_world_transform_cycle(self):
        """Test a cyclic hierarchy is rejected."""
        from gltf_node.document import world_transform
        from gltf_node.errors import FormatError
        from gltf_node.scene.node import Node

        nodes = [Node(children=[1]), Node(children=[0])]

        with pytest.raises(FormatError):
            world_transform(nodes, 0)

    def test_world_transform_two_parents(self):
        """Test a node listed as a child twice is rejected."""
        from gltf_node.document import world_transform
        from gltf_node.errors import FormatError
        from gltf_node.scene.node import Node

        nodes = [Node(children=[2]), Node(children=[2]), Node()]

        with pytest.raises(FormatError):
            world_transform(nodes, 2)

    def test_world_transform_index_out_of_range(self):
        """Test an index past the node array."""
        from gltf_node.document import world_transform
        from gltf_node.errors import FormatError
        from gltf_node.scene.node import Node

        with pytest.raises(FormatError, match="out of range"):
            world_transform([Node(), Node()], 5)

    def test_world_transform_child_out_of_range(self):
        """Test a child index past the node array."""
        from gltf_node.document import world_transform
        from gltf_node.errors import FormatError
        from gltf_node.scene.node import Node

        nodes = [Node(children=[3]), Node()]

        with pytest.raises(FormatError, match="out-of-range child 3"):
            world_transform(nodes, 1)

    def test_save_numpy_values_as_json(self, tmp_path):
        """Test numpy values are converted when saving JSON."""
        from gltf_node.document import save_document

        path = tmp_path / "scene.gltf"
        document = sample_document()
        document["extras"] = {"weights": np.array([0.5, 0.25]), "count": np.int32(2)}

        save_document(document, path)

        assert json.loads(path.read_text())["extras"] == {
            "weights": [0.5, 0.25],
            "count": 2,
        }

    @pytest.mark.parametrize(
        "value", [b"\x00\x01", msgpack.ExtType(0x17, b"\x00\x00\x80\x3f")]
    )
    def test_save_binary_as_json(self, tmp_path, value):
        """Test binary values cannot be written as JSON."""
        from gltf_node.document import save_document
        from gltf_node.errors import FormatError

        document = sample_document()
        document["buffers"] = [{"byteLength": 4, "data": value}]

        with pytest.raises(FormatError, match="no JSON form"):
            save_document(document, tmp_path / "scene.gltf")
