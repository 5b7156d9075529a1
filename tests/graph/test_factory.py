"""Tests for NodeFactory."""

import random

import pytest

from canvasflow.graph.factory import SECTION_COLORS, NodeFactory
from canvasflow.graph.models import GenerationData, Position
from canvasflow.graph.node_types import NodeType


class TestGenerationNodes:
    def test_generate_defaults(self, factory):
        node = factory.create_generation_node(NodeType.GENERATE, (400, 0))

        assert node.type == NodeType.GENERATE
        assert node.position == Position(x=400, y=0)
        assert node.data == GenerationData(
            label="Generate Video",
            model="fal-ai/kling-video/o1/image-to-video",
            duration="5",
        )

    def test_edit_defaults(self, factory):
        data = factory.create_generation_node("edit", (0, 0)).data

        assert data.label == "Edit Video"
        assert data.model == "fal-ai/kling-video/o1/video-to-video/edit"
        assert data.keep_audio is True
        assert data.duration is None

    def test_extend_defaults(self, factory):
        data = factory.create_generation_node(NodeType.EXTEND, (0, 0)).data

        assert data.label == "Extend Video"
        assert data.model == "fal-ai/kling-video/o1/video-to-video/reference"
        assert data.keep_audio is True
        assert data.duration == "5"
        assert data.aspect_ratio == "auto"

    def test_new_nodes_are_idle(self, factory):
        data = factory.create_generation_node(NodeType.EDIT, (0, 0)).data

        assert data.prompt == ""
        assert data.is_generating is False
        assert data.output_url is None
        assert data.error is None

    @pytest.mark.parametrize("kind", ["media", "section"])
    def test_rejects_non_generation_kinds(self, factory, kind):
        with pytest.raises(ValueError, match="not a generation node type"):
            factory.create_generation_node(kind, (0, 0))


class TestSectionNodes:
    def test_section_layout(self, factory):
        node = factory.create_section_node({"x": -400, "y": 0})

        assert node.type == NodeType.SECTION
        assert (node.width, node.height) == (400, 300)
        assert node.z_index == -1
        assert node.data.label == "New Section"
        assert node.data.color in SECTION_COLORS

    def test_seeded_colours_repeat(self):
        def colours(factory):
            return [factory.create_section_node((0, 0)).data.color for _ in range(5)]

        assert colours(NodeFactory(rng=random.Random(42))) == colours(
            NodeFactory(rng=random.Random(42))
        )


def test_media_node_wraps_asset(factory, image_media):
    node = factory.create_media_node(image_media, Position(x=1, y=2))

    assert node.type == NodeType.MEDIA
    assert node.data == image_media


def test_ids_are_unique(factory):
    ids = {factory.create_generation_node(NodeType.GENERATE, (0, 0)).id for _ in range(20)}
    assert len(ids) == 20
