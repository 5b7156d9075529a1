"""NodeFactory: builds typed nodes with their default payloads."""

import random
import uuid

from .models import GenerationData, MediaData, Node, Position, SectionData, as_position
from .node_types import GENERATION_TYPES, NodeType

SECTION_COLORS = ("#7c3aed", "#00d4aa", "#f59e0b", "#ef4444", "#3b82f6")
SECTION_SIZE = (400.0, 300.0)
SECTION_Z_INDEX = -1

# Per-kind defaults for generation nodes
GENERATION_DEFAULTS: dict[NodeType, dict] = {
    NodeType.GENERATE: {
        "label": "Generate Video",
        "model": "fal-ai/kling-video/o1/image-to-video",
        "duration": "5",
    },
    NodeType.EDIT: {
        "label": "Edit Video",
        "model": "fal-ai/kling-video/o1/video-to-video/edit",
        "keep_audio": True,
    },
    NodeType.EXTEND: {
        "label": "Extend Video",
        "model": "fal-ai/kling-video/o1/video-to-video/reference",
        "keep_audio": True,
        "duration": "5",
        "aspect_ratio": "auto",
    },
}


def _new_id() -> str:
    return str(uuid.uuid4())


class NodeFactory:
    """Constructs new nodes. Inserting them into a store is up to the caller."""

    def __init__(self, rng: random.Random | None = None):
        """Initialize the factory.

        Args:
            rng: Random source for section colours.
        """
        self._rng = rng or random.Random()

    def create_media_node(
        self, media: MediaData, position: Position | tuple[float, float] | dict
    ) -> Node:
        """Create a media node wrapping an ingested asset."""
        return Node(
            id=_new_id(),
            type=NodeType.MEDIA,
            position=as_position(position),
            data=media,
        )

    def create_generation_node(
        self, kind: NodeType | str, position: Position | tuple[float, float] | dict
    ) -> Node:
        """Create a generate, edit or extend node with its default model.

        Raises:
            ValueError: If kind is not a generation node type.
        """
        kind = NodeType(kind)
        if kind not in GENERATION_TYPES:
            raise ValueError(f"'{kind.value}' is not a generation node type")

        return Node(
            id=_new_id(),
            type=kind,
            position=as_position(position),
            data=GenerationData(**GENERATION_DEFAULTS[kind]),
        )

    def create_section_node(self, position: Position | tuple[float, float] | dict) -> Node:
        """Create a section container drawn behind the other nodes."""
        width, height = SECTION_SIZE
        return Node(
            id=_new_id(),
            type=NodeType.SECTION,
            position=as_position(position),
            data=SectionData(label="New Section", color=self._rng.choice(SECTION_COLORS)),
            width=width,
            height=height,
            z_index=SECTION_Z_INDEX,
        )
