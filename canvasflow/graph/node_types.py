"""Node and media type definitions for the canvas graph."""

from enum import Enum


class NodeType(str, Enum):
    """Types of nodes on the canvas."""

    MEDIA = "media"
    GENERATE = "generate"
    EDIT = "edit"
    EXTEND = "extend"
    SECTION = "section"

    @property
    def is_generation(self) -> bool:
        """Whether nodes of this type run generation jobs."""
        return self in GENERATION_TYPES


class MediaKind(str, Enum):
    """Kinds of media a media node can hold."""

    IMAGE = "image"
    VIDEO = "video"


GENERATION_TYPES = frozenset({NodeType.GENERATE, NodeType.EDIT, NodeType.EXTEND})

DEFAULT_EDGE_TYPE = "smoothstep"
