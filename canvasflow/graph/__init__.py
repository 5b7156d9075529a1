"""Graph layer: node models, the store, connectivity queries and the factory."""

from .errors import DuplicateIdError, GraphError, InvalidPatchError
from .factory import NodeFactory
from .models import (
    Connection,
    Edge,
    GenerationData,
    MediaData,
    Node,
    Position,
    SectionData,
)
from .node_types import MediaKind, NodeType
from .predicates import is_image, is_media, is_video, media_of_kind
from .resolver import ConnectivityResolver
from .store import GraphSnapshot, GraphStore

__all__ = [
    "NodeType",
    "MediaKind",
    "Node",
    "Edge",
    "Connection",
    "Position",
    "MediaData",
    "GenerationData",
    "SectionData",
    "GraphStore",
    "GraphSnapshot",
    "ConnectivityResolver",
    "NodeFactory",
    "is_media",
    "is_image",
    "is_video",
    "media_of_kind",
    "GraphError",
    "DuplicateIdError",
    "InvalidPatchError",
]
