"""Node predicates for connectivity queries."""

from typing import Callable

from .models import MediaData, Node
from .node_types import MediaKind, NodeType

NodePredicate = Callable[[Node], bool]


def is_media(node: Node) -> bool:
    """Match media nodes of any kind."""
    return node.type == NodeType.MEDIA


def media_of_kind(kind: MediaKind | str) -> NodePredicate:
    """Build a predicate matching media nodes of one kind."""
    kind = MediaKind(kind)

    def predicate(node: Node) -> bool:
        return isinstance(node.data, MediaData) and node.data.type == kind

    predicate.__name__ = f"is_{kind.value}"
    return predicate


is_image = media_of_kind(MediaKind.IMAGE)
is_video = media_of_kind(MediaKind.VIDEO)


def of_type(node_type: NodeType | str) -> NodePredicate:
    """Build a predicate matching nodes by type tag."""
    node_type = NodeType(node_type)

    def predicate(node: Node) -> bool:
        return node.type == node_type

    return predicate
