"""Canvas: the public API consumed by the presentation layer."""

from typing import Any, Awaitable, Iterable

from .generation.controller import GenerationController, JobResult
from .generation.locators import LocatorEncoder
from .generation.service import GenerationService
from .graph.factory import NodeFactory
from .graph.models import Connection, Edge, EdgeChange, MediaData, Node, NodeChange, Position
from .graph.node_types import NodeType
from .graph.predicates import NodePredicate
from .graph.resolver import ConnectivityResolver
from .graph.store import GraphStore

PositionLike = Position | tuple[float, float] | dict


class Canvas:
    """Wires a GraphStore, resolver, factory and generation controller together.

    Create one at startup and route every mutation through it; nothing else
    should hold its own copy of node or edge state.
    """

    def __init__(
        self,
        service: GenerationService | None = None,
        encoder: LocatorEncoder | None = None,
        factory: NodeFactory | None = None,
    ):
        """Initialize an empty canvas.

        Args:
            service: The external generation service. Needed only to generate.
            encoder: Locator encoder for local media.
            factory: Node factory. Defaults to a new NodeFactory.
        """
        self.store = GraphStore()
        self.resolver = ConnectivityResolver(self.store)
        self.factory = factory or NodeFactory()
        self.controller = GenerationController(
            self.store, service, resolver=self.resolver, encoder=encoder
        )

    @property
    def nodes(self) -> tuple[Node, ...]:
        return self.store.nodes

    @property
    def edges(self) -> tuple[Edge, ...]:
        return self.store.edges

    def get_node(self, node_id: str) -> Node | None:
        return self.store.get_node(node_id)

    # -------------------------------------------------------------------------
    # Store operations
    # -------------------------------------------------------------------------

    def add_node(self, node: Node) -> Node:
        return self.store.add_node(node)

    def remove_node(self, node_id: str) -> None:
        self.store.remove_node(node_id)

    def connect(self, source: str | Connection, target: str | None = None, **handles) -> Edge | None:
        return self.store.connect(source, target, **handles)

    def apply_node_changes(self, changes: Iterable[NodeChange | dict]) -> None:
        self.store.apply_node_changes(changes)

    def apply_edge_changes(self, changes: Iterable[EdgeChange | dict]) -> None:
        self.store.apply_edge_changes(changes)

    def update_node_data(self, node_id: str, patch: dict[str, Any]) -> Node | None:
        return self.store.update_node_data(node_id, patch)

    # -------------------------------------------------------------------------
    # Node creation shortcuts
    # -------------------------------------------------------------------------

    def add_media_node(self, media: MediaData, position: PositionLike) -> Node:
        """Create and insert a media node."""
        return self.store.add_node(self.factory.create_media_node(media, position))

    def add_generation_node(self, kind: NodeType | str, position: PositionLike) -> Node:
        """Create and insert a generate, edit or extend node."""
        return self.store.add_node(self.factory.create_generation_node(kind, position))

    def add_section_node(self, position: PositionLike) -> Node:
        """Create and insert a section node."""
        return self.store.add_node(self.factory.create_section_node(position))

    # -------------------------------------------------------------------------
    # Queries and jobs
    # -------------------------------------------------------------------------

    def resolve_inputs(self, node_id: str, predicate: NodePredicate | None = None) -> list[Node]:
        return self.resolver.resolve_inputs(node_id, predicate)

    def generate(self, node_id: str) -> Awaitable[JobResult]:
        """Request a generation job; inputs are fixed when this is called."""
        return self.controller.generate(node_id)
