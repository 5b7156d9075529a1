"""GraphStore: the single source of truth for canvas nodes and edges."""

import logging
import uuid
from dataclasses import dataclass, field
from typing import Any, Iterable

from pydantic import TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from .errors import DuplicateIdError, InvalidPatchError
from .models import (
    Connection,
    Edge,
    EdgeChange,
    EdgeRemoveChange,
    EdgeSelectChange,
    Node,
    NodeChange,
    NodeDimensionsChange,
    NodePositionChange,
    NodeRemoveChange,
    NodeSelectChange,
)
from .node_types import DEFAULT_EDGE_TYPE

logger = logging.getLogger(__name__)

_node_changes = TypeAdapter(list[NodeChange])
_edge_changes = TypeAdapter(list[EdgeChange])


@dataclass(frozen=True)
class GraphSnapshot:
    """An immutable view of the graph at one point in time."""

    nodes: tuple[Node, ...] = ()
    edges: tuple[Edge, ...] = ()
    _index: dict[str, Node] = field(init=False, repr=False, compare=False)

    def __post_init__(self):
        object.__setattr__(self, "_index", {node.id: node for node in self.nodes})

    def get_node(self, node_id: str) -> Node | None:
        """Look up a node by id."""
        return self._index.get(node_id)

    def has_node(self, node_id: str) -> bool:
        return node_id in self._index


class GraphStore:
    """Owns the canvas nodes and edges.

    Every mutation replaces the node and edge tuples with new values, so a
    snapshot handed out earlier never changes underneath its holder. All
    mutations are synchronous and are expected to run on a single thread
    of control.
    """

    def __init__(self):
        """Initialize an empty store."""
        self._nodes: tuple[Node, ...] = ()
        self._edges: tuple[Edge, ...] = ()

    # -------------------------------------------------------------------------
    # Reads
    # -------------------------------------------------------------------------

    @property
    def nodes(self) -> tuple[Node, ...]:
        """All nodes in insertion order."""
        return self._nodes

    @property
    def edges(self) -> tuple[Edge, ...]:
        """All edges in insertion order."""
        return self._edges

    def snapshot(self) -> GraphSnapshot:
        """Capture the current nodes and edges."""
        return GraphSnapshot(self._nodes, self._edges)

    def get_node(self, node_id: str) -> Node | None:
        """Get a node by id."""
        for node in self._nodes:
            if node.id == node_id:
                return node
        return None

    def get_edge(self, edge_id: str) -> Edge | None:
        """Get an edge by id."""
        for edge in self._edges:
            if edge.id == edge_id:
                return edge
        return None

    def __contains__(self, node_id: object) -> bool:
        return any(node.id == node_id for node in self._nodes)

    def __len__(self) -> int:
        return len(self._nodes)

    # -------------------------------------------------------------------------
    # Structural mutations
    # -------------------------------------------------------------------------

    def add_node(self, node: Node) -> Node:
        """Insert a fully-formed node.

        Args:
            node: The node to insert.

        Returns:
            The inserted node.

        Raises:
            DuplicateIdError: If a node with the same id already exists.
        """
        if node.id in self:
            raise DuplicateIdError(node.id)
        self._nodes = self._nodes + (node,)
        logger.debug("Added %s node %s", node.type.value, node.id)
        return node

    def remove_node(self, node_id: str) -> None:
        """Remove a node and every edge that references it.

        Removing an unknown id is a no-op.
        """
        if node_id not in self:
            logger.debug("Ignoring removal of unknown node %s", node_id)
            return
        self._remove_nodes({node_id})

    def connect(
        self,
        source: str | Connection,
        target: str | None = None,
        *,
        source_handle: str | None = None,
        target_handle: str | None = None,
    ) -> Edge | None:
        """Append a new edge between two existing nodes.

        Parallel edges between the same pair are allowed; each one counts
        separately for connectivity queries.

        Args:
            source: The source node id, or a Connection.
            target: The target node id when source is an id.
            source_handle: Optional source handle name.
            target_handle: Optional target handle name.

        Returns:
            The new edge, or None if either endpoint does not exist.
        """
        if isinstance(source, Connection):
            connection = source
        else:
            if target is None:
                raise TypeError("connect() needs a target when source is a node id")
            connection = Connection(
                source=source,
                target=target,
                source_handle=source_handle,
                target_handle=target_handle,
            )

        if connection.source not in self or connection.target not in self:
            logger.debug(
                "Ignoring connection %s -> %s with unknown endpoint",
                connection.source,
                connection.target,
            )
            return None

        edge = Edge(
            id=uuid.uuid4().hex,
            source=connection.source,
            target=connection.target,
            type=DEFAULT_EDGE_TYPE,
            animated=True,
            source_handle=connection.source_handle,
            target_handle=connection.target_handle,
        )
        self._edges = self._edges + (edge,)
        return edge

    def apply_node_changes(self, changes: Iterable[NodeChange | dict]) -> None:
        """Fold an ordered batch of node deltas into the node list.

        Deltas referencing unknown ids are ignored; the rest apply together in
        a single replacement. Removals cascade to the node's edges.

        Args:
            changes: Position, dimensions, select or remove changes, as models
                or as plain mappings with a ``type`` key.
        """
        parsed = _node_changes.validate_python(list(changes))
        nodes = {node.id: node for node in self._nodes}
        removed: set[str] = set()

        for change in parsed:
            node = nodes.get(change.id)
            if node is None or change.id in removed:
                logger.debug("Ignoring %s change for unknown node %s", change.type, change.id)
                continue

            if isinstance(change, NodePositionChange):
                if change.position is not None:
                    nodes[change.id] = node.model_copy(update={"position": change.position})
            elif isinstance(change, NodeDimensionsChange):
                nodes[change.id] = node.model_copy(
                    update={"width": change.width, "height": change.height}
                )
            elif isinstance(change, NodeSelectChange):
                nodes[change.id] = node.model_copy(update={"selected": change.selected})
            elif isinstance(change, NodeRemoveChange):
                removed.add(change.id)

        self._nodes = tuple(nodes[node.id] for node in self._nodes if node.id not in removed)
        if removed:
            self._edges = self._without_edges_touching(removed)

    def apply_edge_changes(self, changes: Iterable[EdgeChange | dict]) -> None:
        """Fold an ordered batch of edge deltas into the edge list.

        Args:
            changes: Select or remove changes, as models or plain mappings.
        """
        parsed = _edge_changes.validate_python(list(changes))
        edges = {edge.id: edge for edge in self._edges}
        removed: set[str] = set()

        for change in parsed:
            edge = edges.get(change.id)
            if edge is None or change.id in removed:
                logger.debug("Ignoring %s change for unknown edge %s", change.type, change.id)
                continue

            if isinstance(change, EdgeSelectChange):
                edges[change.id] = edge.model_copy(update={"selected": change.selected})
            elif isinstance(change, EdgeRemoveChange):
                removed.add(change.id)

        self._edges = tuple(edges[edge.id] for edge in self._edges if edge.id not in removed)

    # -------------------------------------------------------------------------
    # Data patches
    # -------------------------------------------------------------------------

    def update_node_data(self, node_id: str, patch: dict[str, Any]) -> Node | None:
        """Shallow-merge a patch into a node's data.

        Keys missing from the patch keep their current values. Unknown ids are
        a no-op.

        Args:
            node_id: The node to patch.
            patch: Field names and new values.

        Returns:
            The updated node, or None if the id is unknown.

        Raises:
            InvalidPatchError: If the merged data fails validation.
        """
        node = self.get_node(node_id)
        if node is None:
            logger.debug("Ignoring data patch for unknown node %s", node_id)
            return None

        merged = {**node.data.model_dump(), **patch}
        try:
            data = type(node.data).model_validate(merged)
        except PydanticValidationError as e:
            errors = [
                {
                    "loc": ".".join(str(x) for x in err["loc"]),
                    "msg": err["msg"],
                    "type": err["type"],
                }
                for err in e.errors()
            ]
            raise InvalidPatchError(node_id, errors) from e

        updated = node.model_copy(update={"data": data})
        self._nodes = tuple(updated if n.id == node_id else n for n in self._nodes)
        return updated

    # -------------------------------------------------------------------------
    # Bulk replacement
    # -------------------------------------------------------------------------

    def set_nodes(self, nodes: Iterable[Node]) -> None:
        """Replace every node at once.

        Edges left without an endpoint are dropped.

        Raises:
            DuplicateIdError: If two nodes share an id.
        """
        new_nodes = tuple(nodes)
        seen: set[str] = set()
        for node in new_nodes:
            if node.id in seen:
                raise DuplicateIdError(node.id)
            seen.add(node.id)

        self._nodes = new_nodes
        self._edges = tuple(
            e for e in self._edges if e.source in seen and e.target in seen
        )

    def set_edges(self, edges: Iterable[Edge]) -> None:
        """Replace every edge at once.

        Edges whose endpoints do not exist are dropped.

        Raises:
            DuplicateIdError: If two edges share an id.
        """
        node_ids = {node.id for node in self._nodes}
        kept = []
        seen: set[str] = set()
        for edge in edges:
            if edge.id in seen:
                raise DuplicateIdError(edge.id, kind="edge")
            seen.add(edge.id)
            if edge.source in node_ids and edge.target in node_ids:
                kept.append(edge)
            else:
                logger.debug("Dropping dangling edge %s", edge.id)
        self._edges = tuple(kept)

    def clear(self) -> None:
        """Remove every node and edge."""
        self._nodes = ()
        self._edges = ()

    # -------------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------------

    def _remove_nodes(self, node_ids: set[str]) -> None:
        self._nodes = tuple(n for n in self._nodes if n.id not in node_ids)
        self._edges = self._without_edges_touching(node_ids)

    def _without_edges_touching(self, node_ids: set[str]) -> tuple[Edge, ...]:
        return tuple(
            e for e in self._edges if e.source not in node_ids and e.target not in node_ids
        )
