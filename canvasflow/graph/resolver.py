"""ConnectivityResolver: derives a node's inputs from the edge set."""

from .models import Node
from .predicates import NodePredicate, is_image, is_media, is_video
from .store import GraphSnapshot, GraphStore


class ConnectivityResolver:
    """Read-only queries over a GraphStore's edges.

    Inputs are never stored on nodes; they are computed here on demand so
    they always agree with the current topology. Only direct (one hop)
    connections are considered.
    """

    def __init__(self, store: GraphStore):
        """Initialize the resolver.

        Args:
            store: The store to query when no snapshot is given.
        """
        self._store = store

    def resolve_inputs(
        self,
        target_id: str,
        predicate: NodePredicate | None = None,
        *,
        snapshot: GraphSnapshot | None = None,
    ) -> list[Node]:
        """Get the nodes with an edge into a target.

        Sources are returned in edge insertion order, so for a node taking a
        start and an end frame the first connected source is the start frame.
        A source connected by several parallel edges appears once per edge.

        Args:
            target_id: The node whose inputs to resolve.
            predicate: Optional filter applied to the source nodes.
            snapshot: Graph state to query instead of the live store.

        Returns:
            The matching source nodes, possibly empty.
        """
        if snapshot is None:
            snapshot = self._store.snapshot()

        inputs = []
        for edge in snapshot.edges:
            if edge.target != target_id:
                continue
            source = snapshot.get_node(edge.source)
            if source is None:
                continue
            if predicate is None or predicate(source):
                inputs.append(source)
        return inputs

    def downstream(
        self,
        source_id: str,
        predicate: NodePredicate | None = None,
        *,
        snapshot: GraphSnapshot | None = None,
    ) -> list[Node]:
        """Get the nodes a source feeds into, in edge insertion order."""
        if snapshot is None:
            snapshot = self._store.snapshot()

        outputs = []
        for edge in snapshot.edges:
            if edge.source != source_id:
                continue
            target = snapshot.get_node(edge.target)
            if target is not None and (predicate is None or predicate(target)):
                outputs.append(target)
        return outputs

    def connected_media(self, node_id: str, **kwargs) -> list[Node]:
        """Get media nodes connected into a node."""
        return self.resolve_inputs(node_id, is_media, **kwargs)

    def connected_images(self, node_id: str, **kwargs) -> list[Node]:
        """Get image media nodes connected into a node."""
        return self.resolve_inputs(node_id, is_image, **kwargs)

    def connected_videos(self, node_id: str, **kwargs) -> list[Node]:
        """Get video media nodes connected into a node."""
        return self.resolve_inputs(node_id, is_video, **kwargs)
