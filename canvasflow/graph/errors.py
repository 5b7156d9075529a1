"""Graph store exceptions."""


class GraphError(Exception):
    """Base exception for graph store errors."""

    pass


class DuplicateIdError(GraphError):
    """Raised when inserting a node or edge whose id already exists."""

    def __init__(self, item_id: str, kind: str = "node"):
        self.item_id = item_id
        self.kind = kind
        super().__init__(f"A {kind} with id '{item_id}' already exists")


class InvalidPatchError(GraphError):
    """Raised when a data patch fails validation for the node's data type."""

    def __init__(self, node_id: str, errors: list[dict] | None = None):
        self.node_id = node_id
        self.errors = errors or []
        super().__init__(
            f"Invalid data patch for node '{node_id}' with {len(self.errors)} error(s)"
        )
