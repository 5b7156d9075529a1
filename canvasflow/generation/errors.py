"""Exception classes for generation jobs."""


class GenerationError(Exception):
    """Base exception for generation errors."""

    pass


class ValidationError(GenerationError):
    """Raised when a node's inputs or prompt are not ready for submission."""

    def __init__(self, message: str, node_id: str | None = None):
        self.node_id = node_id
        super().__init__(message)


class ServiceError(GenerationError):
    """Raised when the generation service fails or returns no result."""

    def __init__(
        self,
        message: str,
        node_id: str | None = None,
        status_code: int | None = None,
    ):
        self.node_id = node_id
        self.status_code = status_code
        super().__init__(message)


class NotGeneratableError(GenerationError):
    """Raised when generation is requested for an unknown or non-generation node."""

    def __init__(self, node_id: str, reason: str = "is not a generation node"):
        self.node_id = node_id
        super().__init__(f"Node '{node_id}' {reason}")


class JobInProgressError(GenerationError):
    """Raised when a node already has a generation job in flight."""

    def __init__(self, node_id: str):
        self.node_id = node_id
        super().__init__(f"Node '{node_id}' already has a generation job in flight")


class APIKeyMissingError(GenerationError):
    """Raised when no fal API key is configured."""

    def __init__(self, message: str = "No fal API key configured"):
        super().__init__(message)
