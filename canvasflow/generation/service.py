"""Generation service interface and its fal.ai implementation."""

import logging
import os
from typing import TYPE_CHECKING, Any, Callable, Protocol

from .errors import APIKeyMissingError, ServiceError

if TYPE_CHECKING:
    from fal_client import AsyncClient

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[Any], None]


class GenerationService(Protocol):
    """An external service that turns request arguments into media."""

    async def submit(
        self,
        model_id: str,
        arguments: dict[str, Any],
        on_progress: ProgressCallback | None = None,
    ) -> dict[str, Any]: ...


class FalGenerationService:
    """Submits generation requests to fal.ai and waits for the result."""

    def __init__(self, api_key: str | None = None):
        """Initialize the service.

        Args:
            api_key: fal API key. If not provided, uses FAL_KEY env var.

        Raises:
            APIKeyMissingError: If no API key is configured.
        """
        self.api_key = api_key or os.environ.get("FAL_KEY")
        if not self.api_key:
            raise APIKeyMissingError(
                "No fal API key configured. "
                "Set FAL_KEY environment variable or pass api_key parameter."
            )
        self._client: "AsyncClient | None" = None

    @property
    def client(self) -> "AsyncClient":
        """Lazy-load the fal client."""
        if self._client is None:
            try:
                from fal_client import AsyncClient
            except ImportError:
                raise ServiceError(
                    "The fal-client package is not installed. "
                    "Install it with: pip install canvasflow[fal]"
                )
            self._client = AsyncClient(key=self.api_key)
        return self._client

    async def submit(
        self,
        model_id: str,
        arguments: dict[str, Any],
        on_progress: ProgressCallback | None = None,
    ) -> dict[str, Any]:
        """Run a model through the fal queue and return its output.

        Args:
            model_id: The fal application id, e.g. fal-ai/kling-video/o1/image-to-video.
            arguments: Model input arguments.
            on_progress: Called with each queue status update.

        Returns:
            The model output mapping.

        Raises:
            ServiceError: If the request fails.
        """
        client = self.client

        def on_queue_update(update: Any) -> None:
            for entry in getattr(update, "logs", None) or []:
                logger.info("[%s] %s", model_id, entry.get("message", entry))
            if on_progress is not None:
                on_progress(update)

        try:
            return await client.subscribe(
                model_id,
                arguments=arguments,
                with_logs=True,
                on_queue_update=on_queue_update,
            )
        except Exception as e:
            response = getattr(e, "response", None)
            status_code = getattr(response, "status_code", None)
            raise ServiceError(f"Generation request failed: {e}", status_code=status_code) from e
