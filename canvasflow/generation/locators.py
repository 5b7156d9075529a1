"""Conversion of local media locators into transportable data URIs."""

import asyncio
import base64
import mimetypes
from pathlib import Path
from typing import Protocol
from urllib.parse import unquote, urlparse

REMOTE_SCHEMES = frozenset({"http", "https", "data"})


class LocatorEncoder(Protocol):
    """Turns a media locator into one the generation service can fetch."""

    async def encode(self, locator: str) -> str: ...


def is_remote(locator: str) -> bool:
    """Check whether a locator is already reachable by the service."""
    return urlparse(locator).scheme.lower() in REMOTE_SCHEMES


def locator_to_path(locator: str) -> Path:
    """Resolve a local locator (file:// URI or plain path) to a path."""
    parsed = urlparse(locator)
    if parsed.scheme == "file":
        return Path(unquote(parsed.path))
    return Path(locator)


def to_data_uri(content: bytes, mime_type: str) -> str:
    """Encode bytes as a base64 data URI."""
    encoded = base64.b64encode(content).decode("ascii")
    return f"data:{mime_type};base64,{encoded}"


class DataUriEncoder:
    """Reads local files into data URIs and passes remote locators through."""

    default_mime_type = "application/octet-stream"

    async def encode(self, locator: str) -> str:
        """Encode a locator.

        Args:
            locator: A remote URL, data URI, file:// URI or filesystem path.

        Returns:
            The locator unchanged if remote, otherwise a data URI.

        Raises:
            OSError: If a local file cannot be read.
        """
        if is_remote(locator):
            return locator

        path = locator_to_path(locator)
        content = await asyncio.to_thread(path.read_bytes)
        mime_type, _ = mimetypes.guess_type(path.name)
        return to_data_uri(content, mime_type or self.default_mime_type)
