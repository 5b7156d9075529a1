"""Media ingestion: turns files and URLs into MediaData records."""

import mimetypes
import uuid
from pathlib import Path

from .graph.models import MediaData
from .graph.node_types import MediaKind

MAX_VIDEO_DURATION = 30.0


class MediaIngestionError(Exception):
    """Raised when a file cannot be ingested as canvas media."""

    def __init__(self, message: str, path: str | None = None):
        self.path = path
        super().__init__(message)


def media_kind_for(name: str) -> MediaKind | None:
    """Guess the media kind of a file from its name."""
    mime_type, _ = mimetypes.guess_type(name)
    if mime_type is None:
        return None
    if mime_type.startswith("image/"):
        return MediaKind.IMAGE
    if mime_type.startswith("video/"):
        return MediaKind.VIDEO
    return None


def _check_duration(kind: MediaKind, duration: float | None, source: str) -> None:
    if kind == MediaKind.VIDEO and duration is None:
        raise MediaIngestionError(
            f"Video duration is required to enforce the {MAX_VIDEO_DURATION:g} second limit",
            source,
        )
    if kind == MediaKind.VIDEO and duration > MAX_VIDEO_DURATION:
        raise MediaIngestionError(
            f"Video must be {MAX_VIDEO_DURATION:g} seconds or less, got {duration:g}",
            source,
        )
    if kind == MediaKind.IMAGE and duration is not None:
        raise MediaIngestionError("Images cannot have a duration", source)


def ingest_file(
    path: str | Path,
    duration: float | None = None,
    name: str | None = None,
) -> MediaData:
    """Ingest a local image or video file.

    The resulting locator is a file:// URI, which is local to this machine
    and gets encoded before it is sent to a generation service.

    Args:
        path: Path to the media file.
        duration: Video length in seconds. Required for videos.
        name: Display name. Defaults to the file name.

    Returns:
        The media record.

    Raises:
        MediaIngestionError: If the file is missing, not image or video, or a
            video without a duration or longer than the limit.
    """
    path = Path(path)

    if not path.exists():
        raise MediaIngestionError(f"File not found: {path}", str(path))

    if not path.is_file():
        raise MediaIngestionError(f"Not a file: {path}", str(path))

    kind = media_kind_for(path.name)
    if kind is None:
        raise MediaIngestionError(
            f"Unsupported media type: {path.name} is neither an image nor a video",
            str(path),
        )
    _check_duration(kind, duration, str(path))

    return MediaData(
        id=str(uuid.uuid4()),
        type=kind,
        url=path.resolve().as_uri(),
        name=name or path.name,
        duration=duration,
    )


def ingest_url(
    url: str,
    kind: MediaKind | str | None = None,
    duration: float | None = None,
    name: str | None = None,
) -> MediaData:
    """Register a remote image or video by URL.

    Args:
        url: The remote locator.
        kind: Media kind. Guessed from the URL path when omitted.
        duration: Video length in seconds. Required for videos.
        name: Display name. Defaults to the last path segment.

    Raises:
        MediaIngestionError: If the kind cannot be determined or the video has no
            duration or is longer than the limit.
    """
    last_segment = url.split("?", 1)[0].rstrip("/").rsplit("/", 1)[-1]
    media_kind = MediaKind(kind) if kind is not None else media_kind_for(last_segment)
    if media_kind is None:
        raise MediaIngestionError(f"Cannot tell whether {url} is an image or a video", url)
    _check_duration(media_kind, duration, url)

    return MediaData(
        id=str(uuid.uuid4()),
        type=media_kind,
        url=url,
        name=name or last_segment or url,
        duration=duration,
    )
