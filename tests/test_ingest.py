"""Tests for media ingestion."""

import pytest

from canvasflow.graph.node_types import MediaKind
from canvasflow.ingest import MediaIngestionError, ingest_file, ingest_url, media_kind_for


@pytest.mark.parametrize(
    "name,kind",
    [
        ("frame.png", MediaKind.IMAGE),
        ("frame.JPG", MediaKind.IMAGE),
        ("clip.mp4", MediaKind.VIDEO),
        ("notes.txt", None),
        ("noextension", None),
    ],
)
def test_media_kind_for(name, kind):
    assert media_kind_for(name) == kind


class TestIngestFile:
    def test_image(self, tmp_path):
        path = tmp_path / "frame.png"
        path.write_bytes(b"png")

        media = ingest_file(path)

        assert media.type == MediaKind.IMAGE
        assert media.name == "frame.png"
        assert media.url == path.resolve().as_uri()
        assert media.duration is None

    def test_video_with_duration(self, tmp_path):
        path = tmp_path / "clip.mp4"
        path.write_bytes(b"mp4")

        media = ingest_file(path, duration=30.0, name="Clip")

        assert media.type == MediaKind.VIDEO
        assert media.duration == 30.0
        assert media.name == "Clip"

    def test_video_too_long(self, tmp_path):
        path = tmp_path / "clip.mp4"
        path.write_bytes(b"mp4")

        with pytest.raises(MediaIngestionError, match="30 seconds or less, got 31.5"):
            ingest_file(path, duration=31.5)

    def test_video_without_duration(self, tmp_path):
        path = tmp_path / "clip.mp4"
        path.write_bytes(b"mp4")

        with pytest.raises(MediaIngestionError, match="Video duration is required"):
            ingest_file(path)

    def test_image_with_duration(self, tmp_path):
        path = tmp_path / "frame.png"
        path.write_bytes(b"png")

        with pytest.raises(MediaIngestionError, match="Images cannot have a duration"):
            ingest_file(path, duration=2.0)

    def test_missing_file(self, tmp_path):
        with pytest.raises(MediaIngestionError, match="File not found") as exc_info:
            ingest_file(tmp_path / "gone.png")
        assert exc_info.value.path.endswith("gone.png")

    def test_directory(self, tmp_path):
        with pytest.raises(MediaIngestionError, match="Not a file"):
            ingest_file(tmp_path)

    def test_unsupported_type(self, tmp_path):
        path = tmp_path / "notes.txt"
        path.write_text("hello")

        with pytest.raises(MediaIngestionError, match="Unsupported media type"):
            ingest_file(path)

    def test_ids_are_unique(self, tmp_path):
        path = tmp_path / "frame.png"
        path.write_bytes(b"png")

        assert ingest_file(path).id != ingest_file(path).id


class TestIngestUrl:
    def test_kind_guessed_from_path(self):
        media = ingest_url("https://media.example.com/shots/clip.mp4?sig=abc", duration=8)

        assert media.type == MediaKind.VIDEO
        assert media.name == "clip.mp4"
        assert media.url == "https://media.example.com/shots/clip.mp4?sig=abc"

    def test_explicit_kind(self):
        media = ingest_url("https://media.example.com/render/42", kind="image")

        assert media.type == MediaKind.IMAGE
        assert media.name == "42"

    def test_unknown_kind(self):
        with pytest.raises(MediaIngestionError, match="image or a video"):
            ingest_url("https://media.example.com/render/42")

    def test_long_video_rejected(self):
        with pytest.raises(MediaIngestionError):
            ingest_url("https://media.example.com/clip.mp4", duration=45)

    def test_video_without_duration_rejected(self):
        with pytest.raises(MediaIngestionError, match="duration is required") as exc_info:
            ingest_url("https://media.example.com/clip.mp4")
        assert exc_info.value.path == "https://media.example.com/clip.mp4"
