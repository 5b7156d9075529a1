"""Shared fixtures for tests."""

import asyncio
import random
from types import SimpleNamespace
from unittest.mock import AsyncMock

import pytest

from canvasflow.canvas import Canvas
from canvasflow.graph.factory import NodeFactory
from canvasflow.graph.models import MediaData
from canvasflow.graph.node_types import MediaKind
from canvasflow.graph.store import GraphStore

OUTPUT_URL = "https://x/out.mp4"


class StubService:
    """Generation service double that records submissions."""

    def __init__(self, response=None, error: Exception | None = None):
        self.response = response if response is not None else {"video": {"url": OUTPUT_URL}}
        self.error = error
        self.calls: list[tuple[str, dict]] = []

    async def submit(self, model_id, arguments, on_progress=None):
        self.calls.append((model_id, arguments))
        if on_progress is not None:
            on_progress("IN_PROGRESS")
        if self.error is not None:
            raise self.error
        return self.response


class GatedService(StubService):
    """A StubService whose submissions wait until released."""

    def __init__(self, response=None, error: Exception | None = None):
        super().__init__(response, error)
        self.release = asyncio.Event()

    async def submit(self, model_id, arguments, on_progress=None):
        self.calls.append((model_id, arguments))
        await self.release.wait()
        if self.error is not None:
            raise self.error
        return self.response


def _make_media(kind: MediaKind = MediaKind.IMAGE, name: str = "frame.png", **kwargs) -> MediaData:
    """Build a remote media record."""
    return MediaData(
        id=kwargs.pop("id", f"media-{name}"),
        type=kind,
        url=kwargs.pop("url", f"https://media.example.com/{name}"),
        name=name,
        **kwargs,
    )


@pytest.fixture
def store() -> GraphStore:
    return GraphStore()


@pytest.fixture
def factory() -> NodeFactory:
    return NodeFactory(rng=random.Random(7))


@pytest.fixture
def image_media() -> MediaData:
    return _make_media(MediaKind.IMAGE, "sunrise.png")


@pytest.fixture
def video_media() -> MediaData:
    return _make_media(MediaKind.VIDEO, "clip.mp4", duration=12.0)


@pytest.fixture
def service() -> StubService:
    return StubService()


@pytest.fixture
def canvas(service, factory) -> Canvas:
    return Canvas(service=service, factory=factory)


@pytest.fixture
def recipe_yaml() -> str:
    """Return a recipe with one image feeding one generate node."""
    return """
media:
  sunrise:
    url: https://media.example.com/sunrise.png

nodes:
  intro:
    kind: generate
    prompt: a sunrise
    duration: 10

connections:
  - sunrise -> intro
"""


@pytest.fixture
def make_media():
    """Return a builder for remote media records."""
    return _make_media


@pytest.fixture
def gated_service() -> GatedService:
    return GatedService()


class FakeAsyncClient:
    """Stands in for fal_client.AsyncClient."""

    instances: list["FakeAsyncClient"] = []
    result: dict = {"video": {"url": OUTPUT_URL}}

    def __init__(self, key=None):
        self.key = key
        self.subscribe = AsyncMock(side_effect=self._subscribe)
        self.updates = [SimpleNamespace(logs=[{"message": "rendering"}])]
        FakeAsyncClient.instances.append(self)

    async def _subscribe(self, application, arguments=None, with_logs=False, on_queue_update=None):
        for update in self.updates:
            on_queue_update(update)
        return self.result


@pytest.fixture
def fake_fal(monkeypatch):
    """Replace the fal client with FakeAsyncClient and return the class."""
    monkeypatch.setattr(FakeAsyncClient, "instances", [])
    monkeypatch.setattr(FakeAsyncClient, "result", {"video": {"url": OUTPUT_URL}})
    monkeypatch.setattr("fal_client.AsyncClient", FakeAsyncClient)
    return FakeAsyncClient
