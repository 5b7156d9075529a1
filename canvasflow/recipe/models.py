"""Pydantic models for canvas recipes."""

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, model_validator

from ..graph.models import AspectRatio, Duration, Position
from ..graph.node_types import MediaKind

CONNECTION_ARROW = "->"
REMOTE_PREFIXES = ("http://", "https://")


class MediaEntry(BaseModel):
    """A media asset to ingest, from a local path or a remote URL."""

    name: str = ""  # Will be set from the key
    path: str | None = None
    url: str | None = None
    kind: MediaKind | None = None
    duration: float | None = None
    position: Position | None = None

    @model_validator(mode="after")
    def check_source(self) -> "MediaEntry":
        """Exactly one of path and url must be given."""
        if (self.path is None) == (self.url is None):
            raise ValueError(f"Media '{self.name}' needs exactly one of 'path' or 'url'")
        return self


class GenerationEntry(BaseModel):
    """A generate, edit or extend node."""

    name: str = ""  # Will be set from the key
    kind: Literal["generate", "edit", "extend"]
    prompt: str = ""
    model: str | None = None
    duration: Duration | None = None
    aspect_ratio: AspectRatio | None = None
    keep_audio: bool | None = None
    position: Position | None = None

    @model_validator(mode="before")
    @classmethod
    def normalize_duration(cls, data: dict) -> dict:
        """Accept durations written as bare numbers."""
        if isinstance(data, dict) and isinstance(data.get("duration"), int):
            data["duration"] = str(data["duration"])
        return data

    def overrides(self) -> dict:
        """Data fields set explicitly in the recipe."""
        fields = {
            "prompt": self.prompt,
            "model": self.model,
            "duration": self.duration,
            "aspect_ratio": self.aspect_ratio,
            "keep_audio": self.keep_audio,
        }
        return {key: value for key, value in fields.items() if value is not None}


class SectionEntry(BaseModel):
    """A visual grouping container."""

    label: str = "New Section"
    color: str | None = Field(default=None, pattern=r"^#[0-9a-fA-F]{6}$")
    position: Position | None = None


class ConnectionEntry(BaseModel):
    """A link from one named entry to another."""

    model_config = ConfigDict(populate_by_name=True)

    source: str = Field(alias="from")
    target: str = Field(alias="to")


def _media_source(locator: str) -> dict:
    """Map a bare locator string to a url or path field."""
    if locator.startswith(REMOTE_PREFIXES):
        return {"url": locator}
    return {"path": locator}


def _named_entries(entries: object) -> object:
    """Turn a name -> entry mapping into a list, setting names from keys."""
    if not isinstance(entries, dict):
        return entries
    normalized = []
    for name, entry in entries.items():
        if entry is None:
            entry = {}
        if isinstance(entry, dict):
            entry = {**entry, "name": name}
        normalized.append(entry)
    return normalized


class Recipe(BaseModel):
    """Root model for a canvas recipe file."""

    media: list[MediaEntry] = Field(default_factory=list)
    nodes: list[GenerationEntry] = Field(default_factory=list)
    sections: list[SectionEntry] = Field(default_factory=list)
    connections: list[ConnectionEntry] = Field(default_factory=list)

    @model_validator(mode="before")
    @classmethod
    def normalize_recipe(cls, data: dict) -> dict:
        """Normalize shorthand media, node and connection syntax."""
        if not isinstance(data, dict):
            return data

        media = data.get("media") or []
        if isinstance(media, dict):
            # sunrise: frames/sunrise.png or sunrise: https://.../sunrise.png
            media = {
                name: _media_source(entry) if isinstance(entry, str) else entry
                for name, entry in media.items()
            }
        data["media"] = _named_entries(media)
        data["nodes"] = _named_entries(data.get("nodes") or [])

        # "clip.mp4" -> {name: clip, path: clip.mp4}
        media = data["media"]
        if isinstance(media, list):
            data["media"] = [
                {"name": entry.rsplit("/", 1)[-1].split(".", 1)[0], **_media_source(entry)}
                if isinstance(entry, str)
                else entry
                for entry in media
            ]

        # "sunrise -> intro" -> {from: sunrise, to: intro}
        connections = data.get("connections") or []
        if isinstance(connections, list):
            normalized = []
            for conn in connections:
                if isinstance(conn, str) and CONNECTION_ARROW in conn:
                    source, target = conn.split(CONNECTION_ARROW, 1)
                    normalized.append({"from": source.strip(), "to": target.strip()})
                else:
                    normalized.append(conn)
            data["connections"] = normalized

        return data

    @model_validator(mode="after")
    def check_names(self) -> "Recipe":
        """Names must be unique and connections must reference them."""
        seen: set[str] = set()
        for name in [m.name for m in self.media] + [n.name for n in self.nodes]:
            if not name:
                raise ValueError("Every media entry and node needs a name")
            if name in seen:
                raise ValueError(f"Duplicate name '{name}'")
            seen.add(name)

        for conn in self.connections:
            for name in (conn.source, conn.target):
                if name not in seen:
                    raise ValueError(f"Connection references undefined name '{name}'")
        return self

    def get_node(self, name: str) -> GenerationEntry | None:
        """Get a generation node entry by name."""
        for node in self.nodes:
            if node.name == name:
                return node
        return None
