"""Pydantic models for canvas nodes, edges and change batches."""

from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, model_validator

from .node_types import DEFAULT_EDGE_TYPE, MediaKind, NodeType

Duration = Literal["5", "10"]
AspectRatio = Literal["auto", "16:9", "9:16", "1:1"]


class Position(BaseModel):
    """A point in canvas coordinates."""

    model_config = ConfigDict(frozen=True)

    x: float = 0.0
    y: float = 0.0


def as_position(value: "Position | tuple[float, float] | dict") -> Position:
    """Coerce a tuple, dict or Position into a Position."""
    if isinstance(value, Position):
        return value
    if isinstance(value, (tuple, list)):
        x, y = value
        return Position(x=x, y=y)
    return Position.model_validate(value)


# -----------------------------------------------------------------------------
# Node data variants
# -----------------------------------------------------------------------------


class MediaData(BaseModel):
    """An image or video asset placed on the canvas."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    id: str
    type: MediaKind
    url: str
    name: str
    duration: float | None = None

    @model_validator(mode="after")
    def check_duration(self) -> "MediaData":
        """Only videos carry a duration."""
        if self.duration is not None and self.type != MediaKind.VIDEO:
            raise ValueError("Only video media can have a duration")
        return self


class GenerationData(BaseModel):
    """Payload of generate, edit and extend nodes."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    label: str
    prompt: str = ""
    is_generating: bool = False
    output_url: str | None = None
    model: str
    keep_audio: bool | None = None
    duration: Duration | None = None
    aspect_ratio: AspectRatio | None = None
    error: str | None = None


class SectionData(BaseModel):
    """A visual grouping container."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    label: str
    color: str = Field(pattern=r"^#[0-9a-fA-F]{6}$")


NodeData = MediaData | GenerationData | SectionData

DATA_TYPES: dict[NodeType, type[BaseModel]] = {
    NodeType.MEDIA: MediaData,
    NodeType.GENERATE: GenerationData,
    NodeType.EDIT: GenerationData,
    NodeType.EXTEND: GenerationData,
    NodeType.SECTION: SectionData,
}


# -----------------------------------------------------------------------------
# Nodes and edges
# -----------------------------------------------------------------------------


class Node(BaseModel):
    """A vertex on the canvas."""

    model_config = ConfigDict(frozen=True)

    id: str
    type: NodeType
    position: Position = Field(default_factory=Position)
    data: NodeData
    width: float | None = None
    height: float | None = None
    z_index: int | None = None
    selected: bool = False

    @model_validator(mode="before")
    @classmethod
    def coerce_data(cls, data: Any) -> Any:
        """Parse a raw data mapping into the variant named by the type tag."""
        if not isinstance(data, dict):
            return data

        raw = data.get("data")
        if not isinstance(raw, dict):
            return data

        try:
            node_type = NodeType(data.get("type"))
        except ValueError:
            return data

        return {**data, "data": DATA_TYPES[node_type].model_validate(raw)}

    @model_validator(mode="after")
    def check_data_variant(self) -> "Node":
        """Reject a payload that belongs to another node type."""
        expected = DATA_TYPES[self.type]
        if not isinstance(self.data, expected):
            raise ValueError(
                f"'{self.type.value}' nodes need {expected.__name__}, "
                f"got {type(self.data).__name__}"
            )
        return self

    @property
    def is_generation(self) -> bool:
        """Whether this node runs generation jobs."""
        return self.type.is_generation


class Connection(BaseModel):
    """A proposed link between two nodes, as reported by the canvas."""

    model_config = ConfigDict(frozen=True)

    source: str
    target: str
    source_handle: str | None = None
    target_handle: str | None = None


class Edge(BaseModel):
    """A directed link from one node's output to another node's input."""

    model_config = ConfigDict(frozen=True)

    id: str
    source: str
    target: str
    type: str = DEFAULT_EDGE_TYPE
    animated: bool = True
    source_handle: str | None = None
    target_handle: str | None = None
    selected: bool = False


# -----------------------------------------------------------------------------
# Change batches
# -----------------------------------------------------------------------------


class NodePositionChange(BaseModel):
    """A node was dragged."""

    type: Literal["position"] = "position"
    id: str
    position: Position | None = None
    dragging: bool | None = None


class NodeDimensionsChange(BaseModel):
    """A node was resized."""

    type: Literal["dimensions"] = "dimensions"
    id: str
    width: float
    height: float


class NodeSelectChange(BaseModel):
    type: Literal["select"] = "select"
    id: str
    selected: bool


class NodeRemoveChange(BaseModel):
    type: Literal["remove"] = "remove"
    id: str


NodeChange = Annotated[
    Union[NodePositionChange, NodeDimensionsChange, NodeSelectChange, NodeRemoveChange],
    Field(discriminator="type"),
]


class EdgeSelectChange(BaseModel):
    type: Literal["select"] = "select"
    id: str
    selected: bool


class EdgeRemoveChange(BaseModel):
    type: Literal["remove"] = "remove"
    id: str


EdgeChange = Annotated[
    Union[EdgeSelectChange, EdgeRemoveChange],
    Field(discriminator="type"),
]
