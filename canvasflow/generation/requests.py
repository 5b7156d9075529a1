"""Per-kind input validation and request payloads for generation nodes."""

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, Callable

from ..graph.models import GenerationData, Node
from ..graph.node_types import NodeType
from ..graph.resolver import ConnectivityResolver
from ..graph.store import GraphSnapshot
from .errors import NotGeneratableError, ServiceError, ValidationError
from .locators import LocatorEncoder

logger = logging.getLogger(__name__)

MAX_IMAGE_REFERENCES = 4
DEFAULT_DURATION = "5"
DEFAULT_ASPECT_RATIO = "auto"
NO_RESULT_MESSAGE = "no result in response"


@dataclass
class RequestPlan:
    """A validated request whose media locators are not yet encoded."""

    node_id: str
    model_id: str
    arguments: dict[str, Any] = field(default_factory=dict)
    locators: dict[str, str | list[str]] = field(default_factory=dict)

    async def render(self, encoder: LocatorEncoder) -> dict[str, Any]:
        """Build the final arguments with every locator encoded."""
        arguments = dict(self.arguments)
        for key, value in self.locators.items():
            if isinstance(value, list):
                arguments[key] = [await encoder.encode(v) for v in value]
            else:
                arguments[key] = await encoder.encode(value)
        return arguments


def _require_prompt(node_id: str, data: GenerationData) -> None:
    if not data.prompt.strip():
        raise ValidationError("Enter a prompt", node_id)


def _image_references(
    node: Node, resolver: ConnectivityResolver, snapshot: GraphSnapshot
) -> list[str]:
    images = resolver.connected_images(node.id, snapshot=snapshot)
    if len(images) > MAX_IMAGE_REFERENCES:
        logger.warning(
            "Node %s has %d image references; only the first %d are used",
            node.id,
            len(images),
            MAX_IMAGE_REFERENCES,
        )
    return [image.data.url for image in images[:MAX_IMAGE_REFERENCES]]


def _keep_audio(data: GenerationData) -> bool:
    return True if data.keep_audio is None else data.keep_audio


def plan_generate(
    node: Node, resolver: ConnectivityResolver, snapshot: GraphSnapshot
) -> RequestPlan:
    """Image to video: first image is the start frame, second the end frame."""
    data = node.data
    images = resolver.connected_images(node.id, snapshot=snapshot)
    if not images:
        raise ValidationError("Connect a start frame image", node.id)
    _require_prompt(node.id, data)

    plan = RequestPlan(
        node_id=node.id,
        model_id=data.model,
        arguments={"prompt": data.prompt, "duration": data.duration or DEFAULT_DURATION},
        locators={"start_image_url": images[0].data.url},
    )
    if len(images) > 1:
        plan.locators["end_image_url"] = images[1].data.url
    return plan


def plan_edit(
    node: Node, resolver: ConnectivityResolver, snapshot: GraphSnapshot
) -> RequestPlan:
    """Video to video edit with optional image references."""
    data = node.data
    videos = resolver.connected_videos(node.id, snapshot=snapshot)
    if not videos:
        raise ValidationError("Connect a video to edit", node.id)
    _require_prompt(node.id, data)

    plan = RequestPlan(
        node_id=node.id,
        model_id=data.model,
        arguments={"prompt": data.prompt, "keep_audio": _keep_audio(data)},
        locators={"video_url": videos[0].data.url},
    )
    references = _image_references(node, resolver, snapshot)
    if references:
        plan.locators["image_urls"] = references
    return plan


def plan_extend(
    node: Node, resolver: ConnectivityResolver, snapshot: GraphSnapshot
) -> RequestPlan:
    """Extend a reference video, optionally guided by images."""
    data = node.data
    videos = resolver.connected_videos(node.id, snapshot=snapshot)
    if not videos:
        raise ValidationError("Connect a reference video", node.id)
    _require_prompt(node.id, data)

    plan = RequestPlan(
        node_id=node.id,
        model_id=data.model,
        arguments={
            "prompt": data.prompt,
            "keep_audio": _keep_audio(data),
            "duration": data.duration or DEFAULT_DURATION,
            "aspect_ratio": data.aspect_ratio or DEFAULT_ASPECT_RATIO,
        },
        locators={"video_url": videos[0].data.url},
    )
    references = _image_references(node, resolver, snapshot)
    if references:
        plan.locators["image_urls"] = references
    return plan


PLANNERS: dict[NodeType, Callable[[Node, ConnectivityResolver, GraphSnapshot], RequestPlan]] = {
    NodeType.GENERATE: plan_generate,
    NodeType.EDIT: plan_edit,
    NodeType.EXTEND: plan_extend,
}


def plan_request(
    node: Node, resolver: ConnectivityResolver, snapshot: GraphSnapshot
) -> RequestPlan:
    """Validate a generation node against a snapshot and plan its request.

    Raises:
        ValidationError: If required inputs or the prompt are missing.
        NotGeneratableError: If the node is not a generation node.
    """
    planner = PLANNERS.get(node.type)
    if planner is None:
        raise NotGeneratableError(node.id)
    return planner(node, resolver, snapshot)


def extract_output_url(response: Any, node_id: str | None = None) -> str:
    """Pull the produced video locator out of a service response.

    Raises:
        ServiceError: If the response reports an error or has no video url.
    """
    if not isinstance(response, Mapping):
        raise ServiceError(NO_RESULT_MESSAGE, node_id)

    if response.get("error"):
        raise ServiceError(str(response["error"]), node_id)

    video = response.get("video")
    url = video.get("url") if isinstance(video, Mapping) else None
    if not isinstance(url, str) or not url:
        raise ServiceError(NO_RESULT_MESSAGE, node_id)
    return url
