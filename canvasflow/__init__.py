"""canvasflow: a node graph of media assets and video generation jobs."""

from .canvas import Canvas
from .generation import GenerationController, JobResult, JobState
from .graph import ConnectivityResolver, GraphStore, NodeFactory, NodeType

__version__ = "0.1.0"

__all__ = [
    "Canvas",
    "GraphStore",
    "ConnectivityResolver",
    "NodeFactory",
    "NodeType",
    "GenerationController",
    "JobResult",
    "JobState",
]
