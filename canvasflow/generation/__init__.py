"""Generation jobs: validation, request building and the external service."""

from .controller import GenerationController, JobResult, JobState
from .errors import (
    APIKeyMissingError,
    GenerationError,
    JobInProgressError,
    NotGeneratableError,
    ServiceError,
    ValidationError,
)
from .locators import DataUriEncoder, LocatorEncoder
from .requests import MAX_IMAGE_REFERENCES, RequestPlan, plan_request
from .service import FalGenerationService, GenerationService

__all__ = [
    # Controller
    "GenerationController",
    "JobResult",
    "JobState",
    # Requests
    "RequestPlan",
    "plan_request",
    "MAX_IMAGE_REFERENCES",
    # External I/O
    "GenerationService",
    "FalGenerationService",
    "LocatorEncoder",
    "DataUriEncoder",
    # Errors
    "GenerationError",
    "ValidationError",
    "ServiceError",
    "NotGeneratableError",
    "JobInProgressError",
    "APIKeyMissingError",
]
