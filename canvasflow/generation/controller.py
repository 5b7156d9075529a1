"""GenerationController: the per-node generation job state machine."""

import asyncio
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Awaitable

from ..graph.resolver import ConnectivityResolver
from ..graph.store import GraphSnapshot, GraphStore
from .errors import JobInProgressError, NotGeneratableError, ServiceError, ValidationError
from .locators import DataUriEncoder, LocatorEncoder
from .requests import RequestPlan, extract_output_url, plan_request
from .service import GenerationService

logger = logging.getLogger(__name__)

CANCELLED_MESSAGE = "Generation cancelled"


class JobState(str, Enum):
    """Lifecycle of a node's generation job."""

    IDLE = "idle"
    VALIDATING = "validating"
    SUBMITTING = "submitting"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


@dataclass(frozen=True)
class JobResult:
    """Outcome of one generate call."""

    node_id: str
    state: JobState
    output_url: str | None = None
    error: str | None = None

    @property
    def succeeded(self) -> bool:
        return self.state == JobState.SUCCEEDED

    @property
    def submitted(self) -> bool:
        """Whether the job reached the generation service."""
        return self.state in (JobState.SUCCEEDED, JobState.FAILED)


class GenerationController:
    """Validates generation nodes, submits their jobs and records outcomes.

    Inputs are resolved from a snapshot taken when a job is requested, so
    rewiring the graph while a job is in flight does not affect it. A node
    can have at most one job in flight; further requests are rejected with
    JobInProgressError until it finishes. Validation and service failures
    never escape: they are written to the node's ``error`` field.
    """

    def __init__(
        self,
        store: GraphStore,
        service: GenerationService | None = None,
        resolver: ConnectivityResolver | None = None,
        encoder: LocatorEncoder | None = None,
    ):
        """Initialize the controller.

        Args:
            store: The store holding the nodes to generate.
            service: The external generation service. Jobs fail without one.
            resolver: Connectivity resolver. Defaults to one over the store.
            encoder: Locator encoder. Defaults to DataUriEncoder.
        """
        self._store = store
        self._service = service
        self._resolver = resolver or ConnectivityResolver(store)
        self._encoder = encoder or DataUriEncoder()
        self._states: dict[str, JobState] = {}
        self._in_flight: dict[str, RequestPlan] = {}

    def state_of(self, node_id: str) -> JobState:
        """Get the current job state of a node."""
        if node_id not in self._store:
            self._states.pop(node_id, None)
        return self._states.get(node_id, JobState.IDLE)

    def is_in_flight(self, node_id: str) -> bool:
        return node_id in self._in_flight

    def validate(self, node_id: str) -> ValidationError | None:
        """Dry-run validation without changing any state.

        Returns:
            The validation error, or None if the node is ready to generate.

        Raises:
            NotGeneratableError: If the node is unknown or not a generation node.
        """
        snapshot = self._store.snapshot()
        node = self._generation_node(node_id, snapshot)
        try:
            plan_request(node, self._resolver, snapshot)
        except ValidationError as e:
            return e
        return None

    def generate(self, node_id: str) -> Awaitable[JobResult]:
        """Request a generation job for a node.

        The graph is snapshotted, the node validated and ``is_generating``
        set before this returns; the awaitable it returns only performs the
        service call. Rewiring the graph before awaiting it does not change
        the request. The awaitable must be awaited for the job to finish.

        Raises:
            NotGeneratableError: If the node is unknown or not a generation node.
            JobInProgressError: If the node already has a job in flight.
        """
        return self._finish(self._begin(node_id))

    def start(self, node_id: str) -> "asyncio.Task[JobResult]":
        """Start a generation job as a task.

        Same as generate, but the service call is scheduled on the running
        event loop right away. Cancelling the task fails the job.

        Raises:
            NotGeneratableError: If the node is unknown or not a generation node.
            JobInProgressError: If the node already has a job in flight.
        """
        prepared = self._begin(node_id)
        task = asyncio.get_running_loop().create_task(self._finish(prepared))
        if isinstance(prepared, RequestPlan):
            task.add_done_callback(lambda t: self._on_task_done(prepared, t))
        return task

    # -------------------------------------------------------------------------
    # State machine
    # -------------------------------------------------------------------------

    def _generation_node(self, node_id: str, snapshot: GraphSnapshot):
        node = snapshot.get_node(node_id)
        if node is None:
            raise NotGeneratableError(node_id, "does not exist")
        if not node.is_generation:
            raise NotGeneratableError(node_id)
        return node

    def _record(self, node_id: str, state: JobState, patch: dict[str, Any]) -> None:
        # Nodes removed while their job ran keep no state behind
        if self._store.update_node_data(node_id, patch) is None:
            self._states.pop(node_id, None)
        else:
            self._states[node_id] = state

    def _begin(self, node_id: str) -> RequestPlan | JobResult:
        snapshot = self._store.snapshot()
        node = self._generation_node(node_id, snapshot)
        if node_id in self._in_flight:
            raise JobInProgressError(node_id)

        self._states[node_id] = JobState.VALIDATING
        try:
            plan = plan_request(node, self._resolver, snapshot)
        except ValidationError as e:
            logger.info("Node %s is not ready: %s", node_id, e)
            self._record(node_id, JobState.IDLE, {"error": str(e), "is_generating": False})
            return JobResult(node_id, JobState.IDLE, node.data.output_url, str(e))

        self._in_flight[node_id] = plan
        self._record(node_id, JobState.SUBMITTING, {"is_generating": True, "error": None})
        logger.info("Submitting %s job for node %s to %s", node.type.value, node_id, plan.model_id)
        return plan

    async def _finish(self, prepared: RequestPlan | JobResult) -> JobResult:
        if isinstance(prepared, JobResult):
            return prepared

        node_id = prepared.node_id
        try:
            if self._service is None:
                raise ServiceError("No generation service configured", node_id)
            arguments = await prepared.render(self._encoder)
            response = await self._service.submit(
                prepared.model_id,
                arguments,
                on_progress=lambda update: self._on_progress(node_id, update),
            )
            output_url = extract_output_url(response, node_id)
        except asyncio.CancelledError:
            self._abandon(prepared)
            raise
        except Exception as e:
            message = str(e) if isinstance(e, ServiceError) else f"Generation failed: {e}"
            logger.warning("Generation failed for node %s: %s", node_id, message)
            self._record(node_id, JobState.FAILED, {"is_generating": False, "error": message})
            node = self._store.get_node(node_id)
            previous = node.data.output_url if node is not None else None
            return JobResult(node_id, JobState.FAILED, previous, message)
        finally:
            self._in_flight.pop(node_id, None)

        self._record(
            node_id, JobState.SUCCEEDED, {"output_url": output_url, "is_generating": False}
        )
        logger.info("Node %s produced %s", node_id, output_url)
        return JobResult(node_id, JobState.SUCCEEDED, output_url)

    def _abandon(self, plan: RequestPlan) -> None:
        logger.warning("Generation cancelled for node %s", plan.node_id)
        self._in_flight.pop(plan.node_id, None)
        self._record(
            plan.node_id, JobState.FAILED, {"is_generating": False, "error": CANCELLED_MESSAGE}
        )

    def _on_task_done(self, plan: RequestPlan, task: asyncio.Task) -> None:
        # A task cancelled before its first step never entered _finish
        if task.cancelled() and self._in_flight.get(plan.node_id) is plan:
            self._abandon(plan)

    def _on_progress(self, node_id: str, update: Any) -> None:
        logger.debug("Progress for node %s: %s", node_id, type(update).__name__)
