"""Per-request orchestration of the script generation state machine."""

import asyncio
from typing import Optional

from loguru import logger

from ..agents.base import ScriptAgents
from ..config import DEFAULT_REJECTION_MESSAGE, AgentSettings
from ..models.workflow import (
    Completed,
    Failed,
    Rejected,
    WorkflowContext,
    WorkflowEvent,
    WorkflowResult,
    WorkflowState,
)
from .engine import StateMachine, StateMachineFactory, StateObserver
from .errors import MissingVariableError, WorkflowError, WorkflowTimeoutError
from .handlers import StepHandlers
from .transitions import TRANSITION_TABLE

DEFAULT_TIMEOUT_SECONDS = 30.0


class ResultSlot:
    """Holds the single result of a run; later resolutions are ignored."""

    def __init__(self) -> None:
        self._future: asyncio.Future = asyncio.get_running_loop().create_future()

    @property
    def resolved(self) -> bool:
        return self._future.done()

    def resolve(self, result: WorkflowResult) -> bool:
        """Store ``result`` unless a result is already present.

        Returns:
            True if this call resolved the slot
        """
        if self._future.done():
            logger.debug(f"Ignoring late result: {result.outcome.value}")
            return False
        self._future.set_result(result)
        return True

    async def wait(self, timeout: float) -> WorkflowResult:
        """Wait for the result; raises asyncio.TimeoutError on expiry."""
        return await asyncio.wait_for(asyncio.shield(self._future), timeout=timeout)

    def result(self) -> WorkflowResult:
        return self._future.result()


class WorkflowOrchestrator:
    """Runs one isolated state machine per request with a bounded wait."""

    def __init__(
        self,
        factory: StateMachineFactory,
        timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
        rejection_message: str = DEFAULT_REJECTION_MESSAGE,
    ) -> None:
        """Initialize orchestrator with a machine factory and run policy."""
        self.factory = factory
        self.timeout_seconds = timeout_seconds
        self.rejection_message = rejection_message

    async def run(self, raw_input: str) -> WorkflowResult:
        """
        Drive one request through the workflow.

        Returns:
            Completed with the verified script, Rejected with the rejection
            message, or Failed with the error that aborted the run
        """
        if not raw_input or not raw_input.strip():
            raise ValueError("Requirements must be a non-empty string")

        machine = self.factory.create(WorkflowContext(requirements=raw_input))
        slot = ResultSlot()
        observer = self._terminal_observer(machine, slot)
        machine.add_observer(observer)
        logger.info(f"Starting workflow run: {machine.id}")

        driver = asyncio.create_task(self._drive(machine, slot))
        try:
            result = await slot.wait(self.timeout_seconds)
        except asyncio.TimeoutError:
            error = WorkflowTimeoutError(self.timeout_seconds)
            logger.error(f"Workflow run {machine.id} failed: {error}")
            slot.resolve(Failed.from_exception(error))
            result = slot.result()
        finally:
            machine.remove_observer(observer)
            machine.stop()
            if not driver.done():
                # Best effort; the agent call in flight may not honour cancellation.
                driver.cancel()

        logger.info(
            f"Workflow run {machine.id} finished: {result.outcome.value} "
            f"(state: {machine.state.value}, transitions: {len(machine.history)})"
        )
        return result

    def run_sync(self, raw_input: str) -> WorkflowResult:
        """Blocking variant of :meth:`run` with a private event loop."""
        return asyncio.run(self.run(raw_input))

    def _terminal_observer(self, machine: StateMachine, slot: ResultSlot) -> StateObserver:
        def on_state_changed(previous: WorkflowState, current: WorkflowState) -> None:
            if current == WorkflowState.SUCCESSFUL_COMPLETION:
                script = machine.context.script
                if script is None:
                    logger.error("Script not found at successful completion")
                    slot.resolve(Failed.from_exception(MissingVariableError("script", current)))
                else:
                    slot.resolve(Completed(script=script))
            elif current == WorkflowState.INVALID_REQUIREMENTS:
                logger.warning("Workflow ended due to invalid requirements.")
                slot.resolve(Rejected(message=self.rejection_message))

        return on_state_changed

    async def _drive(self, machine: StateMachine, slot: ResultSlot) -> None:
        """Fire the initial event and turn any run failure into a result."""
        failure: Optional[Exception] = None
        try:
            final_state = await machine.fire(WorkflowEvent.INPUT_RECEIVED)
        except WorkflowError as e:
            failure = e
        except Exception as e:
            logger.exception(f"Unexpected error in workflow run {machine.id}")
            failure = e
        else:
            if not machine.is_finished:
                failure = WorkflowError(f"Workflow halted in non-terminal state '{final_state.value}'")

        if failure is not None:
            logger.error(f"Workflow run {machine.id} failed: {failure}")
            slot.resolve(Failed.from_exception(failure))


def create_orchestrator(agents: ScriptAgents, settings: AgentSettings) -> WorkflowOrchestrator:
    """Wire the shared transition table, handlers and run policy."""
    factory = StateMachineFactory(TRANSITION_TABLE, StepHandlers(agents).bindings())
    return WorkflowOrchestrator(
        factory,
        timeout_seconds=settings.workflow_timeout_seconds,
        rejection_message=settings.rejection_message,
    )
