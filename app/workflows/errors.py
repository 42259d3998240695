"""Error taxonomy for workflow runs."""

from typing import Optional

from ..models.workflow import WorkflowEvent, WorkflowState


class WorkflowError(Exception):
    """Base class for errors that abort a single workflow run."""


class TransitionTableError(WorkflowError):
    """Transition table or handler bindings are misconfigured."""


class NoMatchingTransitionError(WorkflowError):
    """Event has no transition from the machine's current state."""

    def __init__(self, state: WorkflowState, event: WorkflowEvent) -> None:
        self.state = state
        self.event = event
        super().__init__(
            f"No transition for event '{event.value}' from state '{state.value}'"
        )


class AgentError(WorkflowError):
    """An external agent capability failed."""

    def __init__(self, message: str, capability: Optional[str] = None) -> None:
        self.capability = capability
        super().__init__(message)


class MissingVariableError(WorkflowError):
    """A step needed a context variable that was never written."""

    def __init__(self, variable: str, state: Optional[WorkflowState] = None) -> None:
        self.variable = variable
        self.state = state
        where = f" in state '{state.value}'" if state else ""
        super().__init__(f"Required variable '{variable}' is not set{where}")


class MachineStoppedError(WorkflowError):
    """Event fired at a machine that has already been disposed."""


class WorkflowTimeoutError(WorkflowError):
    """Run exceeded its deadline."""

    def __init__(self, timeout_seconds: float) -> None:
        self.timeout_seconds = timeout_seconds
        super().__init__(f"Workflow timed out after {timeout_seconds}s")
