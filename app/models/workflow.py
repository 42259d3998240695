"""Workflow models and schemas for the script generation state machine."""

from datetime import datetime
from enum import Enum
from typing import Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator


class WorkflowState(str, Enum):
    """States of the script generation workflow."""

    AWAITING_INPUT = "awaiting_input"
    REQUIREMENTS_EVALUATION = "requirements_evaluation"
    SCRIPT_GENERATION = "script_generation"
    SOLUTION_VERIFICATION = "solution_verification"
    REQUIREMENTS_REVISION = "requirements_revision"
    SUCCESSFUL_COMPLETION = "successful_completion"
    INVALID_REQUIREMENTS = "invalid_requirements"


class WorkflowEvent(str, Enum):
    """Events that drive the workflow between states."""

    INPUT_RECEIVED = "input_received"
    REQUIREMENTS_EVALUATED = "requirements_evaluated"
    REQUIREMENTS_REJECTED = "requirements_rejected"
    SCRIPT_GENERATED = "script_generated"
    SOLUTION_VERIFIED = "solution_verified"
    SOLUTION_REJECTED = "solution_rejected"
    REQUIREMENTS_REWRITTEN = "requirements_rewritten"


class RunOutcome(str, Enum):
    """Caller-visible outcome of a workflow run."""

    COMPLETED = "completed"
    REJECTED = "rejected"
    FAILED = "failed"


class Transition(BaseModel):
    """Static edge of the transition table."""

    model_config = ConfigDict(frozen=True)

    source: WorkflowState
    event: WorkflowEvent
    target: WorkflowState


class StateTransition(BaseModel):
    """State machine transition record."""

    from_state: WorkflowState
    to_state: WorkflowState
    event: WorkflowEvent
    timestamp: datetime = Field(default_factory=datetime.utcnow)


class WorkflowContext(BaseModel):
    """Extended state of a single run.

    ``requirements`` is seeded by the orchestrator and only rewritten by the
    revision step; ``script`` is only written by the generation step.
    """

    model_config = ConfigDict(validate_assignment=True)

    requirements: str = Field(..., min_length=1)
    script: Optional[str] = None


class Completed(BaseModel):
    """Run finished with a verified script."""

    outcome: Literal[RunOutcome.COMPLETED] = RunOutcome.COMPLETED
    script: str


class Rejected(BaseModel):
    """Run finished because the requirements were judged infeasible."""

    outcome: Literal[RunOutcome.REJECTED] = RunOutcome.REJECTED
    message: str


class Failed(BaseModel):
    """Run aborted by an error or by the deadline."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    outcome: Literal[RunOutcome.FAILED] = RunOutcome.FAILED
    error: str
    error_type: str
    cause: Optional[BaseException] = Field(default=None, exclude=True)

    @classmethod
    def from_exception(cls, exc: BaseException) -> "Failed":
        """Build a failure result carrying the original exception."""
        return cls(error=str(exc) or type(exc).__name__, error_type=type(exc).__name__, cause=exc)

    @property
    def is_timeout(self) -> bool:
        return self.error_type == "WorkflowTimeoutError"


WorkflowResult = Union[Completed, Rejected, Failed]


class InstructionRequest(BaseModel):
    """API request carrying the user's script requirements."""

    instruction: Optional[str] = Field(None, description="Requirements for the script")

    @field_validator("instruction")
    @classmethod
    def strip_instruction(cls, v: Optional[str]) -> Optional[str]:
        """Normalize surrounding whitespace."""
        return v.strip() if v is not None else v


class InstructionResponse(BaseModel):
    """API response for a finished workflow run."""

    outcome: RunOutcome
    output: str
