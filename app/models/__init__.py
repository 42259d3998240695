"""Data models package."""

from .workflow import (
    Completed,
    Failed,
    InstructionRequest,
    InstructionResponse,
    Rejected,
    RunOutcome,
    StateTransition,
    Transition,
    WorkflowContext,
    WorkflowEvent,
    WorkflowResult,
    WorkflowState,
)

__all__ = [
    "WorkflowState",
    "WorkflowEvent",
    "RunOutcome",
    "Transition",
    "StateTransition",
    "WorkflowContext",
    "Completed",
    "Rejected",
    "Failed",
    "WorkflowResult",
    "InstructionRequest",
    "InstructionResponse",
]
