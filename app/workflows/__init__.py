"""Workflow engine package for the script generation state machine."""

from .engine import StateMachine, StateMachineFactory
from .errors import (
    AgentError,
    MachineStoppedError,
    MissingVariableError,
    NoMatchingTransitionError,
    TransitionTableError,
    WorkflowError,
    WorkflowTimeoutError,
)
from .handlers import StepHandlers
from .orchestrator import ResultSlot, WorkflowOrchestrator, create_orchestrator
from .transitions import TRANSITION_TABLE, TransitionTable

__all__ = [
    "StateMachine",
    "StateMachineFactory",
    "StepHandlers",
    "TransitionTable",
    "TRANSITION_TABLE",
    "ResultSlot",
    "WorkflowOrchestrator",
    "create_orchestrator",
    "WorkflowError",
    "TransitionTableError",
    "NoMatchingTransitionError",
    "AgentError",
    "MissingVariableError",
    "MachineStoppedError",
    "WorkflowTimeoutError",
]
