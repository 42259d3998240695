"""Workflow execution engine with state machine implementation."""

import uuid
from typing import Callable, Dict, List, Mapping, Optional

from loguru import logger

from ..models.workflow import (
    StateTransition,
    WorkflowContext,
    WorkflowEvent,
    WorkflowState,
)
from .errors import MachineStoppedError, NoMatchingTransitionError, TransitionTableError
from .handlers import StepHandler
from .transitions import TransitionTable

StateObserver = Callable[[WorkflowState, WorkflowState], None]


class StateMachine:
    """
    Single-run state machine.

    Features:
    - Deterministic transitions looked up in a shared, read-only table
    - Eager handler chaining: one ``fire`` runs until a state without a handler
    - State-change observers notified with ``(previous, current)``
    - Audit trail of every applied transition
    """

    def __init__(
        self,
        table: TransitionTable,
        handlers: Mapping[WorkflowState, StepHandler],
        context: WorkflowContext,
    ) -> None:
        """Initialize a machine in the table's initial state."""
        self.id = str(uuid.uuid4())
        self.table = table
        self.context = context
        self.history: List[StateTransition] = []
        self._handlers: Dict[WorkflowState, StepHandler] = dict(handlers)
        self._state = table.initial
        self._observers: List[StateObserver] = []
        self._stopped = False

    @property
    def state(self) -> WorkflowState:
        return self._state

    @property
    def stopped(self) -> bool:
        return self._stopped

    @property
    def is_finished(self) -> bool:
        return self.table.is_terminal(self._state)

    def add_observer(self, observer: StateObserver) -> None:
        """Register a callback invoked on every state change."""
        self._observers.append(observer)

    def remove_observer(self, observer: StateObserver) -> None:
        if observer in self._observers:
            self._observers.remove(observer)

    async def fire(self, event: WorkflowEvent) -> WorkflowState:
        """
        Apply ``event`` and run handlers until a state without one is reached.

        Returns:
            The state the machine rests in after the chain.

        Raises:
            NoMatchingTransitionError: ``event`` is not accepted in the current
                state (the state is left unchanged).
            MachineStoppedError: the machine was stopped.
        """
        next_event: Optional[WorkflowEvent] = event
        while next_event is not None:
            if self._stopped:
                raise MachineStoppedError(f"Machine {self.id} is stopped")

            target = self.table.target(self._state, next_event)
            if target is None:
                logger.error(
                    f"Machine {self.id}: no transition for {next_event.value} "
                    f"from {self._state.value}"
                )
                raise NoMatchingTransitionError(self._state, next_event)

            previous = self._state
            self._state = target
            self.history.append(
                StateTransition(from_state=previous, to_state=target, event=next_event)
            )
            logger.debug(
                f"Machine {self.id}: {previous.value} -> {target.value} "
                f"({next_event.value})"
            )
            self._notify(previous, target)

            handler = self._handlers.get(target)
            if handler is None:
                break
            next_event = await handler(self.context)

        return self._state

    def stop(self) -> None:
        """Dispose the machine; further events are refused."""
        self._stopped = True
        self._observers.clear()

    def _notify(self, previous: WorkflowState, current: WorkflowState) -> None:
        for observer in list(self._observers):
            observer(previous, current)


class StateMachineFactory:
    """Creates fresh machines sharing one table and one set of handlers."""

    def __init__(
        self,
        table: TransitionTable,
        handlers: Mapping[WorkflowState, StepHandler],
    ) -> None:
        """Validate handler bindings against the table."""
        for state in handlers:
            if table.is_terminal(state):
                raise TransitionTableError(
                    f"Terminal state '{state.value}' cannot have a handler"
                )
        self.table = table
        self._handlers = dict(handlers)

    def create(self, context: WorkflowContext) -> StateMachine:
        """Return a new machine in the initial state seeded with ``context``."""
        return StateMachine(self.table, self._handlers, context)
