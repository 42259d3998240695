"""Static transition table for the script generation workflow."""

from types import MappingProxyType
from typing import Dict, FrozenSet, Iterable, List, Mapping, Optional, Tuple

from ..models.workflow import Transition, WorkflowEvent, WorkflowState
from .errors import TransitionTableError


class TransitionTable:
    """Immutable, validated set of ``(source, event) -> target`` edges.

    Built once and shared read-only by every machine instance.
    """

    def __init__(
        self,
        initial: WorkflowState,
        terminals: Iterable[WorkflowState],
        transitions: Iterable[Transition],
    ) -> None:
        self._initial = initial
        self._terminals: FrozenSet[WorkflowState] = frozenset(terminals)
        self._transitions: Tuple[Transition, ...] = tuple(transitions)

        edges: Dict[Tuple[WorkflowState, WorkflowEvent], WorkflowState] = {}
        for transition in self._transitions:
            key = (transition.source, transition.event)
            if key in edges:
                raise TransitionTableError(
                    f"Duplicate transition for event '{transition.event.value}' "
                    f"from state '{transition.source.value}'"
                )
            edges[key] = transition.target
        self._edges: Mapping[Tuple[WorkflowState, WorkflowEvent], WorkflowState] = (
            MappingProxyType(edges)
        )

        self._validate()

    def _validate(self) -> None:
        """Check terminal and non-terminal states against their outgoing edges."""
        if len(self._terminals) != 2:
            raise TransitionTableError(
                f"Expected exactly two terminal states, got {len(self._terminals)}"
            )
        if self._initial in self._terminals:
            raise TransitionTableError("Initial state cannot be terminal")

        sources = {source for source, _ in self._edges}
        for state in WorkflowState:
            if state in self._terminals and state in sources:
                raise TransitionTableError(
                    f"Terminal state '{state.value}' has outgoing transitions"
                )
            if state not in self._terminals and state not in sources:
                raise TransitionTableError(
                    f"State '{state.value}' has no outgoing transitions"
                )

    @property
    def initial(self) -> WorkflowState:
        return self._initial

    @property
    def terminals(self) -> FrozenSet[WorkflowState]:
        return self._terminals

    @property
    def transitions(self) -> Tuple[Transition, ...]:
        return self._transitions

    def is_terminal(self, state: WorkflowState) -> bool:
        return state in self._terminals

    def target(self, state: WorkflowState, event: WorkflowEvent) -> Optional[WorkflowState]:
        """Return the target of ``(state, event)`` or None if undeclared."""
        return self._edges.get((state, event))

    def events_from(self, state: WorkflowState) -> List[WorkflowEvent]:
        """Events accepted in ``state``."""
        return [t.event for t in self._transitions if t.source == state]


SCRIPT_WORKFLOW_TRANSITIONS: Tuple[Transition, ...] = (
    Transition(
        source=WorkflowState.AWAITING_INPUT,
        event=WorkflowEvent.INPUT_RECEIVED,
        target=WorkflowState.REQUIREMENTS_EVALUATION,
    ),
    Transition(
        source=WorkflowState.REQUIREMENTS_EVALUATION,
        event=WorkflowEvent.REQUIREMENTS_EVALUATED,
        target=WorkflowState.SCRIPT_GENERATION,
    ),
    Transition(
        source=WorkflowState.REQUIREMENTS_EVALUATION,
        event=WorkflowEvent.REQUIREMENTS_REJECTED,
        target=WorkflowState.INVALID_REQUIREMENTS,
    ),
    Transition(
        source=WorkflowState.SCRIPT_GENERATION,
        event=WorkflowEvent.SCRIPT_GENERATED,
        target=WorkflowState.SOLUTION_VERIFICATION,
    ),
    Transition(
        source=WorkflowState.SOLUTION_VERIFICATION,
        event=WorkflowEvent.SOLUTION_VERIFIED,
        target=WorkflowState.SUCCESSFUL_COMPLETION,
    ),
    Transition(
        source=WorkflowState.SOLUTION_VERIFICATION,
        event=WorkflowEvent.SOLUTION_REJECTED,
        target=WorkflowState.REQUIREMENTS_REVISION,
    ),
    Transition(
        source=WorkflowState.REQUIREMENTS_REVISION,
        event=WorkflowEvent.REQUIREMENTS_REWRITTEN,
        target=WorkflowState.SCRIPT_GENERATION,
    ),
)

# Fails at import time if the edge list is inconsistent.
TRANSITION_TABLE = TransitionTable(
    initial=WorkflowState.AWAITING_INPUT,
    terminals=(WorkflowState.SUCCESSFUL_COMPLETION, WorkflowState.INVALID_REQUIREMENTS),
    transitions=SCRIPT_WORKFLOW_TRANSITIONS,
)
