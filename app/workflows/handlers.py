"""Step handlers bound to the non-terminal workflow states."""

from typing import Awaitable, Callable, Dict, TypeVar

from loguru import logger

from ..agents.base import ScriptAgents
from ..models.workflow import WorkflowContext, WorkflowEvent, WorkflowState
from .errors import AgentError, MissingVariableError

T = TypeVar("T")

StepHandler = Callable[[WorkflowContext], Awaitable[WorkflowEvent]]


class StepHandlers:
    """Handlers that call one agent capability each and choose the next event."""

    def __init__(self, agents: ScriptAgents) -> None:
        self.agents = agents

    def bindings(self) -> Dict[WorkflowState, StepHandler]:
        """Map each handled state to its handler."""
        return {
            WorkflowState.REQUIREMENTS_EVALUATION: self.evaluate_requirements,
            WorkflowState.SCRIPT_GENERATION: self.generate_script,
            WorkflowState.SOLUTION_VERIFICATION: self.verify_solution,
            WorkflowState.REQUIREMENTS_REVISION: self.rewrite_requirements,
        }

    async def evaluate_requirements(self, context: WorkflowContext) -> WorkflowEvent:
        logger.info("Evaluating requirements...")
        feasible = await self._call(
            "evaluate_feasibility",
            self.agents.evaluate_feasibility(context.requirements),
        )
        if feasible:
            return WorkflowEvent.REQUIREMENTS_EVALUATED
        return WorkflowEvent.REQUIREMENTS_REJECTED

    async def generate_script(self, context: WorkflowContext) -> WorkflowEvent:
        logger.info("Generating script...")
        context.script = await self._call(
            "generate_script",
            self.agents.generate_script(context.requirements),
        )
        return WorkflowEvent.SCRIPT_GENERATED

    async def verify_solution(self, context: WorkflowContext) -> WorkflowEvent:
        logger.info("Verifying solution...")
        script = self._require_script(context, WorkflowState.SOLUTION_VERIFICATION)
        valid = await self._call(
            "verify_script",
            self.agents.verify_script(context.requirements, script),
        )
        if valid:
            return WorkflowEvent.SOLUTION_VERIFIED
        return WorkflowEvent.SOLUTION_REJECTED

    async def rewrite_requirements(self, context: WorkflowContext) -> WorkflowEvent:
        logger.info("Rewriting requirements...")
        script = self._require_script(context, WorkflowState.REQUIREMENTS_REVISION)
        rewritten = await self._call(
            "rewrite_requirements",
            self.agents.rewrite_requirements(context.requirements, script),
        )
        if not rewritten or not rewritten.strip():
            logger.error("Agent capability 'rewrite_requirements' returned empty requirements")
            raise AgentError(
                "rewrite_requirements returned empty requirements",
                capability="rewrite_requirements",
            )
        context.requirements = rewritten
        return WorkflowEvent.REQUIREMENTS_REWRITTEN

    @staticmethod
    def _require_script(context: WorkflowContext, state: WorkflowState) -> str:
        if context.script is None:
            raise MissingVariableError("script", state)
        return context.script

    @staticmethod
    async def _call(capability: str, call: Awaitable[T]) -> T:
        """Await an agent call, normalizing failures to AgentError."""
        try:
            return await call
        except AgentError:
            raise
        except Exception as e:
            logger.error(f"Agent capability '{capability}' failed: {e}")
            raise AgentError(f"{capability} failed: {e}", capability=capability) from e
