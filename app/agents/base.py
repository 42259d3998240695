"""Agent capability interface consumed by the workflow step handlers."""

from abc import ABC, abstractmethod


class ScriptAgents(ABC):
    """The four external capabilities the workflow depends on.

    Implementations raise :class:`app.workflows.errors.AgentError` when a call
    fails. Any retry policy belongs to the implementation, not to the engine.
    """

    @abstractmethod
    async def evaluate_feasibility(self, requirements: str) -> bool:
        """Decide whether the requirements can be implemented as one script."""

    @abstractmethod
    async def generate_script(self, requirements: str) -> str:
        """Produce a candidate script for the requirements."""

    @abstractmethod
    async def verify_script(self, requirements: str, script: str) -> bool:
        """Check whether the script satisfies the requirements."""

    @abstractmethod
    async def rewrite_requirements(self, requirements: str, script: str) -> str:
        """Rewrite the requirements after a rejected script."""
