"""Agent capabilities used by the script generation workflow."""

from .base import ScriptAgents
from .llm_agents import LLMScriptAgents, ModelProvider, create_chat_model

__all__ = [
    "ScriptAgents",
    "LLMScriptAgents",
    "ModelProvider",
    "create_chat_model",
]
