"""LLM-backed implementation of the script generation agents."""

import asyncio
import re
from enum import Enum
from typing import Any, Optional

import httpx
from langchain_anthropic import ChatAnthropic
from langchain_core.language_models import BaseChatModel
from langchain_core.prompts import ChatPromptTemplate
from langchain_openai import ChatOpenAI
from loguru import logger
from tenacity import AsyncRetrying, retry_if_exception, stop_after_attempt, wait_exponential

from ..config import AgentSettings
from ..workflows.errors import AgentError
from .base import ScriptAgents
from .prompts import (
    FEASIBILITY_PROMPT,
    GENERATION_PROMPT,
    REWRITE_PROMPT,
    VERIFICATION_PROMPT,
)

_FENCE_RE = re.compile(r"```(?:python|py)?\s*\n?(.*?)\n?\s*```", re.DOTALL)
_VERDICT_RE = re.compile(r"^\W*(yes|no)\b", re.IGNORECASE)
_TRANSIENT_STATUS_CODES = (429, 500, 502, 503)


class ModelProvider(str, Enum):
    """LLM providers supported."""

    OPENAI = "openai"
    ANTHROPIC = "anthropic"


def create_chat_model(settings: AgentSettings) -> BaseChatModel:
    """Create LLM instance based on configuration.

    Args:
        settings: Service settings

    Returns:
        LLM instance
    """
    provider = ModelProvider(settings.llm_provider)

    if provider == ModelProvider.OPENAI:
        if not settings.openai_api_key:
            raise ValueError("OpenAI API key not configured")

        return ChatOpenAI(
            model=settings.default_llm_model,
            temperature=settings.llm_temperature,
            api_key=settings.openai_api_key,
            timeout=settings.llm_timeout_seconds,
        )

    if not settings.anthropic_api_key:
        raise ValueError("Anthropic API key not configured")

    return ChatAnthropic(
        model=settings.default_llm_model,
        temperature=settings.llm_temperature,
        api_key=settings.anthropic_api_key,
        timeout=settings.llm_timeout_seconds,
    )


def strip_fences(text: str) -> str:
    """Strip markdown code fences from LLM output if present."""
    match = _FENCE_RE.search(text)
    return match.group(1).strip() if match else text.strip()


def parse_verdict(text: str) -> bool:
    """Parse a YES/NO answer; anything else is a malformed response."""
    match = _VERDICT_RE.match(text.strip())
    if not match:
        raise AgentError(f"Malformed verdict from model: {text[:80]!r}")
    return match.group(1).lower() == "yes"


def is_transient(exc: BaseException) -> bool:
    """Return True if the exception is a transient network/HTTP error worth retrying.

    Provider SDK errors raised from an httpx transport failure are judged by
    their cause; SDK status errors expose ``status_code`` directly.
    """
    if isinstance(exc, (asyncio.TimeoutError, TimeoutError, ConnectionError)):
        return True
    if isinstance(exc, (httpx.TimeoutException, httpx.ConnectError)):
        return True
    if isinstance(exc, httpx.HTTPStatusError):
        return exc.response.status_code in _TRANSIENT_STATUS_CODES
    if getattr(exc, "status_code", None) in _TRANSIENT_STATUS_CODES:
        return True
    cause = exc.__cause__
    return isinstance(cause, (httpx.TimeoutException, httpx.ConnectError))


class LLMScriptAgents(ScriptAgents):
    """Agent capabilities answered by a single chat model."""

    def __init__(
        self,
        llm: BaseChatModel,
        max_retries: int = 2,
        call_timeout_seconds: Optional[float] = None,
    ) -> None:
        """Initialize agents.

        Args:
            llm: Chat model used for every capability
            max_retries: Extra attempts per call after the first failure
            call_timeout_seconds: Per-attempt timeout, None to rely on the client
        """
        self.llm = llm
        self.max_retries = max_retries
        self.call_timeout_seconds = call_timeout_seconds

    @classmethod
    def from_settings(cls, settings: AgentSettings) -> "LLMScriptAgents":
        return cls(
            create_chat_model(settings),
            max_retries=settings.llm_max_retries,
            call_timeout_seconds=settings.llm_timeout_seconds,
        )

    async def evaluate_feasibility(self, requirements: str) -> bool:
        answer = await self._ask(
            "evaluate_feasibility", FEASIBILITY_PROMPT, requirements=requirements
        )
        return parse_verdict(answer)

    async def generate_script(self, requirements: str) -> str:
        answer = await self._ask(
            "generate_script", GENERATION_PROMPT, requirements=requirements
        )
        script = strip_fences(answer)
        if not script:
            raise AgentError("Model returned an empty script", capability="generate_script")
        return script

    async def verify_script(self, requirements: str, script: str) -> bool:
        answer = await self._ask(
            "verify_script", VERIFICATION_PROMPT, requirements=requirements, script=script
        )
        return parse_verdict(answer)

    async def rewrite_requirements(self, requirements: str, script: str) -> str:
        answer = await self._ask(
            "rewrite_requirements", REWRITE_PROMPT, requirements=requirements, script=script
        )
        rewritten = answer.strip()
        if not rewritten:
            raise AgentError(
                "Model returned empty requirements", capability="rewrite_requirements"
            )
        return rewritten

    async def _ask(self, capability: str, prompt: ChatPromptTemplate, **variables: Any) -> str:
        """Invoke the model with retry logic and return its text content."""
        messages = prompt.format_messages(**variables)
        try:
            async for attempt in AsyncRetrying(
                stop=stop_after_attempt(self.max_retries + 1),
                wait=wait_exponential(multiplier=1, min=1, max=8),
                retry=retry_if_exception(is_transient),
                reraise=True,
            ):
                with attempt:
                    if attempt.retry_state.attempt_number > 1:
                        logger.warning(
                            f"Retrying {capability} "
                            f"(attempt {attempt.retry_state.attempt_number}/{self.max_retries + 1})"
                        )
                    response = await asyncio.wait_for(
                        self.llm.ainvoke(messages), timeout=self.call_timeout_seconds
                    )
        except Exception as e:
            logger.error(f"LLM call for {capability} failed: {e}")
            raise AgentError(f"{capability} failed: {e}", capability=capability) from e

        content = response.content
        if not isinstance(content, str):
            # Anthropic models may answer with a list of content blocks.
            content = "".join(
                block.get("text", "") if isinstance(block, dict) else str(block)
                for block in content
            )
        return content
