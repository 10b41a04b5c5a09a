"""Base agent class for VendorGPT AI agents.

The text-generation capability is consumed through one narrow interface,
``TextGenerator.generate(prompt) -> AgentResult``. ``BaseAgent`` is the
Gemini-backed implementation; it is built once at process start and handed
to whoever needs it (see ``app.dependencies``). Tests substitute any object
with the same ``generate`` coroutine.

BaseAgent provides:

- Gemini model access via the infra.gemini_client wrapper
- A standard AgentResult return type (Result pattern)
- A hard request timeout and latency/token measurement
"""

import asyncio
import logging
import time
from dataclasses import dataclass
from typing import Any, Optional, Protocol

from vendor_gpt.app.config import get_settings

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Result type
# ---------------------------------------------------------------------------

@dataclass
class AgentResult:
    """Standard result type for all agent operations.

    Follows the Result pattern: every agent call returns an AgentResult
    instead of raising exceptions. Callers check ``result.ok`` to
    determine success or failure.

    Attributes:
        ok: True if the operation succeeded.
        data: The response payload (text, parsed JSON, etc.).
        error: Human-readable error description when ``ok`` is False.
        tokens_used: Total tokens consumed (prompt + completion).
        latency_ms: Wall-clock time for the operation in milliseconds.
    """

    ok: bool
    data: Any = None
    error: Optional[str] = None
    tokens_used: int = 0
    latency_ms: int = 0

    @classmethod
    def success(
        cls,
        data: Any,
        tokens_used: int = 0,
        latency_ms: int = 0,
    ) -> "AgentResult":
        """Create a successful result."""
        return cls(
            ok=True,
            data=data,
            tokens_used=tokens_used,
            latency_ms=latency_ms,
        )

    @classmethod
    def failure(cls, error: str, latency_ms: int = 0) -> "AgentResult":
        """Create a failure result."""
        return cls(ok=False, error=error, latency_ms=latency_ms)


class TextGenerator(Protocol):
    """Anything that turns a prompt into free text."""

    async def generate(self, prompt: str) -> AgentResult:
        ...


# ---------------------------------------------------------------------------
# Base agent
# ---------------------------------------------------------------------------

class BaseAgent:
    """Gemini-backed ``TextGenerator``.

    Stateless apart from its configuration, so one instance is shared by
    every request.

    Example::

        generator = BaseAgent(agent_name="vendor_gpt")
        result = await generator.generate("Say hello to a vegetable vendor")
        if result.ok:
            print(result.data)
    """

    def __init__(
        self,
        agent_name: str,
        model_name: Optional[str] = None,
        temperature: Optional[float] = None,
        timeout_seconds: Optional[float] = None,
    ):
        """Initialise the agent.

        Args:
            agent_name: A short, unique name for this agent (used in logs).
            model_name: The Gemini model identifier.
            temperature: Generation temperature (0.0-1.0).
            timeout_seconds: Hard limit for one generation call.
        """
        settings = get_settings()
        self.agent_name = agent_name
        self.model_name = model_name or settings.gemini_model
        self.temperature = settings.llm_temperature if temperature is None else temperature
        self.timeout_seconds = timeout_seconds or settings.llm_timeout_seconds

    async def generate(self, prompt: str) -> AgentResult:
        """Generate a single-turn response from Gemini.

        A timeout is reported like any other failure.

        Args:
            prompt: The full prompt to send.

        Returns:
            An ``AgentResult`` with the response text in ``data``.
        """
        start_time = time.time()
        try:
            from vendor_gpt.infra.gemini_client import get_model

            model = get_model(model_name=self.model_name, temperature=self.temperature)

            response = await asyncio.wait_for(
                model.generate_content_async(prompt),
                timeout=self.timeout_seconds,
            )
            latency_ms = int((time.time() - start_time) * 1000)

            # Extract token usage from response metadata
            tokens_used = 0
            if hasattr(response, "usage_metadata") and response.usage_metadata:
                prompt_tokens = getattr(
                    response.usage_metadata, "prompt_token_count", 0
                ) or 0
                completion_tokens = getattr(
                    response.usage_metadata, "candidates_token_count", 0
                ) or 0
                tokens_used = prompt_tokens + completion_tokens

            response_text = response.text

            logger.info(
                "[%s] Generation succeeded: tokens=%d, latency=%dms",
                self.agent_name,
                tokens_used,
                latency_ms,
            )

            return AgentResult.success(
                data=response_text,
                tokens_used=tokens_used,
                latency_ms=latency_ms,
            )

        except asyncio.TimeoutError:
            latency_ms = int((time.time() - start_time) * 1000)
            logger.error(
                "[%s] Generation timed out after %dms",
                self.agent_name,
                latency_ms,
            )
            return AgentResult.failure("generation timed out", latency_ms=latency_ms)

        except Exception as exc:
            latency_ms = int((time.time() - start_time) * 1000)
            logger.error(
                "[%s] Generation failed after %dms: %s",
                self.agent_name,
                latency_ms,
                exc,
            )
            return AgentResult.failure(str(exc), latency_ms=latency_ms)
