"""OpenAI-compatible chat client.

Wraps chat completions in two modes: a forced single tool call that
returns the raw JSON arguments, and a plain text completion.
Upstream failures are raised as LLMCallError; nothing is retried.
"""

from typing import Any, Dict, List, Optional, Protocol

import httpx
import openai
from openai import AsyncOpenAI

from ..config import Settings, get_settings
from ..errors import ConfigurationError, LLMCallError
from ..log import get_logger
from ..mlops.tracing import tracer

logger = get_logger("llm_client")

Message = Dict[str, str]

class ChatModel(Protocol):
    async def call_tool(self, messages: List[Message], tool: Dict[str, Any], model: str) -> Optional[str]:
        ...

    async def complete(self, messages: List[Message], model: str) -> str:
        ...

    async def aclose(self) -> None:
        ...

def _usage_tokens(response: Any) -> Optional[Dict[str, int]]:
    usage = getattr(response, "usage", None)
    if usage is None:
        return None
    return {
        "prompt_tokens": getattr(usage, "prompt_tokens", 0) or 0,
        "completion_tokens": getattr(usage, "completion_tokens", 0) or 0,
    }

class LLMClient:
    def __init__(
        self,
        api_key: str,
        base_url: str,
        timeout: float = 60.0,
        http_client: Optional[httpx.AsyncClient] = None,
    ):
        self.client = AsyncOpenAI(
            api_key=api_key,
            base_url=base_url,
            timeout=timeout,
            max_retries=0,
            http_client=http_client,
        )

    @classmethod
    def from_settings(cls, settings: Optional[Settings] = None) -> "LLMClient":
        settings = settings or get_settings()
        if not settings.LLM_API_KEY:
            raise ConfigurationError("LLM_API_KEY not configured")
        return cls(
            api_key=settings.LLM_API_KEY,
            base_url=settings.LLM_BASE_URL,
            timeout=settings.LLM_TIMEOUT_SECONDS,
        )

    async def aclose(self) -> None:
        await self.client.close()

    async def _create(self, **kwargs: Any) -> Any:
        try:
            return await self.client.chat.completions.create(**kwargs)
        except openai.APIStatusError as e:
            logger.error(f"LLM gateway error {e.status_code}: {e.message}")
            raise LLMCallError(f"AI request failed: {e.status_code}", status_code=e.status_code) from e
        except openai.APIError as e:
            logger.error(f"LLM gateway unreachable: {e}")
            raise LLMCallError(f"AI request failed: {e}") from e

    async def call_tool(self, messages: List[Message], tool: Dict[str, Any], model: str) -> Optional[str]:
        """
        Forces the model to call `tool` and returns the call's raw JSON arguments.
        Returns None when the response carries no call to that tool.
        """
        name = tool["function"]["name"]
        response = await self._create(
            model=model,
            messages=messages,
            tools=[tool],
            tool_choice={"type": "function", "function": {"name": name}},
        )

        choices = getattr(response, "choices", None) or []
        tool_calls = (choices[0].message.tool_calls or []) if choices else []
        tracer.trace_llm_call(
            model=model,
            prompt_chars=sum(len(m["content"]) for m in messages),
            tool_calls=[c.function.name for c in tool_calls],
            tokens=_usage_tokens(response),
        )

        for call in tool_calls:
            if call.function.name == name:
                return call.function.arguments
        return None

    async def complete(self, messages: List[Message], model: str) -> str:
        """Plain chat completion. Returns "" when the model sends no text."""
        response = await self._create(model=model, messages=messages)

        choices = getattr(response, "choices", None) or []
        content = choices[0].message.content if choices else None
        tracer.trace_llm_call(
            model=model,
            prompt_chars=sum(len(m["content"]) for m in messages),
            tokens=_usage_tokens(response),
        )
        return content if isinstance(content, str) else ""
