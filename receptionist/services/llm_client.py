"""Model-invocation boundary.

The orchestrator only needs "send a prompt plus tools, get back text or a
structured call".  :class:`ModelCapability` is that contract and
:class:`AnthropicCapability` is the production implementation on top of
``langchain_anthropic``.  Timeouts and retries belong to the underlying
client; this layer makes exactly one attempt.
"""

from __future__ import annotations

import logging
import time
from typing import Any, Protocol

from langchain_anthropic import ChatAnthropic
from langchain_core.messages import BaseMessage, HumanMessage, SystemMessage
from pydantic import BaseModel, Field

from receptionist.config import MODEL_MAX_TOKENS, MODEL_TEMPERATURE, get_anthropic_api_key
from receptionist.services.metrics import metrics
from receptionist.tools.registry import ToolInvocation

logger = logging.getLogger(__name__)


class CapabilityError(Exception):
    """The model could not be reached or refused the request."""


class ModelReply(BaseModel):
    text: str = ""
    tool_calls: list[ToolInvocation] = Field(default_factory=list)


class ModelCapability(Protocol):
    def invoke(
        self,
        model_id: str,
        prompt: str,
        tool_schema: list[dict[str, Any]] | None = None,
        system_instruction: str | None = None,
    ) -> ModelReply: ...


def _message_text(message: BaseMessage) -> str:
    """Flatten AIMessage content, which is a list of blocks when tools are bound."""
    content = message.content
    if isinstance(content, str):
        return content
    parts = []
    for block in content:
        if isinstance(block, str):
            parts.append(block)
        elif isinstance(block, dict) and block.get("type") == "text":
            parts.append(block.get("text", ""))
    return "".join(parts)


class AnthropicCapability:
    """Claude via ``ChatAnthropic``, with tools bound per call."""

    def __init__(
        self,
        *,
        temperature: float = MODEL_TEMPERATURE,
        max_tokens: int = MODEL_MAX_TOKENS,
    ) -> None:
        self._temperature = temperature
        self._max_tokens = max_tokens

    def _build_llm(self, model_id: str, tool_schema: list[dict[str, Any]] | None):
        try:
            api_key = get_anthropic_api_key()
        except OSError as exc:
            raise CapabilityError(str(exc)) from exc
        llm = ChatAnthropic(
            model=model_id,
            api_key=api_key,
            temperature=self._temperature,
            max_tokens=self._max_tokens,
        )
        return llm.bind_tools(tool_schema) if tool_schema else llm

    def invoke(
        self,
        model_id: str,
        prompt: str,
        tool_schema: list[dict[str, Any]] | None = None,
        system_instruction: str | None = None,
    ) -> ModelReply:
        messages: list[BaseMessage] = []
        if system_instruction:
            messages.append(SystemMessage(content=system_instruction))
        messages.append(HumanMessage(content=prompt))

        t0 = time.perf_counter()
        try:
            llm = self._build_llm(model_id, tool_schema)
            response = llm.invoke(messages)
        except Exception as exc:
            elapsed = (time.perf_counter() - t0) * 1000
            metrics.record_model_call(model_id, elapsed, error_type=type(exc).__name__)
            if isinstance(exc, CapabilityError):
                raise
            raise CapabilityError(f"{type(exc).__name__}: {exc}") from exc

        elapsed = (time.perf_counter() - t0) * 1000
        metrics.record_model_call(model_id, elapsed)
        tool_calls = [
            ToolInvocation(name=call["name"], args=call.get("args") or {}, id=call.get("id"))
            for call in getattr(response, "tool_calls", None) or []
        ]
        logger.debug(
            "%s responded in %.0fms (%d tool call(s))", model_id, elapsed, len(tool_calls),
        )
        return ModelReply(text=_message_text(response), tool_calls=tool_calls)
