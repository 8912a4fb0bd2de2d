"""Resilient Anthropic Client — provider adapter with retry, backoff, and error mapping.

Invariants:
    - Rate limits (429): exponential backoff with jitter, respects Retry-After header
    - Transient errors (5xx, 529, connection): max_retries retries with exponential backoff
    - Client errors (4xx except 429): immediate failure, no retry
    - All failures mapped to CompletionProviderError (core/errors.py)
    - complete() speaks provider-neutral chat messages and returns CompletionResult

Design Decisions:
    - Wrapper over raw client: isolates retry logic from the dispatcher (ADR: single responsibility)
    - ±25% jitter on backoff: prevents thundering herd on shared rate limits
    - tool-role messages become user text, not tool_result blocks: the follow-up request
      strips assistant turns, so there is no tool_use block for a tool_result to answer
    - temperature wins over top_p when both are given: current models reject the pair
"""

import asyncio
import json
import logging
import random

import anthropic
from anthropic import (
    APIError,
    APIConnectionError,
    APIStatusError,
    RateLimitError,
    APITimeoutError,
    InternalServerError,
)

from callrelay.core.call_evidence import message_text
from callrelay.core.errors import CompletionProviderError, ErrorContext
from callrelay.core.records import CompletionResult, ToolCallRequest

logger = logging.getLogger(__name__)

# ADR: OverloadedError (HTTP 529) is not re-exported by every SDK release.
# Detect via status code on APIStatusError instead of relying on private import.
_OVERLOADED_STATUS = 529
_CONVERSATION_START = "(conversation start)"


def _is_overloaded(e: APIError) -> bool:
    """Check if error is Anthropic 529 Overloaded."""
    return isinstance(e, APIStatusError) and e.status_code == _OVERLOADED_STATUS


# -- Message conversion -------------------------------------------------------


def to_anthropic_messages(messages: list[dict]) -> tuple[str, list[dict]]:
    """Split chat messages into (system prompt, alternating user/assistant turns)."""
    system_parts: list[str] = []
    turns: list[dict] = []
    for msg in messages:
        role = msg.get("role")
        text = message_text(msg).strip()
        if role == "system":
            if text:
                system_parts.append(text)
            continue
        if role == "tool":
            role, text = "user", f"Tool result: {text}"
        elif role != "assistant":
            role = "user"
        if not text:
            continue
        if turns and turns[-1]["role"] == role:
            turns[-1]["content"] += "\n\n" + text
        else:
            turns.append({"role": role, "content": text})
    if not turns or turns[0]["role"] != "user":
        turns.insert(0, {"role": "user", "content": _CONVERSATION_START})
    return "\n\n".join(system_parts), turns


def to_completion_result(response) -> CompletionResult:
    """Collect text blocks and tool_use blocks from a Message."""
    texts: list[str] = []
    calls: list[ToolCallRequest] = []
    for block in response.content:
        kind = getattr(block, "type", None)
        if kind == "text":
            texts.append(block.text)
        elif kind == "tool_use":
            calls.append(ToolCallRequest(
                id=block.id, name=block.name,
                arguments=json.dumps(block.input or {}),
            ))
    return CompletionResult(text="".join(texts), tool_calls=calls)


# -- Client -------------------------------------------------------------------


class ResilientAnthropicClient:
    """Wraps Anthropic client with retry logic, timeouts, and error mapping."""

    def __init__(
        self,
        api_key: str,
        model: str,
        max_tokens: int = 1024,
        max_retries: int = 3,
        base_delay_ms: int = 1000,
        max_delay_ms: int = 60_000,
        timeout_seconds: int = 60,
    ):
        self.client = anthropic.AsyncAnthropic(
            api_key=api_key,
            timeout=timeout_seconds,
        )
        self.model = model
        self.max_tokens = max_tokens
        self.max_retries = max_retries
        self.base_delay_ms = base_delay_ms
        self.max_delay_ms = max_delay_ms

    async def complete(
        self,
        messages: list[dict],
        tools: list[dict] | None = None,
        *,
        model: str | None = None,
        max_tokens: int | None = None,
        temperature: float | None = None,
        top_p: float | None = None,
        context: ErrorContext | None = None,
    ) -> CompletionResult:
        """One completion over provider-neutral messages."""
        system, turns = to_anthropic_messages(messages)
        kwargs: dict = {
            "model": model or self.model,
            "max_tokens": max_tokens or self.max_tokens,
            "messages": turns,
        }
        if system:
            kwargs["system"] = system
        if tools:
            kwargs["tools"] = tools
        if temperature is not None:
            kwargs["temperature"] = temperature
        elif top_p is not None:
            kwargs["top_p"] = top_p
        response = await self.create_message(context=context, **kwargs)
        return to_completion_result(response)

    async def create_message(self, *, context: ErrorContext | None = None, **kwargs):
        """messages.create with retries; every terminal failure is a CompletionProviderError."""
        attempt = 0
        while True:
            try:
                response = await self.client.messages.create(**kwargs)
            except APITimeoutError:
                raise CompletionProviderError("API timeout", "timeout", context=context)
            except APIError as e:
                delay_ms = self._retry_delay_ms(e, attempt, context)
                logger.warning(
                    f"Completion provider retry in {delay_ms}ms: {e}",
                    extra={"attempt": attempt + 1},
                )
                await asyncio.sleep(delay_ms / 1000)
                attempt += 1
                continue
            except Exception as e:
                logger.error(f"Unexpected Anthropic error: {e}", exc_info=True)
                raise CompletionProviderError(str(e), "unknown", context=context)

            usage = response.usage
            logger.info(
                "Completion provider success",
                extra={
                    "attempt": attempt + 1,
                    "input_tokens": usage.input_tokens,
                    "output_tokens": usage.output_tokens,
                },
            )
            return response

    def _retry_delay_ms(
        self, error: APIError, attempt: int, context: ErrorContext | None,
    ) -> int:
        """Delay before the next attempt, or raise when the error is final."""
        exhausted = attempt >= self.max_retries
        if isinstance(error, RateLimitError):
            retry_after_ms = self._retry_after_ms(error)
            if exhausted:
                raise CompletionProviderError(
                    "Rate limit exceeded after retries", "rate_limit",
                    retry_after_ms=retry_after_ms, context=context,
                )
            return retry_after_ms or self._backoff(attempt)

        transient = isinstance(
            error, (APIConnectionError, InternalServerError),
        ) or _is_overloaded(error)
        if not transient:
            raise CompletionProviderError(str(error), "client_error", context=context)
        if exhausted:
            raise CompletionProviderError(
                f"Transient failure after {self.max_retries} retries: {error}",
                "connection_error", context=context,
            )
        return self._backoff(attempt)

    def _backoff(self, attempt: int) -> int:
        """Exponential backoff with ±25% jitter."""
        delay = min(self.max_delay_ms, (2 ** attempt) * self.base_delay_ms)
        return int(delay * random.uniform(0.75, 1.25))  # nosec B311

    @staticmethod
    def _retry_after_ms(error: RateLimitError) -> int | None:
        response = getattr(error, "response", None)
        raw = response.headers.get("retry-after") if response is not None else None
        try:
            return int(float(raw) * 1000) if raw else None
        except ValueError:
            return None
