"""Tool Dispatch — executes one turn's tool calls and decides the final answer.

Invariants:
    - Requests run sequentially in the order received (later calls may depend on
      side effects of earlier ones)
    - A tool name executes at most once per turn; duplicates produce no second result
    - Call tools are checked for call evidence in the recent transcript; when found,
      a synthetic "already active" result replaces the handler invocation
    - Malformed JSON arguments raise ToolArgumentsError (fatal for the call, never swallowed)
    - Unknown tool names are logged and dropped: no tool-result message is appended
    - Any produced result triggers exactly one follow-up completion over
      system/user/tool messages only; otherwise the original answer is returned

Design Decisions:
    - Both affirmation and data results re-prompt the model (conversational continuity)
    - Unexpected handler exceptions become an error tool-result so the turn still completes
      (ADR: the model relays failures conversationally, no opaque 500)
    - Classification defaults to DATA with a warning for names missing from the table
"""

import logging
from collections.abc import Mapping

from callrelay.core.boundary_protocols import CompletionClient, ToolHandler
from callrelay.core.call_evidence import CALL_TOOL_NAMES, find_call_evidence
from callrelay.core.domain_types import ToolResponseType
from callrelay.core.errors import CallRelayError, ToolArgumentsError
from callrelay.core.records import CompletionResult, ToolCallRequest, TurnContext

logger = logging.getLogger(__name__)

# Roles kept in the follow-up request; assistant turns are stripped
FOLLOW_UP_ROLES = frozenset({"system", "user", "tool"})


def follow_up_messages(messages: list[dict]) -> list[dict]:
    return [m for m in messages if m.get("role") in FOLLOW_UP_ROLES]


class ToolCallDispatcher:
    """Runs requested tools against a handler registry and re-prompts once."""

    def __init__(
        self,
        completion_client: CompletionClient,
        response_types: Mapping[str, ToolResponseType],
    ):
        self._client = completion_client
        self._response_types = response_types

    async def resolve(
        self,
        answer: CompletionResult,
        messages: list[dict],
        handlers: Mapping[str, ToolHandler],
        ctx: TurnContext,
        **completion_params,
    ) -> str:
        """Execute answer.tool_calls, append results to messages, return final text.

        messages is mutated in place: the assistant tool-call message and every
        tool result are appended so the caller sees the full turn transcript.
        """
        if not answer.has_tool_calls:
            return answer.text

        messages.append({
            "role": "assistant",
            "content": answer.text or None,
            "tool_calls": [r.to_message_dict() for r in answer.tool_calls],
        })

        executed: set[str] = set()
        produced = 0
        for request in answer.tool_calls:
            if request.name in executed:
                logger.info(
                    "Duplicate tool call skipped",
                    extra={"tool_name": request.name, "channel": ctx.channel},
                )
                continue
            result = await self._execute(request, messages, handlers, ctx)
            if result is None:
                continue
            executed.add(request.name)
            request.executed = True
            kind = self._classify(request.name)
            messages.append({
                "role": "tool",
                "tool_call_id": request.id,
                "name": request.name,
                "content": result,
            })
            produced += 1
            logger.info(
                f"Tool result appended ({kind.value})",
                extra={"tool_name": request.name, "channel": ctx.channel},
            )

        if not produced:
            return answer.text

        follow_up = await self._client.complete(
            follow_up_messages(messages), None, **completion_params,
        )
        return follow_up.text

    async def _execute(
        self,
        request: ToolCallRequest,
        messages: list[dict],
        handlers: Mapping[str, ToolHandler],
        ctx: TurnContext,
    ) -> str | None:
        handler = handlers.get(request.name)
        if handler is None:
            logger.warning(
                f"Unknown tool '{request.name}' dropped",
                extra={"tool_name": request.name, "channel": ctx.channel},
            )
            return None

        if request.name in CALL_TOOL_NAMES:
            evidence = find_call_evidence(messages)
            if evidence is not None:
                logger.info(
                    "Call already in progress; handler not invoked",
                    extra={"tool_name": request.name, "channel": ctx.channel},
                )
                return evidence

        try:
            args = request.parse_arguments()
        except ValueError as e:
            logger.error(
                f"Malformed arguments: {e}",
                extra={"tool_name": request.name, "channel": ctx.channel},
            )
            raise ToolArgumentsError(request.name, str(e)) from e

        try:
            return await handler(ctx.app_id, ctx.user_id, ctx.channel, args)
        except CallRelayError as e:
            logger.error(
                f"Tool '{request.name}' failed: {e.message}",
                extra={
                    "tool_name": request.name, "channel": ctx.channel,
                    "error_code": e.code,
                },
            )
            return f"Error: {e.message}"
        except Exception as e:
            logger.error(
                f"Tool '{request.name}' crashed",
                extra={"tool_name": request.name, "channel": ctx.channel},
                exc_info=True,
            )
            return f"Error executing {request.name}: {e}"

    def _classify(self, name: str) -> ToolResponseType:
        kind = self._response_types.get(name)
        if kind is None:
            logger.warning(
                "Tool missing from response-type table, treating as data",
                extra={"tool_name": name},
            )
            return ToolResponseType.DATA
        return kind
