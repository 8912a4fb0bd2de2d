"""Chat Turn — one request/response cycle: initial completion, then tool dispatch.

Invariants:
    - The version is validated before any completion request is made
    - The initial completion sees exactly the tools of the requested version
    - The handler registry and the tool list are built for the same version
    - The caller's message list is never mutated (the turn works on a copy)
"""

import logging
from dataclasses import dataclass, field

from callrelay.core.boundary_protocols import CompletionClient
from callrelay.core.records import TurnContext
from callrelay.services.handler_registry import HandlerSet, build_handler_registry
from callrelay.services.tool_dispatch import ToolCallDispatcher
from callrelay.services.tools_registry import get_version_tools

logger = logging.getLogger(__name__)


@dataclass
class ChatTurnResult:
    text: str
    tool_names: list[str] = field(default_factory=list)


class ChatTurnService:

    def __init__(
        self,
        completion_client: CompletionClient,
        dispatcher: ToolCallDispatcher,
        handlers: HandlerSet,
        search_enabled: bool = False,
    ):
        self._client = completion_client
        self._dispatcher = dispatcher
        self._handlers = handlers
        self._search_enabled = search_enabled

    async def run(
        self,
        messages: list[dict],
        ctx: TurnContext,
        **completion_params,
    ) -> ChatTurnResult:
        tools = get_version_tools(ctx.version, self._search_enabled)
        registry = build_handler_registry(
            ctx.version, self._handlers, self._search_enabled,
        )
        transcript = list(messages)

        answer = await self._client.complete(
            transcript, tools, **completion_params,
        )
        logger.info(
            f"Initial completion: {len(answer.tool_calls)} tool call(s)",
            extra={"channel": ctx.channel},
        )
        text = await self._dispatcher.resolve(
            answer, transcript, registry, ctx, **completion_params,
        )
        return ChatTurnResult(
            text=text,
            tool_names=[r.name for r in answer.tool_calls if r.executed],
        )

