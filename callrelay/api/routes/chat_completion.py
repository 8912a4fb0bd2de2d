"""Chat Completion — versioned OpenAI-style completion endpoint with tool execution.

Invariants:
    - Every request passes require_bearer_token before reaching the handler
    - call_action is stored for the channel BEFORE the turn runs (dispatch reads it)
    - Unknown versions are rejected with UnsupportedVersionError (404)
    - Both /completion and /completions paths serve the same handler

Design Decisions:
    - Version is a path parameter validated by the tools registry, not one router per version
    - stream is accepted and ignored: responses are always a single JSON body
"""

import logging

from fastapi import APIRouter, Depends

from callrelay.api.dependencies import require_bearer_token
from callrelay.core.records import TurnContext
from callrelay.schemas.chat import ChatCompletionRequest, ChatCompletionResponse
from callrelay.services.container import ServiceContainer, get_container
from callrelay.services.tools_registry import parse_version

logger = logging.getLogger(__name__)
router = APIRouter(
    prefix="/api/{version}/chat",
    tags=["chat"],
    dependencies=[Depends(require_bearer_token)],
)


@router.post("/completion", response_model=ChatCompletionResponse)
@router.post("/completions", response_model=ChatCompletionResponse)
async def chat_completion(
    version: str,
    body: ChatCompletionRequest,
    container: ServiceContainer = Depends(get_container),
):
    """Run one chat turn: completion, tool calls, follow-up."""
    parse_version(version)
    channel = body.channel or ""

    if body.call_action and channel:
        container.call_actions.set(channel, body.call_action)
        logger.info(
            f"Stored call action {body.call_action.value}",
            extra={"channel": channel},
        )
    elif body.call_action:
        logger.info("Call action provided without a channel; not stored")

    ctx = TurnContext(
        app_id=body.app_id or container.settings.agora_app_id,
        user_id=body.user_id or "",
        channel=channel,
        version=version,
    )
    result = await container.chat.run(
        body.message_dicts(), ctx, **body.completion_params(),
    )
    return ChatCompletionResponse.from_text(
        result.text, body.model or container.settings.agent_model,
    )
