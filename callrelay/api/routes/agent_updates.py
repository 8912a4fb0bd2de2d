"""Agent Updates — pushed status ingestion and supervised dispatch outcomes.

Invariants:
    - Pushed updates for untracked agents are accepted and reported as not significant
    - GET dispatch reports an in-flight dispatch as GUARDED with in_progress=True,
      ahead of any earlier outcome for the channel
    - GET dispatch returns 404 when the channel never had a supervised dispatch
"""

import logging

from fastapi import APIRouter, Depends

from callrelay.api.dependencies import require_bearer_token
from callrelay.core.domain_types import DispatchState
from callrelay.core.errors import ResourceNotFoundError
from callrelay.schemas.agent_updates import (
    AgentUpdate, AgentUpdateResponse, DispatchOutcomeResponse,
)
from callrelay.services.container import ServiceContainer, get_container

logger = logging.getLogger(__name__)
router = APIRouter(
    prefix="/api/v1/agents",
    tags=["agents"],
    dependencies=[Depends(require_bearer_token)],
)


@router.post("/updates", response_model=AgentUpdateResponse)
async def push_agent_update(
    body: AgentUpdate,
    container: ServiceContainer = Depends(get_container),
):
    """Ingest a status update pushed by a running agent."""
    significant = await container.tracker.ingest_update(
        body.channel, body.agent_id, body.kind, body.status,
    )
    return AgentUpdateResponse(significant=significant)


@router.get("/{channel}/dispatch", response_model=DispatchOutcomeResponse)
async def get_dispatch_outcome(
    channel: str,
    container: ServiceContainer = Depends(get_container),
):
    """Terminal state of the channel's last supervised dispatch."""
    if container.supervisor.in_flight(channel):
        return DispatchOutcomeResponse(
            channel=channel, state=DispatchState.GUARDED, ok=False,
            in_progress=True,
        )
    outcome = container.supervisor.outcome(channel)
    if outcome is None:
        raise ResourceNotFoundError("Dispatch", channel)
    return DispatchOutcomeResponse(**outcome.to_dict())
