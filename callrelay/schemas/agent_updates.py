"""Agent Update Schemas — pushed status updates and dispatch outcome responses."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator

from callrelay.core.domain_types import DispatchState, UpdateKind


class AgentUpdate(BaseModel):
    """Status pushed by the conversational-agent side channel."""
    model_config = ConfigDict(populate_by_name=True)

    channel: str = Field(min_length=1)
    agent_id: str = Field(min_length=1, alias="agentId")
    kind: UpdateKind = Field(UpdateKind.UPDATE, alias="type")
    status: str = Field(min_length=1, max_length=20_000)

    @field_validator("status")
    @classmethod
    def strip_status(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("status cannot be empty or whitespace")
        return v


class AgentUpdateResponse(BaseModel):
    significant: bool


class DispatchOutcomeResponse(BaseModel):
    """Terminal outcome, or in_progress=True while provisioning and calling run."""
    channel: str
    state: DispatchState
    ok: bool
    in_progress: bool = False
    reason: str | None = None
    agent_id: str | None = None
    finished_at: datetime | None = None
