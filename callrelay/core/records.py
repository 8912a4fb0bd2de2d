"""Orchestration Records — plain dataclasses held in the key-value store.

Invariants:
    - AgentSession is never mutated after creation (one session per dispatch)
    - PollingSession is unique per (channel, agent_id); its timer is never armed
    - ConversationContextEntry keeps at most MAX_CONTEXT_UPDATES updates (oldest dropped)
    - PhoneDirectoryEntry.phone is immutable once recorded; only last_seen moves

Design Decisions:
    - Dataclasses over pydantic models: in-process state, no validation boundary here
    - frozen=True where the record is a value (session, update, placement, result)
"""

import json
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from callrelay.core.domain_types import (
    CallAction, DispatchState, Specialization, UpdateKind,
)

MAX_CONTEXT_UPDATES = 5


# ─── Tool calls ─────────────────────────────────────────────────

@dataclass
class ToolCallRequest:
    """One function invocation requested by the model in a turn."""
    id: str
    name: str
    arguments: str = "{}"
    executed: bool = False

    def to_message_dict(self) -> dict:
        """OpenAI-shaped tool_call entry for the assistant message."""
        return {
            "id": self.id,
            "type": "function",
            "function": {"name": self.name, "arguments": self.arguments},
        }

    def parse_arguments(self) -> dict:
        """Decode arguments. Raises ValueError on malformed JSON."""
        if not self.arguments or not self.arguments.strip():
            return {}
        parsed = json.loads(self.arguments)
        if not isinstance(parsed, dict):
            raise ValueError("arguments must be a JSON object")
        return parsed


@dataclass
class CompletionResult:
    """Provider-neutral answer: plain text and/or tool-call requests."""
    text: str = ""
    tool_calls: list[ToolCallRequest] = field(default_factory=list)

    @property
    def has_tool_calls(self) -> bool:
        return bool(self.tool_calls)


@dataclass(frozen=True)
class TurnContext:
    """Identity of the conversation a turn belongs to."""
    app_id: str
    user_id: str
    channel: str
    version: str = "v1"


# ─── Agent tracking ─────────────────────────────────────────────

@dataclass(frozen=True)
class AgentSession:
    agent_id: str
    specialization: Specialization
    channel: str
    user_id: str
    created_at: datetime
    session_channel: str = ""


@dataclass
class PollingSession:
    """Pull-based tracking bookkeeping for one dispatched agent."""
    agent_id: str
    user_id: str
    channel: str
    specialization: Specialization
    poll_count: int = 0
    last_status: str = "STARTING"
    consecutive_unchanged_count: int = 0
    # Structurally supported, never armed: refresh is pull-based.
    timer: Any = None

    @property
    def key(self) -> str:
        return polling_key(self.channel, self.agent_id)


def polling_key(channel: str, agent_id: str) -> str:
    return f"{channel}|{agent_id}"


@dataclass(frozen=True)
class StatusUpdate:
    timestamp: datetime
    status: str
    kind: UpdateKind


@dataclass
class ConversationContextEntry:
    channel: str
    agent_id: str
    specialization: Specialization
    latest_status: str
    updates: list[StatusUpdate] = field(default_factory=list)

    def append(self, update: StatusUpdate) -> None:
        self.latest_status = update.status
        self.updates.append(update)
        if len(self.updates) > MAX_CONTEXT_UPDATES:
            self.updates = self.updates[-MAX_CONTEXT_UPDATES:]

    @property
    def last_update(self) -> StatusUpdate | None:
        return self.updates[-1] if self.updates else None


# ─── Directory & routing ────────────────────────────────────────

@dataclass
class PhoneDirectoryEntry:
    business_id: str
    name: str
    phone: str
    last_seen: float


@dataclass(frozen=True)
class CallActionPreference:
    channel: str
    action: CallAction
    timestamp: float


# ─── Dispatch results ───────────────────────────────────────────

@dataclass(frozen=True)
class CallPlacement:
    """Structured telephony result. reason_code is set only when ok is False."""
    ok: bool
    reason_code: str | None = None
    detail: str = ""
    call_id: str | None = None


@dataclass(frozen=True)
class DispatchResult:
    ok: bool
    message: str
    state: DispatchState
    agent_id: str | None = None
    reason: str | None = None


@dataclass(frozen=True)
class DispatchOutcome:
    """Terminal state of a supervised dispatch task."""
    channel: str
    state: DispatchState
    ok: bool
    reason: str | None
    agent_id: str | None
    finished_at: datetime

    def to_dict(self) -> dict:
        return {
            "channel": self.channel,
            "state": self.state.value,
            "ok": self.ok,
            "reason": self.reason,
            "agent_id": self.agent_id,
            "finished_at": self.finished_at.isoformat(),
        }
