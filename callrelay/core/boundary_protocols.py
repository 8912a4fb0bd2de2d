"""Boundary Protocols — contracts between the orchestration services and the IO adapters.

Invariants:
    - Core NEVER imports from infrastructure — dependency arrows point inward only
    - Every external collaborator is reached through one of these Protocols
    - Implementations are provided by the container via dependency injection

Design Decisions:
    - Protocol over ABC: structural subtyping, tests pass plain fake classes
    - Async in Protocol: boundary methods do IO; core pure functions that consume
      their results stay synchronous
"""

from collections.abc import Awaitable, Callable
from typing import Protocol

from callrelay.core.records import (
    CallPlacement, CompletionResult, ConversationContextEntry,
)

# (app_id, user_id, channel, args) -> model-facing result text
ToolHandler = Callable[[str, str, str, dict], Awaitable[str]]

# Called with (channel, entry) when a pushed update is significant
ReengageHook = Callable[[str, ConversationContextEntry], Awaitable[None]]


class CompletionClient(Protocol):
    async def complete(
        self,
        messages: list[dict],
        tools: list[dict] | None = None,
        *,
        model: str | None = None,
        max_tokens: int | None = None,
        temperature: float | None = None,
        top_p: float | None = None,
    ) -> CompletionResult: ...


class AgentPlatform(Protocol):
    async def join(self, name: str, properties: dict) -> str: ...
    async def history(self, agent_id: str) -> dict: ...


class TelephonyBridge(Protocol):
    async def place(
        self, app_id: str, session_id: str, destination: str,
    ) -> CallPlacement: ...


class SearchProvider(Protocol):
    async def search(
        self, term: str, location: str, limit: int = 5,
    ) -> list[dict]: ...
