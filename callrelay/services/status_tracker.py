"""Status Tracker — on-demand agent status, pushed-update context cache, stop/cleanup.

Invariants:
    - fetch_status() never raises past this boundary: every failure is a descriptive string
    - No agent_id and no recorded AgentSession → "no active agent" with zero remote calls
    - latest_status() serves the cached context entry before any live fetch
    - One tracking generation per channel: start_tracking() supersedes older polling
      sessions and the context entry for the same channel
    - COMPLETED/FAILED pushes delete the PollingSession and release the DispatchGuard;
      the context entry is kept so the final state can still be served
    - stop() deletes PollingSession + context entry and releases the DispatchGuard

Design Decisions:
    - Significance is an injected predicate (ADR: swap the phrase heuristic for a
      structured status schema without touching the tracker)
    - Re-engagement hook optional and unwired by default: refresh stays pull-based
    - Pull refreshes update poll_count/last_status so the debug report reflects them
"""

import logging
from collections.abc import Callable
from datetime import datetime, timezone

from callrelay.core.dispatch_guard import DispatchGuard
from callrelay.core.domain_types import UpdateKind
from callrelay.core.errors import AgentNotFoundError, AgentPlatformError
from callrelay.core.boundary_protocols import AgentPlatform, ReengageHook
from callrelay.core.kv_store import KeyValueStore
from callrelay.core.records import (
    AgentSession, ConversationContextEntry, PollingSession, StatusUpdate,
    polling_key,
)
from callrelay.core.significance import SignificancePredicate, is_significant_update
from callrelay.core.status_format import (
    format_context, format_debug_report, format_history,
)

logger = logging.getLogger(__name__)

_SESSION = "session:"
_POLLING = "polling:"
_CONTEXT = "context:"

NO_ACTIVE_AGENT = (
    "No active agent found. Please create a specialized agent first "
    "(order, reservation, or inquiry)."
)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class StatusTracker:
    """Bookkeeping for dispatched agents, keyed by user and channel."""

    def __init__(
        self,
        store: KeyValueStore,
        guard: DispatchGuard,
        platform: AgentPlatform,
        predicate: SignificancePredicate = is_significant_update,
        reengage: ReengageHook | None = None,
        clock: Callable[[], datetime] = _utcnow,
    ):
        self._store = store
        self._guard = guard
        self._platform = platform
        self._predicate = predicate
        self._reengage = reengage
        self._clock = clock

    # -- Sessions & tracking ---------------------------------------------------

    def record_session(self, session: AgentSession) -> None:
        self._store.set(_SESSION + session.user_id, session)

    def latest_session(self, user_id: str) -> AgentSession | None:
        return self._store.get(_SESSION + user_id)

    def start_tracking(self, session: AgentSession) -> PollingSession:
        """Register pull-based tracking, superseding the channel's previous agent."""
        for key, old in self._store.list(self._channel_prefix(session.channel)):
            self._cancel_timer(old)
            self._store.delete(key)
        self._store.delete(_CONTEXT + session.channel)
        polling = PollingSession(
            agent_id=session.agent_id,
            user_id=session.user_id,
            channel=session.channel,
            specialization=session.specialization,
        )
        self._store.set(_POLLING + polling.key, polling)
        logger.info(
            "Tracking started (pull-based, no timer armed)",
            extra={"channel": session.channel, "agent_id": session.agent_id},
        )
        return polling

    def polling_sessions(self, channel: str) -> list[PollingSession]:
        return [v for _, v in self._store.list(self._channel_prefix(channel))]

    def context_entry(self, channel: str) -> ConversationContextEntry | None:
        return self._store.get(_CONTEXT + channel)

    # -- On-demand status ------------------------------------------------------

    async def fetch_status(
        self, user_id: str, channel: str, agent_id: str | None = None,
    ) -> str:
        if not agent_id:
            session = self.latest_session(user_id)
            if session is None:
                return NO_ACTIVE_AGENT
            agent_id = session.agent_id

        try:
            history = await self._platform.history(agent_id)
        except AgentNotFoundError:
            return (
                f"Agent {agent_id} not found. The agent may have completed its "
                "task or the ID might be incorrect."
            )
        except AgentPlatformError as e:
            logger.warning(
                f"Agent history unavailable: {e.message}",
                extra={"agent_id": agent_id, "error_code": e.code},
            )
            if e.timed_out:
                return f"Error: {e.message}"
            return f"Error checking agent {agent_id} status: {e.message}"

        text = format_history(agent_id, history)
        self._record_poll(channel, agent_id, text)
        return text

    async def latest_status(self, user_id: str, channel: str) -> str:
        entry = self.context_entry(channel)
        cached = format_context(entry) if entry else None
        if cached:
            return cached
        return await self.fetch_status(user_id, channel)

    def latest_updates(self, channel: str) -> str:
        active = self.polling_sessions(channel)
        if not active:
            return "No active agent monitoring sessions found."
        return (
            f"Monitoring {len(active)} active agent(s). Use "
            "get_latest_agent_status to see the latest progress."
        )

    def debug_report(self, channel: str) -> str:
        return format_debug_report(
            channel, self.polling_sessions(channel), self.context_entry(channel),
        )

    # -- Pushed updates --------------------------------------------------------

    async def ingest_update(
        self, channel: str, agent_id: str, kind: UpdateKind, status: str,
    ) -> bool:
        """Store a pushed update. Returns whether it was significant."""
        polling = self._store.get(_POLLING + polling_key(channel, agent_id))
        entry = self.context_entry(channel)
        if entry is not None and entry.agent_id != agent_id:
            entry = None
        if polling is None and entry is None:
            logger.warning(
                "Pushed update for untracked agent ignored",
                extra={"channel": channel, "agent_id": agent_id},
            )
            return False

        previous = polling.last_status if polling else entry.latest_status
        significant = self._predicate(status, previous)

        if entry is None:
            entry = ConversationContextEntry(
                channel=channel, agent_id=agent_id,
                specialization=polling.specialization, latest_status=status,
            )
        entry.append(StatusUpdate(timestamp=self._clock(), status=status, kind=kind))
        self._store.set(_CONTEXT + channel, entry)

        if polling is not None:
            self._apply_poll(polling, status)
        if kind.is_terminal:
            self._end_tracking(channel, agent_id, polling)

        logger.info(
            f"Pushed {kind.value} update (significant={significant})",
            extra={"channel": channel, "agent_id": agent_id},
        )
        if significant and self._reengage is not None:
            await self._reengage(channel, entry)
        return significant

    # -- Stop ------------------------------------------------------------------

    def stop(
        self, channel: str, agent_id: str | None = None, reason: str | None = None,
    ) -> str:
        if agent_id:
            polling = self._store.get(_POLLING + polling_key(channel, agent_id))
            if polling is None:
                return f"No active polling session found for agent {agent_id}."
        else:
            sessions = self.polling_sessions(channel)
            if not sessions:
                return "No active agent found to stop."
            polling = sessions[0]

        self._cancel_timer(polling)
        self._store.delete(_POLLING + polling.key)
        self._store.delete(_CONTEXT + channel)
        self._guard.release(channel)
        reason = reason or "manually stopped"
        logger.info(
            f"Stopped monitoring. Reason: {reason}",
            extra={"channel": channel, "agent_id": polling.agent_id},
        )
        return f"Stopped monitoring agent {polling.agent_id}. Reason: {reason}"

    # -- Internals -------------------------------------------------------------

    def _record_poll(self, channel: str, agent_id: str, status: str) -> None:
        polling = self._store.get(_POLLING + polling_key(channel, agent_id))
        if polling is not None:
            self._apply_poll(polling, status)

    @staticmethod
    def _apply_poll(polling: PollingSession, status: str) -> None:
        polling.poll_count += 1
        if status == polling.last_status:
            polling.consecutive_unchanged_count += 1
        else:
            polling.consecutive_unchanged_count = 0
        polling.last_status = status

    def _end_tracking(
        self, channel: str, agent_id: str, polling: PollingSession | None,
    ) -> None:
        if polling is not None:
            self._cancel_timer(polling)
        self._store.delete(_POLLING + polling_key(channel, agent_id))
        self._guard.release(channel)

    @staticmethod
    def _cancel_timer(polling: PollingSession) -> None:
        if polling.timer is not None:
            polling.timer.cancel()
            polling.timer = None

    @staticmethod
    def _channel_prefix(channel: str) -> str:
        return f"{_POLLING}{channel}|"
