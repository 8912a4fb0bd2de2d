"""Dispatch Supervisor — supervised background task per channel for provision + call.

Invariants:
    - At most one supervised task per channel (the DispatchGuard already enforces it)
    - The caller awaits through asyncio.shield: a cancelled request never cancels the dispatch
    - Every task records a terminal DispatchOutcome, queryable by channel
    - An unexpected exception or cancellation inside the task releases the DispatchGuard
      (a crashed dispatch never leaves the guard held)

Design Decisions:
    - Task handle instead of a detached fire-and-forget promise: the failure is
      observable (outcome) instead of only logged
    - Outcomes live in the key-value store with the rest of the orchestration state;
      task handles are runtime objects and stay in a local dict
"""

import asyncio
import logging
from collections.abc import Awaitable, Callable
from datetime import datetime, timezone

from callrelay.core.dispatch_guard import DispatchGuard
from callrelay.core.domain_types import DispatchState
from callrelay.core.kv_store import KeyValueStore
from callrelay.core.records import DispatchOutcome, DispatchResult

logger = logging.getLogger(__name__)

_OUTCOME = "dispatch:"
REASON_INTERNAL = "internal_error"
REASON_CANCELLED = "cancelled"


class DispatchSupervisor:

    def __init__(self, store: KeyValueStore, guard: DispatchGuard):
        self._store = store
        self._guard = guard
        self._tasks: dict[str, asyncio.Task] = {}

    async def run(
        self,
        channel: str,
        work: Callable[[], Awaitable[DispatchResult]],
        specialization: str | None = None,
    ) -> DispatchResult:
        """Start work as a supervised task and wait for its result."""
        task = asyncio.create_task(
            self._supervise(channel, work, specialization),
            name=f"dispatch:{channel}",
        )
        self._tasks[channel] = task
        task.add_done_callback(lambda t: self._forget(channel, t))
        return await asyncio.shield(task)

    def outcome(self, channel: str) -> DispatchOutcome | None:
        return self._store.get(_OUTCOME + channel)

    def in_flight(self, channel: str) -> bool:
        task = self._tasks.get(channel)
        return task is not None and not task.done()

    async def drain(self) -> None:
        """Wait for every in-flight dispatch (shutdown, tests)."""
        tasks = [t for t in self._tasks.values() if not t.done()]
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)

    async def _supervise(
        self,
        channel: str,
        work: Callable[[], Awaitable[DispatchResult]],
        specialization: str | None,
    ) -> DispatchResult:
        try:
            result = await work()
        except asyncio.CancelledError:
            self._guard.release(channel)
            self._record(channel, DispatchResult(
                ok=False, message="Dispatch cancelled",
                state=DispatchState.PROVISION_FAILED, reason=REASON_CANCELLED,
            ))
            raise
        except Exception:
            logger.error(
                "Dispatch task crashed; releasing guard",
                extra={"channel": channel, "specialization": specialization},
                exc_info=True,
            )
            self._guard.release(channel)
            result = DispatchResult(
                ok=False,
                message=(
                    f"Error creating {specialization or 'specialized'} agent: "
                    "an internal error occurred. Please try again."
                ),
                state=DispatchState.PROVISION_FAILED,
                reason=REASON_INTERNAL,
            )
        self._record(channel, result)
        return result

    def _record(self, channel: str, result: DispatchResult) -> None:
        self._store.set(_OUTCOME + channel, DispatchOutcome(
            channel=channel,
            state=result.state,
            ok=result.ok,
            reason=result.reason,
            agent_id=result.agent_id,
            finished_at=datetime.now(timezone.utc),
        ))
        logger.info(
            f"Dispatch finished: {result.state.value}",
            extra={
                "channel": channel, "agent_id": result.agent_id,
                "state": result.state.value,
            },
        )

    def _forget(self, channel: str, task: asyncio.Task) -> None:
        if self._tasks.get(channel) is task:
            del self._tasks[channel]
