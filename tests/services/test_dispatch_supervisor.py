"""Dispatch Supervisor — supervised provisioning task per channel.

Tests cover:
    - Result of the work is returned and recorded as the channel's outcome
    - A crashing task releases the guard and records internal_error
    - Cancelling the caller does not cancel the supervised dispatch
"""

import asyncio

import pytest

from callrelay.core.domain_types import DispatchState
from callrelay.core.records import DispatchResult


async def test_outcome_recorded_for_successful_work(supervisor, guard):
    guard.try_acquire("c1")

    async def work():
        return DispatchResult(
            ok=True, message="ok", state=DispatchState.ACTIVE, agent_id="agent-1",
        )

    result = await supervisor.run("c1", work)
    assert result.ok
    outcome = supervisor.outcome("c1")
    assert outcome.state is DispatchState.ACTIVE
    assert outcome.agent_id == "agent-1"
    assert outcome.to_dict()["state"] == "active"
    assert guard.is_held("c1")


async def test_crashed_task_releases_guard(supervisor, guard):
    guard.try_acquire("c1")

    async def work():
        raise RuntimeError("boom")

    result = await supervisor.run("c1", work, "phone-ordering")
    assert not result.ok
    assert result.reason == "internal_error"
    assert result.message.startswith("Error creating phone-ordering agent")
    assert not guard.is_held("c1")
    assert supervisor.outcome("c1").state is DispatchState.PROVISION_FAILED


async def test_cancelled_caller_does_not_cancel_dispatch(supervisor, guard):
    guard.try_acquire("c1")
    gate = asyncio.Event()

    async def work():
        await gate.wait()
        return DispatchResult(
            ok=True, message="ok", state=DispatchState.ACTIVE, agent_id="agent-1",
        )

    caller = asyncio.create_task(supervisor.run("c1", work))
    await asyncio.sleep(0)
    assert supervisor.in_flight("c1")

    caller.cancel()
    with pytest.raises(asyncio.CancelledError):
        await caller

    gate.set()
    await supervisor.drain()
    assert supervisor.outcome("c1").ok
    assert guard.is_held("c1")


def test_no_outcome_for_unknown_channel(supervisor):
    assert supervisor.outcome("nobody") is None
    assert not supervisor.in_flight("nobody")
