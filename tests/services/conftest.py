"""Service test fixtures — orchestration components wired over one in-memory store.

Invariants:
    - Every test gets a fresh store, guard, tracker, supervisor and lifecycle manager
    - External collaborators are the in-process fakes from tests/fakes.py
"""

import pytest

from callrelay.services.agent_lifecycle import AgentLifecycleManager
from callrelay.services.dispatch_supervisor import DispatchSupervisor
from callrelay.services.status_tracker import StatusTracker


@pytest.fixture
def tracker(store, guard, platform):
    return StatusTracker(store, guard, platform)


@pytest.fixture
def supervisor(store, guard):
    return DispatchSupervisor(store, guard)


@pytest.fixture
def lifecycle(
    settings, guard, directory, call_actions, tracker, supervisor,
    platform, telephony, issuer,
):
    return AgentLifecycleManager(
        settings, guard, directory, call_actions, tracker, supervisor,
        platform, telephony, issuer,
    )


@pytest.fixture
def joes(directory):
    """Directory pre-seeded with one searchable restaurant for user u1."""
    directory.record_results(
        "u1", [{"id": "a", "name": "Joe's", "phone": "+15551234567"}],
    )
    return "+15551234567"
