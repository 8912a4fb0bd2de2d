"""Status Formatting — history summaries, cached context and diagnostics text."""

from datetime import datetime, timezone

from callrelay.core.domain_types import Specialization, UpdateKind
from callrelay.core.records import (
    ConversationContextEntry, MAX_CONTEXT_UPDATES, PhoneDirectoryEntry,
    PollingSession, StatusUpdate,
)
from callrelay.core.status_format import (
    format_context, format_debug_report, format_directory_listing, format_history,
)

NOW = datetime(2025, 1, 1, 12, 0, tzinfo=timezone.utc)


def _entry(*kinds: UpdateKind) -> ConversationContextEntry:
    entry = ConversationContextEntry(
        channel="c1", agent_id="agent-1",
        specialization=Specialization.ORDER, latest_status="STARTING",
    )
    for i, kind in enumerate(kinds):
        entry.append(StatusUpdate(timestamp=NOW, status=f"status {i}", kind=kind))
    return entry


def test_empty_history_says_agent_may_be_connecting():
    text = format_history("agent-1", {"status": "RUNNING", "contents": []})
    assert text.startswith("Agent agent-1 status: RUNNING")
    assert "No conversation history available yet" in text


def test_running_history_is_active_with_roles_mapped():
    text = format_history("agent-1", {
        "status": "RUNNING",
        "contents": [
            {"role": "assistant", "content": "Hi, I'd like to place a takeout order."},
            {"role": "user", "content": "Sure, go ahead."},
        ],
        "start_ts": 0,
    })
    assert "The conversation is active with 2 messages exchanged." in text
    assert "Agent: Hi, I'd like to place a takeout order." in text
    assert "Restaurant: Sure, go ahead." in text
    assert "Started: 00:00:00 UTC" in text


def test_stopped_history_is_completed():
    text = format_history("agent-1", {
        "status": "STOPPED", "contents": [{"role": "assistant", "content": "Bye"}],
    })
    assert "The conversation is completed with 1 messages exchanged." in text
    assert "Started: Unknown" in text


def test_context_without_updates_is_none():
    assert format_context(_entry()) is None


def test_completed_context_stops_monitoring_and_forbids_guessing():
    text = format_context(_entry(UpdateKind.UPDATE, UpdateKind.COMPLETED))
    assert text.startswith("AGENT TASK COMPLETED")
    assert "Monitoring has been automatically stopped." in text
    assert "Do NOT guess" in text


def test_failed_context_suggests_calling_directly():
    text = format_context(_entry(UpdateKind.FAILED))
    assert text.startswith("AGENT TASK FAILED")
    assert "calling the restaurant directly" in text


def test_context_keeps_only_latest_updates():
    entry = _entry(*([UpdateKind.UPDATE] * 8))
    assert len(entry.updates) == MAX_CONTEXT_UPDATES
    assert entry.updates[0].status == "status 3"
    assert entry.latest_status == "status 7"


def test_debug_report_lists_sessions_and_context():
    session = PollingSession(
        agent_id="agent-1", user_id="u1", channel="c1",
        specialization=Specialization.ORDER, poll_count=2,
    )
    text = format_debug_report("c1", [session], _entry(UpdateKind.UPDATE))
    assert "Active polling sessions: 1" in text
    assert "Key: c1|agent-1" in text
    assert "CONVERSATION CONTEXT (c1):" in text

    empty = format_debug_report("c9", [], None)
    assert "No active polling sessions." in empty
    assert "No conversation context for channel c9" in empty


def test_directory_listing():
    assert format_directory_listing([], 0).startswith("No restaurants currently indexed")
    entries = [PhoneDirectoryEntry("a", "Joe's", "+15551234567", 1.0)]
    text = format_directory_listing(entries, 3)
    assert "(3 total, showing 1 most recent)" in text
    assert "- Joe's (ID: a) - Phone: +15551234567" in text
