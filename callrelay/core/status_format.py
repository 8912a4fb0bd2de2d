"""Status Formatting — model-facing text for agent history, cached context and diagnostics.

Invariants:
    - Pure functions over records/dicts — no IO, no clock reads except start_ts conversion
    - COMPLETED and FAILED context text tells the model monitoring has stopped
    - COMPLETED and UPDATE text forbid reporting unconfirmed prices or times

Design Decisions:
    - Agent-platform history roles collapse to Agent/Restaurant: the model only needs
      to know who said what on the call
"""

from collections.abc import Sequence
from datetime import datetime, timezone

from callrelay.core.domain_types import UpdateKind
from callrelay.core.records import (
    ConversationContextEntry, PhoneDirectoryEntry, PollingSession,
)

RUNNING = "RUNNING"


def _started_at(start_ts: object) -> str:
    if not isinstance(start_ts, (int, float)) or isinstance(start_ts, bool):
        return "Unknown"
    return datetime.fromtimestamp(start_ts, tz=timezone.utc).strftime("%H:%M:%S UTC")


def format_history(agent_id: str, history: dict) -> str:
    """Render the agent platform's history payload."""
    status = history.get("status") or "UNKNOWN"
    contents = history.get("contents") or []
    if not contents:
        return (
            f"Agent {agent_id} status: {status}\n\n"
            "No conversation history available yet. The agent may still be "
            "connecting to the call or waiting for someone to answer."
        )

    conversation = "\n".join(
        f"{'Agent' if m.get('role') == 'assistant' else 'Restaurant'}: {m.get('content', '')}"
        for m in contents
    )
    state = "active" if status == RUNNING else "completed"
    return (
        f"Agent {agent_id} Status Update:\n\n"
        f"The conversation is {state} with {len(contents)} messages exchanged.\n\n"
        f"Recent Conversation:\n{conversation}\n\n"
        f"Status: {history.get('status') or RUNNING}\n"
        f"Started: {_started_at(history.get('start_ts'))}"
    )


def format_context(entry: ConversationContextEntry) -> str | None:
    """Render the latest cached update, or None if nothing was pushed yet."""
    last = entry.last_update
    if last is None:
        return None
    who = f"Your {entry.specialization.value} agent ({entry.agent_id})"
    if last.kind is UpdateKind.COMPLETED:
        return (
            "AGENT TASK COMPLETED\n\n"
            f"{who} successfully completed the task.\n\n"
            f"Final Status:\n{entry.latest_status}\n\n"
            "Monitoring has been automatically stopped.\n\n"
            "IMPORTANT: Only provide price and time information that is "
            "explicitly confirmed in the conversation above. Do NOT guess or "
            "estimate prices."
        )
    if last.kind is UpdateKind.FAILED:
        return (
            "AGENT TASK FAILED\n\n"
            f"{who} encountered an issue and could not complete the task.\n\n"
            f"Status:\n{entry.latest_status}\n\n"
            "Monitoring has been automatically stopped.\n\n"
            "SUGGESTION: You may want to try calling the restaurant directly."
        )
    return (
        "AGENT UPDATE\n\n"
        f"{who} is in progress.\n\n"
        f"Latest Status:\n{entry.latest_status}\n\n"
        "IMPORTANT: Only report confirmed details. Do NOT make up or estimate "
        "prices or times."
    )


def format_debug_report(
    channel: str,
    sessions: Sequence[PollingSession],
    entry: ConversationContextEntry | None,
) -> str:
    lines = ["POLLING DEBUG INFO", ""]
    if not sessions:
        lines.append("No active polling sessions.")
    else:
        lines.append(f"Active polling sessions: {len(sessions)}")
        for s in sessions:
            lines += [
                "",
                f"Agent {s.agent_id} ({s.specialization.value}):",
                f"  - Key: {s.key}",
                f"  - Polls: {s.poll_count}",
                f"  - Channel: {s.channel}",
                f"  - Status: {s.last_status[:150]}",
            ]
    lines.append("")
    if entry is None:
        lines.append(f"No conversation context for channel {channel}")
    else:
        lines += [
            f"CONVERSATION CONTEXT ({channel}):",
            f"  - Agent: {entry.agent_id} ({entry.specialization.value})",
            f"  - Updates: {len(entry.updates)}",
            f"  - Latest: {entry.latest_status[:200]}",
        ]
        if entry.last_update is not None:
            lines.append(f"  - Last update type: {entry.last_update.kind.value}")
    return "\n".join(lines)


def format_directory_listing(
    entries: Sequence[PhoneDirectoryEntry], total: int,
) -> str:
    if not entries:
        return (
            "No restaurants currently indexed. Perform a search to build the "
            "restaurant index."
        )
    listing = "\n".join(
        f"- {e.name} (ID: {e.business_id}) - Phone: {e.phone}" for e in entries
    )
    return (
        f"Currently indexed restaurants ({total} total, showing "
        f"{len(entries)} most recent):\n\n{listing}\n\n"
        "These restaurants can be used for orders without additional searches."
    )
