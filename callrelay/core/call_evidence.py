"""Call Evidence — detects that a phone call is already underway in the conversation.

Invariants:
    - Only the last EVIDENCE_WINDOW messages are scanned
    - A greeting from the user wins over call-initiation text (someone already answered)
    - Returns the synthetic tool result to substitute, or None when no evidence is found

Design Decisions:
    - Plain substring heuristics over message text: the model retries call tools
      after they already succeeded, and the transcript is the only shared record
"""

from collections.abc import Sequence

CALL_TOOL_NAMES = frozenset({"call_phone", "call_hermes_phone", "call_sid_phone"})
EVIDENCE_WINDOW = 15

_ASSISTANT_PHRASES = (
    "Phone call initiated", "call initiated", "Calling", "I'll call",
    "Making a call",
)
_TOOL_PHRASES = ("Phone call initiated successfully", "call initiated", "Call ID:")
_USER_GREETINGS = (
    "hello", "hi ", "hey", "good morning", "good afternoon", "good evening",
    "who is this", "who's calling",
)

SOMEONE_JOINED_RESULT = (
    "A call is already active and someone has joined the conversation. "
    "Continue talking with them instead of making another call."
)
RECENT_CALL_RESULT = (
    "A call was already initiated recently. The call should be connecting or active."
)


def message_text(message: dict) -> str:
    """Flatten string or content-part content to text."""
    content = message.get("content")
    if isinstance(content, str):
        return content
    if isinstance(content, list):
        return "".join(
            part.get("text", "") for part in content
            if isinstance(part, dict)
        )
    return ""


def _has_recent_call(message: dict) -> bool:
    text = message_text(message)
    if not text:
        return False
    role = message.get("role")
    if role == "assistant":
        return any(p in text for p in _ASSISTANT_PHRASES)
    if role == "tool":
        return any(p in text for p in _TOOL_PHRASES)
    return False


def _someone_joined(message: dict) -> bool:
    if message.get("role") != "user":
        return False
    text = message_text(message).lower()
    return any(g in text for g in _USER_GREETINGS)


def find_call_evidence(
    messages: Sequence[dict], window: int = EVIDENCE_WINDOW,
) -> str | None:
    recent = list(messages)[-window:]
    if any(_someone_joined(m) for m in recent):
        return SOMEONE_JOINED_RESULT
    if any(_has_recent_call(m) for m in recent):
        return RECENT_CALL_RESULT
    return None
