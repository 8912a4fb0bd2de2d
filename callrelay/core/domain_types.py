"""Domain Types — rich types that replace bare primitives across the codebase.

Invariants:
    - Channel is the primary key for nearly all orchestration state
    - All valid states encoded as Enums — no raw string matching outside this module

Design Decisions:
    - NewType over dataclass wrappers: zero runtime cost, full type-checker support
    - str Enums: serialize to JSON and compare equal to their wire values
      (ADR: tool args and pushed updates arrive as plain strings)
"""

from enum import Enum
from typing import NewType


# ─── Identity Types ──────────────────────────────────────────────

Channel = NewType("Channel", str)
UserId = NewType("UserId", str)
AgentId = NewType("AgentId", str)
AppId = NewType("AppId", str)


# ─── Enums ───────────────────────────────────────────────────────

class Specialization(str, Enum):
    """Kinds of task a specialized voice agent can perform on a call."""
    INQUIRY = "restaurant-inquiry"
    ORDER = "phone-ordering"
    RESERVATION = "reservation-booking"


class UpdateKind(str, Enum):
    """Kinds of pushed status update. COMPLETED and FAILED end tracking."""
    UPDATE = "UPDATE"
    COMPLETED = "COMPLETED"
    FAILED = "FAILED"

    @property
    def is_terminal(self) -> bool:
        return self is not UpdateKind.UPDATE


class ToolResponseType(str, Enum):
    """Affirmation = short confirmation; data = content the model reasons over."""
    AFFIRMATION = "affirmation"
    DATA = "data"


class CallAction(str, Enum):
    """Outbound routing preference for a channel."""
    CALL_HERMES = "call_hermes"
    CALL_SID = "call_sid"
    LIVE = "live"


DEFAULT_CALL_ACTION = CallAction.CALL_HERMES


class DispatchState(str, Enum):
    """States of one dispatch attempt.

    IDLE → GUARDED → PROVISIONED → {CALLING → ACTIVE | CALL_FAILED} | PROVISION_FAILED
    """
    IDLE = "idle"
    GUARDED = "guarded"
    PROVISIONED = "provisioned"
    CALLING = "calling"
    ACTIVE = "active"
    CALL_FAILED = "call_failed"
    PROVISION_FAILED = "provision_failed"


class DeliveryType(str, Enum):
    DELIVERY = "delivery"
    PICKUP = "pickup"
    TAKEOUT = "takeout"


class ApiVersion(str, Enum):
    """Tool catalogue versions exposed by the chat route."""
    V1 = "v1"
    V2 = "v2"
    V3 = "v3"
