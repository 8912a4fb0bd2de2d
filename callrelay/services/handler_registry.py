"""Handler Registry — explicit, version-scoped mapping from tool name to handler.

Invariants:
    - Every tool→handler mapping is visible here: no getattr magic, no auto-discovery
    - The handler set for a version matches get_version_tools() for the same version
    - Every handler has the signature (app_id, user_id, channel, args) -> str

Design Decisions:
    - Explicit dict over getattr (ADR: adding a tool requires editing this dict)
    - Handlers split by concern, max ~4 methods per class
"""

from dataclasses import dataclass

from callrelay.core.boundary_protocols import ToolHandler
from callrelay.services.handle_directory import DirectoryHandlers
from callrelay.services.handle_dispatch import DispatchHandlers
from callrelay.services.handle_status import StatusHandlers
from callrelay.services.handle_telephony import TelephonyHandlers
from callrelay.services.tools_registry import includes_search, parse_version


@dataclass(frozen=True)
class HandlerSet:
    """Handler instances shared by every turn."""
    dispatch: DispatchHandlers
    status: StatusHandlers
    directory: DirectoryHandlers
    telephony: TelephonyHandlers


def build_handler_registry(
    version: str, handlers: HandlerSet, search_enabled: bool = False,
) -> dict[str, ToolHandler]:
    parsed = parse_version(version)
    dispatch, status = handlers.dispatch, handlers.status
    directory, telephony = handlers.directory, handlers.telephony

    registry: dict[str, ToolHandler] = {
        # Dispatch (3 tools)
        "call_and_ask_question_agent": dispatch.call_and_ask_question_agent,
        "place_phone_order_agent": dispatch.place_phone_order_agent,
        "make_reservation_agent": dispatch.make_reservation_agent,

        # Status (6 tools)
        "get_specialized_agent_status": status.get_specialized_agent_status,
        "get_latest_agent_status": status.get_latest_agent_status,
        "get_latest_agent_updates": status.get_latest_agent_updates,
        "stop_agent_polling": status.stop_agent_polling,
        "get_polling_status": directory.get_polling_status,
        "get_indexed_restaurants": directory.get_indexed_restaurants,

        # Telephony (3 tools)
        "call_phone": telephony.call_phone,
        "call_hermes_phone": telephony.call_hermes_phone,
        "call_sid_phone": telephony.call_sid_phone,
    }
    if includes_search(parsed, search_enabled):
        registry["search_restaurants"] = directory.search_restaurants
    return registry
