"""Tools Registry — per-version tool catalogue and result classification.

Invariants:
    - v1 exposes the base catalogue (dispatch + status + telephony)
    - v2/v3 add search tools only when a search provider is configured
    - Every tool name has exactly one ToolResponseType in TOOL_RESPONSE_TYPES
    - Unknown versions raise UnsupportedVersionError

Design Decisions:
    - Explicit imports from each define_*_tools.py: no auto-discovery
    - Classification kept next to the catalogue: adding a tool means editing both lists here
"""

from callrelay.core.domain_types import ApiVersion, ToolResponseType
from callrelay.core.errors import UnsupportedVersionError
from callrelay.services.define_agent_tools import TOOLS_AGENT_DISPATCH
from callrelay.services.define_search_tools import TOOLS_SEARCH
from callrelay.services.define_status_tools import TOOLS_STATUS
from callrelay.services.define_telephony_tools import TOOLS_TELEPHONY

_A = ToolResponseType.AFFIRMATION
_D = ToolResponseType.DATA

TOOL_RESPONSE_TYPES: dict[str, ToolResponseType] = {
    # Dispatch
    "call_and_ask_question_agent": _A,
    "place_phone_order_agent": _A,
    "make_reservation_agent": _A,
    # Status
    "get_specialized_agent_status": _D,
    "get_latest_agent_status": _D,
    "get_latest_agent_updates": _D,
    "get_polling_status": _D,
    "stop_agent_polling": _A,
    "get_indexed_restaurants": _D,
    # Telephony
    "call_phone": _A,
    "call_hermes_phone": _A,
    "call_sid_phone": _A,
    # Search
    "search_restaurants": _D,
}

BASE_TOOLS: list[dict] = [
    *TOOLS_AGENT_DISPATCH,   # 3 tools
    *TOOLS_STATUS,           # 6 tools
    *TOOLS_TELEPHONY,        # 3 tools
]

_SEARCH_VERSIONS = frozenset({ApiVersion.V2, ApiVersion.V3})


def parse_version(version: str) -> ApiVersion:
    try:
        return ApiVersion(version)
    except ValueError:
        raise UnsupportedVersionError(version)


def includes_search(version: ApiVersion, search_enabled: bool) -> bool:
    return search_enabled and version in _SEARCH_VERSIONS


def get_version_tools(version: str, search_enabled: bool = False) -> list[dict]:
    """Tool schemas sent to the model for this API version."""
    parsed = parse_version(version)
    tools = list(BASE_TOOLS)
    if includes_search(parsed, search_enabled):
        tools.extend(TOOLS_SEARCH)
    return tools
