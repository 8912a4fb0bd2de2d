"""Tool schema regression tests — dispatch schemas stay aligned with field validation.

Invariants:
    - Every schema's required list (besides phone_number) is what dispatch validation requires
    - phone_number description tells the model it may pass "auto"
    - delivery_type enum matches DeliveryType
    - Tool names are unique across the whole catalogue

Design Decisions:
    - Separate test file: schema validation is a distinct concern from handler behavior
    - Tests check string content of tool definitions, not handler logic
"""

from callrelay.core.domain_types import DeliveryType, Specialization
from callrelay.core.field_validation import missing_fields
from callrelay.services.define_agent_tools import TOOLS_AGENT_DISPATCH
from callrelay.services.define_search_tools import TOOLS_SEARCH
from callrelay.services.tools_registry import BASE_TOOLS

_SPECIALIZATION = {
    "call_and_ask_question_agent": Specialization.INQUIRY,
    "place_phone_order_agent": Specialization.ORDER,
    "make_reservation_agent": Specialization.RESERVATION,
}


def _tool(name: str) -> dict:
    return next(t for t in TOOLS_AGENT_DISPATCH if t["name"] == name)


def test_required_fields_match_validation():
    for name, specialization in _SPECIALIZATION.items():
        required = set(_tool(name)["input_schema"]["required"]) - {"phone_number"}
        assert required == set(missing_fields(specialization, {})), name


def test_phone_number_mentions_auto():
    for name in _SPECIALIZATION:
        desc = _tool(name)["input_schema"]["properties"]["phone_number"]["description"]
        assert '"auto"' in desc


def test_delivery_type_enum_matches_domain():
    prop = _tool("place_phone_order_agent")["input_schema"]["properties"]["delivery_type"]
    assert set(prop["enum"]) == {d.value for d in DeliveryType}


def test_tool_names_unique():
    names = [t["name"] for t in [*BASE_TOOLS, *TOOLS_SEARCH]]
    assert len(names) == len(set(names)) == 13
