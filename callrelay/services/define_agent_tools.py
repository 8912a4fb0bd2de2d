"""Define Agent Tools — Anthropic tool schemas for dispatching specialized voice agents.

Invariants:
    - All schemas follow Anthropic tool_use format
    - phone_number accepts "auto": the number is then resolved from recent search results
    - Each tool dispatches at most one agent per conversation at a time

Design Decisions:
    - Tool schemas in dedicated files: explicit, no auto-discovery
    - Descriptions insist on confirmed, real customer details: the agent speaks them
      aloud to a real business
"""

_PHONE = {
    "type": "string",
    "description": (
        "Restaurant phone number exactly as returned by a search, or \"auto\" "
        "to use the number indexed from recent search results. Never invent numbers."
    ),
}
_RESTAURANT = {
    "type": "string",
    "description": "Name of the restaurant to call",
}
_CUSTOMER = {
    "type": "string",
    "description": (
        "The customer's real full name as confirmed with the user. "
        "Never use placeholders such as \"Customer\" or \"User\"."
    ),
}

TOOLS_AGENT_DISPATCH = [
    {
        "name": "call_and_ask_question_agent",
        "description": """Dispatch a voice agent that phones a restaurant and asks one question on the user's behalf.

The agent calls, asks the question, listens to the answer and hangs up. This returns immediately once the call is placed; use get_latest_agent_status afterwards to read the answer.""",
        "input_schema": {
            "type": "object",
            "properties": {
                "phone_number": _PHONE,
                "restaurant_name": _RESTAURANT,
                "question": {
                    "type": "string",
                    "description": "The exact question to ask the restaurant",
                },
            },
            "required": ["phone_number", "restaurant_name", "question"],
        },
    },
    {
        "name": "place_phone_order_agent",
        "description": """Dispatch a voice agent that phones a restaurant and places a food order for the user.

Confirm every detail with the user first: their real name, the exact items, and whether it is delivery or pickup (and the address for delivery). Returns immediately once the call is placed; use get_latest_agent_status for the confirmed total and time.""",
        "input_schema": {
            "type": "object",
            "properties": {
                "phone_number": _PHONE,
                "restaurant_name": _RESTAURANT,
                "customer_name": _CUSTOMER,
                "food_items": {
                    "type": "string",
                    "description": "Items to order, with quantities",
                },
                "delivery_type": {
                    "type": "string",
                    "enum": ["delivery", "pickup", "takeout"],
                    "description": "How the customer receives the order",
                },
                "delivery_address": {
                    "type": "string",
                    "description": "Delivery address (required for delivery)",
                },
            },
            "required": [
                "phone_number", "restaurant_name", "customer_name",
                "food_items", "delivery_type",
            ],
        },
    },
    {
        "name": "make_reservation_agent",
        "description": """Dispatch a voice agent that phones a restaurant and books a table for the user.

Confirm the user's real name, party size and preferred time first. Returns immediately once the call is placed; use get_latest_agent_status for the confirmed booking.""",
        "input_schema": {
            "type": "object",
            "properties": {
                "phone_number": _PHONE,
                "restaurant_name": _RESTAURANT,
                "customer_name": _CUSTOMER,
                "party_size": {
                    "type": "integer",
                    "description": "Number of people",
                },
                "time_preferences": {
                    "type": "string",
                    "description": "Preferred date and time, with any flexibility",
                },
            },
            "required": [
                "phone_number", "restaurant_name", "customer_name",
                "party_size", "time_preferences",
            ],
        },
    },
]
