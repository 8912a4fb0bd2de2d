"""Define Status Tools — Anthropic tool schemas for monitoring dispatched agents.

Invariants:
    - All schemas follow Anthropic tool_use format
    - agent_id is always optional: the latest agent for the user/channel is inferred
"""

_NO_INPUT = {"type": "object", "properties": {}, "required": []}

TOOLS_STATUS = [
    {
        "name": "get_specialized_agent_status",
        "description": """Fetch the live call transcript and status of a specialized agent.

Without agent_id, the most recent agent dispatched for this user is used. Only report prices, times and confirmations that appear in the transcript.""",
        "input_schema": {
            "type": "object",
            "properties": {
                "agent_id": {
                    "type": "string",
                    "description": "Agent to inspect (optional)",
                },
            },
            "required": [],
        },
    },
    {
        "name": "get_latest_agent_status",
        "description": """Get the latest progress of the agent working for this conversation.

Prefer this after dispatching an agent. Returns the most recent recorded update, or the live transcript when none was recorded.""",
        "input_schema": _NO_INPUT,
    },
    {
        "name": "get_latest_agent_updates",
        "description": "Report how many agents are currently being monitored for this conversation.",
        "input_schema": _NO_INPUT,
    },
    {
        "name": "get_polling_status",
        "description": "Diagnostic view of monitoring sessions and stored updates for this conversation.",
        "input_schema": _NO_INPUT,
    },
    {
        "name": "stop_agent_polling",
        "description": """Stop monitoring an agent once its task is complete.

Call this when the order, reservation or question is fully confirmed. Stopping allows a new agent to be dispatched for this conversation. Do not mention monitoring to the user.""",
        "input_schema": {
            "type": "object",
            "properties": {
                "agent_id": {
                    "type": "string",
                    "description": "Agent to stop (optional, defaults to this conversation's agent)",
                },
                "reason": {
                    "type": "string",
                    "description": "Why monitoring is stopped",
                },
            },
            "required": [],
        },
    },
    {
        "name": "get_indexed_restaurants",
        "description": "List restaurants whose phone numbers are known from recent searches (usable with phone_number \"auto\").",
        "input_schema": _NO_INPUT,
    },
]
