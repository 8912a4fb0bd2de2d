"""Define Telephony Tools — Anthropic tool schemas that ring a phone into this conversation.

Invariants:
    - All three are call-initiating tools: the dispatcher suppresses them when the
      transcript shows a call already started or someone already answered
"""

_NO_INPUT = {"type": "object", "properties": {}, "required": []}

TOOLS_TELEPHONY = [
    {
        "name": "call_phone",
        "description": "Call a phone number and connect it to this conversation. Use only when the user explicitly asks to be called at a number.",
        "input_schema": {
            "type": "object",
            "properties": {
                "phone_number": {
                    "type": "string",
                    "description": "Number to call, e.g. +15551234567",
                },
            },
            "required": ["phone_number"],
        },
    },
    {
        "name": "call_hermes_phone",
        "description": "Call Hermes and connect them to this conversation.",
        "input_schema": _NO_INPUT,
    },
    {
        "name": "call_sid_phone",
        "description": "Call Sid and connect them to this conversation.",
        "input_schema": _NO_INPUT,
    },
]
