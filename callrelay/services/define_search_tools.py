"""Define Search Tools — Anthropic tool schema for restaurant search.

Invariants:
    - Results carry phone numbers that are indexed for later "auto" dispatch
"""

TOOLS_SEARCH = [
    {
        "name": "search_restaurants",
        "description": """Search restaurants by cuisine, dish or name near a location.

Returns name, phone, rating, price and address for each match. Phone numbers found here are remembered, so a later order or reservation can use phone_number "auto".""",
        "input_schema": {
            "type": "object",
            "properties": {
                "term": {
                    "type": "string",
                    "description": "What to search for, e.g. \"thai\", \"pizza\", a restaurant name",
                },
                "location": {
                    "type": "string",
                    "description": "City, neighborhood or address",
                },
                "limit": {
                    "type": "integer",
                    "description": "Number of results (default 5, max 20)",
                },
            },
            "required": ["term", "location"],
        },
    },
]
