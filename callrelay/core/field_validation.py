"""Field Validation — per-specialization checks on caller-supplied dispatch fields.

Invariants:
    - Returns a corrective natural-language string on failure, None on success (never raises)
    - Missing fields are reported all at once, in declaration order
    - delivery_address is required only when delivery_type is "delivery"
    - Placeholder customer names are rejected before any side effect

Design Decisions:
    - Strings, not exceptions: the orchestrating model relays them and asks the user
      (ADR: a validation failure must not crash the turn)
    - Placeholder detection by whole word tokens, not substrings: "Busera" is a real name
"""

import re
from collections.abc import Mapping

from callrelay.core.domain_types import DeliveryType, Specialization

_REQUIRED: dict[Specialization, tuple[str, ...]] = {
    Specialization.INQUIRY: ("restaurant_name", "question"),
    Specialization.ORDER: (
        "restaurant_name", "customer_name", "food_items", "delivery_type",
    ),
    Specialization.RESERVATION: (
        "restaurant_name", "customer_name", "party_size", "time_preferences",
    ),
}

PLACEHOLDER_WORDS = frozenset({
    "customer", "user", "placeholder", "unknown", "anonymous", "guest",
})
PLACEHOLDER_NAMES = frozenset({
    "n/a", "na", "none", "tbd", "name", "test", "null",
})
_WORD = re.compile(r"[a-z]+")


def _is_blank(value: object) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def missing_fields(
    specialization: Specialization, fields: Mapping[str, object],
) -> list[str]:
    missing = [f for f in _REQUIRED[specialization] if _is_blank(fields.get(f))]
    if (
        specialization is Specialization.ORDER
        and str(fields.get("delivery_type") or "").strip().lower() == DeliveryType.DELIVERY.value
        and _is_blank(fields.get("delivery_address"))
    ):
        missing.append("delivery_address")
    return missing


def is_placeholder_name(name: str) -> bool:
    cleaned = (name or "").strip().lower()
    if len(cleaned) < 2 or cleaned in PLACEHOLDER_NAMES:
        return True
    return any(w in PLACEHOLDER_WORDS for w in _WORD.findall(cleaned))


def parse_party_size(value: object) -> int | None:
    """Positive integer party size, or None if unusable."""
    if isinstance(value, bool):
        return None
    try:
        size = int(str(value).strip())
    except (TypeError, ValueError):
        return None
    return size if size > 0 else None


def validate_dispatch_fields(
    specialization: Specialization, fields: Mapping[str, object],
) -> str | None:
    missing = missing_fields(specialization, fields)
    if missing:
        return (
            f"Error: Missing required field(s): {', '.join(missing)}. "
            "Please confirm all details with the user before proceeding."
        )

    if specialization in (Specialization.ORDER, Specialization.RESERVATION):
        name = str(fields.get("customer_name") or "")
        if is_placeholder_name(name):
            return (
                f'Error: Invalid customer name "{name}". Please ask the user '
                "for their real full name before proceeding. Names like "
                '"Customer", "User" or "Guest" are not acceptable.'
            )

    if specialization is Specialization.ORDER:
        delivery = str(fields.get("delivery_type")).strip().lower()
        if delivery not in {d.value for d in DeliveryType}:
            return (
                f'Error: Invalid delivery type "{fields.get("delivery_type")}". '
                "Use one of: delivery, pickup, takeout."
            )

    if specialization is Specialization.RESERVATION:
        if parse_party_size(fields.get("party_size")) is None:
            return (
                f'Error: Invalid party size "{fields.get("party_size")}". '
                "Please confirm the number of people with the user."
            )
    return None
