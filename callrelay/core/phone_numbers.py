"""Phone and name normalization helpers shared by directory, dispatch and telephony."""

import re

AUTO_SENTINEL = "auto"

# Basic North-American pattern: optional +, optional leading 1, 10-11 digits.
_PHONE_PATTERN = re.compile(r"^\+?1?[0-9]{10,11}$")
_NON_ALNUM = re.compile(r"[^a-z0-9]")
_NON_DIGIT = re.compile(r"\D")


def is_plausible_phone(value: str) -> bool:
    return bool(_PHONE_PATTERN.match(value or ""))


def needs_directory_lookup(value: str | None) -> bool:
    """Sentinel, empty and implausible numbers are resolved by name instead."""
    if not value or not value.strip():
        return True
    value = value.strip()
    return value.lower() == AUTO_SENTINEL or not is_plausible_phone(value)


def format_phone_number(phone: str) -> str:
    """Digits only, US country code added unless present, + prefixed."""
    digits = _NON_DIGIT.sub("", phone)
    if not digits.startswith("1"):
        digits = f"1{digits}"
    return f"+{digits}"


def normalize_name(name: str) -> str:
    """Lowercase and strip everything but letters and digits."""
    return _NON_ALNUM.sub("", (name or "").lower())
