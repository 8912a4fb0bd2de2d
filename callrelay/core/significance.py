"""Significance — decides whether a pushed status differs meaningfully from the last one.

Invariants:
    - Previous status STARTING (nothing seen yet) is always significant
    - Otherwise significant iff a tracked phrase appears that was absent before,
      or the text length changed by more than LENGTH_DELTA characters

Design Decisions:
    - Predicate is a plain callable type: StatusTracker takes any SignificancePredicate,
      so a structured status schema can replace the phrase heuristic later
"""

from collections.abc import Callable

SignificancePredicate = Callable[[str, str], bool]

INITIAL_STATUS = "STARTING"
LENGTH_DELTA = 100

SIGNIFICANT_PHRASES = (
    "restaurant:", "agent:",
    "order confirmed", "reservation confirmed", "total is", "$",
    "pickup time", "delivery time", "ready in", "minutes", "hours",
    "closed", "unavailable", "error", "problem",
    "thank you", "thanks", "goodbye", "good bye",
    "have a great day", "have a wonderful day", "appreciate it",
    "perfect", "sounds good", "all set",
)


def is_significant_update(new_status: str, old_status: str) -> bool:
    if old_status == INITIAL_STATUS:
        return True
    new_lower = new_status.lower()
    old_lower = old_status.lower()
    if any(p in new_lower and p not in old_lower for p in SIGNIFICANT_PHRASES):
        return True
    return abs(len(new_status) - len(old_status)) > LENGTH_DELTA
