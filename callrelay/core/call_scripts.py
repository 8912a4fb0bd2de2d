"""Call Scripts — specialization-specific agent instructions, opening lines and acks.

Invariants:
    - Every Specialization has a script builder (explicit dict, no fallthrough)
    - Fields are assumed validated (field_validation.py runs first)
    - Pickup and takeout share takeout wording; only delivery mentions an address
"""

from collections.abc import Callable, Mapping
from dataclasses import dataclass

from callrelay.core.domain_types import DeliveryType, Specialization
from callrelay.core.field_validation import parse_party_size

FAILURE_MESSAGE = (
    "I apologize, but I'm having trouble understanding you. "
    "If you can hear me, please hang up and I'll call back?"
)

_CLOSING = "Do not repeat yourself. Keep the call as short as possible."


@dataclass(frozen=True)
class CallScript:
    system_message: str
    greeting: str
    task_summary: str


def _inquiry(fields: Mapping[str, object]) -> CallScript:
    question = fields["question"]
    return CallScript(
        system_message=(
            "You are a professional restaurant inquiry assistant calling a "
            "busy restaurant for a customer.\n"
            "Be brief, polite, and get straight to the point.\n"
            "1. Greet and say you have a quick question.\n"
            f'2. Ask: "{question}"\n'
            "3. Listen to the answer.\n"
            "4. Thank them and end the call.\n"
            "Only confirm the answer if you are unsure or if they ask.\n"
            + _CLOSING
        ),
        greeting="Hi, I have a quick question for you.",
        task_summary=f'to ask: "{question}"',
    )


def _order(fields: Mapping[str, object]) -> CallScript:
    customer = fields["customer_name"]
    is_delivery = (
        str(fields["delivery_type"]).strip().lower() == DeliveryType.DELIVERY.value
    )
    order_type = "delivery" if is_delivery else "takeout"
    address_step = (
        f'4. Give the delivery address: "{fields.get("delivery_address")}"'
        if is_delivery else "4. Confirm pickup details."
    )
    return CallScript(
        system_message=(
            "You are a professional phone ordering assistant calling a busy "
            f"restaurant to place a {order_type} order for a customer.\n"
            "Be brief, clear, and polite.\n"
            f"1. Greet and say you want to place a {order_type} order.\n"
            f'2. Give the customer name: "{customer}"\n'
            f'3. State the order: "{fields["food_items"]}"\n'
            f"{address_step}\n"
            "5. Ask for total price and estimated "
            f"{'delivery' if is_delivery else 'pickup'} time if not provided.\n"
            "6. Thank them and end the call.\n\n"
            "IMPORTANT - If any item is out of stock or unavailable:\n"
            "- If some items are unavailable: say \"OK, let's skip that for now "
            "and I'll call back to update the order. I need to double check "
            f'what {customer} wants to order." Then proceed with the remaining items.\n'
            "- If all items are unavailable: say \"OK, I'll call back to confirm "
            f'what {customer} would like to order instead. Thank you!" '
            "Then politely end the call.\n\n"
            "Only confirm details if you are unsure or if they ask.\n"
            + _CLOSING
        ),
        greeting=f"Hi, I'd like to place a {order_type} order.",
        task_summary=f"to place your {order_type} order",
    )


def _reservation(fields: Mapping[str, object]) -> CallScript:
    party = parse_party_size(fields["party_size"])
    return CallScript(
        system_message=(
            "You are a professional reservation assistant calling a busy "
            "restaurant to make a reservation for a customer.\n"
            "Be brief, clear, and polite.\n"
            "1. Greet and say you want to make a reservation.\n"
            f'2. Give the customer name: "{fields["customer_name"]}"\n'
            f'3. State party size: "{party}"\n'
            f'4. Request timing: "{fields["time_preferences"]}"\n'
            "5. Be flexible with timing if they cannot accommodate the exact "
            "requested time.\n"
            "6. Confirm final details only if you are unsure or if they ask.\n"
            "7. Thank them and end the call.\n"
            + _CLOSING
        ),
        greeting=f"Hi, I'd like to make a reservation for {party} people.",
        task_summary=f"to make your reservation for {party} people",
    )


_BUILDERS: dict[Specialization, Callable[[Mapping[str, object]], CallScript]] = {
    Specialization.INQUIRY: _inquiry,
    Specialization.ORDER: _order,
    Specialization.RESERVATION: _reservation,
}


def build_call_script(
    specialization: Specialization, fields: Mapping[str, object],
) -> CallScript:
    return _BUILDERS[specialization](fields)


def dispatch_acknowledgment(
    specialization: Specialization, restaurant: str, phone: str,
    script: CallScript,
) -> str:
    return (
        f"{specialization.value} agent dispatched and calling "
        f"{restaurant} ({phone})!\n\n"
        f"The agent is now contacting the restaurant {script.task_summary}. "
        "Use get_latest_agent_status to check progress."
    )
