"""Call Scripts — per-specialization agent prompts, greetings and acknowledgments."""

from callrelay.core.call_scripts import build_call_script, dispatch_acknowledgment
from callrelay.core.domain_types import Specialization


def test_inquiry_greeting_and_question():
    script = build_call_script(
        Specialization.INQUIRY,
        {"restaurant_name": "Joe's", "question": "Do you have vegan options?"},
    )
    assert script.greeting == "Hi, I have a quick question for you."
    assert "Do you have vegan options?" in script.system_message


def test_pickup_order_uses_takeout_wording():
    script = build_call_script(Specialization.ORDER, {
        "restaurant_name": "Joe's", "customer_name": "Maria Lopez",
        "food_items": "2 burritos", "delivery_type": "pickup",
    })
    assert script.greeting == "Hi, I'd like to place a takeout order."
    assert "out of stock" in script.system_message


def test_delivery_order_includes_address():
    script = build_call_script(Specialization.ORDER, {
        "restaurant_name": "Joe's", "customer_name": "Maria Lopez",
        "food_items": "2 burritos", "delivery_type": "delivery",
        "delivery_address": "1 Main St",
    })
    assert script.greeting == "Hi, I'd like to place a delivery order."
    assert "1 Main St" in script.system_message


def test_reservation_greeting_uses_party_size():
    script = build_call_script(Specialization.RESERVATION, {
        "restaurant_name": "Joe's", "customer_name": "Maria Lopez",
        "party_size": "4", "time_preferences": "Friday 7pm",
    })
    assert script.greeting == "Hi, I'd like to make a reservation for 4 people."


def test_acknowledgment_names_restaurant_and_phone():
    script = build_call_script(
        Specialization.INQUIRY, {"restaurant_name": "Joe's", "question": "Open?"},
    )
    text = dispatch_acknowledgment(Specialization.INQUIRY, "Joe's", "+15551234567", script)
    assert text.startswith("restaurant-inquiry agent dispatched and calling Joe's (+15551234567)!")
    assert "get_latest_agent_status" in text
