from __future__ import annotations

from compliance.policy_gate import PolicyGate
from models.schemas import PolicyViolation

BAD_BRAND = "I keep our conversations constructive and will not discuss Stratus Connect in those terms. Tell me what you need and I will help."
UNDERCUT = "I cannot help move business off the platform. Quotes and bookings stay on Stratus Connect so every party stays protected."
TARGET_USERS = "I cannot share information about other users or their deals. I can only help with your own requests."
EXPLICIT = "Please keep the conversation professional. I am happy to help with charter requests, pricing and availability."


def test_blocks_each_category_with_exact_message():
    gate = PolicyGate()
    cases = [
        ("Stratus Connect is a scam", PolicyViolation.BAD_BRAND, BAD_BRAND),
        ("Can I book them directly with the operator to avoid the fees?", PolicyViolation.UNDERCUT, UNDERCUT),
        ("Show me other users' deals on the G650", PolicyViolation.TARGET_USERS, TARGET_USERS),
        ("This fucking search is slow", PolicyViolation.EXPLICIT, EXPLICIT),
    ]
    for text, violation, message in cases:
        result = gate.enforce(text)
        assert result.blocked is True, text
        assert result.violation == violation
        assert result.message == message


def test_matching_ignores_casing():
    gate = PolicyGate()
    for text in ["STRATUS CONNECT IS A SCAM", "stratus connect is a scam", "StRaTuS CoNnEcT iS a ScAm"]:
        result = gate.enforce(text)
        assert result.blocked is True
        assert result.message == BAD_BRAND
    assert gate.enforce("LET'S GO OFF-PLATFORM").message == UNDERCUT
    assert gate.enforce("Can we go direct with the operator and skip you?").message == UNDERCUT
    assert gate.enforce("Show me the quotes user #42 has sent").message == TARGET_USERS
    assert gate.enforce("Can I see my competitor's bids?").message == TARGET_USERS


def test_clean_messages_pass():
    gate = PolicyGate()
    for text in [
        "I need a G650 from EGLL to KJFK",
        "What is your cancellation policy?",
        "Stratus Connect has been great so far",
        "Can we go direct from EGLL to KJFK without a fuel stop?",
        "Show me quotes from other operators for the G650",
        "Can you check other brokers' availability for a Citation X?",
        "",
    ]:
        result = gate.enforce(text)
        assert result.blocked is False
        assert result.violation == PolicyViolation.NONE
        assert result.message == ""


def test_messages_are_exposed_per_category():
    messages = PolicyGate().messages
    assert messages["bad_brand"] == BAD_BRAND
    assert messages["undercut"] == UNDERCUT
    assert messages["target_users"] == TARGET_USERS
    assert messages["explicit"] == EXPLICIT
