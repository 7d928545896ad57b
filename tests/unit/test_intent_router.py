from __future__ import annotations

from agents.intent_router import IntentRouter
from agents.state_machine import next_state
from models.schemas import AviationContext, ConversationState, IntentType, ModelSlot
from settings import SETTINGS

COMPLETE = AviationContext(aircraft="G650", origin="EGLL", destination="KJFK", date="2025-06-01", pax=8, budget_gbp=50000)


def test_routes_by_first_matching_rule():
    router = IntentRouter()
    empty = AviationContext()
    cases = [
        ("Are you real?", IntentType.REASSURE, ModelSlot.PRIMARY, 0.95),
        ("Can you help me?", IntentType.INTAKE, ModelSlot.PRIMARY, 0.8),
        ("How much for a G550?", IntentType.PRICING, ModelSlot.REASONING, 0.95),
        ("Is a Falcon 7X available next week?", IntentType.AVAILABILITY, ModelSlot.REASONING, 0.95),
        ("Give me a summary of where we are", IntentType.SUMMARY, ModelSlot.SUMMARY, 0.8),
        ("What is the cancellation policy?", IntentType.POLICY, ModelSlot.SUMMARY, 0.8),
        ("Hello there", IntentType.GENERAL, ModelSlot.PRIMARY, 0.6),
    ]
    for text, intent, slot, confidence in cases:
        decision = router.route(text, empty)
        assert decision.intent == intent, text
        assert decision.model_slot == slot
        assert decision.confidence == confidence


def test_context_gates_intake_and_tools():
    router = IntentRouter()
    assert router.route("Yes, go ahead", COMPLETE).intent == IntentType.TOOLS
    assert router.route("Yes, go ahead", AviationContext()).intent == IntentType.GENERAL
    # Help-seeking with every field already known is no longer an intake turn.
    assert router.route("Can you help me with the budget?", COMPLETE).intent == IntentType.PRICING


def test_model_names_follow_slots():
    router = IntentRouter()
    assert router.route("Are you real?").model_name == SETTINGS.ollama_primary_model
    assert router.route("What does a G650 cost?").model_name == SETTINGS.ollama_reasoning_model
    custom = IntentRouter(models={ModelSlot.PRIMARY: "tiny", ModelSlot.REASONING: "big", ModelSlot.SUMMARY: "short"})
    assert custom.route("Give me a recap").model_name == "short"


def test_tool_eligibility():
    router = IntentRouter()
    assert router.is_tool_eligible(IntentType.PRICING)
    assert router.is_tool_eligible(IntentType.AVAILABILITY)
    assert router.is_tool_eligible(IntentType.TOOLS)
    assert not router.is_tool_eligible(IntentType.INTAKE)
    assert not router.is_tool_eligible(IntentType.GENERAL)


def test_state_transitions():
    partial = AviationContext(aircraft="G550")
    assert next_state(IntentType.REASSURE, partial) == ConversationState.REASSURE
    assert next_state(IntentType.INTAKE, COMPLETE) == ConversationState.INTAKE
    assert next_state(IntentType.PRICING, partial) == ConversationState.INTAKE
    assert next_state(IntentType.PRICING, COMPLETE) == ConversationState.SEARCHING
    assert next_state(IntentType.AVAILABILITY, COMPLETE) == ConversationState.SEARCHING
    assert next_state(IntentType.TOOLS, COMPLETE) == ConversationState.PRESENTING
    assert next_state(IntentType.TOOLS, COMPLETE, ConversationState.PRESENTING) == ConversationState.CONFIRMING
    assert next_state(IntentType.GENERAL, COMPLETE) == ConversationState.IDLE
    assert next_state(IntentType.SUMMARY, COMPLETE.model_dump()) == ConversationState.IDLE
