from __future__ import annotations

from typing import Any, Dict

from agents.context_extractor import has_all_required_context
from models.schemas import AviationContext, ConversationState, IntentType


def next_state(
    intent: IntentType,
    context: AviationContext | Dict[str, Any],
    current: ConversationState = ConversationState.IDLE,
) -> ConversationState:
    """Transition applied after intent routing. Depends only on its arguments."""
    if intent == IntentType.REASSURE:
        return ConversationState.REASSURE
    if intent == IntentType.INTAKE or not has_all_required_context(context):
        return ConversationState.INTAKE
    if intent in {IntentType.AVAILABILITY, IntentType.PRICING}:
        return ConversationState.SEARCHING
    if intent == IntentType.TOOLS:
        # A confirmation on a presented quote hands off to booking.
        if current == ConversationState.PRESENTING:
            return ConversationState.CONFIRMING
        return ConversationState.PRESENTING
    return ConversationState.IDLE
