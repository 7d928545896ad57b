from __future__ import annotations

from typing import Dict

from models.schemas import ModelSlot, TerminalRole
from settings import SETTINGS

NEXT_ACTION_PHRASES = (
    "shall i",
    "do you want",
    "would you like",
    "tell me",
    "what is",
    "which",
    "what do you need",
    "what would you like",
)

DEFAULT_CLOSING = "What would you like to do next?"

ERROR_REPLY = "I encountered an error processing your request. Do you want me to try a different approach?"

FALLBACK_LINES: Dict[str, str] = {
    "no_availability": "I could not find suitable availability right now. Shall I expand to adjacent bases or propose a close class?",
    "no_pricing": "Pricing failed. Do you want me to request manual quotes?",
    "match_failed": "Price match failed. Do you want me to present raw options?",
}

VOICE_RULES: Dict[str, str] = {
    "realness": "If I am real, I am here for you. Ask me and I will help. What do you need assistance with?",
    "help_offer": (
        "Yes, I can help. I can check availability, price options and match the best operator "
        "for your range. Which aircraft and what dates?"
    ),
}

ROLE_FOCUS: Dict[TerminalRole, str] = {
    TerminalRole.BROKER: "You support a charter broker sourcing aircraft and quotes for clients.",
    TerminalRole.OPERATOR: "You support an aircraft operator managing fleet availability and incoming requests.",
    TerminalRole.PILOT: "You support a pilot checking assignments, aircraft and route details.",
    TerminalRole.CREW: "You support cabin crew checking duties, aircraft and trip details.",
}

SLOT_INSTRUCTIONS: Dict[ModelSlot, str] = {
    ModelSlot.PRIMARY: "Keep replies short and warm. Ask for one missing detail at a time.",
    ModelSlot.REASONING: (
        "Work through availability and pricing carefully. Quote prices in GBP and only use figures "
        "given in the context."
    ),
    ModelSlot.SUMMARY: "Summarise clearly in two or three sentences.",
}


def persona_prompt(
    terminal_role: TerminalRole = TerminalRole.BROKER,
    slot: ModelSlot = ModelSlot.PRIMARY,
) -> str:
    name = SETTINGS.assistant_name
    platform = SETTINGS.platform_name
    return "\n".join(
        [
            f"You are {name}, the aviation charter assistant for {platform}.",
            ROLE_FOCUS.get(terminal_role, ROLE_FOCUS[TerminalRole.BROKER]),
            SLOT_INSTRUCTIONS.get(slot, SLOT_INSTRUCTIONS[ModelSlot.PRIMARY]),
            "Never discuss other users or their deals and never help move business off the platform.",
            "End every reply with a clear next step phrased as a question.",
        ]
    )


def has_next_action(text: str) -> bool:
    lowered = (text or "").lower()
    return any(phrase in lowered for phrase in NEXT_ACTION_PHRASES)
