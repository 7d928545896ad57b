from __future__ import annotations

from typing import Dict

from agents.context_extractor import has_all_required_context
from models.schemas import AviationContext, IntentType, ModelSlot, RoutingDecision
from rules.registry import RuleRegistry, RuleSet, default_registry
from settings import SETTINGS

TOOL_ELIGIBLE_INTENTS = frozenset({IntentType.AVAILABILITY, IntentType.PRICING, IntentType.TOOLS})


class IntentRouter:
    def __init__(
        self,
        registry: RuleRegistry | None = None,
        ruleset: RuleSet | None = None,
        models: Dict[ModelSlot, str] | None = None,
    ) -> None:
        self.ruleset = ruleset or (registry or default_registry()).load("intent")
        self.models = models or {
            ModelSlot.PRIMARY: SETTINGS.ollama_primary_model,
            ModelSlot.REASONING: SETTINGS.ollama_reasoning_model,
            ModelSlot.SUMMARY: SETTINGS.ollama_summary_model,
        }

    def route(self, message: str, context: AviationContext | Dict[str, object] | None = None) -> RoutingDecision:
        complete = has_all_required_context(context or {})
        rule = self.ruleset.first_match(message or "", context_complete=complete)
        if rule is None:
            intent = IntentType.GENERAL
            slot = ModelSlot.PRIMARY
            confidence = 0.6
            reasoning = "No routing rule matched; defaulted to general."
        else:
            intent = IntentType(rule.result)
            slot = ModelSlot(str(rule.attributes.get("slot", ModelSlot.PRIMARY.value)))
            confidence = float(rule.attributes.get("confidence", 0.8))
            reasoning = f"Matched {intent.value} rule (context {'complete' if complete else 'incomplete'})."
        return RoutingDecision(
            intent=intent,
            model_slot=slot,
            model_name=self.models.get(slot, ""),
            confidence=confidence,
            reasoning=reasoning,
        )

    def is_tool_eligible(self, intent: IntentType) -> bool:
        return intent in TOOL_ELIGIBLE_INTENTS
