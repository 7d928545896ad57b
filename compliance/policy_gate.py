from __future__ import annotations

import logging

from models.schemas import PolicyResult, PolicyViolation
from rules.registry import RuleRegistry, RuleSet, default_registry

logger = logging.getLogger(__name__)


class PolicyGate:
    """First-stage content filter. A blocked result short-circuits the turn."""

    def __init__(self, registry: RuleRegistry | None = None, ruleset: RuleSet | None = None) -> None:
        self.ruleset = ruleset or (registry or default_registry()).load("policy")
        for rule in self.ruleset.rules:
            PolicyViolation(rule.result)

    @property
    def messages(self) -> dict[str, str]:
        return {rule.result: str(rule.attributes.get("message", "")) for rule in self.ruleset.rules}

    def enforce(self, message: str) -> PolicyResult:
        text = message or ""
        rule = self.ruleset.first_match(text)
        if rule is None:
            return PolicyResult(violation=PolicyViolation.NONE, message="", blocked=False)
        violation = PolicyViolation(rule.result)
        logger.info("policy_blocked", extra={"violation": violation.value})
        return PolicyResult(violation=violation, message=str(rule.attributes.get("message", "")), blocked=True)
