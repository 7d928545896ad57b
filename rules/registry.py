from __future__ import annotations

import json
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Pattern

from settings import SETTINGS


@dataclass
class KeywordRule:
    """One ordered ``{predicate -> result}`` entry.

    ``all_of`` holds groups of regular expressions. The predicate matches when
    every group has at least one pattern found in the text. ``requires_context``
    optionally gates the rule on whether the required charter fields are known.
    """

    result: str
    all_of: List[List[Pattern[str]]]
    requires_context: str | None = None
    attributes: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "KeywordRule":
        groups = data.get("all_of")
        if groups is None:
            groups = [data.get("any_of", [])]
        compiled = [[re.compile(str(p), re.IGNORECASE) for p in group] for group in groups]
        requires = data.get("requires_context")
        if requires not in (None, "complete", "incomplete"):
            raise ValueError(f"invalid requires_context: {requires}")
        attributes = {k: v for k, v in data.items() if k not in {"result", "all_of", "any_of", "requires_context"}}
        return cls(result=str(data["result"]), all_of=compiled, requires_context=requires, attributes=attributes)

    def matches(self, text: str, context_complete: bool | None = None) -> bool:
        if self.requires_context == "complete" and not context_complete:
            return False
        if self.requires_context == "incomplete" and context_complete:
            return False
        if not self.all_of:
            return True
        return all(any(p.search(text) for p in group) for group in self.all_of if group)


@dataclass
class RuleSet:
    name: str
    rules: List[KeywordRule]
    metadata: Dict[str, Any] = field(default_factory=dict)

    def first_match(self, text: str, context_complete: bool | None = None) -> KeywordRule | None:
        for rule in self.rules:
            if rule.matches(text, context_complete=context_complete):
                return rule
        return None


class RuleRegistry:
    def __init__(self, rules_dir: str | Path | None = None) -> None:
        self.rules_dir = Path(rules_dir or SETTINGS.rules_dir)
        self._cache: Dict[str, RuleSet] = {}

    def load_raw(self, name: str) -> Dict[str, Any]:
        path = self.rules_dir / f"{name.strip().lower()}.json"
        if not path.exists():
            raise FileNotFoundError(f"rule set not found: {name}")
        with path.open("r", encoding="utf-8") as fh:
            return json.load(fh)

    def load(self, name: str) -> RuleSet:
        name = name.strip().lower()
        if name in self._cache:
            return self._cache[name]
        data = self.load_raw(name)
        ruleset = RuleSet(
            name=name,
            rules=[KeywordRule.from_dict(raw) for raw in data.get("rules", [])],
            metadata=dict(data.get("metadata", {})),
        )
        self._cache[name] = ruleset
        return ruleset


_DEFAULT_REGISTRY: RuleRegistry | None = None


def default_registry() -> RuleRegistry:
    global _DEFAULT_REGISTRY
    if _DEFAULT_REGISTRY is None:
        _DEFAULT_REGISTRY = RuleRegistry()
    return _DEFAULT_REGISTRY
