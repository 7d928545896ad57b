from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import date
from typing import Any, Dict, List, Pattern

from models.schemas import REQUIRED_CONTEXT_FIELDS, AviationContext
from rules.registry import RuleRegistry, default_registry

MISSING_LABELS = {
    "aircraft": "aircraft",
    "origin": "origin",
    "destination": "destination",
    "date": "date",
    "pax": "pax",
    "budget_gbp": "budget",
}

_ISO_DATE = re.compile(r"\b(\d{4})-(\d{1,2})-(\d{1,2})\b")
_DMY_DATE = re.compile(r"\b(\d{1,2})[/-](\d{1,2})[/-](\d{4})\b")
_PAX = re.compile(r"\b(\d{1,3})\s*(?:pax|passengers?|people|persons|guests|travell?ers?|adults)\b", re.IGNORECASE)
_BAGS = re.compile(r"\b(\d{1,2})\s*(?:bags?|suitcases?|pieces of luggage)\b", re.IGNORECASE)
_AMOUNT = r"(\d{1,3}(?:,\d{3})+|\d+)(?:\.(\d+))?"
_MULTIPLIER = r"(k|thousand|m|million)?"
_BUDGET_PATTERNS = [
    re.compile(rf"\bbudget\s*(?:of|is|around|about|up to|:)?\s*£?\s*{_AMOUNT}\s*{_MULTIPLIER}\b", re.IGNORECASE),
    re.compile(rf"£\s*{_AMOUNT}\s*{_MULTIPLIER}\b", re.IGNORECASE),
    re.compile(rf"\b{_AMOUNT}\s*{_MULTIPLIER}\s*(?:gbp|pounds|quid)\b", re.IGNORECASE),
    re.compile(rf"\b{_AMOUNT}\s*(k|thousand)\b", re.IGNORECASE),
]
_FLEX_WINDOW = re.compile(r"(?:\+/-|±)\s*(\d{1,2})\s*days?", re.IGNORECASE)
_FLEXIBLE = re.compile(r"\bflexib(le|ility)\b", re.IGNORECASE)
_FIXED = re.compile(r"\bfixed dates?\b|\bdate is fixed\b", re.IGNORECASE)
_ICAO_TOKEN = re.compile(r"\b([A-Za-z]{4})\b")


@dataclass
class AircraftFamily:
    pattern: Pattern[str]
    template: str

    def canonical(self, raw_code: str) -> str:
        code = re.sub(r"\s+", "", raw_code)
        if code.isalpha() and len(code) > 3:
            code = code.capitalize()
        else:
            code = code.upper()
        return self.template.format(code=code)


class ContextExtractor:
    """Pulls charter request fields out of free text.

    Every field is optional: anything that is ambiguous or absent is simply
    left out of the returned mapping so the intake path can ask for it again.
    """

    def __init__(self, registry: RuleRegistry | None = None) -> None:
        data = (registry or default_registry()).load_raw("extraction")
        self.airports = {str(code).upper() for code in data.get("airports", [])}
        self.aircraft_families = [
            AircraftFamily(re.compile(str(row["pattern"]), re.IGNORECASE), str(row["template"]))
            for row in data.get("aircraft_families", [])
        ]
        self.cabin_preferences = [
            (re.compile(str(row["pattern"]), re.IGNORECASE), str(row["value"]))
            for row in data.get("cabin_preferences", [])
        ]

    def extract(self, message: str) -> Dict[str, Any]:
        text = message or ""
        found: Dict[str, Any] = {}
        aircraft = self._extract_aircraft(text)
        if aircraft:
            found["aircraft"] = aircraft
        airports = self._extract_airports(text)
        if airports:
            found["origin"] = airports[0]
        if len(airports) > 1:
            found["destination"] = airports[1]
        travel_date = self._extract_date(text)
        if travel_date:
            found["date"] = travel_date
        pax = _PAX.search(text)
        if pax and int(pax.group(1)) > 0:
            found["pax"] = int(pax.group(1))
        budget = self._extract_budget(text)
        if budget:
            found["budget_gbp"] = budget
        bags = _BAGS.search(text)
        if bags:
            found["bags"] = int(bags.group(1))
        for pattern, value in self.cabin_preferences:
            if pattern.search(text):
                found["cabin_preference"] = value
                break
        flexibility = self._extract_flexibility(text)
        if flexibility:
            found["flexibility"] = flexibility
        return found

    def _extract_aircraft(self, text: str) -> str | None:
        best: tuple[int, str] | None = None
        for family in self.aircraft_families:
            match = family.pattern.search(text)
            if match and (best is None or match.start() < best[0]):
                best = (match.start(), family.canonical(match.group(1)))
        return best[1] if best else None

    def _extract_airports(self, text: str) -> List[str]:
        codes: List[str] = []
        for match in _ICAO_TOKEN.finditer(text):
            code = match.group(1).upper()
            if code in self.airports and code not in codes:
                codes.append(code)
        return codes

    def _extract_date(self, text: str) -> str | None:
        candidates: List[tuple[int, int, int, int]] = []
        for m in _ISO_DATE.finditer(text):
            candidates.append((m.start(), int(m.group(1)), int(m.group(2)), int(m.group(3))))
        for m in _DMY_DATE.finditer(text):
            candidates.append((m.start(), int(m.group(3)), int(m.group(2)), int(m.group(1))))
        for _, year, month, day in sorted(candidates):
            try:
                return date(year, month, day).isoformat()
            except ValueError:
                continue
        return None

    def _extract_budget(self, text: str) -> int | None:
        for pattern in _BUDGET_PATTERNS:
            match = pattern.search(text)
            if not match:
                continue
            whole = match.group(1).replace(",", "")
            fraction = match.group(2) or ""
            amount = float(f"{whole}.{fraction}" if fraction else whole)
            marker = (match.group(3) or "").lower()
            if marker in {"k", "thousand"}:
                amount *= 1_000
            elif marker in {"m", "million"}:
                amount *= 1_000_000
            value = int(round(amount))
            if value > 0:
                return value
        return None

    def _extract_flexibility(self, text: str) -> str | None:
        window = _FLEX_WINDOW.search(text)
        if window:
            return f"+/- {int(window.group(1))} days"
        if _FIXED.search(text):
            return "fixed"
        if _FLEXIBLE.search(text):
            return "flexible"
        return None


def _is_empty(value: Any) -> bool:
    return value is None or value == "" or value == [] or value == {}


def merge_context(current: AviationContext, update: Dict[str, Any]) -> AviationContext:
    """Shallow per-field merge: new non-empty values win, everything else is kept."""
    merged = current.model_dump()
    for key, value in (update or {}).items():
        if key not in merged or _is_empty(value):
            continue
        merged[key] = value
    return AviationContext.model_validate(merged)


def _as_dict(ctx: AviationContext | Dict[str, Any]) -> Dict[str, Any]:
    return ctx.model_dump() if isinstance(ctx, AviationContext) else dict(ctx or {})


def has_all_required_context(ctx: AviationContext | Dict[str, Any]) -> bool:
    data = _as_dict(ctx)
    return all(not _is_empty(data.get(name)) for name in REQUIRED_CONTEXT_FIELDS)


def get_missing_context(ctx: AviationContext | Dict[str, Any]) -> List[str]:
    data = _as_dict(ctx)
    return [MISSING_LABELS[name] for name in REQUIRED_CONTEXT_FIELDS if _is_empty(data.get(name))]
