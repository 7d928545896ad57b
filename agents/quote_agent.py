from __future__ import annotations

import asyncio
import logging
from typing import List, Optional

from pydantic import BaseModel, Field

from agents.base import BaseAgent
from agents.prompts import FALLBACK_LINES
from compliance.audit_logger import AuditLogger
from models.schemas import (
    AvailabilityItem,
    AviationContext,
    OperatorProfile,
    PriceCandidate,
    PriceEstimate,
    PriceMatchResult,
    ToolCallRecord,
)
from tools.availability_tools import AvailabilityTools
from tools.operator_tools import OperatorTools
from tools.pricing_tools import PricingTools

logger = logging.getLogger(__name__)

TOP_CANDIDATES = 3


def format_gbp(amount: int | float) -> str:
    return f"£{amount:,.0f}"


class QuoteOutcome(BaseModel):
    ok: bool = False
    tool_calls: List[str] = Field(default_factory=list)
    tool_records: List[ToolCallRecord] = Field(default_factory=list)
    availability: List[AvailabilityItem] = Field(default_factory=list)
    estimates: List[PriceEstimate] = Field(default_factory=list)
    match: Optional[PriceMatchResult] = None
    best: Optional[PriceEstimate] = None
    operator: Optional[OperatorProfile] = None
    fallback_line: str = ""

    @property
    def operator_name(self) -> str:
        return self.operator.name if self.operator else "Selected operator"

    @property
    def alternatives(self) -> List[PriceEstimate]:
        if self.best is None:
            return []
        return [e for e in self.estimates if e.operator_id != self.best.operator_id]

    def cache_payload(self) -> dict:
        return self.model_dump(mode="json", exclude={"tool_records"})


class QuoteAgent(BaseAgent):
    """Runs the full-quote pipeline: availability, pricing, price match and operator lookup."""

    def __init__(
        self,
        availability_tools: AvailabilityTools | None = None,
        pricing_tools: PricingTools | None = None,
        operator_tools: OperatorTools | None = None,
        audit_logger: AuditLogger | None = None,
    ) -> None:
        super().__init__(name="quote_agent", audit_logger=audit_logger)
        self.availability_tools = availability_tools or AvailabilityTools()
        self.pricing_tools = pricing_tools or PricingTools()
        self.operator_tools = operator_tools or OperatorTools()

    async def process(self, context: AviationContext) -> QuoteOutcome:
        outcome = QuoteOutcome()

        availability, elapsed = await self.timed(
            self.availability_tools.get_aircraft_availability(
                aircraft_type=context.aircraft,
                origin=context.origin,
                destination=context.destination,
                depart_date=context.date,
                pax=context.pax,
                budget_gbp=context.budget_gbp,
            )
        )
        self._record(outcome, "get_aircraft_availability", {"aircraft_type": context.aircraft, "origin": context.origin},
                     availability.ok, f"{len(availability.data or [])} options" if availability.ok else str(availability.error), elapsed)
        if not availability.ok or not availability.data:
            return self._short_circuit(outcome, "no_availability")
        outcome.availability = list(availability.data)

        top: List[AvailabilityItem] = outcome.availability[:TOP_CANDIDATES]
        priced = await asyncio.gather(
            *[
                self.timed(
                    self.pricing_tools.price_estimate(
                        operator_id=option.operator_id,
                        aircraft_type=option.aircraft_type,
                        origin=context.origin or "",
                        destination=context.destination or "",
                        depart_date=context.date or "",
                        pax=context.pax or 0,
                        extras={},
                    )
                )
                for option in top
            ]
        )
        for option, (result, elapsed) in zip(top, priced):
            self._record(outcome, "price_estimate", {"operator_id": option.operator_id, "aircraft_type": option.aircraft_type},
                         result.ok, format_gbp(result.data.est_price_gbp) if result.ok else str(result.error), elapsed)
            if result.ok:
                outcome.estimates.append(result.data)
        if not outcome.estimates:
            return self._short_circuit(outcome, "no_pricing")

        match, elapsed = await self.timed(
            self.pricing_tools.price_match(
                candidates=[PriceCandidate(operator_id=e.operator_id, est_price_gbp=e.est_price_gbp) for e in outcome.estimates],
                target_budget_gbp=context.budget_gbp or 0,
                tie_break="home_base_fit",
            )
        )
        self._record(outcome, "price_match", {"candidates": len(outcome.estimates), "target_budget_gbp": context.budget_gbp},
                     match.ok, match.data.best_operator_id if match.ok else str(match.error), elapsed)
        if not match.ok:
            return self._short_circuit(outcome, "match_failed")
        outcome.match = match.data
        outcome.best = next(e for e in outcome.estimates if e.operator_id == match.data.best_operator_id)

        profile, elapsed = await self.timed(self.operator_tools.get_operator_profile(outcome.best.operator_id))
        self._record(outcome, "get_operator_profile", {"operator_id": outcome.best.operator_id},
                     profile.ok, profile.data.name if profile.ok else str(profile.error), elapsed)
        if profile.ok:
            outcome.operator = profile.data
        outcome.ok = True
        return outcome

    def summarize(self, context: AviationContext, outcome: QuoteOutcome) -> str:
        """Short textual summary of the tool results, used to ground the second generation pass."""
        if not outcome.ok or outcome.best is None or outcome.match is None:
            return outcome.fallback_line
        parts = [
            f"I checked {context.aircraft} for {context.date}, {context.origin} to {context.destination}, {context.pax} passengers.",
            f"{len(outcome.availability)} aircraft available, {len(outcome.estimates)} priced.",
            f"Best value is {outcome.operator_name}, estimated {format_gbp(outcome.best.est_price_gbp)} all in ({outcome.match.note.lower()}).",
        ]
        alternatives = [format_gbp(e.est_price_gbp) for e in outcome.alternatives]
        if len(alternatives) == 1:
            parts.append(f"One alternate also fits, {alternatives[0]}.")
        elif alternatives:
            parts.append(f"{len(alternatives)} alternates also fit, {', '.join(alternatives)}.")
        parts.append("Shall I request confirmation and hold the slot?")
        return " ".join(parts)

    def _record(self, outcome: QuoteOutcome, tool_name: str, args: dict, success: bool, summary: str, elapsed: int) -> None:
        outcome.tool_calls.append(tool_name)
        outcome.tool_records.append(
            ToolCallRecord(tool_name=tool_name, args=args, result_summary=summary, success=success, duration_ms=elapsed)
        )

    def _short_circuit(self, outcome: QuoteOutcome, reason: str) -> QuoteOutcome:
        logger.info("quote_pipeline_short_circuit", extra={"reason": reason, "tool_calls": list(outcome.tool_calls)})
        outcome.ok = False
        outcome.fallback_line = FALLBACK_LINES[reason]
        return outcome
