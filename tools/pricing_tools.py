from __future__ import annotations

import logging
from typing import Dict, Iterable, Mapping

from models.schemas import PriceBreakdown, PriceCandidate, PriceEstimate, ToolResult
from tools.fixtures import StaticRateCard
from tools.price_matcher import PriceMatcher
from tools.sources import RateCard

logger = logging.getLogger(__name__)


class PricingTools:
    def __init__(self, rate_card: RateCard | None = None, matcher: PriceMatcher | None = None) -> None:
        self.rate_card = rate_card or StaticRateCard()
        self.matcher = matcher or PriceMatcher()

    async def price_estimate(
        self,
        operator_id: str,
        aircraft_type: str,
        origin: str,
        destination: str,
        depart_date: str,
        pax: int,
        extras: Mapping[str, bool] | None = None,
    ) -> ToolResult:
        try:
            base_rate = await self.rate_card.base_rate(aircraft_type)
            reposition = await self.rate_card.reposition_fee(operator_id)
            fees = self.rate_card.handling_fees()
            margin = self.rate_card.platform_margin()
            extra_prices = self.rate_card.extras()
            extras_cost = sum(extra_prices.get(name, 0) for name, enabled in dict(extras or {}).items() if enabled)
            total = base_rate + reposition + fees + margin + extras_cost
            return ToolResult.success(
                PriceEstimate(
                    operator_id=operator_id,
                    aircraft_type=aircraft_type,
                    est_price_gbp=total,
                    breakdown=PriceBreakdown(flight=base_rate, reposition=reposition, fees=fees + extras_cost, margin=margin),
                    constraints=[],
                )
            )
        except Exception as exc:
            logger.warning("price_estimate_failed", extra={"operator_id": operator_id, "error": repr(exc)})
            return ToolResult.failure(str(exc) or "pricing_error")

    async def price_match(
        self,
        candidates: Iterable[PriceCandidate | Dict[str, object]],
        target_budget_gbp: int,
        tie_break: str | None = None,
    ) -> ToolResult:
        try:
            parsed = [c if isinstance(c, PriceCandidate) else PriceCandidate.model_validate(c) for c in candidates]
            return ToolResult.success(self.matcher.match(parsed, target_budget_gbp, tie_break=tie_break))
        except Exception as exc:
            logger.warning("price_match_failed", extra={"error": repr(exc)})
            return ToolResult.failure(str(exc) or "match_error")
