from __future__ import annotations

from typing import Iterable, List

from models.schemas import PriceCandidate, PriceMatchResult, RankEntry

TIE_BREAKS = ("response_speed", "aog_history", "home_base_fit")


class PriceMatcher:
    """Ranks priced candidates against a target budget.

    The best candidate is always the cheapest one. ``tie_break`` only adjusts
    the presentation score of the cheapest entry and never changes the pick.
    """

    base_score = 100
    rank_step = 10
    budget_bonus = 20
    tie_break_bonus = 10
    max_score = 100

    def match(
        self,
        candidates: Iterable[PriceCandidate],
        target_budget_gbp: int,
        tie_break: str | None = None,
    ) -> PriceMatchResult:
        ranked: List[PriceCandidate] = sorted(candidates, key=lambda c: c.est_price_gbp)
        if not ranked:
            raise ValueError("No candidates to match")
        if tie_break is not None and tie_break not in TIE_BREAKS:
            raise ValueError(f"Unknown tie break: {tie_break}")
        best = ranked[0]
        rank: List[RankEntry] = []
        for index, candidate in enumerate(ranked):
            score = self.base_score - index * self.rank_step
            if candidate.est_price_gbp <= target_budget_gbp:
                score += self.budget_bonus
            if tie_break == "home_base_fit" and index == 0:
                score += self.tie_break_bonus
            rank.append(
                RankEntry(
                    operator_id=candidate.operator_id,
                    score=min(self.max_score, score),
                    note="Best value" if index == 0 else "Alternative",
                )
            )
        note = "Within budget" if best.est_price_gbp <= target_budget_gbp else "Nearest to budget"
        return PriceMatchResult(best_operator_id=best.operator_id, rank=rank, note=note)
