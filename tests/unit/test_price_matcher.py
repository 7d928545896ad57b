from __future__ import annotations

import pytest

from models.schemas import PriceCandidate
from tools.price_matcher import TIE_BREAKS, PriceMatcher

CANDIDATES = [
    PriceCandidate(operator_id="op_1", est_price_gbp=37000),
    PriceCandidate(operator_id="op_2", est_price_gbp=33000),
    PriceCandidate(operator_id="op_3", est_price_gbp=42500),
]


def test_best_is_always_cheapest():
    matcher = PriceMatcher()
    for tie_break in (None,) + TIE_BREAKS:
        result = matcher.match(CANDIDATES, target_budget_gbp=35000, tie_break=tie_break)
        assert result.best_operator_id == "op_2"
        assert [entry.operator_id for entry in result.rank] == ["op_2", "op_1", "op_3"]
        assert [entry.note for entry in result.rank] == ["Best value", "Alternative", "Alternative"]


def test_scores_and_budget_note():
    matcher = PriceMatcher()
    result = matcher.match(CANDIDATES, target_budget_gbp=35000)
    assert [entry.score for entry in result.rank] == [100, 90, 80]
    assert result.note == "Within budget"

    generous = matcher.match(CANDIDATES, target_budget_gbp=50000, tie_break="response_speed")
    assert [entry.score for entry in generous.rank] == [100, 100, 100]

    tight = matcher.match(CANDIDATES, target_budget_gbp=20000, tie_break="home_base_fit")
    assert [entry.score for entry in tight.rank] == [100, 90, 80]
    assert tight.note == "Nearest to budget"

    plain = matcher.match(CANDIDATES, target_budget_gbp=20000)
    assert [entry.score for entry in plain.rank] == [100, 90, 80]


def test_rejects_empty_and_unknown_tie_break():
    matcher = PriceMatcher()
    with pytest.raises(ValueError, match="No candidates to match"):
        matcher.match([], target_budget_gbp=1000)
    with pytest.raises(ValueError):
        matcher.match(CANDIDATES, target_budget_gbp=1000, tie_break="loudest_engine")
