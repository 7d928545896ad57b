from __future__ import annotations

from agents.context_extractor import ContextExtractor, get_missing_context, has_all_required_context, merge_context
from models.schemas import AviationContext

FULL_SCENARIO = "Can you help me charter a Gulfstream G650 from EGLL to KJFK on 2025-06-01 for 8 pax with a budget of 50k GBP"


def test_extracts_full_scenario():
    found = ContextExtractor().extract(FULL_SCENARIO)
    assert found == {
        "aircraft": "G650",
        "origin": "EGLL",
        "destination": "KJFK",
        "date": "2025-06-01",
        "pax": 8,
        "budget_gbp": 50000,
    }
    assert has_all_required_context(found) is True


def test_aircraft_families_are_normalised():
    extractor = ContextExtractor()
    assert extractor.extract("a falcon 7x please")["aircraft"] == "Falcon 7X"
    assert extractor.extract("any Global Express?")["aircraft"] == "Global Express"
    assert extractor.extract("G-650ER if possible")["aircraft"] == "G650ER"
    assert extractor.extract("citation latitude")["aircraft"] == "Citation Latitude"
    assert extractor.extract("Challenger 350 or a G550")["aircraft"] == "Challenger 350"


def test_dates_budgets_and_extras():
    extractor = ContextExtractor()
    found = extractor.extract("Leaving LFPG for EGGW on 10/07/2025, 4 passengers, 3 bags, wifi, +/- 2 days, £1.2m tops")
    assert found["origin"] == "LFPG"
    assert found["destination"] == "EGGW"
    assert found["date"] == "2025-07-10"
    assert found["pax"] == 4
    assert found["bags"] == 3
    assert found["cabin_preference"] == "wifi"
    assert found["flexibility"] == "+/- 2 days"
    assert found["budget_gbp"] == 1_200_000


def test_ambiguous_values_stay_unset():
    extractor = ContextExtractor()
    found = extractor.extract("Sometime on 2025-13-45 from somewhere, not sure about numbers")
    assert found == {}
    assert extractor.extract("budget around 35,000 pounds")["budget_gbp"] == 35000


def test_merge_keeps_earlier_fields():
    turn_one = merge_context(AviationContext(), {"aircraft": "G550"})
    turn_two = merge_context(turn_one, {"destination": "EGGW", "aircraft": None, "origin": ""})
    assert turn_two.aircraft == "G550"
    assert turn_two.destination == "EGGW"
    assert turn_two.origin is None
    turn_three = merge_context(turn_two, {"aircraft": "G650"})
    assert turn_three.aircraft == "G650"
    assert turn_three.destination == "EGGW"


def test_missing_fields_follow_fixed_order():
    assert get_missing_context(AviationContext()) == ["aircraft", "origin", "destination", "date", "pax", "budget"]
    partial = AviationContext(origin="EGLL", pax=4)
    assert get_missing_context(partial) == ["aircraft", "destination", "date", "budget"]
    assert has_all_required_context(partial) is False
    complete = AviationContext(aircraft="G650", origin="EGLL", destination="KJFK", date="2025-06-01", pax=8, budget_gbp=50000)
    assert get_missing_context(complete) == []
    assert has_all_required_context(complete) is True
