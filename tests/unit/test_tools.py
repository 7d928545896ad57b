from __future__ import annotations

import asyncio

import pytest

from models.schemas import AvailabilityItem
from tools import AircraftTools, AvailabilityTools, OperatorTools, PricingTools, SanctionsTools
from tools.fixtures import InMemoryFleetSource, InMemoryOperatorDirectory
from tools.sources import DataSourceError


class BrokenFleet:
    async def list_candidates(self):
        raise DataSourceError("inventory offline")


def test_availability_filters_by_type_and_origin():
    async def _run():
        tools = AvailabilityTools()
        result = await tools.get_aircraft_availability(aircraft_type="g550", origin="LFPG")
        assert result.ok is True
        assert [item.operator_id for item in result.data] == ["op_1", "op_2", "op_3"]

        from_heathrow = await tools.get_aircraft_availability(aircraft_type="G650", origin="EGLL")
        assert [item.operator_id for item in from_heathrow.data] == ["op_4", "op_5"]

        everything = await tools.get_aircraft_availability()
        assert len(everything.data) == 9

    asyncio.run(_run())


def test_availability_reports_source_errors():
    async def _run():
        result = await AvailabilityTools(BrokenFleet()).get_aircraft_availability(aircraft_type="G650")
        assert result.ok is False
        assert result.error == "inventory offline"

        empty = await AvailabilityTools(InMemoryFleetSource([])).get_aircraft_availability(aircraft_type="G650")
        assert empty.ok is True
        assert empty.data == []

    asyncio.run(_run())


def test_price_estimate_breakdown_and_extras():
    async def _run():
        pricing = PricingTools()
        plain = await pricing.price_estimate("op_3", "Gulfstream G550", "LFPG", "EGGW", "2025-07-10", 6)
        assert plain.ok is True
        assert plain.data.est_price_gbp == 42500
        assert plain.data.breakdown.model_dump() == {"flight": 28000, "reposition": 9500, "fees": 3000, "margin": 2000}

        extras = await pricing.price_estimate(
            "op_2", "Gulfstream G550", "LFPG", "EGGW", "2025-07-10", 6, extras={"wifi": True, "catering": True, "deice_risk": False}
        )
        assert extras.data.est_price_gbp == 33000 + 300 + 800
        assert extras.data.breakdown.fees == 3000 + 1100

        unknown = await pricing.price_estimate("op_99", "Hawker 800", "EGLL", "LFPG", "2025-07-10", 4)
        assert unknown.data.est_price_gbp == 30000 + 1000 + 3000 + 2000

    asyncio.run(_run())


def test_price_match_tool_wraps_errors():
    async def _run():
        pricing = PricingTools()
        result = await pricing.price_match(
            [{"operator_id": "op_1", "est_price_gbp": 37000}, {"operator_id": "op_2", "est_price_gbp": 33000}],
            target_budget_gbp=35000,
        )
        assert result.ok is True
        assert result.data.best_operator_id == "op_2"

        empty = await pricing.price_match([], target_budget_gbp=35000)
        assert empty.ok is False
        assert empty.error == "No candidates to match"

    asyncio.run(_run())


def test_operator_and_aircraft_lookups():
    async def _run():
        operators = OperatorTools()
        profile = await operators.get_operator_profile("op_2")
        assert profile.ok is True
        assert profile.data.name == "Albion Air"
        missing = await operators.get_operator_profile("op_404")
        assert missing.ok is False
        assert missing.error == "Operator not found"

        aircraft = AircraftTools()
        by_name = await aircraft.get_aircraft_specs("Gulfstream G650")
        by_code = await aircraft.get_aircraft_specs("g650")
        assert by_name.data == by_code.data
        assert by_code.data.range_nm == 7500
        assert (await aircraft.get_aircraft_specs("Falcon 7X")).data.manufacturer == "Dassault Aviation"
        unknown = await aircraft.get_aircraft_specs("Concorde")
        assert unknown.ok is False
        assert unknown.error == "Aircraft type not found"

    asyncio.run(_run())


def test_blank_lookups_surface_source_errors():
    async def _run():
        missing_operator = await OperatorTools().get_operator_profile("")
        assert missing_operator.ok is False
        assert missing_operator.error == "operator id required"

        blank_type = await AircraftTools().get_aircraft_specs("   ")
        assert blank_type.ok is False
        assert blank_type.error == "aircraft type required"

        pricing = PricingTools()
        no_type = await pricing.price_estimate("op_2", "", "LFPG", "EGGW", "2025-07-10", 6)
        assert no_type.ok is False
        assert no_type.error == "aircraft type required"
        no_operator = await pricing.price_estimate("", "Gulfstream G550", "LFPG", "EGGW", "2025-07-10", 6)
        assert no_operator.error == "operator id required"

        with pytest.raises(DataSourceError):
            await InMemoryOperatorDirectory().find("")

    asyncio.run(_run())


def test_sanctions_screening():
    async def _run():
        sanctions = SanctionsTools()
        hit = await sanctions.sanctions_check("Mr John Doe")
        assert hit.data.clear is False
        assert hit.data.notes == "Match found in sanctions database"

        company = await sanctions.sanctions_check("Alex Smith", company="Bad Company Ltd")
        assert company.data.clear is False

        country = await sanctions.sanctions_check("Alex Smith", country="Syria")
        assert country.data.clear is False
        assert country.data.notes == "Country subject to sanctions"

        clear = await sanctions.sanctions_check("Alex Smith", company="Albion Air", country="United Kingdom")
        assert clear.data.clear is True
        assert clear.data.notes == "No matches found in sanctions database"

    asyncio.run(_run())


def test_fleet_fixture_items_are_copies():
    async def _run():
        source = InMemoryFleetSource([AvailabilityItem(operator_id="op_x", operator_name="X", aircraft_type="G450")])
        first = await source.list_candidates()
        first[0].operator_name = "changed"
        second = await source.list_candidates()
        assert second[0].operator_name == "X"

    asyncio.run(_run())
