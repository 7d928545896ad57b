from __future__ import annotations

from typing import Dict, Iterable, List, Optional

from models.schemas import AircraftSpecs, AvailabilityItem, OperatorProfile
from tools.sources import DataSourceError

# In-memory stand-ins for the inventory, pricing and compliance services.

FLEET: List[AvailabilityItem] = [
    AvailabilityItem(
        operator_id="op_1", operator_name="SkyWest Executive", aircraft_type="Gulfstream G550",
        tail="G-SKYW", base_airport="EGLF", reposition_nm=35, est_block_time_min=120, notes="IS-BAO Stage II certified",
    ),
    AvailabilityItem(
        operator_id="op_2", operator_name="Albion Air", aircraft_type="Gulfstream G550",
        tail="G-ALBN", base_airport="EGGW", reposition_nm=0, est_block_time_min=115, notes="ARGUS Gold rated",
    ),
    AvailabilityItem(
        operator_id="op_3", operator_name="Blue Meridian", aircraft_type="Gulfstream G550",
        tail="F-HBMR", base_airport="LFPG", reposition_nm=210, est_block_time_min=125, notes="Wyvern registered",
    ),
    AvailabilityItem(
        operator_id="op_4", operator_name="Thames Jet Charter", aircraft_type="Gulfstream G650",
        tail="G-TJCX", base_airport="EGLL", reposition_nm=0, est_block_time_min=430, notes="ARGUS Platinum rated",
    ),
    AvailabilityItem(
        operator_id="op_5", operator_name="Kestrel Aviation", aircraft_type="Gulfstream G650",
        tail="G-KSTL", base_airport="EGKB", reposition_nm=25, est_block_time_min=440, notes="IS-BAO Stage III certified",
    ),
    AvailabilityItem(
        operator_id="op_6", operator_name="Nordlys Air", aircraft_type="Gulfstream G650",
        tail="OY-NRD", base_airport="EHAM", reposition_nm=200, est_block_time_min=450, notes="Wyvern Wingman",
    ),
    AvailabilityItem(
        operator_id="op_7", operator_name="Riviera Jets", aircraft_type="Falcon 7X",
        tail="F-HRJX", base_airport="LFMN", reposition_nm=0, est_block_time_min=110, notes="ARGUS Gold rated",
    ),
    AvailabilityItem(
        operator_id="op_2", operator_name="Albion Air", aircraft_type="Falcon 7X",
        tail="G-ALBF", base_airport="EGGW", reposition_nm=0, est_block_time_min=105, notes="ARGUS Gold rated",
    ),
    AvailabilityItem(
        operator_id="op_5", operator_name="Kestrel Aviation", aircraft_type="Challenger 350",
        tail="G-KSTC", base_airport="EGKB", reposition_nm=25, est_block_time_min=95, notes="IS-BAO Stage III certified",
    ),
]

BASE_RATES_GBP: Dict[str, int] = {
    "Gulfstream G550": 28000,
    "Gulfstream G650": 45000,
    "Falcon 7X": 28000,
    "Falcon 8X": 35000,
    "Global 6000": 38000,
    "Challenger 350": 18000,
    "Challenger 650": 22000,
}

REPOSITION_FEES_GBP: Dict[str, int] = {
    "op_1": 4000,
    "op_2": 0,
    "op_3": 9500,
    "op_4": 0,
    "op_5": 1500,
    "op_6": 3000,
    "op_7": 0,
}

OPERATORS: Dict[str, OperatorProfile] = {
    "op_1": OperatorProfile(operator_id="op_1", name="SkyWest Executive", home_bases=["EGLF"], typical_turn_time_min=90,
                            safety_notes="IS-BAO Stage II certified", contact_masked="***-***-****"),
    "op_2": OperatorProfile(operator_id="op_2", name="Albion Air", home_bases=["EGGW"], typical_turn_time_min=75,
                            safety_notes="ARGUS Gold rated", contact_masked="***-***-****"),
    "op_3": OperatorProfile(operator_id="op_3", name="Blue Meridian", home_bases=["LFPG"], typical_turn_time_min=100,
                            safety_notes="Wyvern registered", contact_masked="***-***-****"),
    "op_4": OperatorProfile(operator_id="op_4", name="Thames Jet Charter", home_bases=["EGLL", "EGLF"], typical_turn_time_min=80,
                            safety_notes="ARGUS Platinum rated", contact_masked="***-***-****"),
    "op_5": OperatorProfile(operator_id="op_5", name="Kestrel Aviation", home_bases=["EGKB"], typical_turn_time_min=85,
                            safety_notes="IS-BAO Stage III certified", contact_masked="***-***-****"),
    "op_6": OperatorProfile(operator_id="op_6", name="Nordlys Air", home_bases=["EHAM"], typical_turn_time_min=95,
                            safety_notes="Wyvern Wingman", contact_masked="***-***-****"),
    "op_7": OperatorProfile(operator_id="op_7", name="Riviera Jets", home_bases=["LFMN", "LFMD"], typical_turn_time_min=70,
                            safety_notes="ARGUS Gold rated", contact_masked="***-***-****"),
}

AIRCRAFT_SPECS: Dict[str, AircraftSpecs] = {
    "Gulfstream G550": AircraftSpecs(type="Gulfstream G550", manufacturer="Gulfstream Aerospace", model="G550", seats=16,
                                     range_nm=6750, mtow_lbs=91000, baggage_cu_ft=195, noise_level="Stage 3",
                                     certification=["FAA", "EASA", "TC"]),
    "Gulfstream G650": AircraftSpecs(type="Gulfstream G650", manufacturer="Gulfstream Aerospace", model="G650", seats=19,
                                     range_nm=7500, mtow_lbs=99600, baggage_cu_ft=195, noise_level="Stage 4",
                                     certification=["FAA", "EASA", "TC"]),
    "Falcon 7X": AircraftSpecs(type="Falcon 7X", manufacturer="Dassault Aviation", model="7X", seats=16,
                               range_nm=5950, mtow_lbs=70000, baggage_cu_ft=140, noise_level="Stage 3",
                               certification=["FAA", "EASA", "TC"]),
    "Challenger 350": AircraftSpecs(type="Challenger 350", manufacturer="Bombardier", model="350", seats=10,
                                    range_nm=3200, mtow_lbs=40600, baggage_cu_ft=106, noise_level="Stage 4",
                                    certification=["FAA", "EASA", "TC"]),
}


class InMemoryFleetSource:
    def __init__(self, items: Iterable[AvailabilityItem] | None = None) -> None:
        self._items = list(FLEET if items is None else items)

    async def list_candidates(self) -> List[AvailabilityItem]:
        return [item.model_copy() for item in self._items]


class StaticRateCard:
    def __init__(
        self,
        base_rates: Dict[str, int] | None = None,
        reposition_fees: Dict[str, int] | None = None,
        default_base_rate: int = 30000,
        default_reposition_fee: int = 1000,
        handling_fees: int = 3000,
        platform_margin: int = 2000,
        extras: Dict[str, int] | None = None,
    ) -> None:
        self._base_rates = dict(BASE_RATES_GBP if base_rates is None else base_rates)
        self._reposition_fees = dict(REPOSITION_FEES_GBP if reposition_fees is None else reposition_fees)
        self._default_base_rate = default_base_rate
        self._default_reposition_fee = default_reposition_fee
        self._handling_fees = handling_fees
        self._platform_margin = platform_margin
        self._extras = dict(extras or {"deice_risk": 500, "wifi": 300, "catering": 800})

    async def base_rate(self, aircraft_type: str) -> int:
        if not aircraft_type:
            raise DataSourceError("aircraft type required")
        return self._base_rates.get(aircraft_type, self._default_base_rate)

    async def reposition_fee(self, operator_id: str) -> int:
        if not operator_id:
            raise DataSourceError("operator id required")
        return self._reposition_fees.get(operator_id, self._default_reposition_fee)

    def handling_fees(self) -> int:
        return self._handling_fees

    def platform_margin(self) -> int:
        return self._platform_margin

    def extras(self) -> Dict[str, int]:
        return dict(self._extras)


class InMemoryOperatorDirectory:
    def __init__(self, profiles: Dict[str, OperatorProfile] | None = None) -> None:
        self._profiles = dict(OPERATORS if profiles is None else profiles)

    async def find(self, operator_id: str) -> Optional[OperatorProfile]:
        if not operator_id:
            raise DataSourceError("operator id required")
        return self._profiles.get(operator_id)


class InMemoryAircraftCatalog:
    def __init__(self, specs: Dict[str, AircraftSpecs] | None = None) -> None:
        self._specs = dict(AIRCRAFT_SPECS if specs is None else specs)

    async def find(self, aircraft_type: str) -> Optional[AircraftSpecs]:
        wanted = " ".join(aircraft_type.split()).lower()
        if not wanted:
            raise DataSourceError("aircraft type required")
        for key, spec in self._specs.items():
            if key.lower() == wanted:
                return spec
        # Model code aliases such as "G650" or "Falcon 7X".
        for key, spec in self._specs.items():
            if key.lower().endswith(" " + wanted) or spec.model.lower() == wanted:
                return spec
        return None


class StaticScreeningList:
    def __init__(
        self,
        names: Iterable[str] | None = None,
        companies: Iterable[str] | None = None,
        countries: Iterable[str] | None = None,
    ) -> None:
        self._names = [n.lower() for n in (names if names is not None else ["john doe", "jane smith"])]
        self._companies = [c.lower() for c in (companies if companies is not None else ["bad company ltd"])]
        self._countries = [c.lower() for c in (countries if countries is not None else ["north korea", "syria"])]

    def blocked_names(self) -> List[str]:
        return list(self._names)

    def blocked_companies(self) -> List[str]:
        return list(self._companies)

    def blocked_countries(self) -> List[str]:
        return list(self._countries)
