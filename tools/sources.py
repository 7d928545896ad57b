from __future__ import annotations

from typing import Dict, List, Optional, Protocol

from models.schemas import AircraftSpecs, AvailabilityItem, OperatorProfile


class DataSourceError(RuntimeError):
    pass


class FleetSource(Protocol):
    async def list_candidates(self) -> List[AvailabilityItem]: ...


class RateCard(Protocol):
    async def base_rate(self, aircraft_type: str) -> int: ...

    async def reposition_fee(self, operator_id: str) -> int: ...

    def handling_fees(self) -> int: ...

    def platform_margin(self) -> int: ...

    def extras(self) -> Dict[str, int]: ...


class OperatorDirectory(Protocol):
    async def find(self, operator_id: str) -> Optional[OperatorProfile]: ...


class AircraftCatalog(Protocol):
    async def find(self, aircraft_type: str) -> Optional[AircraftSpecs]: ...


class ScreeningList(Protocol):
    def blocked_names(self) -> List[str]: ...

    def blocked_companies(self) -> List[str]: ...

    def blocked_countries(self) -> List[str]: ...
