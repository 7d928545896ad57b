from __future__ import annotations

import logging

from models.schemas import ToolResult
from tools.fixtures import InMemoryFleetSource
from tools.sources import FleetSource

logger = logging.getLogger(__name__)

SHORT_REPOSITION_NM = 100


class AvailabilityTools:
    def __init__(self, source: FleetSource | None = None) -> None:
        self.source = source or InMemoryFleetSource()

    async def get_aircraft_availability(
        self,
        aircraft_type: str | None = None,
        origin: str | None = None,
        destination: str | None = None,
        depart_date: str | None = None,
        pax: int | None = None,
        budget_gbp: int | None = None,
    ) -> ToolResult:
        try:
            items = await self.source.list_candidates()
            if aircraft_type:
                wanted = aircraft_type.lower()
                items = [item for item in items if wanted in item.aircraft_type.lower()]
            if origin:
                code = origin.upper()
                items = [
                    item
                    for item in items
                    if item.base_airport == code or (item.reposition_nm is not None and item.reposition_nm < SHORT_REPOSITION_NM)
                ]
            return ToolResult.success(items)
        except Exception as exc:
            logger.warning("availability_lookup_failed", extra={"error": repr(exc)})
            return ToolResult.failure(str(exc) or "availability_error")
