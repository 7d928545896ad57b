from __future__ import annotations

import logging

from models.schemas import ToolResult
from tools.fixtures import InMemoryAircraftCatalog
from tools.sources import AircraftCatalog

logger = logging.getLogger(__name__)


class AircraftTools:
    def __init__(self, catalog: AircraftCatalog | None = None) -> None:
        self.catalog = catalog or InMemoryAircraftCatalog()

    async def get_aircraft_specs(self, aircraft_type: str) -> ToolResult:
        try:
            spec = await self.catalog.find(aircraft_type or "")
        except Exception as exc:
            logger.warning("aircraft_specs_failed", extra={"aircraft_type": aircraft_type, "error": repr(exc)})
            return ToolResult.failure(str(exc) or "aircraft_specs_error")
        if spec is None:
            return ToolResult.failure("Aircraft type not found")
        return ToolResult.success(spec)
