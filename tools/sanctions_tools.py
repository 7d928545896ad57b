from __future__ import annotations

import logging

from models.schemas import SanctionsResult, ToolResult
from tools.fixtures import StaticScreeningList
from tools.sources import ScreeningList

logger = logging.getLogger(__name__)


class SanctionsTools:
    def __init__(self, screening: ScreeningList | None = None) -> None:
        self.screening = screening or StaticScreeningList()

    async def sanctions_check(self, name: str, company: str | None = None, country: str | None = None) -> ToolResult:
        try:
            lowered_name = (name or "").lower()
            lowered_company = (company or "").lower()
            lowered_country = (country or "").lower()
            if any(blocked in lowered_name for blocked in self.screening.blocked_names()):
                return ToolResult.success(SanctionsResult(clear=False, notes="Match found in sanctions database"))
            if lowered_company and any(blocked in lowered_company for blocked in self.screening.blocked_companies()):
                return ToolResult.success(SanctionsResult(clear=False, notes="Match found in sanctions database"))
            if lowered_country and any(blocked in lowered_country for blocked in self.screening.blocked_countries()):
                return ToolResult.success(SanctionsResult(clear=False, notes="Country subject to sanctions"))
            return ToolResult.success(SanctionsResult(clear=True, notes="No matches found in sanctions database"))
        except Exception as exc:
            logger.warning("sanctions_check_failed", extra={"error": repr(exc)})
            return ToolResult.failure(str(exc) or "sanctions_check_error")
