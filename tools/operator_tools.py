from __future__ import annotations

import logging

from models.schemas import ToolResult
from tools.fixtures import InMemoryOperatorDirectory
from tools.sources import OperatorDirectory

logger = logging.getLogger(__name__)


class OperatorTools:
    def __init__(self, directory: OperatorDirectory | None = None) -> None:
        self.directory = directory or InMemoryOperatorDirectory()

    async def get_operator_profile(self, operator_id: str) -> ToolResult:
        try:
            profile = await self.directory.find(operator_id)
        except Exception as exc:
            logger.warning("operator_lookup_failed", extra={"operator_id": operator_id, "error": repr(exc)})
            return ToolResult.failure(str(exc) or "operator_profile_error")
        if profile is None:
            return ToolResult.failure("Operator not found")
        return ToolResult.success(profile)
