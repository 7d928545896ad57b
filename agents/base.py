from __future__ import annotations

import time
from typing import Awaitable, Iterable, Tuple, TypeVar

from compliance.audit_logger import AuditLogger
from models.schemas import ToolCallRecord, TurnDecisionLog

T = TypeVar("T")


class BaseAgent:
    def __init__(self, name: str, audit_logger: AuditLogger | None = None) -> None:
        self.name = name
        self.audit_logger = audit_logger or AuditLogger()

    def build_decision_log(
        self,
        conversation_id: str,
        action: str,
        reasoning: str,
        tool_calls: Iterable[ToolCallRecord] | None = None,
        duration_ms: int = 0,
        outcome: str = "ok",
    ) -> TurnDecisionLog:
        record = TurnDecisionLog(
            conversation_id=conversation_id,
            agent=self.name,
            action=action,
            reasoning=reasoning,
            tool_calls=list(tool_calls or []),
            duration_ms=duration_ms,
            outcome=outcome,
        )
        self.audit_logger.log_decision(record)
        return record

    async def timed(self, coro: Awaitable[T]) -> Tuple[T, int]:
        start = time.perf_counter()
        result = await coro
        return result, int((time.perf_counter() - start) * 1000)
