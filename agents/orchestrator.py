from __future__ import annotations

import logging
import time
from typing import Any, Dict, List, Optional

from agents.base import BaseAgent
from agents.context_extractor import ContextExtractor, has_all_required_context, merge_context
from agents.intent_router import IntentRouter
from agents.llm_runtime import LLMRuntime
from agents.prompts import ERROR_REPLY
from agents.quote_agent import QuoteAgent, format_gbp
from agents.state_machine import next_state
from compliance.audit_logger import AuditLogger
from compliance.policy_gate import PolicyGate
from memory.conversation_store import ConversationStore, InMemoryConversationStore
from models.schemas import (
    AviationContext,
    ConversationRecord,
    ConversationState,
    OrchestratorResponse,
    TerminalRole,
    ToolCallRecord,
)

logger = logging.getLogger(__name__)

QUOTE_CACHE_KEY = "quote"


def coerce_terminal_role(value: TerminalRole | str | None) -> TerminalRole:
    if isinstance(value, TerminalRole):
        return value
    try:
        return TerminalRole(str(value or "").strip().lower())
    except ValueError:
        return TerminalRole.BROKER


class OrchestratorAgent(BaseAgent):
    def __init__(
        self,
        llm: LLMRuntime | None = None,
        store: ConversationStore | None = None,
        policy_gate: PolicyGate | None = None,
        extractor: ContextExtractor | None = None,
        router: IntentRouter | None = None,
        quote_agent: QuoteAgent | None = None,
        audit_logger: AuditLogger | None = None,
    ) -> None:
        super().__init__(name="orchestrator_agent", audit_logger=audit_logger)
        self.router = router or (llm.router if llm is not None else IntentRouter())
        self.llm = llm or LLMRuntime(router=self.router)
        self.store = store or InMemoryConversationStore()
        self.policy_gate = policy_gate or PolicyGate()
        self.extractor = extractor or ContextExtractor()
        self.quote_agent = quote_agent or QuoteAgent(audit_logger=self.audit_logger)

    async def process_message(
        self,
        user_message: str,
        conversation_id: str,
        terminal_role: TerminalRole | str = TerminalRole.BROKER,
    ) -> OrchestratorResponse:
        start = time.perf_counter()
        try:
            role = coerce_terminal_role(terminal_role)
            async with self.store.lock(conversation_id):
                return await self._process_turn(user_message or "", conversation_id, role, start)
        except Exception:
            logger.exception("orchestrator_unhandled_error", extra={"conversation_id": conversation_id})
            return OrchestratorResponse(
                reply=ERROR_REPLY,
                new_state=ConversationState.IDLE,
                context=AviationContext(),
                tool_calls=[],
                confidence=0.5,
            )

    async def get_conversation_history(self, conversation_id: str) -> Optional[ConversationRecord]:
        return await self.store.get(conversation_id)

    async def clear_conversation_history(self, conversation_id: str) -> None:
        async with self.store.lock(conversation_id):
            await self.store.delete(conversation_id)

    async def get_active_conversations(self) -> List[str]:
        return await self.store.list_ids()

    async def _process_turn(
        self,
        user_message: str,
        conversation_id: str,
        role: TerminalRole,
        start: float,
    ) -> OrchestratorResponse:
        record = await self.store.get(conversation_id) or ConversationRecord(id=conversation_id, terminal_role=role)
        record.terminal_role = role

        policy = self.policy_gate.enforce(user_message)
        if policy.blocked:
            self.build_decision_log(
                conversation_id,
                action="policy_blocked",
                reasoning=policy.violation.value,
                duration_ms=self._elapsed(start),
                outcome="blocked",
            )
            return OrchestratorResponse(
                reply=policy.message,
                new_state=record.state,
                context=record.context,
                tool_calls=[],
                confidence=1.0,
            )

        context = merge_context(record.context, self.extractor.extract(user_message))
        routing = self.router.route(user_message, context)
        first = await self.llm.generate(user_message, context, routing=routing, terminal_role=role)
        reply, confidence = first.text, first.confidence
        new_state = next_state(routing.intent, context, record.state)
        tool_calls: List[str] = []
        tool_records: List[ToolCallRecord] = []

        cached_quote = record.tool_outputs.get(QUOTE_CACHE_KEY)
        if new_state == ConversationState.CONFIRMING and not cached_quote:
            new_state = ConversationState.PRESENTING
        if new_state == ConversationState.CONFIRMING:
            summary = self._confirmation_summary(context, cached_quote)
            final = await self.llm.generate(
                user_message, context, prior_results_summary=summary, routing=routing, terminal_role=role
            )
            reply, confidence = final.text, final.confidence
        elif self.router.is_tool_eligible(routing.intent) and has_all_required_context(context):
            outcome = await self.quote_agent.process(context)
            tool_calls = list(outcome.tool_calls)
            tool_records = list(outcome.tool_records)
            if outcome.ok:
                summary = self.quote_agent.summarize(context, outcome)
                final = await self.llm.generate(
                    user_message, context, prior_results_summary=summary, routing=routing, terminal_role=role
                )
                reply, confidence = final.text, final.confidence
                record.tool_outputs[QUOTE_CACHE_KEY] = outcome.cache_payload()
                new_state = ConversationState.PRESENTING
            else:
                reply = outcome.fallback_line
                new_state = ConversationState.IDLE
                record.tool_outputs.pop(QUOTE_CACHE_KEY, None)

        record.history.extend([user_message, reply])
        record.state = new_state
        record.context = context
        await self.store.put(record)

        self.build_decision_log(
            conversation_id,
            action=f"route:{routing.intent.value}",
            reasoning=routing.reasoning,
            tool_calls=tool_records,
            duration_ms=self._elapsed(start),
            outcome=new_state.value,
        )
        return OrchestratorResponse(
            reply=reply,
            new_state=new_state,
            context=context,
            tool_calls=tool_calls,
            confidence=confidence,
        )

    def _confirmation_summary(self, context: AviationContext, quote: Dict[str, Any]) -> str:
        operator = quote.get("operator") or {}
        best = quote.get("best") or {}
        name = operator.get("name") or "Selected operator"
        price = format_gbp(best.get("est_price_gbp", 0))
        return (
            f"Confirmation requested with {name} for {context.aircraft} on {context.date}, "
            f"{context.origin} to {context.destination}, estimated {price} all in. "
            "I will hold the slot while the operator confirms. "
            "Would you like the operator profile while we wait?"
        )

    def _elapsed(self, start: float) -> int:
        return int((time.perf_counter() - start) * 1000)
