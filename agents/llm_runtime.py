from __future__ import annotations

import logging
import re
from abc import ABC, abstractmethod
from typing import Dict, List

import httpx

from agents.context_extractor import get_missing_context
from agents.intent_router import IntentRouter
from agents.prompts import DEFAULT_CLOSING, VOICE_RULES, has_next_action, persona_prompt
from models.schemas import AviationContext, GenerationResult, IntentType, ModelSlot, RoutingDecision, TerminalRole
from rules.registry import RuleRegistry, RuleSet, default_registry
from settings import SETTINGS

logger = logging.getLogger(__name__)

MAX_REPLY_CHARS = 2000
STOP_SEQUENCES = ["User:", "System:", "Context:"]
FALLBACK_MODEL = "heuristic-fallback"

_ROLE_MARKER = re.compile(r"^\s*(System|User|Context|Assistant(?: \(\w+\))?):\s*", re.MULTILINE)
_BLANK_LINES = re.compile(r"\n\s*\n+")
_CASUAL_AIRCRAFT = re.compile(r"\b(jet|plane)(s?)\b")


class GenerationBackendError(RuntimeError):
    pass


def finalize_reply(text: str) -> str:
    """Trims a reply and makes sure it ends in punctuation and offers a next step."""
    clean = (text or "").strip()
    limit = MAX_REPLY_CHARS - len(DEFAULT_CLOSING) - 2
    if len(clean) > limit:
        clean = clean[:limit].rstrip()
    if not clean.endswith((".", "?", "!")):
        clean += "."
    if not has_next_action(clean):
        clean += f" {DEFAULT_CLOSING}"
    return clean


class GenerationClient(ABC):
    name = "generation"

    @abstractmethod
    async def generate(
        self,
        user_message: str,
        context: AviationContext,
        prior_results_summary: str | None = None,
        routing: RoutingDecision | None = None,
        terminal_role: TerminalRole = TerminalRole.BROKER,
    ) -> GenerationResult:
        raise NotImplementedError


class OllamaClient(GenerationClient):
    """Local Ollama text-generation backend."""

    name = "ollama"

    def __init__(
        self,
        base_url: str | None = None,
        router: IntentRouter | None = None,
        timeout_seconds: float | None = None,
        health_timeout_seconds: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.base_url = (base_url or SETTINGS.ollama_base_url).rstrip("/")
        self.router = router or IntentRouter()
        self.timeout_seconds = timeout_seconds if timeout_seconds is not None else SETTINGS.llm_timeout_seconds
        self.health_timeout_seconds = (
            health_timeout_seconds if health_timeout_seconds is not None else SETTINGS.llm_health_timeout_seconds
        )
        self.transport = transport

    def _client(self, timeout: float) -> httpx.AsyncClient:
        return httpx.AsyncClient(base_url=self.base_url, timeout=timeout, transport=self.transport)

    async def health_check(self) -> bool:
        try:
            async with self._client(self.health_timeout_seconds) as client:
                resp = await client.get("/api/tags")
            return resp.status_code == 200
        except httpx.HTTPError:
            return False

    async def list_models(self) -> List[str]:
        try:
            async with self._client(self.health_timeout_seconds) as client:
                resp = await client.get("/api/tags")
                resp.raise_for_status()
                data = resp.json()
        except (httpx.HTTPError, ValueError) as exc:
            raise GenerationBackendError(f"model listing failed: {exc}") from exc
        return [str(m.get("name")) for m in data.get("models", []) if isinstance(m, dict) and m.get("name")]

    async def generate(
        self,
        user_message: str,
        context: AviationContext,
        prior_results_summary: str | None = None,
        routing: RoutingDecision | None = None,
        terminal_role: TerminalRole = TerminalRole.BROKER,
    ) -> GenerationResult:
        routing = routing or self.router.route(user_message, context)
        prompt = self.build_prompt(user_message, prior_results_summary, routing.model_slot, terminal_role)
        raw = await self._call(routing.model_name, prompt)
        text = self.clean_response(raw, routing.intent)
        return GenerationResult(
            text=text,
            intent=routing.intent,
            model_used=routing.model_name,
            confidence=routing.confidence,
            reasoning=routing.reasoning,
        )

    def build_prompt(
        self,
        user_message: str,
        prior_results_summary: str | None = None,
        slot: ModelSlot = ModelSlot.PRIMARY,
        terminal_role: TerminalRole = TerminalRole.BROKER,
    ) -> str:
        parts = [
            f"System:\n{persona_prompt(terminal_role, slot)}",
            f"Context:\n{prior_results_summary}" if prior_results_summary else "",
            f"User:\n{user_message}",
            f"Assistant ({SETTINGS.assistant_name}):",
        ]
        return "\n\n".join(p for p in parts if p)

    async def _call(self, model: str, prompt: str) -> str:
        body = {
            "model": model,
            "prompt": prompt,
            "stream": False,
            "options": {
                "temperature": SETTINGS.llm_temperature,
                "top_p": SETTINGS.llm_top_p,
                "max_tokens": SETTINGS.llm_max_tokens,
                "stop": list(STOP_SEQUENCES),
            },
        }
        try:
            async with self._client(self.timeout_seconds) as client:
                resp = await client.post("/api/generate", json=body)
        except httpx.HTTPError as exc:
            raise GenerationBackendError(f"ollama request failed: {exc!r}") from exc
        if resp.status_code >= 300:
            raise GenerationBackendError(f"ollama error {resp.status_code}: {resp.text[:200]}")
        try:
            data = resp.json()
        except ValueError as exc:
            raise GenerationBackendError("ollama returned invalid json") from exc
        return str(data.get("response") or "")

    def clean_response(self, response: str, intent: IntentType) -> str:
        clean = _ROLE_MARKER.sub("", response or "")
        clean = _BLANK_LINES.sub("\n", clean).strip()
        if not clean:
            raise GenerationBackendError("empty_response")
        if intent == IntentType.REASSURE and "real" in clean.lower():
            clean = VOICE_RULES["realness"]
        elif intent == IntentType.INTAKE and "help" in clean.lower():
            clean = VOICE_RULES["help_offer"]
        elif intent in {IntentType.PRICING, IntentType.AVAILABILITY}:
            clean = _CASUAL_AIRCRAFT.sub("aircraft", clean)
        return finalize_reply(clean)


class HeuristicClient(GenerationClient):
    """Offline client answering from the canned reply rules. Never raises."""

    name = "heuristic"

    def __init__(
        self,
        registry: RuleRegistry | None = None,
        ruleset: RuleSet | None = None,
        router: IntentRouter | None = None,
    ) -> None:
        registry = registry or default_registry()
        self.ruleset = ruleset or registry.load("fallback")
        self.router = router or IntentRouter(registry=registry)

    async def generate(
        self,
        user_message: str,
        context: AviationContext,
        prior_results_summary: str | None = None,
        routing: RoutingDecision | None = None,
        terminal_role: TerminalRole = TerminalRole.BROKER,
    ) -> GenerationResult:
        context = context or AviationContext()
        routing = routing or self.router.route(user_message, context)
        if prior_results_summary:
            return GenerationResult(
                text=finalize_reply(prior_results_summary),
                intent=routing.intent,
                model_used=FALLBACK_MODEL,
                confidence=0.9,
                reasoning="Fallback presenting tool results",
            )

        text = user_message or ""
        rule = next(
            (r for r in self.ruleset.rules if r.result == routing.intent.value or r.matches(text)),
            None,
        )
        if rule is None:
            return GenerationResult(
                text=finalize_reply(""),
                intent=IntentType.GENERAL,
                model_used=FALLBACK_MODEL,
                confidence=0.5,
                reasoning="Fallback with no reply rule",
            )
        return GenerationResult(
            text=finalize_reply(self._render(rule.attributes, context)),
            intent=IntentType(rule.result),
            model_used=FALLBACK_MODEL,
            confidence=float(rule.attributes.get("confidence", 0.6)),
            reasoning=f"Fallback reply for {rule.result}",
        )

    def _render(self, attributes: Dict[str, object], context: AviationContext) -> str:
        missing = get_missing_context(context)
        values = context.model_dump()
        template = str(attributes.get("text", ""))
        with_context = attributes.get("text_with_context")
        if with_context and missing:
            fields = attributes.get("context_fields")
            if fields:
                usable = all(values.get(str(f)) not in (None, "") for f in fields)
            else:
                usable = any(values.get(f) not in (None, "") for f in values)
            if usable:
                template = str(with_context)
        return template.format(
            missing=", ".join(missing),
            platform=SETTINGS.platform_name,
            **{k: ("" if v is None else v) for k, v in values.items()},
        )


class LLMRuntime:
    """Chooses the generation client per turn.

    With provider ``ollama`` the primary backend is probed before each call;
    an unhealthy probe or any generation failure falls back to the heuristic
    client for that turn.
    """

    def __init__(
        self,
        provider: str | None = None,
        primary: OllamaClient | None = None,
        fallback: GenerationClient | None = None,
        router: IntentRouter | None = None,
    ) -> None:
        self.provider = (provider or SETTINGS.llm_provider or "heuristic").lower()
        self.router = router or IntentRouter()
        if self.provider == "ollama":
            self.primary = primary or OllamaClient(router=self.router)
        else:
            self.primary = None
        self.fallback = fallback or HeuristicClient(router=self.router)

    async def available(self) -> bool:
        if self.primary is None:
            return False
        return await self.primary.health_check()

    def models(self) -> Dict[str, str]:
        return {slot.value: name for slot, name in self.router.models.items()}

    async def generate(
        self,
        user_message: str,
        context: AviationContext,
        prior_results_summary: str | None = None,
        routing: RoutingDecision | None = None,
        terminal_role: TerminalRole = TerminalRole.BROKER,
    ) -> GenerationResult:
        routing = routing or self.router.route(user_message, context)
        if self.primary is not None:
            if await self.primary.health_check():
                try:
                    return await self.primary.generate(
                        user_message,
                        context,
                        prior_results_summary=prior_results_summary,
                        routing=routing,
                        terminal_role=terminal_role,
                    )
                except Exception as exc:
                    logger.warning("llm_primary_failed", extra={"model": routing.model_name, "error": repr(exc)})
            else:
                logger.info("llm_primary_unavailable", extra={"base_url": self.primary.base_url})
        return await self.fallback.generate(
            user_message,
            context,
            prior_results_summary=prior_results_summary,
            routing=routing,
            terminal_role=terminal_role,
        )
