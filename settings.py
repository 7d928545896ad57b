from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path


def _bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


def _int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw.strip())
    except ValueError:
        return default


def _float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return float(raw.strip())
    except ValueError:
        return default


@dataclass(frozen=True)
class Settings:
    llm_provider: str = os.getenv("LLM_PROVIDER", "ollama")
    ollama_base_url: str = os.getenv("OLLAMA_BASE_URL", "http://127.0.0.1:11434")
    ollama_primary_model: str = os.getenv("OLLAMA_PRIMARY_MODEL", "llama3:8b")
    ollama_reasoning_model: str = os.getenv("OLLAMA_REASONING_MODEL", "llama3:8b")
    ollama_summary_model: str = os.getenv("OLLAMA_SUMMARY_MODEL", "llama3:8b")
    llm_timeout_seconds: float = _float("LLM_TIMEOUT_SECONDS", 8.0)
    llm_health_timeout_seconds: float = _float("LLM_HEALTH_TIMEOUT_SECONDS", 1.5)
    llm_temperature: float = _float("LLM_TEMPERATURE", 0.7)
    llm_top_p: float = _float("LLM_TOP_P", 0.9)
    llm_max_tokens: int = _int("LLM_MAX_TOKENS", 1000)

    platform_name: str = os.getenv("PLATFORM_NAME", "Stratus Connect")
    assistant_name: str = os.getenv("ASSISTANT_NAME", "Max")
    rules_dir: str = os.getenv("RULES_DIR", str(Path(__file__).resolve().parent / "rules" / "profiles"))

    audit_log_path: str = os.getenv("AUDIT_LOG_PATH", "")
    conversation_ttl_seconds: int = _int("CONVERSATION_TTL_SECONDS", 24 * 60 * 60)
    conversation_max_history: int = _int("CONVERSATION_MAX_HISTORY", 50)

    log_level: str = os.getenv("LOG_LEVEL", "INFO")
    debug: bool = _bool("DEBUG", False)


SETTINGS = Settings()
