from __future__ import annotations

import asyncio
from abc import ABC, abstractmethod
from datetime import datetime, timedelta
from typing import Dict, List, Optional

from models.schemas import ConversationRecord
from settings import SETTINGS


class ConversationStore(ABC):
    """Keyed conversation records plus one asyncio lock per conversation id."""

    def __init__(self) -> None:
        self._locks: Dict[str, asyncio.Lock] = {}

    def lock(self, conversation_id: str) -> asyncio.Lock:
        lock = self._locks.get(conversation_id)
        if lock is None:
            lock = asyncio.Lock()
            self._locks[conversation_id] = lock
        return lock

    @abstractmethod
    async def get(self, conversation_id: str) -> Optional[ConversationRecord]:
        raise NotImplementedError

    @abstractmethod
    async def put(self, record: ConversationRecord) -> None:
        raise NotImplementedError

    @abstractmethod
    async def delete(self, conversation_id: str) -> None:
        raise NotImplementedError

    @abstractmethod
    async def list_ids(self) -> List[str]:
        raise NotImplementedError


class InMemoryConversationStore(ConversationStore):
    def __init__(self, ttl_seconds: int | None = None, max_history: int | None = None) -> None:
        super().__init__()
        self.ttl_seconds = SETTINGS.conversation_ttl_seconds if ttl_seconds is None else ttl_seconds
        self.max_history = SETTINGS.conversation_max_history if max_history is None else max_history
        self._records: Dict[str, ConversationRecord] = {}

    def _expired(self, record: ConversationRecord) -> bool:
        if self.ttl_seconds <= 0:
            return False
        return datetime.utcnow() - record.updated_at > timedelta(seconds=self.ttl_seconds)

    def _evict_expired(self) -> None:
        for key in [k for k, record in self._records.items() if self._expired(record)]:
            self._records.pop(key, None)
            lock = self._locks.get(key)
            if lock is not None and not lock.locked():
                self._locks.pop(key, None)

    async def get(self, conversation_id: str) -> Optional[ConversationRecord]:
        self._evict_expired()
        record = self._records.get(conversation_id)
        return record.model_copy(deep=True) if record is not None else None

    async def put(self, record: ConversationRecord) -> None:
        stored = record.model_copy(deep=True)
        if self.max_history > 0 and len(stored.history) > self.max_history:
            stored.history = stored.history[-self.max_history :]
        stored.updated_at = datetime.utcnow()
        self._records[stored.id] = stored

    async def delete(self, conversation_id: str) -> None:
        self._records.pop(conversation_id, None)

    async def list_ids(self) -> List[str]:
        self._evict_expired()
        return sorted(self._records)
