"""Caching decorator for chat backends.

Wraps any ChatBackend: each call first consults the prompt cache and only
reaches the wrapped backend on a miss, storing the raw response afterwards.
"""

from __future__ import annotations

import asyncio
import json
import logging

from rimtranslator.backends.base import ChatBackend, ChatRequest, ChatResponse
from rimtranslator.translation.cache import CacheWriteStatus, PromptCache

logger = logging.getLogger(__name__)


class CachedBackend(ChatBackend):
    """ChatBackend that serves repeated prompts from a PromptCache."""

    def __init__(self, backend: ChatBackend, cache: PromptCache) -> None:
        self._backend = backend
        self._cache = cache
        self.hits = 0
        self.misses = 0
        self.last_write_status: CacheWriteStatus | None = None

    @property
    def backend(self) -> ChatBackend:
        return self._backend

    @property
    def cache(self) -> PromptCache:
        return self._cache

    async def complete(self, request: ChatRequest) -> ChatResponse:
        prompt = request.messages

        payload = await asyncio.to_thread(self._cache.lookup, prompt)
        if payload is not None:
            try:
                response = ChatResponse.from_payload(json.loads(payload), cached=True)
            except (ValueError, TypeError, AttributeError) as e:
                logger.warning("Ignoring corrupt cache entry: %s", e)
            else:
                self.hits += 1
                logger.debug("[CACHE] Cache hit for prompt")
                return response

        self.misses += 1
        response = await self._backend.complete(request)

        self.last_write_status = await asyncio.to_thread(
            self._cache.store, prompt, json.dumps(response.to_payload(), ensure_ascii=False),
        )
        return response

    async def aclose(self) -> None:
        await self._backend.aclose()
