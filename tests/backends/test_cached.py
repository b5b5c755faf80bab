"""Tests for the caching backend decorator."""

import json

import pytest

from rimtranslator.backends.base import ChatRequest
from rimtranslator.backends.cached import CachedBackend
from rimtranslator.errors import NetworkError
from rimtranslator.translation.cache import CacheWriteStatus, PromptCache
from rimtranslator.translation.prompt import build_prompt
from tests.conftest import CATALAN_REPLY, StubBackend


def _request(language: str = "Catalan", model: str = "o4-mini") -> ChatRequest:
    messages = build_prompt("1.6/Defs/ThoughtDef/PleasantFishingTrip.xml", language, "<Defs />")
    return ChatRequest(model=model, messages=tuple(messages))


class TestCachedBackend:
    @pytest.mark.asyncio
    async def test_second_identical_call_is_served_from_cache(self, tmp_cache):
        stub = StubBackend()
        backend = CachedBackend(stub, tmp_cache)

        first = await backend.complete(_request())
        second = await backend.complete(_request())

        assert stub.calls == 1
        assert first.cached is False
        assert second.cached is True
        assert second.content == first.content == CATALAN_REPLY
        assert backend.hits == 1
        assert backend.misses == 1

    @pytest.mark.asyncio
    async def test_cache_survives_new_wrapper(self, tmp_path):
        await CachedBackend(StubBackend(), PromptCache(tmp_path / "c")).complete(_request())

        stub = StubBackend()
        response = await CachedBackend(stub, PromptCache(tmp_path / "c")).complete(_request())

        assert stub.calls == 0
        assert response.content == CATALAN_REPLY

    @pytest.mark.asyncio
    async def test_different_prompts_both_call_backend(self, tmp_cache):
        stub = StubBackend()
        backend = CachedBackend(stub, tmp_cache)
        await backend.complete(_request("Catalan"))
        await backend.complete(_request("French"))
        assert stub.calls == 2
        assert tmp_cache.count() == 2

    @pytest.mark.asyncio
    async def test_key_ignores_model_name(self, tmp_cache):
        stub = StubBackend()
        backend = CachedBackend(stub, tmp_cache)
        await backend.complete(_request(model="o4-mini"))
        await backend.complete(_request(model="gpt-4.1"))
        assert stub.calls == 1

    @pytest.mark.asyncio
    async def test_stores_serialized_payload(self, tmp_cache):
        backend = CachedBackend(StubBackend(total_tokens=42), tmp_cache)
        request = _request()
        await backend.complete(request)

        stored = json.loads(tmp_cache.lookup(request.messages))
        assert stored["choices"][0]["message"]["content"] == CATALAN_REPLY
        assert stored["usage"]["total_tokens"] == 42
        assert backend.last_write_status == CacheWriteStatus.stored

    @pytest.mark.asyncio
    async def test_hit_restores_usage(self, tmp_cache):
        backend = CachedBackend(StubBackend(total_tokens=42), tmp_cache)
        await backend.complete(_request())
        cached = await backend.complete(_request())
        assert cached.total_tokens == 42
        assert cached.cached is True

    @pytest.mark.asyncio
    async def test_backend_error_propagates_and_nothing_cached(self, tmp_cache):
        error = NetworkError("connection reset")
        backend = CachedBackend(StubBackend(error), tmp_cache)

        with pytest.raises(NetworkError) as exc_info:
            await backend.complete(_request())

        assert exc_info.value is error
        assert tmp_cache.count() == 0

    @pytest.mark.asyncio
    async def test_corrupt_entry_treated_as_miss(self, tmp_cache):
        request = _request()
        tmp_cache.store(request.messages, "{not json")
        stub = StubBackend()
        backend = CachedBackend(stub, tmp_cache)

        response = await backend.complete(request)

        assert stub.calls == 1
        assert response.cached is False
        assert json.loads(tmp_cache.lookup(request.messages))["choices"]

    @pytest.mark.asyncio
    async def test_cache_write_failure_does_not_fail_call(self, tmp_path):
        blocker = tmp_path / "file"
        blocker.write_text("x", encoding="utf-8")
        backend = CachedBackend(StubBackend(), PromptCache(blocker / "cache"))

        response = await backend.complete(_request())

        assert response.content == CATALAN_REPLY
        assert backend.last_write_status == CacheWriteStatus.failed

    @pytest.mark.asyncio
    async def test_aclose_closes_wrapped_backend(self, tmp_cache):
        stub = StubBackend()
        await CachedBackend(stub, tmp_cache).aclose()
        assert stub.closed

    @pytest.mark.asyncio
    async def test_unstorable_reply_still_returned(self, tmp_cache):
        reply = "1.6/Languages/French/Keyed/A.xml\n```xml\n<a>\ud83d</a>\n```"
        stub = StubBackend(reply)
        backend = CachedBackend(stub, tmp_cache)

        response = await backend.complete(_request())

        assert stub.calls == 1
        assert response.content == reply
        assert backend.last_write_status == CacheWriteStatus.failed
        assert tmp_cache.count() == 0
