"""Tests for ChatResponse payload conversion."""

import pytest

from rimtranslator.backends.base import ChatResponse

OPENAI_PAYLOAD = {
    "id": "chatcmpl-123",
    "object": "chat.completion",
    "created": 1700000000,
    "model": "o4-mini",
    "choices": [
        {
            "index": 0,
            "message": {"role": "assistant", "content": "Bonjour", "refusal": None},
            "finish_reason": "stop",
        },
    ],
    "usage": {"prompt_tokens": 10, "completion_tokens": 5, "total_tokens": 15},
}


class TestChatResponse:
    def test_from_openai_payload(self):
        response = ChatResponse.from_payload(OPENAI_PAYLOAD)
        assert response.content == "Bonjour"
        assert response.total_tokens == 15
        assert response.model == "o4-mini"
        assert response.cached is False

    def test_raw_payload_kept(self):
        response = ChatResponse.from_payload(OPENAI_PAYLOAD)
        assert response.to_payload() is OPENAI_PAYLOAD

    def test_payload_built_without_raw(self):
        response = ChatResponse(content="Hallo", total_tokens=7, model="o4-mini")
        restored = ChatResponse.from_payload(response.to_payload(), cached=True)
        assert restored.content == "Hallo"
        assert restored.total_tokens == 7
        assert restored.model == "o4-mini"
        assert restored.cached is True

    def test_missing_usage_and_content(self):
        response = ChatResponse.from_payload({"choices": [{"message": {"content": None}}]})
        assert response.content == ""
        assert response.total_tokens == 0

    def test_no_choices(self):
        with pytest.raises(ValueError):
            ChatResponse.from_payload({"choices": []})
