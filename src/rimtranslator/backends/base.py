"""Abstract base class for chat-completion backends."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any

from rimtranslator.translation.prompt import PromptMessage


@dataclass(frozen=True)
class ChatRequest:
    """A model selection plus the ordered prompt messages."""

    model: str
    messages: tuple[PromptMessage, ...]


@dataclass
class ChatResponse:
    """Text completion and token usage of one model call.

    ``raw`` keeps the full gateway payload (an OpenAI ``chat.completion``
    object as a dict) so it can be cached and restored losslessly.
    """

    content: str
    total_tokens: int = 0
    model: str = ""
    raw: dict[str, Any] | None = field(default=None, repr=False)
    cached: bool = False

    def to_payload(self) -> dict[str, Any]:
        """Return the payload in OpenAI ``chat.completion`` shape."""
        if self.raw is not None:
            return self.raw
        return {
            "object": "chat.completion",
            "model": self.model,
            "choices": [
                {
                    "index": 0,
                    "message": {"role": "assistant", "content": self.content},
                    "finish_reason": "stop",
                },
            ],
            "usage": {"total_tokens": self.total_tokens},
        }

    @classmethod
    def from_payload(cls, payload: dict[str, Any], *, cached: bool = False) -> ChatResponse:
        """Build a response from an OpenAI ``chat.completion`` payload.

        Raises:
            ValueError: If the payload has no choices.
        """
        choices = payload.get("choices") or []
        if not choices:
            raise ValueError("Completion payload has no choices")
        message = choices[0].get("message") or {}
        usage = payload.get("usage") or {}
        return cls(
            content=message.get("content") or "",
            total_tokens=usage.get("total_tokens") or 0,
            model=payload.get("model") or "",
            raw=payload,
            cached=cached,
        )


class ChatBackend(ABC):
    """Interface for model gateways."""

    @abstractmethod
    async def complete(self, request: ChatRequest) -> ChatResponse:
        """Run one chat completion.

        Args:
            request: Model name and ordered prompt messages.

        Returns:
            The completion text and token usage.

        Raises:
            BackendError: If the live call fails.
        """
        ...

    async def aclose(self) -> None:
        """Release network resources. Default implementation does nothing."""
