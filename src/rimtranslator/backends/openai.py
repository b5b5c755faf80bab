"""OpenAI chat-completions backend."""

from __future__ import annotations

import openai

from rimtranslator.backends.base import ChatBackend, ChatRequest, ChatResponse
from rimtranslator.errors import (
    BackendError,
    MissingCredentialsError,
    NetworkError,
    RateLimitError,
)

# Client-side retries done by the SDK itself; rimtranslator adds none on top
SDK_MAX_RETRIES = 2


class OpenAIBackend(ChatBackend):
    """Chat backend using the OpenAI API."""

    def __init__(
        self,
        api_key: str | None,
        *,
        max_retries: int = SDK_MAX_RETRIES,
        timeout: float | None = None,
    ) -> None:
        if not api_key:
            raise MissingCredentialsError(
                "OpenAI API key required. Use --api-key or set OPENAI_API_KEY."
            )
        kwargs: dict = {"api_key": api_key, "max_retries": max_retries}
        if timeout is not None:
            kwargs["timeout"] = timeout
        self._client = openai.AsyncOpenAI(**kwargs)

    async def complete(self, request: ChatRequest) -> ChatResponse:
        """Call chat.completions.create, mapping SDK errors to BackendError types."""
        try:
            completion = await self._client.chat.completions.create(
                model=request.model,
                messages=[m.to_dict() for m in request.messages],
            )
        except openai.RateLimitError as e:
            raise RateLimitError(str(e)) from e
        except openai.APIConnectionError as e:
            raise NetworkError(str(e)) from e
        except openai.APIError as e:
            raise BackendError(str(e)) from e

        return ChatResponse.from_payload(completion.model_dump(mode="json"))

    async def aclose(self) -> None:
        await self._client.close()
