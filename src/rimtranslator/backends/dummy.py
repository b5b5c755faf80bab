"""Dummy chat backend for testing: echoes the source XML under the conventional path."""

from __future__ import annotations

import re

from rimtranslator.backends.base import ChatBackend, ChatRequest, ChatResponse
from rimtranslator.core.paths import expected_output_path
from rimtranslator.translation.prompt import FENCE, Role

_LANGUAGE_RE = re.compile(r"^Language: '(?P<language>[^']+)'$")
_TAGGED_TEXT_RE = re.compile(r"(<(label|description)>)([^<]+)(</\2>)")


class DummyBackend(ChatBackend):
    """Offline backend that answers in the format a real model is asked for.

    The output path follows the RimWorld layout and every ``<label>`` or
    ``<description>`` text is prefixed with the language tag.

    Example: "<label>Went fishing</label>" -> "<label>[CATALAN] Went fishing</label>"
    """

    def __init__(self) -> None:
        self.calls = 0

    async def complete(self, request: ChatRequest) -> ChatResponse:
        self.calls += 1
        user_messages = [m.content for m in request.messages if m.role == Role.user]
        language = "English"
        for content in user_messages:
            match = _LANGUAGE_RE.match(content)
            if match:
                language = match.group("language")

        source = user_messages[-1] if user_messages else ""
        relative_path, _, body = source.partition("\n")
        body = body.strip().strip("`").strip()

        tag = f"[{language.upper()}]"
        translated = _TAGGED_TEXT_RE.sub(
            lambda m: f"{m.group(1)}{tag} {m.group(3)}{m.group(4)}", body,
        )
        content = (
            f"{expected_output_path(relative_path, language)}\n"
            f"{FENCE}xml\n{translated}\n{FENCE}"
        )
        return ChatResponse(content=content, model=request.model)
