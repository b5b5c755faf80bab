"""Shared test fixtures for rimtranslator tests."""

from __future__ import annotations

import asyncio
from collections.abc import Callable
from pathlib import Path

import pytest

from rimtranslator.backends.base import ChatBackend, ChatRequest, ChatResponse
from rimtranslator.translation.prompt import PromptMessage, Role

PLEASANT_FISHING_TRIP_DEF = """<?xml version="1.0" encoding="utf-8"?>
<Defs>
  <ThoughtDef>
    <defName>PleasantFishingTrip</defName>
    <durationDays>0.25</durationDays>
    <stackLimit>1</stackLimit>
    <thoughtClass>Thought_Memory</thoughtClass>
    <label>pleasant fishing trip</label>
    <stages>
      <li>
        <label>Went fishing</label>
        <description>It was nice to enjoy some peace while fishing for a bit.</description>
        <baseMoodEffect>3</baseMoodEffect>
      </li>
    </stages>
  </ThoughtDef>
</Defs>
"""

CATALAN_LANGUAGE_DATA = """<?xml version="1.0" encoding="utf-8"?>
<LanguageData>

  <PleasantFishingTrip.label>Agradable jornada de pesca</PleasantFishingTrip.label>
  <PleasantFishingTrip.stages.Went_fishing.label>Va anar a pescar</PleasantFishingTrip.stages.Went_fishing.label>
  <PleasantFishingTrip.stages.Went_fishing.description>Va ser agradable gaudir d'una mica de pau mentre pescava durant una estona.</PleasantFishingTrip.stages.Went_fishing.description>

</LanguageData>"""

CATALAN_REPLY = (
    "1.6/Languages/Catalan/DefInjected/ThoughtDef/PleasantFishingTrip.xml\n"
    f"```\n{CATALAN_LANGUAGE_DATA}\n```"
)

KEYED_MESSAGES = """<?xml version="1.0" encoding="utf-8"?>
<LanguageData>
  <FishingTripStarted>The colonists went fishing.</FishingTripStarted>
</LanguageData>
"""


class StubBackend(ChatBackend):
    """Chat backend returning a canned reply and counting live calls."""

    def __init__(
        self,
        reply: str | Exception | Callable[[ChatRequest], str] = CATALAN_REPLY,
        *,
        total_tokens: int = 10,
    ) -> None:
        self.reply = reply
        self.total_tokens = total_tokens
        self.calls = 0
        self.requests: list[ChatRequest] = []
        self.closed = False

    async def complete(self, request: ChatRequest) -> ChatResponse:
        self.calls += 1
        self.requests.append(request)
        await asyncio.sleep(0)
        reply = self.reply
        if isinstance(reply, Exception):
            raise reply
        if callable(reply):
            reply = reply(request)
        return ChatResponse(
            content=reply, total_tokens=self.total_tokens, model=request.model,
        )

    async def aclose(self) -> None:
        self.closed = True


def make_prompt(*pairs: tuple[str, str]) -> list[PromptMessage]:
    """Build a prompt from (role, content) pairs."""
    return [PromptMessage(Role(role), content) for role, content in pairs]


def request_language(request: ChatRequest) -> str:
    """Target language of a request built by build_prompt."""
    return request.messages[2].content.split("'")[1]


def request_source(request: ChatRequest) -> str:
    """Relative source path of a request built by build_prompt."""
    return request.messages[3].content.split("\n", 1)[0]


def write_file(path: Path, content: str) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")
    return path


@pytest.fixture
def tmp_cache(tmp_path: Path):
    """Create a temporary prompt cache."""
    from rimtranslator.translation.cache import PromptCache
    return PromptCache(tmp_path / "prompt-cache")


@pytest.fixture
def mod_dir(tmp_path: Path) -> Path:
    """A small mod tree with one Def, one Keyed English file and existing output."""
    root = tmp_path / "PleasantFishing"
    write_file(root / "About" / "About.xml", "<ModMetaData><name>Fishing</name></ModMetaData>")
    write_file(
        root / "1.6" / "Defs" / "ThoughtDef" / "PleasantFishingTrip.xml",
        PLEASANT_FISHING_TRIP_DEF,
    )
    write_file(
        root / "1.6" / "Languages" / "English" / "Keyed" / "Messages.xml",
        KEYED_MESSAGES,
    )
    write_file(
        root / "1.6" / "Languages" / "French" / "DefInjected" / "ThoughtDef" / "Old.xml",
        "<LanguageData />",
    )
    write_file(root / "1.6" / "Textures" / "readme.txt", "not xml")
    return root
