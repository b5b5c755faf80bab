"""Prompt construction for translating one mod file into one language."""

from __future__ import annotations

import json
from collections.abc import Sequence
from dataclasses import dataclass
from enum import Enum


class Role(str, Enum):
    """Chat message roles understood by the model gateway."""
    system = "system"
    developer = "developer"
    user = "user"


@dataclass(frozen=True)
class PromptMessage:
    """One role-tagged message of a prompt."""

    role: Role
    content: str

    def to_dict(self) -> dict[str, str]:
        return {"role": self.role.value, "content": self.content}


# An ordered message sequence; order changes both the cache key and the model output
Prompt = Sequence[PromptMessage]

FENCE = "```"

TRANSLATION_INSTRUCTIONS = """
You will be given a language and a RimWorld mod XML file.
Translate the user-facing strings of the file into the given language.

# Example input:
1.6/Defs/ThoughtDef/PleasantFishingTrip.xml
```
<?xml version="1.0" encoding="utf-8"?>
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
```

# Example output:
1.6/Languages/Catalan/DefInjected/ThoughtDef/PleasantFishingTrip.xml
```
<?xml version="1.0" encoding="utf-8"?>
<LanguageData>

  <PleasantFishingTrip.label>Agradable jornada de pesca</PleasantFishingTrip.label>
  <PleasantFishingTrip.stages.Went_fishing.label>Va anar a pescar</PleasantFishingTrip.stages.Went_fishing.label>
  <PleasantFishingTrip.stages.Went_fishing.description>Va ser agradable gaudir d'una mica de pau mentre pescava durant una estona.</PleasantFishingTrip.stages.Went_fishing.description>

</LanguageData>
```

Also provide the path of the new file, and make sure the output follows the
RimWorld localization format.

# Path formatting:
<Version>/Languages/<Language>/DefInjected/<MatchedRelativePath>/<OriginalFileName>.xml
If the source file starts with a version folder such as "1.6/", keep it at the
start of the output path. Without a version folder, start with "Languages/".

Keyed files are already translation files: keep the <LanguageData> structure
and the keys, translate only the values, and write them under Keyed.

Other path examples:
In: 1.6/Defs/ThoughtDef/PleasantFishingTrip.xml
Out: 1.6/Languages/Catalan/DefInjected/ThoughtDef/PleasantFishingTrip.xml

In: Defs/ResearchDef/ResearchProjectDef.xml
Out: Languages/French/DefInjected/ResearchDef/ResearchProjectDef.xml

In: 1.5/Defs/BuildingDef/SkyScraperDef/SkyRise.xml
Out: 1.5/Languages/French/DefInjected/BuildingDef/SkyScraperDef/SkyRise.xml

In: 1.6/Languages/English/Keyed/Messages.xml
Out: 1.6/Languages/German/Keyed/Messages.xml

# Additional documentation
https://rimworldwiki.com/wiki/Modding_Tutorials/Localization
"""

OUTPUT_FORMAT_INSTRUCTIONS = (
    "Provide the output file in backticks, with the path to the new file on "
    "the first line, followed by the translated XML content"
)


def language_message(language: str) -> str:
    return f"Language: '{language}'"


def source_message(relative_path: str, contents: str) -> str:
    return f"{relative_path}\n{FENCE}\n{contents}\n{FENCE}"


def build_prompt(relative_path: str, language: str, contents: str) -> list[PromptMessage]:
    """Build the message sequence for one (file, language) translation.

    Everything but the last two messages is identical across units, so the
    gateway can reuse its processed prefix between requests.
    """
    return [
        PromptMessage(Role.system, TRANSLATION_INSTRUCTIONS),
        PromptMessage(Role.developer, OUTPUT_FORMAT_INSTRUCTIONS),
        PromptMessage(Role.user, language_message(language)),
        PromptMessage(Role.user, source_message(relative_path, contents)),
    ]


def serialize_prompt(prompt: Prompt) -> str:
    """Canonical text form of a prompt.

    A compact JSON array of [role, content] pairs, so message boundaries can
    never be confused with newlines inside a message.
    """
    return json.dumps(
        [[m.role.value, m.content] for m in prompt],
        ensure_ascii=False,
        separators=(",", ":"),
    )
