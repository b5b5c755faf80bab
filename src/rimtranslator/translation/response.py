"""Split a model reply into the output file path and the translated XML."""

from __future__ import annotations

import re
from dataclasses import dataclass

from rimtranslator.errors import ResponseFormatError
from rimtranslator.translation.prompt import FENCE

_BACKTICKS_RE = re.compile(r"^`+|`+$")
_LANGUAGE_TAG = "xml"


@dataclass(frozen=True)
class ParsedResponse:
    """Output path (relative to the mod root) and file content."""

    output_path: str
    content: str


def _strip_backticks(text: str) -> str:
    return _BACKTICKS_RE.sub("", text)


def parse_response(text: str | None) -> ParsedResponse:
    """Parse model output of the form::

        1.6/Languages/French/DefInjected/ThoughtDef/X.xml
        ```xml
        <?xml version="1.0" encoding="utf-8"?>
        <LanguageData>...</LanguageData>
        ```

    Raises:
        ResponseFormatError: If the output is empty, has no code fence, or
            has no path before the first fence.
    """
    output = (text or "").strip()
    if not output:
        raise ResponseFormatError("Empty model output")
    if FENCE not in output:
        raise ResponseFormatError("Model output has no code block")

    path_segment, *body_segments = output.split(FENCE)

    output_path = path_segment.strip()
    if output_path.startswith("/"):
        output_path = output_path[1:]
    output_path = _strip_backticks(output_path).strip()
    if not output_path:
        raise ResponseFormatError("Model output has no output path")

    content = _strip_backticks("\n".join(body_segments).strip()).strip()
    # Leftover language tag from an opening ```xml fence
    if content.startswith(_LANGUAGE_TAG):
        content = content[len(_LANGUAGE_TAG):].strip()
    content = _strip_backticks(content).strip()

    return ParsedResponse(output_path=output_path, content=content)
