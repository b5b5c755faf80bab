"""RimWorld mod layout rules: which files get translated and where output lands.

A mod tree looks like::

    About/About.xml
    1.6/Defs/ThoughtDef/PleasantFishingTrip.xml
    1.6/Languages/English/Keyed/Messages.xml
    1.6/Languages/French/DefInjected/ThoughtDef/PleasantFishingTrip.xml

Defs are translated into ``Languages/<Lang>/DefInjected``. Existing language
folders are output, not input, except the hand-written English Keyed strings
which are mirrored into every other language.
"""

from __future__ import annotations

import re
from collections.abc import Iterable
from pathlib import Path, PurePath, PurePosixPath

from rimtranslator.core.constants import (
    DATA_FILE_EXTENSION,
    DEF_INJECTED_DIR,
    DEFS_DIR,
    KEYED_DIR,
    LANGUAGES_DIR,
    METADATA_FILENAME,
    SOURCE_LANGUAGE,
)
from rimtranslator.errors import ResponseFormatError

_VERSION_DIR_RE = re.compile(r"^\d+\.\d+$")


def _relative_parts(path: PurePath, root: PurePath | None) -> tuple[str, ...]:
    if root is not None:
        try:
            return path.relative_to(root).parts
        except ValueError:
            pass
    return path.parts


def _keyed_english_index(parts: tuple[str, ...]) -> int | None:
    """Index of the ``Languages`` component of a Languages/English/Keyed path."""
    for i, part in enumerate(parts[:-3]):
        if (
            part == LANGUAGES_DIR
            and parts[i + 1] == SOURCE_LANGUAGE
            and parts[i + 2] == KEYED_DIR
        ):
            return i
    return None


def is_keyed_english(path: PurePath, root: PurePath | None = None) -> bool:
    """True for files under ``Languages/English/Keyed/``."""
    return _keyed_english_index(_relative_parts(path, root)) is not None


def is_eligible(path: PurePath, root: PurePath | None = None) -> bool:
    """Decide whether a discovered file is a translation source."""
    if path.suffix != DATA_FILE_EXTENSION or path.name == METADATA_FILENAME:
        return False
    parts = _relative_parts(path, root)
    if LANGUAGES_DIR in parts[:-1]:
        return _keyed_english_index(parts) is not None
    return True


def target_languages(
    path: PurePath,
    languages: Iterable[str],
    root: PurePath | None = None,
) -> list[str]:
    """Languages a source file should be translated into.

    Keyed English sources are never translated back into English.
    """
    keyed = is_keyed_english(path, root)
    return [lang for lang in languages if not (keyed and lang == SOURCE_LANGUAGE)]


def relative_source(path: Path, root: Path) -> str:
    """POSIX-style path of a source file relative to the mod root."""
    return PurePosixPath(*_relative_parts(path, root)).as_posix()


def expected_output_path(relative: str, language: str) -> str:
    """Conventional output location for a source file.

    ``1.6/Defs/ThoughtDef/X.xml`` -> ``1.6/Languages/<Lang>/DefInjected/ThoughtDef/X.xml``
    ``Languages/English/Keyed/X.xml`` -> ``Languages/<Lang>/Keyed/X.xml``
    """
    parts = PurePosixPath(relative.lstrip("/")).parts
    version: tuple[str, ...] = ()
    if parts and _VERSION_DIR_RE.match(parts[0]):
        version, parts = parts[:1], parts[1:]

    keyed_at = _keyed_english_index(parts)
    if keyed_at is not None:
        rest = parts[keyed_at + 3:]
        return PurePosixPath(
            *version, *parts[:keyed_at], LANGUAGES_DIR, language, KEYED_DIR, *rest,
        ).as_posix()

    if parts and parts[0] == DEFS_DIR:
        parts = parts[1:]
    return PurePosixPath(
        *version, LANGUAGES_DIR, language, DEF_INJECTED_DIR, *parts,
    ).as_posix()


def resolve_output_path(root: Path, output_path: str) -> Path:
    """Resolve a model-supplied output path against the mod root.

    Raises:
        ResponseFormatError: If the path is empty or points outside the root.
    """
    if not output_path.strip():
        raise ResponseFormatError("Empty output path")
    root = root.resolve()
    resolved = (root / output_path).resolve()
    if root not in resolved.parents:
        raise ResponseFormatError(f"Output path escapes the input directory: {output_path}")
    return resolved
