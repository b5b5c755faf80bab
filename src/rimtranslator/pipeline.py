"""Batch translation pipeline for a RimWorld mod directory.

Used by the CLI (cli.py). Discovers translation units (source file x target
language), runs the first unit on its own so the prompt prefix and the
source-file cache are warm, then runs every other unit concurrently and
reduces the settled outcomes into a BatchResult.
"""

from __future__ import annotations

import asyncio
import logging
import time as _time
from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

from rimtranslator.backends.base import ChatBackend, ChatRequest
from rimtranslator.core.constants import DEFAULT_MODEL, SUPPORTED_LANGUAGES
from rimtranslator.core.paths import (
    is_eligible,
    relative_source,
    resolve_output_path,
    target_languages,
)
from rimtranslator.errors import ResponseFormatError, SourceReadError
from rimtranslator.translation.cache import PromptCache
from rimtranslator.translation.prompt import build_prompt
from rimtranslator.translation.response import parse_response

logger = logging.getLogger(__name__)

# Longest excerpt of model output quoted in write-error logs
_SNIPPET_LENGTH = 80


class BackendChoice(str, Enum):
    """User-facing backend selection."""
    openai = "openai"
    dummy = "dummy"


class TaskStatus(str, Enum):
    written = "written"
    dry_run = "dry_run"
    failed = "failed"


# Type alias for progress callback: (phase, current, total, message)
ProgressCallback = Callable[[str, int, int, str], None]


@dataclass(frozen=True)
class TranslationUnit:
    """One (source file, target language) pair."""

    source_path: Path
    target_language: str
    is_first: bool = False


@dataclass
class TaskResult:
    """Outcome of a unit that ran to completion (written or not)."""

    unit: TranslationUnit
    status: TaskStatus = TaskStatus.failed
    output_path: Path | None = None
    error: str = ""
    total_tokens: int = 0
    from_cache: bool = False

    @property
    def ok(self) -> bool:
        return self.status != TaskStatus.failed


@dataclass(frozen=True)
class TaskFailure:
    """A failed unit, identified by source file and language."""

    source: str
    language: str
    message: str


@dataclass
class BatchResult:
    """Result of a batch translation run."""
    total_units: int = 0
    success_count: int = 0
    error_count: int = 0
    cache_hits: int = 0
    total_tokens: int = 0
    elapsed_seconds: float = 0.0
    failures: list[TaskFailure] = field(default_factory=list)


# ── Backend creation ──


def create_backend(
    backend_name: str,
    *,
    api_key: str | None = None,
    cache: PromptCache | None = None,
) -> tuple[ChatBackend, str]:
    """Create a chat backend, wrapped in the prompt cache unless cache is None.

    Returns:
        Tuple of (backend_instance, backend_label_for_report).

    Raises:
        MissingCredentialsError: If OpenAI is selected without an API key.
    """
    from rimtranslator.backends.dummy import DummyBackend

    backend: ChatBackend
    if backend_name == BackendChoice.dummy:
        backend, label = DummyBackend(), "dummy"
    else:
        from rimtranslator.backends.openai import OpenAIBackend
        backend, label = OpenAIBackend(api_key), "openai"

    if cache is not None:
        from rimtranslator.backends.cached import CachedBackend
        backend = CachedBackend(backend, cache)
        label = f"{label}+cache"

    return backend, label


# ── Discovery ──


def discover_sources(root: Path) -> list[Path]:
    """All translation sources under root, in a stable order."""
    return sorted(
        p for p in root.rglob("*")
        if p.is_file() and is_eligible(p, root)
    )


def plan_units(root: Path, languages: Iterable[str] = SUPPORTED_LANGUAGES) -> list[TranslationUnit]:
    """Expand every source file into one unit per target language."""
    languages = list(languages)
    units: list[TranslationUnit] = []
    for source in discover_sources(root):
        for lang in target_languages(source, languages, root):
            units.append(TranslationUnit(source, lang, is_first=not units))
    return units


class FileContentCache:
    """Source file contents, read once per run and shared by all languages."""

    def __init__(self) -> None:
        self._contents: dict[Path, str] = {}

    def __contains__(self, path: Path) -> bool:
        return path in self._contents

    def __len__(self) -> int:
        return len(self._contents)

    async def read(self, path: Path) -> str:
        """Return the text of a source file.

        Raises:
            SourceReadError: If the file cannot be read as UTF-8 text.
        """
        cached = self._contents.get(path)
        if cached is not None:
            return cached
        try:
            contents = await asyncio.to_thread(path.read_text, encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise SourceReadError(f"Cannot read {path}: {e}") from e
        self._contents[path] = contents
        return contents


# ── Single unit ──


def _write_output(path: Path, content: str) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8", newline="") as f:
        f.write(content)


def _snippet(text: str) -> str:
    if len(text) <= 2 * _SNIPPET_LENGTH:
        return text
    return f"{text[:_SNIPPET_LENGTH]}...{text[-_SNIPPET_LENGTH:]}"


async def translate_unit(
    unit: TranslationUnit,
    *,
    root: Path,
    backend: ChatBackend,
    files: FileContentCache,
    model: str = DEFAULT_MODEL,
    dry_run: bool = False,
) -> TaskResult:
    """Translate one source file into one language and write the result.

    Malformed model output and write errors are logged and reported in the
    returned TaskResult.

    Raises:
        SourceReadError: If the source file cannot be read.
        BackendError: If the model call fails.
    """
    relative = relative_source(unit.source_path, root)
    lang = unit.target_language

    contents = await files.read(unit.source_path)
    logger.info("Converting %s -> %s", relative, lang)

    request = ChatRequest(model=model, messages=tuple(build_prompt(relative, lang, contents)))
    response = await backend.complete(request)

    result = TaskResult(
        unit=unit,
        total_tokens=0 if response.cached else response.total_tokens,
        from_cache=response.cached,
    )

    try:
        parsed = parse_response(response.content)
        output_file = resolve_output_path(root, parsed.output_path)
    except ResponseFormatError as e:
        logger.error("Invalid output format for %s to %s: %s", relative, lang, e)
        result.error = str(e)
        return result

    result.output_path = output_file
    if dry_run:
        result.status = TaskStatus.dry_run
        return result

    try:
        await asyncio.to_thread(_write_output, output_file, parsed.content)
    except OSError as e:
        logger.error(
            "Failed to write %s to %s (%s): %s | output length %d, content length %d, "
            "output %r, content %r",
            relative, lang, output_file, e,
            len(response.content), len(parsed.content),
            _snippet(response.content), _snippet(parsed.content),
        )
        result.error = f"Write error: {e}"
        return result

    result.status = TaskStatus.written
    return result


# ═══════════════════════════════════════════════════════════════════
# Public API: batch translation
# ═══════════════════════════════════════════════════════════════════


def _reduce(
    result: BatchResult,
    settled: Sequence[tuple[TranslationUnit, TaskResult | BaseException]],
    root: Path,
) -> None:
    for unit, outcome in settled:
        if isinstance(outcome, TaskResult):
            result.total_tokens += outcome.total_tokens
            result.cache_hits += int(outcome.from_cache)
            if outcome.ok:
                result.success_count += 1
                continue
            message = outcome.error
        elif isinstance(outcome, Exception):
            message = str(outcome) or type(outcome).__name__
        else:
            raise outcome
        result.error_count += 1
        result.failures.append(
            TaskFailure(relative_source(unit.source_path, root), unit.target_language, message)
        )


async def run_batch(
    root: Path,
    *,
    backend: ChatBackend,
    model: str = DEFAULT_MODEL,
    languages: Iterable[str] = SUPPORTED_LANGUAGES,
    dry_run: bool = False,
    on_progress: ProgressCallback | None = None,
) -> BatchResult:
    """Translate every eligible file under root into every language.

    The first unit runs alone; all remaining units run concurrently with no
    in-flight limit. A failing unit never affects its siblings.
    """
    t0 = _time.monotonic()
    root = root.resolve()
    units = plan_units(root, languages)
    result = BatchResult(total_units=len(units))
    if not units:
        return result

    files = FileContentCache()
    completed = 0

    async def _settle(unit: TranslationUnit) -> TaskResult:
        nonlocal completed
        try:
            return await translate_unit(
                unit, root=root, backend=backend, files=files,
                model=model, dry_run=dry_run,
            )
        except Exception as e:
            logger.error(
                "Failed to translate %s to %s: %s",
                relative_source(unit.source_path, root), unit.target_language, e,
            )
            raise
        finally:
            completed += 1
            if on_progress:
                on_progress(
                    "translate", completed, len(units),
                    f"{relative_source(unit.source_path, root)} -> {unit.target_language}",
                )

    first, rest = units[0], units[1:]
    first_outcome: TaskResult | BaseException
    try:
        first_outcome = await _settle(first)
    except Exception as e:
        first_outcome = e

    settled: list[tuple[TranslationUnit, TaskResult | BaseException]] = [(first, first_outcome)]

    # An unreadable first file takes its remaining languages down with it
    if isinstance(first_outcome, SourceReadError):
        aborted = [u for u in rest if u.source_path == first.source_path]
        rest = [u for u in rest if u.source_path != first.source_path]
        settled.extend((u, first_outcome) for u in aborted)
        completed += len(aborted)

    outcomes = await asyncio.gather(*(_settle(u) for u in rest), return_exceptions=True)
    settled.extend(zip(rest, outcomes, strict=True))

    _reduce(result, settled, root)
    result.elapsed_seconds = _time.monotonic() - t0
    return result


def batch_translate(
    root: Path,
    *,
    backend: ChatBackend,
    model: str = DEFAULT_MODEL,
    languages: Iterable[str] = SUPPORTED_LANGUAGES,
    dry_run: bool = False,
    on_progress: ProgressCallback | None = None,
) -> BatchResult:
    """Blocking entry point for run_batch. Closes the backend afterwards."""

    async def _main() -> BatchResult:
        try:
            return await run_batch(
                root, backend=backend, model=model, languages=languages,
                dry_run=dry_run, on_progress=on_progress,
            )
        finally:
            await backend.aclose()

    return asyncio.run(_main())
