"""On-disk prompt cache: one JSON file per distinct prompt.

Entries are addressed by a digest of the full message sequence, so identical
prompts are deduplicated across runs and across tools sharing the directory.
Entries are written once and trusted as-is afterwards; nothing expires.
"""

from __future__ import annotations

import logging
from enum import Enum
from pathlib import Path

from rimtranslator.translation.hashing import prompt_digest
from rimtranslator.translation.prompt import Prompt, serialize_prompt

logger = logging.getLogger(__name__)

DEFAULT_CACHE_DIR = Path.home() / ".rimtranslator" / "prompt-cache"

CACHE_FILE_SUFFIX = ".json"


class CacheWriteStatus(str, Enum):
    """Outcome of PromptCache.store."""
    stored = "stored"
    skipped = "skipped"
    failed = "failed"


class PromptCache:
    """Persistent mapping prompt -> raw model response payload."""

    def __init__(self, cache_dir: str | Path | None = None) -> None:
        if cache_dir is None:
            cache_dir = DEFAULT_CACHE_DIR
        self._cache_dir = Path(cache_dir)

    @property
    def cache_dir(self) -> Path:
        return self._cache_dir

    def key_for(self, prompt: Prompt) -> str | None:
        """Cache key for a prompt, or None for an empty prompt."""
        if not prompt:
            return None
        return prompt_digest(serialize_prompt(prompt))

    def path_for(self, prompt: Prompt) -> Path | None:
        key = self.key_for(prompt)
        if key is None:
            return None
        return self._cache_dir / f"{key}{CACHE_FILE_SUFFIX}"

    def lookup(self, prompt: Prompt) -> str | None:
        """Return the stored payload for a prompt, or None on any miss.

        Read errors are treated as misses and never raised.
        """
        cache_file = self.path_for(prompt)
        if cache_file is None:
            return None
        try:
            if not cache_file.is_file():
                return None
            # Bytes in, bytes out: line endings are kept exactly
            return cache_file.read_bytes().decode("utf-8")
        except (OSError, UnicodeDecodeError) as e:
            logger.debug("Unreadable cache entry %s: %s", cache_file, e)
            return None

    def store(self, prompt: Prompt, payload: str | None) -> CacheWriteStatus:
        """Store a payload under the prompt's key.

        Best-effort: failures are logged and reported through the returned
        status, never raised.
        """
        cache_file = self.path_for(prompt)
        if cache_file is None or not payload:
            return CacheWriteStatus.skipped
        try:
            data = payload.encode("utf-8")
            self._cache_dir.mkdir(parents=True, exist_ok=True)
            cache_file.write_bytes(data)
        except (OSError, UnicodeError) as e:
            logger.warning("Failed to save prompt to cache (%s): %s", cache_file, e)
            return CacheWriteStatus.failed
        return CacheWriteStatus.stored

    def _entries(self) -> list[Path]:
        if not self._cache_dir.is_dir():
            return []
        return sorted(self._cache_dir.glob(f"*{CACHE_FILE_SUFFIX}"))

    def count(self) -> int:
        """Return the number of cached prompts."""
        return len(self._entries())

    def size_bytes(self) -> int:
        """Return the total size of all cache entries."""
        return sum(p.stat().st_size for p in self._entries())

    def clear(self) -> int:
        """Delete every cache entry. Returns the number of entries deleted."""
        deleted = 0
        for entry in self._entries():
            entry.unlink()
            deleted += 1
        return deleted
