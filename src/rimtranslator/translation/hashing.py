"""Stable digests used as prompt cache keys."""

from __future__ import annotations

import hashlib


def prompt_digest(text: str) -> str:
    """Return the SHA-256 hex digest of ``text``.

    64 lowercase hex characters, safe to use as a file name. Used for cache
    addressing only, not for anything security related.
    """
    return hashlib.sha256(text.encode("utf-8")).hexdigest()
