"""Exception hierarchy shared by the backends, cache and pipeline."""

from __future__ import annotations


class RimTranslatorError(Exception):
    """Base class for all rimtranslator errors."""


class MissingCredentialsError(RimTranslatorError, ValueError):
    """Raised at startup when a backend needs an API key that is not set."""


class BackendError(RimTranslatorError):
    """A live model call failed."""


class NetworkError(BackendError):
    """The model gateway could not be reached or timed out."""


class RateLimitError(BackendError):
    """The model gateway rejected the call because of rate or quota limits."""


class ResponseFormatError(RimTranslatorError):
    """The model output could not be split into an output path and content."""


class SourceReadError(RimTranslatorError):
    """A source file could not be read."""
