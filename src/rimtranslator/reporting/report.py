"""Batch translation report data model."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime

from rimtranslator.pipeline import BatchResult


@dataclass
class BatchReport:
    """Collects statistics about a translation run."""

    input_directory: str = ""
    backend: str = ""
    model: str = ""
    languages: list[str] = field(default_factory=list)

    total_units: int = 0
    units_translated: int = 0
    units_failed: int = 0
    cache_hits: int = 0
    total_tokens: int = 0

    dry_run: bool = False
    started_at: datetime = field(default_factory=datetime.now)
    finished_at: datetime | None = None

    failures: list[dict[str, str]] = field(default_factory=list)

    @property
    def duration_seconds(self) -> float:
        if self.finished_at is None:
            return 0.0
        return (self.finished_at - self.started_at).total_seconds()

    def finish(self) -> None:
        self.finished_at = datetime.now()

    def add_result(self, result: BatchResult) -> None:
        self.total_units += result.total_units
        self.units_translated += result.success_count
        self.units_failed += result.error_count
        self.cache_hits += result.cache_hits
        self.total_tokens += result.total_tokens
        self.failures.extend(
            {"source": f.source, "language": f.language, "message": f.message}
            for f in result.failures
        )

    def to_dict(self) -> dict:
        return {
            "input_directory": self.input_directory,
            "backend": self.backend,
            "model": self.model,
            "languages": self.languages,
            "total_units": self.total_units,
            "units_translated": self.units_translated,
            "units_failed": self.units_failed,
            "cache_hits": self.cache_hits,
            "total_tokens": self.total_tokens,
            "dry_run": self.dry_run,
            "duration_seconds": self.duration_seconds,
            "failures": self.failures,
        }
