from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Sequence

from regen_monitor.config import AppConfig
from regen_monitor.detectors.base import AnalysisResult
from regen_monitor.detectors.transitions import TransitionDetector
from regen_monitor.io.read import ParseFailure, iter_record_chunks

LOGGER = logging.getLogger(__name__)

NO_FILES_PROCESSED_MESSAGE = "None of the selected files could be processed."

ProgressCallback = Callable[[int, int], None]


class BatchEmptyError(RuntimeError):
    """Raised when no file in a batch could be analysed."""

    def __init__(self, message: str = NO_FILES_PROCESSED_MESSAGE) -> None:
        super().__init__(message)


@dataclass(frozen=True)
class FileOutcome:
    source_path: Path
    result: AnalysisResult | None = None
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.result is not None


@dataclass(frozen=True)
class BatchResult:
    outcomes: tuple[FileOutcome, ...]

    @property
    def successes(self) -> list[AnalysisResult]:
        return [outcome.result for outcome in self.outcomes if outcome.result is not None]

    @property
    def failures(self) -> list[FileOutcome]:
        return [outcome for outcome in self.outcomes if not outcome.ok]

    def summary(self) -> dict[str, object]:
        return {
            "n_files": len(self.outcomes),
            "n_succeeded": len(self.successes),
            "n_failed": len(self.failures),
            "files": [
                {
                    "source_path": str(outcome.source_path),
                    "ok": outcome.ok,
                    "error": outcome.error,
                    "total_row_count": outcome.result.total_row_count if outcome.result else None,
                    "event_count": outcome.result.event_count if outcome.result else None,
                }
                for outcome in self.outcomes
            ],
        }


def analyze_file(path: Path, config: AppConfig) -> AnalysisResult:
    """Run the transition detector over one CSV file. Raises ParseFailure."""
    detector = TransitionDetector(columns=config.columns)
    chunks = iter_record_chunks(path, chunk_size=config.input.chunk_size, columns=config.columns)
    return detector.run(chunks, file_name=path.name)


def run_batch(
    paths: Sequence[Path],
    config: AppConfig,
    on_progress: ProgressCallback | None = None,
) -> BatchResult:
    """Analyse each file in turn; a failed file is recorded and the batch moves on."""
    outcomes: list[FileOutcome] = []
    completed = 0
    total = len(paths)
    for path in paths:
        try:
            result = analyze_file(path, config)
        except ParseFailure as exc:
            LOGGER.warning("Skipping %s: %s", path.name, exc.cause)
            outcomes.append(FileOutcome(source_path=path, error=str(exc)))
            continue

        completed += 1
        LOGGER.info(
            "Analyzed %s: %d rows, %d events (%d/%d)",
            result.file_name,
            result.total_row_count,
            result.event_count,
            completed,
            total,
        )
        outcomes.append(FileOutcome(source_path=path, result=result))
        if on_progress is not None:
            on_progress(completed, total)
    return BatchResult(outcomes=tuple(outcomes))


def require_successes(batch: BatchResult) -> list[AnalysisResult]:
    successes = batch.successes
    if not successes:
        raise BatchEmptyError()
    return successes
