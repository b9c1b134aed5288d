from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Iterable

from regen_monitor.config import ColumnsConfig
from regen_monitor.detectors.base import AnalysisResult, Detector, Record, Row
from regen_monitor.io.schema import build_row, read_field

# Compared as text after trimming; "0.000", "-0" and "+0" are deliberately non-zero.
ZERO_TOKENS = frozenset({"0", "0.0", "0.00", ""})


def is_zero(value: str | None) -> bool:
    if value is None:
        return True
    return value.strip() in ZERO_TOKENS


@dataclass
class TransitionState:
    """Running state for one file. Build a fresh instance per file."""

    previous_ratio: str | None = None
    last_zero_row: Row | None = None
    last_emitted: Row | None = None
    row_count: int = 0


def step(state: TransitionState, record: Record, columns: ColumnsConfig) -> list[Row]:
    """Advance ``state`` by one record and return the events it fires, in order.

    ``previous_ratio`` holds the last change-point value, not the literal value
    of the previous row, so a repeated value never fires twice. Records with no
    ratio value at all are counted but take no part in transition checks.
    """
    state.row_count += 1
    row = build_row(record, columns)
    current_ratio = read_field(record, columns.ratio)
    emitted: list[Row] = []

    if current_ratio is not None and current_ratio != state.previous_ratio:
        current_is_zero = is_zero(current_ratio)
        previous_is_zero = is_zero(state.previous_ratio)

        if previous_is_zero and not current_is_zero:
            # rise: bracket with the freshest zero unless it already ends the log
            if state.last_zero_row is not None and state.last_zero_row is not state.last_emitted:
                emitted.append(state.last_zero_row)
            emitted.append(row)
        elif not previous_is_zero and current_is_zero:
            emitted.append(row)
        elif not current_is_zero:
            emitted.append(row)

        state.previous_ratio = current_ratio

    if is_zero(current_ratio):
        state.last_zero_row = row
    if emitted:
        state.last_emitted = emitted[-1]
    return emitted


class TransitionDetector(Detector):
    name = "regen_transitions"

    def __init__(self, columns: ColumnsConfig | None = None) -> None:
        self.columns = columns or ColumnsConfig()

    def run(self, chunks: Iterable[Iterable[Record]], file_name: str) -> AnalysisResult:
        state = TransitionState()
        events: list[Row] = []
        for chunk in chunks:
            for record in chunk:
                events.extend(step(state, record, self.columns))

        return AnalysisResult(
            file_name=file_name,
            total_row_count=state.row_count,
            events=tuple(events),
            created_at=datetime.now(timezone.utc),
        )
