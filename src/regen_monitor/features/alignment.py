from __future__ import annotations

import re
from typing import Sequence

import pandas as pd

from regen_monitor.detectors.base import AnalysisResult

TIME_KEY_COLUMN = "name"
FLOAT_PREFIX_RE = re.compile(r"[+-]?(?:Infinity|(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?)")


def parse_ratio_value(value: str) -> float:
    """Parse the leading numeric prefix of ``value``; anything unparseable is 0.0."""
    match = FLOAT_PREFIX_RE.match(str(value).lstrip())
    if match is None:
        return 0.0
    return float(match.group(0).replace("Infinity", "inf"))


def series_column(file_index: int) -> str:
    return f"file_{file_index}"


def series_labels(results: Sequence[AnalysisResult]) -> dict[str, str]:
    return {series_column(index): result.file_name for index, result in enumerate(results)}


def build_aligned_series(results: Sequence[AnalysisResult]) -> pd.DataFrame:
    """Merge the event logs of several files onto one time-key axis.

    One row per distinct time key, one ``file_<index>`` column per result. A
    file with no event at a key leaves a gap (NaN) there; gaps are never filled.
    Rows are ordered by plain string comparison of the key.
    """
    combined: dict[str, dict[str, object]] = {}
    for file_index, result in enumerate(results):
        column = series_column(file_index)
        for event in result.events:
            entry = combined.setdefault(event.time_key, {TIME_KEY_COLUMN: event.time_key})
            entry[column] = parse_ratio_value(event.ratio)

    value_columns = [series_column(index) for index in range(len(results))]
    rows = [combined[key] for key in sorted(combined)]
    frame = pd.DataFrame(rows, columns=[TIME_KEY_COLUMN, *value_columns])
    for column in value_columns:
        frame[column] = frame[column].astype(float)
    return frame


def build_event_series(result: AnalysisResult) -> pd.DataFrame:
    """Chart table for a single file: one point per event, in detection order."""
    rows = [
        {
            TIME_KEY_COLUMN: event.time_key or f"Point {index}",
            "ratio": parse_ratio_value(event.ratio),
            "velocity": parse_ratio_value(event.velocity),
        }
        for index, event in enumerate(result.events)
    ]
    return pd.DataFrame(rows, columns=[TIME_KEY_COLUMN, "ratio", "velocity"])
