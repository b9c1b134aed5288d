from __future__ import annotations

from datetime import datetime, timezone

import pandas as pd
import pytest

from regen_monitor.detectors.base import AnalysisResult, Row
from regen_monitor.features.alignment import (
    build_aligned_series,
    build_event_series,
    parse_ratio_value,
    series_labels,
)


def _result(file_name: str, events: list[tuple[str, str]]) -> AnalysisResult:
    return AnalysisResult(
        file_name=file_name,
        total_row_count=len(events),
        events=tuple(Row(time_key=key, ratio=ratio) for key, ratio in events),
        created_at=datetime(2026, 1, 1, tzinfo=timezone.utc),
    )


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("2.0", 2.0),
        (" 3.5", 3.5),
        ("-1.25", -1.25),
        ("1e3", 1000.0),
        ("7.5%", 7.5),
        (".5", 0.5),
        ("", 0.0),
        ("abc", 0.0),
        ("-", 0.0),
    ],
)
def test_parse_ratio_value_reads_leading_number(raw: str, expected: float) -> None:
    assert parse_ratio_value(raw) == expected


def test_aligned_series_fills_shared_keys_and_leaves_gaps() -> None:
    first = _result("machine_a.csv", [("10:00", "2.0")])
    second = _result("machine_b.csv", [("10:00", "3.5"), ("10:05", "1.0")])

    aligned = build_aligned_series([first, second])

    assert list(aligned.columns) == ["name", "file_0", "file_1"]
    assert aligned["name"].tolist() == ["10:00", "10:05"]
    assert aligned.loc[0, "file_0"] == 2.0
    assert aligned.loc[0, "file_1"] == 3.5
    assert pd.isna(aligned.loc[1, "file_0"])
    assert aligned.loc[1, "file_1"] == 1.0


def test_aligned_series_keys_are_union_sorted_as_strings() -> None:
    first = _result("a.csv", [("9", "1"), ("10", "0")])
    second = _result("b.csv", [("2", "4"), ("10", "5")])

    aligned = build_aligned_series([first, second])

    assert aligned["name"].tolist() == ["10", "2", "9"]
    assert set(aligned["name"]) == {"9", "10", "2"}


def test_aligned_series_unparseable_ratio_is_zero_not_gap() -> None:
    aligned = build_aligned_series([_result("a.csv", [("t1", "n/a")])])

    assert aligned.loc[0, "file_0"] == 0.0


def test_aligned_series_repeated_key_keeps_last_value_of_same_file() -> None:
    aligned = build_aligned_series([_result("a.csv", [("t1", "0"), ("t1", "4")])])

    assert len(aligned) == 1
    assert aligned.loc[0, "file_0"] == 4.0


def test_aligned_series_keeps_column_for_file_without_events() -> None:
    aligned = build_aligned_series([_result("a.csv", [("t1", "1")]), _result("b.csv", [])])

    assert list(aligned.columns) == ["name", "file_0", "file_1"]
    assert aligned["file_1"].isna().all()


def test_aligned_series_is_deterministic_and_leaves_inputs_untouched() -> None:
    results = [_result("a.csv", [("t2", "1"), ("t1", "2")]), _result("b.csv", [("t3", "3")])]
    before = [result.events for result in results]

    first = build_aligned_series(results)
    second = build_aligned_series(results)

    pd.testing.assert_frame_equal(first, second)
    assert [result.events for result in results] == before


def test_aligned_series_of_no_results_is_empty() -> None:
    aligned = build_aligned_series([])

    assert aligned.empty
    assert list(aligned.columns) == ["name"]


def test_series_labels_follow_result_order() -> None:
    labels = series_labels([_result("a.csv", []), _result("b.csv", [])])

    assert labels == {"file_0": "a.csv", "file_1": "b.csv"}


def test_event_series_uses_point_label_for_blank_time_key() -> None:
    result = AnalysisResult(
        file_name="a.csv",
        total_row_count=2,
        events=(
            Row(time_key="", velocity="12.5", ratio="3"),
            Row(time_key="t9", velocity="bad", ratio="0"),
        ),
        created_at=datetime(2026, 1, 1, tzinfo=timezone.utc),
    )

    series = build_event_series(result)

    assert series["name"].tolist() == ["Point 0", "t9"]
    assert series["ratio"].tolist() == [3.0, 0.0]
    assert series["velocity"].tolist() == [12.5, 0.0]
