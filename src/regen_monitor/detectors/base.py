from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Iterable, Mapping

import pandas as pd

from regen_monitor.config import ColumnsConfig

ROW_FIELDS = ("time_key", "velocity", "ratio", "sec_id", "addr_id")


@dataclass(frozen=True)
class Row:
    time_key: str = ""
    velocity: str = ""
    ratio: str = ""
    sec_id: str = ""
    addr_id: str = ""

    def as_record(self, columns: ColumnsConfig) -> dict[str, str]:
        """Map back to source column names, in export order."""
        return {getattr(columns, field): getattr(self, field) for field in ROW_FIELDS}


@dataclass(frozen=True)
class AnalysisResult:
    file_name: str
    total_row_count: int
    events: tuple[Row, ...]
    created_at: datetime

    @property
    def event_count(self) -> int:
        return len(self.events)

    def summary(self) -> dict[str, Any]:
        return {
            "file_name": self.file_name,
            "total_row_count": int(self.total_row_count),
            "event_count": self.event_count,
            "created_at": self.created_at.isoformat(),
        }

    def events_frame(self, columns: ColumnsConfig) -> pd.DataFrame:
        header = [getattr(columns, field) for field in ROW_FIELDS]
        return pd.DataFrame([event.as_record(columns) for event in self.events], columns=header)


Record = Mapping[str, Any]


class Detector:
    name: str

    def run(self, chunks: Iterable[Iterable[Record]], file_name: str) -> AnalysisResult:
        raise NotImplementedError
