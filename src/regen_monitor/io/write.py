from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import pandas as pd

from regen_monitor.config import ColumnsConfig
from regen_monitor.detectors.base import AnalysisResult

DEFAULT_EXPORT_PREFIX = "Analysis_"


def write_table(df: pd.DataFrame, path: Path, fmt: str = "csv") -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    if fmt == "parquet":
        df.to_parquet(path, index=False)
        return path
    if fmt == "csv":
        df.to_csv(path, index=False)
        return path
    raise ValueError(f"Unsupported table format: {fmt}")


def write_summary(data: dict[str, Any], path: Path) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(data, indent=2, sort_keys=True), encoding="utf-8")
    return path


def export_file_name(file_name: str, prefix: str = DEFAULT_EXPORT_PREFIX) -> str:
    return f"{prefix}{file_name}"


def export_events(
    result: AnalysisResult,
    out_dir: Path,
    columns: ColumnsConfig,
    prefix: str = DEFAULT_EXPORT_PREFIX,
    output_name: str | None = None,
) -> Path:
    """Write the event log of ``result`` as CSV, one row per event.

    ``output_name`` replaces the source file name in the export name.
    """
    path = out_dir / export_file_name(output_name or result.file_name, prefix=prefix)
    path.parent.mkdir(parents=True, exist_ok=True)
    result.events_frame(columns).to_csv(path, index=False, encoding="utf-8")
    return path
