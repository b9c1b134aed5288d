from __future__ import annotations

import codecs
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Iterator

import pandas as pd

from regen_monitor.config import ColumnsConfig
from regen_monitor.detectors.base import AnalysisResult
from regen_monitor.io.schema import build_row, missing_columns

LOGGER = logging.getLogger(__name__)

DEFAULT_CHUNK_SIZE = 10_000


class ParseFailure(RuntimeError):
    """Reading one CSV file failed part way (malformed input or I/O error)."""

    def __init__(self, file_name: str, cause: BaseException) -> None:
        super().__init__(f"Failed to parse {file_name}: {cause}")
        self.file_name = file_name
        self.cause = cause


def detect_csv_encoding(path: Path, block_size: int = 1 << 20) -> str:
    decoder = codecs.getincrementaldecoder("utf-8")()
    with path.open("rb") as handle:
        while True:
            block = handle.read(block_size)
            if not block:
                break
            try:
                decoder.decode(block)
            except UnicodeDecodeError:
                return "cp1252"
    try:
        decoder.decode(b"", final=True)
    except UnicodeDecodeError:
        return "cp1252"
    # utf-8-sig strips BOM-prefixed headers commonly found in exported CSV files.
    return "utf-8-sig"


def iter_record_chunks(
    path: Path,
    chunk_size: int = DEFAULT_CHUNK_SIZE,
    columns: ColumnsConfig | None = None,
) -> Iterator[list[dict[str, Any]]]:
    """Stream a CSV as lists of raw string records, ``chunk_size`` rows at a time.

    Blank lines are skipped and no value is coerced: every field stays the text
    found in the file. An empty file yields nothing. Any read error, including
    one raised after earlier chunks were delivered, surfaces as ParseFailure.
    """
    if chunk_size < 1:
        raise ValueError("chunk_size must be >= 1")
    try:
        encoding = detect_csv_encoding(path)
        reader = pd.read_csv(
            path,
            encoding=encoding,
            chunksize=chunk_size,
            dtype=str,
            keep_default_na=False,
            skip_blank_lines=True,
            # the C engine pads short lines with "" and would hide absent fields
            engine="python",
        )
        with reader:
            first = True
            for chunk in reader:
                if first and columns is not None:
                    absent = missing_columns(list(chunk.columns), columns)
                    if absent:
                        LOGGER.warning(
                            "%s is missing mapped columns: %s", path.name, ", ".join(absent)
                        )
                first = False
                yield chunk.to_dict(orient="records")
    except pd.errors.EmptyDataError:
        LOGGER.info("%s is empty", path.name)
        return
    except (pd.errors.ParserError, UnicodeDecodeError, OSError) as exc:
        raise ParseFailure(path.name, exc) from exc


def load_events(
    path: Path,
    columns: ColumnsConfig,
    chunk_size: int = DEFAULT_CHUNK_SIZE,
) -> AnalysisResult:
    """Read back an exported event log; every row is taken as an event."""
    events = tuple(
        build_row(record, columns)
        for chunk in iter_record_chunks(path, chunk_size=chunk_size, columns=columns)
        for record in chunk
    )
    return AnalysisResult(
        file_name=path.name,
        total_row_count=len(events),
        events=events,
        created_at=datetime.now(timezone.utc),
    )
