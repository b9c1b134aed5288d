from __future__ import annotations

from regen_monitor.config import ColumnsConfig
from regen_monitor.detectors.base import Record, Row


def read_field(record: Record, column: str) -> str | None:
    """Return the raw text of ``column``, or None when the record has no value for it.

    Columns missing from the header and fields cut off by a short line are both
    absent. Readers hand short-line fields over as NaN, so anything that is not
    a string counts as absent too.
    """
    value = record.get(column)
    if isinstance(value, str):
        return value
    return None


def build_row(record: Record, columns: ColumnsConfig) -> Row:
    """Snapshot the mapped columns of one raw record, absent fields as ''."""
    return Row(
        time_key=read_field(record, columns.time_key) or "",
        velocity=read_field(record, columns.velocity) or "",
        ratio=read_field(record, columns.ratio) or "",
        sec_id=read_field(record, columns.sec_id) or "",
        addr_id=read_field(record, columns.addr_id) or "",
    )


def missing_columns(header: list[str], columns: ColumnsConfig) -> list[str]:
    mapped = [
        columns.time_key,
        columns.velocity,
        columns.ratio,
        columns.sec_id,
        columns.addr_id,
    ]
    return [column for column in mapped if column not in header]
