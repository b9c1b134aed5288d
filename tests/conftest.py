from __future__ import annotations

from pathlib import Path

import pytest

HEADER = "timetick,Move_Vel,Move_RegenerativeLoadRatio,SecID_Last,AddrID_Last"


def write_log(path: Path, rows: list[tuple[str, str]]) -> Path:
    """Write a motion log with (timetick, ratio) rows and fixed ids."""
    lines = [HEADER]
    for index, (timetick, ratio) in enumerate(rows):
        lines.append(f"{timetick},{index * 0.5},{ratio},S{index},A{index}")
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text("\n".join(lines) + "\n", encoding="utf-8")
    return path


@pytest.fixture
def log_factory(tmp_path: Path):
    def _make(name: str, rows: list[tuple[str, str]]) -> Path:
        return write_log(tmp_path / "logs" / name, rows)

    return _make


@pytest.fixture
def broken_log(tmp_path: Path) -> Path:
    path = tmp_path / "logs" / "broken.csv"
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(f"{HEADER}\n1,0,0,S,A\n2,0,5,S,A,extra,fields\n", encoding="utf-8")
    return path
