from __future__ import annotations

from pathlib import Path
from typing import Iterable

CSV_SUFFIX = ".csv"


def is_csv_path(path: Path) -> bool:
    return path.is_file() and path.suffix.lower() == CSV_SUFFIX


def _expand(root: Path, recurse: bool) -> list[Path]:
    if root.is_file():
        return [root] if is_csv_path(root) else []
    if not root.is_dir():
        return []
    candidates = root.rglob("*") if recurse else root.glob("*")
    # deterministic ordering within a folder
    return sorted(path for path in candidates if is_csv_path(path))


def discover_inputs(roots: Iterable[Path], recurse: bool = True) -> list[Path]:
    """Collect CSV files from a mix of files and folders.

    Keeps the caller's ordering of ``roots`` and drops repeats of a file with the
    same name and size, so selecting an overlapping folder twice is harmless.
    """
    seen: set[tuple[str, int]] = set()
    selected: list[Path] = []
    for root in roots:
        for path in _expand(Path(root), recurse=recurse):
            key = (path.name, path.stat().st_size)
            if key in seen:
                continue
            seen.add(key)
            selected.append(path.resolve())
    return selected
