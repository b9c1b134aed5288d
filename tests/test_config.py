from __future__ import annotations

from pathlib import Path

import pytest
import yaml
from pydantic import ValidationError

from regen_monitor.config import AppConfig, load_config


def test_default_config_file_matches_model_defaults() -> None:
    cfg_path = Path(__file__).resolve().parents[1] / "configs/default.yaml"
    cfg = load_config(cfg_path)

    assert cfg == AppConfig()
    assert cfg.columns.ratio == "Move_RegenerativeLoadRatio"
    assert cfg.columns.time_key == "timetick"
    assert cfg.input.chunk_size == 10_000
    assert cfg.outputs.export_prefix == "Analysis_"


def test_load_config_accepts_empty_file_and_partial_overrides(tmp_path: Path) -> None:
    empty_path = tmp_path / "empty.yaml"
    empty_path.write_text("", encoding="utf-8")
    assert load_config(empty_path) == AppConfig()

    override_path = tmp_path / "override.yaml"
    override_path.write_text(
        yaml.safe_dump(
            {
                "columns": {"ratio": "RegenRatio"},
                "input": {"chunk_size": 500, "recurse": False},
                "outputs": {"tables_format": "parquet"},
            }
        ),
        encoding="utf-8",
    )
    cfg = load_config(override_path)

    assert cfg.columns.ratio == "RegenRatio"
    assert cfg.columns.velocity == "Move_Vel"
    assert cfg.input.chunk_size == 500
    assert cfg.input.recurse is False
    assert cfg.outputs.tables_format == "parquet"


def test_load_config_rejects_unknown_sections_and_bad_values(tmp_path: Path) -> None:
    unknown_path = tmp_path / "unknown.yaml"
    unknown_path.write_text(yaml.safe_dump({"detectors": {}}), encoding="utf-8")
    with pytest.raises(ValidationError):
        load_config(unknown_path)

    bad_path = tmp_path / "bad.yaml"
    bad_path.write_text(yaml.safe_dump({"input": {"chunk_size": 0}}), encoding="utf-8")
    with pytest.raises(ValidationError):
        load_config(bad_path)
