from __future__ import annotations

from pathlib import Path
from typing import Literal

import yaml
from pydantic import BaseModel, ConfigDict, Field


class ColumnsConfig(BaseModel):
    time_key: str = "timetick"
    velocity: str = "Move_Vel"
    ratio: str = "Move_RegenerativeLoadRatio"
    sec_id: str = "SecID_Last"
    addr_id: str = "AddrID_Last"


class InputConfig(BaseModel):
    chunk_size: int = Field(default=10_000, ge=1)
    recurse: bool = True


class OutputsConfig(BaseModel):
    export_prefix: str = "Analysis_"
    tables_format: Literal["csv", "parquet"] = "csv"
    figures_format: str = "png"
    render_figures: bool = True


class LoggingConfig(BaseModel):
    level: str = "INFO"


class AppConfig(BaseModel):
    model_config = ConfigDict(extra="forbid")

    columns: ColumnsConfig = Field(default_factory=ColumnsConfig)
    input: InputConfig = Field(default_factory=InputConfig)
    outputs: OutputsConfig = Field(default_factory=OutputsConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)


DEFAULT_CONFIG_PATH = Path("configs/default.yaml")


def load_config(path: Path) -> AppConfig:
    with path.open("r", encoding="utf-8") as handle:
        data = yaml.safe_load(handle) or {}
    return AppConfig.model_validate(data)
