from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Sequence

from regen_monitor.config import AppConfig
from regen_monitor.detectors.base import AnalysisResult
from regen_monitor.features.alignment import (
    build_aligned_series,
    build_event_series,
    series_labels,
)
from regen_monitor.io.read import load_events
from regen_monitor.io.write import export_events, write_summary, write_table
from regen_monitor.paths import OutputPaths, build_output_paths
from regen_monitor.pipeline.batch import (
    BatchResult,
    ProgressCallback,
    require_successes,
    run_batch,
)
from regen_monitor.viz.time_series import plot_combined_series, plot_event_series

LOGGER = logging.getLogger(__name__)

COMBINED_TABLE_STEM = "combined_ratio"


@dataclass
class RunOutputs:
    results: list[AnalysisResult]
    exports: list[Path] = field(default_factory=list)
    summaries: list[Path] = field(default_factory=list)
    figures: list[Path] = field(default_factory=list)
    combined_table: Path | None = None
    batch: BatchResult | None = None


def output_names(results: Sequence[AnalysisResult]) -> list[str]:
    """One output name per result; repeated file names get a ``_<n>`` suffix."""
    taken: set[str] = set()
    names: list[str] = []
    for result in results:
        name = result.file_name
        if name in taken:
            source = Path(name)
            counter = 2
            while f"{source.stem}_{counter}{source.suffix}" in taken:
                counter += 1
            name = f"{source.stem}_{counter}{source.suffix}"
            LOGGER.warning(
                "Output name %s already used; writing %s instead", result.file_name, name
            )
        taken.add(name)
        names.append(name)
    return names


def _render_file_figures(
    results: Sequence[AnalysisResult],
    names: Sequence[str],
    paths: OutputPaths,
    config: AppConfig,
) -> list[Path]:
    suffix = config.outputs.figures_format.strip().lstrip(".") or "png"
    written: list[Path] = []
    for result, name in zip(results, names):
        try:
            written.append(
                plot_event_series(
                    build_event_series(result),
                    file_name=result.file_name,
                    output_path=paths.figures / f"{Path(name).stem}.{suffix}",
                )
            )
        except Exception:  # pragma: no cover
            LOGGER.exception("Failed rendering figure for %s", result.file_name)
    return written


def write_combined_outputs(
    results: Sequence[AnalysisResult],
    paths: OutputPaths,
    config: AppConfig,
    outputs: RunOutputs,
) -> None:
    aligned = build_aligned_series(results)
    extension = "parquet" if config.outputs.tables_format == "parquet" else "csv"
    outputs.combined_table = write_table(
        aligned,
        paths.tables / f"{COMBINED_TABLE_STEM}.{extension}",
        fmt=config.outputs.tables_format,
    )
    if not config.outputs.render_figures:
        return
    suffix = config.outputs.figures_format.strip().lstrip(".") or "png"
    try:
        outputs.figures.append(
            plot_combined_series(
                aligned,
                labels=series_labels(results),
                output_path=paths.figures / f"{COMBINED_TABLE_STEM}.{suffix}",
            )
        )
    except Exception:  # pragma: no cover
        LOGGER.exception("Failed rendering combined figure")


def run_all(
    csv_paths: Sequence[Path],
    out_dir: Path,
    config: AppConfig,
    *,
    on_progress: ProgressCallback | None = None,
) -> RunOutputs:
    """Analyse a batch and write exports, summaries, figures and the combined table.

    Raises BatchEmptyError when no file could be analysed.
    """
    paths = build_output_paths(out_dir)
    batch = run_batch(csv_paths, config, on_progress=on_progress)
    write_summary(batch.summary(), paths.summary / "batch.json")
    results = require_successes(batch)

    outputs = RunOutputs(results=results, batch=batch)
    names = output_names(results)
    for result, name in zip(results, names):
        outputs.exports.append(
            export_events(
                result,
                paths.tables,
                columns=config.columns,
                prefix=config.outputs.export_prefix,
                output_name=name,
            )
        )
        outputs.summaries.append(
            write_summary(result.summary(), paths.summary / f"{name}.json")
        )

    if config.outputs.render_figures:
        outputs.figures.extend(_render_file_figures(results, names, paths, config))
    if len(results) > 1:
        write_combined_outputs(results, paths, config, outputs)
    return outputs


def combine_exports(
    export_paths: Sequence[Path],
    out_dir: Path,
    config: AppConfig,
) -> RunOutputs:
    """Rebuild the combined table and chart from previously exported event logs."""
    paths = build_output_paths(out_dir)
    results = [
        load_events(path, columns=config.columns, chunk_size=config.input.chunk_size)
        for path in export_paths
    ]
    outputs = RunOutputs(results=results)
    write_combined_outputs(results, paths, config, outputs)
    return outputs
