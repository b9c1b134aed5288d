from __future__ import annotations

from pathlib import Path

import typer

from regen_monitor.config import DEFAULT_CONFIG_PATH, AppConfig, load_config
from regen_monitor.detectors.base import AnalysisResult
from regen_monitor.io.discovery import discover_inputs
from regen_monitor.logging import configure_logging
from regen_monitor.pipeline.batch import NO_FILES_PROCESSED_MESSAGE, BatchEmptyError
from regen_monitor.pipeline.run_all import combine_exports, run_all

app = typer.Typer(no_args_is_help=True, add_completion=False)


def _load_app_config(config_path: Path) -> AppConfig:
    return load_config(config_path)


def _echo_events(result: AnalysisResult, cfg: AppConfig) -> None:
    if not result.events:
        typer.echo("  No transitions detected in this file.")
        return
    frame = result.events_frame(cfg.columns)
    for line in frame.to_string(index=False).splitlines():
        typer.echo(f"  {line}")


@app.command()
def analyze(
    paths: list[Path] = typer.Argument(..., exists=True, readable=True, resolve_path=True),
    out: Path = typer.Option(Path("out"), resolve_path=True),
    config: Path = typer.Option(DEFAULT_CONFIG_PATH, exists=True, readable=True, resolve_path=True),
    recurse: bool | None = typer.Option(
        None,
        "--recurse/--no-recurse",
        help="Walk folders recursively. Falls back to config.input.recurse.",
    ),
    show_events: bool = typer.Option(False, help="Print each file's event log."),
) -> None:
    """Detect load ratio transitions in CSV files and folders."""
    cfg = _load_app_config(config)
    configure_logging(cfg.logging.level)

    csv_paths = discover_inputs(paths, recurse=cfg.input.recurse if recurse is None else recurse)
    if not csv_paths:
        typer.echo("No CSV inputs found.", err=True)
        raise typer.Exit(code=1)

    try:
        outputs = run_all(csv_paths=csv_paths, out_dir=out, config=cfg)
    except BatchEmptyError:
        typer.echo(NO_FILES_PROCESSED_MESSAGE, err=True)
        raise typer.Exit(code=1)

    batch = outputs.batch
    n_failed = len(batch.failures) if batch is not None else 0
    typer.echo(f"Analysis complete. Files: {len(outputs.results)} succeeded, {n_failed} failed")
    for result in outputs.results:
        typer.echo(
            f"- {result.file_name}: rows={result.total_row_count} events={result.event_count}"
        )
        if show_events:
            _echo_events(result, cfg)
    if batch is not None:
        for failure in batch.failures:
            typer.echo(f"- {failure.source_path.name}: failed ({failure.error})")
    if outputs.combined_table is not None:
        typer.echo(f"Combined table: {outputs.combined_table}")


@app.command()
def combine(
    exports: list[Path] = typer.Argument(..., exists=True, readable=True, resolve_path=True),
    out: Path = typer.Option(Path("out"), resolve_path=True),
    config: Path = typer.Option(DEFAULT_CONFIG_PATH, exists=True, readable=True, resolve_path=True),
) -> None:
    """Build the combined comparison table from exported event logs."""
    cfg = _load_app_config(config)
    configure_logging(cfg.logging.level)
    if len(exports) < 2:
        raise typer.BadParameter("Provide at least two exported event logs to combine")

    outputs = combine_exports(export_paths=exports, out_dir=out, config=cfg)
    typer.echo(f"Combined {len(outputs.results)} series. Table: {outputs.combined_table}")


if __name__ == "__main__":
    app()
