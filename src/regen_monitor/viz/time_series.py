from __future__ import annotations

from pathlib import Path

import matplotlib.pyplot as plt
import numpy as np
import pandas as pd

from regen_monitor.features.alignment import TIME_KEY_COLUMN
from regen_monitor.viz.common import save_figure, series_color

MAX_TICK_LABELS = 20


def _thin_ticks(ax: plt.Axes, labels: list[str]) -> None:
    if not labels:
        return
    stride = max(1, int(np.ceil(len(labels) / MAX_TICK_LABELS)))
    positions = np.arange(len(labels))[::stride]
    ax.set_xticks(positions)
    ax.set_xticklabels([labels[idx] for idx in positions], rotation=45, ha="right", fontsize=8)


def plot_event_series(event_series: pd.DataFrame, file_name: str, output_path: Path) -> Path:
    """Stepped load ratio with velocity on a second axis, one point per event."""
    fig, ax = plt.subplots(figsize=(12, 4))
    positions = np.arange(len(event_series))
    ax.step(
        positions,
        event_series["ratio"],
        where="post",
        linewidth=2.0,
        color="#3b82f6",
        marker="o",
        markersize=3,
        label="Load Ratio",
    )
    ax.set_ylabel("Ratio")

    velocity_ax = ax.twinx()
    velocity_ax.plot(
        positions,
        event_series["velocity"],
        linewidth=1.2,
        linestyle="--",
        color="#10b981",
        label="Velocity",
    )
    velocity_ax.set_ylabel("Velocity")

    _thin_ticks(ax, event_series[TIME_KEY_COLUMN].astype(str).tolist())
    handles = ax.get_legend_handles_labels()[0] + velocity_ax.get_legend_handles_labels()[0]
    if handles:
        ax.legend(handles=handles, loc="upper left", fontsize=8)
    ax.set_title(f"Analysis: {file_name}")
    ax.set_xlabel("Timetick")
    return save_figure(output_path)


def plot_combined_series(
    aligned: pd.DataFrame,
    labels: dict[str, str],
    output_path: Path,
) -> Path:
    """Overlay every file's ratio on the shared time-key axis.

    Gaps are bridged per series when drawing; the table itself keeps them.
    """
    fig, ax = plt.subplots(figsize=(14, 5))
    positions = np.arange(len(aligned))
    for index, (column, label) in enumerate(labels.items()):
        if column not in aligned.columns:
            continue
        values = aligned[column]
        present = values.notna().to_numpy()
        if not present.any():
            continue
        ax.step(
            positions[present],
            values[present],
            where="post",
            linewidth=2.0,
            color=series_color(index),
            label=label,
        )

    _thin_ticks(ax, aligned[TIME_KEY_COLUMN].astype(str).tolist())
    if ax.get_legend_handles_labels()[0]:
        ax.legend(loc="upper left", fontsize=8)
    ax.grid(True, axis="y", linestyle="--", alpha=0.4)
    ax.set_title("Combined Regenerative Load Ratio (All Files)")
    ax.set_xlabel("Timetick")
    ax.set_ylabel("Ratio")
    return save_figure(output_path)
