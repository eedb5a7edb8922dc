"""
Optional matplotlib figures for a DatasetReport: one bar chart per
histogram and one line chart per projected field. Nothing is recomputed
here; the figures draw exactly what the report holds.
"""

from __future__ import annotations

from pathlib import Path
from typing import List

import matplotlib.pyplot as plt

from .report import DatasetReport


FIELD_LABELS = {
    "rssi": "RSSI (dBm)",
    "ping_ms": "Ping (ms)",
    "link_speed": "Link Speed (Mbps)",
    "ping_loss_rate": "Loss Rate (%)",
    "ping_jitter": "Jitter (ms)",
    "channel_number": "Channel",
    "neighbor_count": "Neighbor Count",
    "dns_time": "DNS (ms)",
}

FIELD_COLORS = {
    "rssi": "#2196F3",
    "ping_ms": "#4CAF50",
    "link_speed": "#FF9800",
    "ping_loss_rate": "#F44336",
    "ping_jitter": "#9C27B0",
    "channel_number": "#00BCD4",
    "neighbor_count": "#607D8B",
    "dns_time": "#06b6d4",
}


def _label(field: str) -> str:
    return FIELD_LABELS.get(field, field)


def plot_histograms(report: DatasetReport, results_dir: Path) -> List[Path]:
    results_dir.mkdir(parents=True, exist_ok=True)
    written: List[Path] = []
    for field, bins in report.histograms.items():
        if not bins:
            continue
        labels = [f"{b.lower_bound:g}" for b in bins]
        counts = [b.count for b in bins]

        fig, ax = plt.subplots(figsize=(8, 4))
        ax.bar(range(len(bins)), counts, color=FIELD_COLORS.get(field, "#1f77b4"))
        step = max(1, len(labels) // 20)
        ax.set_xticks(range(0, len(labels), step))
        ax.set_xticklabels(labels[::step], rotation=45, ha="right")
        ax.set_xlabel(_label(field))
        ax.set_ylabel("Count")
        ax.set_title(f"{_label(field)} distribution")
        ax.grid(axis="y", linestyle="--", alpha=0.4)
        fig.tight_layout()

        path = results_dir / f"plot_histogram_{field}.png"
        fig.savefig(path, dpi=150)
        plt.close(fig)
        written.append(path)
    return written


def plot_time_series(report: DatasetReport, results_dir: Path) -> List[Path]:
    results_dir.mkdir(parents=True, exist_ok=True)
    written: List[Path] = []
    if not report.time_series:
        return written
    index = [entry["index"] for entry in report.time_series]
    for field in report.chart_fields:
        # None becomes NaN, which matplotlib draws as a break in the line.
        values = [
            float("nan") if entry[field] is None else entry[field] for entry in report.time_series
        ]
        fig, ax = plt.subplots(figsize=(10, 3.5))
        ax.plot(index, values, color=FIELD_COLORS.get(field, "#1f77b4"), linewidth=1.0)
        ax.set_xlabel("Sample")
        ax.set_ylabel(_label(field))
        ax.set_title(f"{_label(field)} over time")
        ax.grid(linestyle="--", alpha=0.4)
        fig.tight_layout()

        path = results_dir / f"plot_series_{field}.png"
        fig.savefig(path, dpi=150)
        plt.close(fig)
        written.append(path)
    return written
