"""
Run every reduction over one record set and collect the results. Each
component only reads the record set, so the order here is irrelevant.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

import pandas as pd

from .categorical import CATEGORICAL_FIELDS, CategoricalCount, count_by, counts_frame, frequency_bands
from .histogram import DEFAULT_BIN_SIZES, HistogramBin, histogram, histogram_frame
from .parser import RecordSet
from .quality import DISPLAY_TIMEZONE, QualityMetrics, analyze_quality, quality_frame
from .statistics import (
    MonitoringOverview,
    SummaryStatistics,
    monitoring_overview,
    statistics_frame,
    summarize_fields,
)
from .timeseries import CHART_FIELDS, project, projection_frame


@dataclass
class DatasetReport:
    record_count: int
    schema_name: str
    statistics: Dict[str, SummaryStatistics]
    overview: MonitoringOverview
    quality: Optional[QualityMetrics]
    histograms: Dict[str, List[HistogramBin]]
    categorical: Dict[str, List[CategoricalCount]]
    frequency_bands: List[CategoricalCount]
    chart_fields: List[str] = field(default_factory=list)
    time_series: List[Dict[str, Any]] = field(default_factory=list)

    @property
    def empty(self) -> bool:
        return self.record_count == 0


def build_report(
    records: RecordSet,
    bin_sizes: Optional[Dict[str, float]] = None,
    chart_fields: Optional[Sequence[str]] = None,
    categorical_fields: Optional[Sequence[str]] = None,
    max_points: Optional[int] = None,
    timezone: str = DISPLAY_TIMEZONE,
) -> DatasetReport:
    """
    Compute statistics, quality metrics, histograms, categorical counts and
    the chart projection. An empty record set yields empty results and a
    `quality` of None instead of an exception.
    """
    bin_sizes = dict(DEFAULT_BIN_SIZES if bin_sizes is None else bin_sizes)
    chart_fields = list(CHART_FIELDS if chart_fields is None else chart_fields)
    categorical_fields = list(CATEGORICAL_FIELDS if categorical_fields is None else categorical_fields)

    # Only chart/bin/count fields the record set actually carries.
    chart_fields = [name for name in chart_fields if records.has_field(name)]
    categorical_fields = [name for name in categorical_fields if records.has_field(name)]

    quality = None if records.empty else analyze_quality(records, timezone=timezone)

    histograms: Dict[str, List[HistogramBin]] = {}
    for name, size in bin_sizes.items():
        if records.has_field(name):
            histograms[name] = histogram(records, name, size)

    return DatasetReport(
        record_count=len(records),
        schema_name=records.schema.name,
        statistics=summarize_fields(records),
        overview=monitoring_overview(records),
        quality=quality,
        histograms=histograms,
        categorical={name: count_by(records, name) for name in categorical_fields},
        frequency_bands=frequency_bands(records),
        chart_fields=chart_fields,
        time_series=project(records, chart_fields, max_points=max_points),
    )


def save_report(report: DatasetReport, results_dir: Path) -> List[Path]:
    """Write the report as CSV files under `results_dir`; return the written paths."""
    results_dir.mkdir(parents=True, exist_ok=True)
    written: List[Path] = []

    def _write(frame: pd.DataFrame, filename: str) -> None:
        path = results_dir / filename
        frame.to_csv(path, index=False)
        written.append(path)

    _write(statistics_frame(report.statistics), "summary_statistics.csv")
    _write(quality_frame(report.quality), "quality_metrics.csv")
    for name, bins in report.histograms.items():
        _write(histogram_frame(bins), f"histogram_{name}.csv")
    for name, counts in report.categorical.items():
        _write(counts_frame(counts, label_name=name), f"counts_{name}.csv")
    if report.frequency_bands:
        _write(counts_frame(report.frequency_bands, label_name="band"), "frequency_bands.csv")
    _write(projection_frame(report.time_series, report.chart_fields), "time_series.csv")
    return written


def print_table(title: str, df: pd.DataFrame) -> None:
    """Pretty-print a DataFrame with a heading."""
    print(f"\n{title}")
    if df.empty:
        print("  No data available.")
        return

    display_df = df.copy()
    for col in display_df.select_dtypes(include=["float", "float64"]).columns:
        display_df[col] = display_df[col].map(lambda x: f"{x:.2f}" if pd.notna(x) else "")
    print(display_df.to_string(index=False))


def print_report(report: DatasetReport, top_n: int = 10) -> None:
    print(f"\nRecords: {report.record_count} (schema {report.schema_name})")
    print_table("Summary statistics", statistics_frame(report.statistics))
    print_table("Quality metrics", quality_frame(report.quality))
    for name, bins in report.histograms.items():
        print_table(f"Histogram: {name}", histogram_frame(bins))
    for name, counts in report.categorical.items():
        print_table(f"Counts by {name} (first {top_n})", counts_frame(counts[:top_n], label_name=name))
    if report.frequency_bands:
        print_table("Frequency bands", counts_frame(report.frequency_bands, label_name="band"))
