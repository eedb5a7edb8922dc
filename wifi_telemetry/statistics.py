"""
Per-field descriptive statistics over a record set.

Median and quartiles are nearest-rank picks from the sorted sample
(sorted[floor(n * p)]), without interpolation, so historical summaries stay
reproducible. Standard deviation is the population form (ddof=0).
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Dict, Iterable, List, Optional

import numpy as np
import pandas as pd

from .parser import RecordSet


PRESENTATION_DECIMALS = 2

OVERVIEW_FIELDS: List[str] = [
    "rssi",
    "ping_ms",
    "link_speed",
    "ping_loss_rate",
    "ping_jitter",
    "dns_time",
]


@dataclass(frozen=True)
class SummaryStatistics:
    count: int
    mean: float
    std: float
    min: float
    max: float
    median: float
    q1: float
    q3: float

    def as_dict(self) -> Dict[str, float]:
        return asdict(self)


@dataclass(frozen=True)
class FieldOverview:
    mean: float
    min: float
    max: float


@dataclass(frozen=True)
class MonitoringOverview:
    total_count: int
    fields: Dict[str, Optional[FieldOverview]]


def filtered_values(records: RecordSet, field: str) -> np.ndarray:
    """Numeric values of `field` with NaN/absent cells and its sentinel removed."""
    values = records.values(field)
    mask = ~np.isnan(values)
    sentinel = records.schema.sentinel_for(field)
    if sentinel is not None:
        mask &= values != sentinel
    return values[mask]


def _nearest_rank(sorted_values: np.ndarray, fraction: float) -> float:
    return float(sorted_values[int(np.floor(len(sorted_values) * fraction))])


def summarize(records: RecordSet, field: str) -> Optional[SummaryStatistics]:
    """Summary statistics for one field, or None when no usable values remain."""
    values = np.sort(filtered_values(records, field))
    n = values.size
    if n == 0:
        return None

    mean = float(values.sum() / n)
    std = float(np.sqrt(np.sum((values - mean) ** 2) / n))

    return SummaryStatistics(
        count=int(n),
        mean=round(mean, PRESENTATION_DECIMALS),
        std=round(std, PRESENTATION_DECIMALS),
        min=round(float(values[0]), PRESENTATION_DECIMALS),
        max=round(float(values[-1]), PRESENTATION_DECIMALS),
        median=round(_nearest_rank(values, 0.5), PRESENTATION_DECIMALS),
        q1=round(_nearest_rank(values, 0.25), PRESENTATION_DECIMALS),
        q3=round(_nearest_rank(values, 0.75), PRESENTATION_DECIMALS),
    )


def summarize_fields(
    records: RecordSet, fields: Optional[Iterable[str]] = None
) -> Dict[str, SummaryStatistics]:
    """Summaries for several fields (numeric schema fields except the timestamp by default); empty fields are omitted."""
    if fields is None:
        fields = [f for f in records.schema.numeric_fields if f != records.schema.timestamp_field]
    results: Dict[str, SummaryStatistics] = {}
    for field in fields:
        summary = summarize(records, field)
        if summary is not None:
            results[field] = summary
    return results


def statistics_frame(summaries: Dict[str, SummaryStatistics]) -> pd.DataFrame:
    columns = ["field", "count", "mean", "std", "min", "max", "median", "q1", "q3"]
    if not summaries:
        return pd.DataFrame(columns=columns)
    rows = [{"field": field, **summary.as_dict()} for field, summary in summaries.items()]
    return pd.DataFrame(rows, columns=columns)


def monitoring_overview(
    records: RecordSet, fields: Optional[Iterable[str]] = None
) -> MonitoringOverview:
    """Headline numbers for the monitoring view: record total plus mean/min/max per field."""
    fields = list(OVERVIEW_FIELDS if fields is None else fields)
    overview: Dict[str, Optional[FieldOverview]] = {}
    for field in fields:
        values = filtered_values(records, field)
        if values.size == 0:
            overview[field] = None
            continue
        overview[field] = FieldOverview(
            mean=round(float(values.sum() / values.size), PRESENTATION_DECIMALS),
            min=float(values.min()),
            max=float(values.max()),
        )
    return MonitoringOverview(total_count=len(records), fields=overview)
