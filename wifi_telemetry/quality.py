"""
Dataset-level quality indicators: sampling cadence, probe failure rate,
location fix rate and capture span. Records are expected in ascending
timestamp order, which is how the measurement store returns them.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Dict, Optional

import numpy as np
import pandas as pd

from .errors import EmptyInput
from .parser import RecordSet


DISPLAY_TIMEZONE = "Asia/Seoul"
DISPLAY_TIME_FORMAT = "%Y-%m-%d %H:%M:%S"


@dataclass(frozen=True)
class QualityMetrics:
    avg_sample_interval_seconds: float
    failure_rate: float
    valid_location_rate: float
    duration_minutes: float
    start_time: Optional[str]
    end_time: Optional[str]

    def as_dict(self) -> Dict[str, object]:
        return asdict(self)


def format_timestamp(
    timestamp_ms: float,
    timezone: str = DISPLAY_TIMEZONE,
    fmt: str = DISPLAY_TIME_FORMAT,
) -> Optional[str]:
    """Render epoch milliseconds in the deployment time zone."""
    if timestamp_ms is None or not np.isfinite(timestamp_ms):
        return None
    stamp = pd.Timestamp(timestamp_ms, unit="ms", tz="UTC").tz_convert(timezone)
    return stamp.strftime(fmt)


def _percentage(hits: int, total: int) -> float:
    return round(hits / total * 100.0, 1)


def analyze_quality(
    records: RecordSet,
    timezone: str = DISPLAY_TIMEZONE,
    time_format: str = DISPLAY_TIME_FORMAT,
) -> QualityMetrics:
    """Compute QualityMetrics; raises EmptyInput for an empty record set."""
    total = len(records)
    if total == 0:
        raise EmptyInput("Quality metrics need at least one record.")

    schema = records.schema
    timestamps = records.values(schema.timestamp_field) if schema.timestamp_field else np.full(total, np.nan)

    # Pairs with a missing timestamp on either side drop out.
    intervals = pd.Series(np.diff(timestamps) / 1000.0, dtype=float).dropna()
    if total < 2 or intervals.empty:
        avg_interval = float("nan")
    else:
        avg_interval = round(float(intervals.mean()), 2)

    failures = 0
    if schema.failure_field:
        sentinel = schema.sentinel_for(schema.failure_field)
        if sentinel is not None:
            failures = int(np.sum(records.values(schema.failure_field) == sentinel))

    located = 0
    if schema.location_fields:
        lat_field, lon_field = schema.location_fields
        lat = records.values(lat_field)
        lon = records.values(lon_field)
        valid = ~np.isnan(lat) & ~np.isnan(lon) & (lat != 0) & (lon != 0)
        located = int(valid.sum())

    first, last = timestamps[0], timestamps[-1]
    duration = (last - first) / 60000.0
    duration_minutes = round(float(duration), 2) if np.isfinite(duration) else float("nan")

    return QualityMetrics(
        avg_sample_interval_seconds=avg_interval,
        failure_rate=_percentage(failures, total),
        valid_location_rate=_percentage(located, total),
        duration_minutes=duration_minutes,
        start_time=format_timestamp(first, timezone, time_format),
        end_time=format_timestamp(last, timezone, time_format),
    )


def quality_frame(metrics: Optional[QualityMetrics]) -> pd.DataFrame:
    if metrics is None:
        return pd.DataFrame(columns=["metric", "value"])
    return pd.DataFrame(
        [{"metric": key, "value": value} for key, value in metrics.as_dict().items()]
    )
