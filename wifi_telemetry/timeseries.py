"""
Chart-ready projection of selected fields, one entry per record in order.
Failed measurements (the field's sentinel), unparsable cells and absent
fields all project as None so line charts show a gap instead of a point.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional, Sequence

import numpy as np
import pandas as pd

from .parser import RecordSet


CHART_FIELDS: List[str] = [
    "rssi",
    "ping_ms",
    "link_speed",
    "ping_loss_rate",
    "ping_jitter",
    "dns_time",
]
# The monitoring charts only draw the first points of a capture.
CHART_WINDOW = 500


def _projected_column(records: RecordSet, field: str) -> List[Optional[float]]:
    values = records.values(field)
    missing = np.isnan(values)
    sentinel = records.schema.sentinel_for(field)
    if sentinel is not None:
        missing |= values == sentinel
    return [None if gap else float(value) for value, gap in zip(values, missing)]


def project(
    records: RecordSet,
    fields: Sequence[str],
    max_points: Optional[int] = None,
) -> List[Dict[str, Any]]:
    """Return [{"index": 1, field: value, ...}, ...] for every record (or the first `max_points`)."""
    columns = {field: _projected_column(records, field) for field in fields}
    count = len(records) if max_points is None else min(len(records), max(max_points, 0))
    series: List[Dict[str, Any]] = []
    for position in range(count):
        entry: Dict[str, Any] = {"index": position + 1}
        for field in fields:
            entry[field] = columns[field][position]
        series.append(entry)
    return series


def projection_frame(series: List[Dict[str, Any]], fields: Sequence[str]) -> pd.DataFrame:
    return pd.DataFrame(series, columns=["index", *fields])
