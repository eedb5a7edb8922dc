"""Fixed-width, zero-filled histograms of a numeric field."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List

import numpy as np
import pandas as pd

from .parser import RecordSet
from .statistics import filtered_values


# Bin widths used by the analysis view, in each field's own unit.
DEFAULT_BIN_SIZES: Dict[str, float] = {
    "rssi": 2,
    "ping_ms": 10,
    "link_speed": 50,
    "ping_loss_rate": 5,
    "ping_jitter": 5,
    "channel_number": 1,
    "neighbor_count": 5,
}


@dataclass(frozen=True)
class HistogramBin:
    lower_bound: float
    count: int


def histogram(records: RecordSet, field: str, bin_size: float) -> List[HistogramBin]:
    """
    Bin `field` into contiguous buckets of width `bin_size` from
    floor(min / bin_size) * bin_size up to the bucket holding the maximum.
    Empty buckets are kept with a count of 0.
    """
    if not bin_size > 0:
        raise ValueError(f"Bin size must be positive, got {bin_size}.")

    values = filtered_values(records, field)
    if values.size == 0:
        return []

    # Work on integer bucket indices so lower bounds never accumulate float error.
    indices = np.floor(values / bin_size).astype(np.int64)
    first = int(indices.min())
    counts = np.bincount(indices - first)

    return [
        HistogramBin(lower_bound=float((first + offset) * bin_size), count=int(count))
        for offset, count in enumerate(counts)
    ]


def histogram_frame(bins: List[HistogramBin]) -> pd.DataFrame:
    if not bins:
        return pd.DataFrame(columns=["lower_bound", "count"])
    return pd.DataFrame(
        {"lower_bound": [b.lower_bound for b in bins], "count": [b.count for b in bins]}
    )
