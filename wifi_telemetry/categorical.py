"""
Occurrence counts for categorical fields (network name, access point,
location, channel) and 2.4 / 5 GHz band membership.
"""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass
from typing import List, Optional

import numpy as np
import pandas as pd

from .parser import RecordSet


CATEGORICAL_FIELDS: List[str] = ["ssid", "bssid", "floor", "channel_number"]
LOCATION_FIELD = "floor"
DEFAULT_LOCATION = "기타"

BAND_THRESHOLD_MHZ = 3000.0
BAND_24_LABEL = "2.4 GHz"
BAND_5_LABEL = "5 GHz"


@dataclass(frozen=True)
class CategoricalCount:
    label: str
    count: int


def _label(value: object) -> str:
    if value is None:
        return ""
    if isinstance(value, float):
        if np.isnan(value):
            return ""
        if value.is_integer():
            return str(int(value))
    return str(value)


def count_by(records: RecordSet, field: str) -> List[CategoricalCount]:
    """Count each distinct value of `field`, in order of first appearance."""
    # Counter keeps first-insertion order.
    counts = Counter(_label(value) for value in records.column(field).tolist())
    return [CategoricalCount(label, count) for label, count in counts.items()]


def frequency_bands(records: RecordSet) -> List[CategoricalCount]:
    """Split records into 2.4 GHz (< 3000 MHz) and 5 GHz (>= 3000 MHz); absent frequencies count in neither."""
    field = records.schema.frequency_field
    if field is None:
        return []
    frequency = records.values(field)
    present = frequency[~np.isnan(frequency)]
    low = int(np.sum(present < BAND_THRESHOLD_MHZ))
    high = int(np.sum(present >= BAND_THRESHOLD_MHZ))
    return [CategoricalCount(BAND_24_LABEL, low), CategoricalCount(BAND_5_LABEL, high)]


def dominant_location(
    records: RecordSet, field: str = LOCATION_FIELD, default: str = DEFAULT_LOCATION
) -> str:
    """Most frequent non-empty location value; ties go to the one seen first."""
    counts = Counter(
        label for label in (_label(value) for value in records.column(field).tolist()) if label
    )
    if not counts:
        return default
    return counts.most_common(1)[0][0]


def counts_frame(counts: List[CategoricalCount], label_name: Optional[str] = None) -> pd.DataFrame:
    label_name = label_name or "label"
    if not counts:
        return pd.DataFrame(columns=[label_name, "count"])
    return pd.DataFrame(
        {label_name: [c.label for c in counts], "count": [c.count for c in counts]}
    )
