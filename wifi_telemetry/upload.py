"""
Values the measurement store needs from a parsed capture: the upload
descriptor (file, uploader, size, dominant location, time span) and the
measurement rows split into insert-sized batches.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Iterable, Iterator, List, Optional, Tuple

import numpy as np
import pandas as pd

from .categorical import DEFAULT_LOCATION, dominant_location
from .errors import EmptyInput
from .parser import RecordSet


DEFAULT_BATCH_SIZE = 1000


@dataclass(frozen=True)
class UploadDescriptor:
    file_name: str
    uploader: str
    data_count: int
    location: str
    start_time: Optional[pd.Timestamp]
    end_time: Optional[pd.Timestamp]

    def to_row(self) -> Dict[str, Any]:
        return {
            "file_name": self.file_name,
            "uploader": self.uploader,
            "data_count": self.data_count,
            "location": self.location,
            "start_time": self.start_time.isoformat() if self.start_time is not None else None,
            "end_time": self.end_time.isoformat() if self.end_time is not None else None,
        }


def time_span(records: RecordSet) -> Tuple[Optional[pd.Timestamp], Optional[pd.Timestamp]]:
    """Earliest and latest valid timestamps as UTC Timestamps."""
    field = records.schema.timestamp_field
    if field is None:
        return None, None
    stamps = records.values(field)
    stamps = stamps[~np.isnan(stamps)]
    if stamps.size == 0:
        return None, None
    return (
        pd.Timestamp(float(stamps.min()), unit="ms", tz="UTC"),
        pd.Timestamp(float(stamps.max()), unit="ms", tz="UTC"),
    )


def build_upload_descriptor(
    records: RecordSet,
    file_name: str,
    uploader: str,
    default_location: str = DEFAULT_LOCATION,
) -> UploadDescriptor:
    if records.empty:
        raise EmptyInput(f"{file_name} contains no measurement rows.")
    start, end = time_span(records)
    return UploadDescriptor(
        file_name=file_name,
        uploader=uploader,
        data_count=len(records),
        location=dominant_location(records, default=default_location),
        start_time=start,
        end_time=end,
    )


def _clean(value: Any) -> Any:
    if isinstance(value, float) and np.isnan(value):
        return None
    return value


def measurement_batches(
    records: RecordSet,
    upload_id: Optional[Any] = None,
    batch_size: int = DEFAULT_BATCH_SIZE,
) -> Iterator[List[Dict[str, Any]]]:
    """Yield measurement rows (NaN as None, tagged with `upload_id`) in contiguous batches."""
    if batch_size <= 0:
        raise ValueError("Batch size must be positive.")
    for chunk in records.chunks(batch_size):
        batch: List[Dict[str, Any]] = []
        for row in chunk.to_dicts():
            cleaned = {key: _clean(value) for key, value in row.items()}
            if upload_id is not None:
                cleaned = {"upload_id": upload_id, **cleaned}
            batch.append(cleaned)
        yield batch


def summarize_uploads(descriptors: Iterable[UploadDescriptor]) -> Tuple[int, int]:
    """(number of uploads, total measurement rows) for an archive listing."""
    descriptors = list(descriptors)
    return len(descriptors), sum(d.data_count for d in descriptors)
