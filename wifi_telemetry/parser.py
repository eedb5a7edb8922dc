"""
Parse delimited WiFi measurement exports into a typed record set.

The first non-empty line is the header. Every following line becomes one
record: numeric schema fields are coerced to float (unparsable cells become
NaN), everything else is kept as text. Short rows leave trailing fields
absent, long rows drop the surplus cells. Header columns the schema does not
know are carried through as text.
"""

from __future__ import annotations

import csv
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Iterator, List, Optional, Sequence

import numpy as np
import pandas as pd

from .errors import InvalidInput
from .schema import SchemaVersion, detect_schema


DEFAULT_DELIMITER = ","


@dataclass(frozen=True, eq=False)
class RecordSet:
    frame: pd.DataFrame
    schema: SchemaVersion
    passthrough_columns: List[str] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.frame)

    @property
    def empty(self) -> bool:
        return self.frame.empty

    @property
    def columns(self) -> List[str]:
        return list(self.frame.columns)

    def has_field(self, name: str) -> bool:
        return name in self.frame.columns

    def values(self, name: str) -> np.ndarray:
        """Raw float values of a column; all-NaN if the column is absent."""
        if name not in self.frame.columns:
            return np.full(len(self.frame), np.nan)
        return pd.to_numeric(self.frame[name], errors="coerce").to_numpy(dtype=float)

    def column(self, name: str) -> pd.Series:
        if name not in self.frame.columns:
            return pd.Series([None] * len(self.frame), index=self.frame.index, dtype=object)
        return self.frame[name]

    def to_dicts(self) -> List[Dict[str, Any]]:
        return self.frame.to_dict(orient="records")

    def slice(self, start: int, stop: Optional[int] = None) -> "RecordSet":
        return RecordSet(
            self.frame.iloc[start:stop].reset_index(drop=True),
            self.schema,
            list(self.passthrough_columns),
        )

    def chunks(self, size: int) -> Iterator["RecordSet"]:
        if size <= 0:
            raise ValueError("Chunk size must be positive.")
        for start in range(0, len(self), size):
            yield self.slice(start, start + size)


def _split_line(line: str, delimiter: str) -> List[str]:
    row = next(csv.reader([line], delimiter=delimiter), [])
    return [cell.strip() for cell in row]


def _unique_headers(headers: Sequence[str]) -> List[int]:
    """Positions of the first occurrence of each header name."""
    seen = set()
    positions: List[int] = []
    for index, name in enumerate(headers):
        if name in seen:
            continue
        seen.add(name)
        positions.append(index)
    return positions


def parse_records(
    text: str,
    schema: Optional[SchemaVersion] = None,
    delimiter: str = DEFAULT_DELIMITER,
) -> RecordSet:
    """
    Convert raw delimited text into a RecordSet. When `schema` is None the
    version is detected from the header (UnknownSchema if nothing matches).
    Raises InvalidInput only when there is no header line at all.
    """
    lines = [line for line in text.strip().splitlines() if line.strip()]
    if not lines:
        raise InvalidInput("Input contains no header line.")

    raw_headers = _split_line(lines[0].lstrip("\ufeff"), delimiter)
    positions = _unique_headers(raw_headers)
    headers = [raw_headers[i] for i in positions]

    if schema is None:
        schema = detect_schema(headers)

    rows: List[List[Optional[str]]] = []
    for line in lines[1:]:
        cells = _split_line(line, delimiter)
        rows.append([cells[i] if i < len(cells) else None for i in positions])

    frame = pd.DataFrame(rows, columns=headers, dtype=object)

    # Schema fields missing from the header still exist, as absent values.
    for name in schema.fields:
        if name not in frame.columns:
            frame[name] = pd.Series([None] * len(frame), index=frame.index, dtype=object)

    for name in schema.numeric_fields:
        numeric = pd.to_numeric(frame[name], errors="coerce").astype(float)
        frame[name] = numeric.replace([np.inf, -np.inf], np.nan)

    passthrough = [name for name in headers if name not in schema.fields]
    ordered = list(schema.fields) + passthrough
    frame = frame.loc[:, ordered]

    return RecordSet(frame, schema, passthrough)


def combine_records(record_sets: Sequence[RecordSet]) -> RecordSet:
    """
    Merge several record sets into one ordered by timestamp, the way the
    measurement store returns a multi-upload query. The widest schema is
    used; fields an older capture lacks stay absent.
    """
    if not record_sets:
        raise ValueError("No record sets to combine.")
    schema = max((rs.schema for rs in record_sets), key=lambda s: len(s.fields))
    passthrough: List[str] = []
    for rs in record_sets:
        passthrough.extend(name for name in rs.columns if name not in schema.fields and name not in passthrough)

    columns = list(schema.fields) + passthrough
    frame = pd.concat([rs.frame for rs in record_sets], ignore_index=True, sort=False)
    frame = frame.reindex(columns=columns)
    for name in schema.numeric_fields:
        frame[name] = pd.to_numeric(frame[name], errors="coerce").astype(float)
    for name in columns:
        if name not in schema.numeric_fields:
            frame[name] = frame[name].astype(object).map(lambda v: None if pd.isna(v) else v)
    if schema.timestamp_field:
        frame = frame.sort_values(schema.timestamp_field, kind="mergesort", na_position="last")
    return RecordSet(frame.reset_index(drop=True), schema, passthrough)


def load_records(
    path: Path,
    schema: Optional[SchemaVersion] = None,
    delimiter: str = DEFAULT_DELIMITER,
) -> RecordSet:
    """Read a UTF-8 export from disk and parse it; undecodable bytes become U+FFFD."""
    text = Path(path).read_text(encoding="utf-8-sig", errors="replace")
    return parse_records(text, schema=schema, delimiter=delimiter)
