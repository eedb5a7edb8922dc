"""
Registered record schemas for WiFi measurement exports.

Each version is self-contained: it lists its own numeric and categorical
fields, its sentinel values and the fields the quality metrics look at.
Detection is driven purely by the header's field names.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, FrozenSet, Iterable, List, Optional, Tuple

from .errors import UnknownSchema


TIMESTAMP_FIELD = "timestamp"
FAILED_PING_SENTINEL = -1.0

BASE_NUMERIC_FIELDS: Tuple[str, ...] = (
    "timestamp",
    "rssi",
    "link_speed",
    "ping_ms",
    "latitude",
    "longitude",
)
BASE_CATEGORICAL_FIELDS: Tuple[str, ...] = ("ssid", "bssid", "floor")
EXTENDED_NUMERIC_FIELDS: Tuple[str, ...] = (
    "ping_loss_rate",
    "ping_jitter",
    "wifi_frequency",
    "channel_number",
    "neighbor_count",
    "dns_time",
)


@dataclass(frozen=True)
class SchemaVersion:
    name: str
    numeric_fields: Tuple[str, ...]
    categorical_fields: Tuple[str, ...]
    sentinels: Dict[str, float] = field(default_factory=dict)
    failure_field: Optional[str] = None
    location_fields: Optional[Tuple[str, str]] = None
    frequency_field: Optional[str] = None
    timestamp_field: Optional[str] = TIMESTAMP_FIELD
    # Fields that only this version declares; empty for a base version.
    marker_fields: FrozenSet[str] = frozenset()

    @property
    def fields(self) -> Tuple[str, ...]:
        return self.numeric_fields + self.categorical_fields

    def sentinel_for(self, name: str) -> Optional[float]:
        return self.sentinels.get(name)

    def matches(self, headers: Iterable[str]) -> bool:
        """True if a header with these field names belongs to this version."""
        header_set = set(headers)
        if self.timestamp_field is None or self.timestamp_field not in header_set:
            return False
        if self.marker_fields and not (header_set & self.marker_fields):
            return False
        return True


V1 = SchemaVersion(
    name="v1",
    numeric_fields=BASE_NUMERIC_FIELDS,
    categorical_fields=BASE_CATEGORICAL_FIELDS,
    sentinels={"ping_ms": FAILED_PING_SENTINEL},
    failure_field="ping_ms",
    location_fields=("latitude", "longitude"),
)

V3 = SchemaVersion(
    name="v3",
    numeric_fields=BASE_NUMERIC_FIELDS + EXTENDED_NUMERIC_FIELDS,
    categorical_fields=BASE_CATEGORICAL_FIELDS,
    sentinels={"ping_ms": FAILED_PING_SENTINEL},
    failure_field="ping_ms",
    location_fields=("latitude", "longitude"),
    frequency_field="wifi_frequency",
    marker_fields=frozenset(EXTENDED_NUMERIC_FIELDS),
)

# Newest first: detection returns the first version that matches.
_REGISTRY: Dict[str, SchemaVersion] = {schema.name: schema for schema in (V3, V1)}


def registered_versions() -> List[str]:
    return list(_REGISTRY)


def get_schema(name: str) -> SchemaVersion:
    try:
        return _REGISTRY[name]
    except KeyError:
        raise UnknownSchema(
            f"Unknown schema version '{name}'. Registered: {', '.join(_REGISTRY)}"
        ) from None


def fields_for(name: str) -> Dict[str, object]:
    """Return the field declaration of a registered version."""
    schema = get_schema(name)
    return {
        "numeric_fields": schema.numeric_fields,
        "categorical_fields": schema.categorical_fields,
        "sentinels": dict(schema.sentinels),
    }


def detect_schema(headers: Iterable[str]) -> SchemaVersion:
    """Pick the newest registered version whose field set the header matches."""
    headers = list(headers)
    for schema in _REGISTRY.values():
        if schema.matches(headers):
            return schema
    raise UnknownSchema(
        f"Header does not match any registered schema: {', '.join(headers) or '<empty>'}",
        headers=headers,
    )


def text_only_schema() -> SchemaVersion:
    """Fallback for unrecognised headers: every column is kept as text."""
    return SchemaVersion(
        name="text",
        numeric_fields=(),
        categorical_fields=(),
        timestamp_field=None,
    )
