"""
Pytest configuration and fixtures for wifi_telemetry tests.
"""

import sys
from pathlib import Path

import pytest

# Make the package importable without installing it.
sys.path.insert(0, str(Path(__file__).parent.parent))

from wifi_telemetry.parser import parse_records  # noqa: E402


BASE_HEADER = "timestamp,rssi,link_speed,ssid,bssid,ping_ms,latitude,longitude,floor"
EXTENDED_HEADER = (
    BASE_HEADER
    + ",ping_loss_rate,ping_jitter,wifi_frequency,channel_number,neighbor_count,dns_time"
)

EXTENDED_ROWS = [
    "1700000000000,-45,866,lab,aa:01,12,37.5,127.0,3F,0,1.5,5180,36,12,20",
    "1700000001000,-50,780,lab,aa:02,-1,0,0,3F,100,,2437,6,8,25",
    "1700000002000,-55,650,guest,aa:01,18,37.5,127.0,B1,10,2.5,5180,36,10,abc",
    # Short row: the extended fields are missing entirely.
    "1700000004000,-70,144,lab,aa:03,25,37.5,127.0,3F",
]


@pytest.fixture
def scenario_text():
    """Three-record capture with one failed ping."""
    return "timestamp,rssi,ping_ms\n1000,-50,20\n2000,-60,-1\n3000,-55,30"


@pytest.fixture
def scenario_records(scenario_text):
    return parse_records(scenario_text)


@pytest.fixture
def extended_text():
    return "\n".join([EXTENDED_HEADER, *EXTENDED_ROWS]) + "\n"


@pytest.fixture
def extended_records(extended_text):
    return parse_records(extended_text)


@pytest.fixture
def header_only_records():
    return parse_records(EXTENDED_HEADER + "\n")


@pytest.fixture
def make_records():
    """Build a base-schema record set from a list of values for one numeric field."""

    def _make(field, values):
        lines = [f"timestamp,{field}"]
        for i, value in enumerate(values):
            lines.append(f"{1000 * (i + 1)},{value}")
        return parse_records("\n".join(lines))

    return _make
