"""
Unit tests for the chart-ready time-series projection.
"""

from wifi_telemetry.statistics import filtered_values
from wifi_telemetry.timeseries import project, projection_frame


class TestProject:

    def test_index_starts_at_one(self, scenario_records):
        series = project(scenario_records, ["rssi"])
        assert [entry["index"] for entry in series] == [1, 2, 3]

    def test_failed_ping_projects_as_gap(self, scenario_records):
        series = project(scenario_records, ["rssi", "ping_ms"])
        assert series[1] == {"index": 2, "rssi": -60.0, "ping_ms": None}
        assert series[0]["ping_ms"] == 20.0

    def test_absent_fields_project_as_gap(self, extended_records, scenario_records):
        assert project(extended_records, ["dns_time"])[3]["dns_time"] is None
        assert all(entry["dns_time"] is None for entry in project(scenario_records, ["dns_time"]))

    def test_round_trip_matches_statistics_values(self, extended_records):
        for field in ("rssi", "ping_ms", "ping_jitter", "dns_time"):
            projected = [e[field] for e in project(extended_records, [field]) if e[field] is not None]
            assert projected == list(filtered_values(extended_records, field))

    def test_max_points(self, extended_records):
        assert len(project(extended_records, ["rssi"], max_points=2)) == 2
        assert len(project(extended_records, ["rssi"], max_points=100)) == 4

    def test_empty_record_set(self, header_only_records):
        assert project(header_only_records, ["rssi"]) == []

    def test_idempotent(self, extended_records):
        assert project(extended_records, ["rssi", "ping_ms"]) == project(extended_records, ["rssi", "ping_ms"])

    def test_frame(self, scenario_records):
        frame = projection_frame(project(scenario_records, ["ping_ms"]), ["ping_ms"])
        assert list(frame.columns) == ["index", "ping_ms"]
        assert len(frame) == 3
