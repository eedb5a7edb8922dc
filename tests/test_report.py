"""
Tests for the combined dataset report, its CSV export and the CLI.
"""

import pandas as pd
import pytest

from wifi_telemetry.cli import main, parse_bin_sizes, parse_delimiter
from wifi_telemetry.histogram import DEFAULT_BIN_SIZES
from wifi_telemetry.report import build_report, print_report, save_report


class TestBuildReport:

    def test_scenario_report(self, scenario_records):
        report = build_report(scenario_records, timezone="UTC")
        assert report.record_count == 3
        assert report.schema_name == "v1"
        assert report.statistics["ping_ms"].mean == 25.0
        assert report.quality.failure_rate == 33.3
        assert set(report.histograms) == {"rssi", "ping_ms", "link_speed"}
        assert report.histograms["link_speed"] == []
        assert report.frequency_bands == []
        assert report.chart_fields == ["rssi", "ping_ms", "link_speed"]

    def test_extended_report(self, extended_records):
        report = build_report(extended_records)
        assert set(report.histograms) == set(DEFAULT_BIN_SIZES)
        assert [c.label for c in report.categorical["ssid"]] == ["lab", "guest"]
        assert [c.count for c in report.frequency_bands] == [1, 2]
        assert len(report.time_series) == 4

    def test_header_only_degrades_to_empty_forms(self, header_only_records):
        report = build_report(header_only_records)
        assert report.empty
        assert report.quality is None
        assert report.statistics == {}
        assert all(bins == [] for bins in report.histograms.values())
        assert all(counts == [] for counts in report.categorical.values())
        assert report.time_series == []

    def test_custom_bin_sizes_and_window(self, extended_records):
        report = build_report(extended_records, bin_sizes={"rssi": 10}, max_points=2)
        assert list(report.histograms) == ["rssi"]
        assert len(report.time_series) == 2

    def test_rebuild_is_identical(self, extended_records):
        before = extended_records.frame.copy()
        first = build_report(extended_records)
        second = build_report(extended_records)
        assert repr(first) == repr(second)
        assert extended_records.frame.equals(before)


class TestSaveReport:

    def test_writes_csv_files(self, extended_records, tmp_path):
        written = save_report(build_report(extended_records), tmp_path)
        names = {path.name for path in written}
        assert {"summary_statistics.csv", "quality_metrics.csv", "time_series.csv"} <= names
        assert "histogram_rssi.csv" in names
        assert "counts_ssid.csv" in names
        assert "frequency_bands.csv" in names
        summary = pd.read_csv(tmp_path / "summary_statistics.csv")
        assert "rssi" in set(summary["field"])

    def test_empty_report_still_writes(self, header_only_records, tmp_path):
        save_report(build_report(header_only_records), tmp_path)
        assert (tmp_path / "summary_statistics.csv").exists()

    def test_print_report(self, extended_records, capsys):
        print_report(build_report(extended_records))
        out = capsys.readouterr().out
        assert "Summary statistics" in out
        assert "Frequency bands" in out


class TestCliHelpers:

    def test_parse_bin_sizes_merges_defaults(self):
        sizes = parse_bin_sizes("rssi=5, dns_time=20")
        assert sizes["rssi"] == 5.0
        assert sizes["dns_time"] == 20.0
        assert sizes["ping_ms"] == DEFAULT_BIN_SIZES["ping_ms"]

    @pytest.mark.parametrize("arg", ["rssi", "rssi=0", "=5", "rssi=abc"])
    def test_parse_bin_sizes_rejects_bad_entries(self, arg):
        with pytest.raises(ValueError):
            parse_bin_sizes(arg)

    def test_parse_delimiter(self):
        assert parse_delimiter("tab") == "\t"
        assert parse_delimiter(";") == ";"
        with pytest.raises(ValueError):
            parse_delimiter("::")


class TestCli:

    def test_run_on_file(self, tmp_path, extended_text, capsys):
        capture = tmp_path / "capture.csv"
        capture.write_text(extended_text, encoding="utf-8")
        results = tmp_path / "results"
        code = main([str(capture), "--results_dir", str(results), "--timezone", "UTC", "--uploader", "tester"])
        assert code == 0
        assert (results / "summary_statistics.csv").exists()
        out = capsys.readouterr().out
        assert "Analysis complete." in out
        assert "location 3F" in out

    def test_multiple_files_are_combined(self, tmp_path, extended_text, scenario_text):
        first = tmp_path / "a.csv"
        second = tmp_path / "b.csv"
        first.write_text(extended_text, encoding="utf-8")
        second.write_text(scenario_text, encoding="utf-8")
        results = tmp_path / "results"
        assert main([str(first), str(second), "--results_dir", str(results), "--max_points", "0"]) == 0
        series = pd.read_csv(results / "time_series.csv")
        assert len(series) == 7

    def test_unknown_schema_rejected(self, tmp_path, capsys):
        capture = tmp_path / "odd.csv"
        capture.write_text("a,b\n1,2\n", encoding="utf-8")
        assert main([str(capture), "--results_dir", str(tmp_path / "r")]) == 1
        assert "skipping file" in capsys.readouterr().out

    def test_unknown_schema_kept_as_text(self, tmp_path):
        capture = tmp_path / "odd.csv"
        capture.write_text("a,b\n1,2\n", encoding="utf-8")
        results = tmp_path / "r"
        assert main([str(capture), "--results_dir", str(results), "--on_unknown_schema", "text"]) == 0
        assert (results / "counts_a.csv").exists() is False
        assert (results / "quality_metrics.csv").exists()

    def test_header_only_file(self, tmp_path):
        capture = tmp_path / "empty.csv"
        capture.write_text("timestamp,rssi,ping_ms\n", encoding="utf-8")
        assert main([str(capture), "--results_dir", str(tmp_path / "r")]) == 1

    def test_save_plots(self, tmp_path, extended_text):
        capture = tmp_path / "capture.csv"
        capture.write_text(extended_text, encoding="utf-8")
        results = tmp_path / "results"
        assert main([str(capture), "--results_dir", str(results), "--save_plots"]) == 0
        assert (results / "plot_histogram_rssi.png").exists()
        assert (results / "plot_series_ping_ms.png").exists()

    def test_non_utf8_capture_is_analyzed(self, tmp_path, capsys):
        capture = tmp_path / "capture_cp949.csv"
        capture.write_bytes("timestamp,rssi,ssid,floor\n1000,-50,lab,지하1층\n2000,-52,lab,지하1층\n".encode("cp949"))
        results = tmp_path / "results"
        assert main([str(capture), "--results_dir", str(results)]) == 0
        assert "Analysis complete." in capsys.readouterr().out
        summary = pd.read_csv(results / "summary_statistics.csv")
        assert list(summary["field"]) == ["rssi"]


class TestPlots:

    def test_import_keeps_current_backend(self):
        import importlib

        import matplotlib

        import wifi_telemetry.plots as plots

        previous = matplotlib.get_backend()
        matplotlib.use("pdf")
        try:
            importlib.reload(plots)
            assert matplotlib.get_backend().lower() == "pdf"
        finally:
            matplotlib.use(previous)
