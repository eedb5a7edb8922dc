#!/usr/bin/env python3
"""
Command-line front end: load one or more WiFi measurement CSV exports,
print the upload descriptors and analysis tables, and write CSV summaries
(plus optional matplotlib figures) to a results directory.
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import Dict, List, Optional

from .errors import TelemetryError, UnknownSchema
from .histogram import DEFAULT_BIN_SIZES
from .parser import DEFAULT_DELIMITER, RecordSet, combine_records, load_records
from .quality import DISPLAY_TIMEZONE
from .report import build_report, print_report, save_report
from .schema import get_schema, registered_versions, text_only_schema
from .timeseries import CHART_WINDOW
from .upload import DEFAULT_BATCH_SIZE, build_upload_descriptor, measurement_batches, summarize_uploads


def parse_bin_sizes(arg: str) -> Dict[str, float]:
    """Parse 'field=size,field=size' into a bin size mapping merged over the defaults."""
    sizes = dict(DEFAULT_BIN_SIZES)
    if not arg.strip():
        return sizes
    for part in arg.split(","):
        if "=" not in part:
            raise ValueError(f"Bin size entry '{part.strip()}' must look like 'field=size'.")
        name, raw_size = (p.strip() for p in part.split("=", 1))
        size = float(raw_size)
        if not name:
            raise ValueError("Bin size entry is missing a field name.")
        if size <= 0:
            raise ValueError(f"Bin size for {name} must be positive.")
        sizes[name] = size
    return sizes


def parse_delimiter(arg: str) -> str:
    """Accept a single character, or the names 'tab' / 'semicolon'."""
    aliases = {"tab": "\t", "\\t": "\t", "semicolon": ";", "comma": ","}
    delimiter = aliases.get(arg.lower(), arg)
    if len(delimiter) != 1:
        raise ValueError("Delimiter must be a single character.")
    return delimiter


def _load_one(path: Path, args: argparse.Namespace, delimiter: str) -> Optional[RecordSet]:
    schema = get_schema(args.schema) if args.schema else None
    try:
        return load_records(path, schema=schema, delimiter=delimiter)
    except UnknownSchema as exc:
        if args.on_unknown_schema == "text":
            print(f"Warning: {path.name}: {exc}; keeping all columns as text.")
            return load_records(path, schema=text_only_schema(), delimiter=delimiter)
        print(f"Warning: {path.name}: {exc}; skipping file.")
        return None


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(
        description="Summarize WiFi measurement CSV exports (statistics, quality, histograms, counts)."
    )
    parser.add_argument("files", nargs="+", help="CSV export(s) with one header row.")
    parser.add_argument("--uploader", default="unknown", help="Uploader name recorded in upload descriptors.")
    parser.add_argument(
        "--schema",
        choices=registered_versions(),
        default=None,
        help="Force a schema version instead of detecting it from the header.",
    )
    parser.add_argument(
        "--on_unknown_schema",
        choices=["reject", "text"],
        default="reject",
        help="What to do with files whose header matches no schema.",
    )
    parser.add_argument("--delimiter", default=DEFAULT_DELIMITER, help="Field separator (default ',').")
    parser.add_argument(
        "--bin_sizes",
        default="",
        help="Histogram bin sizes as 'field=size,...', merged over the defaults.",
    )
    parser.add_argument(
        "--max_points",
        type=int,
        default=CHART_WINDOW,
        help="Number of samples kept in the time-series projection (0 keeps all).",
    )
    parser.add_argument("--timezone", default=DISPLAY_TIMEZONE, help="Time zone for start/end display.")
    parser.add_argument("--batch_size", type=int, default=DEFAULT_BATCH_SIZE, help="Rows per store insert batch.")
    parser.add_argument("--results_dir", default="./results_wifi", help="Directory for CSV outputs.")
    parser.add_argument("--save_plots", action="store_true", help="Save matplotlib figures to the results directory.")

    args = parser.parse_args(argv)

    try:
        delimiter = parse_delimiter(args.delimiter)
        bin_sizes = parse_bin_sizes(args.bin_sizes)
    except ValueError as exc:
        parser.error(str(exc))
    if args.batch_size <= 0:
        parser.error("--batch_size must be positive.")

    print("Starting WiFi telemetry analysis...")
    print(f"  Files: {len(args.files)}")
    print(f"  Display time zone: {args.timezone}")

    try:
        record_sets: List[RecordSet] = []
        descriptors = []
        for raw_path in args.files:
            path = Path(raw_path)
            print(f"Loading {path} ...")
            records = _load_one(path, args, delimiter)
            if records is None:
                continue
            if records.empty:
                print(f"Warning: {path.name} has no measurement rows.")
                continue
            descriptor = build_upload_descriptor(records, path.name, args.uploader)
            batches = sum(1 for _ in measurement_batches(records, batch_size=args.batch_size))
            row = descriptor.to_row()
            print(
                f"  schema {records.schema.name}, {descriptor.data_count} rows, "
                f"location {row['location']}, {row['start_time']} .. {row['end_time']}, "
                f"{batches} insert batch(es)"
            )
            record_sets.append(records)
            descriptors.append(descriptor)

        file_count, total_rows = summarize_uploads(descriptors)
        if not record_sets:
            print("No measurement data found in the provided files.")
            return 1
        print(f"  Loaded {file_count} file(s) with {total_rows} rows.")

        combined = record_sets[0] if len(record_sets) == 1 else combine_records(record_sets)
        report = build_report(
            combined,
            bin_sizes=bin_sizes,
            max_points=args.max_points or None,
            timezone=args.timezone,
        )
    except (TelemetryError, OSError) as exc:
        print(f"Error: {exc}")
        return 1

    print_report(report)

    results_dir = Path(args.results_dir)
    print(f"\nWriting summaries to {results_dir}/ ...")
    save_report(report, results_dir)

    if args.save_plots:
        import matplotlib

        matplotlib.use("Agg")
        from .plots import plot_histograms, plot_time_series

        plot_histograms(report, results_dir)
        plot_time_series(report, results_dir)
        print("  Saved plots.")

    print("Analysis complete.")
    return 0


if __name__ == "__main__":
    sys.exit(main())
