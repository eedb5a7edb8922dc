"""WiFi measurement telemetry: parsing, statistics, quality metrics and chart-ready views."""

from .categorical import CategoricalCount, count_by, dominant_location, frequency_bands
from .errors import EmptyInput, InvalidInput, TelemetryError, UnknownSchema
from .histogram import HistogramBin, histogram
from .parser import RecordSet, combine_records, load_records, parse_records
from .quality import QualityMetrics, analyze_quality
from .report import DatasetReport, build_report
from .schema import SchemaVersion, detect_schema, fields_for, get_schema, text_only_schema
from .statistics import SummaryStatistics, filtered_values, monitoring_overview, summarize
from .timeseries import project
from .upload import UploadDescriptor, build_upload_descriptor, measurement_batches

__version__ = "0.3.0"

__all__ = [
    "CategoricalCount",
    "DatasetReport",
    "EmptyInput",
    "HistogramBin",
    "InvalidInput",
    "QualityMetrics",
    "RecordSet",
    "SchemaVersion",
    "SummaryStatistics",
    "TelemetryError",
    "UnknownSchema",
    "UploadDescriptor",
    "analyze_quality",
    "build_report",
    "build_upload_descriptor",
    "combine_records",
    "count_by",
    "detect_schema",
    "dominant_location",
    "fields_for",
    "filtered_values",
    "frequency_bands",
    "get_schema",
    "histogram",
    "load_records",
    "measurement_batches",
    "monitoring_overview",
    "parse_records",
    "project",
    "summarize",
    "text_only_schema",
]
