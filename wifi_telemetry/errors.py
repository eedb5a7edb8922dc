"""
Exceptions raised by the telemetry engine. Row-level anomalies (short rows,
unparsable numbers) are absorbed by the parser and never show up here; only
structural problems are surfaced to callers.
"""

from __future__ import annotations


class TelemetryError(Exception):
    """Base class for every error the engine surfaces."""


class InvalidInput(TelemetryError, ValueError):
    """The text has no header line."""


class EmptyInput(TelemetryError, ValueError):
    """A component that needs at least one record received none."""


class UnknownSchema(TelemetryError, LookupError):
    """The header (or a requested identifier) matches no registered schema."""

    def __init__(self, message: str, headers=None):
        super().__init__(message)
        self.headers = list(headers) if headers is not None else []
