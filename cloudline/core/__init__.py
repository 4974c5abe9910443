"""
Core functionality for cloudline.

This module exposes the severity table, the record serializer, the output
engine and service context discovery.
"""

from .discovery import default_service_context, read_project_name
from .engine import (
    LogEngine,
    StreamEngine,
    epoch_time,
    iso_time,
    no_time,
    serialize_bindings,
    unix_time,
)
from .serializer import RecordSerializer, default_stringify
from .severity import CUSTOM_LEVELS, STANDARD_LEVELS, SeverityLevel, SeverityTable

__all__ = [
    "SeverityLevel",
    "SeverityTable",
    "STANDARD_LEVELS",
    "CUSTOM_LEVELS",
    "RecordSerializer",
    "default_stringify",
    "LogEngine",
    "StreamEngine",
    "serialize_bindings",
    "epoch_time",
    "iso_time",
    "unix_time",
    "no_time",
    "default_service_context",
    "read_project_name",
]
