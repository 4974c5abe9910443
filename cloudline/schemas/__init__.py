"""
Data schemas for cloudline.

This module exposes the public API for the models used to describe the service
and the Cloud Logging special payload fields.
"""

from .log_entry import (
    ErrorContext,
    LogEntry,
    LogEntryHttpRequest,
    LogEntryOperation,
    LogEntrySourceLocation,
    ReportLocation,
)
from .service_context import ServiceContext

__all__ = [
    "ServiceContext",
    "LogEntry",
    "ErrorContext",
    "ReportLocation",
    "LogEntryHttpRequest",
    "LogEntryOperation",
    "LogEntrySourceLocation",
]
