"""
cloudline - structured JSON logging for cloud log ingestion.

This package writes one JSON object per line, with Cloud Logging severities,
error-reporting metadata and stack traces handled the way the ingestion agent
expects them.

Main components:
- logger: Logger construction and the Logger facade
- core: Severity table, record serializer, output engine, service discovery
- schemas: Service context and Cloud Logging payload models
- handler: Bridge from the standard logging module
- utils: Diagnostics logging for the library itself

Public API:
"""

from cloudline.config import LoggerOptions
from cloudline.core import (
    RecordSerializer,
    SeverityTable,
    StreamEngine,
    default_service_context,
    default_stringify,
    epoch_time,
    iso_time,
    no_time,
    unix_time,
)
from cloudline.errors import CloudlineError, ServiceContextError, UnknownLevelError
from cloudline.handler import CloudlineHandler
from cloudline.logger import Logger, create_logger, plack
from cloudline.schemas import (
    ErrorContext,
    LogEntry,
    LogEntryHttpRequest,
    LogEntryOperation,
    LogEntrySourceLocation,
    ReportLocation,
    ServiceContext,
)

__version__ = "0.1.0"

__all__ = [
    # Logger
    "Logger",
    "LoggerOptions",
    "create_logger",
    "plack",
    "CloudlineHandler",
    # Core
    "SeverityTable",
    "RecordSerializer",
    "StreamEngine",
    "default_service_context",
    "default_stringify",
    "epoch_time",
    "iso_time",
    "unix_time",
    "no_time",
    # Schemas
    "ServiceContext",
    "LogEntry",
    "ErrorContext",
    "ReportLocation",
    "LogEntryHttpRequest",
    "LogEntryOperation",
    "LogEntrySourceLocation",
    # Errors
    "CloudlineError",
    "UnknownLevelError",
    "ServiceContextError",
]
