"""
Payload models for the special fields understood by Cloud Logging.

These are optional helpers: any mapping can be logged, but passing one of these
models as a field value produces the camelCase shape the ingestion agent expects.
Unset fields are left out of the output.
"""

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class _CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
    )


class LogEntrySourceLocation(_CamelModel):
    """Source code location that produced the log entry."""

    file: str | None = None
    line: str | int | None = None
    function: str | None = None


class LogEntryOperation(_CamelModel):
    """A long-running operation this log entry belongs to."""

    id: str | None = None
    producer: str | None = None
    first: bool | None = None
    last: bool | None = None


class LogEntryHttpRequest(_CamelModel):
    """
    HTTP request associated with the log entry.

    ``latency`` uses the duration string format, e.g. ``"0.25s"``.
    """

    request_method: str | None = None
    request_url: str | None = None
    request_size: int | None = None
    status: int | None = None
    response_size: int | None = None
    user_agent: str | None = None
    remote_ip: str | None = None
    server_ip: str | None = None
    referer: str | None = None
    latency: str | None = None
    cache_lookup: bool | None = None
    cache_hit: bool | None = None
    cache_validated_with_origin_server: bool | None = None
    cache_fill_bytes: int | None = None
    protocol: str | None = None


class ReportLocation(_CamelModel):
    """Location in the code where an error was reported."""

    file_path: str | None = None
    line_number: int | None = None
    function_name: str | None = None


class ErrorContext(_CamelModel):
    """Context for an error report."""

    http_request: LogEntryHttpRequest | None = None
    user: str | None = None
    report_location: ReportLocation | None = None


class LogEntry(_CamelModel):
    """
    A structured payload using the Cloud Logging special fields.

    Fields not declared here are kept as-is, so ``LogEntry`` can carry
    arbitrary application data next to the special fields.
    """

    http_request: LogEntryHttpRequest | None = None
    operation: LogEntryOperation | None = None
    source_location: LogEntrySourceLocation | None = None
    context: ErrorContext | None = None
    trace: str | None = None
    span_id: str | None = None
    labels: dict[str, str] | None = Field(default=None)

    model_config = ConfigDict(extra="allow")
