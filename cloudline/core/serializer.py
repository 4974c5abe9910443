"""
Record serialization for cloudline.

This module turns one log call into one newline-terminated JSON line. The line is
assembled from pre-rendered fragments in a fixed order:

    severity, timestamp, message, child bindings, error fields, payload fields

Errors get special treatment. When an exception is logged on its own (or as the
message) its traceback becomes the ``message``; when it accompanies a separate
message the traceback goes into a ``stack`` field instead. Never both.
"""

import json
import math
import re
import traceback
from collections.abc import Callable, Mapping
from dataclasses import asdict, is_dataclass
from enum import Enum
from pathlib import PurePath
from typing import Any

from pydantic import BaseModel

from cloudline.core.severity import SeverityTable
from cloudline.schemas.service_context import ServiceContext
from cloudline.utils.logger import get_logger

logger = get_logger(__name__)

MESSAGE_KEY = "message"
RECORD_END = "}\n"

# Lone surrogates (e.g. from os.fsdecode) cannot be encoded as UTF-8
_SURROGATE_RE = re.compile("[\ud800-\udfff]")

Stringify = Callable[[Any], str | None]
Serializers = Mapping[str, Callable[[Any], Any]]


def omit(_value: Any) -> None:
    """Serializer that drops a field from the output."""
    return None


# The ``err`` key is handled by the error rules, never as a plain field
DEFAULT_SERIALIZERS: dict[str, Callable[[Any], Any]] = {"err": omit}


def _json_default(value: Any) -> Any:
    if isinstance(value, BaseModel):
        return value.model_dump(mode="json", by_alias=True, exclude_none=True)
    if hasattr(value, "isoformat"):
        # datetime, date and time
        return value.isoformat()
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, (set, frozenset, tuple)):
        return list(value)
    if isinstance(value, PurePath):
        return str(value)
    if isinstance(value, BaseException):
        return error_fields(value)
    if is_dataclass(value) and not isinstance(value, type):
        return asdict(value)
    if hasattr(value, "__dict__"):
        return dict(vars(value))
    return str(value)


def default_stringify(value: Any) -> str | None:
    """
    Encode a field value as compact JSON.

    Returns None when the value should be left out of the record: callables,
    circular structures and non-finite floats.
    """
    if callable(value):
        return None
    if isinstance(value, float) and not math.isfinite(value):
        return None
    try:
        return json.dumps(
            value,
            default=_json_default,
            ensure_ascii=False,
            allow_nan=False,
            separators=(",", ":"),
        )
    except (TypeError, ValueError, RecursionError) as e:
        logger.debug(
            f"Omitting unserializable value: {e}",
            extra={"context": {"value_type": type(value).__name__}},
        )
        return None


def escape_surrogates(text: str) -> str:
    """Replace lone surrogates with their JSON \\u escapes."""
    return _SURROGATE_RE.sub(lambda m: "\\u%04x" % ord(m.group()), text)


def is_error(value: Any) -> bool:
    """Whether ``value`` should be handled as an error."""
    return isinstance(value, BaseException)


def stack_of(err: BaseException) -> str:
    """Full traceback text for ``err``, including chained causes."""
    return "".join(traceback.format_exception(err)).rstrip("\n")


def error_fields(err: BaseException) -> dict[str, Any]:
    """Attributes set on an exception instance, minus ``name`` and dunders."""
    return {
        key: value
        for key, value in vars(err).items()
        if key != "name" and not key.startswith("__")
    }


def own_fields(obj: Any) -> dict[str, Any]:
    """
    Return the fields of a payload object as an ordered dict.

    Mappings keep their insertion order, pydantic models are dumped by alias,
    exceptions and plain objects contribute their instance attributes. Objects
    without an instance dict fall back to their declared slots.
    """
    if isinstance(obj, Mapping):
        return {str(key): value for key, value in obj.items()}
    if isinstance(obj, BaseModel):
        return obj.model_dump(by_alias=True, exclude_none=True)
    if hasattr(obj, "__dict__"):
        return dict(vars(obj))

    fields: dict[str, Any] = {}
    for cls in reversed(type(obj).__mro__):
        slots = cls.__dict__.get("__slots__", ())
        if isinstance(slots, str):
            slots = (slots,)
        for slot in slots:
            if slot.startswith("__") or not hasattr(obj, slot):
                continue
            fields[slot] = getattr(obj, slot)
    return fields


REPORT_LOCATION_KEYS = ("reportLocation", "report_location")


def _wants_report_location(obj: Any) -> bool:
    if isinstance(obj, Mapping):
        return any(obj.get(key) for key in REPORT_LOCATION_KEYS)
    return any(getattr(obj, key, None) for key in REPORT_LOCATION_KEYS)


class RecordSerializer:
    """
    Builds one JSON line per log call.

    The serializer holds everything that stays fixed for a logger (severity
    table, service context, value encoders) and receives the per-call pieces
    (rank, payload, message, timestamp and bindings fragments) in ``as_json``.
    It performs no I/O.
    """

    def __init__(
        self,
        table: SeverityTable,
        service_context: ServiceContext | None = None,
        stringify: Stringify = default_stringify,
        serializers: Serializers | None = None,
    ) -> None:
        self.table = table
        self.service_context = service_context
        self.stringify = stringify
        self.serializers: dict[str, Callable[[Any], Any]] = {
            **DEFAULT_SERIALIZERS,
            **(serializers or {}),
        }

    def encode_field(self, key: str, value: Any) -> str | None:
        """Apply the key's serializer and stringify; None means omit."""
        serializer = self.serializers.get(key)
        if serializer is not None:
            value = serializer(value)
            if value is None:
                return None
        return self.stringify(value)

    def as_json(
        self,
        rank: int,
        obj: Any = None,
        msg: Any = None,
        *,
        time: str = "",
        bindings: str = "",
    ) -> str:
        """
        Serialize a single log call.

        Args:
            rank: Numeric level of the call
            obj: Structured payload, an exception, or None
            msg: Message text, an exception, or None
            time: Pre-rendered timestamp fragment (e.g. ``,"time":1700000000000``)
            bindings: Pre-rendered child bindings fragment

        Returns:
            The complete JSON line, newline-terminated

        Raises:
            UnknownLevelError: If ``rank`` is not registered
        """
        has_obj = obj is not None
        obj_is_error = has_obj and is_error(obj)
        msg_is_error = is_error(msg)

        err: BaseException | None = None
        if obj_is_error:
            err = obj
        elif msg_is_error:
            err = msg

        stack_as_message = msg_is_error or (not msg and obj_is_error)

        stack = stack_of(err) if err is not None else None
        if stack_as_message:
            text = stack
        elif msg:
            text = str(msg)
        else:
            text = None

        data = self.table.lookup(rank) + time
        if text is not None:
            data += ',"' + MESSAGE_KEY + '":' + json.dumps(text, ensure_ascii=False)

        # Bindings go first so explicit payload fields win when the line is parsed
        data += bindings

        fields: dict[str, Any] = {}
        if obj_is_error:
            fields = error_fields(obj)
        elif has_obj:
            fields = own_fields(obj)

        if err is not None:
            data += ',"type":' + json.dumps(type(err).__name__)
            if not stack_as_message:
                data += ',"stack":' + (self.stringify(stack) or '""')
            if self.service_context is not None and (
                stack_as_message or (has_obj and _wants_report_location(obj))
            ):
                context = self.stringify(self.service_context)
                if context is not None:
                    data += ',"serviceContext":' + context

            if not obj_is_error:
                # Explicit payload fields win over the error's attributes
                fields = {**error_fields(err), **fields}

        for key, value in fields.items():
            encoded = self.encode_field(key, value)
            if encoded is not None:
                data += ',' + json.dumps(key, ensure_ascii=False) + ':' + encoded

        return escape_surrogates(data + RECORD_END)
