"""
Bridge from the standard ``logging`` module to cloudline records.

Attach ``CloudlineHandler`` to any stdlib logger and its records are written in
the same JSON line format as ``cloudline.Logger``:

    logging.getLogger().addHandler(CloudlineHandler(service_context=ctx))
"""

import logging
import sys
from collections.abc import Mapping
from typing import Any, TextIO

from cloudline.core.engine import TimeFn, epoch_time, serialize_bindings
from cloudline.core.serializer import RecordSerializer, Serializers, Stringify, default_stringify
from cloudline.core.severity import CUSTOM_LEVELS, SeverityTable
from cloudline.schemas.service_context import ServiceContext

# stdlib level -> cloudline rank
STDLIB_RANKS: dict[int, int] = {
    logging.NOTSET: 20,
    logging.DEBUG: 20,
    logging.INFO: 30,
    logging.WARNING: 40,
    logging.ERROR: 50,
    logging.CRITICAL: 60,
}


class CloudlineHandler(logging.Handler):
    """
    Handler that serializes stdlib log records as cloudline JSON lines.

    Each record carries a ``logger`` field with the logger name, plus the
    mapping passed as ``extra={"context": {...}}`` when there is one. When the
    record has exception info the exception is logged next to the message, so
    its traceback goes to the ``stack`` field. A record with an empty message
    uses the traceback as its message instead.
    """

    def __init__(
        self,
        stream: TextIO | None = None,
        service_context: ServiceContext | None = None,
        level: int = logging.NOTSET,
        time: TimeFn = epoch_time,
        stringify: Stringify = default_stringify,
        serializers: Serializers | None = None,
    ) -> None:
        super().__init__(level)
        self.stream = stream
        self.time = time

        table = SeverityTable.standard()
        for name, rank, severity in CUSTOM_LEVELS:
            table.register(name, rank, severity)

        self.serializer = RecordSerializer(
            table,
            service_context=service_context,
            stringify=stringify,
            serializers=serializers,
        )

    def rank_for(self, levelno: int) -> int:
        """Map a stdlib level number to the nearest registered rank at or below it."""
        if levelno in STDLIB_RANKS:
            return STDLIB_RANKS[levelno]

        ranks = self.serializer.table.ranks()
        below = [rank for rank in ranks if rank <= levelno]
        return below[-1] if below else ranks[0]

    def build_payload(self, record: logging.LogRecord) -> dict[str, Any]:
        payload: dict[str, Any] = {"logger": record.name}
        context = getattr(record, "context", None)
        if isinstance(context, Mapping):
            payload.update(context)
        return payload

    def format(self, record: logging.LogRecord) -> str:
        err = None
        if record.exc_info and record.exc_info[1] is not None:
            err = record.exc_info[1]

        # Record fields ride in the bindings fragment so the exception can take
        # the object slot and keep the formatted text as the message
        bindings = serialize_bindings(self.build_payload(record), self.serializer.encode_field)

        return self.serializer.as_json(
            self.rank_for(record.levelno),
            err,
            record.getMessage(),
            time=self.time(),
            bindings=bindings,
        )

    def emit(self, record: logging.LogRecord) -> None:
        try:
            line = self.format(record)
            stream = self.stream if self.stream is not None else sys.stdout
            self.acquire()
            try:
                stream.write(line)
                stream.flush()
            finally:
                self.release()
        except RecursionError:
            raise
        except Exception:
            self.handleError(record)
