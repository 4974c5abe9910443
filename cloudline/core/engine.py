"""
Leveled output engine for cloudline.

The engine owns everything around a record that is not serialization: whether a
level is enabled, where finished lines are written, how the timestamp fragment
is rendered and how child bindings are pre-serialized. The record serializer is
plugged in by the logger; the engine never builds records itself.
"""

import json
import sys
import threading
import time
from collections.abc import Callable, Mapping
from datetime import UTC, datetime
from typing import Any, Protocol, TextIO, runtime_checkable

from cloudline.utils.logger import get_logger

logger = get_logger(__name__)

TimeFn = Callable[[], str]


@runtime_checkable
class LogEngine(Protocol):
    """Capabilities the logger needs from an output engine."""

    def is_level_enabled(self, rank: int) -> bool:
        ...

    def write(self, line: str) -> None:
        ...


def epoch_time() -> str:
    """Milliseconds since the epoch: ``,"time":1700000000000``."""
    return ',"time":' + str(time.time_ns() // 1_000_000)


def unix_time() -> str:
    """Whole seconds since the epoch: ``,"time":1700000000``."""
    return ',"time":' + str(int(time.time()))


def iso_time() -> str:
    """ISO 8601 UTC timestamp: ``,"time":"2024-01-01T00:00:00.000Z"``."""
    now = datetime.now(UTC).isoformat(timespec="milliseconds").replace("+00:00", "Z")
    return ',"time":"' + now + '"'


def no_time() -> str:
    """Leave the timestamp out; the ingestion agent will stamp the line."""
    return ""


class StreamEngine:
    """
    Engine that writes lines to a text stream.

    Attributes:
        stream: Destination (default: sys.stdout at write time)
        level_rank: Minimum rank that is written
        enabled: When False nothing is written at any level
    """

    def __init__(
        self,
        stream: TextIO | None = None,
        level_rank: int = 30,
        enabled: bool = True,
    ) -> None:
        self.stream = stream
        self.level_rank = level_rank
        self.enabled = enabled
        self._lock = threading.Lock()

    def is_level_enabled(self, rank: int) -> bool:
        return self.enabled and rank >= self.level_rank

    def write(self, line: str) -> None:
        stream = self.stream if self.stream is not None else sys.stdout
        with self._lock:
            stream.write(line)
            stream.flush()

    def with_level(self, level_rank: int) -> "StreamEngine":
        """Engine sharing this one's stream and lock, with its own level."""
        engine = StreamEngine(self.stream, level_rank, self.enabled)
        engine._lock = self._lock
        return engine


def serialize_bindings(
    bindings: Mapping[str, Any],
    encode: Callable[[str, Any], str | None],
) -> str:
    """
    Render bindings as a ``,"key":value`` fragment.

    Args:
        bindings: Key/value pairs to bind
        encode: Field encoder; returning None drops the pair

    Returns:
        The fragment, empty when nothing survives encoding
    """
    fragment = ""
    for key, value in bindings.items():
        encoded = encode(key, value)
        if encoded is None:
            logger.debug(
                f"Dropping binding {key!r}",
                extra={"context": {"key": key}},
            )
            continue
        fragment += ',' + encode_key(key) + ':' + encoded
    return fragment


def encode_key(key: str) -> str:
    """JSON-encode an object key."""
    return json.dumps(str(key), ensure_ascii=False)
