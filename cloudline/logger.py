"""
Logger construction for cloudline.

``create_logger`` wires a severity table, a record serializer and a stream
engine into a ``Logger``. The logger exposes one method per level:

    log = create_logger(service_context=ServiceContext(service="api"))
    log.info("listening on %s", port)
    log.warn({"user": user_id}, "slow request")
    log.error(exc)                       # traceback becomes the message
    log.error({"reportLocation": loc}, exc)
"""

from collections.abc import Mapping
from functools import partial
from typing import Any

from cloudline.config import LoggerOptions
from cloudline.core.discovery import default_service_context
from cloudline.core.engine import LogEngine, StreamEngine, TimeFn, epoch_time, serialize_bindings
from cloudline.core.serializer import RecordSerializer, is_error
from cloudline.core.severity import CUSTOM_LEVELS, SeverityLevel, SeverityTable
from cloudline.errors import UnknownLevelError
from cloudline.schemas.service_context import ServiceContext
from cloudline.utils.logger import get_logger

logger = get_logger(__name__)

LEVEL_ALIASES = {"warning": "warn", "critical": "fatal"}


def format_message(msg: str, args: tuple[Any, ...]) -> str:
    """
    Apply printf-style arguments to a message.

    A single mapping argument fills named placeholders, as in stdlib logging.
    Arguments the template cannot take are appended, separated by spaces.
    """
    values: Any = args
    if len(args) == 1 and isinstance(args[0], Mapping):
        values = args[0]
    try:
        return msg % values
    except (TypeError, ValueError, KeyError):
        return " ".join([msg, *(str(arg) for arg in args)])


class Logger:
    """
    Structured logger emitting one JSON line per call.

    Level methods accept the same call forms:

    - ``info("message %s", arg)``
    - ``info({"key": "value"}, "message")``
    - ``info({"key": "value"}, exc)``
    - ``info(exc)``
    - ``info({"key": "value"})``

    Levels added with ``add_level`` are available as attributes too.
    """

    def __init__(
        self,
        serializer: RecordSerializer,
        engine: LogEngine,
        time: TimeFn = epoch_time,
        bindings: Mapping[str, Any] | None = None,
        bindings_fragment: str = "",
    ) -> None:
        self._serializer = serializer
        self._table = serializer.table
        self._engine = engine
        self._time = time
        self._bindings = dict(bindings or {})
        self._bindings_fragment = bindings_fragment

    def __getattr__(self, name: str) -> Any:
        table = self.__dict__.get("_table")
        if table is not None and name in table.levels:
            return partial(self.log, name)
        raise AttributeError(f"{type(self).__name__!r} object has no attribute {name!r}")

    @property
    def service_context(self) -> ServiceContext | None:
        return self._serializer.service_context

    @property
    def levels(self) -> Mapping[str, int]:
        """Level name to rank for every registered level."""
        return self._table.levels

    @property
    def level_rank(self) -> int:
        return self._engine.level_rank

    @property
    def level(self) -> str:
        """Name of the minimum level that is written."""
        return self._table.name_of(self._engine.level_rank)

    @level.setter
    def level(self, name: str) -> None:
        self._engine.level_rank = self._rank(name)

    def _rank(self, level: str | int) -> int:
        if isinstance(level, int):
            if level not in self._table:
                raise UnknownLevelError(level)
            return level
        name = level.strip().lower()
        return self._table.rank_of(LEVEL_ALIASES.get(name, name))

    def is_level_enabled(self, level: str | int) -> bool:
        return self._engine.is_level_enabled(self._rank(level))

    def add_level(self, name: str, rank: int, severity: str | None = None) -> SeverityLevel:
        """
        Register a new level on this logger and its children.

        Args:
            name: Level name; becomes a logger method
            rank: Numeric rank
            severity: Severity name; defaults to ``name.upper()``

        Raises:
            ValueError: If ``name`` would shadow a Logger attribute
        """
        if hasattr(type(self), name) and name not in self._table.levels:
            raise ValueError(f"Level name {name!r} clashes with a Logger attribute")
        return self._table.register(name, rank, severity)

    def bindings(self) -> dict[str, Any]:
        """Fields bound to this logger, including inherited ones."""
        return dict(self._bindings)

    def child(self, bindings: Mapping[str, Any]) -> "Logger":
        """
        Create a logger that adds ``bindings`` to every record.

        The child shares this logger's levels, service context and output; its
        level starts at this logger's level and can be changed independently.
        """
        fragment = self._bindings_fragment + serialize_bindings(
            bindings, self._serializer.encode_field
        )
        engine = self._engine
        if isinstance(engine, StreamEngine):
            engine = engine.with_level(engine.level_rank)

        return Logger(
            self._serializer,
            engine,
            time=self._time,
            bindings={**self._bindings, **bindings},
            bindings_fragment=fragment,
        )

    def format(self, level: str | int, obj: Any = None, msg: Any = None, *args: Any) -> str:
        """Build the JSON line for a call without checking the level or writing it."""
        rank = self._rank(level)

        if isinstance(obj, str):
            if msg is not None:
                args = (msg, *args)
            obj, msg = None, obj
        if args and obj is None and is_error(args[-1]):
            # info("failed", exc): the exception takes the object slot
            obj, args = args[-1], args[:-1]
        if args and isinstance(msg, str):
            msg = format_message(msg, args)

        return self._serializer.as_json(
            rank,
            obj,
            msg,
            time=self._time(),
            bindings=self._bindings_fragment,
        )

    def log(self, level: str | int, obj: Any = None, msg: Any = None, *args: Any) -> None:
        """Write a record at ``level`` if that level is enabled."""
        if not self._engine.is_level_enabled(self._rank(level)):
            return
        self._engine.write(self.format(level, obj, msg, *args))

    def trace(self, obj: Any = None, msg: Any = None, *args: Any) -> None:
        self.log("trace", obj, msg, *args)

    def debug(self, obj: Any = None, msg: Any = None, *args: Any) -> None:
        self.log("debug", obj, msg, *args)

    def info(self, obj: Any = None, msg: Any = None, *args: Any) -> None:
        self.log("info", obj, msg, *args)

    def notice(self, obj: Any = None, msg: Any = None, *args: Any) -> None:
        self.log("notice", obj, msg, *args)

    def warn(self, obj: Any = None, msg: Any = None, *args: Any) -> None:
        self.log("warn", obj, msg, *args)

    warning = warn

    def error(self, obj: Any = None, msg: Any = None, *args: Any) -> None:
        self.log("error", obj, msg, *args)

    def fatal(self, obj: Any = None, msg: Any = None, *args: Any) -> None:
        self.log("fatal", obj, msg, *args)

    def alert(self, obj: Any = None, msg: Any = None, *args: Any) -> None:
        self.log("alert", obj, msg, *args)

    def emergency(self, obj: Any = None, msg: Any = None, *args: Any) -> None:
        self.log("emergency", obj, msg, *args)


def create_logger(options: LoggerOptions | None = None, **overrides: Any) -> Logger:
    """
    Build a logger.

    Args:
        options: Logger options (default: ``LoggerOptions()``)
        **overrides: Option values that take precedence over ``options``

    Returns:
        Configured Logger

    Raises:
        ServiceContextError: If no service context is set and none can be discovered
        UnknownLevelError: If ``level`` is not a registered level name
    """
    if options is None:
        options = LoggerOptions(**overrides)
    elif overrides:
        options = LoggerOptions.model_validate({**dict(options), **overrides})

    table = SeverityTable.standard()
    for name, rank, severity in CUSTOM_LEVELS:
        table.register(name, rank, severity)

    service_context = options.service_context or default_service_context()

    serializer = RecordSerializer(
        table,
        service_context=service_context,
        stringify=options.stringify,
        serializers=options.serializers,
    )

    level = LEVEL_ALIASES.get(options.level, options.level)
    engine = StreamEngine(
        stream=options.stream,
        level_rank=table.rank_of(level),
        enabled=options.enabled,
    )

    instance = Logger(
        serializer,
        engine,
        time=options.timestamp,
        bindings=options.base,
        bindings_fragment=serialize_bindings(options.base, serializer.encode_field),
    )

    logger.info(
        f"Created logger for service {service_context.service!r}",
        extra={"context": {"level": level, "version": service_context.version}},
    )
    return instance


plack = create_logger
