"""
Severity table for cloudline.

Cloud Logging understands a small vocabulary of severity names, coarser than the
numeric level ranks used by the logger. Every registered rank maps to a
pre-rendered JSON fragment (``{"severity":"INFO"``) so the hot path of a log call
is a single dictionary lookup instead of string formatting.
"""

import json
from collections.abc import Mapping
from types import MappingProxyType

from pydantic import BaseModel, ConfigDict

from cloudline.errors import UnknownLevelError
from cloudline.utils.logger import get_logger

logger = get_logger(__name__)


class SeverityLevel(BaseModel):
    """
    A numeric rank paired with its Cloud Logging severity name.

    Attributes:
        rank: Internal numeric level (lower = more verbose)
        severity: Upper-case severity name
    """

    rank: int
    severity: str

    model_config = ConfigDict(frozen=True)

    @property
    def fragment(self) -> str:
        """The opening JSON fragment for records at this level."""
        return '{"severity":' + json.dumps(self.severity, ensure_ascii=True)


# (level name, rank, severity); two ranks intentionally share DEBUG
STANDARD_LEVELS: tuple[tuple[str, int, str], ...] = (
    ("trace", 10, "DEBUG"),
    ("debug", 20, "DEBUG"),
    ("info", 30, "INFO"),
    ("warn", 40, "WARNING"),
    ("error", 50, "ERROR"),
    ("fatal", 60, "CRITICAL"),
)

# Registered by every logger on construction. alert and emergency are more
# severe than fatal but reuse its severity name.
CUSTOM_LEVELS: tuple[tuple[str, int, str | None], ...] = (
    ("notice", 35, None),
    ("alert", 70, "CRITICAL"),
    ("emergency", 80, "CRITICAL"),
)


class SeverityTable:
    """
    Mapping from numeric rank to severity fragment, plus level name to rank.

    The table is filled while a logger is being built and only read afterwards.
    It is not synchronized: register levels before logging from other threads.
    """

    def __init__(self) -> None:
        self._levels: dict[int, SeverityLevel] = {}
        self._fragments: dict[int, str] = {}
        self._names: dict[str, int] = {}

    @classmethod
    def standard(cls) -> "SeverityTable":
        """Create a table seeded with the six standard levels."""
        table = cls()
        for name, rank, severity in STANDARD_LEVELS:
            table.register(name, rank, severity)
        return table

    def register(self, name: str, rank: int, severity: str | None = None) -> SeverityLevel:
        """
        Register (or overwrite) a named level at ``rank``.

        Args:
            name: Level name, used for the logger method and level lookups
            rank: Numeric rank; may sit above or below existing levels
            severity: Severity name override; defaults to ``name.upper()``

        Returns:
            The registered SeverityLevel
        """
        level = SeverityLevel(rank=rank, severity=(severity or name).upper())
        self._levels[rank] = level
        self._fragments[rank] = level.fragment
        self._names[name] = rank

        logger.debug(
            f"Registered level {name!r} at rank {rank}",
            extra={"context": {"level": name, "rank": rank, "severity": level.severity}},
        )
        return level

    def lookup(self, rank: int) -> str:
        """
        Return the severity fragment for ``rank``.

        Raises:
            UnknownLevelError: If ``rank`` was never registered
        """
        try:
            return self._fragments[rank]
        except KeyError:
            raise UnknownLevelError(rank) from None

    def severity_of(self, rank: int) -> str:
        """Return the bare severity name registered for ``rank``."""
        try:
            return self._levels[rank].severity
        except KeyError:
            raise UnknownLevelError(rank) from None

    def rank_of(self, name: str) -> int:
        """Return the rank registered for level ``name``."""
        try:
            return self._names[name]
        except KeyError:
            raise UnknownLevelError(name) from None

    def name_of(self, rank: int) -> str:
        """Return the most recently registered level name for ``rank``."""
        for name, value in reversed(self._names.items()):
            if value == rank:
                return name
        raise UnknownLevelError(rank)

    @property
    def levels(self) -> Mapping[str, int]:
        """Read-only view of level name to rank."""
        return MappingProxyType(self._names)

    def ranks(self) -> list[int]:
        """Registered ranks in ascending order."""
        return sorted(self._fragments)

    def copy(self) -> "SeverityTable":
        """Return an independent copy of this table."""
        clone = SeverityTable()
        clone._levels = dict(self._levels)
        clone._fragments = dict(self._fragments)
        clone._names = dict(self._names)
        return clone

    def __contains__(self, rank: object) -> bool:
        return rank in self._fragments

    def __len__(self) -> int:
        return len(self._fragments)
