"""Configuration for cloudline loggers."""

import os
from collections.abc import Callable
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from cloudline.core.engine import TimeFn, epoch_time
from cloudline.core.serializer import Stringify, default_stringify
from cloudline.schemas.service_context import ServiceContext

LEVEL_ENV_VAR = "LOG_LEVEL"


class LoggerOptions(BaseModel):
    """Options for building a logger.

    Only ``level`` can be taken from the environment; everything else is
    set in code.
    """

    level: str = Field(
        default="info",
        min_length=1,
        description="Minimum level name to emit",
    )
    enabled: bool = Field(
        default=True,
        description="When False the logger writes nothing",
    )
    base: dict[str, Any] = Field(
        default_factory=dict,
        description="Fields bound to every record (no hostname or pid by default)",
    )
    service_context: ServiceContext | None = Field(
        default=None,
        description="Service identity for error reporting; discovered if unset",
    )
    serializers: dict[str, Callable[[Any], Any]] = Field(
        default_factory=dict,
        description="Per-key value transforms applied before stringify",
    )
    timestamp: TimeFn = Field(
        default=epoch_time,
        description="Returns the timestamp fragment for each record",
    )
    stringify: Stringify = Field(
        default=default_stringify,
        description="Encodes a field value as JSON, or returns None to omit it",
    )
    stream: Any = Field(
        default=None,
        description="Writable text stream (default: sys.stdout)",
    )

    model_config = ConfigDict(arbitrary_types_allowed=True)

    @field_validator("level")
    @classmethod
    def normalize_level(cls, v: str) -> str:
        """Level names are matched case-insensitively."""
        return v.strip().lower()

    @classmethod
    def from_env(cls, **overrides: Any) -> "LoggerOptions":
        """Create options from environment variables with code overrides.

        Environment variables:
        - LOG_LEVEL: Minimum level name (e.g. "debug", "warn")

        Args:
            **overrides: Values that take precedence over the environment

        Returns:
            Configured LoggerOptions instance
        """
        env_config: dict[str, Any] = {}

        level = os.getenv(LEVEL_ENV_VAR)
        if level:
            env_config["level"] = level

        return cls(**{**env_config, **overrides})
