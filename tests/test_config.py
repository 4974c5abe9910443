"""Tests for config module."""

import pytest
from pydantic import ValidationError

from cloudline.config import LoggerOptions
from cloudline.core.engine import epoch_time, iso_time
from cloudline.core.serializer import default_stringify
from cloudline.schemas import ServiceContext


class TestLoggerOptions:
    """Tests for LoggerOptions model."""

    def test_defaults(self) -> None:
        """Test default option values."""
        options = LoggerOptions()

        assert options.level == "info"
        assert options.enabled is True
        assert options.base == {}
        assert options.service_context is None
        assert options.serializers == {}
        assert options.timestamp is epoch_time
        assert options.stringify is default_stringify
        assert options.stream is None

    def test_level_is_normalized(self) -> None:
        """Test that level names are lower-cased and stripped."""
        assert LoggerOptions(level=" DEBUG ").level == "debug"

    def test_empty_level(self) -> None:
        """Test that an empty level is rejected."""
        with pytest.raises(ValidationError):
            LoggerOptions(level="")

    def test_service_context_from_dict(self) -> None:
        """Test that the service context is validated from a mapping."""
        options = LoggerOptions(service_context={"service": "api", "version": "1"})

        assert options.service_context == ServiceContext(service="api", version="1")

    def test_timestamp_must_be_callable(self) -> None:
        """Test that non-callable timestamps are rejected."""
        with pytest.raises(ValidationError):
            LoggerOptions(timestamp="now")

    def test_base_dicts_are_not_shared(self) -> None:
        """Test that each instance gets its own base dict."""
        first = LoggerOptions()
        first.base["a"] = 1

        assert LoggerOptions().base == {}


class TestFromEnv:
    """Tests for LoggerOptions.from_env."""

    def test_level_from_env(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test that LOG_LEVEL sets the level."""
        monkeypatch.setenv("LOG_LEVEL", "WARN")

        assert LoggerOptions.from_env().level == "warn"

    def test_overrides_win(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test that explicit overrides take precedence."""
        monkeypatch.setenv("LOG_LEVEL", "warn")

        options = LoggerOptions.from_env(level="debug", timestamp=iso_time)

        assert options.level == "debug"
        assert options.timestamp is iso_time

    def test_unset_env(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test the default when LOG_LEVEL is unset."""
        monkeypatch.delenv("LOG_LEVEL", raising=False)

        assert LoggerOptions.from_env().level == "info"
