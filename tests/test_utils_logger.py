"""Tests for utils.logger module."""

import json
import logging

import pytest

from cloudline.utils.logger import JSONFormatter, default_level, get_logger


class TestGetLogger:
    """Tests for get_logger function."""

    def test_get_logger_basic(self) -> None:
        """Test getting logger with name."""
        logger = get_logger("cloudline.test.module")

        assert logger.name == "cloudline.test.module"
        assert isinstance(logger, logging.Logger)

    def test_logger_has_single_handler(self) -> None:
        """Test that repeated calls don't stack handlers."""
        logger = get_logger("cloudline.test.handlers")
        get_logger("cloudline.test.handlers")

        assert len(logger.handlers) == 1

    def test_logger_same_name_returns_same_instance(self) -> None:
        """Test that getting logger with same name returns same instance."""
        assert get_logger("cloudline.same") is get_logger("cloudline.same")

    def test_logger_does_not_propagate(self) -> None:
        """Test that diagnostics stay out of the application's root logger."""
        assert get_logger("cloudline.test.propagate").propagate is False

    def test_explicit_level(self) -> None:
        """Test logger level configuration."""
        logger = get_logger("cloudline.test.level", level=logging.ERROR)

        assert logger.level == logging.ERROR


class TestDefaultLevel:
    """Tests for default_level function."""

    def test_quiet_by_default(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test that diagnostics are quiet without CLOUDLINE_DEBUG."""
        monkeypatch.delenv("CLOUDLINE_DEBUG", raising=False)

        assert default_level() == logging.WARNING

    def test_debug_env(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test that CLOUDLINE_DEBUG enables debug diagnostics."""
        monkeypatch.setenv("CLOUDLINE_DEBUG", "1")

        assert default_level() == logging.DEBUG


class TestJSONFormatter:
    """Tests for JSONFormatter class."""

    def test_format_with_context(self) -> None:
        """Test that context and core fields are rendered."""
        record = logging.LogRecord(
            "cloudline.x", logging.INFO, __file__, 1, "hello %s", ("there",), None
        )
        record.context = {"rank": 35}

        data = json.loads(JSONFormatter().format(record))

        assert data["level"] == "INFO"
        assert data["logger"] == "cloudline.x"
        assert data["message"] == "hello there"
        assert data["context"] == {"rank": 35}
