"""Utilities for cloudline."""

from .logger import JSONFormatter, get_logger

__all__ = [
    "JSONFormatter",
    "get_logger",
]
