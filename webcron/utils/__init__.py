"""Utility functions module."""

from webcron.utils.helpers import DurationError, format_error, parse_duration, parse_start_date

__all__ = ["DurationError", "parse_duration", "parse_start_date", "format_error"]
