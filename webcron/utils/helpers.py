"""Common utility functions."""

import re
from datetime import datetime, timezone

START_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

_UNITS = {
    "ns": 1e-9,
    "us": 1e-6,
    "µs": 1e-6,  # U+00B5 micro sign
    "μs": 1e-6,  # U+03BC greek mu
    "ms": 1e-3,
    "s": 1.0,
    "m": 60.0,
    "h": 3600.0,
}

_COMPONENT = re.compile(r"(\d+(?:\.\d*)?|\.\d+)(ns|us|µs|μs|ms|s|m|h)")


class DurationError(ValueError):
    """Raised when a duration string cannot be parsed."""


def parse_duration(value: str) -> float:
    """
    Parse a duration string such as "1h30m", "100ms" or "1.5h".

    The accepted grammar is an optional sign followed by one or more
    decimal numbers, each with a unit suffix (ns, us, ms, s, m, h).
    The bare string "0" is also accepted.

    Args:
        value: Duration string.

    Returns:
        Duration in seconds.

    Raises:
        DurationError: If the string is not a valid duration.
    """
    if not isinstance(value, str):
        raise DurationError(f"invalid duration {value!r}")

    text = value
    sign = 1.0
    if text[:1] in ("+", "-"):
        sign = -1.0 if text[0] == "-" else 1.0
        text = text[1:]

    if text == "0":
        return 0.0
    if not text:
        raise DurationError(f"invalid duration {value!r}")

    total = 0.0
    pos = 0
    while pos < len(text):
        match = _COMPONENT.match(text, pos)
        if not match:
            raise DurationError(f"invalid duration {value!r}")
        number, unit = match.groups()
        total += float(number) * _UNITS[unit]
        pos = match.end()

    return sign * total


def parse_start_date(value: str | None) -> datetime | None:
    """
    Parse a job start date ("YYYY-MM-DD HH:MM:SS", UTC).

    Returns None when the value is empty or malformed.
    """
    if not value:
        return None
    try:
        parsed = datetime.strptime(value, START_DATE_FORMAT)
    except ValueError:
        return None
    return parsed.replace(tzinfo=timezone.utc)


def format_error(error: Exception) -> str:
    """
    Format an exception for display.

    Args:
        error: The exception to format.

    Returns:
        Human-readable error string.
    """
    error_type = type(error).__name__
    message = str(error)
    if not message:
        return error_type
    return f"{error_type}: {message}"
