"""Parsing of compact ``H.mm`` time tokens used by the timetable API."""

from __future__ import annotations

import re
from datetime import time, timedelta

from reschedule.errors import FormatError

_TOKEN_RE = re.compile(r"([0-9]{1,2})\.([0-9]{2})")


def parse_time(token: str) -> time:
    """Parse an ``H.mm`` token (24-hour clock) into a naive time of day.

    Raises:
        FormatError: if the token has any other shape or is out of range.
    """
    match = _TOKEN_RE.fullmatch(token) if isinstance(token, str) else None
    if match is None:
        raise FormatError(f"Invalid time token: {token!r}")
    hour, minute = int(match.group(1)), int(match.group(2))
    if hour > 23 or minute > 59:
        raise FormatError(f"Time token out of range: {token!r}")
    return time(hour, minute)


def since_midnight(value: time) -> timedelta:
    """Offset of a time of day from midnight."""
    return timedelta(
        hours=value.hour,
        minutes=value.minute,
        seconds=value.second,
        microseconds=value.microsecond,
    )
