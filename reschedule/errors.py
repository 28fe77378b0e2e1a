"""Error taxonomy shared by the schedule client, store and dispatcher."""

from __future__ import annotations


class ReScheduleError(Exception):
    """Base class for recoverable failures handled at the command boundary."""


class UpstreamUnavailable(ReScheduleError):
    """The timetable API answered with a non-2xx status or could not be reached."""

    def __init__(self, status_code: int | None, detail: str = "") -> None:
        self.status_code = status_code
        message = f"Upstream request failed (status={status_code})"
        if detail:
            message = f"{message}: {detail}"
        super().__init__(message)


class DecodeError(ReScheduleError):
    """An upstream payload did not have the expected shape."""


class FormatError(ReScheduleError):
    """A time token could not be parsed as ``H.mm``."""


class StoreError(ReScheduleError):
    """The chat-state store could not be read or written."""
