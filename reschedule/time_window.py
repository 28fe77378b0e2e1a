"""Remaining-time computation for the class or break in progress."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import time, timedelta

from reschedule.models import Pair, WeekDay
from reschedule.timeparse import parse_time, since_midnight

PAIR_DURATION = timedelta(minutes=95)


@dataclass(frozen=True, slots=True)
class InClass:
    minutes_remaining: int


@dataclass(frozen=True, slots=True)
class InBreak:
    minutes_remaining: int


@dataclass(frozen=True, slots=True)
class Indeterminate:
    pass


Outcome = InClass | InBreak | Indeterminate


def sorted_pairs(day: WeekDay) -> list[Pair]:
    """Pairs of a day ordered by parsed start time.

    Raises:
        FormatError: if any pair carries an unparseable time token.
    """
    return sorted(day.pairs, key=lambda pair: parse_time(pair.time))


def _minutes(delta: timedelta) -> int:
    return round(delta.total_seconds() / 60)


def time_left(day: WeekDay, moment: time) -> Outcome:
    """Minutes left in the current pair or break at ``moment``.

    Each pair occupies ``[start, start + 95min)``. Boundaries are exclusive, so
    a moment exactly at a start or end matches nothing. Before the first pair,
    after the last one, or on an empty day the outcome is ``Indeterminate``.
    """
    now = since_midnight(moment)
    prev_end: timedelta | None = None
    for pair in sorted_pairs(day):
        start = since_midnight(parse_time(pair.time))
        end = start + PAIR_DURATION
        if start < now < end:
            return InClass(_minutes(end - now))
        if prev_end is not None and prev_end < now < start:
            return InBreak(_minutes(start - now))
        prev_end = end
    return Indeterminate()
