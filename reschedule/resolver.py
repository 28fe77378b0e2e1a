"""Week and day selection over a two-week schedule."""

from __future__ import annotations

import enum
from typing import Sequence

from reschedule.models import DAYS_IN_WEEK, Schedule, WeekDay

SATURDAY = 6
SUNDAY = 7


class WeekOption(enum.Enum):
    CURRENT = "current"
    NEXT = "next"


class DayOption(enum.Enum):
    TODAY = "today"
    TOMORROW = "tomorrow"


class DayOff(enum.Enum):
    """Sunday is never looked up."""

    DAY_OFF = "day_off"


class OutOfRange(enum.Enum):
    """The computed index does not exist in the resolved week."""

    OUT_OF_RANGE = "out_of_range"


DAY_OFF = DayOff.DAY_OFF
OUT_OF_RANGE = OutOfRange.OUT_OF_RANGE


def shows_first_week(current_week: int, week_toggle: bool, week_option: WeekOption) -> bool:
    """Compose server parity, the chat override and the relative request.

    Each of the three inputs independently flips the same two-valued choice.
    """
    return ((current_week == 1) ^ week_toggle) ^ (week_option is WeekOption.NEXT)


def select_week(
    schedule: Schedule,
    current_week: int,
    week_toggle: bool,
    week_option: WeekOption,
) -> Sequence[WeekDay]:
    if shows_first_week(current_week, week_toggle, week_option):
        return schedule.first_week
    return schedule.second_week


def resolve_day_index(
    current_day: int,
    day_option: DayOption,
    week_length: int = DAYS_IN_WEEK,
) -> int | DayOff | OutOfRange:
    """Map a 1-based server day and a day option to a 0-based index.

    Saturday+tomorrow and Sunday+today are days off. Sunday+tomorrow wraps to
    index 0 of the same resolved week slice, without crossing into the other
    week track.
    """
    if day_option is DayOption.TODAY:
        if current_day == SUNDAY:
            return DAY_OFF
        index = current_day - 1
    else:
        if current_day == SATURDAY:
            return DAY_OFF
        index = 0 if current_day == SUNDAY else current_day
    if index < 0 or index >= week_length:
        return OUT_OF_RANGE
    return index
