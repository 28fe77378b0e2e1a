import pytest

from reschedule.models import Schedule, WeekDay
from reschedule.resolver import (
    DAY_OFF,
    OUT_OF_RANGE,
    DayOption,
    WeekOption,
    resolve_day_index,
    select_week,
    shows_first_week,
)

SCHEDULE = Schedule(
    first_week=[WeekDay(day=f"first-{i}") for i in range(7)],
    second_week=[WeekDay(day=f"second-{i}") for i in range(7)],
)


# ===========================================================================
# select_week: all eight parity/toggle/option combinations
# ===========================================================================


@pytest.mark.parametrize(
    ("current_week", "week_toggle", "week_option", "expect_first"),
    [
        (1, False, WeekOption.CURRENT, True),
        (1, False, WeekOption.NEXT, False),
        (1, True, WeekOption.CURRENT, False),
        (1, True, WeekOption.NEXT, True),
        (2, False, WeekOption.CURRENT, False),
        (2, False, WeekOption.NEXT, True),
        (2, True, WeekOption.CURRENT, True),
        (2, True, WeekOption.NEXT, False),
    ],
)
def test_select_week_truth_table(current_week, week_toggle, week_option, expect_first):
    assert shows_first_week(current_week, week_toggle, week_option) is expect_first
    week = select_week(SCHEDULE, current_week, week_toggle, week_option)
    expected = SCHEDULE.first_week if expect_first else SCHEDULE.second_week
    assert week == expected


def test_toggle_and_next_cancel_out():
    for current_week in (1, 2):
        plain = select_week(SCHEDULE, current_week, False, WeekOption.CURRENT)
        flipped_twice = select_week(SCHEDULE, current_week, True, WeekOption.NEXT)
        assert plain == flipped_twice


# ===========================================================================
# resolve_day_index
# ===========================================================================


@pytest.mark.parametrize("current_day", range(1, 7))
def test_today_is_current_day_minus_one(current_day):
    assert resolve_day_index(current_day, DayOption.TODAY) == current_day - 1


@pytest.mark.parametrize("current_day", range(1, 6))
def test_tomorrow_is_next_index(current_day):
    assert resolve_day_index(current_day, DayOption.TOMORROW) == current_day


def test_saturday_tomorrow_is_day_off():
    assert resolve_day_index(6, DayOption.TOMORROW) is DAY_OFF


def test_sunday_today_is_day_off():
    assert resolve_day_index(7, DayOption.TODAY) is DAY_OFF


def test_sunday_tomorrow_wraps_to_monday_of_same_week_slice():
    # The week slice is not advanced: Monday comes from the week already resolved.
    assert resolve_day_index(7, DayOption.TOMORROW) == 0


def test_index_past_short_week_is_out_of_range():
    assert resolve_day_index(6, DayOption.TODAY, week_length=5) is OUT_OF_RANGE
    assert resolve_day_index(5, DayOption.TOMORROW, week_length=5) is OUT_OF_RANGE


def test_day_off_takes_precedence_over_short_week():
    assert resolve_day_index(7, DayOption.TODAY, week_length=5) is DAY_OFF
