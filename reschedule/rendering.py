"""Telegram HTML formatting of schedule results."""

from __future__ import annotations

from html import escape
from typing import Sequence

from reschedule.models import Pair, Schedule, WeekDay
from reschedule.time_window import InBreak, InClass, Outcome, sorted_pairs

GROUP_NOT_SET = "Group is not set. Use /setgroup <group name>."
GROUP_ARG_MISSING = "Please specify a group, e.g. /setgroup IP-11"
GROUP_SET = "Group set: {name}"
GROUP_NOT_FOUND = "Group {name} was not found"
WEEK_TOGGLED = "Week order updated"
DAY_OFF = "Sunday is for rest"
DAY_UNKNOWN = "Can't identify this day"
NO_PAIRS = "No classes on this day"
TIME_UNKNOWN = "Can't calculate the time. Is there a class right now?"
API_ERROR = "API error, code {code}"
API_UNREACHABLE = "API error, the timetable service is unreachable"
GENERIC_ERROR = "Something went wrong while reading the timetable. Please try again later."
STORE_ERROR = "Chat settings are unavailable right now. Please try again later."

COMMANDS = [
    ("setgroup", "Set the group"),
    ("toggleweek", "Swap the week order"),
    ("schedule", "Full schedule"),
    ("week", "Schedule for this week"),
    ("nextweek", "Schedule for next week"),
    ("today", "Schedule for today"),
    ("tomorrow", "Schedule for tomorrow"),
    ("left", "Time left until the end of the class or break"),
    ("help", "Show this message"),
]


def render_pair(pair: Pair) -> str:
    return f"<i>{escape(pair.time)}</i> {escape(pair.name)}, {escape(pair.type)}"


def render_day(day: WeekDay) -> str:
    lines = [f"<b>{escape(day.day)}</b>"]
    lines.extend(render_pair(pair) for pair in sorted_pairs(day))
    return "\n".join(lines) + "\n"


def render_week(week: Sequence[WeekDay]) -> str:
    """Join the days that have pairs; empty days are left out."""
    return "\n".join(render_day(day) for day in week if day.pairs)


def render_schedule(schedule: Schedule) -> str:
    return (
        f"<b>First week</b>\n{render_week(schedule.first_week)}\n"
        f"<b>Second week</b>\n{render_week(schedule.second_week)}"
    )


def render_outcome(outcome: Outcome) -> str:
    if isinstance(outcome, InClass):
        return f"{outcome.minutes_remaining} min left until the end of the class"
    if isinstance(outcome, InBreak):
        return f"{outcome.minutes_remaining} min left until the end of the break"
    return TIME_UNKNOWN


def render_api_error(status_code: int | None) -> str:
    if status_code is None:
        return API_UNREACHABLE
    return API_ERROR.format(code=status_code)


def render_usage(bot_username: str) -> str:
    suffix = f"@{bot_username}" if bot_username else ""
    lines = ["<b>Commands</b>"]
    lines.extend(f"/{name}{suffix} - {description}" for name, description in COMMANDS)
    return "\n".join(lines)
