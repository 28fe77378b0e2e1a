"""Command-level operations over the schedule client and chat store."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import time
from typing import Sequence, TypeVar

from reschedule.errors import UpstreamUnavailable
from reschedule.models import ApiResponse, ChatState, Group, Schedule, ScheduleTime, WeekDay
from reschedule.resolver import (
    DayOff,
    DayOption,
    OutOfRange,
    WeekOption,
    resolve_day_index,
    select_week,
)
from reschedule.schedule_client import ScheduleClient
from reschedule.store import ChatStore
from reschedule.time_window import Outcome, time_left

LOGGER = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True, slots=True)
class NotConfigured:
    """The chat has no group assigned yet."""


@dataclass(frozen=True, slots=True)
class GroupAssigned:
    group: Group


@dataclass(frozen=True, slots=True)
class GroupNotFound:
    query: str


@dataclass(frozen=True, slots=True)
class WeekToggled:
    week_toggle: bool


@dataclass(frozen=True, slots=True)
class DayResult:
    day: WeekDay


NOT_CONFIGURED = NotConfigured()


def _require(response: ApiResponse[T]) -> T:
    if response.data is None:
        raise UpstreamUnavailable(response.status_code)
    return response.data


def find_group(groups: Sequence[Group], query: str) -> Group | None:
    """Match by case-insensitive name first, then by exact id."""
    needle = query.casefold()
    for group in groups:
        if group.name.casefold() == needle:
            return group
    for group in groups:
        if group.id == query:
            return group
    return None


class ScheduleService:
    """One entry point per bot command.

    Results are typed values; upstream and storage failures are raised as
    ``ReScheduleError`` subclasses for the dispatcher to format.
    """

    def __init__(self, client: ScheduleClient, store: ChatStore) -> None:
        self._client = client
        self._store = store

    async def set_group(self, chat_id: int, query: str) -> GroupAssigned | GroupNotFound:
        groups = _require(await self._client.get_groups())
        group = find_group(groups, query)
        if group is None:
            LOGGER.info("Group %r not found for chat_id=%s", query, chat_id)
            return GroupNotFound(query)
        self._store.upsert(ChatState(chat_id=chat_id, group_id=group.id, week_toggle=False))
        return GroupAssigned(group)

    async def toggle_week(self, chat_id: int) -> WeekToggled | NotConfigured:
        chat = self._store.get(chat_id)
        if chat is None:
            return NOT_CONFIGURED
        chat.week_toggle = not chat.week_toggle
        self._store.upsert(chat)
        return WeekToggled(chat.week_toggle)

    async def full_schedule(self, chat_id: int) -> Schedule | NotConfigured:
        chat = self._store.get(chat_id)
        if chat is None:
            return NOT_CONFIGURED
        return _require(await self._client.get_schedule(chat.group_id))

    async def week(self, chat_id: int, option: WeekOption) -> Sequence[WeekDay] | NotConfigured:
        loaded = await self._load(chat_id)
        if isinstance(loaded, NotConfigured):
            return NOT_CONFIGURED
        chat, schedule, current = loaded
        return select_week(schedule, current.current_week, chat.week_toggle, option)

    async def day(self, chat_id: int, option: DayOption) -> DayResult | DayOff | OutOfRange | NotConfigured:
        loaded = await self._load(chat_id)
        if isinstance(loaded, NotConfigured):
            return NOT_CONFIGURED
        chat, schedule, current = loaded
        week = select_week(schedule, current.current_week, chat.week_toggle, WeekOption.CURRENT)
        index = resolve_day_index(current.current_day, option, len(week))
        if isinstance(index, OutOfRange):
            LOGGER.error(
                "Day index out of range. option=%s current_day=%s week_length=%s",
                option,
                current.current_day,
                len(week),
            )
            return index
        if isinstance(index, DayOff):
            return index
        return DayResult(week[index])

    async def time_left(self, chat_id: int, moment: time) -> Outcome | OutOfRange | NotConfigured:
        loaded = await self._load(chat_id)
        if isinstance(loaded, NotConfigured):
            return NOT_CONFIGURED
        chat, schedule, current = loaded
        week = select_week(schedule, current.current_week, chat.week_toggle, WeekOption.CURRENT)
        index = current.current_day - 1
        if index >= len(week):
            LOGGER.info("Week day is %s, only %s days in week", index, len(week))
            return OutOfRange.OUT_OF_RANGE
        return time_left(week[index], moment)

    async def _load(self, chat_id: int) -> tuple[ChatState, Schedule, ScheduleTime] | NotConfigured:
        chat = self._store.get(chat_id)
        if chat is None:
            return NOT_CONFIGURED
        schedule = _require(await self._client.get_schedule(chat.group_id))
        current = _require(await self._client.get_current_time())
        return chat, schedule, current
