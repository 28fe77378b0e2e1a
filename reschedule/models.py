"""Core domain models used across layers."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Generic, Literal, TypeVar

from pydantic import BaseModel, ConfigDict, Field

T = TypeVar("T")

DAYS_IN_WEEK = 7


class Group(BaseModel):
    """Timetable track as listed by the upstream API."""

    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    faculty: str = ""


class Pair(BaseModel):
    """A single class session. Duration is fixed system-wide."""

    model_config = ConfigDict(frozen=True)

    name: str
    type: str = ""
    time: str


class WeekDay(BaseModel):
    """One day of a week track. Pairs come in no particular order."""

    model_config = ConfigDict(frozen=True)

    day: str
    pairs: tuple[Pair, ...] = ()


class Schedule(BaseModel):
    """Two parallel week tracks selected by parity."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    first_week: tuple[WeekDay, ...] = Field(alias="scheduleFirstWeek", max_length=DAYS_IN_WEEK)
    second_week: tuple[WeekDay, ...] = Field(alias="scheduleSecondWeek", max_length=DAYS_IN_WEEK)


class ScheduleTime(BaseModel):
    """Server-reported time context. Week parity is never derived locally."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    current_week: Literal[1, 2] = Field(alias="currentWeek")
    current_day: int = Field(alias="currentDay", ge=1, le=DAYS_IN_WEEK)
    current_lesson: int = Field(default=0, alias="currentLesson")


@dataclass(slots=True)
class ApiResponse(Generic[T]):
    """Upstream result: status code plus decoded data on success only."""

    status_code: int
    data: T | None = None

    @property
    def ok(self) -> bool:
        return self.data is not None


@dataclass(slots=True)
class ChatState:
    """Per-chat configuration persisted by the chat-state store."""

    chat_id: int
    group_id: str
    week_toggle: bool = False


@dataclass(slots=True)
class Message:
    """Inbound text message normalized by the transport adapter."""

    chat_id: int
    text: str
    timestamp: datetime
    message_id: int | None = None
