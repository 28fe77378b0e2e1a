"""Client for the upstream timetable API."""

from __future__ import annotations

import logging
from datetime import timedelta
from typing import Any, Callable, TypeVar

import httpx
from pydantic import TypeAdapter, ValidationError

from reschedule.cache import GROUPS_TTL, SCHEDULE_TTL, ResponseCache
from reschedule.errors import DecodeError, UpstreamUnavailable
from reschedule.models import ApiResponse, Group, Schedule, ScheduleTime

LOGGER = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://schedule.kpi.ua/api/"
GROUPS_PATH = "schedule/groups"
SCHEDULE_PATH = "schedule/lessons"
TIME_PATH = "time/current"

T = TypeVar("T")

_GROUPS_ADAPTER = TypeAdapter(list[Group])


def schedule_cache_key(group_id: str) -> str:
    return f"{SCHEDULE_PATH}?groupId={group_id}"


class ScheduleClient:
    """Fetches groups, two-week schedules and the current time context.

    Groups and schedules go through the response cache; the time context is
    always fetched fresh. Transport failures raise ``UpstreamUnavailable``,
    malformed payloads raise ``DecodeError``, and non-2xx answers come back as
    an ``ApiResponse`` without data.
    """

    def __init__(
        self,
        cache: ResponseCache,
        base_url: str = DEFAULT_BASE_URL,
        timeout_seconds: float = 30.0,
        groups_ttl: timedelta = GROUPS_TTL,
        schedule_ttl: timedelta = SCHEDULE_TTL,
    ) -> None:
        if not base_url.endswith("/"):
            base_url += "/"
        self._cache = cache
        self._base_url = base_url
        self._timeout_seconds = timeout_seconds
        self._groups_ttl = groups_ttl
        self._schedule_ttl = schedule_ttl

    async def get_groups(self) -> ApiResponse[list[Group]]:
        response = await self._cache.get_or_fetch(
            GROUPS_PATH, self._groups_ttl, lambda: self._request(GROUPS_PATH)
        )
        if not response.is_success:
            LOGGER.error("Get groups request was not successful. Status code %s", response.status_code)
            return ApiResponse(status_code=response.status_code)
        try:
            groups = _decode(response, _GROUPS_ADAPTER.validate_python, "groups")
        except DecodeError:
            self._cache.invalidate(GROUPS_PATH)
            raise
        return ApiResponse(status_code=response.status_code, data=groups)

    async def get_schedule(self, group_id: str) -> ApiResponse[Schedule]:
        response = await self._cache.get_or_fetch(
            schedule_cache_key(group_id),
            self._schedule_ttl,
            lambda: self._request(SCHEDULE_PATH, params={"groupId": group_id}),
        )
        if not response.is_success:
            LOGGER.warning(
                "Get schedule request was not successful. group_id=%s status code %s",
                group_id,
                response.status_code,
            )
            return ApiResponse(status_code=response.status_code)
        try:
            schedule = _decode(response, Schedule.model_validate, "schedule")
        except DecodeError:
            self._cache.invalidate(schedule_cache_key(group_id))
            raise
        return ApiResponse(status_code=response.status_code, data=schedule)

    async def get_current_time(self) -> ApiResponse[ScheduleTime]:
        response = await self._request(TIME_PATH)
        if not response.is_success:
            LOGGER.error("Time request was not successful. Status code %s", response.status_code)
            return ApiResponse(status_code=response.status_code)
        current = _decode(response, ScheduleTime.model_validate, "time")
        return ApiResponse(status_code=response.status_code, data=current)

    async def _request(self, path: str, params: dict[str, str] | None = None) -> httpx.Response:
        timeout = httpx.Timeout(self._timeout_seconds)
        try:
            async with httpx.AsyncClient(base_url=self._base_url, timeout=timeout) as client:
                return await client.get(path, params=params)
        except httpx.HTTPError as exc:
            LOGGER.warning("Request to %s failed: %s", path, exc)
            raise UpstreamUnavailable(None, str(exc)) from exc


def _decode(response: httpx.Response, validate: Callable[[Any], T], what: str) -> T:
    try:
        payload = response.json()
    except ValueError as exc:
        LOGGER.error("Upstream %s payload is not JSON: %r", what, response.text[:200])
        raise DecodeError(f"Upstream {what} payload is not JSON") from exc
    if not isinstance(payload, dict) or payload.get("data") is None:
        LOGGER.error("Upstream %s payload has no data field", what)
        raise DecodeError(f"Upstream {what} payload has no data field")
    try:
        return validate(payload["data"])
    except ValidationError as exc:
        LOGGER.error("Upstream %s payload has unexpected shape: %s", what, exc)
        raise DecodeError(f"Upstream {what} payload has unexpected shape") from exc
