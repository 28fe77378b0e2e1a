"""Command dispatcher for /-prefixed messages.

Every failure raised by the service layer is turned into a reply here, so a
single bad request never escapes its handler. Unrecognised commands return
None and are ignored by the caller.
"""

from __future__ import annotations

import logging
from datetime import timezone, tzinfo
from typing import TYPE_CHECKING

from reschedule import rendering
from reschedule.errors import DecodeError, FormatError, StoreError, UpstreamUnavailable
from reschedule.models import Message
from reschedule.resolver import DayOff, DayOption, OutOfRange, WeekOption
from reschedule.service import GroupNotFound, NotConfigured

if TYPE_CHECKING:
    from reschedule.service import ScheduleService

LOGGER = logging.getLogger(__name__)


def parse_command(text: str) -> tuple[str, list[str]] | None:
    """Split a /-prefixed message into (command, args).

    The command is lowercased and any ``@botname`` suffix is dropped.

    Returns:
        A (command, args) tuple, or None if text is not a command.
    """
    text = text.strip()
    if not text.startswith("/"):
        return None
    parts = text[1:].split()
    if not parts:
        return None
    command = parts[0].split("@", 1)[0].lower()
    if not command:
        return None
    return command, parts[1:]


class CommandDispatcher:
    """Routes bot commands to the schedule service and renders replies."""

    def __init__(
        self,
        service: ScheduleService,
        tz: tzinfo = timezone.utc,
        bot_username: str = "",
    ) -> None:
        self._service = service
        self._tz = tz
        self._bot_username = bot_username

    async def dispatch(self, message: Message) -> str | None:
        """Dispatch a message to a command handler.

        Returns:
            A reply string for recognised commands, or None for anything else.
        """
        parsed = parse_command(message.text)
        if parsed is None:
            return None
        command, args = parsed
        LOGGER.info("Command dispatch: chat_id=%s command=%r args=%r", message.chat_id, command, args)
        try:
            return await self._route(command, args, message)
        except UpstreamUnavailable as exc:
            return rendering.render_api_error(exc.status_code)
        except DecodeError:
            return rendering.GENERIC_ERROR
        except FormatError as exc:
            LOGGER.error("Malformed time token in upstream schedule: %s", exc)
            return rendering.GENERIC_ERROR
        except StoreError as exc:
            LOGGER.error("Chat store failure for chat_id=%s: %s", message.chat_id, exc)
            return rendering.STORE_ERROR

    async def _route(self, command: str, args: list[str], message: Message) -> str | None:
        chat_id = message.chat_id
        if command == "setgroup":
            return await self._handle_set_group(chat_id, args)
        if command == "toggleweek":
            return await self._handle_toggle_week(chat_id)
        if command == "schedule":
            return await self._handle_full_schedule(chat_id)
        if command == "week":
            return await self._handle_week(chat_id, WeekOption.CURRENT)
        if command == "nextweek":
            return await self._handle_week(chat_id, WeekOption.NEXT)
        if command == "today":
            return await self._handle_day(chat_id, DayOption.TODAY)
        if command == "tomorrow":
            return await self._handle_day(chat_id, DayOption.TOMORROW)
        if command == "left":
            return await self._handle_time_left(message)
        if command in ("help", "start"):
            return rendering.render_usage(self._bot_username)
        return None

    async def _handle_set_group(self, chat_id: int, args: list[str]) -> str:
        if not args:
            return rendering.GROUP_ARG_MISSING
        query = " ".join(args)
        result = await self._service.set_group(chat_id, query)
        if isinstance(result, GroupNotFound):
            return rendering.GROUP_NOT_FOUND.format(name=result.query)
        return rendering.GROUP_SET.format(name=result.group.name)

    async def _handle_toggle_week(self, chat_id: int) -> str:
        result = await self._service.toggle_week(chat_id)
        if isinstance(result, NotConfigured):
            return rendering.GROUP_NOT_SET
        return rendering.WEEK_TOGGLED

    async def _handle_full_schedule(self, chat_id: int) -> str:
        result = await self._service.full_schedule(chat_id)
        if isinstance(result, NotConfigured):
            return rendering.GROUP_NOT_SET
        return rendering.render_schedule(result)

    async def _handle_week(self, chat_id: int, option: WeekOption) -> str:
        result = await self._service.week(chat_id, option)
        if isinstance(result, NotConfigured):
            return rendering.GROUP_NOT_SET
        return rendering.render_week(result) or rendering.NO_PAIRS

    async def _handle_day(self, chat_id: int, option: DayOption) -> str:
        result = await self._service.day(chat_id, option)
        if isinstance(result, NotConfigured):
            return rendering.GROUP_NOT_SET
        if isinstance(result, DayOff):
            return rendering.DAY_OFF
        if isinstance(result, OutOfRange):
            return rendering.DAY_UNKNOWN
        if not result.day.pairs:
            return rendering.NO_PAIRS
        return rendering.render_day(result.day)

    async def _handle_time_left(self, message: Message) -> str:
        timestamp = message.timestamp
        if timestamp.tzinfo is None:
            timestamp = timestamp.replace(tzinfo=timezone.utc)
        moment = timestamp.astimezone(self._tz).time()
        result = await self._service.time_left(message.chat_id, moment)
        if isinstance(result, NotConfigured):
            return rendering.GROUP_NOT_SET
        if isinstance(result, OutOfRange):
            return rendering.TIME_UNKNOWN
        return rendering.render_outcome(result)
