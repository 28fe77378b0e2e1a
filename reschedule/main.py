"""Application entrypoint."""

from __future__ import annotations

import asyncio
import logging
from datetime import timedelta

import httpx

from reschedule import rendering
from reschedule.cache import ResponseCache
from reschedule.commands import CommandDispatcher
from reschedule.config import load_settings, resolve_timezone
from reschedule.models import Message
from reschedule.schedule_client import ScheduleClient
from reschedule.service import ScheduleService
from reschedule.store import ChatStore
from reschedule.telegram_adapter import TelegramAdapter

logging.basicConfig(level=logging.INFO)
LOGGER = logging.getLogger(__name__)


async def handle_message(dispatcher: CommandDispatcher, adapter: TelegramAdapter, message: Message) -> None:
    """Handle one inbound message as an independent unit of work."""

    try:
        reply = await dispatcher.dispatch(message)
    except Exception:  # noqa: BLE001
        LOGGER.exception("Unhandled error for chat_id=%s text=%r", message.chat_id, message.text)
        return
    if reply is None:
        return
    try:
        await adapter.send_message(message.chat_id, reply)
    except (RuntimeError, httpx.HTTPError) as exc:
        LOGGER.warning("Failed to reply to chat_id=%s: %s", message.chat_id, exc)


async def run() -> None:
    """Initialize app layers and start processing loop."""

    settings = load_settings()

    store = ChatStore(settings.database_path)
    store.initialize()

    cache = ResponseCache(maxsize=settings.cache_max_entries)
    client = ScheduleClient(
        cache=cache,
        base_url=settings.schedule_api_base_url,
        timeout_seconds=settings.request_timeout_seconds,
        groups_ttl=timedelta(hours=settings.groups_cache_ttl_hours),
        schedule_ttl=timedelta(hours=settings.schedule_cache_ttl_hours),
    )
    dispatcher = CommandDispatcher(
        service=ScheduleService(client=client, store=store),
        tz=resolve_timezone(settings.timezone),
        bot_username=settings.bot_username,
    )

    adapter = TelegramAdapter(
        token=settings.telegram_bot_token,
        base_url=settings.telegram_api_base_url,
        poll_timeout_seconds=settings.telegram_poll_timeout_seconds,
    )
    try:
        await adapter.set_commands(rendering.COMMANDS)
    except (RuntimeError, httpx.HTTPError) as exc:
        LOGGER.warning("Could not publish the command menu: %s", exc)

    pending: set[asyncio.Task[None]] = set()
    try:
        async for message in adapter.poll_messages():
            task = asyncio.create_task(handle_message(dispatcher, adapter, message))
            pending.add(task)
            task.add_done_callback(pending.discard)
    except asyncio.CancelledError:
        raise
    finally:
        for task in pending:
            task.cancel()
        LOGGER.info("Bot shutdown complete")


def main() -> None:
    """Synchronous wrapper for asyncio entrypoint."""

    asyncio.run(run())


if __name__ == "__main__":
    main()
