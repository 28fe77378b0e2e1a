"""Telegram Bot API adapter (long polling)."""

from __future__ import annotations

import asyncio
import logging
from datetime import datetime, timezone
from typing import Any, AsyncIterator

import httpx

from reschedule.models import Message

LOGGER = logging.getLogger(__name__)

DEFAULT_API_BASE_URL = "https://api.telegram.org"


class TelegramAdapter:
    """Adapter around the getUpdates/sendMessage Bot API methods."""

    def __init__(
        self,
        token: str,
        base_url: str = DEFAULT_API_BASE_URL,
        poll_timeout_seconds: int = 30,
        retry_delay_seconds: float = 5.0,
    ) -> None:
        self._url = f"{base_url.rstrip('/')}/bot{token}"
        self._poll_timeout_seconds = poll_timeout_seconds
        self._retry_delay_seconds = retry_delay_seconds
        self._offset: int | None = None

    async def poll_messages(self) -> AsyncIterator[Message]:
        """Long-poll getUpdates and yield normalized text messages."""

        while True:
            updates = await self.fetch_updates()
            if updates is None:
                await asyncio.sleep(self._retry_delay_seconds)
                continue
            for update in updates:
                message = _to_message(update)
                if message is None:
                    LOGGER.info("Skipping non-text update %s", update.get("update_id"))
                    continue
                yield message

    async def fetch_updates(self) -> list[dict[str, Any]] | None:
        """Fetch one batch of updates and advance the offset.

        Returns None when the poll failed and should be retried.
        """
        params: dict[str, Any] = {"timeout": self._poll_timeout_seconds, "allowed_updates": '["message"]'}
        if self._offset is not None:
            params["offset"] = self._offset
        try:
            async with httpx.AsyncClient(timeout=self._poll_timeout_seconds + 10) as client:
                resp = await client.get(f"{self._url}/getUpdates", params=params)
        except httpx.HTTPError as exc:
            LOGGER.warning("getUpdates failed: %s", exc)
            return None
        if resp.status_code != 200:
            LOGGER.warning("getUpdates returned HTTP %s: %s", resp.status_code, resp.text[:200])
            return None
        try:
            payload = resp.json()
        except ValueError:
            LOGGER.warning("getUpdates returned non-JSON body")
            return None
        result = payload.get("result") if isinstance(payload, dict) else None
        if not isinstance(result, list):
            LOGGER.warning("getUpdates returned unexpected payload: %r", str(payload)[:200])
            return None
        updates = [u for u in result if isinstance(u, dict)]
        for update in updates:
            update_id = update.get("update_id")
            if isinstance(update_id, int):
                self._offset = max(self._offset or 0, update_id + 1)
        return updates

    async def send_message(self, chat_id: int, text: str) -> None:
        """Send an HTML-formatted text message to a chat."""

        await self._call(
            "sendMessage",
            {"chat_id": chat_id, "text": text, "parse_mode": "HTML", "disable_web_page_preview": True},
        )

    async def set_commands(self, commands: list[tuple[str, str]]) -> None:
        """Publish the command menu."""

        menu = [{"command": name, "description": description} for name, description in commands]
        await self._call("setMyCommands", {"commands": menu})

    async def _call(self, method: str, payload: dict[str, Any]) -> None:
        async with httpx.AsyncClient() as client:
            resp = await client.post(f"{self._url}/{method}", json=payload, timeout=20.0)
        if resp.status_code != 200:
            raise RuntimeError(f"Telegram {method} failed (HTTP {resp.status_code}): {resp.text[:200]}")


def _to_message(update: dict[str, Any]) -> Message | None:
    message = update.get("message")
    if not isinstance(message, dict):
        return None
    text = message.get("text")
    if not isinstance(text, str) or not text.strip():
        return None
    chat = message.get("chat")
    if not isinstance(chat, dict) or not isinstance(chat.get("id"), int):
        return None
    date = message.get("date")
    if not isinstance(date, int) or isinstance(date, bool):
        return None
    try:
        timestamp = datetime.fromtimestamp(date, tz=timezone.utc)
    except (OverflowError, OSError, ValueError):
        return None
    return Message(
        chat_id=chat["id"],
        text=text.strip(),
        timestamp=timestamp,
        message_id=message.get("message_id"),
    )
