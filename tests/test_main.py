from datetime import datetime, timezone
from unittest.mock import AsyncMock, MagicMock

import pytest

from reschedule.main import handle_message
from reschedule.models import Message


def _msg(text: str) -> Message:
    return Message(chat_id=42, text=text, timestamp=datetime.now(timezone.utc))


@pytest.mark.asyncio
async def test_handle_message_sends_reply():
    dispatcher = MagicMock()
    dispatcher.dispatch = AsyncMock(return_value="<b>Mon</b>")
    adapter = MagicMock()
    adapter.send_message = AsyncMock()

    await handle_message(dispatcher, adapter, _msg("/today"))

    adapter.send_message.assert_awaited_once_with(42, "<b>Mon</b>")


@pytest.mark.asyncio
async def test_handle_message_skips_unrecognised_text():
    dispatcher = MagicMock()
    dispatcher.dispatch = AsyncMock(return_value=None)
    adapter = MagicMock()
    adapter.send_message = AsyncMock()

    await handle_message(dispatcher, adapter, _msg("hello"))

    adapter.send_message.assert_not_called()


@pytest.mark.asyncio
async def test_handle_message_logs_unexpected_dispatch_error(caplog):
    dispatcher = MagicMock()
    dispatcher.dispatch = AsyncMock(side_effect=KeyError("boom"))
    adapter = MagicMock()
    adapter.send_message = AsyncMock()

    await handle_message(dispatcher, adapter, _msg("/today"))

    adapter.send_message.assert_not_called()
    assert any(r.levelname == "ERROR" and r.exc_info for r in caplog.records)


@pytest.mark.asyncio
async def test_handle_message_survives_send_failure():
    dispatcher = MagicMock()
    dispatcher.dispatch = AsyncMock(return_value="hi")
    adapter = MagicMock()
    adapter.send_message = AsyncMock(side_effect=RuntimeError("Telegram sendMessage failed"))

    await handle_message(dispatcher, adapter, _msg("/today"))
