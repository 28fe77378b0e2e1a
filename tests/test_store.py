import sqlite3

import pytest

from reschedule.errors import StoreError
from reschedule.models import ChatState
from reschedule.store import ChatStore


def _row_count(tmp_path) -> int:
    conn = sqlite3.connect(tmp_path / "reschedule.db")
    try:
        return conn.execute("SELECT COUNT(*) FROM chats").fetchone()[0]
    finally:
        conn.close()


def _store(tmp_path) -> ChatStore:
    store = ChatStore(tmp_path / "reschedule.db")
    store.initialize()
    return store


def test_get_missing_chat_returns_none(tmp_path):
    assert _store(tmp_path).get(42) is None


def test_upsert_then_get_reads_back(tmp_path):
    store = _store(tmp_path)
    store.upsert(ChatState(chat_id=42, group_id="g-1"))

    assert store.get(42) == ChatState(chat_id=42, group_id="g-1", week_toggle=False)


def test_repeated_upsert_keeps_one_record(tmp_path):
    store = _store(tmp_path)
    state = ChatState(chat_id=42, group_id="g-1", week_toggle=True)

    store.upsert(state)
    store.upsert(state)
    store.upsert(state)

    assert _row_count(tmp_path) == 1
    assert store.get(42) == state


def test_upsert_updates_existing_record(tmp_path):
    store = _store(tmp_path)
    store.upsert(ChatState(chat_id=42, group_id="g-1"))
    store.upsert(ChatState(chat_id=42, group_id="g-2", week_toggle=True))

    assert store.get(42) == ChatState(chat_id=42, group_id="g-2", week_toggle=True)
    assert _row_count(tmp_path) == 1


def test_chats_do_not_interact(tmp_path):
    store = _store(tmp_path)
    store.upsert(ChatState(chat_id=1, group_id="g-1"))
    store.upsert(ChatState(chat_id=-1001234567890, group_id="g-2", week_toggle=True))

    assert store.get(1) == ChatState(chat_id=1, group_id="g-1", week_toggle=False)
    assert store.get(-1001234567890) == ChatState(chat_id=-1001234567890, group_id="g-2", week_toggle=True)
    assert _row_count(tmp_path) == 2


def test_initialize_is_idempotent(tmp_path):
    store = _store(tmp_path)
    store.upsert(ChatState(chat_id=1, group_id="g-1"))
    store.initialize()

    assert store.get(1) is not None


def test_unknown_schema_version_is_rejected(tmp_path):
    path = tmp_path / "reschedule.db"
    ChatStore(path).initialize()
    conn = sqlite3.connect(path)
    conn.execute("UPDATE schema_version SET version = 99")
    conn.commit()
    conn.close()

    with pytest.raises(RuntimeError):
        ChatStore(path).initialize()


def test_sqlite_failure_is_reported_as_store_error(tmp_path):
    store = ChatStore(tmp_path)

    with pytest.raises(StoreError):
        store.get(1)


def test_missing_schema_is_reported_as_store_error(tmp_path):
    store = ChatStore(tmp_path / "uninitialized.db")

    with pytest.raises(StoreError):
        store.upsert(ChatState(chat_id=1, group_id="g-1"))
