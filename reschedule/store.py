"""SQLite chat-state store."""

from __future__ import annotations

import logging
import sqlite3
from contextlib import contextmanager
from datetime import datetime, timezone
from pathlib import Path
from typing import Iterator

from reschedule.errors import StoreError
from reschedule.models import ChatState

LOGGER = logging.getLogger(__name__)

SCHEMA_VERSION = 1


class ChatStore:
    """One record per chat: assigned group and week toggle.

    Every call runs in its own committed transaction, so a ``get`` after
    ``upsert`` sees the written values.
    """

    def __init__(self, path: Path) -> None:
        self._path = path

    @contextmanager
    def _connect(self) -> Iterator[sqlite3.Connection]:
        try:
            conn = sqlite3.connect(self._path)
        except sqlite3.Error as exc:
            raise StoreError(f"Cannot open chat store at {self._path}: {exc}") from exc
        conn.row_factory = sqlite3.Row
        try:
            yield conn
            conn.commit()
        except sqlite3.Error as exc:
            conn.rollback()
            raise StoreError(f"Chat store operation failed: {exc}") from exc
        finally:
            conn.close()

    def initialize(self) -> None:
        """Create or verify schema."""

        with self._connect() as conn:
            conn.execute("CREATE TABLE IF NOT EXISTS schema_version (version INTEGER NOT NULL)")
            row = conn.execute("SELECT version FROM schema_version LIMIT 1").fetchone()
            if row is None:
                self._create_schema(conn)
                conn.execute("INSERT INTO schema_version (version) VALUES (?)", (SCHEMA_VERSION,))
            elif row["version"] != SCHEMA_VERSION:
                raise RuntimeError(
                    f"Unsupported schema version {row['version']} (expected {SCHEMA_VERSION})"
                )

    def _create_schema(self, conn: sqlite3.Connection) -> None:
        conn.executescript(
            """
            CREATE TABLE IF NOT EXISTS chats (
                chat_id INTEGER PRIMARY KEY,
                group_id TEXT NOT NULL,
                week_toggle INTEGER NOT NULL DEFAULT 0,
                updated_at TEXT NOT NULL
            );
            """
        )

    def get(self, chat_id: int) -> ChatState | None:
        with self._connect() as conn:
            row = conn.execute(
                "SELECT chat_id, group_id, week_toggle FROM chats WHERE chat_id = ?", (chat_id,)
            ).fetchone()
        if row is None:
            LOGGER.info("No chat state for chat_id=%s", chat_id)
            return None
        return _to_state(row)

    def upsert(self, state: ChatState) -> None:
        now = _utc_now_iso()
        with self._connect() as conn:
            conn.execute("BEGIN IMMEDIATE")
            existing = conn.execute(
                "SELECT chat_id FROM chats WHERE chat_id = ?", (state.chat_id,)
            ).fetchone()
            if existing is not None:
                LOGGER.info("Updating chat state chat_id=%s", state.chat_id)
                conn.execute(
                    "UPDATE chats SET group_id = ?, week_toggle = ?, updated_at = ? WHERE chat_id = ?",
                    (state.group_id, int(state.week_toggle), now, state.chat_id),
                )
            else:
                LOGGER.info("Creating chat state chat_id=%s group_id=%s", state.chat_id, state.group_id)
                conn.execute(
                    "INSERT INTO chats(chat_id, group_id, week_toggle, updated_at) VALUES (?, ?, ?, ?)",
                    (state.chat_id, state.group_id, int(state.week_toggle), now),
                )


def _to_state(row: sqlite3.Row) -> ChatState:
    return ChatState(
        chat_id=int(row["chat_id"]),
        group_id=row["group_id"],
        week_toggle=bool(row["week_toggle"]),
    )


def _utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()
