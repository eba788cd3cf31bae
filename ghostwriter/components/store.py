#!/usr/bin/env python3
"""store.py - SQLite persistence for GhostWriter

Stores conversations, their messages, daily summaries and aggregated
reports. Generic store/retrieve/query/update/delete operations are keyed by
string columns; domain helpers sit on top of them.

Author: GhostWriter Team
License: MIT
Python: 3.11+
"""

import logging
import sqlite3
import threading
from contextlib import contextmanager
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Iterator, List, Optional

from ghostwriter.components.summary import Summary
from ghostwriter.utils.models import TIMESTAMP_FORMAT, Conversation, Message

logger = logging.getLogger(__name__)

SCHEMA: Dict[str, tuple] = {
    "conversations": (
        "conversation_id", "user_id", "date", "message_count", "created_at",
    ),
    "messages": (
        "message_id", "conversation_id", "position", "sender", "content",
        "timestamp", "created_at",
    ),
    "summaries": (
        "summary_id", "user_id", "conversation_id", "date", "key_topics",
        "action_items", "pending_questions", "statistics", "summary_text",
        "created_at",
    ),
    "reports": (
        "report_id", "user_id", "report_type", "start_date", "end_date",
        "total_messages", "top_topics", "action_items_count", "most_active_day",
        "report_text", "created_at",
    ),
}


class ConversationStore:
    """
    SQLite-backed store for conversations, summaries and reports.

    Each call opens its own connection; writes are serialized with a lock.
    """

    def __init__(self, db_path: Path):
        """
        Initialize the store.

        Args:
            db_path: Path to the SQLite database file
        """
        self.db_path = Path(db_path)
        self._lock = threading.Lock()

        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        self._init_database()

        logger.info("ConversationStore initialized at %s", self.db_path)

    def _init_database(self) -> None:
        """Initialize database schema."""
        with self._get_connection() as conn:
            conn.execute(
                """
                CREATE TABLE IF NOT EXISTS conversations (
                    conversation_id TEXT PRIMARY KEY,
                    user_id TEXT NOT NULL,
                    date TEXT NOT NULL,
                    message_count INTEGER DEFAULT 0,
                    created_at TEXT NOT NULL
                )
            """
            )
            conn.execute(
                """
                CREATE TABLE IF NOT EXISTS messages (
                    message_id TEXT PRIMARY KEY,
                    conversation_id TEXT NOT NULL,
                    position INTEGER NOT NULL,
                    sender TEXT NOT NULL,
                    content TEXT NOT NULL,
                    timestamp TEXT NOT NULL,
                    created_at TEXT NOT NULL,
                    FOREIGN KEY (conversation_id) REFERENCES conversations(conversation_id)
                )
            """
            )
            conn.execute(
                """
                CREATE INDEX IF NOT EXISTS idx_messages_conversation
                ON messages(conversation_id, position)
            """
            )
            conn.execute(
                """
                CREATE TABLE IF NOT EXISTS summaries (
                    summary_id TEXT PRIMARY KEY,
                    user_id TEXT NOT NULL,
                    conversation_id TEXT NOT NULL,
                    date TEXT NOT NULL,
                    key_topics TEXT,
                    action_items TEXT,
                    pending_questions TEXT,
                    statistics TEXT,
                    summary_text TEXT,
                    created_at TEXT NOT NULL
                )
            """
            )
            conn.execute(
                """
                CREATE INDEX IF NOT EXISTS idx_summaries_user_date
                ON summaries(user_id, date)
            """
            )
            conn.execute(
                """
                CREATE TABLE IF NOT EXISTS reports (
                    report_id TEXT PRIMARY KEY,
                    user_id TEXT NOT NULL,
                    report_type TEXT NOT NULL,
                    start_date TEXT NOT NULL,
                    end_date TEXT NOT NULL,
                    total_messages INTEGER DEFAULT 0,
                    top_topics TEXT,
                    action_items_count INTEGER DEFAULT 0,
                    most_active_day TEXT,
                    report_text TEXT,
                    created_at TEXT NOT NULL
                )
            """
            )
            conn.commit()

    @contextmanager
    def _get_connection(self) -> Iterator[sqlite3.Connection]:
        """Get a database connection with dict-like rows."""
        conn = sqlite3.connect(str(self.db_path), check_same_thread=False)
        conn.row_factory = sqlite3.Row
        try:
            yield conn
        finally:
            conn.close()

    @staticmethod
    def _check_columns(table: str, columns) -> None:
        if table not in SCHEMA:
            raise ValueError(f"Unknown table: {table}")
        unknown = [c for c in columns if c not in SCHEMA[table]]
        if unknown:
            raise ValueError(f"Unknown column(s) for {table}: {', '.join(unknown)}")

    # Generic operations

    def store(self, table: str, data: Dict[str, Any]) -> None:
        """Insert one row."""
        self._check_columns(table, data)
        columns = ", ".join(data)
        placeholders = ", ".join("?" for _ in data)

        with self._lock, self._get_connection() as conn:
            conn.execute(
                f"INSERT INTO {table} ({columns}) VALUES ({placeholders})",
                tuple(data.values()),
            )
            conn.commit()

    def retrieve(self, table: str, key_column: str, key: str) -> Optional[Dict[str, Any]]:
        """Fetch one row by key, or None."""
        self._check_columns(table, [key_column])
        with self._get_connection() as conn:
            row = conn.execute(
                f"SELECT * FROM {table} WHERE {key_column} = ?", (key,)
            ).fetchone()
        return dict(row) if row else None

    def query(self, table: str, order_by: Optional[str] = None, **filters: Any) -> List[Dict[str, Any]]:
        """
        Fetch rows matching every filter (column=value).

        Args:
            table: Table name
            order_by: Optional column to sort by
            **filters: Equality filters

        Returns:
            Matching rows as dicts
        """
        self._check_columns(table, list(filters) + ([order_by] if order_by else []))

        sql = f"SELECT * FROM {table}"
        if filters:
            sql += " WHERE " + " AND ".join(f"{column} = ?" for column in filters)
        if order_by:
            sql += f" ORDER BY {order_by}"

        with self._get_connection() as conn:
            cursor = conn.execute(sql, tuple(filters.values()))
            return [dict(row) for row in cursor]

    def update(self, table: str, key_column: str, key: str, data: Dict[str, Any]) -> bool:
        """Update one row by key. Returns True if a row changed."""
        self._check_columns(table, list(data) + [key_column])
        if not data:
            return False
        assignments = ", ".join(f"{column} = ?" for column in data)

        with self._lock, self._get_connection() as conn:
            cursor = conn.execute(
                f"UPDATE {table} SET {assignments} WHERE {key_column} = ?",
                tuple(data.values()) + (key,),
            )
            conn.commit()
            return cursor.rowcount > 0

    def delete(self, table: str, key_column: str, key: str) -> int:
        """Delete rows by key. Returns the number removed."""
        self._check_columns(table, [key_column])
        with self._lock, self._get_connection() as conn:
            cursor = conn.execute(f"DELETE FROM {table} WHERE {key_column} = ?", (key,))
            conn.commit()
            return cursor.rowcount

    # Domain helpers

    def save_conversation(self, conversation: Conversation) -> None:
        """Persist a conversation and all of its messages."""
        created_at = datetime.now().strftime(TIMESTAMP_FORMAT)
        with self._lock, self._get_connection() as conn:
            conn.execute(
                """INSERT INTO conversations (
                    conversation_id, user_id, date, message_count, created_at
                   ) VALUES (?, ?, ?, ?, ?)""",
                (
                    conversation.conversation_id,
                    conversation.user_id,
                    conversation.date,
                    len(conversation.messages),
                    created_at,
                ),
            )
            conn.executemany(
                """INSERT INTO messages (
                    message_id, conversation_id, position, sender, content, timestamp, created_at
                   ) VALUES (?, ?, ?, ?, ?, ?, ?)""",
                [
                    (
                        message.message_id,
                        conversation.conversation_id,
                        position,
                        message.sender,
                        message.content,
                        message.timestamp,
                        created_at,
                    )
                    for position, message in enumerate(conversation.messages)
                ],
            )
            conn.commit()
        logger.info(
            "Saved conversation %s with %d messages",
            conversation.conversation_id,
            len(conversation.messages),
        )

    def load_conversation(self, conversation_id: str) -> Optional[Conversation]:
        """Load a conversation with its messages in original order."""
        row = self.retrieve("conversations", "conversation_id", conversation_id)
        if row is None:
            return None

        message_rows = self.query("messages", order_by="position", conversation_id=conversation_id)
        return Conversation(
            conversation_id=row["conversation_id"],
            user_id=row["user_id"],
            date=row["date"],
            messages=[Message.from_dict(data) for data in message_rows],
        )

    def save_summary(self, summary: Summary) -> None:
        self.store("summaries", summary.to_row())
        logger.info("Saved summary %s for %s", summary.summary_id, summary.date)

    def load_summary(self, summary_id: str) -> Optional[Summary]:
        row = self.retrieve("summaries", "summary_id", summary_id)
        return Summary.from_row(row) if row else None

    def summaries_between(self, user_id: str, start_date: str, end_date: str) -> List[Summary]:
        """Summaries for a user with start_date <= date <= end_date, oldest first."""
        with self._get_connection() as conn:
            cursor = conn.execute(
                """SELECT * FROM summaries
                WHERE user_id = ?
                AND date >= ? AND date <= ?
                ORDER BY date, created_at
            """,
                (user_id, start_date, end_date),
            )
            summaries = [Summary.from_row(dict(row)) for row in cursor]

        logger.debug("Found %d summaries for %s between %s and %s",
                     len(summaries), user_id, start_date, end_date)
        return summaries

    def save_report(self, report: Any) -> None:
        """Persist a WeeklyReport or MonthlyReport."""
        self.store("reports", report.to_row())
        logger.info("Saved %s report %s", report.report_type, report.report_id)
