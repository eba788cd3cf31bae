#!/usr/bin/env python3
"""models.py - Core value types for GhostWriter

Messages parsed from a chat export, the conversation that holds them, and
the result produced by the analysis strategies.

Author: GhostWriter Team
License: MIT
Python: 3.11+
"""

import uuid
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, Iterator, List, Optional

TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"


def _now_timestamp() -> str:
    return datetime.now().strftime(TIMESTAMP_FORMAT)


def _new_id() -> str:
    return str(uuid.uuid4())


class StatisticsKeys:
    """Keys used in the statistics mapping of an AnalysisResult."""

    TOTAL_MESSAGES = "total_messages"
    SENDER_BREAKDOWN = "sender_breakdown"
    MOST_ACTIVE = "most_active"
    FIRST_MESSAGE = "first_message"
    LAST_MESSAGE = "last_message"
    AVG_MESSAGE_LENGTH = "avg_message_length"


@dataclass(frozen=True)
class Message:
    """
    A single chat message.

    Attributes:
        content: Message body, continuation lines joined with spaces
        sender: Display name of the author
        timestamp: Canonical "yyyy-MM-dd HH:mm:ss" string
        message_id: Opaque unique id, generated when not supplied
    """

    content: str
    sender: str
    timestamp: str = field(default_factory=_now_timestamp)
    message_id: str = field(default_factory=_new_id)

    def to_dict(self) -> Dict[str, str]:
        """Serialize for storage."""
        return {
            "message_id": self.message_id,
            "content": self.content,
            "sender": self.sender,
            "timestamp": self.timestamp,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Message":
        """Rebuild a message from a storage row."""
        return cls(
            content=data["content"],
            sender=data["sender"],
            timestamp=data["timestamp"],
            message_id=data["message_id"],
        )


@dataclass
class Conversation:
    """Ordered container of messages for one user and day."""

    conversation_id: str
    user_id: str
    date: str
    messages: List[Message] = field(default_factory=list)

    @classmethod
    def create(
        cls, user_id: str, date: str, messages: Optional[List[Message]] = None
    ) -> "Conversation":
        """Create a new conversation with a generated id."""
        return cls(
            conversation_id=_new_id(),
            user_id=user_id,
            date=date,
            messages=list(messages or []),
        )

    def add_message(self, message: Message) -> None:
        self.messages.append(message)

    def __len__(self) -> int:
        return len(self.messages)

    def __iter__(self) -> Iterator[Message]:
        return iter(self.messages)


@dataclass(frozen=True)
class AnalysisResult:
    """
    Combined (or partial) output of the analysis strategies.

    A facet whose strategy did not run is empty, never None.
    """

    topics: List[str] = field(default_factory=list)
    action_items: List[str] = field(default_factory=list)
    questions: List[str] = field(default_factory=list)
    statistics: Dict[str, Any] = field(default_factory=dict)

    @property
    def has_topics(self) -> bool:
        return bool(self.topics)

    @property
    def has_action_items(self) -> bool:
        return bool(self.action_items)

    @property
    def has_questions(self) -> bool:
        return bool(self.questions)

    def to_dict(self) -> Dict[str, Any]:
        """Serialize for logging/persistence."""
        return {
            "topics": list(self.topics),
            "action_items": list(self.action_items),
            "questions": list(self.questions),
            "statistics": dict(self.statistics),
        }
