#!/usr/bin/env python3
"""summary.py - Daily conversation summaries

Packages an AnalysisResult for one conversation and renders it as a
human-readable text block.

Author: GhostWriter Team
License: MIT
Python: 3.11+
"""

import json
import logging
import uuid
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List

from ghostwriter.utils.models import TIMESTAMP_FORMAT, AnalysisResult, StatisticsKeys

logger = logging.getLogger(__name__)

HEADER_LINE = "═" * 51 + "\n"
SECTION_LINE = "─" * 49 + "\n"
FOOTER_TEXT = "Generated by GhostWriter"


@dataclass
class Summary:
    """
    Summary of one day's conversation.

    Attributes:
        user_id: Owner of the conversation
        conversation_id: Conversation the analysis came from
        date: Day covered, "yyyy-MM-dd"
        key_topics: Topic strings from the analysis
        action_items: Attributed action item strings
        pending_questions: Attributed question strings
        statistics: Statistics mapping from the analysis
        summary_text: Rendered plain-text summary
    """

    user_id: str
    conversation_id: str
    date: str
    key_topics: List[str] = field(default_factory=list)
    action_items: List[str] = field(default_factory=list)
    pending_questions: List[str] = field(default_factory=list)
    statistics: Dict[str, Any] = field(default_factory=dict)
    summary_text: str = ""
    summary_id: str = field(default_factory=lambda: str(uuid.uuid4()))
    created_at: datetime = field(default_factory=datetime.now)

    @classmethod
    def generate(
        cls, user_id: str, conversation_id: str, date: str, analysis: AnalysisResult
    ) -> "Summary":
        """Build a summary from an analysis result and render its text."""
        summary = cls(
            user_id=user_id,
            conversation_id=conversation_id,
            date=date,
            key_topics=list(analysis.topics),
            action_items=list(analysis.action_items),
            pending_questions=list(analysis.questions),
            statistics=dict(analysis.statistics),
        )
        summary.summary_text = summary.format_text()
        logger.info("Summary generated for %s", date)
        return summary

    def format_text(self) -> str:
        """Render the summary as plain text."""
        sections = [
            self._header(),
            self._statistics_section(),
            self._topics_section(),
            self._action_items_section(),
            self._questions_section(),
            HEADER_LINE + FOOTER_TEXT + "\n" + HEADER_LINE,
        ]
        return "".join(sections)

    def _header(self) -> str:
        return f"{HEADER_LINE}   📅 DAILY SUMMARY - {self.date}\n{HEADER_LINE}\n"

    def _statistics_section(self) -> str:
        stats = self.statistics
        lines = [
            "📊 MESSAGE STATISTICS\n",
            SECTION_LINE,
            f"Total Messages: {stats.get(StatisticsKeys.TOTAL_MESSAGES, 0)}\n",
        ]

        breakdown = stats.get(StatisticsKeys.SENDER_BREAKDOWN)
        if breakdown:
            lines.append("Participants:\n")
            for sender, count in breakdown.items():
                lines.append(f"  • {sender}: {count} messages\n")

        lines.append(f"Most Active: {stats.get(StatisticsKeys.MOST_ACTIVE, 'N/A')}\n")
        if StatisticsKeys.AVG_MESSAGE_LENGTH in stats:
            lines.append(
                f"Avg Message Length: {stats[StatisticsKeys.AVG_MESSAGE_LENGTH]} characters\n"
            )
        lines.append("\n")
        return "".join(lines)

    def _topics_section(self) -> str:
        text = "🔑 KEY TOPICS DISCUSSED\n" + SECTION_LINE
        if not self.key_topics:
            return text + "No specific topics identified\n\n"
        for index, topic in enumerate(self.key_topics, start=1):
            text += f"{index}. {topic}\n"
        return text + "\n"

    def _action_items_section(self) -> str:
        if not self.action_items:
            return ""
        items = "".join(f"☐ {item}\n" for item in self.action_items)
        return "⚡ ACTION ITEMS\n" + SECTION_LINE + items + "\n"

    def _questions_section(self) -> str:
        if not self.pending_questions:
            return ""
        items = "".join(f"? {question}\n" for question in self.pending_questions)
        return "❓ PENDING QUESTIONS\n" + SECTION_LINE + items + "\n"

    def to_dict(self) -> Dict[str, Any]:
        """Serialize for export."""
        return {
            "summary_id": self.summary_id,
            "user_id": self.user_id,
            "conversation_id": self.conversation_id,
            "date": self.date,
            "key_topics": list(self.key_topics),
            "action_items": list(self.action_items),
            "pending_questions": list(self.pending_questions),
            "statistics": dict(self.statistics),
            "created_at": self.created_at.strftime(TIMESTAMP_FORMAT),
        }

    def to_row(self) -> Dict[str, str]:
        """Flatten to a storage row; list and mapping fields become JSON."""
        return {
            "summary_id": self.summary_id,
            "user_id": self.user_id,
            "conversation_id": self.conversation_id,
            "date": self.date,
            "key_topics": json.dumps(self.key_topics),
            "action_items": json.dumps(self.action_items),
            "pending_questions": json.dumps(self.pending_questions),
            "statistics": json.dumps(self.statistics),
            "summary_text": self.summary_text,
            "created_at": self.created_at.strftime(TIMESTAMP_FORMAT),
        }

    @classmethod
    def from_row(cls, row: Dict[str, Any]) -> "Summary":
        """Rebuild a summary from a storage row."""
        try:
            created_at = datetime.strptime(row["created_at"], TIMESTAMP_FORMAT)
        except (KeyError, TypeError, ValueError):
            created_at = datetime.now()

        return cls(
            summary_id=row["summary_id"],
            user_id=row["user_id"],
            conversation_id=row["conversation_id"],
            date=row["date"],
            key_topics=json.loads(row.get("key_topics") or "[]"),
            action_items=json.loads(row.get("action_items") or "[]"),
            pending_questions=json.loads(row.get("pending_questions") or "[]"),
            statistics=json.loads(row.get("statistics") or "{}"),
            summary_text=row.get("summary_text") or "",
            created_at=created_at,
        )
