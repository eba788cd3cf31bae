#!/usr/bin/env python3
"""reports.py - Weekly and monthly activity reports

Aggregates daily Summaries over a date range into totals, top topics,
activity breakdowns and a plain-text report.

Author: GhostWriter Team
License: MIT
Python: 3.11+
"""

import calendar
import json
import logging
import re
import uuid
from collections import Counter
from dataclasses import dataclass, field
from datetime import date, datetime, timedelta
from typing import Any, Dict, Iterable, List, Optional

from ghostwriter.components.summary import HEADER_LINE, SECTION_LINE, Summary
from ghostwriter.utils.models import TIMESTAMP_FORMAT, StatisticsKeys

logger = logging.getLogger(__name__)

DATE_FORMAT = "%Y-%m-%d"
TOP_TOPIC_LIMIT = 10
BAR_WIDTH = 10
WEEKDAYS = ("Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday")
MENTION_SUFFIX = re.compile(r"\s*\(mentioned \d+ times\)$")


# Helpers


def get_message_count(summary: Optional[Summary]) -> int:
    """Total messages recorded in a summary; int or numeric string, else 0."""
    if summary is None or not summary.statistics:
        return 0
    count = summary.statistics.get(StatisticsKeys.TOTAL_MESSAGES)
    if isinstance(count, bool):
        return 0
    if isinstance(count, int):
        return count
    if isinstance(count, str):
        try:
            return int(count.strip())
        except ValueError:
            return 0
    return 0


def find_top_topics(summaries: Iterable[Summary], limit: int = TOP_TOPIC_LIMIT) -> List[str]:
    """
    Topics ranked by the number of summaries they appear in.

    A daily topic's "(mentioned N times)" suffix is dropped first, so the
    same word found on different days counts as one topic. Equal counts
    keep first-seen order.
    """
    frequency: Counter = Counter()
    for summary in summaries:
        topics = dict.fromkeys(MENTION_SUFFIX.sub("", topic) for topic in summary.key_topics)
        frequency.update(topics.keys())

    ranked = sorted(frequency.items(), key=lambda item: item[1], reverse=True)
    return [f"{topic} ({count} mentions)" for topic, count in ranked[:limit]]


def find_max_entry(counts: Dict[Any, int]) -> Optional[Any]:
    """Key with the largest positive count; the first one wins ties."""
    best_key, best = None, 0
    for key, value in counts.items():
        if value > best:
            best_key, best = key, value
    return best_key


def progress_bar(value: int, maximum: int, width: int = BAR_WIDTH) -> str:
    if maximum <= 0:
        return "░" * width
    filled = min(width, max(0, int(value * width / maximum)))
    return "█" * filled + "░" * (width - filled)


def _parse_date(value: Any) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return datetime.strptime(str(value), DATE_FORMAT).date()


def _in_range(summaries: Iterable[Summary], start: date, end: date) -> List[Summary]:
    start_text, end_text = start.strftime(DATE_FORMAT), end.strftime(DATE_FORMAT)
    selected = [s for s in summaries if start_text <= s.date <= end_text]
    return sorted(selected, key=lambda s: s.date)


def _limited(items: List[str], limit: int, prefix: str) -> str:
    text = "".join(f"{prefix}{item}\n" for item in items[:limit])
    if len(items) > limit:
        text += f"... and {len(items) - limit} more\n"
    return text


@dataclass
class WeeklyReport:
    """Seven-day activity report ending on end_date (inclusive)."""

    user_id: str
    start_date: date
    end_date: date
    summaries: List[Summary] = field(default_factory=list)
    total_messages: int = 0
    top_topics: List[str] = field(default_factory=list)
    action_items: List[str] = field(default_factory=list)
    pending_questions: List[str] = field(default_factory=list)
    daily_counts: Dict[str, int] = field(default_factory=dict)
    most_active_day: str = "N/A"
    most_active_day_count: int = 0
    report_id: str = field(default_factory=lambda: str(uuid.uuid4()))
    generated_at: datetime = field(default_factory=datetime.now)

    report_type = "weekly"

    @classmethod
    def generate(cls, user_id: str, end_date: Any, summaries: Iterable[Summary]) -> "WeeklyReport":
        """
        Aggregate the summaries that fall inside the week ending on end_date.

        Args:
            user_id: Owner of the report
            end_date: Last day of the week (date or "yyyy-MM-dd")
            summaries: Candidate daily summaries; those outside the week are ignored

        Returns:
            Populated WeeklyReport
        """
        end = _parse_date(end_date)
        start = end - timedelta(days=6)
        report = cls(user_id=user_id, start_date=start, end_date=end)
        report.summaries = _in_range(summaries, start, end)
        report._aggregate()

        logger.info(
            "Weekly report for %s to %s: %d summaries, %d messages",
            start, end, len(report.summaries), report.total_messages,
        )
        return report

    @classmethod
    def from_store(cls, store: Any, user_id: str, end_date: Any) -> "WeeklyReport":
        """Load the week's summaries from a ConversationStore and aggregate them."""
        end = _parse_date(end_date)
        start = end - timedelta(days=6)
        summaries = store.summaries_between(
            user_id, start.strftime(DATE_FORMAT), end.strftime(DATE_FORMAT)
        )
        return cls.generate(user_id, end, summaries)

    def _aggregate(self) -> None:
        if not self.summaries:
            logger.warning("No summaries found for %s to %s", self.start_date, self.end_date)
            return

        for summary in self.summaries:
            self.action_items.extend(summary.action_items)
            self.pending_questions.extend(summary.pending_questions)
            count = get_message_count(summary)
            self.total_messages += count
            self.daily_counts[summary.date] = self.daily_counts.get(summary.date, 0) + count

        self.top_topics = find_top_topics(self.summaries)
        busiest = find_max_entry(self.daily_counts)
        if busiest is not None:
            self.most_active_day = busiest
            self.most_active_day_count = self.daily_counts[busiest]

    @property
    def days_covered(self) -> int:
        return len(self.summaries)

    @property
    def average_per_day(self) -> float:
        if not self.summaries:
            return 0.0
        return self.total_messages / len(self.summaries)

    def format_report(self) -> str:
        """Render the report as plain text."""
        period = f"{self.start_date:%b %d, %Y} - {self.end_date:%b %d, %Y}"
        text = f"{HEADER_LINE}   📅 WEEKLY REPORT\n   {period}\n{HEADER_LINE}\n"

        text += "📊 WEEKLY STATISTICS\n" + SECTION_LINE
        text += f"Total Messages: {self.total_messages}\n"
        text += f"Days Covered: {self.days_covered}\n"
        text += f"Most Active Day: {self.most_active_day} ({self.most_active_day_count} messages)\n"
        if self.summaries:
            text += f"Average per Day: {self.average_per_day:.1f} messages\n"
        text += "\n"

        text += "🔑 TOP TOPICS THIS WEEK\n" + SECTION_LINE
        if self.top_topics:
            text += "".join(f"{i}. {topic}\n" for i, topic in enumerate(self.top_topics, start=1))
        else:
            text += "No topics identified\n"
        text += "\n"

        text += f"⚡ ACTION ITEMS ({len(self.action_items)} total)\n" + SECTION_LINE
        if self.action_items:
            text += _limited(self.action_items, 10, "☐ ")
        else:
            text += "No action items this week\n"
        text += "\n"

        if self.pending_questions:
            text += f"❓ PENDING QUESTIONS ({len(self.pending_questions)} total)\n" + SECTION_LINE
            text += _limited(self.pending_questions, 5, "? ") + "\n"

        text += "📆 DAILY BREAKDOWN\n" + SECTION_LINE
        for day, count in self.daily_counts.items():
            bar = progress_bar(count, self.most_active_day_count)
            text += f"{day}: {bar} {count} msgs\n"
        text += "\n"

        text += HEADER_LINE
        text += f"Generated: {self.generated_at.strftime(TIMESTAMP_FORMAT)}\n"
        text += "GhostWriter Weekly Report\n"
        text += HEADER_LINE
        return text

    def to_row(self) -> Dict[str, Any]:
        return {
            "report_id": self.report_id,
            "user_id": self.user_id,
            "report_type": self.report_type,
            "start_date": self.start_date.strftime(DATE_FORMAT),
            "end_date": self.end_date.strftime(DATE_FORMAT),
            "total_messages": self.total_messages,
            "top_topics": json.dumps(self.top_topics),
            "action_items_count": len(self.action_items),
            "most_active_day": self.most_active_day,
            "report_text": self.format_report(),
            "created_at": self.generated_at.strftime(TIMESTAMP_FORMAT),
        }


@dataclass
class MonthlyReport:
    """Calendar-month activity report with weekly and weekday breakdowns."""

    user_id: str
    month: int
    year: int
    summaries: List[Summary] = field(default_factory=list)
    total_messages: int = 0
    top_topics: List[str] = field(default_factory=list)
    action_items: List[str] = field(default_factory=list)
    weekly_breakdown: Dict[int, int] = field(default_factory=dict)
    weekday_activity: Dict[str, int] = field(default_factory=dict)
    most_active_week: int = 0
    most_active_day: str = "N/A"
    report_id: str = field(default_factory=lambda: str(uuid.uuid4()))
    generated_at: datetime = field(default_factory=datetime.now)

    report_type = "monthly"

    @staticmethod
    def month_bounds(month: int, year: int) -> tuple:
        """
        First and last day of a month.

        Raises:
            ValueError: If month is outside 1-12
        """
        if not 1 <= month <= 12:
            raise ValueError("Month must be between 1 and 12")
        last_day = calendar.monthrange(year, month)[1]
        return date(year, month, 1), date(year, month, last_day)

    @classmethod
    def generate(cls, user_id: str, month: int, year: int, summaries: Iterable[Summary]) -> "MonthlyReport":
        """
        Aggregate the summaries that fall inside the given month.

        Raises:
            ValueError: If month is outside 1-12
        """
        start, end = cls.month_bounds(month, year)
        report = cls(user_id=user_id, month=month, year=year)
        report.summaries = _in_range(summaries, start, end)
        report._aggregate()

        logger.info(
            "Monthly report for %s: %d summaries, %d messages",
            report.month_name, len(report.summaries), report.total_messages,
        )
        return report

    @classmethod
    def from_store(cls, store: Any, user_id: str, month: int, year: int) -> "MonthlyReport":
        """Load the month's summaries from a ConversationStore and aggregate them."""
        start, end = cls.month_bounds(month, year)
        summaries = store.summaries_between(
            user_id, start.strftime(DATE_FORMAT), end.strftime(DATE_FORMAT)
        )
        return cls.generate(user_id, month, year, summaries)

    def _aggregate(self) -> None:
        if not self.summaries:
            logger.warning("No summaries found for %s", self.month_name)
            return

        self.weekday_activity = {day: 0 for day in WEEKDAYS}
        for summary in self.summaries:
            self.action_items.extend(summary.action_items)
            count = get_message_count(summary)
            self.total_messages += count

            try:
                day = _parse_date(summary.date)
            except ValueError:
                logger.debug("Skipping breakdown for unparseable date %r", summary.date)
                continue
            week = (day.day - 1) // 7 + 1
            self.weekly_breakdown[week] = self.weekly_breakdown.get(week, 0) + count
            self.weekday_activity[WEEKDAYS[day.weekday()]] += count

        self.top_topics = find_top_topics(self.summaries)
        self.most_active_week = find_max_entry(dict(sorted(self.weekly_breakdown.items()))) or 0
        self.most_active_day = find_max_entry(self.weekday_activity) or "N/A"

    @property
    def month_name(self) -> str:
        return f"{calendar.month_name[self.month]} {self.year}"

    @property
    def start_date(self) -> date:
        return self.month_bounds(self.month, self.year)[0]

    @property
    def end_date(self) -> date:
        return self.month_bounds(self.month, self.year)[1]

    @property
    def days_covered(self) -> int:
        return len(self.summaries)

    @property
    def average_per_day(self) -> float:
        if not self.summaries:
            return 0.0
        return self.total_messages / len(self.summaries)

    def trend_description(self) -> str:
        if len(self.weekly_breakdown) < 2:
            return "Insufficient data for trend analysis"

        first = self.weekly_breakdown.get(1, 0)
        last = self.weekly_breakdown[max(self.weekly_breakdown)]
        if last > first * 1.2:
            return "Activity increased throughout the month"
        if last < first * 0.8:
            return "Activity decreased throughout the month"
        if self.most_active_week in (2, 3):
            return "Activity peaked mid-month"
        return "Activity remained relatively stable"

    def format_report(self) -> str:
        """Render the report as plain text."""
        text = f"{HEADER_LINE}   📅 MONTHLY REPORT: {self.month_name}\n{HEADER_LINE}\n"

        text += "📊 MONTHLY STATISTICS\n" + SECTION_LINE
        text += f"Total Messages: {self.total_messages:,}\n"
        text += f"Days Covered: {self.days_covered}\n"
        text += f"Average per Day: {self.average_per_day:.1f} messages\n\n"

        text += "📈 WEEKLY BREAKDOWN\n" + SECTION_LINE
        busiest_week = max(self.weekly_breakdown.values(), default=1)
        for week in range(1, 6):
            messages = self.weekly_breakdown.get(week, 0)
            if messages > 0 or week <= 4:
                marker = " ← Most Active" if week == self.most_active_week else ""
                text += f"Week {week}: {progress_bar(messages, busiest_week)} {messages} msgs{marker}\n"
        text += "\n"

        text += "📆 PATTERNS IDENTIFIED\n" + SECTION_LINE
        text += f"• Most active day of week: {self.most_active_day}\n"
        text += f"• Most active week: Week {self.most_active_week}\n"
        text += f"• Trend: {self.trend_description()}\n\n"

        text += "📊 ACTIVITY BY DAY OF WEEK\n" + SECTION_LINE
        busiest_day = max(self.weekday_activity.values(), default=1)
        for day in WEEKDAYS:
            activity = self.weekday_activity.get(day, 0)
            text += f"{day[:3]}: {progress_bar(activity, busiest_day)} {activity}\n"
        text += "\n"

        text += "🔑 TOP TOPICS THIS MONTH\n" + SECTION_LINE
        if self.top_topics:
            text += "".join(f"{i}. {topic}\n" for i, topic in enumerate(self.top_topics, start=1))
        else:
            text += "No topics identified\n"
        text += "\n"

        text += "⚡ ACTION ITEMS\n" + SECTION_LINE
        text += f"Total identified: {len(self.action_items)}\n"
        if self.action_items:
            text += "\nRecent action items:\n" + _limited(self.action_items, 5, "☐ ")
        text += "\n"

        text += HEADER_LINE
        text += f"Generated: {self.generated_at.strftime(TIMESTAMP_FORMAT)}\n"
        text += "GhostWriter Monthly Report\n"
        text += HEADER_LINE
        return text

    def to_row(self) -> Dict[str, Any]:
        return {
            "report_id": self.report_id,
            "user_id": self.user_id,
            "report_type": self.report_type,
            "start_date": self.start_date.strftime(DATE_FORMAT),
            "end_date": self.end_date.strftime(DATE_FORMAT),
            "total_messages": self.total_messages,
            "top_topics": json.dumps(self.top_topics),
            "action_items_count": len(self.action_items),
            "most_active_day": self.most_active_day,
            "report_text": self.format_report(),
            "created_at": self.generated_at.strftime(TIMESTAMP_FORMAT),
        }
