#!/usr/bin/env python3
"""
GhostWriter Chat Parser - Line-oriented parser for WhatsApp chat exports

Turns the raw text of an export into an ordered list of Messages:

    [12/10/24, 2:31 PM] Alice: Hey, how are you?
    [12/10/24, 2:35 PM] Bob: I'm good, thanks!

Lines that do not start a message are folded into the open message, and
known system notices are discarded. Parsing is best-effort and never raises
on malformed content.
"""

import logging
import re
from datetime import datetime
from typing import Iterable, List, Optional

from ghostwriter.utils.models import TIMESTAMP_FORMAT, Message

logger = logging.getLogger(__name__)

# [date, time] Sender: body
MESSAGE_START_PATTERN = re.compile(
    r"\[(\d{1,2}/\d{1,2}/\d{2}(?:\d{2})?),\s*(\d{1,2}:\d{2}(?:\s*[AP]M)?)\]\s*([^:]+):\s*(.+)"
)

# Direction and zero-width marks embedded by some exporters
INVISIBLE_MARKS = re.compile(r"[\u200e\u200f\u200b-\u200d\u2069\ufeff]")

SYSTEM_MESSAGE_PATTERNS = (
    "end-to-end encrypted",
    "created group",
    "changed the subject",
)

SUPPORTED_PARSERS = ("whatsapp",)
_PARSER_ALIASES = {"whatsapp", "whats app", "wa"}


def normalize_timestamp(date: str, time: str) -> str:
    """
    Combine a WhatsApp date and 12-hour time into "yyyy-MM-dd HH:mm:ss".

    Two-digit years above 50 map to 19xx, the rest to 20xx. If the pieces do
    not form a real date and time, the raw strings are returned joined with a
    space.
    """
    try:
        month, day, year_text = date.split("/")
        if len(year_text) not in (2, 4):
            raise ValueError(f"Unexpected year: {year_text}")
        year = int(year_text)
        if len(year_text) == 2:
            year += 1900 if year > 50 else 2000

        compact = time.replace(" ", "").upper()
        is_pm = compact.endswith("PM")
        is_am = compact.endswith("AM")
        hour_text, minute_text = compact.rstrip("APM").split(":")
        hour = int(hour_text)

        if is_pm and hour != 12:
            hour += 12
        elif is_am and hour == 12:
            hour = 0

        parsed = datetime(year, int(month), int(day), hour, int(minute_text))
    except ValueError:
        return f"{date} {time}"
    return parsed.strftime(TIMESTAMP_FORMAT)


class WhatsAppParser:
    """
    Parser for WhatsApp .txt exports.

    Holds no state between calls; each parse() starts fresh.
    """

    name = "whatsapp"

    def __init__(self, system_patterns: Optional[Iterable[str]] = None):
        """
        Args:
            system_patterns: Extra phrases marking system notices, added to
                the built-in list
        """
        self.system_patterns = SYSTEM_MESSAGE_PATTERNS + tuple(system_patterns or ())

    def parse(self, content: Optional[str]) -> List[Message]:
        """
        Parse an export into messages.

        Args:
            content: Full text of one chat export. None or blank gives [].

        Returns:
            Messages in source order
        """
        if not content or not content.strip():
            return []

        messages: List[Message] = []
        current_sender: Optional[str] = None
        current_timestamp: Optional[str] = None
        current_content: List[str] = []

        for raw_line in content.split("\n"):
            line = INVISIBLE_MARKS.sub("", raw_line).strip()
            if not line or self._is_system_line(line):
                continue

            match = MESSAGE_START_PATTERN.fullmatch(line)
            if match:
                if current_sender is not None:
                    messages.append(self._build_message(current_content, current_sender, current_timestamp))

                date, time, sender, body = match.groups()
                current_sender = sender.strip()
                current_timestamp = normalize_timestamp(date, time)
                current_content = [body.strip()]
            elif current_sender is not None:
                current_content.append(line)

        if current_sender is not None:
            messages.append(self._build_message(current_content, current_sender, current_timestamp))

        logger.debug("Parsed %d WhatsApp messages", len(messages))
        return messages

    def _is_system_line(self, line: str) -> bool:
        return any(pattern in line for pattern in self.system_patterns)

    @staticmethod
    def _build_message(parts: List[str], sender: str, timestamp: str) -> Message:
        return Message(content=" ".join(parts).strip(), sender=sender, timestamp=timestamp)


def get_parser(kind: str) -> WhatsAppParser:
    """
    Return a parser for the given export type.

    Raises:
        ValueError: If the type is empty or unsupported
    """
    if not kind or not kind.strip():
        raise ValueError("Parser type cannot be empty")

    normalized = kind.strip().lower()
    if normalized in _PARSER_ALIASES:
        return WhatsAppParser()

    raise ValueError(
        f"Unsupported parser type: {kind}. Supported types: {', '.join(SUPPORTED_PARSERS)}"
    )
