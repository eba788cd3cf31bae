#!/usr/bin/env python3
"""
Test suite for the GhostWriter WhatsApp chat parser
"""

import logging

import pytest

from ghostwriter.extraction.chat_parser import (
    SUPPORTED_PARSERS,
    WhatsAppParser,
    get_parser,
    normalize_timestamp,
)


class TestNormalizeTimestamp:
    """Test 12-hour to canonical timestamp conversion."""

    @pytest.mark.parametrize(
        "time,expected_hour",
        [
            ("12:00 AM", "00"),
            ("1:00 AM", "01"),
            ("11:00 AM", "11"),
            ("12:00 PM", "12"),
            ("1:00 PM", "13"),
            ("11:00 PM", "23"),
        ],
    )
    def test_hour_mapping(self, time, expected_hour):
        """Test the AM/PM mapping table, including both 12 o'clock cases."""
        assert normalize_timestamp("12/10/24", time) == f"2024-12-10 {expected_hour}:00:00"

    def test_every_hour_round_trips(self):
        """Test every hour 1-12 for both markers."""
        for hour in range(1, 13):
            am = normalize_timestamp("1/2/24", f"{hour}:05 AM")
            pm = normalize_timestamp("1/2/24", f"{hour}:05 PM")
            assert am == f"2024-01-02 {hour % 12:02d}:05:00"
            assert pm == f"2024-01-02 {hour % 12 + 12:02d}:05:00"

    def test_no_space_before_marker(self):
        assert normalize_timestamp("12/10/24", "2:31PM") == "2024-12-10 14:31:00"

    def test_no_marker_is_24_hour(self):
        assert normalize_timestamp("12/10/24", "14:31") == "2024-12-10 14:31:00"

    def test_two_digit_year_window(self):
        """Test years above 50 map to the 1900s."""
        assert normalize_timestamp("1/1/51", "9:00 AM") == "1951-01-01 09:00:00"
        assert normalize_timestamp("1/1/50", "9:00 AM") == "2050-01-01 09:00:00"

    def test_four_digit_year(self):
        assert normalize_timestamp("3/7/2023", "9:15 AM") == "2023-03-07 09:15:00"

    def test_invalid_date_falls_back_to_raw(self):
        """Test an impossible calendar date keeps the raw strings."""
        assert normalize_timestamp("13/40/24", "2:31 PM") == "13/40/24 2:31 PM"

    def test_invalid_hour_falls_back_to_raw(self):
        assert normalize_timestamp("12/10/24", "14:00 PM") == "12/10/24 14:00 PM"

    @pytest.mark.parametrize("date", ["12/10/124", "12/10/2", "12/10/20245"])
    def test_odd_year_length_falls_back_to_raw(self, date):
        assert normalize_timestamp(date, "2:31 PM") == f"{date} 2:31 PM"


class TestWhatsAppParser:
    """Test the WhatsAppParser class."""

    @pytest.fixture
    def parser(self):
        """Create a parser instance."""
        return WhatsAppParser()

    @pytest.fixture
    def sample_chat(self):
        """Sample export with noise, continuations and a system notice."""
        return (
            "[12/10/24, 9:00 AM] Messages and calls are end-to-end encrypted.\n"
            "[12/10/24, 2:31 PM] Alice: Hello, how are you?\n"
            "[12/10/24, 2:35 PM] Bob: I'm good, thanks!\n"
            "Just got back from the trip\n"
            "\n"
            "   and it was great   \n"
            "[12/10/24, 2:40 PM] Alice created group \"Trip\"\n"
            "[12/10/24, 2:41 PM] Alice: Can you send the photos?\n"
        )

    def test_concrete_two_messages(self, parser):
        """Test the basic two-message export."""
        content = (
            "[12/10/24, 2:31 PM] Alice: Hello, how are you?\n"
            "[12/10/24, 2:35 PM] Bob: I'm good, thanks!"
        )
        messages = parser.parse(content)

        assert len(messages) == 2
        assert messages[0].sender == "Alice"
        assert messages[0].content == "Hello, how are you?"
        assert messages[0].timestamp == "2024-12-10 14:31:00"
        assert messages[1].sender == "Bob"
        assert messages[1].content == "I'm good, thanks!"
        assert messages[1].timestamp == "2024-12-10 14:35:00"

    def test_midnight(self, parser):
        messages = parser.parse("[12/10/24, 12:00 AM] Alice: Midnight")

        assert len(messages) == 1
        assert messages[0].timestamp == "2024-12-10 00:00:00"

    @pytest.mark.parametrize("content", [None, "", "   \n\n  "])
    def test_empty_input(self, parser, content):
        assert parser.parse(content) == []

    def test_no_headers_gives_no_messages(self, parser):
        """Test text without any bracketed header."""
        content = "hello there\nthis is not an export\n12/10/24 Alice: nope"
        assert parser.parse(content) == []

    def test_three_digit_year_is_not_a_header(self, parser):
        assert parser.parse("[12/10/124, 2:31 PM] Alice: hi") == []

    def test_multiline_folding(self, parser, sample_chat):
        """Test continuation lines are space-joined into the open message."""
        messages = parser.parse(sample_chat)

        bob = messages[1]
        assert bob.sender == "Bob"
        assert bob.content == "I'm good, thanks! Just got back from the trip and it was great"

    def test_folding_n_lines(self, parser):
        lines = ["[1/1/24, 8:00 AM] Carol: start"] + [f"line {i}" for i in range(5)]
        messages = parser.parse("\n".join(lines))

        assert len(messages) == 1
        assert messages[0].content == "start line 0 line 1 line 2 line 3 line 4"

    def test_system_lines_excluded(self, parser, sample_chat):
        """Test system notices never become or extend messages."""
        messages = parser.parse(sample_chat)

        assert [m.sender for m in messages] == ["Alice", "Bob", "Alice"]
        assert all("encrypted" not in m.content for m in messages)
        assert all("created group" not in m.content for m in messages)

    def test_system_line_does_not_extend_open_message(self, parser):
        content = (
            "[1/1/24, 8:00 AM] Carol: hi\n"
            "Messages and calls are end-to-end encrypted\n"
            "more text"
        )
        messages = parser.parse(content)

        assert len(messages) == 1
        assert messages[0].content == "hi more text"

    def test_leading_continuation_lines_dropped(self, parser):
        content = "orphan line\n[1/1/24, 8:00 AM] Carol: hi"
        messages = parser.parse(content)

        assert len(messages) == 1
        assert messages[0].content == "hi"

    def test_colon_in_body(self, parser):
        messages = parser.parse("[1/1/24, 8:00 AM] Dave: meeting at 10:30: room 4")

        assert messages[0].sender == "Dave"
        assert messages[0].content == "meeting at 10:30: room 4"

    def test_invisible_marks_stripped(self, parser):
        """Test direction marks some exports embed before the bracket."""
        content = "\u200e[12/10/24, 2:31 PM] Alice: Hello\u200f"
        messages = parser.parse(content)

        assert len(messages) == 1
        assert messages[0].content == "Hello"

    def test_windows_line_endings(self, parser):
        content = "[12/10/24, 2:31 PM] Alice: one\r\n[12/10/24, 2:32 PM] Bob: two\r\n"
        messages = parser.parse(content)

        assert [m.content for m in messages] == ["one", "two"]

    def test_custom_system_patterns(self):
        parser = WhatsAppParser(system_patterns=["joined using this group's invite link"])
        content = (
            "[1/1/24, 8:00 AM] Erin: hi all\n"
            "[1/1/24, 8:01 AM] Frank joined using this group's invite link"
        )
        messages = parser.parse(content)

        assert len(messages) == 1
        assert messages[0].content == "hi all"

    def test_reparse_is_stable(self, parser, sample_chat):
        """Test re-parsing rebuilt output gives the same messages."""
        first = parser.parse(sample_chat)
        rebuilt = "\n".join(f"[12/10/24, 2:31 PM] {m.sender}: {m.content}" for m in first)
        second = parser.parse(rebuilt)

        assert [(m.sender, m.content) for m in second] == [(m.sender, m.content) for m in first]

    def test_message_ids_unique(self, parser, sample_chat):
        messages = parser.parse(sample_chat)
        assert len({m.message_id for m in messages}) == len(messages)

    def test_logs_message_count(self, parser, sample_chat, caplog):
        with caplog.at_level(logging.DEBUG, logger="ghostwriter.extraction.chat_parser"):
            parser.parse(sample_chat)

        assert "Parsed 3 WhatsApp messages" in caplog.text


class TestGetParser:
    """Test the parser factory."""

    @pytest.mark.parametrize("kind", ["whatsapp", "WhatsApp", " whats app ", "WA"])
    def test_aliases(self, kind):
        assert isinstance(get_parser(kind), WhatsAppParser)

    @pytest.mark.parametrize("kind", ["", "   ", None])
    def test_empty_kind(self, kind):
        with pytest.raises(ValueError, match="cannot be empty"):
            get_parser(kind)

    def test_unsupported_kind(self):
        with pytest.raises(ValueError, match="Unsupported parser type: telegram"):
            get_parser("telegram")

    def test_supported_parsers(self):
        assert "whatsapp" in SUPPORTED_PARSERS
