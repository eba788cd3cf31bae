#!/usr/bin/env python3
"""
Test suite for the GhostWriter analysis coordinator
"""

import logging
from types import SimpleNamespace

import pytest

from ghostwriter.core.analyzer import Analyzer, InvalidAnalysisInput
from ghostwriter.core.strategies import (
    DEFAULT_STRATEGIES,
    STATISTICS,
    TOPIC_EXTRACTION,
    AnalysisStrategy,
)
from ghostwriter.utils.models import AnalysisResult, Conversation, Message, StatisticsKeys


def topics_only(name, topics):
    return AnalysisStrategy(name, lambda messages: AnalysisResult(topics=list(topics)))


@pytest.fixture
def conversation():
    """Conversation with a repeated topic, an action item and a question."""
    messages = [
        Message("We need to book the venue before Friday.", "Alice", "2024-12-10 09:00:00"),
        Message("The venue looks great. Which date works?", "Bob", "2024-12-10 09:05:00"),
        Message("Friday works for the venue", "Alice", "2024-12-10 09:10:00"),
    ]
    return Conversation.create("user-1", "2024-12-10", messages)


class TestAnalyzer:
    """Test the Analyzer class."""

    def test_defaults(self):
        assert Analyzer().strategies == list(DEFAULT_STRATEGIES)

    def test_empty_strategy_list_allowed(self, conversation):
        result = Analyzer([]).analyze(conversation)
        assert result == AnalysisResult()

    def test_full_analysis(self, conversation):
        result = Analyzer().analyze(conversation)

        assert result.topics[0] == "venue (mentioned 3 times)"
        assert '"We need to book the venue before Friday" - Alice' in result.action_items
        assert result.questions == ['"Which date works?" - Bob']
        assert result.statistics[StatisticsKeys.TOTAL_MESSAGES] == 3
        assert result.statistics[StatisticsKeys.MOST_ACTIVE] == "Alice"

    def test_none_conversation(self):
        with pytest.raises(InvalidAnalysisInput, match="cannot be None"):
            Analyzer().analyze(None)

    def test_empty_conversation(self):
        empty = Conversation.create("user-1", "2024-12-10")
        with pytest.raises(InvalidAnalysisInput, match="empty conversation"):
            Analyzer().analyze(empty)

    def test_invalid_input_is_value_error(self):
        assert issubclass(InvalidAnalysisInput, ValueError)

    def test_accepts_any_object_with_messages(self):
        holder = SimpleNamespace(messages=[Message("hello", "Alice")])
        result = Analyzer([STATISTICS]).analyze(holder)

        assert result.statistics[StatisticsKeys.TOTAL_MESSAGES] == 1

    def test_strategy_isolation(self, conversation):
        result = Analyzer([TOPIC_EXTRACTION]).analyze(conversation)

        assert result.has_topics
        assert not result.has_action_items
        assert not result.has_questions
        assert result.statistics == {}

    def test_merge_concatenates_in_order(self, conversation):
        first = topics_only("First", ["a1"])
        second = topics_only("Second", ["b1", "b2"])

        result = Analyzer([first, second]).analyze(conversation)

        assert result.topics == ["a1", "b1", "b2"]

    def test_merge_later_statistics_win(self, conversation):
        first = AnalysisStrategy(
            "First",
            lambda messages: AnalysisResult(
                action_items=["send invite"], questions=["when?"], statistics={"k": 1, "x": 0}
            ),
        )
        second = AnalysisStrategy(
            "Second",
            lambda messages: AnalysisResult(
                action_items=["book room"], questions=["where?"], statistics={"k": 2}
            ),
        )

        result = Analyzer([first, second]).analyze(conversation)

        assert result.statistics == {"k": 2, "x": 0}
        assert result.action_items == ["send invite", "book room"]
        assert result.questions == ["when?", "where?"]

    def test_add_strategy(self, conversation):
        analyzer = Analyzer([])
        analyzer.add_strategy(topics_only("One", ["x"]))
        analyzer.add_strategy(None)

        assert len(analyzer.strategies) == 1
        assert analyzer.analyze(conversation).topics == ["x"]

    def test_set_strategies(self):
        analyzer = Analyzer()
        analyzer.set_strategies([STATISTICS])

        assert analyzer.strategies == [STATISTICS]

    def test_strategies_property_is_copy(self):
        analyzer = Analyzer()
        analyzer.strategies.clear()

        assert len(analyzer.strategies) == 4

    def test_with_strategies_leaves_original(self, conversation):
        analyzer = Analyzer()
        derived = analyzer.with_strategies(TOPIC_EXTRACTION)

        assert derived is not analyzer
        assert derived.strategies == [TOPIC_EXTRACTION]
        assert analyzer.strategies == list(DEFAULT_STRATEGIES)

    def test_analyze_with_does_not_mutate(self, conversation):
        analyzer = Analyzer()
        result = analyzer.analyze_with(conversation, STATISTICS)

        assert result.topics == []
        assert result.statistics[StatisticsKeys.TOTAL_MESSAGES] == 3
        assert analyzer.strategies == list(DEFAULT_STRATEGIES)

    def test_logs_each_strategy(self, conversation, caplog):
        with caplog.at_level(logging.INFO, logger="ghostwriter.core.analyzer"):
            Analyzer().analyze(conversation)

        for strategy in DEFAULT_STRATEGIES:
            assert f"Running: {strategy.name}" in caplog.text
        assert "Analysis complete" in caplog.text
