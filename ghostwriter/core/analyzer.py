#!/usr/bin/env python3
"""analyzer.py - Analysis coordinator for GhostWriter

Runs an ordered list of strategies over a conversation and merges their
partial results into one AnalysisResult.

Author: GhostWriter Team
License: MIT
Python: 3.11+
"""

import logging
from typing import Any, Dict, Iterable, List, Optional, Sequence

from ghostwriter.core.strategies import DEFAULT_STRATEGIES, AnalysisStrategy
from ghostwriter.utils.models import AnalysisResult, Message

logger = logging.getLogger(__name__)


class InvalidAnalysisInput(ValueError):
    """Raised when there is no conversation or it has no messages."""


class Analyzer:
    """
    Coordinates analysis strategies.

    The configured list is the only state. add_strategy() and
    set_strategies() mutate it in place and are not synchronized: share an
    instance across threads only with external locking, or use
    with_strategies() to derive an independent analyzer.
    """

    def __init__(self, strategies: Optional[Iterable[AnalysisStrategy]] = None):
        """
        Args:
            strategies: Strategies to run, in order. None selects the four
                defaults; an empty iterable is allowed.
        """
        if strategies is None:
            strategies = DEFAULT_STRATEGIES
        self._strategies: List[AnalysisStrategy] = list(strategies)

    @property
    def strategies(self) -> List[AnalysisStrategy]:
        return list(self._strategies)

    def add_strategy(self, strategy: Optional[AnalysisStrategy]) -> None:
        if strategy is not None:
            self._strategies.append(strategy)

    def set_strategies(self, strategies: Iterable[AnalysisStrategy]) -> None:
        self._strategies = list(strategies)

    def with_strategies(self, *strategies: AnalysisStrategy) -> "Analyzer":
        """Return a new analyzer using the given strategies."""
        return Analyzer(strategies)

    def analyze(self, conversation: Any) -> AnalysisResult:
        """
        Analyze a conversation with the configured strategies.

        Args:
            conversation: A Conversation, or anything with a `messages` sequence

        Returns:
            Merged AnalysisResult

        Raises:
            InvalidAnalysisInput: If the conversation is None or empty
        """
        return self._run(conversation, self._strategies)

    def analyze_with(self, conversation: Any, *strategies: AnalysisStrategy) -> AnalysisResult:
        """Analyze once with the given strategies; the configured list is untouched."""
        return self._run(conversation, list(strategies))

    def _run(self, conversation: Any, strategies: Sequence[AnalysisStrategy]) -> AnalysisResult:
        if conversation is None:
            raise InvalidAnalysisInput("Conversation cannot be None")

        messages: Sequence[Message] = getattr(conversation, "messages", None) or []
        if not messages:
            raise InvalidAnalysisInput("Cannot analyze empty conversation")

        logger.info(
            "Analyzing conversation with %d strategies (%d messages)",
            len(strategies),
            len(messages),
        )

        topics: List[str] = []
        action_items: List[str] = []
        questions: List[str] = []
        statistics: Dict[str, Any] = {}

        for strategy in strategies:
            logger.info("Running: %s", strategy.name)
            partial = strategy(messages)
            topics.extend(partial.topics)
            action_items.extend(partial.action_items)
            questions.extend(partial.questions)
            statistics.update(partial.statistics)

        logger.info(
            "Analysis complete: %d topics, %d action items, %d questions, %d statistics",
            len(topics),
            len(action_items),
            len(questions),
            len(statistics),
        )
        return AnalysisResult(
            topics=topics,
            action_items=action_items,
            questions=questions,
            statistics=statistics,
        )
