#!/usr/bin/env python3
"""strategies.py - Heuristic analysis strategies for GhostWriter

Each strategy is a pure function over an ordered message sequence that
fills exactly one facet of an AnalysisResult: topics, action items,
questions, or statistics.

Author: GhostWriter Team
License: MIT
Python: 3.11+
"""

import logging
import math
import re
from collections import Counter
from dataclasses import dataclass
from enum import Enum, auto
from typing import Any, Callable, Dict, List, Sequence, Set

from ghostwriter.utils.models import AnalysisResult, Message, StatisticsKeys

# Configure module logger
logger = logging.getLogger(__name__)

MAX_TOPICS = 5
MIN_TOPIC_LENGTH = 3
MIN_ACTION_ITEM_LENGTH = 10

STOP_WORDS = frozenset({
    "the", "a", "an", "and", "or", "but", "in", "on", "at", "to", "for",
    "of", "with", "by", "from", "up", "about", "into", "through", "during",
    "is", "am", "are", "was", "were", "be", "been", "being", "have", "has",
    "had", "do", "does", "did", "will", "would", "should", "could", "may",
    "might", "must", "can", "i", "you", "he", "she", "it", "we", "they",
    "me", "him", "her", "us", "them", "my", "your", "his", "its", "our",
    "this", "that", "these", "those", "what", "which", "who", "when",
    "where", "why", "how", "all", "each", "every", "both", "few", "more",
    "most", "some", "such", "no", "not", "only", "own", "same", "so",
    "than", "too", "very", "just", "yeah", "ok", "okay", "yes",
})

# Substring matches against the lowercased sentence
ACTION_KEYWORDS = (
    "need", "should", "must", "have to", "got to", "remember", "don't forget",
    "make sure", "please", "can you", "could you", "will you", "would you",
    "let's", "we should", "i'll", "i will", "deadline", "by", "before",
    "send", "email", "call", "meet", "schedule", "remind",
)

NON_TOPIC_CHARS = re.compile(r"[^a-z0-9\s]")
ACTION_SENTENCE_SPLIT = re.compile(r"[.!?]")
QUESTION_SENTENCE_SPLIT = re.compile(r"[.!]")


class StrategyKind(Enum):
    """The analysis facets GhostWriter knows how to compute."""

    TOPICS = auto()
    ACTION_ITEMS = auto()
    QUESTIONS = auto()
    STATISTICS = auto()


@dataclass(frozen=True)
class AnalysisStrategy:
    """
    A named, stateless analysis function.

    Attributes:
        name: Identity used for logging and selection
        func: Callable producing a partial AnalysisResult
    """

    name: str
    func: Callable[[Sequence[Message]], AnalysisResult]

    def __call__(self, messages: Sequence[Message]) -> AnalysisResult:
        return self.func(messages)


def _attributed(sentence: str, sender: str) -> str:
    return f'"{sentence}" - {sender}'


def extract_topics(messages: Sequence[Message]) -> AnalysisResult:
    """Most frequent meaningful words, top five with more than one mention."""
    frequency: Counter = Counter()
    for message in messages:
        cleaned = NON_TOPIC_CHARS.sub("", message.content.lower())
        for word in cleaned.split():
            if len(word) < MIN_TOPIC_LENGTH or word in STOP_WORDS:
                continue
            frequency[word] += 1

    # sorted() is stable, so equal counts keep first-seen order
    ranked = sorted(frequency.items(), key=lambda item: item[1], reverse=True)
    topics = [
        f"{word} (mentioned {count} times)" for word, count in ranked if count > 1
    ][:MAX_TOPICS]

    logger.debug("Found %d key topics", len(topics))
    return AnalysisResult(topics=topics)


def detect_action_items(messages: Sequence[Message]) -> AnalysisResult:
    """Sentences containing an action phrase, attributed to their sender."""
    action_items: List[str] = []
    seen: Set[str] = set()

    for message in messages:
        for sentence in ACTION_SENTENCE_SPLIT.split(message.content):
            clean = sentence.strip()
            lowered = clean.lower()
            if not any(keyword in lowered for keyword in ACTION_KEYWORDS):
                continue
            if len(clean) > MIN_ACTION_ITEM_LENGTH and clean not in seen:
                seen.add(clean)
                action_items.append(_attributed(clean, message.sender))

    logger.debug("Found %d action items", len(action_items))
    return AnalysisResult(action_items=action_items)


def detect_questions(messages: Sequence[Message]) -> AnalysisResult:
    """Sentences ending in a question mark, attributed to their sender."""
    questions: List[str] = []
    seen: Set[str] = set()

    for message in messages:
        # "?" is not a separator so it stays on its sentence
        for sentence in QUESTION_SENTENCE_SPLIT.split(message.content):
            clean = sentence.strip()
            if clean.endswith("?") and clean not in seen:
                seen.add(clean)
                questions.append(_attributed(clean, message.sender))

    logger.debug("Found %d pending questions", len(questions))
    return AnalysisResult(questions=questions)


def calculate_statistics(messages: Sequence[Message]) -> AnalysisResult:
    """Message counts, participants, time range and average length."""
    sender_breakdown: Dict[str, int] = {}
    for message in messages:
        sender_breakdown[message.sender] = sender_breakdown.get(message.sender, 0) + 1

    most_active = "Unknown"
    best = 0
    for sender, count in sender_breakdown.items():
        if count > best:
            most_active, best = sender, count

    stats: Dict[str, Any] = {
        StatisticsKeys.TOTAL_MESSAGES: len(messages),
        StatisticsKeys.SENDER_BREAKDOWN: sender_breakdown,
        StatisticsKeys.MOST_ACTIVE: most_active,
    }

    if messages:
        stats[StatisticsKeys.FIRST_MESSAGE] = messages[0].timestamp
        stats[StatisticsKeys.LAST_MESSAGE] = messages[-1].timestamp
        average = sum(len(m.content) for m in messages) / len(messages)
        stats[StatisticsKeys.AVG_MESSAGE_LENGTH] = int(math.floor(average + 0.5))
    else:
        stats[StatisticsKeys.AVG_MESSAGE_LENGTH] = 0

    logger.debug("Calculated %d statistics", len(stats))
    return AnalysisResult(statistics=stats)


TOPIC_EXTRACTION = AnalysisStrategy("TopicExtractionStrategy", extract_topics)
ACTION_ITEM_DETECTION = AnalysisStrategy("ActionItemStrategy", detect_action_items)
QUESTION_DETECTION = AnalysisStrategy("QuestionDetectionStrategy", detect_questions)
STATISTICS = AnalysisStrategy("StatisticsStrategy", calculate_statistics)

STRATEGIES: Dict[StrategyKind, AnalysisStrategy] = {
    StrategyKind.TOPICS: TOPIC_EXTRACTION,
    StrategyKind.ACTION_ITEMS: ACTION_ITEM_DETECTION,
    StrategyKind.QUESTIONS: QUESTION_DETECTION,
    StrategyKind.STATISTICS: STATISTICS,
}

DEFAULT_STRATEGIES = tuple(STRATEGIES.values())


def get_strategy(name: str) -> AnalysisStrategy:
    """
    Resolve a strategy by its name or its kind.

    Accepts "TopicExtractionStrategy" as well as "topics" (case-insensitive).

    Raises:
        ValueError: If nothing matches
    """
    wanted = name.strip().lower()
    for kind, strategy in STRATEGIES.items():
        if wanted in (strategy.name.lower(), kind.name.lower()):
            return strategy

    known = ", ".join(s.name for s in DEFAULT_STRATEGIES)
    raise ValueError(f"Unknown strategy: {name}. Known strategies: {known}")
