"""GhostWriter Core - Analysis strategies and the coordinator that runs them."""

from .analyzer import Analyzer, InvalidAnalysisInput
from .strategies import (
    DEFAULT_STRATEGIES,
    AnalysisStrategy,
    StrategyKind,
    get_strategy,
)

__all__ = [
    "Analyzer",
    "InvalidAnalysisInput",
    "AnalysisStrategy",
    "StrategyKind",
    "DEFAULT_STRATEGIES",
    "get_strategy",
]
