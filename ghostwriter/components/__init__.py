"""GhostWriter Components - Persistence, summaries, export, batch runs and reports."""

from .batch import BatchProcessor, BatchResult
from .exporter import SummaryExporter
from .reports import MonthlyReport, WeeklyReport
from .store import ConversationStore
from .summary import Summary

__all__ = [
    "BatchProcessor",
    "BatchResult",
    "ConversationStore",
    "MonthlyReport",
    "Summary",
    "SummaryExporter",
    "WeeklyReport",
]
