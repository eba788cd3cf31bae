#!/usr/bin/env python3
"""batch.py - Batch processing of chat export files

Validates, parses, analyzes and summarizes a list of export files. Each file
succeeds or fails on its own; one failure never stops the batch.

Author: GhostWriter Team
License: MIT
Python: 3.11+
"""

import logging
import re
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from pathlib import Path
from typing import Any, Callable, Dict, Iterable, List, Optional

from ghostwriter.components.store import ConversationStore
from ghostwriter.components.summary import HEADER_LINE, SECTION_LINE, Summary
from ghostwriter.core.analyzer import Analyzer
from ghostwriter.core.strategies import get_strategy
from ghostwriter.extraction.chat_parser import WhatsAppParser, get_parser
from ghostwriter.utils.config import default_config
from ghostwriter.utils.models import Conversation

logger = logging.getLogger(__name__)

NO_MESSAGES_REASON = "No valid messages found in file"
FILENAME_DATE_PATTERN = re.compile(r"\d{4}-\d{2}-\d{2}")


class FileValidationError(ValueError):
    """Raised when an input file fails the pre-parse checks."""


class NoMessagesFound(ValueError):
    """Raised when a file parses to zero messages."""


@dataclass
class BatchResult:
    """
    Outcome of one batch run.

    Attributes:
        total_files: Number of files submitted
        processed_files: Names of files that produced a summary, in order
        failed_files: File name -> failure reason
        summaries: Summaries generated, in the order of processed_files
    """

    total_files: int
    batch_id: str = field(default_factory=lambda: str(uuid.uuid4()))
    processed_files: List[str] = field(default_factory=list)
    failed_files: Dict[str, str] = field(default_factory=dict)
    summaries: List[Summary] = field(default_factory=list)
    start_time: datetime = field(default_factory=datetime.now)
    end_time: Optional[datetime] = None

    def add_success(self, filename: str, summary: Summary) -> None:
        self.processed_files.append(filename)
        self.summaries.append(summary)

    def add_failure(self, filename: str, reason: str) -> None:
        self.failed_files[filename] = reason

    def mark_complete(self) -> None:
        self.end_time = datetime.now()

    @property
    def success_count(self) -> int:
        return len(self.processed_files)

    @property
    def failure_count(self) -> int:
        return len(self.failed_files)

    @property
    def is_success(self) -> bool:
        return self.failure_count == 0 and self.success_count == self.total_files

    @property
    def success_rate(self) -> float:
        """Percentage of files that succeeded; 0.0 for an empty batch."""
        if self.total_files == 0:
            return 0.0
        return self.success_count * 100.0 / self.total_files

    @property
    def duration(self) -> Optional[timedelta]:
        if self.end_time is None:
            return None
        return self.end_time - self.start_time

    def format_duration(self) -> str:
        duration = self.duration
        if duration is None:
            return "In progress..."

        total_ms = duration // timedelta(milliseconds=1)
        seconds, millis = divmod(total_ms, 1000)
        if seconds < 60:
            return f"{seconds}.{millis // 100} seconds"
        minutes, seconds = divmod(seconds, 60)
        return f"{minutes} minute(s) {seconds} seconds"

    def format_result(self) -> str:
        """Render the batch outcome as plain text."""
        lines = [
            HEADER_LINE,
            "   📦 BATCH PROCESSING RESULT\n",
            HEADER_LINE,
            "\n",
            "📊 STATISTICS\n",
            SECTION_LINE,
            f"Batch ID: {self.batch_id[:8]}...\n",
            f"Total Files: {self.total_files}\n",
            f"Successful: {self.success_count}\n",
            f"Failed: {self.failure_count}\n",
            f"Success Rate: {self.success_rate:.1f}%\n",
            f"Duration: {self.format_duration()}\n",
            "\n",
        ]

        if self.processed_files:
            lines += ["✅ PROCESSED FILES\n", SECTION_LINE]
            lines += [f"  • {name}\n" for name in self.processed_files]
            lines.append("\n")

        if self.failed_files:
            lines += ["❌ FAILED FILES\n", SECTION_LINE]
            lines += [f"  • {name}: {reason}\n" for name, reason in self.failed_files.items()]
            lines.append("\n")

        lines.append(HEADER_LINE)
        return "".join(lines)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "batch_id": self.batch_id,
            "total_files": self.total_files,
            "success_count": self.success_count,
            "failure_count": self.failure_count,
            "success_rate": self.success_rate,
            "processed_files": list(self.processed_files),
            "failed_files": dict(self.failed_files),
            "duration": self.format_duration(),
        }


class BatchProcessor:
    """
    Runs the parse -> analyze -> summarize pipeline over many files.

    A store is optional; without one nothing is persisted and summaries are
    only returned in the BatchResult.
    """

    def __init__(
        self,
        user_id: str,
        analyzer: Optional[Analyzer] = None,
        parser: Optional[WhatsAppParser] = None,
        store: Optional[ConversationStore] = None,
        config: Optional[Dict[str, Any]] = None,
    ):
        """
        Initialize the processor.

        Args:
            user_id: Owner recorded on conversations and summaries
            analyzer: Analyzer to use; built from config["strategies"] when None
            parser: Chat parser; chosen from config["parser"] when None
            store: Optional persistence for conversations and summaries
            config: Configuration dict (see ghostwriter.utils.config)
        """
        self.user_id = user_id
        self.config = {**default_config(), **(config or {})}
        self.analyzer = analyzer or Analyzer(
            [get_strategy(name) for name in self.config["strategies"]]
        )
        self.parser = parser or get_parser(self.config["parser"])
        self.store = store

        self.supported_extensions = tuple(
            ext.lower() for ext in self.config["supported_extensions"]
        )
        self.max_file_size = int(self.config["max_file_size_bytes"])
        self.callbacks: List[Callable[[Summary], None]] = []

    def add_callback(self, callback: Callable[[Summary], None]) -> None:
        """
        Register a function called with each generated summary.

        Args:
            callback: Function to call with the Summary
        """
        self.callbacks.append(callback)
        logger.debug("Registered callback: %s", getattr(callback, "__name__", callback))

    def process_files(self, paths: Optional[Iterable[Path]]) -> BatchResult:
        """
        Process every file and collect the outcome.

        Args:
            paths: Export files to process; None or empty gives an empty result

        Returns:
            Completed BatchResult
        """
        files = [Path(p) for p in (paths or [])]
        result = BatchResult(total_files=len(files))

        logger.info("Batch %s started with %d files", result.batch_id[:8], len(files))

        for number, path in enumerate(files, start=1):
            logger.info("Processing file %d/%d: %s", number, len(files), path.name)
            self._process_with_tracking(path, result)

        result.mark_complete()
        logger.info(
            "Batch %s complete: %d succeeded, %d failed",
            result.batch_id[:8],
            result.success_count,
            result.failure_count,
        )
        return result

    def _process_with_tracking(self, path: Path, result: BatchResult) -> None:
        try:
            self.validate_file(path)
            summary = self.process_file(path)
        except FileValidationError as e:
            result.add_failure(path.name, f"Validation failed: {e}")
            logger.warning("Validation failed for %s: %s", path.name, e)
        except NoMessagesFound:
            result.add_failure(path.name, NO_MESSAGES_REASON)
            logger.warning("%s: %s", path.name, NO_MESSAGES_REASON)
        except (OSError, UnicodeDecodeError) as e:
            result.add_failure(path.name, f"Could not read file: {e}")
            logger.error("Could not read %s: %s", path.name, e)
        except Exception as e:
            result.add_failure(path.name, f"Processing error: {e}")
            logger.exception("Processing error for %s", path.name)
        else:
            result.add_success(path.name, summary)
            logger.info("Successfully processed: %s", path.name)

    def validate_file(self, path: Path) -> None:
        """
        Check that a file can be processed.

        Raises:
            FileValidationError: With the first check that failed
        """
        if not path.exists():
            raise FileValidationError(f"File does not exist: {path.name}")
        if not path.is_file():
            raise FileValidationError(f"Not a file: {path.name}")
        if not path.name.lower().endswith(self.supported_extensions):
            raise FileValidationError(
                f"Unsupported file type. Supported: {', '.join(self.supported_extensions)}"
            )

        size = path.stat().st_size
        if size > self.max_file_size:
            limit_mb = self.max_file_size / (1024 * 1024)
            raise FileValidationError(f"File too large. Maximum size: {limit_mb:g} MB")
        if size == 0:
            raise FileValidationError("File is empty")

    def process_file(self, path: Path) -> Summary:
        """
        Parse, analyze and summarize one (already validated) file.

        Raises:
            NoMessagesFound: If the file holds no parseable messages
            OSError: If the file cannot be read
        """
        content = path.read_text(encoding="utf-8")
        logger.debug("Read %d characters from %s", len(content), path.name)

        messages = self.parser.parse(content)
        if not messages:
            raise NoMessagesFound(NO_MESSAGES_REASON)

        date = extract_date(path)
        conversation = Conversation.create(self.user_id, date, messages)
        if self.store is not None:
            self.store.save_conversation(conversation)

        analysis = self.analyzer.analyze(conversation)
        summary = Summary.generate(self.user_id, conversation.conversation_id, date, analysis)
        if self.store is not None:
            self.store.save_summary(summary)

        self._notify(summary)
        return summary

    def _notify(self, summary: Summary) -> None:
        for callback in self.callbacks:
            try:
                callback(summary)
            except Exception as e:
                logger.error("Registered callback error: %s", e)


def extract_date(path: Path) -> str:
    """
    Date for a conversation file: the first yyyy-MM-dd in its name, else the
    file's modification date.
    """
    match = FILENAME_DATE_PATTERN.search(path.name)
    if match:
        return match.group(0)
    return datetime.fromtimestamp(path.stat().st_mtime).strftime("%Y-%m-%d")
