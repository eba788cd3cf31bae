#!/usr/bin/env python3
"""exporter.py - Summary export for GhostWriter

Renders a Summary as plain text, Markdown, HTML or JSON and writes it to
disk.

Author: GhostWriter Team
License: MIT
Python: 3.11+
"""

import html
import json
import logging
from pathlib import Path
from typing import Dict, List

import mistune

from ghostwriter.components.summary import Summary
from ghostwriter.utils.models import StatisticsKeys

logger = logging.getLogger(__name__)

FORMAT_EXTENSIONS: Dict[str, str] = {
    "txt": ".txt",
    "md": ".md",
    "html": ".html",
    "json": ".json",
}

_FORMAT_ALIASES = {
    "txt": "txt",
    "text": "txt",
    "md": "md",
    "markdown": "md",
    "html": "html",
    "json": "json",
}

HTML_TEMPLATE = """<!DOCTYPE html>
<html lang="en">
<head>
<meta charset="utf-8">
<title>{title}</title>
</head>
<body>
{body}</body>
</html>
"""


def normalize_format(fmt: str) -> str:
    """
    Map a format name or alias to its canonical form.

    Raises:
        ValueError: If the format is not supported
    """
    key = (fmt or "").strip().lower()
    if key not in _FORMAT_ALIASES:
        raise ValueError(
            f"Unsupported export format: {fmt}. Supported formats: {', '.join(FORMAT_EXTENSIONS)}"
        )
    return _FORMAT_ALIASES[key]


class SummaryExporter:
    """Renders summaries and writes them to an output directory."""

    def __init__(self):
        # escape=True keeps chat text from injecting raw HTML
        self._markdown = mistune.create_markdown(escape=True)

    def render(self, summary: Summary, fmt: str) -> str:
        """
        Render a summary in the given format.

        Args:
            summary: Summary to render
            fmt: txt/text, md/markdown, html or json

        Returns:
            Rendered document
        """
        canonical = normalize_format(fmt)
        if canonical == "txt":
            return summary.summary_text or summary.format_text()
        if canonical == "md":
            return self.to_markdown(summary)
        if canonical == "html":
            return self.to_html(summary)
        return json.dumps(summary.to_dict(), indent=2, ensure_ascii=False)

    def to_markdown(self, summary: Summary) -> str:
        stats = summary.statistics
        lines = [
            f"# Daily Summary - {summary.date}",
            "",
            "## Message Statistics",
            "",
            f"- **Total Messages:** {stats.get(StatisticsKeys.TOTAL_MESSAGES, 0)}",
            f"- **Most Active:** {stats.get(StatisticsKeys.MOST_ACTIVE, 'N/A')}",
        ]
        if StatisticsKeys.AVG_MESSAGE_LENGTH in stats:
            lines.append(
                f"- **Avg Message Length:** {stats[StatisticsKeys.AVG_MESSAGE_LENGTH]} characters"
            )
        breakdown = stats.get(StatisticsKeys.SENDER_BREAKDOWN) or {}
        if breakdown:
            lines.append("- **Participants:**")
            lines += [f"  - {sender}: {count} messages" for sender, count in breakdown.items()]

        lines += ["", "## Key Topics", ""]
        if summary.key_topics:
            lines += [f"{i}. {topic}" for i, topic in enumerate(summary.key_topics, start=1)]
        else:
            lines.append("No specific topics identified")

        if summary.action_items:
            lines += ["", "## Action Items", ""]
            lines += [f"- [ ] {item}" for item in summary.action_items]

        if summary.pending_questions:
            lines += ["", "## Pending Questions", ""]
            lines += [f"- {question}" for question in summary.pending_questions]

        lines += ["", "---", "", "*Generated by GhostWriter*", ""]
        return "\n".join(lines)

    def to_html(self, summary: Summary) -> str:
        body = self._markdown(self.to_markdown(summary))
        title = html.escape(f"Daily Summary - {summary.date}")
        return HTML_TEMPLATE.format(title=title, body=body)

    def export(self, summary: Summary, fmt: str, output_dir: Path) -> Path:
        """
        Write a summary to output_dir as summary_<date><ext>.

        Returns:
            Path of the written file
        """
        canonical = normalize_format(fmt)
        output_dir = Path(output_dir)
        output_dir.mkdir(parents=True, exist_ok=True)

        path = output_dir / f"summary_{summary.date}{FORMAT_EXTENSIONS[canonical]}"
        path.write_text(self.render(summary, canonical), encoding="utf-8")

        logger.info("Exported summary %s to %s", summary.summary_id, path)
        return path

    def export_all(self, summary: Summary, output_dir: Path) -> List[Path]:
        """Write the summary in every supported format."""
        return [self.export(summary, fmt, output_dir) for fmt in FORMAT_EXTENSIONS]
