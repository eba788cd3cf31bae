#!/usr/bin/env python3
"""cli.py - Command line interface for GhostWriter

Parse chat exports, analyze them into daily summaries, batch-process
folders of exports and print weekly or monthly reports.

Author: GhostWriter Team
License: MIT
Python: 3.11+
"""

import argparse
import json
import logging
import sys
from datetime import date
from pathlib import Path
from typing import Any, Dict, List, Optional

from ghostwriter.components.batch import BatchProcessor, extract_date
from ghostwriter.components.exporter import SummaryExporter
from ghostwriter.components.reports import MonthlyReport, WeeklyReport
from ghostwriter.components.store import ConversationStore
from ghostwriter.components.summary import Summary
from ghostwriter.core.analyzer import Analyzer
from ghostwriter.core.strategies import get_strategy
from ghostwriter.extraction.chat_parser import get_parser
from ghostwriter.utils.config import load_config
from ghostwriter.utils.models import Conversation

logger = logging.getLogger(__name__)

DEFAULT_USER = "local"
STDOUT = "-"


def _create_parser() -> argparse.ArgumentParser:
    """Create and configure argument parser."""
    parser = argparse.ArgumentParser(
        prog="ghostwriter",
        description="Summarize exported chat logs",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s parse chat_2024-12-10.txt
  %(prog)s analyze chat_2024-12-10.txt --format html --output summaries/
  %(prog)s batch exports/*.txt --user alice
  %(prog)s weekly --user alice --end-date 2024-12-16
  %(prog)s monthly --user alice --month 12 --year 2024
        """,
    )
    parser.add_argument("--config", type=Path, help="Directory holding ghostwriter_config.yaml")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable verbose logging")

    subparsers = parser.add_subparsers(dest="command", required=True)

    parse_cmd = subparsers.add_parser("parse", help="Print parsed messages as JSON")
    parse_cmd.add_argument("file", type=Path, help="Chat export file")

    analyze_cmd = subparsers.add_parser("analyze", help="Analyze one export into a summary")
    analyze_cmd.add_argument("file", type=Path, help="Chat export file")
    analyze_cmd.add_argument(
        "--strategy",
        "-s",
        action="append",
        dest="strategies",
        help="Strategy to run (repeatable); defaults to the configured list",
    )
    analyze_cmd.add_argument("--format", "-f", dest="fmt", help="txt, md, html or json")
    analyze_cmd.add_argument(
        "--output",
        "-o",
        help="Write to this directory (default: config output_dir); \"-\" prints to stdout",
    )
    analyze_cmd.add_argument("--user", default=DEFAULT_USER, help="User id for the summary")

    batch_cmd = subparsers.add_parser("batch", help="Process many exports and store the summaries")
    batch_cmd.add_argument("files", nargs="+", type=Path, help="Chat export files")
    batch_cmd.add_argument("--user", default=DEFAULT_USER, help="User id for the summaries")

    weekly_cmd = subparsers.add_parser("weekly", help="Weekly report from stored summaries")
    weekly_cmd.add_argument("--user", default=DEFAULT_USER, help="User id")
    weekly_cmd.add_argument("--end-date", help="Last day of the week, YYYY-MM-DD (default: today)")

    monthly_cmd = subparsers.add_parser("monthly", help="Monthly report from stored summaries")
    monthly_cmd.add_argument("--user", default=DEFAULT_USER, help="User id")
    monthly_cmd.add_argument("--month", type=int, required=True, help="Month number, 1-12")
    monthly_cmd.add_argument("--year", type=int, required=True, help="Four-digit year")

    return parser


def _configure_logging(config: Dict[str, Any], verbose: bool) -> None:
    level = logging.DEBUG if verbose else getattr(logging, str(config["log_level"]).upper(), logging.WARNING)
    logging.basicConfig(level=level, format="%(asctime)s %(name)s %(levelname)s: %(message)s")


def _open_store(config: Dict[str, Any]) -> ConversationStore:
    return ConversationStore(Path(config["database_path"]))


def _cmd_parse(args: argparse.Namespace, config: Dict[str, Any]) -> int:
    content = args.file.read_text(encoding="utf-8")
    messages = get_parser(config["parser"]).parse(content)
    print(json.dumps([m.to_dict() for m in messages], indent=2, ensure_ascii=False))
    return 0


def _cmd_analyze(args: argparse.Namespace, config: Dict[str, Any]) -> int:
    content = args.file.read_text(encoding="utf-8")
    messages = get_parser(config["parser"]).parse(content)
    if not messages:
        print(f"{args.file.name}: No valid messages found in file", file=sys.stderr)
        return 1

    names: List[str] = args.strategies or config["strategies"]
    analyzer = Analyzer([get_strategy(name) for name in names])

    day = extract_date(args.file)
    conversation = Conversation.create(args.user, day, messages)
    summary = Summary.generate(args.user, conversation.conversation_id, day, analyzer.analyze(conversation))

    fmt = args.fmt or config["export_formats"][0]
    exporter = SummaryExporter()
    output = args.output or config["output_dir"]
    if output and str(output) != STDOUT:
        path = exporter.export(summary, fmt, Path(output))
        print(f"Summary written to: {path}")
    else:
        print(exporter.render(summary, fmt))
    return 0


def _cmd_batch(args: argparse.Namespace, config: Dict[str, Any]) -> int:
    processor = BatchProcessor(args.user, store=_open_store(config), config=config)
    result = processor.process_files(args.files)
    print(result.format_result())
    return 0 if result.is_success else 1


def _cmd_weekly(args: argparse.Namespace, config: Dict[str, Any]) -> int:
    end_date = args.end_date or date.today()
    store = _open_store(config)
    report = WeeklyReport.from_store(store, args.user, end_date)
    store.save_report(report)
    print(report.format_report())
    return 0


def _cmd_monthly(args: argparse.Namespace, config: Dict[str, Any]) -> int:
    store = _open_store(config)
    report = MonthlyReport.from_store(store, args.user, args.month, args.year)
    store.save_report(report)
    print(report.format_report())
    return 0


COMMANDS = {
    "parse": _cmd_parse,
    "analyze": _cmd_analyze,
    "batch": _cmd_batch,
    "weekly": _cmd_weekly,
    "monthly": _cmd_monthly,
}


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    parser = _create_parser()
    args = parser.parse_args(argv)

    config = load_config(args.config)
    _configure_logging(config, args.verbose)

    try:
        return COMMANDS[args.command](args, config)
    except (ValueError, OSError) as e:
        logger.debug("Command %s failed", args.command, exc_info=True)
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
