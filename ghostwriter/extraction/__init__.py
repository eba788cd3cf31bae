"""GhostWriter Extraction - Chat export parsers."""

from .chat_parser import SUPPORTED_PARSERS, WhatsAppParser, get_parser, normalize_timestamp

__all__ = [
    "WhatsAppParser",
    "get_parser",
    "normalize_timestamp",
    "SUPPORTED_PARSERS",
]
