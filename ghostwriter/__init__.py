"""GhostWriter - Daily, weekly and monthly summaries of exported chat logs."""

__version__ = "0.1.0"
