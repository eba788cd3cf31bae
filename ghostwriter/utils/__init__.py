"""GhostWriter Utils - Value types and configuration."""
