"""CLI commands for pomocycle."""
