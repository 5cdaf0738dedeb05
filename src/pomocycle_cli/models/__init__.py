"""Domain models for pomocycle."""
