"""Conversational calendar assistant: fuzzy event search and event creation."""

__version__ = "0.1.0"
