"""Fetch, extract and summarize arbitrary inputs as plain text."""

__version__ = "0.1.0"
