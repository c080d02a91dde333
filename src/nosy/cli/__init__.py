"""Command-line interface for nosy."""
