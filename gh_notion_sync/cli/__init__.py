"""Command line interface for gh-notion-sync."""
