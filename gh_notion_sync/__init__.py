"""Keep a Notion database in sync with GitHub issues."""

__version__ = "0.1.0"
