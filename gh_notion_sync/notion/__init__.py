"""Notion destination: database access, schema and identity index."""

from .client import NotionDatabase
from .index import IdentityIndex, rebuild
from .schema import ISSUE_SCHEMA, DestinationRow, issue_to_properties, row_key

__all__ = [
    "NotionDatabase",
    "IdentityIndex",
    "rebuild",
    "ISSUE_SCHEMA",
    "DestinationRow",
    "issue_to_properties",
    "row_key",
]
