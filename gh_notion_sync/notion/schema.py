"""Notion database schema for tracked issues.

Every column written to Notion is listed once in ``ISSUE_SCHEMA``. Changing
the database layout means editing that table only.
API Reference: https://developers.notion.com/reference/page-property-values
"""

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from pydantic import BaseModel, ConfigDict

from ..github_client.models import TrackedItem

NAME = "Name"
REPOSITORY = "Repository"
ISSUE_NUMBER = "Issue Number"
ASSIGNEES = "Assignees"
STATE = "State"
COMMENT_COUNT = "Number of Comments"
ISSUE_URL = "Issue URL"


def _text(value: str) -> list[dict[str, Any]]:
    return [{"type": "text", "text": {"content": value}}]


# Notion property type -> encoder of the property value
ENCODERS: dict[str, Callable[[Any], dict[str, Any]]] = {
    "title": lambda value: {"title": _text(value)},
    "rich_text": lambda value: {"rich_text": _text(value)},
    "number": lambda value: {"number": value},
    "multi_select": lambda value: {"multi_select": value},
    "select": lambda value: {"select": {"name": value}},
    "url": lambda value: {"url": value},
}


@dataclass(frozen=True)
class PropertySpec:
    """One Notion column and the TrackedItem value stored in it."""

    name: str
    kind: str
    value: Callable[[TrackedItem], Any]

    def encode(self, item: TrackedItem) -> dict[str, Any]:
        return ENCODERS[self.kind](self.value(item))


ISSUE_SCHEMA: tuple[PropertySpec, ...] = (
    PropertySpec(NAME, "title", lambda item: item.title),
    PropertySpec(REPOSITORY, "rich_text", lambda item: item.collection),
    PropertySpec(ISSUE_NUMBER, "number", lambda item: item.number),
    PropertySpec(
        ASSIGNEES,
        "multi_select",
        lambda item: [{"name": assignee.name} for assignee in item.assignees],
    ),
    PropertySpec(STATE, "select", lambda item: item.state.value),
    PropertySpec(COMMENT_COUNT, "number", lambda item: item.comment_count),
    PropertySpec(ISSUE_URL, "url", lambda item: item.url),
)


def issue_to_properties(item: TrackedItem) -> dict[str, dict[str, Any]]:
    """Return the issue as Notion page properties for this database."""
    return {spec.name: spec.encode(item) for spec in ISSUE_SCHEMA}


class DestinationRow(BaseModel):
    """A Notion page of the database reduced to its issue identity."""

    model_config = ConfigDict(frozen=True)

    row_id: str
    collection: str
    number: int


def row_key(page: dict[str, Any]) -> DestinationRow:
    """Extract the issue identity from a Notion page.

    Pages are not validated: a page missing the repository text or the
    issue number raises KeyError, IndexError or TypeError.
    """
    properties = page["properties"]
    return DestinationRow(
        row_id=page["id"],
        collection=properties[REPOSITORY]["rich_text"][0]["plain_text"],
        number=int(properties[ISSUE_NUMBER]["number"]),
    )
