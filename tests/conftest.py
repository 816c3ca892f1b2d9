"""Test configuration and fixtures."""

import copy
import itertools
from collections.abc import Callable
from typing import Any
from unittest.mock import Mock

import pytest

from gh_notion_sync.github_client.models import Assignee, IssueState, TrackedItem
from gh_notion_sync.notion.client import NotionDatabase


def make_item(
    collection: str = "api",
    number: int = 1,
    state: str = "open",
    assignees: list[str] | None = None,
    title: str | None = None,
    comment_count: int = 0,
) -> TrackedItem:
    """Build a TrackedItem with sensible defaults."""
    kwargs: dict[str, Any] = {}
    if assignees:
        kwargs["assignees"] = [Assignee(name=name) for name in assignees]
    return TrackedItem(
        collection=collection,
        number=number,
        title=title or f"Issue {number}",
        state=IssueState(state),
        comment_count=comment_count,
        url=f"https://github.com/testorg/{collection}/issues/{number}",
        **kwargs,
    )


class FakeNotionDatabase(NotionDatabase):
    """In-memory Notion database that pages its query results."""

    def __init__(self, page_size: int = 2):
        super().__init__("db-test", client=Mock())
        self.page_size = page_size
        self.pages: dict[str, dict[str, Any]] = {}
        self.created: list[tuple[str, int] | None] = []
        self.updated: list[tuple[str, tuple[str, int] | None]] = []
        self.queries = 0
        self._ids = itertools.count(1)

    @staticmethod
    def _as_stored(properties: dict[str, Any]) -> dict[str, Any]:
        # Notion echoes text content back as plain_text
        stored = copy.deepcopy(properties)
        for value in stored.values():
            for kind in ("title", "rich_text"):
                for segment in value.get(kind, []):
                    segment["plain_text"] = segment["text"]["content"]
        return stored

    def add_page(self, collection: str, number: int, row_id: str | None = None) -> str:
        """Seed a page as if it had been created earlier."""
        row_id = row_id or f"seed-{next(self._ids)}"
        self.pages[row_id] = self._as_stored(
            {
                "Repository": {"rich_text": [{"text": {"content": collection}}]},
                "Issue Number": {"number": number},
            }
        )
        return row_id

    async def query(
        self, start_cursor: str | None = None
    ) -> tuple[list[dict[str, Any]], str | None]:
        self.queries += 1
        ids = list(self.pages)
        start = int(start_cursor) if start_cursor else 0
        end = start + self.page_size
        rows = [
            {"id": row_id, "properties": self.pages[row_id]}
            for row_id in ids[start:end]
        ]
        return rows, (str(end) if end < len(ids) else None)

    async def create_row(
        self, properties: dict[str, Any], key: tuple[str, int] | None = None
    ) -> str:
        row_id = f"row-{next(self._ids)}"
        self.pages[row_id] = self._as_stored(properties)
        self.created.append(key)
        return row_id

    async def update_row(
        self,
        row_id: str,
        properties: dict[str, Any],
        key: tuple[str, int] | None = None,
    ) -> None:
        self.pages[row_id] = self._as_stored(properties)
        self.updated.append((row_id, key))

    async def aclose(self) -> None:
        pass


@pytest.fixture
def item_factory() -> Callable[..., TrackedItem]:
    """Provide the TrackedItem builder."""
    return make_item


@pytest.fixture
def fake_database() -> FakeNotionDatabase:
    """Provide an empty in-memory Notion database."""
    return FakeNotionDatabase()
