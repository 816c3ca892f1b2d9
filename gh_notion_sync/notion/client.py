"""Notion database client using notion-client."""

import logging
import os
from collections.abc import AsyncIterator
from typing import Any

import httpx
from notion_client import AsyncClient
from notion_client.errors import HTTPResponseError, RequestTimeoutError

from ..exceptions import UpstreamReadError, UpstreamWriteError

logger = logging.getLogger(__name__)

# APIResponseError subclasses HTTPResponseError; transport failures come from httpx
NOTION_ERRORS = (HTTPResponseError, RequestTimeoutError, httpx.HTTPError)


class NotionDatabase:
    """One Notion database holding a row per tracked issue."""

    def __init__(
        self,
        database_id: str,
        token: str | None = None,
        client: AsyncClient | None = None,
    ):
        """Initialize Notion database access.

        Args:
            database_id: Identifier of the Notion database
            token: Notion integration token. If None, reads from NOTION_KEY
                env var. Ignored when ``client`` is given.
            client: Preconfigured AsyncClient
        """
        if client is None:
            token = token or os.getenv("NOTION_KEY")
            if not token:
                raise ValueError(
                    "Notion token is required. Set NOTION_KEY environment variable."
                )
            client = AsyncClient(auth=token)

        self.database_id = database_id
        self.notion = client

    async def query(
        self, start_cursor: str | None = None
    ) -> tuple[list[dict[str, Any]], str | None]:
        """Fetch one page of database rows.

        Returns:
            The rows and the cursor of the next page, None on the last page

        Raises:
            UpstreamReadError: If the query fails
        """
        params: dict[str, Any] = {"database_id": self.database_id}
        if start_cursor:
            params["start_cursor"] = start_cursor

        try:
            response = await self.notion.databases.query(**params)
        except NOTION_ERRORS as e:
            raise UpstreamReadError(
                f"Failed to query Notion database {self.database_id}: {e}"
            ) from e

        next_cursor = response.get("next_cursor") if response.get("has_more") else None
        return response["results"], next_cursor

    async def iter_rows(self) -> AsyncIterator[dict[str, Any]]:
        """Yield every row of the database, following the query cursor."""
        cursor: str | None = None
        while True:
            rows, cursor = await self.query(cursor)
            for row in rows:
                yield row
            if not cursor:
                break

    async def create_row(
        self, properties: dict[str, Any], key: tuple[str, int] | None = None
    ) -> str:
        """Create a page in the database and return its id.

        Raises:
            UpstreamWriteError: If Notion rejects the page
        """
        try:
            page = await self.notion.pages.create(
                parent={"database_id": self.database_id},
                properties=properties,
            )
        except NOTION_ERRORS as e:
            raise UpstreamWriteError(f"Failed to create Notion page: {e}", key) from e
        return str(page["id"])

    async def update_row(
        self,
        row_id: str,
        properties: dict[str, Any],
        key: tuple[str, int] | None = None,
    ) -> None:
        """Overwrite the properties of an existing page.

        Raises:
            UpstreamWriteError: If Notion rejects the update
        """
        try:
            await self.notion.pages.update(page_id=row_id, properties=properties)
        except NOTION_ERRORS as e:
            raise UpstreamWriteError(
                f"Failed to update Notion page {row_id}: {e}", key
            ) from e

    async def aclose(self) -> None:
        """Close the underlying HTTP client."""
        await self.notion.aclose()
