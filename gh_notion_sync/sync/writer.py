"""Apply creates and updates to Notion in concurrent batches."""

import asyncio
import logging
from collections.abc import Awaitable, Callable, Sequence
from typing import TYPE_CHECKING, TypeVar

from ..config import DEFAULT_BATCH_SIZE
from ..github_client.models import TrackedItem
from ..notion.schema import issue_to_properties

if TYPE_CHECKING:
    from ..notion.client import NotionDatabase

logger = logging.getLogger(__name__)

T = TypeVar("T")


def chunk(items: Sequence[T], size: int) -> list[list[T]]:
    """Split items into consecutive lists of ``size``, the last may be shorter.

    Example:
        >>> chunk([1, 2, 3, 4, 5], 2)
        [[1, 2], [3, 4], [5]]
    """
    if size < 1:
        raise ValueError(f"Batch size must be at least 1, got {size}")
    return [list(items[i : i + size]) for i in range(0, len(items), size)]


class BatchWriter:
    """Writes issues to a Notion database, ``batch_size`` requests at a time.

    Requests inside a batch run concurrently; the next batch starts only
    after every request of the current one finished. The first failed
    request raises UpstreamWriteError and no further batch is started.
    Writes already applied are kept.
    """

    def __init__(
        self, database: "NotionDatabase", batch_size: int = DEFAULT_BATCH_SIZE
    ):
        if batch_size < 1:
            raise ValueError(f"Batch size must be at least 1, got {batch_size}")
        self.database = database
        self.batch_size = batch_size

    async def _run_batches(
        self, items: Sequence[T], write: Callable[[T], Awaitable[object]]
    ) -> int:
        written = 0
        for batch in chunk(items, self.batch_size):
            await asyncio.gather(*(write(item) for item in batch))
            written += len(batch)
            logger.info(f"Completed batch size: {len(batch)}")
        return written

    async def _create_one(self, item: TrackedItem) -> str:
        return await self.database.create_row(issue_to_properties(item), key=item.key)

    async def _update_one(self, entry: tuple[str, TrackedItem]) -> None:
        row_id, item = entry
        await self.database.update_row(
            row_id, issue_to_properties(item), key=item.key
        )

    async def create(self, items: Sequence[TrackedItem]) -> int:
        """Create a Notion page for each issue.

        Returns:
            Number of pages created
        """
        logger.info(f"{len(items)} new issues to add to Notion.")
        return await self._run_batches(items, self._create_one)

    async def update(self, items: Sequence[tuple[str, TrackedItem]]) -> int:
        """Overwrite the Notion page of each (row id, issue) pair.

        Returns:
            Number of pages updated
        """
        logger.info(f"{len(items)} issues to update in Notion.")
        return await self._run_batches(items, self._update_one)
