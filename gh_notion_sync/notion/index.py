"""Index of Notion rows by (repository, issue number)."""

import logging
from collections.abc import Iterable
from typing import TYPE_CHECKING

from ..exceptions import UpstreamReadError
from .schema import DestinationRow, row_key

if TYPE_CHECKING:
    from .client import NotionDatabase

logger = logging.getLogger(__name__)


class IdentityIndex:
    """Snapshot of which issues already have a Notion row.

    Built once per cycle and never updated afterwards, so rows created later
    in the same cycle are not visible through it. When the database holds
    more than one row for an issue the last row seen wins.
    """

    def __init__(self, rows: Iterable[DestinationRow] = ()):
        self._rows: dict[str, dict[int, str]] = {}
        for row in rows:
            by_number = self._rows.setdefault(row.collection, {})
            previous = by_number.get(row.number)
            if previous is not None and previous != row.row_id:
                logger.warning(
                    f"Duplicate Notion rows for {row.collection}#{row.number}: "
                    f"{previous} replaced by {row.row_id}"
                )
            by_number[row.number] = row.row_id

    def lookup(self, collection: str, number: int) -> str | None:
        """Return the row id for an issue, None if it has no row."""
        return self._rows.get(collection, {}).get(number)

    def collections(self) -> list[str]:
        """Repositories that have at least one row, in first-seen order."""
        return list(self._rows)

    def as_dict(self) -> dict[str, dict[int, str]]:
        """Copy of the index as nested dicts."""
        return {collection: dict(rows) for collection, rows in self._rows.items()}

    def __contains__(self, key: object) -> bool:
        if not isinstance(key, tuple) or len(key) != 2:
            return False
        collection, number = key
        return self.lookup(collection, number) is not None

    def __len__(self) -> int:
        return sum(len(rows) for rows in self._rows.values())

    def __repr__(self) -> str:
        return f"IdentityIndex(collections={len(self._rows)}, rows={len(self)})"


async def rebuild(database: "NotionDatabase") -> IdentityIndex:
    """Scan the whole Notion database and index its rows.

    Raises:
        UpstreamReadError: If a query page cannot be fetched or a row lacks
            its repository or issue number
    """
    rows: list[DestinationRow] = []
    async for page in database.iter_rows():
        try:
            rows.append(row_key(page))
        except (KeyError, IndexError, TypeError, ValueError) as e:
            raise UpstreamReadError(
                f"Malformed Notion row {page.get('id')!r}: {e!r}"
            ) from e
    logger.info(f"{len(rows)} issues successfully fetched from Notion.")
    return IdentityIndex(rows)
