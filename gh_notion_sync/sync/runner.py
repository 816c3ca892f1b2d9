"""Sync cycle orchestration and periodic scheduling.

A cycle rebuilds the identity index from Notion, fetches issues from GitHub,
diffs the two and writes the result back to Notion, strictly in that order.
The scheduler fires a cycle at startup and then on a fixed period, skipping
a tick while the previous cycle is still running.
"""

import asyncio
import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from ..config import DEFAULT_BATCH_SIZE, DEFAULT_INTERVAL_SECONDS
from ..github_client.models import TrackedItem
from ..notion.index import IdentityIndex, rebuild
from .reconciler import SyncPlan, diff
from .writer import BatchWriter

if TYPE_CHECKING:
    from ..github_client.reader import IssueReader
    from ..notion.client import NotionDatabase

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CycleResult:
    """Summary of one sync cycle."""

    indexed: int
    fetched: int
    created: int
    updated: int
    dry_run: bool = False


class SyncRunner:
    """Runs sync cycles for a set of repositories against one database."""

    def __init__(
        self,
        reader: "IssueReader",
        database: "NotionDatabase",
        collections: list[str],
        batch_size: int = DEFAULT_BATCH_SIZE,
    ):
        """Initialize runner.

        Args:
            reader: Source of GitHub issues
            database: Destination Notion database
            collections: Repository names to sync
            batch_size: Number of concurrent Notion writes per batch
        """
        self.reader = reader
        self.database = database
        self.collections = list(collections)
        self.writer = BatchWriter(database, batch_size)

    async def _prepare(
        self,
    ) -> tuple[IdentityIndex, dict[str, list[TrackedItem]], SyncPlan]:
        logger.info("Fetching issues from Notion DB...")
        index = await rebuild(self.database)

        # PyGithub blocks, keep the event loop free while it paginates
        items = await asyncio.to_thread(self.reader.fetch_all, self.collections)
        logger.info(f"Fetched issues from GitHub {len(items)} repositories.")

        return index, items, diff(items, index)

    async def plan(self) -> SyncPlan:
        """Compute the writes a cycle would make without applying them."""
        _, _, plan = await self._prepare()
        return plan

    async def run_cycle(self, dry_run: bool = False) -> CycleResult:
        """Run one full rebuild, fetch, diff and write pass.

        Args:
            dry_run: Compute and log the plan but write nothing

        Raises:
            UpstreamReadError: If GitHub or the Notion query fails
            UpstreamWriteError: If a Notion write fails
        """
        index, items, plan = await self._prepare()
        fetched = sum(len(collection_items) for collection_items in items.values())

        if dry_run:
            logger.info(
                f"Dry run: {len(plan.to_create)} issues to create, "
                f"{len(plan.to_update)} issues to update."
            )
            return CycleResult(
                indexed=len(index),
                fetched=fetched,
                created=0,
                updated=0,
                dry_run=True,
            )

        created = await self.writer.create(plan.to_create)
        updated = await self.writer.update(plan.to_update)

        logger.info("✅ Notion database is synced with GitHub.")
        return CycleResult(
            indexed=len(index), fetched=fetched, created=created, updated=updated
        )


class SyncScheduler:
    """Fires sync cycles on a fixed period, never two at once."""

    def __init__(
        self,
        runner: SyncRunner,
        interval_seconds: float = DEFAULT_INTERVAL_SECONDS,
        dry_run: bool = False,
    ):
        self.runner = runner
        self.interval_seconds = interval_seconds
        self.dry_run = dry_run
        self.completed = 0
        self.failed = 0
        self.skipped = 0
        self._current: asyncio.Task[CycleResult | None] | None = None

    @property
    def is_running(self) -> bool:
        return self._current is not None and not self._current.done()

    async def _run_logged(self) -> CycleResult | None:
        try:
            result = await self.runner.run_cycle(dry_run=self.dry_run)
        except Exception:
            # The next tick retries from scratch
            self.failed += 1
            logger.exception("❌ Sync cycle failed, waiting for the next trigger")
            return None

        self.completed += 1
        logger.info(
            f"Sync cycle finished: {result.created} created, {result.updated} updated"
        )
        return result

    def trigger(self) -> bool:
        """Start a cycle in the background unless one is in flight.

        Returns:
            True if a cycle was started, False if the trigger was skipped
        """
        if self.is_running:
            self.skipped += 1
            logger.warning("Previous sync cycle still running, skipping trigger")
            return False

        self._current = asyncio.create_task(self._run_logged())
        return True

    async def wait(self) -> CycleResult | None:
        """Wait for the in-flight cycle, if any, and return its result."""
        if self._current is None:
            return None
        return await self._current

    async def run_forever(self, max_cycles: int | None = None) -> None:
        """Trigger a cycle now and then every ``interval_seconds``.

        Args:
            max_cycles: Stop after this many triggers, None to run until
                cancelled
        """
        ticks = 0
        while True:
            self.trigger()
            ticks += 1
            if max_cycles is not None and ticks >= max_cycles:
                break
            await asyncio.sleep(self.interval_seconds)
            logger.debug(f"Sync interval tick {ticks}")

        await self.wait()
