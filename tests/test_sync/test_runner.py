"""Tests for sync cycles and scheduling."""

import asyncio
from collections.abc import Callable
from unittest.mock import AsyncMock, Mock

import pytest

from gh_notion_sync.exceptions import UpstreamReadError, UpstreamWriteError
from gh_notion_sync.github_client.models import TrackedItem
from gh_notion_sync.sync.runner import CycleResult, SyncRunner, SyncScheduler


def _reader(*snapshots: dict[str, list[TrackedItem]]) -> Mock:
    """Reader returning one snapshot per cycle."""
    reader = Mock()
    reader.fetch_all.side_effect = list(snapshots)
    return reader


class TestSyncRunner:
    """Test full sync cycles against an in-memory database."""

    @pytest.mark.asyncio
    async def test_end_to_end_scenario(
        self, fake_database, item_factory: Callable[..., TrackedItem]
    ) -> None:
        """Test create, then index, then update of a closed issue."""
        open_one = item_factory("X", 1)
        closed_two = item_factory("X", 2, state="closed", assignees=["alice"])
        closed_one = item_factory("X", 1, state="closed")
        before = {"X": [open_one, closed_two]}
        after = {"X": [closed_one, closed_two]}
        reader = _reader(before, before, after)
        runner = SyncRunner(reader, fake_database, ["X"], batch_size=10)

        first_plan = await runner.plan()
        assert first_plan.to_create == [open_one, closed_two]
        assert first_plan.to_update == []
        first = await runner.run_cycle()
        assert first == CycleResult(indexed=0, fetched=2, created=2, updated=0)
        row_a, row_b = list(fake_database.pages)

        second_plan = await runner.plan()
        assert second_plan.to_create == []
        assert second_plan.to_update == [(row_a, closed_one), (row_b, closed_two)]
        assert fake_database.pages[row_a]["State"] == {"select": {"name": "open"}}
        assert fake_database.pages[row_a]["Assignees"] == {
            "multi_select": [{"name": "not assigned"}]
        }
        assert fake_database.pages[row_b]["Assignees"] == {
            "multi_select": [{"name": "alice"}]
        }

    @pytest.mark.asyncio
    async def test_second_cycle_is_idempotent(
        self, fake_database, item_factory: Callable[..., TrackedItem]
    ) -> None:
        """Test an unchanged source only updates, with unchanged values."""
        items = {"api": [item_factory("api", n) for n in range(1, 4)]}
        reader = _reader(items, items)
        runner = SyncRunner(reader, fake_database, ["api"])

        await runner.run_cycle()
        snapshot = dict(fake_database.pages)
        second = await runner.run_cycle()

        assert second.created == 0
        assert second.updated == 3
        assert second.indexed == 3
        assert len(fake_database.created) == 3
        assert fake_database.pages == snapshot

    @pytest.mark.asyncio
    async def test_index_is_not_refreshed_within_cycle(
        self, fake_database, item_factory: Callable[..., TrackedItem]
    ) -> None:
        """Test an issue listed twice in one cycle is created twice."""
        item = item_factory("api", 1)
        reader = _reader({"api": [item], "api-mirror": [item]})
        runner = SyncRunner(reader, fake_database, ["api", "api-mirror"])

        result = await runner.run_cycle()

        assert result.created == 2
        assert result.updated == 0

    @pytest.mark.asyncio
    async def test_dry_run_writes_nothing(
        self, fake_database, item_factory: Callable[..., TrackedItem]
    ) -> None:
        """Test a dry run computes the plan only."""
        reader = _reader({"api": [item_factory("api", 1)]})
        runner = SyncRunner(reader, fake_database, ["api"])

        result = await runner.run_cycle(dry_run=True)

        assert result == CycleResult(
            indexed=0, fetched=1, created=0, updated=0, dry_run=True
        )
        assert fake_database.pages == {}

    @pytest.mark.asyncio
    async def test_read_failure_aborts_before_writes(
        self, fake_database, item_factory: Callable[..., TrackedItem]
    ) -> None:
        """Test a GitHub failure leaves Notion untouched."""
        reader = Mock()
        reader.fetch_all.side_effect = UpstreamReadError("Repository x/y not found")
        runner = SyncRunner(reader, fake_database, ["y"])

        with pytest.raises(UpstreamReadError):
            await runner.run_cycle()

        assert fake_database.created == []

    @pytest.mark.asyncio
    async def test_create_failure_skips_updates(
        self, fake_database, item_factory: Callable[..., TrackedItem]
    ) -> None:
        """Test a failed create aborts the cycle before any update."""
        known_id = fake_database.add_page("api", 1)
        reader = _reader({"api": [item_factory("api", 1), item_factory("api", 2)]})
        fake_database.create_row = AsyncMock(
            side_effect=UpstreamWriteError("Failed to create Notion page", ("api", 2))
        )
        runner = SyncRunner(reader, fake_database, ["api"])

        with pytest.raises(UpstreamWriteError):
            await runner.run_cycle()

        assert fake_database.updated == []
        assert known_id in fake_database.pages


class TestSyncScheduler:
    """Test SyncScheduler class."""

    @pytest.mark.asyncio
    async def test_skips_trigger_while_running(self) -> None:
        """Test a second trigger during a cycle is skipped."""
        release = asyncio.Event()
        calls = 0

        async def slow_cycle(dry_run: bool = False) -> CycleResult:
            nonlocal calls
            calls += 1
            await release.wait()
            return CycleResult(indexed=0, fetched=0, created=0, updated=0)

        runner = Mock()
        runner.run_cycle = slow_cycle
        scheduler = SyncScheduler(runner, interval_seconds=0)

        assert scheduler.trigger() is True
        assert scheduler.trigger() is False
        await asyncio.sleep(0)
        assert scheduler.is_running
        assert scheduler.trigger() is False

        release.set()
        await scheduler.wait()

        assert calls == 1
        assert scheduler.skipped == 2
        assert scheduler.completed == 1
        assert not scheduler.is_running
        assert scheduler.trigger() is True
        await scheduler.wait()
        assert calls == 2

    @pytest.mark.asyncio
    async def test_failed_cycle_is_logged_not_raised(
        self, caplog: pytest.LogCaptureFixture
    ) -> None:
        """Test a failing cycle does not stop the scheduler."""
        runner = Mock()
        runner.run_cycle = AsyncMock(
            side_effect=[
                UpstreamReadError("Failed to query Notion database db"),
                CycleResult(indexed=1, fetched=1, created=0, updated=1),
            ]
        )
        scheduler = SyncScheduler(runner, interval_seconds=0)

        await scheduler.run_forever(max_cycles=2)

        assert runner.run_cycle.await_count == 2
        assert scheduler.failed == 1
        assert scheduler.completed == 1
        assert "Sync cycle failed" in caplog.text

    @pytest.mark.asyncio
    async def test_run_forever_passes_dry_run(self) -> None:
        """Test the dry run flag reaches every cycle."""
        runner = Mock()
        runner.run_cycle = AsyncMock(
            return_value=CycleResult(indexed=0, fetched=0, created=0, updated=0)
        )
        scheduler = SyncScheduler(runner, interval_seconds=0, dry_run=True)

        await scheduler.run_forever(max_cycles=3)

        assert runner.run_cycle.await_count == 3
        runner.run_cycle.assert_awaited_with(dry_run=True)

    @pytest.mark.asyncio
    async def test_wait_without_cycle(self) -> None:
        """Test waiting before any trigger returns None."""
        scheduler = SyncScheduler(Mock(), interval_seconds=0)

        assert await scheduler.wait() is None
