"""CLI commands for syncing GitHub issues into Notion."""

import asyncio

import typer
from rich.console import Console
from rich.table import Table

from ..config import SyncConfig, parse_repo_names
from ..exceptions import SyncConfigError, SyncError
from ..github_client.client import GitHubClient
from ..github_client.reader import IssueReader
from ..notion.client import NotionDatabase
from ..sync.reconciler import SyncPlan
from ..sync.runner import CycleResult, SyncRunner, SyncScheduler
from .options import (
    BATCH_SIZE_OPTION,
    CYCLES_OPTION,
    DRY_RUN_OPTION,
    INTERVAL_OPTION,
    ONCE_OPTION,
    OWNER_OPTION,
    REPOS_OPTION,
)

console = Console()


def load_config(
    owner: str | None = None,
    repos: str | None = None,
    batch_size: int | None = None,
    interval: int | None = None,
) -> SyncConfig:
    """Read configuration from the environment and apply CLI overrides.

    Raises:
        SyncConfigError: If a required setting is missing or malformed
    """
    config = SyncConfig()
    if owner:
        config.repo_owner = owner
    if repos:
        config.repo_names = parse_repo_names(repos)
    if batch_size is not None:
        config.batch_size = batch_size
    if interval is not None:
        config.interval_seconds = interval
    config.validate()
    return config


def build_runner(config: SyncConfig) -> SyncRunner:
    """Wire GitHub and Notion clients into a runner."""
    if config.repo_owner is None or config.notion_database_id is None:
        raise SyncConfigError("GITHUB_REPO_OWNER and NOTION_DATABASE_ID are required")

    reader = IssueReader(GitHubClient(token=config.github_token), config.repo_owner)
    database = NotionDatabase(config.notion_database_id, token=config.notion_key)
    return SyncRunner(
        reader, database, config.repo_names, batch_size=config.batch_size
    )


async def _run_once(runner: SyncRunner, dry_run: bool) -> CycleResult:
    try:
        return await runner.run_cycle(dry_run=dry_run)
    finally:
        await runner.database.aclose()


async def _run_scheduled(
    runner: SyncRunner, interval: int, cycles: int | None, dry_run: bool
) -> SyncScheduler:
    scheduler = SyncScheduler(runner, interval_seconds=interval, dry_run=dry_run)
    try:
        await scheduler.run_forever(max_cycles=cycles)
    finally:
        await runner.database.aclose()
    return scheduler


async def _plan(runner: SyncRunner) -> SyncPlan:
    try:
        return await runner.plan()
    finally:
        await runner.database.aclose()


def _print_result(result: CycleResult) -> None:
    results_table = Table(title="Sync Results")
    results_table.add_column("Metric", style="cyan")
    results_table.add_column("Value", style="green")
    results_table.add_row("Rows indexed", str(result.indexed))
    results_table.add_row("Issues fetched", str(result.fetched))
    results_table.add_row("Pages created", str(result.created))
    results_table.add_row("Pages updated", str(result.updated))
    console.print(results_table)


def sync(
    owner: str | None = OWNER_OPTION,
    repos: str | None = REPOS_OPTION,
    batch_size: int | None = BATCH_SIZE_OPTION,
    interval: int | None = INTERVAL_OPTION,
    cycles: int | None = CYCLES_OPTION,
    once: bool = ONCE_OPTION,
    dry_run: bool = DRY_RUN_OPTION,
) -> None:
    """Sync GitHub issues into the Notion database.

    Without --once the sync runs at startup and then every --interval
    seconds. A failed cycle is logged and retried on the next tick.

    Examples:
        gh-notion-sync sync --once
        gh-notion-sync sync --owner myorg --repos api,web --interval 600
        gh-notion-sync sync --once --dry-run
    """
    try:
        config = load_config(owner, repos, batch_size, interval)
        runner = build_runner(config)
    except (SyncError, ValueError) as e:
        console.print(f"❌ [red]Error: {e}[/red]")
        raise typer.Exit(1)

    console.print(
        f"🔄 Syncing {', '.join(config.repo_names)} from {config.repo_owner} "
        f"(batch size {config.batch_size})"
    )

    if once:
        try:
            result = asyncio.run(_run_once(runner, dry_run))
        except SyncError as e:
            console.print(f"❌ [red]Sync failed: {e}[/red]")
            raise typer.Exit(1)

        _print_result(result)
        if dry_run:
            console.print("🔍 Dry run: no changes were written to Notion")
        else:
            console.print("✅ Notion database is synced with GitHub.")
        return

    console.print(f"⏱️  Running every {config.interval_seconds} seconds")
    try:
        scheduler = asyncio.run(
            _run_scheduled(runner, config.interval_seconds, cycles, dry_run)
        )
    except KeyboardInterrupt:
        console.print("👋 Stopped")
        return

    console.print(
        f"Cycles completed: {scheduler.completed}, failed: {scheduler.failed}, "
        f"skipped: {scheduler.skipped}"
    )


def plan(
    owner: str | None = OWNER_OPTION,
    repos: str | None = REPOS_OPTION,
) -> None:
    """Show which issues a sync would create or update, without writing.

    Examples:
        gh-notion-sync plan
        gh-notion-sync plan --repos api
    """
    try:
        config = load_config(owner, repos)
        runner = build_runner(config)
        sync_plan = asyncio.run(_plan(runner))
    except (SyncError, ValueError) as e:
        console.print(f"❌ [red]Error: {e}[/red]")
        raise typer.Exit(1)

    if sync_plan.is_empty:
        console.print("No issues found in the configured repositories")
        return

    plan_table = Table(title="Sync Plan")
    plan_table.add_column("Repository", style="cyan")
    plan_table.add_column("Create", style="green")
    plan_table.add_column("Update", style="yellow")

    for repo_name, (creates, updates) in sync_plan.counts_by_collection().items():
        plan_table.add_row(repo_name, str(creates), str(updates))

    console.print(plan_table)
    console.print(
        f"📊 Total: {len(sync_plan.to_create)} to create, "
        f"{len(sync_plan.to_update)} to update"
    )
