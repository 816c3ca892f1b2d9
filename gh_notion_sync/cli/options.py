"""Standardized CLI option definitions shared by the sync commands."""

import typer

OWNER_OPTION = typer.Option(
    None,
    "--owner",
    "-o",
    help="GitHub repository owner (defaults to GITHUB_REPO_OWNER env var)",
)

REPOS_OPTION = typer.Option(
    None,
    "--repos",
    "-r",
    help="Comma-separated repository names (defaults to GITHUB_REPO_NAMES env var)",
)

BATCH_SIZE_OPTION = typer.Option(
    None,
    "--batch-size",
    "-b",
    min=1,
    help="Concurrent Notion writes per batch (defaults to SYNC_BATCH_SIZE or 10)",
)

INTERVAL_OPTION = typer.Option(
    None,
    "--interval",
    min=1,
    help="Seconds between sync cycles (defaults to SYNC_INTERVAL_SECONDS or 300)",
)

CYCLES_OPTION = typer.Option(
    None,
    "--cycles",
    min=1,
    help="Stop after this many scheduled cycles (runs forever when omitted)",
)

ONCE_OPTION = typer.Option(
    False, "--once", help="Run a single sync cycle and exit"
)

DRY_RUN_OPTION = typer.Option(
    False, "--dry-run", "-d", help="Preview changes without applying them"
)
