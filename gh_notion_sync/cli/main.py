"""Main CLI entry point."""

import logging

import typer
from dotenv import load_dotenv
from rich.console import Console
from rich.logging import RichHandler

from .sync import plan, sync

# Load environment variables from .env file
load_dotenv()

app = typer.Typer(
    name="gh-notion-sync",
    help="Sync GitHub issues into a Notion database",
    add_completion=False,
    context_settings={"help_option_names": ["-h", "--help"]},
)
console = Console()


def configure_logging(verbose: bool = False) -> None:
    """Route library logging through rich."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, show_path=False)],
        force=True,
    )
    # PyGithub and httpx are chatty at DEBUG
    logging.getLogger("github").setLevel(logging.WARNING)
    logging.getLogger("httpx").setLevel(logging.WARNING)


@app.callback()
def main(
    verbose: bool = typer.Option(
        False, "--verbose", "-v", help="Enable debug logging"
    ),
) -> None:
    """Sync GitHub issues into a Notion database."""
    configure_logging(verbose)


app.command(name="sync", context_settings={"help_option_names": ["-h", "--help"]})(
    sync
)
app.command(name="plan", context_settings={"help_option_names": ["-h", "--help"]})(
    plan
)


@app.command(context_settings={"help_option_names": ["-h", "--help"]})
def version() -> None:
    """Show version information."""
    from gh_notion_sync import __version__

    console.print(f"GitHub Notion Sync v{__version__}")


if __name__ == "__main__":
    app()
