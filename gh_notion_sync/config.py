"""Configuration for the GitHub -> Notion sync."""

import os

from .exceptions import SyncConfigError

DEFAULT_BATCH_SIZE = 10
DEFAULT_INTERVAL_SECONDS = 300

REQUIRED_VARIABLES = (
    "GITHUB_TOKEN",
    "GITHUB_REPO_OWNER",
    "GITHUB_REPO_NAMES",
    "NOTION_KEY",
    "NOTION_DATABASE_ID",
)


def parse_repo_names(value: str | None) -> list[str]:
    """Split a comma separated repository list.

    Whitespace is trimmed, empty entries are dropped and duplicates are
    collapsed keeping the first occurrence.

    Example:
        >>> parse_repo_names("api, web,  api,")
        ["api", "web"]
    """
    if not value:
        return []

    names: list[str] = []
    for part in value.split(","):
        name = part.strip()
        if name and name not in names:
            names.append(name)
    return names


def _positive_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        value = int(raw)
    except ValueError as e:
        raise SyncConfigError(f"{name} must be an integer, got {raw!r}") from e
    if value < 1:
        raise SyncConfigError(f"{name} must be a positive integer, got {value}")
    return value


class SyncConfig:
    """Configuration class for the sync, read from environment variables."""

    def __init__(self) -> None:
        """Initialize sync configuration from environment variables."""
        self.github_token: str | None = os.getenv("GITHUB_TOKEN")
        self.repo_owner: str | None = os.getenv("GITHUB_REPO_OWNER")
        self.repo_names: list[str] = parse_repo_names(os.getenv("GITHUB_REPO_NAMES"))
        self.notion_key: str | None = os.getenv("NOTION_KEY")
        self.notion_database_id: str | None = os.getenv("NOTION_DATABASE_ID")
        self.batch_size: int = _positive_int("SYNC_BATCH_SIZE", DEFAULT_BATCH_SIZE)
        self.interval_seconds: int = _positive_int(
            "SYNC_INTERVAL_SECONDS", DEFAULT_INTERVAL_SECONDS
        )

    def missing_variables(self) -> list[str]:
        """Return the required variables that have no value."""
        values = {
            "GITHUB_TOKEN": self.github_token,
            "GITHUB_REPO_OWNER": self.repo_owner,
            "GITHUB_REPO_NAMES": self.repo_names,
            "NOTION_KEY": self.notion_key,
            "NOTION_DATABASE_ID": self.notion_database_id,
        }
        return [name for name in REQUIRED_VARIABLES if not values[name]]

    def is_configured(self) -> bool:
        """Check if every required setting is present."""
        return not self.missing_variables()

    def validate(self) -> None:
        """Validate configuration and raise error if invalid."""
        missing = self.missing_variables()
        if missing:
            raise SyncConfigError(
                f"Environment variables required for sync: {', '.join(missing)}"
            )
