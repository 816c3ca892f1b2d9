"""Exceptions raised during a sync cycle."""


class SyncError(RuntimeError):
    """Base class for sync failures. Any of these aborts the current cycle."""


class SyncConfigError(SyncError):
    """Missing or malformed configuration."""


class UpstreamReadError(SyncError):
    """Reading from GitHub or querying the Notion database failed."""


class UpstreamWriteError(SyncError):
    """Creating or updating a Notion page failed.

    Args:
        message: Error description
        key: (repository, issue number) being written, when known
    """

    def __init__(self, message: str, key: tuple[str, int] | None = None):
        super().__init__(message)
        self.key = key
