"""Fetch the tracked issues of every configured repository."""

import logging
from collections.abc import Iterable
from typing import TYPE_CHECKING

from .models import TrackedItem

if TYPE_CHECKING:
    from .client import GitHubClient

logger = logging.getLogger(__name__)


class IssueReader:
    """Reads issues for a set of repositories belonging to one owner."""

    def __init__(self, client: "GitHubClient", owner: str):
        """Initialize reader.

        Args:
            client: GitHubClient instance
            owner: User or organization owning the repositories
        """
        self.client = client
        self.owner = owner

    def fetch_repository(self, repo: str) -> list[TrackedItem]:
        """Fetch all issues of one repository in pagination order."""
        logger.info(f"Get new issues for repository {self.owner}/{repo}")
        issues = list(self.client.iter_repository_issues(self.owner, repo))
        logger.debug(f"Fetched {len(issues)} issues from {self.owner}/{repo}")
        return issues

    def fetch_all(self, collections: Iterable[str]) -> dict[str, list[TrackedItem]]:
        """Fetch issues for every repository.

        Repositories are read in the given order, duplicates once. A failure
        on any repository aborts the whole fetch.

        Args:
            collections: Repository names

        Returns:
            Mapping of repository name to its issues

        Raises:
            UpstreamReadError: If any repository cannot be read
        """
        issues: dict[str, list[TrackedItem]] = {}
        for repo in collections:
            if repo in issues:
                continue
            issues[repo] = self.fetch_repository(repo)

        total = sum(len(repo_issues) for repo_issues in issues.values())
        logger.info(f"Fetched {total} issues from {len(issues)} repositories")
        return issues
