"""GitHub API client using PyGitHub."""

import logging
import os
import time
from collections.abc import Iterator

from github import Auth, Github
from github.GithubException import GithubException, UnknownObjectException
from github.Issue import Issue
from github.Repository import Repository

from ..exceptions import UpstreamReadError
from .models import Assignee, IssueState, TrackedItem, unassigned

logger = logging.getLogger(__name__)

PAGE_SIZE = 100


class GitHubClient:
    """GitHub API client with rate limit awareness and authentication."""

    def __init__(self, token: str | None = None):
        """Initialize GitHub client with authentication.

        Args:
            token: GitHub personal access token. If None, reads from
                GITHUB_TOKEN env var.
        """
        self.token = token or os.getenv("GITHUB_TOKEN")
        if not self.token:
            raise ValueError(
                "GitHub token is required. Set GITHUB_TOKEN environment variable."
            )

        self.github = Github(auth=Auth.Token(self.token), per_page=PAGE_SIZE)

    def _check_rate_limit(self) -> None:
        """Check rate limit and sleep if necessary."""
        try:
            rate_limit = self.github.get_rate_limit()
            remaining = rate_limit.rate.remaining
            logger.debug(f"GitHub API rate limit: {remaining} requests remaining")

            if remaining < 10:
                reset_time = rate_limit.rate.reset.timestamp()
                sleep_time = reset_time - time.time() + 1
                if sleep_time > 0:
                    logger.warning(
                        f"Rate limit low, sleeping for {sleep_time:.1f} seconds..."
                    )
                    time.sleep(sleep_time)

        except Exception as e:
            # Not critical, the issue listing reports its own failures
            logger.debug(f"Could not check rate limit: {e}")

    def _convert_issue(self, collection: str, github_issue: Issue) -> TrackedItem:
        """Convert PyGitHub issue to our model."""
        assignees = [Assignee(name=user.login) for user in github_issue.assignees]

        return TrackedItem(
            collection=collection,
            number=github_issue.number,
            title=github_issue.title,
            state=IssueState(github_issue.state),
            comment_count=github_issue.comments,
            url=github_issue.html_url,
            assignees=assignees or unassigned(),
        )

    def get_repository(self, owner: str, repo: str) -> Repository:
        """Get repository object."""
        try:
            return self.github.get_repo(f"{owner}/{repo}")
        except UnknownObjectException as e:
            raise UpstreamReadError(f"Repository {owner}/{repo} not found") from e
        except GithubException as e:
            raise UpstreamReadError(
                f"Failed to load repository {owner}/{repo}: {e}"
            ) from e

    def iter_repository_issues(self, owner: str, repo: str) -> Iterator[TrackedItem]:
        """Yield every issue of a repository, open and closed.

        Pull requests are returned by the issues endpoint too and are
        skipped. Order follows GitHub's pagination order.

        Args:
            owner: Repository owner (user or organization)
            repo: Repository name

        Raises:
            UpstreamReadError: If any page cannot be fetched
        """
        self._check_rate_limit()
        repository = self.get_repository(owner, repo)

        try:
            for github_issue in repository.get_issues(state="all"):
                if github_issue.pull_request is not None:
                    continue
                yield self._convert_issue(repo, github_issue)
        except GithubException as e:
            raise UpstreamReadError(
                f"Failed to list issues for {owner}/{repo}: {e}"
            ) from e
