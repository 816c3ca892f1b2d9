"""GitHub client package for reading tracked issues."""

from .client import GitHubClient
from .models import UNASSIGNED_PLACEHOLDER, Assignee, IssueState, TrackedItem
from .reader import IssueReader

__all__ = [
    "GitHubClient",
    "IssueReader",
    "Assignee",
    "IssueState",
    "TrackedItem",
    "UNASSIGNED_PLACEHOLDER",
]
