"""Pydantic models for issues tracked in Notion.

A TrackedItem is the normalized form of one GitHub issue, built fresh on
every sync cycle from the GitHub REST API Issue object.
API Reference: https://docs.github.com/en/rest/issues/issues
"""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

UNASSIGNED_PLACEHOLDER = "not assigned"


class IssueState(str, Enum):
    """GitHub issue state."""

    OPEN = "open"
    CLOSED = "closed"


class Assignee(BaseModel):
    """An issue assignee, written to Notion as a multi-select option."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(..., description="GitHub login or the unassigned placeholder")


def unassigned() -> list[Assignee]:
    """Assignee list used when GitHub reports nobody."""
    return [Assignee(name=UNASSIGNED_PLACEHOLDER)]


class TrackedItem(BaseModel):
    """GitHub issue normalized for the Notion database.

    Maps to GitHub REST API Issue object, keyed by (collection, number).
    """

    model_config = ConfigDict(frozen=True)

    collection: str = Field(..., description="Repository the issue belongs to")
    number: int = Field(..., description="Issue number within the repository")
    title: str = Field(..., description="Title of the issue")
    state: IssueState = Field(..., description="Current state: 'open' or 'closed'")
    comment_count: int = Field(..., ge=0, description="Number of issue comments")
    url: str = Field(..., description="HTML URL of the issue")
    assignees: list[Assignee] = Field(
        default_factory=unassigned,
        min_length=1,
        description="Assignees in GitHub order, never empty",
    )

    @property
    def key(self) -> tuple[str, int]:
        """Identity of the issue across source and destination."""
        return (self.collection, self.number)
