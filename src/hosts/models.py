"""
Version-Control Host Data Models.

Defines the snapshots read from the host while reconciling pull requests.
Uses Pydantic for validation and serialization.
"""

from datetime import datetime
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class MergeableState(str, Enum):
    """
    Host-computed merge readiness of a pull request.

    See https://docs.github.com/en/graphql/reference/enums#mergestatestatus

    Attributes:
        UNKNOWN: Still being computed, transitional
        BEHIND: Head branch is missing commits from the base branch
        BLOCKED: Merging is blocked (e.g. missing required review)
        CLEAN: Mergeable and all checks passed
        DIRTY: Merge conflicts
        DRAFT: Draft pull request
        HAS_HOOKS: Mergeable with passing checks and pre-receive hooks
        UNSTABLE: Mergeable with non-passing or still running checks
    """

    UNKNOWN = "unknown"
    BEHIND = "behind"
    BLOCKED = "blocked"
    CLEAN = "clean"
    DIRTY = "dirty"
    DRAFT = "draft"
    HAS_HOOKS = "has_hooks"
    UNSTABLE = "unstable"


class PullRequestSnapshot(BaseModel):
    """Point-in-time view of a pull request."""

    number: int
    closed_at: Optional[datetime] = None
    labels: List[str] = Field(default_factory=list)
    head_sha: str
    base_ref: str
    body: str = ""
    creator: str
    mergeable_state: MergeableState = MergeableState.UNKNOWN
    merged: bool = False

    @field_validator("body", mode="before")
    def empty_body(cls, v: Optional[str]) -> str:
        return v or ""

    @property
    def is_settled(self) -> bool:
        """Whether the host finished computing the mergeable state."""
        return (
            self.closed_at is not None
            or self.mergeable_state != MergeableState.UNKNOWN
        )


class CommitRecord(BaseModel):
    """A commit of a pull request along with its host account."""

    sha: str
    parents: List[str] = Field(default_factory=list)
    author_login: Optional[str] = None  # None when detached from any account
    author_type: Optional[str] = None  # "User", "Bot", "Organization"
    author_name: str
    author_email: str


class Author(BaseModel):
    """Name and email used in a co-author trailer."""

    model_config = ConfigDict(frozen=True)

    name: str
    email: str


class SearchItem(BaseModel):
    """Pull request entry returned by the issue search."""

    number: int
    closed_at: Optional[datetime] = None
    labels: List[str] = Field(default_factory=list)


class SearchResult(BaseModel):
    """Issue search response."""

    incomplete_results: bool = False
    items: List[SearchItem] = Field(default_factory=list)
