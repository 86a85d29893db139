"""
Abstract Base Class for Version-Control Hosts.

Defines the narrow interface the reconciler needs from the host.
All host implementations (GitHub, fakes used in tests, etc.) should implement it.
"""

from abc import ABC, abstractmethod
from typing import List

from hosts.models import CommitRecord, PullRequestSnapshot, SearchResult


class PullRequestHost(ABC):
    """
    Abstract base class for pull request hosts.

    Implementations should handle:
    - Authentication with the host
    - Transforming host responses to the common models
    - Raising HostError subclasses on failures
    """

    @abstractmethod
    async def get_pull_request(
        self, owner: str, repo: str, number: int
    ) -> PullRequestSnapshot:
        """
        Fetch the current state of a pull request.

        Args:
            owner (str): Repository owner
            repo (str): Repository name
            number (int): Pull request number

        Returns:
            PullRequestSnapshot: Current pull request state

        Raises:
            PullRequestNotFoundError: If the pull request does not exist
            HostError: If the host cannot be reached
        """
        pass

    @abstractmethod
    async def list_commits(
        self, owner: str, repo: str, number: int
    ) -> List[CommitRecord]:
        """
        List every commit of a pull request in chronological order.

        Raises:
            HostError: If the host cannot be reached
        """
        pass

    @abstractmethod
    async def search_pull_requests(
        self, owner: str, repo: str, query: str
    ) -> SearchResult:
        """
        Search pull requests of a repository.

        Args:
            owner (str): Repository owner
            repo (str): Repository name
            query (str): Complete search query

        Returns:
            SearchResult: Matching items, oldest first

        Raises:
            HostError: If the host cannot be reached
        """
        pass

    @abstractmethod
    async def squash_merge(
        self,
        owner: str,
        repo: str,
        number: int,
        expected_head_sha: str,
        commit_message: str,
    ) -> None:
        """
        Squash-merge a pull request if its head is still ``expected_head_sha``.

        Raises:
            ActionRejectedError: If the host refuses the merge
        """
        pass

    @abstractmethod
    async def update_branch(
        self, owner: str, repo: str, number: int, expected_head_sha: str
    ) -> None:
        """
        Merge the base branch into a pull request's head branch.

        Raises:
            ActionRejectedError: If the host refuses the update
        """
        pass
