"""
GitHub Host Module.

This module implements the pull request host on top of the GitHub REST API
through PyGithub. It reads pull request, commit and search snapshots,
transforms them into the common Pydantic models, and issues the squash-merge
and update-branch commands.
"""

from datetime import datetime, timezone
from typing import List, Optional

from github import Auth, Github
from github.Commit import Commit
from github.GithubException import GithubException, UnknownObjectException
from github.PullRequest import PullRequest
from github.Repository import Repository
from requests.exceptions import RequestException

from config import settings, logger
from errors import ActionRejectedError, HostError, PullRequestNotFoundError
from hosts.base import PullRequestHost
from hosts.models import (
    CommitRecord,
    MergeableState,
    PullRequestSnapshot,
    SearchItem,
    SearchResult,
)


def _error_message(error: GithubException) -> str:
    """Extract the human readable message of a GitHub API error."""
    data = error.data
    if isinstance(data, dict) and data.get("message"):
        return str(data["message"])
    return str(error)


def _unreachable(error: RequestException) -> HostError:
    """Wrap a transport failure raised below PyGithub."""
    return HostError(f"GitHub is unreachable: {error}")


class GitHubHost(PullRequestHost):
    """
    GitHubHost talks to GitHub on behalf of the reconciler.
    Every call hits the API: nothing is cached between calls.
    """

    def __init__(
        self,
        github_token: Optional[str] = None,
        base_url: Optional[str] = None,
        github: Optional[Github] = None,
    ):
        """Initialize GitHub host with authentication and configuration.

        Args:
            github_token (Optional[str]): GitHub API token for authentication.
            base_url (Optional[str]): GitHub REST API base URL.
            github (Optional[Github]): Preconfigured client, mostly for tests.
        """
        self.github = github or Github(
            auth=Auth.Token(github_token or settings.github_token.get_secret_value()),
            base_url=base_url or settings.github_api_url,
        )

    def _check_rate_limit(self, check_name: str) -> None:
        """
        Check and log the GitHub API rate limit status.

        Args:
            check_name (str): Identifier for the rate limit check point.

        Raises:
            HostError: Raised when the rate limit is exhausted, indicating time until reset.
        """
        try:
            # Queries /rate_limit when the last response carried no headers
            remaining, limit = self.github.rate_limiting
            reset_time = datetime.fromtimestamp(
                self.github.rate_limiting_resettime, tz=timezone.utc
            )
        except GithubException as e:
            # GitHub Enterprise Server answers 404 when rate limiting is disabled
            logger.debug(
                {
                    "message": f"{check_name} API rate limit unavailable",
                    "error": _error_message(e),
                }
            )
            return
        except RequestException as e:
            raise _unreachable(e) from e
        now = datetime.now(timezone.utc)

        logger.debug(
            {
                "message": f"{check_name} API rate limit status",
                "remaining_points": remaining,
                "total_points": limit,
                "reset_time": reset_time.isoformat(),
            }
        )

        # If less than 10% of rate limit remains, log a warning
        if 0 < remaining < limit * 0.1:
            logger.warning(
                {
                    "message": "GitHub API rate limit running low",
                    "remaining_points": remaining,
                    "reset_time": reset_time.isoformat(),
                }
            )

        if remaining == 0:
            wait_time = (reset_time - now).total_seconds()
            logger.critical(
                {
                    "message": "GitHub API rate limit exhausted",
                    "reset_time": reset_time.isoformat(),
                    "wait_time_seconds": wait_time,
                }
            )
            raise HostError(
                f"GitHub API rate limit exhausted. Resets in {wait_time/60:.1f} minutes",
                status=403,
            )

    def _get_repository(self, owner: str, repo: str) -> Repository:
        return self.github.get_repo(f"{owner}/{repo}", lazy=True)

    def _get_pull(self, owner: str, repo: str, number: int) -> PullRequest:
        """
        Fetch a PyGithub pull request object.

        Raises:
            PullRequestNotFoundError: If the pull request does not exist
            HostError: For other GitHub API errors
        """
        try:
            return self._get_repository(owner, repo).get_pull(number)
        except UnknownObjectException as e:
            raise PullRequestNotFoundError(
                f"Pull request {owner}/{repo}#{number} was not found", status=e.status
            ) from e
        except GithubException as e:
            raise HostError(
                f"Failed to fetch {owner}/{repo}#{number}: {_error_message(e)}",
                status=e.status,
            ) from e
        except RequestException as e:
            raise _unreachable(e) from e

    def _mergeable_state(self, number: int, value: Optional[str]) -> MergeableState:
        if value is None:
            return MergeableState.UNKNOWN
        try:
            return MergeableState(value)
        except ValueError:
            logger.warning(
                {
                    "message": "Unrecognized mergeable state, treating it as blocked",
                    "pull_request": number,
                    "mergeable_state": value,
                }
            )
            return MergeableState.BLOCKED

    def _get_pr_data(self, pr: PullRequest) -> PullRequestSnapshot:
        """Convert a GitHub PullRequest object to a Pydantic model.

        Args:
            pr (PullRequest): The GitHub PullRequest object.

        Returns:
            PullRequestSnapshot: A Pydantic model representing the PR state.
        """
        return PullRequestSnapshot(
            number=pr.number,
            closed_at=pr.closed_at,
            labels=[label.name for label in pr.labels],
            head_sha=pr.head.sha,
            base_ref=pr.base.ref,
            body=pr.body,
            creator=pr.user.login,
            mergeable_state=self._mergeable_state(pr.number, pr.mergeable_state),
            merged=pr.merged,
        )

    def _get_commit_data(self, commit: Commit) -> CommitRecord:
        """Convert a GitHub Commit object to a Pydantic model.

        Args:
            commit (Commit): The GitHub Commit object.

        Returns:
            CommitRecord: A Pydantic model representing the commit and its account.
        """
        git_author = commit.commit.author
        return CommitRecord(
            sha=commit.sha,
            parents=[parent.sha for parent in commit.parents],
            author_login=commit.author.login if commit.author else None,
            author_type=commit.author.type if commit.author else None,
            author_name=git_author.name,
            author_email=git_author.email,
        )

    async def get_pull_request(
        self, owner: str, repo: str, number: int
    ) -> PullRequestSnapshot:
        pr = self._get_pull(owner, repo, number)
        return self._get_pr_data(pr)

    async def list_commits(
        self, owner: str, repo: str, number: int
    ) -> List[CommitRecord]:
        self._check_rate_limit("Commit listing")
        pr = self._get_pull(owner, repo, number)
        try:
            # PaginatedList fetches the following pages lazily
            return [self._get_commit_data(commit) for commit in pr.get_commits()]
        except GithubException as e:
            raise HostError(
                f"Failed to list commits of {owner}/{repo}#{number}: {_error_message(e)}",
                status=e.status,
            ) from e
        except RequestException as e:
            raise _unreachable(e) from e

    async def search_pull_requests(
        self, owner: str, repo: str, query: str
    ) -> SearchResult:
        """
        Search pull requests with the issue search endpoint.

        The raw endpoint is used instead of ``Github.search_issues`` because
        PyGithub's paginated list hides the ``incomplete_results`` flag.
        Only the first page is read, oldest pull requests first.
        """
        self._check_rate_limit("Search")
        try:
            _, data = self.github.requester.requestJsonAndCheck(
                "GET",
                "/search/issues",
                parameters={
                    "q": query,
                    "sort": "created",
                    "order": "asc",
                    "per_page": 100,
                },
            )
        except GithubException as e:
            raise HostError(
                f"Search failed in {owner}/{repo}: {_error_message(e)}",
                status=e.status,
            ) from e
        except RequestException as e:
            raise _unreachable(e) from e

        return SearchResult(
            incomplete_results=data.get("incomplete_results", False),
            items=[
                SearchItem(
                    number=item["number"],
                    closed_at=item.get("closed_at"),
                    labels=[label["name"] for label in item.get("labels", [])],
                )
                for item in data.get("items", [])
            ],
        )

    async def squash_merge(
        self,
        owner: str,
        repo: str,
        number: int,
        expected_head_sha: str,
        commit_message: str,
    ) -> None:
        # Calls the endpoint directly, the pull request is not re-fetched
        try:
            _, data = self.github.requester.requestJsonAndCheck(
                "PUT",
                f"/repos/{owner}/{repo}/pulls/{number}/merge",
                input={
                    "commit_message": commit_message,
                    "merge_method": "squash",
                    "sha": expected_head_sha,
                },
            )
        except GithubException as e:
            raise ActionRejectedError(_error_message(e), status=e.status) from e
        except RequestException as e:
            raise _unreachable(e) from e
        if not data.get("merged"):
            raise ActionRejectedError(
                data.get("message") or "Pull request was not merged"
            )

    async def update_branch(
        self, owner: str, repo: str, number: int, expected_head_sha: str
    ) -> None:
        try:
            # Answers 202 Accepted, any refusal is an error status
            self.github.requester.requestJsonAndCheck(
                "PUT",
                f"/repos/{owner}/{repo}/pulls/{number}/update-branch",
                input={"expected_head_sha": expected_head_sha},
            )
        except GithubException as e:
            raise ActionRejectedError(_error_message(e), status=e.status) from e
        except RequestException as e:
            raise _unreachable(e) from e
