"""
Action Dispatcher Module.

Issues the merge and update-branch commands for a single pull request.
A rejected command is logged and reported to the caller without raising
so the remaining pull requests of the same event are still handled.
Nothing is retried here: the next webhook event will trigger a new attempt.
"""

from config import logger
from errors import ActionRejectedError
from hosts.base import PullRequestHost
from hosts.models import PullRequestSnapshot
from reconciler.coauthors import collect_co_authors
from reconciler.message import build_message


class ActionDispatcher:
    """
    Merge or update pull requests on the host.

    The head commit of the snapshot is sent along with every command so that
    the host refuses it if the pull request moved since it was fetched.

    Attributes:
        host (PullRequestHost): Host executing the commands
        dry_run (bool): Log the commands instead of executing them
    """

    def __init__(self, host: PullRequestHost, dry_run: bool = False):
        self.host = host
        self.dry_run = dry_run

    async def merge(self, owner: str, repo: str, pr: PullRequestSnapshot) -> bool:
        """
        Squash-merge a pull request crediting its co-authors.

        Args:
            owner (str): Repository owner
            repo (str): Repository name
            pr (PullRequestSnapshot): Pull request to merge

        Returns:
            bool: True if the pull request was merged
        """
        co_authors = await collect_co_authors(
            self.host, owner, repo, pr.number, pr.creator
        )
        commit_message = build_message(pr.body, co_authors)

        if self.dry_run:
            logger.info(
                {
                    "message": "Dry run, skipping merge",
                    "pull_request": pr.number,
                    "sha": pr.head_sha,
                    "commit_message": commit_message,
                }
            )
            return True

        try:
            logger.info("Attempting merge")
            await self.host.squash_merge(
                owner, repo, pr.number, pr.head_sha, commit_message
            )
        except ActionRejectedError as e:
            logger.error(f"Merge failed: {e}")
            return False

        logger.info("Merged!")
        return True

    async def update(self, owner: str, repo: str, pr: PullRequestSnapshot) -> bool:
        """
        Merge the base branch into a pull request.

        Args:
            owner (str): Repository owner
            repo (str): Repository name
            pr (PullRequestSnapshot): Pull request to update

        Returns:
            bool: True if the host accepted the update
        """
        if self.dry_run:
            logger.info(
                {
                    "message": "Dry run, skipping update",
                    "pull_request": pr.number,
                    "sha": pr.head_sha,
                }
            )
            return True

        try:
            logger.info("Attempting update")
            await self.host.update_branch(owner, repo, pr.number, pr.head_sha)
        except ActionRejectedError as e:
            logger.error(f"Update failed: {e}")
            return False

        logger.info("Updated!")
        return True
