"""
Mergeability Resolver Module.

GitHub computes the mergeable state of a pull request asynchronously after
any push to its head or base branch. Until it is done the state reads as
"unknown", so the pull request is fetched again with exponential backoff
until the state settles or the time and attempt budget runs out.
"""

from typing import Optional

from tenacity import (
    AsyncRetrying,
    RetryCallState,
    RetryError,
    retry_if_result,
    stop_after_attempt,
    stop_after_delay,
    wait_exponential,
)

from config import settings, logger
from errors import ResolutionTimeoutError
from hosts.base import PullRequestHost
from hosts.models import PullRequestSnapshot


def _is_unsettled(pr: PullRequestSnapshot) -> bool:
    return not pr.is_settled


def _log_refetch(retry_state: RetryCallState) -> None:
    logger.info(
        {
            "message": "Refetching details to know mergeable state",
            "attempt": retry_state.attempt_number,
            "next_wait_seconds": retry_state.next_action.sleep
            if retry_state.next_action
            else None,
        }
    )


class MergeabilityResolver:
    """
    Fetch pull requests once their mergeable state is known.

    Attributes:
        host (PullRequestHost): Host serving pull request snapshots
        min_wait (float): First wait between fetches, in seconds
        max_wait (float): Longest wait between fetches, in seconds
        max_delay (float): Total time allowed for the state to settle, in seconds
        max_attempts (int): Maximum number of fetches
    """

    def __init__(
        self,
        host: PullRequestHost,
        min_wait: Optional[float] = None,
        max_wait: Optional[float] = None,
        max_delay: Optional[float] = None,
        max_attempts: Optional[int] = None,
    ):
        self.host = host
        self.min_wait = settings.resolver_min_wait if min_wait is None else min_wait
        self.max_wait = settings.resolver_max_wait if max_wait is None else max_wait
        self.max_delay = (
            settings.resolver_max_delay if max_delay is None else max_delay
        )
        self.max_attempts = (
            settings.resolver_max_attempts if max_attempts is None else max_attempts
        )

    def _retrying(self) -> AsyncRetrying:
        # Waits min_wait, 2 * min_wait, 4 * min_wait, ... capped at max_wait.
        # Host errors are not retried: only unsettled snapshots are.
        return AsyncRetrying(
            retry=retry_if_result(_is_unsettled),
            wait=wait_exponential(
                multiplier=self.min_wait, min=self.min_wait, max=self.max_wait
            ),
            stop=stop_after_delay(self.max_delay)
            | stop_after_attempt(self.max_attempts),
            before_sleep=_log_refetch,
        )

    async def fetch_settled(
        self, owner: str, repo: str, number: int
    ) -> PullRequestSnapshot:
        """
        Fetch a pull request whose mergeable state is settled.

        Args:
            owner (str): Repository owner
            repo (str): Repository name
            number (int): Pull request number

        Returns:
            PullRequestSnapshot: Closed pull request, or open one with a known state

        Raises:
            ResolutionTimeoutError: If the state is still unknown once the budget is spent
            HostError: If the host cannot serve the pull request
        """
        logger.info("Fetching pull request details")
        try:
            return await self._retrying()(
                self.host.get_pull_request, owner, repo, number
            )
        except RetryError as e:
            raise ResolutionTimeoutError(
                number, e.last_attempt.attempt_number
            ) from e
