"""
Event Router Module.

Entry point of the reconciliation: given one webhook event, finds the pull
requests it affects and, for each of them, decides whether to update its
branch, merge it, or leave it alone.

| Event                                   | Pull requests            | Action           |
|-----------------------------------------|--------------------------|------------------|
| check_run completed                     | attached to the run      | merge            |
| pull_request closed and merged          | searched on same base    | update           |
| pull_request labeled autosquash         | the labeled one          | update or merge  |
| pull_request_review submitted approved  | the reviewed one         | merge            |
| status success                          | searched by commit       | merge            |

Pull requests are handled one after the other, each inside its own log group.
"""

from typing import Awaitable, Callable, Iterable, Optional

from config import log_manager, logger
from events.models import (
    CheckRunEvent,
    Event,
    PullRequestEvent,
    PullRequestReviewEvent,
    StatusEvent,
)
from hosts.base import PullRequestHost
from hosts.models import PullRequestSnapshot
from reconciler.candidates import (
    AUTOSQUASH_LABEL,
    MERGEABLE_STATES,
    UPDATEABLE_STATES,
    is_candidate,
    is_ready_for,
)
from reconciler.dispatcher import ActionDispatcher
from reconciler.resolver import MergeabilityResolver

PullRequestHandler = Callable[[PullRequestSnapshot], Awaitable[None]]


def get_pull_request_id(number: int) -> str:
    return f"#{number}"


class EventRouter:
    """
    Route webhook events to merge and update actions.

    Attributes:
        host (PullRequestHost): Host serving pull requests and searches
        resolver (MergeabilityResolver): Fetches pull requests with a settled state
        dispatcher (ActionDispatcher): Merges and updates pull requests
    """

    def __init__(
        self,
        host: PullRequestHost,
        resolver: Optional[MergeabilityResolver] = None,
        dispatcher: Optional[ActionDispatcher] = None,
    ):
        """Initialize the router.

        Args:
            host (PullRequestHost): Host serving pull requests and searches
            resolver (Optional[MergeabilityResolver]): Defaults to one using ``host``
            dispatcher (Optional[ActionDispatcher]): Defaults to one using ``host``
        """
        self.host = host
        self.resolver = resolver or MergeabilityResolver(host)
        self.dispatcher = dispatcher or ActionDispatcher(host)

    async def route(self, event: Event) -> None:
        """
        Reconcile the pull requests affected by an event.

        Args:
            event (Event): Parsed webhook event

        Raises:
            HostError: If the host cannot be reached
            ResolutionTimeoutError: If a mergeable state never settles
        """
        if isinstance(event, CheckRunEvent):
            await self._on_check_run(event)
        elif isinstance(event, PullRequestEvent):
            await self._on_pull_request(event)
        elif isinstance(event, PullRequestReviewEvent):
            await self._on_pull_request_review(event)
        elif isinstance(event, StatusEvent):
            await self._on_status(event)
        else:
            logger.debug({"message": "Unhandled event", "event": type(event).__name__})

    async def _on_check_run(self, event: CheckRunEvent) -> None:
        if event.action != "completed":
            logger.debug({"message": "Ignoring check run", "action": event.action})
            return

        owner, repo = event.owner, event.repo
        numbers = [pr.number for pr in event.check_run.pull_requests]
        logger.info(
            f"Consider merging {', '.join(get_pull_request_id(n) for n in numbers)}"
        )

        async def handle(pr: PullRequestSnapshot) -> None:
            if is_ready_for(pr, MERGEABLE_STATES):
                await self.dispatcher.merge(owner, repo, pr)

        await self._handle_pull_requests(owner, repo, numbers, handle)

    async def _on_pull_request(self, event: PullRequestEvent) -> None:
        owner, repo = event.owner, event.repo

        if event.action == "closed" and event.pull_request.merged:
            base = event.pull_request.base.ref
            logger.info(f"Update all relevant pull requests on base {base}")

            async def handle(pr: PullRequestSnapshot) -> None:
                if is_ready_for(pr, UPDATEABLE_STATES):
                    await self.dispatcher.update(owner, repo, pr)

            await self._handle_searched_pull_requests(
                owner, repo, f'base:"{base}"', handle
            )
        elif (
            event.action == "labeled"
            and event.label is not None
            and event.label.name == AUTOSQUASH_LABEL
        ):
            logger.info(
                f"Consider merging or updating {get_pull_request_id(event.number)}"
            )
            pr = await self.resolver.fetch_settled(owner, repo, event.number)
            if not is_ready_for(pr, UPDATEABLE_STATES | MERGEABLE_STATES):
                return
            # Updating wins: a pull request behind its base is not merged as is
            if pr.mergeable_state in UPDATEABLE_STATES:
                await self.dispatcher.update(owner, repo, pr)
            else:
                await self.dispatcher.merge(owner, repo, pr)
        else:
            logger.debug({"message": "Ignoring pull request", "action": event.action})

    async def _on_pull_request_review(self, event: PullRequestReviewEvent) -> None:
        if event.action != "submitted" or event.review.state != "approved":
            logger.debug(
                {
                    "message": "Ignoring review",
                    "action": event.action,
                    "state": event.review.state,
                }
            )
            return

        owner, repo = event.owner, event.repo
        number = event.pull_request.number
        logger.info(f"Consider merging {get_pull_request_id(number)}")
        pr = await self.resolver.fetch_settled(owner, repo, number)
        if is_ready_for(pr, MERGEABLE_STATES):
            await self.dispatcher.merge(owner, repo, pr)

    async def _on_status(self, event: StatusEvent) -> None:
        if event.state != "success":
            logger.debug({"message": "Ignoring status", "state": event.state})
            return

        owner, repo = event.owner, event.repo
        logger.info(f"Merge all pull requests on commit {event.sha}")

        async def handle(pr: PullRequestSnapshot) -> None:
            if not is_ready_for(pr, MERGEABLE_STATES):
                return
            # The head may have moved since the status was reported
            if pr.head_sha != event.sha:
                logger.info(f"Skipping since HEAD is actually {pr.head_sha}")
                return
            await self.dispatcher.merge(owner, repo, pr)

        await self._handle_searched_pull_requests(owner, repo, event.sha, handle)

    async def _handle_pull_requests(
        self,
        owner: str,
        repo: str,
        numbers: Iterable[int],
        handle: PullRequestHandler,
    ) -> None:
        for number in numbers:
            with log_manager.group(f"Handling {get_pull_request_id(number)}"):
                pr = await self.resolver.fetch_settled(owner, repo, number)
                await handle(pr)

    async def _handle_searched_pull_requests(
        self,
        owner: str,
        repo: str,
        query: str,
        handle: PullRequestHandler,
    ) -> None:
        full_query = (
            f'is:pr is:open label:"{AUTOSQUASH_LABEL}" repo:{owner}/{repo} {query}'
        )
        result = await self.host.search_pull_requests(owner, repo, full_query)
        if result.incomplete_results:
            logger.warning(
                f"Search has incomplete results, only the first {len(result.items)} "
                "items will be handled"
            )

        for item in result.items:
            with log_manager.group(
                f"Handling searched pull request {get_pull_request_id(item.number)}"
            ):
                if is_candidate(item.closed_at, item.labels):
                    pr = await self.resolver.fetch_settled(owner, repo, item.number)
                    await handle(pr)
