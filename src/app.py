"""
Main Application Entry Point.

This module is run by the GitHub Actions workflow for every webhook event
Autosquash subscribes to. It:
- Loads the triggering event from the runner environment
- Initializes the GitHub host and the reconciler
- Merges or updates the affected pull requests
- Exits with a non-zero status on errors that abort the whole run
"""

import asyncio
import sys

from config import settings, logger
from errors import AutosquashError
from events.loader import load_event
from hosts.base import PullRequestHost
from hosts.github_host import GitHubHost
from reconciler.dispatcher import ActionDispatcher
from reconciler.resolver import MergeabilityResolver
from reconciler.router import EventRouter


async def main() -> None:
    """
    Execute the reconciliation for the triggering event.

    Performs the following steps:
    1. Loads and parses the webhook payload
    2. Initializes the GitHub host, resolver and dispatcher
    3. Routes the event to merge/update actions

    Raises:
        PayloadError: If the event payload is missing or malformed
        HostError: If GitHub cannot be reached
        ResolutionTimeoutError: If a mergeable state never settles

    Note:
        - Rejected merges and updates are logged and don't stop execution
        - Unsupported events are ignored
    """
    logger.info(
        {
            "message": "Starting reconciliation",
            "event": settings.github_event_name,
            "dry_run": settings.dry_run,
        }
    )

    event = load_event(settings.github_event_name, settings.github_event_path)
    if event is None:
        return

    logger.debug("initializing github host...")
    host: PullRequestHost = GitHubHost(
        settings.github_token.get_secret_value(), settings.github_api_url
    )

    router = EventRouter(
        host,
        MergeabilityResolver(host),
        ActionDispatcher(host, dry_run=settings.dry_run),
    )
    await router.route(event)

    logger.info("application finished")


def run() -> None:
    """Run :func:`main` and turn fatal errors into a failing exit status."""
    try:
        asyncio.run(main())
    except AutosquashError as e:
        logger.critical(
            {"message": "Reconciliation aborted", "error": str(e)}, exc_info=True
        )
        sys.exit(1)


if __name__ == "__main__":
    logger.info("Starting application ...")
    run()
