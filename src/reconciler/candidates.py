"""
Candidate Filter Module.

Decides which pull requests Autosquash is allowed to act on and whether
their mergeable state calls for an update or a merge.
"""

from datetime import datetime
from typing import Collection, Iterable, Optional

from config import logger
from hosts.models import MergeableState, PullRequestSnapshot

AUTOSQUASH_LABEL = "autosquash"

# When "Require branches to be up to date before merging" is checked and the
# pull request is missing commits from its base branch, GitHub considers its
# mergeable state to be "behind".
UPDATEABLE_STATES = frozenset({MergeableState.BEHIND})

# GitHub reports "unstable" while checks are running on the pull request,
# which is the case while Autosquash itself runs, so a merge is attempted
# anyway.
MERGEABLE_STATES = frozenset({MergeableState.CLEAN, MergeableState.UNSTABLE})


def is_candidate(closed_at: Optional[datetime], labels: Iterable[str]) -> bool:
    """
    Check whether a pull request is open and labeled for Autosquash.

    Args:
        closed_at (Optional[datetime]): Close time, None while the pull request is open
        labels (Iterable[str]): Label names of the pull request

    Returns:
        bool: True if Autosquash may act on the pull request
    """
    if closed_at is not None:
        logger.info("Already merged or closed")
        return False

    if AUTOSQUASH_LABEL not in labels:
        logger.info(f"No {AUTOSQUASH_LABEL} label")
        return False

    return True


def is_ready_for(
    pr: PullRequestSnapshot, allowed_states: Collection[MergeableState]
) -> bool:
    """
    Check whether a candidate pull request is in one of the allowed states.

    Args:
        pr (PullRequestSnapshot): Settled pull request snapshot
        allowed_states (Collection[MergeableState]): Accepted mergeable states

    Returns:
        bool: True if the pull request is a candidate in an allowed state
    """
    if not is_candidate(pr.closed_at, pr.labels):
        return False

    logger.info(f"Mergeable state is {pr.mergeable_state.value}")
    return pr.mergeable_state in allowed_states
