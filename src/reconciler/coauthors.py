"""
Co-Author Aggregation Module.

Collects the people who authored commits in a pull request so they can be
credited in the squashed commit.
"""

from typing import List, Set

from config import logger
from hosts.base import PullRequestHost
from hosts.models import Author, CommitRecord


def _is_coauthored(commit: CommitRecord, creator: str) -> bool:
    return (
        # Ignore merge commits.
        len(commit.parents) == 1
        # Ignore commits with author detached from a GitHub account.
        and commit.author_login is not None
        # Ignore pull request creator (already main author of the squashed commit).
        and commit.author_login != creator
        # Ignore bots.
        and commit.author_type == "User"
    )


async def collect_co_authors(
    host: PullRequestHost, owner: str, repo: str, number: int, creator: str
) -> List[Author]:
    """
    Collect the distinct co-authors of a pull request.

    Authors are identified by their account login since the same person can
    commit with different names or emails; the first name and email seen
    for an account is kept.

    Args:
        host (PullRequestHost): Host listing the pull request commits
        owner (str): Repository owner
        repo (str): Repository name
        number (int): Pull request number
        creator (str): Login of the pull request creator

    Returns:
        List[Author]: Co-authors in order of first commit
    """
    commits = await host.list_commits(owner, repo, number)

    author_logins: Set[str] = set()
    co_authors: List[Author] = []
    for commit in commits:
        if not _is_coauthored(commit, creator):
            continue
        if commit.author_login not in author_logins:
            author_logins.add(commit.author_login)
            co_authors.append(
                Author(name=commit.author_name, email=commit.author_email)
            )

    logger.debug(
        {
            "message": "Collected co-authors",
            "pull_request": number,
            "commits": len(commits),
            "co_authors": len(co_authors),
        }
    )
    return co_authors
