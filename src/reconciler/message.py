"""
Squashed Commit Message Module.

The pull request body is used as the squashed commit message: it usually
holds a useful description, unlike the titles of intermediate commits such
as "fix CI" or "formatting". Commit authors are credited with co-author
trailers, see
https://docs.github.com/en/pull-requests/committing-changes-to-your-project/creating-and-editing-commits/creating-a-commit-with-multiple-authors
"""

from typing import Sequence

from hosts.models import Author


def build_message(body: str, co_authors: Sequence[Author]) -> str:
    """
    Build the squashed commit message.

    Args:
        body (str): Pull request body
        co_authors (Sequence[Author]): Co-authors to credit

    Returns:
        str: The body, followed by a blank line and one trailer per co-author
    """
    if not co_authors:
        return body

    co_author_lines = [
        f"Co-authored-by: {author.name} <{author.email}>" for author in co_authors
    ]
    return "\n".join([body, "", *co_author_lines])
