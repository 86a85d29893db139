"""
Co-Author Aggregation Test Suite.
"""

import pytest

from hosts.models import Author
from reconciler.coauthors import collect_co_authors


@pytest.mark.asyncio
async def test_merge_duplicate_creator_and_detached_commits_are_skipped(
    mock_host, make_commit
):
    mock_host.list_commits.return_value = [
        make_commit("alice", parents=["p1", "p2"]),
        make_commit("bob"),
        make_commit("bob"),
        make_commit("creator"),
        make_commit(None, author_login=None, author_type=None),
    ]

    co_authors = await collect_co_authors(mock_host, "octo", "repo", 7, "creator")

    assert co_authors == [Author(name="Bob", email="bob@example.com")]
    mock_host.list_commits.assert_awaited_once_with("octo", "repo", 7)


@pytest.mark.asyncio
async def test_first_name_and_email_of_an_account_win(mock_host, make_commit):
    mock_host.list_commits.return_value = [
        make_commit("bob", author_name="Bob", author_email="bob@work.com"),
        make_commit("bob", author_name="Bobby", author_email="bob@home.com"),
    ]

    co_authors = await collect_co_authors(mock_host, "octo", "repo", 7, "creator")

    assert co_authors == [Author(name="Bob", email="bob@work.com")]


@pytest.mark.asyncio
async def test_accounts_sharing_a_name_are_distinct(mock_host, make_commit):
    mock_host.list_commits.return_value = [
        make_commit("bob", author_name="Bob", author_email="bob@example.com"),
        make_commit("bob2", author_name="Bob", author_email="bob@example.com"),
    ]

    co_authors = await collect_co_authors(mock_host, "octo", "repo", 7, "creator")

    assert len(co_authors) == 2


@pytest.mark.asyncio
async def test_bots_are_skipped(mock_host, make_commit):
    mock_host.list_commits.return_value = [
        make_commit("dependabot[bot]", author_type="Bot"),
        make_commit("carol"),
    ]

    co_authors = await collect_co_authors(mock_host, "octo", "repo", 7, "creator")

    assert co_authors == [Author(name="Carol", email="carol@example.com")]


@pytest.mark.asyncio
async def test_order_of_first_commit_is_kept(mock_host, make_commit):
    mock_host.list_commits.return_value = [
        make_commit("zoe"),
        make_commit("adam"),
        make_commit("zoe"),
        make_commit("mia"),
    ]

    co_authors = await collect_co_authors(mock_host, "octo", "repo", 7, "creator")

    assert [author.name for author in co_authors] == ["Zoe", "Adam", "Mia"]


@pytest.mark.asyncio
async def test_no_commits_no_co_authors(mock_host):
    assert await collect_co_authors(mock_host, "octo", "repo", 7, "creator") == []
