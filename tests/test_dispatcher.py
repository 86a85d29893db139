"""
Action Dispatcher Test Suite.
"""

import pytest

from errors import ActionRejectedError
from reconciler.dispatcher import ActionDispatcher


@pytest.fixture
def dispatcher(mock_host):
    return ActionDispatcher(mock_host)


@pytest.mark.asyncio
async def test_merge_squashes_with_co_authors(
    dispatcher, mock_host, make_pr, make_commit, app_logs
):
    mock_host.list_commits.return_value = [make_commit("jane"), make_commit("creator")]
    pr = make_pr(number=12, head_sha="deadbeef", body="Fixes bug")

    assert await dispatcher.merge("octo", "repo", pr)

    mock_host.squash_merge.assert_awaited_once_with(
        "octo",
        "repo",
        12,
        "deadbeef",
        "Fixes bug\n\nCo-authored-by: Jane <jane@example.com>",
    )
    assert app_logs.messages[-2:] == ["Attempting merge", "Merged!"]


@pytest.mark.asyncio
async def test_rejected_merge_is_logged_not_raised(
    dispatcher, mock_host, make_pr, app_logs
):
    mock_host.squash_merge.side_effect = ActionRejectedError(
        "Head branch was modified", status=409
    )

    assert not await dispatcher.merge("octo", "repo", make_pr())

    assert "Merge failed: Head branch was modified" in app_logs.messages
    assert "Merged!" not in app_logs.messages


@pytest.mark.asyncio
async def test_update_uses_head_as_expected_sha(
    dispatcher, mock_host, make_pr, app_logs
):
    pr = make_pr(number=3, head_sha="cafe")

    assert await dispatcher.update("octo", "repo", pr)

    mock_host.update_branch.assert_awaited_once_with("octo", "repo", 3, "cafe")
    assert app_logs.messages[-2:] == ["Attempting update", "Updated!"]


@pytest.mark.asyncio
async def test_rejected_update_is_logged_not_raised(
    dispatcher, mock_host, make_pr, app_logs
):
    mock_host.update_branch.side_effect = ActionRejectedError("expected head sha")

    assert not await dispatcher.update("octo", "repo", make_pr())

    assert "Update failed: expected head sha" in app_logs.messages


@pytest.mark.asyncio
async def test_dry_run_does_not_touch_the_host(mock_host, make_pr, make_commit):
    mock_host.list_commits.return_value = [make_commit("jane")]
    dispatcher = ActionDispatcher(mock_host, dry_run=True)

    assert await dispatcher.merge("octo", "repo", make_pr())
    assert await dispatcher.update("octo", "repo", make_pr())

    mock_host.list_commits.assert_awaited_once()
    mock_host.squash_merge.assert_not_awaited()
    mock_host.update_branch.assert_not_awaited()
