"""
Shared test fixtures.

The environment is prepared before any application module is imported since
``config`` builds the global settings and logger at import time.
"""

import os

os.environ.setdefault("GITHUB_TOKEN", "test-token")
os.environ["LOG_DIR"] = ""
os.environ["GITHUB_ACTIONS"] = "false"
os.environ["DRY_RUN"] = "false"

from unittest.mock import AsyncMock, Mock  # noqa: E402

import pytest  # noqa: E402

from config import logger  # noqa: E402
from hosts.models import (  # noqa: E402
    CommitRecord,
    MergeableState,
    PullRequestSnapshot,
    SearchResult,
)


@pytest.fixture
def app_logs(caplog):
    """Capture records of the application logger, which does not propagate."""
    logger.addHandler(caplog.handler)
    yield caplog
    logger.removeHandler(caplog.handler)


@pytest.fixture
def make_pr():
    """Build pull request snapshots, open, labeled and clean by default."""

    def _make_pr(**overrides) -> PullRequestSnapshot:
        data = {
            "number": 1,
            "closed_at": None,
            "labels": ["autosquash"],
            "head_sha": "abc123",
            "base_ref": "main",
            "body": "Fixes bug",
            "creator": "creator",
            "mergeable_state": MergeableState.CLEAN,
            "merged": False,
        }
        data.update(overrides)
        return PullRequestSnapshot(**data)

    return _make_pr


@pytest.fixture
def make_commit():
    """Build single-parent commits authored by a user account."""

    def _make_commit(login="jane", **overrides) -> CommitRecord:
        data = {
            "sha": f"sha-{login}",
            "parents": ["p1"],
            "author_login": login,
            "author_type": "User",
            "author_name": (login or "detached").capitalize(),
            "author_email": f"{login}@example.com",
        }
        data.update(overrides)
        return CommitRecord(**data)

    return _make_commit


@pytest.fixture
def mock_host():
    """Mock pull request host without any pull request or commit."""
    host = Mock()
    host.get_pull_request = AsyncMock()
    host.list_commits = AsyncMock(return_value=[])
    host.search_pull_requests = AsyncMock(return_value=SearchResult())
    host.squash_merge = AsyncMock(return_value=None)
    host.update_branch = AsyncMock(return_value=None)
    return host
