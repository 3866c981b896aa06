import logging as python_logging
from datetime import UTC, datetime
from typing import Any
from unittest.mock import MagicMock

import pytest

from pr_resource.libs.config import BuildEnvironment
from pr_resource.libs.models import CommitObject, PullRequest, PullRequestState, Source

# Test token constant to silence S106 security warnings
TEST_GITHUB_TOKEN = "ghs_" + "test1234567890abcdefghijklmnopqrstuvwxyz"  # pragma: allowlist secret

UPDATED_AT = "2024-05-01T12:30:00Z"


def commit_node(oid: str, message: str = "commit message", login: str | None = "octocat") -> dict[str, Any]:
    """GraphQL `Commit` node as returned by GitHub."""
    return {
        "id": f"C_{oid}",
        "oid": oid,
        "committedDate": "2024-05-01T12:00:00Z",
        "message": message,
        "author": {"user": {"login": login} if login else None, "email": f"{login or 'nobody'}@example.com"},
    }


def pull_request_node(number: int = 1, state: str = "OPEN", **extra: Any) -> dict[str, Any]:
    """GraphQL `PullRequest` node with the fields of PullRequestFields."""
    node = {
        "id": f"PR_{number}",
        "number": number,
        "title": f"Pull request {number}",
        "url": f"https://github.com/owner/repo/pull/{number}",
        "baseRefName": "main",
        "headRefName": f"feature-{number}",
        "repository": {"url": "https://github.com/owner/repo"},
        "isCrossRepository": False,
        "isDraft": False,
        "state": state,
        "updatedAt": UPDATED_AT,
    }
    node.update(extra)
    return node


def search_node(number: int, oid: str, approved: int = 0, labels: list[str] | None = None) -> dict[str, Any]:
    return pull_request_node(
        number,
        reviews={"totalCount": approved},
        commits={"edges": [{"node": {"commit": commit_node(oid)}}]},
        labels={"edges": [{"node": {"name": name}} for name in labels or []]},
    )


@pytest.fixture
def mock_logger():
    """Create a mock logger."""
    logger = MagicMock(spec=python_logging.Logger)
    return logger


@pytest.fixture
def source():
    return Source(repository="owner/repo", access_token=TEST_GITHUB_TOKEN)


@pytest.fixture
def build_environment():
    return BuildEnvironment(external_url="https://ci.example.com", build_id="1234")


@pytest.fixture
def pull_request():
    return PullRequest(
        id="PR_42",
        number=42,
        title="Add feature",
        url="https://github.com/owner/repo/pull/42",
        base_ref_name="main",
        head_ref_name="feature",
        state=PullRequestState.OPEN,
        updated_at=datetime(2024, 5, 1, 12, 30, tzinfo=UTC),
        tip=CommitObject.model_validate(commit_node("abc123", message="Add feature")),
        approved_review_count=2,
    )
