"""Capability interface for the GitHub operations used by the pull request resource."""

from __future__ import annotations

from abc import ABC, abstractmethod

from pr_resource.libs.models import ChangedFileObject, PullRequest


class GitHubAPI(ABC):
    """
    GitHub operations needed to poll pull requests and report build results.

    Implementations return domain models only; callers never see REST or GraphQL
    response types. Pull request numbers are accepted as text where they come straight
    from a pipeline version.
    """

    @abstractmethod
    def search_pull_requests(self, query: str, limit: int) -> list[PullRequest]:
        """Search pull requests, following pagination until exhausted."""

    @abstractmethod
    def list_modified_files(self, pr_number: int) -> list[str]:
        """List the paths of all files modified by a pull request."""

    @abstractmethod
    def post_comment(self, pr_number: str, body: str) -> None:
        """Create a comment on a pull request."""

    @abstractmethod
    def get_pull_request(self, pr_number: str, commit_ref: str) -> PullRequest:
        """Get a pull request with `commit_ref` as its tip."""

    @abstractmethod
    def get_changed_files(self, pr_number: str, commit_ref: str) -> list[ChangedFileObject]:
        """Get all changed files of a pull request."""

    @abstractmethod
    def update_commit_status(
        self,
        commit_ref: str,
        base_context: str,
        status_context: str,
        status: str,
        target_url: str,
        description: str,
    ) -> None:
        """Create a commit status."""

    @abstractmethod
    def delete_previous_comments(self, pr_number: str) -> None:
        """Delete the authenticated user's comments on a pull request."""
