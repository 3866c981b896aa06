"""Unified GitHub API interface supporting both GraphQL and REST operations.

This module provides the single implementation of `GitHubAPI` used by the resource.

Strategy:
- GraphQL: searching pull requests, pull request lookup by commit, changed files,
  comment authorship lookup
- REST: operations not available (or not practical) in GraphQL: modified file listing,
  issue comments, commit statuses, comment deletion

Note: Operations use either GraphQL OR REST, not both. No automatic fallback between them,
and failed requests are not retried.
"""

from __future__ import annotations

import logging
import posixpath
from typing import Any
from urllib.parse import urlparse

from github import Auth, Github
from github.Repository import Repository as RestRepository

from pr_resource.libs.config import BuildEnvironment
from pr_resource.libs.exceptions import CommitRefNotFoundError, ConfigurationError
from pr_resource.libs.github_api import GitHubAPI
from pr_resource.libs.graphql.graphql_builders import QueryBuilder
from pr_resource.libs.graphql.graphql_client import GraphQLClient
from pr_resource.libs.models import ChangedFileObject, CommitObject, LabelObject, PullRequest, Source
from pr_resource.libs.pagination import Cursor, Page, paginate
from pr_resource.utils.constants import (
    DEFAULT_BASE_CONTEXT,
    DEFAULT_STATUS_CONTEXT,
    DEFAULT_STATUS_DESCRIPTION,
    GITHUB_GRAPHQL_URL,
    PAGE_SIZE,
)
from pr_resource.utils.helpers import get_logger_with_params, parse_pull_request_number, parse_repository

# Connections joined onto a pull request node, not part of PullRequestObject
_CONNECTION_KEYS = ("commits", "labels", "reviews")


class UnifiedGitHubAPI(GitHubAPI):
    """
    Unified interface for GitHub API operations.

    Routes each operation to the API that owns it and converts responses to
    domain models.

    Example:
        >>> with UnifiedGitHubAPI(source=source, logger=logger) as api:
        ...     pull_requests = api.search_pull_requests("is:pr repo:owner/repo is:open", 100)
        ...     api.post_comment(str(pull_requests[0].number), "Hello!")
    """

    def __init__(
        self,
        source: Source,
        logger: logging.Logger | None = None,
        environment: BuildEnvironment | None = None,
    ) -> None:
        """
        Initialize unified API client.

        Args:
            source: Validated resource configuration
            logger: Logger instance
            environment: Pipeline values for commit status links (read from the process
                environment when omitted)

        Raises:
            MalformedRepositoryError: If `source.repository` is not `owner/name`
            ConfigurationError: If an endpoint override is not an absolute URL
        """
        self.owner, self.name = parse_repository(source.repository)
        self.logger = logger or get_logger_with_params()
        self.environment = environment or BuildEnvironment.from_env()

        verify = not source.skip_ssl_verification
        if not verify:
            self.logger.warning(
                f"TLS certificate verification is disabled for {self.owner}/{self.name} (skip_ssl_verification)"
            )

        # retry=None turns off PyGithub's default GithubRetry; failures reach the caller on the first attempt
        rest_kwargs: dict[str, Any] = {
            "auth": Auth.Token(source.access_token),
            "per_page": PAGE_SIZE,
            "verify": verify,
            "retry": None,
            "lazy": True,
        }
        graphql_url = GITHUB_GRAPHQL_URL
        if source.v3_endpoint:
            rest_kwargs["base_url"] = self._parse_endpoint(source.v3_endpoint, "v3_endpoint")
        if source.v4_endpoint:
            graphql_url = self._parse_endpoint(source.v4_endpoint, "v4_endpoint")

        self.rest_client = Github(**rest_kwargs)
        self.graphql_client = GraphQLClient(
            token=source.access_token, logger=self.logger, url=graphql_url, verify=verify
        )
        self._repository: RestRepository | None = None

        self.logger.debug(f"Unified GitHub API initialized for {self.owner}/{self.name} (GraphQL + REST)")

    def __enter__(self) -> UnifiedGitHubAPI:
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        self.close()

    def close(self) -> None:
        """Close and cleanup API clients."""
        self.graphql_client.close()
        self.rest_client.close()
        self.logger.debug("Unified GitHub API closed")

    @staticmethod
    def _parse_endpoint(endpoint: str, key: str) -> str:
        parsed = urlparse(endpoint)
        if not parsed.scheme or not parsed.netloc:
            raise ConfigurationError(f"failed to parse {key}: {endpoint!r} is not an absolute URL")
        return endpoint.rstrip("/")

    @property
    def repository(self) -> RestRepository:
        """REST repository handle, created without a request."""
        if self._repository is None:
            self._repository = self.rest_client.get_repo(f"{self.owner}/{self.name}")
        return self._repository

    @staticmethod
    def _build_pull_request(
        node: dict[str, Any],
        tip: CommitObject,
        approved_review_count: int = 0,
        labels: list[LabelObject] | None = None,
    ) -> PullRequest:
        data = {key: value for key, value in node.items() if key not in _CONNECTION_KEYS}
        return PullRequest.model_validate({
            **data,
            "tip": tip,
            "approvedReviewCount": approved_review_count,
            "labels": labels or [],
        })

    def _pull_request_from_search_node(self, node: dict[str, Any]) -> PullRequest | None:
        # Search results that are not pull requests come back as empty objects
        if not node:
            return None

        commit_edges = node.get("commits", {}).get("edges") or []
        if not commit_edges:
            self.logger.debug(f"Skipping pull request #{node.get('number')} without commits")
            return None

        # Only the latest commit is requested, it is the tip
        tip = CommitObject.model_validate(commit_edges[-1]["node"]["commit"])
        labels = [LabelObject.model_validate(edge["node"]) for edge in node.get("labels", {}).get("edges") or []]
        approved_review_count = node.get("reviews", {}).get("totalCount", 0)

        return self._build_pull_request(
            node, tip=tip, approved_review_count=approved_review_count, labels=labels
        )

    # ===== Query Operations (GraphQL) =====

    def search_pull_requests(self, query: str, limit: int) -> list[PullRequest]:
        """
        Search pull requests.

        Uses: GraphQL
        Reason: Search with latest commit, approvals and labels in one query

        Args:
            query: GitHub search query, composed by the caller
            limit: Page size for the search connection

        Returns:
            One PullRequest per matching pull request, in search order
        """

        def _fetch_page(cursor: Cursor) -> Page[PullRequest]:
            gql_query, variables = QueryBuilder.search_pull_requests(query, first=limit, after=cursor.after)
            result = self.graphql_client.execute(gql_query, variables)
            search = result["search"]

            pull_requests: list[PullRequest] = []
            for node in search.get("nodes") or []:
                pull_request = self._pull_request_from_search_node(node)
                if pull_request is not None:
                    pull_requests.append(pull_request)

            return Page.from_connection(pull_requests, search["pageInfo"])

        self.logger.debug(f"Searching pull requests: {query}")
        pull_requests = paginate(_fetch_page, logger=self.logger)
        self.logger.debug(f"Search returned {len(pull_requests)} pull requests")
        return pull_requests

    def get_pull_request(self, pr_number: str, commit_ref: str) -> PullRequest:
        """
        Get a pull request with the given commit as its tip.

        Uses: GraphQL
        Reason: Pull request and its recent commits in one query

        Only the most recent commits are scanned, so a ref pushed over before the
        window filled up is reported as not found.

        Args:
            pr_number: Pull request number
            commit_ref: Commit OID to use as tip

        Returns:
            PullRequest without approved review count and labels

        Raises:
            PullRequestNumberError: If `pr_number` is not numeric
            CommitRefNotFoundError: If no fetched commit matches `commit_ref`
        """
        number = parse_pull_request_number(pr_number)

        query, variables = QueryBuilder.get_pull_request_commits(self.owner, self.name, number)
        result = self.graphql_client.execute(query, variables)
        node = result["repository"]["pullRequest"]

        for edge in node.get("commits", {}).get("edges") or []:
            commit = edge["node"]["commit"]
            if commit["oid"] == commit_ref:
                self.logger.debug(f"Found commit {commit_ref} in pull request #{number}")
                return self._build_pull_request(node, tip=CommitObject.model_validate(commit))

        raise CommitRefNotFoundError(commit_ref)

    def get_changed_files(self, pr_number: str, commit_ref: str) -> list[ChangedFileObject]:
        """
        Get all changed files of a pull request.

        Uses: GraphQL
        Reason: Cursor pagination over `PullRequest.files`

        The file list is the pull request's current one; `commit_ref` does not scope it.

        Raises:
            PullRequestNumberError: If `pr_number` is not numeric
        """
        number = parse_pull_request_number(pr_number)

        def _fetch_page(cursor: Cursor) -> Page[ChangedFileObject]:
            query, variables = QueryBuilder.get_changed_files(self.owner, self.name, number, after=cursor.after)
            result = self.graphql_client.execute(query, variables)
            files = result["repository"]["pullRequest"]["files"]
            changed_files = [ChangedFileObject.model_validate(edge["node"]) for edge in files.get("edges") or []]
            return Page.from_connection(changed_files, files["pageInfo"])

        changed_files = paginate(_fetch_page, logger=self.logger)
        self.logger.debug(f"Pull request #{number} ({commit_ref}) has {len(changed_files)} changed files")
        return changed_files

    # ===== REST Operations =====

    def list_modified_files(self, pr_number: int) -> list[str]:
        """
        List the paths of all files modified by a pull request.

        Uses: REST
        Reason: Page number pagination over the pull request files listing

        Args:
            pr_number: Pull request number

        Returns:
            File paths in listing order
        """
        files = self.repository.get_pull(pr_number).get_files()

        def _fetch_page(cursor: Cursor) -> Page[str]:
            filenames = [_file.filename for _file in files.get_page(cursor.page)]
            return Page.from_listing(filenames, cursor, PAGE_SIZE)

        return paginate(_fetch_page, logger=self.logger)

    def post_comment(self, pr_number: str, body: str) -> None:
        """
        Create a comment on a pull request.

        Uses: REST

        Raises:
            PullRequestNumberError: If `pr_number` is not numeric
        """
        number = parse_pull_request_number(pr_number)

        self.logger.debug(f"Adding comment to pull request #{number}, body length={len(body)}")
        self.repository.get_issue(number).create_comment(body)
        self.logger.info(f"Successfully added comment to pull request #{number}")

    def update_commit_status(
        self,
        commit_ref: str,
        base_context: str,
        status_context: str,
        status: str,
        target_url: str,
        description: str,
    ) -> None:
        """
        Create a commit status.

        Uses: REST
        Reason: Commit statuses are not writable through GraphQL

        Empty arguments fall back to defaults: base context `concourse-ci`, status
        context `status`, the build URL of the current pipeline build and a description
        naming the status. The context sent is `<base_context>/<status_context>`.
        """
        base_context = base_context or DEFAULT_BASE_CONTEXT
        status_context = status_context or DEFAULT_STATUS_CONTEXT
        target_url = target_url or self.environment.build_url
        description = description or DEFAULT_STATUS_DESCRIPTION.format(status=status)
        context = join_context(base_context, status_context)

        self.logger.debug(f"Setting status {status} ({context}) on commit {commit_ref}")
        self.repository.get_commit(commit_ref).create_status(
            state=status.lower(),
            target_url=target_url,
            description=description,
            context=context,
        )
        self.logger.info(f"Commit {commit_ref} status {context} set to {status.lower()}")

    def delete_previous_comments(self, pr_number: str) -> None:
        """
        Delete the authenticated user's recent comments on a pull request.

        Uses: GraphQL (comment authors, viewer) + REST (deletion)

        Comments are deleted one at a time; the first failed deletion is raised and
        the remaining comments are left in place.

        Raises:
            PullRequestNumberError: If `pr_number` is not numeric
        """
        number = parse_pull_request_number(pr_number)

        query, variables = QueryBuilder.get_pull_request_comments(self.owner, self.name, number)
        result = self.graphql_client.execute(query, variables)
        viewer_login = result["viewer"]["login"]
        edges = result["repository"]["pullRequest"]["comments"].get("edges") or []

        issue = None
        deleted = 0
        for edge in edges:
            comment = edge["node"]
            # Comments by deleted accounts have no author
            author = comment.get("author") or {}
            if author.get("login") != viewer_login:
                continue

            if issue is None:
                issue = self.repository.get_issue(number)

            issue.get_comment(comment["databaseId"]).delete()
            deleted += 1

        self.logger.info(f"Deleted {deleted} previous comments by {viewer_login} on pull request #{number}")


def join_context(base_context: str, status_context: str) -> str:
    """Join status context parts as a clean slash separated path."""
    return posixpath.normpath("/".join(part for part in (base_context, status_context) if part))
