"""GraphQL query builders for GitHub API."""

from __future__ import annotations

from typing import Any

from pr_resource.utils.constants import (
    PAGE_SIZE,
    PULL_REQUEST_COMMENTS_LAST,
    PULL_REQUEST_COMMITS_LAST,
    PULL_REQUEST_LABELS_FIRST,
    SEARCH_COMMITS_LAST,
)

# Common GraphQL fragments for reuse
PULL_REQUEST_FRAGMENT = """
fragment PullRequestFields on PullRequest {
    id
    number
    title
    url
    baseRefName
    headRefName
    repository {
        url
    }
    isCrossRepository
    isDraft
    state
    updatedAt
}
"""

COMMIT_FRAGMENT = """
fragment CommitFields on Commit {
    id
    oid
    committedDate
    message
    author {
        user {
            login
        }
        email
    }
}
"""

LABEL_FRAGMENT = """
fragment LabelFields on Label {
    name
}
"""


class QueryBuilder:
    """Builder for GraphQL queries."""

    @staticmethod
    def search_pull_requests(
        search_query: str,
        first: int = PAGE_SIZE,
        after: str | None = None,
    ) -> tuple[str, dict[str, Any]]:
        """
        Search pull requests with their latest commit, approved review count and labels.

        Args:
            search_query: GitHub search syntax (e.g. "is:pr repo:owner/name is:open")
            first: Number of results per page
            after: Cursor for pagination

        Returns:
            Tuple of (GraphQL query string, variables dict)
        """
        query = f"""
            query(
                $searchQuery: String!, $searchFirst: Int!, $searchAfter: String,
                $commitsLast: Int!, $labelsFirst: Int!
            ) {{
                search(query: $searchQuery, type: ISSUE, first: $searchFirst, after: $searchAfter) {{
                    pageInfo {{
                        hasNextPage
                        endCursor
                    }}
                    nodes {{
                        ... on PullRequest {{
                            ...PullRequestFields
                            reviews(states: [APPROVED]) {{
                                totalCount
                            }}
                            commits(last: $commitsLast) {{
                                edges {{
                                    node {{
                                        commit {{
                                            ...CommitFields
                                        }}
                                    }}
                                }}
                            }}
                            labels(first: $labelsFirst) {{
                                edges {{
                                    node {{
                                        ...LabelFields
                                    }}
                                }}
                            }}
                        }}
                    }}
                }}
            }}
            {PULL_REQUEST_FRAGMENT}
            {COMMIT_FRAGMENT}
            {LABEL_FRAGMENT}
        """
        variables: dict[str, Any] = {
            "searchQuery": search_query,
            "searchFirst": first,
            "commitsLast": SEARCH_COMMITS_LAST,
            "labelsFirst": PULL_REQUEST_LABELS_FIRST,
        }
        if after:
            variables["searchAfter"] = after

        return query, variables

    @staticmethod
    def get_pull_request_commits(
        owner: str,
        name: str,
        number: int,
        last: int = PULL_REQUEST_COMMITS_LAST,
    ) -> tuple[str, dict[str, Any]]:
        """
        Get a pull request with its most recent commits.

        Args:
            owner: Repository owner
            name: Repository name
            number: Pull request number
            last: Number of most recent commits to fetch

        Returns:
            Tuple of (GraphQL query string, variables dict)
        """
        query = f"""
            query($owner: String!, $name: String!, $number: Int!, $commitsLast: Int!) {{
                repository(owner: $owner, name: $name) {{
                    pullRequest(number: $number) {{
                        ...PullRequestFields
                        commits(last: $commitsLast) {{
                            edges {{
                                node {{
                                    commit {{
                                        ...CommitFields
                                    }}
                                }}
                            }}
                        }}
                    }}
                }}
            }}
            {PULL_REQUEST_FRAGMENT}
            {COMMIT_FRAGMENT}
        """
        variables = {"owner": owner, "name": name, "number": number, "commitsLast": last}
        return query, variables

    @staticmethod
    def get_changed_files(
        owner: str,
        name: str,
        number: int,
        first: int = PAGE_SIZE,
        after: str | None = None,
    ) -> tuple[str, dict[str, Any]]:
        """
        Get the changed files of a pull request with pagination.

        Args:
            owner: Repository owner
            name: Repository name
            number: Pull request number
            first: Number of files per page
            after: Cursor for pagination

        Returns:
            Tuple of (GraphQL query string, variables dict)
        """
        query = """
            query($owner: String!, $name: String!, $number: Int!, $first: Int!, $after: String) {
                repository(owner: $owner, name: $name) {
                    pullRequest(number: $number) {
                        files(first: $first, after: $after) {
                            edges {
                                node {
                                    path
                                }
                            }
                            pageInfo {
                                hasNextPage
                                endCursor
                            }
                        }
                    }
                }
            }
        """
        variables: dict[str, Any] = {"owner": owner, "name": name, "number": number, "first": first}
        if after:
            variables["after"] = after

        return query, variables

    @staticmethod
    def get_pull_request_comments(
        owner: str,
        name: str,
        number: int,
        last: int = PULL_REQUEST_COMMENTS_LAST,
    ) -> tuple[str, dict[str, Any]]:
        """
        Get the viewer login and the most recent comments of a pull request.

        Args:
            owner: Repository owner
            name: Repository name
            number: Pull request number
            last: Number of most recent comments to fetch

        Returns:
            Tuple of (GraphQL query string, variables dict)
        """
        query = """
            query($owner: String!, $name: String!, $number: Int!, $commentsLast: Int!) {
                viewer {
                    login
                }
                repository(owner: $owner, name: $name) {
                    pullRequest(number: $number) {
                        id
                        comments(last: $commentsLast) {
                            edges {
                                node {
                                    databaseId
                                    author {
                                        login
                                    }
                                }
                            }
                        }
                    }
                }
            }
        """
        variables = {"owner": owner, "name": name, "number": number, "commentsLast": last}
        return query, variables
