"""GraphQL client wrapper for GitHub API with token authentication."""

from __future__ import annotations

import logging
from typing import Any

from gql import Client, gql
from gql.transport.requests import RequestsHTTPTransport
from graphql import DocumentNode

from pr_resource.utils.constants import GITHUB_GRAPHQL_URL


class GraphQLClient:
    """
    Synchronous GraphQL client wrapper for GitHub API.

    Provides:
    - Token-based authentication
    - Optional GitHub Enterprise endpoint
    - Opt-in skipping of TLS certificate verification
    - Logging for all operations

    Failed requests are not retried; transport and query errors raised by gql
    reach the caller unchanged.

    Example:
        >>> client = GraphQLClient(token="ghp_...", logger=logger)
        >>> result = client.execute("query { viewer { login } }")
        >>> print(result["viewer"]["login"])
    """

    def __init__(
        self,
        token: str,
        logger: logging.Logger,
        url: str = GITHUB_GRAPHQL_URL,
        verify: bool = True,
    ) -> None:
        """
        Initialize GraphQL client.

        Args:
            token: GitHub personal access token or GitHub App token
            logger: Logger instance for operation logging
            url: GraphQL endpoint (GitHub Enterprise installs use their own)
            verify: Verify TLS certificates. Only disable for self-signed certificates.
        """
        self.token = token
        self.logger = logger
        self.url = url
        self.verify = verify
        self._client: Client | None = None
        self._session: Any = None
        self._transport: RequestsHTTPTransport | None = None

    def __enter__(self) -> GraphQLClient:
        self._ensure_client()
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        self.close()

    def _ensure_client(self) -> None:
        """Ensure the GraphQL client is initialized and connected."""
        if self._client is not None:
            return

        self._transport = RequestsHTTPTransport(
            url=self.url,
            headers={
                "Authorization": f"Bearer {self.token}",
                "Accept": "application/vnd.github.v4+json",
                "User-Agent": "github-pr-resource/graphql-client",
            },
            verify=self.verify,
            retries=0,
        )

        self._client = Client(
            transport=self._transport,
            fetch_schema_from_transport=False,  # Don't fetch schema on every request
        )
        self._session = self._client.connect_sync()

        self.logger.debug(f"GraphQL client initialized for {self.url}")

    def close(self) -> None:
        """Close the GraphQL client and cleanup resources."""
        if self._client:
            self._client.close_sync()
            self._client = None
            self._session = None
            self._transport = None
            self.logger.debug("GraphQL client closed")

    def execute(
        self,
        query: str | DocumentNode,
        variables: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        """
        Execute a GraphQL query.

        Args:
            query: GraphQL query string or DocumentNode
            variables: Variables for the query (optional)

        Returns:
            Query result as a dictionary

        Raises:
            gql.transport.exceptions.TransportQueryError: If GitHub returns GraphQL errors
            gql.transport.exceptions.TransportError: For transport level failures
        """
        if isinstance(query, str):
            query = gql(query)

        self._ensure_client()

        self.logger.debug(f"Executing GraphQL query with variables: {sorted((variables or {}).keys())}")
        result = self._session.execute(query, variable_values=variables)
        self.logger.debug("GraphQL query executed successfully")

        return dict(result) if result else {}
