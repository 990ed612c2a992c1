"""
Shopify GraphQL client: executes a query and classifies the response.
"""

import asyncio
import time
from typing import Dict, Any, Optional

import httpx
from loguru import logger

from .models import ShopifyConfig, GraphQLResponse, ThrottleStatus
from .exceptions import (
    graphql_error_from_response,
    user_error_from_payload,
    ConnectionError,
)


class GraphQLClient:
    """Client for the Shopify Admin GraphQL API of a single shop."""

    def __init__(self,
                 config: ShopifyConfig,
                 timeout: float = 30.0,
                 min_available_points: float = 0,
                 transport: Optional[httpx.AsyncBaseTransport] = None):
        """
        Initialize the client.

        Args:
            config: Shop session supplying the endpoint and access token
            timeout: Request timeout in seconds
            min_available_points: Wait before a request while fewer query points
                than this are available; 0 disables pacing
            transport: Optional httpx transport, used by tests
        """
        self.config = config
        self.min_available_points = min_available_points
        self.throttle_status: Optional[ThrottleStatus] = None
        self.throttle_status_at = 0.0

        self.client = httpx.AsyncClient(
            headers={
                **config.headers,
                "User-Agent": "shopify-graphql-python/0.1.0",
            },
            timeout=timeout,
            transport=transport,
        )

        logger.info(f"Initialized Shopify GraphQL client for domain: {config.shop_domain}")

    @property
    def api_url(self) -> str:
        return self.config.graphql_url

    async def __aenter__(self):
        """Async context manager entry."""
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Async context manager exit."""
        await self.close()

    async def close(self):
        """Close the HTTP client."""
        await self.client.aclose()

    async def _check_rate_limit(self):
        """Wait for query points to restore when the bucket is nearly empty."""
        if self.throttle_status is None or self.min_available_points <= 0:
            return

        # Credit points restored since the status was reported
        status = self.throttle_status.restored(time.monotonic() - self.throttle_status_at)
        wait_time = status.seconds_until_available(self.min_available_points)
        if wait_time > 0:
            logger.warning(
                f"Only {status.currently_available:.0f} query points available, "
                f"waiting {wait_time:.1f} seconds"
            )
            await asyncio.sleep(wait_time)
            status = status.restored(wait_time)

        self.throttle_status = status
        self.throttle_status_at = time.monotonic()

    def _update_rate_limit(self, response: GraphQLResponse):
        """Remember the throttle status reported with the last response."""
        status = response.throttle_status
        if status is None:
            return

        self.throttle_status = status
        self.throttle_status_at = time.monotonic()
        if status.currently_available < status.maximum_available * 0.1:
            logger.warning(
                f"Query points running low: {status.currently_available:.0f}/"
                f"{status.maximum_available:.0f} available"
            )

    async def execute(self,
                      query: str,
                      variables: Optional[Dict[str, Any]] = None,
                      headers: Optional[Dict[str, str]] = None,
                      operation_name: Optional[str] = None) -> GraphQLResponse:
        """
        Execute a GraphQL query or mutation.

        Args:
            query: GraphQL document
            variables: Variables for the document
            headers: Extra headers for this request only
            operation_name: Operation to run when the document defines several

        Returns:
            The decoded response

        Raises:
            ConnectionError: transport failure, non-2xx status or unclassified GraphQL error
            TooManyRequests: the query was THROTTLED
            UserError: a mutation payload reported userErrors
        """
        await self._check_rate_limit()

        payload = {
            "query": query,
            "operationName": operation_name,
            "variables": variables,
        }

        try:
            logger.debug(f"Making GraphQL request to {self.api_url}")
            response = await self.client.post(self.api_url, json=payload, headers=headers)
        except httpx.TimeoutException as e:
            logger.error(f"Timeout during GraphQL request: {e}")
            raise ConnectionError(f"Request timeout: {str(e)}") from e
        except httpx.RequestError as e:
            logger.error(f"Network error during GraphQL request: {e}")
            raise ConnectionError(f"Connection failed: {str(e)}") from e

        return self.handle_response(response)

    def handle_response(self, response: httpx.Response) -> GraphQLResponse:
        """Classify an HTTP response, returning the decoded body on success."""
        if not response.is_success:
            logger.error(f"GraphQL request failed: {response.status_code} - {response.text}")
            raise ConnectionError(
                f"Unknown response code: {response.status_code}",
                response={"status": response.status_code, "body": response.text},
            )

        try:
            body = response.json()
        except ValueError as e:
            raise ConnectionError(
                "Invalid JSON response from Shopify",
                response={"status": response.status_code, "body": response.text},
            ) from e

        if not isinstance(body, dict):
            raise ConnectionError("Unexpected response body from Shopify", response={"body": body})

        result = GraphQLResponse.from_json(body)
        self._update_rate_limit(result)

        self.handle_graphql_errors(result, body)
        self.handle_user_errors(result, body)
        return result

    def handle_graphql_errors(self, result: GraphQLResponse, body: Dict[str, Any]):
        if not result.errors:
            return

        logger.error(f"GraphQL errors: {[error.message for error in result.errors]}")
        raise graphql_error_from_response(result, body)

    def handle_user_errors(self, result: GraphQLResponse, body: Dict[str, Any]):
        for name, payload in (result.data or {}).items():
            if not isinstance(payload, dict):
                continue
            user_errors = payload.get("userErrors")
            if user_errors:
                logger.error(f"User errors in {name}: {user_errors}")
                raise user_error_from_payload(body, user_errors)
