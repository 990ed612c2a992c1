"""
Pytest configuration and shared fixtures for shopify-graphql testing.
"""

import json
from typing import Any, Callable, Dict, List, Optional, Union

import httpx
import pytest

from shopify_graphql.integrations.shopify.client import GraphQLClient
from shopify_graphql.integrations.shopify.models import ShopifyConfig


QueuedResponse = Union[httpx.Response, Callable[[httpx.Request], httpx.Response]]


def webhook_node(webhook_id: str, topic: str, callback_url: str) -> Dict[str, Any]:
    """A WebhookSubscription node with an HTTP endpoint."""
    return {
        "id": f"gid://shopify/WebhookSubscription/{webhook_id}",
        "topic": topic,
        "endpoint": {
            "__typename": "WebhookHttpEndpoint",
            "callbackUrl": callback_url,
        },
    }


class FakeShopify:
    """Serves queued responses to a GraphQLClient and records what it was sent."""

    def __init__(self):
        self.responses: List[QueuedResponse] = []
        self.requests: List[httpx.Request] = []

    @property
    def payloads(self) -> List[Dict[str, Any]]:
        return [json.loads(request.content) for request in self.requests]

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if not self.responses:
            raise AssertionError(f"Unexpected request: {request.content!r}")
        response = self.responses.pop(0)
        if callable(response):
            return response(request)
        return response

    def queue(self, body: Any = None, status_code: int = 200):
        self.responses.append(httpx.Response(status_code, json=body))

    def queue_data(self, data: Dict[str, Any], extensions: Optional[Dict[str, Any]] = None):
        body: Dict[str, Any] = {"data": data}
        if extensions is not None:
            body["extensions"] = extensions
        self.queue(body)

    def queue_webhooks_page(self,
                            nodes: List[Dict[str, Any]],
                            has_next_page: bool = False,
                            end_cursor: Optional[str] = None):
        self.queue_data({
            "webhookSubscriptions": {
                "edges": [{"node": node} for node in nodes],
                "pageInfo": {"hasNextPage": has_next_page, "endCursor": end_cursor},
            }
        })

    def queue_error(self, message: str, code: str, documentation: Optional[str] = None,
                    extensions: Optional[Dict[str, Any]] = None):
        body: Dict[str, Any] = {
            "errors": [
                {
                    "message": message,
                    "extensions": {"code": code, "documentation": documentation},
                }
            ]
        }
        if extensions is not None:
            body["extensions"] = extensions
        self.queue(body)

    def queue_exception(self, exc_type=httpx.ConnectError, message: str = "connection refused"):
        def raise_error(request: httpx.Request) -> httpx.Response:
            raise exc_type(message, request=request)

        self.responses.append(raise_error)


def cost_extensions(available: float, restore_rate: float = 50.0,
                    maximum: float = 1000.0, requested: float = 10.0) -> Dict[str, Any]:
    return {
        "cost": {
            "requestedQueryCost": requested,
            "actualQueryCost": requested,
            "throttleStatus": {
                "maximumAvailable": maximum,
                "currentlyAvailable": available,
                "restoreRate": restore_rate,
            },
        }
    }


@pytest.fixture
def shop_config() -> ShopifyConfig:
    """Session for a test shop."""
    return ShopifyConfig(shop_domain="test-shop", access_token="shpat_test_token", api_version="2024-10")


@pytest.fixture
def fake_shopify() -> FakeShopify:
    return FakeShopify()


@pytest.fixture
def graphql_client(shop_config, fake_shopify) -> GraphQLClient:
    """GraphQL client wired to the fake Shopify endpoint."""
    return GraphQLClient(shop_config, transport=httpx.MockTransport(fake_shopify.handler))


@pytest.fixture
def make_node() -> Callable[..., Dict[str, Any]]:
    return webhook_node


@pytest.fixture
def make_cost() -> Callable[..., Dict[str, Any]]:
    return cost_extensions
