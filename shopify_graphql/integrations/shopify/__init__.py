"""
Shopify integration package.
"""

from .client import GraphQLClient
from .models import (
    GraphQLResponse,
    GraphQLErrorDetail,
    ThrottleStatus,
    Shop,
    ShopifyConfig,
    WebhookEvent,
)
from .exceptions import (
    ShopifyGraphQLError,
    ConnectionError,
    TooManyRequests,
    UserError,
    ReconciliationError,
)
from .resources import WebhookResource, ShopResource
from .graphql_queries import GraphQLQueryBuilder
from .webhooks import WebhookHandler

__all__ = [
    "GraphQLClient",
    "GraphQLResponse",
    "GraphQLErrorDetail",
    "ThrottleStatus",
    "Shop",
    "ShopifyConfig",
    "WebhookEvent",
    "ShopifyGraphQLError",
    "ConnectionError",
    "TooManyRequests",
    "UserError",
    "ReconciliationError",
    "WebhookResource",
    "ShopResource",
    "GraphQLQueryBuilder",
    "WebhookHandler",
]
