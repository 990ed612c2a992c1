"""
Shopify Admin GraphQL client and webhook reconciliation.
"""

from .integrations.shopify import (
    GraphQLClient,
    GraphQLResponse,
    ShopifyConfig,
    WebhookResource,
    ShopResource,
    WebhookHandler,
    ShopifyGraphQLError,
    ConnectionError,
    TooManyRequests,
    UserError,
    ReconciliationError,
)
from .core.webhooks import (
    WebhookSpec,
    RegisteredWebhook,
    DiffResult,
    ReconciliationReport,
    diff,
)
from .core.webhooks.manager import WebhooksManager

__version__ = "0.1.0"

__all__ = [
    "GraphQLClient",
    "GraphQLResponse",
    "ShopifyConfig",
    "WebhookResource",
    "ShopResource",
    "WebhookHandler",
    "ShopifyGraphQLError",
    "ConnectionError",
    "TooManyRequests",
    "UserError",
    "ReconciliationError",
    "WebhookSpec",
    "RegisteredWebhook",
    "DiffResult",
    "ReconciliationReport",
    "diff",
    "WebhooksManager",
]
