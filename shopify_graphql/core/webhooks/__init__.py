"""
Webhook reconciliation for declared Shopify webhook subscriptions.

The manager and jobs live in their own modules and are imported by path.
"""

from .models import (
    WebhookSpec,
    RegisteredWebhook,
    DiffResult,
    FailedOperation,
    ReconciliationReport,
    ReconciliationState,
    WebhookOperation,
)
from .diff import diff

__all__ = [
    "WebhookSpec",
    "RegisteredWebhook",
    "DiffResult",
    "FailedOperation",
    "ReconciliationReport",
    "ReconciliationState",
    "WebhookOperation",
    "diff",
]
