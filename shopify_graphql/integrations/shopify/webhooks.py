"""
Shopify webhook handlers for incoming deliveries.
"""

import base64
import hashlib
import hmac
import json
from datetime import datetime, timezone
from typing import Awaitable, Callable, Dict, List, Mapping, Optional

from loguru import logger

from shopify_graphql.core.config import settings
from shopify_graphql.core.webhooks.models import normalize_topic
from .models import WebhookEvent

WebhookCallback = Callable[[WebhookEvent], Awaitable[None]]


class WebhookHandler:
    """Dispatches verified webhook deliveries to handlers registered per topic."""

    def __init__(self, app_secret: Optional[str] = None):
        """Initialize the webhook handler, verifying with the configured app secret by default."""
        self.app_secret = settings.SHOPIFY_APP_SECRET if app_secret is None else app_secret
        self._handlers: Dict[str, List[WebhookCallback]] = {}

    def register_handler(self, topic: str, handler: WebhookCallback):
        """Register a handler for a specific webhook topic."""
        topic = normalize_topic(topic)
        self._handlers.setdefault(topic, []).append(handler)
        logger.info(f"Registered handler for topic: {topic}")

    def handlers_for(self, topic: str) -> List[WebhookCallback]:
        return list(self._handlers.get(normalize_topic(topic), []))

    def verify_webhook(self, headers: Mapping[str, str], body: bytes) -> bool:
        """Check the base64 HMAC-SHA256 signature Shopify sends with each delivery."""
        if not self.app_secret:
            logger.warning("No app secret configured")
            return False

        shopify_hmac = headers.get("X-Shopify-Hmac-Sha256")
        if not shopify_hmac:
            logger.warning("Missing Shopify HMAC header")
            return False

        digest = hmac.new(self.app_secret.encode("utf-8"), body, hashlib.sha256).digest()
        calculated_hmac = base64.b64encode(digest).decode("utf-8")
        return hmac.compare_digest(calculated_hmac, shopify_hmac)

    def parse_webhook_event(self, headers: Mapping[str, str], body: bytes) -> WebhookEvent:
        """Build a WebhookEvent from delivery headers and JSON body."""
        return WebhookEvent(
            id=headers.get("X-Shopify-Webhook-Id", ""),
            topic=normalize_topic(headers.get("X-Shopify-Topic", "")),
            shop_domain=headers.get("X-Shopify-Shop-Domain", ""),
            api_version=headers.get("X-Shopify-Api-Version", ""),
            created_at=datetime.now(timezone.utc),
            payload=json.loads(body),
        )

    async def process_webhook(self, headers: Mapping[str, str], body: bytes) -> bool:
        """
        Process an incoming webhook from Shopify.

        Args:
            headers: HTTP headers from the webhook request
            body: Raw webhook body

        Returns:
            True if every handler for the topic succeeded, False otherwise
        """
        if not self.verify_webhook(headers, body):
            logger.error("Webhook verification failed")
            return False

        try:
            event = self.parse_webhook_event(headers, body)
        except ValueError as e:
            logger.error(f"Invalid webhook JSON: {e}")
            return False

        logger.info(f"Processing webhook: {event.topic} for shop: {event.shop_domain}")

        handlers = self.handlers_for(event.topic)
        if not handlers:
            logger.warning(f"Unknown webhook topic: {event.topic}")
            return True

        success = True
        for handler in handlers:
            try:
                await handler(event)
            except Exception as e:
                logger.error(f"Error in webhook handler for {event.topic}: {e}")
                success = False

        logger.info(f"Webhook processed: {event.topic}, success: {success}")
        return success
