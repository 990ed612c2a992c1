"""
Shopify resources backed by the GraphQL client.
"""

from typing import Dict, List, Optional, Set

from loguru import logger

from shopify_graphql.core.webhooks.models import RegisteredWebhook, WebhookSpec
from .client import GraphQLClient
from .exceptions import ConnectionError
from .graphql_queries import GraphQLQueryBuilder
from .models import Shop


class WebhookResource:
    """Webhook subscriptions of the shop the client is bound to."""

    def __init__(self, client: GraphQLClient, page_size: int = 50):
        self.client = client
        self.page_size = page_size

    async def fetch_registered(self) -> List[RegisteredWebhook]:
        """
        Fetch every registered webhook subscription.

        Pages through ``webhookSubscriptions`` until the last page and
        deduplicates by id, keeping the first occurrence. Any client error
        propagates, so callers never see a partial list.
        """
        webhooks: Dict[str, RegisteredWebhook] = {}
        after: Optional[str] = None
        cursors: Set[str] = set()
        pages = 0

        while True:
            query, variables = GraphQLQueryBuilder.webhook_subscriptions_query(
                first=self.page_size,
                after=after,
            )
            response = await self.client.execute(query, variables)
            pages += 1

            connection = response.field("webhookSubscriptions")
            for edge in connection.get("edges") or []:
                webhook = RegisteredWebhook.from_node(edge["node"])
                webhooks.setdefault(webhook.id, webhook)

            page_info = connection.get("pageInfo") or {}
            if not page_info.get("hasNextPage"):
                break

            after = page_info.get("endCursor")
            if not after:
                raise ConnectionError(
                    "Webhook subscriptions page has more results but no end cursor",
                    response=response.data,
                )
            if after in cursors:
                raise ConnectionError(
                    f"Webhook subscriptions cursor {after} was already fetched",
                    response=response.data,
                )
            cursors.add(after)

        logger.debug(f"Fetched {len(webhooks)} webhook subscriptions in {pages} page(s)")
        return list(webhooks.values())

    async def create(self, spec: WebhookSpec) -> RegisteredWebhook:
        """Subscribe ``spec.address`` to ``spec.topic``."""
        query, variables = GraphQLQueryBuilder.create_webhook_mutation(spec.topic, spec.address)
        response = await self.client.execute(query, variables)

        node = response.field("webhookSubscriptionCreate").get("webhookSubscription")
        if not node:
            raise ConnectionError(f"Webhook creation for {spec.topic} returned no subscription")

        webhook = RegisteredWebhook.from_node(node)
        logger.info(f"Created webhook {webhook.id} for {webhook.topic} -> {webhook.address}")
        return webhook

    async def update(self, webhook: RegisteredWebhook, spec: WebhookSpec) -> RegisteredWebhook:
        """Point an existing subscription at ``spec.address``."""
        query, variables = GraphQLQueryBuilder.update_webhook_mutation(webhook.id, spec.address)
        response = await self.client.execute(query, variables)

        node = response.field("webhookSubscriptionUpdate").get("webhookSubscription")
        if not node:
            raise ConnectionError(f"Webhook update for {webhook.id} returned no subscription")

        updated = RegisteredWebhook.from_node(node)
        logger.info(f"Updated webhook {updated.id} for {updated.topic}: {webhook.address} -> {updated.address}")
        return updated

    async def delete(self, webhook: RegisteredWebhook) -> str:
        """Remove a subscription, returning the deleted id."""
        query, variables = GraphQLQueryBuilder.delete_webhook_mutation(webhook.id)
        response = await self.client.execute(query, variables)

        deleted_id = response.field("webhookSubscriptionDelete").get("deletedWebhookSubscriptionId")
        if not deleted_id:
            raise ConnectionError(f"Webhook deletion for {webhook.id} returned no id")

        logger.info(f"Deleted webhook {deleted_id} for {webhook.topic}")
        return deleted_id


class ShopResource:
    """The shop the client is bound to."""

    def __init__(self, client: GraphQLClient):
        self.client = client

    async def fetch(self) -> Shop:
        query, variables = GraphQLQueryBuilder.shop_query()
        response = await self.client.execute(query, variables)

        node = response.field("shop")
        if not node:
            raise ConnectionError("Shop query returned no shop")
        return Shop.from_json(node)
