"""
Tests for Shopify webhook and shop resources.
"""

import pytest

from shopify_graphql.core.webhooks.models import RegisteredWebhook, WebhookSpec
from shopify_graphql.integrations.shopify.exceptions import ConnectionError, UserError
from shopify_graphql.integrations.shopify.resources import ShopResource, WebhookResource


@pytest.fixture
def webhook_resource(graphql_client):
    return WebhookResource(graphql_client, page_size=2)


@pytest.mark.asyncio
async def test_fetch_registered_pages_through_all_results(webhook_resource, fake_shopify, make_node):
    """Test that every page is requested with the previous end cursor."""
    fake_shopify.queue_webhooks_page(
        [make_node("1", "APP_UNINSTALLED", "https://app.test/uninstalled"),
         make_node("2", "ORDERS_CREATE", "https://app.test/orders")],
        has_next_page=True,
        end_cursor="cursor-1",
    )
    fake_shopify.queue_webhooks_page(
        [make_node("3", "SHOP_UPDATE", "https://app.test/shop")],
    )

    webhooks = await webhook_resource.fetch_registered()

    assert [webhook.topic for webhook in webhooks] == ["APP_UNINSTALLED", "ORDERS_CREATE", "SHOP_UPDATE"]
    assert webhooks[0] == RegisteredWebhook(
        id="gid://shopify/WebhookSubscription/1",
        topic="APP_UNINSTALLED",
        address="https://app.test/uninstalled",
    )

    first, second = fake_shopify.payloads
    assert first["variables"] == {"first": 2}
    assert second["variables"] == {"first": 2, "after": "cursor-1"}


@pytest.mark.asyncio
async def test_fetch_registered_deduplicates_by_id(webhook_resource, fake_shopify, make_node):
    """Test that a subscription returned on two pages is listed once."""
    fake_shopify.queue_webhooks_page(
        [make_node("1", "APP_UNINSTALLED", "https://app.test/a"),
         make_node("2", "ORDERS_CREATE", "https://app.test/b")],
        has_next_page=True,
        end_cursor="cursor-1",
    )
    fake_shopify.queue_webhooks_page(
        [make_node("2", "ORDERS_CREATE", "https://app.test/b"),
         make_node("3", "ORDERS_CREATE", "https://app.test/b")],
    )

    webhooks = await webhook_resource.fetch_registered()

    assert [webhook.id.rsplit("/", 1)[-1] for webhook in webhooks] == ["1", "2", "3"]


@pytest.mark.asyncio
async def test_fetch_registered_fails_without_partial_results(webhook_resource, fake_shopify, make_node):
    """Test that an error on a later page discards earlier pages."""
    fake_shopify.queue_webhooks_page(
        [make_node("1", "APP_UNINSTALLED", "https://app.test/a")],
        has_next_page=True,
        end_cursor="cursor-1",
    )
    fake_shopify.queue({"errors": "Internal"}, status_code=502)

    with pytest.raises(ConnectionError):
        await webhook_resource.fetch_registered()


@pytest.mark.asyncio
async def test_fetch_registered_stops_on_repeated_cursor(webhook_resource, fake_shopify, make_node):
    """Test that a cursor returned twice fails instead of paging forever."""
    for _ in range(2):
        fake_shopify.queue_webhooks_page(
            [make_node("1", "APP_UNINSTALLED", "https://app.test/a")],
            has_next_page=True,
            end_cursor="cursor-1",
        )

    with pytest.raises(ConnectionError) as exc_info:
        await webhook_resource.fetch_registered()

    assert "cursor-1" in exc_info.value.message
    assert len(fake_shopify.requests) == 2


@pytest.mark.asyncio
async def test_fetch_registered_decodes_non_http_endpoints(webhook_resource, fake_shopify):
    fake_shopify.queue_webhooks_page([
        {
            "id": "gid://shopify/WebhookSubscription/7",
            "topic": "ORDERS_PAID",
            "endpoint": {
                "__typename": "WebhookPubSubEndpoint",
                "pubSubProject": "my-project",
                "pubSubTopic": "orders",
            },
        },
        {
            "id": "gid://shopify/WebhookSubscription/8",
            "topic": "ORDERS_CREATE",
            "endpoint": {
                "__typename": "WebhookEventBridgeEndpoint",
                "arn": "arn:aws:events:us-east-1::event-source/aws.partner/shopify.com/1/source",
            },
        },
    ])

    pubsub, eventbridge = await webhook_resource.fetch_registered()

    assert pubsub.address == "pubsub://my-project:orders"
    assert eventbridge.address.startswith("arn:aws:events")


@pytest.mark.asyncio
async def test_fetch_registered_empty_shop(webhook_resource, fake_shopify):
    fake_shopify.queue_webhooks_page([])

    assert await webhook_resource.fetch_registered() == []


@pytest.mark.asyncio
async def test_create_webhook(webhook_resource, fake_shopify, make_node):
    """Test the create mutation variables and the decoded subscription."""
    fake_shopify.queue_data({
        "webhookSubscriptionCreate": {
            "webhookSubscription": make_node("9", "APP_UNINSTALLED", "https://app.test/uninstalled"),
            "userErrors": [],
        }
    })

    webhook = await webhook_resource.create(
        WebhookSpec(topic="app/uninstalled", address="https://app.test/uninstalled")
    )

    assert webhook.id == "gid://shopify/WebhookSubscription/9"
    assert fake_shopify.payloads[0]["variables"] == {
        "topic": "APP_UNINSTALLED",
        "webhookSubscription": {"callbackUrl": "https://app.test/uninstalled", "format": "JSON"},
    }


@pytest.mark.asyncio
async def test_create_webhook_user_error(webhook_resource, fake_shopify):
    fake_shopify.queue_data({
        "webhookSubscriptionCreate": {
            "webhookSubscription": None,
            "userErrors": [{"field": ["webhookSubscription", "callbackUrl"], "message": "Address is invalid"}],
        }
    })

    with pytest.raises(UserError) as exc_info:
        await webhook_resource.create(WebhookSpec(topic="APP_UNINSTALLED", address="not a url"))

    assert exc_info.value.message == "Address is invalid"


@pytest.mark.asyncio
async def test_update_webhook(webhook_resource, fake_shopify, make_node):
    fake_shopify.queue_data({
        "webhookSubscriptionUpdate": {
            "webhookSubscription": make_node("1", "APP_UNINSTALLED", "https://app.test/new"),
            "userErrors": [],
        }
    })
    registered = RegisteredWebhook(id="gid://shopify/WebhookSubscription/1", topic="APP_UNINSTALLED", address="https://app.test/old")

    updated = await webhook_resource.update(registered, WebhookSpec(topic="APP_UNINSTALLED", address="https://app.test/new"))

    assert updated.address == "https://app.test/new"
    assert fake_shopify.payloads[0]["variables"] == {
        "id": "gid://shopify/WebhookSubscription/1",
        "webhookSubscription": {"callbackUrl": "https://app.test/new"},
    }


@pytest.mark.asyncio
async def test_delete_webhook(webhook_resource, fake_shopify):
    fake_shopify.queue_data({
        "webhookSubscriptionDelete": {
            "deletedWebhookSubscriptionId": "gid://shopify/WebhookSubscription/1",
            "userErrors": [],
        }
    })
    registered = RegisteredWebhook(id="gid://shopify/WebhookSubscription/1", topic="APP_UNINSTALLED", address="https://app.test/a")

    deleted_id = await webhook_resource.delete(registered)

    assert deleted_id == "gid://shopify/WebhookSubscription/1"
    assert fake_shopify.payloads[0]["variables"] == {"id": "gid://shopify/WebhookSubscription/1"}


@pytest.mark.asyncio
async def test_fetch_shop(graphql_client, fake_shopify):
    fake_shopify.queue_data({
        "shop": {
            "id": "gid://shopify/Shop/1",
            "name": "Test Shop",
            "email": "owner@test-shop.com",
            "myshopifyDomain": "test-shop.myshopify.com",
            "plan": {"displayName": "Basic"},
        }
    })

    shop = await ShopResource(graphql_client).fetch()

    assert shop.name == "Test Shop"
    assert shop.myshopify_domain == "test-shop.myshopify.com"
    assert shop.plan_display_name == "Basic"
