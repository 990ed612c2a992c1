"""
Webhook lifecycle jobs.

A scheduler calls these on app install, update and uninstall. Each job runs
one reconciliation for one shop, the configured shop unless one is given.
Running at most one job per shop at a time is left to the scheduler.
"""

from typing import Optional

from loguru import logger

from shopify_graphql.core.config import Settings, settings as default_settings
from shopify_graphql.integrations.shopify.client import GraphQLClient
from shopify_graphql.integrations.shopify.models import ShopifyConfig
from shopify_graphql.integrations.shopify.resources import WebhookResource
from .manager import WebhooksManager
from .models import ReconciliationReport


def _should_run(job_name: str, shop: ShopifyConfig, settings: Settings) -> bool:
    if not settings.webhooks_enabled:
        logger.info(f"Skipping {job_name} for {shop.shop_domain}: webhooks disabled in {settings.ENVIRONMENT}")
        return False
    if not settings.WEBHOOKS:
        logger.warning(f"Skipping {job_name} for {shop.shop_domain}: no webhooks declared")
        return False
    return True


def build_manager(shop: ShopifyConfig, settings: Settings) -> WebhooksManager:
    """Create a manager with its own client for ``shop``."""
    client = GraphQLClient(
        shop,
        timeout=settings.SHOPIFY_REQUEST_TIMEOUT,
        min_available_points=settings.THROTTLE_MIN_AVAILABLE_POINTS,
    )
    return WebhooksManager(WebhookResource(client, page_size=settings.WEBHOOKS_PAGE_SIZE))


async def _reconcile_job(job_name: str,
                         shop: Optional[ShopifyConfig],
                         settings: Optional[Settings]) -> Optional[ReconciliationReport]:
    settings = settings or default_settings
    shop = shop or ShopifyConfig.from_settings(settings)
    if not _should_run(job_name, shop, settings):
        return None

    manager = build_manager(shop, settings)
    async with manager.resource.client:
        return await manager.reconcile(settings.WEBHOOKS)


async def create_webhooks_job(shop: Optional[ShopifyConfig] = None,
                              settings: Optional[Settings] = None) -> Optional[ReconciliationReport]:
    """Register the declared webhooks after the app is installed."""
    return await _reconcile_job("create_webhooks_job", shop, settings)


async def update_webhooks_job(shop: Optional[ShopifyConfig] = None,
                              settings: Optional[Settings] = None) -> Optional[ReconciliationReport]:
    """Bring registered webhooks in line with the declared list after it changed."""
    return await _reconcile_job("update_webhooks_job", shop, settings)


async def destroy_webhooks_job(shop: Optional[ShopifyConfig] = None,
                               settings: Optional[Settings] = None) -> Optional[ReconciliationReport]:
    """Remove the declared webhooks, e.g. before the app is uninstalled."""
    settings = settings or default_settings
    shop = shop or ShopifyConfig.from_settings(settings)
    if not _should_run("destroy_webhooks_job", shop, settings):
        return None

    manager = build_manager(shop, settings)
    async with manager.resource.client:
        return await manager.destroy(settings.WEBHOOKS)
