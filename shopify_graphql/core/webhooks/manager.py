"""
Webhook reconciliation manager.
"""

from typing import Awaitable, Callable, Iterable, List, Union

from loguru import logger

from shopify_graphql.integrations.shopify.exceptions import ShopifyGraphQLError, ReconciliationError
from shopify_graphql.integrations.shopify.resources import WebhookResource
from .diff import diff
from .models import (
    FailedOperation, ReconciliationReport, ReconciliationState,
    RegisteredWebhook, WebhookOperation, WebhookSpec,
)


class WebhooksManager:
    """Makes a shop's webhook subscriptions match a declared list."""

    def __init__(self, resource: WebhookResource, shop_domain: str = ""):
        self.resource = resource
        self.shop_domain = shop_domain or resource.client.config.shop_domain
        self.state = ReconciliationState.PENDING

    async def reconcile(self, desired: Iterable[WebhookSpec]) -> ReconciliationReport:
        """
        Fetch registered webhooks, diff them against ``desired`` and apply the result.

        Operations are applied one at a time: deletes, then updates, then
        creates. A failing operation is recorded in the report and the run
        continues with the next one.

        Raises:
            ReconciliationError: the registered webhooks could not be fetched
        """
        desired = list(desired)
        registered = await self._fetch()

        self.state = ReconciliationState.DIFFING
        changes = diff(desired, registered)
        logger.info(
            f"Webhook diff for {self.shop_domain}: {len(changes.to_create)} to create, "
            f"{len(changes.to_update)} to update, {len(changes.to_delete)} to delete"
        )

        self.state = ReconciliationState.APPLYING
        report = ReconciliationReport(state=self.state)

        for webhook in changes.to_delete:
            if await self._apply(report, WebhookOperation.DELETE, webhook, self.resource.delete, webhook):
                report.deleted += 1

        for webhook, spec in changes.to_update:
            if await self._apply(report, WebhookOperation.UPDATE, spec, self.resource.update, webhook, spec):
                report.updated += 1

        for spec in changes.to_create:
            if await self._apply(report, WebhookOperation.CREATE, spec, self.resource.create, spec):
                report.created += 1

        return self._finish(report)

    async def destroy(self, desired: Iterable[WebhookSpec]) -> ReconciliationReport:
        """
        Delete every registered webhook whose topic is declared in ``desired``.

        Subscriptions for other topics are left alone.

        Raises:
            ReconciliationError: the registered webhooks could not be fetched
        """
        topics = {spec.topic for spec in desired}
        registered = await self._fetch()

        self.state = ReconciliationState.DIFFING
        to_delete = [webhook for webhook in registered if webhook.topic in topics]
        logger.info(f"Destroying {len(to_delete)} webhook(s) for {self.shop_domain}")

        self.state = ReconciliationState.APPLYING
        report = ReconciliationReport(state=self.state)
        for webhook in to_delete:
            if await self._apply(report, WebhookOperation.DELETE, webhook, self.resource.delete, webhook):
                report.deleted += 1

        return self._finish(report)

    async def _fetch(self) -> List[RegisteredWebhook]:
        self.state = ReconciliationState.FETCHING
        try:
            return await self.resource.fetch_registered()
        except ShopifyGraphQLError as e:
            self.state = ReconciliationState.FAILED
            logger.error(f"Failed to fetch registered webhooks for {self.shop_domain}: {e}")
            raise ReconciliationError(
                f"Failed to fetch registered webhooks: {e}",
                shop_domain=self.shop_domain,
                response=e.response,
                code=e.code,
                doc=e.doc,
            ) from e

    async def _apply(self,
                     report: ReconciliationReport,
                     operation: WebhookOperation,
                     target: Union[WebhookSpec, RegisteredWebhook],
                     call: Callable[..., Awaitable],
                     *args) -> bool:
        try:
            await call(*args)
            return True
        except ShopifyGraphQLError as e:
            logger.error(f"Webhook {operation.value} failed for {target.topic} ({target.address}): {e}")
            report.failures.append(FailedOperation(operation=operation, target=target, error=e))
            return False

    def _finish(self, report: ReconciliationReport) -> ReconciliationReport:
        self.state = ReconciliationState.DONE
        report.state = self.state
        logger.info(
            f"Webhook reconciliation for {self.shop_domain} done: created={report.created} "
            f"updated={report.updated} deleted={report.deleted} failed={len(report.failures)}"
        )
        return report
