"""
Webhook diff engine.
"""

from typing import Dict, Iterable

from loguru import logger

from .models import DiffResult, RegisteredWebhook, WebhookSpec


def diff(desired: Iterable[WebhookSpec], registered: Iterable[RegisteredWebhook]) -> DiffResult:
    """
    Compute the operations that make ``registered`` match ``desired``.

    Webhooks are matched by topic. Addresses are compared as exact,
    case-sensitive strings.

    Args:
        desired: Declared webhooks, one per topic
        registered: Webhooks currently subscribed on the shop

    Returns:
        DiffResult with creates, updates and deletes
    """
    result = DiffResult()

    wanted: Dict[str, WebhookSpec] = {}
    for spec in desired:
        if spec.topic in wanted:
            logger.warning(f"Duplicate desired webhook for topic {spec.topic} ignored: {spec.address}")
            continue
        wanted[spec.topic] = spec

    # First subscription per topic is kept, extra copies are repaired by deleting them
    current: Dict[str, RegisteredWebhook] = {}
    for webhook in registered:
        if webhook.topic in current:
            result.to_delete.append(webhook)
        elif webhook.topic not in wanted:
            result.to_delete.append(webhook)
        else:
            current[webhook.topic] = webhook

    for topic, spec in wanted.items():
        webhook = current.get(topic)
        if webhook is None:
            result.to_create.append(spec)
        elif webhook.address != spec.address:
            result.to_update.append((webhook, spec))

    return result
