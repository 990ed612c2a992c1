"""
Webhook data models.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Tuple, Union

from pydantic import BaseModel, ConfigDict, field_validator


def normalize_topic(topic: str) -> str:
    """Return the GraphQL enum form of a topic: ``app/uninstalled`` -> ``APP_UNINSTALLED``."""
    return topic.strip().replace("/", "_").upper()


class WebhookSpec(BaseModel):
    """A webhook the app declares it needs."""
    model_config = ConfigDict(frozen=True)

    topic: str
    address: str

    @field_validator("topic")
    @classmethod
    def validate_topic(cls, v):
        v = normalize_topic(v)
        if not v:
            raise ValueError("Webhook topic is required")
        return v

    @field_validator("address")
    @classmethod
    def validate_address(cls, v):
        if not v:
            raise ValueError("Webhook address is required")
        return v


class RegisteredWebhook(BaseModel):
    """A webhook subscription as it currently exists on the shop."""
    model_config = ConfigDict(frozen=True)

    id: str
    topic: str
    address: str

    @field_validator("topic")
    @classmethod
    def validate_topic(cls, v):
        return normalize_topic(v)

    @classmethod
    def from_node(cls, node: Dict[str, Any]) -> "RegisteredWebhook":
        """Decode a ``WebhookSubscription`` node."""
        endpoint = node.get("endpoint") or {}
        typename = endpoint.get("__typename")

        if typename == "WebhookEventBridgeEndpoint":
            address = endpoint.get("arn") or ""
        elif typename == "WebhookPubSubEndpoint":
            address = f"pubsub://{endpoint.get('pubSubProject')}:{endpoint.get('pubSubTopic')}"
        else:
            address = endpoint.get("callbackUrl") or node.get("callbackUrl") or ""

        return cls(id=node["id"], topic=node["topic"], address=address)


@dataclass
class DiffResult:
    """Operations needed to turn the registered set into the desired set."""
    to_create: List[WebhookSpec] = field(default_factory=list)
    to_update: List[Tuple[RegisteredWebhook, WebhookSpec]] = field(default_factory=list)
    to_delete: List[RegisteredWebhook] = field(default_factory=list)

    @property
    def operation_count(self) -> int:
        return len(self.to_create) + len(self.to_update) + len(self.to_delete)

    @property
    def is_empty(self) -> bool:
        return self.operation_count == 0


class WebhookOperation(Enum):
    """Remote operation applied during reconciliation."""
    CREATE = "create"
    UPDATE = "update"
    DELETE = "delete"


class ReconciliationState(Enum):
    """Reconciliation run states."""
    PENDING = "pending"
    FETCHING = "fetching"
    DIFFING = "diffing"
    APPLYING = "applying"
    DONE = "done"
    FAILED = "failed"


@dataclass
class FailedOperation:
    """An operation that failed while applying a diff."""
    operation: WebhookOperation
    target: Union[WebhookSpec, RegisteredWebhook]
    error: Exception


@dataclass
class ReconciliationReport:
    """Outcome of a reconciliation run."""
    created: int = 0
    updated: int = 0
    deleted: int = 0
    failures: List[FailedOperation] = field(default_factory=list)
    state: ReconciliationState = ReconciliationState.PENDING

    @property
    def succeeded(self) -> bool:
        return not self.failures
