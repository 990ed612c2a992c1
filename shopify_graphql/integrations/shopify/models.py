"""
Shopify GraphQL data models.
"""

from datetime import datetime
from typing import List, Optional, Dict, Any
from pydantic import BaseModel, ConfigDict, Field, field_validator

from shopify_graphql.core.config import Settings, settings as default_settings


class ShopifyConfig(BaseModel):
    """Shop session settings: where to send requests and how to authenticate them."""
    shop_domain: str
    access_token: str
    api_version: str = "2024-10"

    @field_validator("shop_domain")
    @classmethod
    def normalize_domain(cls, v):
        v = v.strip().replace("https://", "").replace("http://", "").rstrip("/")
        if not v:
            raise ValueError("Shop domain is required")
        # Handle domain that already includes .myshopify.com
        if "." not in v:
            v = f"{v}.myshopify.com"
        return v

    @classmethod
    def from_settings(cls, settings: Optional[Settings] = None) -> "ShopifyConfig":
        """Session for the shop configured in ``settings``, else the global settings."""
        settings = settings or default_settings
        return cls(
            shop_domain=settings.SHOPIFY_SHOP_DOMAIN,
            access_token=settings.SHOPIFY_ACCESS_TOKEN,
            api_version=settings.SHOPIFY_API_VERSION,
        )

    @property
    def graphql_url(self) -> str:
        return f"https://{self.shop_domain}/admin/api/{self.api_version}/graphql.json"

    @property
    def headers(self) -> Dict[str, str]:
        return {
            "X-Shopify-Access-Token": self.access_token,
            "Content-Type": "application/json",
            "Accept": "application/json",
        }


class GraphQLErrorDetail(BaseModel):
    """A single entry of a response's top-level ``errors`` list."""
    message: str = "Unknown GraphQL error"
    code: Optional[str] = None
    documentation: Optional[str] = None
    path: List[Any] = []

    @classmethod
    def from_json(cls, error: Dict[str, Any]) -> "GraphQLErrorDetail":
        extensions = error.get("extensions") or {}
        return cls(
            message=error.get("message") or "Unknown GraphQL error",
            code=extensions.get("code"),
            documentation=extensions.get("documentation"),
            path=error.get("path") or [],
        )


class ThrottleStatus(BaseModel):
    """Leaky bucket state reported in ``extensions.cost.throttleStatus``."""
    model_config = ConfigDict(populate_by_name=True)

    maximum_available: float = Field(alias="maximumAvailable")
    currently_available: float = Field(alias="currentlyAvailable")
    restore_rate: float = Field(alias="restoreRate")

    def seconds_until_available(self, points: float) -> float:
        """Seconds until ``points`` can be spent, given the restore rate."""
        missing = points - self.currently_available
        if missing <= 0 or self.restore_rate <= 0:
            return 0.0
        return missing / self.restore_rate

    def restored(self, elapsed: float) -> "ThrottleStatus":
        """The bucket after ``elapsed`` seconds of restoring, capped at the maximum."""
        available = min(self.maximum_available, self.currently_available + self.restore_rate * max(elapsed, 0))
        return self.model_copy(update={"currently_available": available})


class QueryCost(BaseModel):
    """Cost information for an executed query."""
    model_config = ConfigDict(populate_by_name=True)

    requested_query_cost: Optional[float] = Field(default=None, alias="requestedQueryCost")
    actual_query_cost: Optional[float] = Field(default=None, alias="actualQueryCost")
    throttle_status: Optional[ThrottleStatus] = Field(default=None, alias="throttleStatus")


class ResponseExtensions(BaseModel):
    cost: Optional[QueryCost] = None


class GraphQLResponse(BaseModel):
    """Decoded GraphQL response: payload, errors and cost extensions."""
    data: Optional[Dict[str, Any]] = None
    errors: List[GraphQLErrorDetail] = []
    extensions: ResponseExtensions = Field(default_factory=ResponseExtensions)

    @classmethod
    def from_json(cls, body: Dict[str, Any]) -> "GraphQLResponse":
        """Decode a raw response body into typed structures."""
        return cls(
            data=body.get("data"),
            errors=[GraphQLErrorDetail.from_json(error) for error in body.get("errors") or []],
            extensions=ResponseExtensions.model_validate(body.get("extensions") or {}),
        )

    @property
    def throttle_status(self) -> Optional[ThrottleStatus]:
        if self.extensions.cost is None:
            return None
        return self.extensions.cost.throttle_status

    @property
    def requested_cost(self) -> Optional[float]:
        if self.extensions.cost is None:
            return None
        return self.extensions.cost.requested_query_cost

    def field(self, name: str) -> Dict[str, Any]:
        """Return a top-level field of ``data``, or an empty dict when absent."""
        return (self.data or {}).get(name) or {}


class Shop(BaseModel):
    """Shop information."""
    model_config = ConfigDict(populate_by_name=True)

    id: str
    name: str
    myshopify_domain: str = Field(alias="myshopifyDomain")
    email: Optional[str] = None
    plan_display_name: Optional[str] = None

    @classmethod
    def from_json(cls, node: Dict[str, Any]) -> "Shop":
        plan = node.get("plan") or {}
        return cls(
            id=node["id"],
            name=node["name"],
            myshopify_domain=node["myshopifyDomain"],
            email=node.get("email"),
            plan_display_name=plan.get("displayName"),
        )


class WebhookEvent(BaseModel):
    """Shopify webhook event delivered to the app."""
    id: str
    topic: str
    shop_domain: str
    api_version: str
    created_at: datetime
    payload: Dict[str, Any]
