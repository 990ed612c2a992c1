"""
Library configuration settings.
"""

import os
from typing import List

from pydantic_settings import BaseSettings, SettingsConfigDict

from shopify_graphql.core.webhooks.models import WebhookSpec


class Settings(BaseSettings):
    """Library settings."""

    # Project settings
    PROJECT_NAME: str = "shopify-graphql"
    VERSION: str = "0.1.0"
    ENVIRONMENT: str = os.getenv("ENVIRONMENT", "development")

    # Shopify settings
    SHOPIFY_SHOP_DOMAIN: str = os.getenv("SHOPIFY_SHOP_DOMAIN", "")
    SHOPIFY_ACCESS_TOKEN: str = os.getenv("SHOPIFY_ACCESS_TOKEN", "")
    SHOPIFY_API_VERSION: str = "2024-10"
    SHOPIFY_APP_SECRET: str = os.getenv("SHOPIFY_APP_SECRET", "")
    SHOPIFY_REQUEST_TIMEOUT: float = 30.0

    # Shopify API limits
    THROTTLE_MIN_AVAILABLE_POINTS: int = 0
    WEBHOOKS_PAGE_SIZE: int = 50

    # Webhooks the app declares, as a JSON list of {"topic": ..., "address": ...}
    WEBHOOKS: List[WebhookSpec] = []
    WEBHOOK_ENABLED_ENVIRONMENTS: str = "development,production"

    @property
    def webhook_enabled_environments_list(self) -> List[str]:
        """Parse WEBHOOK_ENABLED_ENVIRONMENTS from comma-separated string to list."""
        return [env.strip() for env in self.WEBHOOK_ENABLED_ENVIRONMENTS.split(",") if env.strip()]

    @property
    def webhooks_enabled(self) -> bool:
        return self.ENVIRONMENT in self.webhook_enabled_environments_list

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=True,
        extra="allow",  # Allow extra environment variables
    )


# Create global settings instance
settings = Settings()
