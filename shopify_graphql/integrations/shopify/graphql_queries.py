"""
GraphQL documents for the Shopify Admin API.

Each query selects exactly the fields its decoder reads.
"""

from typing import Any, Dict, Optional, Tuple


WEBHOOK_ENDPOINT_FRAGMENT = """
fragment WebhookEndpointFields on WebhookSubscription {
  id
  topic
  endpoint {
    __typename
    ... on WebhookHttpEndpoint {
      callbackUrl
    }
    ... on WebhookEventBridgeEndpoint {
      arn
    }
    ... on WebhookPubSubEndpoint {
      pubSubProject
      pubSubTopic
    }
  }
}
"""

WEBHOOK_SUBSCRIPTIONS_QUERY = """
query WebhookSubscriptions($first: Int!, $after: String) {
  webhookSubscriptions(first: $first, after: $after) {
    edges {
      node {
        ...WebhookEndpointFields
      }
    }
    pageInfo {
      hasNextPage
      endCursor
    }
  }
}
""" + WEBHOOK_ENDPOINT_FRAGMENT

CREATE_WEBHOOK_SUBSCRIPTION = """
mutation WebhookSubscriptionCreate($topic: WebhookSubscriptionTopic!, $webhookSubscription: WebhookSubscriptionInput!) {
  webhookSubscriptionCreate(topic: $topic, webhookSubscription: $webhookSubscription) {
    webhookSubscription {
      ...WebhookEndpointFields
    }
    userErrors {
      field
      message
    }
  }
}
""" + WEBHOOK_ENDPOINT_FRAGMENT

UPDATE_WEBHOOK_SUBSCRIPTION = """
mutation WebhookSubscriptionUpdate($id: ID!, $webhookSubscription: WebhookSubscriptionInput!) {
  webhookSubscriptionUpdate(id: $id, webhookSubscription: $webhookSubscription) {
    webhookSubscription {
      ...WebhookEndpointFields
    }
    userErrors {
      field
      message
    }
  }
}
""" + WEBHOOK_ENDPOINT_FRAGMENT

DELETE_WEBHOOK_SUBSCRIPTION = """
mutation WebhookSubscriptionDelete($id: ID!) {
  webhookSubscriptionDelete(id: $id) {
    deletedWebhookSubscriptionId
    userErrors {
      field
      message
    }
  }
}
"""

SHOP_QUERY = """
query Shop {
  shop {
    id
    name
    email
    myshopifyDomain
    plan {
      displayName
    }
  }
}
"""


class GraphQLQueryBuilder:
    """Pairs each document with the variables it expects."""

    @staticmethod
    def webhook_subscriptions_query(first: int = 50, after: Optional[str] = None) -> Tuple[str, Dict[str, Any]]:
        variables: Dict[str, Any] = {"first": first}
        if after:
            variables["after"] = after
        return WEBHOOK_SUBSCRIPTIONS_QUERY, variables

    @staticmethod
    def create_webhook_mutation(topic: str, callback_url: str) -> Tuple[str, Dict[str, Any]]:
        return CREATE_WEBHOOK_SUBSCRIPTION, {
            "topic": topic,
            "webhookSubscription": {
                "callbackUrl": callback_url,
                "format": "JSON",
            },
        }

    @staticmethod
    def update_webhook_mutation(webhook_id: str, callback_url: str) -> Tuple[str, Dict[str, Any]]:
        return UPDATE_WEBHOOK_SUBSCRIPTION, {
            "id": webhook_id,
            "webhookSubscription": {
                "callbackUrl": callback_url,
            },
        }

    @staticmethod
    def delete_webhook_mutation(webhook_id: str) -> Tuple[str, Dict[str, Any]]:
        return DELETE_WEBHOOK_SUBSCRIPTION, {"id": webhook_id}

    @staticmethod
    def shop_query() -> Tuple[str, Dict[str, Any]]:
        return SHOP_QUERY, {}
