"""
Shopify GraphQL exception handling and error classes.
"""

from typing import Dict, Any, List, Optional
from enum import Enum

from .models import GraphQLResponse


class ShopifyErrorCode(Enum):
    """Top-level GraphQL error codes the client classifies."""
    THROTTLED = "THROTTLED"


class ShopifyGraphQLError(Exception):
    """Base exception for Shopify GraphQL API errors."""

    def __init__(self,
                 message: str,
                 response: Optional[Dict[str, Any]] = None,
                 code: Optional[str] = None,
                 doc: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.response = response
        self.code = code
        self.doc = doc

    def __str__(self):
        if self.code:
            return f"{self.message} (code: {self.code})"
        return self.message


class ConnectionError(ShopifyGraphQLError):
    """Raised on transport failures, non-2xx responses and unclassified GraphQL errors."""


class TooManyRequests(ShopifyGraphQLError):
    """Raised when Shopify reports the query as THROTTLED."""

    def __init__(self,
                 message: str,
                 points_restore_rate: Optional[float] = None,
                 retry_after: Optional[float] = None,
                 **kwargs):
        super().__init__(message, **kwargs)
        self.points_restore_rate = points_restore_rate
        self.retry_after = retry_after

    def __str__(self):
        base_msg = super().__str__()
        if self.retry_after is not None:
            base_msg += f" (retry after {self.retry_after:.1f}s)"
        return base_msg


class UserError(ShopifyGraphQLError):
    """Raised when a mutation payload carries userErrors."""

    def __init__(self, message: str, fields: Optional[List[str]] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.fields = fields or []

    def __str__(self):
        if self.fields:
            return f"{'.'.join(self.fields)}: {self.message}"
        return self.message


class ReconciliationError(ShopifyGraphQLError):
    """Raised when the registered webhook snapshot cannot be fetched."""

    def __init__(self, message: str, shop_domain: Optional[str] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.shop_domain = shop_domain


def graphql_error_from_response(response: GraphQLResponse, body: Dict[str, Any]) -> ShopifyGraphQLError:
    """
    Create the appropriate error for the first top-level GraphQL error.

    Args:
        response: Decoded GraphQL response with a non-empty ``errors`` list
        body: Raw response body, attached to the error

    Returns:
        TooManyRequests for THROTTLED errors, ConnectionError otherwise
    """
    error = response.errors[0]

    if error.code == ShopifyErrorCode.THROTTLED.value:
        restore_rate = None
        retry_after = None
        throttle_status = response.throttle_status
        if throttle_status is not None:
            restore_rate = throttle_status.restore_rate
        if throttle_status is not None and response.requested_cost is not None:
            retry_after = throttle_status.seconds_until_available(response.requested_cost)
        return TooManyRequests(
            error.message,
            points_restore_rate=restore_rate,
            retry_after=retry_after,
            response=body,
            code=error.code,
            doc=error.documentation,
        )

    return ConnectionError(error.message, response=body, code=error.code, doc=error.documentation)


def user_error_from_payload(response: Dict[str, Any], user_errors: List[Dict[str, Any]]) -> UserError:
    """
    Create a UserError from the first entry of a mutation's userErrors.

    Args:
        response: Decoded response body
        user_errors: Non-empty ``userErrors`` list

    Returns:
        UserError surfacing the first error's field path and message
    """
    error = user_errors[0]
    fields = error.get("field") or []
    if isinstance(fields, str):
        fields = [fields]

    return UserError(
        error.get("message", "Unknown user error"),
        fields=list(fields),
        response=response,
        code=error.get("code"),
    )
