"""Amazon MWS SDK module."""

from .endpoints import ENDPOINTS, Endpoint, get_endpoint
from .feeds import submit_feed
from .models import OutputMode, SignedRequest
from .orders import (
    get_service_status,
    list_order_items,
    list_order_items_by_next_token,
    list_orders,
    list_orders_by_next_token,
)
from .request import build_request, create_request
from .signing import generate_signature

__all__ = [
    "ENDPOINTS",
    "Endpoint",
    "OutputMode",
    "SignedRequest",
    "build_request",
    "create_request",
    "generate_signature",
    "get_endpoint",
    "get_service_status",
    "list_order_items",
    "list_order_items_by_next_token",
    "list_orders",
    "list_orders_by_next_token",
    "submit_feed",
]
