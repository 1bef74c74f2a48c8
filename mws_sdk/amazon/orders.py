"""
Orders API section of Amazon MWS.

Reference: http://docs.developer.amazonservices.com/en_US/orders/2013-09-01/
"""
from collections.abc import Mapping
from typing import Any, Optional

import aiohttp

from mws_sdk.amazon.encoding import ensure_encoded
from mws_sdk.amazon.models import OutputMode
from mws_sdk.amazon.operation import marketplace_params, mws_operation, require
from mws_sdk.amazon.request import create_request
from mws_sdk.errors import InvalidParameterError, MissingParameterError
from mws_sdk.logging import get_logger

logger = get_logger("mws_sdk.orders")

ORDERS = "Orders"

MAX_MARKETPLACE_IDS = 20
MARKETPLACE_ID_PREFIX = "MarketplaceId.Id"

LIST_ORDERS_FILTERS = (
    "LastUpdatedAfter",
    "LastUpdatedBefore",
    "BuyerEmail",
    "SellerOrderId",
    "MaxResultsPerPage",
    "TFMShipmentStatus",
)
LIST_ORDERS_ENUMERATED_FILTERS = (
    "OrderStatus.Status.",
    "FulfillmentChannel.Channel.",
    "PaymentMethod.Method.",
)


def _list_orders_filters(params: Mapping[str, Any]) -> dict[str, Any]:
    filters = {key: params[key] for key in LIST_ORDERS_FILTERS if key in params}
    for key, value in params.items():
        if key.startswith(LIST_ORDERS_ENUMERATED_FILTERS):
            filters[key] = value
    return filters


@mws_operation("GetServiceStatus")
async def get_service_status(
    config: Any,
    params: dict[str, Any],
    output: OutputMode,
    session: Optional[aiohttp.ClientSession],
) -> Any:
    """
    Return the operational status of the Orders API section.

    Status values are GREEN, GREEN_I, YELLOW and RED. The call takes no
    parameters.
    """
    if params:
        raise InvalidParameterError(
            f"GetServiceStatus takes no parameters, got: {', '.join(sorted(params))}"
        )
    return await create_request(
        "GetServiceStatus", config, {}, family=ORDERS, output=output, session=session
    )


@mws_operation("ListOrders")
async def list_orders(
    config: Any,
    params: dict[str, Any],
    output: OutputMode,
    session: Optional[aiohttp.ClientSession],
) -> Any:
    """
    List orders created in a time frame.

    Requires ``CreatedAfter``, ``CreatedBefore`` and ``MarketplaceIdList``.
    """
    require("ListOrders", params, "MarketplaceIdList", "CreatedAfter", "CreatedBefore")

    marketplaces = marketplace_params(
        MARKETPLACE_ID_PREFIX, params["MarketplaceIdList"], limit=MAX_MARKETPLACE_IDS
    )
    if not marketplaces:
        raise MissingParameterError("ListOrders", ["MarketplaceIdList"])

    parameters = {
        "CreatedAfter": params["CreatedAfter"],
        "CreatedBefore": params["CreatedBefore"],
    }
    parameters.update(marketplaces)
    parameters.update(_list_orders_filters(params))
    logger.debug(f"[ORDERS] ListOrders parameters: {parameters}")

    return await create_request(
        "ListOrders", config, parameters, family=ORDERS, output=output, session=session
    )


@mws_operation("ListOrdersByNextToken")
async def list_orders_by_next_token(
    config: Any,
    params: dict[str, Any],
    output: OutputMode,
    session: Optional[aiohttp.ClientSession],
) -> Any:
    """Fetch the next page of ListOrders results."""
    require("ListOrdersByNextToken", params, "NextToken")
    parameters = {"NextToken": ensure_encoded(params["NextToken"])}
    return await create_request(
        "ListOrdersByNextToken", config, parameters, family=ORDERS, output=output, session=session
    )


@mws_operation("ListOrderItems")
async def list_order_items(
    config: Any,
    params: dict[str, Any],
    output: OutputMode,
    session: Optional[aiohttp.ClientSession],
) -> Any:
    """List the items of one order. Requires ``AmazonOrderId``."""
    require("ListOrderItems", params, "AmazonOrderId")
    parameters = {"AmazonOrderId": params["AmazonOrderId"]}
    return await create_request(
        "ListOrderItems", config, parameters, family=ORDERS, output=output, session=session
    )


@mws_operation("ListOrderItemsByNextToken")
async def list_order_items_by_next_token(
    config: Any,
    params: dict[str, Any],
    output: OutputMode,
    session: Optional[aiohttp.ClientSession],
) -> Any:
    require("ListOrderItemsByNextToken", params, "NextToken")
    parameters = {"NextToken": ensure_encoded(params["NextToken"])}
    return await create_request(
        "ListOrderItemsByNextToken", config, parameters, family=ORDERS, output=output, session=session
    )
