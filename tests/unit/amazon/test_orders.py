"""Tests for the Orders operation wrappers."""
import pytest

from mws_sdk.amazon import orders
from mws_sdk.amazon.models import OutputMode
from mws_sdk.amazon.request import FIXED_ORDER_KEYS
from mws_sdk.errors import ConfigurationError, InvalidParameterError, MissingParameterError, ResponseParseError


def _sent_request(mock_send):
    mock_send.assert_awaited_once()
    return mock_send.await_args.args[0]


def _query_keys(request) -> list[str]:
    return [pair.split("=", 1)[0] for pair in request.query.split("&")]


def _query_dict(request) -> dict[str, str]:
    return dict(pair.split("=", 1) for pair in request.query.split("&"))


@pytest.fixture
def list_orders_params() -> dict:
    return {
        "CreatedAfter": "2020-01-01T00:00:00Z",
        "CreatedBefore": "2020-01-31T00:00:00Z",
        "MarketplaceIdList": {"MarketplaceId.Id.1": "ATVPDKIKX0DER"},
    }


@pytest.mark.asyncio
async def test_get_service_status_structured(config, mock_send):
    result = await orders.get_service_status(config)

    assert result["GetServiceStatusResult"]["Status"] == "GREEN"
    request = _sent_request(mock_send)
    assert request.action == "GetServiceStatus"
    assert _query_dict(request)["Action"] == "GetServiceStatus"


@pytest.mark.asyncio
async def test_get_service_status_raw(config, mock_send, service_status_xml):
    result = await orders.get_service_status(config, output=OutputMode.RAW)

    assert result == service_status_xml


@pytest.mark.asyncio
async def test_get_service_status_rejects_parameters(config, mock_send):
    with pytest.raises(InvalidParameterError, match="Foo"):
        await orders.get_service_status(config, {"Foo": "x"})

    mock_send.assert_not_awaited()


@pytest.mark.asyncio
async def test_callback_receives_result_once(config, mock_send):
    calls = []

    result = await orders.get_service_status(config, callback=lambda err, data: calls.append((err, data)))

    assert calls == [(None, result)]


@pytest.mark.asyncio
async def test_async_callback_is_awaited(config, mock_send):
    calls = []

    async def callback(err, data):
        calls.append((err, data))

    await orders.get_service_status(config, output="raw", callback=callback)

    assert len(calls) == 1
    assert calls[0][0] is None
    assert calls[0][1].startswith("<?xml")


@pytest.mark.asyncio
async def test_list_orders_without_created_after_makes_no_request(config, mock_send, list_orders_params):
    del list_orders_params["CreatedAfter"]

    with pytest.raises(MissingParameterError) as excinfo:
        await orders.list_orders(config, list_orders_params)

    assert excinfo.value.missing == ["CreatedAfter"]
    mock_send.assert_not_awaited()


@pytest.mark.asyncio
async def test_list_orders_missing_parameter_goes_to_callback(config, mock_send, list_orders_params):
    del list_orders_params["CreatedAfter"]
    calls = []

    result = await orders.list_orders(
        config, list_orders_params, callback=lambda err, data: calls.append((err, data))
    )

    assert result is None
    assert len(calls) == 1
    error, data = calls[0]
    assert isinstance(error, MissingParameterError)
    assert data is None
    assert "CreatedAfter" in error.as_dict()["Error"]
    mock_send.assert_not_awaited()


@pytest.mark.asyncio
async def test_list_orders_requires_marketplaces(config, mock_send, list_orders_params):
    list_orders_params["MarketplaceIdList"] = {"SomethingElse": "x"}

    with pytest.raises(MissingParameterError, match="MarketplaceIdList"):
        await orders.list_orders(config, list_orders_params)

    mock_send.assert_not_awaited()


@pytest.mark.asyncio
async def test_list_orders_forwards_first_20_marketplaces(config, mock_send, list_orders_params):
    list_orders_params["MarketplaceIdList"] = {
        f"MarketplaceId.Id.{n}": f"M{n}" for n in range(1, 26)
    }

    await orders.list_orders(config, list_orders_params)

    query = _query_dict(_sent_request(mock_send))
    forwarded = sorted(key for key in query if key.startswith("MarketplaceId.Id."))
    assert len(forwarded) == 20
    assert all(f"MarketplaceId.Id.{n}" in query for n in range(1, 21))
    assert all(f"MarketplaceId.Id.{n}" not in query for n in range(21, 26))


@pytest.mark.asyncio
async def test_list_orders_enumerates_marketplace_sequence(config, mock_send, list_orders_params):
    list_orders_params["MarketplaceIdList"] = ["ATVPDKIKX0DER", "A2EUQ1WTGCTBG2"]

    await orders.list_orders(config, list_orders_params)

    query = _query_dict(_sent_request(mock_send))
    assert query["MarketplaceId.Id.1"] == "ATVPDKIKX0DER"
    assert query["MarketplaceId.Id.2"] == "A2EUQ1WTGCTBG2"


@pytest.mark.asyncio
async def test_list_orders_accepts_single_marketplace_id(config, mock_send, list_orders_params):
    list_orders_params["MarketplaceIdList"] = "ATVPDKIKX0DER"

    await orders.list_orders(config, list_orders_params)

    query = _query_dict(_sent_request(mock_send))
    assert query["MarketplaceId.Id.1"] == "ATVPDKIKX0DER"
    assert "MarketplaceId.Id.2" not in query


@pytest.mark.asyncio
async def test_list_orders_forwards_known_filters_only(config, mock_send, list_orders_params):
    list_orders_params.update({
        "OrderStatus.Status.1": "Shipped",
        "MaxResultsPerPage": 50,
        "Unsupported": "dropped",
    })

    await orders.list_orders(config, list_orders_params)

    query = _query_dict(_sent_request(mock_send))
    assert query["OrderStatus.Status.1"] == "Shipped"
    assert query["MaxResultsPerPage"] == "50"
    assert query["CreatedAfter"] == "2020-01-01T00%3A00%3A00Z"
    assert "Unsupported" not in query


@pytest.mark.asyncio
async def test_list_order_items_requires_order_id(config, mock_send):
    with pytest.raises(MissingParameterError, match="AmazonOrderId"):
        await orders.list_order_items(config, {})

    mock_send.assert_not_awaited()


@pytest.mark.asyncio
async def test_list_order_items(config, mock_send):
    await orders.list_order_items(config, {"AmazonOrderId": "058-1233752-8214740"})

    query = _query_dict(_sent_request(mock_send))
    assert query["Action"] == "ListOrderItems"
    assert query["AmazonOrderId"] == "058-1233752-8214740"


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "operation",
    [orders.list_orders_by_next_token, orders.list_order_items_by_next_token],
)
async def test_next_token_operations_require_token(config, mock_send, operation):
    with pytest.raises(MissingParameterError, match="NextToken"):
        await operation(config, {})

    mock_send.assert_not_awaited()


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "operation",
    [orders.list_orders_by_next_token, orders.list_order_items_by_next_token],
)
async def test_next_token_operations_use_fixed_order(config, mock_send, operation):
    await operation(config, {"NextToken": "2YgYW55IGNhcm5hbCBwbGVhcw=="})

    request = _sent_request(mock_send)
    assert _query_keys(request) == list(FIXED_ORDER_KEYS)
    assert _query_dict(request)["NextToken"] == "2YgYW55IGNhcm5hbCBwbGVhcw%3D%3D"


@pytest.mark.asyncio
async def test_next_token_already_encoded_is_not_double_encoded(config, mock_send):
    await orders.list_orders_by_next_token(config, {"NextToken": "2YgYW55IGNhcm5hbCBwbGVhcw%3D%3D"})

    query = _query_dict(_sent_request(mock_send))
    assert query["NextToken"] == "2YgYW55IGNhcm5hbCBwbGVhcw%3D%3D"
    assert "%25" not in query["NextToken"]


@pytest.mark.asyncio
async def test_parse_error_raises_with_raw_body(config, mock_send):
    mock_send.return_value = "Service Unavailable"

    with pytest.raises(ResponseParseError) as excinfo:
        await orders.get_service_status(config)

    assert excinfo.value.body == "Service Unavailable"


@pytest.mark.asyncio
async def test_parse_error_goes_to_callback_with_raw_body(config, mock_send):
    mock_send.return_value = "Service Unavailable"
    calls = []

    result = await orders.get_service_status(config, callback=lambda err, data: calls.append((err, data)))

    assert result == "Service Unavailable"
    assert len(calls) == 1
    assert isinstance(calls[0][0], ResponseParseError)
    assert calls[0][1] == "Service Unavailable"


@pytest.mark.asyncio
async def test_invalid_configuration_makes_no_request(config, mock_send):
    del config["SecretKey"]

    with pytest.raises(ConfigurationError):
        await orders.get_service_status(config)

    mock_send.assert_not_awaited()


@pytest.mark.asyncio
async def test_transport_errors_propagate_in_callback_mode(config, mock_send):
    mock_send.side_effect = ConnectionResetError("reset")
    calls = []

    with pytest.raises(ConnectionResetError):
        await orders.get_service_status(config, callback=lambda err, data: calls.append(err))

    assert calls == []
