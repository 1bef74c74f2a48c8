"""
MWS request builder.

Assembles the fixed request fields, signs them and serializes the result
into a SignedRequest. ``create_request`` then sends it and decodes the
response.
"""
import base64
import hashlib
from collections.abc import Mapping
from datetime import datetime, timezone
from typing import Any, Optional, Union

import aiohttp

from mws_sdk.amazon.encoding import Encoded, percent_encode
from mws_sdk.amazon.endpoints import get_endpoint
from mws_sdk.amazon.models import OutputMode, SignedRequest
from mws_sdk.amazon.signing import HTTP_METHOD, generate_signature
from mws_sdk.amazon.transport import decode_response, send
from mws_sdk.errors import InvalidParameterError, MissingParameterError
from mws_sdk.logging import get_logger
from mws_sdk.settings import MWSConfig

logger = get_logger("mws_sdk.request")

USER_AGENT = "mws-sdk/0.1.0 (Language=Python)"
CONTENT_TYPE = "text/xml"
SIGNATURE_VERSION = "2"
SIGNATURE_METHOD = "HmacSHA256"

RESERVED_KEYS = frozenset({
    "Action",
    "SellerId",
    "SignatureVersion",
    "SignatureMethod",
    "Timestamp",
    "Version",
    "AWSAccessKeyId",
    "MWSAuthToken",
    "Signature",
})

# Amazon rejects the signature of these two calls unless the parameters
# arrive in exactly this order.
FIXED_ORDER_ACTIONS = frozenset({"ListOrdersByNextToken", "ListOrderItemsByNextToken"})
FIXED_ORDER_KEYS = (
    "AWSAccessKeyId",
    "Action",
    "SellerId",
    "SignatureVersion",
    "Version",
    "Timestamp",
    "Signature",
    "SignatureMethod",
    "NextToken",
)

FeedBody = Union[str, bytes]


def make_timestamp(now: Optional[datetime] = None) -> str:
    """ISO-8601 UTC timestamp in whole seconds, e.g. ``2020-01-01T00:00:00Z``."""
    if now is None:
        now = datetime.now(timezone.utc)
    elif now.tzinfo is not None:
        now = now.astimezone(timezone.utc)
    return now.strftime("%Y-%m-%dT%H:%M:%SZ")


def _as_param(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, str):
        return value
    return str(value)


def build_params(
    action: str,
    config: MWSConfig,
    family: str,
    parameters: Optional[Mapping[str, Any]] = None,
    timestamp: Optional[str] = None,
) -> dict[str, str]:
    """
    Merge the fixed request fields with operation parameters and sign them.

    Raises:
        InvalidParameterError: If an operation parameter uses a reserved key
    """
    endpoint = get_endpoint(family)
    parameters = parameters or {}

    reserved = sorted(RESERVED_KEYS.intersection(parameters))
    if reserved:
        raise InvalidParameterError(
            f"{action} cannot override reserved parameter(s): {', '.join(reserved)}"
        )

    params: dict[str, str] = {
        "Action": action,
        "SellerId": config.seller_id,
        "SignatureVersion": SIGNATURE_VERSION,
        "SignatureMethod": SIGNATURE_METHOD,
        "Timestamp": timestamp or make_timestamp(),
        "Version": endpoint.version,
        "AWSAccessKeyId": config.aws_access_key_id,
    }
    if config.mws_auth_token:
        params["MWSAuthToken"] = config.mws_auth_token

    for key, value in parameters.items():
        if value is None:
            continue
        params[key] = _as_param(value)

    params["Signature"] = generate_signature(config, params, endpoint)
    return params


def serialize_params(params: Mapping[str, str]) -> str:
    """URL-encode parameters in signed order, ``Signature`` last."""
    keys = sorted(key for key in params if key != "Signature")
    if "Signature" in params:
        keys.append("Signature")
    return "&".join(f"{key}={percent_encode(params[key])}" for key in keys)


def serialize_ordered(action: str, params: Mapping[str, str]) -> str:
    """
    URL-encode parameters in the order the NextToken calls require.

    ``MWSAuthToken`` is signed when configured, so it is sent after the
    fixed keys.
    """
    keys = list(FIXED_ORDER_KEYS)
    if "MWSAuthToken" in params:
        keys.append("MWSAuthToken")

    missing = [key for key in keys if key not in params]
    if missing:
        raise MissingParameterError(action, missing)
    unexpected = sorted(set(params) - set(keys))
    if unexpected:
        raise InvalidParameterError(
            f"{action} does not accept parameter(s): {', '.join(unexpected)}"
        )

    return "&".join(f"{key}={percent_encode(params[key])}" for key in keys)


def content_md5(body: bytes) -> str:
    return base64.b64encode(hashlib.md5(body).digest()).decode("ascii")


def build_request(
    action: str,
    config: Any,
    parameters: Optional[Mapping[str, Any]] = None,
    family: str = "Orders",
    feed_contents: Optional[FeedBody] = None,
    timestamp: Optional[str] = None,
) -> SignedRequest:
    """
    Build a signed request for one MWS action.

    Args:
        action: MWS action name, e.g. ``ListOrders``
        config: MWSConfig or a mapping with the same fields
        parameters: Operation specific parameters
        family: Endpoint family the action belongs to
        feed_contents: Upload body; sent as the HTTP body and left out of
            the signed parameters
        timestamp: Fixed request timestamp, defaults to now

    Returns:
        SignedRequest

    Raises:
        ConfigurationError: If the configuration is incomplete
        InvalidParameterError: If a reserved key or unknown family is used
    """
    config = MWSConfig.coerce(config)
    endpoint = get_endpoint(family)
    params = build_params(action, config, family, parameters, timestamp)

    if action in FIXED_ORDER_ACTIONS:
        query = serialize_ordered(action, params)
    else:
        query = serialize_params(params)

    if feed_contents is not None:
        body = feed_contents if isinstance(feed_contents, bytes) else feed_contents.encode("utf-8")
    else:
        body = query.encode("utf-8")

    headers = {
        "Host": config.host,
        "User-Agent": USER_AGENT,
        "Content-Type": CONTENT_TYPE,
        "Content-MD5": content_md5(body),
    }

    logger.debug(
        f"[MWS] {action} parameters: "
        f"{sorted(key for key in params if key not in ('Signature', 'AWSAccessKeyId', 'MWSAuthToken'))}"
    )
    return SignedRequest(
        action=action,
        host=config.host,
        path=f"{endpoint.resource}?{query}",
        body=body,
        headers=headers,
        method=HTTP_METHOD,
    )


async def create_request(
    action: str,
    config: Any,
    parameters: Optional[Mapping[str, Any]] = None,
    family: str = "Orders",
    output: OutputMode = OutputMode.STRUCTURED,
    feed_contents: Optional[FeedBody] = None,
    session: Optional[aiohttp.ClientSession] = None,
) -> Any:
    """
    Sign, send and decode one MWS request.

    Returns:
        Parsed response mapping, or the raw body text for OutputMode.RAW

    Raises:
        ResponseParseError: If a structured response is not valid XML
        aiohttp.ClientError: On network failures
    """
    request = build_request(
        action,
        config,
        parameters=parameters,
        family=family,
        feed_contents=feed_contents,
    )
    logger.info(f"[MWS] {action} -> {request.host}{request.path.partition('?')[0]}")
    body = await send(request, session=session)
    return decode_response(body, output)
