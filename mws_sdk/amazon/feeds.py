"""Feeds API section of Amazon MWS."""
from collections.abc import Mapping
from typing import Any, Optional

import aiohttp

from mws_sdk.amazon.models import OutputMode
from mws_sdk.amazon.operation import marketplace_params, mws_operation, require
from mws_sdk.amazon.request import create_request
from mws_sdk.errors import MissingParameterError

FEEDS = "Feeds"
MARKETPLACE_ID_PREFIX = "MarketplaceIdList.Id"


def _feed_body(contents: Any) -> Any:
    # Older callers wrap the document as {"_BODY_": ...}.
    if isinstance(contents, Mapping):
        return contents.get("_BODY_")
    return contents


@mws_operation("SubmitFeed")
async def submit_feed(
    config: Any,
    params: dict[str, Any],
    output: OutputMode,
    session: Optional[aiohttp.ClientSession],
) -> Any:
    """
    Upload a feed document.

    Requires ``FeedType`` and ``FeedContents``. The contents become the
    HTTP body and are not part of the signed parameters.
    """
    require("SubmitFeed", params, "FeedType", "FeedContents")
    body = _feed_body(params["FeedContents"])
    if body in (None, "", b""):
        raise MissingParameterError("SubmitFeed", ["FeedContents"])

    parameters: dict[str, Any] = {"FeedType": params["FeedType"]}
    if "PurgeAndReplace" in params:
        parameters["PurgeAndReplace"] = params["PurgeAndReplace"]
    if params.get("MarketplaceIdList"):
        parameters.update(marketplace_params(MARKETPLACE_ID_PREFIX, params["MarketplaceIdList"]))

    return await create_request(
        "SubmitFeed",
        config,
        parameters,
        family=FEEDS,
        output=output,
        feed_contents=body,
        session=session,
    )
