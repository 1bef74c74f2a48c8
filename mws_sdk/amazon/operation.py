"""
Shared plumbing for MWS operation wrappers.

Every operation is a coroutine returning the decoded response. An
optional ``callback(error, result)`` is fired exactly once as well, and
in that mode SDK errors are delivered to it instead of being raised.
Network errors propagate in both modes.
"""
import functools
import inspect
import re
from collections.abc import Awaitable, Callable, Iterable, Mapping
from typing import Any, Optional

import aiohttp

from mws_sdk.amazon.models import OutputMode
from mws_sdk.errors import InvalidParameterError, MissingParameterError, MWSError, ResponseParseError
from mws_sdk.logging import get_logger

logger = get_logger("mws_sdk.operations")

Callback = Callable[[Optional[MWSError], Any], Any]
OperationImpl = Callable[..., Awaitable[Any]]


async def _complete(callback: Callback, error: Optional[MWSError], result: Any) -> None:
    outcome = callback(error, result)
    if inspect.isawaitable(outcome):
        await outcome


def mws_operation(name: str) -> Callable[[OperationImpl], Callable[..., Awaitable[Any]]]:
    """
    Turn ``impl(config, params, output, session)`` into a public operation.

    The public signature is
    ``op(config, params=None, *, output=OutputMode.STRUCTURED, callback=None, session=None)``.
    """

    def decorator(impl: OperationImpl) -> Callable[..., Awaitable[Any]]:
        @functools.wraps(impl)
        async def operation(
            config: Any,
            params: Optional[Mapping[str, Any]] = None,
            *,
            output: OutputMode = OutputMode.STRUCTURED,
            callback: Optional[Callback] = None,
            session: Optional[aiohttp.ClientSession] = None,
        ) -> Any:
            try:
                if params is not None and not isinstance(params, Mapping):
                    raise InvalidParameterError(
                        f"{name} parameters must be a mapping, got {type(params).__name__}"
                    )
                result = await impl(config, dict(params or {}), OutputMode(output), session)
            except MWSError as exc:
                if callback is None:
                    raise
                logger.warning(f"[MWS] {name} failed: {exc}")
                result = exc.body if isinstance(exc, ResponseParseError) else None
                await _complete(callback, exc, result)
                return result

            if callback is not None:
                await _complete(callback, None, result)
            return result

        return operation

    return decorator


def require(operation: str, params: Mapping[str, Any], *keys: str) -> None:
    """Raise MissingParameterError naming every absent or empty key."""
    missing = [key for key in keys if params.get(key) in (None, "", b"")]
    if missing:
        raise MissingParameterError(operation, missing)


def enumerate_param(prefix: str, values: Iterable[Any], limit: Optional[int] = None) -> dict[str, Any]:
    """
    Build an enumerated parameter from a sequence.

    enumerate_param("MarketplaceId.Id", ["A", "B"]) returns
    {"MarketplaceId.Id.1": "A", "MarketplaceId.Id.2": "B"}
    """
    if not prefix.endswith("."):
        prefix = f"{prefix}."
    params: dict[str, Any] = {}
    for number, value in enumerate(values, start=1):
        if limit is not None and number > limit:
            break
        params[f"{prefix}{number}"] = value
    return params


# Enumerated marketplace keys as Orders (MarketplaceId.Id.N) and
# Feeds (MarketplaceIdList.Id.N) spell them.
_MARKETPLACE_KEY_RE = re.compile(r"^MarketplaceId(List)?\.Id\.[1-9][0-9]*$")


def marketplace_params(prefix: str, marketplace_ids: Any, limit: Optional[int] = None) -> dict[str, Any]:
    """
    Enumerate marketplace ids under ``prefix``.

    Accepts a single id, a sequence of ids, or a mapping of already
    enumerated ``MarketplaceId.Id.N`` keys, whose values are taken in
    order. Anything past ``limit`` is dropped.
    """
    if isinstance(marketplace_ids, (str, bytes)):
        ids = [marketplace_ids]
    elif isinstance(marketplace_ids, Mapping):
        ids = []
        for key, value in marketplace_ids.items():
            if not _MARKETPLACE_KEY_RE.match(str(key)):
                logger.debug(f"[MWS] Ignoring marketplace key {key!r}")
                continue
            ids.append(value)
    elif isinstance(marketplace_ids, Iterable):
        ids = list(marketplace_ids)
    else:
        return {}

    if limit is not None and len(ids) > limit:
        logger.warning(f"[MWS] {len(ids)} marketplace ids given, forwarding the first {limit}")
    return enumerate_param(prefix, ids, limit=limit)
