"""
MWS transport and response decoding.

One HTTPS POST per request, no retries and no timeout. MWS reports
failures as XML documents too, so error statuses are decoded like any
other response.
"""
import codecs
from typing import Any, Optional
from xml.parsers.expat import ExpatError

import aiohttp
import xmltodict
from yarl import URL

from mws_sdk.amazon.models import OutputMode, SignedRequest
from mws_sdk.errors import ResponseParseError
from mws_sdk.logging import get_logger

logger = get_logger("mws_sdk.transport")

DEFAULT_CHARSET = "utf-8"


class _LocalNames(dict):
    """Namespace map that shortens every namespace to nothing."""

    def __missing__(self, key: str) -> None:
        return None

    def get(self, key: str, default: Any = None) -> None:
        return None


def decode_body(raw: bytes, charset: Optional[str] = None) -> str:
    """Decode a response body; undecodable bytes become U+FFFD."""
    try:
        codec = codecs.lookup(charset or DEFAULT_CHARSET).name
    except LookupError:
        codec = DEFAULT_CHARSET
    return raw.decode(codec, errors="replace")


async def _post(session: aiohttp.ClientSession, request: SignedRequest) -> str:
    # The query is already signed and encoded; yarl must not requote it.
    url = URL(request.url, encoded=True)
    async with session.post(url, data=request.body, headers=request.headers) as response:
        body = decode_body(await response.read(), response.charset)
        if response.status >= 400:
            logger.warning(
                f"[MWS] {request.action} returned HTTP {response.status}"
            )
        else:
            logger.debug(f"[MWS] {request.action} returned HTTP {response.status}")
        return body


async def send(
    request: SignedRequest,
    session: Optional[aiohttp.ClientSession] = None,
) -> str:
    """
    POST a signed request and return the full response body.

    Args:
        request: Signed request
        session: Session to reuse; a short lived one is opened otherwise

    Raises:
        aiohttp.ClientError: On connection or protocol failures
    """
    if session is not None:
        return await _post(session, request)
    async with aiohttp.ClientSession() as own_session:
        return await _post(own_session, request)


def decode_response(body: str, output: OutputMode = OutputMode.STRUCTURED) -> Any:
    """
    Decode a response body.

    Structured output is the content of the document's root element as
    nested dictionaries, keyed by local names with namespaces dropped.
    Raw output is the body unchanged.

    Raises:
        ResponseParseError: If structured output was requested and the body
            is not well-formed XML. The raw body is attached to the error.
    """
    if OutputMode(output) is OutputMode.RAW:
        return body
    try:
        document = xmltodict.parse(body, process_namespaces=True, namespaces=_LocalNames())
    except ExpatError as exc:
        raise ResponseParseError(f"Could not parse MWS response: {exc}", body=body) from exc
    content = document[next(iter(document))]
    if isinstance(content, dict):
        # Declarations are reported alongside any other root attributes.
        content.pop("@xmlns", None)
    return content
