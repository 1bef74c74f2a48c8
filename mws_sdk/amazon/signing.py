"""
MWS Signature Version 2.

The string to sign is built from the unencoded parameter values; only
colons in timestamp-like values are escaped. Amazon computes the same
string on its side, so the exact byte sequence matters.
"""
import base64
import hashlib
import hmac
from collections.abc import Mapping

from mws_sdk.amazon.endpoints import Endpoint
from mws_sdk.settings import MWSConfig

HTTP_METHOD = "POST"

_COLON_ESCAPED_MARKERS = ("Date", "Created")

_STRING_TO_SIGN_ESCAPES = (
    ("'", "%27"),
    ("*", "%2A"),
    ("(", "%28"),
    (")", "%29"),
    (" ", "%20"),
)


def _escapes_colons(key: str) -> bool:
    return key == "Timestamp" or any(marker in key for marker in _COLON_ESCAPED_MARKERS)


def canonicalize(params: Mapping[str, str]) -> str:
    """Join parameters as ``key=value`` pairs in ordinal key order."""
    pairs = []
    for key in sorted(params):
        value = str(params[key])
        if _escapes_colons(key):
            value = value.replace(":", "%3A")
        pairs.append(f"{key}={value}")
    return "&".join(pairs)


def build_string_to_sign(host: str, endpoint: Endpoint, params: Mapping[str, str]) -> str:
    string_to_sign = "\n".join(
        [HTTP_METHOD, host, endpoint.resource, canonicalize(params)]
    )
    for char, escaped in _STRING_TO_SIGN_ESCAPES:
        string_to_sign = string_to_sign.replace(char, escaped)
    return string_to_sign


def generate_signature(config: MWSConfig, params: Mapping[str, str], endpoint: Endpoint) -> str:
    """
    Sign request parameters with the account's secret key.

    Args:
        config: Validated configuration (host and secret key are used)
        params: Every request parameter except ``Signature``
        endpoint: Endpoint family the request is sent to

    Returns:
        Base64 encoded HMAC-SHA256 digest
    """
    string_to_sign = build_string_to_sign(config.host, endpoint, params)
    digest = hmac.new(
        config.secret_key.encode("utf-8"),
        string_to_sign.encode("utf-8"),
        hashlib.sha256,
    ).digest()
    return base64.b64encode(digest).decode("ascii")
