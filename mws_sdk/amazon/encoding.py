"""
Percent-encoding with explicit state.

A value that has been percent-encoded once is wrapped in ``Encoded`` and
the serializer passes it through untouched. Plain strings are always
encoded on the way out.
"""
from urllib.parse import quote, unquote

# Characters encodeURIComponent leaves alone on top of quote()'s "_.-~".
SAFE_CHARS = "!*'()"


class Encoded(str):
    """A string that is already percent-encoded."""

    __slots__ = ()


def percent_encode(value: object) -> Encoded:
    if isinstance(value, Encoded):
        return value
    return Encoded(quote(str(value), safe=SAFE_CHARS))


def ensure_encoded(value: object) -> Encoded:
    """
    Encode a caller supplied value exactly once.

    Callers may hand over a value they copied out of a previous response
    in either form, so a plain string that decoding would change is taken
    to be encoded already.
    """
    if isinstance(value, Encoded):
        return value
    text = str(value)
    if unquote(text) != text:
        return Encoded(text)
    return percent_encode(text)
