"""
Token Codec
===========

Joins signed bytes and their MAC into a text-safe token of the form
``<data>--<mac>`` and splits such tokens back apart.

Both segments are base64 encoded without padding, using either the standard
or the URL-safe alphabet. Decoding never raises: anything that is not a
well-formed token comes back as a ``Malformed`` result.
"""

import base64
import binascii
import logging
import re
from dataclasses import dataclass
from typing import Any, Optional, Union

logger = logging.getLogger(__name__)

SEPARATOR = "--"

_STANDARD_SEGMENT = re.compile(r"\A[A-Za-z0-9+/]+={0,2}\Z")
_URL_SAFE_SEGMENT = re.compile(r"\A[A-Za-z0-9\-_]+={0,2}\Z")


@dataclass(frozen=True)
class DecodedToken:
    data: bytes
    mac: bytes


@dataclass(frozen=True)
class Malformed:
    reason: str

    def __bool__(self) -> bool:
        return False


def _b64encode(raw: bytes, url_safe: bool) -> str:
    if url_safe:
        encoded = base64.urlsafe_b64encode(raw)
    else:
        encoded = base64.b64encode(raw)
    return encoded.decode("ascii").rstrip("=")


def _b64decode(segment: str, url_safe: bool) -> Optional[bytes]:
    """Decode one segment, or None if it is not canonical base64."""
    pattern = _URL_SAFE_SEGMENT if url_safe else _STANDARD_SEGMENT
    if not pattern.match(segment):
        return None

    unpadded = segment.rstrip("=")
    if len(unpadded) % 4 == 1:
        return None
    padded = unpadded + "=" * (-len(unpadded) % 4)
    if segment != unpadded and segment != padded:
        return None

    try:
        if url_safe:
            raw = base64.urlsafe_b64decode(padded)
        else:
            raw = base64.b64decode(padded, validate=True)
    except (binascii.Error, ValueError):
        return None

    # Reject spellings with stray trailing bits
    if _b64encode(raw, url_safe) != unpadded:
        return None
    return raw


def encoded_length(size: int) -> int:
    """Length of the unpadded base64 text for size bytes."""
    return (size * 4 + 2) // 3


def encode(data: bytes, mac: bytes, url_safe: bool = False) -> str:
    """Build a token from signed bytes and their MAC."""
    return f"{_b64encode(data, url_safe)}{SEPARATOR}{_b64encode(mac, url_safe)}"


def _as_text(token: Any) -> Optional[str]:
    if isinstance(token, (bytes, bytearray)):
        try:
            return bytes(token).decode("ascii")
        except UnicodeDecodeError:
            return None
    if isinstance(token, str):
        if not token.isascii():
            return None
        return token
    return None


def _split(token: str, mac_size: Optional[int]) -> Optional[tuple]:
    if mac_size is None:
        if token.count(SEPARATOR) != 1:
            return None
        data, _, mac = token.partition(SEPARATOR)
        return data, mac

    mac_len = encoded_length(mac_size)
    if token.endswith("="):
        mac_len += -mac_len % 4
    index = len(token) - mac_len - len(SEPARATOR)
    if index <= 0 or token[index:index + len(SEPARATOR)] != SEPARATOR:
        return None
    return token[:index], token[index + len(SEPARATOR):]


def decode(
    token: Any, url_safe: bool = False, mac_size: Optional[int] = None
) -> Union[DecodedToken, Malformed]:
    """
    Split a token into its data and MAC bytes.

    Args:
        token: Candidate token (str or bytes; anything else is malformed)
        url_safe: Whether the segments use the URL-safe alphabet
        mac_size: Expected MAC size in bytes. When given, the token is split
            at the offset where a MAC of that size must start, which keeps
            URL-safe data containing "--" decodable.

    Returns:
        DecodedToken on success, Malformed otherwise
    """
    text = _as_text(token)
    if not text:
        return Malformed("not a non-empty ascii string")

    parts = _split(text, mac_size)
    if parts is None:
        return Malformed("missing or ambiguous separator")

    data_segment, mac_segment = parts
    if not data_segment or not mac_segment:
        return Malformed("empty segment")

    data = _b64decode(data_segment, url_safe)
    mac = _b64decode(mac_segment, url_safe)
    if not data or not mac:
        return Malformed("invalid encoding")

    if mac_size is not None and len(mac) != mac_size:
        return Malformed("unexpected mac length")

    return DecodedToken(data=data, mac=mac)


def is_structurally_valid(token: Any, url_safe: bool = False) -> bool:
    """True if token decodes to two non-empty byte segments."""
    return isinstance(decode(token, url_safe=url_safe), DecodedToken)
