"""
Message Authentication Codes
============================

HMAC computation over arbitrary bytes and constant-time comparison of the
resulting codes.
"""

import hashlib
import hmac
import logging
from typing import Any

from .error_handling import ConfigurationError

logger = logging.getLogger(__name__)

# Accepted identifiers mapped to hashlib names
SUPPORTED_DIGESTS = {
    "MD5": "md5",
    "SHA1": "sha1",
    "SHA224": "sha224",
    "SHA256": "sha256",
    "SHA384": "sha384",
    "SHA512": "sha512",
}


def resolve_digest(name: str) -> str:
    """
    Normalize a digest identifier to its hashlib name.

    "SHA256", "sha256" and "SHA-256" all resolve to "sha256".

    Raises:
        ConfigurationError: If the identifier is not a supported digest
    """
    if not isinstance(name, str):
        raise ConfigurationError(
            f"Digest must be a string, got {type(name).__name__}",
            {"digest": repr(name)},
        )

    key = name.upper().replace("-", "").replace("_", "")
    if key not in SUPPORTED_DIGESTS:
        raise ConfigurationError(
            f"Unsupported digest: {name}",
            {"digest": name, "supported": ",".join(sorted(SUPPORTED_DIGESTS))},
        )
    return SUPPORTED_DIGESTS[key]


def digest_size(name: str) -> int:
    """Size in bytes of a MAC produced with the given digest."""
    return hashlib.new(resolve_digest(name)).digest_size


def mac(secret: bytes, algorithm: str, data: bytes) -> bytes:
    """Compute the HMAC of data under secret using the given digest."""
    return hmac.new(secret, data, resolve_digest(algorithm)).digest()


def constant_time_equal(a: Any, b: Any) -> bool:
    """
    Compare two MACs in time independent of where they first differ.

    Inputs of different length, or inputs that are not bytes, compare unequal
    instead of raising.
    """
    if not isinstance(a, (bytes, bytearray)) or not isinstance(b, (bytes, bytearray)):
        return False
    if len(a) != len(b):
        return False
    return hmac.compare_digest(a, b)
