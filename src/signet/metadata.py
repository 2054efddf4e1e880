"""
Metadata Envelope
=================

Wraps a serialized payload together with optional metadata (purpose and
expiry) before signing, and unwraps it again after verification.

Payloads signed without metadata are stored as the bare serializer output, so
tokens produced before metadata existed keep verifying. Payloads with metadata
are stored in a JSON envelope whatever the payload serializer is::

    {"_signet": {"message": "<base64 payload>", "exp": "<timestamp>", "pur": "<purpose>"}}
"""

import base64
import binascii
import logging
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Any, Optional, Tuple

from . import json_utils
from .error_handling import DeserializationError, with_error_handling
from .utils import format_timestamp, parse_timestamp, to_utc, utc_now

logger = logging.getLogger(__name__)

ENVELOPE_KEY = "_signet"


@dataclass(frozen=True)
class Metadata:
    """Purpose and expiry bound to a signed payload."""

    purpose: Optional[str] = None
    expires_at: Optional[datetime] = None

    @classmethod
    def build(
        cls,
        purpose: Any = None,
        expires_at: Optional[datetime] = None,
        expires_in: Optional[timedelta] = None,
        now: Optional[datetime] = None,
    ) -> Optional["Metadata"]:
        """
        Create metadata from generation options.

        Returns None when no option is given. expires_in is counted from now;
        an explicit expires_at takes precedence over it.
        """
        if purpose is None and expires_at is None and expires_in is None:
            return None

        if expires_at is None and expires_in is not None:
            expires_at = (now or utc_now()) + expires_in

        if expires_at is not None:
            # Stored with millisecond precision
            expires_at = to_utc(expires_at)
            expires_at = expires_at.replace(
                microsecond=expires_at.microsecond // 1000 * 1000
            )

        return cls(
            purpose=None if purpose is None else str(purpose),
            expires_at=expires_at,
        )

    def matches_purpose(self, purpose: Any) -> bool:
        expected = None if purpose is None else str(purpose)
        return self.purpose == expected

    def is_expired(self, now: datetime) -> bool:
        return self.expires_at is not None and to_utc(now) >= self.expires_at

    def to_dict(self) -> dict:
        fields = {}
        if self.expires_at is not None:
            fields["exp"] = format_timestamp(self.expires_at)
        if self.purpose is not None:
            fields["pur"] = self.purpose
        return fields


def wrap(payload: Any, metadata: Optional[Metadata], serializer: Any) -> bytes:
    """
    Serialize payload, adding the metadata envelope when metadata is given.

    Payloads without metadata are returned bare unless their serialized form
    would itself read as an envelope; those are wrapped in an empty one so
    unwrap cannot mistake them for metadata.
    """
    serialized = serializer.encode(payload)
    if metadata is None:
        if _read_envelope(serialized) is None:
            return serialized
        metadata = Metadata()

    envelope = {"message": base64.b64encode(serialized).decode("ascii")}
    envelope.update(metadata.to_dict())
    return json_utils.dumps({ENVELOPE_KEY: envelope})


def _read_envelope(data: bytes) -> Optional[dict]:
    """Return the envelope fields, or None if data is not an envelope."""
    if not data.startswith(b"{"):
        return None
    try:
        document = json_utils.loads(data)
    except json_utils.JSONDecodeError:
        return None

    if not isinstance(document, dict) or set(document) != {ENVELOPE_KEY}:
        return None
    fields = document[ENVELOPE_KEY]
    if not isinstance(fields, dict) or not isinstance(fields.get("message"), str):
        return None
    return fields


def _open_envelope(fields: dict) -> Tuple[bytes, Metadata]:
    try:
        message = base64.b64decode(fields["message"], validate=True)
        expires_at = fields.get("exp")
        if expires_at is not None:
            expires_at = parse_timestamp(expires_at)
    except (binascii.Error, ValueError) as e:
        raise DeserializationError(
            f"Corrupt metadata envelope: {e}",
            {"original_error_type": type(e).__name__},
        ) from e

    purpose = fields.get("pur")
    return message, Metadata(
        purpose=None if purpose is None else str(purpose), expires_at=expires_at
    )


@with_error_handling(DeserializationError)
def _decode_payload(serializer: Any, data: bytes) -> Any:
    return serializer.decode(data)


def unwrap(data: bytes, serializer: Any) -> Tuple[Any, Optional[Metadata]]:
    """
    Recover the payload and its metadata from signed bytes.

    Bytes that are not a metadata envelope are decoded as a bare payload.

    Raises:
        DeserializationError: If the serializer cannot decode the payload
    """
    fields = _read_envelope(data)
    if fields is None:
        return _decode_payload(serializer, data), None

    message, metadata = _open_envelope(fields)
    logger.debug(f"Unwrapped metadata envelope (purpose set: {metadata.purpose is not None})")
    return _decode_payload(serializer, message), metadata
