"""
Message Verifier
================

Generates signed tokens and verifies them, trying every registered
configuration in order so that tokens signed under retired secrets, digests
or serializers keep verifying while new tokens are always signed with the
primary configuration.

Example:
    >>> verifier = MessageVerifier("s3cr3t", digest="SHA256")
    >>> verifier.rotate("old-secret", digest="SHA1")
    >>> token = verifier.generate({"user_id": 1}, purpose="login", expires_in=timedelta(hours=1))
    >>> verifier.verify(token, purpose="login")
    {'user_id': 1}
"""

import enum
import logging
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Any, Callable, Iterable, Optional, Tuple, Union

from . import token_codec
from .config import VerifierConfig
from .digest import constant_time_equal, mac
from .error_handling import ConfigurationError, InvalidSignature
from .metadata import Metadata, unwrap, wrap
from .rotation import RotationRegistry
from .utils import utc_now

logger = logging.getLogger(__name__)


class VerificationStatus(enum.Enum):
    OK = "ok"
    MALFORMED = "malformed"
    NO_MATCH = "no_match"
    PURPOSE_MISMATCH = "purpose_mismatch"
    EXPIRED = "expired"


@dataclass(frozen=True)
class VerificationResult:
    """Detailed outcome of a verification, for diagnostics."""

    status: VerificationStatus
    payload: Any = None
    rotated: bool = False
    metadata: Optional[Metadata] = None

    @property
    def valid(self) -> bool:
        return self.status is VerificationStatus.OK


class MessageVerifier:
    """
    Signs payloads into tamper-evident tokens and verifies them.

    verify() raises InvalidSignature for every kind of rejection and verified()
    returns None instead; neither reveals why a token was rejected. Payloads
    that pass the MAC check but cannot be decoded raise DeserializationError
    from both.
    """

    def __init__(
        self,
        secret: Optional[Union[str, bytes]] = None,
        *,
        config: Optional[VerifierConfig] = None,
        digest: Optional[str] = None,
        serializer: Any = None,
        url_safe: Optional[bool] = None,
        rotations: Iterable[Union[VerifierConfig, dict]] = (),
        clock: Callable[[], datetime] = utc_now,
    ):
        """
        Initialize the verifier.

        Args:
            secret: Signing secret (required unless config is given)
            config: Complete primary configuration, instead of secret/digest/
                serializer/url_safe
            digest: Digest algorithm name (default SHA1)
            serializer: Serializer name or object with encode/decode
                (default json)
            url_safe: Use the URL-safe base64 alphabet (default False)
            rotations: Rotation candidates, as configurations or as dicts of
                overrides applied to the primary configuration
            clock: Returns the current time, read once per call
        """
        options = {
            key: value
            for key, value in (
                ("digest", digest),
                ("serializer", serializer),
                ("url_safe", url_safe),
            )
            if value is not None
        }
        if config is None:
            config = VerifierConfig(secret=secret, **options)
        elif secret is not None or options:
            conflicting = ["secret"] if secret is not None else []
            conflicting.extend(options)
            raise ConfigurationError(
                "Pass either config or individual settings, not both",
                {"conflicting": ", ".join(conflicting)},
            )

        self._registry = RotationRegistry(config)
        self._clock = clock

        for rotation in rotations:
            if isinstance(rotation, dict):
                self.rotate(**rotation)
            else:
                self._registry.register(rotation)

        logger.info(
            f"Message verifier initialized: digest={config.digest}, "
            f"serializer={config.serializer!r}, rotations={len(self._registry) - 1}"
        )

    @property
    def config(self) -> VerifierConfig:
        return self._registry.primary

    @property
    def registry(self) -> RotationRegistry:
        return self._registry

    def rotate(self, secret: Optional[Union[str, bytes]] = None, **overrides) -> "MessageVerifier":
        """
        Register a configuration that is accepted for verification only.

        Unspecified attributes inherit from the primary configuration.
        Rotations must be registered before the verifier is first used.
        """
        self._registry.register(self.config.derive(secret=secret, **overrides))
        return self

    def generate(
        self,
        value: Any,
        *,
        purpose: Any = None,
        expires_at: Optional[datetime] = None,
        expires_in: Optional[timedelta] = None,
    ) -> str:
        """
        Sign a payload with the primary configuration.

        Args:
            value: Payload accepted by the configured serializer
            purpose: Context the token is bound to
            expires_at: Absolute expiry time
            expires_in: Expiry relative to now (ignored if expires_at is given)

        Returns:
            Token string "<data>--<mac>"
        """
        self._registry.freeze()
        config = self.config

        metadata = Metadata.build(
            purpose=purpose,
            expires_at=expires_at,
            expires_in=expires_in,
            now=self._clock(),
        )
        data = wrap(value, metadata, config.serializer)
        signature = mac(config.secret, config.digest, data)
        return token_codec.encode(data, signature, url_safe=config.url_safe)

    def _match(self, token: Any) -> Tuple[VerificationStatus, Optional[VerifierConfig], Optional[bytes], int]:
        """Find the first candidate whose MAC matches the token."""
        structurally_valid = False
        for index, config in enumerate(self._registry.candidates()):
            decoded = token_codec.decode(
                token, url_safe=config.url_safe, mac_size=config.mac_size
            )
            if not isinstance(decoded, token_codec.DecodedToken):
                continue
            structurally_valid = True

            expected = mac(config.secret, config.digest, decoded.data)
            if constant_time_equal(expected, decoded.mac):
                return VerificationStatus.OK, config, decoded.data, index

        status = VerificationStatus.NO_MATCH if structurally_valid else VerificationStatus.MALFORMED
        return status, None, None, -1

    def valid_message(self, token: Any) -> bool:
        """True if some candidate's MAC matches; the payload is not decoded."""
        self._registry.freeze()
        status, _, _, _ = self._match(token)
        return status is VerificationStatus.OK

    def inspect(self, token: Any, *, purpose: Any = None) -> VerificationResult:
        """
        Verify a token and report the detailed status.

        Intended for diagnostics and logging; callers deciding whether to
        trust a token should use verify() or verified().

        Raises:
            DeserializationError: If the MAC matches but the payload cannot
                be decoded
        """
        self._registry.freeze()
        now = self._clock()

        status, config, data, index = self._match(token)
        if status is not VerificationStatus.OK:
            return VerificationResult(status)

        payload, metadata = unwrap(data, config.serializer)
        checked = metadata or Metadata()

        if not checked.matches_purpose(purpose):
            return VerificationResult(VerificationStatus.PURPOSE_MISMATCH, metadata=metadata)
        if checked.is_expired(now):
            return VerificationResult(VerificationStatus.EXPIRED, metadata=metadata)

        return VerificationResult(
            VerificationStatus.OK, payload=payload, rotated=index > 0, metadata=metadata
        )

    def _resolve(self, token: Any, purpose: Any, on_rotation: Optional[Callable[[], Any]]) -> VerificationResult:
        result = self.inspect(token, purpose=purpose)
        if not result.valid:
            logger.debug(f"Token rejected: {result.status.value}")
            return result

        if result.rotated:
            logger.info("Token verified with a rotated configuration")
            if on_rotation is not None:
                on_rotation()
        return result

    def verified(
        self,
        token: Any,
        *,
        purpose: Any = None,
        on_rotation: Optional[Callable[[], Any]] = None,
    ) -> Any:
        """
        Return the payload of a valid token, or None.

        Args:
            token: Token produced by generate
            purpose: Purpose the token must have been generated with
            on_rotation: Called when the token matched a rotated configuration

        Raises:
            DeserializationError: If the payload cannot be decoded
        """
        result = self._resolve(token, purpose, on_rotation)
        return result.payload if result.valid else None

    def verify(
        self,
        token: Any,
        *,
        purpose: Any = None,
        on_rotation: Optional[Callable[[], Any]] = None,
    ) -> Any:
        """
        Return the payload of a valid token.

        Raises:
            InvalidSignature: If the token is malformed, forged, bound to
                another purpose or expired
            DeserializationError: If the payload cannot be decoded
        """
        result = self._resolve(token, purpose, on_rotation)
        if not result.valid:
            raise InvalidSignature()
        return result.payload
