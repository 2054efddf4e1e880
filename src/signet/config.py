"""
Configuration Management for Signet
===================================

A verification configuration bundles everything needed to sign or check a
token: the secret, the digest algorithm, the payload serializer and the
token alphabet. Configurations are immutable; rotating keys means creating a
new configuration, never changing an existing one.
"""

import logging
from dataclasses import dataclass, field, fields, replace
from typing import Any, Union

from .digest import digest_size, resolve_digest
from .error_handling import ConfigurationError
from .serializers import get_serializer

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class VerifierConfig:
    """Secret, digest, serializer and alphabet used to sign or verify tokens."""

    secret: Union[str, bytes] = field(repr=False)
    digest: str = "SHA1"
    serializer: Any = "json"
    url_safe: bool = False

    def __post_init__(self):
        """Validate and normalize the configuration."""
        secret = self.secret
        if secret is None:
            raise ConfigurationError("Secret should not be nil.")
        if isinstance(secret, str):
            secret = secret.encode("utf-8")
        elif isinstance(secret, (bytearray, memoryview)):
            secret = bytes(secret)
        elif not isinstance(secret, bytes):
            raise ConfigurationError(
                f"Secret must be str or bytes, got {type(secret).__name__}"
            )
        if not secret:
            raise ConfigurationError("Secret should not be empty.")

        # Frozen dataclass: normalize through object.__setattr__
        object.__setattr__(self, "secret", secret)
        object.__setattr__(self, "digest", resolve_digest(self.digest).upper())
        object.__setattr__(self, "serializer", get_serializer(self.serializer))
        object.__setattr__(self, "url_safe", bool(self.url_safe))

        logger.debug(
            f"Verifier configured: digest={self.digest}, "
            f"serializer={self.serializer!r}, url_safe={self.url_safe}"
        )

    @property
    def mac_size(self) -> int:
        return digest_size(self.digest)

    def derive(self, **overrides) -> "VerifierConfig":
        """
        Create a configuration from this one.

        Attributes not given in overrides (or given as None) are inherited.
        """
        known = {f.name for f in fields(self)}
        unknown = set(overrides) - known
        if unknown:
            raise ConfigurationError(
                f"Unknown configuration parameters: {', '.join(sorted(unknown))}"
            )
        changes = {k: v for k, v in overrides.items() if v is not None}
        return replace(self, **changes)


def create_verifier_config(secret: Union[str, bytes], **overrides) -> VerifierConfig:
    """
    Factory function for creating configurations.

    Args:
        secret: Signing secret
        **overrides: digest, serializer or url_safe values

    Returns:
        Configured VerifierConfig instance
    """
    known = {f.name for f in fields(VerifierConfig)}
    params = {}
    for key, value in overrides.items():
        if key in known:
            params[key] = value
        else:
            logger.warning(f"Unknown configuration parameter ignored: {key}")
    return VerifierConfig(secret=secret, **params)
