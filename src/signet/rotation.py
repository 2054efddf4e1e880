"""
Rotation Registry
=================

Ordered list of verification configurations. The primary configuration is
always first and is the only one used to generate tokens; the configurations
registered after it are only used to verify older tokens.
"""

import logging
from typing import Iterator, List

from .config import VerifierConfig
from .error_handling import ConfigurationError

logger = logging.getLogger(__name__)


class RotationRegistry:
    """Registry of verification configurations tried in registration order."""

    def __init__(self, primary: VerifierConfig):
        if not isinstance(primary, VerifierConfig):
            raise ConfigurationError(
                f"Expected VerifierConfig, got {type(primary).__name__}"
            )
        self._configs: List[VerifierConfig] = [primary]
        self._frozen = False

    @property
    def primary(self) -> VerifierConfig:
        return self._configs[0]

    @property
    def frozen(self) -> bool:
        return self._frozen

    def register(self, config: VerifierConfig) -> VerifierConfig:
        """Append a rotation candidate."""
        if self._frozen:
            raise ConfigurationError(
                "Cannot register rotations after the verifier has been used"
            )
        if not isinstance(config, VerifierConfig):
            raise ConfigurationError(
                f"Expected VerifierConfig, got {type(config).__name__}"
            )
        self._configs.append(config)
        logger.debug(
            f"Registered rotation #{len(self._configs) - 1}: digest={config.digest}, "
            f"serializer={config.serializer!r}, url_safe={config.url_safe}"
        )
        return config

    def freeze(self) -> None:
        """Stop accepting registrations."""
        if not self._frozen:
            self._frozen = True
            logger.debug(f"Rotation registry frozen with {len(self._configs)} candidate(s)")

    def candidates(self) -> Iterator[VerifierConfig]:
        """Primary configuration followed by rotations, in registration order."""
        return iter(tuple(self._configs))

    def __len__(self) -> int:
        return len(self._configs)
