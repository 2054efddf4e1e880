"""
signet - Tamper-evident message signing and verification.

Signs arbitrary payloads into self-contained tokens that prove the payload
was produced by a holder of a shared secret and was not altered in transit.
Useful for cookies, signed URLs and tokens passed between processes.

Key Features:
- HMAC signatures with SHA1/SHA256/SHA512 and friends
- Key rotation: verify tokens signed with retired secrets or digests
- Purpose binding and expiry embedded in the signed token
- Pluggable payload serializers (JSON, pickle, hybrid, pass-through)
- Standard or URL-safe token alphabet

Quick Start:
    >>> from signet import MessageVerifier
    >>>
    >>> verifier = MessageVerifier("my secret", digest="SHA256")
    >>> token = verifier.generate({"user_id": 42}, purpose="password-reset")
    >>> verifier.verify(token, purpose="password-reset")
    {'user_id': 42}
"""

from .config import VerifierConfig, create_verifier_config
from .error_handling import (
    ConfigurationError,
    DeserializationError,
    InvalidSignature,
    SerializationError,
    SignetError,
)
from .metadata import Metadata
from .rotation import RotationRegistry
from .serializers import (
    HybridSerializer,
    JsonSerializer,
    NullSerializer,
    PickleSerializer,
    Serializer,
    get_serializer,
)
from .verifier import MessageVerifier, VerificationResult, VerificationStatus

__version__ = "0.1.0"

__all__ = [
    # Core classes
    "MessageVerifier",
    "VerifierConfig",
    "create_verifier_config",
    "RotationRegistry",
    "Metadata",
    "VerificationResult",
    "VerificationStatus",
    # Serializers
    "Serializer",
    "JsonSerializer",
    "PickleSerializer",
    "HybridSerializer",
    "NullSerializer",
    "get_serializer",
    # Errors
    "SignetError",
    "ConfigurationError",
    "InvalidSignature",
    "DeserializationError",
    "SerializationError",
    # Version info
    "__version__",
]
