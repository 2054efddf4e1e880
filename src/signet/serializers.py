"""
Payload Serializers
===================

Serializers turn payloads into the bytes that get signed and back again.
Every serializer implements the same small interface so the verifier never
needs to know which format it is dealing with.

Available serializers:
- json: orjson encoded payloads (default)
- pickle: Python's native object format, optionally through dill
- hybrid: JSON encoding with fallback to reading pickled payloads
- null: pre-serialized bytes passed through unchanged
"""

import logging
import pickle
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Optional, Tuple

import dill

from . import json_utils
from .error_handling import (
    ConfigurationError,
    DeserializationError,
    SerializationError,
    with_error_handling,
)

logger = logging.getLogger(__name__)

# Pickle protocol 2 and later start with the PROTO opcode
PICKLE_MARKER = b"\x80"


@dataclass(frozen=True)
class DecodeOutcome:
    """Result of a single decode attempt."""

    ok: bool
    value: Any = None
    error: Optional[DeserializationError] = None


class Serializer(ABC):
    """Abstract base class for payload serializers."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Short identifier used in configuration and error context."""
        pass

    @abstractmethod
    def encode(self, value: Any) -> bytes:
        """Serialize a payload to bytes."""
        pass

    @abstractmethod
    def decode(self, data: bytes) -> Any:
        """
        Deserialize bytes produced by encode.

        Raises:
            DeserializationError: If the bytes cannot be decoded
        """
        pass

    def try_decode(self, data: bytes) -> DecodeOutcome:
        """Decode without raising, reporting the failure in the outcome."""
        try:
            return DecodeOutcome(ok=True, value=self.decode(data))
        except DeserializationError as e:
            return DecodeOutcome(ok=False, error=e)

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"


class JsonSerializer(Serializer):
    """Serializer for JSON payloads."""

    @property
    def name(self) -> str:
        return "json"

    @with_error_handling(SerializationError, context={"serializer": "json"})
    def encode(self, value: Any) -> bytes:
        return json_utils.dumps(value)

    @with_error_handling(DeserializationError, context={"serializer": "json"})
    def decode(self, data: bytes) -> Any:
        return json_utils.loads(data)


class PickleSerializer(Serializer):
    """
    Serializer for Python's native object format.

    Payloads that reference classes the reading process cannot import fail
    with DeserializationError. Only use this format between parties that
    trust each other's secrets: unpickling runs code named by the payload.
    """

    def __init__(self, use_dill: bool = False):
        self.use_dill = use_dill
        self._backend = dill if use_dill else pickle

    @property
    def name(self) -> str:
        return "pickle"

    @with_error_handling(SerializationError, context={"serializer": "pickle"})
    def encode(self, value: Any) -> bytes:
        return self._backend.dumps(value, protocol=pickle.DEFAULT_PROTOCOL)

    @with_error_handling(DeserializationError, context={"serializer": "pickle"})
    def decode(self, data: bytes) -> Any:
        return self._backend.loads(data)

    def __repr__(self) -> str:
        return f"PickleSerializer(use_dill={self.use_dill})"


class HybridSerializer(Serializer):
    """
    JSON serializer that can still read pickled payloads.

    Used while migrating signed data from the pickle format to JSON: new
    payloads are written as JSON unless use_pickle_serialization is set,
    and payloads carrying the pickle protocol marker are read with pickle
    when fallback_to_pickle_deserialization is set.
    """

    def __init__(
        self,
        use_pickle_serialization: bool = False,
        fallback_to_pickle_deserialization: bool = True,
        use_dill: bool = False,
    ):
        self.use_pickle_serialization = use_pickle_serialization
        self.fallback_to_pickle_deserialization = fallback_to_pickle_deserialization
        self._json = JsonSerializer()
        self._pickle = PickleSerializer(use_dill=use_dill)

    @property
    def name(self) -> str:
        return "hybrid"

    def encode(self, value: Any) -> bytes:
        if self.use_pickle_serialization:
            return self._pickle.encode(value)
        return self._json.encode(value)

    def _decoders_for(self, data: bytes) -> Tuple[Serializer, ...]:
        """Ordered decode attempts for the given bytes."""
        if self.fallback_to_pickle_deserialization and data.startswith(PICKLE_MARKER):
            logger.debug("Payload carries pickle marker, decoding with pickle")
            return (self._pickle,)
        return (self._json,)

    def decode(self, data: bytes) -> Any:
        failure = None
        for decoder in self._decoders_for(data):
            outcome = decoder.try_decode(data)
            if outcome.ok:
                return outcome.value
            failure = outcome.error
        raise failure

    def __repr__(self) -> str:
        return (
            f"HybridSerializer(use_pickle_serialization={self.use_pickle_serialization}, "
            f"fallback_to_pickle_deserialization={self.fallback_to_pickle_deserialization})"
        )


class NullSerializer(Serializer):
    """Pass-through serializer for payloads that are already bytes."""

    @property
    def name(self) -> str:
        return "null"

    def encode(self, value: Any) -> bytes:
        if isinstance(value, str):
            return value.encode("utf-8")
        if isinstance(value, (bytes, bytearray, memoryview)):
            return bytes(value)
        raise SerializationError(
            f"NullSerializer expects bytes or str, got {type(value).__name__}",
            {"serializer": "null"},
        )

    def decode(self, data: bytes) -> Any:
        return data


SERIALIZERS = {
    "json": JsonSerializer,
    "pickle": PickleSerializer,
    "hybrid": HybridSerializer,
    "null": NullSerializer,
}


def get_serializer(serializer: Any) -> Any:
    """
    Resolve a serializer name or object.

    Args:
        serializer: One of the names in SERIALIZERS, or any object exposing
            encode(value) -> bytes and decode(bytes) -> value

    Returns:
        Serializer object

    Raises:
        ConfigurationError: For unknown names or objects missing encode/decode
    """
    if isinstance(serializer, str):
        key = serializer.lower()
        if key not in SERIALIZERS:
            raise ConfigurationError(
                f"Unknown serializer: {serializer}",
                {"serializer": serializer, "available": ",".join(SERIALIZERS)},
            )
        return SERIALIZERS[key]()

    if callable(getattr(serializer, "encode", None)) and callable(
        getattr(serializer, "decode", None)
    ):
        return serializer

    raise ConfigurationError(
        f"Serializer must provide encode and decode, got {type(serializer).__name__}",
        {"serializer": repr(serializer)},
    )
