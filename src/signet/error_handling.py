"""
Standardized Error Handling for Signet
======================================

This module provides the exception hierarchy and error handling helpers shared
by the signing and verification code.
"""

import functools
import logging
from typing import Any, Callable, Dict, Optional, Type

logger = logging.getLogger(__name__)


class SignetError(Exception):
    """Base exception for all signet errors."""

    log_level = logging.ERROR

    def __init__(self, message: str, context: Optional[Dict[str, Any]] = None):
        self.context = context or {}
        super().__init__(message)

        # Log error with context for debugging
        context_str = ", ".join(f"{k}={v}" for k, v in self.context.items())
        logger.log(
            self.log_level,
            f"Signet error: {message}" + (f" ({context_str})" if context_str else ""),
        )


class ConfigurationError(SignetError):
    """Raised when a verifier configuration is invalid."""

    pass


class InvalidSignature(SignetError):
    """
    Raised when a token cannot be verified.

    Malformed tokens, MAC mismatches, purpose mismatches and expired tokens all
    raise this same error with the same message.
    """

    log_level = logging.WARNING

    def __init__(self, message: str = "Invalid signature"):
        super().__init__(message)


class SerializationError(SignetError):
    """Raised when a payload cannot be encoded by the configured serializer."""

    pass


class DeserializationError(SignetError):
    """Raised when an authentic payload cannot be decoded by its serializer."""

    pass


def with_error_handling(
    error_type: Type[SignetError] = SignetError,
    context: Optional[Dict[str, Any]] = None,
    reraise: bool = True,
    default_return: Any = None,
):
    """
    Decorator for standardized error handling.

    Args:
        error_type: Type of SignetError to raise
        context: Additional context to include in error
        reraise: Whether to reraise the exception after logging
        default_return: Value to return if not reraising
    """

    def decorator(func: Callable) -> Callable:
        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            try:
                return func(*args, **kwargs)
            except SignetError:
                # Re-raise signet errors as-is
                raise
            except Exception as e:
                error_context = (context or {}).copy()
                error_context.update(
                    {
                        "function": func.__name__,
                        "original_error": str(e),
                        "original_error_type": type(e).__name__,
                    }
                )

                error_msg = f"Error in {func.__name__}: {e}"

                if reraise:
                    raise error_type(error_msg, error_context) from e
                else:
                    logger.warning(f"Suppressed error in {func.__name__}: {e}")
                    return default_return

        return wrapper

    return decorator
