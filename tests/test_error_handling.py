"""
Tests for the error_handling module.
"""

import logging

import pytest

from signet.error_handling import (
    ConfigurationError,
    DeserializationError,
    InvalidSignature,
    SerializationError,
    SignetError,
    with_error_handling,
)


class TestSignetErrorHierarchy:
    """Test the exception hierarchy."""

    def test_base_initialization(self):
        error = SignetError("Test message")
        assert str(error) == "Test message"
        assert error.context == {}

        context = {"key1": "value1", "key2": 42}
        error = SignetError("Test message", context)
        assert error.context == context

    def test_error_logging(self, caplog):
        with caplog.at_level(logging.ERROR):
            SignetError("Test error", {"operation": "test"})

        assert "Signet error: Test error" in caplog.text
        assert "operation=test" in caplog.text

    @pytest.mark.parametrize(
        "error_type", [ConfigurationError, DeserializationError, SerializationError]
    )
    def test_specific_error_types(self, error_type):
        error = error_type("Test message", {"type": error_type.__name__})
        assert isinstance(error, SignetError)
        assert error.context["type"] == error_type.__name__

    def test_invalid_signature_carries_no_reason(self, caplog):
        with caplog.at_level(logging.WARNING):
            error = InvalidSignature()
        assert str(error) == "Invalid signature"
        assert error.context == {}
        assert caplog.records[-1].levelno == logging.WARNING

    def test_deserialization_is_not_invalid_signature(self):
        assert not issubclass(DeserializationError, InvalidSignature)
        assert not issubclass(InvalidSignature, DeserializationError)


class TestWithErrorHandlingDecorator:
    """Test the with_error_handling decorator."""

    def test_reraises_signet_errors(self):
        @with_error_handling()
        def failing_function():
            raise ConfigurationError("Original error")

        with pytest.raises(ConfigurationError, match="Original error"):
            failing_function()

    def test_converts_other_exceptions(self):
        @with_error_handling(error_type=DeserializationError, context={"serializer": "x"})
        def failing_function():
            raise ValueError("Original error")

        with pytest.raises(DeserializationError) as exc_info:
            failing_function()

        assert "Error in failing_function: Original error" in str(exc_info.value)
        assert exc_info.value.context["serializer"] == "x"
        assert exc_info.value.context["original_error_type"] == "ValueError"
        assert isinstance(exc_info.value.__cause__, ValueError)

    def test_suppresses_when_not_reraising(self, caplog):
        @with_error_handling(reraise=False, default_return="fallback")
        def failing_function():
            raise ValueError("boom")

        with caplog.at_level(logging.WARNING):
            assert failing_function() == "fallback"
        assert "Suppressed error in failing_function" in caplog.text

    def test_passes_through_results(self):
        @with_error_handling()
        def working_function(a, b=2):
            return a + b

        assert working_function(1, b=3) == 4
