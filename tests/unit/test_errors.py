"""Unit tests for categorized errors."""

import asyncio

import pytest

from design_qa.errors import (
    CaptureError,
    ComparisonTimeoutError,
    ConfigurationError,
    DesignQAError,
    DesignSourceError,
    ErrorCategory,
    InvalidElementError,
    classify_error,
)


class TestDesignQAError:
    """Tests for the base error."""

    def test_format_plain(self):
        """Test message, suggestion and details without color."""
        error = DesignQAError(
            category=ErrorCategory.RUNTIME,
            message="Something broke",
            suggestion="Try again",
            details={"step": "match"},
        )

        assert error.format(use_color=False) == (
            "Error: Something broke\nSuggestion: Try again\n  step: match"
        )
        assert str(error) == error.format(use_color=False)

    def test_format_colored(self):
        """Test ANSI codes when color is enabled."""
        error = DesignQAError(category=ErrorCategory.RUNTIME, message="x")
        assert "\033[91m" in error.format(use_color=True)

    def test_to_dict(self):
        """Test JSON serialization."""
        error = DesignQAError(category=ErrorCategory.NETWORK, message="offline")
        assert error.to_dict() == {
            "category": "network",
            "message": "offline",
            "suggestion": None,
            "details": {},
        }

    def test_is_exception(self):
        """Test errors can be raised and caught."""
        with pytest.raises(DesignQAError, match="boom"):
            raise DesignQAError(category=ErrorCategory.RUNTIME, message="boom")


class TestSubclasses:
    """Tests for specific error types."""

    def test_invalid_element(self):
        """Test invalid elements are validation errors and ValueErrors."""
        error = InvalidElementError("bad box", element_id="1:2")
        assert isinstance(error, ValueError)
        assert error.category == ErrorCategory.VALIDATION
        assert error.details == {"element_id": "1:2"}

    def test_timeout(self):
        """Test the timeout message names the budget."""
        error = ComparisonTimeoutError(300)
        assert error.category == ErrorCategory.TIMEOUT
        assert "taking longer than expected" in error.message
        assert "300s" in error.message

    def test_capture(self):
        """Test page load failures name the URL."""
        error = CaptureError("https://example.com", "net::ERR_FAILED")
        assert error.category == ErrorCategory.PAGE_LOAD
        assert error.message.startswith("Failed to load website: https://example.com")
        assert "net::ERR_FAILED" in error.message

    def test_design_source(self):
        """Test access and not-found design errors."""
        assert DesignSourceError("denied").category == ErrorCategory.DESIGN_ACCESS
        assert (
            DesignSourceError("gone", not_found=True).category
            == ErrorCategory.DESIGN_NOT_FOUND
        )

    def test_configuration(self):
        """Test configuration errors record the file."""
        error = ConfigurationError("bad", "qa.json")
        assert error.category == ErrorCategory.CONFIGURATION
        assert error.details == {"config_file": "qa.json"}


class TestClassifyError:
    """Tests for mapping arbitrary exceptions."""

    def test_passthrough(self):
        """Test categorized errors are returned unchanged."""
        error = CaptureError("https://example.com")
        assert classify_error(error) is error

    def test_timeout_types(self):
        """Test timeout exceptions map to TIMEOUT."""
        assert classify_error(asyncio.TimeoutError()).category == ErrorCategory.TIMEOUT
        assert classify_error(TimeoutError()).category == ErrorCategory.TIMEOUT

    @pytest.mark.parametrize(
        "message,category",
        [
            ("Timeout 30000ms exceeded while loading figma", ErrorCategory.TIMEOUT),
            ("Failed to load website: https://x", ErrorCategory.PAGE_LOAD),
            ("page.goto: Navigation failed", ErrorCategory.PAGE_LOAD),
            ("Figma API error 403 Forbidden", ErrorCategory.DESIGN_ACCESS),
            ("figma returned 404", ErrorCategory.DESIGN_NOT_FOUND),
            ("getaddrinfo ENOTFOUND api.figma.com", ErrorCategory.NETWORK),
            ("network unreachable", ErrorCategory.NETWORK),
            ("division by zero", ErrorCategory.RUNTIME),
        ],
    )
    def test_message_keywords(self, message, category):
        """Test categories inferred from messages."""
        assert classify_error(RuntimeError(message)).category == category

    def test_connection_error_type(self):
        """Test connection errors are network errors regardless of text."""
        assert classify_error(ConnectionResetError("reset")).category == ErrorCategory.NETWORK

    def test_details_and_empty_message(self):
        """Test the original type is recorded and used as fallback text."""
        error = classify_error(KeyError())
        assert error.details == {"error_type": "KeyError"}
        assert error.message == "KeyError"
