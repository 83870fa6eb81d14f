"""Structured error types with user-facing recovery suggestions.

The comparison core only raises for malformed input. Collaborators
(design retrieval, page capture) and the pipeline raise categorized
errors so callers can show a meaningful message for each failure class.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class ErrorCategory(Enum):
    """Categories of failures surfaced to the caller."""

    VALIDATION = "validation"  # Malformed elements or arguments
    TIMEOUT = "timeout"  # Pipeline exceeded its wall-clock budget
    PAGE_LOAD = "page_load"  # Live page could not be loaded
    DESIGN_ACCESS = "design_access"  # Design source refused access
    DESIGN_NOT_FOUND = "design_not_found"  # File or frame missing
    NETWORK = "network"  # DNS / connectivity
    CONFIGURATION = "configuration"  # Bad config file or settings
    RUNTIME = "runtime"  # Anything else


@dataclass(eq=False)
class DesignQAError(Exception):
    """Base class for categorized errors.

    Attributes:
        category: Error category for grouping.
        message: Human-readable error message.
        suggestion: Optional actionable recovery suggestion.
        details: Optional additional details dict.
    """

    category: ErrorCategory
    message: str
    suggestion: str | None = None
    details: dict[str, Any] | None = field(default_factory=dict)

    def __post_init__(self) -> None:
        """Initialize the exception with the message."""
        super().__init__(self.message)

    def format(self, use_color: bool = True) -> str:
        """Format the error for display.

        Args:
            use_color: Whether to include ANSI color codes.

        Returns:
            Formatted error string with suggestion if available.
        """
        red = "\033[91m" if use_color else ""
        cyan = "\033[96m" if use_color else ""
        dim = "\033[2m" if use_color else ""
        reset = "\033[0m" if use_color else ""

        lines = [f"{red}Error:{reset} {self.message}"]

        if self.suggestion:
            lines.append(f"{cyan}Suggestion:{reset} {self.suggestion}")

        if self.details:
            for key, value in self.details.items():
                lines.append(f"{dim}  {key}: {value}{reset}")

        return "\n".join(lines)

    def __str__(self) -> str:
        """Return the formatted error message."""
        return self.format(use_color=False)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "category": self.category.value,
            "message": self.message,
            "suggestion": self.suggestion,
            "details": self.details or {},
        }


class InvalidElementError(DesignQAError, ValueError):
    """A design or rendered element is malformed (e.g. missing its box)."""

    def __init__(self, message: str, element_id: str | None = None):
        super().__init__(
            category=ErrorCategory.VALIDATION,
            message=message,
            suggestion="Check that the extraction step emits a bounding box "
            "with numeric x, y, width and height for every element",
            details={"element_id": element_id} if element_id else None,
        )


class ComparisonTimeoutError(DesignQAError):
    """The comparison pipeline did not finish within its time budget."""

    def __init__(self, timeout_seconds: float):
        super().__init__(
            category=ErrorCategory.TIMEOUT,
            message="The analysis is taking longer than expected "
            f"(timed out after {timeout_seconds:g}s).",
            suggestion="Try again with a simpler page or check that the "
            "website is accessible",
            details={"timeout_seconds": timeout_seconds},
        )


class CaptureError(DesignQAError):
    """The live page could not be loaded or inspected."""

    def __init__(self, url: str, original_error: str | None = None):
        message = f"Failed to load website: {url}"
        if original_error:
            message = f"{message} ({original_error})"
        super().__init__(
            category=ErrorCategory.PAGE_LOAD,
            message=message,
            suggestion="Check the URL and make sure the website is accessible",
            details={"url": url},
        )


class DesignSourceError(DesignQAError):
    """The design source could not be read."""

    def __init__(
        self,
        message: str,
        not_found: bool = False,
        details: dict[str, Any] | None = None,
    ):
        if not_found:
            category = ErrorCategory.DESIGN_NOT_FOUND
            suggestion = "Check the file and frame id of the design"
        else:
            category = ErrorCategory.DESIGN_ACCESS
            suggestion = "Check the design access token and file permissions"
        super().__init__(
            category=category,
            message=message,
            suggestion=suggestion,
            details=details,
        )


class ConfigurationError(DesignQAError):
    """Error in a configuration file or settings."""

    def __init__(self, message: str, config_file: str | None = None):
        super().__init__(
            category=ErrorCategory.CONFIGURATION,
            message=message,
            suggestion="Check your configuration file syntax and field types",
            details={"config_file": config_file} if config_file else None,
        )


def classify_error(error: BaseException) -> DesignQAError:
    """Map an arbitrary exception to a categorized, user-facing error.

    Args:
        error: The exception raised by the pipeline or a collaborator.

    Returns:
        The error itself if already categorized, otherwise a new
        DesignQAError whose category is inferred from the message.
    """
    if isinstance(error, DesignQAError):
        return error

    if isinstance(error, (asyncio.TimeoutError, TimeoutError)):
        return DesignQAError(
            category=ErrorCategory.TIMEOUT,
            message="The analysis is taking longer than expected.",
            suggestion="Try again with a simpler page or check that the "
            "website is accessible",
        )

    text = str(error)
    lowered = text.lower()

    if "timeout" in lowered or "timed out" in lowered:
        category = ErrorCategory.TIMEOUT
        suggestion = "Try again with a simpler page or check that the website is accessible"
    elif "failed to load website" in lowered or "navigation" in lowered:
        category = ErrorCategory.PAGE_LOAD
        suggestion = "Check the URL and make sure the website is accessible"
    elif "figma" in lowered and "403" in lowered:
        category = ErrorCategory.DESIGN_ACCESS
        suggestion = "Check the design access token and file permissions"
    elif "figma" in lowered and "404" in lowered:
        category = ErrorCategory.DESIGN_NOT_FOUND
        suggestion = "Check the file and frame id of the design"
    elif "enotfound" in lowered or "network" in lowered or isinstance(
        error, ConnectionError
    ):
        category = ErrorCategory.NETWORK
        suggestion = "Check your internet connection and try again"
    else:
        category = ErrorCategory.RUNTIME
        suggestion = None

    return DesignQAError(
        category=category,
        message=text or type(error).__name__,
        suggestion=suggestion,
        details={"error_type": type(error).__name__},
    )
