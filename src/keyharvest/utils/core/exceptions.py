"""
Basic exception classes for keyharvest.

This module contains the exception taxonomy shared by the extraction pipeline,
the configuration layer and the CLI, kept free of other project imports to
avoid import cycles.
"""

from __future__ import annotations

from enum import Enum


class ErrorSeverity(Enum):
    """Error severity levels for classification and handling."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


class ErrorCategory(Enum):
    """Categories of errors for appropriate handling strategies."""

    DISCOVERY = "discovery"
    EXTRACTOR = "extractor"
    EXTRACTION = "extraction"
    AGGREGATION = "aggregation"
    CONFIGURATION = "configuration"
    UNKNOWN = "unknown"


class KeyHarvestError(Exception):
    """Base exception class for keyharvest specific errors."""

    def __init__(
        self,
        message: str,
        category: ErrorCategory = ErrorCategory.UNKNOWN,
        severity: ErrorSeverity = ErrorSeverity.MEDIUM,
        user_message: str | None = None,
        context: object | None = None,
        recoverable: bool = True,
    ) -> None:
        super().__init__(message)
        self.category: ErrorCategory = category
        self.severity: ErrorSeverity = severity
        self.user_message: str = user_message or message
        self.context: object | None = context
        self.recoverable: bool = recoverable


class DiscoveryError(KeyHarvestError):
    """File pattern resolution failed before any work was scheduled."""

    def __init__(
        self,
        message: str,
        user_message: str | None = None,
        context: object | None = None,
    ) -> None:
        super().__init__(
            message,
            category=ErrorCategory.DISCOVERY,
            severity=ErrorSeverity.HIGH,
            recoverable=False,
            user_message=user_message,
            context=context,
        )


class ExtractorLoadError(KeyHarvestError):
    """A custom extractor module is missing or does not satisfy the contract."""

    def __init__(
        self,
        message: str,
        user_message: str | None = None,
        context: object | None = None,
    ) -> None:
        super().__init__(
            message,
            category=ErrorCategory.EXTRACTOR,
            severity=ErrorSeverity.HIGH,
            recoverable=False,
            user_message=user_message,
            context=context,
        )


class ExtractionError(KeyHarvestError):
    """
    Extraction of a single file failed.

    Raised when the extractor raised, crashed its worker, or returned data
    that is not a list of keys. Under the all-or-nothing policy this aborts
    the whole run.
    """

    def __init__(
        self,
        file: str,
        message: str,
        error_type: str | None = None,
        details: str | None = None,
    ) -> None:
        super().__init__(
            f"Extraction failed for {file}: {message}",
            category=ErrorCategory.EXTRACTION,
            severity=ErrorSeverity.HIGH,
            user_message=f"Failed to extract keys from {file}: {message}",
            context={"file": file, "error_type": error_type},
            recoverable=False,
        )
        self.file: str = file
        self.error_type: str | None = error_type
        self.details: str | None = details


class AggregationError(KeyHarvestError):
    """Intermediate extraction data was not well formed during aggregation."""

    def __init__(
        self,
        message: str,
        context: object | None = None,
    ) -> None:
        super().__init__(
            message,
            category=ErrorCategory.AGGREGATION,
            severity=ErrorSeverity.CRITICAL,
            recoverable=False,
            context=context,
        )


class ConfigurationError(KeyHarvestError):
    """Configuration-related errors."""

    def __init__(
        self,
        message: str,
        user_message: str | None = None,
        context: object | None = None,
    ) -> None:
        super().__init__(
            message,
            category=ErrorCategory.CONFIGURATION,
            severity=ErrorSeverity.HIGH,
            recoverable=False,
            user_message=user_message,
            context=context,
        )
