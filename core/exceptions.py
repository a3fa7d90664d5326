"""
Custom exceptions for the migration pipeline with structured error context.

This module provides the exception hierarchy used throughout the
extract -> transform -> load path. Each exception includes context
information for debugging and for the end-of-run report.

Exception Hierarchy:
    ETLException (base)
    ├── ExtractionError
    │   ├── SourceConnectionError
    │   └── SourceQueryError
    ├── LoadError
    │   ├── TargetInitializationError
    │   └── BatchCommitError
    └── ConfigurationError
"""

from typing import Optional, Dict, Any
from datetime import datetime, timezone


class ETLException(Exception):
    """
    Base exception for all migration errors.

    Attributes:
        message: Human-readable error message
        context: Additional context information (table, offset, timestamp, etc.)
        original_exception: The original exception that was caught (if any)
    """

    def __init__(
        self,
        message: str,
        context: Optional[Dict[str, Any]] = None,
        original_exception: Optional[Exception] = None
    ):
        self.message = message
        self.context = context or {}
        self.original_exception = original_exception
        self.timestamp = datetime.now(timezone.utc)

        # Add timestamp to context
        self.context["error_timestamp"] = self.timestamp.isoformat()

        # Chain original exception if provided
        super().__init__(message)
        if original_exception:
            self.__cause__ = original_exception

    def __str__(self) -> str:
        """Format error message with context."""
        base_msg = f"{self.__class__.__name__}: {self.message}"

        if self.context:
            context_str = ", ".join(f"{k}={v}" for k, v in self.context.items())
            base_msg += f" | Context: {context_str}"

        if self.original_exception:
            base_msg += f" | Caused by: {type(self.original_exception).__name__}: {str(self.original_exception)}"

        return base_msg

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for logging."""
        return {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "context": self.context,
            "timestamp": self.timestamp.isoformat(),
            "original_error": str(self.original_exception) if self.original_exception else None
        }


# ============================================================================
# Extraction Errors
# ============================================================================

class ExtractionError(ETLException):
    """Base exception for source-side failures."""
    pass


class SourceConnectionError(ExtractionError):
    """
    Exception raised when the source database cannot be reached.

    Context should include:
        - host: Database host
        - database: Database name
    """
    pass


class SourceQueryError(ExtractionError):
    """
    Exception raised when a page query fails.

    Context should include:
        - table: Source table name
        - offset: Offset of the page that failed
        - limit: Page size
    """
    pass


# ============================================================================
# Load Errors
# ============================================================================

class LoadError(ETLException):
    """Base exception for target-side failures."""
    pass


class TargetInitializationError(LoadError):
    """
    Exception raised when the Firestore client cannot be created.

    Context should include:
        - credentials_path: Path of the service account file
    """
    pass


class BatchCommitError(LoadError):
    """
    Exception raised when a batch exhausts its commit attempts.

    Context should include:
        - batch_number: 1-based batch number within the chunk
        - attempts: Number of commit attempts made
        - documents: Number of documents in the batch
    """

    def __init__(
        self,
        message: str,
        batch_number: int,
        attempts: int,
        context: Optional[Dict[str, Any]] = None,
        original_exception: Optional[Exception] = None
    ):
        super().__init__(message, context, original_exception)
        self.batch_number = batch_number
        self.attempts = attempts
        self.context.setdefault("batch_number", batch_number)
        self.context.setdefault("attempts", attempts)


# ============================================================================
# Configuration Errors
# ============================================================================

class ConfigurationError(ETLException):
    """Invalid migration settings (empty table list, bad sizes)."""
    pass
