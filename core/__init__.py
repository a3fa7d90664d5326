"""
Core utilities and configuration for the MySQL to Firestore migration.

This package provides foundational components used throughout the pipeline:

Modules:
    config: Application configuration and environment variable management
    database: Source (MySQL) engine and scoped connection management
    firestore: Target (Firestore) client construction
    exceptions: Custom exception hierarchy for error handling

Usage:
    from core.config import settings
    from core.database import source_connection
    from core.firestore import create_firestore_client
    from core.exceptions import BatchCommitError, SourceConnectionError

Example:
    # Open the source connection for the duration of the run
    async with source_connection(settings) as connection:
        # Run queries
        pass
"""

__all__ = [
    "settings",
    "source_connection",
    "create_firestore_client",
    # Exceptions
    "ETLException",
    "ExtractionError",
    "SourceConnectionError",
    "SourceQueryError",
    "LoadError",
    "TargetInitializationError",
    "BatchCommitError",
    "ConfigurationError",
]
