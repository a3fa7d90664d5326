"""
Migration pipeline components (MySQL -> Firestore).

This package contains all components for the Extract-Transform-Load pipeline:

Modules:
    runner: Orchestrator that migrates tables one at a time

Subpackages:
    extractors: Offset-paginated MySQL table reader
    transformers: Row to Firestore-safe document conversion
    loaders: Firestore batch writer with retry and failure bookkeeping

Architecture:
    The pipeline follows a three-phase approach per chunk:

    1. Extract - Read one page of the table (LIMIT/OFFSET)
    2. Transform - Convert every row into a document
    3. Load - Commit the documents in atomic batches with retries

    Chunks are processed strictly one after another. Batch failures are
    returned as data and aggregated per table; connection and query errors
    abort the run.

Usage:
    from ingestion.extractors.mysql_extractor import MySQLExtractor
    from ingestion.transformers.document import DocumentTransformer
    from ingestion.loaders.firestore_loader import FirestoreLoader
    from ingestion.runner import MigrationRunner

Example:
    loader = FirestoreLoader(client, collection="fcc_amateur_aamir")

    async with source_connection() as connection:
        runner = MigrationRunner(connection, loader)
        results = await runner.migrate(["en"])

    for result in results:
        print(f"{result.table}: {len(result.failures)} failed batches")
"""

__all__ = [
    "MySQLExtractor",
    "DocumentTransformer",
    "FirestoreLoader",
    "MigrationRunner",
]
