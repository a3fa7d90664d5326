# ============================================================================
# File: ingestion/runner.py
# Description: Table migration orchestrator (MySQL -> Firestore)
# ============================================================================
"""
Migration Runner - Orchestrates Extract, Transform, Load per table.

This module provides sequential table migration with:
- Chunked extraction (one page in memory at a time)
- Per-row document transformation
- Batched upload with per-batch failure bookkeeping
- Fatal errors abort the whole run; batch failures are reported as data
"""

from typing import List, Optional, Sequence
from sqlalchemy.ext.asyncio import AsyncConnection
import logging

from ingestion.extractors.mysql_extractor import MySQLExtractor
from ingestion.transformers.document import DocumentTransformer
from ingestion.loaders.firestore_loader import FirestoreLoader
from schemas.migration import TableMigrationResult
from core.exceptions import ETLException, ConfigurationError

logger = logging.getLogger(__name__)


class MigrationRunner:
    """
    Migration Orchestrator

    Responsibilities:
    - Orchestrate Extract → Transform → Load for each table, in order
    - Keep chunks strictly sequential (no overlap of read and upload)
    - Aggregate batch failures per table
    - Log the re-run report
    """

    def __init__(
        self,
        connection: AsyncConnection,
        loader: FirestoreLoader,
        transformer: Optional[DocumentTransformer] = None,
        chunk_size: int = 10000
    ):
        self.connection = connection
        self.loader = loader
        self.transformer = transformer or DocumentTransformer()
        self.chunk_size = chunk_size

    async def migrate_table(self, table: str, start_offset: int = 0) -> TableMigrationResult:
        """
        Migrate one table from ``start_offset`` to its end.

        Returns:
            TableMigrationResult with the batch failures of every chunk

        Raises:
            SourceQueryError: If a page query fails
            ETLException: For other fatal errors raised while loading
        """
        result = TableMigrationResult(table=table)
        extractor = MySQLExtractor(
            self.connection,
            table,
            chunk_size=self.chunk_size,
            start_offset=start_offset
        )

        logger.info(f"Starting migration of table: {table} (offset: {start_offset})")

        async for chunk in extractor:
            documents = self.transformer.transform_chunk(chunk.rows)
            chunk_failures = await self.loader.load(
                documents,
                table=table,
                chunk_offset=chunk.offset
            )

            result.chunks_processed += 1
            result.records_extracted += len(chunk)
            result.failures.extend(chunk_failures)

        self.report(result)
        return result

    async def migrate(self, tables: Sequence[str]) -> List[TableMigrationResult]:
        """
        Migrate each table to completion before starting the next.

        Raises:
            ConfigurationError: If no tables are given
            ETLException: On the first fatal error; remaining tables are skipped
        """
        if not tables:
            raise ConfigurationError("No tables configured for migration")

        results = []

        for table in tables:
            try:
                results.append(await self.migrate_table(table))

            except ETLException as e:
                logger.error(
                    f"Migration of {table} failed: {e.message}",
                    extra={"error_context": e.to_dict()}
                )
                raise

            except Exception as e:
                logger.exception(f"Unexpected error while migrating {table}")
                raise ETLException(
                    "Unexpected error during migration",
                    context={
                        "table": table,
                        "tables_completed": len(results)
                    },
                    original_exception=e
                )

        return results

    @staticmethod
    def report(result: TableMigrationResult) -> None:
        """Log the outcome of one table"""
        logger.info(
            f"Migration of {result.table} completed: {result.status} - "
            f"Extracted: {result.records_extracted}, "
            f"Loaded: {result.records_loaded}, Failed: {result.records_failed}"
        )

        if result.failures:
            for failure in result.failures:
                start, end = failure.absolute_range()
                logger.warning(
                    f"Failed batch {failure.batch_number} of chunk at offset "
                    f"{failure.chunk_offset}: rows {failure.start_index}-{failure.end_index} "
                    f"(table offsets {start}-{end}): {failure.error}"
                )
            logger.warning("Please run the migration again for these specific batches")
