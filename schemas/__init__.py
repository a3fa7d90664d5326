"""
Pydantic schemas for migration bookkeeping.

Schemas:
    migration: Batch failure records and per-table results

Usage:
    from schemas.migration import BatchFailure, TableMigrationResult

Example:
    failure = BatchFailure(
        batch_number=3,
        start_index=500,
        end_index=750,
        table="en",
        chunk_offset=20000
    )

    # Slice of the source table to re-run
    assert failure.absolute_range() == (20500, 20750)

Failure records are kept in memory for the duration of a run and reported
at the end; they are never persisted.
"""

from schemas.migration import BatchFailure, TableMigrationResult

__all__ = [
    "BatchFailure",
    "TableMigrationResult",
]
