"""
Pydantic schemas for batch failures and per-table migration results
"""

from pydantic import BaseModel, Field, model_validator
from typing import List, Optional, Tuple


class BatchFailure(BaseModel):
    """
    A batch that failed after exhausting its commit attempts.

    ``start_index`` and ``end_index`` are relative to the chunk the batch
    came from (end exclusive). ``chunk_offset`` is the source offset of that
    chunk, so the absolute slice of the table to re-run is
    ``chunk_offset + start_index`` up to ``chunk_offset + end_index``.
    """

    batch_number: int = Field(..., ge=1)
    start_index: int = Field(..., ge=0)
    end_index: int = Field(..., ge=0)

    table: Optional[str] = None
    chunk_offset: int = Field(0, ge=0)
    error: Optional[str] = None

    @model_validator(mode="after")
    def check_range(self):
        if self.end_index < self.start_index:
            raise ValueError("end_index must not be lower than start_index")
        return self

    @property
    def size(self) -> int:
        return self.end_index - self.start_index

    def absolute_range(self) -> Tuple[int, int]:
        """Offsets in the source table covered by this batch"""
        return (
            self.chunk_offset + self.start_index,
            self.chunk_offset + self.end_index
        )


class TableMigrationResult(BaseModel):
    """Outcome of migrating one table"""

    table: str = Field(..., min_length=1)
    chunks_processed: int = 0
    records_extracted: int = 0
    failures: List[BatchFailure] = Field(default_factory=list)

    @property
    def records_failed(self) -> int:
        return sum(f.size for f in self.failures)

    @property
    def records_loaded(self) -> int:
        return self.records_extracted - self.records_failed

    @property
    def status(self) -> str:
        return "success" if not self.failures else "partial_success"

    def summary(self) -> dict:
        """Flat dictionary for logging"""
        return {
            "table": self.table,
            "status": self.status,
            "chunks_processed": self.chunks_processed,
            "records_extracted": self.records_extracted,
            "records_loaded": self.records_loaded,
            "records_failed": self.records_failed,
            "failed_batches": len(self.failures),
        }
