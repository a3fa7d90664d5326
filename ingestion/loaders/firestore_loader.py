"""
Load documents into Firestore in atomic batches with retry and backoff.

This module provides:
- Fixed-size batches, each committed as one atomic write batch
- Exponential backoff between commit attempts (2s, 4s, 8s, ...)
- A fixed pause after every uploaded batch to bound write throughput
- Failure bookkeeping: batches that exhaust their attempts are returned
  as ``BatchFailure`` records instead of raising
"""

import asyncio
import math
from typing import Any, Awaitable, Callable, Dict, List, Optional
from google.cloud import firestore
from core.config import FIRESTORE_MAX_BATCH_WRITES
from core.exceptions import BatchCommitError
from schemas.migration import BatchFailure
import logging

logger = logging.getLogger(__name__)

Document = Dict[str, Any]


class FirestoreLoader:
    """
    Upload documents to a single Firestore collection.

    Documents get auto-generated ids, so re-running a slice writes new
    documents rather than overwriting earlier ones.

    Attributes:
        batch_size: Documents per atomic commit, at most 500 (default: 250)
        max_retries: Commit attempts per batch (default: 3)
        backoff_base: Seconds multiplied by 2**attempt between attempts (default: 1.0)
        inter_batch_delay: Seconds to wait after each uploaded batch (default: 0.5)
        progress_every: Log progress every N batches (default: 10)
    """

    def __init__(
        self,
        client: firestore.AsyncClient,
        collection: str,
        batch_size: int = 250,
        max_retries: int = 3,
        backoff_base: float = 1.0,
        inter_batch_delay: float = 0.5,
        progress_every: int = 10,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep
    ):
        if batch_size <= 0:
            raise ValueError("batch_size must be positive")
        if batch_size > FIRESTORE_MAX_BATCH_WRITES:
            raise ValueError(f"batch_size cannot exceed {FIRESTORE_MAX_BATCH_WRITES}")
        if max_retries < 1:
            raise ValueError("max_retries must be at least 1")

        self.client = client
        self.collection = collection
        self.batch_size = batch_size
        self.max_retries = max_retries
        self.backoff_base = backoff_base
        self.inter_batch_delay = inter_batch_delay
        self.progress_every = progress_every
        self._sleep = sleep

    def backoff_delay(self, attempt: int) -> float:
        """Delay after the given failed attempt (1-based)"""
        return (2 ** attempt) * self.backoff_base

    async def commit(self, documents: List[Document]) -> None:
        """Stage every document in one write batch and commit it"""
        batch = self.client.batch()
        collection = self.client.collection(self.collection)
        for document in documents:
            batch.set(collection.document(), document)
        await batch.commit()

    async def upload_batch(self, documents: List[Document], batch_number: int) -> None:
        """
        Commit one batch, retrying the whole batch on failure.

        Args:
            documents: Documents of this batch
            batch_number: 1-based batch number, for logging

        Raises:
            BatchCommitError: After ``max_retries`` failed attempts
        """
        attempt = 0

        while attempt < self.max_retries:
            try:
                await self.commit(documents)
                logger.info(
                    f"Batch {batch_number}: Successfully uploaded {len(documents)} documents"
                )
                return

            except Exception as e:
                attempt += 1

                if attempt >= self.max_retries:
                    raise BatchCommitError(
                        f"Batch {batch_number} failed after {attempt} attempts",
                        batch_number=batch_number,
                        attempts=attempt,
                        context={
                            "collection": self.collection,
                            "documents": len(documents)
                        },
                        original_exception=e
                    )

                delay = self.backoff_delay(attempt)
                logger.warning(
                    f"Batch {batch_number}: Attempt {attempt} failed, "
                    f"retrying in {delay} seconds: {str(e)}"
                )
                await self._sleep(delay)

    async def load(
        self,
        documents: List[Document],
        table: Optional[str] = None,
        chunk_offset: int = 0
    ) -> List[BatchFailure]:
        """
        Upload a chunk of documents batch by batch.

        A batch that exhausts its attempts is recorded and the next batch
        proceeds. Errors other than ``BatchCommitError`` are not caught.

        Args:
            documents: Transformed documents of one chunk
            table: Source table, recorded on failures
            chunk_offset: Source offset of the chunk, recorded on failures

        Returns:
            Failure records for batches that could not be committed
        """
        failures: List[BatchFailure] = []
        if not documents:
            return failures

        total_batches = math.ceil(len(documents) / self.batch_size)
        logger.info(
            f"Starting upload of {len(documents)} records in {total_batches} batches"
        )

        for start in range(0, len(documents), self.batch_size):
            batch_number = start // self.batch_size + 1
            batch = documents[start:start + self.batch_size]

            try:
                await self.upload_batch(batch, batch_number)
            except BatchCommitError as e:
                logger.error(
                    f"Failed to upload batch {batch_number}: {e.message}",
                    extra={"error_context": e.to_dict()}
                )
                failures.append(
                    BatchFailure(
                        batch_number=batch_number,
                        start_index=start,
                        end_index=start + len(batch),
                        table=table,
                        chunk_offset=chunk_offset,
                        error=str(e.original_exception or e.message)
                    )
                )
                continue

            # Pace writes against the target
            await self._sleep(self.inter_batch_delay)

            if self.progress_every and batch_number % self.progress_every == 0:
                logger.info(f"Progress: {batch_number}/{total_batches} batches completed")

        return failures
