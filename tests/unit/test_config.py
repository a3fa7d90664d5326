"""
Unit tests for settings, schemas and exceptions
"""

import pytest
from pydantic import ValidationError
from core.config import Settings
from core.exceptions import BatchCommitError, ETLException, LoadError
from schemas.migration import BatchFailure, TableMigrationResult


class TestSettings:

    def test_defaults(self):
        config = Settings()

        assert config.CHUNK_SIZE == 10000
        assert config.BATCH_SIZE == 250
        assert config.MAX_RETRIES == 3
        assert config.INTER_BATCH_DELAY_SECONDS == 0.5
        assert config.FIRESTORE_COLLECTION == "fcc_amateur_aamir"

    def test_env_override(self, monkeypatch):
        monkeypatch.setenv("TABLES", '["en", "hd"]')
        monkeypatch.setenv("BATCH_SIZE", "100")

        config = Settings()

        assert config.TABLES == ["en", "hd"]
        assert config.BATCH_SIZE == 100

    def test_batch_cannot_exceed_chunk(self):
        with pytest.raises(ValidationError):
            Settings(CHUNK_SIZE=100, BATCH_SIZE=250)

    def test_sizes_must_be_positive(self):
        with pytest.raises(ValidationError):
            Settings(BATCH_SIZE=0)

    def test_batch_size_limited_to_firestore_maximum(self):
        """A write batch holds at most 500 writes, whatever the chunk size"""
        assert Settings(BATCH_SIZE=500).BATCH_SIZE == 500

        with pytest.raises(ValidationError) as exc_info:
            Settings(CHUNK_SIZE=10000, BATCH_SIZE=501)
        assert "500" in str(exc_info.value)

    def test_batch_size_limit_from_env(self, monkeypatch):
        monkeypatch.setenv("BATCH_SIZE", "1000")

        with pytest.raises(ValidationError):
            Settings()

    def test_source_timezone(self):
        assert Settings().SOURCE_TIMEZONE is None
        assert Settings(SOURCE_TIMEZONE="America/New_York").SOURCE_TIMEZONE == "America/New_York"

        with pytest.raises(ValidationError):
            Settings(SOURCE_TIMEZONE="Mars/Olympus_Mons")


class TestMigrationSchemas:

    def test_failure_range(self):
        failure = BatchFailure(batch_number=2, start_index=250, end_index=500, chunk_offset=20000)

        assert failure.size == 250
        assert failure.absolute_range() == (20250, 20500)

    def test_failure_rejects_inverted_range(self):
        with pytest.raises(ValidationError):
            BatchFailure(batch_number=1, start_index=10, end_index=5)

    def test_table_result_counts(self):
        result = TableMigrationResult(
            table="en",
            chunks_processed=2,
            records_extracted=12,
            failures=[BatchFailure(batch_number=1, start_index=0, end_index=5)]
        )

        assert result.records_failed == 5
        assert result.records_loaded == 7
        assert result.status == "partial_success"
        assert result.summary()["failed_batches"] == 1

    def test_table_result_success(self):
        assert TableMigrationResult(table="en").status == "success"


class TestExceptions:

    def test_batch_commit_error_context(self):
        cause = RuntimeError("unavailable")
        error = BatchCommitError(
            "Batch 3 failed after 3 attempts",
            batch_number=3,
            attempts=3,
            original_exception=cause
        )

        assert isinstance(error, LoadError)
        assert isinstance(error, ETLException)
        assert error.__cause__ is cause
        assert error.context["batch_number"] == 3
        assert error.to_dict()["original_error"] == "unavailable"
        assert "Caused by: RuntimeError: unavailable" in str(error)
