"""
Pytest configuration and fixtures
"""

import re
import pytest
from datetime import datetime
from typing import Any, Dict, List, Optional
from unittest.mock import AsyncMock, MagicMock

PAGE_PATTERN = re.compile(r"LIMIT\s+(\d+)\s+OFFSET\s+(\d+)")


class FakeResult:
    """Stands in for a buffered SQLAlchemy result"""

    def __init__(self, rows: List[Dict[str, Any]]):
        self._rows = rows

    def mappings(self):
        return self

    def all(self):
        return list(self._rows)


class FakeSourceConnection:
    """
    In-memory source table answering LIMIT/OFFSET page queries.

    Records every (limit, offset) pair it was asked for.
    """

    def __init__(self, rows: List[Dict[str, Any]], fail_at_offset: Optional[int] = None):
        self.rows = rows
        self.fail_at_offset = fail_at_offset
        self.pages = []
        self.statements = []
        self.close = AsyncMock()

    async def execute(self, statement):
        sql = str(statement.compile(compile_kwargs={"literal_binds": True}))
        match = PAGE_PATTERN.search(sql)
        limit, offset = int(match.group(1)), int(match.group(2))

        self.statements.append(sql)
        self.pages.append((limit, offset))

        if self.fail_at_offset is not None and offset == self.fail_at_offset:
            raise ConnectionError("Lost connection to MySQL server during query")

        return FakeResult(self.rows[offset:offset + limit])


def make_rows(count: int) -> List[Dict[str, Any]]:
    return [
        {"id": i, "call_sign": f"K{i:04d}", "licensed": i % 2 == 0}
        for i in range(count)
    ]


@pytest.fixture
def rows_factory():
    return make_rows


@pytest.fixture
def source_rows():
    """Twelve plain rows"""
    return make_rows(12)


@pytest.fixture
def source_connection_factory():
    def factory(rows, fail_at_offset=None):
        return FakeSourceConnection(rows, fail_at_offset=fail_at_offset)
    return factory


@pytest.fixture
def firestore_client():
    """Mock Firestore AsyncClient; every batch() returns the same write batch"""
    client = MagicMock()
    write_batch = MagicMock()
    write_batch.commit = AsyncMock()
    client.batch.return_value = write_batch
    return client


@pytest.fixture
def write_batch(firestore_client):
    return firestore_client.batch.return_value


@pytest.fixture
def sleep():
    """Records requested delays without waiting"""
    return AsyncMock()


@pytest.fixture
def mixed_row():
    """Row covering every value kind the extractor yields"""
    return {
        "id": 42,
        "call_sign": "W1AW",
        "active": True,
        "latitude": 41.7148,
        "grant_date": datetime(2020, 5, 17, 13, 45, 10, 250000),
        "frn": 18446744073709551615,
        "photo": b"\x89PNG\r\n",
        "fee": "35.00",
        "opens": "08:30:00",
        "notes": None,
    }
