"""
MySQL table extractor with offset pagination.

Reads a whole table as a lazy sequence of chunks:
- One ``SELECT * ... LIMIT :chunk_size OFFSET :offset`` query per chunk
- Offset advances by the number of rows actually returned
- A short page (fewer rows than ``chunk_size``) ends the sequence
- Restartable from any offset via ``start_offset``

Driver values Firestore cannot encode are rewritten the way the mysql2
Node driver returns them: DECIMAL as text, TIME as ``[-]HH:MM:SS`` text.

Offset pagination is not a stable cursor: if the table is written to while
it is being read, rows can be skipped or read twice. No ordering is imposed
on the source.
"""

from dataclasses import dataclass, field
from datetime import timedelta
from decimal import Decimal
from typing import Any, Dict, Iterator, List
from sqlalchemy import literal_column, select, table
from sqlalchemy.ext.asyncio import AsyncConnection
from sqlalchemy.sql import Select
from core.exceptions import SourceQueryError
import logging

logger = logging.getLogger(__name__)

Row = Dict[str, Any]


def normalize_value(value: Any) -> Any:
    """Map DECIMAL and TIME driver values to their text form"""
    if isinstance(value, Decimal):
        return str(value)
    if isinstance(value, timedelta):
        return format_time(value)
    return value


def format_time(value: timedelta) -> str:
    """MySQL TIME text; hours may exceed 24"""
    sign = "-" if value < timedelta(0) else ""
    value = abs(value)
    minutes, seconds = divmod(value.days * 86400 + value.seconds, 60)
    hours, minutes = divmod(minutes, 60)
    text = f"{sign}{hours:02d}:{minutes:02d}:{seconds:02d}"
    if value.microseconds:
        text += f".{value.microseconds:06d}"
    return text


def normalize_row(row: Row) -> Row:
    return {key: normalize_value(value) for key, value in row.items()}


@dataclass
class Chunk:
    """One page of rows and the source offset it was read from"""

    offset: int
    rows: List[Row] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.rows)

    def __iter__(self) -> Iterator[Row]:
        return iter(self.rows)


class MySQLExtractor:
    """
    Async iterator over the chunks of one source table.

    Usage:
        extractor = MySQLExtractor(connection, "en", chunk_size=10000)
        async for chunk in extractor:
            ...

    Query errors are raised as ``SourceQueryError`` and end the iteration;
    they are not retried here.
    """

    def __init__(
        self,
        connection: AsyncConnection,
        table_name: str,
        chunk_size: int = 10000,
        start_offset: int = 0
    ):
        if chunk_size <= 0:
            raise ValueError("chunk_size must be positive")
        if start_offset < 0:
            raise ValueError("start_offset cannot be negative")

        self.connection = connection
        self.table_name = table_name
        self.chunk_size = chunk_size
        self.start_offset = start_offset
        self.offset = start_offset
        self.records_fetched = 0
        self.queries_issued = 0
        self._exhausted = False

    def build_query(self, offset: int) -> Select:
        """Page query; the dialect quotes the table identifier"""
        schema, _, name = self.table_name.rpartition(".")
        source = table(name, schema=schema or None)
        return (
            select(literal_column("*"))
            .select_from(source)
            .limit(self.chunk_size)
            .offset(offset)
        )

    async def fetch_page(self, offset: int) -> List[Row]:
        """Run one page query and return its rows as plain, normalized dicts"""
        self.queries_issued += 1
        try:
            result = await self.connection.execute(self.build_query(offset))
            return [normalize_row(row) for row in result.mappings().all()]
        except Exception as e:
            raise SourceQueryError(
                f"Failed to read page from {self.table_name}",
                context={
                    "table": self.table_name,
                    "offset": offset,
                    "limit": self.chunk_size
                },
                original_exception=e
            )

    def __aiter__(self) -> "MySQLExtractor":
        return self

    async def __anext__(self) -> Chunk:
        if self._exhausted:
            raise StopAsyncIteration

        offset = self.offset
        try:
            rows = await self.fetch_page(offset)
        except SourceQueryError:
            self._exhausted = True
            raise

        # Short page marks the end of the table
        if len(rows) < self.chunk_size:
            self._exhausted = True

        if not rows:
            raise StopAsyncIteration

        self.offset += len(rows)
        self.records_fetched += len(rows)
        logger.info(f"Fetched {self.records_fetched} records from MySQL table {self.table_name}")

        return Chunk(offset=offset, rows=rows)
