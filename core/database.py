"""
Source database connection management with SQLAlchemy async
"""

from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional
from sqlalchemy.engine import URL
from sqlalchemy.ext.asyncio import create_async_engine, AsyncConnection, AsyncEngine
from sqlalchemy.pool import NullPool
from core.config import Settings, settings
from core.exceptions import SourceConnectionError
import logging

logger = logging.getLogger(__name__)


def build_source_url(config: Settings = settings) -> URL:
    """Build the MySQL URL; URL.create escapes special characters in credentials"""
    return URL.create(
        drivername=config.MYSQL_DRIVER,
        username=config.MYSQL_USER,
        password=config.MYSQL_PASSWORD or None,
        host=config.MYSQL_HOST,
        port=config.MYSQL_PORT,
        database=config.MYSQL_DATABASE,
    )


def create_source_engine(config: Settings = settings) -> AsyncEngine:
    """Create async engine for the source database"""
    return create_async_engine(
        build_source_url(config),
        echo=False,
        poolclass=NullPool,  # One connection held for the whole run
        future=True
    )


@asynccontextmanager
async def source_connection(
    config: Settings = settings,
    engine: Optional[AsyncEngine] = None
) -> AsyncIterator[AsyncConnection]:
    """
    Hold one source connection for the duration of a migration run.

    The connection is closed exactly once when the block exits, whether it
    finished normally or raised. An engine created here is disposed as well;
    a caller-supplied engine is left to its owner.

    Raises:
        SourceConnectionError: If the connection cannot be opened
    """
    owns_engine = engine is None
    if owns_engine:
        engine = create_source_engine(config)

    try:
        try:
            connection = await engine.connect()
        except Exception as e:
            raise SourceConnectionError(
                "Failed to connect to source database",
                context={
                    "host": config.MYSQL_HOST,
                    "port": config.MYSQL_PORT,
                    "database": config.MYSQL_DATABASE
                },
                original_exception=e
            )

        logger.info(f"Connected to MySQL database {config.MYSQL_DATABASE}@{config.MYSQL_HOST}")

        try:
            yield connection
        finally:
            await connection.close()
            logger.info("MySQL connection closed")
    finally:
        if owns_engine:
            await engine.dispose()
