"""
Script to migrate the configured MySQL tables into Firestore
"""

import asyncio
import sys
import os
import signal
import logging

# Add current directory to path to allow imports from core, ingestion, etc.
sys.path.append(os.getcwd())

from core.config import settings
from core.database import source_connection
from core.firestore import create_firestore_client
from ingestion.loaders.firestore_loader import FirestoreLoader
from ingestion.runner import MigrationRunner
from ingestion.transformers.document import DocumentTransformer

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
    format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
    handlers=[logging.StreamHandler(sys.stdout)]
)
for noisy in ("sqlalchemy.engine", "google", "urllib3", "grpc"):
    logging.getLogger(noisy).setLevel(logging.WARNING)
logger = logging.getLogger(__name__)


def handle_interrupt(signum, frame):
    """In-flight commits are abandoned, not rolled back"""
    logger.warning("Migration interrupted")
    sys.exit(1)


def install_signal_handlers():
    signal.signal(signal.SIGINT, handle_interrupt)
    signal.signal(signal.SIGTERM, handle_interrupt)


async def run_migration(config=settings):
    """Run the migration for every configured table"""

    # Target client is created once and shared by all tables
    client = create_firestore_client(config)

    loader = FirestoreLoader(
        client,
        collection=config.FIRESTORE_COLLECTION,
        batch_size=config.BATCH_SIZE,
        max_retries=config.MAX_RETRIES,
        backoff_base=config.BACKOFF_BASE_SECONDS,
        inter_batch_delay=config.INTER_BATCH_DELAY_SECONDS,
        progress_every=config.PROGRESS_EVERY
    )

    async with source_connection(config) as connection:
        runner = MigrationRunner(
            connection,
            loader,
            transformer=DocumentTransformer(config.SOURCE_TIMEZONE),
            chunk_size=config.CHUNK_SIZE
        )
        results = await runner.migrate(config.TABLES)

    failed = [r for r in results if r.failures]
    if failed:
        logger.warning(
            f"Migration finished with failed batches in {len(failed)} table(s): "
            f"{', '.join(r.table for r in failed)}"
        )
    else:
        logger.info("All tables migrated")

    return results


def main():
    install_signal_handlers()

    try:
        asyncio.run(run_migration())
    except Exception as e:
        logger.error(f"Migration failed: {str(e)}")
        sys.exit(1)


if __name__ == "__main__":
    main()
