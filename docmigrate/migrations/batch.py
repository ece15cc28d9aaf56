"""Paged batch processing of unmigrated documents."""

import asyncio
import logging

from docmigrate.core.exceptions import PersistenceError, StoreQueryError
from docmigrate.migrations.migrator import DocumentMigrator
from docmigrate.migrations.progress import ProgressTracker
from docmigrate.stores.base import DocumentStore, Row, read_version

logger = logging.getLogger(__name__)

# Documents migrated and stored concurrently within one page.
MAX_IN_FLIGHT = 32

DEFAULT_PAGE_SIZE = 512


class BatchProcessor:
    """Migrates every document below a target version, one page at a time.

    Pages are fetched in key order; a page is fully drained before the next
    one is requested, and the next request resumes after the last key seen.

    Args:
        store: Where documents are queried and written back
        migrator: The per-document state machine
        progress: Counters updated as documents complete
    """

    def __init__(
        self,
        store: DocumentStore,
        migrator: DocumentMigrator,
        progress: ProgressTracker,
    ):
        self.store = store
        self.migrator = migrator
        self.progress = progress

    async def fetch_page(
        self, target: int, page_size: int, start_after: str | None
    ) -> list[Row]:
        """Query the next page of candidate documents.

        Raises:
            StoreQueryError: If the store query fails
        """
        try:
            return await self.store.query_by_version(
                target,
                limit=page_size,
                start_after=start_after,
                include_docs=True,
            )
        except Exception as e:
            raise StoreQueryError("Unable to retrieve data", e) from e

    async def run(self, target: int, page_size: int = DEFAULT_PAGE_SIZE) -> None:
        """Process pages until the store returns no more candidates.

        Args:
            target: Version every document should reach
            page_size: Maximum number of documents per page

        Raises:
            StoreQueryError: If a page query fails; no retry is attempted
        """
        semaphore = asyncio.Semaphore(MAX_IN_FLIGHT)
        cursor = None

        async def process(row: Row) -> None:
            async with semaphore:
                await self.process_row(row, target)

        while True:
            rows = await self.fetch_page(target, page_size, cursor)
            if not rows:
                return

            logger.debug(f"Processing page of {len(rows)} document(s) after {cursor!r}")
            await asyncio.gather(*(process(row) for row in rows))
            cursor = rows[-1].key

    async def process_row(self, row: Row, target: int) -> None:
        """Migrate one row and store it back if it changed.

        Step failures and write failures are logged and counted; they never
        abort the batch.
        """
        try:
            document, modified = await self.migrator.migrate(row.doc, target)
        except Exception as e:
            logger.error(f"Migration to v{target} failed on document {row.key}: {e}")
            self.progress.fail()
            return

        if not isinstance(document, dict):
            logger.warning(f"Skipping malformed document {row.key}")
            self.progress.tick()
            return

        version = read_version(document, self.migrator.version_field)
        if not modified and version == row.version:
            self.progress.tick()
            return

        try:
            await self.store.upsert(document, key=row.key)
        except Exception as e:
            error = e if isinstance(e, PersistenceError) else PersistenceError(
                f"Failed to store document {row.key}: {e}",
                key=row.key,
                original_error=e,
            )
            logger.error(error.message)
            self.progress.fail()
            return

        self.progress.tick(modified)
