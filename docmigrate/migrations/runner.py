"""Migration orchestrator: loads steps and runs a full migration."""

import asyncio
import logging
from dataclasses import dataclass

from docmigrate.core.exceptions import NoStepsFoundError, StoreQueryError
from docmigrate.core.settings import DocMigrateSettings
from docmigrate.migrations.batch import BatchProcessor
from docmigrate.migrations.loader import StepLoader
from docmigrate.migrations.migrator import DocumentMigrator
from docmigrate.migrations.progress import ProgressTracker
from docmigrate.migrations.registry import StepRegistry
from docmigrate.stores.base import DocumentStore

logger = logging.getLogger(__name__)


@dataclass
class MigrationReport:
    """Outcome of one migration run."""

    target: int
    total: int
    done: int
    written: int
    failed: int

    def to_dict(self) -> dict:
        return {
            "target": self.target,
            "total": self.total,
            "done": self.done,
            "written": self.written,
            "failed": self.failed,
        }


class MigrationOrchestrator:
    """Runs migrations against a document store.

    The orchestrator:
    - Loads the step files once, even under concurrent callers
    - Resolves the target version (explicit or the latest step)
    - Counts the candidate documents and reports progress while
      the batch processor migrates them

    Each run gets its own progress counters; the orchestrator holds no
    module-level state.
    """

    def __init__(
        self,
        store: DocumentStore,
        registry: StepRegistry | None = None,
        loader: StepLoader | None = None,
        settings: DocMigrateSettings | None = None,
    ):
        """Initialize the orchestrator.

        Args:
            store: The document store to migrate
            registry: Step registry; a new empty one when omitted
            loader: Loads steps into the registry on first use; when
                omitted, steps are read from ``settings.migrations_dir``
                unless a pre-populated registry was given
            settings: Engine settings (page size, version field, ...)
        """
        self.store = store
        self.settings = settings or DocMigrateSettings()
        self.registry = registry if registry is not None else StepRegistry()
        if loader is None and registry is None:
            loader = StepLoader(self.settings.migrations_dir)
        self.loader = loader
        # Tracker of the most recently started run
        self.progress: ProgressTracker | None = None
        self._load_task: asyncio.Task | None = None

    @property
    def loaded(self) -> bool:
        return (
            self._load_task is not None
            and self._load_task.done()
            and not self._load_failed()
        )

    def _load_failed(self) -> bool:
        task = self._load_task
        return task is not None and task.done() and (
            task.cancelled() or task.exception() is not None
        )

    async def load_steps(self) -> StepRegistry:
        """Load the step files into the registry, once.

        Concurrent callers await the same load. A load that failed is
        retried by the next caller.

        Raises:
            StepLoadError: If a step file cannot be imported
            DuplicateStepError: If two steps share an id
        """
        if self._load_task is None or self._load_failed():
            self._load_task = asyncio.ensure_future(self._load())
        await self._load_task
        return self.registry

    async def _load(self) -> None:
        if self.loader is None:
            return
        steps = await asyncio.to_thread(self.loader.load)
        # A rejected load leaves the registry untouched
        StepRegistry(self.registry.steps).register_all(steps)
        self.registry.register_all(steps)

    def resolve_target(self, up_to: int | None) -> int:
        """Return the version to migrate to.

        Raises:
            NoStepsFoundError: If no step is registered
        """
        last = self.registry.last
        if last is None:
            migrations_dir = self.loader.migrations_dir if self.loader else None
            raise NoStepsFoundError(str(migrations_dir) if migrations_dir else None)
        return up_to if up_to is not None else last

    async def count_candidates(self, target: int) -> int:
        """Count documents below ``target``.

        Raises:
            StoreQueryError: If the count query fails
        """
        try:
            rows = await self.store.query_by_version(
                target, limit=None, include_docs=False
            )
        except Exception as e:
            raise StoreQueryError("Unable to retrieve data", e) from e
        return len(rows)

    async def run_migrations(self, up_to: int | None = None) -> MigrationReport:
        """Migrate every document below the target version.

        Args:
            up_to: Version to reach; the latest known step when None

        Returns:
            Counters of the run

        Raises:
            NoStepsFoundError: If no step is registered
            StoreQueryError: If the count or a page query fails
        """
        await self.load_steps()
        target = self.resolve_target(up_to)

        logger.info(f"Running migrations up to v{target}")
        total = await self.count_candidates(target)

        progress = ProgressTracker(self.settings.progress_interval)
        self.progress = progress
        migrator = DocumentMigrator(self.registry, self.settings.version_field)
        processor = BatchProcessor(self.store, migrator, progress)

        async with progress.running(total):
            await processor.run(target, self.settings.page_size)

        state = progress.snapshot()
        logger.info(
            f"Migrations finished, {state.done} documents processed, "
            f"{state.written} documents modified, {state.failed} failed."
        )
        return MigrationReport(
            target=target,
            total=state.total,
            done=state.done,
            written=state.written,
            failed=state.failed,
        )
