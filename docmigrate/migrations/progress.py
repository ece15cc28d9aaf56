"""Progress accounting and periodic reporting for a migration run."""

import asyncio
import contextlib
import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from dataclasses import dataclass, replace

logger = logging.getLogger(__name__)


@dataclass
class ProgressState:
    """Counters of one migration run.

    Attributes:
        done: Documents processed, whatever the outcome
        written: Documents whose content was rewritten and stored
        failed: Documents whose step or write raised
        total: Candidate count taken when the run started (an estimate)
    """

    done: int = 0
    written: int = 0
    failed: int = 0
    total: int = 0


class ProgressTracker:
    """Counts processed documents and logs ``done/total`` periodically.

    The reporter is a background task on the running event loop. It never
    throttles the batch loop; it only reads the counters.
    """

    def __init__(self, interval: float = 5.0):
        self.interval = interval
        self.state = ProgressState()
        self._task: asyncio.Task | None = None

    @property
    def done(self) -> int:
        return self.state.done

    @property
    def written(self) -> int:
        return self.state.written

    @property
    def failed(self) -> int:
        return self.state.failed

    @property
    def total(self) -> int:
        return self.state.total

    def start(self, total: int) -> None:
        """Reset the counters and start the periodic reporter."""
        self.stop_nowait()
        self.state = ProgressState(total=total)
        self._task = asyncio.create_task(self._report())

    def tick(self, modified: bool = False) -> None:
        """Record one processed document."""
        self.state.done += 1
        if modified:
            self.state.written += 1

    def fail(self) -> None:
        """Record one document that could not be migrated or stored."""
        self.state.done += 1
        self.state.failed += 1

    def emit(self) -> None:
        logger.info(f"Migration: {self.state.done}/{self.state.total}")

    async def _report(self) -> None:
        while True:
            await asyncio.sleep(self.interval)
            self.emit()

    def stop_nowait(self) -> None:
        if self._task is not None:
            self._task.cancel()

    async def stop(self) -> None:
        """Cancel the periodic reporter and wait for it to finish."""
        task, self._task = self._task, None
        if task is None:
            return
        task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await task

    @property
    def reporting(self) -> bool:
        return self._task is not None and not self._task.done()

    def snapshot(self) -> ProgressState:
        return replace(self.state)

    @asynccontextmanager
    async def running(self, total: int) -> AsyncGenerator["ProgressTracker", None]:
        """Run the reporter for the duration of the block.

        The reporter is cancelled when the block exits, including when it
        raises.
        """
        self.start(total)
        try:
            yield self
        finally:
            await self.stop()
