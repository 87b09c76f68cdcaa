"""
Periodic overdue sweep.

The sweep runs in a worker thread because persisting may block on Firestore.
It is idempotent, so the interval only controls how quickly a missed
deadline shows up; it can also be triggered on demand from the admin route.
"""

import asyncio
import logging
from typing import Optional

from saarthi.services.report_store import ReportStore

logger = logging.getLogger(__name__)


class OverdueSweepScheduler:
    def __init__(self, store: ReportStore, interval_seconds: float = 60.0):
        self.store = store
        self.interval_seconds = interval_seconds
        self._task: Optional[asyncio.Task] = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    async def _run(self) -> None:
        while True:
            try:
                count = await asyncio.to_thread(self.store.sweep_overdue)
                if count:
                    logger.info(f"Scheduled sweep marked {count} report(s) overdue")
            except Exception as e:
                logger.error(f"Overdue sweep failed: {e}", exc_info=True)
            await asyncio.sleep(self.interval_seconds)

    def start(self) -> None:
        """Start the loop on the running event loop (no-op if already running)."""
        if self.running:
            return
        self._task = asyncio.get_running_loop().create_task(self._run())
        logger.info(f"Overdue sweep scheduled every {self.interval_seconds}s")

    async def stop(self) -> None:
        if self._task is None:
            return
        self._task.cancel()
        try:
            await self._task
        except asyncio.CancelledError:
            pass
        self._task = None
