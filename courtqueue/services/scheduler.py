"""Background scheduler driving the periodic court sweep."""
import logging
import time
from typing import Optional

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.interval import IntervalTrigger

from courtqueue.core.config import settings
from courtqueue.core.database import AsyncSessionLocal
from courtqueue.services.court_store import CourtStore
from courtqueue.services.occupancy import OccupancyScheduler, SweepReport, occupancy_scheduler

logger = logging.getLogger(__name__)


class SweepScheduler:
    """Runs OccupancyScheduler.sweep on a fixed interval."""

    def __init__(
        self,
        occupancy: OccupancyScheduler,
        session_factory=AsyncSessionLocal,
        interval_seconds: Optional[int] = None,
    ):
        """Initialize the scheduler."""
        self.occupancy = occupancy
        self.session_factory = session_factory
        self.interval_seconds = interval_seconds or settings.SWEEP_INTERVAL_SECONDS
        self.scheduler = AsyncIOScheduler()
        self.running = False
        self.last_report: Optional[SweepReport] = None

    async def start(self):
        """Start the scheduler."""
        if self.running:
            logger.warning("Sweep scheduler is already running")
            return

        logger.info(f"Starting sweep scheduler (every {self.interval_seconds}s)")

        self.scheduler.add_job(
            self.run_once,
            IntervalTrigger(seconds=self.interval_seconds),
            id="court_sweep",
            name="Rotate expired courts and refresh locks",
            replace_existing=True,
            max_instances=1,
            coalesce=True,
        )

        self.scheduler.start()
        self.running = True
        logger.info("Sweep scheduler started")

    async def stop(self):
        """Stop the scheduler."""
        if not self.running:
            return

        logger.info("Stopping sweep scheduler")
        self.scheduler.shutdown(wait=False)
        self.running = False
        logger.info("Sweep scheduler stopped")

    async def run_once(self) -> Optional[SweepReport]:
        """
        Run one sweep in a fresh session.

        Errors are logged, never raised, so a bad tick does not stop the job.
        """
        started = time.monotonic()

        async with self.session_factory() as db:
            try:
                report = await self.occupancy.sweep(CourtStore(db))
            except Exception as e:
                logger.error(f"Error in court sweep: {e}", exc_info=True)
                return None

        self.last_report = report
        elapsed_ms = (time.monotonic() - started) * 1000
        if report.rotated or report.backfilled or report.lock_changed or report.failed:
            logger.info(
                f"Sweep done in {elapsed_ms:.0f}ms: rotated {[r.court_id for r in report.rotated]}, "
                f"backfilled {list(report.backfilled)}, lock changes {report.lock_changed}, "
                f"failed {report.failed}"
            )
        else:
            logger.debug(f"Sweep done in {elapsed_ms:.0f}ms, nothing to do")
        return report


# Singleton instance
sweep_scheduler = SweepScheduler(occupancy_scheduler)
