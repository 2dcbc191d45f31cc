"""Periodic replay of the outbox."""

import logging
from typing import Optional

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.interval import IntervalTrigger

from ..auth.session import AuthGate
from ..config import DEFAULT_OUTBOX_INTERVAL
from .writer import FlushStats, RetryingWriter

__all__ = ["OutboxFlusher"]

logger = logging.getLogger(__name__)

FLUSH_JOB_ID = "outbox_flush_job"


class OutboxFlusher:
    """Owns the scheduler that replays queued pushes while signed in.

    Must be started from inside a running event loop.
    """

    def __init__(
        self,
        writer: RetryingWriter,
        auth: AuthGate,
        interval_seconds: int = DEFAULT_OUTBOX_INTERVAL,
        scheduler: Optional[AsyncIOScheduler] = None,
    ) -> None:
        self.writer = writer
        self.auth = auth
        self.interval_seconds = interval_seconds
        self.scheduler = scheduler or AsyncIOScheduler()

    async def flush(self) -> FlushStats:
        """Replay the outbox once, if there is a session to replay under."""
        if not self.auth.is_authenticated():
            logger.debug("Skipping outbox replay: not signed in")
            return FlushStats()
        try:
            return await self.writer.flush_outbox()
        except Exception as e:
            logger.error(f"Outbox replay failed: {e}")
            return FlushStats()

    def start(self) -> None:
        self.scheduler.add_job(
            self.flush,
            trigger=IntervalTrigger(seconds=self.interval_seconds),
            id=FLUSH_JOB_ID,
            replace_existing=True,
        )
        if not self.scheduler.running:
            self.scheduler.start()
        logger.info(f"Outbox replay started (interval: {self.interval_seconds}s)")

    def shutdown(self) -> None:
        """Shut down the scheduler if running."""
        if self.scheduler.running:
            self.scheduler.shutdown(wait=False)

    @property
    def running(self) -> bool:
        return self.scheduler.running
