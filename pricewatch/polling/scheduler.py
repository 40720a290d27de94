import asyncio
import time
import logging
from datetime import datetime, timezone
from typing import Awaitable, Callable, Optional

from pricewatch.config import settings
from pricewatch.polling.orchestrator import BatchOrchestrator
from pricewatch.schemas import TimeRange

logger = logging.getLogger(__name__)


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def next_deadline(previous: float, interval: float, now: float) -> float:
    """
    When the tick after one scheduled at `previous` should fire.

    Missed ticks are not replayed: if the batch ran past the next deadline,
    the next tick fires right away and the cadence restarts from there.
    """
    deadline = previous + interval
    if now > deadline:
        logger.warning(f"Batch overran the {interval:.1f}s interval by {now - deadline:.2f}s")
        return now
    return deadline


class PollingScheduler:
    """
    Drives BatchOrchestrator at a fixed interval, one batch at a time.
    The start of the period stays fixed; its end is "now" at every tick.
    """
    def __init__(
        self,
        orchestrator: BatchOrchestrator,
        start: datetime,
        interval: Optional[float] = None,
        max_ticks: Optional[int] = None,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
        now: Callable[[], datetime] = _utc_now
    ):
        self.orchestrator = orchestrator
        self.start = start
        self.interval = settings.POLL_INTERVAL_SECONDS if interval is None else interval
        self.max_ticks = max_ticks
        self.clock = clock
        self.sleep = sleep
        self.now = now
        self.ticks = 0

    async def run(self) -> int:
        """
        Loop until max_ticks is reached (never, by default). Batch failures
        propagate to the caller and stop the loop.
        Returns the number of ticks run.
        """
        logger.info(f"Polling every {self.interval:.1f}s from {self.start.isoformat()}")
        tick_at = self.clock()

        while self.max_ticks is None or self.ticks < self.max_ticks:
            delay = tick_at - self.clock()
            if delay > 0:
                await self.sleep(delay)

            time_range = TimeRange.ending_now(self.start, now=self.now())
            await self.orchestrator.run_batch(time_range)
            self.ticks += 1

            tick_at = next_deadline(tick_at, self.interval, self.clock())

        return self.ticks
