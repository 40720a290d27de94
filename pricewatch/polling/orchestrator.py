import asyncio
import sys
import time
import logging
from dataclasses import dataclass
from typing import List, Optional, Sequence

from tqdm import tqdm

from pricewatch.config import settings
from pricewatch.data.ingestion import DataUnavailableError
from pricewatch.polling.worker import SymbolWorker
from pricewatch.reporting.csv_report import CsvReportSink
from pricewatch.schemas import SummaryRecord, TimeRange

logger = logging.getLogger(__name__)


@dataclass
class SymbolReport:
    """Outcome of one symbol's task: a record, nothing to report, or a fetch failure."""
    symbol: str
    record: Optional[SummaryRecord] = None
    error: Optional[DataUnavailableError] = None


class BatchOrchestrator:
    """
    Runs one polling tick: a worker per symbol, all at once, then decides
    whether the batch succeeded.

    Fetch failures are fatal to the batch (the first one, in symbol order, is
    raised once every task has finished). Any other exception escaping a task
    is logged and that symbol simply reports nothing this tick.
    """
    def __init__(
        self,
        symbols: Sequence[str],
        worker: Optional[SymbolWorker] = None,
        sink: Optional[CsvReportSink] = None,
        show_progress: Optional[bool] = None
    ):
        self.symbols = list(symbols)
        self.worker = worker or SymbolWorker()
        self.sink = sink or CsvReportSink()
        self.show_progress = settings.SHOW_PROGRESS if show_progress is None else show_progress

    async def run_batch(self, time_range: TimeRange) -> List[SummaryRecord]:
        """
        Main execution step for one tick.
        Returns the records emitted during this batch.
        """
        started = time.perf_counter()
        logger.info(f"Starting batch for {len(self.symbols)} symbols: {self.symbols}")

        progress = tqdm(
            total=len(self.symbols),
            desc="Polling symbols",
            file=sys.stderr,
            disable=not self.show_progress
        )
        try:
            tasks = [self._run_symbol(symbol, time_range, progress) for symbol in self.symbols]
            results = await asyncio.gather(*tasks, return_exceptions=True)
        finally:
            progress.close()

        records, failure = self._collect(results)

        duration = time.perf_counter() - started
        logger.info(
            f"Batch completed in {duration:.2f}s. "
            f"Records: {len(records)}, Symbols: {len(self.symbols)}"
        )

        if failure is not None:
            raise failure
        return records

    async def _run_symbol(self, symbol: str, time_range: TimeRange, progress: tqdm) -> SymbolReport:
        try:
            record = await self.worker.run(symbol, time_range)
        except DataUnavailableError as e:
            logger.error(f"Failed to fetch {symbol}: {e}")
            return SymbolReport(symbol, error=e)
        finally:
            progress.update(1)

        # Stream as soon as this symbol is done
        if record is not None:
            self.sink.write_record(record)
        return SymbolReport(symbol, record=record)

    def _collect(self, results: list):
        records: List[SummaryRecord] = []
        failure: Optional[DataUnavailableError] = None

        for symbol, result in zip(self.symbols, results):
            if isinstance(result, BaseException):
                logger.error(
                    f"Task for {symbol} did not complete: {result!r}",
                    exc_info=(type(result), result, result.__traceback__)
                )
                continue

            # Already logged by its task; only the first one is raised
            if result.error is not None:
                if failure is None:
                    failure = result.error
                continue

            if result.record is not None:
                records.append(result.record)

        return records, failure
