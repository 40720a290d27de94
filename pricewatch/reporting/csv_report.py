import csv
import sys
from typing import Optional, TextIO

from pricewatch.schemas import SummaryRecord

CSV_HEADER = ["period start", "symbol", "price", "change %", "min", "max", "30d avg"]


def format_record(record: SummaryRecord) -> list:
    """Render a record as CSV fields: money as $x.xx, change as x.xx%."""
    return [
        record.period_start.isoformat(),
        record.symbol,
        f"${record.price:.2f}",
        f"{record.pct_change * 100.0:.2f}%",
        f"${record.period_min:.2f}",
        f"${record.period_max:.2f}",
        f"${record.sma:.2f}",
    ]


class CsvReportSink:
    """
    Line-oriented CSV writer. Every row is flushed as soon as it is written so
    that a running monitor can be piped into other tools.
    """
    def __init__(self, stream: Optional[TextIO] = None):
        self.stream = stream or sys.stdout
        self._writer = csv.writer(self.stream, lineterminator="\n")
        self.rows_written = 0

    def write_header(self):
        self._writer.writerow(CSV_HEADER)
        self.stream.flush()

    def write_record(self, record: SummaryRecord):
        self._writer.writerow(format_record(record))
        self.stream.flush()
        self.rows_written += 1
