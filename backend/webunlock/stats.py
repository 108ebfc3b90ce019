import time
from typing import List

from .models import ExtractionResult, ScrapeStats, TableRow, TableStats, TimingStats


class Stopwatch:
    def __init__(self):
        self.started = time.perf_counter()

    def elapsed_ms(self) -> int:
        return int((time.perf_counter() - self.started) * 1000)


def extraction_stats(data: ExtractionResult, execution_time: int) -> ScrapeStats:
    return ScrapeStats(
        total_selectors=len(data),
        total_elements=sum(len(records) for records in data.values()),
        execution_time=execution_time,
    )


def table_stats(rows: List[TableRow], execution_time: int) -> TableStats:
    return TableStats(total_rows=len(rows), execution_time=execution_time)


def timing_stats(execution_time: int) -> TimingStats:
    return TimingStats(execution_time=execution_time)


def empty_selectors(data: ExtractionResult) -> List[str]:
    """Selectors that matched no elements."""
    return [selector for selector, records in data.items() if not records]
