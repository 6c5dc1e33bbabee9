"""
Resource measurements for a batch run.

`profile_block` wraps a block and fills a `ProfileStats` once the block exits:
wall-clock duration, process CPU percentage over the block and the peak
resident set size seen by a background sampler (all via psutil).

Usage:
    from discount_engine.utils.profiler import profile_block

    with profile_block("discount-batch") as stats:
        run_batch()

    stats.per_second(records_processed)
"""

from __future__ import annotations

import contextlib
import threading
import time
from dataclasses import dataclass
from typing import Iterator, Optional

import psutil


@dataclass
class ProfileStats:
    label: str
    duration_seconds: float = 0.0
    peak_rss_bytes: Optional[int] = None
    cpu_percent: Optional[float] = None

    def per_second(self, count: int) -> float:
        """Rate of `count` items over the measured duration (0.0 if nothing was timed)."""
        if self.duration_seconds <= 0:
            return 0.0
        return count / self.duration_seconds


class _PeakRssSampler(threading.Thread):
    """Polls the process RSS until stopped and remembers the largest value."""

    def __init__(self, process: psutil.Process, interval_seconds: float) -> None:
        super().__init__(name="rss-sampler", daemon=True)
        self._process = process
        self._interval = interval_seconds
        self._stopped = threading.Event()
        self.peak = process.memory_info().rss

    def run(self) -> None:
        while not self._stopped.wait(timeout=self._interval):
            try:
                self.peak = max(self.peak, self._process.memory_info().rss)
            except psutil.Error:
                return

    def stop(self) -> int:
        self._stopped.set()
        self.join(timeout=1.0)
        return self.peak


@contextlib.contextmanager
def profile_block(label: str, sample_interval_ms: int = 50) -> Iterator[ProfileStats]:
    """
    Measure the enclosed block.

    The yielded stats object is only populated after the block exits, even when
    the block raises.
    """
    stats = ProfileStats(label=label)
    process = psutil.Process()
    sampler = _PeakRssSampler(process, sample_interval_ms / 1000.0)

    process.cpu_percent(interval=None)  # primes the counter, always 0.0
    sampler.start()
    started = time.perf_counter()
    try:
        yield stats
    finally:
        stats.duration_seconds = time.perf_counter() - started
        peak = sampler.stop()
        stats.peak_rss_bytes = peak or None
        stats.cpu_percent = process.cpu_percent(interval=None)


__all__ = ["ProfileStats", "profile_block"]
