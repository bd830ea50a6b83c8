"""
Timing utilities for performance measurement.
"""

from __future__ import annotations

import logging
import time
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Iterator, Optional


@dataclass
class TimingResult:
    """Result of a timed operation."""
    name: str
    duration_sec: float
    success: bool = True
    error: Optional[str] = None

    def __str__(self) -> str:
        return f"{self.name}: {format_duration(self.duration_sec)}"


@contextmanager
def timed_operation(
    name: str,
    logger: Optional[logging.Logger] = None,
    log_level: int = logging.DEBUG
) -> Iterator[TimingResult]:
    """
    Context manager for timing operations.

    Usage:
        with timed_operation("repair", logger) as timing:
            # do work
        print(f"Took {timing.duration_sec:.2f}s")
    """
    result = TimingResult(name=name, duration_sec=0.0)
    start = time.perf_counter()

    try:
        yield result
        result.success = True
    except Exception as e:
        result.success = False
        result.error = str(e)
        raise
    finally:
        result.duration_sec = time.perf_counter() - start

        if logger:
            msg = str(result)
            if not result.success:
                msg += f" (failed: {result.error})"
            logger.log(log_level, msg)


class Timer:
    """
    Wall-clock timer started at creation.

    Usage:
        timer = Timer()
        # do work
        print(f"{timer.elapsed:.2f}s")
    """

    def __init__(self):
        self._global_start: float = time.perf_counter()

    @property
    def elapsed(self) -> float:
        """Get total elapsed time since timer creation."""
        return time.perf_counter() - self._global_start


def format_duration(seconds: float) -> str:
    """
    Format duration in human-readable form.

    Args:
        seconds: Duration in seconds

    Returns:
        Formatted string
    """
    if seconds < 0.001:
        return f"{seconds * 1000000:.0f}µs"
    elif seconds < 1:
        return f"{seconds * 1000:.1f}ms"
    elif seconds < 60:
        return f"{seconds:.2f}s"
    elif seconds < 3600:
        minutes = int(seconds // 60)
        secs = seconds % 60
        return f"{minutes}m {secs:.1f}s"
    else:
        hours = int(seconds // 3600)
        minutes = int((seconds % 3600) // 60)
        secs = seconds % 60
        return f"{hours}h {minutes}m {secs:.0f}s"
