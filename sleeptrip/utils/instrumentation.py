"""
Call Instrumentation Utilities

Optional timing and memory reporting around analysis entry points. The
decorator is applied by callers, e.g.

    timed_find_peaks = timed(find_frequency_peaks)

and leaves the wrapped function's behaviour and return value untouched.

Author: SleepTrip Development Team
Date: 2026-10-18
"""

import functools
import logging
import time
import tracemalloc

logger = logging.getLogger(__name__)


def timed(func):
    """
    Log start, finish, elapsed time and peak memory of each call.

    Peak memory is measured with tracemalloc. If tracing is already active
    (e.g. an outer instrumented call) it is left running after the call.
    """
    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        name = func.__name__
        started_tracing = not tracemalloc.is_tracing()
        if started_tracing:
            tracemalloc.start()
        tracemalloc.reset_peak()
        start = time.perf_counter()
        logger.info(f"{name} function started")
        try:
            return func(*args, **kwargs)
        finally:
            elapsed = time.perf_counter() - start
            _, peak = tracemalloc.get_traced_memory()
            if started_tracing:
                tracemalloc.stop()
            logger.info(
                f"{name} function finished ({elapsed:.3f}s, "
                f"peak memory {peak / (1024 * 1024):.2f} MB)"
            )

    return wrapper
