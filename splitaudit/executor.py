"""Bounded-concurrency async executor with fixed-delay retries.

Semaphore limits WIDTH (units in flight). Each unit retries on its own
schedule, so one unit exhausting its attempts never cancels or delays the
rest of the batch.
"""

import asyncio
from collections.abc import Awaitable, Callable, Mapping
from typing import Any

from splitaudit.models import DepResult, Failure, Success
from splitaudit.utils.logging import logger

# =============================================================================
# EXECUTOR DEFAULTS
# =============================================================================

DEFAULT_CONCURRENCY = 20    # Units allowed in flight at once
DEFAULT_RETRIES = 2         # Extra attempts after the first (3 total)
DEFAULT_RETRY_DELAY = 1.0   # Fixed backoff between attempts, seconds

UnitOfWork = Callable[[], Awaitable[dict[str, Any]]]
ProgressCallback = Callable[[int, int], None]
FailureCallback = Callable[[str, BaseException, int], None]


async def run_bounded(
    units: Mapping[str, UnitOfWork],
    concurrency: int = DEFAULT_CONCURRENCY,
    retries: int = DEFAULT_RETRIES,
    retry_delay: float = DEFAULT_RETRY_DELAY,
    on_progress: ProgressCallback | None = None,
    on_failure: FailureCallback | None = None,
) -> dict[str, DepResult]:
    """
    Run every unit of work under a global concurrency ceiling.

    Args:
        units: Mapping of key to zero-argument coroutine function
        concurrency: Maximum number of units in flight
        retries: Additional attempts after the first failure
        retry_delay: Seconds to wait after a failed attempt
        on_progress: Called with (completed, total) once a unit is terminal
        on_failure: Called with (key, error, attempt) after each failed attempt

    Returns:
        Dict with exactly one Success or Failure per input key
    """
    if concurrency < 1:
        raise ValueError(f"concurrency must be at least 1, got {concurrency}")
    if retries < 0:
        raise ValueError(f"retries must not be negative, got {retries}")

    semaphore = asyncio.Semaphore(concurrency)
    total = len(units)
    results: dict[str, DepResult] = {}

    async def run_one(key: str, unit: UnitOfWork) -> None:
        async with semaphore:
            result = await _attempt(key, unit, retries, retry_delay, on_failure)
        results[key] = result
        if on_progress is not None:
            on_progress(len(results), total)

    await asyncio.gather(*(run_one(key, unit) for key, unit in units.items()))
    return results


async def _attempt(
    key: str,
    unit: UnitOfWork,
    retries: int,
    retry_delay: float,
    on_failure: FailureCallback | None,
) -> DepResult:
    """Call ``unit`` up to ``retries + 1`` times, sleeping between failures."""
    attempts = retries + 1
    last_error: Exception | None = None
    for attempt in range(1, attempts + 1):
        if last_error is not None:
            await asyncio.sleep(retry_delay)
        try:
            return Success(await unit())
        except Exception as e:
            logger.debug(
                "Unit {key} failed attempt {attempt}/{attempts}: {err}",
                key=key, attempt=attempt, attempts=attempts, err=e,
            )
            if on_failure is not None:
                on_failure(key, e, attempt)
            last_error = e
    return Failure(str(last_error) or type(last_error).__name__)
