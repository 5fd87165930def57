"""Submit one audit per top-level dependency and collect the results."""

from collections.abc import Awaitable, Callable
from typing import Any

from splitaudit.executor import (
    DEFAULT_CONCURRENCY,
    DEFAULT_RETRIES,
    DEFAULT_RETRY_DELAY,
    ProgressCallback,
    run_bounded,
)
from splitaudit.models import DepResult
from splitaudit.splitter import split_request
from splitaudit.utils.logging import logger

SubmitFn = Callable[[dict[str, Any]], Awaitable[dict[str, Any]]]


def log_progress(completed: int, total: int) -> None:
    """Default progress observer: one diagnostic line per finished dependency."""
    percent = 100 * completed / total if total else 100
    logger.info(f"completed {completed}/{total} ({percent:.0f}%)")


def _log_attempt_failure(dep: str, error: BaseException, attempt: int) -> None:
    logger.warning(f"{dep} audit failed... (attempt {attempt}: {error})")


async def audit_each_dep(
    request: dict[str, Any],
    submit: SubmitFn,
    concurrency: int = DEFAULT_CONCURRENCY,
    retries: int = DEFAULT_RETRIES,
    retry_delay: float = DEFAULT_RETRY_DELAY,
    on_progress: ProgressCallback | None = log_progress,
) -> dict[str, DepResult]:
    """
    Audit every top-level dependency of ``request`` separately.

    Args:
        request: Full audit request as produced by generate_request()
        submit: Coroutine function posting one request to the registry
        concurrency: Maximum submissions in flight
        retries: Extra attempts per dependency after the first failure
        retry_delay: Seconds between attempts
        on_progress: Observer called with (completed, total); None disables it

    Returns:
        Dict mapping each top-level dependency to Success or Failure
    """
    singles = split_request(request)
    logger.info(f"submitting audits for {len(singles)} requests...")

    units = {dep: _bind(submit, single) for dep, single in singles.items()}
    return await run_bounded(
        units,
        concurrency=concurrency,
        retries=retries,
        retry_delay=retry_delay,
        on_progress=on_progress,
        on_failure=_log_attempt_failure,
    )


def _bind(submit: SubmitFn, single: dict[str, Any]) -> Callable[[], Awaitable[dict[str, Any]]]:
    async def unit() -> dict[str, Any]:
        return await submit(single)
    return unit
