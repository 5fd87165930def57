"""Centralized error handler for splitaudit commands."""

import traceback
from collections.abc import Callable
from datetime import datetime
from functools import wraps
from pathlib import Path
from typing import Any

import click

from splitaudit.errors import AuditError
from splitaudit.utils.logging import logger

from .constants import ERROR_LOG_NAME, STATE_DIR_NAME
from .exit_codes import ExitCodes


def handle_exceptions(func: Callable[..., Any]) -> Callable[..., Any]:
    """Decorator that turns uncaught errors into a logged ClickException."""

    @wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        """Inner wrapper that implements the try-except logic."""
        try:
            return func(*args, **kwargs)
        except AuditError as e:
            # Expected pre-flight failures: no traceback noise
            logger.error("{code}: {err}", code=e.code, err=str(e))
            exc = click.ClickException(f"{e.code}: {e}")
            exc.exit_code = ExitCodes.PREFLIGHT_FAILED
            raise exc from e
        except Exception as e:
            error_type = type(e).__name__
            error_msg = str(e)
            tb = traceback.format_exc()

            logger.opt(exception=True).error(
                "Command '{cmd}' failed: {err}",
                cmd=func.__name__,
                err=error_msg,
            )

            log_path = error_log_path(kwargs.get("root") or ".")
            try:
                log_path.parent.mkdir(parents=True, exist_ok=True)
                with open(log_path, "a", encoding="utf-8") as f:
                    f.write("\n" + "=" * 80 + "\n")
                    f.write(f"[{datetime.now().isoformat()}] Error in command: {func.__name__}\n")
                    f.write("=" * 80 + "\n")
                    f.write(f"{error_type}: {error_msg}\n\n")
                    f.write(tb)
                    f.write("=" * 80 + "\n\n")
                log_hint = f"\n\nFull traceback logged to: {log_path}"
            except OSError:
                log_hint = ""

            raise click.ClickException(f"{error_type}: {error_msg}{log_hint}") from e

    return wrapper


def error_log_path(root: str | Path = ".") -> Path:
    """error.log inside the state directory of the audited project."""
    return Path(root) / STATE_DIR_NAME / ERROR_LOG_NAME
