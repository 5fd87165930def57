"""splitaudit utilities package."""

from .constants import CONFIG_FILE_NAME, ERROR_LOG_NAME, STATE_DIR_NAME
from .error_handler import error_log_path, handle_exceptions
from .exit_codes import ExitCodes
from .logging import logger

__all__ = [
    "STATE_DIR_NAME",
    "ERROR_LOG_NAME",
    "CONFIG_FILE_NAME",
    "error_log_path",
    "handle_exceptions",
    "ExitCodes",
    "logger",
]
