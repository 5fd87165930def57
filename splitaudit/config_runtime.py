"""Runtime configuration for splitaudit - centralized configuration management."""

import copy
import json
import os
from pathlib import Path
from typing import Any

from splitaudit.utils.constants import CONFIG_FILE_NAME, DEFAULT_REGISTRY, ENV_PREFIX, STATE_DIR_NAME
from splitaudit.utils.logging import logger

DEFAULTS = {
    "audit": {
        "concurrency": 20,
        "retries": 2,
        "retry_delay": 1.0,
    },
    "registry": {
        "url": DEFAULT_REGISTRY,
        "timeout": 30.0,
    },
}


def load_runtime_config(root: str = ".") -> dict[str, Any]:
    """
    Load runtime configuration from .splitaudit/config.json and environment variables.

    Config priority (highest to lowest):
    1. Environment variables (SPLITAUDIT_<SECTION>_<KEY>)
    2. .splitaudit/config.json file
    3. Built-in defaults

    Args:
        root: Root directory to look for config file

    Returns:
        Configuration dictionary with merged values
    """
    cfg = copy.deepcopy(DEFAULTS)

    path = Path(root) / STATE_DIR_NAME / CONFIG_FILE_NAME
    try:
        if path.exists():
            with open(path, encoding="utf-8") as f:
                user = json.load(f)

            if isinstance(user, dict):
                for section in cfg:
                    if section in user and isinstance(user[section], dict):
                        for key, value in user[section].items():
                            if key in cfg[section] and _same_type(value, cfg[section][key]):
                                cfg[section][key] = value
    except (json.JSONDecodeError, OSError) as e:
        logger.warning(f"Could not load config file from {path}: {e}")
        logger.info("Continuing with default configuration")

    for section in cfg:
        for key in cfg[section]:
            env_var = f"{ENV_PREFIX}{section.upper()}_{key.upper()}"
            if env_var in os.environ:
                value = os.environ[env_var]
                try:
                    default_value = cfg[section][key]
                    if isinstance(default_value, int):
                        cfg[section][key] = int(value)
                    elif isinstance(default_value, float):
                        cfg[section][key] = float(value)
                    else:
                        cfg[section][key] = value
                except ValueError as e:
                    logger.warning(
                        f"Invalid value for environment variable {env_var}: '{value}' - {e}"
                    )
                    logger.info(f"Using default value: {cfg[section][key]}")

    return cfg


def _same_type(value: Any, default: Any) -> bool:
    # Ints are acceptable where a float is expected, bools never are
    if isinstance(value, bool) or isinstance(default, bool):
        return isinstance(value, bool) and isinstance(default, bool)
    if isinstance(default, float):
        return isinstance(value, (int, float))
    return isinstance(value, type(default))
