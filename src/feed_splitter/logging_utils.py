"""Logging setup for the command-line entry points."""

import logging
from copy import deepcopy
from typing import Any, Dict

from uvicorn.config import LOGGING_CONFIG

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logging(debug: bool = False) -> None:
    """Configure root logging; debug enables per-show grouping output."""
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.INFO,
        format=LOG_FORMAT,
    )
    # requests/urllib3 debug output drowns out the refresh logs
    logging.getLogger("urllib3").setLevel(logging.WARNING)


def build_uvicorn_log_config(debug: bool = False) -> Dict[str, Any]:
    """Return a uvicorn logging config that leaves our loggers alone."""
    config = deepcopy(LOGGING_CONFIG)
    config["disable_existing_loggers"] = False
    level = "DEBUG" if debug else "INFO"
    for name in ("uvicorn", "uvicorn.error", "uvicorn.access"):
        logger_config = config.get("loggers", {}).get(name)
        if isinstance(logger_config, dict) and "level" in logger_config:
            logger_config["level"] = level
    return config
