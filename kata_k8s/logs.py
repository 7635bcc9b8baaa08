"""
Terminal logging for the kata-k8s command.

Every message is printed as ``LEVEL: message``. Errors go to stderr, the
rest to stdout, so the output reads like the shell helpers CI operators are
used to.
"""

import logging
import logging.config
from typing import Any, Dict


class BelowLevelFilter(logging.Filter):
    """Only let through records strictly below ``level``."""

    def __init__(self, level: str = "ERROR"):
        super().__init__()
        self.level = logging.getLevelName(level)

    def filter(self, record: logging.LogRecord) -> bool:
        return record.levelno < self.level


def get_logging_config(debug: bool = False) -> Dict[str, Any]:
    level = "DEBUG" if debug else "INFO"
    return {
        "version": 1,
        "disable_existing_loggers": False,
        "filters": {
            "below_error": {
                "()": BelowLevelFilter,
                "level": "ERROR",
            }
        },
        "formatters": {
            "severity": {
                "format": "%(levelname)s: %(message)s",
            }
        },
        "handlers": {
            "stdout": {
                "class": "logging.StreamHandler",
                "formatter": "severity",
                "stream": "ext://sys.stdout",
                "filters": ["below_error"],
            },
            "stderr": {
                "class": "logging.StreamHandler",
                "formatter": "severity",
                "stream": "ext://sys.stderr",
                "level": "ERROR",
            },
        },
        "loggers": {
            "pyinfra": {
                "handlers": ["stdout", "stderr"],
                "level": level,
                "propagate": False,
            }
        },
    }


def setup_logging(debug: bool = False) -> None:
    logging.config.dictConfig(get_logging_config(debug))
