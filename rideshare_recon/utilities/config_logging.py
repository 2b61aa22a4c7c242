# rideshare_recon/utilities/config_logging.py
from __future__ import annotations

import logging.config
import os
from pathlib import Path

from .settings import LOG_DIR_ENV

LOGGING = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "simple": {"format": "%(levelname)s %(name)s: %(message)s"},
        "verbose": {
            "format": "%(asctime)s %(levelname)s %(name)s "
            "[%(process)d:%(threadName)s] %(message)s",
            "datefmt": "%Y-%m-%d %H:%M:%S",
        },
    },
    "handlers": {
        "console": {
            "class": "logging.StreamHandler",
            "level": "INFO",
            "formatter": "simple",
        },
        "file": {
            "class": "logging.handlers.RotatingFileHandler",
            "level": "DEBUG",
            "formatter": "verbose",
            "filename": "logs/app.log",
            "maxBytes": 5_000_000,
            "backupCount": 5,
            "encoding": "utf-8",
        },
    },
    "loggers": {
        # root logger
        "": {
            "level": "DEBUG",
            "handlers": ["console", "file"],
        },
        # pdfminer (under pdfplumber) is very chatty at DEBUG
        "pdfminer": {"level": "WARNING", "propagate": True},
    },
}

_configured = False


def configure_logging() -> None:
    """Apply LOGGING once, creating the log directory first."""
    global _configured
    if _configured:
        return
    log_dir = Path(os.environ.get(LOG_DIR_ENV, "logs"))
    log_dir.mkdir(parents=True, exist_ok=True)
    config = dict(LOGGING)
    handlers = dict(config["handlers"])
    handlers["file"] = {**handlers["file"], "filename": str(log_dir / "app.log")}
    config["handlers"] = handlers
    logging.config.dictConfig(config)
    _configured = True
