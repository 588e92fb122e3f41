# core/logger.py
import logging
import os
import sys
from logging.handlers import RotatingFileHandler

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"

_configured = False


def _env_flag(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() == "true"


def _env_level() -> int:
    return getattr(logging, os.getenv("LOG_LEVEL", "WARNING").upper(), logging.WARNING)


def _file_handler(path: str) -> RotatingFileHandler:
    """Rotating log file; LOG_MAX_BYTES and LOG_BACKUPS bound its size."""
    directory = os.path.dirname(path)
    if directory:
        os.makedirs(directory, exist_ok=True)
    return RotatingFileHandler(
        path,
        maxBytes=int(os.getenv("LOG_MAX_BYTES", str(2 * 1024 * 1024))),
        backupCount=int(os.getenv("LOG_BACKUPS", "3")),
    )


def setup_logging():
    """
    Configure the root logger once from LOG_* environment variables.

    Log records go to stderr (stdout carries exported rows) and, with
    LOG_TO_FILE=true, to LOG_FILE. Handlers already installed by the host
    application are left alone.
    """
    global _configured
    if _configured:
        return

    level = _env_level()
    root = logging.getLogger()
    root.setLevel(level)

    if not root.handlers:
        handlers: list[logging.Handler] = []
        if _env_flag("LOG_TO_STDERR", "true"):
            handlers.append(logging.StreamHandler(sys.stderr))
        if _env_flag("LOG_TO_FILE", "false"):
            log_file = os.getenv("LOG_FILE", "catalog.log")
            try:
                handlers.append(_file_handler(log_file))
            except OSError as e:
                root.warning("Cannot log to %s: %s", log_file, e)

        formatter = logging.Formatter(LOG_FORMAT)
        for handler in handlers:
            handler.setLevel(level)
            handler.setFormatter(formatter)
            root.addHandler(handler)

    _configured = True


def get_logger(name: str | None = None) -> logging.Logger:
    setup_logging()
    return logging.getLogger(name)
