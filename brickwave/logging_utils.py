from __future__ import annotations

import logging
import os
import sys
import traceback
from datetime import datetime
from pathlib import Path

_LOGGER = logging.getLogger("brickwave.logging")
_PACKAGE_LOGGER = "brickwave"
LOG_DIR_ENV = "BRICKWAVE_LOG_DIR"
DEBUG_ENV = "BRICKWAVE_DEBUG"
_LOG_FILE = "brickwave.log"
_logging_configured = False


class _EmojiFormatter(logging.Formatter):
    """Console lines prefixed with an emoji per level."""

    PREFIXES = {
        logging.DEBUG: "🐛",
        logging.INFO: "ℹ️",
        logging.WARNING: "⚠️",
        logging.ERROR: "❌",
        logging.CRITICAL: "💥",
    }

    def __init__(self) -> None:
        super().__init__("%(prefix)s %(name)s: %(message)s")

    def format(self, record: logging.LogRecord) -> str:
        record.prefix = self.PREFIXES.get(record.levelno, "")
        return super().format(record)


def debug_enabled() -> bool:
    return bool(os.environ.get(DEBUG_ENV))


def get_log_dir() -> Path:
    configured = os.environ.get(LOG_DIR_ENV)
    if configured:
        return Path(configured).expanduser()
    return Path.home() / ".cache" / "brickwave" / "logs"


def get_log_path() -> Path:
    return get_log_dir() / _LOG_FILE


def _console_handler() -> logging.Handler:
    handler = logging.StreamHandler(stream=sys.__stderr__)
    handler.setLevel(logging.DEBUG if debug_enabled() else logging.INFO)
    handler.setFormatter(_EmojiFormatter())
    return handler


def _file_handler() -> logging.Handler:
    get_log_dir().mkdir(parents=True, exist_ok=True)
    handler = logging.FileHandler(get_log_path(), encoding="utf-8")
    handler.setLevel(logging.DEBUG)
    handler.setFormatter(
        logging.Formatter(
            "%(asctime)s [%(levelname)s] %(name)s: %(message)s", datefmt="%Y-%m-%d %H:%M:%S"
        )
    )
    return handler


def configure_logging(*, force: bool = False) -> None:
    """Attach brickwave's console and file handlers once per process.

    The console handler is skipped when the host application already configured the root
    logger; records still propagate to it. ``force`` drops existing brickwave handlers and
    rebuilds both, which picks up a changed ``BRICKWAVE_LOG_DIR``.
    """
    global _logging_configured
    if _logging_configured and not force:
        return

    logger = logging.getLogger(_PACKAGE_LOGGER)
    logger.setLevel(logging.DEBUG)
    logger.propagate = True

    if force:
        for handler in list(logger.handlers):
            logger.removeHandler(handler)
            handler.close()

    if force or not logging.getLogger().handlers:
        logger.addHandler(_console_handler())

    try:
        logger.addHandler(_file_handler())
    except OSError as exc:
        _LOGGER.warning("File logging disabled (%s): %s", get_log_path(), exc)

    _logging_configured = True


def log_exception(context: str, exc: BaseException) -> Path | None:
    """Append ``exc`` with its traceback to the log file; returns the path written."""
    path = get_log_path()
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        with path.open("a", encoding="utf-8") as handle:
            stamp = datetime.now().isoformat(timespec="seconds")
            handle.write(f"[{stamp}] {context} failed: {type(exc).__name__}: {exc}\n")
            traceback.print_exception(type(exc), exc, exc.__traceback__, file=handle)
            handle.write("\n")
    except OSError as log_exc:
        _LOGGER.warning("Could not write %s: %s", path, log_exc)
        return None
    return path
