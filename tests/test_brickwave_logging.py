import logging
from pathlib import Path

import pytest

from brickwave import logging_utils
from brickwave.logging_utils import (
    LOG_DIR_ENV,
    configure_logging,
    get_log_dir,
    get_log_path,
    log_exception,
)


def test_log_dir_uses_env_override(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv(LOG_DIR_ENV, str(tmp_path))
    assert get_log_dir() == tmp_path
    assert get_log_path() == tmp_path / "brickwave.log"


def test_configure_logging_adds_file_handler(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.setenv(LOG_DIR_ENV, str(tmp_path))
    configure_logging(force=True)
    logger = logging.getLogger("brickwave")
    assert any(isinstance(handler, logging.FileHandler) for handler in logger.handlers)
    assert (tmp_path / "brickwave.log").exists()
    assert logging_utils._logging_configured


def test_log_exception_appends_traceback(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv(LOG_DIR_ENV, str(tmp_path))
    try:
        raise RuntimeError("disk on fire")
    except RuntimeError as exc:
        path = log_exception("render", exc)
    assert path == tmp_path / "brickwave.log"
    content = path.read_text(encoding="utf-8")
    assert "render failed: RuntimeError: disk on fire" in content
    assert "Traceback" in content


def test_console_lines_carry_level_emoji() -> None:
    formatter = logging_utils._EmojiFormatter()
    record = logging.LogRecord("brickwave.render", logging.WARNING, __file__, 1, "hot", None, None)
    assert formatter.format(record) == "⚠️ brickwave.render: hot"


def test_log_exception_reports_unwritable_dir(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    blocker = tmp_path / "not-a-dir"
    blocker.write_text("", encoding="utf-8")
    monkeypatch.setenv(LOG_DIR_ENV, str(blocker))
    assert log_exception("render", RuntimeError("boom")) is None


def test_configure_logging_survives_unwritable_dir(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    blocker = tmp_path / "not-a-dir"
    blocker.write_text("", encoding="utf-8")
    monkeypatch.setenv(LOG_DIR_ENV, str(blocker))
    configure_logging(force=True)
    logger = logging.getLogger("brickwave")
    assert not any(isinstance(handler, logging.FileHandler) for handler in logger.handlers)
