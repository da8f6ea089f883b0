"""Tests for the package logger and the per-run log file."""

import logging
from pathlib import Path

from rich.logging import RichHandler

from migro.utils.log import logger, remove_file_handler, start_run_log


def test_run_log_gets_debug_lines(tmp_path):
    """Test that the run log file receives DEBUG and INFO lines with timestamps."""
    handler, path = start_run_log(tmp_path / "logs")
    try:
        logger.debug("only in the file")
        logger.info("everywhere")
    finally:
        remove_file_handler(handler)
    assert path.parent == tmp_path / "logs"
    assert path.name.startswith("migro_")
    text = path.read_text(encoding="utf-8")
    assert "only in the file" in text
    assert "everywhere" in text
    assert text.startswith("[")


def test_run_log_falls_back_to_cwd(tmp_path, monkeypatch):
    """Test that an uncreatable log directory falls back to the working directory."""
    monkeypatch.chdir(tmp_path)
    blocker = tmp_path / "blocker"
    blocker.write_text("not a directory")
    handler, path = start_run_log(blocker / "logs")
    try:
        assert path.parent == Path(".")
    finally:
        remove_file_handler(handler)
    assert (tmp_path / path.name).exists()


def test_console_handler_hides_debug():
    """Test that the rich console handler is set to INFO or above."""
    console_handlers = [h for h in logger.handlers if isinstance(h, RichHandler)]
    assert len(console_handlers) == 1
    assert console_handlers[0].level >= logging.INFO
