"""Tests for logger setup."""

from __future__ import annotations

import io
import logging

from cyync_server.core.logger import get_logger, setup_logger


def test_setup_logger_stream_and_file(tmp_path) -> None:
    stream = io.StringIO()
    log_file = tmp_path / "logs" / "cyync.log"

    logger = setup_logger("cyync.test.setup", level="debug", log_file=log_file, stream=stream)
    logger.debug("lookup started")
    for handler in logger.handlers:
        handler.flush()

    assert logger.level == logging.DEBUG
    assert len(logger.handlers) == 2
    assert "DEBUG - lookup started" in stream.getvalue()
    assert "lookup started" in log_file.read_text(encoding="utf-8")
    for handler in logger.handlers:
        handler.close()


def test_setup_logger_replaces_handlers() -> None:
    setup_logger("cyync.test.replace", stream=io.StringIO())
    logger = setup_logger("cyync.test.replace", level="bogus", stream=io.StringIO())

    assert len(logger.handlers) == 1
    assert logger.level == logging.INFO
    assert get_logger("cyync.test.replace") is logger
