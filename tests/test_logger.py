# File: tests/test_logger.py
import logging
import sys
from logging.handlers import RotatingFileHandler

from email_scout.logger import configure, init_logging, logger


def test_logger_is_unconfigured_on_import():
    assert logger.name == "EmailScout"
    assert logger.handlers == []


def test_init_logging_writes_to_stderr_and_file(tmp_path):
    log_file = tmp_path / "scout.log"
    lg = init_logging(level="DEBUG", log_file=log_file)

    assert lg is logger
    assert lg.level == logging.DEBUG
    assert lg.propagate is False
    stream, rotating = lg.handlers
    assert stream.stream is sys.stderr
    assert isinstance(rotating, RotatingFileHandler)

    lg.debug("Visited %s", "https://a.example/")
    rotating.flush()
    assert "Visited https://a.example/" in log_file.read_text(encoding="utf-8")


def test_configure_replaces_or_appends_handlers():
    configure(level="INFO")
    configure(level="WARNING")
    assert len(logger.handlers) == 1
    assert logger.level == logging.WARNING

    configure(level="WARNING", replace_handlers=False)
    assert len(logger.handlers) == 2
