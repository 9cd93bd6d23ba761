"""Tests for the logging setup and the ansi helpers."""

import logging
import os
from io import StringIO
from unittest.mock import patch

from unixcompleters.ansi import RESET, LogStyles, make_style, should_colorize
from unixcompleters.debug import is_debug, set_debug
from unixcompleters.logging_setup import LogObjects, get_logger, init_logger


def test_make_style():
    prefix, suffix = make_style(*LogStyles.WARNING)
    assert prefix == "\x1b[33;2m"
    assert suffix == RESET
    assert make_style() == ("", RESET)


def test_should_colorize_respects_no_color():
    with patch.dict(os.environ, {"NO_COLOR": "1"}, clear=False):
        assert should_colorize() is False


def test_should_colorize_respects_force_color():
    with patch.dict(os.environ, {"FORCE_COLOR": "1", "NO_COLOR": ""}, clear=False):
        assert should_colorize(StringIO()) is True


def test_should_colorize_non_tty():
    with patch.dict(os.environ, {"NO_COLOR": "", "FORCE_COLOR": ""}, clear=False):
        assert should_colorize(StringIO()) is False


def test_debug_toggle():
    previous = is_debug()
    set_debug(not previous)
    assert is_debug() is not previous
    set_debug(previous)


def test_logger_levels(tmp_path):
    log_file = tmp_path / "log.txt"
    init_logger(str(log_file), force_debug=True)
    try:
        logger = get_logger("test.levels")
        assert logger.level == logging.DEBUG
        assert not logger.propagate
        assert get_logger("test.quiet", logging.ERROR).level == logging.ERROR

        logger.warning("something %s", "odd")
        for handler in LogObjects.handlers:
            handler.flush()
        assert "[WARNING] test.levels :: something odd" in log_file.read_text()
    finally:
        init_logger("/dev/null", force_debug=True)


def test_reinit_moves_loggers_to_new_handlers(tmp_path):
    first = tmp_path / "first.txt"
    second = tmp_path / "second.txt"
    init_logger(str(first), force_debug=True)
    try:
        logger = get_logger("test.reinit")
        init_logger(str(second), force_debug=True)
        assert logger.handlers == LogObjects.handlers

        logger.warning("after reinit")
        for handler in LogObjects.handlers:
            handler.flush()
        assert "after reinit" in second.read_text()
        assert "after reinit" not in first.read_text()
    finally:
        init_logger("/dev/null", force_debug=True)
