# tests/test_ui.py
from __future__ import annotations

import io
import logging

from tabline.ui import ColorizingStreamHandler, colorize, format_table, init_logger, print_line, strip_ansi


def test_format_table_aligns_and_truncates():
    table = format_table([["a", "long value here"], ["bb", "x"]], headers=["K", "V"], max_cell_width=8)
    lines = table.splitlines()
    assert len({len(line) for line in lines}) == 1
    assert "long ..." in table
    assert "long value" not in table


def test_format_table_ignores_ansi_width():
    plain = format_table([["abc"]])
    coloured = format_table([[colorize("abc", "red")]])
    assert strip_ansi(coloured) == plain


def test_colorize_unknown_style_is_plain():
    assert colorize("x", "no-such-style") == "x"


def test_print_line_to_stream():
    buffer = io.StringIO()
    print_line("hello", file=buffer)
    assert buffer.getvalue() == "hello\n"


def test_stream_handler_writes_plain_text_when_not_a_tty():
    buffer = io.StringIO()
    handler = ColorizingStreamHandler(stream=buffer)
    handler.setFormatter(logging.Formatter("[%(levelname)s] %(message)s"))
    logger = logging.getLogger("tabline.tests.handler")
    logger.propagate = False
    logger.addHandler(handler)
    try:
        logger.warning("careful %s", colorize("here", "red"))
    finally:
        logger.removeHandler(handler)
    assert buffer.getvalue() == "[WARNING] careful here\n"


def test_init_logger_file_handler_logs_debug(tmp_path):
    logfile = tmp_path / "tabline.log"
    logger = init_logger("tabline.tests.file", level="ERROR", logfile=str(logfile))
    try:
        logger.debug("diagnostic detail")
        for handler in logger.handlers:
            handler.flush()
        assert "diagnostic detail" in logfile.read_text(encoding="utf-8")
        assert logger.handlers[0].level == logging.ERROR
    finally:
        for handler in list(logger.handlers):
            handler.close()
            logger.removeHandler(handler)
