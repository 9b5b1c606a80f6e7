#!/usr/bin/env python3
# tabline/ui/utils/console.py
from __future__ import annotations

import sys
import threading

# Single shared print mutex for shell output and logging.
PRINT_MUTEX = threading.Lock()


def print_line(text: str = "", *, file=None, flush: bool = False) -> None:
    """Thread-safe single-line print."""
    stream = sys.stdout if file is None else file
    with PRINT_MUTEX:
        stream.write(f"{text}\n")
        if flush:
            stream.flush()


def set_terminal_title(title_text: str) -> None:
    """Set the terminal window title (xterm escape; ignored when not a tty)."""
    if sys.stdout.isatty():
        sys.stdout.write(f"\x1b]2;{title_text}\x07")
        sys.stdout.flush()
