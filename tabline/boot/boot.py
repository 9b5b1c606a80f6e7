#!/usr/bin/env python3
# tabline/boot/boot.py
from __future__ import annotations
"""
Boot sequence for the tabline shell.

Steps run in order, each printing a status line; a failing step prints
[FAILED] with the reason and re-raises, so a broken config or plugin stops
the shell before the prompt appears.
"""

from dataclasses import dataclass
from logging import Logger
from typing import Any, Callable
import platform

from tabline.commands import REGISTRY, TYPES
from tabline.config import AppConfig, load_config
from tabline.interface.loader import load_commands
from tabline.ui import colorize, enable_windows_vt, init_logger, print_line, set_terminal_title


@dataclass(slots=True)
class BootState:
    config: AppConfig
    logger: Logger
    loaded_count: int
    command_count: int
    type_count: int


def _step(label: str, fn: Callable[[], Any], *, quiet: bool = False) -> Any:
    """Run a boot step with status output."""
    try:
        out = fn()
    except Exception as exc:
        print_line(colorize(f"[FAILED] {label} ({type(exc).__name__}: {exc})", "red"))
        raise
    if not quiet:
        print_line(colorize(f"[  OK  ] {label}", "green"))
    return out


def boot_sequence(*, quiet: bool = False) -> BootState:
    # ---------- console + env ----------
    _step("Enable ANSI sequences", enable_windows_vt, quiet=quiet)
    _step(
        f"Detect environment: {platform.system()} {platform.release()} / Python {platform.python_version()}",
        lambda: None,
        quiet=quiet,
    )

    # ---------- config ----------
    config: AppConfig = _step("Load configuration", load_config, quiet=quiet)

    # ---------- logging ----------
    logger = _step(
        "Initialize logger",
        lambda: init_logger(
            "tabline",
            level=config.log_level,
            logfile=str(config.log_file_path) if config.log_file_path else None,
        ),
        quiet=quiet,
    )

    # ---------- plugins ----------
    loaded_count = _step(
        f"Load plugins from '{config.plugin_package}'",
        lambda: load_commands(config.plugin_package),
        quiet=quiet,
    )
    command_count = _step("Register commands", lambda: len(REGISTRY.all()), quiet=quiet)
    type_count = _step("Register attached-member owner types", lambda: len(TYPES.all()), quiet=quiet)

    _step(
        "Finalize terminal title",
        lambda: set_terminal_title(f"tabline • {command_count} cmds"),
        quiet=quiet,
    )
    logger.debug("boot complete: %d plugin module(s), %d command(s), %d owner type(s)",
                  loaded_count, command_count, type_count)

    return BootState(
        config=config,
        logger=logger,
        loaded_count=loaded_count,
        command_count=command_count,
        type_count=type_count,
    )
