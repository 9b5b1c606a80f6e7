#!/usr/bin/env python3
# tabline/__main__.py
from __future__ import annotations
"""
Interactive shell: boot, then read-complete-run until exit.

    python -m tabline [--quiet]
"""

import sys

from tabline.boot import boot_sequence
from tabline.interface import HELP_TEXT, handle_line, make_cli
from tabline.ui import colorize, print_line

BANNER = "tabline - PowerShell-style completion shell. Press Tab to complete."


def main(argv: list[str] | None = None) -> int:
    args = sys.argv[1:] if argv is None else argv
    state = boot_sequence(quiet="--quiet" in args)
    config = state.config

    if config.show_banner:
        print_line(colorize(BANNER, "bold", "cyan"))
        print_line(HELP_TEXT)

    # Session variables: '$name = value' lines set them, completion reads them
    variables: dict[str, object] = {}
    cli = make_cli(
        config.prompt or "PS> ",
        enable_completion=config.enable_completion,
        timeout=config.provider_timeout,
        max_results=config.max_completion_results,
        variables=variables,
    )

    with cli:
        while True:
            try:
                line = cli.get_line()
            except KeyboardInterrupt:
                continue
            except EOFError:
                break
            try:
                output = handle_line(line, variables=variables)
            except SystemExit:
                break
            if output:
                print_line(colorize(output, "red") if output.lstrip().lower().startswith("[error]") else output)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
