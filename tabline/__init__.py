#!/usr/bin/env python3
# tabline/__init__.py
from __future__ import annotations
"""
tabline: PowerShell-style tab completion for command invocations.

Only the command layer is imported eagerly; the engine lives in
'tabline.interface' and the shell in 'tabline.__main__'.
"""

from tabline.commands import REGISTRY, TYPES, Command, command, owner_type  # noqa: F401

__version__ = "0.1.0"
