#!/usr/bin/env python3
# tabline/plugins/__init__.py
from __future__ import annotations

"""Bundled plugins, discovered by tabline.interface.loader.load_commands."""
