#!/usr/bin/env python3
# tabline/config/__init__.py
from __future__ import annotations

"""
Configuration package.

Exports:
- load_config: merge defaults, config files in the working directory and
  TABLINE_* environment variables into a validated AppConfig.
- AppConfig / DEFAULTS / ENV_PREFIX.
"""

from .config import DEFAULTS, ENV_PREFIX, AppConfig, load_config

__all__ = ["AppConfig", "DEFAULTS", "ENV_PREFIX", "load_config"]
