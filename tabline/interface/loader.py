#!/usr/bin/env python3
# tabline/interface/loader.py
from __future__ import annotations

"""
Dynamic plugin loader.

Features:
- Imports all modules under a given package (default: 'tabline.plugins').
- Supports 'entrypoint.py' inside a subpackage registering COMMAND/COMMANDS.
- Derives categories from module paths if not explicitly set.
- Collects category descriptions from either CATEGORY_DESCRIPTION or module docstring.

Plugins register owner types for attached members as a side effect of
being imported (see tabline.commands.owner_type).
"""

import importlib
import logging
import pkgutil
from pathlib import Path
from types import ModuleType
from typing import Iterable

from tabline.commands import REGISTRY, Command, CommandRegistry

_LOG = logging.getLogger(__name__)

DEFAULT_PLUGIN_PACKAGE = "tabline.plugins"


def _register_from_entry_module(module: ModuleType, registry: CommandRegistry) -> int:
    """Register COMMAND/COMMANDS exported by an entry module, if present."""
    registered_count = 0
    obj = getattr(module, "COMMAND", None)
    if isinstance(obj, Command):
        registry.register(obj)
        registered_count += 1
    objs = getattr(module, "COMMANDS", None)
    if isinstance(objs, Iterable):
        for item in objs:
            if isinstance(item, Command):
                registry.register(item)
                registered_count += 1
    return registered_count


def load_commands(commands_package: str = DEFAULT_PLUGIN_PACKAGE, registry: CommandRegistry | None = None) -> int:
    """
    Import all modules under the given package and return how many were imported.

    Supported layouts:
      1) Plain modules: plugins/foo.py  -> import plugins.foo
      2) Packages with an entrypoint: plugins/bar/entrypoint.py
         -> import plugins.bar.entrypoint
            and register COMMAND/COMMANDS if present.

    Works with regular and namespace packages.
    """
    registry = REGISTRY if registry is None else registry
    package = importlib.import_module(commands_package)
    package_paths = [str(p) for p in getattr(package, "__path__", [])]

    if not package_paths:
        raise RuntimeError(
            f"'{commands_package}' must be a package (folder) with modules."
        )

    loaded_count = 0
    discovered_subpackages: set[str] = set()

    for base_path in package_paths:
        for modinfo in pkgutil.iter_modules([base_path]):
            module_name = modinfo.name
            if module_name.startswith("_"):
                # Ignore private modules
                continue

            if modinfo.ispkg:
                discovered_subpackages.add(module_name)
                entrypoint_path = Path(base_path) / module_name / "entrypoint.py"
                if entrypoint_path.exists():
                    module = importlib.import_module(
                        f"{commands_package}.{module_name}.entrypoint")
                    _register_from_entry_module(module, registry)
                else:
                    importlib.import_module(f"{commands_package}.{module_name}")
            else:
                importlib.import_module(f"{commands_package}.{module_name}")
            loaded_count += 1
            _LOG.debug("loaded plugin %s.%s", commands_package, module_name)

    _assign_categories_from_modules(commands_package, registry)
    _collect_category_descriptions(commands_package, discovered_subpackages, registry)
    return loaded_count


def _assign_categories_from_modules(commands_package: str, registry: CommandRegistry) -> None:
    """
    Derive category from first subpackage segment (e.g. 'controls.entrypoint')
    if not explicitly set (default 'general').
    """
    prefix = f"{commands_package}."
    for command_obj in registry.all():
        if command_obj.category != "general" or not command_obj.module.startswith(prefix):
            continue
        segments = command_obj.module[len(prefix):].split(".")
        if len(segments) >= 2:
            command_obj.category = segments[0]


def _collect_category_descriptions(commands_package: str, subpackages: set[str],
                                   registry: CommandRegistry) -> None:
    """
    Category description is taken from:
      1) <package>.<category>.CATEGORY_DESCRIPTION (string), or
      2) <package>.<category> module docstring (__doc__), else "".
    """
    for category in subpackages:
        try:
            module = importlib.import_module(f"{commands_package}.{category}")
        except ImportError:
            _LOG.debug("no package module for category %s", category)
            continue

        description_text = ""
        value = getattr(module, "CATEGORY_DESCRIPTION", None)
        if isinstance(value, str):
            description_text = value.strip()
        elif isinstance(getattr(module, "__doc__", None), str):
            description_text = (module.__doc__ or "").strip()

        registry.set_category_description(category, description_text)
