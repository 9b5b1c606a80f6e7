#!/usr/bin/env python3
# tabline/commands/commands.py
from __future__ import annotations

"""
Command registry and decorator utilities.

This module provides:
- CommandRegistry: in-memory registry of commands and aliases; it is also
  the MetadataSource the binder asks for parameter descriptors.
- command: decorator to register functions as commands, deriving parameter
  descriptors from the function signature.
- register_command: explicit API to register pre-built Command objects.
"""

import inspect
import types
import typing
from typing import Any, Callable, Dict, Iterable, Mapping, Optional

from tabline.commands.command_types import (
    CandidateProvider,
    Command,
    MetadataUnavailableError,
    ParameterDescriptor,
)


class CommandRegistry:
    """Holds all command definitions and provides lookup utilities."""

    def __init__(self) -> None:
        # Lowercased primary name -> Command
        self._commands_by_name: Dict[str, Command] = {}
        # Lowercased alias -> lowercased primary name
        self._alias_to_primary: Dict[str, str] = {}
        # Lowercased alias -> alias as registered
        self._alias_display: Dict[str, str] = {}
        # Category -> description text
        self._category_descriptions: Dict[str, str] = {}

    # ---------------- Registration ----------------

    def register(self, command_obj: Command) -> None:
        """Register a command and its aliases, ensuring no collisions."""
        primary_key = command_obj.name.lower()

        if primary_key in self._commands_by_name or primary_key in self._alias_to_primary:
            raise ValueError(
                f"Command '{command_obj.name}' already registered.")

        self._commands_by_name[primary_key] = command_obj

        for alias in getattr(command_obj, "aliases", ()):
            alias_key = alias.lower()
            if alias_key in self._commands_by_name or alias_key in self._alias_to_primary:
                raise ValueError(
                    f"Alias '{alias}' for '{command_obj.name}' collides with an existing name."
                )
            self._alias_to_primary[alias_key] = primary_key
            self._alias_display[alias_key] = alias

    # ---------------- Lookup ----------------

    def get(self, name: str) -> Optional[Command]:
        """Return the command by primary name or alias, or None if not found."""
        key = name.lower()
        if key in self._commands_by_name:
            return self._commands_by_name[key]
        if key in self._alias_to_primary:
            return self._commands_by_name[self._alias_to_primary[key]]
        return None

    def all(self) -> list[Command]:
        """Return only primary commands (avoid duplicates in UIs)."""
        return list(self._commands_by_name.values())

    def names(self) -> list[str]:
        """Return all primary names and aliases, as registered, for completion."""
        return [*(c.name for c in self._commands_by_name.values()), *self._alias_display.values()]

    def describe_command(self, name: str) -> list[ParameterDescriptor]:
        """MetadataSource: parameter descriptors of `name`."""
        command_obj = self.get(name)
        if command_obj is None:
            raise MetadataUnavailableError(name)
        return list(command_obj.parameters)

    # ---------------- Categories ----------------

    def categories(self) -> dict[str, list[Command]]:
        """Group commands by category for help output."""
        grouped: dict[str, list[Command]] = {}
        for cmd in self._commands_by_name.values():
            grouped.setdefault(cmd.category, []).append(cmd)
        return grouped

    def set_category_description(self, category: str, description: str) -> None:
        """Set display text for a category in help menus."""
        self._category_descriptions[category] = description.strip()

    def get_category_description(self, category: str) -> str:
        """Return display text for a category, or an empty string."""
        return self._category_descriptions.get(category, "")


# Global registry used across the app
REGISTRY = CommandRegistry()


def _pascal_case(identifier: str) -> str:
    """'type_name' -> 'TypeName'."""
    return "".join(part[:1].upper() + part[1:] for part in identifier.split("_") if part)


def _unwrap_optional(annotation: Any) -> Any:
    """Optional[X] / X | None -> X."""
    origin = typing.get_origin(annotation)
    if origin is typing.Union or origin is types.UnionType:
        args = [a for a in typing.get_args(annotation) if a is not type(None)]
        if len(args) == 1:
            return args[0]
    return annotation


def describe_signature(
    func: Callable[..., Any],
    *,
    aliases: Mapping[str, Iterable[str]] | None = None,
    descriptions: Mapping[str, str] | None = None,
) -> list[ParameterDescriptor]:
    """
    Derive parameter descriptors from a callback signature.

    - snake_case keywords become PascalCase parameter names.
    - Positional-or-keyword parameters get positions in declaration order.
    - bool parameters are switches and never positional.
    - keyword-only parameters are named-only; *args/**kwargs are skipped.
    """
    try:
        hints = typing.get_type_hints(func)
    except Exception:
        hints = {}
    aliases = aliases or {}
    descriptions = descriptions or {}

    descriptors: list[ParameterDescriptor] = []
    position = 0
    for parameter in inspect.signature(func).parameters.values():
        if parameter.kind in (parameter.VAR_POSITIONAL, parameter.VAR_KEYWORD):
            continue
        value_type = _unwrap_optional(hints.get(parameter.name, str))
        if value_type is inspect.Parameter.empty:
            value_type = str
        is_switch = value_type is bool
        declared_position = None
        if parameter.kind in (parameter.POSITIONAL_ONLY, parameter.POSITIONAL_OR_KEYWORD) and not is_switch:
            declared_position = position
            position += 1
        name = _pascal_case(parameter.name)
        descriptors.append(ParameterDescriptor(
            name=name,
            aliases=frozenset(aliases.get(name, ())),
            position=declared_position,
            is_switch=is_switch,
            value_type=value_type,
            key=parameter.name,
            description=descriptions.get(name, ""),
        ))
    return descriptors


def command(
    *,
    name: str | None = None,
    description: str | None = None,
    example: str | None = None,
    category: str | None = None,
    completers: Mapping[str, CandidateProvider] | None = None,
    aliases: list[str] | None = None,
    parameter_aliases: Mapping[str, Iterable[str]] | None = None,
    parameter_help: Mapping[str, str] | None = None,
    registry: CommandRegistry | None = None,
) -> Callable[[Callable[..., Any]], Callable[..., Any]]:
    """
    Decorator to register a function as a command with metadata.

    - Function name is transformed from snake_case to Verb-Noun style for
      `name` if not provided ('get_type_member' -> 'Get-TypeMember').
    - Parameter descriptors are captured from the function signature.
    """

    def wrapper(func: Callable[..., Any]) -> Callable[..., Any]:
        default_name = func.__name__
        if "_" in default_name:
            verb, _, noun = default_name.partition("_")
            default_name = f"{_pascal_case(verb)}-{_pascal_case(noun)}"

        command_obj = Command(
            name=name or default_name,
            description=(description or (func.__doc__ or "")).strip(),
            example=example or "",
            callback=func,
            parameters=describe_signature(
                func, aliases=parameter_aliases, descriptions=parameter_help),
            category=category or "general",
            completers=completers or {},
            aliases=aliases or [],
        )
        command_obj.module = func.__module__
        (registry or REGISTRY).register(command_obj)
        return func

    return wrapper


def register_command(command_obj: Command, registry: CommandRegistry | None = None) -> None:
    """Explicit API for modules that construct Command objects directly."""
    (registry or REGISTRY).register(command_obj)
