#!/usr/bin/env python3
# tabline/commands/command_types.py
from __future__ import annotations

"""
Command data structures and protocols.

This module defines:
- ParameterDescriptor: the declared shape of one command parameter.
- CandidateProvider / PoolRequest: the contract for value-pool functions.
- MetadataSource: anything able to describe a command's parameters.
- CommandResult: a normalized result container for command outputs.
- Command: a registered command with metadata, completers and a callable.
"""

import threading
from dataclasses import dataclass, field
from typing import Any, Callable, Iterable, Mapping, Protocol


class MetadataUnavailableError(KeyError):
    """Raised by a MetadataSource when a command cannot be described."""


class CommandCallback(Protocol):
    """Protocol for any command function."""

    def __call__(self, *args: Any, **kwargs: Any) -> Any:  # pragma: no cover - signature only
        ...


@dataclass(frozen=True, slots=True)
class ParameterDescriptor:
    """
    Declared parameter of a command.

    Attributes:
        name: Parameter name as typed after the dash (e.g. 'TypeName').
        aliases: Alternative names accepted by the binder.
        position: Zero-based position for unnamed arguments, or None.
        is_switch: True for flags that bind to True without an argument.
        value_type: Semantic type tag (str, int, bool, an Enum class, ...).
        key: Keyword the command callback receives; defaults to `name`.
        description: Short help text.
    """
    name: str
    aliases: frozenset[str] = frozenset()
    position: int | None = None
    is_switch: bool = False
    value_type: Any = str
    key: str = ""
    description: str = ""

    @property
    def keyword(self) -> str:
        return self.key or self.name

    def all_names(self) -> tuple[str, ...]:
        return (self.name, *sorted(self.aliases))


@dataclass(slots=True)
class PoolRequest:
    """
    Everything a candidate provider may look at for one completion request.

    Attributes:
        command_name: Canonical name of the command being completed.
        parameter_name: Parameter whose value is being completed.
        fake_bound: Best-effort view of what the user has already supplied.
        word_to_complete: Text typed so far for the value (sort sentinel stripped).
        cancelled: Set when the caller has given up on this request.
    """
    command_name: str
    parameter_name: str
    fake_bound: Mapping[str, Any] = field(default_factory=dict)
    word_to_complete: str = ""
    cancelled: threading.Event = field(default_factory=threading.Event)

    def bound(self, name: str, default: Any = None) -> Any:
        """Resolved fake-bound value for `name` (case-insensitive), or `default`."""
        from tabline.interface.values import resolve_value

        for key, value in self.fake_bound.items():
            if key.lower() == name.lower():
                return resolve_value(value)
        return default


CandidateProvider = Callable[[PoolRequest], Iterable[Any]]


class MetadataSource(Protocol):
    """Capability to describe a command's parameters."""

    def describe_command(self, name: str) -> list[ParameterDescriptor]:  # pragma: no cover - signature only
        ...


@dataclass(frozen=True, slots=True)
class PoolItem:
    """
    A candidate value with optional presentation details.

    Providers may yield plain values or PoolItems; `display` defaults to str(value).
    """
    value: Any
    display: str | None = None
    tooltip: str | None = None

    @property
    def display_text(self) -> str:
        return self.display if self.display is not None else str(self.value)


@dataclass(slots=True)
class CommandResult:
    """
    Normalized result container from command execution.

    Attributes:
        ok: True if the command completed successfully.
        message: Human-readable summary or primary output.
        data: Optional machine-readable payload (dict/list/primitive).
    """
    ok: bool = True
    message: str = ""
    data: Any = None

    def __str__(self) -> str:
        return self.message if self.message else ("ok" if self.ok else "error")


@dataclass(slots=True)
class Command:
    """
    A registered command with metadata and a callable to execute.

    Important fields:
        name: Primary unique command name (e.g. 'Get-TypeMember').
        description: Short, user-facing description.
        example: One-line example usage string (optional).
        callback: Function implementing the command.
        parameters: Declared parameter descriptors, in declaration order.
        module: Python module path where the command is defined.
        category: Logical group for help menu organization.
        completers: Parameter name -> candidate provider.
        aliases: Extra names resolving to the same command.
    """

    name: str
    description: str
    example: str
    callback: CommandCallback
    parameters: list[ParameterDescriptor] = field(default_factory=list)
    module: str = field(default="", repr=False)
    category: str = "general"
    completers: Mapping[str, CandidateProvider] = field(default_factory=dict)
    aliases: list[str] = field(default_factory=list)

    def parameter(self, name: str) -> ParameterDescriptor | None:
        """Return the descriptor named `name` (case-insensitive), if declared."""
        lowered = name.lower()
        for descriptor in self.parameters:
            if descriptor.name.lower() == lowered:
                return descriptor
        return None

    def completer_for(self, name: str) -> CandidateProvider | None:
        lowered = name.lower()
        for key, provider in self.completers.items():
            if key.lower() == lowered:
                return provider
        return None

    def invoke(self, *args: Any, **kwargs: Any) -> Any:
        """Execute the underlying command callback with provided arguments."""
        return self.callback(*args, **kwargs)
