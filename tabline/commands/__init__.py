#!/usr/bin/env python3
# tabline/commands/__init__.py
from __future__ import annotations

"""
Package for command metadata and registration.

Provides:
- Data structures and protocols (`Command`, `ParameterDescriptor`, `PoolRequest`,
  `CandidateProvider`, `MetadataSource`, `CommandResult`).
- In-memory registry and decorators (`REGISTRY`, `command`, `register_command`).
- Owner-type registry for attached members (`TYPES`, `TypeRegistry`, `owner_type`).

This package re-exports public APIs from:
- command_types.py
- commands.py
- types.py
"""


from .command_types import (
    CandidateProvider,
    Command,
    CommandCallback,
    CommandResult,
    MetadataSource,
    MetadataUnavailableError,
    ParameterDescriptor,
    PoolItem,
    PoolRequest,
)
from .commands import REGISTRY, CommandRegistry, command, describe_signature, register_command
from .types import TYPES, MemberInfo, MemberKind, OwnerType, TypeRegistry, owner_type

__all__ = [
    "CandidateProvider",
    "Command",
    "CommandCallback",
    "CommandResult",
    "MetadataSource",
    "MetadataUnavailableError",
    "ParameterDescriptor",
    "PoolItem",
    "PoolRequest",
    "REGISTRY",
    "CommandRegistry",
    "command",
    "describe_signature",
    "register_command",
    "TYPES",
    "MemberInfo",
    "MemberKind",
    "OwnerType",
    "TypeRegistry",
    "owner_type",
]
