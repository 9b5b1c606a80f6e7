#!/usr/bin/env python3
# tabline/commands/types.py
from __future__ import annotations

"""
Registry of owner types for attached members.

An attached member is a property or event declared on an external owner
type rather than on the command itself, and addressed on the command line
as '-Owner.Member'. Plugins register owner types here; the binder's
attached-member resolver looks them up.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Iterable, Optional


class MemberKind(Enum):
    PROPERTY = "Property"
    EVENT = "Event"


@dataclass(frozen=True, slots=True)
class MemberInfo:
    """
    A static member of an owner type.

    value_type is the property's value type or the event's handler type;
    it is used to coerce the raw text typed on the command line.
    """
    name: str
    kind: MemberKind
    value_type: Any = str
    description: str = ""


@dataclass(slots=True)
class OwnerType:
    """An owner type and its attachable members."""
    name: str
    namespace: str = ""
    members: list[MemberInfo] = field(default_factory=list)

    @property
    def full_name(self) -> str:
        return f"{self.namespace}.{self.name}" if self.namespace else self.name

    def find_members(self, name: str) -> list[MemberInfo]:
        """All members called `name` (case-insensitive), of any kind."""
        lowered = name.lower()
        return [m for m in self.members if m.name.lower() == lowered]


class TypeRegistry:
    """Holds owner types by full name and by registered short names."""

    def __init__(self) -> None:
        # Lowercased full name -> OwnerType
        self._types_by_name: Dict[str, OwnerType] = {}
        # Lowercased short name -> lowercased full name
        self._short_names: Dict[str, str] = {}
        # Lowercased short name -> short name as registered
        self._short_display: Dict[str, str] = {}

    def register(self, owner: OwnerType, short_names: Iterable[str] = ()) -> OwnerType:
        """Register an owner type and optional short names, ensuring no collisions."""
        key = owner.full_name.lower()
        if key in self._types_by_name:
            raise ValueError(f"Type '{owner.full_name}' already registered.")
        self._types_by_name[key] = owner
        for short in short_names:
            short_key = short.lower()
            existing = self._short_names.get(short_key)
            if existing is not None and existing != key:
                raise ValueError(
                    f"Short name '{short}' for '{owner.full_name}' collides with an existing name.")
            self._short_names[short_key] = key
            self._short_display[short_key] = short
        return owner

    def resolve(self, name: str) -> Optional[OwnerType]:
        """
        Resolve a type name typed by the user.

        Exact full-name match first, then an unambiguous simple-name match,
        then the registered short names.
        """
        key = name.lower()
        if key in self._types_by_name:
            return self._types_by_name[key]
        by_simple = [t for t in self._types_by_name.values() if t.name.lower() == key]
        if len(by_simple) == 1:
            return by_simple[0]
        full = self._short_names.get(key)
        if full is not None:
            return self._types_by_name.get(full)
        return None

    def members_of(self, name: str) -> list[MemberInfo]:
        """Members of the owner `name` resolves to; empty when it is unknown."""
        owner = self.resolve(name)
        return list(owner.members) if owner is not None else []

    def all(self) -> list[OwnerType]:
        return list(self._types_by_name.values())

    def names(self) -> list[str]:
        """Simple names and short names, for completion."""
        simple = [t.name for t in self._types_by_name.values()]
        return sorted({*simple, *self._short_display.values()}, key=str.lower)


# Global registry used by plugins and the shell
TYPES = TypeRegistry()


def owner_type(
    name: str,
    *,
    namespace: str = "",
    properties: dict[str, Any] | None = None,
    events: dict[str, Any] | None = None,
    short_names: Iterable[str] = (),
    registry: TypeRegistry | None = None,
) -> OwnerType:
    """Build and register an owner type from property/event name -> type maps."""
    members = [MemberInfo(n, MemberKind.PROPERTY, t) for n, t in (properties or {}).items()]
    members += [MemberInfo(n, MemberKind.EVENT, t) for n, t in (events or {}).items()]
    owner = OwnerType(name=name, namespace=namespace, members=members)
    return (registry or TYPES).register(owner, short_names)


