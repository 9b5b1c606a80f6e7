# tabline/plugins/members/entrypoint.py
from __future__ import annotations

"""
Members command entrypoint:

Commands:
    - Get-TypeMember: list properties/events of owner types

-TypeName and -MemberName complete each other: with a member name typed
only owner types declaring it are offered, and with a type name typed
only that type's members are offered.
"""

from typing import Iterator

from tabline.commands import TYPES, MemberKind, PoolItem, PoolRequest, command
from tabline.ui import format_table


# -------------------- Completers --------------------

def _bound_text(request: PoolRequest, name: str) -> str:
    value = request.bound(name)
    return value.strip() if isinstance(value, str) else ""


def _bound_kind(request: PoolRequest) -> MemberKind | None:
    value = request.bound("MemberType")
    if isinstance(value, MemberKind):
        return value
    if isinstance(value, str):
        for kind in MemberKind:
            if kind.value.lower() == value.lower() or kind.name.lower() == value.lower():
                return kind
    return None


def _complete_type_name(request: PoolRequest) -> Iterator[PoolItem]:
    """Owner types, narrowed to those declaring the bound -MemberName (prefix match)."""
    member_prefix = _bound_text(request, "MemberName").lower()
    kind = _bound_kind(request)
    for owner in TYPES.all():
        if request.cancelled.is_set():
            return
        members = [m for m in owner.members if kind is None or m.kind is kind]
        if not members or (member_prefix and not any(m.name.lower().startswith(member_prefix) for m in members)):
            continue
        yield PoolItem(owner.name, tooltip=owner.full_name)


def _complete_member_name(request: PoolRequest) -> Iterator[PoolItem]:
    """
    Members of the bound -TypeName, or of every owner type when none is typed.

    A member name shared by several types is yielded once per type, so the
    frequency directives ('!>' / '!<') order names by how common they are.
    """
    type_name = _bound_text(request, "TypeName")
    kind = _bound_kind(request)
    owners = TYPES.all()
    if type_name:
        resolved = TYPES.resolve(type_name)
        owners = [resolved] if resolved is not None else []
    for owner in owners:
        for member in owner.members:
            if kind is not None and member.kind is not kind:
                continue
            yield PoolItem(member.name, tooltip=f"{member.kind.value} of {owner.name}")


# -------------------- Commands --------------------

@command(
    description="List the attachable properties and events of owner types.",
    example="Get-TypeMember Grid -MemberName Row",
    aliases=["gtm"],
    parameter_aliases={"TypeName": ("Type",), "MemberName": ("Member",)},
    parameter_help={
        "TypeName": "Owner type (simple, full or short name)",
        "MemberName": "Member name prefix",
        "MemberType": "Property or Event",
    },
    completers={"TypeName": _complete_type_name, "MemberName": _complete_member_name},
)
def get_type_member(
    type_name: str | None = None,
    member_name: str | None = None,
    *,
    member_type: MemberKind | None = None,
) -> str:
    owners = TYPES.all()
    if type_name:
        resolved = TYPES.resolve(type_name)
        if resolved is None:
            raise ValueError(f"Unknown owner type '{type_name}'")
        owners = [resolved]

    rows = []
    for owner in owners:
        for member in owner.members:
            if member_type is not None and member.kind is not member_type:
                continue
            if member_name and not member.name.lower().startswith(member_name.lower()):
                continue
            value_type = getattr(member.value_type, "__name__", str(member.value_type))
            rows.append([owner.name, member.name, member.kind.value, value_type])
    if not rows:
        return "No matching members."
    return format_table(rows, headers=["Type", "Member", "Kind", "Value type"])
