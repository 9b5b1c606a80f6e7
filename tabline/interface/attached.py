#!/usr/bin/env python3
# tabline/interface/attached.py
from __future__ import annotations

"""
Attached-member resolution.

'-Grid.Row 2' reaches the binder as two adjacent elements, '-Grid' and
'.Row', because a parameter name cannot contain a dot. When '-Grid' does
not name a declared parameter, the two raw texts are merged and matched
against '<Owner>(::|.)<Member>[:<value>]', the owner is looked up in the
type registry and the value is coerced to the member's declared type.
"""

import re
from dataclasses import dataclass
from typing import Any

from tabline.commands.types import MemberInfo, MemberKind, OwnerType, TypeRegistry

from .diagnostics import Diagnostic, DiagnosticKind, record
from .tokenizer import CommandElement
from .values import coerce_value

_ATTACHED_RE = re.compile(
    r"(?P<owner>[A-Za-z_][\w.]*)(?:::|\.)(?P<member>[A-Za-z_]\w*)(?::(?P<inline>.*))?\Z",
    re.DOTALL,
)


@dataclass(frozen=True, slots=True)
class AttachedMemberMatch:
    """
    A merged '-Owner.Member' parameter.

    Attributes:
        owner_type: Resolved owner type.
        member_name: Member name as declared on the owner.
        member_kind: PROPERTY or EVENT.
        raw_value: Text typed for the value, or None when nothing was supplied.
        coerced_value: raw_value converted to the member type (raw text on failure).
        consumed_value: True when the value came from the element after the merged pair.
    """
    owner_type: OwnerType
    member_name: str
    member_kind: MemberKind
    raw_value: str | None
    coerced_value: Any
    consumed_value: bool = False

    @property
    def name(self) -> str:
        """Key used in the binding result, e.g. 'Grid.Row'."""
        return f"{self.owner_type.name}.{self.member_name}"


def split_attached_name(text: str) -> tuple[str, str] | None:
    """Split 'Owner.Member' / 'Owner::Member' into (owner, member prefix); None otherwise."""
    if "::" in text:
        owner, _, member = text.rpartition("::")
    elif "." in text:
        owner, _, member = text.rpartition(".")
    else:
        return None
    if not owner:
        return None
    return owner, member


def find_member(owner: OwnerType, name: str, diagnostics: list[Diagnostic] | None = None,
                offset: int | None = None) -> MemberInfo | None:
    """
    Look a member up on `owner`.

    A bare name declared with more than one kind is ambiguous; a trailing
    'Property' or 'Event' suffix selects the kind.
    """
    found = owner.find_members(name)
    if len(found) == 1:
        return found[0]
    if len(found) > 1:
        kinds = " and ".join(sorted(m.kind.value for m in found))
        record(diagnostics, DiagnosticKind.AMBIGUOUS_ATTACHED_MEMBER,
               f"'{owner.name}.{name}' is both a {kinds}; add a Property or Event suffix", offset)
        return None

    for kind in MemberKind:
        suffix = kind.value
        if len(name) > len(suffix) and name.lower().endswith(suffix.lower()):
            base = name[:-len(suffix)]
            typed = [m for m in owner.find_members(base) if m.kind is kind]
            if typed:
                return typed[0]
    return None


def try_merge_attached_member(
    parameter: CommandElement,
    adjacent: CommandElement | None,
    types: TypeRegistry | None,
    *,
    value: CommandElement | None = None,
    diagnostics: list[Diagnostic] | None = None,
) -> AttachedMemberMatch | None:
    """
    Merge `parameter` and the element right after it into an attached member.

    Args:
        parameter: The parameter element that failed ordinary matching.
        adjacent: The element following it; must start where `parameter` ends.
        types: Owner type registry.
        value: The element after `adjacent`, used as the value when no inline
            ':value' was typed and it is not a parameter.
        diagnostics: Collects AMBIGUOUS_ATTACHED_MEMBER / COERCION_FAILURE.

    Returns None when the pair does not form a known attached member; the
    caller then treats the original tokens as an unknown parameter.
    """
    if types is None or adjacent is None:
        return None
    if adjacent.is_parameter or adjacent.start != parameter.end or parameter.inline_value is not None:
        return None

    match = _ATTACHED_RE.match(parameter.text + adjacent.raw)
    if match is None:
        return None
    owner = types.resolve(match["owner"])
    if owner is None:
        return None
    member = find_member(owner, match["member"], diagnostics, parameter.start)
    if member is None:
        return None

    inline = match["inline"]
    consumed = False
    if inline:
        raw: str | None = inline
    elif value is not None and not value.is_parameter:
        raw = value.text
        consumed = True
    else:
        raw = None

    coerced: Any = raw
    if raw:
        try:
            coerced = coerce_value(raw, member.value_type)
        except (ValueError, TypeError, KeyError) as exc:
            record(diagnostics, DiagnosticKind.COERCION_FAILURE,
                   f"Cannot convert {raw!r} for {owner.name}.{member.name}: {exc}",
                   value.start if consumed and value is not None else parameter.start)
            coerced = raw

    return AttachedMemberMatch(
        owner_type=owner,
        member_name=member.name,
        member_kind=member.kind,
        raw_value=raw,
        coerced_value=coerced,
        consumed_value=consumed,
    )
