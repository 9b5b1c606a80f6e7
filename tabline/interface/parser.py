#!/usr/bin/env python3
# tabline/interface/parser.py
from __future__ import annotations

"""
Argument binding for partially typed command invocations.

Responsibilities:
- Re-bind already typed elements to a command's declared parameters the way
  the host binder would: exact name or unique prefix, inline ':value',
  following value, switch default, then positional arguments.
- Tolerate ambiguity: unknown, ambiguous and duplicate parameters become
  diagnostics and land in the 'unknown' collections instead of raising.
- Locate the parameter under the cursor in two phases: an anchor recorded
  during the pass, resolved once positional binding is known.
- Convert a clean binding into callback keywords and render usage strings.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Mapping, Sequence

from tabline.commands.command_types import Command, MetadataSource, ParameterDescriptor
from tabline.commands.types import TypeRegistry

from .attached import AttachedMemberMatch, try_merge_attached_member
from .diagnostics import Diagnostic, DiagnosticKind, record
from .tokenizer import CommandElement, TokenKind
from .values import Deferred, Literal, Value, coerce_value, resolve_value

_LOG = logging.getLogger(__name__)

_AUTOMATIC_VARIABLES = {"true": True, "false": False, "null": None}


@dataclass(slots=True)
class CursorAnchor:
    """Where the cursor was found during the binding pass (phase one)."""
    element_index: int
    on_name: bool
    name: str | None = None
    positional_index: int | None = None


@dataclass(slots=True)
class BindingResult:
    """
    Outcome of one binding pass.

    Attributes:
        named_arguments: Descriptor name (or 'Owner.Member') -> value.
        unknown_named_arguments: Typed parameter name -> value, for names that
            matched nothing or more than one descriptor.
        unknown_positional_arguments: Values no positional descriptor took.
        binding_errors: Non-fatal diagnostics.
        parameter_in_use: Parameter under the cursor: a descriptor name, an
            'Owner.Member' name, the typed name of an unknown parameter, an
            index into unknown_positional_arguments, or None.
        cursor_on_name: True when the cursor sits on a parameter name rather
            than on its value.
        attached_members: Merged attached members, keyed like named_arguments.
        available: Declared descriptors left unbound after the pass.
        cursor_element: The element containing the cursor, if any.
    """
    named_arguments: dict[str, Value] = field(default_factory=dict)
    unknown_named_arguments: dict[str, Value] = field(default_factory=dict)
    unknown_positional_arguments: list[Value] = field(default_factory=list)
    binding_errors: list[Diagnostic] = field(default_factory=list)
    parameter_in_use: str | int | None = None
    cursor_on_name: bool = False
    attached_members: dict[str, AttachedMemberMatch] = field(default_factory=dict)
    available: list[ParameterDescriptor] = field(default_factory=list)
    cursor_element: CommandElement | None = None

    def fake_bound_parameters(self) -> dict[str, Value]:
        """
        Best-effort view of what the user supplied, for candidate providers.

        Unknown named arguments first, then named arguments (which win on
        collisions), then leftover positionals under '$pos<N>' keys.
        """
        fake: dict[str, Value] = {}
        fake.update(self.unknown_named_arguments)
        fake.update(self.named_arguments)
        for index, value in enumerate(self.unknown_positional_arguments):
            fake[f"$pos{index}"] = value
        return fake

    def resolved(self) -> dict[str, Any]:
        """fake_bound_parameters() with every value resolved."""
        return {key: resolve_value(value) for key, value in self.fake_bound_parameters().items()}


def _variable_thunk(variables: Mapping[str, Any] | None, name: str):
    def lookup() -> Any:
        if not variables:
            return None
        if name in variables:
            return variables[name]
        lowered = name.lower()
        for key, value in variables.items():
            if key.lower() == lowered:
                return value
        return None
    return lookup


def _value_of(element: CommandElement, variables: Mapping[str, Any] | None) -> Value:
    """Bound value of a VALUE element; variable references are deferred."""
    if len(element.parts) > 1:
        return Literal([part.value for part in element.parts])
    if element.token_kind is TokenKind.VARIABLE:
        lowered = element.text.lower()
        if lowered in _AUTOMATIC_VARIABLES:
            return Literal(_AUTOMATIC_VARIABLES[lowered])
        return Deferred(_variable_thunk(variables, element.text), label=f"${element.text}")
    return Literal(element.text)


def _resolve_argument(
    element: CommandElement,
    following: CommandElement | None,
    is_switch: bool,
    variables: Mapping[str, Any] | None,
) -> tuple[Value, int]:
    """
    Value of a parameter element and how many following elements it consumed.

    Inline ':value' first; switches never take the next element; otherwise
    the next element is the argument when it is not itself a parameter;
    failing that the parameter is treated as a switch.
    """
    if element.inline_value is not None:
        inline = element.inline_value
        if inline.startswith("$") and inline[1:].lower() in _AUTOMATIC_VARIABLES:
            return Literal(_AUTOMATIC_VARIABLES[inline[1:].lower()]), 0
        return Literal(inline), 0
    if is_switch:
        return Literal(True), 0
    if following is not None and not following.is_parameter:
        return _value_of(following, variables), 1
    return Literal(True), 0


def match_parameter(typed: str, candidates: Sequence[ParameterDescriptor]) -> list[ParameterDescriptor]:
    """
    Descriptors matching a typed parameter name.

    An exact (case-insensitive) name or alias match short-circuits, so a
    parameter is never shadowed by a longer one sharing its prefix;
    otherwise every descriptor with a name or alias starting with `typed`.
    """
    lowered = typed.lower()
    exact = [d for d in candidates if any(n.lower() == lowered for n in d.all_names())]
    if exact:
        return exact
    return [d for d in candidates if any(n.lower().startswith(lowered) for n in d.all_names())]


def cursor_element_index(elements: Sequence[CommandElement], cursor: int) -> int | None:
    """
    Index of the element containing `cursor`.

    An element contains the cursor when start <= cursor <= end. If two
    adjacent elements both qualify (cursor exactly on their shared
    boundary) the later element wins.
    """
    found: int | None = None
    if cursor < 0:
        return None
    for index, element in enumerate(elements):
        if element.contains(cursor):
            found = index
    return found


def bind(
    elements: Sequence[CommandElement],
    cursor: int,
    declared: Sequence[ParameterDescriptor],
    *,
    types: TypeRegistry | None = None,
    variables: Mapping[str, Any] | None = None,
) -> BindingResult:
    """
    Bind `elements` (elements[0] is the command name) to `declared`.

    The available-parameter working set is local to this call: a descriptor
    leaves it when matched, so no two elements bind to the same descriptor.
    Never raises; anomalies are collected in `binding_errors`.
    """
    result = BindingResult()
    available: dict[str, ParameterDescriptor] = {d.name.lower(): d for d in declared}
    positionals: list[tuple[int, Value]] = []
    cursor_index = cursor_element_index(elements, cursor)
    anchor: CursorAnchor | None = None

    i = 1
    count = len(elements)
    while i < count:
        element = elements[i]

        if not element.is_parameter:
            positionals.append((i, _value_of(element, variables)))
            if i == cursor_index:
                anchor = CursorAnchor(i, on_name=False, positional_index=len(positionals) - 1)
            i += 1
            continue

        typed = element.text
        following = elements[i + 1] if i + 1 < count else None
        # a lone dash (empty name) is still being typed and claims nothing
        matches = match_parameter(typed, list(available.values())) if typed else []
        merged: AttachedMemberMatch | None = None

        if len(matches) == 1:
            descriptor = matches[0]
            value, consumed = _resolve_argument(element, following, descriptor.is_switch, variables)
            del available[descriptor.name.lower()]
            result.named_arguments[descriptor.name] = value
            key = descriptor.name
        else:
            if not matches:
                merged = try_merge_attached_member(
                    element, following, types,
                    value=elements[i + 2] if i + 2 < count else None,
                    diagnostics=result.binding_errors,
                )
            if merged is not None:
                key = merged.name
                value = Literal(merged.coerced_value) if merged.raw_value is not None else Literal(True)
                consumed = 2 if merged.consumed_value else 1
                result.named_arguments[key] = value
                result.attached_members[key] = merged
            else:
                value, consumed = _resolve_argument(element, following, False, variables)
                if matches:
                    names = ", ".join(d.name for d in matches)
                    record(result.binding_errors, DiagnosticKind.AMBIGUOUS_PARAMETER,
                           f"Parameter '-{typed}' is ambiguous; possible matches: {names}", element.start)
                elif typed and match_parameter(typed, [d for d in declared if d.name.lower() not in available]):
                    record(result.binding_errors, DiagnosticKind.DUPLICATE_PARAMETER,
                           f"Parameter '-{typed}' was specified more than once", element.start)
                elif typed:
                    record(result.binding_errors, DiagnosticKind.UNKNOWN_PARAMETER,
                           f"A parameter cannot be found that matches parameter name '{typed}'", element.start)
                result.unknown_named_arguments[typed] = value
                key = typed

        if cursor_index is not None and i <= cursor_index <= i + consumed:
            name_span = i + 1 if merged is not None else i
            anchor = CursorAnchor(i, on_name=cursor_index <= name_span, name=key)
        i += 1 + consumed

    # Phase two: positional binding, then resolve the cursor anchor.
    queue = list(positionals)
    bound_at: dict[int, str] = {}
    positional_descriptors = sorted(
        (d for d in available.values() if d.position is not None), key=lambda d: d.position)
    for descriptor in positional_descriptors:
        if not queue:
            break
        element_index, value = queue.pop(0)
        result.named_arguments[descriptor.name] = value
        del available[descriptor.name.lower()]
        bound_at[element_index] = descriptor.name
    result.unknown_positional_arguments = [value for _, value in queue]
    result.available = list(available.values())

    if anchor is not None:
        result.cursor_on_name = anchor.on_name
        if anchor.positional_index is None:
            result.parameter_in_use = anchor.name
        elif anchor.element_index in bound_at:
            result.parameter_in_use = bound_at[anchor.element_index]
        else:
            leftover = [index for index, _ in queue]
            result.parameter_in_use = leftover.index(anchor.element_index)
    if cursor_index is not None:
        result.cursor_element = elements[cursor_index]

    _LOG.debug("bound %s named=%s unknown=%s positional=%d in_use=%r",
               elements[0].text if elements else "<empty>",
               list(result.named_arguments), list(result.unknown_named_arguments),
               len(result.unknown_positional_arguments), result.parameter_in_use)
    return result


def bind_invocation(
    elements: Sequence[CommandElement],
    cursor: int,
    metadata: MetadataSource | None,
    *,
    types: TypeRegistry | None = None,
    variables: Mapping[str, Any] | None = None,
) -> BindingResult:
    """
    Look the command's descriptors up through `metadata`, then bind.

    Missing metadata is not fatal: binding proceeds with no declared
    parameters (everything becomes unknown) and METADATA_UNAVAILABLE is
    recorded.
    """
    diagnostics: list[Diagnostic] = []
    declared: list[ParameterDescriptor] = []
    if elements:
        command_name = elements[0].text
        if metadata is None:
            record(diagnostics, DiagnosticKind.METADATA_UNAVAILABLE,
                   f"No metadata source to describe '{command_name}'", elements[0].start)
        else:
            try:
                declared = list(metadata.describe_command(command_name))
            except Exception as exc:
                record(diagnostics, DiagnosticKind.METADATA_UNAVAILABLE,
                       f"Cannot describe '{command_name}': {type(exc).__name__}: {exc}", elements[0].start)
    result = bind(elements, cursor, declared, types=types, variables=variables)
    result.binding_errors[:0] = diagnostics
    return result


def call_arguments(command_obj: Command, result: BindingResult) -> dict[str, Any]:
    """
    Keywords for invoking `command_obj` from a binding result.

    Values are resolved and coerced to the descriptors' value types; merged
    attached members are passed under their 'Owner.Member' names. Raises
    TypeError when the binding is not clean enough to run.
    """
    if result.binding_errors:
        raise TypeError("; ".join(d.message for d in result.binding_errors))
    if result.unknown_positional_arguments:
        raise TypeError("Too many positional arguments.")

    keywords: dict[str, Any] = {}
    for name, value in result.named_arguments.items():
        if name in result.attached_members:
            keywords[name] = result.attached_members[name].coerced_value
            continue
        descriptor = command_obj.parameter(name)
        if descriptor is None:
            continue
        try:
            keywords[descriptor.keyword] = coerce_value(resolve_value(value), descriptor.value_type)
        except (ValueError, TypeError) as exc:
            raise TypeError(f"Cannot convert value for -{descriptor.name}: {exc}") from exc
    return keywords


def _type_label(value_type: Any) -> str:
    return getattr(value_type, "__name__", str(value_type)).lower()


def build_usage(command_obj: Command) -> str:
    """
    Render a compact usage string from the command's descriptors.

    Example:
        'Get-TypeMember [-TypeName] <str> [-MemberName] <str> [-MemberType <memberkind>]'
    """
    usage_parts: list[str] = []
    for descriptor in command_obj.parameters:
        if descriptor.is_switch:
            usage_parts.append(f"[-{descriptor.name}]")
        elif descriptor.position is not None:
            usage_parts.append(f"[-{descriptor.name}] <{_type_label(descriptor.value_type)}>")
        else:
            usage_parts.append(f"[-{descriptor.name} <{_type_label(descriptor.value_type)}>]")
    return f"{command_obj.name} " + " ".join(usage_parts) if usage_parts else command_obj.name
