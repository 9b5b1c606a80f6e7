#!/usr/bin/env python3
# tabline/interface/completion.py
from __future__ import annotations

"""
Command line completion.

complete() takes the whole buffer and a cursor offset and offers:
- First element: built-in verbs plus registered command names and aliases.
- 'help <partial>': categories and command names.
- '-Par': parameter names the command still accepts.
- '-Owner.Mem' / '-Owner::Mem': attached members of a registered owner type.
- Values: the command's candidate provider for the parameter in use, or
  the Enum / bool domain of the parameter (or attached member) type.

Nothing here raises for bad input; problems are reported as diagnostics
on the CompletionResult.
"""

import logging
import re
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Mapping

from tabline.commands import REGISTRY, TYPES, CommandRegistry, PoolItem, PoolRequest, TypeRegistry
from tabline.commands.command_types import Command

from .attached import split_attached_name
from .diagnostics import Diagnostic
from .parser import BindingResult, bind_invocation, cursor_element_index
from .provider import DEFAULT_TIMEOUT, get_pool
from .ranking import CompletionCandidate, CompletionCategory, parse_sort_directive, rank
from .tokenizer import DASHES, CommandElement, ElementKind, Token, TokenKind, command_elements, statement_at, tokenize

_LOG = logging.getLogger(__name__)

# Built-in verbs always available
BUILT_IN_COMMANDS: tuple[str, ...] = (
    "help", "exit", "quit", "clear", "cls")

DEFAULT_MAX_RESULTS = 200

_ATTACHED_NAME_RE = re.compile(r"(?:(?:::|\.)\w*)+")


@dataclass(slots=True)
class CompletionResult:
    """
    Candidates for one request and the buffer span they replace.

    Attributes:
        candidates: Ranked candidates, best first.
        replacement_start: Offset where the replaced text begins.
        replacement_length: Length of the replaced text.
        diagnostics: Everything that went wrong along the way.
    """
    candidates: list[CompletionCandidate] = field(default_factory=list)
    replacement_start: int = 0
    replacement_length: int = 0
    diagnostics: list[Diagnostic] = field(default_factory=list)

    def texts(self) -> list[str]:
        return [c.insertion_text for c in self.candidates]


def _with_cursor_element(elements: list[CommandElement], cursor: int) -> list[CommandElement]:
    """Insert an empty value element at the cursor when no element contains it."""
    if any(e.contains(cursor) for e in elements):
        return elements
    synthetic = CommandElement(kind=ElementKind.VALUE, text="", start=cursor, end=cursor)
    before = [e for e in elements if e.end < cursor]
    after = [e for e in elements if e.end >= cursor]
    return [*before, synthetic, *after]


def _dash_as_parameter(element: CommandElement, cursor: int) -> CommandElement:
    """A lone dash right before the cursor is the start of a parameter name."""
    if not element.is_parameter and len(element.raw) == 1 and element.raw in DASHES and element.end == cursor:
        return replace(element, kind=ElementKind.PARAMETER, text="", token_kind=TokenKind.PARAMETER)
    return element


def _part_at(element: CommandElement, cursor: int) -> Token | None:
    found = None
    for part in element.parts:
        if part.start <= cursor <= part.end:
            found = part
    return found


def _word_before_cursor(text: str, part: Token | None, cursor: int) -> str:
    """Decoded word when the cursor is at the end of `part`, raw text before it otherwise."""
    if part is None:
        return ""
    if cursor >= part.end:
        return part.value
    raw = text[part.start:cursor]
    return raw[1:] if raw[:1] in "'\"" else raw


def _value_domain(value_type: Any) -> tuple[list[Any], bool]:
    """Candidate values implied by a type, and whether they need quoting."""
    if isinstance(value_type, type) and issubclass(value_type, Enum):
        return list(value_type), True
    if value_type is bool:
        return ["$true", "$false"], False
    return [], True


def _complete_command_name(text: str, element: CommandElement, cursor: int,
                           registry: CommandRegistry, limit: int) -> CompletionResult:
    word = text[element.start:cursor] if element.parts else ""
    pool = [PoolItem(name, tooltip="built-in") for name in BUILT_IN_COMMANDS]
    for name in registry.names():
        command_obj = registry.get(name)
        pool.append(PoolItem(name, tooltip=command_obj.description if command_obj else None))
    candidates = rank(pool, word, category=CompletionCategory.COMMAND, limit=limit)
    return CompletionResult(candidates, element.start, element.end - element.start)


def _complete_help_target(text: str, element: CommandElement, cursor: int,
                          registry: CommandRegistry, limit: int) -> CompletionResult:
    word = text[element.start:cursor] if element.parts else ""
    pool = [*registry.categories(), *registry.names(), "all"]
    candidates = rank(pool, word, category=CompletionCategory.COMMAND, limit=limit)
    return CompletionResult(candidates, element.start, element.end - element.start)


def _complete_parameter_name(text: str, element: CommandElement, cursor: int,
                             command_obj: Command | None, binding: BindingResult,
                             limit: int) -> CompletionResult:
    name_end = element.start + 1 + len(element.text)
    typed = text[element.start + 1:min(cursor, name_end)]
    result = CompletionResult(replacement_start=element.start, replacement_length=name_end - element.start)
    if command_obj is None:
        return result

    # The element being completed has already claimed a descriptor; offer it again.
    offered = list(binding.available)
    current = command_obj.parameter(binding.parameter_in_use) if isinstance(binding.parameter_in_use, str) else None
    if current is not None and current not in offered:
        offered.append(current)

    pool = []
    for descriptor in command_obj.parameters:
        if descriptor not in offered:
            continue
        type_name = getattr(descriptor.value_type, "__name__", str(descriptor.value_type))
        tooltip = descriptor.description or ("switch" if descriptor.is_switch else f"[{type_name}]")
        pool.append(PoolItem(f"-{descriptor.name}", tooltip=tooltip))
    result.candidates = rank(pool, f"-{typed}", category=CompletionCategory.PARAMETER_NAME,
                             quote_values=False, limit=limit)
    return result


def _complete_attached_name(text: str, parameter: CommandElement, adjacent: CommandElement, cursor: int,
                            types: TypeRegistry, limit: int) -> CompletionResult:
    name_match = _ATTACHED_NAME_RE.match(adjacent.raw)
    name_end = adjacent.start + (name_match.end() if name_match else len(adjacent.raw))
    result = CompletionResult(replacement_start=parameter.start, replacement_length=name_end - parameter.start)

    typed = parameter.text + text[adjacent.start:min(cursor, name_end)]
    split = split_attached_name(typed)
    if split is None:
        return result
    owner_text, _ = split
    owner = types.resolve(owner_text)
    if owner is None:
        return result
    separator = "::" if typed[len(owner_text):].startswith("::") else "."

    kinds_by_name: dict[str, list[Any]] = {}
    for member in owner.members:
        kinds_by_name.setdefault(member.name.lower(), []).append(member)
    pool = []
    for members in kinds_by_name.values():
        for member in members:
            # A name declared as both property and event is only reachable with its kind suffix.
            suffix = member.kind.value if len(members) > 1 else ""
            type_name = getattr(member.value_type, "__name__", str(member.value_type))
            pool.append(PoolItem(f"-{owner_text}{separator}{member.name}{suffix}",
                                 tooltip=f"{member.kind.value} [{type_name}]"))
    result.candidates = rank(pool, f"-{typed}", category=CompletionCategory.ATTACHED_MEMBER,
                             quote_values=False, limit=limit)
    return result


def _complete_value(text: str, element: CommandElement, cursor: int, command_obj: Command | None,
                    binding: BindingResult, timeout: float, limit: int,
                    diagnostics: list[Diagnostic], inline_start: int | None = None) -> CompletionResult:
    if inline_start is not None:
        # '-Name:val' or '-Owner.Member:val' with the cursor in the inline value
        value_start = inline_start
        word = text[value_start:cursor]
        result = CompletionResult(replacement_start=value_start, replacement_length=element.end - value_start)
    else:
        part = _part_at(element, cursor)
        word = _word_before_cursor(text, part, cursor)
        if part is None:
            result = CompletionResult(replacement_start=cursor, replacement_length=0)
        else:
            result = CompletionResult(replacement_start=part.start, replacement_length=part.end - part.start)

    in_use = binding.parameter_in_use
    if not isinstance(in_use, str):
        return result

    pool: list[Any] = []
    quote_values = True
    attached = binding.attached_members.get(in_use)
    if attached is not None:
        member = next((m for m in attached.owner_type.members
                       if m.name == attached.member_name and m.kind is attached.member_kind), None)
        if member is not None:
            pool, quote_values = _value_domain(member.value_type)
    elif command_obj is not None:
        descriptor = command_obj.parameter(in_use)
        if descriptor is None:
            return result
        provider = command_obj.completer_for(descriptor.name)
        if provider is not None:
            prefix, _ = parse_sort_directive(word)
            request = PoolRequest(
                command_name=command_obj.name,
                parameter_name=descriptor.name,
                fake_bound=binding.fake_bound_parameters(),
                word_to_complete=prefix,
            )
            pool = get_pool(provider, request, timeout=timeout, diagnostics=diagnostics)
        else:
            pool, quote_values = _value_domain(descriptor.value_type)

    result.candidates = rank(pool, word, category=CompletionCategory.PARAMETER_VALUE,
                             quote_values=quote_values, limit=limit)
    return result


def complete(
    text: str,
    cursor: int | None = None,
    *,
    registry: CommandRegistry | None = None,
    types: TypeRegistry | None = None,
    variables: Mapping[str, Any] | None = None,
    timeout: float = DEFAULT_TIMEOUT,
    max_results: int = DEFAULT_MAX_RESULTS,
) -> CompletionResult:
    """
    Complete `text` at `cursor` (defaults to the end of the text).

    Args:
        text: The whole input buffer.
        cursor: Offset of the caret in `text`.
        registry: Command metadata and providers (default: global REGISTRY).
        types: Owner types for attached members (default: global TYPES).
        variables: Session variables that '$name' arguments resolve against.
        timeout: Seconds a candidate provider may run.
        max_results: Maximum number of candidates.
    """
    registry = REGISTRY if registry is None else registry
    types = TYPES if types is None else types
    cursor = len(text) if cursor is None else max(0, min(cursor, len(text)))

    statement = statement_at(tokenize(text, strict=False), cursor)
    elements = _with_cursor_element(command_elements(statement), cursor)
    elements = [_dash_as_parameter(e, cursor) for e in elements]
    index = cursor_element_index(elements, cursor)
    if index is None:
        return CompletionResult(replacement_start=cursor)
    element = elements[index]

    if index == 0:
        result = _complete_command_name(text, element, cursor, registry, max_results)
        _log_result(text, cursor, result)
        return result

    if index == 1 and elements[0].text.lower() == "help" and not element.is_parameter:
        result = _complete_help_target(text, element, cursor, registry, max_results)
        _log_result(text, cursor, result)
        return result

    command_obj = registry.get(elements[0].text)
    binding = bind_invocation(elements, cursor, registry, types=types, variables=variables)
    diagnostics = list(binding.binding_errors)

    previous = elements[index - 1]
    attached_name = None
    if (not element.is_parameter and previous.is_parameter and previous.end == element.start
            and previous.inline_value is None):
        attached_name = _ATTACHED_NAME_RE.match(element.raw)

    if attached_name is not None and cursor <= element.start + attached_name.end():
        result = _complete_attached_name(text, previous, element, cursor, types, max_results)
    elif attached_name is not None:
        result = _complete_value(text, element, cursor, command_obj, binding, timeout, max_results,
                                 diagnostics, inline_start=element.start + attached_name.end() + 1)
    elif element.is_parameter and cursor <= element.start + 1 + len(element.text):
        result = _complete_parameter_name(text, element, cursor, command_obj, binding, max_results)
    elif element.is_parameter:
        result = _complete_value(text, element, cursor, command_obj, binding, timeout, max_results,
                                 diagnostics, inline_start=element.start + 1 + len(element.text) + 1)
    else:
        result = _complete_value(text, element, cursor, command_obj, binding, timeout, max_results, diagnostics)

    result.diagnostics = diagnostics
    _log_result(text, cursor, result)
    return result


def _log_result(text: str, cursor: int, result: CompletionResult) -> None:
    _LOG.debug("complete %r@%d -> %d candidate(s), replace [%d:+%d], %d diagnostic(s)",
               text, cursor, len(result.candidates), result.replacement_start,
               result.replacement_length, len(result.diagnostics))


def suggest(text_before_cursor: str, **options: Any) -> list[str]:
    """
    Plain-string suggestions for line editors that replace the current
    whitespace-delimited word (readline).

    Each suggestion is the full replacement for that word.
    """
    result = complete(text_before_cursor, len(text_before_cursor), **options)
    word_start = max(text_before_cursor.rfind(ch) for ch in " \t\n") + 1
    lead = text_before_cursor[word_start:result.replacement_start] if result.replacement_start > word_start else ""
    return [lead + text for text in result.texts()]
