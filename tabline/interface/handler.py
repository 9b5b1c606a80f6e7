#!/usr/bin/env python3
# tabline/interface/handler.py
from __future__ import annotations

"""
Command dispatch and help formatting, with statement chaining.

Supported separators:
  ;   - run statements one after another
  &&  - run next statement only if previous succeeded
  ||  - run next statement only if previous failed

Besides registered commands a line may hold a session variable assignment
('$name = value'); variables feed '$name' arguments both when running
commands and when completing them.
"""

import difflib
import inspect
import logging
from typing import Any, MutableMapping

from tabline.commands import REGISTRY, TYPES, Command, CommandRegistry, CommandResult, TypeRegistry
from tabline.interface.parser import bind, build_usage, call_arguments
from tabline.interface.tokenizer import Token, TokenKind, TokenizeError, command_elements, tokenize
from tabline.ui import clear_screen, format_table

_LOG = logging.getLogger(__name__)

# Short hint shown at startup and used in unknown command errors
HELP_TEXT = "Type 'help <command>' for more information on a specific command."

_SEPARATORS = {";", "\n", "&&", "||"}


# ---------------------------------------------------------------------------
# Help
# ---------------------------------------------------------------------------

def _suggest_similar_names(name: str, registry: CommandRegistry) -> str:
    """Return a short suggestion string for misspelled commands."""
    universe = registry.names() + ["help", "exit", "quit"]
    matches = difflib.get_close_matches(name, universe, n=3, cutoff=0.6)
    return f" Did you mean: {', '.join(matches)}?" if matches else ""


def list_categories(registry: CommandRegistry | None = None) -> str:
    """Render the categories overview table."""
    registry = REGISTRY if registry is None else registry
    categories = registry.categories()
    if not categories:
        return "No commands loaded."

    rows = []
    for category_name in sorted(categories):
        command_count = len(categories[category_name])
        rows.append([
            category_name,
            f"{command_count} command{'s' if command_count != 1 else ''}",
            registry.get_category_description(category_name),
        ])
    return format_table(rows, headers=["Category", "Commands", "Description"], max_cell_width=60)


def _format_category_help(commands_in_category: list[Command]) -> str:
    """Render the commands table for a category."""
    rows = []
    for command_obj in sorted(commands_in_category, key=lambda x: x.name.lower()):
        alias_display = ", ".join(command_obj.aliases) if command_obj.aliases else "-"
        rows.append([command_obj.name, alias_display, command_obj.description])
    return format_table(rows, headers=["Command", "Aliases", "Description"], max_cell_width=60)


def _format_parameters(command_obj: Command) -> str:
    rows = []
    for descriptor in command_obj.parameters:
        type_name = getattr(descriptor.value_type, "__name__", str(descriptor.value_type))
        rows.append([
            f"-{descriptor.name}",
            ", ".join(sorted(descriptor.aliases)) or "-",
            "-" if descriptor.position is None else descriptor.position,
            "switch" if descriptor.is_switch else type_name,
            "yes" if command_obj.completer_for(descriptor.name) else "-",
            descriptor.description,
        ])
    return format_table(rows, headers=["Parameter", "Aliases", "Position", "Type", "Completer", "Description"],
                        max_cell_width=48)


def format_command_help(name: str, registry: CommandRegistry | None = None) -> str:
    """Render help for a command, or for a category if the name matches one."""
    registry = REGISTRY if registry is None else registry
    command_obj = registry.get(name)
    if not command_obj:
        categories = registry.categories()
        if name in categories:
            return _format_category_help(categories[name])
        if name == "all":
            return "\n".join(_format_category_help(categories[c]) for c in sorted(categories))
        return f"No such command or category: {name}"

    alias_text = ", ".join(command_obj.aliases) if command_obj.aliases else "(none)"
    lines = [
        f"Name:        {command_obj.name}",
        f"Aliases:     {alias_text}",
        f"Category:    {command_obj.category}",
        f"Description: {command_obj.description or '(none)'}",
        f"Example:     {command_obj.example or '(none)'}",
        f"Usage:       {build_usage(command_obj)}",
    ]
    if command_obj.parameters:
        lines.append(_format_parameters(command_obj))
    return "\n".join(lines)


# ---------------------------------------------------------------------------
# Chaining helpers
# ---------------------------------------------------------------------------

def _split_statements(tokens: list[Token]) -> list[tuple[str | None, list[Token]]]:
    """
    Split tokens into (operator before, statement tokens) pairs.

    Example:
        'Get-A; Get-B && Get-C'
    ->  [(None, [Get-A]), (';', [Get-B]), ('&&', [Get-C])]
    """
    statements: list[tuple[str | None, list[Token]]] = [(None, [])]
    for token in tokens:
        if token.kind is TokenKind.END_OF_INPUT:
            break
        if token.kind is TokenKind.OPERATOR and token.value in _SEPARATORS:
            statements.append((token.value, []))
            continue
        statements[-1][1].append(token)
    return statements


def _is_success(output: str | None) -> bool:
    """Success = no error marker. Treat None as success."""
    if output is None:
        return True
    return not output.lstrip().lower().startswith("[error]")


def _literal_of(token: Token) -> Any:
    if token.kind is TokenKind.NUMBER:
        number = float(token.value)
        return int(number) if number.is_integer() and "." not in token.value else number
    return token.value


def _assign_variable(tokens: list[Token], variables: MutableMapping[str, Any]) -> tuple[str | None, bool]:
    """'$name = value' (value may be a comma list). Returns (output, success)."""
    name = tokens[0].value
    value_tokens = [t for t in tokens[2:] if not (t.kind is TokenKind.OPERATOR and t.value == ",")]
    if not value_tokens:
        return f"[error] Missing value in assignment to ${name}.", False
    values = [_literal_of(t) for t in value_tokens]
    variables[name] = values[0] if len(values) == 1 else values
    _LOG.debug("set $%s = %r", name, variables[name])
    return None, True


def _accepts_attached_members(func: Any) -> bool:
    try:
        parameters = inspect.signature(func).parameters.values()
    except (TypeError, ValueError):
        return False
    return any(p.kind is p.VAR_KEYWORD for p in parameters)


# ---------------------------------------------------------------------------
# Core execution
# ---------------------------------------------------------------------------

def _run_statement(
    tokens: list[Token],
    registry: CommandRegistry,
    types: TypeRegistry,
    variables: MutableMapping[str, Any],
) -> tuple[str | None, bool]:
    """Run one statement. Returns (output, success)."""
    if not tokens:
        return None, True

    if tokens[0].kind is TokenKind.VARIABLE and len(tokens) >= 2 and tokens[1].value == "=":
        return _assign_variable(tokens, variables)

    if any(t.kind is TokenKind.OPERATOR and t.value != "," for t in tokens):
        operators = sorted({t.value for t in tokens if t.kind is TokenKind.OPERATOR and t.value != ","})
        return f"[error] Unsupported operator: {' '.join(operators)}", False

    elements = command_elements(tokens)
    if not elements:
        return "[error] Syntax: missing command before ','.", False
    command_name = elements[0].text
    lowered = command_name.lower()

    if lowered in {"exit", "quit"}:
        raise SystemExit()

    if lowered in {"clear", "cls"}:
        clear_screen()
        return None, True

    if lowered == "help":
        if len(elements) == 1:
            return list_categories(registry), True
        return format_command_help(elements[1].text, registry), True

    command_obj = registry.get(command_name)
    if not command_obj:
        msg = f"Unknown command: {command_name}.{_suggest_similar_names(command_name, registry)} {HELP_TEXT}"
        return f"[error] {msg}", False

    binding = bind(elements, -1, command_obj.parameters, types=types, variables=variables)
    try:
        keywords = call_arguments(command_obj, binding)
        if binding.attached_members and not _accepts_attached_members(command_obj.callback):
            raise TypeError(f"{command_obj.name} does not accept attached members "
                            f"({', '.join(binding.attached_members)})")
        result = command_obj.invoke(**keywords)
    except SystemExit:
        raise
    except TypeError as exc:
        return f"[error] {exc}\nUsage: {build_usage(command_obj)}", False
    except Exception as exc:
        _LOG.debug("command %s failed", command_obj.name, exc_info=True)
        return f"[error] {type(exc).__name__}: {exc}", False

    # Normalize output
    if isinstance(result, CommandResult):
        text = None if result.message == "" else str(result)
        return text, result.ok and _is_success(text)
    text = None if result is None else str(result)
    return text, _is_success(text)


def handle_line(
    input_line: str,
    *,
    registry: CommandRegistry | None = None,
    types: TypeRegistry | None = None,
    variables: MutableMapping[str, Any] | None = None,
) -> str | None:
    """
    Parse and execute a (possibly chained) input line.

    Returns:
        - None if nothing should be printed.
        - A printable string (outputs of all statements that ran, in order).
    """
    registry = REGISTRY if registry is None else registry
    types = TYPES if types is None else types
    variables = {} if variables is None else variables

    try:
        tokens = tokenize(input_line)
    except TokenizeError as exc:
        return f"[error] Syntax: {exc}"

    statements = _split_statements(tokens)
    outputs: list[str] = []
    last_success = True
    for index, (operator, statement) in enumerate(statements):
        if not statement:
            if operator in {"&&", "||"} or (index == 0 and len(statements) > 1 and statements[1][0] in {"&&", "||"}):
                return f"[error] Syntax: operator '{operator or statements[1][0]}' missing a command."
            continue
        if operator == "&&" and not last_success:
            continue
        if operator == "||" and last_success:
            continue
        output, last_success = _run_statement(statement, registry, types, variables)
        if output is not None:
            outputs.append(output)

    return "\n".join(outputs) if outputs else None
