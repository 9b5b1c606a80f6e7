#!/usr/bin/env python3
# tabline/interface/__init__.py
from __future__ import annotations

"""
Package for the completion engine and the interactive console.

Provides:
- Tokenizer adapter and quoting analyzer.
- Parameter binder with attached-member resolution.
- Candidate-provider boundary, ranking and completion orchestration.
- Command dispatcher and help formatting.
- Dynamic plugin loader.
- CLI frontends with history and completion (prompt_toolkit / readline / plain).
"""


# Engine
from .diagnostics import Diagnostic, DiagnosticKind
from .values import Deferred, Literal, Value, coerce_value, resolve_value
from .tokenizer import CommandElement, ElementKind, Token, TokenKind, TokenizeError, command_elements, statement_at, tokenize
from .quoting import needs_quoting, quote, quote_if_needed
from .attached import AttachedMemberMatch, try_merge_attached_member
from .parser import BindingResult, bind, bind_invocation, build_usage, call_arguments
from .provider import get_pool
from .ranking import CompletionCandidate, CompletionCategory, SortDirective, parse_sort_directive, rank

# Completion FIRST (cli depends on it)
from .completion import BUILT_IN_COMMANDS, CompletionResult, complete, suggest

# Command dispatcher / help
from .handler import HELP_TEXT, format_command_help, handle_line, list_categories

# Loader
from .loader import load_commands

# CLI frontends (after completion is available)
from .cli import BaseCLI, HISTORY_FILE_PATH, PromptToolkitCLI, ReadlineCLI, make_cli

__all__ = [
    # engine
    "Diagnostic",
    "DiagnosticKind",
    "Deferred",
    "Literal",
    "Value",
    "coerce_value",
    "resolve_value",
    "CommandElement",
    "ElementKind",
    "Token",
    "TokenKind",
    "TokenizeError",
    "command_elements",
    "statement_at",
    "tokenize",
    "needs_quoting",
    "quote",
    "quote_if_needed",
    "AttachedMemberMatch",
    "try_merge_attached_member",
    "BindingResult",
    "bind",
    "bind_invocation",
    "build_usage",
    "call_arguments",
    "get_pool",
    "CompletionCandidate",
    "CompletionCategory",
    "SortDirective",
    "parse_sort_directive",
    "rank",
    # completion
    "BUILT_IN_COMMANDS",
    "CompletionResult",
    "complete",
    "suggest",
    # handler
    "HELP_TEXT",
    "format_command_help",
    "handle_line",
    "list_categories",
    # loader
    "load_commands",
    # cli
    "BaseCLI",
    "HISTORY_FILE_PATH",
    "PromptToolkitCLI",
    "ReadlineCLI",
    "make_cli",
]
