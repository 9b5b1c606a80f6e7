#!/usr/bin/env python3
# tabline/interface/quoting.py
from __future__ import annotations

"""
Quoting helpers for completion insertion text.

A value is safe to insert unquoted only if it tokenizes back into exactly
one literal argument. That is checked by tokenizing a trivial invocation
'<marker> <value>' and looking at what comes out.
"""

from .tokenizer import SINGLE_QUOTES, TokenKind, TokenizeError, tokenize

# Any simple command name works; only its position matters.
_MARKER = "echo"
_LITERAL_KINDS = (TokenKind.GENERIC, TokenKind.NUMBER)


def needs_quoting(value: str) -> bool:
    """
    Return True if `value` would not survive as a single literal argument.

    Expected tokenization: marker, the value itself, end-of-input. Anything
    else (several tokens, a parameter, a variable, an expandable word, a
    comment, nothing at all) means the value has to be quoted. Input that
    cannot be tokenized at all is treated as needing quotes.
    """
    try:
        tokens = tokenize(f"{_MARKER} {value}")
    except TokenizeError:
        return True
    if len(tokens) != 3:
        return True
    token = tokens[1]
    if token.kind not in _LITERAL_KINDS or not token.literal:
        return True
    return token.value != value


def quote(value: str) -> str:
    """Wrap in single quotes, doubling every embedded single quote."""
    escaped = "".join(ch * 2 if ch in SINGLE_QUOTES else ch for ch in value)
    return f"'{escaped}'"


def quote_if_needed(value: str) -> str:
    return quote(value) if needs_quoting(value) else value
