#!/usr/bin/env python3
# tabline/interface/tokenizer.py
from __future__ import annotations

"""
Tokenizer adapter for PowerShell-flavoured command invocations.

Responsibilities:
- Split raw text into tokens with source offsets (parameters, bare words,
  quoted strings, variables, operators, end-of-input).
- Select the statement that contains the cursor.
- Convert a statement's tokens into CommandElements for the binder.

This is deliberately not a script parser: it understands exactly as much
syntax as a single command invocation needs.
"""

import re
from dataclasses import dataclass
from enum import Enum

# PowerShell treats typographic dashes and quotes like their ASCII forms.
DASHES = "-–—―"
SINGLE_QUOTES = "'‘’‚‛"
DOUBLE_QUOTES = '"“”„'

_WHITESPACE = " \t\r"
_OPERATOR_CHARS = ";|&,(){}<>\n"
_TWO_CHAR_OPERATORS = ("&&", "||")
_BACKTICK_ESCAPES = {"n": "\n", "t": "\t", "r": "\r", "0": "\0", "a": "\a"}
_NUMBER_RE = re.compile(r"[+-]?(\d+(\.\d*)?|\.\d+)([eE][+-]?\d+)?\Z")


class TokenizeError(ValueError):
    """Raised in strict mode for input that cannot be tokenized (e.g. unterminated strings)."""

    def __init__(self, message: str, offset: int) -> None:
        super().__init__(f"{message} at offset {offset}")
        self.offset = offset


class TokenKind(Enum):
    GENERIC = "generic"
    NUMBER = "number"
    STRING_LITERAL = "string-literal"
    STRING_EXPANDABLE = "string-expandable"
    VARIABLE = "variable"
    PARAMETER = "parameter"
    OPERATOR = "operator"
    END_OF_INPUT = "end-of-input"


@dataclass(frozen=True, slots=True)
class Token:
    """
    One lexical token.

    Attributes:
        kind: Token category.
        text: Raw source slice.
        value: Decoded value (parameter name without dash, unquoted string, variable name).
        start / end: Source offsets, end exclusive.
        inline_value: Value of a '-Name:value' parameter, if any.
        literal: False when the token would be expanded at runtime ($, backticks, quotes).
    """
    kind: TokenKind
    text: str
    value: str
    start: int
    end: int
    inline_value: str | None = None
    literal: bool = True


class ElementKind(Enum):
    PARAMETER = "parameter"
    VALUE = "value"


@dataclass(frozen=True, slots=True)
class CommandElement:
    """
    One element of a command invocation as seen by the binder.

    For parameters `text` is the name without the dash; for values it is the
    decoded value. Comma-separated values form a single element whose tokens
    are kept in `parts`.
    """
    kind: ElementKind
    text: str
    start: int
    end: int
    inline_value: str | None = None
    raw: str = ""
    token_kind: TokenKind = TokenKind.GENERIC
    parts: tuple[Token, ...] = ()

    @property
    def is_parameter(self) -> bool:
        return self.kind is ElementKind.PARAMETER

    def contains(self, offset: int) -> bool:
        """True when `offset` lies within the element, both ends inclusive."""
        return self.start <= offset <= self.end


def _is_parameter_start(ch: str) -> bool:
    return ch.isalpha() or ch in "_?"


def _is_name_char(ch: str) -> bool:
    return ch.isalnum() or ch in "_-?"


def _scan_single_quoted(text: str, start: int, strict: bool) -> tuple[str, int]:
    """Return (decoded value, end offset) of a single-quoted string starting at `start`."""
    buf: list[str] = []
    j = start + 1
    n = len(text)
    while j < n:
        ch = text[j]
        if ch in SINGLE_QUOTES:
            if j + 1 < n and text[j + 1] in SINGLE_QUOTES:
                buf.append(ch)
                j += 2
                continue
            return "".join(buf), j + 1
        buf.append(ch)
        j += 1
    if strict:
        raise TokenizeError("Unterminated string", start)
    return "".join(buf), n


def _scan_double_quoted(text: str, start: int, strict: bool) -> tuple[str, int]:
    """Return (decoded value, end offset) of a double-quoted string starting at `start`."""
    buf: list[str] = []
    j = start + 1
    n = len(text)
    while j < n:
        ch = text[j]
        if ch == "`":
            if j + 1 < n:
                nxt = text[j + 1]
                buf.append(_BACKTICK_ESCAPES.get(nxt, nxt))
            j += 2
            continue
        if ch in DOUBLE_QUOTES:
            if j + 1 < n and text[j + 1] in DOUBLE_QUOTES:
                buf.append(ch)
                j += 2
                continue
            return "".join(buf), j + 1
        buf.append(ch)
        j += 1
    if strict:
        raise TokenizeError("Unterminated string", start)
    return "".join(buf), n


def _ends_word(text: str, j: int) -> bool:
    return j >= len(text) or text[j] in _WHITESPACE or text[j] == "\n"


def _scan_bare(text: str, start: int, strict: bool) -> tuple[str, int, bool]:
    """
    Scan a bare word. Returns (decoded value, end offset, literal).

    Quotes embedded in a bare word are consumed as part of it (composite
    word) which makes it non-literal, as do '$', backtick escapes and a
    leading '@' (splatting).
    A trailing '!<' or '!>' sort sentinel stays part of the word.
    """
    buf: list[str] = []
    literal = not text.startswith("@", start)
    j = start
    n = len(text)
    while j < n:
        ch = text[j]
        if ch in _WHITESPACE or ch == "\n":
            break
        if ch in _OPERATOR_CHARS:
            if ch in "<>" and j > start and text[j - 1] == "!" and _ends_word(text, j + 1):
                buf.append(ch)
                j += 1
                continue
            break
        if ch == "`":
            literal = False
            if j + 1 < n:
                buf.append(text[j + 1])
            j += 2
            continue
        if ch in SINGLE_QUOTES:
            literal = False
            value, j = _scan_single_quoted(text, j, strict)
            buf.append(value)
            continue
        if ch in DOUBLE_QUOTES:
            literal = False
            value, j = _scan_double_quoted(text, j, strict)
            buf.append(value)
            continue
        if ch == "$":
            literal = False
        buf.append(ch)
        j += 1
    return "".join(buf), min(j, n), literal


def _scan_variable(text: str, start: int, strict: bool) -> tuple[str, int] | None:
    """Return (variable name, end offset) for a '$name' or '${name}' reference, else None."""
    n = len(text)
    j = start + 1
    if j >= n:
        return None
    if text[j] == "{":
        close = text.find("}", j + 1)
        if close < 0:
            if strict:
                raise TokenizeError("Unterminated variable reference", start)
            return text[j + 1:], n
        return text[j + 1:close], close + 1
    if text[j] in "$?^":
        return text[j], j + 1
    k = j
    while k < n and (text[k].isalnum() or text[k] in "_:?"):
        k += 1
    if k == j:
        return None
    return text[j:k], k


def tokenize(text: str, *, strict: bool = True) -> list[Token]:
    """
    Split `text` into tokens, always ending with an END_OF_INPUT token.

    In strict mode malformed input raises TokenizeError; otherwise
    unterminated constructs run to the end of the input, which is what an
    interactive caller needs for half-typed lines.
    """
    tokens: list[Token] = []
    n = len(text)
    i = 0
    while i < n:
        ch = text[i]

        if ch in _WHITESPACE:
            i += 1
            continue

        if ch == "#":
            newline = text.find("\n", i)
            i = n if newline < 0 else newline
            continue

        if ch in _OPERATOR_CHARS:
            op = text[i:i + 2] if text[i:i + 2] in _TWO_CHAR_OPERATORS else ch
            tokens.append(Token(TokenKind.OPERATOR, op, op, i, i + len(op)))
            i += len(op)
            continue

        if ch in SINGLE_QUOTES:
            value, end = _scan_single_quoted(text, i, strict)
            tokens.append(Token(TokenKind.STRING_LITERAL, text[i:end], value, i, end))
            i = end
            continue

        if ch in DOUBLE_QUOTES:
            value, end = _scan_double_quoted(text, i, strict)
            tokens.append(Token(TokenKind.STRING_EXPANDABLE, text[i:end], value, i, end, literal=False))
            i = end
            continue

        if ch == "$":
            variable = _scan_variable(text, i, strict)
            if variable is not None:
                name, end = variable
                tokens.append(Token(TokenKind.VARIABLE, text[i:end], name, i, end, literal=False))
                i = end
                continue

        if ch in DASHES and i + 1 < n and _is_parameter_start(text[i + 1]):
            j = i + 1
            while j < n and _is_name_char(text[j]):
                j += 1
            name = text[i + 1:j]
            if j < n and text[j] == ":" and text[j + 1:j + 2] != ":":
                # -Name:value; a bare ':' keeps the next token as the argument
                inline, end, _ = _scan_bare(text, j + 1, strict)
                tokens.append(Token(TokenKind.PARAMETER, text[i:end], name, i, end,
                                    inline_value=inline if end > j + 1 else None))
                i = end
            else:
                # '.' or '::' end the name; the remainder becomes an adjacent bare word
                tokens.append(Token(TokenKind.PARAMETER, text[i:j], name, i, j))
                i = j
            continue

        value, end, literal = _scan_bare(text, i, strict)
        kind = TokenKind.GENERIC
        if literal and _NUMBER_RE.match(value):
            kind = TokenKind.NUMBER
        tokens.append(Token(kind, text[i:end], value, i, end, literal=literal))
        i = end

    tokens.append(Token(TokenKind.END_OF_INPUT, "", "", n, n))
    return tokens


def is_statement_boundary(token: Token) -> bool:
    """Every operator except ',' (array separator) ends a command statement."""
    return token.kind is TokenKind.OPERATOR and token.value != ","


def statement_at(tokens: list[Token], cursor: int) -> list[Token]:
    """
    Return the tokens of the statement containing `cursor` (without the
    boundary operators and without END_OF_INPUT).

    A cursor placed right after an operator belongs to the statement that
    follows it.
    """
    segments: list[tuple[int, list[Token]]] = [(0, [])]
    for token in tokens:
        if token.kind is TokenKind.END_OF_INPUT:
            break
        if is_statement_boundary(token):
            segments.append((token.end, []))
            continue
        segments[-1][1].append(token)

    chosen: list[Token] = segments[0][1]
    for segment_start, segment_tokens in segments:
        if segment_start <= cursor:
            chosen = segment_tokens
    return chosen


def command_elements(tokens: list[Token]) -> list[CommandElement]:
    """
    Convert one statement's tokens into command elements.

    Values joined by commas ('a,b,c') form a single element.
    """
    elements: list[CommandElement] = []
    i = 0
    n = len(tokens)
    while i < n:
        token = tokens[i]
        if token.kind is TokenKind.END_OF_INPUT or is_statement_boundary(token):
            i += 1
            continue
        if token.kind is TokenKind.OPERATOR:
            # stray ','
            i += 1
            continue
        if token.kind is TokenKind.PARAMETER:
            elements.append(CommandElement(
                kind=ElementKind.PARAMETER,
                text=token.value,
                start=token.start,
                end=token.end,
                inline_value=token.inline_value,
                raw=token.text,
                token_kind=token.kind,
                parts=(token,),
            ))
            i += 1
            continue

        parts = [token]
        end = token.end
        j = i + 1
        while j < n and tokens[j].kind is TokenKind.OPERATOR and tokens[j].value == ",":
            nxt = tokens[j + 1] if j + 1 < n else None
            if nxt is None or nxt.kind in (TokenKind.PARAMETER, TokenKind.OPERATOR, TokenKind.END_OF_INPUT):
                # trailing comma: the list continues at the cursor
                end = tokens[j].end
                j += 1
                break
            parts.append(nxt)
            end = nxt.end
            j += 2
        elements.append(CommandElement(
            kind=ElementKind.VALUE,
            text=",".join(p.value for p in parts) if len(parts) > 1 else token.value,
            start=token.start,
            end=end,
            raw=",".join(p.text for p in parts) if len(parts) > 1 else token.text,
            token_kind=token.kind if len(parts) == 1 else TokenKind.GENERIC,
            parts=tuple(parts),
        ))
        i = j
    return elements
