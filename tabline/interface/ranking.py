#!/usr/bin/env python3
# tabline/interface/ranking.py
from __future__ import annotations

"""
Ranking and formatting of candidate pools.

A pool is filtered by the typed prefix, grouped by display text (so a
value occurring many times is offered once, with its count), sorted, and
turned into CompletionCandidates with insertion text that is safe to
paste back onto the command line.

Typing a trailing '!<' or '!>' after the prefix asks for the candidates
ordered by how often they occur, least or most frequent first.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Iterable

from tabline.commands.command_types import PoolItem

from .quoting import quote_if_needed


class SortDirective(Enum):
    ALPHABETICAL = "alphabetical"
    ASCENDING_FREQUENCY = "ascending-frequency"
    DESCENDING_FREQUENCY = "descending-frequency"


class CompletionCategory(Enum):
    COMMAND = "command"
    PARAMETER_NAME = "parameter-name"
    PARAMETER_VALUE = "parameter-value"
    ATTACHED_MEMBER = "attached-member"


_SENTINELS = {
    "!<": SortDirective.ASCENDING_FREQUENCY,
    "!>": SortDirective.DESCENDING_FREQUENCY,
}


@dataclass(frozen=True, slots=True)
class CompletionCandidate:
    """
    One completion offered to the user.

    Attributes:
        insertion_text: Text that replaces the word being completed (quoted if needed).
        display_text: Unquoted text shown in the menu.
        category: What kind of thing is being completed.
        tooltip: Extra text shown next to the menu entry.
    """
    insertion_text: str
    display_text: str
    category: CompletionCategory
    tooltip: str = ""


def parse_sort_directive(word: str) -> tuple[str, SortDirective | None]:
    """Split a trailing '!<' / '!>' sentinel off `word`: ('Fo!>', ...) -> ('Fo', DESCENDING_FREQUENCY)."""
    for sentinel, directive in _SENTINELS.items():
        if word.endswith(sentinel):
            return word[:-len(sentinel)], directive
    return word, None


def _enum_text(member: Enum) -> str:
    """Text typed for an Enum member: its value when that is a string, else its name."""
    return member.value if isinstance(member.value, str) else member.name


def _as_item(entry: Any) -> PoolItem:
    if isinstance(entry, PoolItem):
        return entry
    if isinstance(entry, Enum):
        return PoolItem(value=entry, display=_enum_text(entry))
    return PoolItem(value=entry)


def rank(
    pool: Iterable[Any],
    word_to_complete: str,
    sort_directive: SortDirective | None = None,
    *,
    category: CompletionCategory = CompletionCategory.PARAMETER_VALUE,
    quote_values: bool = True,
    limit: int | None = None,
) -> list[CompletionCandidate]:
    """
    Filter, group, sort and format `pool` for `word_to_complete`.

    Args:
        pool: Plain values or PoolItems; duplicates are expected.
        word_to_complete: Typed prefix, possibly ending in a sort sentinel.
        sort_directive: Overrides any sentinel in the word.
        category: Category stamped on every candidate.
        quote_values: Quote insertion text where the tokenizer would not
            read it back as one literal word.
        limit: Maximum number of candidates returned.

    The prefix is compared literally and case-insensitively; wildcard
    characters carry no special meaning.
    """
    prefix, parsed = parse_sort_directive(word_to_complete)
    directive = sort_directive or parsed or SortDirective.ALPHABETICAL
    folded = prefix.casefold()

    groups: dict[str, list[Any]] = {}
    for entry in pool:
        item = _as_item(entry)
        display = item.display_text
        if not display.casefold().startswith(folded):
            continue
        group = groups.get(display)
        if group is None:
            groups[display] = [item, 1]
        else:
            group[1] += 1

    def alphabetical(display: str) -> tuple[str, str]:
        return display.casefold(), display

    if directive is SortDirective.ASCENDING_FREQUENCY:
        ordered = sorted(groups, key=lambda d: (groups[d][1], *alphabetical(d)))
    elif directive is SortDirective.DESCENDING_FREQUENCY:
        ordered = sorted(groups, key=lambda d: (-groups[d][1], *alphabetical(d)))
    else:
        ordered = sorted(groups, key=alphabetical)

    frequency = directive is not SortDirective.ALPHABETICAL
    candidates: list[CompletionCandidate] = []
    for display in ordered:
        item, count = groups[display]
        text = _enum_text(item.value) if isinstance(item.value, Enum) else str(item.value)
        tooltip = item.tooltip or display
        if frequency:
            tooltip = f"{tooltip} ({count})"
        candidates.append(CompletionCandidate(
            insertion_text=quote_if_needed(text) if quote_values else text,
            display_text=display,
            category=category,
            tooltip=tooltip,
        ))
        if limit is not None and len(candidates) >= limit:
            break
    return candidates
