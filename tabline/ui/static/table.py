#!/usr/bin/env python3
# tabline/ui/static/table.py
from __future__ import annotations

from typing import List, Optional, Sequence

from tabline.ui.utils import strip_ansi

_ELLIPSIS = "..."


def _visible_length(cell: str) -> int:
    return len(strip_ansi(cell))


def _truncate(cell: str, width: int) -> str:
    """Cut plain cells to `width` visible characters; cells with ANSI are left alone."""
    if width <= len(_ELLIPSIS) or _visible_length(cell) <= width or cell != strip_ansi(cell):
        return cell
    return cell[:width - len(_ELLIPSIS)] + _ELLIPSIS


def _calculate_column_widths(rows: Sequence[Sequence[str]]) -> List[int]:
    """Compute visual widths ignoring ANSI sequences."""
    column_widths: List[int] = []
    for row in rows:
        for col_idx, cell in enumerate(row):
            cell_length = _visible_length(cell)
            if col_idx >= len(column_widths):
                column_widths.append(cell_length)
            else:
                column_widths[col_idx] = max(column_widths[col_idx], cell_length)
    return column_widths


def format_table(
    rows: Sequence[Sequence[object]],
    headers: Optional[Sequence[object]] = None,
    *,
    padding: int = 1,
    border: bool = True,
    max_cell_width: Optional[int] = None,
) -> str:
    """
    Return an ASCII table string (ANSI-safe width calculation).

    Cells longer than `max_cell_width` are shortened with '...'.
    """
    str_rows: List[List[str]] = [[str(cell) for cell in row] for row in rows]
    str_headers = [str(h) for h in headers] if headers is not None else None
    if max_cell_width is not None:
        str_rows = [[_truncate(cell, max_cell_width) for cell in row] for row in str_rows]

    widths = _calculate_column_widths(([str_headers] if str_headers else []) + str_rows)
    if not widths:
        return ""
    pad = " " * padding

    def render_row(row: Sequence[str]) -> str:
        parts = []
        for i, width in enumerate(widths):
            cell = row[i] if i < len(row) else ""
            right = " " * (width - _visible_length(cell))
            parts.append(f"{pad}{cell}{right}{pad}")
        return "|" + "|".join(parts) + "|"

    rule = "-" * (sum(widths) + (padding * 2 * len(widths)) + (len(widths) + 1))
    lines: List[str] = [rule] if border else []
    if str_headers is not None:
        lines.append(render_row(str_headers))
        lines.append(render_row(["-" * w for w in widths]))
    lines.extend(render_row(row) for row in str_rows)
    if border:
        lines.append(rule)
    return "\n".join(lines)
