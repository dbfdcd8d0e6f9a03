#!/usr/bin/env python3
# replkit/ui/static/table.py
from __future__ import annotations

import textwrap
from typing import List, Optional, Sequence

from replkit.ui.utils import strip_ansi


def _calculate_column_widths(rows: Sequence[Sequence[str]]) -> List[int]:
    """Compute visual widths ignoring ANSI sequences."""
    column_widths: List[int] = []
    for row in rows:
        for col_idx, cell in enumerate(row):
            cell_length = len(strip_ansi(cell))
            if col_idx >= len(column_widths):
                column_widths.append(cell_length)
            else:
                column_widths[col_idx] = max(column_widths[col_idx], cell_length)
    return column_widths


def _wrap_last_column(rows: List[List[str]], widths: List[int], limit: int) -> List[List[str]]:
    """Split rows whose last cell is wider than `limit` into continuation rows."""
    wrapped: List[List[str]] = []
    for row in rows:
        head, last = row[:-1], row[-1]
        pieces = textwrap.wrap(last, width=limit) or [""]
        wrapped.append([*head, pieces[0]])
        for piece in pieces[1:]:
            wrapped.append([*([""] * len(head)), piece])
    widths[-1] = min(widths[-1], limit)
    return wrapped


def format_table(
    rows: Sequence[Sequence[object]],
    headers: Optional[Sequence[object]] = None,
    *,
    padding: int = 1,
    border: bool = True,
    width: Optional[int] = None,
) -> str:
    """
    Return an ASCII table string (ANSI-safe width calculation).

    With `width`, the last column wraps so that lines stay within it when
    the other columns leave room for at least 20 characters.
    """
    str_rows: List[List[str]] = [[str(cell) for cell in row] for row in rows]
    str_headers = [str(h) for h in headers] if headers is not None else None
    if not str_rows and str_headers is None:
        return ""

    widths = _calculate_column_widths(
        ([str_headers] if str_headers else []) + str_rows)
    separators = (len(widths) + 1) if border else (len(widths) - 1)
    fixed = sum(widths[:-1]) + padding * 2 * len(widths) + separators
    if width is not None and str_rows and width - fixed >= 20 and widths[-1] > width - fixed:
        str_rows = _wrap_last_column(str_rows, widths, width - fixed)

    pad = " " * padding
    edge = "|" if border else ""
    joint = "|" if border else " "

    def render_row(row: Sequence[str]) -> str:
        parts = []
        for i, cell in enumerate(row):
            right = " " * (widths[i] - len(strip_ansi(cell)))
            parts.append(f"{pad}{cell}{right}{pad}")
        line = edge + joint.join(parts) + edge
        return line if border else line.rstrip()

    rule = "-" * (sum(widths) + padding * 2 * len(widths) + separators)
    lines: List[str] = []
    if border:
        lines.append(rule)
    if str_headers is not None:
        lines.append(render_row(str_headers))
        lines.append(render_row(["-" * w for w in widths]))
    lines.extend(render_row(row) for row in str_rows)
    if border:
        lines.append(rule)
    return "\n".join(lines)
