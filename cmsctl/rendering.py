"""Plain-text rendering helpers for CLI listings."""

from __future__ import annotations

import json
from typing import Any, Sequence

MAX_CELL_WIDTH = 40


def _cell(value: Any) -> str:
    if isinstance(value, (dict, list)):
        text = json.dumps(value, ensure_ascii=False)
    elif isinstance(value, bool):
        text = "yes" if value else "no"
    else:
        text = str(value)
    text = text.replace("\n", " ")
    if len(text) > MAX_CELL_WIDTH:
        text = text[: MAX_CELL_WIDTH - 1] + "…"
    return text


def render_table(headers: Sequence[str], rows: Sequence[Sequence[Any]]) -> str:
    """Render *rows* as a left-aligned, column-padded table.

    Cells are flattened to one line and truncated to ``MAX_CELL_WIDTH``.
    """
    cells = [[_cell(v) for v in row] for row in rows]
    widths = [len(h) for h in headers]
    for row in cells:
        for i, text in enumerate(row):
            widths[i] = max(widths[i], len(text))

    def _line(values: Sequence[str]) -> str:
        return "  ".join(v.ljust(widths[i]) for i, v in enumerate(values)).rstrip()

    lines = [_line(headers), _line(["-" * w for w in widths])]
    lines.extend(_line(row) for row in cells)
    return "\n".join(lines)
