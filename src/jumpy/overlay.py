"""Paint jump labels over visible lines as Rich text."""

from __future__ import annotations

import functools
import unicodedata
from dataclasses import dataclass

from rich.text import Text

from jumpy.index import JumpIndex

# marks the right half of a wide character in a cell list
_WIDE_TAIL = ""


@dataclass(frozen=True)
class LabelStyle:
    label: str = "bold black on yellow"
    typed: str = "bold white on red"
    dimmed: str = "dim"


@functools.lru_cache(maxsize=1024)
def char_width(ch: str) -> int:
    """Return display width of a character (2 for fullwidth/wide)."""
    if ch < "\u0100":
        return 1
    return 2 if unicodedata.east_asian_width(ch) in ("W", "F") else 1


def cell_width(text: str) -> int:
    if text.isascii():
        return len(text)
    return sum(map(char_width, text))


def labels_by_line(index: JumpIndex) -> dict[int, list[tuple[int, str]]]:
    """Group ``index`` entries as ``{line: [(column, label), ...]}``."""
    by_line: dict[int, list[tuple[int, str]]] = {}
    for label, pos in index.items():
        by_line.setdefault(pos.line, []).append((pos.column, label))
    for entries in by_line.values():
        entries.sort()
    return by_line


def overlay_line(
    text: str,
    line_labels: list[tuple[int, str]],
    prefix: str = "",
    style: LabelStyle | None = None,
    base_style: str = "",
) -> Text:
    """Return *text* with each label drawn over the cells of its target.

    Labels are placed by display cell, so a label over a wide character
    pads the half it does not cover and the rest of the line keeps its
    position. A label whose cells are already taken by an earlier one is
    not drawn. With a non-empty *prefix* only matching labels are drawn;
    the typed part and the remainder get different styles. The rest of
    the line is rendered in the dimmed style so the labels stand out.
    """
    style = style or LabelStyle()
    rest_style = f"{base_style} {style.dimmed}".strip()

    cells: list[str] = []
    cell_of: list[int] = []  # column -> first cell
    for ch in text:
        cell_of.append(len(cells))
        cells.append(ch)
        if char_width(ch) == 2:
            cells.append(_WIDE_TAIL)
    styles = [rest_style] * len(cells)
    painted = [False] * len(cells)

    for col, label in line_labels:
        if prefix and not label.startswith(prefix):
            continue
        if col >= len(cell_of):
            continue
        start = cell_of[col]
        end = min(start + len(label), len(cells))
        if any(painted[start:end]):
            continue
        for i, ch in enumerate(label):
            k = start + i
            if k >= len(cells):
                cells.append(" ")
                styles.append(rest_style)
                painted.append(False)
            if cells[k] == _WIDE_TAIL:
                cells[k - 1] = " "
            elif k + 1 < len(cells) and cells[k + 1] == _WIDE_TAIL:
                cells[k + 1] = " "
            cells[k] = ch
            styles[k] = style.typed if i < len(prefix) else style.label
            painted[k] = True

    result = Text()
    pos = 0
    n = len(cells)
    while pos < n:
        sty = styles[pos]
        end = pos + 1
        while end < n and styles[end] == sty:
            end += 1
        result.append("".join(cells[pos:end]), style=sty)
        pos = end
    return result
