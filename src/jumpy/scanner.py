"""Find jump targets (word starts) on the visible lines."""

from __future__ import annotations

import re
from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import NamedTuple

Point = tuple[int, int]
# (line, column, offset) -> render point
PointMapper = Callable[[int, int, int], Point]

_WORD_RUN_RE = re.compile(r"\w+")


class ScanMode(Enum):
    SIMPLE = auto()
    CAMEL_CASE = auto()


@dataclass(frozen=True, order=True)
class Position:
    """A location in the document.

    Equality and ordering only look at ``offset``; ``line``, ``column`` and
    ``point`` are carried along for the renderer.
    """

    offset: int
    line: int = field(default=0, compare=False)
    column: int = field(default=0, compare=False)
    point: Point = field(default=(0, 0), compare=False)


class VisibleLine(NamedTuple):
    index: int
    text: str
    start_offset: int


@dataclass(frozen=True)
class Viewport:
    """Rectangle of painted cells, half-open on the right and bottom."""

    x: int
    y: int
    width: int
    height: int

    def contains(self, point: Point) -> bool:
        px, py = point
        return (
            self.x <= px < self.x + self.width
            and self.y <= py < self.y + self.height
        )


def grid_point(line: int, column: int, offset: int) -> Point:
    """Default mapping: one cell per character, one row per line."""
    return (column, line)


def _camel_boundaries(word: str) -> list[int]:
    """Columns inside *word* (excluding 0) where a camel-case hump starts."""
    cols: list[int] = []
    n = len(word)
    for i in range(1, n):
        ch = word[i]
        if not ch.isupper():
            continue
        prev = word[i - 1]
        if prev.islower():
            cols.append(i)
        elif prev.isupper() and i + 1 < n and word[i + 1].islower():
            # last capital of a run starts the next word: XML|Parser
            cols.append(i)
    return cols


def word_starts(text: str, mode: ScanMode = ScanMode.SIMPLE) -> list[int]:
    """Return the target columns of a single line, ascending."""
    cols: list[int] = []
    for m in _WORD_RUN_RE.finditer(text):
        start = m.start()
        cols.append(start)
        if mode is ScanMode.CAMEL_CASE:
            cols.extend(start + c for c in _camel_boundaries(m.group()))
    return cols


def scan(
    visible_lines: Iterable[VisibleLine],
    viewport: Viewport,
    mode: ScanMode = ScanMode.SIMPLE,
    to_point: PointMapper | None = None,
    min_gap: int = 0,
) -> list[Position]:
    """Return every visible word start in document order.

    Candidates whose mapped point falls outside *viewport* are dropped,
    which catches partially scrolled or horizontally clipped text. With
    *min_gap*, a candidate closer than that many cells to the previous
    one on the same row is dropped too, so labels never overlap.
    """
    mapper = to_point or grid_point
    positions: list[Position] = []
    for line in sorted(visible_lines, key=lambda vl: vl.index):
        if not line.text:
            continue
        last: Point | None = None
        for col in word_starts(line.text, mode):
            offset = line.start_offset + col
            point = mapper(line.index, col, offset)
            if not viewport.contains(point):
                continue
            if (
                min_gap
                and last is not None
                and point[1] == last[1]
                and point[0] < last[0] + min_gap
            ):
                continue
            positions.append(Position(offset, line.index, col, point))
            last = point
    return positions
