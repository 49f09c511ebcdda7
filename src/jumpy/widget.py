"""Read-only modal text viewer widget with jump mode."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto

from rich.text import Text
from textual import events
from textual.message import Message
from textual.widget import Widget

from jumpy.config import JumpConfig
from jumpy.dispatch import KeystrokeRouter
from jumpy.labels import LABEL_LENGTH
from jumpy.overlay import cell_width, labels_by_line, overlay_line
from jumpy.scanner import Point, ScanMode, Viewport, VisibleLine
from jumpy.session import (
    AwaitingMore,
    Cancelled,
    JumpSession,
    Resolution,
    Resolved,
    Unmatched,
)


class ViewerMode(Enum):
    NORMAL = auto()
    JUMP = auto()


class JumpViewer(Widget, can_focus=True):
    """A vim-style text viewer with two-letter jump labels.

    Supported keys:
      NORMAL: h j k l  w b  0 $ ^  gg G  PgUp/PgDn ctrl+d ctrl+u  q
              s (jump to word)  S (jump to camelCase hump)
      JUMP:   a-z to type a label; Esc Enter Space Backspace cancel
    """

    DEFAULT_CSS = """
    JumpViewer {
        height: 1fr;
        background: $surface;
        padding: 0 1;
    }
    """

    _MODE_STYLE = {
        ViewerMode.NORMAL: "bold white on dark_green",
        ViewerMode.JUMP: "bold white on dark_orange",
    }

    # -- Messages ----------------------------------------------------------

    @dataclass
    class JumpResolved(Message):
        offset: int
        line: int
        column: int

    @dataclass
    class JumpUnmatched(Message):
        label: str

    @dataclass
    class JumpCancelled(Message):
        pass

    @dataclass
    class Quit(Message):
        pass

    # -- Init --------------------------------------------------------------

    def __init__(
        self,
        initial_content: str = "",
        *,
        config: JumpConfig | None = None,
        name: str | None = None,
        id: str | None = None,
        classes: str | None = None,
    ) -> None:
        super().__init__(name=name, id=id, classes=classes)
        self.config: JumpConfig = config or JumpConfig()
        self.lines: list[str] = initial_content.split("\n") if initial_content else [""]
        self.cursor_row: int = 0
        self.cursor_col: int = 0
        self.pending: str = ""
        self.status_msg: str = ""
        self._scroll_top: int = 0
        self._scroll_col: int = 0
        self._line_offsets: list[int] = self._compute_line_offsets()
        self.session = JumpSession()
        self.router = KeystrokeRouter(self.session, self._handle_normal)
        # (line -> [(column, label)]) for the live session
        self._jump_labels: dict[int, list[tuple[int, str]]] = {}

    # -- Helpers -----------------------------------------------------------

    def _compute_line_offsets(self) -> list[int]:
        offsets: list[int] = []
        total = 0
        for line in self.lines:
            offsets.append(total)
            total += len(line) + 1
        return offsets

    def _clamp_cursor(self) -> None:
        self.cursor_row = max(0, min(self.cursor_row, len(self.lines) - 1))
        line_len = len(self.lines[self.cursor_row])
        max_col = max(0, line_len - 1) if line_len else 0
        self.cursor_col = max(0, min(self.cursor_col, max_col))

    def _view_size(self) -> tuple[int, int]:
        """Return ``(width, height)`` of the content region in cells."""
        region = self.content_region
        return region.width, region.height

    def _gutter_width(self) -> int:
        return max(3, len(str(len(self.lines)))) + 1

    def _text_area(self) -> tuple[int, int]:
        """Return ``(columns, rows)`` available for text."""
        width, height = self._view_size()
        return max(1, width - self._gutter_width()), max(1, height - 1)

    def _visible_height(self) -> int:
        return self._text_area()[1]

    def _ensure_cursor_visible(self) -> None:
        avail, rows = self._text_area()
        if self.cursor_row < self._scroll_top:
            self._scroll_top = self.cursor_row
        elif self.cursor_row >= self._scroll_top + rows:
            self._scroll_top = self.cursor_row - rows + 1
        if self.cursor_col < self._scroll_col:
            self._scroll_col = self.cursor_col
            return
        line = self.lines[self.cursor_row]
        if line.isascii():
            if self.cursor_col >= self._scroll_col + avail:
                self._scroll_col = self.cursor_col - avail + 1
            return
        # wide characters: scroll until the cursor cell fits
        while (
            self._scroll_col < self.cursor_col
            and cell_width(line[self._scroll_col : self.cursor_col + 1]) > avail
        ):
            self._scroll_col += 1

    # -- Public API --------------------------------------------------------

    @property
    def mode(self) -> ViewerMode:
        return ViewerMode.JUMP if self.session.is_active else ViewerMode.NORMAL

    @property
    def cursor_offset(self) -> int:
        return self._line_offsets[self.cursor_row] + self.cursor_col

    def get_content(self) -> str:
        return "\n".join(self.lines)

    def set_content(self, content: str) -> None:
        self._cancel_jump()
        self.lines = content.split("\n") if content else [""]
        self._line_offsets = self._compute_line_offsets()
        self.cursor_row = 0
        self.cursor_col = 0
        self._scroll_top = 0
        self._scroll_col = 0
        self.refresh()

    # -- Jump mode ---------------------------------------------------------

    def visible_lines(self) -> list[VisibleLine]:
        """Lines currently painted, with their document start offsets."""
        _avail, rows = self._text_area()
        end = min(len(self.lines), self._scroll_top + rows)
        return [
            VisibleLine(i, self.lines[i], self._line_offsets[i])
            for i in range(self._scroll_top, end)
        ]

    def jump_viewport(self) -> Viewport:
        """Cells where a target can start and still show its whole label."""
        avail, rows = self._text_area()
        width = max(1, avail - LABEL_LENGTH + 1)
        return Viewport(self._gutter_width(), 0, width, rows)

    def _cell_for(self, line: int, column: int, offset: int) -> Point:
        text = self.lines[line]
        left = self._scroll_col
        if column >= left:
            x = cell_width(text[left:column])
        else:
            x = -cell_width(text[column:left])
        return (self._gutter_width() + x, line - self._scroll_top)

    def start_jump(self, mode: ScanMode | None = None) -> int:
        """Enter jump mode; returns the number of labeled targets."""
        self._ensure_cursor_visible()
        index = self.session.activate(
            self.visible_lines(),
            self.jump_viewport(),
            mode or self.config.default_mode,
            self._cell_for,
            min_gap=LABEL_LENGTH,
        )
        self._jump_labels = labels_by_line(index)
        self.pending = ""
        if not index:
            self.status_msg = "no targets"
        else:
            self.status_msg = f"-- JUMP -- ({len(index)} targets)"
        return len(index)

    def _cancel_jump(self) -> None:
        self.session.cancel()
        self._jump_labels = {}

    def _apply_resolution(self, resolution: Resolution) -> None:
        if isinstance(resolution, AwaitingMore):
            self.status_msg = f"-- JUMP -- {resolution.prefix}"
            return
        self._jump_labels = {}
        if isinstance(resolution, Resolved):
            pos = resolution.position
            self.cursor_row = pos.line
            self.cursor_col = pos.column
            self.status_msg = ""
        elif isinstance(resolution, Unmatched):
            self.status_msg = f'no label "{resolution.label}"'
        elif isinstance(resolution, Cancelled):
            self.status_msg = ""

    # -- Key handling ------------------------------------------------------

    def on_key(self, event: events.Key) -> None:
        event.prevent_default()
        event.stop()

        resolution = self._handle_key(event)

        if isinstance(resolution, Resolved):
            pos = resolution.position
            self.post_message(self.JumpResolved(pos.offset, pos.line, pos.column))
        elif isinstance(resolution, Unmatched):
            self.app.bell()
            self.post_message(self.JumpUnmatched(resolution.label))
        elif isinstance(resolution, Cancelled):
            self.post_message(self.JumpCancelled())

        self.refresh()

    def on_unmount(self) -> None:
        self._cancel_jump()

    def _handle_key(self, event) -> Resolution | None:
        """Route *event* and update the view; returns the jump resolution."""
        resolution = self.router.route(event)
        if resolution is not None:
            self._apply_resolution(resolution)
        self._clamp_cursor()
        if not self.session.is_active:
            self._ensure_cursor_visible()
        return resolution

    def _handle_normal(self, event) -> None:
        key = event.key
        char = event.character or ""

        if self.pending:
            pending = self.pending
            self.pending = ""
            if pending == "g" and char == "g":
                self.cursor_row = 0
                self.cursor_col = 0
            return

        if char == self.config.jump_key:
            self.start_jump()
            return
        if char == self.config.camel_jump_key:
            self.start_jump(ScanMode.CAMEL_CASE)
            return

        self.status_msg = ""
        if char == "h" or key == "left":
            self.cursor_col -= 1
        elif char == "j" or key == "down":
            self.cursor_row += 1
        elif char == "k" or key == "up":
            self.cursor_row -= 1
        elif char == "l" or key == "right":
            self.cursor_col += 1
        elif char == "w":
            self._move_word_forward()
        elif char == "b":
            self._move_word_backward()
        elif char == "0" or key == "home":
            self.cursor_col = 0
        elif char == "$" or key == "end":
            self.cursor_col = max(0, len(self.lines[self.cursor_row]) - 1)
        elif char == "^":
            line = self.lines[self.cursor_row]
            self.cursor_col = len(line) - len(line.lstrip())
        elif char == "g":
            self.pending = "g"
        elif char == "G":
            self.cursor_row = len(self.lines) - 1
        elif key == "pagedown" or key == "ctrl+f":
            self.cursor_row += self._visible_height()
        elif key == "pageup" or key == "ctrl+b":
            self.cursor_row -= self._visible_height()
        elif key == "ctrl+d":
            self.cursor_row += self._visible_height() // 2
        elif key == "ctrl+u":
            self.cursor_row -= self._visible_height() // 2
        elif char == "q":
            self.post_message(self.Quit())

    def _move_word_forward(self) -> None:
        line = self.lines[self.cursor_row]
        col = self.cursor_col
        while col < len(line) and (line[col].isalnum() or line[col] == "_"):
            col += 1
        while col < len(line) and not (line[col].isalnum() or line[col] == "_"):
            col += 1
        if col >= len(line) and self.cursor_row < len(self.lines) - 1:
            self.cursor_row += 1
            nline = self.lines[self.cursor_row]
            self.cursor_col = len(nline) - len(nline.lstrip())
        else:
            self.cursor_col = min(col, max(0, len(line) - 1))

    def _move_word_backward(self) -> None:
        line = self.lines[self.cursor_row]
        col = self.cursor_col
        if col == 0:
            if self.cursor_row > 0:
                self.cursor_row -= 1
                self.cursor_col = max(0, len(self.lines[self.cursor_row]) - 1)
            return
        col -= 1
        while col > 0 and not (line[col].isalnum() or line[col] == "_"):
            col -= 1
        while col > 0 and (line[col - 1].isalnum() or line[col - 1] == "_"):
            col -= 1
        self.cursor_col = col

    # =====================================================================
    # Rendering
    # =====================================================================

    def render(self) -> Text:
        width, height = self._view_size()
        if height < 2 or width < 10:
            return Text("(too small)")

        avail, rows = self._text_area()
        gutter = self._gutter_width()
        jumping = self.session.is_active
        if not jumping:
            self._ensure_cursor_visible()

        style = self.config.style
        prefix = self.session.prefix
        left = self._scroll_col
        result = Text()
        rows_used = 0
        line_idx = self._scroll_top
        while rows_used < rows and line_idx < len(self.lines):
            line = self.lines[line_idx]
            result.append(f"{line_idx + 1:>{gutter - 1}} ", style="dim cyan")
            if jumping:
                shifted = [
                    (col - left, label)
                    for col, label in self._jump_labels.get(line_idx, [])
                    if col >= left
                ]
                row = overlay_line(line[left:], shifted, prefix, style)
            else:
                visible = line[left : left + avail]
                row = Text()
                if line_idx == self.cursor_row:
                    col = self.cursor_col - left
                    row.append(visible[:col])
                    row.append(visible[col : col + 1] or " ", style="reverse")
                    row.append(visible[col + 1 :])
                else:
                    row.append(visible)
            # clip by cells, not characters
            row.truncate(avail)
            result.append_text(row)
            result.append("\n")
            rows_used += 1
            line_idx += 1

        while rows_used < rows:
            result.append(f"{'~':>{gutter - 1}} \n", style="dim blue")
            rows_used += 1

        # status bar
        mode = self.mode
        mode_label = f" {mode.name} "
        result.append(mode_label, style=self._MODE_STYLE[mode])
        if self.pending:
            result.append(f"  {self.pending}", style="bold yellow")
        pos = f" Ln {self.cursor_row + 1}/{len(self.lines)}, Col {self.cursor_col + 1} "
        spacer_len = max(
            0, width - len(mode_label) - len(pos) - len(self.status_msg) - 4
        )
        result.append(f"  {self.status_msg}")
        if spacer_len:
            result.append(" " * spacer_len)
        result.append(pos, style="bold")
        return result
