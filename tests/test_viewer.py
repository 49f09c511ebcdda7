"""Tests for the JumpViewer widget, label overlay, config and CLI."""

import json
import logging
from types import SimpleNamespace

import pytest

from jumpy.app import SAMPLE_TEXT, build_parser, load_config
from jumpy.config import JumpConfig, setup_logging
from jumpy.errors import ConfigError
from jumpy.index import JumpIndex
from jumpy.overlay import (
    LabelStyle,
    cell_width,
    char_width,
    labels_by_line,
    overlay_line,
)
from jumpy.scanner import Position, ScanMode, Viewport
from jumpy.widget import JumpViewer, ViewerMode


def _key(char, key=None):
    return SimpleNamespace(key=key or char, character=char)


def _viewer(content, size=(40, 10), config=None):
    viewer = JumpViewer(content, config=config)
    viewer._view_size = lambda: size
    return viewer


def _press(viewer, *chars):
    result = None
    for ch in chars:
        result = viewer._handle_key(_key(ch))
    return result


class TestViewerBasic:
    def test_init_empty(self):
        viewer = JumpViewer()
        assert viewer.lines == [""]
        assert viewer.cursor_row == 0
        assert viewer.mode == ViewerMode.NORMAL

    def test_line_offsets(self):
        viewer = _viewer("ab\ncde\n\nf")
        assert viewer._line_offsets == [0, 3, 7, 8]
        viewer.cursor_row = 1
        viewer.cursor_col = 2
        assert viewer.cursor_offset == 5

    def test_set_content_resets(self):
        viewer = _viewer("one\ntwo")
        viewer.cursor_row = 1
        viewer.set_content("three")
        assert viewer.lines == ["three"]
        assert viewer.cursor_row == 0
        assert viewer._line_offsets == [0]

    def test_movement(self):
        viewer = _viewer("alpha beta\ngamma")
        _press(viewer, "w")
        assert viewer.cursor_col == 6
        _press(viewer, "j")
        assert (viewer.cursor_row, viewer.cursor_col) == (1, 4)
        _press(viewer, "g", "g")
        assert (viewer.cursor_row, viewer.cursor_col) == (0, 0)
        _press(viewer, "G")
        assert viewer.cursor_row == 1

    def test_scrolls_to_cursor(self):
        viewer = _viewer("\n".join(f"line {i}" for i in range(50)))
        viewer.cursor_row = 30
        viewer._ensure_cursor_visible()
        # 9 text rows in a 10-row view
        assert viewer._scroll_top == 22


class TestViewerJump:
    """s / S start jump mode; two letters move the caret."""

    def test_start_jump(self):
        viewer = _viewer("alpha beta\ngamma delta")
        _press(viewer, "s")
        assert viewer.mode == ViewerMode.JUMP
        assert viewer.session.is_active
        assert len(viewer.session.index) == 4
        assert viewer._jump_labels == {0: [(0, "aa"), (6, "ab")], 1: [(0, "ac"), (6, "ad")]}

    def test_jump_moves_cursor(self):
        viewer = _viewer("alpha beta\ngamma delta")
        _press(viewer, "s", "a")
        assert viewer.status_msg == "-- JUMP -- a"
        result = _press(viewer, "d")
        assert result.position.offset == 17
        assert (viewer.cursor_row, viewer.cursor_col) == (1, 6)
        assert viewer.mode == ViewerMode.NORMAL
        assert viewer._jump_labels == {}

    def test_unmatched_keeps_cursor(self):
        viewer = _viewer("alpha beta\ngamma delta")
        viewer.cursor_col = 2
        _press(viewer, "s", "z", "z")
        assert (viewer.cursor_row, viewer.cursor_col) == (0, 2)
        assert viewer.status_msg == 'no label "zz"'
        assert viewer.mode == ViewerMode.NORMAL

    def test_escape_cancels(self):
        viewer = _viewer("alpha beta")
        _press(viewer, "s", "a")
        viewer._handle_key(_key("\x1b", "escape"))
        assert viewer.mode == ViewerMode.NORMAL
        assert viewer.cursor_col == 0

    def test_keys_after_jump_are_normal(self):
        viewer = _viewer("alpha beta\ngamma delta")
        _press(viewer, "s", "a", "b", "j")
        assert (viewer.cursor_row, viewer.cursor_col) == (1, 6)

    def test_camel_jump(self):
        viewer = _viewer("parseJsonValue")
        _press(viewer, "S", "a", "c")
        assert viewer.cursor_col == 9

    def test_camel_default_from_config(self):
        viewer = _viewer("parseJsonValue", config=JumpConfig(camel_case=True))
        _press(viewer, "s")
        assert len(viewer.session.index) == 3

    def test_custom_jump_key(self):
        viewer = _viewer("one two", config=JumpConfig(jump_key="f"))
        _press(viewer, "s")
        assert viewer.mode == ViewerMode.NORMAL
        _press(viewer, "f")
        assert viewer.mode == ViewerMode.JUMP

    def test_only_visible_rows_labeled(self):
        viewer = _viewer("\n".join(f"word{i}" for i in range(30)))
        viewer.cursor_row = 20
        _press(viewer, "s")
        lines = sorted(p.line for p in viewer.session.index.positions())
        assert lines == list(range(12, 21))

    def test_clipped_columns_not_labeled(self):
        # 36 text columns; a label needs two, so the last one starts none
        viewer = _viewer("a " * 30)
        _press(viewer, "s")
        assert max(p.column for p in viewer.session.index.positions()) == 34

    def test_viewport_and_cells(self):
        viewer = _viewer("\n".join(["abc"] * 8))
        assert viewer.jump_viewport() == Viewport(4, 0, 35, 9)
        viewer._scroll_top = 3
        assert viewer._cell_for(5, 2, 0) == (6, 2)

    def test_unmount_cancels(self):
        viewer = _viewer("one two")
        _press(viewer, "s")
        viewer.on_unmount()
        assert not viewer.session.is_active

    def test_adjacent_humps_get_one_label(self):
        viewer = _viewer("iPhone eBay")
        _press(viewer, "S")
        assert [p.column for p in viewer.session.index.positions()] == [0, 7]
        assert "  1 aahone abay" in viewer.render().plain


class TestViewerWideText:
    """Hangul and other wide characters take two cells each."""

    def test_word_past_right_edge_not_labeled(self):
        # 20 wide chars fill 40 cells, so "foo" starts off-screen
        viewer = _viewer("가" * 20 + " foo")
        _press(viewer, "s")
        assert [p.column for p in viewer.session.index.positions()] == [0]

    def test_cell_for_counts_display_width(self):
        viewer = _viewer("가" * 3 + " foo bar")
        assert viewer._cell_for(0, 4, 0) == (11, 0)
        assert viewer._cell_for(0, 8, 0) == (15, 0)

    def test_labels_keep_line_alignment(self):
        viewer = _viewer("가" * 3 + " foo bar")
        _press(viewer, "s")
        assert "  1 aa가가 abo acr" in viewer.render().plain

    def test_jump_after_wide_chars(self):
        viewer = _viewer("가" * 3 + " foo bar")
        _press(viewer, "s", "a", "b")
        assert viewer.cursor_col == 4

    def test_scrolls_by_cells(self):
        viewer = _viewer("가" * 40)
        viewer.cursor_col = 30
        viewer._ensure_cursor_visible()
        # columns 13..30 are 36 cells
        assert viewer._scroll_col == 13

    def test_render_clips_by_cells(self):
        viewer = _viewer("가" * 40)
        row = viewer.render().plain.split("\n")[0]
        assert cell_width(row) == 40


class TestViewerRender:
    def test_normal_render(self):
        viewer = _viewer("alpha beta")
        text = viewer.render().plain
        assert "  1 alpha beta" in text
        assert " NORMAL " in text

    def test_jump_render_shows_labels(self):
        viewer = _viewer("alpha beta\ngamma delta")
        _press(viewer, "s")
        text = viewer.render().plain
        assert "  1 aapha abta" in text
        assert "  2 acmma adlta" in text
        assert " JUMP " in text

    def test_too_small(self):
        viewer = _viewer("x", size=(5, 1))
        assert viewer.render().plain == "(too small)"


class TestOverlay:
    def test_labels_replace_word_starts(self):
        text = overlay_line("foo bar", [(0, "aa"), (4, "ab")])
        assert text.plain == "aao abr"

    def test_prefix_hides_other_labels(self):
        text = overlay_line("foo xyz", [(0, "aa"), (4, "ba")], prefix="b")
        assert text.plain == "foo baz"

    def test_prefix_styles(self):
        style = LabelStyle(label="L", typed="T", dimmed="D")
        text = overlay_line("xy z", [(0, "ab")], prefix="a", style=style)
        spans = [(s.start, s.end, s.style) for s in text.spans]
        assert spans == [(0, 1, "T"), (1, 2, "L"), (2, 4, "D")]

    def test_label_at_end_of_line_overflows(self):
        assert overlay_line("x", [(0, "aa")]).plain == "aa"

    def test_label_over_wide_char(self):
        text = overlay_line("가나 x", [(0, "aa")])
        assert text.plain == "aa나 x"
        assert cell_width(text.plain) == cell_width("가나 x")

    def test_label_over_half_of_wide_char_pads(self):
        text = overlay_line("a가 x", [(0, "ab")])
        assert text.plain == "ab  x"
        assert cell_width(text.plain) == cell_width("a가 x")

    def test_overlapping_label_skipped(self):
        text = overlay_line("iPhone", [(0, "aa"), (1, "ab")])
        assert text.plain == "aahone"

    def test_char_width(self):
        assert char_width("a") == 1
        assert char_width("é") == 1
        assert char_width("가") == 2
        assert char_width("Ａ") == 2  # fullwidth A
        assert cell_width("ab가") == 4

    def test_labels_by_line(self):
        index = JumpIndex.build(
            [Position(0, 0, 0), Position(4, 0, 4), Position(9, 1, 1)],
            ["aa", "ab", "ac"],
        )
        assert labels_by_line(index) == {0: [(0, "aa"), (4, "ab")], 1: [(1, "ac")]}


class TestConfig:
    def test_defaults(self):
        config = JumpConfig()
        assert config.jump_key == "s"
        assert config.camel_jump_key == "S"
        assert config.default_mode is ScanMode.SIMPLE
        assert config.style == LabelStyle()

    def test_from_dict(self):
        config = JumpConfig.from_dict({"camel_case": True, "label_style": "red", "extra": 1})
        assert config.default_mode is ScanMode.CAMEL_CASE
        assert config.style.label == "red"

    def test_wrong_type(self):
        with pytest.raises(ConfigError):
            JumpConfig.from_dict({"debug": "yes"})
        with pytest.raises(ConfigError):
            JumpConfig.from_dict({"jump_key": 1})

    @pytest.mark.parametrize(
        "data",
        [{"jump_key": ""}, {"jump_key": "ss"}, {"camel_jump_key": ""}],
    )
    def test_key_must_be_one_character(self, data):
        with pytest.raises(ConfigError):
            JumpConfig.from_dict(data)

    def test_not_an_object(self):
        with pytest.raises(ConfigError):
            JumpConfig.from_dict(["s"])

    def test_load_missing_file(self, tmp_path):
        assert JumpConfig.load(tmp_path / "nope.json") == JumpConfig()

    def test_load_file(self, tmp_path):
        path = tmp_path / "jumpy.json"
        path.write_text(json.dumps({"jump_key": "f"}), encoding="utf-8")
        assert JumpConfig.load(path).jump_key == "f"

    def test_load_invalid_json(self, tmp_path):
        path = tmp_path / "jumpy.json"
        path.write_text("{not json", encoding="utf-8")
        with pytest.raises(ConfigError):
            JumpConfig.load(path)


class TestLogging:
    def teardown_method(self):
        setup_logging(JumpConfig())

    def test_silent_by_default(self):
        setup_logging(JumpConfig())
        logger = logging.getLogger("jumpy")
        assert [type(h) for h in logger.handlers] == [logging.NullHandler]
        assert not logger.isEnabledFor(logging.DEBUG)

    def test_debug_writes_file(self, tmp_path):
        log_file = tmp_path / "jumpy.log"
        setup_logging(JumpConfig(debug=True, log_file=str(log_file)))
        logging.getLogger("jumpy.session").debug("hello")
        for handler in logging.getLogger("jumpy").handlers:
            handler.flush()
        assert "DEBUG - jumpy.session - hello" in log_file.read_text(encoding="utf-8")

    def test_setup_twice_keeps_one_handler(self, tmp_path):
        config = JumpConfig(debug=True, log_file=str(tmp_path / "a.log"))
        setup_logging(config)
        setup_logging(config)
        assert len(logging.getLogger("jumpy").handlers) == 1


class TestCli:
    def test_parse_args(self):
        args = build_parser().parse_args(["notes.txt", "--camel", "--debug"])
        assert args.file == "notes.txt"
        assert args.camel
        assert args.debug

    def test_load_config_overrides(self, tmp_path):
        path = tmp_path / "jumpy.json"
        path.write_text(json.dumps({"jump_key": "f"}), encoding="utf-8")
        args = build_parser().parse_args(["--config", str(path), "--camel"])
        config = load_config(args)
        assert config.jump_key == "f"
        assert config.camel_case
        assert not config.debug

    def test_sample_text_has_targets(self):
        viewer = _viewer(SAMPLE_TEXT, size=(100, 30))
        assert viewer.start_jump() > 0
