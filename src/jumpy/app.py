"""Terminal text viewer with jump-to-word navigation."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from textual.app import App, ComposeResult
from textual.widgets import Header, Static

from jumpy.config import JumpConfig, setup_logging
from jumpy.errors import ConfigError
from jumpy.widget import JumpViewer

logger = logging.getLogger(__name__)

SAMPLE_TEXT = """\
Press s, then type the two letters shown over a word to jump there.
Press S to also stop at camelCase humps: XMLHttpRequest, parseJsonValue.

def build_index(positions, labels):
    targets = dict(zip(labels, positions))
    return JumpIndex(targets)

class KeystrokeRouter:
    def route(self, event):
        if not self.session.is_active:
            return self.fallback(event)
        return self.session.consume(event.character)

Escape, Enter, Space or Backspace leave jump mode without moving.
Typing a digit or capital letter cancels too. Press q to quit."""


class JumpyApp(App):
    """TUI app that wraps the JumpViewer widget."""

    CSS = """
    Screen {
        layout: vertical;
    }
    #viewer {
        height: 1fr;
        border: solid $accent;
    }
    #help-bar {
        height: auto;
        max-height: 3;
        padding: 0 1;
        color: $text-muted;
        background: $surface;
        border-top: solid $accent 50%;
    }
    """

    TITLE = "jumpy"
    BINDINGS = []
    ENABLE_COMMAND_PALETTE = False

    def __init__(
        self,
        file_path: str = "",
        initial_content: str = "",
        config: JumpConfig | None = None,
        **kwargs,
    ) -> None:
        super().__init__(**kwargs)
        self.file_path = file_path
        self.initial_content = initial_content
        self.jump_config = config or JumpConfig()

    def compose(self) -> ComposeResult:
        yield Header(show_clock=True)
        yield JumpViewer(self.initial_content, config=self.jump_config, id="viewer")
        yield Static(
            f"[b]Jump:[/b] {self.jump_config.jump_key} [dim]word[/]  "
            f"{self.jump_config.camel_jump_key} [dim]camelCase[/]  "
            "[b]Move:[/b] h j k l  w b  0 $ ^  gg G  [b]Quit:[/b] q",
            id="help-bar",
        )

    def on_mount(self) -> None:
        self.sub_title = self.file_path or "[sample]"
        self.query_one("#viewer").focus()

    def on_jump_viewer_quit(self) -> None:
        self.exit()

    def on_jump_viewer_jump_unmatched(self, event: JumpViewer.JumpUnmatched) -> None:
        self.notify(f'No target labeled "{event.label}"', severity="warning")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="jumpy",
        description="Text viewer with two-letter jump labels",
    )
    parser.add_argument(
        "file",
        nargs="?",
        default="",
        help="text file to open",
    )
    parser.add_argument(
        "--camel",
        action="store_true",
        default=False,
        help="stop at camelCase humps by default",
    )
    parser.add_argument(
        "-c", "--config",
        default="",
        help="config file (default: ~/.config/jumpy.json)",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        default=False,
        help="write debug log to the configured log file",
    )
    return parser


def load_config(args: argparse.Namespace) -> JumpConfig:
    """Read the config file and apply command-line overrides."""
    config = JumpConfig.load(args.config or None)
    if args.camel:
        config.camel_case = True
    if args.debug:
        config.debug = True
    return config


def main(argv: list[str] | None = None) -> None:
    args = build_parser().parse_args(argv)

    try:
        config = load_config(args)
    except ConfigError as exc:
        print(f"jumpy: {exc}", file=sys.stderr)
        sys.exit(1)
    setup_logging(config)

    file_path: str = args.file
    content = SAMPLE_TEXT
    if file_path:
        try:
            content = Path(file_path).read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            print(f"jumpy: {exc}", file=sys.stderr)
            sys.exit(1)
    logger.debug("opening %s", file_path or "sample text")

    app = JumpyApp(file_path=file_path, initial_content=content, config=config)
    app.run()


if __name__ == "__main__":
    main()
