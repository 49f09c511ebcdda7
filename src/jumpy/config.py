"""User settings and logging setup."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, fields
from pathlib import Path

from jumpy.errors import ConfigError
from jumpy.overlay import LabelStyle
from jumpy.scanner import ScanMode

DEFAULT_CONFIG_PATH = Path.home() / ".config" / "jumpy.json"
DEFAULT_LOG_PATH = Path.home() / "jumpy.log"
LOG_FORMAT = "%(asctime)s - %(levelname)s - %(name)s - %(message)s"
# compared against key.character, so exactly one character each
_KEY_FIELDS = ("jump_key", "camel_jump_key")


@dataclass
class JumpConfig:
    """Settings read from ``~/.config/jumpy.json``."""

    jump_key: str = "s"
    camel_jump_key: str = "S"
    camel_case: bool = False  # mode used by jump_key
    label_style: str = LabelStyle.label
    typed_style: str = LabelStyle.typed
    dimmed_style: str = LabelStyle.dimmed
    log_file: str = ""
    debug: bool = False

    @classmethod
    def from_dict(cls, data: dict) -> JumpConfig:
        """Build from a mapping; unknown keys are ignored."""
        if not isinstance(data, dict):
            raise ConfigError("config must be a JSON object")
        kwargs = {}
        for f in fields(cls):
            if f.name not in data:
                continue
            value = data[f.name]
            expected = bool if f.type == "bool" else str
            if not isinstance(value, expected):
                raise ConfigError(
                    f"{f.name}: expected {expected.__name__}, "
                    f"got {type(value).__name__}"
                )
            if f.name in _KEY_FIELDS and len(value) != 1:
                raise ConfigError(
                    f"{f.name}: expected a single character, got {value!r}"
                )
            kwargs[f.name] = value
        return cls(**kwargs)

    @classmethod
    def load(cls, path: Path | str | None = None) -> JumpConfig:
        """Read config from *path*; a missing file gives the defaults."""
        path = Path(path) if path else DEFAULT_CONFIG_PATH
        try:
            raw = path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return cls()
        except OSError as exc:
            raise ConfigError(f"cannot read {path}: {exc}") from exc
        try:
            data = json.loads(raw)
        except json.JSONDecodeError as exc:
            raise ConfigError(f"invalid JSON in {path}: {exc}") from exc
        return cls.from_dict(data)

    @property
    def default_mode(self) -> ScanMode:
        return ScanMode.CAMEL_CASE if self.camel_case else ScanMode.SIMPLE

    @property
    def style(self) -> LabelStyle:
        return LabelStyle(
            label=self.label_style,
            typed=self.typed_style,
            dimmed=self.dimmed_style,
        )


def setup_logging(config: JumpConfig) -> None:
    """Log to a file when ``debug`` is on; otherwise stay silent.

    A terminal UI owns the screen, so log records never go to stderr.
    """
    logger = logging.getLogger("jumpy")
    for handler in logger.handlers[:]:
        logger.removeHandler(handler)
        handler.close()
    logger.propagate = False

    if not config.debug:
        logger.addHandler(logging.NullHandler())
        logger.setLevel(logging.WARNING)
        return

    log_file = DEFAULT_LOG_PATH
    if config.log_file:
        log_file = Path(config.log_file).expanduser()
    handler = logging.FileHandler(log_file, encoding="utf-8")
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    logger.addHandler(handler)
    logger.setLevel(logging.DEBUG)
