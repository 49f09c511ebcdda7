"""Jump mode state machine."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass
from enum import Enum, auto
from typing import Union

from jumpy.errors import InactiveSessionError
from jumpy.index import JumpIndex
from jumpy.labels import LABEL_LENGTH, is_label_char
from jumpy.scanner import (
    PointMapper,
    Position,
    ScanMode,
    Viewport,
    VisibleLine,
    scan,
)

logger = logging.getLogger(__name__)


class SessionState(Enum):
    INACTIVE = auto()
    ACTIVE = auto()


# -- Resolutions -----------------------------------------------------------


@dataclass(frozen=True)
class AwaitingMore:
    prefix: str


@dataclass(frozen=True)
class Resolved:
    position: Position


@dataclass(frozen=True)
class Unmatched:
    label: str


@dataclass(frozen=True)
class Cancelled:
    pass


Resolution = Union[AwaitingMore, Resolved, Unmatched, Cancelled]


class JumpSession:
    """One jump mode lifetime at a time: activate, type a label, resolve.

    The session is owned by the host widget; it is not shared globally.
    ``consume`` on an inactive session raises ``InactiveSessionError``
    since that only happens when the integration layer routes keys wrong.
    """

    def __init__(self) -> None:
        self._state: SessionState = SessionState.INACTIVE
        self._index: JumpIndex | None = None
        self._prefix: str = ""

    # -- State queries -----------------------------------------------------

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def is_active(self) -> bool:
        return self._state is SessionState.ACTIVE

    @property
    def prefix(self) -> str:
        return self._prefix

    @property
    def index(self) -> JumpIndex | None:
        return self._index

    # -- Transitions -------------------------------------------------------

    def activate(
        self,
        visible_lines: Iterable[VisibleLine],
        viewport: Viewport,
        mode: ScanMode = ScanMode.SIMPLE,
        to_point: PointMapper | None = None,
        min_gap: int = 0,
    ) -> JumpIndex:
        """Scan, label and enter ACTIVE. Re-activation starts over cleanly."""
        if self.is_active:
            self.cancel()
        positions = scan(visible_lines, viewport, mode, to_point, min_gap)
        index = JumpIndex.for_positions(positions)
        self._index = index
        self._prefix = ""
        self._state = SessionState.ACTIVE
        logger.debug(
            "jump mode on: %d targets (%d found, mode=%s)",
            len(index),
            len(positions),
            mode.name,
        )
        return index

    def consume(self, char: str) -> Resolution:
        if not self.is_active:
            raise InactiveSessionError("consume() called while jump mode is off")
        if not is_label_char(char):
            self._deactivate()
            logger.debug("jump cancelled by %r", char)
            return Cancelled()

        self._prefix += char
        if len(self._prefix) < LABEL_LENGTH:
            return AwaitingMore(self._prefix)

        label = self._prefix
        position = self._index.lookup(label)
        self._deactivate()
        if position is None:
            logger.debug("no target for label %r", label)
            return Unmatched(label)
        logger.debug("label %r -> offset %d", label, position.offset)
        return Resolved(position)

    def cancel(self) -> None:
        """Leave jump mode; safe to call in any state."""
        self._deactivate()

    def _deactivate(self) -> None:
        self._state = SessionState.INACTIVE
        self._index = None
        self._prefix = ""
