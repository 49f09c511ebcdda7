"""Route keystrokes to the jump session or to the normal input path."""

from __future__ import annotations

from collections.abc import Callable
from typing import Protocol

from jumpy.session import Cancelled, JumpSession, Resolution

CANCEL_KEYS = frozenset({"escape", "enter", "space", "backspace"})


class KeystrokeSource(Protocol):
    """A key event; Textual's ``events.Key`` satisfies this."""

    key: str
    character: str | None


class KeystrokeRouter:
    """While the session is active keys go to it, otherwise to *fallback*."""

    def __init__(
        self,
        session: JumpSession,
        fallback: Callable[[KeystrokeSource], None],
    ) -> None:
        self.session = session
        self.fallback = fallback

    def route(self, event: KeystrokeSource) -> Resolution | None:
        if not self.session.is_active:
            self.fallback(event)
            return None
        if event.key in CANCEL_KEYS:
            self.session.cancel()
            return Cancelled()
        return self.session.consume(event.character or "")
