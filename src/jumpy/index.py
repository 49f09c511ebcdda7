"""Label -> position lookup for one jump session."""

from __future__ import annotations

import logging
from collections.abc import Iterator, Sequence

from jumpy.errors import InvalidArgument
from jumpy.labels import CAPACITY, generate_labels
from jumpy.scanner import Position

logger = logging.getLogger(__name__)


class JumpIndex:
    """Read-only mapping from label to target position."""

    __slots__ = ("_targets",)

    def __init__(self, targets: dict[str, Position] | None = None) -> None:
        self._targets: dict[str, Position] = dict(targets or {})

    @classmethod
    def build(
        cls, positions: Sequence[Position], labels: Sequence[str]
    ) -> JumpIndex:
        """Pair *positions* and *labels* one to one, in order."""
        if len(labels) != len(positions):
            raise InvalidArgument(
                f"got {len(labels)} labels for {len(positions)} positions"
            )
        targets = dict(zip(labels, positions))
        if len(targets) != len(labels):
            raise InvalidArgument("labels must be unique")
        return cls(targets)

    @classmethod
    def for_positions(cls, positions: Sequence[Position]) -> JumpIndex:
        """Label the first ``CAPACITY`` positions; the rest stay unlabeled."""
        if len(positions) > CAPACITY:
            logger.debug(
                "dropping %d targets over capacity %d",
                len(positions) - CAPACITY,
                CAPACITY,
            )
            positions = positions[:CAPACITY]
        return cls.build(positions, generate_labels(len(positions)))

    # -- Queries -----------------------------------------------------------

    def lookup(self, label: str) -> Position | None:
        return self._targets.get(label)

    def has_prefix(self, prefix: str) -> bool:
        """True if any assigned label starts with *prefix*."""
        return any(label.startswith(prefix) for label in self._targets)

    def labels_with_prefix(self, prefix: str) -> list[str]:
        return [label for label in self._targets if label.startswith(prefix)]

    def items(self) -> list[tuple[str, Position]]:
        return list(self._targets.items())

    def positions(self) -> list[Position]:
        return list(self._targets.values())

    def __len__(self) -> int:
        return len(self._targets)

    def __iter__(self) -> Iterator[str]:
        return iter(self._targets)

    def __contains__(self, label: object) -> bool:
        return label in self._targets

    def __repr__(self) -> str:
        return f"JumpIndex({len(self._targets)} targets)"
