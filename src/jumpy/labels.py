"""Two-letter jump labels: aa, ab, ..., az, ba, ..., zz."""

from __future__ import annotations

from jumpy.errors import InvalidArgument, OutOfCapacity

ALPHABET = "abcdefghijklmnopqrstuvwxyz"
LABEL_LENGTH = 2
CAPACITY = len(ALPHABET) ** LABEL_LENGTH  # 676

_ALPHABET_SET = frozenset(ALPHABET)


def generate_labels(count: int) -> list[str]:
    """Return the first *count* labels in lexicographic order.

    Raises ``InvalidArgument`` for a negative (or non-integer) count and
    ``OutOfCapacity`` when *count* exceeds ``CAPACITY``.
    """
    if isinstance(count, bool) or not isinstance(count, int):
        raise InvalidArgument(f"label count must be an integer, got {count!r}")
    if count < 0:
        raise InvalidArgument(f"label count must be non-negative, got {count}")
    if count > CAPACITY:
        raise OutOfCapacity(
            f"cannot generate {count} labels, at most {CAPACITY} are available"
        )
    labels: list[str] = []
    for first in ALPHABET:
        for second in ALPHABET:
            if len(labels) >= count:
                return labels
            labels.append(first + second)
    return labels


def is_label_char(ch: str) -> bool:
    return isinstance(ch, str) and len(ch) == 1 and ch in _ALPHABET_SET


def is_valid_label(label: str) -> bool:
    """True if *label* is two alphabet characters, assigned or not."""
    return (
        isinstance(label, str)
        and len(label) == LABEL_LENGTH
        and all(ch in _ALPHABET_SET for ch in label)
    )
