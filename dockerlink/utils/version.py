"""Dotted version comparison for daemon version strings."""

import re
from functools import total_ordering
from typing import Tuple

_LEADING_DIGITS = re.compile(r"^(\d+)")


@total_ordering
class ComparableVersion:
    """A version string ordered by its numeric components.

    Only the leading digits of each dot-separated part count, so
    ``"17.06.0-ce"`` compares as ``(17, 6, 0)``. Missing trailing parts
    compare as zero.
    """

    def __init__(self, text: str):
        self.text = text
        self.parts = self._parse(text)

    @staticmethod
    def _parse(text: str) -> Tuple[int, ...]:
        parts = []
        for piece in (text or "").strip().split("."):
            match = _LEADING_DIGITS.match(piece)
            parts.append(int(match.group(1)) if match else 0)
        return tuple(parts)

    def _padded(self, other: "ComparableVersion") -> Tuple[Tuple[int, ...], Tuple[int, ...]]:
        width = max(len(self.parts), len(other.parts))
        return (
            self.parts + (0,) * (width - len(self.parts)),
            other.parts + (0,) * (width - len(other.parts)),
        )

    def __eq__(self, other):
        if not isinstance(other, ComparableVersion):
            return NotImplemented
        mine, theirs = self._padded(other)
        return mine == theirs

    def __lt__(self, other):
        if not isinstance(other, ComparableVersion):
            return NotImplemented
        mine, theirs = self._padded(other)
        return mine < theirs

    def __hash__(self):
        return hash(self._strip_zeros())

    def _strip_zeros(self) -> Tuple[int, ...]:
        parts = list(self.parts)
        while parts and parts[-1] == 0:
            parts.pop()
        return tuple(parts)

    def __repr__(self):
        return f"ComparableVersion({self.text!r})"


def is_at_least(version: str, minimum: str) -> bool:
    """Return True when ``version`` is equal to or newer than ``minimum``."""
    return ComparableVersion(version) >= ComparableVersion(minimum)
