"""The 1-bit sequence number used by data channel packets."""

from __future__ import annotations

from enum import Enum

__all__ = ["SeqNum"]


class SeqNum(Enum):
    """A 1-bit sequence number with wrapping addition."""

    ZERO = False
    ONE = True

    def __add__(self, other: object) -> SeqNum:
        if not isinstance(other, SeqNum):
            return NotImplemented
        return SeqNum(self.value ^ other.value)

    def __str__(self) -> str:
        return "1" if self.value else "0"

    __repr__ = __str__