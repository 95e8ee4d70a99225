"""Shared error types, hex formatting helpers and raw-value enum conversion."""

from __future__ import annotations

from collections.abc import Iterable
from enum import Enum
from typing import TypeVar

__all__ = [
    "Error",
    "EofError",
    "InvalidValueError",
    "HexSlice",
    "Hex",
    "enum_from_raw",
    "enum_to_raw",
]


class Error(Exception):
    """Base class of all errors raised by the stack."""


class EofError(Error):
    """Raised when a buffer or queue has no more data or no more space."""


class InvalidValueError(Error):
    """Raised when a decoded value is not valid for its field."""


class HexSlice:
    """Formats a byte sequence as a list of two-digit hexadecimal values."""

    __slots__ = ("data",)

    def __init__(self, data: Iterable[int]) -> None:
        self.data = bytes(data)

    def __repr__(self) -> str:
        return "[" + ", ".join(f"{byte:02x}" for byte in self.data) + "]"

    __str__ = __repr__

    def __eq__(self, other: object) -> bool:
        if isinstance(other, HexSlice):
            return self.data == other.data
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self.data)


class Hex:
    """Formats an integer in hexadecimal with a ``0x`` prefix."""

    __slots__ = ("value",)

    def __init__(self, value: int) -> None:
        self.value = value

    def __repr__(self) -> str:
        return f"{self.value:#x}"

    __str__ = __repr__

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Hex):
            return self.value == other.value
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self.value)


E = TypeVar("E", bound=Enum)


def enum_from_raw(enum_cls: type[E], value: int) -> E | int:
    """Return the member of ``enum_cls`` with ``value``, or the raw int if it is unknown."""
    try:
        return enum_cls(value)
    except ValueError:
        return value


def enum_to_raw(value: Enum | int) -> int:
    """Return the raw integer behind an enum member or an unknown raw value."""
    if isinstance(value, Enum):
        return int(value.value)
    return int(value)