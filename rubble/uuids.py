"""BLE UUIDs: 16- and 32-bit aliases and full 128-bit UUIDs.

Short aliases expand to 128 bits by placing the (zero-extended) 32-bit value into
the first four bytes of the Bluetooth Base UUID
``00000000-0000-1000-8000-00805f9b34fb``.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import ClassVar

from rubble.utils import EofError

__all__ = ["UuidKind", "Uuid16", "Uuid32", "Uuid128"]

_HEX_DIGITS = frozenset("0123456789abcdef")
_DASH_POSITIONS = (8, 13, 18, 23)
_UUID_TEXT_LEN = 36


def _take(data: bytes, size: int, what: str) -> bytes:
    if len(data) < size:
        raise EofError(f"{what} needs {size} bytes, got {len(data)}")
    return bytes(data[:size])


class UuidKind(Enum):
    """The supported UUID widths."""

    UUID16 = 16
    UUID32 = 32
    UUID128 = 128


@dataclass(frozen=True)
class Uuid16:
    """A 16-bit UUID alias."""

    value: int

    KIND: ClassVar[UuidKind] = UuidKind.UUID16

    def __post_init__(self) -> None:
        if not 0 <= self.value <= 0xFFFF:
            raise ValueError(f"16-bit UUID out of range: {self.value}")

    def to_uuid32(self) -> Uuid32:
        return Uuid32(self.value)

    def to_uuid128(self) -> Uuid128:
        return self.to_uuid32().to_uuid128()

    def to_bytes(self) -> bytes:
        """Encode as 2 little-endian bytes."""
        return self.value.to_bytes(2, "little")

    @classmethod
    def from_bytes(cls, data: bytes) -> Uuid16:
        """Decode from the first 2 little-endian bytes of ``data``."""
        return cls(int.from_bytes(_take(data, 2, "Uuid16"), "little"))

    def __repr__(self) -> str:
        return f"Uuid16({self.value:04x})"


@dataclass(frozen=True)
class Uuid32:
    """A 32-bit UUID alias."""

    value: int

    KIND: ClassVar[UuidKind] = UuidKind.UUID32

    def __post_init__(self) -> None:
        if not 0 <= self.value <= 0xFFFF_FFFF:
            raise ValueError(f"32-bit UUID out of range: {self.value}")

    def to_uuid128(self) -> Uuid128:
        base = Uuid128.BASE_UUID.raw
        return Uuid128(self.value.to_bytes(4, "big") + base[4:])

    def to_bytes(self) -> bytes:
        """Encode as 4 little-endian bytes."""
        return self.value.to_bytes(4, "little")

    @classmethod
    def from_bytes(cls, data: bytes) -> Uuid32:
        """Decode from the first 4 little-endian bytes of ``data``."""
        return cls(int.from_bytes(_take(data, 4, "Uuid32"), "little"))

    def __repr__(self) -> str:
        return f"Uuid32({self.value:08x})"


@dataclass(frozen=True)
class Uuid128:
    """A full 128-bit UUID, stored as 16 big-endian bytes."""

    raw: bytes

    KIND: ClassVar[UuidKind] = UuidKind.UUID128
    BASE_UUID: ClassVar[Uuid128]

    def __post_init__(self) -> None:
        raw = bytes(self.raw)
        if len(raw) != 16:
            raise ValueError(f"128-bit UUID needs 16 bytes, got {len(raw)}")
        object.__setattr__(self, "raw", raw)

    @classmethod
    def parse(cls, text: str) -> Uuid128:
        """Parse a lower-case ``xxxxxxxx-xxxx-xxxx-xxxx-xxxxxxxxxxxx`` string.

        Raises ValueError when the string is malformed.
        """
        if len(text) < _UUID_TEXT_LEN:
            raise ValueError(f"UUID string too short: {text!r}")
        if len(text) > _UUID_TEXT_LEN:
            raise ValueError(f"unexpected trailing data in UUID string: {text!r}")
        for pos in _DASH_POSITIONS:
            if text[pos] != "-":
                raise ValueError(f"expected '-' at offset {pos} in {text!r}")
        digits = text.replace("-", "")
        if len(digits) != 32 or not set(digits) <= _HEX_DIGITS:
            raise ValueError(f"invalid hex digit in UUID string: {text!r}")
        return cls(bytes.fromhex(digits))

    def to_bytes(self) -> bytes:
        return self.raw

    @classmethod
    def from_bytes(cls, data: bytes) -> Uuid128:
        """Take the first 16 bytes of ``data`` as the UUID."""
        return cls(_take(data, 16, "Uuid128"))

    def __repr__(self) -> str:
        h = self.raw.hex()
        return f"{h[0:8]}-{h[8:12]}-{h[12:16]}-{h[16:20]}-{h[20:32]}"


Uuid128.BASE_UUID = Uuid128.parse("00000000-0000-1000-8000-00805f9b34fb")