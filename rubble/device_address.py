"""Bluetooth device addresses."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

__all__ = ["AddressKind", "DeviceAddress"]


class AddressKind(Enum):
    """Whether an address is a registered LAN MAC address or randomly generated."""

    PUBLIC = "Public"
    RANDOM = "Random"


@dataclass(frozen=True)
class DeviceAddress:
    """A 6-byte device address; ``raw`` holds the bytes as sent over the air (LSB first)."""

    raw: bytes
    kind: AddressKind

    def __post_init__(self) -> None:
        raw = bytes(self.raw)
        if len(raw) != 6:
            raise ValueError(f"device address needs 6 bytes, got {len(raw)}")
        object.__setattr__(self, "raw", raw)

    def is_random(self) -> bool:
        return self.kind is AddressKind.RANDOM

    def __str__(self) -> str:
        # Displayed MSB first so the OUI acts as a prefix.
        return ":".join(f"{b:02x}" for b in reversed(self.raw))

    def __repr__(self) -> str:
        return f"DeviceAddress({self}, {self.kind.value})"