"""Optional Link Layer features exchanged via LL_FEATURE_REQ/RSP."""

from __future__ import annotations

from enum import Flag

from rubble.utils import EofError

__all__ = ["FeatureSet"]


class FeatureSet(Flag):
    """A set of optional Link Layer features (64-bit little-endian on the wire)."""

    LE_ENCRYPTION = 1 << 0
    CONN_PARAM_REQ = 1 << 1
    EXTENDED_REJECT_INDICATION = 1 << 2
    SLAVE_FEATURE_EXCHANGE = 1 << 3
    LE_PING = 1 << 4
    LE_PACKET_LENGTH_EXTENSION = 1 << 5
    LL_PRIVACY = 1 << 6
    EXT_SCANNER_FILTER_POLICIES = 1 << 7

    @classmethod
    def supported(cls) -> FeatureSet:
        """The feature set this stack supports (none)."""
        return cls(0)

    def to_bytes(self) -> bytes:
        return self.value.to_bytes(8, "little")

    @classmethod
    def from_bytes(cls, data: bytes) -> FeatureSet:
        """Decode from the first 8 bytes of ``data``, dropping unknown bits."""
        if len(data) < 8:
            raise EofError(f"feature set needs 8 bytes, got {len(data)}")
        return cls.from_raw(int.from_bytes(bytes(data[:8]), "little"))

    @classmethod
    def from_raw(cls, raw: int) -> FeatureSet:
        """Build a feature set from raw bits, dropping unknown bits."""
        return cls(raw & _ALL_BITS)


_ALL_BITS = sum(member.value for member in FeatureSet)