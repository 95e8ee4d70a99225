"""Data channel PDU structures: the 16-bit header and structured payloads."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import ClassVar

from rubble.llcp import ControlPdu, parse_control_pdu
from rubble.seq_num import SeqNum
from rubble.utils import EofError, InvalidValueError

__all__ = [
    "Llid",
    "Header",
    "Pdu",
    "DataCont",
    "DataStart",
    "Control",
    "parse_pdu",
]

_LLID_MASK = 0b11
_NESN_BIT = 0b0100
_SN_BIT = 0b1000
_MD_BIT = 0b1_0000
_LENGTH_SHIFT = 8


class Llid(Enum):
    """Values of the LLID header field (PDU type)."""

    RESERVED = 0b00
    DATA_CONT = 0b01
    DATA_START = 0b10
    CONTROL = 0b11


def _set_bit(raw: int, bit: int, on: bool) -> int:
    return raw | bit if on else raw & ~bit


@dataclass(frozen=True, repr=False)
class Header:
    """The 16-bit data channel PDU header.

    Layout, LSB first: LLID (2 bits), NESN, SN, MD (1 bit each), 3 reserved bits,
    then the 8-bit payload length.
    """

    raw: int = 0

    def __post_init__(self) -> None:
        if not 0 <= self.raw <= 0xFFFF:
            raise ValueError(f"header out of range: {self.raw}")

    @classmethod
    def with_llid(cls, llid: Llid) -> Header:
        """Create a header with the given LLID and every other field zero."""
        return cls(llid.value)

    @classmethod
    def parse(cls, raw: bytes) -> Header:
        """Decode a header from its first 2 little-endian bytes."""
        if len(raw) < 2:
            raise EofError(f"header needs 2 bytes, got {len(raw)}")
        return cls(int.from_bytes(bytes(raw[:2]), "little"))

    def to_u16(self) -> int:
        return self.raw

    def to_bytes(self) -> bytes:
        return self.raw.to_bytes(2, "little")

    def payload_length(self) -> int:
        """Length of payload and MIC in octets."""
        return self.raw >> _LENGTH_SHIFT

    def with_payload_length(self, length: int) -> Header:
        if not 0 <= length <= 0xFF:
            raise ValueError(f"payload length out of range: {length}")
        return Header((length << _LENGTH_SHIFT) | (self.raw & 0x00FF))

    def llid(self) -> Llid:
        return Llid(self.raw & _LLID_MASK)

    def nesn(self) -> SeqNum:
        """Next Expected Sequence Number."""
        return SeqNum(bool(self.raw & _NESN_BIT))

    def with_nesn(self, nesn: SeqNum) -> Header:
        return Header(_set_bit(self.raw, _NESN_BIT, nesn is SeqNum.ONE))

    def sn(self) -> SeqNum:
        """Sequence Number of this PDU."""
        return SeqNum(bool(self.raw & _SN_BIT))

    def with_sn(self, sn: SeqNum) -> Header:
        return Header(_set_bit(self.raw, _SN_BIT, sn is SeqNum.ONE))

    def md(self) -> bool:
        """Whether the sender has more data to send in this connection event."""
        return bool(self.raw & _MD_BIT)

    def with_md(self, md: bool) -> Header:
        return Header(_set_bit(self.raw, _MD_BIT, md))

    def __repr__(self) -> str:
        return (
            f"Header(LLID={self.llid().name}, NESN={self.nesn()}, SN={self.sn()}, "
            f"MD={self.md()}, Length={self.payload_length()})"
        )


class Pdu:
    """Base of structured data channel PDUs."""

    LLID: ClassVar[Llid]

    @classmethod
    def empty(cls) -> DataCont:
        """An empty PDU carrying no message."""
        return DataCont(b"")

    def llid(self) -> Llid:
        """The LLID to put in the header for this PDU."""
        return self.LLID

    def to_bytes(self) -> bytes:
        """Serialize the payload (the header is built from link-layer state)."""
        raise NotImplementedError


@dataclass(frozen=True)
class DataCont(Pdu):
    """Continuation of an L2CAP message, or an empty PDU."""

    message: bytes
    LLID: ClassVar[Llid] = Llid.DATA_CONT

    def __post_init__(self) -> None:
        object.__setattr__(self, "message", bytes(self.message))

    def to_bytes(self) -> bytes:
        return self.message


@dataclass(frozen=True)
class DataStart(Pdu):
    """Start of an L2CAP message."""

    message: bytes
    LLID: ClassVar[Llid] = Llid.DATA_START

    def __post_init__(self) -> None:
        object.__setattr__(self, "message", bytes(self.message))

    def to_bytes(self) -> bytes:
        return self.message


@dataclass(frozen=True)
class Control(Pdu):
    """An LL Control PDU controlling the connection."""

    data: ControlPdu
    LLID: ClassVar[Llid] = Llid.CONTROL

    def to_bytes(self) -> bytes:
        return self.data.to_bytes()


def parse_pdu(header: Header, payload: bytes) -> Pdu:
    """Build a structured PDU from a header and its raw payload.

    Raises InvalidValueError for the reserved LLID.
    """
    llid = header.llid()
    if llid is Llid.DATA_CONT:
        return DataCont(payload)
    if llid is Llid.DATA_START:
        return DataStart(payload)
    if llid is Llid.CONTROL:
        return Control(parse_control_pdu(payload))
    raise InvalidValueError("reserved LLID in data channel header")