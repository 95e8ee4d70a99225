"""Packet structures of the Link Layer Control Protocol (LLCP)."""

from __future__ import annotations

import struct
from dataclasses import dataclass, field
from enum import Enum
from typing import ClassVar

from rubble.features import FeatureSet
from rubble.time import Duration
from rubble.utils import EofError, enum_from_raw, enum_to_raw

__all__ = [
    "ControlOpcode",
    "VersionNumber",
    "ConnectionParamRequest",
    "ConnectionUpdateData",
    "ControlPdu",
    "ConnectionUpdateReq",
    "ChannelMapReq",
    "TerminateInd",
    "UnknownRsp",
    "FeatureReq",
    "FeatureRsp",
    "VersionInd",
    "ConnectionParamReq",
    "ConnectionParamRsp",
    "UnknownControl",
    "parse_control_pdu",
]

_CONN_UPDATE = struct.Struct("<BHHHHH")
_CONN_PARAM = struct.Struct("<HHHHBH6H")
_CHANNEL_MAP_LEN = 5
_U16 = struct.Struct("<H")
_VERSION = struct.Struct("<BHH")

_INTERVAL_UNIT_US = 1_250
_INTERVAL_MIN = 6
_INTERVAL_MAX = 3200


def _need(data: bytes, size: int, what: str) -> bytes:
    if len(data) < size:
        raise EofError(f"{what} needs {size} bytes, got {len(data)}")
    return bytes(data[:size])


class ControlOpcode(Enum):
    """All known LL Control PDU opcodes (not all of which are supported)."""

    CONNECTION_UPDATE_REQ = 0x00
    CHANNEL_MAP_REQ = 0x01
    TERMINATE_IND = 0x02
    ENC_REQ = 0x03
    ENC_RSP = 0x04
    START_ENC_REQ = 0x05
    START_ENC_RSP = 0x06
    UNKNOWN_RSP = 0x07
    FEATURE_REQ = 0x08
    FEATURE_RSP = 0x09
    PAUSE_ENC_REQ = 0x0A
    PAUSE_ENC_RSP = 0x0B
    VERSION_IND = 0x0C
    REJECT_IND = 0x0D
    SLAVE_FEATURE_REQ = 0x0E
    CONNECTION_PARAM_REQ = 0x0F
    CONNECTION_PARAM_RSP = 0x10
    REJECT_IND_EXT = 0x11
    PING_REQ = 0x12
    PING_RSP = 0x13
    LENGTH_REQ = 0x14
    LENGTH_RSP = 0x15


class VersionNumber(Enum):
    """Link Layer version numbers carried by LL_VERSION_IND."""

    V4_0 = 6
    V4_1 = 7
    V4_2 = 8
    V5_0 = 9
    V5_1 = 10


# Size of the CtrData that follows the opcode byte, per opcode.
_CTR_DATA_SIZE = {
    ControlOpcode.CONNECTION_UPDATE_REQ: 1 + 2 + 2 + 2 + 2 + 2,
    ControlOpcode.CHANNEL_MAP_REQ: 5 + 2,
    ControlOpcode.TERMINATE_IND: 1,
    ControlOpcode.ENC_REQ: 8 + 2 + 8 + 4,
    ControlOpcode.ENC_RSP: 8 + 4,
    ControlOpcode.START_ENC_REQ: 0,
    ControlOpcode.START_ENC_RSP: 0,
    ControlOpcode.UNKNOWN_RSP: 1,
    ControlOpcode.FEATURE_REQ: 8,
    ControlOpcode.FEATURE_RSP: 8,
    ControlOpcode.PAUSE_ENC_REQ: 0,
    ControlOpcode.PAUSE_ENC_RSP: 0,
    ControlOpcode.VERSION_IND: 1 + 2 + 2,
    ControlOpcode.REJECT_IND: 1,
    ControlOpcode.SLAVE_FEATURE_REQ: 8,
    ControlOpcode.CONNECTION_PARAM_REQ: 23,
    ControlOpcode.CONNECTION_PARAM_RSP: 23,
    ControlOpcode.REJECT_IND_EXT: 1 + 1,
    ControlOpcode.PING_REQ: 0,
    ControlOpcode.PING_RSP: 0,
    ControlOpcode.LENGTH_REQ: 2 + 2 + 2 + 2,
    ControlOpcode.LENGTH_RSP: 2 + 2 + 2 + 2,
}


@dataclass
class ConnectionParamRequest:
    """Body of LL_CONNECTION_PARAM_REQ / LL_CONNECTION_PARAM_RSP.

    Defaults are maximally permissive and will not usually change the connection.
    """

    interval_min: int = _INTERVAL_MIN
    interval_max: int = _INTERVAL_MAX
    slave_latency: int = 0
    timeout_units: int = 100
    preferred_periodicity: int = 0
    reference_conn_event_count: int = 0
    offsets: tuple[int, ...] = field(default_factory=lambda: (0xFFFF,) * 6)

    def set_conn_interval(self, min_interval: Duration, max_interval: Duration) -> None:
        """Request a connection interval range, rounded down to 1.25 ms and clamped to 7.5 ms..4 s.

        Raises ValueError unless ``min_interval <= max_interval``.
        """
        if not min_interval <= max_interval:
            raise ValueError("min <= max")
        lo = min_interval.as_micros() // _INTERVAL_UNIT_US
        hi = max_interval.as_micros() // _INTERVAL_UNIT_US
        self.interval_min = min(max(lo, _INTERVAL_MIN), _INTERVAL_MAX)
        self.interval_max = min(max(hi, _INTERVAL_MIN), _INTERVAL_MAX)

    def min_conn_interval(self) -> Duration:
        return Duration.from_micros(self.interval_min * _INTERVAL_UNIT_US)

    def max_conn_interval(self) -> Duration:
        return Duration.from_micros(self.interval_max * _INTERVAL_UNIT_US)

    def supervision_timeout(self) -> Duration:
        return Duration.from_millis(self.timeout_units * 10)

    @classmethod
    def from_bytes(cls, data: bytes) -> ConnectionParamRequest:
        values = _CONN_PARAM.unpack(_need(data, _CONN_PARAM.size, "connection parameters"))
        return cls(*values[:6], offsets=tuple(values[6:]))

    def to_bytes(self) -> bytes:
        if len(self.offsets) != 6:
            raise ValueError(f"expected 6 offsets, got {len(self.offsets)}")
        return _CONN_PARAM.pack(
            self.interval_min,
            self.interval_max,
            self.slave_latency,
            self.timeout_units,
            self.preferred_periodicity,
            self.reference_conn_event_count,
            *self.offsets,
        )


@dataclass(frozen=True)
class ConnectionUpdateData:
    """New connection parameters carried by LL_CONNECTION_UPDATE_REQ."""

    win_size_units: int
    win_offset_units: int
    interval_units: int
    latency: int
    timeout_units: int
    instant: int

    def win_size(self) -> Duration:
        """Size of the transmit window for the first PDU."""
        return Duration.from_micros(self.win_size_units * _INTERVAL_UNIT_US)

    def win_offset(self) -> Duration:
        """Offset of the transmit window after the instant."""
        return Duration.from_micros(self.win_offset_units * _INTERVAL_UNIT_US)

    def interval(self) -> Duration:
        """Duration between connection events."""
        return Duration.from_micros(self.interval_units * _INTERVAL_UNIT_US)

    def timeout(self) -> Duration:
        """Connection supervision timeout."""
        return Duration.from_micros(self.timeout_units * 10_000)

    @classmethod
    def from_bytes(cls, data: bytes) -> ConnectionUpdateData:
        return cls(*_CONN_UPDATE.unpack(_need(data, _CONN_UPDATE.size, "connection update")))

    def to_bytes(self) -> bytes:
        return _CONN_UPDATE.pack(
            self.win_size_units,
            self.win_offset_units,
            self.interval_units,
            self.latency,
            self.timeout_units,
            self.instant,
        )


class ControlPdu:
    """Base of all LL Control PDUs."""

    OPCODE: ClassVar[ControlOpcode]

    def opcode(self) -> ControlOpcode | int:
        return self.OPCODE

    def _ctr_data(self) -> bytes:
        raise NotImplementedError

    def encoded_size(self) -> int:
        """Encoded size including the opcode byte."""
        opcode = self.opcode()
        if isinstance(opcode, ControlOpcode):
            return 1 + _CTR_DATA_SIZE[opcode]
        length = len(self._ctr_data())
        if length > 0xFF:
            raise ValueError(f"control data too long: {length} bytes")
        return 1 + length

    def to_bytes(self) -> bytes:
        return bytes([enum_to_raw(self.opcode())]) + self._ctr_data()


@dataclass(frozen=True)
class ConnectionUpdateReq(ControlPdu):
    """LL_CONNECTION_UPDATE_REQ: new connection parameters from the master."""

    data: ConnectionUpdateData
    OPCODE: ClassVar[ControlOpcode] = ControlOpcode.CONNECTION_UPDATE_REQ

    def _ctr_data(self) -> bytes:
        return self.data.to_bytes()


@dataclass(frozen=True)
class ChannelMapReq(ControlPdu):
    """LL_CHANNEL_MAP_REQ: switch to a new channel map (5 raw bytes) at ``instant``."""

    map: bytes
    instant: int
    OPCODE: ClassVar[ControlOpcode] = ControlOpcode.CHANNEL_MAP_REQ

    def __post_init__(self) -> None:
        raw = bytes(self.map)
        if len(raw) != _CHANNEL_MAP_LEN:
            raise ValueError(f"channel map needs 5 bytes, got {len(raw)}")
        object.__setattr__(self, "map", raw)

    def _ctr_data(self) -> bytes:
        return self.map + _U16.pack(self.instant)


@dataclass(frozen=True)
class TerminateInd(ControlPdu):
    """LL_TERMINATE_IND: close the connection."""

    error_code: int
    OPCODE: ClassVar[ControlOpcode] = ControlOpcode.TERMINATE_IND

    def _ctr_data(self) -> bytes:
        return bytes([self.error_code])


@dataclass(frozen=True)
class UnknownRsp(ControlPdu):
    """LL_UNKNOWN_RSP: answer to an unsupported control PDU."""

    unknown_type: ControlOpcode | int
    OPCODE: ClassVar[ControlOpcode] = ControlOpcode.UNKNOWN_RSP

    def _ctr_data(self) -> bytes:
        return bytes([enum_to_raw(self.unknown_type)])


@dataclass(frozen=True)
class FeatureReq(ControlPdu):
    """LL_FEATURE_REQ: the master's supported features."""

    features_master: FeatureSet
    OPCODE: ClassVar[ControlOpcode] = ControlOpcode.FEATURE_REQ

    def _ctr_data(self) -> bytes:
        return self.features_master.to_bytes()


@dataclass(frozen=True)
class FeatureRsp(ControlPdu):
    """LL_FEATURE_RSP: the features used for the connection."""

    features_used: FeatureSet
    OPCODE: ClassVar[ControlOpcode] = ControlOpcode.FEATURE_RSP

    def _ctr_data(self) -> bytes:
        return self.features_used.to_bytes()


@dataclass(frozen=True)
class VersionInd(ControlPdu):
    """LL_VERSION_IND: Bluetooth version indication."""

    vers_nr: VersionNumber | int
    comp_id: int
    sub_vers_nr: int
    OPCODE: ClassVar[ControlOpcode] = ControlOpcode.VERSION_IND

    def _ctr_data(self) -> bytes:
        return _VERSION.pack(enum_to_raw(self.vers_nr), self.comp_id, self.sub_vers_nr)


@dataclass(frozen=True)
class ConnectionParamReq(ControlPdu):
    """LL_CONNECTION_PARAM_REQ."""

    params: ConnectionParamRequest
    OPCODE: ClassVar[ControlOpcode] = ControlOpcode.CONNECTION_PARAM_REQ

    def _ctr_data(self) -> bytes:
        return self.params.to_bytes()


@dataclass(frozen=True)
class ConnectionParamRsp(ControlPdu):
    """LL_CONNECTION_PARAM_RSP."""

    params: ConnectionParamRequest
    OPCODE: ClassVar[ControlOpcode] = ControlOpcode.CONNECTION_PARAM_RSP

    def _ctr_data(self) -> bytes:
        return self.params.to_bytes()


@dataclass(frozen=True)
class UnknownControl(ControlPdu):
    """A control PDU with an unsupported opcode and its raw CtrData."""

    code: ControlOpcode | int
    ctr_data: bytes

    def __post_init__(self) -> None:
        object.__setattr__(self, "ctr_data", bytes(self.ctr_data))

    def opcode(self) -> ControlOpcode | int:
        return self.code

    def _ctr_data(self) -> bytes:
        return self.ctr_data


def parse_control_pdu(data: bytes) -> ControlPdu:
    """Decode an LL Control PDU (opcode byte followed by CtrData).

    Raises EofError when ``data`` is too short for its opcode.
    """
    data = bytes(data)
    if not data:
        raise EofError("control PDU has no opcode")
    opcode = enum_from_raw(ControlOpcode, data[0])
    rest = data[1:]
    if opcode is ControlOpcode.CONNECTION_UPDATE_REQ:
        return ConnectionUpdateReq(ConnectionUpdateData.from_bytes(rest))
    if opcode is ControlOpcode.CHANNEL_MAP_REQ:
        raw = _need(rest, _CHANNEL_MAP_LEN + 2, "channel map request")
        return ChannelMapReq(raw[:_CHANNEL_MAP_LEN], _U16.unpack(raw[_CHANNEL_MAP_LEN:])[0])
    if opcode is ControlOpcode.TERMINATE_IND:
        return TerminateInd(_need(rest, 1, "terminate indication")[0])
    if opcode is ControlOpcode.UNKNOWN_RSP:
        return UnknownRsp(enum_from_raw(ControlOpcode, _need(rest, 1, "unknown response")[0]))
    if opcode is ControlOpcode.FEATURE_REQ:
        return FeatureReq(FeatureSet.from_bytes(rest))
    if opcode is ControlOpcode.FEATURE_RSP:
        return FeatureRsp(FeatureSet.from_bytes(rest))
    if opcode is ControlOpcode.VERSION_IND:
        vers, comp_id, sub = _VERSION.unpack(_need(rest, _VERSION.size, "version indication"))
        return VersionInd(enum_from_raw(VersionNumber, vers), comp_id, sub)
    return UnknownControl(opcode, rest)