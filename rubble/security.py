"""The LE Security Manager protocol (L2CAP channel 0x0006).

Only command decoding is implemented; pairing is not yet supported.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from enum import Enum, Flag

from rubble.utils import EofError, HexSlice, enum_from_raw

__all__ = [
    "SecurityLevel",
    "CommandCode",
    "IoCapabilities",
    "Oob",
    "BondingType",
    "KeyDistribution",
    "AuthReq",
    "PairingRequest",
    "UnknownCommand",
    "parse_command",
    "SecurityManager",
]

_log = logging.getLogger(__name__)


class SecurityLevel(Enum):
    """Supported security levels; the value is the L2CAP MTU each requires."""

    NO_SECURITY = 23
    SECURE_CONNECTIONS = 65

    @property
    def mtu(self) -> int:
        return self.value


class CommandCode(Enum):
    """SMP command codes."""

    PAIRING_REQUEST = 0x01
    PAIRING_RESPONSE = 0x02
    PAIRING_CONFIRM = 0x03
    PAIRING_RANDOM = 0x04
    PAIRING_FAILED = 0x05
    ENCRYPTION_INFORMATION = 0x06
    MASTER_IDENTIFICATION = 0x07
    IDENTITY_INFORMATION = 0x08
    IDENTITY_ADDRESS_INFORMATION = 0x09
    SIGNING_INFORMATION = 0x0A
    SECURITY_REQUEST = 0x0B
    PAIRING_PUBLIC_KEY = 0x0C
    PAIRING_DH_KEY_CHECK = 0x0D
    PAIRING_KEYPRESS_NOTIFICATION = 0x0E


class IoCapabilities(Enum):
    """I/O capabilities of a device usable during pairing."""

    DISPLAY_ONLY = 0x00
    DISPLAY_YES_NO = 0x01
    KEYBOARD_ONLY = 0x02
    NO_INPUT_NO_OUTPUT = 0x03
    KEYBOARD_DISPLAY = 0x04


class Oob(Enum):
    """Whether out-of-band pairing data is available."""

    NOT_PRESENT = 0x00
    PRESENT = 0x01


class BondingType(Enum):
    """Whether the exchanged keys are stored permanently."""

    NO_BONDING = 0b00
    BONDING = 0b01


class KeyDistribution(Flag):
    """Key types a device requests for distribution."""

    ENC_KEY = 1 << 0
    ID_KEY = 1 << 1
    SIGN_KEY = 1 << 2
    LINK_KEY = 1 << 3

    @classmethod
    def from_raw(cls, raw: int) -> KeyDistribution:
        """Build from raw bits, dropping unknown bits."""
        return cls(raw & _KEY_DIST_BITS)


_KEY_DIST_BITS = sum(member.value for member in KeyDistribution)

_BITS_BONDING = 0b0000_0011
_BITS_MITM = 0b0000_0100
_BITS_SC = 0b0000_1000
_BITS_KEYPRESS = 0b0001_0000


@dataclass(frozen=True, repr=False)
class AuthReq:
    """Authentication requirements exchanged during pairing."""

    raw: int = 0

    def __post_init__(self) -> None:
        if not 0 <= self.raw <= 0xFF:
            raise ValueError(f"AuthReq out of range: {self.raw}")

    def _with_bits(self, mask: int, bits: int) -> AuthReq:
        return replace(self, raw=(self.raw & ~mask & 0xFF) | bits)

    def bonding_type(self) -> BondingType | int:
        return enum_from_raw(BondingType, self.raw & _BITS_BONDING)

    def with_bonding_type(self, bonding: BondingType) -> AuthReq:
        return self._with_bits(_BITS_BONDING, bonding.value & _BITS_BONDING)

    def mitm(self) -> bool:
        """Whether MITM protection is requested."""
        return bool(self.raw & _BITS_MITM)

    def with_mitm(self, mitm: bool) -> AuthReq:
        return self._with_bits(_BITS_MITM, _BITS_MITM if mitm else 0)

    def secure_connection(self) -> bool:
        """Whether LE Secure Connections pairing is supported and requested."""
        return bool(self.raw & _BITS_SC)

    def with_secure_connection(self, sc: bool) -> AuthReq:
        return self._with_bits(_BITS_SC, _BITS_SC if sc else 0)

    def keypress(self) -> bool:
        return bool(self.raw & _BITS_KEYPRESS)

    def with_keypress(self, keypress: bool) -> AuthReq:
        return self._with_bits(_BITS_KEYPRESS, _BITS_KEYPRESS if keypress else 0)

    def __repr__(self) -> str:
        bonding = self.bonding_type()
        bonding_text = bonding.name if isinstance(bonding, BondingType) else f"Unknown({bonding})"
        return (
            f"AuthReq(bonding_type={bonding_text}, mitm={self.mitm()}, "
            f"secure_connection={self.secure_connection()}, keypress={self.keypress()})"
        )


_PAIRING_REQUEST_LEN = 6


@dataclass(frozen=True)
class PairingRequest:
    """The body of an SMP Pairing Request."""

    io: IoCapabilities | int
    oob: Oob | int
    auth_req: AuthReq
    max_keysize: int
    initiator_dist: KeyDistribution
    responder_dist: KeyDistribution

    @classmethod
    def from_bytes(cls, data: bytes) -> PairingRequest:
        """Decode from the first 6 bytes of ``data``."""
        if len(data) < _PAIRING_REQUEST_LEN:
            raise EofError(f"pairing request needs {_PAIRING_REQUEST_LEN} bytes, got {len(data)}")
        io, oob, auth, keysize, init_dist, resp_dist = bytes(data[:_PAIRING_REQUEST_LEN])
        return cls(
            io=enum_from_raw(IoCapabilities, io),
            oob=enum_from_raw(Oob, oob),
            auth_req=AuthReq(auth),
            max_keysize=keysize,
            initiator_dist=KeyDistribution.from_raw(init_dist),
            responder_dist=KeyDistribution.from_raw(resp_dist),
        )


@dataclass(frozen=True)
class UnknownCommand:
    """An SMP command that is not decoded further."""

    code: CommandCode | int
    data: bytes

    def __post_init__(self) -> None:
        object.__setattr__(self, "data", bytes(self.data))


def parse_command(data: bytes) -> PairingRequest | UnknownCommand:
    """Decode an SMP command: a code byte followed by its parameters."""
    data = bytes(data)
    if not data:
        raise EofError("SMP command has no code")
    code = enum_from_raw(CommandCode, data[0])
    if code is CommandCode.PAIRING_REQUEST:
        return PairingRequest.from_bytes(data[1:])
    return UnknownCommand(code, data[1:])


class SecurityManager:
    """The LE Security Manager; manages pairing and key exchange."""

    def __init__(self, level: SecurityLevel) -> None:
        self.level = level

    @classmethod
    def no_security(cls) -> SecurityManager:
        return cls(SecurityLevel.NO_SECURITY)

    def rsp_pdu_size(self) -> int:
        """Response PDU size, the MTU of the security level."""
        return self.level.mtu

    def process_message(self, message: bytes) -> PairingRequest | UnknownCommand:
        """Decode and handle an incoming SMP message, returning the decoded command."""
        cmd = parse_command(message)
        _log.debug("SMP cmd %r, %r", cmd, HexSlice(message))
        if isinstance(cmd, PairingRequest):
            _log.warning("pairing request NYI")
        elif isinstance(cmd.code, CommandCode):
            _log.warning("[NYI] SMP cmd %s: %r", cmd.code.name, HexSlice(cmd.data))
        else:
            _log.warning("unknown security manager cmd: 0x%02X %r", cmd.code, HexSlice(cmd.data))
        return cmd