"""Microsecond-resolution durations and wrapping instants used by the stack."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import ClassVar

__all__ = ["Duration", "Instant", "Timer"]

_U32_MAX = 0xFFFF_FFFF
_U16_MAX = 0xFFFF


def _format_micros(micros: int) -> str:
    if micros >= 1_000_000:
        secs, sub = divmod(micros, 1_000_000)
        return f"{secs}s" if sub == 0 else f"{secs}.{sub:06}s"
    if micros >= 1000:
        millis, sub = divmod(micros, 1000)
        return f"{millis}ms" if sub == 0 else f"{millis}.{sub:03}ms"
    return f"{micros}µs"


def _check_range(value: int, maximum: int, what: str) -> None:
    if not 0 <= value <= maximum:
        raise ValueError(f"{what} out of range: {value}")


@dataclass(frozen=True, order=True, repr=False)
class Duration:
    """A duration with microsecond resolution, limited to 32 bits."""

    micros: int

    T_IFS: ClassVar[Duration]

    def __post_init__(self) -> None:
        _check_range(self.micros, _U32_MAX, "duration")

    @classmethod
    def from_micros(cls, micros: int) -> Duration:
        return cls(micros)

    @classmethod
    def from_millis(cls, millis: int) -> Duration:
        _check_range(millis, _U16_MAX, "milliseconds")
        return cls(millis * 1_000)

    @classmethod
    def from_secs(cls, secs: int) -> Duration:
        _check_range(secs, _U16_MAX, "seconds")
        return cls(secs * 1_000_000)

    def whole_secs(self) -> int:
        return self.micros // 1_000_000

    def whole_millis(self) -> int:
        return self.micros // 1_000

    def as_micros(self) -> int:
        return self.micros

    def subsec_micros(self) -> int:
        return self.micros % 1_000_000

    def __add__(self, other: object) -> Duration:
        if not isinstance(other, Duration):
            return NotImplemented
        total = self.micros + other.micros
        if total > _U32_MAX:
            raise OverflowError("duration overflow")
        return Duration(total)

    def __sub__(self, other: object) -> Duration:
        if not isinstance(other, Duration):
            return NotImplemented
        diff = self.micros - other.micros
        if diff < 0:
            raise OverflowError("duration underflow")
        return Duration(diff)

    def __str__(self) -> str:
        return _format_micros(self.micros)

    __repr__ = __str__


Duration.T_IFS = Duration(150)


@dataclass(frozen=True, repr=False)
class Instant:
    """A point in time relative to an unspecified epoch; wraps around at 32 bits."""

    micros: int

    MAX_TIME_BETWEEN: ClassVar[Duration]

    def __post_init__(self) -> None:
        _check_range(self.micros, _U32_MAX, "instant")

    @classmethod
    def from_raw_micros(cls, micros: int) -> Instant:
        return cls(micros)

    def raw_micros(self) -> int:
        return self.micros

    def duration_since(self, earlier: Instant) -> Duration:
        """Return the time passed between ``earlier`` and ``self``.

        Raises ValueError when the instants are further apart than ``MAX_TIME_BETWEEN``.
        """
        passed = (self.micros - earlier.micros) & _U32_MAX
        if passed > self.MAX_TIME_BETWEEN.micros:
            raise ValueError(
                f"{passed}µs between instants {earlier} and {self}"
            )
        return Duration(passed)

    def __add__(self, other: object) -> Instant:
        if not isinstance(other, Duration):
            return NotImplemented
        return Instant((self.micros + other.micros) & _U32_MAX)

    def __sub__(self, other: object) -> Instant | Duration:
        if isinstance(other, Instant):
            return self.duration_since(other)
        if isinstance(other, Duration):
            return Instant((self.micros - other.micros) & _U32_MAX)
        return NotImplemented

    def __str__(self) -> str:
        return _format_micros(self.micros)

    __repr__ = __str__


Instant.MAX_TIME_BETWEEN = Duration(1_000_000 * 60 * 5)


class Timer(ABC):
    """A time source with microsecond accuracy."""

    @abstractmethod
    def now(self) -> Instant:
        """Return the current time; must never move backwards except on wraparound."""