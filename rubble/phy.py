"""Physical layer: advertising and data channel indices.

BLE uses 40 RF channels. Channel indices 0..=36 are data channels and 37..=39 the
advertising channels, which map onto RF channels 0, 12 and 39.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Iterator
from dataclasses import dataclass

__all__ = ["AdvertisingChannel", "DataChannel", "Radio"]

_ADV_TO_RF = {37: 0, 38: 12, 39: 39}


def _rf_channel_freq(rf_channel: int) -> int:
    return 2402 + rf_channel * 2


def _whitening_iv(channel_idx: int) -> int:
    return 0b0100_0000 | channel_idx


@dataclass(frozen=True)
class AdvertisingChannel:
    """One of the three advertising channels (indices 37, 38 or 39)."""

    channel: int

    def __post_init__(self) -> None:
        if self.channel not in _ADV_TO_RF:
            raise ValueError(f"invalid advertising channel index: {self.channel}")

    @classmethod
    def first(cls) -> AdvertisingChannel:
        return cls(37)

    @classmethod
    def iter_all(cls) -> Iterator[AdvertisingChannel]:
        """Yield all three advertising channels in ascending order."""
        for index in sorted(_ADV_TO_RF):
            yield cls(index)

    def cycle(self) -> AdvertisingChannel:
        """Return the next advertising channel, wrapping to the first one."""
        return AdvertisingChannel(37 if self.channel == 39 else self.channel + 1)

    def rf_channel(self) -> int:
        return _ADV_TO_RF[self.channel]

    def freq(self) -> int:
        """Center frequency in MHz."""
        return _rf_channel_freq(self.rf_channel())

    def whitening_iv(self) -> int:
        """Initial 7-bit LFSR value for data whitening (polynomial x^7 + x^4 + 1)."""
        return _whitening_iv(self.channel)


@dataclass(frozen=True)
class DataChannel:
    """One of the 37 data channels (indices 0..=36)."""

    index: int

    def __post_init__(self) -> None:
        if not 0 <= self.index <= 36:
            raise ValueError(f"invalid data channel index: {self.index}")

    def rf_channel(self) -> int:
        """RF channel; data uses RF channels 1-11 and 13-38."""
        return self.index + 1 if self.index <= 10 else self.index + 2

    def freq(self) -> int:
        """Center frequency in MHz."""
        return _rf_channel_freq(self.rf_channel())

    def whitening_iv(self) -> int:
        """Initial 7-bit LFSR value for data whitening (polynomial x^7 + x^4 + 1)."""
        return _whitening_iv(self.index)


class Radio(ABC):
    """A raw 2.4 GHz radio without BLE-specific support."""

    @abstractmethod
    def transmit(self, buf: bytearray, freq: int) -> None:
        """Transmit every byte of ``buf`` LSb first at ``freq`` MHz."""