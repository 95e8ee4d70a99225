"""Link-Layer device filtering."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Iterable

from rubble.device_address import DeviceAddress

__all__ = ["AddressFilter", "AllowAll", "WhitelistFilter", "AdvFilter", "ScanFilter"]


class AddressFilter(ABC):
    """Decides whether a device address is allowed."""

    @abstractmethod
    def matches(self, address: DeviceAddress) -> bool:
        """Return whether ``address`` passes the filter."""


class AllowAll(AddressFilter):
    """A filter that allows every device."""

    def matches(self, address: DeviceAddress) -> bool:
        return True


class WhitelistFilter(AddressFilter):
    """A software filter that allows only the listed addresses."""

    def __init__(self, addresses: Iterable[DeviceAddress]) -> None:
        self.addresses = tuple(addresses)

    @classmethod
    def from_address(cls, address: DeviceAddress) -> WhitelistFilter:
        """Create a whitelist that allows a single device."""
        return cls((address,))

    def matches(self, address: DeviceAddress) -> bool:
        return address in self.addresses


class AdvFilter:
    """Advertising filter policy: which devices may scan and connect to this device."""

    def __init__(self, scan: AddressFilter, connect: AddressFilter) -> None:
        self.scan = scan
        self.connect = connect

    def may_scan(self, device: DeviceAddress) -> bool:
        return self.scan.matches(device)

    def may_connect(self, device: DeviceAddress) -> bool:
        return self.connect.matches(device)


class ScanFilter:
    """Scanner filter policy: which devices' advertisements are processed."""

    def __init__(self, scan: AddressFilter) -> None:
        self.scan = scan

    def should_scan(self, device: DeviceAddress) -> bool:
        return self.scan.matches(device)