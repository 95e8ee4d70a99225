import pytest

from rubble.device_address import AddressKind, DeviceAddress
from rubble.filter import AddressFilter, AdvFilter, AllowAll, ScanFilter, WhitelistFilter

ADDR_A = DeviceAddress(bytes([1, 2, 3, 4, 5, 6]), AddressKind.PUBLIC)
ADDR_B = DeviceAddress(bytes([6, 5, 4, 3, 2, 1]), AddressKind.RANDOM)
ADDR_A_RANDOM = DeviceAddress(bytes([1, 2, 3, 4, 5, 6]), AddressKind.RANDOM)


def test_allow_all():
    assert AllowAll().matches(ADDR_A) is True
    assert AllowAll().matches(ADDR_B) is True


def test_whitelist_from_iterable():
    wl = WhitelistFilter([ADDR_A, ADDR_B])
    assert wl.matches(ADDR_A) is True
    assert wl.matches(ADDR_B) is True
    assert wl.matches(ADDR_A_RANDOM) is False


def test_whitelist_accepts_generator_repeatedly():
    wl = WhitelistFilter(addr for addr in [ADDR_B])
    assert wl.matches(ADDR_B) is True
    assert wl.matches(ADDR_B) is True


def test_whitelist_from_address():
    wl = WhitelistFilter.from_address(ADDR_A)
    assert wl.matches(ADDR_A) is True
    assert wl.matches(ADDR_B) is False


def test_empty_whitelist_rejects_everything():
    assert WhitelistFilter([]).matches(ADDR_A) is False


def test_adv_filter():
    policy = AdvFilter(AllowAll(), WhitelistFilter.from_address(ADDR_A))
    assert policy.may_scan(ADDR_B) is True
    assert policy.may_connect(ADDR_A) is True
    assert policy.may_connect(ADDR_B) is False


def test_scan_filter():
    policy = ScanFilter(WhitelistFilter([ADDR_B]))
    assert policy.should_scan(ADDR_B) is True
    assert policy.should_scan(ADDR_A) is False


def test_address_filter_is_abstract():
    with pytest.raises(TypeError):
        AddressFilter()