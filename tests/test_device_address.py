import pytest

from rubble.device_address import AddressKind, DeviceAddress

RAW = bytes([0x06, 0x05, 0x04, 0x03, 0x02, 0x01])


def test_debug_representation():
    addr = DeviceAddress(RAW, AddressKind.PUBLIC)
    assert repr(addr) == "DeviceAddress(01:02:03:04:05:06, Public)"


def test_display_representation():
    addr = DeviceAddress(RAW, AddressKind.PUBLIC)
    assert str(addr) == "01:02:03:04:05:06"


def test_random_repr_and_kind():
    addr = DeviceAddress(RAW, AddressKind.RANDOM)
    assert addr.is_random() is True
    assert repr(addr) == "DeviceAddress(01:02:03:04:05:06, Random)"


def test_public_is_not_random():
    assert DeviceAddress(RAW, AddressKind.PUBLIC).is_random() is False


def test_raw_keeps_over_the_air_order():
    addr = DeviceAddress(bytearray(RAW), AddressKind.PUBLIC)
    assert addr.raw == RAW


def test_equality_depends_on_kind():
    assert DeviceAddress(RAW, AddressKind.PUBLIC) == DeviceAddress(RAW, AddressKind.PUBLIC)
    assert not (DeviceAddress(RAW, AddressKind.PUBLIC) == DeviceAddress(RAW, AddressKind.RANDOM))


@pytest.mark.parametrize("raw", [b"", bytes(5), bytes(7)])
def test_wrong_length_rejected(raw):
    with pytest.raises(ValueError):
        DeviceAddress(raw, AddressKind.PUBLIC)