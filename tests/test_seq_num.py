import pytest

from rubble.seq_num import SeqNum


def test_display():
    assert SeqNum.ZERO.__str__() == "0"
    assert SeqNum.ONE.__str__() == "1"
    assert repr(SeqNum.ONE) == "1"


@pytest.mark.parametrize(
    "a, b, expected",
    [
        (SeqNum.ZERO, SeqNum.ZERO, SeqNum.ZERO),
        (SeqNum.ZERO, SeqNum.ONE, SeqNum.ONE),
        (SeqNum.ONE, SeqNum.ZERO, SeqNum.ONE),
        (SeqNum.ONE, SeqNum.ONE, SeqNum.ZERO),
    ],
)
def test_wrapping_addition(a, b, expected):
    assert a + b is expected


def test_in_place_add_toggles():
    seq = SeqNum.ZERO
    seq += SeqNum.ONE
    assert seq.__str__() == "1"
    seq += SeqNum.ONE
    assert seq.__str__() == "0"


def test_adding_zero_is_identity():
    assert SeqNum.ZERO.__add__(SeqNum.ZERO).__str__() == "0"
    assert SeqNum.ONE.__add__(SeqNum.ZERO).__str__() == "1"


def test_add_non_seqnum_raises():
    assert SeqNum.ONE.__add__(SeqNum.ONE) is SeqNum.ZERO
    with pytest.raises(TypeError):
        SeqNum.ONE + 1