import pytest

from rubble.data import (
    Control,
    DataCont,
    DataStart,
    Header,
    Llid,
    Pdu,
    parse_pdu,
)
from rubble.llcp import TerminateInd
from rubble.seq_num import SeqNum
from rubble.utils import EofError, InvalidValueError


@pytest.mark.parametrize("llid", list(Llid))
def test_with_llid_zeroes_other_fields(llid):
    header = Header.with_llid(llid)
    assert header.llid() is llid
    assert header.payload_length() == 0
    assert header.nesn() is SeqNum.ZERO
    assert header.sn() is SeqNum.ZERO
    assert header.md() is False


def test_parse_little_endian():
    header = Header.parse(bytes([0x03, 0x05]))
    assert header.llid() is Llid.CONTROL
    assert header.payload_length() == 5
    assert header.to_u16() == 0x0503


def test_parse_too_short():
    with pytest.raises(EofError):
        Header.parse(b"\x01")


def test_bytes_round_trip():
    header = (
        Header.with_llid(Llid.DATA_START)
        .with_payload_length(27)
        .with_nesn(SeqNum.ONE)
        .with_md(True)
    )
    assert Header.parse(header.to_bytes()) == header


def test_field_setters_are_independent():
    header = Header.with_llid(Llid.DATA_CONT).with_payload_length(200)
    header = header.with_sn(SeqNum.ONE).with_nesn(SeqNum.ONE).with_md(True)
    assert header.payload_length() == 200
    assert header.llid() is Llid.DATA_CONT
    header = header.with_sn(SeqNum.ZERO).with_md(False)
    assert header.sn() is SeqNum.ZERO
    assert header.nesn() is SeqNum.ONE
    assert header.md() is False
    assert header.payload_length() == 200


def test_payload_length_range():
    with pytest.raises(ValueError):
        Header().with_payload_length(256)


def test_repr_mentions_fields():
    text = repr(Header.with_llid(Llid.CONTROL).with_payload_length(3))
    assert text == "Header(LLID=CONTROL, NESN=0, SN=0, MD=False, Length=3)"


def test_empty_pdu():
    pdu = Pdu.empty()
    assert pdu.llid() is Llid.DATA_CONT
    assert pdu.to_bytes() == b""


def test_parse_data_pdus():
    cont = parse_pdu(Header.with_llid(Llid.DATA_CONT), b"ab")
    start = parse_pdu(Header.with_llid(Llid.DATA_START), b"cd")
    assert cont == DataCont(b"ab")
    assert start == DataStart(b"cd")
    assert start.llid() is Llid.DATA_START
    assert start.to_bytes() == b"cd"


def test_parse_control_pdu():
    pdu = parse_pdu(Header.with_llid(Llid.CONTROL), bytes([0x02, 0x13]))
    assert pdu == Control(TerminateInd(0x13))
    assert pdu.llid() is Llid.CONTROL
    assert pdu.to_bytes() == bytes([0x02, 0x13])


def test_parse_reserved_llid():
    with pytest.raises(InvalidValueError):
        parse_pdu(Header.with_llid(Llid.RESERVED), b"")