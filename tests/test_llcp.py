import pytest

from rubble.features import FeatureSet
from rubble.llcp import (
    ChannelMapReq,
    ConnectionParamReq,
    ConnectionParamRequest,
    ConnectionParamRsp,
    ConnectionUpdateData,
    ConnectionUpdateReq,
    ControlOpcode,
    FeatureReq,
    FeatureRsp,
    TerminateInd,
    UnknownControl,
    UnknownRsp,
    VersionInd,
    VersionNumber,
    parse_control_pdu,
)
from rubble.time import Duration
from rubble.utils import EofError


def _set(lo, hi):
    req = ConnectionParamRequest()
    req.set_conn_interval(lo, hi)
    return req.min_conn_interval(), req.max_conn_interval()


@pytest.mark.parametrize(
    "lo,hi",
    [
        (Duration.from_secs(1), Duration.from_secs(1)),
        (Duration.from_micros(7_500), Duration.from_micros(7_500)),
        (Duration.from_micros(7_500), Duration.from_secs(4)),
        (Duration.from_secs(4), Duration.from_secs(4)),
    ],
)
def test_set_conn_interval_same(lo, hi):
    assert _set(lo, hi) == (lo, hi)


def test_set_conn_interval_clamps_high():
    assert _set(Duration.from_secs(8), Duration.from_secs(8)) == (
        Duration.from_secs(4),
        Duration.from_secs(4),
    )


def test_set_conn_interval_clamps_low():
    assert _set(Duration.from_secs(0), Duration.from_secs(8)) == (
        Duration.from_micros(7_500),
        Duration.from_secs(4),
    )


def test_set_conn_interval_rounds_down():
    assert _set(Duration.from_micros(7_501), Duration.from_micros(7_502)) == (
        Duration.from_micros(7_500),
        Duration.from_micros(7_500),
    )


def test_set_conn_interval_min_greater_than_max():
    req = ConnectionParamRequest()
    with pytest.raises(ValueError, match="min <= max"):
        req.set_conn_interval(Duration.from_secs(8), Duration.from_secs(7))


def test_param_request_defaults():
    req = ConnectionParamRequest()
    assert req.min_conn_interval() == Duration.from_micros(7_500)
    assert req.max_conn_interval() == Duration.from_secs(4)
    assert req.supervision_timeout() == Duration.from_secs(1)
    assert req.offsets == (0xFFFF,) * 6


def test_param_request_round_trip():
    req = ConnectionParamRequest(10, 20, 1, 200, 2, 7, (1, 2, 3, 4, 5, 6))
    raw = req.to_bytes()
    assert len(raw) == 23
    assert raw[:2] == b"\x0a\x00"
    assert ConnectionParamRequest.from_bytes(raw) == req


def test_param_request_short_data():
    with pytest.raises(EofError):
        ConnectionParamRequest.from_bytes(b"\x00" * 22)


def test_connection_update_data_durations():
    data = ConnectionUpdateData(2, 4, 8, 3, 100, 42)
    assert data.win_size() == Duration.from_micros(2_500)
    assert data.win_offset() == Duration.from_micros(5_000)
    assert data.interval() == Duration.from_millis(10)
    assert data.timeout() == Duration.from_secs(1)
    assert ConnectionUpdateData.from_bytes(data.to_bytes()) == data


def test_parse_connection_update_req():
    raw = bytes([0x00, 0x02, 0x04, 0x00, 0x08, 0x00, 0x03, 0x00, 0x64, 0x00, 0x2A, 0x00])
    pdu = parse_control_pdu(raw)
    assert pdu == ConnectionUpdateReq(ConnectionUpdateData(2, 4, 8, 3, 100, 42))
    assert pdu.opcode() is ControlOpcode.CONNECTION_UPDATE_REQ
    assert pdu.to_bytes() == raw
    assert pdu.encoded_size() == 12


def test_parse_channel_map_req():
    raw = bytes([0x01, 0xFF, 0xFF, 0xFF, 0xFF, 0x1F, 0x10, 0x00])
    pdu = parse_control_pdu(raw)
    assert pdu == ChannelMapReq(b"\xff\xff\xff\xff\x1f", 16)
    assert pdu.to_bytes() == raw


def test_parse_terminate_ind():
    pdu = parse_control_pdu(b"\x02\x13")
    assert pdu == TerminateInd(0x13)
    assert pdu.encoded_size() == 2


def test_parse_unknown_rsp_with_unknown_type():
    pdu = parse_control_pdu(b"\x07\x99")
    assert pdu == UnknownRsp(0x99)
    assert pdu.to_bytes() == b"\x07\x99"


def test_feature_req_and_rsp():
    req = parse_control_pdu(b"\x08" + bytes([0x11, 0, 0, 0, 0, 0, 0, 0x80]))
    assert req == FeatureReq(FeatureSet.LE_ENCRYPTION | FeatureSet.LE_PING)
    rsp = FeatureRsp(req.features_master & FeatureSet.supported())
    assert rsp.to_bytes() == b"\x09" + b"\x00" * 8
    assert rsp.encoded_size() == 9


def test_version_ind_round_trip():
    pdu = VersionInd(VersionNumber.V4_2, 0xFFFF, 0x0000)
    raw = pdu.to_bytes()
    assert raw == b"\x0c\x08\xff\xff\x00\x00"
    assert parse_control_pdu(raw) == pdu
    assert pdu.encoded_size() == 6


def test_version_ind_unknown_version():
    pdu = parse_control_pdu(b"\x0c\x20\x01\x00\x02\x00")
    assert pdu.vers_nr == 0x20
    assert pdu.comp_id == 1


def test_param_req_opcode_parses_as_unknown():
    raw = b"\x0f" + ConnectionParamRequest().to_bytes()
    pdu = parse_control_pdu(raw)
    assert isinstance(pdu, UnknownControl)
    assert pdu.opcode() is ControlOpcode.CONNECTION_PARAM_REQ
    assert pdu.to_bytes() == raw


def test_param_req_and_rsp_encoding():
    params = ConnectionParamRequest()
    req = ConnectionParamReq(params)
    rsp = ConnectionParamRsp(params)
    assert req.to_bytes()[0] == 0x0F
    assert rsp.to_bytes()[0] == 0x10
    assert req.encoded_size() == len(req.to_bytes()) == 24


def test_unknown_opcode_encoded_size_uses_data_length():
    pdu = parse_control_pdu(b"\x42\x01\x02\x03")
    assert pdu == UnknownControl(0x42, b"\x01\x02\x03")
    assert pdu.encoded_size() == 4


def test_known_unsupported_opcode_encoded_size_uses_table():
    pdu = parse_control_pdu(b"\x12")
    assert pdu.opcode() is ControlOpcode.PING_REQ
    assert pdu.encoded_size() == 1
    enc = UnknownControl(ControlOpcode.ENC_REQ, b"")
    assert enc.encoded_size() == 23


@pytest.mark.parametrize(
    "raw",
    [b"", b"\x00\x01\x02", b"\x01\xff", b"\x02", b"\x08\x00\x00", b"\x0c\x08"],
)
def test_parse_truncated(raw):
    with pytest.raises(EofError):
        parse_control_pdu(raw)


def test_channel_map_wrong_length():
    with pytest.raises(ValueError):
        ChannelMapReq(b"\x00\x01", 0)