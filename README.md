# rubble

Building blocks for a Bluetooth Low Energy stack. It covers the parts of the
link layer that are not radio hardware: channel numbering, timing values,
data channel PDUs, Link Layer Control Protocol PDUs, UUIDs, device addresses,
address filters, Security Manager command decoding and a packet queue. It is
written in plain Python and has no dependencies.

## Modules

- `rubble.utils`: the exceptions `Error`, `EofError` and `InvalidValueError`.
  It also has the formatting helpers `HexSlice` (`[0a, ff]`) and `Hex`
  (`0x1f`), and `enum_from_raw` / `enum_to_raw`. These convert between enum
  members and raw integers. A raw value with no matching member is kept as a
  plain `int`.
- `rubble.time`: `Duration`, a 32-bit microsecond duration. Adding or
  subtracting past its range raises `OverflowError`. `Duration.T_IFS` is
  150 µs. `Instant` is a 32-bit microsecond point in time that wraps around.
  `Instant.duration_since` and `Instant - Instant` raise `ValueError` when the
  two instants are more than `Instant.MAX_TIME_BETWEEN` (5 minutes) apart.
  `Timer` is an abstract time source with `now()`.
- `rubble.phy`: `AdvertisingChannel` (indices 37–39) and `DataChannel`
  (indices 0–36). Each gives `rf_channel()`, `freq()` in MHz and
  `whitening_iv()`. `AdvertisingChannel.first()`, `iter_all()` and `cycle()`
  step through the advertising channels. `Radio` is an abstract raw
  transmitter.
- `rubble.seq_num`: `SeqNum.ZERO` and `SeqNum.ONE`, a 1-bit sequence number
  that wraps when added.
- `rubble.uuids`: `Uuid16`, `Uuid32` and `Uuid128`. Short forms expand through
  the Bluetooth base UUID with `to_uuid32()` and `to_uuid128()`.
  `Uuid128.parse` reads the lower-case text form. Each class has
  `to_bytes()` and `from_bytes()` for the wire encoding. The short forms are
  little-endian on the wire.
- `rubble.device_address`: `DeviceAddress` holds 6 bytes, LSB first, and an
  `AddressKind` (`PUBLIC` or `RANDOM`). It is displayed MSB first, as in
  `aa:bb:cc:dd:ee:ff`.
- `rubble.features`: the `FeatureSet` flags, which are 8 bytes little-endian
  on the wire. `FeatureSet.supported()` is empty.
- `rubble.filter`: `AllowAll` and `WhitelistFilter`, which are
  `AddressFilter`s, and the `AdvFilter` and `ScanFilter` policies built from
  them.
- `rubble.llcp`: the `ControlPdu` variants (`ConnectionUpdateReq`,
  `ChannelMapReq`, `TerminateInd`, `UnknownRsp`, `FeatureReq`, `FeatureRsp`,
  `VersionInd`, `ConnectionParamReq`, `ConnectionParamRsp`, and
  `UnknownControl` for any other opcode). Each has `opcode()`,
  `encoded_size()` and `to_bytes()`. `parse_control_pdu` decodes them. The
  module also has `ControlOpcode`, `VersionNumber`, `ConnectionUpdateData` and
  `ConnectionParamRequest`. `ConnectionParamRequest.set_conn_interval` rounds
  down to 1.25 ms, clamps to 7.5 ms–4 s, and raises `ValueError` when min > max.
- `rubble.data`: the immutable 16-bit data channel `Header`, with
  `with_llid`, `parse`, `with_payload_length`, `with_nesn`, `with_sn` and
  `with_md`. It also has `Llid` and the `Pdu` variants `DataCont`, `DataStart`
  and `Control`. `parse_pdu` builds a PDU from a header and its payload. It
  raises `InvalidValueError` for the reserved LLID.
- `rubble.security`: `parse_command` decodes Security Manager commands into a
  `PairingRequest` or an `UnknownCommand`. The module also has `AuthReq` with
  its flag accessors, and the enums `CommandCode`, `IoCapabilities`, `Oob`,
  `BondingType`, `KeyDistribution` and `SecurityLevel`.
  `SecurityManager.process_message` decodes a message, logs it and returns the
  command.
- `rubble.queue`: `SimpleQueue` holds one packet. `split()` returns a
  `SimpleProducer` and a `SimpleConsumer`. Producers write through a
  `PayloadWriter`. Consumers return a `Consume` value, made with
  `Consume.always`, `Consume.never` or `Consume.on_success`. That value says
  whether the packet leaves the queue.

## Installation

```
pip install .
```

To run the tests:

```
pip install .[test]
pytest
```

## Examples

Expanding a UUID:

```python
from rubble.uuids import Uuid16

print(repr(Uuid16(0xFD6F).to_uuid128()))
# 0000fd6f-0000-1000-8000-00805f9b34fb
```

Working with channels:

```python
from rubble.phy import AdvertisingChannel

for channel in AdvertisingChannel.iter_all():
    print(channel.rf_channel(), channel.freq())
```

Durations:

```python
from rubble.time import Duration

print(Duration.from_millis(7) + Duration.from_micros(500))  # 7.500ms
```

Parsing an LL Control PDU:

```python
from rubble.llcp import parse_control_pdu

pdu = parse_control_pdu(bytes([0x02, 0x13]))
print(pdu.opcode())  # ControlOpcode.TERMINATE_IND
```

Passing a packet through the queue:

```python
from rubble.data import Llid
from rubble.queue import Consume, SimpleQueue

producer, consumer = SimpleQueue().split()

def fill(writer):
    writer.write(b"hello")
    return Llid.DATA_START

producer.produce_with(5, fill)
payload = consumer.consume_raw_with(
    lambda header, data: Consume.always(bytes(data))
)
```

Errors are raised as exceptions from `rubble.utils`. `EofError` means there
was not enough data or not enough space. `InvalidValueError` means a value
that is not allowed. Both derive from `Error`. Values that are out of range
when a value is built raise `ValueError`.

## What this package does not do

This package contains building blocks, not a working stack. It has no radio
driver and does not transmit anything. It has no link-layer state machine,
so it does not advertise, accept connections, hop channels or answer control
PDUs. It does not encode advertising channel PDUs and has no L2CAP layer.
The Security Manager only decodes and logs commands: pairing, bonding and key
exchange are not implemented.