"""A single-producer single-consumer queue for data channel PDUs.

Data channel PDUs are received and transmitted in time-critical code, so they pass
through a queue and are processed later, for example in the application's idle loop.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections import deque
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, Generic, TypeVar

from rubble.data import Header, Llid, Pdu, parse_pdu
from rubble.utils import EofError, Error

__all__ = [
    "MIN_DATA_PAYLOAD_BUF",
    "MIN_DATA_PDU_BUF",
    "PayloadWriter",
    "Consume",
    "Producer",
    "Consumer",
    "SimpleQueue",
    "SimpleProducer",
    "SimpleConsumer",
]

MIN_DATA_PAYLOAD_BUF = 27
"""Minimum size of a data PDU payload buffer."""

MIN_DATA_PDU_BUF = MIN_DATA_PAYLOAD_BUF + 2
"""Minimum size of a data PDU buffer: payload plus the 2-byte header."""

T = TypeVar("T")


class PayloadWriter:
    """Writes bytes into a buffer of fixed capacity."""

    def __init__(self, capacity: int) -> None:
        if capacity < 0:
            raise ValueError(f"negative capacity: {capacity}")
        self._capacity = capacity
        self._buf = bytearray()

    def space_left(self) -> int:
        return self._capacity - len(self._buf)

    def write(self, data: bytes) -> None:
        """Append ``data``; raises EofError when it does not fit."""
        data = bytes(data)
        if len(data) > self.space_left():
            raise EofError(
                f"cannot write {len(data)} bytes, only {self.space_left()} left"
            )
        self._buf += data

    @property
    def written(self) -> bytes:
        """The bytes written so far."""
        return bytes(self._buf)


@dataclass(frozen=True)
class Consume(Generic[T]):
    """A result together with whether the processed packet should leave the queue.

    An exception instance as ``result`` marks a failure; it is raised when the
    result is taken out.
    """

    should_consume: bool
    result: Any

    @classmethod
    def always(cls, result: Any) -> Consume[T]:
        """Consume the packet, then return ``result``."""
        return cls(True, result)

    @classmethod
    def never(cls, result: Any) -> Consume[T]:
        """Leave the packet in the queue, then return ``result``."""
        return cls(False, result)

    @classmethod
    def on_success(cls, result: Any) -> Consume[T]:
        """Consume the packet only if ``result`` is not an exception."""
        return cls(not isinstance(result, BaseException), result)

    def into_result(self) -> T:
        """Return the result, raising it if it is an exception."""
        if isinstance(self.result, BaseException):
            raise self.result
        return self.result


class Producer(ABC):
    """The producing (writing) half of a packet queue."""

    @abstractmethod
    def free_space(self) -> int:
        """Largest payload size that can currently be enqueued."""

    @abstractmethod
    def produce_with(
        self, payload_bytes: int, f: Callable[[PayloadWriter], Llid]
    ) -> None:
        """Enqueue a PDU written by ``f``.

        Raises EofError when ``payload_bytes`` do not fit. If ``f`` raises, the
        queue is left unchanged and the exception propagates.
        """


class Consumer(ABC):
    """The consuming (reading) half of a packet queue."""

    @abstractmethod
    def has_data(self) -> bool:
        """Whether there is a packet to dequeue."""

    @abstractmethod
    def consume_raw_with(self, f: Callable[[Header, bytes], Consume[T]]) -> T:
        """Pass the next raw packet to ``f``; raises EofError if the queue is empty."""

    def consume_pdu_with(self, f: Callable[[Header, Pdu], Consume[T]]) -> T:
        """Pass the next parsed packet to ``f``; raises EofError if the queue is empty.

        A packet that cannot be parsed is consumed and its parse error raised.
        """

        def handle(header: Header, raw: bytes) -> Consume[T]:
            try:
                pdu = parse_pdu(header, raw)
            except Error as exc:
                return Consume.always(exc)
            return f(header, pdu)

        return self.consume_raw_with(handle)


class SimpleQueue:
    """A packet queue that holds a single packet."""

    def __init__(self) -> None:
        self._packets: deque[bytes] = deque(maxlen=1)

    def split(self) -> tuple[SimpleProducer, SimpleConsumer]:
        """Return the producing and consuming ends of the queue."""
        return SimpleProducer(self._packets), SimpleConsumer(self._packets)


class SimpleProducer(Producer):
    """Producer half returned by ``SimpleQueue.split``."""

    def __init__(self, packets: deque[bytes]) -> None:
        self._packets = packets

    def _ready(self) -> bool:
        return not self._packets

    def free_space(self) -> int:
        return MIN_DATA_PAYLOAD_BUF if self._ready() else 0

    def produce_with(
        self, payload_bytes: int, f: Callable[[PayloadWriter], Llid]
    ) -> None:
        if not 0 <= payload_bytes <= MIN_DATA_PAYLOAD_BUF:
            raise ValueError(
                f"payload of {payload_bytes} bytes exceeds {MIN_DATA_PAYLOAD_BUF}"
            )
        if not self._ready():
            raise EofError("queue is full")

        writer = PayloadWriter(MIN_DATA_PAYLOAD_BUF)
        llid = f(writer)
        payload = writer.written
        header = Header.with_llid(llid).with_payload_length(len(payload))
        self._packets.append(header.to_bytes() + payload)


class SimpleConsumer(Consumer):
    """Consumer half returned by ``SimpleQueue.split``."""

    def __init__(self, packets: deque[bytes]) -> None:
        self._packets = packets

    def has_data(self) -> bool:
        return bool(self._packets)

    def consume_raw_with(self, f: Callable[[Header, bytes], Consume[T]]) -> T:
        if not self._packets:
            raise EofError("queue is empty")
        packet = self._packets[0]
        header = Header.parse(packet)
        length = header.payload_length()
        payload = packet[2:2 + length]
        if len(payload) < length:
            raise EofError("stored packet is shorter than its header says")

        res = f(header, payload)
        if res.should_consume:
            self._packets.popleft()
        return res.into_result()