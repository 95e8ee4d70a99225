"""Bluetooth Low Energy link-layer building blocks: timing, channels, data and LLCP PDUs, UUIDs, addresses, filters, SMP command decoding and a packet queue."""

__version__ = "0.1.0"