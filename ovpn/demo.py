#!/usr/bin/env python3
"""Demo module decoding sample OpenVPN packets."""

import struct

from . import DecoderOptions, ParseError, Truncated, decode_tcp, decode_udp, get_renderer, split_tcp_stream

SESSION_ID = 0x0102030405060708
REMOTE_SESSION_ID = 0x1112131415161718
AUTH_TAG = bytes(range(20))


def _reliable_prefix(packet_id: int, acks: list[int]) -> bytes:
    prefix = struct.pack(">Q", SESSION_ID) + AUTH_TAG + struct.pack(">IIB", packet_id, 0x5F5E100, len(acks))
    if acks:
        prefix += struct.pack(f">{len(acks)}IQ", *acks, REMOTE_SESSION_ID)
    return prefix


def sample_datagrams() -> list[bytes]:
    """Build one UDP datagram per payload shape."""
    hard_reset = bytes([7 << 3]) + _reliable_prefix(0, []) + struct.pack(">I", 0)
    control = bytes([4 << 3]) + _reliable_prefix(1, [0]) + struct.pack(">I", 1) + b"\x16\x03\x01\x00\x05hello"
    ack = bytes([5 << 3]) + _reliable_prefix(2, [1, 2])
    data = bytes([(9 << 3) | 1]) + b"\x00\x00\x01" + bytes(32)
    return [hard_reset, control, ack, data]


def as_tcp_stream(datagrams: list[bytes]) -> bytes:
    """Prefix each datagram with its TCP length field and concatenate them."""
    return b"".join(struct.pack(">H", len(d)) + d for d in datagrams)


def run_demo():
    """Run a complete decoding demo."""
    print("OpenVPN Dissector Demo")
    print("=" * 40)

    summary = get_renderer("summary")
    json_renderer = get_renderer("json")

    print("\nUDP datagrams:")
    for datagram in sample_datagrams():
        packet, _ = decode_udp(datagram)
        print(f"  {summary.render(packet)}")
        print(f"    {json_renderer.render(packet)}")

    print("\nTCP stream (last packet cut short):")
    stream = as_tcp_stream(sample_datagrams())
    packets, rest = split_tcp_stream(stream[:-10], DecoderOptions(zero_copy=False))
    for packet in packets:
        print(f"  {summary.render(packet)}")
    print(f"  {len(rest)} bytes waiting for more input")

    print("\nMalformed input:")
    malformed = [
        (decode_tcp, b"\x00\x03\x20\x00"),  # control body cut short
        (decode_tcp, b"\x00\x01\x20\x00"),  # length below 2
        (decode_udp, b"\x50" + bytes(8)),  # opcode 10
    ]
    for decode, raw in malformed:
        try:
            decode(raw)
        except Truncated as exc:
            print(f"  {raw.hex()}: {exc} (recoverable)")
        except ParseError as exc:
            print(f"  {raw.hex()}: {exc}")

    print("\nDemo completed!")


def main():
    """Main entry point for the demo."""
    run_demo()


if __name__ == "__main__":
    main()
