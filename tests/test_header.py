"""Tests for header decoding and opcode classification."""

import struct

import pytest

from ovpn import Opcode, Truncated, UnrecognizedOpcode, classify_opcode, decode_tcp_header, decode_udp_header


def test_tcp_header_fields() -> None:
    """Length, opcode and key are split out of the first three bytes."""
    header, rest = decode_tcp_header(b"\x00\x2a\x3b\xff")

    assert header.length == 42
    assert header.opcode == Opcode.P_CONTROL_HARD_RESET_CLIENT_V2
    assert header.key == 3
    assert rest == b"\xff"


def test_udp_header_fields() -> None:
    """UDP headers carry no length field."""
    header, rest = decode_udp_header(b"\x4a")

    assert header.length is None
    assert header.opcode == Opcode.P_DATA_V2
    assert header.key == 2
    assert len(rest) == 0


def test_tcp_header_truncated() -> None:
    """Fewer than three bytes cannot hold a TCP header."""
    for raw in (b"", b"\x00", b"\x00\x02"):
        with pytest.raises(Truncated) as exc_info:
            decode_tcp_header(raw)
        assert exc_info.value.needed == 3
        assert exc_info.value.available == len(raw)


def test_udp_header_truncated() -> None:
    """An empty datagram has no header."""
    with pytest.raises(Truncated):
        decode_udp_header(b"")


def test_header_keeps_unrecognized_opcode() -> None:
    """Header decoding itself never rejects an opcode."""
    header, _ = decode_udp_header(b"\xff")

    assert header.opcode == UnrecognizedOpcode(31)
    assert header.key == 7


@pytest.mark.parametrize("value", range(1, 10))
def test_classify_known(value: int) -> None:
    """Values 1 through 9 map onto Opcode members."""
    opcode = classify_opcode(value)
    assert isinstance(opcode, Opcode)
    assert opcode == value


@pytest.mark.parametrize("value", [0, *range(10, 32)])
def test_classify_unrecognized(value: int) -> None:
    """Every other 5-bit value stays unrecognized with its raw value."""
    opcode = classify_opcode(value)
    assert isinstance(opcode, UnrecognizedOpcode)
    assert opcode.value == value
    assert int(opcode) == value
    assert opcode.name == f"UNKNOWN_{value:#04x}"


def test_opcode_groups() -> None:
    """Opcode helpers agree with the payload each opcode carries."""
    assert Opcode.P_CONTROL_V1.is_control
    assert Opcode.P_CONTROL_SOFT_RESET_V1.is_control
    assert not Opcode.P_ACK_V1.is_control
    assert not Opcode.P_ACK_V1.is_data
    assert Opcode.P_DATA_V1.is_data
    assert Opcode.P_DATA_V2.is_data


def test_tcp_header_round_trip() -> None:
    """Re-packing the decoded fields reproduces the original header bytes."""
    for length in (2, 3, 0x1234, 0xFFFF):
        for opk in range(256):
            raw = struct.pack(">HB", length, opk)
            header, _ = decode_tcp_header(raw)
            repacked = struct.pack(">HB", header.length, (int(header.opcode) << 3) | header.key)
            assert repacked == raw
