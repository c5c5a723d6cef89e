"""Smoke test for the demo module."""

import pytest

from ovpn import decode_udp, split_tcp_stream
from ovpn.demo import as_tcp_stream, run_demo, sample_datagrams


def test_sample_datagrams_decode() -> None:
    """Every sample decodes over both framings."""
    datagrams = sample_datagrams()
    for datagram in datagrams:
        decode_udp(datagram)

    packets, rest = split_tcp_stream(as_tcp_stream(datagrams))
    assert len(packets) == len(datagrams)
    assert len(rest) == 0


def test_run_demo(capsys: pytest.CaptureFixture[str]) -> None:
    run_demo()
    out = capsys.readouterr().out

    assert "P_CONTROL_HARD_RESET_CLIENT_V2" in out
    assert "bytes waiting for more input" in out
    assert "(recoverable)" in out
    assert "Invalid TCP packet length 1" in out
    assert "Unknown opcode 0x0a" in out
    assert "Demo completed!" in out
