"""Tests for packet renderers."""

import json
import struct

import pytest

from ovpn import Renderer, decode_tcp, decode_udp, get_renderer, list_renderers, register_renderer, render
from ovpn.render import JSONRenderer, SummaryRenderer, packet_to_dict

SESSION_ID = 0x0102030405060708
REMOTE_SESSION_ID = 0x1112131415161718
AUTH_TAG = bytes(range(20))


def control_datagram(acks: tuple[int, ...] = (), payload: bytes = b"") -> bytes:
    out = b"\x20" + struct.pack(">Q", SESSION_ID) + AUTH_TAG + struct.pack(">IIB", 1, 2, len(acks))
    if acks:
        out += struct.pack(f">{len(acks)}IQ", *acks, REMOTE_SESSION_ID)
    return out + struct.pack(">I", 7) + payload


def test_renderer_registry() -> None:
    """Default renderers are registered by name."""
    renderers = list_renderers()
    assert "json" in renderers
    assert "summary" in renderers

    assert isinstance(get_renderer("json"), JSONRenderer)
    assert isinstance(get_renderer("summary"), SummaryRenderer)

    with pytest.raises(ValueError):
        get_renderer("pcapng")


def test_register_custom_renderer(monkeypatch: pytest.MonkeyPatch) -> None:
    """Custom renderers can be registered and looked up by name."""
    monkeypatch.setitem(render._RENDERERS, "opcode", None)

    class OpcodeRenderer(Renderer):
        def render(self, packet):
            return packet.header.opcode.name

    register_renderer("opcode", OpcodeRenderer)
    packet, _ = decode_udp(b"\x30")
    assert get_renderer("opcode").render(packet) == "P_DATA_V1"


def test_json_control_packet() -> None:
    """Byte spans become hex and tuples become lists."""
    packet, _ = decode_udp(control_datagram(acks=(3,), payload=b"\x16\x03"))
    doc = json.loads(JSONRenderer().render(packet))

    assert doc["header"] == {"length": None, "opcode": "P_CONTROL_V1", "opcode_value": 4, "key": 0}
    assert doc["type"] == "ControlBody"
    assert doc["payload"]["session_id"] == SESSION_ID
    assert doc["payload"]["auth_tag"] == AUTH_TAG.hex()
    assert doc["payload"]["ack_packet_ids"] == [3]
    assert doc["payload"]["remote_session_id"] == REMOTE_SESSION_ID
    assert doc["payload"]["message_packet_id"] == 7
    assert doc["payload"]["application_payload"] == "1603"


def test_json_absent_ack_fields() -> None:
    packet, _ = decode_udp(control_datagram())
    body = packet_to_dict(packet)["payload"]

    assert body["ack_count"] == 0
    assert body["ack_packet_ids"] is None
    assert body["remote_session_id"] is None


def test_json_data_packet() -> None:
    packet, _ = decode_tcp(b"\x00\x03\x31\xca\xfe")
    doc = packet_to_dict(packet)

    assert doc["header"]["length"] == 3
    assert doc["header"]["key"] == 1
    assert doc["type"] == "DataBody"
    assert doc["payload"] == {"contents": "cafe"}


def test_summary_control_packet() -> None:
    packet, _ = decode_udp(control_datagram(acks=(3,), payload=b"tls"))

    assert SummaryRenderer().render(packet) == (
        "P_CONTROL_V1 key=0 sid=0x0102030405060708 pid=1 mid=7 acks=[3] rsid=0x1112131415161718 payload=3B"
    )


def test_summary_ack_packet() -> None:
    datagram = b"\x28" + struct.pack(">Q", SESSION_ID) + AUTH_TAG + struct.pack(">IIB", 2, 0, 0)
    packet, _ = decode_udp(datagram)

    assert SummaryRenderer().render(packet) == "P_ACK_V1 key=0 sid=0x0102030405060708 pid=2 acks=[]"


def test_summary_data_packet() -> None:
    packet, _ = decode_tcp(b"\x00\x05\x32\xaa\xbb\xcc\xdd")
    assert SummaryRenderer().render(packet) == "P_DATA_V1 key=2 len=5 data=4B"
