"""JSON renderer for decoded packets."""

import json
from dataclasses import fields
from typing import Any

from ..frames import Packet
from .base import Renderer


def _jsonable(value: Any) -> Any:
    if isinstance(value, bytes | bytearray | memoryview):
        return bytes(value).hex()
    if isinstance(value, tuple):
        return list(value)
    return value


def packet_to_dict(packet: Packet) -> dict[str, Any]:
    """Convert a packet to plain JSON-compatible types.

    Byte spans become lowercase hex strings and the opcode is reported by
    name alongside its raw value.
    """
    header = packet.header
    body = {f.name: _jsonable(getattr(packet.payload, f.name)) for f in fields(packet.payload)}
    return {
        "header": {
            "length": header.length,
            "opcode": header.opcode.name,
            "opcode_value": int(header.opcode),
            "key": header.key,
        },
        "type": type(packet.payload).__name__,
        "payload": body,
    }


class JSONRenderer(Renderer):
    """Compact JSON rendering for logs and tooling."""

    def render(self, packet: Packet) -> str:
        """Render a packet as compact JSON.

        Args:
            packet: Decoded packet

        Returns:
            JSON document string
        """
        return json.dumps(packet_to_dict(packet), separators=(",", ":"))
