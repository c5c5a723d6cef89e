"""One-line packet summaries."""

from ..bodies import AckBody, ControlBody
from ..frames import Packet
from .base import Renderer


class SummaryRenderer(Renderer):
    """Single-line rendering in the spirit of a capture tool's info column."""

    def render(self, packet: Packet) -> str:
        header = packet.header
        parts = [header.opcode.name, f"key={header.key}"]
        if header.length is not None:
            parts.append(f"len={header.length}")

        body = packet.payload
        if isinstance(body, ControlBody | AckBody):
            parts.append(f"sid={body.session_id:#018x}")
            parts.append(f"pid={body.packet_id}")
            if isinstance(body, ControlBody):
                parts.append(f"mid={body.message_packet_id}")
            parts.append(f"acks={list(body.ack_packet_ids or ())}")
            if body.remote_session_id is not None:
                parts.append(f"rsid={body.remote_session_id:#018x}")
            if isinstance(body, ControlBody):
                parts.append(f"payload={len(body.application_payload)}B")
        else:
            parts.append(f"data={len(body.contents)}B")
        return " ".join(parts)
