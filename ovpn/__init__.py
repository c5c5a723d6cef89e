# Copyright 2025 Maida.AI
# SPDX-License-Identifier: Apache-2.0
r"""ovpn - A read-only dissector for OpenVPN wire packets.

This package decodes raw OpenVPN packets captured from TCP or UDP streams into
typed, inspectable values. It never decrypts, verifies or builds packets.

The implementation provides:
- TCP (length-prefixed) and UDP header decoding with 5-bit opcode / 3-bit key split
- Control, acknowledgement and opaque data body decoders
- Zero-copy memoryview slices of the input, or owned copies on request
- Precise parse errors (truncation, bad length, unknown opcode, trailing bytes)
- JSON and one-line summary renderers for inspection
"""

# Import public API from modules
from .bodies import (
    AckBody,
    ControlBody,
    DataBody,
    Payload,
    decode_ack,
    decode_control,
    decode_data,
    decode_payload,
)
from .constants import (
    AUTH_TAG_SIZE,
    MIN_TCP_LENGTH,
    Opcode,
    UnrecognizedOpcode,
    classify_opcode,
)
from .errors import (
    InvalidLength,
    ParseError,
    TrailingBytes,
    Truncated,
    UnknownOpcode,
)
from .frames import (
    Header,
    Packet,
    decode_tcp,
    decode_tcp_header,
    decode_udp,
    decode_udp_header,
    split_tcp_stream,
)
from .options import DEFAULT_OPTIONS, DecoderOptions
from .render import (
    Renderer,
    get_renderer,
    list_renderers,
    register_renderer,
)

# Public API exports
__all__ = [
    # Entry points
    "decode_tcp",
    "decode_udp",
    "split_tcp_stream",
    # Packet structures
    "Packet",
    "Header",
    "Payload",
    "ControlBody",
    "AckBody",
    "DataBody",
    # Lower-level decoders
    "decode_tcp_header",
    "decode_udp_header",
    "decode_payload",
    "decode_control",
    "decode_ack",
    "decode_data",
    "classify_opcode",
    # Constants and enums
    "Opcode",
    "UnrecognizedOpcode",
    "AUTH_TAG_SIZE",
    "MIN_TCP_LENGTH",
    # Errors
    "ParseError",
    "Truncated",
    "InvalidLength",
    "UnknownOpcode",
    "TrailingBytes",
    # Configuration
    "DecoderOptions",
    "DEFAULT_OPTIONS",
    # Rendering
    "Renderer",
    "get_renderer",
    "list_renderers",
    "register_renderer",
]
