"""OpenVPN packet structures, header decoding and packet assembly."""

import logging
import struct
from dataclasses import dataclass

from .bodies import Payload, Span, as_view, decode_payload
from .constants import (
    KEY_MASK,
    MIN_TCP_LENGTH,
    OPCODE_KEY_SIZE,
    OPCODE_SHIFT,
    TCP_HEADER_SIZE,
    TCP_LENGTH_SIZE,
    UDP_HEADER_SIZE,
    Opcode,
    UnrecognizedOpcode,
    classify_opcode,
)
from .errors import InvalidLength, ParseError, Truncated, TrailingBytes
from .options import DEFAULT_OPTIONS, DecoderOptions

logger = logging.getLogger(__name__)

_TCP_PREFIX = struct.Struct(">HB")
_TCP_LENGTH = struct.Struct(">H")

# ----------------------------------------------------------------------------
# Packet structures
# ----------------------------------------------------------------------------


@dataclass(frozen=True)
class Header:
    """Packet header; ``length`` is only present in the TCP framing."""

    length: int | None
    opcode: Opcode | UnrecognizedOpcode
    key: int


@dataclass(frozen=True)
class Packet:
    """Decoded packet: header plus exactly one payload variant."""

    header: Header
    payload: Payload


# ----------------------------------------------------------------------------
# Header decoding
# ----------------------------------------------------------------------------


def _split_opcode_key(byte: int) -> tuple[Opcode | UnrecognizedOpcode, int]:
    return classify_opcode(byte >> OPCODE_SHIFT), byte & KEY_MASK


def _read_tcp_prefix(view: memoryview) -> tuple[int, Opcode | UnrecognizedOpcode, int]:
    if len(view) < TCP_HEADER_SIZE:
        raise Truncated("tcp header", TCP_HEADER_SIZE, len(view))
    length, opk = _TCP_PREFIX.unpack_from(view)
    return (length, *_split_opcode_key(opk))


def decode_tcp_header(buffer: bytes | bytearray | memoryview) -> tuple[Header, memoryview]:
    """Decode the length-prefixed TCP header.

    Args:
        buffer: Bytes starting at the length field

    Returns:
        Tuple of the header and a view of the bytes after it

    Raises:
        Truncated: If fewer than 3 bytes are available
    """
    view = as_view(buffer)
    length, opcode, key = _read_tcp_prefix(view)
    return Header(length=length, opcode=opcode, key=key), view[TCP_HEADER_SIZE:]


def decode_udp_header(buffer: bytes | bytearray | memoryview) -> tuple[Header, memoryview]:
    """Decode the single-byte UDP header.

    Args:
        buffer: Bytes starting at the opcode/key byte

    Returns:
        Tuple of the header and a view of the bytes after it

    Raises:
        Truncated: If the buffer is empty
    """
    view = as_view(buffer)
    if len(view) < UDP_HEADER_SIZE:
        raise Truncated("udp header", UDP_HEADER_SIZE, len(view))
    opcode, key = _split_opcode_key(view[0])
    return Header(length=None, opcode=opcode, key=key), view[UDP_HEADER_SIZE:]


# ----------------------------------------------------------------------------
# Packet assembly
# ----------------------------------------------------------------------------


def _assemble(header: Header, body: memoryview, options: DecoderOptions) -> Packet:
    payload, leftover = decode_payload(header.opcode, body, copy=not options.zero_copy)
    packet = Packet(header=header, payload=payload)
    if len(leftover):
        if options.ack_trailing == "error":
            raise TrailingBytes(packet, leftover)
        logger.debug("Ignoring %d trailing bytes after %s body", len(leftover), header.opcode.name)
    return packet


def _finish(rest: memoryview, options: DecoderOptions) -> Span:
    return rest if options.zero_copy else bytes(rest)


def _decode_tcp_view(view: memoryview, options: DecoderOptions) -> tuple[Packet, memoryview]:
    length, opcode, key = _read_tcp_prefix(view)
    if length < MIN_TCP_LENGTH:
        raise InvalidLength(length)

    header = Header(length=length, opcode=opcode, key=key)
    rest = view[TCP_HEADER_SIZE:]
    body_len = length - OPCODE_KEY_SIZE
    if len(rest) < body_len:
        raise Truncated("packet body", body_len, len(rest))

    packet = _assemble(header, rest[:body_len], options)
    return packet, rest[body_len:]


def decode_tcp(
    buffer: bytes | bytearray | memoryview, options: DecoderOptions | None = None
) -> tuple[Packet, Span]:
    """Decode one packet from a TCP stream buffer.

    The body is bounded by the length field; bytes past it belong to the next
    packet and are returned untouched.

    Args:
        buffer: Reassembled stream bytes starting at a length field
        options: Decoder policies, defaults to DEFAULT_OPTIONS

    Returns:
        Tuple of the packet and the unconsumed remainder of ``buffer``

    Raises:
        Truncated: If the header, the length-bounded body or a body field is short
        InvalidLength: If the length field is below 2
        UnknownOpcode: If the opcode is not a known value
        TrailingBytes: If an ack body leaves bytes unread and the policy is "error"
    """
    options = options or DEFAULT_OPTIONS
    packet, rest = _decode_tcp_view(as_view(buffer), options)
    return packet, _finish(rest, options)


def decode_udp(
    buffer: bytes | bytearray | memoryview, options: DecoderOptions | None = None
) -> tuple[Packet, Span]:
    """Decode one UDP datagram.

    The whole buffer is treated as a single packet, so the remainder is
    always empty on success.

    Args:
        buffer: One complete datagram
        options: Decoder policies, defaults to DEFAULT_OPTIONS

    Returns:
        Tuple of the packet and an empty remainder

    Raises:
        Truncated: If the datagram is empty or a body field is short
        UnknownOpcode: If the opcode is not a known value
        TrailingBytes: If an ack body leaves bytes unread and the policy is "error"
    """
    options = options or DEFAULT_OPTIONS
    header, rest = decode_udp_header(buffer)
    packet = _assemble(header, rest, options)
    return packet, _finish(rest[len(rest) :], options)


def split_tcp_stream(
    buffer: bytes | bytearray | memoryview, options: DecoderOptions | None = None
) -> tuple[list[Packet], Span]:
    """Decode every complete packet at the front of a TCP stream buffer.

    Decoding stops at the first frame whose length-prefixed bytes are not all
    present yet; that tail is returned so the caller can append more input.

    Args:
        buffer: Reassembled stream bytes starting at a length field
        options: Decoder policies, defaults to DEFAULT_OPTIONS

    Returns:
        Tuple of the decoded packets in order and the undecoded tail

    Raises:
        InvalidLength, UnknownOpcode, Truncated, TrailingBytes: If a complete
            frame is malformed; the error carries ``packets`` decoded before it
            and the ``offset`` of the failing frame within ``buffer``
    """
    options = options or DEFAULT_OPTIONS
    view = as_view(buffer)
    total = len(view)
    packets = []
    while len(view):
        if len(view) < TCP_LENGTH_SIZE:
            break
        (length,) = _TCP_LENGTH.unpack_from(view)
        frame_size = max(TCP_HEADER_SIZE, TCP_LENGTH_SIZE + length)
        if len(view) < frame_size:
            logger.debug("Incomplete frame: have %d of %d bytes", len(view), frame_size)
            break
        try:
            packet, view = _decode_tcp_view(view, options)
        except ParseError as exc:
            exc.packets = packets
            exc.offset = total - len(view)
            raise
        packets.append(packet)
    return packets, _finish(view, options)
