"""Payload body structures and decoders."""

import struct
from collections.abc import Callable
from dataclasses import dataclass

from .constants import (
    ACK_ENTRY_SIZE,
    ACK_OPCODES,
    AUTH_TAG_SIZE,
    CONTROL_OPCODES,
    DATA_OPCODES,
    Opcode,
    UnrecognizedOpcode,
)
from .errors import Truncated, UnknownOpcode

Span = bytes | memoryview

_U8 = struct.Struct(">B")
_U32 = struct.Struct(">I")
_U64 = struct.Struct(">Q")

# ----------------------------------------------------------------------------
# Body structures
# ----------------------------------------------------------------------------


@dataclass(frozen=True)
class ControlBody:
    """Handshake and control channel message."""

    session_id: int
    auth_tag: Span
    packet_id: int
    timestamp: int
    ack_count: int
    ack_packet_ids: tuple[int, ...] | None
    remote_session_id: int | None
    message_packet_id: int
    application_payload: Span


@dataclass(frozen=True)
class AckBody:
    """Pure acknowledgement message."""

    session_id: int
    auth_tag: Span
    packet_id: int
    timestamp: int
    ack_count: int
    ack_packet_ids: tuple[int, ...] | None
    remote_session_id: int | None


@dataclass(frozen=True)
class DataBody:
    """Opaque, usually encrypted, data channel contents."""

    contents: Span


Payload = ControlBody | AckBody | DataBody

# ----------------------------------------------------------------------------
# Reader
# ----------------------------------------------------------------------------


def as_view(buffer: bytes | bytearray | memoryview) -> memoryview:
    """Return a flat, unsigned byte view of ``buffer``."""
    view = memoryview(buffer)
    if view.format != "B" or view.ndim != 1:
        view = view.cast("B")
    return view


class _Reader:
    """Sequential big-endian reader over a byte view."""

    def __init__(self, data: memoryview, copy: bool = False):
        self._data = data
        self._pos = 0
        self._copy = copy

    @property
    def remaining(self) -> int:
        return len(self._data) - self._pos

    def _need(self, n: int, field: str) -> None:
        if self.remaining < n:
            raise Truncated(field, n, self.remaining)

    def unpack(self, fmt: struct.Struct, field: str) -> int:
        self._need(fmt.size, field)
        (value,) = fmt.unpack_from(self._data, self._pos)
        self._pos += fmt.size
        return value

    def unpack_array(self, count: int, field: str) -> tuple[int, ...]:
        size = count * ACK_ENTRY_SIZE
        self._need(size, field)
        values = struct.unpack_from(f">{count}I", self._data, self._pos)
        self._pos += size
        return values

    def take(self, n: int, field: str) -> Span:
        self._need(n, field)
        chunk = self._data[self._pos : self._pos + n]
        self._pos += n
        return bytes(chunk) if self._copy else chunk

    def rest(self) -> Span:
        chunk = self._data[self._pos :]
        self._pos = len(self._data)
        return bytes(chunk) if self._copy else chunk


# ----------------------------------------------------------------------------
# Body decoders
# ----------------------------------------------------------------------------


def _read_reliable_header(reader: _Reader) -> tuple:
    """Read the fields shared by control and ack bodies.

    Layout: session id, auth tag, packet id, timestamp, ack count, and when
    the count is positive the ack packet ids followed by the remote session id.
    """
    session_id = reader.unpack(_U64, "session_id")
    auth_tag = reader.take(AUTH_TAG_SIZE, "auth_tag")
    packet_id = reader.unpack(_U32, "packet_id")
    timestamp = reader.unpack(_U32, "timestamp")
    ack_count = reader.unpack(_U8, "ack_count")

    ack_packet_ids = None
    remote_session_id = None
    if ack_count > 0:
        ack_packet_ids = reader.unpack_array(ack_count, "ack_packet_ids")
        remote_session_id = reader.unpack(_U64, "remote_session_id")

    return session_id, auth_tag, packet_id, timestamp, ack_count, ack_packet_ids, remote_session_id


def decode_control(body: bytes | bytearray | memoryview, copy: bool = False) -> ControlBody:
    """Decode a control channel body.

    Args:
        body: Bytes following the opcode/key byte, bounded to this packet
        copy: Return owned bytes instead of views into ``body``

    Returns:
        Decoded control body; everything after the message packet id is the
        application payload

    Raises:
        Truncated: If a field cannot be read completely
    """
    reader = _Reader(as_view(body), copy)
    prefix = _read_reliable_header(reader)
    message_packet_id = reader.unpack(_U32, "message_packet_id")
    return ControlBody(*prefix, message_packet_id, reader.rest())


def decode_ack(body: bytes | bytearray | memoryview, copy: bool = False) -> tuple[AckBody, Span]:
    """Decode an acknowledgement body.

    Args:
        body: Bytes following the opcode/key byte
        copy: Return owned bytes instead of views into ``body``

    Returns:
        Tuple of the decoded ack body and any bytes left after it

    Raises:
        Truncated: If a field cannot be read completely
    """
    reader = _Reader(as_view(body), copy)
    ack = AckBody(*_read_reliable_header(reader))
    return ack, reader.rest()


def decode_data(body: bytes | bytearray | memoryview, copy: bool = False) -> DataBody:
    """Wrap a data channel body without looking inside it."""
    view = as_view(body)
    return DataBody(bytes(view) if copy else view)


# ----------------------------------------------------------------------------
# Dispatcher
# ----------------------------------------------------------------------------


def _control(body: memoryview, copy: bool) -> tuple[Payload, Span]:
    return decode_control(body, copy), body[len(body) :]


def _data(body: memoryview, copy: bool) -> tuple[Payload, Span]:
    return decode_data(body, copy), body[len(body) :]


_DECODERS: dict[Opcode, Callable[[memoryview, bool], tuple[Payload, Span]]] = {}
_DECODERS.update(dict.fromkeys(CONTROL_OPCODES, _control))
_DECODERS.update(dict.fromkeys(ACK_OPCODES, decode_ack))
_DECODERS.update(dict.fromkeys(DATA_OPCODES, _data))


def decode_payload(
    opcode: Opcode | UnrecognizedOpcode, body: bytes | bytearray | memoryview, copy: bool = False
) -> tuple[Payload, Span]:
    """Decode a packet body with the decoder registered for ``opcode``.

    Args:
        opcode: Classified opcode from the packet header
        body: Bytes following the opcode/key byte
        copy: Return owned bytes instead of views into ``body``

    Returns:
        Tuple of the payload and the bytes the body decoder left unread;
        only ack bodies can leave bytes behind

    Raises:
        UnknownOpcode: If ``opcode`` is not a known opcode
        Truncated: If the body is too short for its fields
    """
    if isinstance(opcode, UnrecognizedOpcode):
        raise UnknownOpcode(opcode.value)
    payload, rest = _DECODERS[opcode](as_view(body), copy)
    return payload, bytes(rest) if copy else rest
