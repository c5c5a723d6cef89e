"""Parse errors raised by the OpenVPN decoders."""

from typing import Any


class ParseError(ValueError):
    """Base class for malformed or incomplete packets.

    ``recoverable`` tells the caller whether the same bytes may still decode
    once more input arrives or a looser policy is applied.

    When raised from a stream split, ``packets`` holds the packets decoded
    before the failing frame and ``offset`` is where that frame starts.
    """

    recoverable = False
    packets: list[Any] | None = None
    offset: int | None = None


class Truncated(ParseError):
    """Fewer bytes are available than a field or slice requires."""

    recoverable = True

    def __init__(self, field: str, needed: int, available: int):
        """Initialize truncation error.

        Args:
            field: Name of the field or slice being read
            needed: Bytes the field requires
            available: Bytes that were left in the buffer
        """
        super().__init__(f"Truncated {field}: need {needed} bytes, have {available}")
        self.field = field
        self.needed = needed
        self.available = available


class InvalidLength(ParseError):
    """TCP length field is too small to hold an opcode byte and a body."""

    def __init__(self, length: int):
        super().__init__(f"Invalid TCP packet length {length} (minimum 2)")
        self.length = length


class UnknownOpcode(ParseError):
    """Opcode is not one of the nine known values."""

    def __init__(self, value: int):
        super().__init__(f"Unknown opcode {value:#04x}")
        self.value = value


class TrailingBytes(ParseError):
    """Bytes are left over after an acknowledgement body.

    The packet itself decoded completely and is attached as ``packet``, so a
    lenient caller can keep it and drop ``trailing``.
    """

    recoverable = True

    def __init__(self, packet: Any, trailing: bytes | memoryview):
        super().__init__(f"{len(trailing)} trailing bytes after {packet.header.opcode.name} body")
        self.packet = packet
        self.trailing = trailing
