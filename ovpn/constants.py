"""OpenVPN wire constants and opcodes."""

from dataclasses import dataclass
from enum import IntEnum

# ----------------------------------------------------------------------------
# Header layout
# ----------------------------------------------------------------------------

OPCODE_SHIFT = 3
KEY_MASK = 0b111

TCP_LENGTH_SIZE = 2  # big-endian u16, TCP framing only
OPCODE_KEY_SIZE = 1
TCP_HEADER_SIZE = TCP_LENGTH_SIZE + OPCODE_KEY_SIZE
UDP_HEADER_SIZE = OPCODE_KEY_SIZE

# opcode/key byte plus at least one body byte
MIN_TCP_LENGTH = 2

# ----------------------------------------------------------------------------
# Control / ack body layout
# ----------------------------------------------------------------------------

AUTH_TAG_SIZE = 20  # deployments may use 16; the decoder always reads 20
ACK_ENTRY_SIZE = 4

# ----------------------------------------------------------------------------
# Opcodes
# ----------------------------------------------------------------------------


class Opcode(IntEnum):
    """Known 5-bit packet opcodes."""

    P_CONTROL_HARD_RESET_CLIENT_V1 = 1  # initial key from client, forget previous state
    P_CONTROL_HARD_RESET_SERVER_V1 = 2  # initial key from server, forget previous state
    P_CONTROL_SOFT_RESET_V1 = 3  # new key, graceful transition from old to new key
    P_CONTROL_V1 = 4  # control channel packet (usually TLS ciphertext)
    P_ACK_V1 = 5  # acknowledgement for packets received
    P_DATA_V1 = 6  # data channel packet
    P_CONTROL_HARD_RESET_CLIENT_V2 = 7  # initial key from client, key-method 2
    P_CONTROL_HARD_RESET_SERVER_V2 = 8  # initial key from server, key-method 2
    P_DATA_V2 = 9  # data channel packet with peer-id

    @property
    def is_control(self) -> bool:
        """Whether the opcode carries a control body."""
        return self in CONTROL_OPCODES

    @property
    def is_data(self) -> bool:
        """Whether the opcode carries an opaque data body."""
        return self in DATA_OPCODES


CONTROL_OPCODES = frozenset(
    {
        Opcode.P_CONTROL_HARD_RESET_CLIENT_V1,
        Opcode.P_CONTROL_HARD_RESET_SERVER_V1,
        Opcode.P_CONTROL_SOFT_RESET_V1,
        Opcode.P_CONTROL_V1,
        Opcode.P_CONTROL_HARD_RESET_CLIENT_V2,
        Opcode.P_CONTROL_HARD_RESET_SERVER_V2,
    }
)
ACK_OPCODES = frozenset({Opcode.P_ACK_V1})
DATA_OPCODES = frozenset({Opcode.P_DATA_V1, Opcode.P_DATA_V2})


@dataclass(frozen=True)
class UnrecognizedOpcode:
    """Opcode value outside the known set, kept verbatim for diagnostics."""

    value: int

    @property
    def name(self) -> str:
        return f"UNKNOWN_{self.value:#04x}"

    def __int__(self) -> int:
        return self.value


def classify_opcode(value: int) -> Opcode | UnrecognizedOpcode:
    """Map a 5-bit opcode value to a known Opcode or UnrecognizedOpcode.

    Args:
        value: Opcode bits taken from the header byte (0-31)

    Returns:
        The matching Opcode member, or UnrecognizedOpcode carrying ``value``
    """
    try:
        return Opcode(value)
    except ValueError:
        return UnrecognizedOpcode(value)
