"""
Bit-level reading of the packed delta streams inside NCW frames.
Fields are stored least-significant bit first: the first field starts at
bit 0 of byte 0, and a field that crosses a byte boundary continues at bit 0
of the next byte.
"""

from ..common.errors import BufferExhaustedError


def sign_extend(value: int, num_bits: int) -> int:
    """
    Interprets the low 'num_bits' of 'value' as a two's complement field.

    Example: for num_bits=4, 0b0111 decodes to 7 and 0b1001 decodes to -7.

    Args:
        value: Unsigned field value as read from the stream.
        num_bits: Width of the field. A zero width always decodes to 0.

    Returns:
        The signed integer.
    """
    if num_bits <= 0:
        return 0
    value &= (1 << num_bits) - 1
    if value & (1 << (num_bits - 1)):
        return value - (1 << num_bits)
    return value


class BitReader:
    """
    Cursor over a byte buffer yielding fixed-width unsigned fields, LSB first.

    The reader owns nothing but the buffer reference and its bit position,
    so readers over different buffers never interact.
    """

    def __init__(self, buffer: bytes):
        self.buffer = bytes(buffer)
        self.bit_position: int = 0

    @property
    def byte_position(self) -> int:
        """Index of the byte holding the next unread bit."""
        return self.bit_position // 8

    @property
    def bits_remaining(self) -> int:
        return len(self.buffer) * 8 - self.bit_position

    def read_bits(self, num_bits: int) -> int:
        """
        Reads 'num_bits' from the stream and advances the cursor.
        The first bit read becomes bit 0 of the result.
        """
        if num_bits < 0 or num_bits > 32:
            raise ValueError("Number of bits must be between 0 and 32")
        if num_bits == 0:
            return 0
        if num_bits > self.bits_remaining:
            raise BufferExhaustedError(
                f"Cannot read {num_bits} bits at bit {self.bit_position}: "
                f"buffer holds {len(self.buffer) * 8} bits"
            )

        first_byte = self.bit_position // 8
        shift = self.bit_position % 8
        last_byte = (self.bit_position + num_bits + 7) // 8
        window = int.from_bytes(self.buffer[first_byte:last_byte], "little")

        self.bit_position += num_bits
        return (window >> shift) & ((1 << num_bits) - 1)

    def align(self, num_bytes: int) -> int:
        """
        Moves the cursor to the next 'num_bytes' boundary from the buffer start.
        A partially consumed byte counts as consumed.

        Returns:
            The aligned byte position.
        """
        if num_bytes <= 0:
            raise ValueError("Alignment must be a positive number of bytes")
        consumed = (self.bit_position + 7) // 8
        aligned = -(-consumed // num_bytes) * num_bytes
        self.bit_position = aligned * 8
        return aligned
