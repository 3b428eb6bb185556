"""
Handles the fixed metadata block at the start of an NCW container.
"""

import struct
from ..common.constants import (
    HEADER_CHANNEL_COUNT_OFFSET,
    HEADER_SIZE,
)
from ..common.errors import TruncatedHeaderError

# channel count, bit depth, sample rate, sample count, reserved,
# first frame offset, frame data length
HEADER_LAYOUT = struct.Struct("<HHIIIII")


class NcwHeader:
    """
    Represents the NCW container header.

    Only the fields needed for decoding are interpreted; the two reserved
    words are carried through for diagnostics. No range checks are made.
    """

    def __init__(
        self,
        channel_count: int = 0,
        original_bit_depth: int = 0,
        sample_rate: int = 0,
        total_sample_count: int = 0,
        first_frame_offset: int = 0,
        reserved: int = 0,
        frame_data_length: int = 0,
    ):
        self.channel_count = channel_count
        self.original_bit_depth = original_bit_depth
        self.sample_rate = sample_rate
        self.total_sample_count = total_sample_count
        self.first_frame_offset = first_frame_offset
        self.reserved = reserved
        self.frame_data_length = frame_data_length

    def __repr__(self) -> str:
        return (
            f"NcwHeader(channel_count={self.channel_count}, "
            f"original_bit_depth={self.original_bit_depth}, "
            f"sample_rate={self.sample_rate}, "
            f"total_sample_count={self.total_sample_count}, "
            f"first_frame_offset={self.first_frame_offset:#x})"
        )

    def pack(self) -> bytes:
        """
        Packs the header into a HEADER_SIZE block; the first 8 bytes are zero.
        """
        header = bytearray(HEADER_SIZE)
        HEADER_LAYOUT.pack_into(
            header,
            HEADER_CHANNEL_COUNT_OFFSET,
            self.channel_count,
            self.original_bit_depth,
            self.sample_rate,
            self.total_sample_count,
            self.reserved,
            self.first_frame_offset,
            self.frame_data_length,
        )
        return bytes(header)

    @classmethod
    def unpack(cls, data: bytes) -> "NcwHeader":
        """
        Unpacks the header from the start of a container buffer.
        """
        if len(data) < HEADER_SIZE:
            raise TruncatedHeaderError(
                f"NCW header needs {HEADER_SIZE} bytes, got {len(data)}"
            )

        (
            channel_count,
            original_bit_depth,
            sample_rate,
            total_sample_count,
            reserved,
            first_frame_offset,
            frame_data_length,
        ) = HEADER_LAYOUT.unpack_from(data, HEADER_CHANNEL_COUNT_OFFSET)

        return cls(
            channel_count=channel_count,
            original_bit_depth=original_bit_depth,
            sample_rate=sample_rate,
            total_sample_count=total_sample_count,
            first_frame_offset=first_frame_offset,
            reserved=reserved,
            frame_data_length=frame_data_length,
        )

