"""
Reads the frame offset table that follows the NCW header.
"""

import struct
from typing import List, NamedTuple

from ..common.constants import (
    FRAME_HEADER_SIZE,
    FRAME_TABLE_ENTRY_SIZE,
    FRAME_TABLE_OFFSET,
)
from ..common.errors import TruncatedIndexError
from .header import NcwHeader


class FrameIndexEntry(NamedTuple):
    """Location of one decodable frame inside the container."""

    start_offset: int
    length: int


def table_slot_count(first_frame_offset: int) -> int:
    """Number of u32 slots between the table start and the first frame."""
    if first_frame_offset < FRAME_TABLE_OFFSET:
        raise TruncatedIndexError(
            f"First frame offset {first_frame_offset:#x} precedes the frame table "
            f"at {FRAME_TABLE_OFFSET:#x}"
        )
    return (first_frame_offset - FRAME_TABLE_OFFSET) // FRAME_TABLE_ENTRY_SIZE


def read_frame_index(data: bytes, header: NcwHeader) -> List[FrameIndexEntry]:
    """
    Builds the list of frames from consecutive (start, end) table slots.

    Each slot holds a frame's start relative to the first frame; a frame ends
    where the next slot starts. The final slot only closes the previous frame
    and is never decoded itself.

    Args:
        data: The whole container.
        header: Its parsed header.

    Returns:
        One FrameIndexEntry per decodable frame, in file order.
    """
    first_frame = header.first_frame_offset
    slot_count = table_slot_count(first_frame)

    table_end = FRAME_TABLE_OFFSET + slot_count * FRAME_TABLE_ENTRY_SIZE
    if slot_count > 0 and table_end > len(data):
        raise TruncatedIndexError(
            f"Frame table needs {table_end} bytes, container has {len(data)}"
        )

    entries: List[FrameIndexEntry] = []
    for i in range(slot_count - 1):
        start, end = struct.unpack_from(
            "<II", data, FRAME_TABLE_OFFSET + i * FRAME_TABLE_ENTRY_SIZE
        )
        if end < start:
            raise TruncatedIndexError(
                f"Frame {i} ends at {end:#x} before it starts at {start:#x}"
            )
        if start + first_frame > len(data):
            raise TruncatedIndexError(
                f"Frame {i} starts at {start + first_frame:#x}, past the end of "
                f"the container ({len(data)} bytes)"
            )
        entries.append(
            FrameIndexEntry(start + first_frame, end - start - FRAME_HEADER_SIZE)
        )

    return entries
