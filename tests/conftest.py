"""
Builders for synthetic NCW containers used across the test suite.
"""

import struct

import pytest

from pyncw.common.constants import FRAME_SAMPLES, FRAME_TABLE_OFFSET
from pyncw.ncw.header import NcwHeader


def pack_deltas(deltas, bits_per_sample):
    """Packs signed deltas LSB-first into a full bits*512/8 byte buffer."""
    mask = (1 << bits_per_sample) - 1
    acc = 0
    for i, delta in enumerate(deltas):
        acc |= (delta & mask) << (i * bits_per_sample)
    return acc.to_bytes(bits_per_sample * FRAME_SAMPLES // 8, "little")


def build_channel(start_sample, bits_per_sample, deltas=None, mode_flag=0):
    """One channel block: 16-byte sub-header followed by the packed deltas."""
    if deltas is None:
        deltas = [0] * (FRAME_SAMPLES - 1)
    header = struct.pack("<4xiHH4x", start_sample, bits_per_sample, mode_flag)
    return header + pack_deltas(deltas, bits_per_sample)


def build_ncw(
    frames,
    channel_count=1,
    original_bit_depth=16,
    sample_rate=44100,
    total_sample_count=None,
):
    """
    Assembles a container from frames, each a list of channel blocks.
    The offset table gets one slot per frame plus the closing slot.
    """
    if total_sample_count is None:
        total_sample_count = len(frames) * FRAME_SAMPLES

    blobs = [b"".join(channels) for channels in frames]
    first_frame = FRAME_TABLE_OFFSET + 4 * (len(blobs) + 1)

    starts = [0]
    for blob in blobs:
        starts.append(starts[-1] + len(blob))

    header = NcwHeader(
        channel_count=channel_count,
        original_bit_depth=original_bit_depth,
        sample_rate=sample_rate,
        total_sample_count=total_sample_count,
        first_frame_offset=first_frame,
        frame_data_length=starts[-1],
    )
    data = bytearray(header.pack())
    data.extend(bytes(FRAME_TABLE_OFFSET - len(data)))
    for start in starts:
        data.extend(struct.pack("<I", start))
    for blob in blobs:
        data.extend(blob)
    return bytes(data)


@pytest.fixture
def mono_container():
    """Single 512-sample frame: start 100, 511 zero deltas of 4 bits."""
    return build_ncw([[build_channel(100, 4)]])
