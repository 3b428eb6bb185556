"""
Tests for the NCW header module.
"""

import struct

import pytest
from pyncw.ncw.header import NcwHeader
from pyncw.common.constants import HEADER_SIZE
from pyncw.common.errors import TruncatedHeaderError


def raw_header(channels=2, bit_depth=24, rate=48000, samples=12345, first_frame=0x90):
    data = bytearray(HEADER_SIZE)
    struct.pack_into("<HHII", data, 0x08, channels, bit_depth, rate, samples)
    struct.pack_into("<I", data, 0x14, 0xDEADBEEF)
    struct.pack_into("<I", data, 0x18, first_frame)
    struct.pack_into("<I", data, 0x1C, 4096)
    return bytes(data)


class TestNcwHeader:
    """Test cases for NcwHeader class."""

    def test_unpack_fields_at_fixed_offsets(self):
        """Each field is read little-endian at its offset."""
        header = NcwHeader.unpack(raw_header())
        assert header.channel_count == 2
        assert header.original_bit_depth == 24
        assert header.sample_rate == 48000
        assert header.total_sample_count == 12345
        assert header.first_frame_offset == 0x90
        assert header.reserved == 0xDEADBEEF
        assert header.frame_data_length == 4096

    def test_unpack_ignores_trailing_data(self):
        """Bytes after the header do not affect parsing."""
        header = NcwHeader.unpack(raw_header() + b"\xFF" * 100)
        assert header.channel_count == 2

    def test_unpack_truncated(self):
        """Fewer than HEADER_SIZE bytes raises TruncatedHeaderError."""
        with pytest.raises(TruncatedHeaderError, match="needs 32 bytes, got 31"):
            NcwHeader.unpack(raw_header()[:-1])

    def test_unpack_empty(self):
        """An empty buffer is a truncated header."""
        with pytest.raises(TruncatedHeaderError):
            NcwHeader.unpack(b"")

    def test_no_semantic_validation(self):
        """Odd channel counts and bit depths are passed through."""
        header = NcwHeader.unpack(raw_header(channels=0, bit_depth=7))
        assert header.channel_count == 0
        assert header.original_bit_depth == 7

    def test_pack_matches_raw_layout(self):
        """pack() produces the on-disk layout."""
        header = NcwHeader(
            channel_count=2,
            original_bit_depth=24,
            sample_rate=48000,
            total_sample_count=12345,
            first_frame_offset=0x90,
            reserved=0xDEADBEEF,
            frame_data_length=4096,
        )
        assert header.pack() == raw_header()

