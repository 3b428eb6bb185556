"""
Tests for the NCW delta frame decoder.
"""

import numpy as np
import pytest
from pyncw.core.bitstream import BitReader
from pyncw.core.frame_decoder import (
    ChannelFrameHeader,
    check_bit_depth,
    NcwFrameDecoder,
    decode_deltas,
    normalise,
    read_channel_header,
)
from pyncw.ncw.frame_index import FrameIndexEntry
from pyncw.common.errors import BufferExhaustedError, UnsupportedLayoutError

from conftest import build_channel, pack_deltas


class TestChannelHeader:
    """Test cases for channel sub-header parsing."""

    def test_read_channel_header(self):
        """Fields sit after 4 reserved bytes; the start sample is signed."""
        block = build_channel(-1234, 12, mode_flag=1)
        header = read_channel_header(block, 0)
        assert header == ChannelFrameHeader(-1234, 12, 1)
        assert header.buffer_size == 12 * 64

    def test_read_channel_header_at_offset(self):
        """Headers are read at the given offset."""
        block = b"\xAA" * 8 + build_channel(7, 2)
        assert read_channel_header(block, 8).start_sample == 7

    def test_read_channel_header_truncated(self):
        """A header cut short raises BufferExhaustedError."""
        with pytest.raises(BufferExhaustedError):
            read_channel_header(build_channel(0, 1)[:15], 0)


class TestDecodeDeltas:
    """Test cases for decode_deltas."""

    def test_first_sample_is_start_sample(self):
        """Sample 0 is the start sample, whatever the deltas."""
        deltas = [5] * 511
        reader = BitReader(pack_deltas(deltas, 8))
        samples = decode_deltas(reader, -300, 8)
        assert samples[0] == -300
        assert len(samples) == 512

    def test_accumulates_signed_deltas(self):
        """Positive and negative deltas are summed in order."""
        deltas = [3, -2, -8, 7] + [0] * 507
        reader = BitReader(pack_deltas(deltas, 4))
        samples = decode_deltas(reader, 10, 4)
        assert list(samples[:5]) == [10, 13, 11, 3, 10]
        assert np.all(samples[5:] == 10)

    def test_full_width_deltas(self):
        """32-bit deltas sign-extend from bit 31."""
        deltas = [-1, 1 << 20] + [0] * 509
        reader = BitReader(pack_deltas(deltas, 32))
        samples = decode_deltas(reader, 0, 32)
        assert samples[1] == -1
        assert samples[2] == (1 << 20) - 1

    def test_zero_width(self):
        """A zero bit width repeats the start sample."""
        samples = decode_deltas(BitReader(b""), 42, 0)
        assert np.all(samples == 42)

    def test_stream_too_short(self):
        """Running out of bits raises BufferExhaustedError."""
        reader = BitReader(bytes(10))
        with pytest.raises(BufferExhaustedError):
            decode_deltas(reader, 0, 4)


class TestNormalise:
    """Test cases for normalise."""

    def test_16_bit_extremes(self):
        """32767 maps just under 1.0, -32768 maps to exactly -1.0."""
        result = normalise(np.array([32767, -32768, 0]), 16)
        assert result.dtype == np.float32
        assert result[0] == np.float32(32767 / 32768)
        assert abs(result[0] - 0.9999695) < 1e-7
        assert result[1] == -1.0
        assert result[2] == 0.0

    def test_24_bit(self):
        """24-bit samples divide by 2**23."""
        result = normalise(np.array([1 << 22]), 24)
        assert result[0] == 0.5

    @pytest.mark.parametrize("bit_depth", [0, 33, 200, 2000, 65535])
    def test_bit_depth_out_of_range(self, bit_depth):
        """Bit depths outside 1..32 are rejected rather than overflowing the scale."""
        with pytest.raises(UnsupportedLayoutError, match="outside 1..32"):
            normalise(np.array([1]), bit_depth)

    def test_check_bit_depth_bounds(self):
        """1 and 32 are the extremes accepted."""
        check_bit_depth(1)
        check_bit_depth(32)


class TestNcwFrameDecoder:
    """Test cases for NcwFrameDecoder class."""

    def test_decode_channel_next_offset(self):
        """The next channel starts after the header and the padded stream."""
        block = build_channel(0, 5)
        decoder = NcwFrameDecoder(1)
        header, samples, next_offset = decoder.decode_channel(block, 0)
        assert header.bits_per_sample == 5
        assert next_offset == 16 + 5 * 64
        assert next_offset == len(block)

    def test_decode_channel_zero_width(self):
        """A zero-width channel is just its sub-header."""
        block = build_channel(9, 0)
        header, samples, next_offset = NcwFrameDecoder(1).decode_channel(block, 0)
        assert next_offset == 16
        assert np.all(samples == 9)

    def test_decode_channel_truncated_stream(self):
        """A delta stream cut short raises BufferExhaustedError."""
        block = build_channel(0, 4)[:-1]
        with pytest.raises(BufferExhaustedError, match="delta stream needs 256 bytes"):
            NcwFrameDecoder(1).decode_channel(block, 0)

    def test_decode_channel_width_too_large(self):
        """Widths beyond 32 bits are rejected."""
        block = build_channel(0, 1)[:16]
        block = block[:8] + (33).to_bytes(2, "little") + block[10:]
        with pytest.raises(UnsupportedLayoutError):
            NcwFrameDecoder(1).decode_channel(block + bytes(33 * 64), 0)

    def test_decode_frame_channels_back_to_back(self):
        """Channels follow each other; the mode comes from channel 0."""
        left = build_channel(100, 3, [1] * 511, mode_flag=1)
        right = build_channel(-100, 6, [-1] * 511, mode_flag=0)
        data = b"\x00" * 32 + left + right
        frame = NcwFrameDecoder(2).decode_frame(data, FrameIndexEntry(32, len(left + right) - 16))
        assert frame.encoding_mode_flag == 1
        assert len(frame.channels) == 2
        assert frame.channels[0][0] == 100
        assert frame.channels[0][-1] == 100 + 511
        assert frame.channels[1][0] == -100
        assert frame.channels[1][-1] == -100 - 511
