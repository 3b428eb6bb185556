"""
Decodes NCW frames: per channel, a 16-byte sub-header followed by a bitpacked
stream of 511 sign-extended deltas that rebuild a 512-sample run.
"""

import struct
from typing import List, NamedTuple, Tuple

import numpy as np

from pyncw.common.constants import (
    CHANNEL_ALIGNMENT,
    CHANNEL_HEADER_SIZE,
    FRAME_SAMPLES,
    MAX_BITS_PER_SAMPLE,
)
from pyncw.common.debug_logger import log_bitstream, log_debug
from pyncw.common.errors import BufferExhaustedError, UnsupportedLayoutError
from pyncw.core.bitstream import BitReader, sign_extend
from pyncw.ncw.frame_index import FrameIndexEntry

# reserved, start sample, bits per sample, encoding mode flag, reserved
CHANNEL_HEADER_LAYOUT = struct.Struct("<4xiHH4x")


class ChannelFrameHeader(NamedTuple):
    """Decode parameters for one channel of one frame."""

    start_sample: int
    bits_per_sample: int
    encoding_mode_flag: int

    @property
    def buffer_size(self) -> int:
        """Bytes of packed deltas following the sub-header."""
        return self.bits_per_sample * FRAME_SAMPLES // 8


class DecodedFrame(NamedTuple):
    """Integer samples of one frame, one array per channel."""

    encoding_mode_flag: int
    channels: List[np.ndarray]


def read_channel_header(data: bytes, offset: int) -> ChannelFrameHeader:
    """
    Reads a channel sub-header at 'offset'.
    """
    if offset < 0 or offset + CHANNEL_HEADER_SIZE > len(data):
        raise BufferExhaustedError(
            f"Channel header at {offset:#x} runs past the end of the data "
            f"({len(data)} bytes)"
        )
    return ChannelFrameHeader(*CHANNEL_HEADER_LAYOUT.unpack_from(data, offset))


def decode_deltas(reader: BitReader, start_sample: int, bits_per_sample: int) -> np.ndarray:
    """
    Rebuilds FRAME_SAMPLES integer samples from a starting value and a delta stream.

    Args:
        reader: Positioned at the first delta.
        start_sample: Emitted verbatim as the first sample.
        bits_per_sample: Width of each delta field; 0 means every delta is 0.

    Returns:
        An int64 array of FRAME_SAMPLES samples.
    """
    samples = np.empty(FRAME_SAMPLES, dtype=np.int64)
    sample = start_sample
    samples[0] = sample
    for i in range(1, FRAME_SAMPLES):
        sample += sign_extend(reader.read_bits(bits_per_sample), bits_per_sample)
        samples[i] = sample
    return samples


def check_bit_depth(original_bit_depth: int) -> None:
    """Rejects bit depths whose normalisation scale is not a usable float32."""
    if not 1 <= original_bit_depth <= MAX_BITS_PER_SAMPLE:
        raise UnsupportedLayoutError(
            f"Original bit depth {original_bit_depth} is outside "
            f"1..{MAX_BITS_PER_SAMPLE}"
        )


def normalise(samples: np.ndarray, original_bit_depth: int) -> np.ndarray:
    """
    Scales integer samples to float32 by 2**(original_bit_depth - 1).
    Both operands are single precision, so 16-bit -32768 maps to exactly -1.0.
    """
    check_bit_depth(original_bit_depth)
    scale = np.float32(2.0 ** (original_bit_depth - 1))
    return np.asarray(samples).astype(np.float32) / scale


class NcwFrameDecoder:
    """
    Decodes the frames of one container, channel by channel.
    """

    def __init__(self, channel_count: int):
        self.channel_count = channel_count

    def decode_channel(
        self, data: bytes, offset: int, channel: int = 0, frame: int = 0
    ) -> Tuple[ChannelFrameHeader, np.ndarray, int]:
        """
        Decodes one channel's sub-header and delta stream.

        Args:
            data: The whole container.
            offset: Absolute offset of the channel sub-header.
            channel: Channel index, for logging.
            frame: Frame index, for logging.

        Returns:
            The sub-header, the decoded integer samples, and the absolute
            offset of the next channel's sub-header.
        """
        header = read_channel_header(data, offset)
        log_debug(
            "CHANNEL_HEADER",
            "start_sample",
            header.start_sample,
            channel=channel,
            frame=frame,
            offset=hex(offset),
            bits_per_sample=header.bits_per_sample,
            mode=header.encoding_mode_flag,
        )

        if header.bits_per_sample > MAX_BITS_PER_SAMPLE:
            raise UnsupportedLayoutError(
                f"Frame {frame} channel {channel}: {header.bits_per_sample} bits per "
                f"sample exceeds the {MAX_BITS_PER_SAMPLE}-bit maximum"
            )

        stream_start = offset + CHANNEL_HEADER_SIZE
        stream_end = stream_start + header.buffer_size
        if stream_end > len(data):
            raise BufferExhaustedError(
                f"Frame {frame} channel {channel}: delta stream needs "
                f"{header.buffer_size} bytes at {stream_start:#x}, only "
                f"{max(0, len(data) - stream_start)} available"
            )

        packed = data[stream_start:stream_end]
        log_bitstream("DELTA_STREAM", packed[:32], channel=channel, frame=frame, size=len(packed))

        reader = BitReader(packed)
        samples = decode_deltas(reader, header.start_sample, header.bits_per_sample)
        consumed = reader.align(CHANNEL_ALIGNMENT)

        log_debug("CHANNEL_SAMPLES", "samples", samples, channel=channel, frame=frame)
        return header, samples, stream_start + consumed

    def decode_frame(self, data: bytes, entry: FrameIndexEntry, frame: int = 0) -> DecodedFrame:
        """
        Decodes every channel of one frame.
        Channels are stored back to back starting at the entry's offset; the
        frame's encoding mode is the flag in channel 0's sub-header.
        """
        offset = entry.start_offset
        mode_flag = 0
        channels: List[np.ndarray] = []
        for c in range(self.channel_count):
            header, samples, offset = self.decode_channel(data, offset, channel=c, frame=frame)
            if c == 0:
                mode_flag = header.encoding_mode_flag
            channels.append(samples)
        return DecodedFrame(mode_flag, channels)
