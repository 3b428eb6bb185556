"""
Main NCW Decoder class, running a container through the header, frame index,
delta frame decoding and channel reconstruction stages.
"""

from typing import List, NamedTuple, Union, BinaryIO

import numpy as np

from pyncw.common.debug_logger import log_debug
from pyncw.core.frame_decoder import NcwFrameDecoder, check_bit_depth, normalise
from pyncw.core.reconstruction import classify_layout, reconstruct_channels
from pyncw.ncw.frame_index import FrameIndexEntry, read_frame_index
from pyncw.ncw.header import NcwHeader
from pyncw.ncw.ncw_reader import NcwReader


class DecodedAudio(NamedTuple):
    """Decoded PCM ready for serialisation."""

    sample_rate: int
    samples: np.ndarray  # float32, shape (sample_count, channel_count)

    @property
    def channel_count(self) -> int:
        return self.samples.shape[1]

    @property
    def sample_count(self) -> int:
        return self.samples.shape[0]


class NcwDecoder:
    """
    Orchestrates decoding of a whole NCW container into float32 PCM.
    Holds no state between calls, so one instance can decode many files.
    """

    def decode_channels(self, data: bytes, header: NcwHeader, frames: List[FrameIndexEntry]):
        """
        Decodes every frame of the container.

        Returns:
            A tuple of (per-channel normalised float32 sequences, encoding
            mode flag per frame).
        """
        log_debug(
            "FRAME_INDEX",
            "offsets",
            [entry.start_offset for entry in frames],
            frame_count=len(frames),
        )

        frame_decoder = NcwFrameDecoder(header.channel_count)
        mode_flags: List[int] = []
        decoded: List[List[np.ndarray]] = [[] for _ in range(header.channel_count)]

        for frame_idx, entry in enumerate(frames):
            frame = frame_decoder.decode_frame(data, entry, frame=frame_idx)
            mode_flags.append(frame.encoding_mode_flag)
            for c, samples in enumerate(frame.channels):
                decoded[c].append(samples)

        channels = [
            normalise(
                np.concatenate(parts) if parts else np.zeros(0, dtype=np.int64),
                header.original_bit_depth,
            )
            for parts in decoded
        ]
        return channels, mode_flags

    def decode_frames(
        self, data: bytes, header: NcwHeader, frames: List[FrameIndexEntry]
    ) -> DecodedAudio:
        """
        Decodes a container whose header and frame index are already parsed.

        Args:
            data: The container bytes.
            header: Its parsed header.
            frames: Its frame index.

        Returns:
            DecodedAudio with header.total_sample_count samples per channel.
        """
        log_debug(
            "HEADER",
            "sample_count",
            header.total_sample_count,
            channels=header.channel_count,
            bit_depth=header.original_bit_depth,
            sample_rate=header.sample_rate,
            first_frame=hex(header.first_frame_offset),
        )
        check_bit_depth(header.original_bit_depth)

        channels, mode_flags = self.decode_channels(data, header, frames)

        layout = classify_layout(header.channel_count, mode_flags, header.total_sample_count)
        log_debug("LAYOUT", "mode_flags", mode_flags, layout=layout.value)

        samples = reconstruct_channels(channels, mode_flags, header.total_sample_count)
        return DecodedAudio(header.sample_rate, samples)

    def decode(self, data: bytes) -> DecodedAudio:
        """Decodes a complete container held in memory."""
        header = NcwHeader.unpack(data)
        return self.decode_frames(data, header, read_frame_index(data, header))

    def decode_file(self, filepath_or_stream: Union[str, BinaryIO]) -> DecodedAudio:
        """Reads a container from a path or binary stream and decodes it."""
        with NcwReader(filepath_or_stream) as reader:
            return self.decode_frames(reader.data, reader.get_header(), reader.frame_index())
