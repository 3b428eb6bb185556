"""
Handles writing of RIFF/WAVE files holding 32-bit IEEE float PCM, with the
fmt, fact and data chunks in that order.
"""

import struct
from typing import BinaryIO, Optional, Type, Union
from types import TracebackType

import numpy as np

from ..common.constants import (
    WAV_BYTES_PER_SAMPLE,
    WAV_FACT_CHUNK_SIZE,
    WAV_FMT_CHUNK_SIZE,
    WAV_FORMAT_IEEE_FLOAT,
)
from ..common.debug_logger import log_debug
from ..common.errors import OutputWriteError

# Bytes covered by the RIFF size field besides the sample data:
# "WAVE" + fmt chunk (8 + 16) + fact chunk (8 + 4) + data chunk header (8)
RIFF_OVERHEAD = 0x24 + 0xC


def pack_wav_header(sample_count: int, channel_count: int, sample_rate: int) -> bytes:
    """
    Packs everything up to and including the data chunk header.

    Args:
        sample_count: Sample frames per channel.
        channel_count: Interleaved channels.
        sample_rate: Frames per second.
    """
    data_size = sample_count * WAV_BYTES_PER_SAMPLE * channel_count
    return b"".join(
        [
            b"RIFF",
            struct.pack("<I", data_size + RIFF_OVERHEAD),
            b"WAVEfmt ",
            struct.pack(
                "<IHHIIHH",
                WAV_FMT_CHUNK_SIZE,
                WAV_FORMAT_IEEE_FLOAT,
                channel_count,
                sample_rate,
                sample_rate * WAV_BYTES_PER_SAMPLE * channel_count,
                WAV_BYTES_PER_SAMPLE,
                WAV_BYTES_PER_SAMPLE * 8,
            ),
            b"fact",
            struct.pack("<II", WAV_FACT_CHUNK_SIZE, sample_count),
            b"data",
            struct.pack("<I", data_size),
        ]
    )


class WavWriter:
    """
    Writes float32 PCM to a WAV file or binary stream.
    """

    def __init__(self, filepath_or_stream: Union[str, BinaryIO]):
        """
        Initializes the WAV writer.

        Args:
            filepath_or_stream: Path of the WAV file to create/overwrite or an
                                already open binary stream for writing.
        """
        if isinstance(filepath_or_stream, str):
            try:
                self.stream: BinaryIO = open(filepath_or_stream, "wb")
            except IOError as e:
                raise OutputWriteError(
                    f"Failed to open WAV file for writing: {filepath_or_stream}"
                ) from e
            self._close_on_exit = True
        else:
            self.stream = filepath_or_stream
            self._close_on_exit = False

    def write(self, samples: np.ndarray, sample_rate: int) -> int:
        """
        Writes the header and interleaved samples.

        Args:
            samples: Array of shape (sample_count, channel_count); a 1-D array
                     is written as mono.
            sample_rate: Frames per second.

        Returns:
            Number of bytes written.
        """
        samples = np.asarray(samples, dtype="<f4")
        if samples.ndim == 1:
            samples = samples[:, np.newaxis]
        sample_count, channel_count = samples.shape

        header = pack_wav_header(sample_count, channel_count, sample_rate)
        payload = np.ascontiguousarray(samples).tobytes()
        log_debug(
            "WAV_WRITE",
            "samples",
            samples[:, 0] if channel_count else [],
            channels=channel_count,
            sample_rate=sample_rate,
            data_size=len(payload),
        )

        try:
            self.stream.write(header)
            self.stream.write(payload)
            self.stream.flush()
        except IOError as e:
            raise OutputWriteError("Failed to write WAV data.") from e
        return len(header) + len(payload)

    def close(self):
        """Closes the stream if it was opened by this writer."""
        if self._close_on_exit and self.stream and not self.stream.closed:
            try:
                self.stream.close()
            except IOError as e:
                raise OutputWriteError("Failed to close WAV file.") from e

    def __enter__(self):
        return self

    def __exit__(
        self,
        exc_type: Optional[Type[BaseException]],
        exc_val: Optional[BaseException],
        exc_tb: Optional[TracebackType],
    ) -> Optional[bool]:
        self.close()
        return False


def write_wav(
    filepath_or_stream: Union[str, BinaryIO], samples: np.ndarray, sample_rate: int
) -> int:
    """Writes 'samples' as a complete WAV file and returns the bytes written."""
    with WavWriter(filepath_or_stream) as writer:
        return writer.write(samples, sample_rate)
