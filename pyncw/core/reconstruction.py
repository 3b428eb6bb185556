"""
Combines decoded channel sequences into output channels.

Each frame is either stored directly (one sequence per output channel) or,
for stereo material, as mid/side where left = mid + side and right = mid - side.
"""

import enum
from typing import List, Sequence

import numpy as np

from pyncw.common.constants import FRAME_SAMPLES, MODE_DIRECT
from pyncw.common.errors import TruncatedIndexError, UnsupportedLayoutError


class ChannelLayout(enum.Enum):
    DIRECT = "direct"
    MID_SIDE = "mid_side"


def frames_spanned(total_sample_count: int) -> int:
    """Number of FRAME_SAMPLES frames needed to cover 'total_sample_count'."""
    return -(-total_sample_count // FRAME_SAMPLES)


def classify_layout(
    channel_count: int, mode_flags: Sequence[int], total_sample_count: int
) -> ChannelLayout:
    """
    Decides how the decoded sequences map to output channels.

    Only frames that contribute output samples are considered. Mid/side is
    only defined for two channels; any other count with a mid/side frame is
    rejected.
    """
    if channel_count < 1:
        raise UnsupportedLayoutError(f"Container declares {channel_count} channels")

    used_flags = mode_flags[: frames_spanned(total_sample_count)]
    if all(flag == MODE_DIRECT for flag in used_flags):
        return ChannelLayout.DIRECT
    if channel_count != 2:
        raise UnsupportedLayoutError(
            f"Mid/side frames with {channel_count} channels are not supported; "
            f"only 2-channel mid/side can be reconstructed"
        )
    return ChannelLayout.MID_SIDE


def reconstruct_channels(
    channels: List[np.ndarray], mode_flags: Sequence[int], total_sample_count: int
) -> np.ndarray:
    """
    Builds the output sample matrix.

    Args:
        channels: Normalised float32 sequence per decoded channel.
        mode_flags: Encoding mode per frame, taken from channel 0.
        total_sample_count: Samples per channel to output; decoded padding past
            this point is dropped.

    Returns:
        A float32 array of shape (total_sample_count, channel_count).
    """
    channels = [np.asarray(samples, dtype=np.float32) for samples in channels]
    channel_count = len(channels)
    layout = classify_layout(channel_count, mode_flags, total_sample_count)

    needed_frames = frames_spanned(total_sample_count)
    if len(mode_flags) < needed_frames or any(
        len(samples) < total_sample_count for samples in channels
    ):
        decoded = min(len(samples) for samples in channels)
        raise TruncatedIndexError(
            f"Header declares {total_sample_count} samples per channel, "
            f"frame index only decodes {decoded}"
        )

    output = np.empty((total_sample_count, channel_count), dtype=np.float32)
    for c, samples in enumerate(channels):
        output[:, c] = samples[:total_sample_count]

    if layout is ChannelLayout.MID_SIDE:
        frame_flags = np.asarray(mode_flags[:needed_frames])
        per_sample = np.repeat(frame_flags != MODE_DIRECT, FRAME_SAMPLES)[:total_sample_count]
        mid = channels[0][:total_sample_count][per_sample]
        side = channels[1][:total_sample_count][per_sample]
        output[per_sample, 0] = mid + side
        output[per_sample, 1] = mid - side

    return output
