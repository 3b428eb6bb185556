"""
Global constants for the NCW container and the WAV output it is converted to.
Offsets are absolute byte positions in the container, all fields little-endian.
"""

# Container header
HEADER_CHANNEL_COUNT_OFFSET = 0x08
HEADER_SIZE = 0x20

# Frame offset table
FRAME_TABLE_OFFSET = 0x78
FRAME_TABLE_ENTRY_SIZE = 4
FRAME_HEADER_SIZE = 0x10

# Per-frame decoding
FRAME_SAMPLES = 512
CHANNEL_HEADER_SIZE = 16
CHANNEL_ALIGNMENT = 16
MAX_BITS_PER_SAMPLE = 32

# Encoding mode flags (channel 0 sub-header)
MODE_DIRECT = 0

# WAV output
WAV_FORMAT_IEEE_FLOAT = 3
WAV_BYTES_PER_SAMPLE = 4
WAV_FMT_CHUNK_SIZE = 16
WAV_FACT_CHUNK_SIZE = 4

NCW_SUFFIX = ".ncw"
WAV_SUFFIX = ".wav"
