"""
Exception types raised while decoding NCW containers and writing WAV output.
Every failure for a given file is an NcwError subclass so batch callers can
record it against that file and carry on with the rest.
"""


class NcwError(Exception):
    """Base class for all NCW conversion errors."""

    pass


class TruncatedHeaderError(NcwError):
    """The container is too short to hold its fixed header."""

    pass


class TruncatedIndexError(NcwError):
    """The frame offset table runs past the data or does not cover the samples."""

    pass


class BufferExhaustedError(NcwError):
    """A channel sub-header or delta bitstream was read past its available bytes."""

    pass


class UnsupportedLayoutError(NcwError):
    """The channel/encoding-mode combination has no known reconstruction."""

    pass


class OutputWriteError(NcwError):
    """The WAV destination could not be created or written."""

    pass
