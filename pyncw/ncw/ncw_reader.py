"""
Handles reading of NCW containers: loads the bytes, then parses the header
and the frame offset table.
"""

from typing import BinaryIO, List, Optional, Type, Union
from types import TracebackType

from ..common.errors import NcwError
from .frame_index import FrameIndexEntry, read_frame_index
from .header import NcwHeader


class NcwReaderError(NcwError):
    """Raised when the container cannot be opened or read."""

    pass


class NcwReader:
    """
    Reads an NCW container into memory and exposes its header and frame index.
    """

    def __init__(self, filepath_or_stream: Union[str, BinaryIO]):
        """
        Initializes the NCW reader.

        Args:
            filepath_or_stream: Path to the NCW file or an already open binary stream.
        """
        if isinstance(filepath_or_stream, str):
            try:
                self.stream: BinaryIO = open(filepath_or_stream, "rb")
            except IOError as e:
                raise NcwReaderError(f"Failed to open NCW file: {filepath_or_stream}") from e
            self._close_on_exit = True
        else:
            self.stream = filepath_or_stream
            self._close_on_exit = False

        try:
            self.stream.seek(0)
            self.data: bytes = self.stream.read()
            self.header: NcwHeader = NcwHeader.unpack(self.data)
        except IOError as e:
            self.close()
            raise NcwReaderError("Failed to read NCW container data.") from e
        except NcwError:
            self.close()
            raise
        self._frames: Optional[List[FrameIndexEntry]] = None

    def get_header(self) -> NcwHeader:
        """Returns the parsed container header."""
        return self.header

    def frame_index(self) -> List[FrameIndexEntry]:
        """Returns the decodable frames, parsing the offset table on first use."""
        if self._frames is None:
            self._frames = read_frame_index(self.data, self.header)
        return self._frames

    def close(self):
        """Closes the stream if it was opened by this reader."""
        if self._close_on_exit and self.stream and not self.stream.closed:
            self.stream.close()

    def __enter__(self):
        return self

    def __exit__(
        self,
        exc_type: Optional[Type[BaseException]],
        exc_val: Optional[BaseException],
        exc_tb: Optional[TracebackType],
    ) -> Optional[bool]:
        self.close()
        return False  # Do not suppress exceptions
