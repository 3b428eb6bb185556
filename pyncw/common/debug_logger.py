"""
Stage-level debug logging for NCW decoding.
Each record carries the source location, the channel/frame being processed and
summary statistics of the data, so a decode can be traced frame by frame and
compared against another decoder's output.
"""

import time
import inspect
import numpy as np
from typing import List, Union, Any
import os


class NcwDebugLogger:
    """
    Debug logger for NCW decoding stages.
    Logs with full metadata including source location, data statistics, and context.
    """

    def __init__(
        self, log_file: str = "pyncw_debug.log", enabled: bool = True, truncate: bool = True
    ):
        self.log_file = log_file
        self.enabled = enabled
        if enabled and truncate:
            # Clear log file and write header
            with open(log_file, "w") as f:
                f.write(f"# PyNCW Debug Log - {time.strftime('%Y-%m-%d %H:%M:%S')}\n")
                f.write(
                    "# Format: [TIMESTAMP][PYNCW][FILE:LINE][FUNC][CH{n}][FR{nnn}] "
                    "STAGE: data_type=values |META: ... |SRC: ...\n"
                )
                f.write("#\n")

    @staticmethod
    def _caller():
        # first frame outside this module
        frame_info = inspect.currentframe()
        while frame_info.f_back is not None and frame_info.f_code.co_filename == __file__:
            frame_info = frame_info.f_back
        return (
            os.path.basename(frame_info.f_code.co_filename),
            frame_info.f_lineno,
            frame_info.f_code.co_name,
        )

    @staticmethod
    def _timestamp() -> str:
        return time.strftime("%Y-%m-%dT%H:%M:%S.") + f"{int(time.time() * 1000000) % 1000000:06d}"

    def _write(self, log_entry: str) -> None:
        with open(self.log_file, "a") as f:
            f.write(log_entry)

    def log_stage(
        self,
        stage: str,
        data_type: str,
        values: Union[List, np.ndarray, float, int],
        channel: int = 0,
        frame: int = 0,
        **context,
    ) -> None:
        """
        Log a processing stage with comprehensive metadata.

        Args:
            stage: Processing stage name (e.g., 'CHANNEL_HEADER', 'CHANNEL_SAMPLES')
            data_type: Type of data being logged (e.g., 'samples', 'flags', 'offsets')
            values: The actual data values
            channel: Channel index
            frame: Frame index
            **context: Additional context (path, bits_per_sample, layout, etc.)
        """
        if not self.enabled:
            return

        filename, line_no, func_name = self._caller()

        # Handle scalar values
        if isinstance(values, (int, float)):
            values_array = np.array([values], dtype=np.float64)
            is_scalar = True
        else:
            values_array = np.asarray(values, dtype=np.float64)
            is_scalar = False

        size = int(values_array.size)

        if size > 0:
            min_val = float(np.min(values_array))
            max_val = float(np.max(values_array))
            sum_val = float(np.sum(values_array))
            mean_val = float(np.mean(values_array))
            nonzero_count = int(np.count_nonzero(values_array))
        else:
            min_val = max_val = sum_val = mean_val = 0.0
            nonzero_count = 0

        # Format values (truncate if too long for readability)
        if is_scalar:
            values_str = f"{values:.6f}"
        elif size <= 10:
            values_str = f"[{','.join(f'{v:.6f}' for v in values_array)}]"
        else:
            first_5 = ",".join(f"{v:.6f}" for v in values_array[:5])
            last_5 = ",".join(f"{v:.6f}" for v in values_array[-5:])
            values_str = f"[{first_5}...{last_5}]"

        context_str = " ".join(f"{key}={value}" for key, value in context.items())

        log_entry = (
            f"[{self._timestamp()}][PYNCW][{filename}:{line_no}][{func_name}]"
            f"[CH{channel}][FR{frame:03d}] {stage}: "
            f"{data_type}={values_str} "
            f"|META: size={size} range=[{min_val:.6f},{max_val:.6f}] "
            f"sum={sum_val:.6f} mean={mean_val:.6f} nonzero={nonzero_count} "
            f"|SRC: {context_str}\n"
        )
        self._write(log_entry)

    def log_bitstream(
        self, stage: str, bitstream_bytes: bytes, channel: int = 0, frame: int = 0, **context
    ) -> None:
        """
        Special logging for bitstream data in hex format.
        """
        if not self.enabled:
            return

        filename, line_no, func_name = self._caller()
        context_str = " ".join(f"{key}={value}" for key, value in context.items())

        log_entry = (
            f"[{self._timestamp()}][PYNCW][{filename}:{line_no}][{func_name}]"
            f"[CH{channel}][FR{frame:03d}] {stage}: "
            f"hex={bytes(bitstream_bytes).hex()} "
            f"|META: size={len(bitstream_bytes)} bytes "
            f"|SRC: {context_str}\n"
        )
        self._write(log_entry)

    def disable(self):
        """Disable logging."""
        self.enabled = False


# Global logger instance, silent until enable_debug_logging() is called
debug_logger = NcwDebugLogger(enabled=False)


def log_debug(stage: str, data_type: str, values: Any, **kwargs) -> None:
    """
    Convenience function for logging with global logger instance.

    Usage:
        log_debug("CHANNEL_SAMPLES", "samples", samples,
                  channel=0, frame=1, bits_per_sample=4)
    """
    debug_logger.log_stage(stage, data_type, values, **kwargs)


def log_bitstream(stage: str, bitstream_bytes: bytes, **kwargs) -> None:
    """
    Convenience function for bitstream logging.
    """
    debug_logger.log_bitstream(stage, bitstream_bytes, **kwargs)


def enable_debug_logging(log_file: str = "pyncw_debug.log", truncate: bool = True) -> None:
    """
    Enable debug logging to the specified log file.

    Worker processes pass truncate=False so they append to the file the
    parent process already started.
    """
    global debug_logger
    debug_logger = NcwDebugLogger(log_file, enabled=True, truncate=truncate)


def disable_debug_logging() -> None:
    """
    Disable debug logging.
    """
    debug_logger.disable()
