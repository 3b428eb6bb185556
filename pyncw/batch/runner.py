"""
Converts NCW files to WAV, one independent task per file.

Failures are recorded per file rather than raised, so one bad container never
stops the rest of a batch.
"""

import os
from concurrent.futures import ProcessPoolExecutor, as_completed
from typing import Callable, List, NamedTuple, Optional, Sequence

from pyncw.batch.discovery import resolve_output_path
from pyncw.common.debug_logger import enable_debug_logging, log_debug
from pyncw.common.errors import NcwError, OutputWriteError
from pyncw.core.decoder import NcwDecoder
from pyncw.wav.wav_writer import write_wav


class ConversionOutcome(NamedTuple):
    """Result of converting one file; 'error' is None on success."""

    input_path: str
    output_path: str
    error: Optional[Exception] = None
    sample_count: int = 0
    channel_count: int = 0

    @property
    def ok(self) -> bool:
        return self.error is None


def _remove_partial(output_path: str) -> None:
    try:
        if os.path.exists(output_path):
            os.remove(output_path)
    except OSError as e:
        log_debug("PARTIAL_OUTPUT_KEPT", "error", 0, path=output_path, error=repr(e))


def _failed(input_path: str, output_dir: Optional[str], error: Exception) -> ConversionOutcome:
    return ConversionOutcome(input_path, resolve_output_path(input_path, output_dir), error)


def convert_file(input_path: str, output_dir: Optional[str] = None) -> ConversionOutcome:
    """
    Decodes one container and writes its WAV next to it or into 'output_dir'.
    """
    output_path = resolve_output_path(input_path, output_dir)
    try:
        audio = NcwDecoder().decode_file(input_path)
        write_wav(output_path, audio.samples, audio.sample_rate)
    except OutputWriteError as e:
        _remove_partial(output_path)
        log_debug("CONVERT_FAILED", "error", 0, path=input_path, error=repr(e))
        return ConversionOutcome(input_path, output_path, e)
    except (NcwError, OSError) as e:
        log_debug("CONVERT_FAILED", "error", 0, path=input_path, error=repr(e))
        return ConversionOutcome(input_path, output_path, e)

    return ConversionOutcome(
        input_path, output_path, None, audio.sample_count, audio.channel_count
    )


def _init_worker(debug_log: Optional[str]) -> None:
    if debug_log:
        enable_debug_logging(debug_log, truncate=False)


def convert_all(
    input_paths: Sequence[str],
    output_dir: Optional[str] = None,
    workers: Optional[int] = None,
    debug_log: Optional[str] = None,
    on_result: Optional[Callable[[ConversionOutcome], None]] = None,
) -> List[ConversionOutcome]:
    """
    Converts every file, in parallel when 'workers' allows.

    Args:
        input_paths: Containers to convert.
        output_dir: Optional directory for all outputs.
        workers: Process pool size; defaults to the CPU count, and 1 or less
                 converts sequentially in this process.
        debug_log: Trace file the worker processes append to.
        on_result: Called with each outcome as soon as it is available.

    Returns:
        One outcome per input, in input order.
    """
    if workers is None:
        workers = os.cpu_count() or 1

    outcomes: List[Optional[ConversionOutcome]] = [None] * len(input_paths)

    if workers <= 1 or len(input_paths) <= 1:
        for idx, path in enumerate(input_paths):
            try:
                outcomes[idx] = convert_file(path, output_dir)
            except Exception as e:
                # raised outside the decode/write error types
                outcomes[idx] = _failed(path, output_dir, e)
            if on_result:
                on_result(outcomes[idx])
        return outcomes

    with ProcessPoolExecutor(
        max_workers=workers, initializer=_init_worker, initargs=(debug_log,)
    ) as executor:
        futures = {
            executor.submit(convert_file, path, output_dir): idx
            for idx, path in enumerate(input_paths)
        }
        for future in as_completed(futures):
            idx = futures[future]
            try:
                outcomes[idx] = future.result()
            except Exception as e:
                # worker died or raised outside the decode/write error types
                outcomes[idx] = _failed(input_paths[idx], output_dir, e)
            if on_result:
                on_result(outcomes[idx])

    return outcomes
