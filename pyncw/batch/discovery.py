"""
Finds NCW containers under a directory and names their WAV outputs.
"""

import os
from typing import Iterator, Optional

from pyncw.common.constants import NCW_SUFFIX, WAV_SUFFIX


def iter_ncw_files(root: str) -> Iterator[str]:
    """Yields every .ncw file below 'root', in sorted order."""
    for dirpath, dirnames, filenames in os.walk(root):
        dirnames.sort()
        for filename in sorted(filenames):
            if filename.lower().endswith(NCW_SUFFIX):
                yield os.path.join(dirpath, filename)


def resolve_output_path(input_path: str, output_dir: Optional[str] = None) -> str:
    """
    Returns where the WAV for 'input_path' goes.

    Args:
        input_path: Path of the .ncw file.
        output_dir: Directory to write into; defaults to the input's own directory.
    """
    directory, filename = os.path.split(input_path)
    stem, ext = os.path.splitext(filename)
    if ext.lower() != NCW_SUFFIX:
        stem = filename
    if output_dir is not None:
        directory = output_dir
    return os.path.join(directory, stem + WAV_SUFFIX)
