# Copyright 2025 DNAi inc.

# Dual-licensed under the DNAi Free License v1.1 and the
# DNAi Commercial License v1.1.
# See the LICENSE files in the project root for details.

"""
Core reading API

One-shot entry points returning a TagStore for an image file, for image
bytes already in memory, or for a binary stream read in chunks.

Copyright 2025 DNAi inc.
"""

import logging
from pathlib import Path
from typing import BinaryIO, Optional, Union

from exifstream.decoder import decode_directory
from exifstream.loader import StreamingLoader, WriteOutcome
from exifstream.options import ExifOptions
from exifstream.tag_store import TagStore
from exifstream.tiff_structure import open_exif

logger = logging.getLogger(__name__)

DEFAULT_CHUNK_SIZE = 64 * 1024


def read(file_path: Union[str, Path], options: Optional[ExifOptions] = None) -> TagStore:
    """
    Read and decode the EXIF tags of an image file.

    Args:
        file_path: Path to a JPEG, TIFF or PNG file
        options: Decoding options

    Returns:
        Frozen TagStore with one tag per tag id

    Raises:
        NoExifDataError: If the file carries no EXIF data
        MetadataReadError: If the file cannot be read or its EXIF data is corrupt

    Example:
        >>> store = read('photo.jpg')
        >>> store[TAG_ORIENTATION].int_value
        6
    """
    logger.debug("Reading EXIF from %s", file_path)
    with open_exif(file_path, options) as directory:
        return decode_directory(directory, options)


def read_bytes(data: Union[bytes, bytearray, memoryview], options: Optional[ExifOptions] = None) -> TagStore:
    """Read and decode the EXIF tags of an image held in memory."""
    with open_exif(data, options) as directory:
        return decode_directory(directory, options)


def read_stream(
    stream: BinaryIO,
    chunk_size: int = DEFAULT_CHUNK_SIZE,
    options: Optional[ExifOptions] = None
) -> TagStore:
    """
    Read EXIF tags from a binary stream through a StreamingLoader.

    Reading stops as soon as the loader reports that the EXIF block is
    complete, so for JPEG input only the leading segments are read.

    Args:
        stream: Binary file-like object
        chunk_size: Bytes requested per read
        options: Decoding options

    Raises:
        NoExifDataError: If the stream carries no EXIF data
        MetadataReadError: If the EXIF data is corrupt
    """
    if chunk_size <= 0:
        raise ValueError("chunk_size must be positive")

    with StreamingLoader(options) as loader:
        while True:
            chunk = stream.read(chunk_size)
            if not chunk:
                break
            if loader.write(chunk).outcome is WriteOutcome.HEADER_FOUND:
                break
        return loader.finalize()
