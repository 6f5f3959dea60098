# Copyright 2025 DNAi inc.

# Dual-licensed under the DNAi Free License v1.1 and the
# DNAi Commercial License v1.1.
# See the LICENSE files in the project root for details.

"""
TIFF directory walker

This module opens the TIFF block that holds EXIF data and walks its
Image File Directories (IFD0, EXIF, Interoperability, GPS and optionally
IFD1), yielding one raw entry per directory entry.

Copyright 2025 DNAi inc.
"""

import logging
import struct
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Iterator, Optional, Set, Union

from exifstream.exceptions import MetadataReadError, NoExifDataError
from exifstream.exif_parser import find_tiff_block
from exifstream.exif_tags import (
    EXIF_IFD,
    GPS_IFD,
    IFD0,
    IFD1,
    INTEROP_IFD,
    TAG_EXIF_IFD_POINTER,
    TAG_GPS_IFD_POINTER,
    TAG_INTEROP_IFD_POINTER,
    tag_name,
)
from exifstream.formats import ByteOrder, FormatCode, component_size
from exifstream.options import DEFAULT_OPTIONS, ExifOptions
from exifstream.value_formatter import Payload, format_value

logger = logging.getLogger(__name__)

TIFF_MAGIC = 42
ENTRY_SIZE = 12

# Directories a pointer tag leads to
_POINTER_TARGETS: Dict[int, str] = {
    TAG_EXIF_IFD_POINTER: EXIF_IFD,
    TAG_GPS_IFD_POINTER: GPS_IFD,
    TAG_INTEROP_IFD_POINTER: INTEROP_IFD,
}

# Later directories overwrite earlier ones on duplicate tag ids
_WALK_ORDER = (IFD0, EXIF_IFD, INTEROP_IFD, GPS_IFD, IFD1)


@dataclass(frozen=True)
class RawEntry:
    """
    One directory entry as stored in the TIFF block.

    The payload is a view into the directory's buffer that is released as
    soon as the walk moves to the next entry; consumers must not keep it.

    Attributes:
        tag_id: Numeric tag identifier
        format: Field type of the entry
        component_count: Number of components announced by the entry
        byte_order: Byte order of the owning TIFF block
        payload: Raw value bytes (inline field or data at the value offset)
        label: Tag name
        preformatted_value: Generic text rendering of the payload
        ifd: Name of the directory holding the entry
    """
    tag_id: int
    format: FormatCode
    component_count: int
    byte_order: ByteOrder
    payload: Payload
    label: str
    preformatted_value: str
    ifd: str = IFD0


class ExifDirectory:
    """
    Handle on an opened TIFF block.

    Use it as a context manager so the buffer is released on every exit
    path:

        >>> with open_exif('photo.jpg') as directory:
        ...     for entry in walk(directory):
        ...         ...
    """

    def __init__(
        self,
        data: bytes,
        byte_order: ByteOrder,
        first_ifd_offset: int,
        options: Optional[ExifOptions] = None
    ):
        self.data: Optional[bytes] = data
        self.byte_order = byte_order
        self.first_ifd_offset = first_ifd_offset
        self.options = options or DEFAULT_OPTIONS

    @classmethod
    def from_block(cls, block: bytes, options: Optional[ExifOptions] = None) -> "ExifDirectory":
        """
        Validate a TIFF header and wrap the block.

        Args:
            block: TIFF block starting with the byte order mark
            options: Walker options

        Raises:
            NoExifDataError: If the block is too short to hold a TIFF header
            MetadataReadError: If the byte order mark or magic number is invalid
        """
        if len(block) < 8:
            raise NoExifDataError("EXIF block is too short for a TIFF header.")

        try:
            byte_order = ByteOrder.from_mark(bytes(block[:2]))
        except ValueError as e:
            raise MetadataReadError(f"Invalid TIFF header: {e}") from e

        prefix = byte_order.prefix
        magic, first_ifd_offset = struct.unpack_from(f'{prefix}HI', block, 2)
        if magic != TIFF_MAGIC:
            raise MetadataReadError(f"Invalid TIFF magic number: {magic}")
        if first_ifd_offset < 8:
            raise MetadataReadError(f"IFD0 offset {first_ifd_offset} overlaps the TIFF header")

        logger.debug("TIFF block of %d bytes, %s, IFD0 at %d",
                     len(block), byte_order.name, first_ifd_offset)
        return cls(bytes(block), byte_order, first_ifd_offset, options)

    @property
    def closed(self) -> bool:
        return self.data is None

    def close(self) -> None:
        self.data = None

    def __enter__(self) -> "ExifDirectory":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()


def open_exif(
    source: Union[str, Path, bytes, bytearray, memoryview],
    options: Optional[ExifOptions] = None
) -> ExifDirectory:
    """
    Open the EXIF directory structure of an image.

    Args:
        source: Path to an image file, or the image data itself
        options: Walker options

    Returns:
        ExifDirectory handle over the TIFF block

    Raises:
        NoExifDataError: If the data carries no EXIF block
        MetadataReadError: If the file cannot be read or the TIFF header is corrupt
    """
    if isinstance(source, (bytes, bytearray, memoryview)):
        data = bytes(source)
    else:
        path = Path(source)
        try:
            with open(path, 'rb') as f:
                data = f.read()
        except OSError as e:
            raise MetadataReadError(f"Cannot read {path}: {e}") from e

    bounds = find_tiff_block(data)
    if bounds is None:
        raise NoExifDataError()
    start, end = bounds
    return ExifDirectory.from_block(data[start:end], options)


def walk(directory: ExifDirectory) -> Iterator[RawEntry]:
    """
    Walk every directory of an opened TIFF block.

    The sequence is lazy and single-pass. Directories are visited in the
    order IFD0, EXIF, Interoperability, GPS, then IFD1 when thumbnails are
    enabled. Pointer tags are followed and not yielded.

    Each entry's payload is released when the walk advances to the next
    entry, and also when the generator is closed or garbage collected, so
    keep a reference to the generator while reading a payload.

    Raises:
        MetadataReadError: If the directory is closed or IFD0 is unreadable
    """
    if directory.closed:
        raise MetadataReadError("EXIF directory is closed")

    options = directory.options
    pending: Dict[str, int] = {IFD0: directory.first_ifd_offset}
    visited: Set[int] = set()

    for ifd in _WALK_ORDER:
        offset = pending.get(ifd)
        if not offset:
            continue
        if offset in visited:
            logger.warning("%s points back to an already visited directory at %d", ifd, offset)
            continue
        if len(visited) >= options.max_ifds:
            logger.warning("Directory limit (%d) reached, skipping %s", options.max_ifds, ifd)
            break
        visited.add(offset)

        pointers = yield from _walk_ifd(directory, ifd, offset)
        for target, target_offset in pointers.items():
            pending.setdefault(target, target_offset)


def _walk_ifd(directory: ExifDirectory, ifd: str, offset: int):
    """
    Yield the entries of one IFD.

    Returns (as the generator result) the sub-directory offsets found in
    this IFD.
    """
    data = directory.data
    prefix = directory.byte_order.prefix
    options = directory.options
    pointers: Dict[str, int] = {}

    if offset + 2 > len(data):
        if ifd == IFD0:
            raise MetadataReadError(f"IFD0 offset {offset} is outside the EXIF block")
        logger.warning("%s offset %d is outside the EXIF block", ifd, offset)
        return pointers

    num_entries = struct.unpack_from(f'{prefix}H', data, offset)[0]
    if num_entries > options.max_entries:
        if ifd == IFD0:
            raise MetadataReadError(f"IFD0 announces {num_entries} entries")
        logger.warning("%s announces %d entries, skipping it", ifd, num_entries)
        return pointers

    logger.debug("Walking %s at %d with %d entries", ifd, offset, num_entries)

    entry_offset = offset + 2
    for _ in range(num_entries):
        if entry_offset + ENTRY_SIZE > len(data):
            logger.warning("%s is truncated after %d bytes", ifd, entry_offset)
            break

        tag_id, raw_format, count, value_field = struct.unpack_from(
            f'{prefix}HHI4s', data, entry_offset
        )
        value_offset = struct.unpack(f'{prefix}I', value_field)[0]
        inline_offset = entry_offset + 8
        entry_offset += ENTRY_SIZE

        target = _POINTER_TARGETS.get(tag_id)
        if target is not None:
            pointers.setdefault(target, value_offset)
            continue

        fmt = FormatCode.from_code(raw_format)
        if fmt == FormatCode.OTHER:
            # Unknown field type: only the inline field is meaningful
            start, end = inline_offset, inline_offset + 4
        else:
            total_size = component_size(fmt) * count
            # If value fits in 4 bytes, it's stored inline
            if total_size <= 4:
                start, end = inline_offset, inline_offset + total_size
            else:
                start, end = value_offset, value_offset + total_size
                if end > len(data):
                    logger.debug("%s tag 0x%04X value runs past the EXIF block", ifd, tag_id)
                    start, end = min(start, len(data)), len(data)

        payload = memoryview(data)[start:end]
        try:
            yield RawEntry(
                tag_id=tag_id,
                format=fmt,
                component_count=count,
                byte_order=directory.byte_order,
                payload=payload,
                label=tag_name(tag_id, ifd),
                preformatted_value=format_value(fmt, count, payload, directory.byte_order),
                ifd=ifd,
            )
        finally:
            payload.release()

    if ifd == IFD0 and options.include_thumbnail and entry_offset + 4 <= len(data):
        next_ifd = struct.unpack_from(f'{prefix}I', data, entry_offset)[0]
        if next_ifd:
            pointers[IFD1] = next_ifd

    return pointers
