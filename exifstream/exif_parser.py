# Copyright 2025 DNAi inc.

# Dual-licensed under the DNAi Free License v1.1 and the
# DNAi Commercial License v1.1.
# See the LICENSE files in the project root for details.

"""
EXIF container parser

This module locates the TIFF block holding EXIF data inside a container:
a JPEG APP1 segment, a PNG eXIf chunk, data starting with the
"Exif\\0\\0" header, or a plain TIFF file.

Copyright 2025 DNAi inc.
"""

import struct
from typing import Optional, Tuple

from exifstream.exceptions import NoExifDataError

EXIF_HEADER = b'Exif\x00\x00'
JPEG_SOI = b'\xff\xd8'
PNG_SIGNATURE = b'\x89PNG\r\n\x1a\n'
TIFF_LE_HEADER = b'II*\x00'
TIFF_BE_HEADER = b'MM\x00*'
PNG_EXIF_CHUNK = b'eXIf'
PNG_END_CHUNK = b'IEND'

# JPEG markers
MARKER_APP1 = 0xE1
MARKER_SOS = 0xDA
MARKER_EOI = 0xD9
# Markers without a length field (TEM, RST0-RST7, SOI)
STANDALONE_MARKERS = frozenset([0x01, 0xD8] + list(range(0xD0, 0xD8)))


def incomplete_segment_message(missing: int) -> str:
    return f"EXIF segment is incomplete ({missing} bytes missing)."


def find_tiff_block(data: bytes) -> Optional[Tuple[int, int]]:
    """
    Find the TIFF block carrying EXIF data.
    
    Args:
        data: Complete container data
        
    Returns:
        (start, end) offsets of the TIFF block, or None if the data
        carries no EXIF

    Raises:
        NoExifDataError: If the APP1 Exif segment or eXIf chunk is cut
            short by the end of the data
    """
    if data[:2] == JPEG_SOI:
        return _find_in_jpeg(data)
    if data[:8] == PNG_SIGNATURE:
        return _find_in_png(data)
    if data[:6] == EXIF_HEADER:
        return 6, len(data)
    if data[:4] in (TIFF_LE_HEADER, TIFF_BE_HEADER):
        return 0, len(data)
    return None


def _find_in_jpeg(data: bytes) -> Optional[Tuple[int, int]]:
    """Walk JPEG segments up to the start of scan looking for APP1 Exif."""
    offset = 2  # Skip JPEG SOI marker
    
    while offset + 1 < len(data):
        # Check for segment marker
        if data[offset] != 0xFF:
            break
        
        marker = data[offset + 1]
        
        # Fill bytes before a marker
        if marker == 0xFF:
            offset += 1
            continue
        
        if marker in STANDALONE_MARKERS:
            offset += 2
            continue
        
        # Image data starts; EXIF must come before it
        if marker in (MARKER_SOS, MARKER_EOI):
            break
        
        if offset + 4 > len(data):
            break
        length = struct.unpack('>H', data[offset + 2:offset + 4])[0]
        if length < 2:
            break
        
        # APP1 marker (0xE1) contains EXIF data
        if marker == MARKER_APP1 and data[offset + 4:offset + 10] == EXIF_HEADER:
            end = offset + 2 + length
            if end > len(data):
                raise NoExifDataError(incomplete_segment_message(end - len(data)))
            return offset + 10, end
        
        offset += 2 + length
    
    return None


def _find_in_png(data: bytes) -> Optional[Tuple[int, int]]:
    """PNG stores EXIF in an eXIf chunk (PNG 1.5+)."""
    offset = 8  # Skip PNG signature
    
    while offset + 8 <= len(data):
        chunk_length = struct.unpack('>I', data[offset:offset + 4])[0]
        chunk_type = data[offset + 4:offset + 8]
        chunk_start = offset + 8
        
        if chunk_type == PNG_EXIF_CHUNK:
            start = chunk_start
            end = chunk_start + chunk_length
            if end > len(data):
                raise NoExifDataError(incomplete_segment_message(end - len(data)))
            # Some writers keep the JPEG-style header inside the chunk
            if data[start:start + 6] == EXIF_HEADER:
                start += 6
            return start, end
        
        if chunk_type == PNG_END_CHUNK:
            break
        
        # Skip data + CRC
        offset = chunk_start + chunk_length + 4
    
    return None
