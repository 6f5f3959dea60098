# Copyright 2025 DNAi inc.

# Dual-licensed under the DNAi Free License v1.1 and the
# DNAi Commercial License v1.1.
# See the LICENSE files in the project root for details.

"""
Value formatter for rendering raw EXIF payloads as text.

This module produces the pre-formatted text carried by each raw entry.
The rendering is generic: numbers are listed, rationals are shown as
fractions and strings are decoded. Tag-specific presentation (e.g.,
orientation names) is left to the caller.

Copyright 2025 DNAi inc.
"""

import struct
from typing import List, Union

from exifstream.formats import ByteOrder, FormatCode, component_size

Payload = Union[bytes, bytearray, memoryview]

# struct codes of plain numeric formats
_NUMERIC_CODES = {
    FormatCode.BYTE: 'B',
    FormatCode.SBYTE: 'b',
    FormatCode.SHORT: 'H',
    FormatCode.SSHORT: 'h',
    FormatCode.LONG: 'I',
    FormatCode.SLONG: 'i',
    FormatCode.FLOAT: 'f',
    FormatCode.DOUBLE: 'd',
}


def decode_ascii(data: Payload) -> str:
    """
    Decode an ASCII field up to its first null byte.
    
    EXIF 3.0 allows UTF-8 in ASCII fields, so UTF-8 is tried first when
    the data contains non-ASCII bytes.
    """
    raw = bytes(data)
    null_pos = raw.find(b'\x00')
    if null_pos >= 0:
        raw = raw[:null_pos]
    if any(b > 127 for b in raw):
        try:
            return raw.decode('utf-8', errors='strict')
        except UnicodeDecodeError:
            pass
    return raw.decode('ascii', errors='replace')


def _is_printable(raw: bytes) -> bool:
    return bool(raw) and all(32 <= b < 127 for b in raw)


def _format_number(value: Union[int, float]) -> str:
    if isinstance(value, float):
        return f"{value:g}"
    return str(value)


def format_value(fmt: FormatCode, count: int, payload: Payload, byte_order: ByteOrder) -> str:
    """
    Render a raw entry payload as text.
    
    Args:
        fmt: Entry format code
        count: Number of components announced by the entry
        payload: Raw payload bytes (may be shorter than announced)
        byte_order: Byte order of the owning TIFF block
        
    Returns:
        Text representation; only complete components are rendered
    """
    prefix = byte_order.prefix

    if fmt == FormatCode.ASCII:
        return decode_ascii(payload)

    if fmt == FormatCode.UNDEFINED:
        raw = bytes(payload).rstrip(b'\x00')
        if _is_printable(raw):
            # ExifVersion, FlashpixVersion and similar
            return raw.decode('ascii')
        return f"{len(payload)} bytes undefined data"

    size = component_size(fmt)
    available = min(count, len(payload) // size)

    if fmt in (FormatCode.RATIONAL, FormatCode.SRATIONAL):
        pair = f'{prefix}ii' if fmt == FormatCode.SRATIONAL else f'{prefix}II'
        parts: List[str] = []
        for i in range(available):
            num, den = struct.unpack_from(pair, payload, i * size)
            parts.append(str(num) if den == 1 else f"{num}/{den}")
        return ", ".join(parts)

    code = _NUMERIC_CODES.get(fmt)
    if code is None:
        return f"{len(payload)} bytes"
    values = struct.unpack_from(f'{prefix}{available}{code}', payload)
    return ", ".join(_format_number(v) for v in values)
