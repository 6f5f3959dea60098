# Copyright 2025 DNAi inc.

# Dual-licensed under the DNAi Free License v1.1 and the
# DNAi Commercial License v1.1.
# See the LICENSE files in the project root for details.

"""
EXIF field formats and byte orders

Copyright 2025 DNAi inc.
"""

from enum import Enum, IntEnum
from typing import Dict


class FormatCode(IntEnum):
    """EXIF directory entry field types"""
    OTHER = 0  # Not a TIFF field type; stands in for unknown codes
    BYTE = 1
    ASCII = 2
    SHORT = 3
    LONG = 4
    RATIONAL = 5
    SBYTE = 6
    UNDEFINED = 7
    SSHORT = 8
    SLONG = 9
    SRATIONAL = 10
    FLOAT = 11
    DOUBLE = 12

    @classmethod
    def from_code(cls, code: int) -> "FormatCode":
        """Map a raw field type to a FormatCode, unknown codes become OTHER."""
        try:
            return cls(code)
        except ValueError:
            return cls.OTHER


class ByteOrder(Enum):
    """Byte order of a TIFF block; the value is the struct prefix."""
    BIG_ENDIAN = '>'
    LITTLE_ENDIAN = '<'

    @property
    def prefix(self) -> str:
        return self.value

    @classmethod
    def from_mark(cls, mark: bytes) -> "ByteOrder":
        """
        Resolve the two-byte TIFF byte order mark.
        
        Args:
            mark: b'II' (Intel) or b'MM' (Motorola)
            
        Raises:
            ValueError: If the mark is neither
        """
        if mark == b'II':
            return cls.LITTLE_ENDIAN
        if mark == b'MM':
            return cls.BIG_ENDIAN
        raise ValueError(f"Invalid byte order mark: {mark!r}")


# Component sizes in bytes
TAG_SIZES: Dict[FormatCode, int] = {
    FormatCode.BYTE: 1,
    FormatCode.ASCII: 1,
    FormatCode.SHORT: 2,
    FormatCode.LONG: 4,
    FormatCode.RATIONAL: 8,
    FormatCode.SBYTE: 1,
    FormatCode.UNDEFINED: 1,
    FormatCode.SSHORT: 2,
    FormatCode.SLONG: 4,
    FormatCode.SRATIONAL: 8,
    FormatCode.FLOAT: 4,
    FormatCode.DOUBLE: 8,
}


def component_size(fmt: FormatCode) -> int:
    """Size of one component; OTHER is treated as opaque bytes."""
    return TAG_SIZES.get(fmt, 1)
