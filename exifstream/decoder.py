# Copyright 2025 DNAi inc.

# Dual-licensed under the DNAi Free License v1.1 and the
# DNAi Commercial License v1.1.
# See the LICENSE files in the project root for details.

"""
Tag value decoder

This module turns raw directory entries into typed tags:

- BYTE, SHORT and LONG (and their signed variants) become IntegerTag
- RATIONAL and SRATIONAL become FloatTag; multi-component rationals such
  as GPS degrees/minutes/seconds are folded into a single fraction
- every other format becomes BasicTag carrying text only

Copyright 2025 DNAi inc.
"""

import logging
import struct
from typing import Optional, Tuple

from exifstream.exceptions import MalformedEntryError
from exifstream.exif_tags import GPS_IFD, SEXAGESIMAL_GPS_TAGS
from exifstream.formats import FormatCode
from exifstream.options import DEFAULT_OPTIONS, ExifOptions, MultiRationalPolicy
from exifstream.tag_store import TagStore
from exifstream.tags import BasicTag, FloatTag, IntegerTag, Tag
from exifstream.tiff_structure import ExifDirectory, RawEntry, walk

logger = logging.getLogger(__name__)

# struct codes of integer formats; only the first component is decoded
_INTEGER_CODES = {
    FormatCode.BYTE: ('B', 1),
    FormatCode.SBYTE: ('b', 1),
    FormatCode.SHORT: ('H', 2),
    FormatCode.SSHORT: ('h', 2),
    FormatCode.LONG: ('I', 4),
    FormatCode.SLONG: ('i', 4),
}

_RATIONAL_CODES = {
    FormatCode.RATIONAL: 'II',
    FormatCode.SRATIONAL: 'ii',
}

RATIONAL_SIZE = 8


class TagDecoder:
    """
    Decoder for raw directory entries.

    Decoding is a pure function of the entry, so one decoder may be shared
    across entries and threads.
    """

    def __init__(self, options: Optional[ExifOptions] = None):
        """
        Initialize the decoder.

        Args:
            options: Multi-component rational policy and strictness
        """
        self.options = options or DEFAULT_OPTIONS

    def decode(self, entry: RawEntry) -> Tag:
        """
        Decode one raw entry.

        Label and text value are copied from the entry with surrounding
        spaces trimmed.

        Args:
            entry: Raw directory entry; its payload is not retained

        Returns:
            IntegerTag, FloatTag or BasicTag depending on the entry format

        Raises:
            MalformedEntryError: In strict mode, if the payload is shorter
                than the format requires
        """
        label = entry.label.strip(' ')
        text_value = entry.preformatted_value.strip(' ')
        fmt = entry.format

        if fmt in _INTEGER_CODES:
            return IntegerTag(entry.tag_id, label, text_value, self._decode_integer(entry))

        if fmt in _RATIONAL_CODES:
            numerator, denominator, components = self._decode_rational(entry)
            return FloatTag(entry.tag_id, label, text_value, numerator, denominator, components)

        return BasicTag(entry.tag_id, label, text_value)

    def _decode_integer(self, entry: RawEntry) -> int:
        code, size = _INTEGER_CODES[entry.format]
        data = self._read(entry, size)
        return struct.unpack_from(f'{entry.byte_order.prefix}{code}', data)[0]

    def _decode_rational(self, entry: RawEntry) -> Tuple[int, int, Tuple[Tuple[int, int], ...]]:
        pair = f'{entry.byte_order.prefix}{_RATIONAL_CODES[entry.format]}'
        count = max(entry.component_count, 1)

        if self.options.strict:
            data = self._read(entry, count * RATIONAL_SIZE)
        else:
            # Decode the complete pairs present, at least one (zero-padded)
            available = min(count, len(entry.payload) // RATIONAL_SIZE)
            count = max(available, 1)
            data = self._read(entry, count * RATIONAL_SIZE)

        components = tuple(
            struct.unpack_from(pair, data, i * RATIONAL_SIZE) for i in range(count)
        )
        numerator, denominator = components[0]

        if len(components) > 1 and self._folds(entry):
            for numerator_i, denominator_i in components[1:]:
                numerator = 60 * numerator * denominator_i + numerator_i * denominator
                denominator = denominator * denominator_i * 60

        return numerator, denominator, components

    def _folds(self, entry: RawEntry) -> bool:
        """Whether the components of a multi-component rational are folded."""
        if self.options.multi_rational_policy == MultiRationalPolicy.FOLD_ALL:
            return True
        return entry.ifd == GPS_IFD and entry.tag_id in SEXAGESIMAL_GPS_TAGS

    def _read(self, entry: RawEntry, size: int):
        """
        Return the first size bytes of the payload.

        Short payloads are zero-padded, or rejected in strict mode.
        """
        data = entry.payload[:size]
        if len(data) >= size:
            return data

        if self.options.strict:
            raise MalformedEntryError(
                entry.tag_id,
                f"{entry.format.name} payload has {len(entry.payload)} bytes, needs {size}"
            )
        logger.debug("Tag 0x%04X: padding %d-byte payload to %d bytes",
                     entry.tag_id, len(data), size)
        return bytes(data).ljust(size, b'\x00')


_default_decoder = TagDecoder()


def decode(entry: RawEntry, options: Optional[ExifOptions] = None) -> Tag:
    """
    Decode one raw entry with the given options (defaults if omitted).

    Example:
        >>> tag = decode(entry)
        >>> if isinstance(tag, FloatTag):
        ...     print(tag.float_value())
    """
    decoder = _default_decoder if options is None else TagDecoder(options)
    return decoder.decode(entry)


def decode_directory(directory: ExifDirectory, options: Optional[ExifOptions] = None) -> TagStore:
    """
    Walk an opened directory and decode every entry into a frozen TagStore.

    In strict mode an entry that fails to decode is logged and skipped;
    the remaining entries are still decoded.

    Raises:
        MetadataReadError: If the directory structure itself is unreadable
    """
    decoder = TagDecoder(options or directory.options)
    store = TagStore()

    for entry in walk(directory):
        try:
            tag = decoder.decode(entry)
        except MalformedEntryError as e:
            logger.warning("Skipping %s entry: %s", entry.ifd, e)
            continue
        store.insert(tag)

    store.freeze()
    logger.debug("Decoded %d tags", len(store))
    return store
