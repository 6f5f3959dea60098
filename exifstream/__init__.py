# Copyright 2025 DNAi inc.

# Dual-licensed under the DNAi Free License v1.1 and the
# DNAi Commercial License v1.1.
# See the LICENSE files in the project root for details.

"""
exifstream - EXIF tag decoding for Python

Decodes EXIF metadata embedded in JPEG, TIFF and PNG files into typed
tags (integer, rational and text), either in one shot from a file or
incrementally through a streaming loader.

All parsing is done by directly reading binary file structures.

Copyright 2025 DNAi inc.
"""

__version__ = "0.1.0"
__author__ = "DNAi inc."

from exifstream.core import read, read_bytes, read_stream
from exifstream.decoder import TagDecoder, decode, decode_directory
from exifstream.exceptions import (
    ExifStreamError,
    LoaderStateError,
    MalformedEntryError,
    MetadataReadError,
    NoExifDataError,
    ReadOnlyStoreError,
)
from exifstream.exif_tags import (
    GPS_ALTITUDE_ABOVE_SEA_LEVEL,
    GPS_ALTITUDE_BELOW_SEA_LEVEL,
    GPS_LATITUDE_NORTH,
    GPS_LATITUDE_SOUTH,
    GPS_LONGITUDE_EAST,
    GPS_LONGITUDE_WEST,
    ORIENTATION_BOTTOM_LEFT,
    ORIENTATION_BOTTOM_RIGHT,
    ORIENTATION_LEFT_BOTTOM,
    ORIENTATION_LEFT_TOP,
    ORIENTATION_RIGHT_BOTTOM,
    ORIENTATION_RIGHT_TOP,
    ORIENTATION_TOP_LEFT,
    ORIENTATION_TOP_RIGHT,
    ORIENTATION_UNKNOWN,
    TAG_GPS_ALTITUDE,
    TAG_GPS_ALTITUDE_REF,
    TAG_GPS_LATITUDE,
    TAG_GPS_LATITUDE_REF,
    TAG_GPS_LONGITUDE,
    TAG_GPS_LONGITUDE_REF,
    TAG_ORIENTATION,
)
from exifstream.formats import ByteOrder, FormatCode
from exifstream.loader import StreamingLoader, WriteOutcome, WriteResult
from exifstream.options import ExifOptions, MultiRationalPolicy
from exifstream.tag_store import TagStore
from exifstream.tags import BasicTag, FloatTag, IntegerTag, Tag
from exifstream.tiff_structure import ExifDirectory, RawEntry, open_exif, walk

__all__ = [
    "read",
    "read_bytes",
    "read_stream",
    "TagDecoder",
    "decode",
    "decode_directory",
    "ExifStreamError",
    "LoaderStateError",
    "MalformedEntryError",
    "MetadataReadError",
    "NoExifDataError",
    "ReadOnlyStoreError",
    "ByteOrder",
    "FormatCode",
    "StreamingLoader",
    "WriteOutcome",
    "WriteResult",
    "ExifOptions",
    "MultiRationalPolicy",
    "TagStore",
    "BasicTag",
    "FloatTag",
    "IntegerTag",
    "Tag",
    "ExifDirectory",
    "RawEntry",
    "open_exif",
    "walk",
    "TAG_ORIENTATION",
    "ORIENTATION_UNKNOWN",
    "ORIENTATION_TOP_LEFT",
    "ORIENTATION_TOP_RIGHT",
    "ORIENTATION_BOTTOM_RIGHT",
    "ORIENTATION_BOTTOM_LEFT",
    "ORIENTATION_LEFT_TOP",
    "ORIENTATION_RIGHT_TOP",
    "ORIENTATION_RIGHT_BOTTOM",
    "ORIENTATION_LEFT_BOTTOM",
    "TAG_GPS_LATITUDE_REF",
    "TAG_GPS_LATITUDE",
    "TAG_GPS_LONGITUDE_REF",
    "TAG_GPS_LONGITUDE",
    "TAG_GPS_ALTITUDE_REF",
    "TAG_GPS_ALTITUDE",
    "GPS_ALTITUDE_ABOVE_SEA_LEVEL",
    "GPS_ALTITUDE_BELOW_SEA_LEVEL",
    "GPS_LATITUDE_NORTH",
    "GPS_LATITUDE_SOUTH",
    "GPS_LONGITUDE_EAST",
    "GPS_LONGITUDE_WEST",
]
