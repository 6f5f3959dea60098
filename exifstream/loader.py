# Copyright 2025 DNAi inc.

# Dual-licensed under the DNAi Free License v1.1 and the
# DNAi Commercial License v1.1.
# See the LICENSE files in the project root for details.

"""
Streaming EXIF loader

The loader accepts image bytes incrementally (e.g., while a file is being
read or downloaded) and defers the directory walk until finalize() is
called.

For JPEG and PNG streams the loader follows the segment (or chunk)
structure as bytes arrive: everything other than the APP1 Exif segment
or the eXIf chunk is skipped without being buffered, and once the EXIF
payload is complete write() reports WriteOutcome.HEADER_FOUND, telling
the caller to stop feeding bytes and call finalize(). TIFF and
"Exif\\0\\0"-prefixed streams carry no length up front, so they are
accumulated until finalize().

Example:
    >>> with StreamingLoader() as loader:
    ...     for chunk in chunks:
    ...         if loader.write(chunk).outcome is WriteOutcome.HEADER_FOUND:
    ...             break
    ...     store = loader.finalize()

Copyright 2025 DNAi inc.
"""

import logging
import struct
from enum import Enum
from typing import NamedTuple, Optional

from exifstream.decoder import decode_directory
from exifstream.exceptions import LoaderStateError, NoExifDataError
from exifstream.exif_parser import (
    EXIF_HEADER,
    JPEG_SOI,
    MARKER_APP1,
    MARKER_EOI,
    MARKER_SOS,
    PNG_END_CHUNK,
    PNG_EXIF_CHUNK,
    PNG_SIGNATURE,
    STANDALONE_MARKERS,
    TIFF_BE_HEADER,
    TIFF_LE_HEADER,
    incomplete_segment_message,
)
from exifstream.options import DEFAULT_OPTIONS, ExifOptions
from exifstream.tag_store import TagStore
from exifstream.tiff_structure import ExifDirectory, open_exif

logger = logging.getLogger(__name__)

_CONTAINER_SIGNATURES = (JPEG_SOI, EXIF_HEADER, TIFF_LE_HEADER, TIFF_BE_HEADER, PNG_SIGNATURE)


class WriteOutcome(Enum):
    """Result of a write() call."""
    # Keep streaming
    CONTINUE = "continue"
    # The EXIF block is complete; stop writing and call finalize()
    HEADER_FOUND = "header_found"


class WriteResult(NamedTuple):
    consumed: int
    outcome: WriteOutcome


class _State(Enum):
    IDLE = "idle"
    ACCUMULATING = "accumulating"
    HEADER_FOUND = "header_found"
    FINALIZED = "finalized"


class _Scan(Enum):
    """Position of the scanner within the stream."""
    SNIFF = "sniff"                # waiting for enough bytes to identify the container
    JPEG_MARKER = "jpeg_marker"    # at a JPEG segment marker
    JPEG_SKIP = "jpeg_skip"        # inside a segment that is not APP1 Exif
    PNG_CHUNK = "png_chunk"        # at a PNG chunk header
    PNG_SKIP = "png_skip"          # inside a chunk that is not eXIf (CRC included)
    EXIF_SEGMENT = "exif_segment"  # collecting the APP1 Exif or eXIf payload
    CONTAINER = "container"        # accumulating a TIFF or Exif-prefixed stream whole
    COMPLETE = "complete"          # APP1 Exif or eXIf payload collected
    NO_EXIF = "no_exif"            # image data reached, or unknown container


class StreamingLoader:
    """
    Incremental EXIF loader with a write-then-finalize contract.

    A loader is owned by a single writer: write() and finalize() must not
    be called concurrently.
    """

    def __init__(self, options: Optional[ExifOptions] = None):
        """
        Initialize an idle loader. Buffers are allocated on the first write().

        Args:
            options: Options used when the accumulated data is decoded
        """
        self.options = options or DEFAULT_OPTIONS
        self._state = _State.IDLE
        self._scan = _Scan.SNIFF
        self._pending: Optional[bytearray] = None
        self._exif: Optional[bytearray] = None
        self._skip = 0
        self._remaining = 0
        self._store: Optional[TagStore] = None

    def write(self, chunk: bytes) -> WriteResult:
        """
        Feed the next chunk of the stream.

        Args:
            chunk: Non-empty bytes

        Returns:
            WriteResult with the number of bytes consumed and the outcome.
            After HEADER_FOUND further writes consume nothing and report
            HEADER_FOUND again.

        Raises:
            ValueError: If chunk is empty
            LoaderStateError: If the loader was already finalized or closed
        """
        if not chunk:
            raise ValueError("write() requires a non-empty chunk")
        if self._state is _State.FINALIZED:
            raise LoaderStateError("Cannot write to a finalized loader")
        if self._state is _State.HEADER_FOUND:
            return WriteResult(0, WriteOutcome.HEADER_FOUND)

        if self._state is _State.IDLE:
            self._pending = bytearray()
            self._exif = bytearray()
            self._state = _State.ACCUMULATING
            logger.debug("Loader started accumulating")

        self._pending += chunk
        self._advance()

        if self._scan is _Scan.COMPLETE:
            self._state = _State.HEADER_FOUND
            logger.debug("EXIF segment complete (%d bytes)", len(self._exif))
            return WriteResult(len(chunk), WriteOutcome.HEADER_FOUND)
        return WriteResult(len(chunk), WriteOutcome.CONTINUE)

    def finalize(self) -> TagStore:
        """
        Walk the accumulated EXIF block and decode it.

        The accumulation buffers are released whether or not decoding
        succeeds. Calling finalize() again after a success returns the
        same store.

        Returns:
            Frozen TagStore

        Raises:
            NoExifDataError: If nothing was written or no EXIF block was found
            MetadataReadError: If the EXIF block is corrupt
            LoaderStateError: If a previous finalize() failed or the loader was closed
        """
        if self._state is _State.FINALIZED:
            if self._store is not None:
                return self._store
            raise LoaderStateError("Loader was already finalized without EXIF data")

        try:
            with self._open_directory() as directory:
                self._store = decode_directory(directory, self.options)
            return self._store
        finally:
            self._state = _State.FINALIZED
            self._release()

    def close(self) -> None:
        """Release the buffers; the loader cannot be used afterwards."""
        self._state = _State.FINALIZED
        self._release()

    def __enter__(self) -> "StreamingLoader":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    def _release(self) -> None:
        self._pending = None
        self._exif = None

    def _open_directory(self) -> ExifDirectory:
        if self._state is _State.IDLE:
            raise NoExifDataError("No bytes were written to the loader.")
        if self._scan is _Scan.COMPLETE:
            block = bytes(self._exif)
            # Some writers keep the JPEG-style header inside the eXIf chunk
            if block.startswith(EXIF_HEADER):
                block = block[len(EXIF_HEADER):]
            return ExifDirectory.from_block(block, self.options)
        if self._scan is _Scan.CONTAINER:
            return open_exif(bytes(self._exif), self.options)
        if self._scan is _Scan.EXIF_SEGMENT:
            raise NoExifDataError(incomplete_segment_message(self._remaining))
        raise NoExifDataError()

    def _advance(self) -> None:
        """Consume pending bytes until more input is needed."""
        while self._pending:
            scan = self._scan
            if scan is _Scan.SNIFF:
                if not self._sniff():
                    return
            elif scan is _Scan.JPEG_MARKER:
                if not self._read_marker():
                    return
            elif scan is _Scan.PNG_CHUNK:
                if not self._read_chunk_header():
                    return
            elif scan in (_Scan.JPEG_SKIP, _Scan.PNG_SKIP):
                n = min(self._skip, len(self._pending))
                del self._pending[:n]
                self._skip -= n
                if self._skip == 0:
                    self._scan = _Scan.JPEG_MARKER if scan is _Scan.JPEG_SKIP else _Scan.PNG_CHUNK
            elif scan is _Scan.EXIF_SEGMENT:
                n = min(self._remaining, len(self._pending))
                self._exif += self._pending[:n]
                del self._pending[:n]
                self._remaining -= n
                if self._remaining == 0:
                    self._scan = _Scan.COMPLETE
            elif scan is _Scan.CONTAINER:
                self._exif += self._pending
                self._pending.clear()
            else:
                # Bytes after the EXIF block, or of a stream without one
                self._pending.clear()

    def _sniff(self) -> bool:
        """Identify the container from its leading bytes."""
        head = bytes(self._pending[:8])

        if head.startswith(JPEG_SOI):
            del self._pending[:2]
            self._scan = _Scan.JPEG_MARKER
            logger.debug("JPEG stream detected")
            return True

        if head.startswith(PNG_SIGNATURE):
            del self._pending[:len(PNG_SIGNATURE)]
            self._scan = _Scan.PNG_CHUNK
            logger.debug("PNG stream detected")
            return True

        for signature in (EXIF_HEADER, TIFF_LE_HEADER, TIFF_BE_HEADER):
            if head.startswith(signature):
                self._scan = _Scan.CONTAINER
                logger.debug("Accumulating %r stream until finalize()", signature)
                return True

        if any(len(head) < len(sig) and sig.startswith(head) for sig in _CONTAINER_SIGNATURES):
            return False

        logger.debug("Stream does not start with a known EXIF container")
        self._scan = _Scan.NO_EXIF
        return True

    def _read_marker(self) -> bool:
        """Handle the JPEG marker at the start of the pending bytes."""
        pending = self._pending

        # Fill bytes before a marker
        while len(pending) >= 2 and pending[0] == 0xFF and pending[1] == 0xFF:
            del pending[:1]
        if len(pending) < 2:
            return False

        if pending[0] != 0xFF:
            logger.debug("Lost JPEG marker sync")
            self._scan = _Scan.NO_EXIF
            return True

        marker = pending[1]
        if marker in STANDALONE_MARKERS:
            del pending[:2]
            return True

        # Image data starts; EXIF must come before it
        if marker in (MARKER_SOS, MARKER_EOI):
            logger.debug("Reached JPEG marker 0x%02X without an EXIF segment", marker)
            self._scan = _Scan.NO_EXIF
            return True

        if len(pending) < 4:
            return False
        length = struct.unpack_from('>H', pending, 2)[0]
        if length < 2:
            self._scan = _Scan.NO_EXIF
            return True

        if marker == MARKER_APP1 and length >= 8:
            if len(pending) < 10:
                return False
            if pending[4:10] == EXIF_HEADER:
                del pending[:10]
                self._remaining = length - 8
                self._scan = _Scan.COMPLETE if self._remaining == 0 else _Scan.EXIF_SEGMENT
                logger.debug("APP1 Exif segment of %d bytes", self._remaining)
                return True

        del pending[:4]
        self._skip = length - 2
        self._scan = _Scan.JPEG_SKIP if self._skip else _Scan.JPEG_MARKER
        return True

    def _read_chunk_header(self) -> bool:
        """Handle the PNG chunk header at the start of the pending bytes."""
        pending = self._pending
        if len(pending) < 8:
            return False

        length, chunk_type = struct.unpack_from('>I4s', pending)
        del pending[:8]

        if chunk_type == PNG_EXIF_CHUNK:
            self._remaining = length
            self._scan = _Scan.COMPLETE if length == 0 else _Scan.EXIF_SEGMENT
            logger.debug("eXIf chunk of %d bytes", length)
        elif chunk_type == PNG_END_CHUNK:
            logger.debug("Reached PNG IEND without an eXIf chunk")
            self._scan = _Scan.NO_EXIF
        else:
            # Chunk data followed by its CRC
            self._skip = length + 4
            self._scan = _Scan.PNG_SKIP
        return True
