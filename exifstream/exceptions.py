# Copyright 2025 DNAi inc.

# Dual-licensed under the DNAi Free License v1.1 and the
# DNAi Commercial License v1.1.
# See the LICENSE files in the project root for details.

"""
Exception classes for exifstream

This module defines the error taxonomy shared by the directory walker,
the tag decoder and the streaming loader.

Copyright 2025 DNAi inc.
"""


class ExifStreamError(Exception):
    """
    Base exception for all exifstream errors.
    
    All exifstream exceptions inherit from this class, allowing
    catch-all error handling for any exifstream-related errors.
    """
    def __init__(self, message: str = ""):
        """
        Initialize the exception with an optional error message.
        
        Args:
            message: Descriptive error message explaining what went wrong
        """
        self.message = message
        super().__init__(message)


class NoExifDataError(ExifStreamError):
    """
    Raised when no EXIF data can be found.
    
    This exception is raised when:
    - The container has no APP1 Exif segment, eXIf chunk or TIFF header
    - finalize() is called on a loader that received no bytes
    - finalize() is called before a complete EXIF block was accumulated
    
    The condition is recoverable: callers may treat the image as
    metadata-less.
    """
    def __init__(self, message: str = "No EXIF data found."):
        super().__init__(message)


class MetadataReadError(ExifStreamError):
    """
    Raised when EXIF data is present but cannot be read.
    
    This exception is raised when:
    - The file cannot be opened or read
    - The TIFF header has a bad byte order mark or magic number
    - A directory offset points outside the EXIF block
    """
    pass


class MalformedEntryError(MetadataReadError):
    """
    Raised in strict mode when a single directory entry cannot be decoded.
    
    The walk catches this per entry, so one bad entry never discards
    the tags decoded from the others.
    """
    def __init__(self, tag_id: int, message: str):
        self.tag_id = tag_id
        super().__init__(f"Tag 0x{tag_id:04X}: {message}")


class LoaderStateError(ExifStreamError):
    """
    Raised when a StreamingLoader is used out of order.
    
    This exception is raised when:
    - write() is called after finalize()
    - finalize() is called again after a failed finalize()
    """
    pass


class ReadOnlyStoreError(ExifStreamError):
    """Raised when inserting into a TagStore that was handed to a consumer."""
    pass
