# Copyright 2025 DNAi inc.

# Dual-licensed under the DNAi Free License v1.1 and the
# DNAi Commercial License v1.1.
# See the LICENSE files in the project root for details.

"""
Exception classes for tiffmeta

This module defines the exceptions raised while locating and decoding
TIFF/EXIF metadata blocks.

Copyright 2025 DNAi inc.
"""

from typing import Optional


class TiffMetaError(Exception):
    """
    Base exception for all tiffmeta errors.

    All tiffmeta exceptions inherit from this class, allowing
    catch-all error handling for any tiffmeta-related errors.
    """
    def __init__(self, message: str = ""):
        """
        Initialize the exception with an optional error message.

        Args:
            message: Descriptive error message explaining what went wrong
        """
        self.message = message
        super().__init__(message)


class MetadataReadError(TiffMetaError):
    """
    Raised when a metadata block cannot be decoded.

    A read error aborts the block it occurred in (image, exif, gps, ...);
    independent blocks are still attempted.
    """
    pass


class InvalidByteOrderMarker(MetadataReadError):
    """Raised when a TIFF header starts with neither II nor MM."""
    pass


class InvalidMagicNumber(MetadataReadError):
    """Raised when the TIFF header lacks the 0x002A marker."""
    pass


class InvalidIfd0Offset(MetadataReadError):
    """Raised when the IFD0 offset points inside the 8 byte TIFF header."""
    pass


class ValueOffsetOutOfRange(MetadataReadError):
    """
    Raised when a directory or tag value lies outside the loaded bytes.

    In incremental mode the parser answers this situation by fetching a
    chunk at ``offset``; the exception is only raised when no reader is
    available or the reader cannot supply the bytes.
    """
    def __init__(self, offset: int, size: int = 0, message: Optional[str] = None):
        self.offset = offset
        self.size = size
        if message is None:
            message = f"Value offset {offset} (+{size} bytes) is out of the loaded range"
        super().__init__(message)


class UnsupportedSourceError(TiffMetaError):
    """
    Raised when no reader accepts the given input.

    This exception is raised when:
    - The input is neither bytes, a path, a URL nor a base64 string
    - A base64 string or data URL cannot be decoded

    A path that does not exist raises FileNotFoundError instead.
    """
    pass
