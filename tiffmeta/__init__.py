# Copyright 2025 DNAi inc.

# Dual-licensed under the DNAi Free License v1.1 and the
# DNAi Commercial License v1.1.
# See the LICENSE files in the project root for details.

"""
tiffmeta - A Pure Python EXIF/TIFF Metadata Decoder

Locates the TIFF/EXIF, XMP and IPTC blocks of JPEG and TIFF files and
decodes their tags by reading the binary structures directly. Input can be
read whole or in chunks, fetching more bytes only when a directory lies
outside what was loaded.

Copyright 2025 DNAi inc.
"""

__version__ = "0.1.0"
__author__ = "DNAi inc."

from tiffmeta.byte_buffer import ByteBuffer, ByteOrder
from tiffmeta.core import parse
from tiffmeta.exceptions import (
    InvalidByteOrderMarker,
    InvalidIfd0Offset,
    InvalidMagicNumber,
    MetadataReadError,
    TiffMetaError,
    UnsupportedSourceError,
    ValueOffsetOutOfRange,
)
from tiffmeta.exif_parser import ExifParser
from tiffmeta.exif_tags import get_tag_name
from tiffmeta.options import ParseOptions
from tiffmeta.readers import (
    Base64Reader,
    BytesReader,
    ChunkReader,
    FileReader,
    UrlReader,
    open_reader,
)
from tiffmeta.segment_locator import SegmentRange, locate

__all__ = [
    "parse",
    "ExifParser",
    "ParseOptions",
    "ByteBuffer",
    "ByteOrder",
    "SegmentRange",
    "locate",
    "get_tag_name",
    "ChunkReader",
    "BytesReader",
    "FileReader",
    "Base64Reader",
    "UrlReader",
    "open_reader",
    "TiffMetaError",
    "MetadataReadError",
    "InvalidByteOrderMarker",
    "InvalidMagicNumber",
    "InvalidIfd0Offset",
    "ValueOffsetOutOfRange",
    "UnsupportedSourceError",
]
