# Copyright 2025 DNAi inc.

# Dual-licensed under the DNAi Free License v1.1 and the
# DNAi Commercial License v1.1.
# See the LICENSE files in the project root for details.

"""
Core parse entry point

Combines the input readers and the EXIF parser into a single call.

Copyright 2025 DNAi inc.
"""

import logging
from typing import Any, Callable, Dict, Optional

from tiffmeta.byte_buffer import ByteBuffer
from tiffmeta.exif_parser import ExifParser
from tiffmeta.options import process_options
from tiffmeta.readers import open_reader
from tiffmeta.segment_locator import find_tiff

logger = logging.getLogger(__name__)


def parse(
    source: Any,
    options: Any = None,
    parse_xml: Optional[Callable[[str], Any]] = None,
    strict: bool = False,
) -> Optional[Dict[str, Any]]:
    """
    Read metadata from an image.

    Args:
        source: bytes-like data, a file path, an http(s) URL, a base64
            string / data URL, or a ChunkReader
        options: None, True (every block), a mapping, or ParseOptions
        parse_xml: Optional function applied to the trimmed XMP text
        strict: Raise block errors instead of skipping the failed block

    Returns:
        Decoded metadata, or None when the image carries none

    Raises:
        FileNotFoundError: If a file path does not exist
        UnsupportedSourceError: If the input type is not supported
        MetadataReadError: Only in strict mode

    Example:
        >>> metadata = parse('photo.jpg', {'mergeOutput': False})
        >>> metadata['image']['Model']
        'DSC-RX100'
    """
    options = process_options(options)
    with open_reader(source) as reader:
        buffer = reader.read(options)

        # The EXIF segment usually sits in the first chunk; scan the rest
        # of the file only if it does not and whole-file reads are allowed.
        if (options.tiff and reader.chunked and options.whole_file is not False
                and find_tiff(buffer) is None):
            logger.debug("TIFF segment not in the first chunk, reading the whole input")
            buffer = ByteBuffer(reader.read_whole())
            reader.chunked = False

        parser = ExifParser(
            options,
            parse_xml=parse_xml,
            reader=reader if reader.chunked else None,
            strict=strict,
        )
        return parser.parse(buffer)
