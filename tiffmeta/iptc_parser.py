# Copyright 2025 DNAi inc.

# Dual-licensed under the DNAi Free License v1.1 and the
# DNAi Commercial License v1.1.
# See the LICENSE files in the project root for details.

"""
IPTC metadata parser

Decodes the IPTC-IIM records found inside a Photoshop image resource
block. Each Application Record dataset is stored as:

- 1 byte: Record marker (0x1C)
- 1 byte: Record number (0x02)
- 1 byte: Dataset number (the tag)
- 2 bytes: Data length (big-endian)
- N bytes: Data

Copyright 2025 DNAi inc.
"""

import logging
from typing import Any, Dict, Union

from tiffmeta.byte_buffer import ByteBuffer
from tiffmeta.iptc_tags import IPTC_TAG_NAMES
from tiffmeta.segment_locator import SegmentRange
from tiffmeta.value_translator import set_value_or_append

logger = logging.getLogger(__name__)

RECORD_MARKER = 0x1C
APPLICATION_RECORD = 0x02


def parse_iptc(buffer: ByteBuffer, segment: SegmentRange) -> Dict[Union[str, int], Any]:
    """
    Parse the IPTC records in ``segment``.

    Repeated datasets (keywords, for example) accumulate into a list in
    the order they are encountered.

    Args:
        buffer: Buffer holding the block
        segment: Located IPTC range

    Returns:
        Dictionary of dataset name (or number) to text
    """
    data = buffer.data
    end = len(data) if segment.end is None else min(segment.end, len(data))
    metadata: Dict[Union[str, int], Any] = {}

    offset = segment.start
    while offset + 5 <= end:
        if data[offset] != RECORD_MARKER or data[offset + 1] != APPLICATION_RECORD:
            offset += 1
            continue

        tag = data[offset + 2]
        size = buffer.get_uint16(offset + 3)
        value_end = offset + 5 + size
        if value_end > len(data):
            logger.debug("IPTC dataset %d at %d runs past the loaded data", tag, offset)
            break

        key = IPTC_TAG_NAMES.get(tag, tag)
        value = buffer.to_string(offset + 5, value_end)
        metadata[key] = set_value_or_append(value, metadata.get(key))
        offset = value_end

    return metadata
