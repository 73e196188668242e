# Copyright 2025 DNAi inc.

# Dual-licensed under the DNAi Free License v1.1 and the
# DNAi Commercial License v1.1.
# See the LICENSE files in the project root for details.

"""
XMP packet extraction

The XMP packet is returned as text; XML parsing is left to an optional
caller-supplied function.

Copyright 2025 DNAi inc.
"""

from typing import Any, Callable, Optional

from tiffmeta.byte_buffer import ByteBuffer
from tiffmeta.segment_locator import SegmentRange

XMPMETA_START = '<x:xmpmeta'
XMPMETA_END = 'x:xmpmeta>'


def trim_xmp(text: str) -> str:
    """
    Cut the ``<x:xmpmeta>`` element out of an XMP segment.

    The namespace header and the ``<?xpacket?>`` wrapper around it are
    dropped. Text without the element is returned unchanged.
    """
    start = text.find(XMPMETA_START)
    end = text.find(XMPMETA_END, start)
    if start == -1 or end == -1:
        return text
    return text[start:end + len(XMPMETA_END)]


def extract_xmp(
    buffer: ByteBuffer,
    segment: SegmentRange,
    post_process: bool = True,
    parse_xml: Optional[Callable[[str], Any]] = None,
) -> Any:
    """
    Read the XMP segment as text.

    Args:
        buffer: Buffer holding the segment
        segment: Located XMP range
        post_process: Trim the text to the xmpmeta element and run ``parse_xml``
        parse_xml: Optional XML parser; its return value replaces the text

    Returns:
        XMP text, or whatever ``parse_xml`` returned
    """
    data_length = len(buffer.data)
    end = data_length if segment.end is None else min(segment.end, data_length)
    xmp = buffer.to_string(segment.start, end)
    if post_process:
        xmp = trim_xmp(xmp)
        if parse_xml is not None:
            xmp = parse_xml(xmp)
    return xmp
