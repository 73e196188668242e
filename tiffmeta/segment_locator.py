# Copyright 2025 DNAi inc.

# Dual-licensed under the DNAi Free License v1.1 and the
# DNAi Commercial License v1.1.
# See the LICENSE files in the project root for details.

"""
JPEG segment locator

Finds the byte ranges of the TIFF/EXIF, XMP and IPTC blocks inside a
buffer. JPEG files carry them in APPn segments:

- FF E1 xx xx 'Exif\\0\\0' + TIFF header (APP1, EXIF)
- FF E1 xx xx 'http://ns.adobe.com/xap/1.0/\\0' + XML (APP1, XMP)
- FF ED ... '8BIM' 04 04 + IPTC records (APP13, Photoshop resources)

Bare TIFF files start directly with the TIFF header.

Copyright 2025 DNAi inc.
"""

import logging
from dataclasses import dataclass
from typing import Callable, Optional

from tiffmeta.byte_buffer import ByteBuffer

logger = logging.getLogger(__name__)

EXIF_SIGNATURE = b'Exif\x00\x00'
XMP_SIGNATURE = b'http'
IPTC_SIGNATURE = b'8BIM\x04\x04'

TIFF_LITTLE_ENDIAN = 0x4949
TIFF_BIG_ENDIAN = 0x4D4D


@dataclass
class SegmentRange:
    """Location of a metadata block; ``size`` is None for bare TIFF files."""
    start: int
    size: Optional[int] = None

    @property
    def end(self) -> Optional[int]:
        if self.size is None:
            return None
        return self.start + self.size


def _scan_length(buffer: ByteBuffer) -> int:
    return len(buffer.data) - 10


def find_app_segment(
    buffer: ByteBuffer,
    n: int,
    condition: Callable[[ByteBuffer, int], bool],
    get_range: Optional[Callable[[ByteBuffer, int], SegmentRange]] = None,
) -> Optional[SegmentRange]:
    """
    Scan for the first APPn marker whose payload satisfies ``condition``.

    Args:
        buffer: Buffer to scan (its region at offset 0)
        n: APP segment number (1 for EXIF/XMP, 13 for IPTC)
        condition: Predicate called with the marker offset
        get_range: Builds the range from the marker offset; by default the
            range covers the whole segment starting at the marker

    Returns:
        SegmentRange of the first match, or None
    """
    data = buffer.data
    marker_byte = 0xE0 | n
    for offset in range(_scan_length(buffer)):
        if data[offset] == 0xFF and data[offset + 1] == marker_byte and condition(buffer, offset):
            if get_range is not None:
                return get_range(buffer, offset)
            return SegmentRange(offset, buffer.get_uint16(offset + 2))
    return None


def _is_exif_segment(buffer: ByteBuffer, offset: int) -> bool:
    return buffer.data[offset + 4:offset + 10] == EXIF_SIGNATURE


def _exif_range(buffer: ByteBuffer, offset: int) -> SegmentRange:
    return SegmentRange(offset + 10, buffer.get_uint16(offset + 2))


def _is_xmp_segment(buffer: ByteBuffer, offset: int) -> bool:
    return buffer.data[offset + 4:offset + 8] == XMP_SIGNATURE


def _xmp_range(buffer: ByteBuffer, offset: int) -> SegmentRange:
    return SegmentRange(offset + 4, buffer.get_uint16(offset + 2))


def find_tiff(buffer: ByteBuffer) -> Optional[SegmentRange]:
    """
    Locate the TIFF block.

    Returns ``SegmentRange(0)`` for a bare TIFF file, otherwise the payload
    of the first APP1 segment tagged ``Exif\\0\\0`` (10 bytes past its
    marker, sized by the segment length field).
    """
    if len(buffer.data) >= 2 and buffer.get_uint16(0) in (TIFF_LITTLE_ENDIAN, TIFF_BIG_ENDIAN):
        return SegmentRange(0)
    return find_app_segment(buffer, 1, _is_exif_segment, _exif_range)


def find_xmp(buffer: ByteBuffer) -> Optional[SegmentRange]:
    """Locate the first APP1 segment whose payload starts with ``http``."""
    return find_app_segment(buffer, 1, _is_xmp_segment, _xmp_range)


def find_iptc(buffer: ByteBuffer) -> Optional[SegmentRange]:
    """
    Locate the IPTC records inside a Photoshop image resource block.

    The block is searched by its ``8BIM 04 04`` signature rather than the
    APP13 identifier, which differs between Photoshop versions.
    """
    data = buffer.data
    for offset in range(_scan_length(buffer)):
        if data[offset:offset + 6] != IPTC_SIGNATURE:
            continue
        # Pascal name header, padded to an even length
        name_length = data[offset + 7]
        if name_length % 2 != 0:
            name_length += 1
        # Pre Photoshop 6 layout
        if name_length == 0:
            name_length = 4
        start = offset + 8 + name_length
        size = buffer.get_uint16(offset + 6 + name_length)
        return SegmentRange(start, size)
    return None


def find_icc(buffer: ByteBuffer) -> Optional[SegmentRange]:
    """ICC profiles are not located; multi-segment profiles are unsupported."""
    return None


_FINDERS = {
    'tiff': find_tiff,
    'xmp': find_xmp,
    'iptc': find_iptc,
    'icc': find_icc,
}


def locate(buffer: ByteBuffer, kind: str) -> Optional[SegmentRange]:
    """
    Locate a metadata block of the given kind.

    Args:
        buffer: Buffer to scan
        kind: One of ``tiff``, ``xmp``, ``iptc``, ``icc``

    Returns:
        SegmentRange, or None when the block is absent
    """
    try:
        finder = _FINDERS[kind]
    except KeyError:
        raise ValueError(f"Unknown segment kind: {kind}")
    position = finder(buffer)
    logger.debug("Located %s segment: %s", kind, position)
    return position
