# Copyright 2025 DNAi inc.

# Dual-licensed under the DNAi Free License v1.1 and the
# DNAi Commercial License v1.1.
# See the LICENSE files in the project root for details.

"""
TIFF directory decoder

Parses the TIFF header and single IFDs (Image File Directories). An IFD is
a 2-byte entry count followed by 12-byte entries:

- 2 bytes: tag id
- 2 bytes: type code
- 4 bytes: element count
- 4 bytes: the value itself when it fits, otherwise its offset
  (relative to the start of the TIFF block)

Copyright 2025 DNAi inc.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Union

from tiffmeta.byte_buffer import ByteBuffer, ByteOrder
from tiffmeta.exceptions import InvalidByteOrderMarker, InvalidIfd0Offset, InvalidMagicNumber
from tiffmeta.tag_types import decode_value, tag_size
from tiffmeta.value_translator import translate_value

logger = logging.getLogger(__name__)

TIFF_MAGIC = 0x002A
TIFF_HEADER_SIZE = 8
ENTRY_SIZE = 12

IfdResult = Dict[Union[str, int], Any]


@dataclass
class TiffHeader:
    byte_order: ByteOrder
    ifd0_offset: int


@dataclass
class TagEntry:
    tag_id: int
    tag_type: int
    count: int
    value_or_offset: int


@dataclass
class NeedMoreData:
    """Bytes at ``offset`` must be loaded before decoding can continue."""
    offset: int
    min_size: int


@dataclass
class ParseSession:
    """
    Transient state of one parse invocation.

    Created by the orchestrator for every ``parse`` call and passed to each
    decoding step; pointers are filled in as IFD0 is decoded.
    """
    buffer: ByteBuffer
    tiff_offset: int = 0
    base_offset: int = 0
    byte_order: ByteOrder = ByteOrder.BIG
    ifd0_offset: Optional[int] = None
    exif_ifd_pointer: Optional[int] = None
    gps_info_ifd_pointer: Optional[int] = None
    interoperability_ifd_pointer: Optional[int] = None
    ifd1_offset: Optional[int] = None
    # entries decoded in IFD0, counted before pointer tags are stripped
    ifd0_entries: int = 0
    post_process: bool = False
    chunk_reads: int = field(default=0, repr=False)


def read_tiff_header(buffer: ByteBuffer, tiff_offset: int) -> TiffHeader:
    """
    Parse the 8-byte TIFF header.

    Args:
        buffer: Buffer holding the header
        tiff_offset: File offset of the TIFF block

    Returns:
        TiffHeader with the byte order and the IFD0 offset (TIFF-relative)

    Raises:
        InvalidByteOrderMarker: If the block starts with neither II nor MM
        InvalidMagicNumber: If 0x002A does not follow the byte order marker
        InvalidIfd0Offset: If IFD0 would start inside the header
    """
    marker = buffer.get_uint16(tiff_offset)
    if marker == 0x4949:
        byte_order = ByteOrder.LITTLE
    elif marker == 0x4D4D:
        byte_order = ByteOrder.BIG
    else:
        raise InvalidByteOrderMarker(
            "Invalid EXIF data: expected byte order marker (0x4949 or 0x4D4D)"
        )

    if buffer.get_uint16(tiff_offset + 2, byte_order) != TIFF_MAGIC:
        raise InvalidMagicNumber("Invalid EXIF data: expected 0x002A")

    ifd0_offset = buffer.get_uint32(tiff_offset + 4, byte_order)
    if ifd0_offset < TIFF_HEADER_SIZE:
        raise InvalidIfd0Offset(
            f"Invalid EXIF data: IFD0 offset {ifd0_offset} must be at least {TIFF_HEADER_SIZE}"
        )
    return TiffHeader(byte_order, ifd0_offset)


def read_tag_entry(buffer: ByteBuffer, offset: int, byte_order: ByteOrder) -> TagEntry:
    """Read the 12-byte IFD entry at ``offset``."""
    return TagEntry(
        tag_id=buffer.get_uint16(offset, byte_order),
        tag_type=buffer.get_uint16(offset + 2, byte_order),
        count=buffer.get_uint32(offset + 4, byte_order),
        value_or_offset=buffer.get_uint32(offset + 8, byte_order),
    )


def decode_ifd(
    buffer: ByteBuffer,
    offset: int,
    session: ParseSession,
    tag_names: Dict[int, str],
) -> Union[IfdResult, NeedMoreData]:
    """
    Decode one IFD into a mapping of tag name (or id) to value.

    Args:
        buffer: Buffer holding the directory
        offset: File offset of the directory's entry count
        session: Current parse session (TIFF offset, byte order, options)
        tag_names: Name table of the directory's namespace

    Returns:
        The decoded tags in directory order, or NeedMoreData when the
        directory or one of its out-of-line values is not loaded
    """
    byte_order = session.byte_order
    if not buffer.covers(offset, 2):
        return NeedMoreData(offset, 2)

    entries_count = buffer.get_uint16(offset, byte_order)
    table_size = 2 + entries_count * ENTRY_SIZE
    if not buffer.covers(offset, table_size):
        # also ask for the next-IFD pointer that follows the entries
        return NeedMoreData(offset, table_size + 4)
    logger.debug("IFD at %d has %d entries", offset, entries_count)

    result: IfdResult = {}
    cursor = offset + 2
    for _ in range(entries_count):
        entry = read_tag_entry(buffer, cursor, byte_order)
        value = None
        size = tag_size(entry.tag_type)
        if size is not None:
            value_size = size * entry.count
            if value_size <= 4:
                value_offset = cursor + 8
            else:
                value_offset = session.tiff_offset + entry.value_or_offset
            if not buffer.covers(value_offset, value_size):
                return NeedMoreData(value_offset, value_size)
            value = decode_value(buffer, value_offset, entry.tag_type, entry.count, byte_order)
        else:
            logger.debug("Tag 0x%04X has unknown type %d", entry.tag_id, entry.tag_type)

        key = tag_names.get(entry.tag_id, entry.tag_id)
        if session.post_process:
            value = translate_value(key, value)
        result[key] = value
        cursor += ENTRY_SIZE
    return result
