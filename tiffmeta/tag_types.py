# Copyright 2025 DNAi inc.

# Dual-licensed under the DNAi Free License v1.1 and the
# DNAi Commercial License v1.1.
# See the LICENSE files in the project root for details.

"""
TIFF tag value decoding

Decodes the value of a single IFD entry according to its TIFF 6.0 type code.

Copyright 2025 DNAi inc.
"""

from enum import IntEnum
from typing import Any, List, Optional, Union

from tiffmeta.byte_buffer import ByteBuffer, ByteOrder


class TiffTagType(IntEnum):
    """TIFF tag data types"""
    BYTE = 1
    ASCII = 2
    SHORT = 3
    LONG = 4
    RATIONAL = 5
    SBYTE = 6
    UNDEFINED = 7
    SSHORT = 8
    SLONG = 9
    SRATIONAL = 10


# Tag sizes in bytes (per element)
TAG_SIZES = {
    TiffTagType.BYTE: 1,
    TiffTagType.ASCII: 1,
    TiffTagType.SHORT: 2,
    TiffTagType.LONG: 4,
    TiffTagType.RATIONAL: 8,
    TiffTagType.SBYTE: 1,
    TiffTagType.UNDEFINED: 1,
    TiffTagType.SSHORT: 2,
    TiffTagType.SLONG: 4,
    TiffTagType.SRATIONAL: 8,
}

Scalar = Union[int, float]
DecodedValue = Union[Scalar, str, bytes, List[Scalar], None]


def tag_size(tag_type: int) -> Optional[int]:
    """Return the element width of a type code, or None if it is unknown."""
    try:
        return TAG_SIZES[TiffTagType(tag_type)]
    except ValueError:
        return None


def _divide(numerator: int, denominator: int) -> float:
    # float division with IEEE results for a zero denominator
    if denominator == 0:
        if numerator == 0:
            return float('nan')
        return float('inf') if numerator > 0 else float('-inf')
    return numerator / denominator


def decode_scalar(buffer: ByteBuffer, offset: int, tag_type: int, byte_order: ByteOrder) -> Any:
    """
    Decode one numeric element at ``offset``.

    Rationals decode to the float quotient ``numerator / denominator``.
    """
    if tag_type == TiffTagType.BYTE:
        return buffer.get_uint8(offset)
    if tag_type == TiffTagType.SHORT:
        return buffer.get_uint16(offset, byte_order)
    if tag_type == TiffTagType.LONG:
        return buffer.get_uint32(offset, byte_order)
    if tag_type == TiffTagType.RATIONAL:
        return _divide(buffer.get_uint32(offset, byte_order), buffer.get_uint32(offset + 4, byte_order))
    if tag_type == TiffTagType.SBYTE:
        return buffer.get_int8(offset)
    if tag_type == TiffTagType.SSHORT:
        return buffer.get_int16(offset, byte_order)
    if tag_type == TiffTagType.SLONG:
        return buffer.get_int32(offset, byte_order)
    if tag_type == TiffTagType.SRATIONAL:
        return _divide(buffer.get_int32(offset, byte_order), buffer.get_int32(offset + 4, byte_order))
    return None


def decode_value(
    buffer: ByteBuffer,
    value_offset: int,
    tag_type: int,
    count: int,
    byte_order: ByteOrder,
) -> DecodedValue:
    """
    Decode a tag value.

    Args:
        buffer: Buffer holding the value
        value_offset: File offset of the first element
        tag_type: TIFF type code
        count: Number of elements
        byte_order: Byte order of the TIFF block

    Returns:
        ASCII: text with one trailing NUL removed, decoded as UTF-8 or,
            when that fails, Latin-1
        UNDEFINED: the raw bytes
        numeric types: a scalar for count 1, otherwise a list
        unknown types: None

    Raises:
        ValueOffsetOutOfRange: If the value is not loaded
    """
    if tag_type == TiffTagType.ASCII:
        raw = buffer.slice(value_offset, value_offset + count)
        if raw.endswith(b'\x00'):
            raw = raw[:-1]
        try:
            return raw.decode('utf-8')
        except UnicodeDecodeError:
            # legacy 8-bit text (Make, Artist, Copyright) is mostly Latin-1
            return raw.decode('latin-1')

    if tag_type == TiffTagType.UNDEFINED:
        return buffer.slice(value_offset, value_offset + count)

    size = tag_size(tag_type)
    if size is None:
        return None

    if count == 1:
        return decode_scalar(buffer, value_offset, tag_type, byte_order)
    values = []
    cursor = value_offset
    for _ in range(count):
        values.append(decode_scalar(buffer, cursor, tag_type, byte_order))
        cursor += size
    return values
