# Copyright 2025 DNAi inc.

# Dual-licensed under the DNAi Free License v1.1 and the
# DNAi Commercial License v1.1.
# See the LICENSE files in the project root for details.

"""
Byte buffer accessor

Endian-aware integer reads and slicing over the bytes loaded from an image.
A buffer starts with the chunk read from the beginning of the file and can
receive further chunks at arbitrary file offsets while parsing.

Copyright 2025 DNAi inc.
"""

import struct
from enum import Enum
from typing import List, Tuple, Union

from tiffmeta.exceptions import ValueOffsetOutOfRange


class ByteOrder(Enum):
    """TIFF byte order; the value is the matching struct prefix."""
    LITTLE = '<'
    BIG = '>'


BytesLike = Union[bytes, bytearray, memoryview]


class ByteBuffer:
    """
    Random-access view over one or more loaded regions of a file.

    Offsets are always file offsets. Regions that touch or overlap are
    merged, so reads never have to span two regions.
    """

    def __init__(self, data: BytesLike = b'', offset: int = 0):
        """
        Initialize the buffer.

        Args:
            data: Initial bytes
            offset: File offset of the first byte of ``data``
        """
        self._regions: List[Tuple[int, bytes]] = []
        if data:
            self.add_chunk(offset, data)

    def __len__(self) -> int:
        if not self._regions:
            return 0
        start, data = self._regions[-1]
        return start + len(data)

    def __repr__(self) -> str:
        spans = ', '.join(f'{start}-{start + len(data)}' for start, data in self._regions)
        return f'ByteBuffer([{spans}])'

    @property
    def data(self) -> bytes:
        """Bytes of the region that starts at offset 0 (empty if none)."""
        if self._regions and self._regions[0][0] == 0:
            return self._regions[0][1]
        return b''

    @property
    def regions(self) -> List[Tuple[int, int]]:
        """Loaded ``(start, end)`` spans in file order."""
        return [(start, start + len(data)) for start, data in self._regions]

    def add_chunk(self, offset: int, data: BytesLike) -> None:
        """
        Load ``data`` at file offset ``offset``.

        Args:
            offset: File offset of the first byte of ``data``
            data: Chunk bytes; newer bytes win where regions overlap
        """
        if offset < 0:
            raise ValueError(f"Chunk offset must not be negative: {offset}")
        new_start = offset
        new_data = bytes(data)
        if not new_data:
            return

        kept = []
        for start, existing in self._regions:
            end = start + len(existing)
            new_end = new_start + len(new_data)
            if start <= new_end and new_start <= end:
                union_start = min(start, new_start)
                merged = bytearray(max(end, new_end) - union_start)
                merged[start - union_start:end - union_start] = existing
                merged[new_start - union_start:new_end - union_start] = new_data
                new_start, new_data = union_start, bytes(merged)
            else:
                kept.append((start, existing))
        kept.append((new_start, new_data))
        kept.sort(key=lambda region: region[0])
        self._regions = kept

    def covers(self, offset: int, size: int = 1) -> bool:
        """Return True when ``[offset, offset + size)`` is loaded."""
        if offset < 0 or size < 0:
            return False
        for start, data in self._regions:
            if start <= offset and offset + size <= start + len(data):
                return True
        return False

    def _locate(self, offset: int, size: int) -> Tuple[bytes, int]:
        if offset >= 0 and size >= 0:
            for start, data in self._regions:
                if start <= offset and offset + size <= start + len(data):
                    return data, offset - start
        raise ValueOffsetOutOfRange(offset, size)

    def _unpack(self, fmt: str, size: int, offset: int) -> int:
        data, position = self._locate(offset, size)
        return struct.unpack_from(fmt, data, position)[0]

    def get_uint8(self, offset: int) -> int:
        return self._unpack('B', 1, offset)

    def get_int8(self, offset: int) -> int:
        return self._unpack('b', 1, offset)

    def get_uint16(self, offset: int, byte_order: ByteOrder = ByteOrder.BIG) -> int:
        return self._unpack(f'{byte_order.value}H', 2, offset)

    def get_int16(self, offset: int, byte_order: ByteOrder = ByteOrder.BIG) -> int:
        return self._unpack(f'{byte_order.value}h', 2, offset)

    def get_uint32(self, offset: int, byte_order: ByteOrder = ByteOrder.BIG) -> int:
        return self._unpack(f'{byte_order.value}I', 4, offset)

    def get_int32(self, offset: int, byte_order: ByteOrder = ByteOrder.BIG) -> int:
        return self._unpack(f'{byte_order.value}i', 4, offset)

    def slice(self, start: int, end: int) -> bytes:
        """
        Copy the bytes in ``[start, end)``.

        Raises:
            ValueOffsetOutOfRange: If any part of the range is not loaded
        """
        size = end - start
        data, position = self._locate(start, size)
        return data[position:position + size]

    def to_string(self, start: int, end: int, encoding: str = 'utf-8') -> str:
        """Decode the bytes in ``[start, end)`` as text."""
        return self.slice(start, end).decode(encoding, errors='replace')
