# Copyright 2025 DNAi inc.

# Dual-licensed under the DNAi Free License v1.1 and the
# DNAi Commercial License v1.1.
# See the LICENSE files in the project root for details.

"""
EXIF metadata parser

This module sequences the decoding of the metadata blocks of a JPEG or
TIFF file. Structure of the TIFF block (APP1-EXIF in JPEG files):

- FF E1 - marker
- xx xx - size
- 45 78 69 66 00 00 - ASCII string 'Exif\\0\\0'
- TIFF header (byte order, 0x002A, IFD0 offset)
- IFD0 + values, followed by the offset of IFD1 (thumbnail)
- Exif, GPS and Interoperability sub-IFDs pointed to from IFD0

XMP (APP1) and IPTC (APP13) blocks are located and decoded independently.

Copyright 2025 DNAi inc.
"""

import logging
from typing import Any, Callable, Dict, List, Optional, Tuple, Union

from tiffmeta.byte_buffer import ByteBuffer
from tiffmeta.exceptions import MetadataReadError, ValueOffsetOutOfRange
from tiffmeta.exif_tags import EXIF_TAG_NAMES, GPS_TAG_NAMES, POINTER_TAGS
from tiffmeta.ifd_decoder import (
    ENTRY_SIZE,
    TIFF_HEADER_SIZE,
    IfdResult,
    NeedMoreData,
    ParseSession,
    decode_ifd,
    read_tiff_header,
)
from tiffmeta.iptc_parser import parse_iptc
from tiffmeta.options import ParseOptions, process_options
from tiffmeta.readers import ChunkReader
from tiffmeta.segment_locator import SegmentRange, locate
from tiffmeta.value_translator import convert_dms_to_dd, revive_date
from tiffmeta.xmp_parser import extract_xmp

logger = logging.getLogger(__name__)

# Blocks merged into the flat output, later ones win on key collisions
MERGED_BLOCKS = ('image', 'exif', 'gps', 'interop', 'iptc')
NESTED_BLOCKS = ('image', 'thumbnail', 'exif', 'gps', 'interop', 'iptc')


def _dms_to_decimal(value: Any, ref: Any) -> Optional[float]:
    if not isinstance(value, (list, tuple)) or len(value) != 3:
        return None
    degrees, minutes, seconds = value
    return convert_dms_to_dd(degrees, minutes, seconds, ref)


class ExifParser:
    """
    Parser for the TIFF/EXIF, XMP and IPTC blocks of an image.

    A parser can be reused; every ``parse`` call starts a new ParseSession
    and resets the decoded blocks.

    Example:
        >>> parser = ExifParser({'iptc': True})
        >>> result = parser.parse(jpeg_bytes)
        >>> result['Make']
        'Canon'
    """

    def __init__(
        self,
        options: Union[None, bool, Dict[str, Any], ParseOptions] = None,
        parse_xml: Optional[Callable[[str], Any]] = None,
        reader: Optional[ChunkReader] = None,
        strict: bool = False,
    ):
        """
        Initialize the parser.

        Args:
            options: Parse options (see ParseOptions)
            parse_xml: Optional function applied to the trimmed XMP text
            reader: Reader used to fetch chunks that are not yet loaded;
                without one, out-of-range directories fail
            strict: Raise the first block error instead of recording it
        """
        self.options = process_options(options)
        self.parse_xml = parse_xml
        self.reader = reader
        self.strict = strict
        self.errors: List[Tuple[str, MetadataReadError]] = []
        self._reset()

    def _reset(self) -> None:
        self.image: Optional[IfdResult] = None
        self.thumbnail: Optional[IfdResult] = None
        self.exif: Optional[IfdResult] = None
        self.gps: Optional[IfdResult] = None
        self.interop: Optional[IfdResult] = None
        self.iptc: Optional[Dict[Union[str, int], Any]] = None
        self.xmp: Any = None
        self.errors = []

    def parse(
        self,
        buffer: Union[ByteBuffer, bytes, bytearray, memoryview],
        tiff_position: Optional[SegmentRange] = None,
    ) -> Optional[Dict[str, Any]]:
        """
        Decode every enabled block of ``buffer``.

        Args:
            buffer: Image bytes (or the first chunk of them)
            tiff_position: Known location of the TIFF block; located by
                scanning when omitted

        Returns:
            Merged or nested metadata, or None when nothing was found

        Raises:
            MetadataReadError: Only in strict mode
        """
        if not isinstance(buffer, ByteBuffer):
            buffer = ByteBuffer(buffer)
        self._reset()
        session = ParseSession(buffer, post_process=self.options.post_process)

        enabled = self.options.enabled_blocks
        if enabled['tiff']:
            self._parse_tiff(session, tiff_position, enabled)
        segments = (
            ('xmp', self._parse_xmp_segment),
            ('icc', self._parse_icc_segment),
            ('iptc', self._parse_iptc_segment),
        )
        for name, method in segments:
            if enabled[name]:
                self._run_block(name, method, session)
        return self.get_result()

    def get_result(self) -> Optional[Dict[str, Any]]:
        """
        Assemble the decoded blocks.

        In merge mode the image, exif, gps, interop and iptc mappings are
        combined into one (the thumbnail is never merged); otherwise the
        result is keyed by block name. XMP is always stored under ``xmp``.
        """
        result: Dict[str, Any] = {}
        if self.options.merge_output:
            for name in MERGED_BLOCKS:
                block = getattr(self, name)
                if block:
                    result.update(block)
        else:
            for name in NESTED_BLOCKS:
                block = getattr(self, name)
                if block is not None:
                    result[name] = block
        if self.xmp is not None:
            result['xmp'] = self.xmp
        # None rather than an empty dict when there's no data
        if not result:
            return None
        return result

    def _run_block(self, name: str, method: Callable[[ParseSession], None], session: ParseSession) -> bool:
        try:
            method(session)
            return True
        except MetadataReadError as e:
            self._record_error(name, e)
            return False

    def _record_error(self, name: str, error: MetadataReadError) -> None:
        if self.strict:
            raise error
        logger.warning("Failed to decode %s block: %s", name, error)
        self.errors.append((name, error))

    # ------------------------------------------------------------------
    # Chunk loading
    # ------------------------------------------------------------------

    def _load_chunk(self, session: ParseSession, need: NeedMoreData) -> None:
        """
        Fetch a chunk anchored at ``need.offset``.

        Raises:
            ValueOffsetOutOfRange: If there is no reader, the fetch budget is
                spent, or the reader cannot supply the bytes
        """
        if self.reader is None or session.chunk_reads >= self.options.max_chunk_reads:
            raise ValueOffsetOutOfRange(need.offset, need.min_size)
        size = max(self.options.chunk_size, need.min_size)
        logger.debug("Reading chunk of %d bytes at %d", size, need.offset)
        data = self.reader.read_chunk(need.offset, size)
        session.chunk_reads += 1
        if data:
            session.buffer.add_chunk(need.offset, data)
        if not session.buffer.covers(need.offset, need.min_size):
            raise ValueOffsetOutOfRange(need.offset, need.min_size)

    def _ensure_loaded(self, session: ParseSession, offset: int, size: int) -> None:
        if not session.buffer.covers(offset, size):
            self._load_chunk(session, NeedMoreData(offset, size))

    def _decode_ifd(self, session: ParseSession, offset: int, tag_names: Dict[int, str]) -> IfdResult:
        while True:
            result = decode_ifd(session.buffer, offset, session, tag_names)
            if not isinstance(result, NeedMoreData):
                return result
            self._load_chunk(session, result)

    # ------------------------------------------------------------------
    # TIFF blocks
    # ------------------------------------------------------------------

    def _parse_tiff(
        self,
        session: ParseSession,
        tiff_position: Optional[SegmentRange],
        enabled: Dict[str, bool],
    ) -> None:
        if not self._run_block('image', lambda s: self._parse_app1_segment(s, tiff_position), session):
            return
        # No TIFF block, or an empty IFD0 (images created from scratch in some editors)
        if self.image is None or not session.ifd0_entries:
            return
        blocks = (
            ('exif', self._parse_exif_block),
            ('gps', self._parse_gps_block),
            ('interop', self._parse_interop_block),
            ('thumbnail', self._parse_thumbnail_block),
        )
        for name, method in blocks:
            if enabled[name]:
                self._run_block(name, method, session)

    def _parse_app1_segment(self, session: ParseSession, tiff_position: Optional[SegmentRange]) -> None:
        """
        Locate the TIFF block, read its header and decode IFD0.

        IFD0 holds basic image info (width, height, make, model) and the
        pointers to the other IFDs.
        """
        position = tiff_position or locate(session.buffer, 'tiff')
        if position is None:
            return
        session.tiff_offset = position.start

        self._ensure_loaded(session, session.tiff_offset, TIFF_HEADER_SIZE)
        header = read_tiff_header(session.buffer, session.tiff_offset)
        session.byte_order = header.byte_order
        session.ifd0_offset = header.ifd0_offset

        ifd0 = self._decode_ifd(session, session.tiff_offset + header.ifd0_offset, EXIF_TAG_NAMES)
        self.image = ifd0
        session.ifd0_entries = len(ifd0)
        if not ifd0:
            return

        session.exif_ifd_pointer = ifd0.get('ExifIFDPointer')
        session.gps_info_ifd_pointer = ifd0.get('GPSInfoIFDPointer')
        session.interoperability_ifd_pointer = ifd0.get('InteroperabilityIFDPointer')
        logger.debug(
            "IFD0 pointers: exif=%s gps=%s interop=%s",
            session.exif_ifd_pointer, session.gps_info_ifd_pointer, session.interoperability_ifd_pointer,
        )

        if session.post_process:
            for tag in POINTER_TAGS:
                ifd0.pop(tag, None)

    def _parse_exif_block(self, session: ParseSession) -> None:
        """Exif sub-IFD (0x8769)."""
        if session.exif_ifd_pointer is None:
            return
        self.exif = self._decode_ifd(session, session.tiff_offset + session.exif_ifd_pointer, EXIF_TAG_NAMES)

    def _parse_gps_block(self, session: ParseSession) -> None:
        """
        GPS sub-IFD (0x8825).

        With post-processing, a ``timestamp`` is derived from GPSDateStamp and
        GPSTimeStamp, and decimal ``latitude``/``longitude`` from the DMS
        triples and their hemisphere references.
        """
        if session.gps_info_ifd_pointer is None:
            return
        gps = self._decode_ifd(session, session.tiff_offset + session.gps_info_ifd_pointer, GPS_TAG_NAMES)
        self.gps = gps
        if not session.post_process:
            return
        if gps.get('GPSDateStamp') and gps.get('GPSTimeStamp'):
            gps['timestamp'] = revive_date(f"{gps['GPSDateStamp']} {gps['GPSTimeStamp']}")
        if gps.get('GPSLatitude') is not None:
            gps['latitude'] = _dms_to_decimal(gps['GPSLatitude'], gps.get('GPSLatitudeRef'))
        if gps.get('GPSLongitude') is not None:
            gps['longitude'] = _dms_to_decimal(gps['GPSLongitude'], gps.get('GPSLongitudeRef'))

    def _parse_interop_block(self, session: ParseSession) -> None:
        """Interoperability sub-IFD (0xA005); its pointer may live in IFD0 or the Exif IFD."""
        pointer = session.interoperability_ifd_pointer
        if pointer is None and self.exif:
            pointer = self.exif.get('InteroperabilityIFDPointer')
        if pointer is None:
            return
        session.interoperability_ifd_pointer = pointer
        self.interop = self._decode_ifd(session, session.tiff_offset + pointer, EXIF_TAG_NAMES)

    def _parse_thumbnail_block(self, session: ParseSession) -> None:
        """IFD1, whose offset follows the last entry of IFD0."""
        # Thumbnail data is never merged into the flat output
        if self.options.merge_output:
            return
        buffer = session.buffer
        ifd0_start = session.tiff_offset + session.ifd0_offset
        ifd0_entries = buffer.get_uint16(ifd0_start, session.byte_order)
        next_ifd_position = ifd0_start + 2 + ifd0_entries * ENTRY_SIZE
        self._ensure_loaded(session, next_ifd_position, 4)
        session.ifd1_offset = buffer.get_uint32(next_ifd_position, session.byte_order)
        if not session.ifd1_offset:
            return
        self.thumbnail = self._decode_ifd(session, session.tiff_offset + session.ifd1_offset, EXIF_TAG_NAMES)

    # ------------------------------------------------------------------
    # XMP, ICC, IPTC
    # ------------------------------------------------------------------

    def _parse_xmp_segment(self, session: ParseSession) -> None:
        position = locate(session.buffer, 'xmp')
        if position is None:
            return
        self.xmp = extract_xmp(session.buffer, position, session.post_process, self.parse_xml)

    def _parse_icc_segment(self, session: ParseSession) -> None:
        # ICC profiles are located only; decoding them is not supported
        locate(session.buffer, 'icc')

    def _parse_iptc_segment(self, session: ParseSession) -> None:
        position = locate(session.buffer, 'iptc')
        if position is None:
            return
        self.iptc = parse_iptc(session.buffer, position)
