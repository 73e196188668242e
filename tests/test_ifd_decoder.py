"""Tests for the TIFF header reader and the IFD decoder."""

import struct

import pytest

from tests.conftest import ASCII, LONG, RATIONAL, SHORT, build_tiff, make_entry, pack_ifd
from tiffmeta.byte_buffer import ByteBuffer, ByteOrder
from tiffmeta.exceptions import InvalidByteOrderMarker, InvalidIfd0Offset, InvalidMagicNumber
from tiffmeta.exif_tags import EXIF_TAG_NAMES
from tiffmeta.ifd_decoder import NeedMoreData, ParseSession, decode_ifd, read_tag_entry, read_tiff_header


def _session(buffer, byte_order=ByteOrder.LITTLE, post_process=False):
    return ParseSession(buffer, byte_order=byte_order, post_process=post_process)


class TestReadTiffHeader:
    def test_little_endian(self):
        header = read_tiff_header(ByteBuffer(b'II*\x00\x08\x00\x00\x00'), 0)
        assert header.byte_order == ByteOrder.LITTLE
        assert header.ifd0_offset == 8

    def test_big_endian(self):
        header = read_tiff_header(ByteBuffer(b'MM\x00*\x00\x00\x00\x10'), 0)
        assert header.byte_order == ByteOrder.BIG
        assert header.ifd0_offset == 16

    def test_header_at_offset(self):
        buffer = ByteBuffer(b'\x00' * 30 + b'II*\x00\x08\x00\x00\x00')
        assert read_tiff_header(buffer, 30).ifd0_offset == 8

    def test_invalid_byte_order_marker(self):
        with pytest.raises(InvalidByteOrderMarker):
            read_tiff_header(ByteBuffer(b'XX*\x00\x08\x00\x00\x00'), 0)

    def test_invalid_magic(self):
        with pytest.raises(InvalidMagicNumber):
            read_tiff_header(ByteBuffer(b'II\x2b\x00\x08\x00\x00\x00'), 0)

    def test_ifd0_inside_header(self):
        with pytest.raises(InvalidIfd0Offset):
            read_tiff_header(ByteBuffer(b'II*\x00\x04\x00\x00\x00'), 0)


class TestReadTagEntry:
    def test_fields(self):
        buffer = ByteBuffer(struct.pack('<HHII', 0x0112, 3, 1, 6))
        entry = read_tag_entry(buffer, 0, ByteOrder.LITTLE)
        assert (entry.tag_id, entry.tag_type, entry.count, entry.value_or_offset) == (0x0112, 3, 1, 6)


class TestDecodeIfd:
    @pytest.mark.parametrize('endian,byte_order', [('<', ByteOrder.LITTLE), ('>', ByteOrder.BIG)])
    def test_round_trip(self, endian, byte_order):
        entries = [
            make_entry(0x010F, ASCII, 'Canon\x00', endian),
            make_entry(0x0112, SHORT, [6], endian),
            make_entry(0x011A, RATIONAL, [(300, 1)], endian),
            make_entry(0x0213, SHORT, [2], endian),
            make_entry(0x0100, LONG, [4000], endian),
        ]
        buffer = ByteBuffer(build_tiff(entries, endian))
        result = decode_ifd(buffer, 8, _session(buffer, byte_order), EXIF_TAG_NAMES)
        assert result == {
            'Make': 'Canon',
            'Orientation': 6,
            'XResolution': 300.0,
            'YCbCrPositioning': 2,
            'ImageWidth': 4000,
        }

    def test_keys_keep_directory_order(self):
        entries = [make_entry(0x0112, SHORT, [1]), make_entry(0x010F, ASCII, 'A\x00')]
        buffer = ByteBuffer(b'II*\x00\x08\x00\x00\x00' + pack_ifd(entries, 8))
        result = decode_ifd(buffer, 8, _session(buffer), EXIF_TAG_NAMES)
        assert list(result) == ['Orientation', 'Make']

    def test_empty_directory(self):
        buffer = ByteBuffer(build_tiff([]))
        assert decode_ifd(buffer, 8, _session(buffer), EXIF_TAG_NAMES) == {}

    def test_unknown_tag_keeps_numeric_id(self):
        buffer = ByteBuffer(build_tiff([make_entry(0xBEEF, SHORT, [7])]))
        assert decode_ifd(buffer, 8, _session(buffer), EXIF_TAG_NAMES) == {0xBEEF: 7}

    def test_unknown_type_decodes_to_none(self):
        buffer = ByteBuffer(b'II*\x00\x08\x00\x00\x00' + pack_ifd([(0x010F, 99, 1, b'\x00' * 4)], 8))
        assert decode_ifd(buffer, 8, _session(buffer), EXIF_TAG_NAMES) == {'Make': None}

    def test_offsets_are_relative_to_tiff_start(self):
        tiff = build_tiff([make_entry(0x010F, ASCII, 'Olympus\x00')])
        buffer = ByteBuffer(b'\x00' * 30 + tiff)
        session = _session(buffer)
        session.tiff_offset = 30
        assert decode_ifd(buffer, 38, session, EXIF_TAG_NAMES) == {'Make': 'Olympus'}

    def test_post_process_translates_values(self):
        entries = [make_entry(0x0112, SHORT, [6]), make_entry(0x0132, ASCII, '2020:01:02 03:04:05\x00')]
        buffer = ByteBuffer(build_tiff(entries))
        result = decode_ifd(buffer, 8, _session(buffer, post_process=True), EXIF_TAG_NAMES)
        assert result['Orientation'] == 'Rotate 90 CW'
        assert result['DateTime'].year == 2020


class TestNeedMoreData:
    def test_missing_entry_count(self):
        buffer = ByteBuffer(build_tiff([make_entry(0x0112, SHORT, [1])])[:8])
        assert decode_ifd(buffer, 8, _session(buffer), EXIF_TAG_NAMES) == NeedMoreData(8, 2)

    def test_missing_entry_table(self):
        entries = [make_entry(0x0112, SHORT, [1]), make_entry(0x0100, SHORT, [640])]
        buffer = ByteBuffer(build_tiff(entries)[:20])
        # two entries plus the next-IFD pointer
        assert decode_ifd(buffer, 8, _session(buffer), EXIF_TAG_NAMES) == NeedMoreData(8, 2 + 24 + 4)

    def test_missing_out_of_line_value(self):
        entries = [make_entry(0x010F, ASCII, 'Panasonic\x00'), make_entry(0x0112, SHORT, [1])]
        table_end = 8 + 2 + 24 + 4
        buffer = ByteBuffer(build_tiff(entries)[:table_end])
        assert decode_ifd(buffer, 8, _session(buffer), EXIF_TAG_NAMES) == NeedMoreData(table_end, 10)

    def test_resumes_after_chunk_added(self):
        tiff = build_tiff([make_entry(0x010F, ASCII, 'Panasonic\x00')])
        buffer = ByteBuffer(tiff[:26])
        need = decode_ifd(buffer, 8, _session(buffer), EXIF_TAG_NAMES)
        assert isinstance(need, NeedMoreData)
        buffer.add_chunk(need.offset, tiff[need.offset:need.offset + need.min_size])
        assert decode_ifd(buffer, 8, _session(buffer), EXIF_TAG_NAMES) == {'Make': 'Panasonic'}
