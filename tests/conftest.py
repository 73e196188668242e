"""Shared fixtures: builders for synthetic TIFF and JPEG files."""

import struct

import pytest

BYTE, ASCII, SHORT, LONG, RATIONAL, SBYTE, UNDEFINED, SSHORT, SLONG, SRATIONAL = range(1, 11)

_FORMATS = {
    BYTE: 'B',
    SHORT: 'H',
    LONG: 'I',
    SBYTE: 'b',
    SSHORT: 'h',
    SLONG: 'i',
}


def make_entry(tag, tag_type, values, endian='<'):
    """Return an IFD entry tuple ``(tag, type, count, raw_value_bytes)``."""
    if tag_type == ASCII:
        raw = values.encode('latin-1') if isinstance(values, str) else bytes(values)
        return tag, tag_type, len(raw), raw
    if tag_type == UNDEFINED:
        raw = bytes(values)
        return tag, tag_type, len(raw), raw
    if not isinstance(values, (list, tuple)) or (tag_type in (RATIONAL, SRATIONAL) and isinstance(values[0], int)):
        values = [values]
    if tag_type in (RATIONAL, SRATIONAL):
        fmt = 'I' if tag_type == RATIONAL else 'i'
        raw = b''.join(struct.pack(f'{endian}{fmt}{fmt}', num, den) for num, den in values)
    else:
        raw = struct.pack(f'{endian}{len(values)}{_FORMATS[tag_type]}', *values)
    return tag, tag_type, len(values), raw


def ifd_size(entries):
    size = 2 + 12 * len(entries) + 4
    for _, _, _, raw in entries:
        if len(raw) > 4:
            size += len(raw)
    return size


def pack_ifd(entries, offset, endian='<', next_ifd=0):
    """Pack an IFD placed at TIFF-relative ``offset``, out-of-line values after it."""
    table = struct.pack(f'{endian}H', len(entries))
    data_offset = offset + 2 + 12 * len(entries) + 4
    data = b''
    for tag, tag_type, count, raw in entries:
        if len(raw) <= 4:
            value = raw.ljust(4, b'\x00')
        else:
            value = struct.pack(f'{endian}I', data_offset + len(data))
            data += raw
        table += struct.pack(f'{endian}HHI', tag, tag_type, count) + value
    table += struct.pack(f'{endian}I', next_ifd)
    return table + data


def build_tiff(ifd0, endian='<', exif=None, gps=None, interop=None, ifd1=None,
               interop_in_exif=False, padding=0):
    """
    Build a TIFF block.

    Sub-IFDs are laid out after IFD0 (and ``padding`` zero bytes) in the
    order exif, gps, interop, ifd1; the pointer tags are added automatically.
    """
    marker = b'II' if endian == '<' else b'MM'
    ifd0 = list(ifd0)
    exif = list(exif) if exif is not None else None

    def with_pointers(entries, pointers):
        entries = list(entries) + [make_entry(tag, LONG, [value], endian) for tag, value in pointers]
        return sorted(entries, key=lambda entry: entry[0])

    def layout(pointer_values):
        ifd0_pointers = []
        if exif is not None:
            ifd0_pointers.append((0x8769, pointer_values.get('exif', 0)))
        if gps is not None:
            ifd0_pointers.append((0x8825, pointer_values.get('gps', 0)))
        if interop is not None and not interop_in_exif:
            ifd0_pointers.append((0xA005, pointer_values.get('interop', 0)))
        blocks = [('ifd0', with_pointers(ifd0, ifd0_pointers))]
        if exif is not None:
            exif_pointers = []
            if interop is not None and interop_in_exif:
                exif_pointers.append((0xA005, pointer_values.get('interop', 0)))
            blocks.append(('exif', with_pointers(exif, exif_pointers)))
        if gps is not None:
            blocks.append(('gps', list(gps)))
        if interop is not None:
            blocks.append(('interop', list(interop)))
        if ifd1 is not None:
            blocks.append(('ifd1', list(ifd1)))
        return blocks

    offsets = {}
    offset = 8
    for name, entries in layout({}):
        offsets[name] = offset
        offset += ifd_size(entries)
        if name == 'ifd0':
            offset += padding

    body = b''
    for name, entries in layout(offsets):
        next_ifd = offsets.get('ifd1', 0) if name == 'ifd0' else 0
        packed = pack_ifd(entries, offsets[name], endian, next_ifd)
        body += packed
        if name == 'ifd0':
            body += b'\x00' * padding

    header = marker + struct.pack(f'{endian}HI', 42, 8)
    return header + body


def build_iptc(records):
    """Pack ``(dataset, text)`` pairs as IPTC application records."""
    data = b''
    for tag, text in records:
        raw = text.encode('utf-8')
        data += b'\x1c\x02' + bytes([tag]) + struct.pack('>H', len(raw)) + raw
    return data


XMP_PACKET = (
    '<?xpacket begin="﻿" id="W5M0MpCehiHzreSzNTczkc9d"?>'
    '<x:xmpmeta xmlns:x="adobe:ns:meta/"><rdf:RDF xmlns:rdf="http://www.w3.org/1999/02/22-rdf-syntax-ns#">'
    '<rdf:Description rdf:about="" xmlns:xmp="http://ns.adobe.com/xap/1.0/" xmp:Rating="5"/>'
    '</rdf:RDF></x:xmpmeta>'
    '<?xpacket end="w"?>'
)


def build_jpeg(tiff=None, xmp=None, iptc=None):
    """Wrap metadata blocks into APP1/APP13 segments of a minimal JPEG."""
    data = b'\xff\xd8'
    data += b'\xff\xe0' + struct.pack('>H', 16) + b'JFIF\x00\x01\x01\x00\x00\x01\x00\x01\x00\x00'
    if tiff is not None:
        payload = b'Exif\x00\x00' + tiff
        data += b'\xff\xe1' + struct.pack('>H', len(payload) + 2) + payload
    if xmp is not None:
        payload = b'http://ns.adobe.com/xap/1.0/\x00' + xmp.encode('utf-8')
        data += b'\xff\xe1' + struct.pack('>H', len(payload) + 2) + payload
    if iptc is not None:
        resource = b'8BIM\x04\x04\x00\x00' + struct.pack('>I', len(iptc)) + iptc
        if len(iptc) % 2:
            resource += b'\x00'
        payload = b'Photoshop 3.0\x00' + resource
        data += b'\xff\xed' + struct.pack('>H', len(payload) + 2) + payload
    data += b'\xff\xda' + struct.pack('>H', 8) + b'\x00' * 64 + b'\xff\xd9'
    return data


@pytest.fixture
def camera_tiff():
    """Little-endian TIFF with IFD0, Exif, GPS, Interop and IFD1 blocks."""
    endian = '<'
    ifd0 = [
        make_entry(0x010F, ASCII, 'Canon\x00', endian),
        make_entry(0x0110, ASCII, 'EOS 5D\x00', endian),
        make_entry(0x0112, SHORT, [6], endian),
        make_entry(0x011A, RATIONAL, [(72, 1)], endian),
        make_entry(0x0132, ASCII, '2021:06:15 10:20:30\x00', endian),
    ]
    exif = [
        make_entry(0x829A, RATIONAL, [(1, 250)], endian),
        make_entry(0x8827, SHORT, [400], endian),
        make_entry(0x9000, UNDEFINED, b'0230', endian),
        make_entry(0x9003, ASCII, '2021:06:15 10:20:30\x00', endian),
        make_entry(0x9209, SHORT, [0x19], endian),
    ]
    gps = [
        make_entry(0x0000, BYTE, [2, 3, 0, 0], endian),
        make_entry(0x0001, ASCII, 'S\x00', endian),
        make_entry(0x0002, RATIONAL, [(40, 1), (26, 1), (46, 1)], endian),
        make_entry(0x0003, ASCII, 'W\x00', endian),
        make_entry(0x0004, RATIONAL, [(79, 1), (58, 1), (56, 1)], endian),
        make_entry(0x0007, RATIONAL, [(12, 1), (30, 1), (45, 1)], endian),
        make_entry(0x001D, ASCII, '2021:06:15\x00', endian),
    ]
    interop = [
        make_entry(0x0001, ASCII, 'R98\x00', endian),
    ]
    ifd1 = [
        make_entry(0x0103, SHORT, [6], endian),
        make_entry(0x0201, LONG, [1234], endian),
    ]
    return build_tiff(ifd0, endian, exif=exif, gps=gps, interop=interop, ifd1=ifd1, interop_in_exif=True)
