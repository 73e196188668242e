"""Tests for the input readers."""

import base64
from pathlib import Path

import pytest
import requests

from tiffmeta import readers
from tiffmeta.exceptions import UnsupportedSourceError
from tiffmeta.options import ParseOptions
from tiffmeta.readers import Base64Reader, BytesReader, ChunkReader, FileReader, UrlReader, open_reader

DATA = bytes(range(256)) * 4


def make_response(content, status_code, url='https://example.com/image.jpg'):
    response = requests.Response()
    response.status_code = status_code
    response._content = content
    response.url = url
    return response


class TestBytesReader:
    def test_read_chunk(self):
        reader = BytesReader(DATA)
        assert reader.read_chunk(10, 4) == DATA[10:14]
        assert reader.read_chunk(1020, 100) == DATA[1020:]
        assert reader.read_chunk(5000, 10) == b''

    def test_read_first_chunk(self):
        reader = BytesReader(DATA)
        buffer = reader.read(ParseOptions({'parseChunkSize': 100}))
        assert buffer.data == DATA[:100]
        assert reader.chunked is True

    def test_short_input_is_not_chunked(self):
        reader = BytesReader(DATA)
        buffer = reader.read(ParseOptions())
        assert buffer.data == DATA
        assert reader.chunked is False

    def test_whole_file_when_needed(self):
        reader = BytesReader(DATA)
        buffer = reader.read(ParseOptions({'iptc': True, 'parseChunkSize': 100}))
        assert len(buffer) == len(DATA)
        assert reader.chunked is False

    def test_memoryview(self):
        assert BytesReader(memoryview(DATA)).read_whole() == DATA


class TestFileReader:
    def test_reads_chunks(self, tmp_path):
        path = tmp_path / 'image.jpg'
        path.write_bytes(DATA)
        with FileReader(path) as reader:
            assert reader.read_chunk(100, 3) == DATA[100:103]
            assert reader.read_chunk(0, 2) == DATA[:2]
            assert reader.read_whole() == DATA
        assert reader._handle is None

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            FileReader(tmp_path / 'missing.jpg')


class TestBase64Reader:
    def test_data_url(self):
        source = 'data:image/jpeg;base64,' + base64.b64encode(DATA).decode('ascii')
        assert Base64Reader(source).read_chunk(0, 8) == DATA[:8]

    def test_plain_base64(self):
        source = base64.b64encode(DATA).decode('ascii')
        assert Base64Reader(source).read_whole() == DATA

    def test_invalid_base64(self):
        reader = Base64Reader('data:image/jpeg;base64,abc')
        with pytest.raises(UnsupportedSourceError):
            reader.read_whole()


class TestUrlReader:
    def test_range_request(self, monkeypatch):
        calls = []

        def fake_get(url, headers, timeout):
            calls.append((url, headers, timeout))
            return make_response(DATA[100:150], 206)

        monkeypatch.setattr(readers.requests, 'get', fake_get)
        data = UrlReader('https://example.com/image.jpg').read_chunk(100, 50)
        assert data == DATA[100:150]
        assert calls == [('https://example.com/image.jpg', {'Range': 'bytes=100-149'}, 30.0)]

    def test_server_ignoring_range(self, monkeypatch):
        monkeypatch.setattr(readers.requests, 'get', lambda url, headers, timeout: make_response(DATA, 200))
        assert UrlReader('http://example.com/a.jpg').read_chunk(10, 5) == DATA[10:15]

    def test_range_past_end(self, monkeypatch):
        monkeypatch.setattr(readers.requests, 'get', lambda url, headers, timeout: make_response(b'', 416))
        assert UrlReader('http://example.com/a.jpg').read_chunk(5000, 100) == b''

    def test_http_error(self, monkeypatch):
        monkeypatch.setattr(readers.requests, 'get', lambda url, headers, timeout: make_response(b'', 404))
        with pytest.raises(requests.HTTPError):
            UrlReader('http://example.com/missing.jpg').read_chunk(0, 100)

    def test_read_whole(self, monkeypatch):
        calls = []

        def fake_get(url, headers, timeout):
            calls.append((headers, timeout))
            return make_response(DATA, 200)

        monkeypatch.setattr(readers.requests, 'get', fake_get)
        assert UrlReader('http://example.com/a.jpg', timeout=5).read_whole() == DATA
        assert calls == [({}, 5)]


class TestOpenReader:
    def test_bytes(self):
        assert isinstance(open_reader(DATA), BytesReader)
        assert isinstance(open_reader(bytearray(DATA)), BytesReader)

    def test_paths(self, tmp_path):
        path = tmp_path / 'image.tif'
        path.write_bytes(DATA)
        assert isinstance(open_reader(path), FileReader)
        assert isinstance(open_reader(str(path)), FileReader)

    def test_urls(self):
        assert isinstance(open_reader('https://example.com/image.jpg'), UrlReader)

    def test_base64(self):
        assert isinstance(open_reader('data:image/png;base64,AAAA'), Base64Reader)
        assert isinstance(open_reader('A' * 10004), Base64Reader)

    def test_existing_reader(self):
        reader = BytesReader(DATA)
        assert open_reader(reader) is reader

    def test_unsupported(self):
        with pytest.raises(UnsupportedSourceError):
            open_reader(12345)

    def test_missing_path(self):
        with pytest.raises(FileNotFoundError):
            open_reader(str(Path('does') / 'not' / 'exist.jpg'))

    def test_base_reader_is_abstract(self):
        with pytest.raises(NotImplementedError):
            ChunkReader(None).read_chunk(0, 1)
