# Copyright 2025 DNAi inc.

# Dual-licensed under the DNAi Free License v1.1 and the
# DNAi Commercial License v1.1.
# See the LICENSE files in the project root for details.

"""
Input readers

Every input source implements the same capability: return ``size`` bytes
starting at a file offset. The parser reads a first chunk (or the whole
input when scanning for XMP/ICC/IPTC) and asks for further chunks when a
directory or value lies outside what was loaded.

Sources:
- bytes, bytearray, memoryview
- local file paths
- base64 strings and ``data:`` URLs
- http(s) URLs (fetched with HTTP Range requests)

Copyright 2025 DNAi inc.
"""

import base64
import logging
import re
from pathlib import Path
from typing import Any, BinaryIO, Optional, Union

import requests

from tiffmeta.byte_buffer import ByteBuffer
from tiffmeta.exceptions import UnsupportedSourceError
from tiffmeta.options import ParseOptions

logger = logging.getLogger(__name__)

DATA_URL_PREFIX = re.compile(r'^data:([^;]+);base64,', re.IGNORECASE)
# Longer strings are treated as base64 rather than paths
BASE64_MIN_LENGTH = 10000


class ChunkReader:
    """
    Base class for input readers.

    Subclasses implement ``read_chunk`` and ``read_whole``. Readers are
    context managers; ``close`` releases any handle they hold.
    """

    def __init__(self, source: Any):
        self.source = source
        self.chunked = False

    def __enter__(self) -> 'ChunkReader':
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    def read_chunk(self, offset: int, size: int) -> bytes:
        """
        Read up to ``size`` bytes starting at file offset ``offset``.

        Fewer bytes are returned at the end of the input.
        """
        raise NotImplementedError

    def read_whole(self) -> bytes:
        raise NotImplementedError

    def read(self, options: Optional[ParseOptions] = None) -> ByteBuffer:
        """
        Load the initial contents.

        Args:
            options: Parse options (whole-file policy and first chunk size)

        Returns:
            ByteBuffer with the whole input, or its first chunk
        """
        options = options or ParseOptions()
        if options.needs_whole_file:
            self.chunked = False
            data = self.read_whole()
        else:
            data = self.read_chunk(0, options.parse_chunk_size)
            # a short first chunk is the whole input
            self.chunked = len(data) >= options.parse_chunk_size
        logger.debug("%s loaded %d bytes (chunked=%s)", type(self).__name__, len(data), self.chunked)
        return ByteBuffer(data)

    def close(self) -> None:
        pass


class BytesReader(ChunkReader):
    """Reader over bytes already in memory."""

    def __init__(self, source: Union[bytes, bytearray, memoryview]):
        super().__init__(source)
        self.data = bytes(source)

    def read_chunk(self, offset: int, size: int) -> bytes:
        return self.data[offset:offset + size]

    def read_whole(self) -> bytes:
        return self.data


class FileReader(ChunkReader):
    """Reader over a local file; the handle is opened on first use."""

    def __init__(self, source: Union[str, Path]):
        super().__init__(source)
        self.file_path = Path(source)
        if not self.file_path.exists():
            raise FileNotFoundError(f"File not found: {source}")
        self._handle: Optional[BinaryIO] = None

    def _open(self) -> BinaryIO:
        if self._handle is None:
            self._handle = open(self.file_path, 'rb')
        return self._handle

    def read_chunk(self, offset: int, size: int) -> bytes:
        handle = self._open()
        handle.seek(offset)
        return handle.read(size)

    def read_whole(self) -> bytes:
        handle = self._open()
        handle.seek(0)
        return handle.read()

    def close(self) -> None:
        if self._handle is not None:
            self._handle.close()
            self._handle = None


class Base64Reader(ChunkReader):
    """Reader over a base64 string or ``data:`` URL."""

    def __init__(self, source: str):
        super().__init__(source)
        self._data: Optional[bytes] = None

    @property
    def data(self) -> bytes:
        if self._data is None:
            encoded = DATA_URL_PREFIX.sub('', self.source.strip())
            try:
                self._data = base64.b64decode(encoded)
            except ValueError as e:
                raise UnsupportedSourceError(f"Invalid base64 input: {e}")
        return self._data

    def read_chunk(self, offset: int, size: int) -> bytes:
        return self.data[offset:offset + size]

    def read_whole(self) -> bytes:
        return self.data


class UrlReader(ChunkReader):
    """Reader over an http(s) URL; chunks are fetched with Range requests."""

    def __init__(self, source: str, timeout: float = 30.0):
        super().__init__(source)
        self.timeout = timeout

    def _fetch(self, headers: dict) -> requests.Response:
        return requests.get(self.source, headers=headers, timeout=self.timeout)

    def read_chunk(self, offset: int, size: int) -> bytes:
        # Range end is inclusive
        headers = {'Range': f'bytes={offset}-{offset + size - 1}'}
        response = self._fetch(headers)
        if response.status_code == 416:
            # range starts past the end of the resource
            return b''
        response.raise_for_status()
        data = response.content
        if response.status_code != 206:
            # server ignored the Range header and sent everything
            data = data[offset:offset + size]
        logger.debug("Fetched %d bytes at %d from %s", len(data), offset, self.source)
        return data

    def read_whole(self) -> bytes:
        response = self._fetch({})
        response.raise_for_status()
        return response.content


def is_base64_string(source: str) -> bool:
    return source.startswith('data:') or len(source) > BASE64_MIN_LENGTH


def open_reader(source: Any) -> ChunkReader:
    """
    Pick the reader for an input.

    Args:
        source: bytes-like data, a path, an http(s) URL, a base64 string,
            or an existing ChunkReader

    Returns:
        ChunkReader for the input

    Raises:
        UnsupportedSourceError: If the input type is not supported
        FileNotFoundError: If a path does not exist
    """
    if isinstance(source, ChunkReader):
        return source
    if isinstance(source, (bytes, bytearray, memoryview)):
        return BytesReader(source)
    if isinstance(source, Path):
        return FileReader(source)
    if isinstance(source, str):
        if is_base64_string(source):
            return Base64Reader(source)
        if source.startswith(('http://', 'https://')):
            return UrlReader(source)
        return FileReader(source)
    raise UnsupportedSourceError(f"Invalid input argument: {type(source).__name__}")
