"""
Format detection module for genoscan.

Classifies a raw data file as 23andMe, AncestryDNA or VCF and builds the
ParseConfig the streaming parser runs with. Detection only ever reads the
first line of a file, and skips reading entirely for large files.
"""

import io
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import BinaryIO, Callable, Union

from genoscan.decoders import ANCESTRY_DNA, TWENTY_THREE_AND_ME, VCF, RowDecoder, decoder_for
from genoscan.exceptions import FormatUndetected, ReadFault, UnsupportedLargeFile

# Configure logging
log = logging.getLogger("genoscan")

# Files above this size are streamed as VCF without inspecting their content
LARGE_FILE_THRESHOLD = 1024 * 1024 * 100  # 100 MiB
# Byte window for normal-size files
CHUNK_SIZE = 1024 * 50  # 50 KiB
# Byte window the row engine falls back to for large files
ENGINE_DEFAULT_CHUNK_SIZE = 1024 * 1024 * 10  # 10 MiB

TWENTY_THREE_AND_ME_MARKER = "generated by 23andMe"
ANCESTRY_DNA_MARKER = "#AncestryDNA raw data download"

LARGE_FILE_EXTENSION = "vcf"
# Upper bound on the bytes read while looking for the first line break
MAX_HEADER_BYTES = 64 * 1024


class SourceFile:
    """
    Raw data file handle: a name, a byte size and a way to open it.

    Every call to ``open`` returns a fresh binary stream positioned at the
    start of the file, so probing a file never disturbs a later parse.
    """

    def __init__(self, name: str, size: int, opener: Callable[[], BinaryIO]):
        self.name = name
        self.size = size
        self._opener = opener

    @classmethod
    def from_path(cls, path: Union[str, Path]) -> "SourceFile":
        path = Path(path)
        try:
            size = os.path.getsize(path)
        except OSError as e:
            error_msg = f"Raw data file not readable: {path}"
            log.error(error_msg)
            raise ReadFault(error_msg, details=str(e)) from e
        return cls(path.name, size, lambda: open(path, 'rb'))

    @classmethod
    def from_bytes(cls, name: str, data: bytes) -> "SourceFile":
        return cls(name, len(data), lambda: io.BytesIO(data))

    @property
    def extension(self) -> str:
        """Text after the last dot of the name ("" when there is none)."""
        if "." not in self.name:
            return ""
        return self.name.rsplit(".", 1)[-1]

    def open(self) -> BinaryIO:
        return self._opener()

    def __repr__(self):
        return f"SourceFile({self.name!r}, size={self.size})"


@dataclass(frozen=True)
class ParseConfig:
    """Settings for one parse, fixed once the source format is known."""

    source_format: str
    decoder: RowDecoder
    delimiter: str
    chunk_size: int
    file_size: int


def read_first_line(source: SourceFile, limit: int = MAX_HEADER_BYTES) -> str:
    """
    Read the first line of a file as text.

    Args:
        source: File to inspect
        limit: Maximum number of bytes to read

    Returns:
        The first line without its line terminator or byte order mark
    """
    try:
        with source.open() as stream:
            raw = stream.readline(limit)
    except OSError as e:
        error_msg = f"Error reading header of {source.name}"
        log.error(f"{error_msg}: {e}")
        raise ReadFault(error_msg, details=str(e)) from e

    return raw.decode('utf-8', errors='replace').lstrip('\ufeff').rstrip('\r\n')


def _config(source_format: str, source: SourceFile, chunk_size: int) -> ParseConfig:
    decoder = decoder_for(source_format)
    return ParseConfig(
        source_format=source_format,
        decoder=decoder,
        delimiter=decoder.delimiter,
        chunk_size=chunk_size,
        file_size=source.size
    )


def detect_format(source: SourceFile) -> ParseConfig:
    """
    Determine which decoder and delimiter to parse a file with.

    Args:
        source: File to classify

    Returns:
        ParseConfig for the detected format

    Raises:
        UnsupportedLargeFile: Large file without a .vcf extension
        FormatUndetected: No known header marker in the first line
        ReadFault: The first line could not be read
    """
    log.info(f"File size={source.size}")

    if source.size > LARGE_FILE_THRESHOLD:
        log.info(f"Streaming large file={source.name}")
        if source.extension != LARGE_FILE_EXTENSION:
            error_msg = "Large file is not a vcf file"
            log.error(f"{error_msg}: {source.name}")
            raise UnsupportedLargeFile(error_msg, details=source.name)
        return _config(VCF, source, ENGINE_DEFAULT_CHUNK_SIZE)

    first_line = read_first_line(source)
    if TWENTY_THREE_AND_ME_MARKER in first_line:
        log.debug("detected 23andme data")
        return _config(TWENTY_THREE_AND_ME, source, CHUNK_SIZE)
    if ANCESTRY_DNA_MARKER in first_line:
        log.debug("detected ancestry data")
        return _config(ANCESTRY_DNA, source, CHUNK_SIZE)

    error_msg = "Unable to determine the filetype from the header"
    log.error(f"{error_msg}: {source.name}")
    raise FormatUndetected(error_msg, details=source.name)
