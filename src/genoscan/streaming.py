"""
Streaming module for genoscan.
Parses raw data files in fixed-size byte chunks with bounded memory usage.
"""

import codecs
import io
import logging
import time
from enum import Enum
from typing import Any, BinaryIO, Callable, Iterator, List, Optional, Sequence

import pandas as pd

from genoscan.detection import ParseConfig, SourceFile, detect_format
from genoscan.exceptions import DecodeFault, GenoscanError, ParserStateError, ReadFault
from genoscan.models import GeneVariant

# Configure logging
log = logging.getLogger("genoscan")

# Longest line carried over between chunks before the input is rejected
MAX_LINE_LENGTH = 1024 * 1024 * 8  # 8 Mi characters
# Field appended to every line so the true field count of each row survives padding
ROW_END = "\x03"


class Chunk:
    """Complete lines decoded from one byte window of the input."""

    __slots__ = ("index", "text")

    def __init__(self, index: int, text: str):
        self.index = index
        self.text = text

    def __repr__(self):
        return f"Chunk(index={self.index}, chars={len(self.text)})"


class ChunkReader:
    """
    Delimiter-aware reader yielding a binary stream chunk by chunk.

    Each chunk covers one read of ``chunk_size`` bytes. A line cut by the end
    of a window is carried over and completed by the next one, so every line
    is whole and is delivered exactly once. Nothing is read ahead of the
    chunk being handed out. An unterminated last line is delivered in a
    final chunk after the stream is exhausted.
    """

    def __init__(
        self,
        stream: BinaryIO,
        chunk_size: int,
        delimiter: str,
        dynamic_typing: bool = False,
        max_line_length: int = MAX_LINE_LENGTH
    ):
        if chunk_size <= 0:
            raise ValueError(f"chunk_size must be positive, got {chunk_size}")
        self.stream = stream
        self.chunk_size = chunk_size
        self.delimiter = delimiter
        self.dynamic_typing = dynamic_typing
        self.max_line_length = max_line_length

    def _read(self) -> bytes:
        try:
            return self.stream.read(self.chunk_size)
        except OSError as e:
            error_msg = "An error occurred while reading the file"
            log.error(f"{error_msg}: {e}")
            raise ReadFault(error_msg, details=str(e)) from e

    def split_rows(self, text: str) -> List[List[Any]]:
        """
        Split the complete lines of a chunk into rows with pandas.

        Blank lines are dropped and quoted fields are honoured. Fields are
        kept as text unless dynamic typing is enabled, in which case pandas
        infers numeric columns and empty fields become None.

        Args:
            text: Complete lines of one chunk

        Returns:
            List of rows, each with the number of fields found on its line

        Raises:
            ValueError: The lines could not be split (pandas ParserError included)
        """
        lines = [line.rstrip('\r') for line in text.split('\n')]
        lines = [line for line in lines if line.strip()]
        if not lines:
            return []

        width = max(line.count(self.delimiter) for line in lines) + 2
        framed = "".join(f"{line}{self.delimiter}{ROW_END}\n" for line in lines)

        options = {"dtype_backend": "numpy_nullable"} if self.dynamic_typing else {"dtype": str}
        frame = pd.read_csv(
            io.StringIO(framed),
            sep=self.delimiter,
            header=None,
            names=list(range(width)),
            index_col=False,
            lineterminator="\n",
            keep_default_na=False,
            **options
        )

        if len(frame) != len(lines):
            raise ValueError(f"Expected {len(lines)} rows, found {len(frame)}")
        return [self._trim(values) for values in frame.itertuples(index=False, name=None)]

    def _trim(self, values: Sequence[Any]) -> List[Any]:
        for end, value in enumerate(values):
            if isinstance(value, str) and value == ROW_END:
                row = list(values[:end])
                if self.dynamic_typing:
                    return [None if field == "" else field for field in row]
                return row
        raise ValueError("Unbalanced quote in row")

    def __iter__(self) -> Iterator[Chunk]:
        decoder = codecs.getincrementaldecoder('utf-8')(errors='replace')
        partial = ""
        at_start = True
        index = 0

        while True:
            data = self._read()
            if not data:
                break

            text = partial + decoder.decode(data)
            if at_start and text:
                text = text.lstrip('\ufeff')
                at_start = False

            cut = text.rfind('\n') + 1
            partial = text[cut:]
            if len(partial) > self.max_line_length:
                error_msg = f"Line longer than {self.max_line_length} characters"
                log.error(f"{error_msg} in chunk {index}")
                raise ReadFault(error_msg, details=f"chunk {index}")

            yield Chunk(index, text[:cut])
            index += 1

        tail = partial + decoder.decode(b"", final=True)
        if at_start:
            tail = tail.lstrip('\ufeff')
        if tail.strip():
            yield Chunk(index, tail)


class ParseState(Enum):
    """Lifecycle of a single parse operation."""

    IDLE = "idle"
    DETECTING = "detecting"
    DETECT_FAILED = "detect_failed"
    READY = "ready"
    STREAMING = "streaming"
    ABORTED_ON_DECODE_FAULT = "aborted_on_decode_fault"
    ABORTED_ON_READ_FAULT = "aborted_on_read_fault"
    COMPLETED = "completed"


class GeneDataParser:
    """
    Streaming parser for a single raw data file.

    A parser is single-shot: it detects the file format once, streams the
    file once and never returns to an earlier state. Chunks are processed
    strictly in order on the calling thread, and the progress callback is
    invoked synchronously after each chunk is read.
    """

    def __init__(self, source: SourceFile, reference, dynamic_typing: bool = False):
        """
        Initialize the parser.

        Args:
            source: Raw data file to parse
            reference: ReferenceDataset the decoders look identifiers up in
            dynamic_typing: Type numeric-looking fields while splitting rows
        """
        self.source = source
        self.reference = reference
        self.dynamic_typing = dynamic_typing
        self.config: Optional[ParseConfig] = None
        self.state = ParseState.IDLE

    @classmethod
    def from_source(cls, source: SourceFile, reference, dynamic_typing: bool = False) -> "GeneDataParser":
        """Create a parser and run format detection on it."""
        parser = cls(source, reference, dynamic_typing=dynamic_typing)
        parser.detect()
        return parser

    def detect(self) -> ParseConfig:
        """
        Detect the source format.

        Returns:
            ParseConfig selected for the file
        """
        if self.state is not ParseState.IDLE:
            raise ParserStateError("Format detection already ran", details=self.state.value)

        self.state = ParseState.DETECTING
        try:
            self.config = detect_format(self.source)
        except GenoscanError:
            self.state = ParseState.DETECT_FAILED
            raise

        self.state = ParseState.READY
        log.info(f"Detected {self.config.source_format} data in {self.source.name}")
        return self.config

    def parse(
        self,
        progress_callback: Optional[Callable[[float], None]] = None,
        completion_callback: Optional[Callable[[], None]] = None
    ) -> List[GeneVariant]:
        """
        Stream the file and decode every chunk.

        Progress is reported as each chunk is read, as the nominal number of
        bytes consumed over the file size, capped at 100. The completion
        callback runs once, only when every chunk was decoded.

        Args:
            progress_callback: Called with a percentage after each chunk
            completion_callback: Called once when the parse completes

        Returns:
            All variants decoded from the file, before notable filtering

        Raises:
            ReadFault: The file could not be read
            DecodeFault: A chunk could not be split or decoded; no partial result is kept
        """
        if self.state is not ParseState.READY:
            raise ParserStateError("Parser is not ready to stream", details=self.state.value)

        config = self.config
        self.state = ParseState.STREAMING

        variants: List[GeneVariant] = []
        processed_size = 0
        chunk_count = 0
        start_time = time.time()

        try:
            with self._open() as stream:
                reader = ChunkReader(
                    stream,
                    chunk_size=config.chunk_size,
                    delimiter=config.delimiter,
                    dynamic_typing=self.dynamic_typing
                )
                for chunk in reader:
                    chunk_count += 1
                    processed_size += config.chunk_size

                    if progress_callback:
                        progress_callback(self._progress(processed_size, config.file_size))

                    # A chunk that cannot be split is a decode fault
                    try:
                        rows = reader.split_rows(chunk.text)
                        found = config.decoder.decode(rows, self.reference)
                    except Exception as e:
                        self.state = ParseState.ABORTED_ON_DECODE_FAULT
                        error_msg = "An error occurred while parsing the file"
                        log.error(f"Error while parsing chunk {chunk.index}: {e}")
                        raise DecodeFault(error_msg, details=str(e), chunk_index=chunk.index) from e

                    variants.extend(found)
        except ReadFault:
            self.state = ParseState.ABORTED_ON_READ_FAULT
            raise

        self.state = ParseState.COMPLETED

        processing_time = time.time() - start_time
        log.info(
            f"Parsed {chunk_count:,} chunks of {self.source.name} in {processing_time:.2f}s, "
            f"{len(variants):,} reference variants found"
        )

        if completion_callback:
            completion_callback()
        return variants

    def _open(self) -> BinaryIO:
        try:
            return self.source.open()
        except OSError as e:
            error_msg = f"Error opening {self.source.name}"
            log.error(f"{error_msg}: {e}")
            raise ReadFault(error_msg, details=str(e)) from e

    @staticmethod
    def _progress(processed_size: int, file_size: int) -> float:
        if file_size <= 0:
            return 100.0
        return min(processed_size / file_size * 100, 100.0)


def parse_file(
    source: SourceFile,
    reference,
    progress_callback: Optional[Callable[[float], None]] = None,
    dynamic_typing: bool = False
) -> List[GeneVariant]:
    """
    Detect and parse a raw data file in one call.

    Args:
        source: Raw data file to parse
        reference: ReferenceDataset to match identifiers against
        progress_callback: Optional callback for progress updates
        dynamic_typing: Type numeric-looking fields while splitting rows

    Returns:
        All variants decoded from the file, before notable filtering
    """
    parser = GeneDataParser.from_source(source, reference, dynamic_typing=dynamic_typing)
    return parser.parse(progress_callback)
