"""
Exceptions module for genoscan.
Defines custom exception classes for better error handling.
"""


class GenoscanError(Exception):
    """Base exception class for all genoscan errors."""

    def __init__(self, message="An error occurred in genoscan", details=None):
        self.message = message
        self.details = details
        super().__init__(self.message)

    def __str__(self):
        if self.details:
            return f"{self.message}: {self.details}"
        return self.message


class FormatError(GenoscanError):
    """Exception raised when a raw data file cannot be matched to a decoder."""

    def __init__(self, message="Unsupported raw data format", details=None):
        super().__init__(message, details)


class FormatUndetected(FormatError):
    """Exception raised when neither known header marker is found in the first line."""

    def __init__(self, message="Unable to determine the filetype from the header", details=None):
        super().__init__(message, details)


class UnsupportedLargeFile(FormatError):
    """Exception raised for files over the large-file threshold without a .vcf extension."""

    def __init__(self, message="Large file is not a vcf file", details=None):
        super().__init__(message, details)


class ReadFault(GenoscanError):
    """Exception raised when the raw data file cannot be read."""

    def __init__(self, message="An error occurred while reading the file", details=None):
        super().__init__(message, details)


class DecodeFault(GenoscanError):
    """Exception raised when a row decoder fails while processing a chunk."""

    def __init__(self, message="An error occurred while parsing the file", details=None, chunk_index=None):
        self.chunk_index = chunk_index
        super().__init__(message, details)


class ReferenceDataError(GenoscanError):
    """Exception raised for a missing, malformed or empty reference dataset."""

    def __init__(self, message="Error loading reference dataset", details=None):
        super().__init__(message, details)


class ParserStateError(GenoscanError):
    """Exception raised when a parser is used outside its single-shot lifecycle."""

    def __init__(self, message="Parser is not ready", details=None):
        super().__init__(message, details)


class ReportingError(GenoscanError):
    """Exception raised for errors related to report generation."""

    def __init__(self, message="Error generating report", details=None):
        super().__init__(message, details)
