"""Errors raised while converting Intel HEX files."""

from __future__ import annotations


class ConversionError(Exception):
    """Base class for everything that aborts a conversion."""


class ParseError(ConversionError):
    """A HEX line was rejected. ``line`` holds the offending text."""

    reason = "Error in line"

    def __init__(self, line: str, reason: str | None = None):
        self.line = line
        if reason is not None:
            self.reason = reason
        super().__init__(f"{self.reason}: {line}")


class MalformedLine(ParseError):
    reason = "Malformed record"


class UnknownRecordType(ParseError):
    reason = "Unknown record type"


class LengthTypeMismatch(ParseError):
    reason = "Record type does not match its length"


class ChecksumMismatch(ParseError):
    reason = "Checksum mismatch"


class DataLengthMismatch(ParseError):
    reason = "Data length mismatch"


class AddressOverflow(ConversionError):
    pass


class IoError(ConversionError):
    pass


class IoOpenFailure(IoError):
    pass


class IoWriteFailure(IoError):
    pass


class IoReadFailure(IoError):
    pass
