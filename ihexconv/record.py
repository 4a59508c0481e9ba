"""
Intel HEX record codec.

One record per line:

    :LLAAAATT[DD...]CC

LL is the payload length, AAAA the 16-bit address, TT the record type,
DD the payload bytes and CC the checksum, all as hex digit pairs. The
checksum is chosen so that every byte of the record, checksum included,
sums to zero modulo 256.
"""

from __future__ import annotations

import enum
import re
from dataclasses import dataclass
from typing import Iterable, TextIO

from .errors import (
    ChecksumMismatch,
    DataLengthMismatch,
    IoWriteFailure,
    LengthTypeMismatch,
    MalformedLine,
    UnknownRecordType,
)


class RecordType(enum.IntEnum):
    DATA = 0x00
    END_OF_FILE = 0x01
    EXTENDED_SEGMENT_ADDRESS = 0x02
    START_SEGMENT_ADDRESS = 0x03
    EXTENDED_LINEAR_ADDRESS = 0x04
    START_LINEAR_ADDRESS = 0x05


# Payload length required by the address record types. DATA and
# END_OF_FILE are not constrained here.
REQUIRED_LENGTH = {
    RecordType.EXTENDED_SEGMENT_ADDRESS: 2,
    RecordType.START_SEGMENT_ADDRESS: 4,
    RecordType.EXTENDED_LINEAR_ADDRESS: 2,
    RecordType.START_LINEAR_ADDRESS: 4,
}

RECORD_RE = re.compile(
    r":([0-9A-Fa-f]{2})([0-9A-Fa-f]{2})([0-9A-Fa-f]{2})([0-9A-Fa-f]{2})"
    r"((?:[0-9A-Fa-f]{2})*)([0-9A-Fa-f]{2})"
)


def checksum(values: Iterable[int]) -> int:
    """Two's complement of the byte sum, modulo 256."""
    return -sum(values) & 0xFF


@dataclass
class Record:
    rectype: RecordType
    address: int
    data: bytes = b""
    checksum: int | None = None

    @property
    def length(self) -> int:
        return len(self.data)

    @property
    def value(self) -> int:
        """Big-endian integer carried by an address record's payload."""
        return int.from_bytes(self.data, "big")

    def header(self) -> list[int]:
        hi, lo = divmod(self.address, 256)
        return [self.length, hi, lo, int(self.rectype)]

    @classmethod
    def data_record(cls, address: int, data: bytes) -> Record:
        return cls(RecordType.DATA, address, bytes(data))

    @classmethod
    def end_of_file(cls) -> Record:
        return cls(RecordType.END_OF_FILE, 0)

    @classmethod
    def extended_segment(cls, segment: int) -> Record:
        return cls(RecordType.EXTENDED_SEGMENT_ADDRESS, 0, segment.to_bytes(2, "big"))

    @classmethod
    def extended_linear(cls, upper16: int) -> Record:
        return cls(RecordType.EXTENDED_LINEAR_ADDRESS, 0, upper16.to_bytes(2, "big"))


def parse_line(line: str) -> Record:
    """Parse and validate one HEX line.

    A trailing newline and carriage return are ignored. Raises a
    ParseError subclass naming the line on the first check that fails.
    """
    text = line.rstrip("\n")
    if text.endswith("\r"):
        text = text[:-1]

    m = RECORD_RE.fullmatch(text)
    if not m:
        raise MalformedLine(text)

    length, addr_hi, addr_lo, rectype, crc = (
        int(m.group(i), 16) for i in (1, 2, 3, 4, 6)
    )
    data = bytes.fromhex(m.group(5))

    try:
        rectype = RecordType(rectype)
    except ValueError:
        raise UnknownRecordType(text) from None

    required = REQUIRED_LENGTH.get(rectype)
    if required is not None and length != required:
        raise LengthTypeMismatch(text)

    if (length + addr_hi + addr_lo + rectype + sum(data) + crc) & 0xFF:
        raise ChecksumMismatch(text)

    if length != len(data):
        raise DataLengthMismatch(text)

    return Record(rectype, addr_hi * 256 + addr_lo, data, crc)


def format_record(record: Record) -> str:
    """Render a record as one uppercase HEX line ending in a newline.

    Length and checksum are always recomputed from the payload.
    """
    if not 0 <= record.address <= 0xFFFF:
        raise ValueError(f"record address out of range: 0x{record.address:X}")
    if record.length > 0xFF:
        raise ValueError(f"record payload too long: {record.length} bytes")

    fields = record.header() + list(record.data)
    return ":" + "".join(f"{b:02X}" for b in fields) + f"{checksum(fields):02X}\n"


def write_record(sink: TextIO, record: Record) -> None:
    try:
        sink.write(format_record(record))
    except OSError as e:
        raise IoWriteFailure(str(e)) from e
