"""
Turn a binary image into Intel HEX records.

Data goes out in 16-byte records. An extended linear address record is
written first, even for an empty image, and again whenever the upper 16
bits of the address change; chunks are checked between records, never split.
"""

from __future__ import annotations

from typing import BinaryIO, Iterable, Iterator, TextIO

from .errors import AddressOverflow, IoReadFailure
from .record import Record, RecordType, write_record

RECORD_SIZE = 16
ADDRESS_LIMIT = 1 << 32


def read_chunks(stream: BinaryIO, size: int = RECORD_SIZE) -> Iterator[bytes]:
    while True:
        try:
            chunk = stream.read(size)
        except OSError as e:
            raise IoReadFailure(str(e)) from e
        if not chunk:
            return
        yield chunk


def iter_records(chunks: Iterable[bytes], address: int = 0) -> Iterator[Record]:
    if not 0 <= address < ADDRESS_LIMIT:
        raise ValueError(f"start address out of range: 0x{address:X}")

    prev_upper16 = address // 65536
    yield Record.extended_linear(prev_upper16)

    for chunk in chunks:
        if not chunk:
            continue
        if address + len(chunk) > ADDRESS_LIMIT:
            raise AddressOverflow(
                f"Data at 0x{address:X} ({len(chunk)} bytes) runs past the 32-bit address space"
            )
        upper16 = address // 65536
        if upper16 != prev_upper16:
            prev_upper16 = upper16
            yield Record.extended_linear(upper16)
        yield Record.data_record(address % 65536, chunk)
        address += len(chunk)

    yield Record.end_of_file()


def emit_records(sink: TextIO, chunks: Iterable[bytes], address: int = 0) -> int:
    """Write the HEX form of ``chunks`` to ``sink``. Returns the data byte count."""
    count = 0
    for record in iter_records(chunks, address):
        write_record(sink, record)
        if record.rectype == RecordType.DATA:
            count += record.length
    return count
