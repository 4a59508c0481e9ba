"""
Rebuild a flat binary image from Intel HEX records.

Records map data onto a 32-bit address space. Data bytes are collected
in a sparse mapping while the lowest and highest written offsets are
tracked, so the used range can be extracted once all records are in.
"""

from __future__ import annotations

from typing import Iterable

from .errors import AddressOverflow
from .record import Record, RecordType, parse_line

ADDRESS_LIMIT = 1 << 32


class AddressSpace:
    """Sparse offset -> byte mapping."""

    def __init__(self):
        self.mem: dict[int, int] = {}
        self.lowest: int | None = None
        self.highest = 0  # one past the last written offset

    def __len__(self) -> int:
        return len(self.mem)

    def __bool__(self) -> bool:
        return self.lowest is not None

    def write(self, offset: int, data: bytes) -> None:
        end = offset + len(data)
        if offset < 0 or end > ADDRESS_LIMIT:
            raise AddressOverflow(
                f"Data at 0x{offset:X} ({len(data)} bytes) runs past the 32-bit address space"
            )
        for i, b in enumerate(data):
            self.mem[offset + i] = b
        if not data:
            return
        if self.lowest is None or offset < self.lowest:
            self.lowest = offset
        if end > self.highest:
            self.highest = end

    def get(self, offset: int, filler: int = 0xFF) -> int:
        return self.mem.get(offset, filler)

    def to_bytes(self, filler: int = 0xFF) -> bytes:
        if self.lowest is None:
            return b""
        return bytes(self.get(a, filler) for a in range(self.lowest, self.highest))


class Reconstructor:
    """Feed parsed records in file order, then call finalize()."""

    def __init__(self, filler: int = 0xFF):
        if not 0 <= filler <= 0xFF:
            raise ValueError(f"filler byte out of range: {filler}")
        self.filler = filler
        self.image = AddressSpace()
        self.segment_base = 0
        self.linear_upper16 = 0
        self._eof = False

    @property
    def seen_eof(self) -> bool:
        return self._eof

    def offset(self, record: Record) -> int:
        # Segment and linear bases are additive; real files use one of them.
        return self.linear_upper16 * 65536 + self.segment_base * 16 + record.address

    def feed(self, record: Record) -> bool:
        """Apply one record. Returns False once the end of file is reached."""
        if self._eof:
            return False

        rectype = record.rectype
        if rectype == RecordType.DATA:
            self.image.write(self.offset(record), record.data)
        elif rectype == RecordType.EXTENDED_SEGMENT_ADDRESS:
            self.segment_base = record.value
        elif rectype == RecordType.EXTENDED_LINEAR_ADDRESS:
            self.linear_upper16 = record.value
        elif rectype == RecordType.END_OF_FILE:
            self._eof = True
            return False
        # START_SEGMENT_ADDRESS / START_LINEAR_ADDRESS: entry points, ignored
        return True

    def feed_lines(self, lines: Iterable[str]) -> None:
        for line in lines:
            if not self.feed(parse_line(line)):
                break

    def finalize(self) -> bytes:
        return self.image.to_bytes(self.filler)
