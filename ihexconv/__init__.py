"""Intel HEX <-> binary conversion."""

from .convert import Result, bin_to_ihex, ihex_to_bin
from .emit import emit_records, iter_records
from .errors import (
    AddressOverflow,
    ChecksumMismatch,
    ConversionError,
    DataLengthMismatch,
    IoError,
    IoOpenFailure,
    IoReadFailure,
    IoWriteFailure,
    LengthTypeMismatch,
    MalformedLine,
    ParseError,
    UnknownRecordType,
)
from .image import AddressSpace, Reconstructor
from .record import Record, RecordType, format_record, parse_line, write_record

__version__ = "0.1.0"
