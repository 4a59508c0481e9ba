"""
File-level conversions between Intel HEX and raw binary.

Both entry points return a Result instead of raising, so callers can
decide whether to report, retry or abort. An output file that was
created before a failure is always removed again.
"""

from __future__ import annotations

import os
from contextlib import contextmanager
from pathlib import Path
from typing import IO, Iterator, NamedTuple, Union

from .emit import emit_records, read_chunks
from .errors import ConversionError, IoOpenFailure, IoReadFailure, IoWriteFailure
from .image import Reconstructor

PathLike = Union[str, "os.PathLike[str]"]


class Result(NamedTuple):
    ok: bool
    message: str = ""

    def __bool__(self) -> bool:
        return self.ok


def _open_input(path: PathLike, mode: str) -> IO:
    try:
        if "b" in mode:
            return open(path, mode)
        return open(path, mode, encoding="ascii", errors="replace")
    except OSError as e:
        raise IoOpenFailure(f"Couldn't open input file for reading: {e}") from e


@contextmanager
def _output(path: PathLike, mode: str) -> Iterator[IO]:
    """Open ``path`` for writing; delete it again if the block fails."""
    try:
        if "b" in mode:
            f = open(path, mode)
        else:
            f = open(path, mode, encoding="ascii", newline="\n")
    except OSError as e:
        raise IoOpenFailure(f"Couldn't open output file for writing: {e}") from e

    try:
        with f:
            yield f
    except BaseException as e:
        Path(path).unlink(missing_ok=True)
        if isinstance(e, OSError):
            raise IoWriteFailure(str(e)) from e
        raise


def _lines(f: IO[str]) -> Iterator[str]:
    try:
        yield from f
    except OSError as e:
        raise IoReadFailure(str(e)) from e


def ihex_to_bin(input_path: PathLike, output_path: PathLike, filler: int = 0xFF) -> Result:
    """Convert an Intel HEX file into a binary file.

    The input is parsed completely before the output is created, so a
    rejected HEX file never leaves an output file behind.
    """
    try:
        rec = Reconstructor(filler)
        with _open_input(input_path, "r") as f:
            rec.feed_lines(_lines(f))
        data = rec.finalize()

        with _output(output_path, "wb") as out:
            out.write(data)
    except (ConversionError, ValueError) as e:
        return Result(False, str(e))

    return Result(True, f"Wrote {len(data)} bytes to {output_path}")


def bin_to_ihex(input_path: PathLike, output_path: PathLike, start_address: int = 0) -> Result:
    """Convert a binary file into an Intel HEX file.

    ``start_address`` is the address of the first byte of the input.
    """
    try:
        if not 0 <= start_address <= 0xFFFFFFFF:
            raise ValueError(f"start address out of range: 0x{start_address:X}")
        with _open_input(input_path, "rb") as f, _output(output_path, "w") as out:
            count = emit_records(out, read_chunks(f), start_address)
    except (ConversionError, ValueError) as e:
        return Result(False, str(e))

    return Result(True, f"Wrote {count} data bytes to {output_path}")
