import pytest

from ihexconv.errors import AddressOverflow, ChecksumMismatch, MalformedLine
from ihexconv.image import AddressSpace, Reconstructor
from ihexconv.record import Record, RecordType, format_record


def lines(*records):
    return [format_record(r) for r in records]


def test_address_space():
    space = AddressSpace()
    assert not space
    assert space.to_bytes() == b""

    space.write(0x20, b"\x01\x02")
    space.write(0x10, b"\x03")
    assert space
    assert len(space) == 3
    assert (space.lowest, space.highest) == (0x10, 0x22)
    assert space.get(0x20) == 0x01
    assert space.get(0x18) == 0xFF
    assert space.get(0x18, 0x00) == 0x00
    assert space.to_bytes(0x00) == b"\x03" + bytes(15) + b"\x01\x02"


def test_address_space_ignores_empty_write():
    space = AddressSpace()
    space.write(0x100, b"")
    assert not space


def test_gap_filling():
    rec = Reconstructor()
    rec.feed_lines(lines(
        Record.data_record(0x00, b"\x01\x02\x03\x04"),
        Record.data_record(0x10, b"\x05\x06\x07\x08"),
        Record.end_of_file(),
    ))
    out = rec.finalize()
    assert len(out) == 20
    assert out == b"\x01\x02\x03\x04" + b"\xff" * 12 + b"\x05\x06\x07\x08"


def test_custom_filler():
    rec = Reconstructor(filler=0x00)
    rec.feed_lines(lines(
        Record.data_record(0x00, b"\xAA"),
        Record.data_record(0x02, b"\xBB"),
    ))
    assert rec.finalize() == b"\xAA\x00\xBB"


def test_filler_out_of_range():
    with pytest.raises(ValueError):
        Reconstructor(filler=0x100)


def test_range_starts_at_lowest_written():
    rec = Reconstructor()
    rec.feed_lines(lines(
        Record.data_record(0x1004, b"\x02"),
        Record.data_record(0x1000, b"\x01"),
    ))
    assert rec.finalize() == b"\x01\xff\xff\xff\x02"


def test_no_data_gives_empty_image():
    rec = Reconstructor()
    rec.feed_lines(lines(Record.extended_linear(0x0800), Record.end_of_file()))
    assert rec.finalize() == b""
    assert rec.seen_eof


def test_extended_linear_address():
    rec = Reconstructor()
    rec.feed_lines(lines(
        Record.extended_linear(0x0001),
        Record.data_record(0x0010, b"\x42"),
    ))
    assert rec.image.lowest == 0x10010
    assert rec.finalize() == b"\x42"


def test_extended_segment_address():
    rec = Reconstructor()
    rec.feed(Record.extended_segment(0x1000))
    rec.feed(Record.data_record(0x0004, b"\x42"))
    assert rec.image.lowest == 0x10004


def test_segment_and_linear_are_additive():
    rec = Reconstructor()
    rec.feed(Record.extended_linear(0x0001))
    rec.feed(Record.extended_segment(0x1000))
    rec.feed(Record.data_record(0x0004, b"\x42"))
    assert rec.image.lowest == 0x10000 + 0x10000 + 0x4


def test_start_records_do_not_change_state():
    rec = Reconstructor()
    assert rec.feed(Record(RecordType.START_LINEAR_ADDRESS, 0, b"\x00\x01\x00\x00"))
    assert rec.feed(Record(RecordType.START_SEGMENT_ADDRESS, 0, b"\x10\x00\x00\x00"))
    assert (rec.segment_base, rec.linear_upper16) == (0, 0)
    assert not rec.image


def test_records_after_eof_are_ignored():
    rec = Reconstructor()
    rec.feed_lines(
        lines(Record.data_record(0, b"\x01"), Record.end_of_file())
        + ["this is not a record\n"]
        + lines(Record.data_record(1, b"\x02"))
    )
    assert rec.finalize() == b"\x01"
    assert rec.feed(Record.data_record(2, b"\x03")) is False
    assert rec.finalize() == b"\x01"


def test_blank_line_is_rejected():
    rec = Reconstructor()
    with pytest.raises(MalformedLine):
        rec.feed_lines([":0300300002337A1E\r\n", "   \n", ":00000001FF\n"])
    with pytest.raises(MalformedLine):
        Reconstructor().feed_lines(["\n"])


def test_parse_errors_propagate():
    rec = Reconstructor()
    with pytest.raises(ChecksumMismatch):
        rec.feed_lines([":0300300002337A1F\n"])
    with pytest.raises(MalformedLine):
        rec.feed_lines(["garbage\n"])


def test_address_overflow():
    rec = Reconstructor()
    rec.feed(Record.extended_linear(0xFFFF))
    rec.feed(Record.data_record(0xFFFE, b"\x01\x02"))
    assert rec.image.highest == 1 << 32
    with pytest.raises(AddressOverflow):
        rec.feed(Record.data_record(0xFFFF, b"\x01\x02"))
