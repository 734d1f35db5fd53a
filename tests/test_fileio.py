import io
import math

import pytest

from nxtarm.fileio import (
    TokenReader,
    TokenWriter,
    is_whitespace,
    open_read,
    open_write,
    parse_float,
    parse_int,
)

SAMPLE = b"A B   C GENE_121\r\n-425 3.6\r\n-35.25\r\n\r\nomega"


def _reader(data: bytes) -> TokenReader:
    return TokenReader(io.BytesIO(data))


class _KeepOpen(io.BytesIO):
    def close(self):
        pass


def test_reads_sample_file_in_order():
    reader = _reader(SAMPLE)
    assert reader.read_char() == "A"
    assert reader.read_char() == "B"
    assert reader.read_char() == "C"
    assert reader.read_text() == "GENE_121"
    assert reader.read_int() == -425
    assert reader.read_float() == pytest.approx(3.6)
    assert reader.read_float() == pytest.approx(-35.25)
    assert reader.read_text() == "omega"
    with pytest.raises(EOFError):
        reader.read_text()


def test_read_byte_returns_raw_bytes_then_eof():
    reader = _reader(b" A")
    assert reader.read_byte() == ord(" ")
    assert reader.read_byte() == ord("A")
    with pytest.raises(EOFError):
        reader.read_byte()


def test_read_char_skips_nulls_and_whitespace():
    reader = _reader(b"\x00\t\r\n x")
    assert reader.read_char() == "x"


def test_read_char_at_eof_raises():
    with pytest.raises(EOFError):
        _reader(b"  \r\n").read_char()


def test_read_text_only_whitespace_raises():
    with pytest.raises(EOFError):
        _reader(b"\t\t\x00").read_text()


def test_long_word_is_truncated_and_next_byte_lost():
    word = "abcdefghijklmnopqrstuvwxy"
    reader = _reader(word.encode())
    assert reader.read_text() == word[:20]
    assert reader.read_text() == word[21:]


def test_word_of_exactly_twenty_consumes_delimiter():
    word = "x" * 20
    reader = _reader((word + " next").encode())
    assert reader.read_text() == word
    assert reader.read_text() == "next"


def test_iteration_yields_all_words():
    assert list(_reader(SAMPLE)) == ["A", "B", "C", "GENE_121", "-425", "3.6", "-35.25", "omega"]


@pytest.mark.parametrize("value", [0, 1, -1, 5000, 999999999, -1000000001])
def test_parse_int_round_trip(value):
    assert parse_int(str(value)) == value


def test_parse_int_stops_at_non_digit_like_atoi():
    assert parse_int("12abc") == 12
    assert parse_int("abc") == 0
    assert parse_int("3.9") == 3


@pytest.mark.parametrize("value", [0.5, -35.25, 3.6, 1e-3, 6.789])
def test_parse_float_round_trip(value):
    assert parse_float(repr(value)) == value


def test_parse_float_prefix_and_garbage():
    assert parse_float("2.5x") == 2.5
    assert parse_float("word") == 0.0
    assert math.isinf(parse_float("inf"))


@pytest.mark.parametrize("byte", [0, 9, 10, 13, 32, " ", "\t"])
def test_whitespace_characters(byte):
    assert is_whitespace(byte) is True


@pytest.mark.parametrize("byte", ["A", "_", "-", 48])
def test_non_whitespace_characters(byte):
    assert is_whitespace(byte) is False


def test_is_whitespace_rejects_multi_character_string():
    with pytest.raises(ValueError):
        is_whitespace("ab")


def test_writer_produces_expected_bytes():
    stream = _KeepOpen()
    writer = TokenWriter(stream)
    writer.write_char("A")
    writer.write_endl()
    writer.write_char("B")
    writer.write_endl()
    writer.write_text("Hello")
    writer.write_endl()
    writer.write_char("4")
    writer.write_char("2")
    writer.write_endl()
    writer.write_long(5000)
    writer.write_char(" ")
    writer.write_float(math.pi)
    writer.write_char(" ")
    writer.write_float(6.789, "%.2f")
    writer.write_endl()
    assert stream.getvalue() == b"A\r\nB\r\nHello\r\n42\r\n5000 3.141593 6.79\r\n"


def test_write_char_accepts_byte_value():
    stream = _KeepOpen()
    TokenWriter(stream).write_char(ord("Z"))
    assert stream.getvalue() == b"Z"


def test_written_numbers_read_back():
    stream = _KeepOpen()
    writer = TokenWriter(stream)
    values = []
    i = 1
    while i <= 1000000000:
        for n in (i - 1, i, i + 1):
            writer.write_long(n)
            writer.write_char(" ")
            writer.write_long(-n)
            writer.write_endl()
            values.extend([n, -n])
        i *= 10
    reader = _reader(stream.getvalue())
    assert [reader.read_int() for _ in values] == values
    with pytest.raises(EOFError):
        reader.read_int()


def test_file_round_trip(tmp_path):
    path = tmp_path / "points.txt"
    path.write_bytes(b"stale content that must vanish")
    with open_write(path) as writer:
        writer.write_float(1.25)
        writer.write_char(" ")
        writer.write_text("tag")
        writer.write_endl()
    with open_read(path) as reader:
        assert reader.read_float() == 1.25
        assert reader.read_text() == "tag"
        with pytest.raises(EOFError):
            reader.read_text()


def test_open_read_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        open_read(tmp_path / "missing.txt")


def test_close_closes_stream():
    stream = io.BytesIO(b"abc")
    reader = TokenReader(stream)
    reader.close()
    assert stream.closed is True