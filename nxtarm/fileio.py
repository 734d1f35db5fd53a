"""Whitespace-separated ASCII token files shared between a PC and the brick.

Values are separated by whitespace (space, tab, CR, LF or NUL). Lines are
terminated with CR LF so that simple editors display them properly.
"""

from __future__ import annotations

import re
from pathlib import Path
from typing import BinaryIO, Iterator, Union

MAX_TOKEN_LENGTH = 20
LINE_END = b"\r\n"
WHITESPACE_BYTES = frozenset({0, ord(" "), 9, 13, 10})

_INT_PREFIX = re.compile(r"\s*([+-]?\d+)")
_FLOAT_PREFIX = re.compile(
    r"\s*([+-]?(?:(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?|inf(?:inity)?|nan))",
    re.IGNORECASE,
)

ByteLike = Union[int, str, bytes]


def _as_byte(value: ByteLike) -> int:
    if isinstance(value, int):
        return value
    if len(value) != 1:
        raise ValueError(f"expected a single character, got {value!r}")
    return value[0] if isinstance(value, bytes) else ord(value)


def is_whitespace(byte: ByteLike) -> bool:
    """Return True for NUL, space, tab, carriage return and line feed."""
    return _as_byte(byte) in WHITESPACE_BYTES


def parse_int(text: str) -> int:
    """Parse the leading integer of ``text`` the way ``atoi`` does; 0 if none."""
    match = _INT_PREFIX.match(text)
    return int(match.group(1)) if match else 0


def parse_float(text: str) -> float:
    """Parse the leading number of ``text`` the way ``atof`` does; 0.0 if none."""
    match = _FLOAT_PREFIX.match(text)
    return float(match.group(1)) if match else 0.0


class TokenReader:
    """Reads characters, words and numbers from a binary stream."""

    def __init__(self, stream: BinaryIO) -> None:
        self._stream = stream

    def __enter__(self) -> "TokenReader":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def __iter__(self) -> Iterator[str]:
        while True:
            try:
                yield self.read_text()
            except EOFError:
                return

    def read_byte(self) -> int:
        """Return the next raw byte; raise EOFError at the end of the stream."""
        data = self._stream.read(1)
        if not data:
            raise EOFError("end of file")
        return data[0]

    def _read_non_whitespace(self) -> int:
        while True:
            byte = self.read_byte()
            if byte not in WHITESPACE_BYTES:
                return byte

    def read_char(self) -> str:
        """Return the next character that is not whitespace."""
        return chr(self._read_non_whitespace())

    def read_text(self) -> str:
        """Return the next whitespace-delimited word.

        At most 20 characters are kept; the byte that ends the word (the
        delimiter, or the 21st character of a longer word) is consumed.
        Raises EOFError if only whitespace remains.
        """
        chars = bytearray([self._read_non_whitespace()])
        while len(chars) < MAX_TOKEN_LENGTH:
            try:
                byte = self.read_byte()
            except EOFError:
                break
            if byte in WHITESPACE_BYTES:
                break
            chars.append(byte)
        else:
            try:
                self.read_byte()
            except EOFError:
                pass
        return chars.decode("latin-1")

    def read_int(self) -> int:
        """Read the next word and convert it as ``atoi`` would."""
        return parse_int(self.read_text())

    def read_float(self) -> float:
        """Read the next word and convert it as ``atof`` would."""
        return parse_float(self.read_text())

    def close(self) -> None:
        self._stream.close()


class TokenWriter:
    """Writes characters, words and numbers to a binary stream."""

    def __init__(self, stream: BinaryIO) -> None:
        self._stream = stream

    def __enter__(self) -> "TokenWriter":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def write_char(self, char: ByteLike) -> None:
        self._stream.write(bytes([_as_byte(char)]))

    def write_endl(self) -> None:
        self._stream.write(LINE_END)

    def write_text(self, text: str) -> None:
        self._stream.write(text.encode("latin-1"))

    def write_long(self, number: int) -> None:
        self.write_text("%d" % number)

    def write_float(self, number: float, fmt: str = "%f") -> None:
        self.write_text(fmt % number)

    def close(self) -> None:
        self._stream.close()


def open_read(path: Union[str, Path]) -> TokenReader:
    """Open ``path`` for token reading; raises OSError if it cannot be opened."""
    return TokenReader(open(path, "rb"))


def open_write(path: Union[str, Path]) -> TokenWriter:
    """Create or replace ``path`` and open it for token writing."""
    return TokenWriter(open(path, "wb"))