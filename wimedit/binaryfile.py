"""Random-access reading and writing of binary game files."""

from __future__ import annotations

from enum import Enum
from os import PathLike
from typing import BinaryIO, Union


class Endianness(Enum):
    """Byte order of multi-byte values."""

    LITTLE = "little"
    BIG = "big"


class BinaryFileError(OSError):
    """Raised when a file cannot be opened or a read runs past its end."""


_EOF_MESSAGE = "BinaryFile: Input past end of file."


class BinaryFile:
    """A file opened for both reading and writing of fixed-size integers."""

    def __init__(self, filename: Union[str, PathLike]) -> None:
        self.filename = str(filename)
        try:
            self._file: BinaryIO = open(filename, "r+b")
        except OSError as exc:
            raise BinaryFileError(f"Cannot open file: {self.filename}") from exc

    def close(self) -> None:
        """Close the underlying file."""
        self._file.close()

    def __enter__(self) -> "BinaryFile":
        return self

    def __exit__(self, *args) -> None:
        self.close()

    @property
    def is_open(self) -> bool:
        return not self._file.closed

    @property
    def position(self) -> int:
        return self._file.tell()

    @position.setter
    def position(self, value: int) -> None:
        self._file.seek(value)

    @property
    def length(self) -> int:
        current = self._file.tell()
        end = self._file.seek(0, 2)
        self._file.seek(current)
        return end

    def _read(self, count: int) -> bytes:
        data = self._file.read(count)
        if len(data) < count:
            raise BinaryFileError(_EOF_MESSAGE)
        return data

    def _read_int(self, size: int, endian: Endianness, signed: bool) -> int:
        return int.from_bytes(self._read(size), endian.value, signed=signed)

    def _write_int(self, value: int, size: int, endian: Endianness) -> None:
        mask = (1 << (8 * size)) - 1
        self._file.write((value & mask).to_bytes(size, endian.value))

    def read_byte_unsigned(self) -> int:
        return self._read(1)[0]

    def read_byte_signed(self) -> int:
        value = self.read_byte_unsigned()
        return value if value <= 0x7F else value - 0x100

    def write_byte_unsigned(self, value: int) -> None:
        self._write_int(value, 1, Endianness.LITTLE)

    def write_byte_signed(self, value: int) -> None:
        self.write_byte_unsigned(value if value >= 0 else value + 256)

    def read_word_signed(self, endian: Endianness = Endianness.LITTLE) -> int:
        return self._read_int(2, endian, signed=True)

    def read_word_unsigned(self, endian: Endianness = Endianness.LITTLE) -> int:
        return self._read_int(2, endian, signed=False)

    def write_word_signed(self, value: int, endian: Endianness = Endianness.LITTLE) -> None:
        self._write_int(value, 2, endian)

    def write_word_unsigned(self, value: int, endian: Endianness = Endianness.LITTLE) -> None:
        self._write_int(value, 2, endian)

    def read_longword_signed(self, endian: Endianness = Endianness.LITTLE) -> int:
        return self._read_int(4, endian, signed=True)

    def read_longword_unsigned(self, endian: Endianness = Endianness.LITTLE) -> int:
        return self._read_int(4, endian, signed=False)

    def write_longword_signed(self, value: int, endian: Endianness = Endianness.LITTLE) -> None:
        self._write_int(value, 4, endian)

    def write_longword_unsigned(self, value: int, endian: Endianness = Endianness.LITTLE) -> None:
        self._write_int(value, 4, endian)

    def read_string(self, length: int) -> str:
        """Read ``length`` bytes as a string, one character per byte."""
        return self.read_bytes(length).decode("latin-1")

    def write_string(self, value: str) -> None:
        self._file.write(value.encode("latin-1"))

    def read_bytes(self, count: int) -> bytes:
        return self._read(count)

    def write_bytes(self, data: bytes) -> None:
        self._file.write(bytes(data))


def swap_word(word: int) -> int:
    """Swap the two bytes of a signed 16-bit value."""
    return int.from_bytes((word & 0xFFFF).to_bytes(2, "little"), "big", signed=True)


def swap_longword(longword: int) -> int:
    """Reverse the four bytes of a signed 32-bit value."""
    return int.from_bytes((longword & 0xFFFFFFFF).to_bytes(4, "little"), "big", signed=True)


def nibbler(value: int) -> tuple[int, int]:
    """Return the two high hex digits of a 16-bit value."""
    digits = f"{value & 0xFFFF:04x}"
    return int(digits[0], 16), int(digits[1], 16)


def read_short(byte1: int, byte2: int, endian: Endianness = Endianness.LITTLE) -> int:
    """Combine two bytes into a signed 16-bit value."""
    return int.from_bytes(bytes([byte1 & 0xFF, byte2 & 0xFF]), endian.value, signed=True)