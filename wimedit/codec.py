"""Decoding of tile sheets, compressed maps, strings and raw chunks."""

from __future__ import annotations

import logging
from os import PathLike
from typing import Union

from .binaryfile import BinaryFile
from .resources import ResourceItem

logger = logging.getLogger(__name__)

TILE_COUNT = 256
TILE_SIZE = 16
TILE_BYTES = 128
TILE_PIXELS = TILE_SIZE * TILE_SIZE

DEFAULT_MAP_WIDTH = 2560
DEFAULT_MAP_HEIGHT = 1584
DEFAULT_MAP_PLANES = 1
DEFAULT_GRID_WIDTH = 160
DEFAULT_GRID_HEIGHT = 99

Color = tuple[int, int, int, int]
BLACK: Color = (0, 0, 0, 255)

_HEX_PALETTE = (
    "000000",
    "5586FF",
    "306510",
    "755555",
    "EBAA86",
    "00FFFF",
    "204110",
    "659655",
    "868686",
    "86BAFF",
    "CB0041",
    "FFFFFF",
    "DB75CB",
    "65BA00",
    "EBEBBA",
    "FFFFDB",
)

_U32 = 0xFFFFFFFF


class ResourceReadError(ValueError):
    """Raised when a resource's bytes cannot be read from its source file."""


def _parse_color(hex_color: str) -> Color:
    r, g, b = (int(hex_color[i : i + 2], 16) for i in (0, 2, 4))
    # The tile palette is shown with its first two channels exchanged.
    return (g, r, b, 255)


_PALETTE: tuple[Color, ...] = tuple(_parse_color(c) for c in _HEX_PALETTE)


def palette_color(index: int) -> Color:
    """RGBA colour of a 4-bit tile pixel; black outside the palette."""
    if 0 <= index < len(_PALETTE):
        return _PALETTE[index]
    return BLACK


def decode_tile(tile_data: bytes, tile_index: int) -> bytes:
    """Expand one 4bpp tile to 256 pixel values, low nibble first."""
    start = tile_index * TILE_BYTES
    if start < 0 or start + TILE_BYTES > len(tile_data):
        return bytes(TILE_PIXELS)
    pixels = bytearray()
    for byte in tile_data[start : start + TILE_BYTES]:
        pixels.append(byte & 0x0F)
        pixels.append((byte >> 4) & 0x0F)
    return bytes(pixels)


def read_tile_data(source_file: Union[str, PathLike], offset: int) -> bytes:
    """Read a CHAR chunk's 256 tiles, or as many bytes of them as the file holds."""
    try:
        with BinaryFile(source_file) as file:
            start = offset + 4
            length = file.length
            if start >= length:
                return b""
            file.position = start
            return file.read_bytes(min(TILE_COUNT * TILE_BYTES, length - start))
    except OSError as exc:
        logger.error("Error reading tile data: %s", exc)
        return b""


def _decompress(data: bytes, expected_size: int, chunk_size: int) -> bytes:
    out = bytearray(expected_size)
    read = 0
    count = 0

    def take() -> int:
        nonlocal read
        if read >= len(data):
            raise ValueError("Compressed map data is truncated")
        value = data[read]
        read += 1
        return value

    while read < chunk_size and count < expected_size:
        run = take()
        if run < 0x80:
            for _ in range(run + 1):
                if count >= expected_size or read >= chunk_size:
                    break
                out[count] = take()
                count += 1
        elif run > 0x80:
            value = take()
            repeat = min(0x100 - run + 1, expected_size - count)
            out[count : count + repeat] = bytes([value]) * repeat
            count += repeat
    return bytes(out)


def decompress_map(data: bytes, expected_size: int) -> bytes:
    """Unpack run-length map data into ``expected_size`` bytes, zero-filled.

    A control byte n in 0..127 copies the next n+1 bytes; n in -127..-1
    repeats the following byte 1-n times; -128 does nothing.
    """
    return _decompress(bytes(data), expected_size, len(data))


def _row_size(width: int) -> int:
    words = width // 16
    if width % 16:
        words += 1
    return words * 2


def read_map_data(
    item: ResourceItem,
    width: int = DEFAULT_MAP_WIDTH,
    height: int = DEFAULT_MAP_HEIGHT,
    planes: int = DEFAULT_MAP_PLANES,
) -> bytes:
    """Decompress an MMAP chunk; empty if it cannot be read."""
    if not item.source_file:
        return b""
    try:
        with BinaryFile(item.source_file) as file:
            start = item.offset + 8
            chunk = (item.size - 18) & _U32
            length = file.length
            if start >= length:
                return b""
            file.position = start
            # One byte past the chunk may be needed as a final repeat value.
            data = file.read_bytes(min(chunk + 1, length - start))
        return _decompress(data, _row_size(width) * height * planes, chunk)
    except (OSError, ValueError) as exc:
        logger.error("Error decompressing map data: %s", exc)
        return b""


def read_string_resource(item: ResourceItem) -> str:
    """Read a CSTR chunk's text, one character per byte."""
    if not item.source_file:
        raise ResourceReadError("Error: No source file specified")
    try:
        with BinaryFile(item.source_file) as file:
            start = item.offset + 4
            length = file.length
            if start >= length:
                raise ResourceReadError("Error: Start position past end of file")
            file.position = start
            data = file.read_bytes(min(item.size, length - start))
    except OSError as exc:
        raise ResourceReadError("Error reading string data: " + str(exc)) from exc
    return data.decode("latin-1")


def read_binary_resource(item: ResourceItem) -> bytes:
    """Read a chunk's raw bytes from its offset; empty if it cannot be read."""
    if not item.source_file:
        return b""
    try:
        with BinaryFile(item.source_file) as file:
            length = file.length
            if item.offset >= length:
                return b""
            file.position = item.offset
            return file.read_bytes(min(item.size, length - item.offset))
    except OSError as exc:
        logger.error("Error reading binary data: %s", exc)
        return b""


def render_map_image(
    map_data: bytes,
    tile_data: bytes,
    grid_width: int = DEFAULT_GRID_WIDTH,
    grid_height: int = DEFAULT_GRID_HEIGHT,
) -> list[Color]:
    """Paint the map grid with its tiles, row-major, 16x16 pixels per cell."""
    tile_rows = []
    for index in range(TILE_COUNT):
        pixels = [palette_color(p) for p in decode_tile(tile_data, index)]
        tile_rows.append(
            [pixels[y * TILE_SIZE : (y + 1) * TILE_SIZE] for y in range(TILE_SIZE)]
        )
    blank = [BLACK] * TILE_SIZE

    image: list[Color] = []
    for map_row in range(grid_height):
        cells = [
            map_data[map_row * grid_width + col]
            if map_row * grid_width + col < len(map_data)
            else None
            for col in range(grid_width)
        ]
        for y in range(TILE_SIZE):
            for cell in cells:
                image.extend(blank if cell is None else tile_rows[cell][y])
    return image


def hex_dump(data: bytes, max_bytes: int = 64) -> list[str]:
    """Lines of a 16-bytes-per-line hex and ASCII dump of the first ``max_bytes``."""
    lines = [f"Hex Dump (first {max_bytes} bytes):"]
    shown = data[:max_bytes]
    for start in range(0, len(shown), 16):
        chunk = shown[start : start + 16]
        hex_part = "".join(f"{b:02X} " for b in chunk)
        ascii_part = "".join(chr(b) if 32 <= b <= 126 else "." for b in chunk)
        lines.append(f"{start:04X}: {hex_part:<48} |{ascii_part}|")
    if len(data) > max_bytes:
        lines.append("... (truncated)")
    return lines