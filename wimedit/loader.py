"""Reading the chunk index of WIME ``.res`` resource files."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from os import PathLike
from typing import Callable, Optional, Union

from .binaryfile import BinaryFile, Endianness
from .resources import ResourceIndex, ResourceType

logger = logging.getLogger(__name__)

Log = Optional[Callable[[str], None]]

_U16 = 0xFFFF
_U32 = 0xFFFFFFFF

_TYPES_BY_ID = {
    "CHAR": ResourceType.CHAR,
    "CSTR": ResourceType.CSTR,
    "FONT": ResourceType.FONT,
    "FRML": ResourceType.FRML,
    "IMAG": ResourceType.IMAG,
    "MMAP": ResourceType.MMAP,
}


@dataclass
class ResourceHeader:
    """The four longwords at the start of a resource file."""

    size: int
    data_segment_size: int
    data_size: int
    file_end_length: int


@dataclass
class ResourceMap:
    """One entry of the resource key table."""

    number: int
    offset: int
    multiplier: int


@dataclass
class ResourceIdentifier:
    """A chunk type tag and how many chunks of that type exist."""

    resource_id: str
    resource_qty: int


def _emit(log: Log, message: str) -> None:
    if log is not None:
        log(message)


def read_resource_header(file: BinaryFile, endian: Endianness) -> ResourceHeader:
    """Read the header from the start of the file."""
    file.position = 0
    return ResourceHeader(
        size=file.read_longword_unsigned(endian),
        data_segment_size=file.read_longword_unsigned(endian),
        data_size=file.read_longword_unsigned(endian),
        file_end_length=file.read_longword_unsigned(endian),
    )


def _header_text(header: ResourceHeader) -> str:
    return (
        f"size={header.size}, dataSegmentSize={header.data_segment_size}, "
        f"dataSize={header.data_size}, fileEndLength={header.file_end_length}"
    )


def chunk_id(file: BinaryFile, offset: int, endian: Endianness, log: Log = None) -> str:
    """Read a four-character chunk tag; empty at end of file."""
    _emit(log, f"GetChunkID: reading at offset {offset}")
    file.position = offset
    if file.position >= file.length:
        _emit(log, "GetChunkID: at end of file")
        return ""
    raw = file.read_longword_unsigned(Endianness.BIG).to_bytes(4, "big")
    _emit(log, f"GetChunkID: raw integer = 0x{int.from_bytes(raw, 'big'):08X}")
    if endian is Endianness.LITTLE:
        raw = raw[::-1]
    tag = raw.decode("latin-1").rstrip("\0")
    _emit(log, f"GetChunkID: returning '{tag}'")
    return tag


def chunk_qty(file: BinaryFile, offset: int, endian: Endianness, log: Log = None) -> int:
    """Read a stored count (kept as count minus one); zero if truncated."""
    _emit(log, f"GetChunkQTY: reading at offset {offset}")
    file.position = offset
    if file.position + 2 > file.length:
        _emit(log, "GetChunkQTY: not enough bytes to read word")
        return 0
    qty = (file.read_word_unsigned(endian) + 1) & _U16
    _emit(log, f"GetChunkQTY: returning {qty}")
    return qty


def chunk_size(file: BinaryFile, offset: int, endian: Endianness) -> int:
    """Read the size longword at the start of a chunk."""
    file.position = offset
    return file.read_longword_unsigned(endian)


def read_resource_identifiers(
    file: BinaryFile, start: int, count: int, endian: Endianness, log: Log = None
) -> list[ResourceIdentifier]:
    """Read up to ``count`` eight-byte identifier entries, stopping at an empty tag."""
    _emit(log, f"ReadResourceIdentifiers: starting at position {start}")
    file.position = start
    identifiers: list[ResourceIdentifier] = []
    for idx in range(count & _U16):
        entry = (start + idx * 8) & _U32
        tag = chunk_id(file, entry, endian, log)
        qty = chunk_qty(file, (entry + 4) & _U32, endian, log)
        if not tag:
            _emit(log, f"ReadResourceIdentifiers: empty id encountered at index {idx}")
            break
        identifiers.append(ResourceIdentifier(tag, qty))
    _emit(log, f"ReadResourceIdentifiers: found {len(identifiers)} identifiers")
    return identifiers


def _map_number(file: BinaryFile, offset: int, endian: Endianness) -> int:
    file.position = offset
    return file.read_word_unsigned(endian)


def _map_offset(file: BinaryFile, offset: int, endian: Endianness) -> int:
    if endian is Endianness.BIG:
        offset += 2
    file.position = offset
    return file.read_word_unsigned(endian)


def _map_multiplier(file: BinaryFile, offset: int, endian: Endianness) -> int:
    if endian is Endianness.BIG and offset > 0:
        offset -= 1
    file.position = offset
    return file.read_byte_unsigned()


def read_resource_maps(
    file: BinaryFile, key_position: int, count: int, endian: Endianness, log: Log = None
) -> list[ResourceMap]:
    """Read up to ``count`` twelve-byte key entries, stopping at end of file."""
    length = file.length
    _emit(
        log,
        f"ReadResourceMaps: keyPosition={key_position}, count={count}, fileSize={length}",
    )
    maps: list[ResourceMap] = []
    for i in range(count & _U16):
        offset = (key_position + 12 * i) & _U32
        _emit(log, f"ReadResourceMaps: reading map {i} at offset {offset}")
        if offset >= length:
            _emit(log, f"ReadResourceMaps: offset {offset} is past end of file!")
            break
        entry = ResourceMap(
            number=_map_number(file, offset, endian),
            offset=_map_offset(file, offset + 4, endian),
            multiplier=_map_multiplier(file, offset + 6, endian),
        )
        _emit(
            log,
            f"ReadResourceMaps: map {i} = number:{entry.number}, "
            f"offset:{entry.offset}, multiplier:{entry.multiplier}",
        )
        maps.append(entry)
    return maps


def resource_key_position(file: BinaryFile, endian: Endianness) -> int:
    """Position of the key table that follows the identifier entries."""
    file.position = 0
    header_size = file.read_longword_unsigned(endian)
    data_segment_size = file.read_longword_unsigned(endian)
    base = (data_segment_size + header_size) & _U32
    file.position = (base + 12) & _U32
    qty = (file.read_word_unsigned(endian) + 1) & _U16
    return (base + 14 + 8 * qty) & _U32


def resource_type_for(resource_id: str) -> ResourceType:
    """Map a chunk tag to a resource type; unknown tags count as CHAR."""
    return _TYPES_BY_ID.get(resource_id, ResourceType.CHAR)


def load_resource_file(
    filename: Union[str, PathLike], endian: Endianness, log: Log = None
) -> Optional[ResourceIndex]:
    """Index every chunk of a resource file, or return None if it cannot be read."""
    filename = str(filename)
    try:
        with BinaryFile(filename) as file:
            length = file.length
            _emit(log, f"File opened successfully, size: {length} bytes")

            header_le = read_resource_header(file, Endianness.LITTLE)
            _emit(log, "[DEBUG] Header (Little Endian): " + _header_text(header_le))
            header_be = read_resource_header(file, Endianness.BIG)
            _emit(log, "[DEBUG] Header (Big Endian): " + _header_text(header_be))
            header = read_resource_header(file, endian)
            _emit(log, f"Resource file size: {header.size} bytes")

            base = (header.data_segment_size + header.size) & _U32
            file.position = (base + 12) & _U32
            type_qty = (file.read_word_unsigned(endian) + 1) & _U16
            _emit(log, f"ChunkTypeQty={type_qty}")
            identifiers = read_resource_identifiers(
                file, (base + 14) & _U32, type_qty, endian, log
            )

            key_position = resource_key_position(file, endian)
            index = ResourceIndex("WIME")

            consumed = 0
            for identifier in identifiers:
                _emit(
                    log,
                    f"Processing {identifier.resource_id} with "
                    f"{identifier.resource_qty} items",
                )
                key_start = (key_position + 12 * consumed) & _U32
                maps = read_resource_maps(
                    file, key_start, identifier.resource_qty, endian, log
                )
                resource_type = resource_type_for(identifier.resource_id)
                for entry in maps:
                    actual = (
                        entry.offset + header.size + 65535 * entry.multiplier + entry.multiplier
                    ) & _U32
                    _emit(
                        log,
                        f"  Map: number={entry.number}, offset={entry.offset}, "
                        f"multiplier={entry.multiplier}, actualOffset={actual}, "
                        f"fileSize={length}",
                    )
                    size = 0
                    if actual < length:
                        size = chunk_size(file, actual, endian)
                        _emit(log, f"    Chunk size at actualOffset: {size}")
                    else:
                        _emit(log, "    actualOffset is past end of file!")
                    index.add_item(
                        f"{identifier.resource_id} {entry.number}",
                        actual,
                        size,
                        resource_type,
                        filename,
                    )
                    consumed += 1

            _emit(log, f"Loaded {len(index.items)} resources from {filename}")
            return index
    except (OSError, ValueError) as exc:
        logger.error("Error loading resource file: %s", exc)
        return None


def validate_resource_header(filename: Union[str, PathLike], endian: Endianness) -> bool:
    """True if the file opens and its header size is at least sixteen bytes."""
    try:
        with BinaryFile(filename) as file:
            return read_resource_header(file, endian).size >= 16
    except (OSError, ValueError):
        return False