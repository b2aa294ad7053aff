import struct

import pytest

from wimedit.binaryfile import BinaryFile, Endianness
from wimedit.loader import (
    ResourceHeader,
    chunk_id,
    chunk_qty,
    chunk_size,
    load_resource_file,
    read_resource_header,
    read_resource_identifiers,
    read_resource_maps,
    resource_key_position,
    resource_type_for,
    validate_resource_header,
)
from wimedit.resources import ResourceType

ENDIANS = [Endianness.LITTLE, Endianness.BIG]


def build_resource_file(path, endian, groups):
    """Write a resource file; groups is a list of (tag, [(number, payload), ...])."""
    little = endian is Endianness.LITTLE
    order = "<" if little else ">"
    data = bytearray()
    layout = []
    for tag, chunks in groups:
        entries = []
        for number, payload in chunks:
            entries.append((number, len(data)))
            data += struct.pack(order + "I", len(payload)) + payload
        layout.append((tag, entries))
    out = bytearray(struct.pack(order + "IIII", 16, len(data), 0, 0))
    out += data
    out += bytes(12)
    out += struct.pack(order + "H", len(groups) - 1)
    for tag, entries in layout:
        raw = tag.encode("ascii")
        if little:
            raw = raw[::-1]
        out += raw + struct.pack(order + "H", len(entries) - 1) + bytes(2)
    for _, entries in layout:
        for number, rel in entries:
            entry = bytearray(12)
            struct.pack_into(order + "H", entry, 0, number)
            if little:
                struct.pack_into("<H", entry, 4, rel)
            else:
                struct.pack_into(">H", entry, 6, rel)
            out += entry
    path.write_bytes(bytes(out))
    return path


GROUPS = [
    ("CSTR", [(0, b"hello"), (1, b"world!!")]),
    ("MMAP", [(5, b"\x01\x02\x03")]),
]


@pytest.mark.parametrize("endian", ENDIANS)
def test_load_resource_file_indexes_every_chunk(tmp_path, endian):
    path = build_resource_file(tmp_path / "data.res", endian, GROUPS)
    index = load_resource_file(path, endian)
    assert index is not None
    assert index.id == "WIME"
    assert [item.name for item in index.items] == ["CSTR 0", "CSTR 1", "MMAP 5"]
    assert [item.size for item in index.items] == [5, 7, 3]
    assert [item.type for item in index.items] == [
        ResourceType.CSTR,
        ResourceType.CSTR,
        ResourceType.MMAP,
    ]
    assert all(item.source_file == str(path) for item in index.items)


@pytest.mark.parametrize("endian", ENDIANS)
def test_item_offsets_point_at_chunk_payload(tmp_path, endian):
    path = build_resource_file(tmp_path / "data.res", endian, GROUPS)
    index = load_resource_file(path, endian)
    raw = path.read_bytes()
    for item, (_, payload) in zip(index.items, [c for _, cs in GROUPS for c in cs]):
        start = item.offset + 4
        assert raw[start:start + item.size] == payload


def test_load_logs_summary(tmp_path):
    path = build_resource_file(tmp_path / "data.res", Endianness.LITTLE, GROUPS)
    messages = []
    load_resource_file(path, Endianness.LITTLE, messages.append)
    assert any(m.startswith("Loaded 3 resources from") for m in messages)
    assert "ChunkTypeQty=2" in messages


def test_load_missing_file_returns_none(tmp_path):
    assert load_resource_file(tmp_path / "missing.res", Endianness.LITTLE) is None


def test_load_truncated_file_returns_none(tmp_path):
    path = tmp_path / "short.res"
    path.write_bytes(b"\x10\x00")
    assert load_resource_file(path, Endianness.LITTLE) is None


@pytest.mark.parametrize("endian", ENDIANS)
def test_read_resource_header(tmp_path, endian):
    path = build_resource_file(tmp_path / "data.res", endian, GROUPS)
    with BinaryFile(path) as f:
        header = read_resource_header(f, endian)
    assert header == ResourceHeader(16, 5 + 4 + 7 + 4 + 3 + 4, 0, 0)


@pytest.mark.parametrize("endian", ENDIANS)
def test_identifiers_and_key_position(tmp_path, endian):
    path = build_resource_file(tmp_path / "data.res", endian, GROUPS)
    with BinaryFile(path) as f:
        header = read_resource_header(f, endian)
        base = header.size + header.data_segment_size
        ids = read_resource_identifiers(f, base + 14, 2, endian)
        assert [(i.resource_id, i.resource_qty) for i in ids] == [("CSTR", 2), ("MMAP", 1)]
        maps = read_resource_maps(f, resource_key_position(f, endian), 3, endian)
    assert [m.number for m in maps] == [0, 1, 5]
    assert all(m.multiplier == 0 for m in maps)


def test_identifiers_stop_at_end_of_file(tmp_path):
    path = build_resource_file(tmp_path / "data.res", Endianness.LITTLE, GROUPS)
    length = path.stat().st_size
    with BinaryFile(path) as f:
        assert read_resource_identifiers(f, length, 4, Endianness.LITTLE) == []


def test_chunk_id_byte_order(tmp_path):
    path = tmp_path / "tag.bin"
    path.write_bytes(b"CHAR")
    with BinaryFile(path) as f:
        assert chunk_id(f, 0, Endianness.BIG) == "CHAR"
        assert chunk_id(f, 0, Endianness.LITTLE) == "RAHC"
        assert chunk_id(f, 4, Endianness.BIG) == ""


def test_chunk_id_strips_trailing_nulls(tmp_path):
    path = tmp_path / "tag.bin"
    path.write_bytes(b"AB\x00\x00")
    with BinaryFile(path) as f:
        assert chunk_id(f, 0, Endianness.BIG) == "AB"


def test_chunk_qty_adds_one_and_checks_length(tmp_path):
    path = tmp_path / "qty.bin"
    path.write_bytes(b"\x04\x00\xff\xff\x07")
    with BinaryFile(path) as f:
        assert chunk_qty(f, 0, Endianness.LITTLE) == 5
        assert chunk_qty(f, 2, Endianness.LITTLE) == 0
        assert chunk_qty(f, 4, Endianness.LITTLE) == 0


def test_chunk_size_reads_longword(tmp_path):
    path = tmp_path / "size.bin"
    path.write_bytes(struct.pack(">I", 123456))
    with BinaryFile(path) as f:
        assert chunk_size(f, 0, Endianness.BIG) == 123456


@pytest.mark.parametrize("endian", ENDIANS)
def test_map_multiplier_is_read(tmp_path, endian):
    entry = bytearray(12)
    if endian is Endianness.LITTLE:
        struct.pack_into("<HxxHB", entry, 0, 9, 300, 2)
    else:
        struct.pack_into(">HxxxBH", entry, 0, 9, 2, 300)
    path = tmp_path / "map.bin"
    path.write_bytes(bytes(entry))
    with BinaryFile(path) as f:
        maps = read_resource_maps(f, 0, 2, endian)
    assert len(maps) == 1
    assert (maps[0].number, maps[0].offset, maps[0].multiplier) == (9, 300, 2)


@pytest.mark.parametrize(
    "tag, expected",
    [
        ("CHAR", ResourceType.CHAR),
        ("CSTR", ResourceType.CSTR),
        ("FONT", ResourceType.FONT),
        ("FRML", ResourceType.FRML),
        ("IMAG", ResourceType.IMAG),
        ("MMAP", ResourceType.MMAP),
        ("ZZZZ", ResourceType.CHAR),
    ],
)
def test_resource_type_for(tag, expected):
    assert resource_type_for(tag) is expected


def test_validate_resource_header(tmp_path):
    good = build_resource_file(tmp_path / "good.res", Endianness.LITTLE, GROUPS)
    small = tmp_path / "small.res"
    small.write_bytes(struct.pack("<IIII", 8, 0, 0, 0))
    assert validate_resource_header(good, Endianness.LITTLE) is True
    assert validate_resource_header(small, Endianness.LITTLE) is False
    assert validate_resource_header(tmp_path / "none.res", Endianness.LITTLE) is False