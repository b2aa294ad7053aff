# wimedit

A library for reading the resource files of *War in Middle Earth*. It
parses the resource table of a `.res` file and decodes what is inside:
tile sheets (`CHAR`), strings (`CSTR`), run-length compressed maps (`MMAP`),
and raw bytes of every other chunk type (fonts, forms, images).

It has no dependencies outside the standard library.

## Installing

```
pip install .
```

To run the tests:

```
pip install ".[test]"
pytest
```

## Reading a resource file

```python
from wimedit.binaryfile import Endianness
from wimedit.loader import load_resource_file
from wimedit.resources import ResourceType

index = load_resource_file("/games/wime/GAME.RES", Endianness.LITTLE, log=print)
if index is not None:
    for item in index.items_by_type(ResourceType.CSTR):
        print(item.name, item.offset, item.size)
```

`load_resource_file` returns a `ResourceIndex`, or `None` when the file
cannot be opened or read. The optional `log` callable receives progress
messages. Pass `Endianness.LITTLE` for PC and Apple IIGS data and
`Endianness.BIG` for Amiga and Atari ST data.
`validate_resource_header` checks that a file opens and that its header
size is at least sixteen bytes.

## Modules

- `wimedit.binaryfile` — `BinaryFile` reads and writes bytes, 16-bit words,
  32-bit longwords and strings in either `Endianness`; reading past the end
  raises `BinaryFileError`. It is a context manager. Helpers: `swap_word`,
  `swap_longword`, `nibbler`, `read_short`.
- `wimedit.resources` — `ResourceType`, `ResourceItem`, `ResourceIndex`
  (`add_item`, `items_by_type`, `item_count`), `FileFormat` and
  `resource_type_name`.
- `wimedit.loader` — `load_resource_file` and the lower-level readers it is
  built from: `read_resource_header`, `read_resource_identifiers`,
  `read_resource_maps`, `resource_key_position`, `chunk_id`, `chunk_qty`,
  `chunk_size`, `resource_type_for`.
- `wimedit.codec` — `palette_color` and `decode_tile` for 4-bit tiles,
  `read_tile_data` for a `CHAR` chunk, `decompress_map` and `read_map_data`
  for `MMAP` chunks, `read_string_resource` (raises `ResourceReadError`),
  `read_binary_resource`, `render_map_image` (a row-major list of RGBA
  tuples) and `hex_dump` (a list of text lines).
- `wimedit.viewers` — `create_resource_viewer(type)` returns a
  `StringResourceViewer`, `MapResourceViewer`, `CharResourceViewer` or
  `BinaryResourceViewer`. After `set_resource(item)`, `render_properties()`
  and `render_preview()` return lists of text lines; the map and tile
  viewers also fill `image` (RGBA tuples) and `image_size` when previewing.
- `wimedit.console` — `Console`, a log of at most 1000 messages with
  `add_message`, `add_error`, `add_warning`, `clear`, `execute_command`
  (passes the command to an optional callback) and `render`.
- `wimedit.settings` — `EditorSettings`, a dataclass of editor preferences
  and their defaults.

## What it does not do

The package has no command to run and no graphical editor: there are no
windows, menus or file dialogs. It does not locate a game's `.res` files
from its executable, does not detect the platform from a file name, and
does not merge several resource files into one index; open each `.res`
file with `load_resource_file` and choose the byte order yourself. Settings
are held in memory only and are not saved.