"""Viewers that describe and render a selected resource as text and pixels."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections import Counter
from typing import Optional

from .codec import (
    DEFAULT_GRID_HEIGHT,
    DEFAULT_GRID_WIDTH,
    DEFAULT_MAP_HEIGHT,
    DEFAULT_MAP_PLANES,
    DEFAULT_MAP_WIDTH,
    TILE_BYTES,
    TILE_COUNT,
    TILE_SIZE,
    Color,
    ResourceReadError,
    decode_tile,
    hex_dump,
    palette_color,
    read_binary_resource,
    read_map_data,
    read_string_resource,
    read_tile_data,
    render_map_image,
)
from .resources import ResourceItem, ResourceType, resource_type_name

NO_RESOURCE = "No resource selected"
EDIT_BUFFER_LIMIT = 4095
ANALYSIS_LIMIT = 100
MAP_PREVIEW_ROWS = 10
MAP_PREVIEW_COLS = 20
MAP_TILE_OFFSET = 0xAB7F
SHEET_TILES_PER_ROW = 16
SHEET_SCALE = 2


class ResourceViewer(ABC):
    """Shows one resource in the properties and preview panels."""

    def __init__(self) -> None:
        self.resource: Optional[ResourceItem] = None
        self.game_file_path = ""
        self._cache = None

    def set_resource(self, resource: Optional[ResourceItem]) -> None:
        self.resource = resource
        self._cache = None

    def set_game_file_path(self, path: str) -> None:
        self.game_file_path = path
        self._cache = None

    def clear_cache(self) -> None:
        self._cache = None

    def _details(self, type_label: str) -> list[str]:
        item = self.resource
        return [
            f"Name: {item.name}",
            f"Type: {type_label}",
            f"Offset: 0x{item.offset:08X}",
            f"Size: {item.size} bytes",
        ]

    @abstractmethod
    def render_properties(self) -> list[str]:
        """Lines for the properties panel."""

    @abstractmethod
    def render_preview(self) -> list[str]:
        """Lines for the preview panel."""


class StringResourceViewer(ResourceViewer):
    """Viewer for CSTR text resources."""

    def _text(self) -> str:
        if self._cache is not None:
            return self._cache
        try:
            text = read_string_resource(self.resource)
        except ResourceReadError as exc:
            return str(exc)
        self._cache = text
        return text

    @staticmethod
    def _analysis(text: str) -> str:
        return "".join(
            ch if 32 <= ord(ch) <= 126 else f"[{ord(ch) & 0xFF:02X}]"
            for ch in text[:ANALYSIS_LIMIT]
        )

    def render_properties(self) -> list[str]:
        if self.resource is None:
            return [NO_RESOURCE]
        lines = ["String Resource Properties"]
        lines += self._details("String (CSTR)")
        lines.append("String Content:")
        text = self._text()
        if not text:
            lines.append("(Failed to read string data)")
            return lines
        lines += [
            text,
            "String Details:",
            f"Length: {len(text)} characters",
            f"Bytes: {len(text)} bytes",
            "Character Analysis:",
            self._analysis(text),
        ]
        if len(text) > ANALYSIS_LIMIT:
            lines.append("... (truncated)")
        return lines

    def render_preview(self) -> list[str]:
        if self.resource is None:
            return [NO_RESOURCE]
        lines = ["String Editor"]
        text = self._text()
        if not text:
            lines.append("(Failed to read string data)")
            return lines
        line_count = text.count("\n") + 1
        lines += [
            "Edit the string below:",
            text[:EDIT_BUFFER_LIMIT],
            "String Statistics:",
            f"Length: {len(text)} characters",
            f"Lines: {line_count}",
        ]
        return lines


class MapResourceViewer(ResourceViewer):
    """Viewer for run-length compressed MMAP resources."""

    def __init__(self) -> None:
        super().__init__()
        self.width = DEFAULT_MAP_WIDTH
        self.height = DEFAULT_MAP_HEIGHT
        self.planes = DEFAULT_MAP_PLANES
        self.map_grid_width = DEFAULT_GRID_WIDTH
        self.map_grid_height = DEFAULT_GRID_HEIGHT
        self.image: list[Color] = []
        self.image_size = (0, 0)
        self._image_key = None

    def _map_data(self) -> bytes:
        if self._cache is None:
            data = read_map_data(self.resource, self.width, self.height, self.planes)
            if not data:
                return data
            self._cache = data
        return self._cache

    def _map_properties(self) -> list[str]:
        return [
            "Map Properties:",
            f"  Width: {self.width} pixels",
            f"  Height: {self.height} pixels",
            f"  Planes: {self.planes}",
            f"  Grid: {self.map_grid_width}x{self.map_grid_height} tiles",
            "  Tile Size: 16x16 pixels",
        ]

    def _map_grid(self) -> list[str]:
        data = self._map_data()
        if not data:
            return ["(Failed to decompress map data)"]
        lines = [
            "Map Data Preview:",
            f"Decompressed size: {len(data)} bytes",
            f"First {MAP_PREVIEW_ROWS} rows, {MAP_PREVIEW_COLS} columns:",
        ]
        for row in range(min(MAP_PREVIEW_ROWS, self.map_grid_height)):
            start = row * self.map_grid_width
            cells = data[start : start + min(MAP_PREVIEW_COLS, self.map_grid_width)]
            lines.append(f"Row {row:2d}: " + "".join(f"{b:02X} " for b in cells))
        if self.map_grid_height > MAP_PREVIEW_ROWS or self.map_grid_width > MAP_PREVIEW_COLS:
            lines.append("... (truncated)")
        return lines

    def render_properties(self) -> list[str]:
        if self.resource is None:
            return [NO_RESOURCE]
        lines = ["Map Resource Properties"]
        lines += self._details("Map (MMAP)")
        lines += self._map_properties()
        lines += self._map_grid()
        return lines

    def _render_tiles(self, map_data: bytes, tile_data: bytes) -> None:
        key = (map_data, tile_data, self.map_grid_width, self.map_grid_height)
        if key != self._image_key:
            self.image = render_map_image(
                map_data, tile_data, self.map_grid_width, self.map_grid_height
            )
            self._image_key = key
        self.image_size = (
            self.map_grid_width * TILE_SIZE,
            self.map_grid_height * TILE_SIZE,
        )

    def _render_fallback(self, map_data: bytes) -> None:
        cells = self.map_grid_width * self.map_grid_height
        self.image = [(value, value, value, 255) for value in map_data[:cells]]
        self.image_size = (self.map_grid_width, self.map_grid_height)
        self._image_key = None

    def render_preview(self) -> list[str]:
        if self.resource is None:
            return [NO_RESOURCE]
        lines = ["Map Viewer"]
        data = self._map_data()
        if not data:
            lines.append("(Failed to decompress map data)")
            return lines
        lines.append(f"Grid: {self.map_grid_width}x{self.map_grid_height} tiles")
        tile_data = read_tile_data(self.resource.source_file, MAP_TILE_OFFSET)
        if tile_data:
            lines.append("Map with Actual Tiles:")
            self._render_tiles(data, tile_data)
        else:
            self._render_fallback(data)
        lines += [
            f"Total tiles: {self.map_grid_width * self.map_grid_height}",
            "Tile size: 16x16 pixels (game)",
            f"Map dimensions: {self.width}x{self.height} pixels",
            f"Total map data: {len(data)} bytes",
        ]
        return lines


class CharResourceViewer(ResourceViewer):
    """Viewer for CHAR tile sheets of 256 4bpp tiles."""

    def __init__(self) -> None:
        super().__init__()
        self.image: list[Color] = []
        self.image_size = (0, 0)

    def _tile_data(self) -> bytes:
        if self._cache is None:
            if not self.resource.source_file:
                return b""
            data = read_tile_data(self.resource.source_file, self.resource.offset)
            if not data:
                return data
            self._cache = data
        return self._cache

    @staticmethod
    def _tile_info(size: int) -> list[str]:
        return [
            "Tile Information:",
            f"  Total tiles: {TILE_COUNT}",
            f"  Tile size: {TILE_SIZE}x{TILE_SIZE} pixels",
            f"  Bytes per tile: {TILE_BYTES}",
            f"  Total tile data: {size} bytes",
        ]

    def render_properties(self) -> list[str]:
        if self.resource is None:
            return [NO_RESOURCE]
        lines = ["Tile Resource Properties"]
        lines += self._details("Character/Tile (CHAR)")
        data = self._tile_data()
        if not data:
            lines.append("(Failed to read tile data)")
            return lines
        lines += self._tile_info(len(data))
        lines.append("  Format: 4bpp (2 pixels per byte)")
        return lines

    def _render_sheet(self, data: bytes) -> None:
        rows = TILE_COUNT // SHEET_TILES_PER_ROW
        tiles = [
            [palette_color(p) for p in decode_tile(data, index)]
            for index in range(TILE_COUNT)
        ]
        image: list[Color] = []
        for row in range(rows):
            row_tiles = tiles[row * SHEET_TILES_PER_ROW : (row + 1) * SHEET_TILES_PER_ROW]
            for y in range(TILE_SIZE):
                for pixels in row_tiles:
                    image.extend(pixels[y * TILE_SIZE : (y + 1) * TILE_SIZE])
        self.image = image
        self.image_size = (SHEET_TILES_PER_ROW * TILE_SIZE, rows * TILE_SIZE)

    def render_preview(self) -> list[str]:
        if self.resource is None:
            return [NO_RESOURCE]
        lines = ["Tile Sheet Viewer"]
        data = self._tile_data()
        if not data:
            lines.append("(Failed to read tile data)")
            return lines
        lines.append(
            f"Tile Sheet ({TILE_COUNT} tiles, {TILE_SIZE}x{TILE_SIZE} pixels each):"
        )
        self._render_sheet(data)
        lines += self._tile_info(len(data))
        lines.append(f"  Display scale: {SHEET_SCALE}x{SHEET_SCALE} pixels per tile")
        return lines


class BinaryResourceViewer(ResourceViewer):
    """Hex viewer for every other resource type."""

    def _binary(self) -> bytes:
        if self._cache is None:
            self._cache = read_binary_resource(self.resource)
        return self._cache

    def render_properties(self) -> list[str]:
        if self.resource is None:
            return [NO_RESOURCE]
        size = self.resource.size
        lines = ["Binary Resource Properties"]
        lines += self._details(resource_type_name(self.resource.type))
        lines += [
            "Size Details:",
            f"  KB: {size / 1024.0:.2f}",
            f"  MB: {size / (1024.0 * 1024.0):.4f}",
        ]
        data = self._binary()
        if data:
            lines += hex_dump(data)
        else:
            lines.append("(Failed to read binary data)")
        return lines

    def render_preview(self) -> list[str]:
        if self.resource is None:
            return [NO_RESOURCE]
        item = self.resource
        lines = [
            "Binary Data Viewer",
            f"Resource: {item.name}",
            f"Type: {resource_type_name(item.type)}",
            f"Size: {item.size} bytes",
        ]
        data = self._binary()
        if not data:
            lines.append("(Failed to read binary data)")
            return lines
        lines.append("Binary Data (first 256 bytes):")
        lines += hex_dump(data, 256)
        counts = Counter(data)
        # Reports the lowest byte value present, as the editor always has.
        first = min(counts)
        lines += [
            "Data Analysis:",
            f"Total bytes: {len(data)}",
            f"Unique byte values: {len(counts)}",
            f"Most common byte: 0x{first:02X} ({counts[first]} occurrences)",
        ]
        return lines


def create_resource_viewer(type: ResourceType) -> ResourceViewer:
    """Pick the viewer suited to a resource type."""
    if type is ResourceType.CSTR:
        return StringResourceViewer()
    if type is ResourceType.MMAP:
        return MapResourceViewer()
    if type is ResourceType.CHAR:
        return CharResourceViewer()
    return BinaryResourceViewer()