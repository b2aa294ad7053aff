"""Resource descriptions and the index that groups them."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


class ResourceType(Enum):
    """Kinds of resource stored in a game's resource files."""

    CHAR = "CHAR"
    CSTR = "CSTR"
    FONT = "FONT"
    FRML = "FRML"
    IMAG = "IMAG"
    MMAP = "MMAP"
    ARCHIVE = "ARCHIVE"


_TYPE_NAMES = {
    ResourceType.CHAR: "Character",
    ResourceType.CSTR: "String",
    ResourceType.FONT: "Font",
    ResourceType.FRML: "Form",
    ResourceType.IMAG: "Image",
    ResourceType.MMAP: "Map",
    ResourceType.ARCHIVE: "Archive",
}


def resource_type_name(type: ResourceType) -> str:
    """Human-readable name of a resource type."""
    return _TYPE_NAMES.get(type, "Unknown")


@dataclass
class ResourceItem:
    """One resource chunk inside a resource file."""

    name: str = ""
    offset: int = 0
    size: int = 0
    type: ResourceType = ResourceType.CHAR
    source_file: str = ""


@dataclass
class ResourceIndex:
    """An ordered collection of resource items."""

    id: str = ""
    items: list[ResourceItem] = field(default_factory=list)

    def add_item(
        self,
        name: str,
        offset: int,
        size: int,
        type: ResourceType,
        source_file: str = "",
    ) -> ResourceItem:
        item = ResourceItem(name, offset, size, type, source_file)
        self.items.append(item)
        return item

    def items_by_type(self, type: ResourceType) -> list[ResourceItem]:
        return [item for item in self.items if item.type == type]

    def item_count(self, type: ResourceType) -> int:
        return sum(1 for item in self.items if item.type == type)


@dataclass
class FileFormat:
    """Description of one platform's game file layout."""

    name: str = ""
    endian: str = ""
    data_endian: str = ""
    executable_file: str = ""
    icon: str = ""
    bit_planes: int = 0
    frml_bitplanes: int = 0