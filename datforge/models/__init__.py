"""Canonical metadata tree shared by every DAT dialect."""

from .items import (
    ITEM_TYPES,
    Archive,
    BiosSet,
    Chip,
    DatItem,
    DipSwitch,
    Disk,
    Driver,
    Feature,
    Input,
    ItemStatus,
    Media,
    Release,
    Rom,
    Sample,
    Sound,
    Video,
)
from .metadata import Header, Machine, MetadataFile, interleave_extras

__all__ = [
    "ITEM_TYPES",
    "Archive",
    "BiosSet",
    "Chip",
    "DatItem",
    "DipSwitch",
    "Disk",
    "Driver",
    "Feature",
    "Header",
    "Input",
    "ItemStatus",
    "Machine",
    "Media",
    "MetadataFile",
    "Release",
    "Rom",
    "Sample",
    "Sound",
    "Video",
    "interleave_extras",
]
