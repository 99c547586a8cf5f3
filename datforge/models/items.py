"""
Typed DAT items: the content entries a machine holds.

Each variant is its own dataclass tagged with ``item_type``. Every item owns
an ``extra`` list of raw tokens the source dialect attached to it but that
no field captured.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import ClassVar, Dict, List, Optional, Type

from .node import ModelNode


class ItemStatus(Enum):
    """Dump status of a ROM or disk."""
    NONE = "none"
    BADDUMP = "baddump"
    NODUMP = "nodump"
    GOOD = "good"
    VERIFIED = "verified"

    @classmethod
    def from_string(cls, value: Optional[str]) -> Optional['ItemStatus']:
        """
        Map status text to a member, case-insensitively.

        Returns:
            The matching member, or None for empty or unrecognized text
        """
        if not value:
            return None
        lowered = value.strip().lower()
        for member in cls:
            if member.value == lowered:
                return member
        return None


@dataclass
class DatItem(ModelNode):
    """Base class of all item variants."""
    item_type: ClassVar[str] = "item"


@dataclass
class Rom(DatItem):
    """A single ROM file with its size and hashes."""
    item_type: ClassVar[str] = "rom"

    name: Optional[str] = None
    size: Optional[str] = None
    crc: Optional[str] = None
    md5: Optional[str] = None
    sha1: Optional[str] = None
    sha256: Optional[str] = None
    sha384: Optional[str] = None
    sha512: Optional[str] = None
    spamsum: Optional[str] = None
    xxh3_64: Optional[str] = None
    xxh3_128: Optional[str] = None
    merge: Optional[str] = None
    status: Optional[ItemStatus] = None
    region: Optional[str] = None
    flags: Optional[str] = None
    offs: Optional[str] = None
    serial: Optional[str] = None
    header: Optional[str] = None
    date: Optional[str] = None
    inverted: Optional[str] = None
    mia: Optional[str] = None

    # Frontend (AttractMode) presentation values carried on the rom
    alt_romname: Optional[str] = None
    alt_title: Optional[str] = None
    file_is_available: Optional[str] = None

    extra: List[str] = field(default_factory=list)


@dataclass
class Disk(DatItem):
    """A CHD disk image, identified by MD5 and/or SHA1."""
    item_type: ClassVar[str] = "disk"

    name: Optional[str] = None
    md5: Optional[str] = None
    sha1: Optional[str] = None
    merge: Optional[str] = None
    status: Optional[ItemStatus] = None
    flags: Optional[str] = None
    region: Optional[str] = None
    index: Optional[str] = None
    writable: Optional[str] = None
    extra: List[str] = field(default_factory=list)


@dataclass
class Media(DatItem):
    """An AaruFormat media image."""
    item_type: ClassVar[str] = "media"

    name: Optional[str] = None
    md5: Optional[str] = None
    sha1: Optional[str] = None
    sha256: Optional[str] = None
    spamsum: Optional[str] = None
    extra: List[str] = field(default_factory=list)


@dataclass
class Sample(DatItem):
    item_type: ClassVar[str] = "sample"

    name: Optional[str] = None
    extra: List[str] = field(default_factory=list)


@dataclass
class Archive(DatItem):
    item_type: ClassVar[str] = "archive"

    name: Optional[str] = None
    extra: List[str] = field(default_factory=list)


@dataclass
class Release(DatItem):
    """Regional release information for a set."""
    item_type: ClassVar[str] = "release"

    name: Optional[str] = None
    region: Optional[str] = None
    language: Optional[str] = None
    date: Optional[str] = None
    default: Optional[str] = None
    extra: List[str] = field(default_factory=list)


@dataclass
class BiosSet(DatItem):
    item_type: ClassVar[str] = "biosset"

    name: Optional[str] = None
    description: Optional[str] = None
    default: Optional[str] = None
    extra: List[str] = field(default_factory=list)


@dataclass
class Chip(DatItem):
    item_type: ClassVar[str] = "chip"

    chip_type: Optional[str] = None
    name: Optional[str] = None
    flags: Optional[str] = None
    clock: Optional[str] = None
    extra: List[str] = field(default_factory=list)


@dataclass
class Video(DatItem):
    item_type: ClassVar[str] = "video"

    screen: Optional[str] = None
    orientation: Optional[str] = None
    x: Optional[str] = None
    y: Optional[str] = None
    aspectx: Optional[str] = None
    aspecty: Optional[str] = None
    freq: Optional[str] = None
    extra: List[str] = field(default_factory=list)


@dataclass
class Sound(DatItem):
    item_type: ClassVar[str] = "sound"

    channels: Optional[str] = None
    extra: List[str] = field(default_factory=list)


@dataclass
class Input(DatItem):
    item_type: ClassVar[str] = "input"

    players: Optional[str] = None
    control: Optional[str] = None
    buttons: Optional[str] = None
    coins: Optional[str] = None
    tilt: Optional[str] = None
    service: Optional[str] = None
    extra: List[str] = field(default_factory=list)


@dataclass
class DipSwitch(DatItem):
    """A DIP switch with its ordered entry names."""
    item_type: ClassVar[str] = "dipswitch"

    name: Optional[str] = None
    entries: List[str] = field(default_factory=list)
    default: Optional[str] = None
    extra: List[str] = field(default_factory=list)


@dataclass
class Driver(DatItem):
    """Emulation status of a machine's driver."""
    item_type: ClassVar[str] = "driver"

    status: Optional[str] = None
    emulation: Optional[str] = None
    color: Optional[str] = None
    sound: Optional[str] = None
    graphic: Optional[str] = None
    cocktail: Optional[str] = None
    protection: Optional[str] = None
    savestate: Optional[str] = None
    palettesize: Optional[str] = None
    extra: List[str] = field(default_factory=list)


@dataclass
class Feature(DatItem):
    item_type: ClassVar[str] = "feature"

    feature_type: Optional[str] = None
    status: Optional[str] = None
    overall: Optional[str] = None
    extra: List[str] = field(default_factory=list)


ITEM_TYPES: Dict[str, Type[DatItem]] = {
    cls.item_type: cls
    for cls in (Rom, Disk, Media, Sample, Archive, Release, BiosSet,
                Chip, Video, Sound, Input, DipSwitch, Driver, Feature)
}
