"""
Canonical metadata tree: a file holds one header and ordered machines, each
machine holds ordered items.

The tree is built once by a reader in a single pass and is not mutated by
writers. Every node keeps an ``extra`` list of raw lines the source dialect
contained but no field captured. Header, machine and file nodes also record,
in ``extra_positions``, how many recognized children preceded each line, so
a same-dialect round trip re-emits them where they were.
"""

from collections import Counter
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Type, TypeVar

from .items import DatItem, Disk, Media, Rom
from .node import ModelNode

ItemT = TypeVar('ItemT', bound=DatItem)


class ExtrasMixin:
    """Extras that remember their place among the node's children."""

    def keep_extra(self, line: str, position: int) -> None:
        """Keep a raw line that followed ``position`` recognized children."""
        self.extra.append(line)
        self.extra_positions.append(position)


def interleave_extras(children: List[List[str]], extra: List[str],
                      positions: List[int]) -> List[List[str]]:
    """
    Merge rendered children with raw extra lines in source order.

    Args:
        children: Rendered lines of each recognized child, in order
        extra: Raw lines kept by the reader
        positions: For each extra line, how many recognized children
            preceded it. Lines without a recorded position go last.

    Returns:
        Chunks of lines: one per child, plus one per run of extras that
        shared a position, placed before the child they preceded
    """
    last = len(children)
    anchored: Dict[int, List[str]] = {}
    for index, line in enumerate(extra):
        position = positions[index] if index < len(positions) else last
        anchored.setdefault(min(max(position, 0), last), []).append(line)

    chunks: List[List[str]] = []
    for index, child in enumerate(children):
        if index in anchored:
            chunks.append(anchored[index])
        chunks.append(child)
    if last in anchored:
        chunks.append(anchored[last])
    return chunks


@dataclass
class Header(ExtrasMixin, ModelNode):
    """File-level descriptive metadata."""
    name: Optional[str] = None
    description: Optional[str] = None
    version: Optional[str] = None
    date: Optional[str] = None
    author: Optional[str] = None
    homepage: Optional[str] = None
    comment: Optional[str] = None

    # ClrMamePro / Logiqx
    category: Optional[str] = None
    rootdir: Optional[str] = None
    url: Optional[str] = None
    email: Optional[str] = None
    type: Optional[str] = None
    header: Optional[str] = None  # skipper file name
    force_merging: Optional[str] = None
    force_zipping: Optional[str] = None
    force_packing: Optional[str] = None

    # RomCenter
    plugin: Optional[str] = None
    dat_version: Optional[str] = None
    ref_name: Optional[str] = None
    emulator_version: Optional[str] = None

    # Delimited dialects
    file_name: Optional[str] = None
    columns: Optional[List[str]] = None

    extra: List[str] = field(default_factory=list)
    extra_positions: List[int] = field(default_factory=list)


@dataclass
class Machine(ExtrasMixin, ModelNode):
    """
    A game, set, BIOS or device: a named collection of items.

    The AttractMode presentation fields are only populated by that dialect.
    """
    name: Optional[str] = None
    description: Optional[str] = None
    year: Optional[str] = None
    manufacturer: Optional[str] = None
    category: Optional[str] = None
    cloneof: Optional[str] = None
    romof: Optional[str] = None
    sampleof: Optional[str] = None
    comment: Optional[str] = None
    is_bios: bool = False
    is_device: bool = False

    # AttractMode romlist columns
    emulator: Optional[str] = None
    players: Optional[str] = None
    rotation: Optional[str] = None
    control: Optional[str] = None
    status: Optional[str] = None
    display_count: Optional[str] = None
    display_type: Optional[str] = None
    extra_info: Optional[str] = None
    buttons: Optional[str] = None
    favorite: Optional[str] = None
    tags: Optional[str] = None
    played_count: Optional[str] = None
    played_time: Optional[str] = None

    items: List[DatItem] = field(default_factory=list)
    extra: List[str] = field(default_factory=list)
    extra_positions: List[int] = field(default_factory=list)

    def items_of(self, item_class: Type[ItemT]) -> List[ItemT]:
        """Return the machine's items of one variant, in order."""
        return [item for item in self.items if isinstance(item, item_class)]

    @property
    def roms(self) -> List[Rom]:
        return self.items_of(Rom)

    @property
    def disks(self) -> List[Disk]:
        return self.items_of(Disk)

    @property
    def media(self) -> List[Media]:
        return self.items_of(Media)


@dataclass
class MetadataFile(ExtrasMixin, ModelNode):
    """
    Root of the canonical tree.

    ``origin`` names the dialect that produced the tree; writers only
    re-emit extras captured from their own dialect.
    """
    header: Header = field(default_factory=Header)
    machines: List[Machine] = field(default_factory=list)
    extra: List[str] = field(default_factory=list)
    extra_positions: List[int] = field(default_factory=list)
    origin: Optional[str] = None

    def find_machine(self, name: str) -> Optional[Machine]:
        """Return the first machine with this name, if any."""
        for machine in self.machines:
            if machine.name == name:
                return machine
        return None

    def statistics(self) -> Dict[str, int]:
        """
        Count machines and items by variant.

        Returns:
            Mapping with 'machines', one key per item type present, and
            'extras' (raw lines kept at any level)
        """
        counts: Counter = Counter()
        extras = len(self.extra) + len(self.header.extra)
        for machine in self.machines:
            counts['machines'] += 1
            extras += len(machine.extra)
            for item in machine.items:
                counts[item.item_type] += 1
                extras += len(item.extra)
        stats = {'machines': counts.pop('machines', 0)}
        stats.update(sorted(counts.items()))
        stats['extras'] = extras
        return stats
