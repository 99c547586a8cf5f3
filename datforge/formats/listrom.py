"""MAME listrom format: adapter between listrom sets and the canonical tree."""

from typing import List

from ..models import Disk, Header, ItemStatus, Machine, MetadataFile, Rom
from ..parsing.listrom import ListromFile, ListromParser, ListromRow, ListromSet, ListromWriter
from .base import DatFormatHandler

LISTROM_HEADER_NAME = "MAME Listrom"


def row_to_item(row: ListromRow):
    """Rows with a size are ROMs; rows without one are CHD disks."""
    if row.no_good_dump_known:
        status = ItemStatus.NODUMP
    elif row.bad:
        status = ItemStatus.BADDUMP
    else:
        status = None

    if row.size is not None:
        return Rom(name=row.name, size=row.size, crc=row.crc, sha1=row.sha1,
                   md5=row.md5, status=status)
    return Disk(name=row.name, md5=row.md5, sha1=row.sha1, status=status)


def item_to_row(item) -> ListromRow:
    row = ListromRow(name=item.name or '', md5=item.md5, sha1=item.sha1)
    if isinstance(item, Rom):
        row.size = item.size
        row.crc = item.crc
    row.bad = item.status is ItemStatus.BADDUMP
    row.no_good_dump_known = item.status is ItemStatus.NODUMP
    return row


def to_metadata(listrom: ListromFile) -> MetadataFile:
    metadata = MetadataFile(
        header=Header(name=LISTROM_HEADER_NAME),
        extra=list(listrom.extra),
        extra_positions=list(listrom.extra_positions),
        origin=ListromFormat.name,
    )
    for listrom_set in listrom.sets:
        machine = Machine(
            name=listrom_set.name,
            is_device=listrom_set.device is not None,
            extra=list(listrom_set.extra),
            extra_positions=list(listrom_set.extra_positions),
        )
        machine.items.extend(row_to_item(row) for row in listrom_set.rows)
        metadata.machines.append(machine)
    return metadata


def from_metadata(metadata: MetadataFile, keep_extras: bool = True) -> ListromFile:
    listrom = ListromFile()
    if keep_extras:
        listrom.extra = list(metadata.extra)
        listrom.extra_positions = list(metadata.extra_positions)

    for machine in metadata.machines:
        listrom_set = ListromSet()
        if machine.is_device:
            listrom_set.device = machine.name
        else:
            listrom_set.driver = machine.name

        # Row index each item position maps to, once other item kinds are dropped
        row_positions = []
        for item in machine.items:
            row_positions.append(len(listrom_set.rows))
            if isinstance(item, (Rom, Disk)):
                listrom_set.rows.append(item_to_row(item))
        row_positions.append(len(listrom_set.rows))

        if keep_extras:
            listrom_set.extra = list(machine.extra)
            listrom_set.extra_positions = [
                row_positions[min(position, len(machine.items))]
                for position in machine.extra_positions
            ]
        listrom.sets.append(listrom_set)
    return listrom


class ListromFormat(DatFormatHandler):
    """Reads and writes MAME listrom output."""

    name = 'listrom'
    extensions = ('.txt',)

    def read_lines(self, lines: List[str]) -> MetadataFile:
        parser = ListromParser()
        listrom = parser.parse(lines)
        self.ambiguities.extend(parser.ambiguities)
        return to_metadata(listrom)

    def write_lines(self, metadata: MetadataFile) -> List[str]:
        listrom = from_metadata(metadata, keep_extras=self.keeps_extras(metadata))
        return ListromWriter(preserve_extras=self.preserve_extras).write(listrom)
