"""
Generic separated-value DATs (CSV, TSV, SSV).

One headered row per item. The 14-column layout carries up to SHA256; the
17-column layout adds SHA384, SHA512 and SpamSum before ``Status``. The
``Type`` column selects the item kind. Rows of the same game that follow
each other are grouped into one machine.
"""

import logging
from typing import List, Optional

from ..models import (
    DatItem,
    Disk,
    ItemStatus,
    Machine,
    Media,
    MetadataFile,
    Rom,
    interleave_extras,
)
from ..parsing.separated_value import SeparatedValueReader, SeparatedValueWriter, join_row
from .base import DatFormatHandler

logger = logging.getLogger(__name__)

LEGACY_HEADER = [
    'File Name', 'Internal Name', 'Description', 'Game Name', 'Game Description',
    'Type', 'Rom Name', 'Disk Name', 'Size', 'CRC', 'MD5', 'SHA1', 'SHA256', 'Status',
]

EXTENDED_HEADER = LEGACY_HEADER[:-1] + ['SHA384', 'SHA512', 'SpamSum', 'Status']

# Row field names in column order
LEGACY_FIELDS = [
    'file_name', 'internal_name', 'description', 'game_name', 'game_description',
    'type', 'rom_name', 'disk_name', 'size', 'crc', 'md5', 'sha1', 'sha256', 'status',
]

EXTENDED_FIELDS = LEGACY_FIELDS[:-1] + ['sha384', 'sha512', 'spamsum', 'status']

# Item field -> row field, per item kind
ITEM_FIELDS = {
    'rom': {
        'name': 'rom_name', 'size': 'size', 'crc': 'crc', 'md5': 'md5',
        'sha1': 'sha1', 'sha256': 'sha256', 'sha384': 'sha384',
        'sha512': 'sha512', 'spamsum': 'spamsum', 'status': 'status',
    },
    'disk': {'name': 'disk_name', 'md5': 'md5', 'sha1': 'sha1', 'status': 'status'},
    'media': {
        'name': 'disk_name', 'md5': 'md5', 'sha1': 'sha1',
        'sha256': 'sha256', 'spamsum': 'spamsum',
    },
}

ITEM_CLASSES = {'rom': Rom, 'disk': Disk, 'media': Media}

# Marks status text that is not an ItemStatus, kept in the item's extras
STATUS_PREFIX = 'status='


def row_to_item(row: dict) -> Optional[DatItem]:
    """
    Build the item a row describes, or None for an unknown Type.

    Empty cells leave their field absent; they render empty again on write.
    """
    kind = (row.get('type') or '').lower()
    if kind not in ITEM_CLASSES:
        return None
    item = ITEM_CLASSES[kind]()
    for field_name, column in ITEM_FIELDS[kind].items():
        value = row.get(column)
        if not value:
            continue
        if field_name == 'status':
            status = ItemStatus.from_string(value)
            if status is None:
                item.extra.append(f"{STATUS_PREFIX}{value}")
                continue
            value = status
        item.write(field_name, value)
    return item


class SeparatedValueFormat(DatFormatHandler):
    """Reads and writes CSV/TSV/SSV DATs; the separator picks the variant."""

    name = 'separated_value'

    def __init__(self, separator: str = ',', **kwargs):
        super().__init__(**kwargs)
        self.separator = separator

    def read_lines(self, lines: List[str]) -> MetadataFile:
        reader = SeparatedValueReader(lines, self.separator, header=True)
        metadata = MetadataFile(origin=self.name)
        machine: Optional[Machine] = None

        for values in reader.rows():
            fields = EXTENDED_FIELDS if len(values) >= len(EXTENDED_FIELDS) else LEGACY_FIELDS
            row = dict(zip(fields, values))
            surplus = values[len(fields):]

            if not metadata.machines:
                metadata.header.file_name = row.get('file_name')
                metadata.header.name = row.get('internal_name')
                metadata.header.description = row.get('description')

            game_name = row.get('game_name')
            if machine is None or machine.name != game_name:
                machine = Machine(name=game_name, description=row.get('game_description'))
                metadata.machines.append(machine)

            item = row_to_item(row)
            if item is None:
                line = join_row(values, self.separator, quotes=False)
                logger.debug(f"Unknown item type '{row.get('type')}' in {game_name}")
                machine.keep_extra(line, len(machine.items))
                continue
            item.extra.extend(surplus)
            machine.items.append(item)

        metadata.header.columns = reader.header
        logger.info(f"Parsed separated value DAT: {len(metadata.machines)} machines")
        return metadata

    def write_lines(self, metadata: MetadataFile) -> List[str]:
        keep_extras = self.keeps_extras(metadata)
        header = metadata.header

        extended = any(
            item.read('sha384') or item.read('sha512') or item.read('spamsum')
            for machine in metadata.machines
            for item in machine.items
        )
        if metadata.origin == self.name and header.columns:
            extended = extended or len(header.columns) >= len(EXTENDED_HEADER)
            columns = header.columns
        else:
            columns = EXTENDED_HEADER if extended else LEGACY_HEADER
        fields = EXTENDED_FIELDS if extended else LEGACY_FIELDS

        quotes = True if self.quotes is None else self.quotes
        writer = SeparatedValueWriter(self.separator, quotes=quotes)
        lines = [writer.write_row(columns)]

        for machine in metadata.machines:
            rows: List[List[str]] = []
            for item in machine.items:
                if item.item_type not in ITEM_FIELDS:
                    rows.append([])
                    continue
                row = {
                    'file_name': header.file_name,
                    'internal_name': header.name,
                    'description': header.description,
                    'game_name': machine.name,
                    'game_description': machine.description,
                    'type': item.item_type,
                }
                for field_name, column in ITEM_FIELDS[item.item_type].items():
                    row[column] = item.read_string(field_name)

                extras = list(item.extra) if keep_extras else []
                raw_status = [e for e in extras if e.startswith(STATUS_PREFIX)]
                if raw_status:
                    extras.remove(raw_status[0])
                    if row.get('status') is None:
                        row['status'] = raw_status[0][len(STATUS_PREFIX):]

                values = [row.get(name) for name in fields] + extras
                rows.append([writer.write_row(values)])

            if keep_extras:
                rows = interleave_extras(rows, machine.extra, machine.extra_positions)
            for chunk in rows:
                lines.extend(chunk)
        return lines
