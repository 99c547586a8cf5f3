"""
AttractMode romlist format.

Semicolon-separated rows under a ``#Name;Title;...`` header. Older romlists
have 17 columns; newer ones append five more (favorite, tags, play stats and
file availability). Each row is one machine with one ROM.
"""

import logging
from typing import List, Optional, Tuple

from ..models import Header, Machine, MetadataFile, Rom
from ..parsing.separated_value import SeparatedValueReader, SeparatedValueWriter
from .base import DatFormatHandler

logger = logging.getLogger(__name__)

SEPARATOR = ';'

# (column title, target node, field)
LEGACY_COLUMNS: List[Tuple[str, str, str]] = [
    ('Name', 'machine', 'name'),
    ('Title', 'rom', 'name'),
    ('Emulator', 'machine', 'emulator'),
    ('CloneOf', 'machine', 'cloneof'),
    ('Year', 'machine', 'year'),
    ('Manufacturer', 'machine', 'manufacturer'),
    ('Category', 'machine', 'category'),
    ('Players', 'machine', 'players'),
    ('Rotation', 'machine', 'rotation'),
    ('Control', 'machine', 'control'),
    ('Status', 'machine', 'status'),
    ('DisplayCount', 'machine', 'display_count'),
    ('DisplayType', 'machine', 'display_type'),
    ('AltRomname', 'rom', 'alt_romname'),
    ('AltTitle', 'rom', 'alt_title'),
    ('Extra', 'machine', 'extra_info'),
    ('Buttons', 'machine', 'buttons'),
]

EXTENDED_COLUMNS: List[Tuple[str, str, str]] = LEGACY_COLUMNS + [
    ('Favorite', 'machine', 'favorite'),
    ('Tags', 'machine', 'tags'),
    ('PlayedCount', 'machine', 'played_count'),
    ('PlayedTime', 'machine', 'played_time'),
    ('FileIsAvailable', 'rom', 'file_is_available'),
]


def header_row(columns: List[Tuple[str, str, str]]) -> List[str]:
    titles = [title for title, _, _ in columns]
    titles[0] = '#' + titles[0]
    return titles


def row_to_machine(values: List[str]) -> Machine:
    """
    Map one row positionally onto a machine and its ROM.

    Rows of 22 or more fields use the extended shape, shorter rows the
    legacy one. Missing trailing fields stay None; surplus fields are kept
    in order in the machine's extras.
    """
    columns = EXTENDED_COLUMNS if len(values) >= len(EXTENDED_COLUMNS) else LEGACY_COLUMNS
    machine = Machine()
    rom = Rom()
    for (_, target, field_name), value in zip(columns, values):
        node = machine if target == 'machine' else rom
        node.write(field_name, value)
    machine.extra = values[len(columns):]
    machine.items.append(rom)
    return machine


def machine_to_row(machine: Machine, keep_extras: bool) -> List[Optional[str]]:
    roms = machine.roms
    rom = roms[0] if roms else Rom()
    if len(roms) > 1:
        logger.debug(f"AttractMode keeps one rom per row, dropping {len(roms) - 1} in {machine.name}")

    values = [
        (machine if target == 'machine' else rom).read_string(field_name)
        for _, target, field_name in EXTENDED_COLUMNS
    ]
    if all(value is None for value in values[len(LEGACY_COLUMNS):]):
        values = values[:len(LEGACY_COLUMNS)]

    extras = list(machine.extra) if keep_extras else []
    if not extras:
        while values and values[-1] is None:
            values.pop()
    return values + extras


class AttractModeFormat(DatFormatHandler):
    """Reads and writes AttractMode romlists."""

    name = 'attractmode'
    extensions = ('.txt',)

    def read_lines(self, lines: List[str]) -> MetadataFile:
        reader = SeparatedValueReader(lines, SEPARATOR, header=True)
        machines = [row_to_machine(values) for values in reader.rows()]
        metadata = MetadataFile(
            header=Header(columns=reader.header),
            machines=machines,
            origin=self.name,
        )
        logger.info(f"Parsed AttractMode romlist: {len(machines)} rows")
        return metadata

    def write_lines(self, metadata: MetadataFile) -> List[str]:
        keep_extras = self.keeps_extras(metadata)
        rows = [machine_to_row(machine, keep_extras) for machine in metadata.machines]

        columns = metadata.header.columns if metadata.origin == self.name else None
        if not columns:
            extended = any(len(row) > len(LEGACY_COLUMNS) for row in rows)
            columns = header_row(EXTENDED_COLUMNS if extended else LEGACY_COLUMNS)

        writer = SeparatedValueWriter(SEPARATOR, quotes=bool(self.quotes))
        return [writer.write_row(columns)] + [writer.write_row(row) for row in rows]
