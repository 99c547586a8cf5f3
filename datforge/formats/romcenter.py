"""
RomCenter DAT format.

INI-style sections carry the header (``[CREDITS]``, ``[DAT]``,
``[EMULATOR]``); ``[GAMES]`` lists one ROM per line as ``¬``-separated
fields::

    ¬parent¬parent description¬game¬game description¬rom¬crc¬size¬romof¬merge¬

The parent description has no canonical counterpart and is dropped. Fields
after the merge name, before the closing separator, are kept in the rom's
extras.
"""

import logging
from typing import Dict, List, Optional

from ..errors import Ambiguity
from ..models import Machine, MetadataFile, Rom, interleave_extras
from ..parsing.ini import IniReader, IniRowType
from .base import DatFormatHandler

logger = logging.getLogger(__name__)

FIELD_SEPARATOR = '¬'

# section -> {key -> Header field}
SECTION_FIELDS: Dict[str, Dict[str, str]] = {
    'CREDITS': {
        'author': 'author',
        'version': 'version',
        'email': 'email',
        'homepage': 'homepage',
        'url': 'url',
        'date': 'date',
        'comment': 'comment',
    },
    'DAT': {
        'version': 'dat_version',
        'plugin': 'plugin',
    },
    'EMULATOR': {
        'refname': 'ref_name',
        'version': 'emulator_version',
    },
}

SECTION_ORDER = list(SECTION_FIELDS) + ['GAMES']

# Fields of a game row, up to and including the merge name
ROW_FIELDS = 10

TRUE_VALUES = frozenset({'yes', '1', 'true'})


def _merging_from_flags(split: Optional[str], merge: Optional[str]) -> str:
    if (merge or '').lower() in TRUE_VALUES:
        return 'merged'
    if (split or '').lower() in TRUE_VALUES:
        return 'split'
    return 'none'


class RomCenterFormat(DatFormatHandler):
    """Reads and writes RomCenter DATs."""

    name = 'romcenter'
    extensions = ('.dat',)

    def read_lines(self, lines: List[str]) -> MetadataFile:
        metadata = MetadataFile(origin=self.name)
        header = metadata.header
        machines: Dict[str, Machine] = {}
        flags: Dict[str, str] = {}
        known_section = False
        # Written sections and game rows that precede the current line
        file_position = 0

        for number, row in enumerate(IniReader(lines).rows(), start=1):
            if row.row_type is IniRowType.NONE:
                continue

            section = (row.section or '').upper()

            if row.row_type is IniRowType.SECTION_HEADER:
                known_section = section in SECTION_ORDER
                if known_section:
                    file_position = max(file_position, SECTION_ORDER.index(section) + 1)
                else:
                    self._keep(metadata, file_position, number, row.line, 'file')
                continue

            if not known_section:
                metadata.keep_extra(row.line, file_position)
                continue

            if row.row_type is IniRowType.COMMENT:
                if section == 'GAMES':
                    metadata.keep_extra(row.line, file_position)
                else:
                    header.keep_extra(row.line, SECTION_ORDER.index(section))
                continue

            if section == 'GAMES':
                if FIELD_SEPARATOR not in row.line:
                    self._keep(metadata, file_position, number, row.line, 'games')
                    continue
                self._add_game_row(row.line, machines)
                file_position += 1
                continue

            key = (row.key or '').lower()
            if section == 'DAT' and key in ('split', 'merge'):
                flags[key] = row.value
                continue

            field_name = SECTION_FIELDS[section].get(key)
            if row.row_type is IniRowType.KEY_VALUE and field_name:
                header.write(field_name, row.value)
            else:
                self._keep(header, SECTION_ORDER.index(section), number, row.line,
                           section.lower())

        if flags:
            header.force_merging = _merging_from_flags(flags.get('split'), flags.get('merge'))
        metadata.machines = list(machines.values())
        logger.info(f"Parsed RomCenter DAT: {len(metadata.machines)} games")
        return metadata

    def _add_game_row(self, line: str, machines: Dict[str, Machine]) -> None:
        values = line.split(FIELD_SEPARATOR)
        if len(values) > 1 and values[-1] == '':
            # Rows close with a separator
            values.pop()
        values += [''] * (ROW_FIELDS - len(values))
        parent_name, _, game_name, game_description, rom_name, crc, size, romof, merge = (
            values[1:ROW_FIELDS]
        )

        machine = machines.get(game_name)
        if machine is None:
            machine = Machine(
                name=game_name,
                description=game_description,
                cloneof=parent_name or None,
                romof=romof or None,
            )
            machines[game_name] = machine

        rom = Rom(name=rom_name, crc=crc, size=size, merge=merge or None)
        rom.extra = values[ROW_FIELDS:]
        machine.items.append(rom)

    def write_lines(self, metadata: MetadataFile) -> List[str]:
        header = metadata.header
        keep_extras = self.keeps_extras(metadata)
        chunks: List[List[str]] = []

        for index, (section, table) in enumerate(SECTION_FIELDS.items()):
            body = []
            for key, field_name in table.items():
                value = header.read_string(field_name)
                if value is not None:
                    body.append(f"{key}={value}")
            if section == 'DAT' and header.force_merging is not None:
                body.append(f"split={'yes' if header.force_merging == 'split' else 'no'}")
                body.append(f"merge={'yes' if header.force_merging == 'merged' else 'no'}")
            if keep_extras:
                body.extend(
                    line for line, position in zip(header.extra, header.extra_positions)
                    if position == index
                )
            chunks.append([f"[{section}]"] + body if body else [])

        if keep_extras:
            chunks[-1] = chunks[-1] + header.extra[len(header.extra_positions):]

        chunks.append(["[GAMES]"])
        for machine in metadata.machines:
            for rom in machine.roms:
                values = [
                    '',
                    machine.cloneof or '',
                    '',
                    machine.name or '',
                    machine.description or '',
                    rom.name or '',
                    rom.crc or '',
                    rom.size or '',
                    machine.romof or '',
                    rom.merge or '',
                ]
                if keep_extras:
                    values.extend(rom.extra)
                chunks.append([FIELD_SEPARATOR.join(values) + FIELD_SEPARATOR])

        if keep_extras:
            chunks = interleave_extras(chunks, metadata.extra, metadata.extra_positions)
        return [line for chunk in chunks for line in chunk]

    def _keep(self, owner, position: int, number: int, line: str, context: str) -> None:
        owner.keep_extra(line, position)
        logger.debug(f"Unrecognized RomCenter line {number} in {context}: {line}")
        self.ambiguities.append(Ambiguity(number, line, context))
