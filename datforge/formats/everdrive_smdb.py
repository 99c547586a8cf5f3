"""
Everdrive SMDB format.

Headerless tab-separated rows of ``SHA256, name, SHA1, MD5, CRC32[, size]``,
one ROM per row.
"""

import logging
import re
from typing import List, Optional

from ..models import Header, Machine, MetadataFile, Rom
from ..parsing.separated_value import SeparatedValueReader, SeparatedValueWriter
from .base import DatFormatHandler

logger = logging.getLogger(__name__)

SEPARATOR = '\t'

FIELDS = ['sha256', 'name', 'sha1', 'md5', 'crc', 'size']
REQUIRED_FIELDS = 5

SMDB_HEADER_NAME = "Everdrive SMDB"

# First line signature used by format detection
ROW_PATTERN = re.compile(r'^[0-9a-fA-F]{64}\t.+\t[0-9a-fA-F]{40}\t[0-9a-fA-F]{32}\t[0-9a-fA-F]{8}')


def row_to_machine(values: List[str]) -> Machine:
    rom = Rom()
    for field_name, value in zip(FIELDS, values):
        rom.write(field_name, value)
    rom.extra = values[len(FIELDS):]
    return Machine(items=[rom])


def rom_to_row(rom: Rom, keep_extras: bool) -> List[Optional[str]]:
    values = [rom.read_string(field_name) for field_name in FIELDS]
    extras = list(rom.extra) if keep_extras else []
    if not extras and values[-1] is None:
        values.pop()
    return values + extras


class EverdriveSMDBFormat(DatFormatHandler):
    """Reads and writes Everdrive SMDB files."""

    name = 'everdrive_smdb'
    extensions = ('.txt',)

    def read_lines(self, lines: List[str]) -> MetadataFile:
        reader = SeparatedValueReader(lines, SEPARATOR)
        machines = []
        for values in reader.rows():
            if len(values) < REQUIRED_FIELDS:
                logger.debug(f"Short SMDB row with {len(values)} fields: {values}")
            machines.append(row_to_machine(values))
        logger.info(f"Parsed Everdrive SMDB: {len(machines)} rows")
        return MetadataFile(
            header=Header(name=SMDB_HEADER_NAME),
            machines=machines,
            origin=self.name,
        )

    def write_lines(self, metadata: MetadataFile) -> List[str]:
        keep_extras = self.keeps_extras(metadata)
        writer = SeparatedValueWriter(SEPARATOR, quotes=bool(self.quotes))
        return [
            writer.write_row(rom_to_row(rom, keep_extras))
            for machine in metadata.machines
            for rom in machine.roms
        ]
