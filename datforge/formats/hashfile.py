"""
Hashfiles: one ``hash file`` (or ``file hash``) entry per line.

SFV files put the CRC32 after the file name; md5sum-style files (MD5, SHA1,
SHA256, SHA384, SHA512, SpamSum) put the hash first. A hashfile carries no
set structure, so all entries become ROMs of a single machine.
"""

import logging
from enum import Enum
from typing import List

from ..errors import Ambiguity
from ..models import Header, Machine, MetadataFile, Rom
from ..parsing.classify import split_hash_line
from .base import DatFormatHandler

logger = logging.getLogger(__name__)

HASHFILE_HEADER_NAME = "Hashfile"


class HashType(Enum):
    """Hashfile variants, valued by the Rom field they fill."""
    CRC = "crc"
    MD5 = "md5"
    SHA1 = "sha1"
    SHA256 = "sha256"
    SHA384 = "sha384"
    SHA512 = "sha512"
    SPAMSUM = "spamsum"

    @property
    def hash_last(self) -> bool:
        return self is HashType.CRC

    @property
    def extension(self) -> str:
        return '.sfv' if self is HashType.CRC else f'.{self.value}'


class HashfileFormat(DatFormatHandler):
    """Reads and writes one hashfile variant."""

    name = 'hashfile'

    def __init__(self, hash_type: HashType = HashType.CRC, **kwargs):
        super().__init__(**kwargs)
        self.hash_type = hash_type
        self.extensions = (hash_type.extension,)

    def read_lines(self, lines: List[str]) -> MetadataFile:
        metadata = MetadataFile(header=Header(name=HASHFILE_HEADER_NAME), origin=self.name)
        machine = Machine()

        for number, raw_line in enumerate(lines, start=1):
            line = raw_line.strip()
            if not line:
                continue
            if line.startswith(';'):
                metadata.extra.append(line)
                continue

            entry = split_hash_line(line, self.hash_type.hash_last)
            if entry is None:
                metadata.extra.append(line)
                self._ambiguous(number, line)
                continue

            file_name, hash_value = entry
            rom = Rom(name=file_name)
            rom.write(self.hash_type.value, hash_value)
            machine.items.append(rom)

        if machine.items:
            metadata.machines.append(machine)
        logger.info(f"Parsed {self.hash_type.name} hashfile: {len(machine.items)} entries")
        return metadata

    def write_lines(self, metadata: MetadataFile) -> List[str]:
        lines: List[str] = list(metadata.extra) if self.keeps_extras(metadata) else []
        for machine in metadata.machines:
            for item in machine.items:
                hash_value = item.read_string(self.hash_type.value)
                if not item.read('name') or not hash_value:
                    continue
                if self.hash_type.hash_last:
                    lines.append(f"{item.name} {hash_value}")
                else:
                    lines.append(f"{hash_value} {item.name}")
        return lines

    def _ambiguous(self, number: int, line: str) -> None:
        logger.debug(f"Unrecognized hashfile line {number}: {line}")
        self.ambiguities.append(Ambiguity(number, line, 'file'))
