"""
DosCenter DAT format.

A ClrMamePro variant with a ``DOSCenter (`` header whose keys carry a colon
(``Name:``), ``game`` blocks holding a ``name`` and ``file`` records, and no
value quoting: file names may contain spaces and run up to the next known
key, and dates carry a time part::

    game (
        name Some Game.zip
        file ( name GAME.EXE size 1024 date 1996/01/01 00:00:00 crc 1a2b3c4d )
    )
"""

from typing import List

from ..models import MetadataFile, Rom
from ..parsing.block import BlockGrammar, BlockParser, BlockWriter, RecordSpec
from .base import DatFormatHandler

DOSCENTER_GRAMMAR = BlockGrammar(
    name='doscenter',
    header_keywords=('doscenter',),
    header_fields={
        'Name:': 'name',
        'Description:': 'description',
        'Version:': 'version',
        'Date:': 'date',
        'Author:': 'author',
        'Homepage:': 'homepage',
        'Comment:': 'comment',
    },
    machine_keywords={'game': {}},
    machine_fields={'name': 'name'},
    records={
        'file': RecordSpec(Rom, {
            'name': 'name',
            'size': 'size',
            'date': 'date',
            'crc': 'crc',
        }),
    },
    doscenter=True,
)


class DosCenterFormat(DatFormatHandler):
    """Reads and writes DosCenter DATs."""

    name = 'doscenter'
    extensions = ('.dat',)

    def read_lines(self, lines: List[str]) -> MetadataFile:
        parser = BlockParser(DOSCENTER_GRAMMAR, strict=self.strict)
        metadata = parser.parse(lines)
        self.ambiguities.extend(parser.ambiguities)
        return metadata

    def write_lines(self, metadata: MetadataFile) -> List[str]:
        writer = BlockWriter(DOSCENTER_GRAMMAR, preserve_extras=self.preserve_extras)
        return writer.write(metadata)
