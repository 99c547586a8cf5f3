"""ClrMamePro DAT format (``clrmamepro ( ... )`` / ``game ( ... )`` blocks)."""

from typing import List

from ..models import (
    Archive,
    BiosSet,
    Chip,
    DipSwitch,
    Disk,
    Driver,
    Input,
    Media,
    MetadataFile,
    Release,
    Rom,
    Sample,
    Sound,
    Video,
)
from ..parsing.block import BlockGrammar, BlockParser, BlockWriter, RecordSpec
from .base import DatFormatHandler

CLRMAMEPRO_GRAMMAR = BlockGrammar(
    name='clrmamepro',
    header_keywords=('clrmamepro', 'romvault'),
    header_fields={
        'name': 'name',
        'description': 'description',
        'rootdir': 'rootdir',
        'category': 'category',
        'version': 'version',
        'date': 'date',
        'author': 'author',
        'homepage': 'homepage',
        'url': 'url',
        'comment': 'comment',
        'header': 'header',
        'type': 'type',
        'forcemerging': 'force_merging',
        'forcezipping': 'force_zipping',
        'forcepacking': 'force_packing',
    },
    machine_keywords={
        'game': {},
        'machine': {},
        'set': {},
        'resource': {'is_bios': True},
    },
    machine_fields={
        'name': 'name',
        'description': 'description',
        'year': 'year',
        'manufacturer': 'manufacturer',
        'category': 'category',
        'cloneof': 'cloneof',
        'romof': 'romof',
        'sampleof': 'sampleof',
    },
    records={
        'release': RecordSpec(Release, {
            'name': 'name',
            'region': 'region',
            'language': 'language',
            'date': 'date',
            'default': 'default',
        }),
        'biosset': RecordSpec(BiosSet, {
            'name': 'name',
            'description': 'description',
            'default': 'default',
        }),
        'rom': RecordSpec(Rom, {
            'name': 'name',
            'size': 'size',
            'crc': 'crc',
            'md5': 'md5',
            'sha1': 'sha1',
            'sha256': 'sha256',
            'sha384': 'sha384',
            'sha512': 'sha512',
            'spamsum': 'spamsum',
            'xxh3_64': 'xxh3_64',
            'xxh3_128': 'xxh3_128',
            'merge': 'merge',
            'status': 'status',
            'region': 'region',
            'flags': 'flags',
            'offs': 'offs',
            'serial': 'serial',
            'header': 'header',
            'date': 'date',
            'inverted': 'inverted',
            'mia': 'mia',
        }),
        'disk': RecordSpec(Disk, {
            'name': 'name',
            'md5': 'md5',
            'sha1': 'sha1',
            'merge': 'merge',
            'status': 'status',
            'flags': 'flags',
        }),
        'media': RecordSpec(Media, {
            'name': 'name',
            'md5': 'md5',
            'sha1': 'sha1',
            'sha256': 'sha256',
            'spamsum': 'spamsum',
        }),
        'sample': RecordSpec(Sample, {'name': 'name'}),
        'archive': RecordSpec(Archive, {'name': 'name'}),
        'chip': RecordSpec(Chip, {
            'type': 'chip_type',
            'name': 'name',
            'flags': 'flags',
            'clock': 'clock',
        }),
        'video': RecordSpec(Video, {
            'screen': 'screen',
            'orientation': 'orientation',
            'x': 'x',
            'y': 'y',
            'aspectx': 'aspectx',
            'aspecty': 'aspecty',
            'freq': 'freq',
        }),
        'sound': RecordSpec(Sound, {'channels': 'channels'}),
        'input': RecordSpec(Input, {
            'players': 'players',
            'control': 'control',
            'buttons': 'buttons',
            'coins': 'coins',
            'tilt': 'tilt',
            'service': 'service',
        }),
        'dipswitch': RecordSpec(DipSwitch, {
            'name': 'name',
            'entry': 'entries',
            'default': 'default',
        }),
        'driver': RecordSpec(Driver, {
            'status': 'status',
            'emulation': 'emulation',
            'color': 'color',
            'sound': 'sound',
            'graphic': 'graphic',
            'cocktail': 'cocktail',
            'protection': 'protection',
            'savestate': 'savestate',
            'palettesize': 'palettesize',
        }),
    },
    standalone_items={'sample': Sample},
    quote_values=True,
    unquoted_keys=frozenset({
        'size', 'crc', 'md5', 'sha1', 'sha256', 'sha384', 'sha512', 'spamsum',
        'xxh3_64', 'xxh3_128', 'status', 'offs', 'flags', 'default', 'inverted',
        'mia', 'clock', 'x', 'y', 'aspectx', 'aspecty', 'freq', 'channels',
        'players', 'buttons', 'coins', 'tilt', 'service', 'emulation', 'color',
        'sound', 'graphic', 'cocktail', 'protection', 'savestate', 'palettesize',
        'orientation', 'screen', 'forcemerging', 'forcezipping', 'forcepacking',
    }),
)


class ClrMameProFormat(DatFormatHandler):
    """Reads and writes ClrMamePro DATs."""

    name = 'clrmamepro'
    extensions = ('.dat',)

    def read_lines(self, lines: List[str]) -> MetadataFile:
        parser = BlockParser(CLRMAMEPRO_GRAMMAR, strict=self.strict)
        metadata = parser.parse(lines)
        self.ambiguities.extend(parser.ambiguities)
        return metadata

    def write_lines(self, metadata: MetadataFile) -> List[str]:
        writer = BlockWriter(
            CLRMAMEPRO_GRAMMAR,
            quotes=self.quotes,
            preserve_extras=self.preserve_extras,
        )
        return writer.write(metadata)
