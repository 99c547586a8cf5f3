"""
Parser and writer for MAME ``-listrom`` output.

The format is columnar but not fixed-width: names are padded with a
variable number of spaces, and the checksum column takes one of several
shapes (good ROM, bad dump, no known dump, CHD). Rows are classified by
token count and marker words; rows that fit no shape are kept verbatim in
the extras of their set, or of the file when no set is open.

Example::

    ROMs required for driver "pacman".
    Name                                   Size Checksum
    pacman.6e                              4096 CRC(c1e6ab10) SHA1(e87e059c5be45753f7e9f33dff851f16d6751181)
    pacman.chd                                  NO GOOD DUMP KNOWN
"""

import logging
import re
from dataclasses import dataclass, field
from typing import Iterable, List, Optional

from ..errors import Ambiguity
from ..models import interleave_extras
from .classify import (
    BAD_DUMP,
    NO_GOOD_DUMP_KNOWN,
    ListromRowShape,
    parse_hash_token,
    split_listrom_row,
)

logger = logging.getLogger(__name__)

COLUMN_HEADER = "Name                                   Size Checksum"

_SET_MARKER_RE = re.compile(r'^(No )?ROMs required for (driver|device)\b(.*)$')
_COLUMN_HEADER_RE = re.compile(r'^Name\s+Size\s+Checksum$', re.IGNORECASE)


@dataclass
class ListromRow:
    """One checksum row of a listrom set."""
    name: str
    size: Optional[str] = None
    bad: bool = False
    crc: Optional[str] = None
    sha1: Optional[str] = None
    md5: Optional[str] = None
    no_good_dump_known: bool = False


@dataclass
class ListromSet:
    """A driver or device and its rows; exactly one of the two names is set."""
    driver: Optional[str] = None
    device: Optional[str] = None
    rows: List[ListromRow] = field(default_factory=list)
    extra: List[str] = field(default_factory=list)
    extra_positions: List[int] = field(default_factory=list)

    @property
    def name(self) -> Optional[str]:
        return self.driver if self.driver is not None else self.device


@dataclass
class ListromFile:
    sets: List[ListromSet] = field(default_factory=list)
    extra: List[str] = field(default_factory=list)
    extra_positions: List[int] = field(default_factory=list)


def build_row(name: str, tokens: List[str], shape: ListromRowShape) -> ListromRow:
    """Create a row from a classified remainder."""
    row = ListromRow(name=name)

    if shape in (ListromRowShape.NODUMP_CHD, ListromRowShape.NODUMP_ROM):
        row.no_good_dump_known = True
        if shape is ListromRowShape.NODUMP_ROM:
            row.size = tokens[0]
        return row

    if shape is ListromRowShape.PLAIN_ROM:
        row.size = tokens[0]
        hashes = tokens[1:]
    elif shape is ListromRowShape.BAD_ROM:
        row.size = tokens[0]
        row.bad = True
        hashes = tokens[2:4]
    elif shape is ListromRowShape.BAD_CHD:
        row.bad = True
        hashes = tokens[1:2]
    else:
        hashes = tokens

    for token in hashes:
        algorithm, value = parse_hash_token(token)
        setattr(row, algorithm.lower(), value)
    return row


class ListromParser:
    """
    Parses listrom text into sets of rows.

    A set opens at its ``ROMs required for ...`` marker and closes at the
    next blank line or marker. Rows that fit no shape stay in their set's
    extras and content outside any set goes to the file's extras. Each kept
    line remembers how many rows (or sets) preceded it and is recorded in
    ``self.ambiguities``.
    """

    def __init__(self):
        self.ambiguities: List[Ambiguity] = []

    def parse(self, lines: Iterable[str]) -> ListromFile:
        listrom = ListromFile()
        current: Optional[ListromSet] = None

        for number, raw_line in enumerate(lines, start=1):
            line = raw_line.strip()

            if not line:
                if current is not None:
                    listrom.sets.append(current)
                    current = None
                continue

            marker = _SET_MARKER_RE.match(line)
            if marker:
                if current is not None:
                    listrom.sets.append(current)
                current = ListromSet()
                value = marker.group(3).strip('" .')
                if marker.group(2) == 'device':
                    current.device = value
                else:
                    current.driver = value
                continue

            if _COLUMN_HEADER_RE.match(line):
                continue

            if current is None:
                self._keep(listrom, len(listrom.sets), number, line, 'file')
                continue

            split = split_listrom_row(line)
            if split is None:
                self._keep(current, len(current.rows), number, line, f"set {current.name}")
                continue
            current.rows.append(build_row(*split))

        if current is not None:
            listrom.sets.append(current)

        logger.info(f"Parsed listrom: {len(listrom.sets)} sets")
        return listrom

    def _keep(self, owner, position: int, number: int, line: str, context: str) -> None:
        owner.extra.append(line)
        owner.extra_positions.append(position)
        logger.debug(f"Unrecognized listrom line {number} in {context}: {line}")
        self.ambiguities.append(Ambiguity(number, line, context))


def format_row(row: ListromRow) -> str:
    """Render one row with the name padded so the size column aligns."""
    padding = 40 - len(row.size or '')
    if padding < len(row.name):
        padding = len(row.name) + 2

    parts = [row.name.ljust(padding)]
    if row.size is not None:
        parts.append(f"{row.size} ")

    if row.no_good_dump_known:
        parts.append(NO_GOOD_DUMP_KNOWN)
    else:
        if row.bad:
            parts.append("BAD ")
        if row.size is not None:
            parts.append(f"CRC({row.crc or ''}) ")
            if row.sha1 is None and row.md5:
                parts.append(f"MD5({row.md5}) ")
            else:
                parts.append(f"SHA1({row.sha1 or ''}) ")
        elif row.md5:
            parts.append(f"MD5({row.md5}) ")
        else:
            parts.append(f"SHA1({row.sha1 or ''}) ")
        if row.bad:
            parts.append(BAD_DUMP)

    return ''.join(parts).rstrip()


class ListromWriter:
    """Renders sets back into listrom text."""

    def __init__(self, preserve_extras: bool = True):
        self.preserve_extras = preserve_extras

    def write(self, listrom: ListromFile) -> List[str]:
        chunks = [self._set_lines(listrom_set) for listrom_set in listrom.sets]
        if self.preserve_extras:
            chunks = interleave_extras(chunks, listrom.extra, listrom.extra_positions)

        lines: List[str] = []
        for chunk in chunks:
            if chunk:
                lines.extend(chunk)
                lines.append('')
        return lines

    def _set_lines(self, listrom_set: ListromSet) -> List[str]:
        if listrom_set.name is None:
            return []
        kind = 'device' if listrom_set.driver is None else 'driver'

        rows = [[format_row(row)] if row.name else [] for row in listrom_set.rows]
        if self.preserve_extras:
            rows = interleave_extras(rows, listrom_set.extra, listrom_set.extra_positions)

        if listrom_set.rows:
            lines = [f'ROMs required for {kind} "{listrom_set.name}".', COLUMN_HEADER]
        else:
            lines = [f'No ROMs required for {kind} "{listrom_set.name}".']
        for chunk in rows:
            lines.extend(chunk)
        return lines
