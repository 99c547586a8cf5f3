"""Line classifier for INI-style DATs (RomCenter)."""

import re
from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Iterator, Optional


class IniRowType(Enum):
    NONE = "none"
    SECTION_HEADER = "section_header"
    KEY_VALUE = "key_value"
    COMMENT = "comment"
    INVALID = "invalid"


@dataclass
class IniRow:
    """
    One classified INI line.

    ``section`` is the section the line belongs to (for a header, the one
    it opens).
    """
    row_type: IniRowType
    line: str
    section: Optional[str] = None
    key: Optional[str] = None
    value: Optional[str] = None


_SECTION_RE = re.compile(r'^\[(.*)\]$')


class IniReader:
    """Iterates the classified lines of an INI document."""

    def __init__(self, lines: Iterable[str]):
        self.lines = lines
        self.section: Optional[str] = None

    def rows(self) -> Iterator[IniRow]:
        for raw_line in self.lines:
            line = raw_line.strip()

            if not line:
                yield IniRow(IniRowType.NONE, line, self.section)
                continue

            if line.startswith(';'):
                yield IniRow(IniRowType.COMMENT, line, self.section)
                continue

            match = _SECTION_RE.match(line)
            if match:
                self.section = match.group(1).strip()
                yield IniRow(IniRowType.SECTION_HEADER, line, self.section)
                continue

            if '=' in line:
                key, value = line.split('=', 1)
                yield IniRow(IniRowType.KEY_VALUE, line, self.section,
                             key=key.strip(), value=value.strip())
                continue

            yield IniRow(IniRowType.INVALID, line, self.section)
