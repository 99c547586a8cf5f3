"""
DAT format handlers, format detection and conversion entry points.

Every dialect converts to and from the canonical tree in
:mod:`datforge.models`; converting between two dialects always goes
through that tree.
"""

import logging
import re
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Callable, Dict, List, Optional, Union

from ..errors import Ambiguity, DatReadError, UnknownFormatError
from ..models import MetadataFile
from .attractmode import AttractModeFormat
from .base import DatFormatHandler
from .clrmamepro import ClrMameProFormat
from .doscenter import DosCenterFormat
from .everdrive_smdb import ROW_PATTERN as SMDB_ROW_PATTERN
from .everdrive_smdb import EverdriveSMDBFormat
from .hashfile import HashfileFormat, HashType
from .listrom import ListromFormat
from .logiqx import LogiqxFormat
from .romcenter import RomCenterFormat
from .separated_value import SeparatedValueFormat

logger = logging.getLogger(__name__)


class DatFormat(Enum):
    """Every readable and writable dialect."""
    LOGIQX = "logiqx"
    CLRMAMEPRO = "clrmamepro"
    DOSCENTER = "doscenter"
    LISTROM = "listrom"
    ATTRACTMODE = "attractmode"
    EVERDRIVE_SMDB = "smdb"
    ROMCENTER = "romcenter"
    CSV = "csv"
    TSV = "tsv"
    SSV = "ssv"
    SFV = "sfv"
    MD5 = "md5"
    SHA1 = "sha1"
    SHA256 = "sha256"
    SHA384 = "sha384"
    SHA512 = "sha512"
    SPAMSUM = "spamsum"

    @classmethod
    def from_name(cls, name: str) -> 'DatFormat':
        """
        Look up a format by its value or member name, case-insensitively.

        Raises:
            UnknownFormatError: If no format matches
        """
        lowered = name.strip().lower()
        for member in cls:
            if lowered in (member.value, member.name.lower()):
                return member
        raise UnknownFormatError(
            f"Unknown DAT format '{name}'. Known formats: "
            + ", ".join(member.value for member in cls)
        )


_HANDLERS: Dict[DatFormat, Callable[..., DatFormatHandler]] = {
    DatFormat.LOGIQX: LogiqxFormat,
    DatFormat.CLRMAMEPRO: ClrMameProFormat,
    DatFormat.DOSCENTER: DosCenterFormat,
    DatFormat.LISTROM: ListromFormat,
    DatFormat.ATTRACTMODE: AttractModeFormat,
    DatFormat.EVERDRIVE_SMDB: EverdriveSMDBFormat,
    DatFormat.ROMCENTER: RomCenterFormat,
    DatFormat.CSV: lambda **kw: SeparatedValueFormat(separator=',', **kw),
    DatFormat.TSV: lambda **kw: SeparatedValueFormat(separator='\t', **kw),
    DatFormat.SSV: lambda **kw: SeparatedValueFormat(separator=';', **kw),
    DatFormat.SFV: lambda **kw: HashfileFormat(HashType.CRC, **kw),
    DatFormat.MD5: lambda **kw: HashfileFormat(HashType.MD5, **kw),
    DatFormat.SHA1: lambda **kw: HashfileFormat(HashType.SHA1, **kw),
    DatFormat.SHA256: lambda **kw: HashfileFormat(HashType.SHA256, **kw),
    DatFormat.SHA384: lambda **kw: HashfileFormat(HashType.SHA384, **kw),
    DatFormat.SHA512: lambda **kw: HashfileFormat(HashType.SHA512, **kw),
    DatFormat.SPAMSUM: lambda **kw: HashfileFormat(HashType.SPAMSUM, **kw),
}

# Extensions that identify a format without looking at the content
EXTENSION_FORMATS: Dict[str, DatFormat] = {
    '.csv': DatFormat.CSV,
    '.tsv': DatFormat.TSV,
    '.ssv': DatFormat.SSV,
    '.sfv': DatFormat.SFV,
    '.md5': DatFormat.MD5,
    '.sha1': DatFormat.SHA1,
    '.sha256': DatFormat.SHA256,
    '.sha384': DatFormat.SHA384,
    '.sha512': DatFormat.SHA512,
    '.spamsum': DatFormat.SPAMSUM,
    '.xml': DatFormat.LOGIQX,
}

ATTRACTMODE_HEADER_PREFIX = "#name;title;emulator;cloneof;year;manufacturer;category;players"

_LISTROM_RE = re.compile(r'^(no )?roms required for (driver|device)')
_BLOCK_OPEN_RE = re.compile(r'^[a-z_]+\s*\(')


def create_handler(fmt: Union[DatFormat, str], **options) -> DatFormatHandler:
    """
    Create a handler for one format.

    Args:
        fmt: Format member or name
        **options: Handler options (strict, preserve_extras, quotes)
    """
    if isinstance(fmt, str):
        fmt = DatFormat.from_name(fmt)
    return _HANDLERS[fmt](**options)


def _sniff_line(line: str) -> Optional[DatFormat]:
    first = line.strip()
    lowered = first.lower()

    if lowered.startswith('<?xml') or lowered.startswith('<datafile'):
        return DatFormat.LOGIQX
    if SMDB_ROW_PATTERN.match(first):
        return DatFormat.EVERDRIVE_SMDB
    if lowered.startswith('[') and lowered.endswith(']'):
        return DatFormat.ROMCENTER
    if _LISTROM_RE.match(lowered):
        return DatFormat.LISTROM
    if lowered.startswith(ATTRACTMODE_HEADER_PREFIX):
        return DatFormat.ATTRACTMODE
    if lowered.startswith('doscenter'):
        return DatFormat.DOSCENTER
    if _BLOCK_OPEN_RE.match(lowered):
        return DatFormat.CLRMAMEPRO
    return None


def sniff_format(first_lines: List[str]) -> DatFormat:
    """
    Guess a format from the first meaningful lines of a file.

    Lines are tried in order, so a leading comment or stray line does not
    hide the signature on the next one. Falls back to ClrMamePro, the most
    common block format.
    """
    for line in first_lines:
        detected = _sniff_line(line)
        if detected is not None:
            return detected
    return DatFormat.CLRMAMEPRO


def detect_format(path: Union[str, Path]) -> DatFormat:
    """
    Determine the format of a DAT file.

    Unambiguous extensions decide directly; everything else is sniffed
    from the first two non-blank lines.

    Raises:
        DatReadError: If the file cannot be read
    """
    path = Path(path)
    by_extension = EXTENSION_FORMATS.get(path.suffix.lower())
    if by_extension is not None:
        return by_extension

    first_lines: List[str] = []
    try:
        with open(path, 'r', encoding='utf-8-sig', errors='replace') as f:
            for line in f:
                if line.strip():
                    first_lines.append(line)
                if len(first_lines) == 2:
                    break
    except OSError as e:
        raise DatReadError(path, e) from e

    detected = sniff_format(first_lines)
    logger.debug(f"Detected {detected.value} format for {path.name}")
    return detected


def format_for_output(path: Union[str, Path]) -> DatFormat:
    """
    Pick a format for an output path from its extension.

    Raises:
        UnknownFormatError: If the extension does not name a format
    """
    suffix = Path(path).suffix.lower()
    if suffix in EXTENSION_FORMATS:
        return EXTENSION_FORMATS[suffix]
    if suffix == '.dat':
        return DatFormat.CLRMAMEPRO
    raise UnknownFormatError(
        f"Cannot infer an output format from '{Path(path).name}', specify one explicitly"
    )


@dataclass
class ParseResult:
    """A parsed tree, the format it was read as and the ambiguous lines found."""
    metadata: MetadataFile
    format: DatFormat
    ambiguities: List[Ambiguity] = field(default_factory=list)


def read_dat(path: Union[str, Path], fmt: Optional[Union[DatFormat, str]] = None,
             strict: bool = False) -> ParseResult:
    """
    Read a DAT file of any supported format.

    Args:
        path: DAT file path
        fmt: Format to read as; detected when None
        strict: Raise on unterminated blocks instead of recovering

    Raises:
        DatReadError: If the file cannot be read
        DatParseError: If an XML document is malformed
        UnterminatedBlockError: In strict mode, for unclosed blocks
        UnknownFormatError: If ``fmt`` names no format
    """
    if fmt is None:
        fmt = detect_format(path)
    elif isinstance(fmt, str):
        fmt = DatFormat.from_name(fmt)

    handler = create_handler(fmt, strict=strict)
    metadata = handler.read(path)
    for ambiguity in handler.ambiguities:
        logger.debug(f"Kept unrecognized {ambiguity}")
    return ParseResult(metadata=metadata, format=fmt, ambiguities=list(handler.ambiguities))


def write_dat(metadata: MetadataFile, path: Union[str, Path], fmt: Union[DatFormat, str],
              quotes: Optional[bool] = None, preserve_extras: bool = True) -> None:
    """
    Write a canonical tree as a DAT file.

    Raises:
        DatWriteError: If the file cannot be written
        UnknownFormatError: If ``fmt`` names no format
    """
    handler = create_handler(fmt, quotes=quotes, preserve_extras=preserve_extras)
    handler.write(metadata, path)


def convert(source: Union[str, Path], destination: Union[str, Path],
            source_format: Optional[Union[DatFormat, str]] = None,
            destination_format: Optional[Union[DatFormat, str]] = None,
            strict: bool = False, quotes: Optional[bool] = None,
            preserve_extras: bool = True) -> ParseResult:
    """
    Convert a DAT file from one format to another.

    Returns:
        The parse result of the source file
    """
    result = read_dat(source, source_format, strict=strict)
    if destination_format is None:
        destination_format = format_for_output(destination)
    write_dat(result.metadata, destination, destination_format,
              quotes=quotes, preserve_extras=preserve_extras)
    logger.info(
        f"Converted {Path(source).name} ({result.format.value}) to "
        f"{Path(destination).name}"
    )
    return result


__all__ = [
    "AttractModeFormat",
    "ClrMameProFormat",
    "DatFormat",
    "DatFormatHandler",
    "DosCenterFormat",
    "EverdriveSMDBFormat",
    "HashType",
    "HashfileFormat",
    "ListromFormat",
    "LogiqxFormat",
    "ParseResult",
    "RomCenterFormat",
    "SeparatedValueFormat",
    "convert",
    "create_handler",
    "detect_format",
    "format_for_output",
    "read_dat",
    "sniff_format",
    "write_dat",
]
