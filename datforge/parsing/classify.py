"""
Line and token classifiers for the textual DAT dialects.

Every function here is pure and total: it inspects one raw line (or one run
of tokens) and reports its structural shape. Lines that fit no shape are
reported as such so the caller can keep them verbatim; nothing here raises.
"""

import re
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Tuple


class CmpRowType(Enum):
    """Structural class of a line in a block-structured (ClrMamePro) file."""
    NONE = "none"
    TOP_LEVEL = "top_level"
    STANDALONE = "standalone"
    INTERNAL = "internal"
    COMMENT = "comment"
    END_TOP_LEVEL = "end_top_level"


@dataclass
class CmpRow:
    """
    One classified line of a block-structured file.

    ``keyword`` holds the block keyword (TOP_LEVEL), the record keyword
    (INTERNAL) or the key (STANDALONE); ``value`` the standalone value with
    surrounding quotes removed; ``pairs`` the ordered key/value tokens of a
    single-line nested record.
    """
    row_type: CmpRowType
    line: str
    keyword: Optional[str] = None
    value: Optional[str] = None
    pairs: List[Tuple[str, str]] = field(default_factory=list)


COMMENT_PREFIXES = ('#', ';', '//')

# Bare words inside a record that stand for "status <word>"
STATUS_FLAGS = frozenset({'baddump', 'good', 'nodump', 'verified'})

# Keys that terminate a space-bearing DosCenter file name
DOSCENTER_RECORD_KEYS = frozenset({'name', 'size', 'date', 'crc'})

_TOP_LEVEL_RE = re.compile(r'^(\S+?)\s*\($')
_INTERNAL_RE = re.compile(r'^(\S+?)\s*\((.*)\)$')
_STANDALONE_RE = re.compile(r'^(\S+)(?:\s+(.*))?$')
_TOKEN_RE = re.compile(r'"([^"]*)"|(\S+)')


def unquote(value: str) -> str:
    """Strip one pair of surrounding double quotes, if present."""
    if len(value) >= 2 and value.startswith('"') and value.endswith('"'):
        return value[1:-1]
    return value


def classify_cmp_line(raw_line: str, doscenter: bool = False) -> CmpRow:
    """
    Classify one line of a ClrMamePro-family file.

    Args:
        raw_line: Line as read (surrounding whitespace is ignored)
        doscenter: Apply DosCenter token rules inside nested records

    Returns:
        CmpRow describing the line. Blank lines are NONE.
    """
    line = raw_line.strip()

    if not line:
        return CmpRow(CmpRowType.NONE, line)

    if line.startswith(COMMENT_PREFIXES):
        return CmpRow(CmpRowType.COMMENT, line)

    if line == ')':
        return CmpRow(CmpRowType.END_TOP_LEVEL, line)

    match = _TOP_LEVEL_RE.match(line)
    if match:
        return CmpRow(CmpRowType.TOP_LEVEL, line, keyword=match.group(1))

    match = _INTERNAL_RE.match(line)
    if match:
        pairs = tokenize_record(match.group(2), doscenter=doscenter)
        return CmpRow(CmpRowType.INTERNAL, line, keyword=match.group(1), pairs=pairs)

    match = _STANDALONE_RE.match(line)
    if match:
        value = unquote((match.group(2) or '').strip())
        return CmpRow(CmpRowType.STANDALONE, line, keyword=match.group(1), value=value)

    return CmpRow(CmpRowType.NONE, line)


def tokenize_record(body: str, doscenter: bool = False) -> List[Tuple[str, str]]:
    """
    Split the inside of a nested record into ordered key/value pairs.

    Quoted values may contain spaces. A key with no following value gets an
    empty value. Bare status words become ``("status", word)``. In DosCenter
    mode ``name`` runs until the next known key and ``date`` takes a date
    and a time token.

    Args:
        body: Text between the record's parentheses

    Returns:
        List of (key, value) tuples in source order
    """
    tokens = [
        (m.group(1), True) if m.group(1) is not None else (m.group(2), False)
        for m in _TOKEN_RE.finditer(body)
    ]

    def is_key(index: int) -> bool:
        text, quoted = tokens[index]
        return not quoted and text.lower() in DOSCENTER_RECORD_KEYS

    pairs: List[Tuple[str, str]] = []
    i = 0
    while i < len(tokens):
        key, _ = tokens[i]
        lowered = key.lower()

        if lowered in STATUS_FLAGS:
            pairs.append(('status', lowered))
            i += 1
            continue

        if doscenter and lowered == 'name':
            j = i + 1
            parts = []
            while j < len(tokens) and not is_key(j):
                parts.append(tokens[j][0])
                j += 1
            pairs.append((key, ' '.join(parts)))
            i = j
            continue

        if doscenter and lowered == 'date':
            parts = []
            j = i + 1
            while j < len(tokens) and len(parts) < 2 and not is_key(j):
                parts.append(tokens[j][0])
                j += 1
            pairs.append((key, ' '.join(parts)))
            i = j
            continue

        value = tokens[i + 1][0] if i + 1 < len(tokens) else ''
        pairs.append((key, value))
        i += 2

    return pairs


class ListromRowShape(Enum):
    """Recognized shapes of the part of a listrom row after the name."""
    PLAIN_CHD = "plain_chd"
    PLAIN_ROM = "plain_rom"
    BAD_CHD = "bad_chd"
    NODUMP_CHD = "nodump_chd"
    BAD_ROM = "bad_rom"
    NODUMP_ROM = "nodump_rom"


NO_GOOD_DUMP_KNOWN = "NO GOOD DUMP KNOWN"
BAD_DUMP = "BAD_DUMP"

_HASH_TOKEN_RE = re.compile(r'^(CRC|MD5|SHA1)\(([^)]*)\)$')


def parse_hash_token(token: str) -> Optional[Tuple[str, str]]:
    """
    Split a listrom hash token such as ``CRC(deadbeef)``.

    Returns:
        (algorithm, value) or None if the token is not a hash token
    """
    match = _HASH_TOKEN_RE.match(token)
    if not match:
        return None
    return match.group(1), match.group(2)


def _is_hash(token: str, *algorithms: str) -> bool:
    parsed = parse_hash_token(token)
    return parsed is not None and parsed[0] in algorithms


def classify_listrom_tokens(tokens: List[str]) -> Optional[ListromRowShape]:
    """
    Classify the tokens that follow the name in a listrom row.

    Returns:
        The matching shape, or None if the tokens fit none
    """
    count = len(tokens)
    remainder = ' '.join(tokens)

    if count == 1 and _is_hash(tokens[0], 'MD5', 'SHA1'):
        return ListromRowShape.PLAIN_CHD

    if count == 3 and BAD_DUMP not in remainder:
        if _is_hash(tokens[1], 'CRC') and _is_hash(tokens[2], 'SHA1', 'MD5'):
            return ListromRowShape.PLAIN_ROM
        return None

    if count == 3:
        if (tokens[0] == 'BAD' and _is_hash(tokens[1], 'MD5', 'SHA1')
                and tokens[2] == BAD_DUMP):
            return ListromRowShape.BAD_CHD
        return None

    if count == 4 and remainder == NO_GOOD_DUMP_KNOWN:
        return ListromRowShape.NODUMP_CHD

    if count == 5 and BAD_DUMP in remainder:
        if (tokens[1] == 'BAD' and _is_hash(tokens[2], 'CRC')
                and _is_hash(tokens[3], 'SHA1', 'MD5') and tokens[4] == BAD_DUMP):
            return ListromRowShape.BAD_ROM
        return None

    if count == 5 and ' '.join(tokens[1:]) == NO_GOOD_DUMP_KNOWN:
        return ListromRowShape.NODUMP_ROM

    return None


def split_listrom_row(line: str) -> Optional[Tuple[str, List[str], ListromRowShape]]:
    """
    Separate a listrom data row into name, remainder tokens and shape.

    The name is split off at the first run of 5, 4, 3 or 2 spaces (tried in
    that order). If no run yields a classifiable remainder, every
    single-space split point is probed from the left.

    Returns:
        (name, tokens, shape) or None if the row fits no shape
    """
    for width in (5, 4, 3, 2):
        index = line.find(' ' * width)
        if index <= 0:
            continue
        tokens = line[index:].split()
        shape = classify_listrom_tokens(tokens)
        if shape is not None:
            return line[:index], tokens, shape
        break

    words = [w for w in line.split(' ') if w]
    for cut in range(1, len(words)):
        tokens = words[cut:]
        shape = classify_listrom_tokens(tokens)
        if shape is not None:
            return ' '.join(words[:cut]), tokens, shape

    return None


def split_hash_line(line: str, hash_last: bool) -> Optional[Tuple[str, str]]:
    """
    Split a hashfile line into file name and hash.

    Tokens are separated by runs of spaces. With ``hash_last`` (SFV/CRC)
    the hash is the final token, otherwise it is the first; the remaining
    tokens are joined with single spaces to form the file name.

    Returns:
        (file, hash) or None if the line has fewer than two tokens
    """
    tokens = [t for t in line.split(' ') if t]
    if len(tokens) < 2:
        return None
    if hash_last:
        return ' '.join(tokens[:-1]), tokens[-1]
    return ' '.join(tokens[1:]), tokens[0]
