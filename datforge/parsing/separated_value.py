"""
Lenient reader and writer for delimiter-separated rows.

Rows are split on a single separator character. Quoting is optional on
read: a field that starts with ``"`` runs to the matching closing quote
(``""`` inside it is a literal quote); unquoted fields run to the next
separator. A row with the wrong number of fields is never an error; the
caller maps whatever fields are present.
"""

from typing import Iterable, Iterator, List, Optional


def split_row(line: str, separator: str) -> List[str]:
    """
    Split one line into fields.

    Args:
        line: Row text without line terminator
        separator: Single separator character

    Returns:
        Field values with quoting removed
    """
    values: List[str] = []
    i = 0
    length = len(line)

    while True:
        if i < length and line[i] == '"':
            i += 1
            chars = []
            while i < length:
                if line[i] == '"':
                    if i + 1 < length and line[i + 1] == '"':
                        chars.append('"')
                        i += 2
                        continue
                    i += 1
                    break
                chars.append(line[i])
                i += 1
            # Text between a closing quote and the separator is kept as-is
            end = line.find(separator, i)
            if end == -1:
                end = length
            values.append(''.join(chars) + line[i:end])
        else:
            end = line.find(separator, i)
            if end == -1:
                end = length
            values.append(line[i:end])

        if end >= length:
            return values
        i = end + 1


def quote_value(value: str) -> str:
    return '"' + value.replace('"', '""') + '"'


def join_row(values: Iterable[Optional[str]], separator: str, quotes: bool) -> str:
    """
    Join fields into one line.

    None renders as an empty field. Without ``quotes`` a value is still
    quoted when it contains the separator or starts with a quote, so the
    row reads back the same.
    """
    rendered = []
    for value in values:
        value = '' if value is None else value
        if quotes or separator in value or value.startswith('"'):
            rendered.append(quote_value(value))
        else:
            rendered.append(value)
    return separator.join(rendered)


class SeparatedValueReader:
    """
    Iterates the rows of a delimited file.

    Blank lines are skipped. With ``header`` set the first non-blank line is
    consumed into ``self.header`` instead of being yielded.
    """

    def __init__(self, lines: Iterable[str], separator: str, header: bool = False):
        self.lines = lines
        self.separator = separator
        self.expect_header = header
        self.header: Optional[List[str]] = None

    def rows(self) -> Iterator[List[str]]:
        for line in self.lines:
            if not line.strip():
                continue
            values = split_row(line, self.separator)
            if self.expect_header and self.header is None:
                self.header = values
                continue
            yield values


class SeparatedValueWriter:
    """Renders rows with a fixed separator and quoting policy."""

    def __init__(self, separator: str, quotes: bool = False):
        self.separator = separator
        self.quotes = quotes

    def write_row(self, values: Iterable[Optional[str]]) -> str:
        return join_row(values, self.separator, self.quotes)
