"""
Exceptions and diagnostic records shared by all DAT readers and writers.

Structural ambiguities in the input never raise: the offending line is kept
in the nearest extras bag and an :class:`Ambiguity` is recorded. Exceptions
are reserved for I/O failures, unusable formats and strict-mode checks.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Union


class DatError(Exception):
    """Base class for DAT reading and writing errors."""
    pass


class DatReadError(DatError):
    """Raised when a DAT stream cannot be opened or decoded."""

    def __init__(self, path: Union[str, Path], reason: Exception):
        self.path = Path(path)
        self.reason = reason
        super().__init__(f"Failed to read {self.path}: {reason}")


class DatWriteError(DatError):
    """Raised when a DAT stream cannot be written."""

    def __init__(self, path: Union[str, Path], reason: Exception):
        self.path = Path(path)
        self.reason = reason
        super().__init__(f"Failed to write {self.path}: {reason}")


class DatParseError(DatError):
    """Raised when a document is structurally unusable as a whole (bad XML)."""
    pass


class UnterminatedBlockError(DatError):
    """Raised in strict mode when a block is still open at end of input."""

    def __init__(self, keyword: str, line_number: int):
        self.keyword = keyword
        self.line_number = line_number
        super().__init__(
            f"Block '{keyword}' opened on line {line_number} was never closed"
        )


class UnknownFormatError(DatError):
    """Raised when a format name or file cannot be mapped to a dialect."""
    pass


@dataclass(frozen=True)
class Ambiguity:
    """
    A line the parser could not map to a known structure.

    The line itself is preserved in an extras bag; this record only reports
    where it was found.
    """
    line_number: int
    line: str
    context: Optional[str] = None

    def __str__(self) -> str:
        where = f" in {self.context}" if self.context else ""
        return f"line {self.line_number}{where}: {self.line!r}"
