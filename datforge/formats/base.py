"""
Common read/write plumbing for DAT format handlers.

A handler owns one dialect. ``read`` opens and decodes the file, then hands
its lines to ``read_lines``; ``write`` renders the full output text with
``write_lines`` before touching the destination, so a failed render never
leaves a partial file behind.
"""

import logging
from pathlib import Path
from typing import List, Optional, Tuple, Union

from ..errors import Ambiguity, DatReadError, DatWriteError
from ..models import MetadataFile

logger = logging.getLogger(__name__)


class DatFormatHandler:
    """
    Base class for dialect handlers.

    Subclasses set ``name`` and ``extensions`` and implement ``read_lines``
    and ``write_lines``. Ambiguities found by the last read are kept in
    ``self.ambiguities``.
    """

    name: str = ''
    extensions: Tuple[str, ...] = ()

    def __init__(self, strict: bool = False, preserve_extras: bool = True,
                 quotes: Optional[bool] = None):
        """
        Args:
            strict: Raise on structural errors that are normally tolerated
            preserve_extras: Re-emit unrecognized content when writing
            quotes: Override the dialect's value quoting on write
        """
        self.strict = strict
        self.preserve_extras = preserve_extras
        self.quotes = quotes
        self.ambiguities: List[Ambiguity] = []

    def read(self, path: Union[str, Path]) -> MetadataFile:
        """
        Read and parse a DAT file.

        Args:
            path: Path to the DAT file

        Returns:
            Canonical tree

        Raises:
            DatReadError: If the file cannot be opened or decoded
        """
        path = Path(path)
        logger.info(f"Reading {self.name} DAT: {path.name}")
        try:
            with open(path, 'r', encoding='utf-8-sig') as f:
                text = f.read()
        except (OSError, UnicodeDecodeError) as e:
            raise DatReadError(path, e) from e
        return self.read_text(text)

    def read_text(self, text: str) -> MetadataFile:
        """Parse DAT content already held in memory."""
        self.ambiguities = []
        metadata = self.read_lines(text.splitlines())
        if self.ambiguities:
            logger.info(f"  - {len(self.ambiguities)} lines kept as unrecognized extras")
        return metadata

    def read_lines(self, lines: List[str]) -> MetadataFile:
        raise NotImplementedError

    def write(self, metadata: MetadataFile, path: Union[str, Path]) -> None:
        """
        Serialize a canonical tree to a file.

        Raises:
            DatWriteError: If the destination cannot be written
        """
        path = Path(path)
        text = self.write_text(metadata)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            with open(path, 'w', encoding='utf-8', newline='\n') as f:
                f.write(text)
        except OSError as e:
            raise DatWriteError(path, e) from e
        logger.info(f"Wrote {self.name} DAT: {path.name}")

    def write_text(self, metadata: MetadataFile) -> str:
        """Render a canonical tree to text, one ``\\n`` per line."""
        return ''.join(f"{line}\n" for line in self.write_lines(metadata))

    def write_lines(self, metadata: MetadataFile) -> List[str]:
        raise NotImplementedError

    def keeps_extras(self, metadata: MetadataFile) -> bool:
        """Whether extras of this tree are meaningful in this dialect."""
        return self.preserve_extras and metadata.origin in (None, self.name)
