"""
State-machine parser and writer for block-structured DAT files.

ClrMamePro and DosCenter share one syntax: top-level ``keyword (`` blocks
closed by ``)``, holding ``key value`` lines and single-line nested records
``keyword ( key value ... )``. What differs between them is only which
keywords and keys mean what, so both are driven by a :class:`BlockGrammar`
table that maps dialect keys directly onto canonical tree fields.
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, FrozenSet, Iterable, List, Optional, Tuple, Type

from ..errors import Ambiguity, UnterminatedBlockError
from ..models import (
    DatItem,
    DipSwitch,
    Disk,
    ItemStatus,
    Machine,
    MetadataFile,
    Rom,
    interleave_extras,
)
from .classify import CmpRow, CmpRowType, classify_cmp_line, unquote

logger = logging.getLogger(__name__)


@dataclass
class RecordSpec:
    """Field table of one nested record keyword (display key -> item field)."""
    item_class: Type[DatItem]
    fields: Dict[str, str]


@dataclass
class BlockGrammar:
    """
    Keyword and field tables of one block-structured dialect.

    Field tables map the key as written in the file to a canonical field
    name. Lookups are case-insensitive; writers emit the keys exactly as
    spelled in the table, in table order.
    """
    name: str
    header_keywords: Tuple[str, ...]
    header_fields: Dict[str, str]
    machine_keywords: Dict[str, Dict[str, bool]]
    machine_fields: Dict[str, str]
    records: Dict[str, RecordSpec]
    standalone_items: Dict[str, Type[DatItem]] = field(default_factory=dict)
    doscenter: bool = False
    quote_values: bool = False
    unquoted_keys: FrozenSet[str] = frozenset()

    def __post_init__(self):
        self._header_lookup = {k.lower(): v for k, v in self.header_fields.items()}
        self._machine_lookup = {k.lower(): v for k, v in self.machine_fields.items()}
        self._record_lookup = {k.lower(): spec for k, spec in self.records.items()}
        self._record_field_lookup = {
            k.lower(): {key.lower(): name for key, name in spec.fields.items()}
            for k, spec in self.records.items()
        }
        self._item_records: Dict[Type[DatItem], Tuple[str, RecordSpec]] = {}
        for keyword, spec in self.records.items():
            self._item_records.setdefault(spec.item_class, (keyword, spec))

    def header_field(self, key: str) -> Optional[str]:
        return self._header_lookup.get(key.lower())

    def machine_field(self, key: str) -> Optional[str]:
        return self._machine_lookup.get(key.lower())

    def record(self, keyword: str) -> Optional[RecordSpec]:
        return self._record_lookup.get(keyword.lower())

    def record_field(self, keyword: str, key: str) -> Optional[str]:
        return self._record_field_lookup.get(keyword.lower(), {}).get(key.lower())

    def record_for_item(self, item: DatItem) -> Optional[Tuple[str, RecordSpec]]:
        return self._item_records.get(type(item))

    def machine_keyword_for(self, machine: Machine) -> str:
        """Pick the block keyword whose flags match the machine."""
        default = None
        for keyword, flags in self.machine_keywords.items():
            if not flags:
                default = default or keyword
                continue
            if all(getattr(machine, flag) == wanted for flag, wanted in flags.items()):
                return keyword
        return default or next(iter(self.machine_keywords))


class _BlockBuilder:
    """Accumulates one open top-level block until its close line."""

    def __init__(self, kind: str, keyword: str, line_number: int, node=None):
        self.kind = kind
        self.keyword = keyword
        self.line_number = line_number
        self.node = node
        # Recognized field lines and items seen so far
        self.children = 0
        self.lines: List[str] = []

    def keep(self, line: str) -> None:
        if self.node is None:
            self.lines.append(line)
        else:
            self.node.keep_extra(line, self.children)

    def flush(self, metadata: MetadataFile, position: int) -> bool:
        """Attach the block to the tree; returns True for a recognized block."""
        if self.kind == 'machine':
            metadata.machines.append(self.node)
            return True
        if self.kind == 'header':
            return True
        for line in self.lines:
            metadata.keep_extra(line, position)
        return False


class BlockParser:
    """
    Parses a block-structured DAT into a canonical tree.

    Unrecognized content is never dropped: it lands in the extras of the
    block it appears in (or of the file), with its place among the
    recognized children, and an :class:`Ambiguity` is recorded in
    ``self.ambiguities``.
    """

    def __init__(self, grammar: BlockGrammar, strict: bool = False):
        """
        Args:
            grammar: Dialect keyword and field tables
            strict: Raise on blocks left open at end of input
        """
        self.grammar = grammar
        self.strict = strict
        self.ambiguities: List[Ambiguity] = []
        self._blocks = 0

    def parse(self, lines: Iterable[str]) -> MetadataFile:
        """
        Parse lines into a MetadataFile.

        Raises:
            UnterminatedBlockError: In strict mode, if a block is still open
                at end of input
        """
        metadata = MetadataFile(origin=self.grammar.name)
        block: Optional[_BlockBuilder] = None
        number = 0
        self._blocks = 0

        for number, raw_line in enumerate(lines, start=1):
            row = classify_cmp_line(raw_line, doscenter=self.grammar.doscenter)

            if row.row_type is CmpRowType.NONE:
                continue

            if row.row_type is CmpRowType.COMMENT:
                if block:
                    block.keep(row.line)
                else:
                    metadata.keep_extra(row.line, self._blocks)
                continue

            if row.row_type is CmpRowType.TOP_LEVEL:
                if block is not None:
                    self._unterminated(block, metadata, number)
                block = self._open_block(row, number, metadata)
                continue

            if row.row_type is CmpRowType.END_TOP_LEVEL:
                if block is None:
                    self._keep_in_file(metadata, number, row.line)
                    continue
                if block.kind == 'unknown':
                    block.keep(row.line)
                self._flush(block, metadata)
                block = None
                continue

            if block is None:
                self._keep_in_file(metadata, number, row.line)
            elif block.kind == 'unknown':
                block.keep(row.line)
            elif block.kind == 'header':
                self._header_line(block, row, number)
            else:
                self._machine_line(block, row, number)

        if block is not None:
            self._unterminated(block, metadata, number)

        logger.info(
            f"Parsed {self.grammar.name} DAT: {len(metadata.machines)} machines, "
            f"{len(self.ambiguities)} ambiguous lines"
        )
        return metadata

    def _open_block(self, row: CmpRow, number: int, metadata: MetadataFile) -> _BlockBuilder:
        keyword = row.keyword.lower()
        if keyword in self.grammar.header_keywords:
            return _BlockBuilder('header', keyword, number, metadata.header)

        if keyword in self.grammar.machine_keywords:
            machine = Machine()
            for flag, value in self.grammar.machine_keywords[keyword].items():
                setattr(machine, flag, value)
            return _BlockBuilder('machine', keyword, number, machine)

        self._ambiguous(number, row.line, 'file')
        block = _BlockBuilder('unknown', keyword, number)
        block.keep(row.line)
        return block

    def _flush(self, block: _BlockBuilder, metadata: MetadataFile) -> None:
        if block.flush(metadata, self._blocks):
            self._blocks += 1

    def _header_line(self, block: _BlockBuilder, row: CmpRow, number: int) -> None:
        if row.row_type is CmpRowType.STANDALONE:
            field_name = self.grammar.header_field(row.keyword)
            if field_name:
                block.node.write(field_name, row.value)
                block.children += 1
                return
        self._keep_in_block(block, number, row.line, 'header')

    def _machine_line(self, block: _BlockBuilder, row: CmpRow, number: int) -> None:
        machine: Machine = block.node
        context = f"{block.keyword} {machine.name or ''}".strip()

        if row.row_type is CmpRowType.STANDALONE:
            field_name = self.grammar.machine_field(row.keyword)
            if field_name:
                machine.write(field_name, row.value)
                block.children += 1
                return
            item_class = self.grammar.standalone_items.get(row.keyword.lower())
            if item_class:
                machine.items.append(item_class(name=row.value))
                block.children += 1
                return

        elif row.row_type is CmpRowType.INTERNAL:
            spec = self.grammar.record(row.keyword)
            if spec:
                machine.items.append(self._build_item(row, spec, number, context))
                block.children += 1
                return
            # A standalone value that merely starts with a parenthesis
            field_name = self.grammar.machine_field(row.keyword)
            if field_name:
                value = unquote(row.line[len(row.keyword):].strip())
                machine.write(field_name, value)
                block.children += 1
                return

        self._keep_in_block(block, number, row.line, context)

    def _build_item(self, row: CmpRow, spec: RecordSpec, number: int, context: str) -> DatItem:
        item = spec.item_class()
        for key, value in row.pairs:
            field_name = self.grammar.record_field(row.keyword, key)

            if field_name == 'status' and isinstance(item, (Rom, Disk)):
                status = ItemStatus.from_string(value)
                if status is not None:
                    item.status = status
                    continue
                field_name = None

            if field_name == 'entries' and isinstance(item, DipSwitch):
                item.entries.append(value)
            elif field_name:
                item.write(field_name, value)
            else:
                item.extra.append(format_token(key, value))
                self._ambiguous(number, row.line, f"{row.keyword} in {context}")
        return item

    def _unterminated(self, block: _BlockBuilder, metadata: MetadataFile, number: int) -> None:
        if self.strict:
            raise UnterminatedBlockError(block.keyword, block.line_number)
        logger.warning(
            f"Block '{block.keyword}' opened on line {block.line_number} "
            f"is not closed, treating as closed at line {number}"
        )
        self.ambiguities.append(
            Ambiguity(block.line_number, f"{block.keyword} (", 'unterminated block')
        )
        self._flush(block, metadata)

    def _keep_in_file(self, metadata: MetadataFile, number: int, line: str) -> None:
        metadata.keep_extra(line, self._blocks)
        self._ambiguous(number, line, 'file')

    def _keep_in_block(self, block: _BlockBuilder, number: int, line: str, context: str) -> None:
        block.keep(line)
        self._ambiguous(number, line, context)

    def _ambiguous(self, number: int, line: str, context: str) -> None:
        logger.debug(f"Unrecognized line {number} in {context}: {line}")
        self.ambiguities.append(Ambiguity(number, line, context))


def format_token(key: str, value: str) -> str:
    """Render a key/value token pair, quoting values that contain spaces."""
    if value == '':
        return key
    if any(ch.isspace() for ch in value):
        return f'{key} "{value}"'
    return f'{key} {value}'


class BlockWriter:
    """Serializes a canonical tree into a block-structured dialect."""

    def __init__(self, grammar: BlockGrammar, quotes: Optional[bool] = None,
                 preserve_extras: bool = True):
        """
        Args:
            grammar: Dialect keyword and field tables
            quotes: Quote text values; defaults to the dialect's convention
            preserve_extras: Re-emit extras captured from this dialect
        """
        self.grammar = grammar
        self.quotes = grammar.quote_values if quotes is None else quotes
        self.preserve_extras = preserve_extras

    def write(self, metadata: MetadataFile) -> List[str]:
        """
        Render the whole tree.

        Returns:
            Output lines without line terminators
        """
        keep_extras = self.preserve_extras and metadata.origin in (None, self.grammar.name)
        blocks: List[List[str]] = []

        header_block = self._header_block(metadata, keep_extras)
        if header_block:
            blocks.append(header_block)

        for machine in metadata.machines:
            blocks.append(self._machine_block(machine, keep_extras))

        if keep_extras:
            blocks = interleave_extras(blocks, metadata.extra, metadata.extra_positions)

        lines: List[str] = []
        for block in blocks:
            if lines:
                lines.append('')
            lines.extend(block)
        return lines

    def _header_block(self, metadata: MetadataFile, keep_extras: bool) -> List[str]:
        header = metadata.header
        body = [
            [f"\t{key} {self._format(key, value)}"]
            for key, value in self._present(header, self.grammar.header_fields)
        ]
        if keep_extras:
            body = interleave_extras(body, self._indented(header.extra), header.extra_positions)
        if not body:
            return []
        keyword = self._header_keyword()
        return [f"{keyword} ("] + [line for chunk in body for line in chunk] + [")"]

    def _header_keyword(self) -> str:
        # DosCenter spells its header keyword in mixed case
        return 'DOSCenter' if self.grammar.doscenter else self.grammar.header_keywords[0]

    def _machine_block(self, machine: Machine, keep_extras: bool) -> List[str]:
        children = [
            [f"\t{key} {self._format(key, value)}"]
            for key, value in self._present(machine, self.grammar.machine_fields)
        ]

        for item in machine.items:
            record = self.grammar.record_for_item(item)
            if record is None:
                logger.debug(
                    f"{self.grammar.name} cannot express {item.item_type} items, "
                    f"skipping one in {machine.name}"
                )
                children.append([])
                continue
            children.append([f"\t{self._record_line(record, item, keep_extras)}"])

        if keep_extras:
            children = interleave_extras(
                children, self._indented(machine.extra), machine.extra_positions
            )

        lines = [f"{self.grammar.machine_keyword_for(machine)} ("]
        for chunk in children:
            lines.extend(chunk)
        lines.append(")")
        return lines

    @staticmethod
    def _indented(extra: List[str]) -> List[str]:
        return [f"\t{line}" for line in extra]

    def _record_line(self, record: Tuple[str, RecordSpec], item: DatItem,
                     keep_extras: bool) -> str:
        keyword, spec = record
        tokens = []
        for key, field_name in spec.fields.items():
            if field_name == 'entries':
                tokens.extend(f"{key} {self._format(key, entry)}" for entry in item.entries)
                continue
            value = item.read_string(field_name)
            if value is not None:
                tokens.append(f"{key} {self._format(key, value)}")
        if keep_extras:
            tokens.extend(item.extra)
        return f"{keyword} ( {' '.join(tokens)} )"

    def _present(self, node, table: Dict[str, str]) -> List[Tuple[str, str]]:
        present = []
        for key, field_name in table.items():
            value = node.read_string(field_name)
            if value is not None:
                present.append((key, value))
        return present

    def _format(self, key: str, value: str) -> str:
        if self.grammar.doscenter:
            return value
        if self.quotes and key.lower() not in self.grammar.unquoted_keys:
            return f'"{value}"'
        if value == '' or any(ch.isspace() for ch in value):
            return f'"{value}"'
        return value
