"""Dialect-level line classifiers, parsers and writers."""

from .block import BlockGrammar, BlockParser, BlockWriter, RecordSpec
from .classify import (
    CmpRow,
    CmpRowType,
    ListromRowShape,
    classify_cmp_line,
    classify_listrom_tokens,
    split_hash_line,
    split_listrom_row,
    tokenize_record,
)
from .ini import IniReader, IniRow, IniRowType
from .listrom import ListromFile, ListromParser, ListromRow, ListromSet, ListromWriter
from .separated_value import SeparatedValueReader, SeparatedValueWriter, split_row

__all__ = [
    "BlockGrammar",
    "BlockParser",
    "BlockWriter",
    "CmpRow",
    "CmpRowType",
    "IniReader",
    "IniRow",
    "IniRowType",
    "ListromFile",
    "ListromParser",
    "ListromRow",
    "ListromRowShape",
    "ListromSet",
    "ListromWriter",
    "RecordSpec",
    "SeparatedValueReader",
    "SeparatedValueWriter",
    "classify_cmp_line",
    "classify_listrom_tokens",
    "split_hash_line",
    "split_listrom_row",
    "split_row",
    "tokenize_record",
]
