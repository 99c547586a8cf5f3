import pytest

from datforge.parsing.classify import (
    CmpRowType,
    ListromRowShape,
    classify_cmp_line,
    classify_listrom_tokens,
    parse_hash_token,
    split_hash_line,
    split_listrom_row,
    tokenize_record,
    unquote,
)

SHA1 = "deadbeefdeadbeefdeadbeefdeadbeefdeadbeef"


@pytest.mark.unit
@pytest.mark.parametrize(
    "line, expected",
    [
        ("", CmpRowType.NONE),
        ("   ", CmpRowType.NONE),
        ("# note", CmpRowType.COMMENT),
        ("; note", CmpRowType.COMMENT),
        ("// note", CmpRowType.COMMENT),
        ("game (", CmpRowType.TOP_LEVEL),
        ("clrmamepro(", CmpRowType.TOP_LEVEL),
        (")", CmpRowType.END_TOP_LEVEL),
        ('\trom ( name "a.bin" size 1 )', CmpRowType.INTERNAL),
        ('\tname "Alpha (USA)"', CmpRowType.STANDALONE),
        ("Name: Some Collection", CmpRowType.STANDALONE),
    ],
)
def test_classify_cmp_line(line, expected):
    assert classify_cmp_line(line).row_type is expected


@pytest.mark.unit
def test_standalone_value_is_unquoted():
    row = classify_cmp_line('\tdescription "Alpha (USA)"')

    assert row.keyword == "description"
    assert row.value == "Alpha (USA)"
    assert row.line == 'description "Alpha (USA)"'


@pytest.mark.unit
def test_internal_row_carries_ordered_pairs():
    row = classify_cmp_line('rom ( name "my file.bin" size 10 crc 12345678 )')

    assert row.keyword == "rom"
    assert row.pairs == [("name", "my file.bin"), ("size", "10"), ("crc", "12345678")]


@pytest.mark.unit
def test_tokenize_record_bare_status_flag():
    pairs = tokenize_record(' name a.bin size 1 baddump crc 00000000 ')

    assert ("status", "baddump") in pairs
    assert pairs[-1] == ("crc", "00000000")


@pytest.mark.unit
def test_tokenize_record_trailing_key_gets_empty_value():
    assert tokenize_record("name a.bin flags") == [("name", "a.bin"), ("flags", "")]


@pytest.mark.unit
def test_tokenize_record_doscenter_names_and_dates():
    pairs = tokenize_record(
        " name Some Long Name.exe size 10 date 1996/01/01 12:00:00 crc 12345678 ",
        doscenter=True,
    )

    assert pairs == [
        ("name", "Some Long Name.exe"),
        ("size", "10"),
        ("date", "1996/01/01 12:00:00"),
        ("crc", "12345678"),
    ]


@pytest.mark.unit
def test_unquote_only_strips_a_full_pair():
    assert unquote('"abc"') == "abc"
    assert unquote('"abc') == '"abc'
    assert unquote('"') == '"'


@pytest.mark.unit
def test_parse_hash_token():
    assert parse_hash_token("CRC(89abcdef)") == ("CRC", "89abcdef")
    assert parse_hash_token(f"SHA1({SHA1})") == ("SHA1", SHA1)
    assert parse_hash_token("BAD_DUMP") is None


@pytest.mark.unit
@pytest.mark.parametrize(
    "tokens, shape",
    [
        ([f"SHA1({SHA1})"], ListromRowShape.PLAIN_CHD),
        (["MD5(0123)"], ListromRowShape.PLAIN_CHD),
        (["10", "CRC(12345678)", f"SHA1({SHA1})"], ListromRowShape.PLAIN_ROM),
        (["BAD", f"SHA1({SHA1})", "BAD_DUMP"], ListromRowShape.BAD_CHD),
        (["NO", "GOOD", "DUMP", "KNOWN"], ListromRowShape.NODUMP_CHD),
        (["10", "BAD", "CRC(12345678)", f"SHA1({SHA1})", "BAD_DUMP"], ListromRowShape.BAD_ROM),
        (["10", "NO", "GOOD", "DUMP", "KNOWN"], ListromRowShape.NODUMP_ROM),
    ],
)
def test_classify_listrom_tokens_shapes(tokens, shape):
    assert classify_listrom_tokens(tokens) is shape


@pytest.mark.unit
@pytest.mark.parametrize(
    "tokens",
    [
        [],
        ["10"],
        ["10", "CRC(12345678)"],
        ["10", "SHA1(x)", "CRC(y)"],
        ["garbage", "BAD_DUMP", "x"],
        ["a", "b", "c", "d"],
        ["a", "b", "c", "d", "e", "f"],
    ],
)
def test_classify_listrom_tokens_rejects_other_shapes(tokens):
    assert classify_listrom_tokens(tokens) is None


@pytest.mark.unit
def test_split_listrom_row_on_wide_gap():
    line = f"foo.rom          12345 CRC(89abcdef) SHA1({SHA1})"

    name, tokens, shape = split_listrom_row(line)

    assert name == "foo.rom"
    assert tokens == ["12345", "CRC(89abcdef)", f"SHA1({SHA1})"]
    assert shape is ListromRowShape.PLAIN_ROM


@pytest.mark.unit
def test_split_listrom_row_tries_single_space_splits():
    name, tokens, shape = split_listrom_row("bar.chd NO GOOD DUMP KNOWN")

    assert name == "bar.chd"
    assert tokens == ["NO", "GOOD", "DUMP", "KNOWN"]
    assert shape is ListromRowShape.NODUMP_CHD


@pytest.mark.unit
def test_split_listrom_row_name_with_single_spaces():
    name, _, shape = split_listrom_row(f"my rom.bin    10 CRC(12345678) SHA1({SHA1})")

    assert name == "my rom.bin"
    assert shape is ListromRowShape.PLAIN_ROM


@pytest.mark.unit
@pytest.mark.parametrize("line", ["", "just some words", "x  y  z", "(((", "   "])
def test_split_listrom_row_never_raises(line):
    assert split_listrom_row(line) is None


@pytest.mark.unit
def test_split_hash_line_hash_last_rejoins_name():
    assert split_hash_line("My File  With Spaces.bin 89ABCDEF", hash_last=True) == (
        "My File With Spaces.bin",
        "89ABCDEF",
    )


@pytest.mark.unit
def test_split_hash_line_hash_first():
    assert split_hash_line("0123abcd  dir/a b.bin", hash_last=False) == ("dir/a b.bin", "0123abcd")


@pytest.mark.unit
def test_split_hash_line_needs_two_tokens():
    assert split_hash_line("lonely", hash_last=True) is None
