import pytest

from datforge.parsing.ini import IniReader, IniRowType


@pytest.mark.unit
def test_rows_track_sections():
    rows = list(IniReader([
        "[CREDITS]",
        "author = someone",
        "",
        "; note",
        "[GAMES]",
        "¬a¬b¬",
    ]).rows())

    assert [row.row_type for row in rows] == [
        IniRowType.SECTION_HEADER,
        IniRowType.KEY_VALUE,
        IniRowType.NONE,
        IniRowType.COMMENT,
        IniRowType.SECTION_HEADER,
        IniRowType.INVALID,
    ]
    assert rows[1].section == "CREDITS"
    assert (rows[1].key, rows[1].value) == ("author", "someone")
    assert rows[5].section == "GAMES"


@pytest.mark.unit
def test_value_may_contain_equals():
    row = next(IniReader(["url=http://x/?a=b"]).rows())

    assert row.key == "url"
    assert row.value == "http://x/?a=b"
    assert row.section is None
