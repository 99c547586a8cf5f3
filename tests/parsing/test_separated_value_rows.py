import pytest

from datforge.parsing.separated_value import (
    SeparatedValueReader,
    SeparatedValueWriter,
    join_row,
    split_row,
)


@pytest.mark.unit
@pytest.mark.parametrize(
    "line, expected",
    [
        ("a;b;c", ["a", "b", "c"]),
        ("a;;c;", ["a", "", "c", ""]),
        ('"a;b";c', ["a;b", "c"]),
        ('"say ""hi""";x', ['say "hi"', "x"]),
        ("", [""]),
        ('"open', ["open"]),
    ],
)
def test_split_row(line, expected):
    assert split_row(line, ";") == expected


@pytest.mark.unit
def test_join_row_quotes_only_when_needed():
    assert join_row(["a", None, "b;c", '"q'], ";", quotes=False) == 'a;;"b;c";"""q"'


@pytest.mark.unit
def test_join_row_quote_everything():
    assert join_row(["a", None], ",", quotes=True) == '"a",""'


@pytest.mark.unit
def test_reader_consumes_header_and_skips_blank_lines():
    reader = SeparatedValueReader(["#h1;h2", "", "a;b", "c"], ";", header=True)

    rows = list(reader.rows())

    assert reader.header == ["#h1", "h2"]
    assert rows == [["a", "b"], ["c"]]


@pytest.mark.unit
def test_reader_without_header_yields_every_row():
    reader = SeparatedValueReader(["a\tb", "c\td"], "\t")

    assert list(reader.rows()) == [["a", "b"], ["c", "d"]]
    assert reader.header is None


@pytest.mark.unit
def test_writer_round_trips_reader():
    values = ["x", "with,comma", 'quote"inside', ""]
    line = SeparatedValueWriter(",").write_row(values)

    assert split_row(line, ",") == values
