import pytest

from datforge.formats.clrmamepro import ClrMameProFormat
from datforge.models import Header, ItemStatus, Machine, MetadataFile, Rom


@pytest.mark.unit
def test_read_sample(data_dir):
    handler = ClrMameProFormat()

    metadata = handler.read(data_dir / "clrmamepro_sample.dat")

    assert metadata.origin == "clrmamepro"
    assert metadata.header.name == "Test DAT"
    assert metadata.header.version == "20240101"
    assert [m.name for m in metadata.machines] == ["Alpha (USA)", "Beta", "Gamma", "neogeo"]

    alpha = metadata.find_machine("Alpha (USA)")
    assert alpha.year == "1990"
    assert alpha.roms[0].sha1 == "0123456789abcdef0123456789abcdef01234567"

    beta = metadata.find_machine("Beta")
    assert beta.cloneof == "Alpha (USA)"
    assert beta.roms[0].status is ItemStatus.BADDUMP
    assert beta.disks[0].name == "beta"

    gamma = metadata.find_machine("Gamma")
    assert gamma.roms[0].extra == ["foo bar"]
    assert gamma.extra == ['unknownkey "x"']

    assert metadata.find_machine("neogeo").is_bios is True
    assert len(handler.ambiguities) == 2


@pytest.mark.integration
def test_round_trip_is_byte_identical(data_dir, tmp_path):
    source = data_dir / "clrmamepro_sample.dat"
    destination = tmp_path / "out.dat"
    handler = ClrMameProFormat()

    handler.write(handler.read(source), destination)

    assert destination.read_text() == source.read_text()


@pytest.mark.unit
def test_parse_write_parse_is_stable(data_dir):
    handler = ClrMameProFormat()
    first = handler.read(data_dir / "clrmamepro_sample.dat")

    second = handler.read_text(handler.write_text(first))

    assert second == first


@pytest.mark.unit
def test_drop_extras_on_write(data_dir):
    metadata = ClrMameProFormat().read(data_dir / "clrmamepro_sample.dat")

    text = ClrMameProFormat(preserve_extras=False).write_text(metadata)

    assert "unknownkey" not in text
    assert "foo bar" not in text


@pytest.mark.unit
def test_header_and_block_keywords_are_normalized():
    text = 'romvault (\n\tname "V"\n)\n\nset (\n\tname "s"\n)\n'
    handler = ClrMameProFormat()

    output = handler.write_text(handler.read_text(text))

    assert output == 'clrmamepro (\n\tname "V"\n)\n\ngame (\n\tname "s"\n)\n'


@pytest.mark.unit
def test_write_from_built_tree():
    metadata = MetadataFile(
        header=Header(name="Built", force_merging="split"),
        machines=[Machine(
            name="m",
            description="A game",
            items=[Rom(name="r.bin", size="2", crc="0000abcd", status=ItemStatus.NODUMP)],
        )],
    )

    lines = ClrMameProFormat().write_lines(metadata)

    assert lines == [
        "clrmamepro (",
        '\tname "Built"',
        "\tforcemerging split",
        ")",
        "",
        "game (",
        '\tname "m"',
        '\tdescription "A game"',
        '\trom ( name "r.bin" size 2 crc 0000abcd status nodump )',
        ")",
    ]
