import pytest

from datforge.formats.listrom import LISTROM_HEADER_NAME, ListromFormat
from datforge.models import Disk, ItemStatus, Machine, MetadataFile, Rom, Sample
from datforge.parsing.listrom import COLUMN_HEADER

SHA1 = "deadbeefdeadbeefdeadbeefdeadbeefdeadbeef"


@pytest.mark.unit
def test_rom_row_becomes_rom():
    metadata = ListromFormat().read_text(
        'ROMs required for driver "pacman".\n'
        f"foo.rom          12345 CRC(89abcdef) SHA1({SHA1})\n"
    )

    machine = metadata.machines[0]
    assert machine.name == "pacman"
    assert machine.items == [Rom(name="foo.rom", size="12345", crc="89abcdef", sha1=SHA1)]
    assert metadata.header.name == LISTROM_HEADER_NAME


@pytest.mark.unit
def test_sizeless_row_becomes_disk():
    metadata = ListromFormat().read_text(
        'ROMs required for driver "kinst".\nbar.chd NO GOOD DUMP KNOWN\n'
    )

    disk = metadata.machines[0].items[0]
    assert isinstance(disk, Disk)
    assert disk.name == "bar.chd"
    assert disk.status is ItemStatus.NODUMP
    assert disk.sha1 is None and disk.md5 is None


@pytest.mark.unit
def test_read_sample(data_dir):
    handler = ListromFormat()

    metadata = handler.read(data_dir / "listrom_sample.txt")

    assert [m.name for m in metadata.machines] == ["pacman", "kinst", "z80"]
    pacman = metadata.machines[0]
    assert [rom.status for rom in pacman.roms] == [None, ItemStatus.BADDUMP, ItemStatus.NODUMP]
    assert len(metadata.machines[1].disks) == 2
    assert metadata.machines[2].is_device is True
    assert metadata.machines[2].items == []
    assert handler.ambiguities == []


@pytest.mark.integration
def test_round_trip_is_byte_identical(data_dir, tmp_path):
    source = data_dir / "listrom_sample.txt"
    destination = tmp_path / "out.txt"
    handler = ListromFormat()

    handler.write(handler.read(source), destination)

    assert destination.read_text() == source.read_text()


@pytest.mark.unit
def test_write_only_emits_roms_and_disks():
    metadata = MetadataFile(machines=[Machine(
        name="drv",
        items=[Rom(name="a", size="1", crc="0", sha1="1"), Disk(name="d", md5="ab")],
    )])

    lines = ListromFormat().write_lines(metadata)

    assert lines[0] == 'ROMs required for driver "drv".'
    assert lines[2] == "a".ljust(39) + "1 CRC(0) SHA1(1)"
    assert lines[3] == "d".ljust(40) + "MD5(ab)"


@pytest.mark.unit
def test_unclassifiable_rows_survive_round_trip():
    text = 'junk at top\n\nROMs required for driver "x".\n'
    handler = ListromFormat()

    metadata = handler.read_text(text)

    assert metadata.extra == ["junk at top"]
    assert handler.write_text(metadata) == 'junk at top\n\nNo ROMs required for driver "x".\n\n'


@pytest.mark.integration
def test_stray_row_stays_inside_its_set_on_round_trip():
    first = "a.rom".ljust(39) + f"1 CRC(00000000) SHA1({SHA1})"
    second = "b.rom".ljust(39) + f"2 CRC(11111111) SHA1({SHA1})"
    text = (
        'ROMs required for driver "x".\n'
        f"{COLUMN_HEADER}\n"
        f"{first}\n"
        "stray text\n"
        f"{second}\n"
        "\n"
    )
    handler = ListromFormat()

    metadata = handler.read_text(text)

    assert metadata.extra == []
    assert metadata.machines[0].extra == ["stray text"]
    assert handler.write_text(metadata) == text


@pytest.mark.unit
def test_extra_positions_skip_items_listrom_cannot_write():
    metadata = MetadataFile(machines=[Machine(
        name="x",
        items=[
            Sample(name="s"),
            Rom(name="a", size="1", crc="0", sha1="1"),
            Rom(name="b", size="1", crc="0", sha1="1"),
        ],
        extra=["note"],
        extra_positions=[2],
    )])

    lines = ListromFormat().write_lines(metadata)

    assert lines[2:5] == [
        "a".ljust(39) + "1 CRC(0) SHA1(1)",
        "note",
        "b".ljust(39) + "1 CRC(0) SHA1(1)",
    ]
