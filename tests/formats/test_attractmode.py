import pytest

from datforge.formats.attractmode import (
    EXTENDED_COLUMNS,
    LEGACY_COLUMNS,
    AttractModeFormat,
    header_row,
    row_to_machine,
)
from datforge.models import Machine, MetadataFile, Rom


@pytest.mark.unit
def test_header_row_marks_first_title():
    assert header_row(LEGACY_COLUMNS)[:2] == ["#Name", "Title"]
    assert len(header_row(EXTENDED_COLUMNS)) == 22


@pytest.mark.unit
def test_surplus_field_of_legacy_row_goes_to_extras():
    values = [f"v{i}" for i in range(17)] + ["surplus"]

    machine = row_to_machine(values)

    assert machine.name == "v0"
    assert machine.roms[0].name == "v1"
    assert machine.buttons == "v16"
    assert machine.extra == ["surplus"]


@pytest.mark.unit
def test_short_row_leaves_missing_fields_absent():
    machine = row_to_machine(["pacman", "Pac-Man", "mame"])

    assert machine.emulator == "mame"
    assert machine.year is None
    assert machine.roms[0].alt_title is None
    assert machine.extra == []


@pytest.mark.unit
def test_extended_row_maps_the_extra_columns():
    values = [""] * 17 + ["1", "maze", "3", "60", "yes"]

    machine = row_to_machine(values)

    assert machine.favorite == "1"
    assert machine.tags == "maze"
    assert machine.played_time == "60"
    assert machine.roms[0].file_is_available == "yes"


@pytest.mark.unit
def test_read_sample(data_dir):
    metadata = AttractModeFormat().read(data_dir / "attractmode_sample.txt")

    assert metadata.header.columns[0] == "#Name"
    assert len(metadata.header.columns) == 17
    pacman, mspacman = metadata.machines
    assert pacman.manufacturer == "Namco"
    assert pacman.extra_info == ""
    assert mspacman.cloneof == "pacman"
    assert mspacman.extra == ["surplus"]


@pytest.mark.integration
def test_round_trip_is_byte_identical(data_dir, tmp_path):
    source = data_dir / "attractmode_sample.txt"
    destination = tmp_path / "out.txt"
    handler = AttractModeFormat()

    handler.write(handler.read(source), destination)

    assert destination.read_text() == source.read_text()


@pytest.mark.unit
def test_write_from_foreign_tree_uses_legacy_header():
    metadata = MetadataFile(
        machines=[Machine(name="a", year="1990", items=[Rom(name="A Game")], extra=["x"])],
        origin="clrmamepro",
    )

    lines = AttractModeFormat().write_lines(metadata)

    assert lines[0] == ";".join(header_row(LEGACY_COLUMNS))
    assert lines[1] == "a;A Game;;;1990"
