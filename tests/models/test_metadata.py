import pytest

from datforge.models import (
    ITEM_TYPES,
    DipSwitch,
    Disk,
    Header,
    ItemStatus,
    Machine,
    Media,
    MetadataFile,
    Rom,
    Sample,
    interleave_extras,
)


@pytest.mark.unit
def test_read_returns_none_for_absent_and_unknown_fields():
    rom = Rom(name="a.bin")

    assert rom.read("name") == "a.bin"
    assert rom.read("crc") is None
    assert rom.read("no_such_field") is None


@pytest.mark.unit
def test_write_sets_field_without_validation():
    rom = Rom()
    rom.write("size", "not-a-number")

    assert rom.size == "not-a-number"


@pytest.mark.unit
def test_write_unknown_field_raises_key_error():
    with pytest.raises(KeyError):
        Machine().write("bogus", "x")


@pytest.mark.unit
def test_read_string_renders_enums_bools_and_lists():
    rom = Rom(status=ItemStatus.BADDUMP)
    machine = Machine(is_bios=True)
    header = Header(columns=["a", "b"])

    assert rom.read_string("status") == "baddump"
    assert machine.read_string("is_bios") == "yes"
    assert header.read_string("columns") == "a, b"
    assert rom.read_string("crc") is None


@pytest.mark.unit
def test_read_array_wraps_scalars():
    dip = DipSwitch(name="Lives", entries=["1", "2"])

    assert dip.read_array("entries") == ["1", "2"]
    assert dip.read_array("name") == ["Lives"]
    assert dip.read_array("default") is None


@pytest.mark.unit
def test_item_status_from_string():
    assert ItemStatus.from_string("NoDump") is ItemStatus.NODUMP
    assert ItemStatus.from_string(" good ") is ItemStatus.GOOD
    assert ItemStatus.from_string("") is None
    assert ItemStatus.from_string("weird") is None


@pytest.mark.unit
def test_item_types_are_keyed_by_tag():
    assert ITEM_TYPES["rom"] is Rom
    assert ITEM_TYPES["disk"] is Disk
    assert ITEM_TYPES["dipswitch"] is DipSwitch
    assert all(cls.item_type == tag for tag, cls in ITEM_TYPES.items())


@pytest.mark.unit
def test_machine_item_helpers_keep_order():
    machine = Machine(items=[
        Rom(name="a"),
        Disk(name="d"),
        Rom(name="b"),
        Media(name="m"),
        Sample(name="s"),
    ])

    assert [rom.name for rom in machine.roms] == ["a", "b"]
    assert [disk.name for disk in machine.disks] == ["d"]
    assert [media.name for media in machine.media] == ["m"]
    assert machine.items_of(Sample)[0].name == "s"


@pytest.mark.unit
def test_equality_includes_extras_order():
    first = Machine(name="x", extra=["a", "b"])
    second = Machine(name="x", extra=["b", "a"])

    assert first != second
    assert first == Machine(name="x", extra=["a", "b"])


@pytest.mark.unit
def test_find_machine():
    metadata = MetadataFile(machines=[Machine(name="one"), Machine(name="two")])

    assert metadata.find_machine("two").name == "two"
    assert metadata.find_machine("three") is None


@pytest.mark.unit
def test_statistics_counts_items_and_extras():
    metadata = MetadataFile(
        header=Header(extra=["h"]),
        machines=[
            Machine(items=[Rom(extra=["t"]), Rom(), Disk()], extra=["m"]),
            Machine(items=[Sample()]),
        ],
        extra=["f1", "f2"],
    )

    stats = metadata.statistics()

    assert list(stats) == ["machines", "disk", "rom", "sample", "extras"]
    assert stats["machines"] == 2
    assert stats["rom"] == 2
    assert stats["disk"] == 1
    assert stats["sample"] == 1
    assert stats["extras"] == 5


@pytest.mark.unit
def test_statistics_of_empty_file():
    assert MetadataFile().statistics() == {"machines": 0, "extras": 0}


@pytest.mark.unit
def test_keep_extra_records_position():
    machine = Machine(name="x")

    machine.keep_extra("# note", 2)

    assert machine.extra == ["# note"]
    assert machine.extra_positions == [2]


@pytest.mark.unit
def test_interleave_extras_places_lines_before_their_child():
    children = [["a"], ["b"], ["c"]]

    chunks = interleave_extras(children, ["x", "y", "z"], [0, 2, 2])

    assert chunks == [["x"], ["a"], ["b"], ["y", "z"], ["c"]]


@pytest.mark.unit
def test_interleave_extras_without_positions_go_last():
    chunks = interleave_extras([["a"]], ["x", "y"], [0])

    assert chunks == [["x"], ["a"], ["y"]]


@pytest.mark.unit
def test_interleave_extras_clamps_positions_past_the_end():
    assert interleave_extras([], ["x"], [5]) == [["x"]]
