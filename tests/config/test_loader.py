import pytest

from datforge.config.loader import (
    DEFAULT_CONFIG,
    ConfigError,
    get_config_value,
    load_config,
    merge_config,
)


@pytest.mark.unit
def test_load_config_merges_over_defaults(make_config):
    config_path = make_config({"parsing": {"strict": True}})

    cfg = load_config(str(config_path))

    assert cfg["parsing"]["strict"] is True
    assert cfg["logging"]["level"] == "WARNING"
    assert cfg["hashfile"]["default_type"] == "sfv"
    assert cfg["writing"]["clrmamepro_quotes"] is True


@pytest.mark.unit
def test_load_config_without_file_returns_defaults(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)

    cfg = load_config()

    assert cfg == DEFAULT_CONFIG
    assert cfg is not DEFAULT_CONFIG


@pytest.mark.unit
def test_load_config_finds_file_in_working_directory(tmp_path, monkeypatch, make_config):
    make_config({"hashfile": {"default_type": "md5"}})
    monkeypatch.chdir(tmp_path)

    assert load_config()["hashfile"]["default_type"] == "md5"


@pytest.mark.unit
def test_load_config_missing_file_raises(tmp_path):
    with pytest.raises(ConfigError):
        load_config(str(tmp_path / "does-not-exist.yaml"))


@pytest.mark.unit
def test_load_config_invalid_yaml(tmp_path):
    config_path = tmp_path / "datforge.yaml"
    config_path.write_text("invalid: [unclosed")

    with pytest.raises(ConfigError):
        load_config(str(config_path))


@pytest.mark.unit
def test_load_config_rejects_non_mapping(tmp_path):
    config_path = tmp_path / "datforge.yaml"
    config_path.write_text("- a\n- b\n")

    with pytest.raises(ConfigError):
        load_config(config_path)


@pytest.mark.unit
def test_load_config_empty_file_gives_defaults(tmp_path):
    config_path = tmp_path / "datforge.yaml"
    config_path.write_text("")

    assert load_config(config_path) == DEFAULT_CONFIG


@pytest.mark.unit
def test_merge_config_does_not_mutate_base():
    base = {"a": {"b": 1, "c": 2}}

    merged = merge_config(base, {"a": {"b": 5}, "d": 3})

    assert merged == {"a": {"b": 5, "c": 2}, "d": 3}
    assert base == {"a": {"b": 1, "c": 2}}


@pytest.mark.unit
def test_get_config_value():
    cfg = {"writing": {"preserve_extras": False}}

    assert get_config_value(cfg, "writing.preserve_extras") is False
    assert get_config_value(cfg, "writing.missing", "x") == "x"
    assert get_config_value(cfg, "writing.preserve_extras.deeper", 1) == 1
