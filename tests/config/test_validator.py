import copy

import pytest

from datforge.config.loader import DEFAULT_CONFIG
from datforge.config.validator import ValidationError, validate_config


@pytest.fixture
def valid_config():
    """Complete valid configuration."""
    return copy.deepcopy(DEFAULT_CONFIG)


@pytest.mark.unit
def test_defaults_are_valid(valid_config):
    validate_config(valid_config)


@pytest.mark.unit
def test_empty_config_is_valid():
    validate_config({})


@pytest.mark.unit
def test_invalid_log_level(valid_config):
    valid_config["logging"]["level"] = "LOUD"

    with pytest.raises(ValidationError, match="logging.level"):
        validate_config(valid_config)


@pytest.mark.unit
def test_log_level_is_case_insensitive(valid_config):
    valid_config["logging"]["level"] = "debug"

    validate_config(valid_config)


@pytest.mark.unit
def test_all_errors_are_reported_together(valid_config):
    valid_config["parsing"]["strict"] = "yes"
    valid_config["writing"]["preserve_extras"] = 1
    valid_config["hashfile"]["default_type"] = "crc64"

    with pytest.raises(ValidationError) as exc_info:
        validate_config(valid_config)

    message = str(exc_info.value)
    assert "parsing.strict" in message
    assert "writing.preserve_extras" in message
    assert "hashfile.default_type" in message


@pytest.mark.unit
def test_section_must_be_mapping(valid_config):
    valid_config["writing"] = ["not", "a", "mapping"]

    with pytest.raises(ValidationError, match="writing must be a mapping"):
        validate_config(valid_config)


@pytest.mark.unit
def test_log_file_must_be_string(valid_config):
    valid_config["logging"]["file"] = 5

    with pytest.raises(ValidationError, match="logging.file"):
        validate_config(valid_config)
