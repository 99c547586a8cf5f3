"""
Shared pytest fixtures and utilities for the datforge test suite.
"""

from pathlib import Path
from typing import Dict, Any, Callable

import pytest
import yaml


@pytest.fixture
def project_root() -> Path:
    """
    Repository root path for locating fixtures and sample data.
    """
    return Path(__file__).resolve().parent.parent


@pytest.fixture
def data_dir(project_root: Path) -> Path:
    """
    Path to shared static test fixtures (sample DATs of every dialect).
    """
    return project_root / "tests" / "data"


@pytest.fixture
def copy_fixture(tmp_path: Path, data_dir: Path) -> Callable[[str], Path]:
    """
    Copy a sample DAT into the temp workspace, byte for byte.

    Usage:
        path = copy_fixture("clrmamepro_sample.dat")
    """

    def _copy(name: str) -> Path:
        dest = tmp_path / name
        dest.write_bytes((data_dir / name).read_bytes())
        return dest

    return _copy


@pytest.fixture
def make_config(tmp_path: Path) -> Callable[[Dict[str, Any]], Path]:
    """
    Create a minimal datforge.yaml in a temp directory.

    Usage:
        path = make_config({"parsing": {"strict": True}})
    """

    def _builder(overrides: Dict[str, Any] | None = None) -> Path:
        base = {
            "logging": {"level": "WARNING", "console": False},
            "writing": {"preserve_extras": True},
        }
        if overrides:
            base = merge_dicts(base, overrides)

        cfg_path = tmp_path / "datforge.yaml"
        cfg_path.write_text(yaml.safe_dump(base))
        return cfg_path

    return _builder


def merge_dicts(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    """
    Shallow+deep merge helper for fixture config dictionaries.
    """
    result: Dict[str, Any] = dict(base)
    for key, value in override.items():
        if (
            key in result
            and isinstance(result[key], dict)
            and isinstance(value, dict)
        ):
            result[key] = merge_dicts(result[key], value)
        else:
            result[key] = value
    return result
