"""Tests for run configuration loading."""
from pathlib import Path

import pytest

from aztfimport.config.loader import ConfigLoader
from aztfimport.errors import ArgumentError


def test_new_config(tmp_path):
    """Values are validated and the output dir made absolute."""
    config = ConfigLoader.new_config(
        " test-rg ",
        output_dir=str(tmp_path / "out"),
        mapping_file="mapping.json",
        name_pattern="vm-*",
    )

    assert config.resource_group == "test-rg"
    assert config.output_dir == str((tmp_path / "out").resolve())
    assert config.mapping_file == "mapping.json"
    assert config.name_pattern == "vm-*"
    assert config.log_file is None


def test_default_output_dir():
    """The default output dir is named after the resource group."""
    config = ConfigLoader.new_config("test-rg")
    assert Path(config.output_dir).name == "test-rg"


def test_empty_resource_group():
    """An empty resource group name is rejected."""
    with pytest.raises(ArgumentError):
        ConfigLoader.new_config("  ", output_dir="out")


def test_invalid_pattern():
    """A pattern yielding invalid names is rejected."""
    with pytest.raises(ArgumentError, match="name pattern"):
        ConfigLoader.new_config("test-rg", output_dir="out", name_pattern="1-")
