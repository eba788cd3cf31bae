#!/usr/bin/env python3
"""
Test suite for GhostWriter configuration loading
"""

import logging
from pathlib import Path

import pytest
import yaml

from ghostwriter.utils.config import CONFIG_FILENAME, default_config, load_config


@pytest.fixture
def config_dir(tmp_path: Path) -> Path:
    """Creates a temporary config directory."""
    directory = tmp_path / "config"
    directory.mkdir()
    return directory


class TestLoadConfig:
    """Test load_config()."""

    def test_no_path_gives_defaults(self):
        assert load_config() == default_config()

    def test_defaults(self):
        config = default_config()

        assert config["database_path"] == "ghostwriter.db"
        assert config["supported_extensions"] == [".txt"]
        assert config["max_file_size_bytes"] == 10 * 1024 * 1024
        assert config["parser"] == "whatsapp"
        assert len(config["strategies"]) == 4

    def test_merges_over_defaults(self, config_dir):
        with open(config_dir / CONFIG_FILENAME, "w") as f:
            yaml.dump({"database_path": "custom.db", "export_formats": ["html", "json"]}, f)

        config = load_config(config_dir)

        assert config["database_path"] == "custom.db"
        assert config["export_formats"] == ["html", "json"]
        assert config["output_dir"] is None

    def test_missing_file(self, config_dir, caplog):
        with caplog.at_level(logging.INFO, logger="ghostwriter.utils.config"):
            config = load_config(config_dir)

        assert config == default_config()
        assert "not found" in caplog.text

    def test_empty_file(self, config_dir, caplog):
        (config_dir / CONFIG_FILENAME).write_text("")

        with caplog.at_level(logging.WARNING, logger="ghostwriter.utils.config"):
            config = load_config(config_dir)

        assert config == default_config()
        assert "is empty" in caplog.text

    def test_invalid_yaml(self, config_dir, caplog):
        (config_dir / CONFIG_FILENAME).write_text("database_path: [unclosed\n")

        with caplog.at_level(logging.ERROR, logger="ghostwriter.utils.config"):
            config = load_config(config_dir)

        assert config == default_config()
        assert "Error loading configuration" in caplog.text

    def test_non_mapping(self, config_dir, caplog):
        (config_dir / CONFIG_FILENAME).write_text("- just\n- a list\n")

        with caplog.at_level(logging.WARNING, logger="ghostwriter.utils.config"):
            config = load_config(config_dir)

        assert config == default_config()
        assert "not a mapping" in caplog.text
