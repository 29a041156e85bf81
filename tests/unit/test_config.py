# Copyright (c) 2026 Huynh Huy. All rights reserved.

"""
Tests for Configuration
=======================
"""

import pytest


class TestConfig:
    """Tests for configuration management."""

    def test_default_config(self):
        """Test default configuration values."""
        from allerscan.utils.config import Config

        config = Config()

        assert config.camera.width == 1280
        assert config.camera.height == 720
        assert config.scan.interval == 3.0
        assert config.scan.language == "eng"
        assert config.allergens == []

    def test_load_config_none_returns_defaults(self):
        from allerscan.utils.config import Config, load_config

        assert load_config(None) == Config()

    def test_load_shipped_config(self, project_root):
        """The config file in the repo is valid."""
        from allerscan.utils.config import load_config

        config = load_config(project_root / "config" / "config.yaml")

        assert config.scan.granularity == "word"
        assert config.overlay.color == (0, 0, 255)

    def test_missing_file_raises(self, tmp_path):
        from allerscan.utils.config import load_config

        with pytest.raises(FileNotFoundError):
            load_config(tmp_path / "nope.yaml")

    def test_partial_yaml(self, tmp_path):
        """Unspecified sections fall back to defaults."""
        from allerscan.utils.config import load_config

        path = tmp_path / "config.yaml"
        path.write_text("scan:\n  interval: 1.5\nallergens: [Peanut, milk]\n")

        config = load_config(path)

        assert config.scan.interval == 1.5
        assert config.camera.index == 0
        assert config.allergens == ["Peanut", "milk"]

    def test_invalid_values_raise_config_error(self, tmp_path):
        from allerscan.utils import ConfigError
        from allerscan.utils.config import load_config

        path = tmp_path / "config.yaml"
        path.write_text("scan:\n  interval: 0\n")

        with pytest.raises(ConfigError):
            load_config(path)

    def test_non_mapping_yaml_raises_config_error(self, tmp_path):
        from allerscan.utils import ConfigError
        from allerscan.utils.config import load_config

        path = tmp_path / "config.yaml"
        path.write_text("- just\n- a list\n")

        with pytest.raises(ConfigError):
            load_config(path)

    def test_save_and_reload(self, tmp_path):
        from allerscan.utils.config import Config, load_config, save_config

        config = Config()
        config.scan.granularity = "line"
        config.allergens = ["soy"]
        path = tmp_path / "out" / "config.yaml"

        save_config(config, path)

        assert load_config(path) == config
