from pathlib import Path

import pytest
import yaml
from ta_core.utils.config import Config, ConfigError


class TestConfig:
    def test_load_valid_config(self, tmp_path):
        """Load values from a valid config file"""
        config_content = {
            "logging": {"level": "DEBUG"},
            "indicators": {"williams_r": {"length": 14}},
        }
        config_file = tmp_path / "config.yaml"
        config_file.write_text(yaml.dump(config_content))

        config = Config(str(config_file))

        assert config.get("logging.level") == "DEBUG"
        assert config.get("indicators.williams_r.length") == 14

    def test_get_nested_list(self, tmp_path):
        """Nested lists come back unchanged"""
        config_content = {
            "indicators": {"williams_r": [{"length": 14}, {"length": 7}]}
        }
        config_file = tmp_path / "config.yaml"
        config_file.write_text(yaml.dump(config_content))

        config = Config(str(config_file))

        assert config.get("indicators.williams_r") == [{"length": 14}, {"length": 7}]

    def test_get_with_default(self, tmp_path):
        """Missing keys return the default"""
        config_file = tmp_path / "config.yaml"
        config_file.write_text(yaml.dump({"logging": {"level": "INFO"}}))

        config = Config(str(config_file))

        assert config.get("nonexistent.key", "default") == "default"
        assert config.get("nonexistent.key") is None
        assert config.get("logging.level.deeper", 1) == 1

    def test_getitem_missing_raises_key_error(self, tmp_path):
        """Item access on a missing key raises KeyError"""
        config_file = tmp_path / "config.yaml"
        config_file.write_text(yaml.dump({"a": 1}))

        config = Config(str(config_file))

        assert config["a"] == 1
        with pytest.raises(KeyError):
            config["b"]

    def test_set_and_save(self, tmp_path):
        """set() creates intermediate mappings and save() persists them"""
        config_file = tmp_path / "config.yaml"
        config_file.write_text(yaml.dump({"logging": {"level": "INFO"}}))

        config = Config(str(config_file))
        config.set("indicators.rsx.length", 21)
        config.save()

        reloaded = Config(str(config_file))
        assert reloaded.get("indicators.rsx.length") == 21
        assert reloaded.get("logging.level") == "INFO"

    def test_empty_file_is_empty_config(self, tmp_path):
        """An empty file loads as an empty mapping"""
        config_file = tmp_path / "config.yaml"
        config_file.write_text("")

        assert Config(str(config_file)).get("anything") is None

    def test_missing_file_raises_error(self):
        """A missing file raises ConfigError"""
        with pytest.raises(ConfigError):
            Config("/nonexistent/path/config.yaml")

    def test_invalid_yaml_raises_error(self, tmp_path):
        """Malformed YAML raises ConfigError"""
        config_file = tmp_path / "config.yaml"
        config_file.write_text("invalid: yaml: content: [")

        with pytest.raises(ConfigError):
            Config(str(config_file))

    def test_non_mapping_root_raises_error(self, tmp_path):
        """A list at the root raises ConfigError"""
        config_file = tmp_path / "config.yaml"
        config_file.write_text("- a\n- b\n")

        with pytest.raises(ConfigError):
            Config(str(config_file))

    def test_shipped_config_loads(self):
        """The default config file in the repo is valid"""
        config = Config(str(Path(__file__).parent.parent / "config" / "config.yaml"))
        assert config.get("logging.level") == "INFO"
        assert "williams_r" in config.get("indicators")
