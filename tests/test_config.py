"""Tests for YAML configuration loading."""

import pytest
import yaml

from biblint.config import (
    BiblintConfig,
    ConfigError,
    get_config,
    load_config,
    reset_config,
)


def write_yaml(path, data):
    path.write_text(yaml.safe_dump(data))
    return str(path)


class TestDefaults:
    """Tests for running without a config file."""

    def test_defaults_without_file(self):
        cfg = BiblintConfig()
        assert cfg.get("clean.sort_by") == "year"
        assert cfg.get("clean.reverse") is True
        assert cfg.get_blessed_fields() == []
        assert cfg.get_audit_config()["enabled"] is False
        assert cfg.get_log_level() == "WARNING"

    def test_get_missing_key(self):
        cfg = BiblintConfig()
        assert cfg.get("clean.nope", "fallback") == "fallback"
        assert cfg.get("clean.sort_by.deeper") is None

    def test_picks_up_local_file(self, tmp_path):
        """Test that ./biblint.yaml is used when present."""
        write_yaml(tmp_path / "biblint.yaml", {"clean": {"sort_by": "title"}})
        assert BiblintConfig().get("clean.sort_by") == "title"


class TestOverrides:
    """Tests for user configuration."""

    def test_partial_override_merges(self, tmp_path):
        path = write_yaml(tmp_path / "cfg.yaml", {
            "clean": {"blessed": [" EPrint ", "archiveprefix"], "reverse": False},
            "logging": {"level": "debug"},
        })
        cfg = BiblintConfig(path)
        assert cfg.get("clean.sort_by") == "year"
        assert cfg.get("clean.reverse") is False
        assert cfg.get_blessed_fields() == ["eprint", "archiveprefix"]
        assert cfg.get_log_level() == "DEBUG"

    def test_env_var_path(self, tmp_path, monkeypatch):
        path = write_yaml(tmp_path / "env.yaml", {"clean": {"sort_by": "key"}})
        monkeypatch.setenv("BIBLINT_CONFIG_PATH", path)
        assert BiblintConfig().get("clean.sort_by") == "key"

    def test_env_var_missing_file(self, tmp_path, monkeypatch):
        monkeypatch.setenv("BIBLINT_CONFIG_PATH", str(tmp_path / "missing.yaml"))
        with pytest.raises(ConfigError, match="not found"):
            BiblintConfig()


class TestValidation:
    """Tests for rejecting bad configuration."""

    def test_missing_explicit_file(self, tmp_path):
        with pytest.raises(ConfigError, match="not found"):
            BiblintConfig(str(tmp_path / "missing.yaml"))

    def test_invalid_yaml(self, tmp_path):
        path = tmp_path / "bad.yaml"
        path.write_text("clean: [unclosed\n")
        with pytest.raises(ConfigError, match="Invalid YAML"):
            BiblintConfig(str(path))

    def test_root_not_mapping(self, tmp_path):
        path = tmp_path / "list.yaml"
        path.write_text("- a\n- b\n")
        with pytest.raises(ConfigError, match="mapping"):
            BiblintConfig(str(path))

    @pytest.mark.parametrize("data,message", [
        ({"clean": "yes"}, "clean"),
        ({"clean": {"sort_by": 3}}, "sort_by"),
        ({"clean": {"reverse": "no"}}, "reverse"),
        ({"clean": {"blessed": "eprint"}}, "blessed"),
        ({"clean": {"remove_dups_by_title": 1}}, "remove_dups_by_title"),
        ({"logging": {"level": "LOUD"}}, "logging.level"),
        ({"audit_log": {"level": None}}, "audit_log.level"),
    ])
    def test_bad_values(self, tmp_path, data, message):
        path = write_yaml(tmp_path / "cfg.yaml", data)
        with pytest.raises(ConfigError, match=message):
            BiblintConfig(path)


class TestCaching:
    """Tests for the module-level config cache."""

    def test_get_before_load(self):
        with pytest.raises(RuntimeError):
            get_config()

    def test_load_caches(self, tmp_path):
        first = load_config()
        assert load_config() is first
        assert get_config() is first

        path = write_yaml(tmp_path / "cfg.yaml", {})
        second = load_config(path)
        assert second is not first
        assert get_config() is second

        reset_config()
        with pytest.raises(RuntimeError):
            get_config()
