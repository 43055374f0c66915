"""Tests for config/loader.py and config/settings.py."""

import json

import pytest
import yaml
from envfleet.config.loader import (
    CONFIG_ERROR_MESSAGE,
    Config,
    EnvironmentConfig,
    get_config_path,
    load_config,
    parse_config,
)
from envfleet.config.settings import Settings
from envfleet.core.errors import ConfigurationError, ExitCode

CONFIG_DATA = {
    "target": "https://platform.example.com",
    "registry": "registry.example.com",
    "envs": [
        {"name": "dev", "dnsSuffix": "dev.example.com"},
        {"name": "prod", "dnsSuffix": "example.com"},
    ],
}


class TestParseConfig:
    """Tests for parse_config."""

    def test_parses_document(self):
        config = parse_config(CONFIG_DATA)

        assert config.target == "https://platform.example.com"
        assert config.registry == "registry.example.com"
        assert config.envs == [
            EnvironmentConfig("dev", "dev.example.com"),
            EnvironmentConfig("prod", "example.com"),
        ]
        assert [env.name for env in config.envs] == ["dev", "prod"]

    def test_not_a_mapping(self):
        with pytest.raises(ConfigurationError):
            parse_config(["dev"])

    def test_invalid_environment_entry(self):
        with pytest.raises(ConfigurationError) as exc_info:
            parse_config({"envs": [{"name": "dev"}]})
        assert exc_info.value.exit_code == ExitCode.CONFIG_ERROR


class TestLoadConfig:
    """Tests for load_config and get_config_path."""

    def test_loads_yaml(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text(yaml.dump(CONFIG_DATA))

        config = load_config(path)

        assert [env.name for env in config.envs] == ["dev", "prod"]
        assert config.path == path

    def test_loads_json(self, tmp_path):
        path = tmp_path / "config.json"
        path.write_text(json.dumps(CONFIG_DATA))

        assert load_config(path).target == "https://platform.example.com"

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigurationError) as exc_info:
            load_config(tmp_path / "nope.yaml")
        assert exc_info.value.message == CONFIG_ERROR_MESSAGE
        assert "envfleet is properly configured" in CONFIG_ERROR_MESSAGE

    def test_corrupt_file(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("envs: [unclosed")

        with pytest.raises(ConfigurationError, match="unable to load environments file"):
            load_config(path)

    def test_search_prefers_working_directory(self, tmp_path, monkeypatch):
        home = tmp_path / "home"
        project = tmp_path / "project"
        (home / ".envfleet").mkdir(parents=True)
        (project / ".envfleet").mkdir(parents=True)
        (home / ".envfleet" / "config.yaml").write_text("target: home")
        (project / ".envfleet" / "config.yaml").write_text("target: project")
        monkeypatch.setenv("HOME", str(home))

        monkeypatch.chdir(project)
        assert load_config().target == "project"

        monkeypatch.chdir(tmp_path)
        assert load_config().target == "home"

    def test_nothing_found(self, tmp_path, monkeypatch):
        monkeypatch.setenv("HOME", str(tmp_path))
        monkeypatch.chdir(tmp_path)

        assert get_config_path() is None


def test_save_writes_yaml(tmp_path):
    config = parse_config(CONFIG_DATA)

    path = config.save(tmp_path / "sub" / "config.yaml")

    assert yaml.safe_load(path.read_text()) == CONFIG_DATA
    assert config.path == path


def test_empty_config_saves_defaults(tmp_path):
    path = Config(target="https://p.example.com").save(tmp_path / "config.yaml")
    assert yaml.safe_load(path.read_text()) == {"target": "https://p.example.com", "registry": "", "envs": []}


def test_settings_from_environment(monkeypatch):
    monkeypatch.setenv("ENVFLEET_TARGET", "https://override.example.com")
    monkeypatch.setenv("ENVFLEET_HTTP_TIMEOUT", "5")

    settings = Settings()

    assert settings.target == "https://override.example.com"
    assert settings.http_timeout == 5.0
    assert settings.api_version == "1.0"
