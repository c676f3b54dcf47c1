from pathlib import Path

import pytest

from app.utils.config import ConfigError, Settings, default_config_path, load_routing_config

VALID = """
watch_dir: {watch}
create_dirs: true
rules:
  - extensions: [".zip", ".tar.gz"]
    destination: {archives}
  - extensions: [".pdf"]
    destination: ~/Documents
"""


def test_load_routing_config(tmp_path, monkeypatch):
    monkeypatch.setenv("HOME", str(tmp_path / "home"))
    config_file = tmp_path / "config.yaml"
    config_file.write_text(VALID.format(watch=tmp_path / "in", archives=tmp_path / "archives"))

    config = load_routing_config(config_file)

    assert config.watch_dir == tmp_path / "in"
    assert config.create_dirs is True
    assert [rule.extensions for rule in config.rules] == [[".zip", ".tar.gz"], [".pdf"]]
    assert config.rules[0].destination == tmp_path / "archives"
    assert config.rules[1].destination == tmp_path / "home" / "Documents"


def test_optional_keys_have_defaults(tmp_path):
    config_file = tmp_path / "config.yaml"
    config_file.write_text(f"watch_dir: {tmp_path}\nextra_key: ignored\n")

    config = load_routing_config(config_file)

    assert config.create_dirs is False
    assert config.rules == []


def test_missing_file_raises_config_error(tmp_path):
    with pytest.raises(ConfigError, match="reading config file"):
        load_routing_config(tmp_path / "absent.yaml")


def test_malformed_yaml_raises_config_error(tmp_path):
    config_file = tmp_path / "config.yaml"
    config_file.write_text("watch_dir: [unterminated\n")

    with pytest.raises(ConfigError, match="parsing config file"):
        load_routing_config(config_file)


@pytest.mark.parametrize("body", ["", "- just\n- a list\n"])
def test_non_mapping_document_raises_config_error(tmp_path, body):
    config_file = tmp_path / "config.yaml"
    config_file.write_text(body)

    with pytest.raises(ConfigError, match="expected a mapping"):
        load_routing_config(config_file)


def test_missing_watch_dir_raises_config_error(tmp_path):
    config_file = tmp_path / "config.yaml"
    config_file.write_text("rules: []\n")

    with pytest.raises(ConfigError, match="validating config file"):
        load_routing_config(config_file)


def test_rule_without_destination_raises_config_error(tmp_path):
    config_file = tmp_path / "config.yaml"
    config_file.write_text(f"watch_dir: {tmp_path}\nrules:\n  - extensions: ['.zip']\n")

    with pytest.raises(ConfigError):
        load_routing_config(config_file)


def test_default_config_path_prefers_xdg(monkeypatch, tmp_path):
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "xdg"))
    monkeypatch.setenv("HOME", str(tmp_path / "home"))

    assert default_config_path() == tmp_path / "xdg" / "fwatch" / "config.yaml"


def test_default_config_path_falls_back_to_home(monkeypatch, tmp_path):
    monkeypatch.delenv("XDG_CONFIG_HOME", raising=False)
    monkeypatch.setenv("HOME", str(tmp_path / "home"))

    assert default_config_path() == tmp_path / "home" / ".config" / "fwatch" / "config.yaml"


def test_default_config_path_last_resort(monkeypatch):
    monkeypatch.delenv("XDG_CONFIG_HOME", raising=False)
    monkeypatch.delenv("HOME", raising=False)

    assert default_config_path() == Path("config.yaml")


def test_settings_read_environment(monkeypatch):
    monkeypatch.setenv("FWATCH_DEBOUNCE_MS", "250")
    monkeypatch.setenv("FWATCH_LOG_LEVEL", "DEBUG")

    settings = Settings()

    assert settings.debounce_seconds == 0.25
    assert settings.log_level == "DEBUG"
    assert settings.timestamp_format == "%Y%m%d-%H%M%S"
