"""Tests for config loading and environment overrides."""

import pytest
import yaml

from gateway.config import GatewayConfig, load_config


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    for var in ("DATABASE_URL", "CHIP_TOOL_PATH", "GATEWAY_CONFIG"):
        monkeypatch.delenv(var, raising=False)


def _write(tmp_path, data) -> str:
    path = tmp_path / "config.yaml"
    path.write_text(yaml.dump(data))
    return str(path)


def test_missing_file_uses_defaults(tmp_path):
    assert load_config(str(tmp_path / "nope.yaml")) == GatewayConfig()


def test_defaults_have_no_timeout():
    assert GatewayConfig().chip_tool_timeout is None


def test_reads_sections(tmp_path):
    path = _write(tmp_path, {
        "server": {"host": "0.0.0.0", "port": 8080},
        "database": {"path": "/var/lib/gateway/devices.db"},
        "chip_tool": {"binary": "/opt/chip/chip-tool", "timeout": 90},
        "logging": {"level": "DEBUG"},
    })
    config = load_config(path)

    assert config.host == "0.0.0.0"
    assert config.port == 8080
    assert config.database == "/var/lib/gateway/devices.db"
    assert config.chip_tool == "/opt/chip/chip-tool"
    assert config.chip_tool_timeout == 90.0
    assert config.log_level == "debug"


def test_empty_file(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text("")
    assert load_config(str(path)) == GatewayConfig()


@pytest.mark.parametrize("url,expected", [
    ("sqlite:devices.db", "devices.db"),
    ("sqlite://devices.db", "devices.db"),
    ("sqlite:///tmp/devices.db?mode=rwc", "/tmp/devices.db"),
    ("devices.db", "devices.db"),
])
def test_database_url_override(tmp_path, monkeypatch, url, expected):
    monkeypatch.setenv("DATABASE_URL", url)
    assert load_config(str(tmp_path / "nope.yaml")).database == expected


def test_chip_tool_override(tmp_path, monkeypatch):
    path = _write(tmp_path, {"chip_tool": {"binary": "chip-tool"}})
    monkeypatch.setenv("CHIP_TOOL_PATH", "/snap/bin/chip-tool")
    assert load_config(path).chip_tool == "/snap/bin/chip-tool"


def test_config_path_from_env(tmp_path, monkeypatch):
    path = _write(tmp_path, {"server": {"port": 4000}})
    monkeypatch.setenv("GATEWAY_CONFIG", path)
    assert load_config().port == 4000
