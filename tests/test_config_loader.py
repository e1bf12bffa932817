from __future__ import annotations

import json
from pathlib import Path

import pytest

from kitectl.core.config_loader import load_config
from kitectl.core.errors import ConfigError
from kitectl.core.model import Endpoint

ENDPOINT = {"domain": "home", "type": "cli", "host": "laptop", "address": "console", "id": "1"}


def _write_config(path: Path, doc: dict) -> Path:
    path.write_text(json.dumps(doc), encoding="utf-8")
    return path


def _config_doc(**overrides) -> dict:
    doc = {
        "name": "operator",
        "api_key": "secret",
        "server": "hub.local",
        "port": "9443",
        "ssl": True,
        "endpoint": ENDPOINT,
    }
    doc.update(overrides)
    return doc


def test_load_valid_config(tmp_path: Path) -> None:
    config = load_config(_write_config(tmp_path / "default.json", _config_doc()))
    assert config.name == "operator"
    assert config.api_key == "secret"
    assert config.server_address == "hub.local:9443"
    assert config.ssl is True
    assert config.insecure is False
    assert config.endpoint == Endpoint(**ENDPOINT)
    assert config.prompt == "home.cli.laptop.console.1> "


def test_numeric_port_is_accepted(tmp_path: Path) -> None:
    config = load_config(_write_config(tmp_path / "c.json", _config_doc(port=8080)))
    assert config.port == "8080"


def test_legacy_address_key(tmp_path: Path) -> None:
    doc = _config_doc()
    doc["address"] = doc.pop("endpoint")
    config = load_config(_write_config(tmp_path / "c.json", doc))
    assert config.endpoint.domain == "home"


def test_missing_file_is_config_error(tmp_path: Path) -> None:
    with pytest.raises(ConfigError, match="does not exist"):
        load_config(tmp_path / "absent.json")


def test_malformed_json_is_config_error(tmp_path: Path) -> None:
    path = tmp_path / "c.json"
    path.write_text("{not json", encoding="utf-8")
    with pytest.raises(ConfigError):
        load_config(path)


def test_missing_required_key_rejected(tmp_path: Path) -> None:
    doc = _config_doc()
    del doc["api_key"]
    with pytest.raises(ConfigError, match="Schema validation failed"):
        load_config(_write_config(tmp_path / "c.json", doc))


def test_incomplete_endpoint_rejected(tmp_path: Path) -> None:
    with pytest.raises(ConfigError):
        load_config(_write_config(tmp_path / "c.json", _config_doc(endpoint={"domain": "home"})))


def test_yaml_config(tmp_path: Path) -> None:
    path = tmp_path / "c.yaml"
    path.write_text(
        """
name: operator
api_key: secret
server: hub.local
port: 9000
ssl: false
endpoint:
  domain: home
  type: cli
  host: laptop
  address: console
  id: "1"
""",
        encoding="utf-8",
    )
    config = load_config(path)
    assert config.server_address == "hub.local:9000"
    assert config.ssl is False


def test_yaml_duplicate_keys_rejected(tmp_path: Path) -> None:
    path = tmp_path / "c.yml"
    path.write_text("name: a\nname: b\n", encoding="utf-8")
    with pytest.raises(ConfigError, match="duplicate key"):
        load_config(path)
