"""Client configuration loading and validation."""

from __future__ import annotations

import json
import logging
from functools import lru_cache
from importlib import resources
from pathlib import Path
from typing import Any

import yaml
from jsonschema import ValidationError, validators

from kitectl.core.errors import ConfigError, KiteError
from kitectl.core.model import ClientConfig, Endpoint

DEFAULT_CONFIG_PATH = Path("./config/default.json")
_YAML_SUFFIXES = {".yml", ".yaml"}
LOGGER = logging.getLogger(__name__)


class UniqueKeyLoader(yaml.SafeLoader):
    """YAML loader that rejects duplicate mapping keys."""


def _construct_mapping(loader: UniqueKeyLoader, node: yaml.Node, deep: bool = False) -> dict[str, Any]:
    mapping: dict[str, Any] = {}
    for key_node, value_node in node.value:
        key = loader.construct_object(key_node, deep=deep)
        if key in mapping:
            raise yaml.constructor.ConstructorError(
                None, None, f"duplicate key '{key}'", key_node.start_mark
            )
        mapping[key] = loader.construct_object(value_node, deep=deep)
    return mapping


UniqueKeyLoader.add_constructor(
    yaml.resolver.BaseResolver.DEFAULT_MAPPING_TAG,
    _construct_mapping,
)


@lru_cache(maxsize=None)
def schema_validator(name: str) -> Any:
    schema_text = resources.files("kitectl.schemas").joinpath(name).read_text(encoding="utf-8")
    schema = json.loads(schema_text)
    validator_cls = validators.validator_for(schema)
    validator_cls.check_schema(schema)
    return validator_cls(schema)


def read_document(path: Path, *, error: type[KiteError] = ConfigError) -> dict[str, Any]:
    """Read a JSON (or YAML, by suffix) mapping, raising ``error`` on failure."""
    try:
        content = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        raise error(f"File {path} does not exist") from None
    except OSError as exc:
        raise error(f"Could not read {path}: {exc}") from exc

    try:
        if path.suffix.lower() in _YAML_SUFFIXES:
            loaded = yaml.load(content, Loader=UniqueKeyLoader)
        else:
            loaded = json.loads(content)
    except (yaml.YAMLError, json.JSONDecodeError) as exc:
        raise error(f"Error parsing {path}: {exc}") from exc

    if not isinstance(loaded, dict):
        raise error(f"{path} must contain a mapping at root")
    return loaded


def validate_document(doc: dict[str, Any], schema: str, source: Path, *, error: type[KiteError]) -> None:
    try:
        schema_validator(schema).validate(doc)
    except ValidationError as exc:
        location = ".".join(str(p) for p in exc.path)
        where = f" ({location})" if location else ""
        raise error(f"Schema validation failed for {source}{where}: {exc.message}") from exc


def _build_config(doc: dict[str, Any]) -> ClientConfig:
    endpoint_doc = doc.get("endpoint", doc.get("address"))
    if "endpoint" not in doc:
        LOGGER.debug("Using legacy 'address' key as local endpoint")
    return ClientConfig(
        name=doc["name"],
        api_key=doc["api_key"],
        server=doc["server"],
        port=str(doc["port"]),
        ssl=bool(doc.get("ssl", False)),
        insecure=bool(doc.get("insecure", False)),
        endpoint=Endpoint(
            domain=endpoint_doc["domain"],
            type=endpoint_doc["type"],
            host=endpoint_doc["host"],
            address=endpoint_doc["address"],
            id=endpoint_doc["id"],
        ),
    )


def load_config(path: Path | str | None = None) -> ClientConfig:
    config_path = Path(path) if path else DEFAULT_CONFIG_PATH
    doc = read_document(config_path)
    validate_document(doc, "config.schema.json", config_path, error=ConfigError)
    return _build_config(doc)
