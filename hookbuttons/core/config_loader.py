"""Configuration loading and validation for hookbuttons."""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass
from importlib import resources
from pathlib import Path
from typing import Any

import yaml
from jsonschema import ValidationError, validators

from hookbuttons.core.errors import ConfigLoadError, ConfigValidationError
from hookbuttons.core.model import ButtonConfig
from hookbuttons.core.routing import build_route_table

CONFIG_ENV_VAR = "HOOKBUTTONS_CONFIG"
LOGGER = logging.getLogger(__name__)


class UniqueKeyLoader(yaml.SafeLoader):
    """YAML loader that rejects duplicate mapping keys.

    Implicit booleans are disabled so button names such as `On` or `Yes`
    stay strings.
    """


UniqueKeyLoader.yaml_implicit_resolvers = {
    key: list(value) for key, value in yaml.SafeLoader.yaml_implicit_resolvers.items()
}

for first_char, mappings in list(UniqueKeyLoader.yaml_implicit_resolvers.items()):
    UniqueKeyLoader.yaml_implicit_resolvers[first_char] = [
        (tag, regexp)
        for tag, regexp in mappings
        if tag != "tag:yaml.org,2002:bool"
    ]


def _construct_mapping(loader: UniqueKeyLoader, node: yaml.Node, deep: bool = False) -> dict[str, Any]:
    mapping: dict[str, Any] = {}
    for key_node, value_node in node.value:
        key = loader.construct_object(key_node, deep=deep)
        if key in mapping:
            raise ConfigValidationError(f"Duplicate key '{key}' in YAML document")
        mapping[key] = loader.construct_object(value_node, deep=deep)
    return mapping


UniqueKeyLoader.add_constructor(
    yaml.resolver.BaseResolver.DEFAULT_MAPPING_TAG,
    _construct_mapping,
)


@dataclass(frozen=True)
class LoadedConfig:
    config: ButtonConfig
    source: Path | None
    warnings: tuple[str, ...]


def _load_schema_validator() -> Any:
    schema_text = resources.files("hookbuttons.schemas").joinpath("config.schema.json").read_text(
        encoding="utf-8"
    )
    schema = json.loads(schema_text)
    validator_cls = validators.validator_for(schema)
    validator_cls.check_schema(schema)
    return validator_cls(schema)


def default_config_path() -> Path:
    override = os.environ.get(CONFIG_ENV_VAR)
    if override:
        return Path(override)
    xdg_config = Path(os.environ.get("XDG_CONFIG_HOME", Path.home() / ".config"))
    return xdg_config / "hookbuttons/config.yaml"


def _read_yaml(path: Path) -> dict[str, Any]:
    try:
        content = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigLoadError(f"Could not read config file {path}: {exc}") from exc

    try:
        loaded = yaml.load(content, Loader=UniqueKeyLoader)
    except yaml.YAMLError as exc:
        raise ConfigValidationError(f"Invalid YAML in {path}: {exc}") from exc

    if loaded is None:
        return {}
    if not isinstance(loaded, dict):
        raise ConfigValidationError(f"Config file {path} must contain a mapping at root")
    return loaded


def build_config(doc: dict[str, Any], source: Path | str = "<config>") -> LoadedConfig:
    validator = _load_schema_validator()
    try:
        validator.validate(doc)
    except ValidationError as exc:
        path = ".".join(str(p) for p in exc.path)
        where = f" ({path})" if path else ""
        raise ConfigValidationError(f"Schema validation failed for {source}{where}: {exc.message}") from exc

    buttons = tuple(doc.get("buttons", ()))
    # Fail at load time rather than letting two buttons share one URI.
    build_route_table(buttons)

    warnings: list[str] = []
    if not buttons:
        warning = "Configuration issue: no buttons configured."
        LOGGER.warning(warning)
        warnings.append(warning)

    cache_path = doc.get("cache_path")
    config = ButtonConfig(
        buttons=buttons,
        port=int(doc.get("port", 3001)),
        host=str(doc.get("host", "0.0.0.0")),
        cache_path=Path(cache_path).expanduser() if cache_path else None,
        log_level=str(doc.get("log_level", "INFO")),
    )
    return LoadedConfig(
        config=config,
        source=source if isinstance(source, Path) else None,
        warnings=tuple(warnings),
    )


def load_config(path: Path | None = None) -> LoadedConfig:
    config_path = path or default_config_path()
    if not config_path.exists():
        raise ConfigLoadError(
            f"Config file {config_path} not found. Create it or pass --config."
        )
    return build_config(_read_yaml(config_path), config_path)
