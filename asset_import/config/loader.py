from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import jsonschema
import yaml
from jsonschema.exceptions import ValidationError

from ..models.config_models import (
    DEFAULT_TEMPLATES,
    DatabaseConfig,
    ImportConfig,
    LookupConfig,
    LookupSource,
    TemplateConfig,
)
from ..models.entity import CommitMode, EntityKind

"""Config loader.

Responsibilities:
- Load YAML config/import.yml
- Validate it against config_schema.json (shipped next to this module)
- Fill per-entity template defaults (header rows, commit mode)
"""

__all__ = [
    "SCHEMA_PATH",
    "DEFAULT_CONFIG_PATH",
    "ConfigError",
    "load_config",
    "default_config",
]

SCHEMA_PATH = Path(__file__).with_name("config_schema.json")
DEFAULT_CONFIG_PATH = Path("config/import.yml")


class ConfigError(Exception):
    pass


def _validate_config_schema(data: dict[str, Any]) -> None:
    """Validate config data against JSON schema.

    Raises:
        ConfigError: schema file missing / not JSON, or the config violates it
    """
    if not SCHEMA_PATH.exists():
        raise ConfigError(f"config schema not found: {SCHEMA_PATH}")

    try:
        schema = json.loads(SCHEMA_PATH.read_text(encoding="utf-8"))
        jsonschema.validate(data, schema)
    except json.JSONDecodeError as e:
        raise ConfigError(f"invalid schema file: {e}") from e
    except ValidationError as e:
        raise ConfigError(f"config validation failed: {e.message}") from e


def _template(entity: EntityKind, raw: dict[str, Any]) -> TemplateConfig:
    default = DEFAULT_TEMPLATES[entity]
    mode = raw.get("commit_mode")
    return TemplateConfig(
        header_rows=raw.get("header_rows", default.header_rows),
        commit_mode=CommitMode(mode) if mode else default.commit_mode,
        sheet=raw.get("sheet"),
    )


def _sources(raw: dict[str, Any] | None) -> dict[str, LookupSource]:
    return {
        key: LookupSource(table=v["table"], column=v["column"], normalize=v.get("normalize"))
        for key, v in (raw or {}).items()
    }


def _database(raw: dict[str, Any]) -> DatabaseConfig:
    return DatabaseConfig(
        host=raw.get("host"),
        port=raw.get("port"),
        user=raw.get("user"),
        password=raw.get("password"),
        database=raw.get("database"),
        dsn=raw.get("dsn"),
    )


def default_config() -> ImportConfig:
    """Config used when no config file is present (built-in templates, no lookups)."""
    return ImportConfig(templates=dict(DEFAULT_TEMPLATES), lookups={}, database=DatabaseConfig())


def load_config(path: Path) -> ImportConfig:
    if not path.exists():
        raise ConfigError(f"config file not found: {path}")
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"invalid yaml: {e}") from e
    if not isinstance(data, dict):
        raise ConfigError("config root must be a mapping")

    _validate_config_schema(data)

    templates = dict(DEFAULT_TEMPLATES)
    for name, raw in data["templates"].items():
        entity = EntityKind(name)
        templates[entity] = _template(entity, raw or {})

    lookups: dict[EntityKind, LookupConfig] = {}
    for name, raw in (data.get("lookups") or {}).items():
        lookups[EntityKind(name)] = LookupConfig(
            existing=_sources(raw.get("existing")),
            references=_sources(raw.get("references")),
        )

    return ImportConfig(
        templates=templates,
        lookups=lookups,
        database=_database(data.get("database") or {}),
    )
