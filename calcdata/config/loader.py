from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import jsonschema
import yaml
from jsonschema.exceptions import ValidationError

from ..models.config_models import ExtractConfig, RoleSpec
from ..models.extraction import Role
from ..services.roles import column_index

"""Config loader.

Responsibilities:
- Load the YAML extraction config (config/extract.yml, or the packaged default)
- Validate it against the packaged JSON schema
- Apply defaults (source_directory=".", header_scan_rows=50)
- Convert column letters to 0-based indices and build frozen dataclasses
"""

_package_dir = Path(__file__).parent
SCHEMA_PATH = _package_dir / "schema.json"
DEFAULT_CONFIG_PATH = _package_dir / "default.yml"
LOCAL_CONFIG_PATH = Path("config/extract.yml")


class ConfigError(Exception):
    pass


def _validate_config_schema(data: dict[str, Any]) -> None:
    """Validate config data against the JSON schema.

    Raises:
        ConfigError: schema file missing or invalid, or the data violates it
            (missing required keys, wrong types, unknown keys or roles).
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


def _role_specs(raw: dict[str, Any]) -> dict[Role, RoleSpec]:
    specs: dict[Role, RoleSpec] = {}
    for name, body in raw.items():
        body = body or {}
        fallback = body.get("fallback_column")
        try:
            fallback_index = column_index(fallback) if fallback is not None else None
        except ValueError as e:
            raise ConfigError(f"role {name}: {e}") from e
        specs[Role(name)] = RoleSpec(
            synonyms=tuple(str(s) for s in body.get("synonyms") or ()),
            fallback_index=fallback_index,
        )
    return specs


def default_config_path() -> Path:
    """config/extract.yml when present in the working directory, else the packaged default."""
    return LOCAL_CONFIG_PATH if LOCAL_CONFIG_PATH.exists() else DEFAULT_CONFIG_PATH


def load_config(path: Path | None = None) -> ExtractConfig:
    path = path if path is not None else default_config_path()
    if not path.exists():
        raise ConfigError(f"config file not found: {path}")
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"invalid yaml: {e}") from e
    if not isinstance(data, dict):
        raise ConfigError(f"config root must be a mapping: {path}")

    _validate_config_schema(data)

    sheets = data["sheets"]
    return ExtractConfig(
        source_candidates=tuple(data["source_candidates"]),
        settings_sheet=sheets["settings"],
        pricing_sheet=sheets["pricing"],
        outputs=tuple(data["outputs"]),
        source_directory=data.get("source_directory", "."),
        header_scan_rows=data.get("header_scan_rows", 50),
        roles=_role_specs(data.get("roles") or {}),
        existing_settings=data.get("existing_settings"),
    )
