from __future__ import annotations

import json
import os
from collections.abc import Mapping
from decimal import Decimal
from pathlib import Path
from typing import Any

import jsonschema
import yaml
from jsonschema.exceptions import ValidationError

from ..models.config_models import (
    DEFAULT_SHEET_NAME,
    DEFAULT_TIMEOUT_SECONDS,
    DashboardConfig,
    ReportSettings,
    SourceConfig,
)

"""Config loader.

Responsibilities:
- Load YAML config (config/pipeline.yml by default)
- Validate against the packaged JSON schema (config/schema.json)
- Apply defaults for anything not set
- Apply environment overrides (.env is loaded by the CLI before this runs)

The default file is optional: without it every setting takes its default and
the loader serves the snapshot. An explicitly requested file must exist.
"""

__all__ = [
    "DEFAULT_CONFIG_PATH",
    "SCHEMA_PATH",
    "ConfigError",
    "load_config",
]

DEFAULT_CONFIG_PATH = Path("config/pipeline.yml")
SCHEMA_PATH = Path(__file__).with_name("schema.json")

# env var -> source field (API key is env-only)
ENV_OVERRIDES = {
    "PIPELINE_CSV_URL": "csv_url",
    "PIPELINE_CSV_PATH": "csv_path",
    "GOOGLE_SHEET_ID": "sheet_id",
    "GOOGLE_SHEET_NAME": "sheet_name",
    "GOOGLE_SHEETS_API_KEY": "api_key",
}
ENV_TIMEOUT = "PIPELINE_HTTP_TIMEOUT_SECONDS"


class ConfigError(Exception):
    pass


def _validate_config_schema(data: dict[str, Any]) -> None:
    """Validate config data against the JSON schema.

    Raises:
        ConfigError: schema file missing or invalid, or data violates it
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


def _read_yaml(path: Path) -> dict[str, Any]:
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"invalid yaml: {e}") from e
    if not isinstance(data, dict):
        raise ConfigError(f"config root must be a mapping: {path}")
    return data


def _apply_env(source: dict[str, Any], env: Mapping[str, str]) -> dict[str, Any]:
    merged = dict(source)
    for var, key in ENV_OVERRIDES.items():
        value = env.get(var)
        if value:
            merged[key] = value
    raw_timeout = env.get(ENV_TIMEOUT)
    if raw_timeout:
        try:
            merged["timeout_seconds"] = int(raw_timeout)
        except ValueError as e:
            raise ConfigError(f"{ENV_TIMEOUT} must be an integer: {raw_timeout!r}") from e
        if merged["timeout_seconds"] < 1:
            raise ConfigError(f"{ENV_TIMEOUT} must be >= 1")
    return merged


def load_config(path: Path | None = None, env: Mapping[str, str] | None = None) -> DashboardConfig:
    """Load the dashboard configuration.

    Args:
        path: Explicit config file; None -> DEFAULT_CONFIG_PATH if present
        env: Environment mapping for overrides (default: os.environ)

    Raises:
        ConfigError: explicit file missing, invalid YAML, or schema violation
    """
    env = os.environ if env is None else env
    if path is not None:
        if not path.exists():
            raise ConfigError(f"config file not found: {path}")
        data = _read_yaml(path)
    elif DEFAULT_CONFIG_PATH.exists():
        data = _read_yaml(DEFAULT_CONFIG_PATH)
    else:
        data = {}

    _validate_config_schema(data)

    src = _apply_env(data.get("source") or {}, env)
    rep = data.get("report") or {}

    defaults = ReportSettings()
    budget_raw = rep.get("budget_goal")
    report = ReportSettings(
        # str() 経由で float 誤差を避ける
        budget_goal=Decimal(str(budget_raw)) if budget_raw is not None else defaults.budget_goal,
        current_month=rep.get("current_month", defaults.current_month),
        currency_codes=tuple(rep.get("currency_codes", defaults.currency_codes)),
    )
    source = SourceConfig(
        csv_url=src.get("csv_url"),
        csv_path=src.get("csv_path"),
        sheet_id=src.get("sheet_id"),
        sheet_name=src.get("sheet_name") or DEFAULT_SHEET_NAME,
        api_key=src.get("api_key"),
        timeout_seconds=src.get("timeout_seconds", DEFAULT_TIMEOUT_SECONDS),
    )
    return DashboardConfig(source=source, report=report)
