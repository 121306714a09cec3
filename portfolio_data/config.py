"""
Build configuration.

Defaults are overlaid, in order, by an optional YAML file, environment
variables (``.env`` is honoured) and finally CLI flags.

Sample ``portfolio.yaml``
-------------------------
```yaml
# Relative paths resolve from the config file location.
data_dir: ./src/data
output_dir: ./src/data

sources:
  projects: projects.csv
  resume_skills: skills.csv

outputs:
  focus_areas: focus-areas.json

# Extra header spellings, highest priority first.
aliases:
  projects:
    display_order: [display_order, displayOrder, order]
```
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional

import yaml
from dotenv import load_dotenv

from .schema import DEFAULT_OUTPUT_FILES, DEFAULT_SOURCE_FILES, OUTPUT_DOCUMENTS, SOURCE_TABLES, merge_field_aliases

LOGGER = logging.getLogger(__name__)

CONFIG_ENV_KEY = "PORTFOLIO_CONFIG"
DATA_DIR_ENV_KEY = "PORTFOLIO_DATA_DIR"
OUTPUT_DIR_ENV_KEY = "PORTFOLIO_OUTPUT_DIR"
DEFAULT_DATA_DIR = Path("src/data")
DEFAULT_OUTPUT_DIR = Path("src/data")

_KNOWN_KEYS = {"data_dir", "output_dir", "sources", "outputs", "aliases"}


class ConfigError(ValueError):
    """Raised when the YAML configuration is invalid."""


@dataclass
class BuildConfig:
    data_dir: Path = DEFAULT_DATA_DIR
    output_dir: Path = DEFAULT_OUTPUT_DIR
    sources: Dict[str, str] = field(default_factory=lambda: dict(DEFAULT_SOURCE_FILES))
    outputs: Dict[str, str] = field(default_factory=lambda: dict(DEFAULT_OUTPUT_FILES))
    aliases: Dict[str, Dict[str, List[str]]] = field(default_factory=lambda: merge_field_aliases(None))
    path: Optional[Path] = None


def _resolve_path(base: Path, value: Any) -> Path:
    return (base / str(value)).expanduser().resolve()


def _name_map(raw: Any, allowed: Any, section: str) -> Dict[str, str]:
    if raw is None:
        return {}
    if not isinstance(raw, dict):
        raise ConfigError(f"`{section}` must be a mapping of name -> file name.")
    unknown = sorted(set(raw) - set(allowed))
    if unknown:
        raise ConfigError(f"Unknown {section} entries: {', '.join(unknown)}; expected one of {', '.join(allowed)}")
    return {str(k): str(v) for k, v in raw.items()}


def _alias_overrides(raw: Any) -> Dict[str, Dict[str, List[str]]]:
    if raw is None:
        return {}
    if not isinstance(raw, dict):
        raise ConfigError("`aliases` must be a mapping keyed by table name.")

    overrides: Dict[str, Dict[str, List[str]]] = {}
    for table, fields in raw.items():
        if table not in SOURCE_TABLES:
            raise ConfigError(f"Unknown table in `aliases`: {table}")
        if not isinstance(fields, dict):
            raise ConfigError(f"Aliases for table '{table}' must be a mapping of field -> header list.")
        normalized: Dict[str, List[str]] = {}
        for name, headers in fields.items():
            if isinstance(headers, str):
                headers = [headers]
            if not isinstance(headers, list) or not headers:
                raise ConfigError(f"Aliases for '{table}.{name}' must be a non-empty list of header names.")
            normalized[str(name)] = [str(h) for h in headers]
        overrides[str(table)] = normalized
    return overrides


def load_config(
    path: Optional[Path] = None,
    *,
    data_dir: Optional[Path] = None,
    output_dir: Optional[Path] = None,
) -> BuildConfig:
    """
    Load the build configuration.

    `path` falls back to $PORTFOLIO_CONFIG; without either, only defaults and
    environment variables apply. Explicit `data_dir` / `output_dir` win over
    everything else.
    """

    load_dotenv()
    config = BuildConfig()

    if path is None and os.environ.get(CONFIG_ENV_KEY):
        path = Path(os.environ[CONFIG_ENV_KEY])

    if path is not None:
        path = Path(path)
        if not path.exists():
            raise ConfigError(f"Configuration file not found: {path}")
        try:
            with path.open("r", encoding="utf-8") as handle:
                raw = yaml.safe_load(handle) or {}
        except yaml.YAMLError as exc:
            raise ConfigError(f"Failed to parse YAML config at {path}: {exc}") from exc
        if not isinstance(raw, dict):
            raise ConfigError("Config root must be a mapping.")

        unknown = sorted(set(raw) - _KNOWN_KEYS)
        if unknown:
            raise ConfigError(f"Unknown config keys: {', '.join(unknown)}")

        base = path.parent
        if raw.get("data_dir"):
            config.data_dir = _resolve_path(base, raw["data_dir"])
        if raw.get("output_dir"):
            config.output_dir = _resolve_path(base, raw["output_dir"])
        config.sources.update(_name_map(raw.get("sources"), SOURCE_TABLES, "sources"))
        config.outputs.update(_name_map(raw.get("outputs"), OUTPUT_DOCUMENTS, "outputs"))
        config.aliases = merge_field_aliases(_alias_overrides(raw.get("aliases")), base=config.aliases)
        config.path = path
        LOGGER.debug("Loaded configuration from %s", path)

    if os.environ.get(DATA_DIR_ENV_KEY):
        config.data_dir = Path(os.environ[DATA_DIR_ENV_KEY])
    if os.environ.get(OUTPUT_DIR_ENV_KEY):
        config.output_dir = Path(os.environ[OUTPUT_DIR_ENV_KEY])

    if data_dir is not None:
        config.data_dir = Path(data_dir)
    if output_dir is not None:
        config.output_dir = Path(output_dir)
    return config


def describe(config: BuildConfig) -> Mapping[str, Any]:
    """Small summary used for debug logging."""

    return {
        "config": str(config.path) if config.path else None,
        "data_dir": str(config.data_dir),
        "output_dir": str(config.output_dir),
    }
