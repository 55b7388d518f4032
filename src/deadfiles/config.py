"""Project configuration for deadfiles.

Settings are read from the first of ``deadfiles.yaml``, ``deadfiles.yml``,
``.deadfiles.yaml``, ``.deadfiles.yml`` or the ``[tool.deadfiles]`` table of
``pyproject.toml`` found in the project root::

    entry: [main.py]
    include: ["src/**/*.py"]
    ignore: ["**/migrations/**"]
    search_paths: [lib]
"""

from __future__ import annotations

import logging
import tomllib
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any

import yaml

from deadfiles.errors import ConfigError

logger = logging.getLogger(__name__)

CONFIG_FILES = [
    "deadfiles.yaml",
    "deadfiles.yml",
    ".deadfiles.yaml",
    ".deadfiles.yml",
    "pyproject.toml",
]


@dataclass
class DeadFilesConfig:
    entry: list[str] = field(default_factory=list)
    include: list[str] | None = None  # None selects the built-in defaults
    ignore: list[str] | None = None
    search_paths: list[str] = field(default_factory=list)
    source: Path | None = None


def load_config(path: Path | None = None, root: Path | None = None) -> DeadFilesConfig:
    if path is not None:
        return _load_config_file(Path(path))
    found = find_config_file(root or Path.cwd())
    if found is None:
        return DeadFilesConfig()
    logger.info("Using configuration from %s", found)
    return _load_config_file(found)


def find_config_file(root: Path) -> Path | None:
    for name in CONFIG_FILES:
        candidate = root / name
        if not candidate.is_file():
            continue
        if name == "pyproject.toml" and not _has_tool_table(candidate):
            continue
        return candidate
    return None


def _load_config_file(path: Path) -> DeadFilesConfig:
    if not path.is_file():
        raise ConfigError(f"Config file does not exist: {path}")
    suffix = path.suffix.lower()
    try:
        if suffix in {".yaml", ".yml"}:
            with path.open("r", encoding="utf-8") as handle:
                data = yaml.safe_load(handle) or {}
        elif suffix == ".toml":
            with path.open("rb") as handle:
                data = tomllib.load(handle)
            if "deadfiles" not in data.get("tool", {}):
                raise ConfigError(f"No [tool.deadfiles] table in {path}")
            data = data["tool"]["deadfiles"]
        else:
            raise ConfigError(f"Unsupported config format: {path}")
    except (OSError, yaml.YAMLError, tomllib.TOMLDecodeError) as exc:
        raise ConfigError(f"Cannot read config {path}: {exc}") from exc
    return _parse_config_data(data, path)


def _has_tool_table(path: Path) -> bool:
    try:
        with path.open("rb") as handle:
            data = tomllib.load(handle)
    except (OSError, tomllib.TOMLDecodeError):
        return False
    return "deadfiles" in data.get("tool", {})


def _parse_config_data(data: Any, path: Path) -> DeadFilesConfig:
    if not isinstance(data, dict):
        raise ConfigError(f"Config in {path} must be a mapping")
    known = {f.name for f in fields(DeadFilesConfig)} - {"source"}
    unknown = sorted(set(data) - known)
    if unknown:
        raise ConfigError(f"Unknown config keys in {path}: {', '.join(unknown)}")

    config = DeadFilesConfig(source=path)
    for key in known:
        if key not in data:
            continue
        setattr(config, key, _string_list(data[key], key, path))
    config.search_paths = [
        str((path.parent / entry).resolve()) for entry in config.search_paths
    ]
    return config


def _string_list(value: Any, key: str, path: Path) -> list[str]:
    if isinstance(value, str):
        return [value]
    if isinstance(value, list) and all(isinstance(item, str) for item in value):
        return list(value)
    raise ConfigError(f"'{key}' in {path} must be a string or a list of strings")
