"""
TOML-based config file loading for ignorewalk.

Searches for `.ignorewalk.toml`, `ignorewalk.toml`, or `pyproject.toml [tool.ignorewalk]`
walking up from the current directory. Config values are merged with CLI flags
using three-way precedence: explicit CLI flags > config file > built-in defaults.
"""

from __future__ import annotations

import logging
import sys
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, TypeVar, cast

if sys.version_info >= (3, 11):
    import tomllib  # pyright: ignore[reportUnreachable]
else:
    import tomli as tomllib  # type: ignore[no-redef]  # pyright: ignore[reportUnreachable]

from ignorewalk.errors import ConfigError

log = logging.getLogger(__name__)


@dataclass
class IgnoreWalkConfig:
    """
    Parsed config from a TOML file. Fields are `None` when not set in the config,
    allowing the merge logic to distinguish "not configured" from "explicitly set
    to default value".
    """

    ignore_file: str | None = None
    directories: bool | None = None
    include_ignore_files: bool | None = None
    exclude: list[str] | None = None
    exclude_vcs: bool | None = None
    sort: bool | None = None
    follow_symlinks: bool | None = None
    skip_unreadable: bool | None = None


# Config file search order (first match wins within each directory level)
_CONFIG_FILENAMES = [".ignorewalk.toml", "ignorewalk.toml", "pyproject.toml"]

_VALID_FIELDS = {f.name for f in fields(IgnoreWalkConfig)}


def find_config_file(start_dir: Path) -> Path | None:
    """
    Walk up from `start_dir` looking for a config file. Returns the first
    found, or `None`. Search order per directory: `.ignorewalk.toml` >
    `ignorewalk.toml` > `pyproject.toml` (only if it has `[tool.ignorewalk]`).
    """
    current = start_dir.resolve()
    while True:
        for filename in _CONFIG_FILENAMES:
            candidate = current / filename
            if candidate.is_file():
                if filename == "pyproject.toml":
                    if _pyproject_has_section(candidate):
                        return candidate
                else:
                    return candidate
        parent = current.parent
        if parent == current:
            break
        current = parent
    return None


def _pyproject_has_section(path: Path) -> bool:
    """Check if a pyproject.toml has a [tool.ignorewalk] section."""
    try:
        data = tomllib.loads(path.read_text(encoding="utf-8"))
        return "ignorewalk" in data.get("tool", {})
    except (tomllib.TOMLDecodeError, OSError, UnicodeDecodeError):
        return False


def load_config(config_path: Path) -> IgnoreWalkConfig:
    """
    Load an `IgnoreWalkConfig` from a TOML file. Supports both standalone
    `ignorewalk.toml` / `.ignorewalk.toml` and `pyproject.toml` (extracts
    `[tool.ignorewalk]`). TOML kebab-case keys are mapped to Python snake_case.
    """
    try:
        data = tomllib.loads(config_path.read_text(encoding="utf-8"))
    except (tomllib.TOMLDecodeError, OSError, UnicodeDecodeError) as e:
        raise ConfigError(config_path, str(e)) from e

    if config_path.name == "pyproject.toml":
        data = data.get("tool", {}).get("ignorewalk", {})

    log.debug("Loaded config from %s", config_path)
    return _parse_config_data(config_path, data)


def _parse_config_data(config_path: Path, data: dict[str, Any]) -> IgnoreWalkConfig:
    """Parse a flat or sectioned TOML dict into IgnoreWalkConfig."""
    flat: dict[str, Any] = {}
    for key, value in data.items():
        if isinstance(value, dict):
            for sub_key, sub_value in cast(dict[str, Any], value).items():
                flat[sub_key] = sub_value
        else:
            flat[key] = value

    mapped: dict[str, Any] = {}
    for key, value in flat.items():
        snake_key = key.replace("-", "_")
        if snake_key not in _VALID_FIELDS:
            log.warning("Unknown config key %r in %s", key, config_path)
            continue
        mapped[snake_key] = value

    exclude = mapped.get("exclude")
    if exclude is not None and (
        not isinstance(exclude, list) or not all(isinstance(p, str) for p in exclude)
    ):
        raise ConfigError(config_path, "`exclude` must be a list of strings")
    ignore_file = mapped.get("ignore_file")
    if ignore_file is not None and not isinstance(ignore_file, str):
        raise ConfigError(config_path, "`ignore-file` must be a string")
    for name, value in mapped.items():
        if name not in ("exclude", "ignore_file") and not isinstance(value, bool):
            raise ConfigError(config_path, f"`{name.replace('_', '-')}` must be true or false")

    return IgnoreWalkConfig(**mapped)


_T = TypeVar("_T")


def merge_cli_with_config(
    cli_opts: _T,
    config: IgnoreWalkConfig | None,
    explicit_flags: set[str],
) -> _T:
    """
    Merge CLI options with config file settings.

    Precedence: explicit CLI flags > config file > built-in defaults.
    """
    if config is None:
        return cli_opts

    for cfg_field in fields(IgnoreWalkConfig):
        cfg_value = getattr(config, cfg_field.name)
        if cfg_value is None:
            continue  # Not set in config

        if cfg_field.name in explicit_flags:
            continue

        if hasattr(cli_opts, cfg_field.name):
            setattr(cli_opts, cfg_field.name, cfg_value)

    return cli_opts
