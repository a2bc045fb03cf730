"""
linegraph.config.loader - Configuration file loading and merging.

Handles loading .linegraph.toml files and merging with defaults.
"""

from __future__ import annotations

import copy
import json
import os
from pathlib import Path
from typing import Any

import tomlkit
from tomlkit.exceptions import ParseError

from linegraph.config.defaults import DEFAULT_CONFIG
from linegraph.exceptions import ConfigError

CONFIG_FILENAME = ".linegraph.toml"
ENV_PREFIX = "LINEGRAPH_"

VALID_POLICIES = ("grid", "hashed")


def parse_toml_document(content: str) -> tomlkit.TOMLDocument:
    """Parse TOML keeping comments and layout (for round-trip edits)."""
    return tomlkit.parse(content)


def parse_toml(content: str) -> dict[str, Any]:
    """Parse TOML into plain Python values.

    Raises:
        ConfigError: If the content is not valid TOML.
    """
    try:
        return parse_toml_document(content).unwrap()
    except ParseError as e:
        raise ConfigError(f"Invalid TOML: {e}") from e


def find_config_file(start_path: Path) -> Path | None:
    """Find .linegraph.toml in start_path or any parent directory.

    Args:
        start_path: Directory to start searching from.

    Returns:
        Path to the config file, or None if not found.
    """
    current = Path(start_path).resolve()
    while True:
        candidate = current / CONFIG_FILENAME
        if candidate.is_file():
            return candidate
        if current == current.parent:
            return None
        current = current.parent


def merge_configs(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Deep-merge ``override`` into a copy of ``base``."""
    result = copy.deepcopy(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(result.get(key), dict):
            result[key] = merge_configs(result[key], value)
        else:
            result[key] = copy.deepcopy(value)
    return result


def _try_parse_env_value(value: str) -> Any:
    """Parse an environment value into a typed Python value.

    ``true``/``false`` become booleans, integers become ints, JSON arrays
    and objects are decoded. Anything else, including malformed JSON, is
    returned as the original string.
    """
    lowered = value.strip().lower()
    if lowered == "true":
        return True
    if lowered == "false":
        return False
    stripped = value.strip()
    if stripped.lstrip("-").isdigit():
        return int(stripped)
    if stripped.startswith(("[", "{")):
        try:
            return json.loads(stripped)
        except json.JSONDecodeError:
            return value
    return value


def _apply_env_overrides(config: dict[str, Any]) -> dict[str, Any]:
    """Apply LINEGRAPH_<SECTION>_<KEY> environment variables.

    ``LINEGRAPH_SERVER_PORT=8080`` sets ``config["server"]["port"] = 8080``.
    Missing sections are created.
    """
    for name, raw in os.environ.items():
        if not name.startswith(ENV_PREFIX):
            continue
        parts = name[len(ENV_PREFIX) :].lower().split("_", 1)
        if len(parts) != 2 or not all(parts):
            continue
        section, key = parts
        table = config.setdefault(section, {})
        if isinstance(table, dict):
            table[key] = _try_parse_env_value(raw)
    return config


def validate_config(config: dict[str, Any]) -> list[str]:
    """Return human-readable problems with a merged configuration."""
    errors: list[str] = []
    placement = config.get("placement", {})
    policy = placement.get("policy", "grid")
    if policy not in VALID_POLICIES:
        errors.append(f"placement.policy must be one of {VALID_POLICIES}, got {policy!r}")
    for key in ("step_x", "step_y", "rows", "width", "height"):
        if key in placement and (not isinstance(placement[key], int) or placement[key] <= 0):
            errors.append(f"placement.{key} must be a positive integer")
    if not isinstance(config.get("grammar", {}).get("strict", False), bool):
        errors.append("grammar.strict must be a boolean")
    port = config.get("server", {}).get("port", 0)
    if not isinstance(port, int) or not 0 < port < 65536:
        errors.append(f"server.port must be between 1 and 65535, got {port!r}")
    return errors


def load_config(config_path: Path | None = None, start_path: Path | None = None) -> dict[str, Any]:
    """Load configuration, merged over defaults, with env overrides applied.

    Args:
        config_path: Explicit config file. When None, ``find_config_file``
            searches from ``start_path`` (default: the working directory).
        start_path: Directory to search from.

    Returns:
        The merged configuration dict.

    Raises:
        ConfigError: If the file cannot be read, is not valid TOML, or the
            merged configuration is invalid.
    """
    if config_path is None:
        config_path = find_config_file(start_path or Path.cwd())

    user_config: dict[str, Any] = {}
    if config_path is not None:
        try:
            content = Path(config_path).read_text(encoding="utf-8")
        except OSError as e:
            raise ConfigError(f"Cannot read {config_path}: {e}") from e
        user_config = parse_toml(content)

    config = _apply_env_overrides(merge_configs(DEFAULT_CONFIG, user_config))
    errors = validate_config(config)
    if errors:
        raise ConfigError("; ".join(errors))
    return config
