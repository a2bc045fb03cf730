"""
linegraph.config - Configuration loading and defaults
"""

from linegraph.config.defaults import DEFAULT_CONFIG
from linegraph.config.loader import (
    _apply_env_overrides,
    _try_parse_env_value,
    find_config_file,
    load_config,
    merge_configs,
    parse_toml,
    parse_toml_document,
    validate_config,
)

__all__ = [
    "load_config",
    "find_config_file",
    "merge_configs",
    "parse_toml",
    "parse_toml_document",
    "validate_config",
    "DEFAULT_CONFIG",
]
