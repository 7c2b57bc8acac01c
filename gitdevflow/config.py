#!/usr/bin/env python3

import os
import json
import tomllib
from pathlib import Path
from typing import Optional

import logging
import sys

import toml
import yaml

from .domain.policy import (
    DEFAULT_RELEASE_BRANCHES,
    DEFAULT_HOTFIX_PREFIXES,
    DEFAULT_MINOR_TYPES,
    DEFAULT_PATCH_TYPES,
    DEFAULT_BREAKING_CHANGE_MARKER,
    UNKNOWN_SNAPSHOT,
    SNAPSHOT_SUFFIX,
)

logger = logging.getLogger("gitdevflow")

CONFIG_FILENAMES = ['config.json', 'config.toml', 'config.yaml', 'config.yml']
PROJECT_CONFIG_FILENAMES = ['.gitdevflow.json', '.gitdevflow.toml', '.gitdevflow.yaml', '.gitdevflow.yml']


def configure_logging(level: str = "INFO", fmt: str = "%(levelname)s: %(message)s") -> None:
    """Send gitdevflow log records to stderr so stdout carries only results."""
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(fmt))
    logger.handlers[:] = [handler]
    logger.setLevel(getattr(logging, str(level).upper(), logging.INFO))
    logger.propagate = False


def get_config_path():
    """Get the path to the user configuration file.

    Checks in order:
    1. GITDEVFLOW_CONFIG environment variable
    2. ~/.gitdevflow/ directory
    """
    if 'GITDEVFLOW_CONFIG' in os.environ:
        path = Path(os.environ['GITDEVFLOW_CONFIG'])
        if path.exists():
            return path

    config_dir = Path.home() / '.gitdevflow'
    for filename in CONFIG_FILENAMES:
        path = config_dir / filename
        if path.exists():
            return path

    # If no file exists, return default path for saving
    return config_dir / 'config.json'


def get_project_config_path(repo_path) -> Optional[Path]:
    """Get the project-level configuration file inside a working tree, if any."""
    if repo_path is None:
        return None
    root = Path(repo_path)
    if root.name == '.git':
        root = root.parent
    for filename in PROJECT_CONFIG_FILENAMES:
        path = root / filename
        if path.is_file():
            return path
    return None


def read_config_file(config_path: Path) -> dict:
    """Read a JSON, TOML or YAML configuration file."""
    suffix = config_path.suffix.lower()
    if suffix == '.toml':
        with open(config_path, 'rb') as f:
            return tomllib.load(f)
    if suffix in ['.yaml', '.yml']:
        with open(config_path, 'r') as f:
            return yaml.safe_load(f) or {}
    with open(config_path, 'r') as f:
        return json.load(f)


def load_config(repo_path=None):
    """Load configuration.

    Layers, later ones winning: defaults, user file, project file
    (when repo_path is given), GITDEVFLOW_* environment variables.
    """
    config = get_default_config()

    for config_path in (get_config_path(), get_project_config_path(repo_path)):
        if config_path is None or not config_path.exists():
            continue
        try:
            file_config = read_config_file(config_path)
            if not isinstance(file_config, dict):
                raise ValueError("top level must be a mapping")
            config = merge_configs(config, file_config)
            logger.debug(f"Loaded configuration from {config_path}")
        except Exception as e:
            logger.error(f"Error loading config from {config_path}: {e}")

    return apply_env_overrides(config)


def save_config(config, config_path: Optional[Path] = None):
    """Save configuration to file (JSON, TOML or YAML by suffix)."""
    config_path = config_path or get_config_path()

    try:
        config_path.parent.mkdir(parents=True, exist_ok=True)

        if config_path.suffix.lower() == '.toml':
            with open(config_path, 'w') as f:
                toml.dump(config, f)
        elif config_path.suffix.lower() in ['.yaml', '.yml']:
            with open(config_path, 'w') as f:
                yaml.safe_dump(config, f, default_flow_style=False)
        else:
            with open(config_path, 'w') as f:
                json.dump(config, f, indent=2)

        logger.info(f"Configuration saved to {config_path}")
    except OSError as e:
        logger.error(f"Error saving config to {config_path}: {e}")
        raise
    return config_path


def get_default_config():
    """Get default configuration."""
    return {
        "flow": {
            "release_branches": list(DEFAULT_RELEASE_BRANCHES),
            "hotfix_prefixes": list(DEFAULT_HOTFIX_PREFIXES),
            "minor_types": list(DEFAULT_MINOR_TYPES),
            "patch_types": list(DEFAULT_PATCH_TYPES),
            "breaking_change_marker": DEFAULT_BREAKING_CHANGE_MARKER,
        },
        "versions": {
            "fallback": UNKNOWN_SNAPSHOT,
            "snapshot_suffix": SNAPSHOT_SUFFIX,
        },
        "placeholders": {
            "default_strategy": "git-dev-flow",
            "default_value": "0-SNAPSHOT",
        },
        "git": {
            "timeout_seconds": 30,
        },
        "logging": {
            "level": "INFO",
            "format": "%(levelname)s: %(message)s"
        },
    }


def merge_configs(base_config, override_config):
    """
    Recursively merge two configuration dictionaries.

    Args:
        base_config (dict): Base configuration
        override_config (dict): Configuration to merge/override with

    Returns:
        dict: Merged configuration
    """
    merged = base_config.copy()

    for key, value in override_config.items():
        if key in merged and isinstance(merged[key], dict) and isinstance(value, dict):
            merged[key] = merge_configs(merged[key], value)
        else:
            merged[key] = value

    return merged


def _typed_env_value(value: str, current):
    # Typed after the value being replaced; lists are comma-separated
    if isinstance(current, list):
        return [v.strip() for v in value.split(',') if v.strip()]
    if isinstance(current, bool):
        if value.lower() in ('true', '1', 'yes', 'on'):
            return True
        if value.lower() in ('false', '0', 'no', 'off'):
            return False
        return value
    if isinstance(current, int) and value.isdigit():
        return int(value)
    return value


def apply_env_overrides(config):
    """
    Apply environment variable overrides to configuration.
    Environment variables follow the pattern: GITDEVFLOW_SECTION_KEY
    For example: GITDEVFLOW_FLOW_RELEASE_BRANCHES=master,main
    """
    env_prefix = "GITDEVFLOW_"

    for env_key, value in os.environ.items():
        if not env_key.startswith(env_prefix):
            continue

        key_parts = env_key[len(env_prefix):].lower().split('_')

        current_level = config
        i = 0
        while i < len(key_parts):
            # Find the longest key in current_level that is a prefix of the remaining key_parts
            best_match_len = 0
            matched_key = None

            for config_key in current_level.keys():
                config_key_parts = config_key.split('_')
                if key_parts[i:i + len(config_key_parts)] == config_key_parts:
                    if len(config_key_parts) > best_match_len:
                        best_match_len = len(config_key_parts)
                        matched_key = config_key

            if not matched_key:
                break

            if i + best_match_len == len(key_parts):
                current_level[matched_key] = _typed_env_value(value, current_level[matched_key])
                break

            if isinstance(current_level[matched_key], dict):
                current_level = current_level[matched_key]
                i += best_match_len
            else:
                # Path conflict: env var is longer than the config path
                break

    return config
