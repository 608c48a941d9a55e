"""
Configuration loader: built-in defaults, optional YAML file, CLI flags.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from provisioner.config.models import ProvisionConfig
from provisioner.config.settings import LOGGER_NAME, get_env
from provisioner.config.validators import validate_config
from provisioner.errors import ConfigurationError

logger = logging.getLogger(LOGGER_NAME)

DEFAULTS: dict[str, Any] = {
    "ldap": {
        "hostname": "",
        "domain_dn": "",
        "user_base": "CN=Users",
        "group_base": "CN=Users",
        "user_attribute": "cn",
        "config_base": "CN=GuacConfigGroups",
        "port": 389,
    },
    "branding": {
        "text": "Apache Guacamole",
        "primary_link": {"url": "", "label": ""},
        "secondary_link": {"url": "", "label": ""},
    },
    "images": {
        "guacamole": "guacamole/guacamole",
        "guacd": "guacamole/guacd",
    },
    "registry": {
        "username_parameter": "",
        "password_parameter": "",
        "region": None,
    },
    "paths": {
        "extensions": "/tmp/extensions",
        "home": "/root/guac-home",
        "drive": "/var/tmp/guacamole",
    },
    "host": {
        "install_command": ["yum", "-y", "install", "docker"],
        "start_command": ["service", "docker", "start"],
        "enable_command": ["chkconfig", "docker", "on"],
        "install_attempts": 2,
    },
    "logging": {"level": "INFO", "format": "text", "audit_address": "/dev/log"},
}


def deep_merge(base: dict, override: dict) -> dict:
    """Deep merge two dictionaries."""
    result = base.copy()
    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = deep_merge(result[key], value)
        else:
            result[key] = value
    return result


def read_config_file(path: Path) -> dict:
    """
    Read a YAML configuration file.

    Args:
        path: Path to the YAML file

    Returns:
        Parsed mapping (empty for an empty file)

    Raises:
        ConfigurationError: If the file is missing, unreadable or not a mapping
    """
    if not path.exists():
        raise ConfigurationError(f"Configuration file not found: {path}")
    try:
        with open(path, "r") as f:
            data = yaml.safe_load(f) or {}
    except (OSError, yaml.YAMLError) as e:
        raise ConfigurationError(f"Error loading configuration file {path}: {e}") from e
    if not isinstance(data, dict):
        raise ConfigurationError(f"Configuration file {path} must contain a mapping")
    logger.debug(f"Loaded configuration from {path}")
    return data


def load_config(
    config_path: Path | None = None, overrides: dict | None = None
) -> ProvisionConfig:
    """
    Build the validated configuration for one run.

    Precedence: command-line overrides > YAML file > built-in defaults.
    The file path falls back to ``GUAC_PROVISIONER_CONFIG``.

    Args:
        config_path: Optional YAML configuration file
        overrides: Nested dict of values given on the command line

    Returns:
        Immutable ProvisionConfig

    Raises:
        ConfigurationError: If the file or any value is invalid
    """
    if config_path is None:
        env_path = get_env("config")
        config_path = Path(env_path) if env_path else None

    merged = DEFAULTS
    if config_path is not None:
        merged = deep_merge(merged, read_config_file(config_path))
    if overrides:
        merged = deep_merge(merged, overrides)

    try:
        config = ProvisionConfig.model_validate(merged)
    except ValidationError as e:
        fields = ", ".join(".".join(str(p) for p in err["loc"]) for err in e.errors())
        raise ConfigurationError(f"Invalid configuration value for {fields}") from e

    return validate_config(config)
