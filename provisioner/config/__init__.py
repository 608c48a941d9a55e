"""Configuration module for the Guacamole Provisioner."""

from provisioner.config.settings import (
    GUACD_CONTAINER,
    GUACAMOLE_CONTAINER,
    GUACAMOLE_HOME_MOUNT,
    GUACAMOLE_PORT,
    EXTENSION_ARCHIVE,
    get_env,
)
from provisioner.config.models import ProvisionConfig, join_dn
from provisioner.config.loader import DEFAULTS, load_config
from provisioner.config.validators import config_warnings, validate_config
from provisioner.config.secrets import ParameterStore

__all__ = [
    "GUACD_CONTAINER",
    "GUACAMOLE_CONTAINER",
    "GUACAMOLE_HOME_MOUNT",
    "GUACAMOLE_PORT",
    "EXTENSION_ARCHIVE",
    "get_env",
    "ProvisionConfig",
    "join_dn",
    "DEFAULTS",
    "load_config",
    "validate_config",
    "config_warnings",
    "ParameterStore",
]
