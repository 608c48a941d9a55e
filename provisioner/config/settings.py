"""
Constants for the Guacamole Provisioner.
"""

import os

# =============================================================================
# Containers
# =============================================================================

GUACD_CONTAINER = "guacd"
GUACAMOLE_CONTAINER = "guacamole"
RESTART_POLICY = "unless-stopped"

GUACAMOLE_HOME_MOUNT = "/guac-home"
GUACAMOLE_PORT = 8080

# =============================================================================
# Branding extension
# =============================================================================

EXTENSION_ARCHIVE = "custom.jar"
EXTENSION_NAME = "Custom Extension"
EXTENSION_NAMESPACE = "custom-extension"
MANIFEST_FILE = "guac-manifest.json"
LINKS_FILE = "custom-urls.html"
TRANSLATIONS_DIR = "translations"
TRANSLATIONS_FILE = "en.json"

# Login page element the links fragment is inserted after
LINKS_INSERT_AFTER = ".login-ui .login-dialog"

# =============================================================================
# Logging
# =============================================================================

LOGGER_NAME = "guac-provisioner"
INSTALL_FAILED_MESSAGE = "Guacamole install failed!"


def get_env(key: str, default: str | None = None) -> str | None:
    """
    Retrieve a provisioner environment variable.

    Args:
        key: Configuration key, looked up as ``GUAC_PROVISIONER_<KEY>``
        default: Default value

    Returns:
        Configuration value
    """
    env_key = f"GUAC_PROVISIONER_{key.upper().replace('-', '_')}"
    return os.environ.get(env_key, default)
