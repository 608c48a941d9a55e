"""Domain module: host, branding bundle and containers."""

from provisioner.domain.branding import build_bundle
from provisioner.domain.containers import (
    guacamole_spec,
    guacd_spec,
    start_container,
    teardown_container,
)
from provisioner.domain.host import HostManager, reset_directories, run_command

__all__ = [
    "build_bundle",
    "guacamole_spec",
    "guacd_spec",
    "start_container",
    "teardown_container",
    "HostManager",
    "reset_directories",
    "run_command",
]
