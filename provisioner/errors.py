"""
Exceptions raised while provisioning.
"""

from __future__ import annotations

from typing import Sequence


class ProvisioningError(Exception):
    """Base class for fatal provisioning errors."""


class ConfigurationError(ProvisioningError):
    """Raised when the configuration is invalid."""


class CommandError(ProvisioningError):
    """Raised when a host command exits with a non-zero status."""

    def __init__(self, command: Sequence[str], returncode: int, stderr: str = "") -> None:
        self.command = list(command)
        self.returncode = returncode
        self.stderr = stderr
        message = f"Command '{' '.join(self.command)}' failed with status {returncode}"
        if stderr.strip():
            message = f"{message}: {stderr.strip()}"
        super().__init__(message)
