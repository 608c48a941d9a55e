"""
Host preparation: build directories and the Docker service.
"""

from __future__ import annotations

import logging
import shutil
import subprocess
from typing import Sequence

from provisioner.config.models import HostConfig, PathsConfig
from provisioner.config.settings import LOGGER_NAME
from provisioner.errors import CommandError
from provisioner.observability import log_step
from provisioner.resilience import retry

logger = logging.getLogger(LOGGER_NAME)


def run_command(command: Sequence[str], check: bool = True) -> int:
    """
    Run a host command synchronously and log its output.

    Args:
        command: Command line to execute
        check: Raise on a non-zero exit status

    Returns:
        Exit status of the command

    Raises:
        CommandError: If the command fails (or cannot be started) and check is set
    """
    try:
        proc = subprocess.run(list(command), capture_output=True, text=True)
    except OSError as e:
        if check:
            raise CommandError(command, 127, str(e)) from e
        logger.warning(f"Unable to run {' '.join(command)}: {e}")
        return 127

    for line in proc.stdout.splitlines():
        if line.strip():
            log_step(line)
    if proc.returncode != 0:
        for line in proc.stderr.splitlines():
            if line.strip():
                log_step(line, logging.WARNING)
        if check:
            raise CommandError(command, proc.returncode, proc.stderr)
    return proc.returncode


def reset_directories(paths: PathsConfig) -> None:
    """
    Wipe and recreate the build directories.

    The extension staging directory, the Guacamole home directory (with its
    ``extensions`` sub-directory) and the drive directory never carry state
    over from a previous run.
    """
    for path in (paths.extensions, paths.home, paths.drive):
        if path.exists():
            logger.debug(f"Removing {path}")
            shutil.rmtree(path)
    for path in (paths.extensions, paths.home_extensions, paths.drive):
        path.mkdir(parents=True)


class HostManager:
    """Installs and starts the Docker service on the host."""

    def __init__(self, host: HostConfig) -> None:
        self.host = host

    def install_docker(self) -> None:
        """
        Install the Docker package with retries.

        Raises:
            CommandError: If every attempt failed
        """
        log_step("Installing docker")
        status = retry(self.host.install_attempts, self.host.install_command, runner=run_command)
        if status != 0:
            raise CommandError(self.host.install_command, status)

    def start_docker(self) -> None:
        log_step("Starting docker")
        run_command(self.host.start_command)

    def enable_docker(self) -> None:
        log_step("Enabling docker services")
        run_command(self.host.enable_command)

    def prepare(self) -> None:
        """Install, start and enable Docker."""
        self.install_docker()
        self.start_docker()
        self.enable_docker()
