"""
Provisioning workflow: one linear run from a clean host to two containers.
"""

from __future__ import annotations

import logging
import time
from contextlib import contextmanager
from typing import Iterator

from provisioner.config.models import ProvisionConfig, RegistryConfig
from provisioner.config.secrets import ParameterStore
from provisioner.config.settings import LOGGER_NAME
from provisioner.domain.branding import build_bundle
from provisioner.domain.containers import (
    guacamole_spec,
    guacd_spec,
    start_container,
    teardown_container,
)
from provisioner.domain.host import HostManager, reset_directories
from provisioner.domain.orchestrator.base import ContainerOrchestrator
from provisioner.observability import RUN_DURATION, STEP_FAILURES, log_step

logger = logging.getLogger(LOGGER_NAME)


@contextmanager
def step(name: str) -> Iterator[None]:
    """Count the failure of a named step, then let the error propagate."""
    try:
        yield
    except Exception:
        STEP_FAILURES.labels(step=name).inc()
        raise


def authenticate_registry(
    registry: RegistryConfig, store: ParameterStore, orchestrator: ContainerOrchestrator
) -> bool:
    """
    Log in to the Docker registry with credentials from Parameter Store.

    Only attempted when both parameter paths are configured. A missing
    parameter skips the login instead of failing the run.

    Returns:
        True if a login was performed
    """
    if not registry.configured:
        return False

    username = store.get(registry.username_parameter)
    password = store.get(registry.password_parameter)
    if username is None or password is None:
        log_step("Docker username or password is invalid, skipping Docker authentication")
        return False

    log_step("Valid Docker username and password parameters provided, configuring Docker authentication")
    orchestrator.login(username, password)
    return True


def provision(
    config: ProvisionConfig,
    orchestrator: ContainerOrchestrator,
    host: HostManager | None = None,
    store: ParameterStore | None = None,
) -> None:
    """
    Provision Guacamole on this host.

    Steps, in order: reset build directories, install/start/enable Docker,
    optional registry login, pull images, build the branding extension,
    remove previous containers, start guacd then guacamole. Any error
    aborts the run; completed steps are not rolled back.

    Args:
        config: Validated configuration
        orchestrator: Container backend
        host: Docker service manager (built from config when omitted)
        store: Parameter Store client (built from config when omitted)
    """
    host = host or HostManager(config.host)
    store = store or ParameterStore(region=config.registry.region)
    started = time.monotonic()

    with step("directories"):
        log_step("Initializing build directories")
        reset_directories(config.paths)

    with step("docker"):
        host.prepare()

    with step("registry"):
        authenticate_registry(config.registry, store, orchestrator)

    with step("images"):
        log_step(f"Fetching the guacd image, {config.images.guacd}")
        orchestrator.pull_image(config.images.guacd)
        log_step(f"Fetching the guacamole image, {config.images.guacamole}")
        orchestrator.pull_image(config.images.guacamole)

    with step("branding"):
        build_bundle(config.branding, config.paths)

    backend = guacd_spec(config)
    frontend = guacamole_spec(config)

    with step("teardown"):
        teardown_container(orchestrator, backend.name)
        teardown_container(orchestrator, frontend.name)

    with step("containers"):
        start_container(orchestrator, backend)
        start_container(orchestrator, frontend)

    RUN_DURATION.observe(time.monotonic() - started)
    log_step("Guacamole install completed, listening at localhost:8080")
