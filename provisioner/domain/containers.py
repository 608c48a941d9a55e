"""
Container specifications for guacd and guacamole, teardown and start.
"""

import logging

from provisioner.config.models import LdapConfig, ProvisionConfig
from provisioner.config.settings import (
    GUACD_CONTAINER,
    GUACAMOLE_CONTAINER,
    GUACAMOLE_HOME_MOUNT,
    GUACAMOLE_PORT,
    LOGGER_NAME,
)
from provisioner.domain.orchestrator.base import BindMount, ContainerOrchestrator, ContainerSpec
from provisioner.observability import CONTAINERS_STARTED, log_step

logger = logging.getLogger(LOGGER_NAME)


def ldap_environment(ldap: LdapConfig) -> dict[str, str]:
    """
    LDAP variables for the guacamole image.

    Always the full set of variables; all of them are empty when LDAP is
    not configured, which the image treats as LDAP disabled.
    """
    if not ldap.enabled:
        return {
            "LDAP_HOSTNAME": "",
            "LDAP_PORT": "",
            "LDAP_USER_BASE_DN": "",
            "LDAP_USERNAME_ATTRIBUTE": "",
            "LDAP_CONFIG_BASE_DN": "",
            "LDAP_GROUP_BASE_DN": "",
        }
    return {
        "LDAP_HOSTNAME": ldap.hostname,
        "LDAP_PORT": str(ldap.port),
        "LDAP_USER_BASE_DN": ldap.base_dn(ldap.user_base),
        "LDAP_USERNAME_ATTRIBUTE": ldap.user_attribute,
        "LDAP_CONFIG_BASE_DN": ldap.base_dn(ldap.config_base),
        "LDAP_GROUP_BASE_DN": ldap.base_dn(ldap.group_base),
    }


def guacd_spec(config: ProvisionConfig) -> ContainerSpec:
    drive = str(config.paths.drive)
    return ContainerSpec(
        name=GUACD_CONTAINER,
        image=config.images.guacd,
        mounts=[BindMount(source=drive, target=drive)],
    )


def guacamole_spec(config: ProvisionConfig) -> ContainerSpec:
    environment = {"GUACAMOLE_HOME": GUACAMOLE_HOME_MOUNT}
    environment.update(ldap_environment(config.ldap))
    return ContainerSpec(
        name=GUACAMOLE_CONTAINER,
        image=config.images.guacamole,
        mounts=[BindMount(source=str(config.paths.home), target=GUACAMOLE_HOME_MOUNT)],
        environment=environment,
        links={GUACD_CONTAINER: GUACD_CONTAINER},
        ports={f"{GUACAMOLE_PORT}/tcp": GUACAMOLE_PORT},
    )


def teardown_container(orchestrator: ContainerOrchestrator, name: str) -> None:
    """Stop and remove any previous container with this name."""
    if orchestrator.is_running(name):
        log_step(f"Stopping {name} container")
        orchestrator.stop_container(name)
    if orchestrator.exists(name):
        log_step(f"Removing {name} container")
        orchestrator.remove_container(name)


def start_container(orchestrator: ContainerOrchestrator, spec: ContainerSpec) -> str:
    log_step(f"Starting {spec.name} container, {spec.image}")
    container_id = orchestrator.run_container(spec)
    CONTAINERS_STARTED.labels(container=spec.name).inc()
    return container_id

