"""Command-line interface of the Guacamole Provisioner."""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import NoReturn

import click
import docker.errors

from provisioner import __version__
from provisioner.config.loader import load_config
from provisioner.config.settings import INSTALL_FAILED_MESSAGE, LOGGER_NAME
from provisioner.config.validators import config_warnings
from provisioner.domain.orchestrator import DockerOrchestrator
from provisioner.errors import ProvisioningError
from provisioner.observability import log_step, setup_logging, write_metrics
from provisioner.services.provisioning import provision

__all__ = ["main"]

logger = logging.getLogger(LOGGER_NAME)

EPILOG = """\b
After a successful run, Guacamole is installed and running in two Docker
containers: one for the backend "guacd" service and one for the frontend
"guacamole" Tomcat servlet. The webapp listens at "localhost:8080".
"""


class ProvisionCommand(click.Command):
    """Command whose usage errors exit with status 1."""

    def parse_args(self, ctx: click.Context, args: list[str]) -> list[str]:
        try:
            return super().parse_args(ctx, args)
        except click.UsageError as e:
            e.exit_code = 1
            raise


def build_overrides(**flags: object) -> dict:
    """
    Turn the flags given on the command line into a nested config dict.

    Flags left unset (None) are omitted so the YAML file and the built-in
    defaults apply.
    """
    mapping = {
        "ldap_hostname": ("ldap", "hostname"),
        "ldap_domain_dn": ("ldap", "domain_dn"),
        "ldap_user_base": ("ldap", "user_base"),
        "ldap_group_base": ("ldap", "group_base"),
        "ldap_user_attribute": ("ldap", "user_attribute"),
        "ldap_config_base": ("ldap", "config_base"),
        "ldap_port": ("ldap", "port"),
        "url_1": ("branding", "primary_link", "url"),
        "url_text_1": ("branding", "primary_link", "label"),
        "url_2": ("branding", "secondary_link", "url"),
        "url_text_2": ("branding", "secondary_link", "label"),
        "brand_text": ("branding", "text"),
        "guacamole_image": ("images", "guacamole"),
        "guacd_image": ("images", "guacd"),
        "ssm_docker_username": ("registry", "username_parameter"),
        "ssm_docker_password": ("registry", "password_parameter"),
        "aws_region": ("registry", "region"),
        "log_level": ("logging", "level"),
        "log_format": ("logging", "format"),
    }
    overrides: dict = {}
    for flag, value in flags.items():
        if value is None or flag not in mapping:
            continue
        *parents, leaf = mapping[flag]
        node = overrides
        for key in parents:
            node = node.setdefault(key, {})
        node[leaf] = value
    return overrides


@click.command(
    cls=ProvisionCommand,
    context_settings={"help_option_names": ["-h", "--help"]},
    epilog=EPILOG,
)
@click.option(
    "-H", "--ldap-hostname",
    help=(
        "Hostname of the LDAP server to authenticate users against "
        "(e.g. ldap.example.com). If specified, LDAP authentication is "
        "configured. Requires -D."
    ),
)
@click.option(
    "-D", "--ldap-domain-dn",
    help="Distinguished Name (DN) of the directory (e.g. DC=example,DC=com). Required by -H.",
)
@click.option(
    "-U", "--ldap-user-base",
    help='Base of the DN for all Guacamole users, prepended to -D. Default is "CN=Users".',
)
@click.option(
    "-R", "--ldap-group-base",
    help=(
        "Base of the DN for all Guacamole roles, prepended to -D. Enables "
        'role based access control. Default is "CN=Users".'
    ),
)
@click.option(
    "-A", "--ldap-user-attribute",
    help='Attribute which contains the username, usually "uid" or "cn". Default is "cn".',
)
@click.option(
    "-C", "--ldap-config-base",
    help=(
        "Base of the DN for all Guacamole connection configurations, "
        'prepended to -D. Default is "CN=GuacConfigGroups".'
    ),
)
@click.option("-P", "--ldap-port", type=int, help="Port of the LDAP server. Default is 389.")
@click.option("-L", "--url-1", help="URL of the first login page link. Requires -T.")
@click.option("-T", "--url-text-1", help="Text displayed for the -L link. Requires -L.")
@click.option("-l", "--url-2", help="URL of the second login page link. Requires -t.")
@click.option("-t", "--url-text-2", help="Text displayed for the -l link. Requires -l.")
@click.option("-B", "--brand-text", help='Branding text of the login page. Default is "Apache Guacamole".')
@click.option(
    "-V", "--guacamole-image",
    help='Docker image to use for guacamole. Default is "guacamole/guacamole".',
)
@click.option("-v", "--guacd-image", help='Docker image to use for guacd. Default is "guacamole/guacd".')
@click.option("-S", "--ssm-docker-username", help="AWS Systems Manager path to the Docker username.")
@click.option("-s", "--ssm-docker-password", help="AWS Systems Manager path to the Docker password.")
@click.option("--aws-region", help="AWS region of the Systems Manager parameters.")
@click.option(
    "--config-path",
    envvar="GUAC_PROVISIONER_CONFIG",
    type=click.Path(path_type=Path),
    default=None,
    help="YAML configuration file. Command-line flags take precedence.",
)
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    help="Console log level.",
)
@click.option(
    "--log-format",
    type=click.Choice(["text", "json"]),
    help="Console log format.",
)
@click.option(
    "--metrics-file",
    type=click.Path(path_type=Path),
    default=None,
    help="Write run metrics to this file (Prometheus textfile format).",
)
@click.version_option(version=__version__, message="%(version)s")
def main(*, config_path: Path | None, metrics_file: Path | None, **flags: object) -> None:
    """Set up Apache Guacamole (guacd + guacamole) in Docker containers."""
    try:
        config = load_config(config_path, build_overrides(**flags))
    except ProvisioningError as e:
        setup_logging()
        _fail(str(e))

    setup_logging(config.logging)
    for warning in config_warnings(config):
        log_step(warning, logging.WARNING)

    try:
        provision(config, DockerOrchestrator())
    except (ProvisioningError, docker.errors.DockerException, OSError) as e:
        _fail(str(e), metrics_file)

    if metrics_file:
        write_metrics(metrics_file)


def _fail(message: str, metrics_file: Path | None = None) -> NoReturn:
    """Log a fatal error and exit with status 1."""
    if message:
        log_step(message, logging.ERROR)
    log_step(INSTALL_FAILED_MESSAGE, logging.ERROR)
    if metrics_file:
        write_metrics(metrics_file)
    sys.exit(1)
