"""
Pydantic models for provisioner configuration.

Mirrors the defaults dict in loader.py. Every model is frozen: the
configuration is built once at startup and passed explicitly to each step.
"""

from __future__ import annotations

from pathlib import Path
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator


def join_dn(*components: str) -> str:
    """
    Join DN components with commas, skipping empty ones.

    Args:
        components: DN fragments, most specific first

    Returns:
        The joined DN, e.g. ``CN=Users,DC=example,DC=com``
    """
    return ",".join(c.strip().strip(",") for c in components if c and c.strip().strip(","))


class LdapConfig(BaseModel):
    model_config = ConfigDict(extra="ignore", frozen=True)

    hostname: str = ""
    domain_dn: str = ""
    user_base: str = "CN=Users"
    group_base: str = "CN=Users"
    user_attribute: str = "cn"
    config_base: str = "CN=GuacConfigGroups"
    port: int = 389

    @property
    def enabled(self) -> bool:
        return bool(self.hostname and self.domain_dn)

    def base_dn(self, base: str) -> str:
        """Full DN of a container below the directory DN."""
        return join_dn(base, self.domain_dn)


class LinkConfig(BaseModel):
    model_config = ConfigDict(extra="ignore", frozen=True)

    url: str = ""
    label: str = ""

    @property
    def configured(self) -> bool:
        return bool(self.url and self.label)


class BrandingConfig(BaseModel):
    model_config = ConfigDict(extra="ignore", frozen=True)

    text: str = "Apache Guacamole"
    primary_link: LinkConfig = LinkConfig()
    secondary_link: LinkConfig = LinkConfig()

    @property
    def links(self) -> list[LinkConfig]:
        """Configured links, in login page order."""
        return [link for link in (self.primary_link, self.secondary_link) if link.configured]


class ImagesConfig(BaseModel):
    model_config = ConfigDict(extra="ignore", frozen=True)

    guacamole: str = "guacamole/guacamole"
    guacd: str = "guacamole/guacd"


class RegistryConfig(BaseModel):
    model_config = ConfigDict(extra="ignore", frozen=True)

    username_parameter: str = ""
    password_parameter: str = ""
    region: str | None = None

    @property
    def configured(self) -> bool:
        return bool(self.username_parameter and self.password_parameter)


class PathsConfig(BaseModel):
    model_config = ConfigDict(extra="ignore", frozen=True)

    extensions: Path = Path("/tmp/extensions")
    home: Path = Path("/root/guac-home")
    drive: Path = Path("/var/tmp/guacamole")

    @property
    def home_extensions(self) -> Path:
        return self.home / "extensions"


class HostConfig(BaseModel):
    model_config = ConfigDict(extra="ignore", frozen=True)

    install_command: tuple[str, ...] = ("yum", "-y", "install", "docker")
    start_command: tuple[str, ...] = ("service", "docker", "start")
    enable_command: tuple[str, ...] = ("chkconfig", "docker", "on")
    install_attempts: int = Field(default=2, ge=1)


class LoggingConfig(BaseModel):
    model_config = ConfigDict(extra="ignore", frozen=True)

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    format: Literal["text", "json"] = "text"
    audit_address: str = "/dev/log"

    @field_validator("level", mode="before")
    @classmethod
    def _upper_level(cls, value: object) -> object:
        return value.upper() if isinstance(value, str) else value

    @field_validator("audit_address")
    @classmethod
    def _check_audit_address(cls, value: str) -> str:
        """Either a syslog socket path or ``host[:port]`` for UDP syslog."""
        if value.startswith("/"):
            return value
        host, sep, port = value.partition(":")
        if not host or (sep and not (port.isdigit() and 0 < int(port) < 65536)):
            raise ValueError("expected a socket path or host[:port]")
        return value


class ProvisionConfig(BaseModel):
    """Root settings model mirroring the provisioner YAML structure."""

    model_config = ConfigDict(extra="ignore", frozen=True)

    ldap: LdapConfig = LdapConfig()
    branding: BrandingConfig = BrandingConfig()
    images: ImagesConfig = ImagesConfig()
    registry: RegistryConfig = RegistryConfig()
    paths: PathsConfig = PathsConfig()
    host: HostConfig = HostConfig()
    logging: LoggingConfig = LoggingConfig()
