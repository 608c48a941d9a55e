"""
Validation of flag pairs that must be supplied together.
"""

from provisioner.config.models import LinkConfig, ProvisionConfig
from provisioner.errors import ConfigurationError


def validate_ldap(config: ProvisionConfig) -> None:
    """
    Require the LDAP hostname and domain DN together.

    Raises:
        ConfigurationError: If only one of them is set
    """
    ldap = config.ldap
    if ldap.hostname and not ldap.domain_dn:
        raise ConfigurationError(
            "LDAP Hostname was provided (-H), but the LDAP Domain DN was not (-D)"
        )
    if ldap.domain_dn and not ldap.hostname:
        raise ConfigurationError(
            "LDAP Domain DN was provided (-D), but the LDAP Hostname was not (-H)"
        )


def validate_link(link: LinkConfig, index: int, url_flag: str, text_flag: str) -> None:
    """
    Require a link URL and its label together.

    Args:
        link: Link to check
        index: 1 for the primary link, 2 for the secondary one
        url_flag: Short flag carrying the URL
        text_flag: Short flag carrying the label

    Raises:
        ConfigurationError: If only one of them is set
    """
    if link.url and not link.label:
        raise ConfigurationError(
            f"URL{index} was provided ({url_flag}), but the partner URLTEXT was not "
            f"({text_flag}), login page unmodified; exiting"
        )
    if link.label and not link.url:
        raise ConfigurationError(
            f"URLTEXT{index} was provided ({text_flag}), but the URL was not "
            f"({url_flag}), login page unmodified; exiting"
        )


def validate_config(config: ProvisionConfig) -> ProvisionConfig:
    """
    Check every flag pair of a configuration.

    Returns:
        The configuration, unchanged

    Raises:
        ConfigurationError: On the first mismatched pair
    """
    validate_ldap(config)
    validate_link(config.branding.primary_link, 1, "-L", "-T")
    validate_link(config.branding.secondary_link, 2, "-l", "-t")
    return config


def config_warnings(config: ProvisionConfig) -> list[str]:
    """
    Non-fatal configuration problems, to be logged once logging is set up.

    A roles base DN without LDAP is accepted; it only has an effect once
    LDAP is enabled.
    """
    warnings = []
    if not config.ldap.enabled and config.ldap.group_base != "CN=Users":
        warnings.append("Roles base DN (-R) was provided without LDAP (-H/-D), it will be ignored")
    return warnings
