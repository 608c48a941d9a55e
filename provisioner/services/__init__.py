"""Services module."""

from provisioner.services.provisioning import authenticate_registry, provision

__all__ = ["authenticate_registry", "provision"]
