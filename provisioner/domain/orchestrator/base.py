"""
Base classes and protocols for container orchestration.
"""

from dataclasses import dataclass, field
from typing import Protocol


@dataclass(frozen=True)
class BindMount:
    """A host directory mounted into a container."""

    source: str  # Host path
    target: str  # Path inside the container


@dataclass(frozen=True)
class ContainerSpec:
    """Everything needed to start one named container."""

    name: str
    image: str
    mounts: list[BindMount] = field(default_factory=list)
    environment: dict[str, str] = field(default_factory=dict)
    links: dict[str, str] = field(default_factory=dict)  # container name -> alias
    ports: dict[str, int] = field(default_factory=dict)  # "8080/tcp" -> host port


class ContainerOrchestrator(Protocol):
    """Protocol defining the interface for container orchestration backends."""

    def login(self, username: str, password: str) -> None:
        """
        Authenticate to the container registry.

        Args:
            username: Registry username
            password: Registry password
        """
        ...

    def pull_image(self, image: str) -> None:
        """
        Pull an image reference (``latest`` when untagged).

        Args:
            image: Image reference, e.g. ``guacamole/guacd:1.5.5``
        """
        ...

    def is_running(self, name: str) -> bool:
        """
        Check if a container with this exact name is running.

        Returns:
            True if running, False otherwise
        """
        ...

    def exists(self, name: str) -> bool:
        """
        Check if a container with this exact name exists, in any state.

        Returns:
            True if it exists, False otherwise
        """
        ...

    def stop_container(self, name: str) -> None:
        """Stop a running container."""
        ...

    def remove_container(self, name: str) -> None:
        """Remove a stopped container."""
        ...

    def run_container(self, spec: ContainerSpec) -> str:
        """
        Start a detached container that restarts unless explicitly stopped.

        Args:
            spec: Container specification

        Returns:
            Container ID
        """
        ...
