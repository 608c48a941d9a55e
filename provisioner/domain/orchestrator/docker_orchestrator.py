"""
Docker implementation of container orchestration.
"""

from __future__ import annotations

import logging

import docker
import docker.errors
import docker.types
from docker.utils import parse_repository_tag

from provisioner.config.settings import LOGGER_NAME, RESTART_POLICY
from provisioner.domain.orchestrator.base import ContainerSpec

logger = logging.getLogger(LOGGER_NAME)


class DockerOrchestrator:
    """Docker-based container orchestrator."""

    def __init__(self, client: docker.DockerClient | None = None) -> None:
        self._client = client

    @property
    def client(self) -> docker.DockerClient:
        """
        Get the Docker client.

        Created on first use: the daemon is only started by the host
        preparation step.
        """
        if self._client is None:
            self._client = docker.from_env()
        return self._client

    def login(self, username: str, password: str) -> None:
        self.client.login(username=username, password=password)
        logger.info(f"Logged in to the Docker registry as {username}")

    def pull_image(self, image: str) -> None:
        repository, tag = parse_repository_tag(image)
        self.client.images.pull(repository, tag=tag or "latest")
        logger.info(f"Pulled image {repository}:{tag or 'latest'}")

    def _get(self, name: str):
        """Look up a container by exact name, None if absent."""
        try:
            return self.client.containers.get(name)
        except docker.errors.NotFound:
            return None

    def is_running(self, name: str) -> bool:
        container = self._get(name)
        return container is not None and container.status == "running"

    def exists(self, name: str) -> bool:
        return self._get(name) is not None

    def stop_container(self, name: str) -> None:
        container = self._get(name)
        if container is not None:
            container.stop()

    def remove_container(self, name: str) -> None:
        container = self._get(name)
        if container is not None:
            container.remove()

    def run_container(self, spec: ContainerSpec) -> str:
        mounts = [
            docker.types.Mount(target=m.target, source=m.source, type="bind", read_only=False)
            for m in spec.mounts
        ]
        container = self.client.containers.run(
            spec.image,
            name=spec.name,
            detach=True,
            restart_policy={"Name": RESTART_POLICY},
            mounts=mounts,
            environment=spec.environment or None,
            links=spec.links or None,
            ports=spec.ports or None,
        )
        logger.info(f"Container {spec.name} started ({container.id[:12]})")
        return container.id
