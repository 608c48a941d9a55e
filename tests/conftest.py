"""
Shared pytest fixtures for the provisioner test suite.
"""

from unittest.mock import MagicMock

import pytest

from provisioner.config.models import ProvisionConfig
from provisioner.domain.orchestrator.base import ContainerSpec


# ---------------------------------------------------------------------------
# Configuration
# ---------------------------------------------------------------------------

@pytest.fixture
def make_config(tmp_path):
    """Factory for a ProvisionConfig whose directories live under tmp_path."""
    def _make(**overrides) -> ProvisionConfig:
        data = {
            "paths": {
                "extensions": str(tmp_path / "extensions"),
                "home": str(tmp_path / "guac-home"),
                "drive": str(tmp_path / "drive"),
            },
            "logging": {"audit_address": str(tmp_path / "no-syslog")},
        }
        for section, values in overrides.items():
            data.setdefault(section, {}).update(values)
        return ProvisionConfig.model_validate(data)
    return _make


@pytest.fixture
def config(make_config):
    """Default configuration with temporary directories."""
    return make_config()


# ---------------------------------------------------------------------------
# Fake Docker daemon
# ---------------------------------------------------------------------------

class FakeOrchestrator:
    """In-memory ContainerOrchestrator keeping containers by name."""

    def __init__(self) -> None:
        self.containers: dict[str, dict] = {}
        self.pulled: list[str] = []
        self.logins: list[tuple[str, str]] = []
        self.calls: list[tuple[str, str]] = []
        self._next_id = 0

    def login(self, username: str, password: str) -> None:
        self.logins.append((username, password))
        self.calls.append(("login", username))

    def pull_image(self, image: str) -> None:
        self.pulled.append(image)
        self.calls.append(("pull", image))

    def is_running(self, name: str) -> bool:
        return self.containers.get(name, {}).get("status") == "running"

    def exists(self, name: str) -> bool:
        return name in self.containers

    def stop_container(self, name: str) -> None:
        self.calls.append(("stop", name))
        self.containers[name]["status"] = "exited"

    def remove_container(self, name: str) -> None:
        self.calls.append(("remove", name))
        if self.containers[name]["status"] == "running":
            raise RuntimeError(f"cannot remove running container {name}")
        del self.containers[name]

    def run_container(self, spec: ContainerSpec) -> str:
        if spec.name in self.containers:
            raise RuntimeError(f"name {spec.name} already in use")
        self._next_id += 1
        container_id = f"cnt-{self._next_id:04d}"
        self.containers[spec.name] = {"id": container_id, "status": "running", "spec": spec}
        self.calls.append(("run", spec.name))
        return container_id

    def running(self) -> list[str]:
        return sorted(n for n, c in self.containers.items() if c["status"] == "running")


@pytest.fixture
def fake_orchestrator():
    return FakeOrchestrator()


# ---------------------------------------------------------------------------
# Host and secrets mocks
# ---------------------------------------------------------------------------

@pytest.fixture
def mock_host():
    """HostManager mock: Docker install/start/enable all succeed."""
    host = MagicMock()
    host.prepare.return_value = None
    return host


@pytest.fixture
def mock_store():
    """ParameterStore mock returning valid credentials."""
    store = MagicMock()
    store.get.side_effect = lambda path: {
        "/docker/username": "registry-user",
        "/docker/password": "registry-pass",
    }.get(path)
    return store


@pytest.fixture
def mock_docker_client():
    """docker.DockerClient mock with an empty container list."""
    import docker.errors

    client = MagicMock()
    client.containers.get.side_effect = docker.errors.NotFound("No such container")
    run_result = MagicMock()
    run_result.id = "0123456789abcdef"
    client.containers.run.return_value = run_result
    return client


# ---------------------------------------------------------------------------
# Logging isolation
# ---------------------------------------------------------------------------

@pytest.fixture(autouse=True)
def reset_logging_handlers():
    """Drop handlers installed by setup_logging so no test writes to a stale stream."""
    import logging

    root = logging.getLogger()
    saved = list(root.handlers)
    saved_level = root.level
    yield
    root.handlers[:] = saved
    root.setLevel(saved_level)
    logging.getLogger("audit").handlers.clear()
