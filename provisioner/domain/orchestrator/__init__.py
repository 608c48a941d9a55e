"""
Container orchestration module.
"""

from provisioner.domain.orchestrator.base import BindMount, ContainerOrchestrator, ContainerSpec
from provisioner.domain.orchestrator.docker_orchestrator import DockerOrchestrator

__all__ = ["BindMount", "ContainerOrchestrator", "ContainerSpec", "DockerOrchestrator"]
