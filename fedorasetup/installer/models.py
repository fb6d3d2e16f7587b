"""Data models for the Docker / Portainer installer."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

DOCKER_REPO_URL = "https://download.docker.com/linux/fedora/docker-ce.repo"
DOCKER_PACKAGES = [
    "docker-ce",
    "docker-ce-cli",
    "containerd.io",
    "docker-buildx-plugin",
    "docker-compose-plugin",
]
DNF_PLUGIN_PACKAGES = ["dnf-plugins-core"]


class PortainerChoice(Enum):
    """Menu entries of the Portainer step."""

    NONE = "1"
    SERVER = "2"
    AGENT = "3"

    @classmethod
    def from_flag(cls, value: str) -> PortainerChoice:
        return {"none": cls.NONE, "server": cls.SERVER, "agent": cls.AGENT}[value]


@dataclass
class PortainerDeployment:
    """A Portainer container to run."""

    container_name: str
    image: str
    ports: list[str] = field(default_factory=list)
    volumes: list[str] = field(default_factory=list)
    data_volume: str | None = None
    restart: str = "always"

    @classmethod
    def server(cls, version: str = "latest") -> PortainerDeployment:
        return cls(
            container_name="portainer",
            image=f"portainer/portainer-ce:{version}",
            ports=["8000:8000", "9443:9443"],
            volumes=["/var/run/docker.sock:/var/run/docker.sock", "portainer_data:/data"],
            data_volume="portainer_data",
        )

    @classmethod
    def agent(cls, version: str = "latest") -> PortainerDeployment:
        return cls(
            container_name="portainer_agent",
            image=f"portainer/agent:{version}",
            ports=["9001:9001"],
            volumes=[
                "/var/run/docker.sock:/var/run/docker.sock",
                "/var/lib/docker/volumes:/var/lib/docker/volumes",
            ],
        )
