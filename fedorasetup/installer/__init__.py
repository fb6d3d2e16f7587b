"""Docker CE installer for Fedora with optional Portainer."""

from fedorasetup.installer.installer import DockerInstaller, PortainerContainerResource
from fedorasetup.installer.models import PortainerChoice, PortainerDeployment

__all__ = [
    "DockerInstaller",
    "PortainerContainerResource",
    "PortainerChoice",
    "PortainerDeployment",
]
