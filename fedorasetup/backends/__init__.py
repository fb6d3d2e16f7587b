"""Capability backends wrapping dnf, systemctl, nmcli, docker and ip."""

from fedorasetup.backends.base import (
    BaseContainerEngine,
    BaseLinkConfigurator,
    BaseNetworkManagerClient,
    BasePackageManager,
    BaseServiceManager,
    DockerNetworkInfo,
)
from fedorasetup.backends.dnf import DnfPackageManager
from fedorasetup.backends.docker import DockerEngine, macvlan_network_args
from fedorasetup.backends.iproute import IpRouteLinkConfigurator
from fedorasetup.backends.nmcli import NmcliClient
from fedorasetup.backends.systemd import SystemdServiceManager

__all__ = [
    "BasePackageManager",
    "BaseServiceManager",
    "BaseNetworkManagerClient",
    "BaseContainerEngine",
    "BaseLinkConfigurator",
    "DockerNetworkInfo",
    "DnfPackageManager",
    "SystemdServiceManager",
    "NmcliClient",
    "DockerEngine",
    "IpRouteLinkConfigurator",
    "macvlan_network_args",
]
